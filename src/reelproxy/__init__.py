"""Reelproxy - resolve short-video page URLs and proxy their media streams."""

__version__ = "0.1.0"
