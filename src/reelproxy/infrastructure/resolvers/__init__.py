"""Resolver backends mapping source page URLs to direct media URLs."""

from .extraction_tool import ExtractionToolResolver
from .factory import create_resolver
from .lookup_api import LookupApiResolver, extract_media_url

__all__ = [
    "ExtractionToolResolver",
    "LookupApiResolver",
    "create_resolver",
    "extract_media_url",
]
