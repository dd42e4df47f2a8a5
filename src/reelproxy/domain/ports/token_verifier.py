"""Port for bearer token checks on admin routes."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class TokenVerifierPort(Protocol):
    """Decides whether a presented bearer token grants admin access."""

    def verify(self, token: str) -> bool: ...
