"""Domain exceptions.

Every error carries the HTTP status it maps to at the API boundary, so the
exception handler in ``interfaces/app.py`` can render the JSON envelope
``{error, details?, message?}`` without knowing the individual types.
"""

from __future__ import annotations

from typing import Any


class ReelproxyError(Exception):
    """Base class for all application errors."""

    status_code: int = 500

    def __init__(
        self,
        error: str,
        *,
        details: Any = None,
        message: str | None = None,
    ) -> None:
        super().__init__(error)
        self.error = error
        self.details = details
        self.message = message

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.error}
        if self.details is not None:
            payload["details"] = self.details
        if self.message is not None:
            payload["message"] = self.message
        return payload


class ValidationError(ReelproxyError):
    """Missing or malformed required input."""

    status_code = 400


class AuthError(ReelproxyError):
    """Missing/malformed credentials or a wrong password."""

    status_code = 401


class ForbiddenError(ReelproxyError):
    """Well-formed credentials that do not grant access."""

    status_code = 403


class NotFoundError(ReelproxyError):
    """Raised when an id is not known to the content store."""

    status_code = 404


class ConflictError(ReelproxyError):
    """Raised when a pending submission with the same URL already exists."""

    status_code = 409


class ResolutionError(ReelproxyError):
    """The resolver could not produce a usable direct media URL."""

    status_code = 500


class UpstreamProxyError(ReelproxyError):
    """The direct-media fetch failed before any bytes were sent."""

    status_code = 500


class PersistenceError(ReelproxyError):
    """Read/write failure against the content store."""

    status_code = 500
