"""Static shared-secret admin credentials.

One admin password is exchanged for one static bearer token; protected
routes compare the presented token for exact equality. There is no user
model and no expiry.
"""

from __future__ import annotations

import hmac

import structlog

from reelproxy.domain.exceptions import AuthError

log = structlog.get_logger(__name__)


class StaticTokenVerifier:
    """Accepts exactly one configured bearer token."""

    def __init__(self, token: str) -> None:
        self._token = token

    def verify(self, token: str) -> bool:
        return hmac.compare_digest(token.encode("utf-8"), self._token.encode("utf-8"))


class SharedSecretLogin:
    """Exchanges the admin password for the static bearer token.

    With no password configured every login attempt is rejected.
    """

    def __init__(self, password: str | None, token: str) -> None:
        self._password = password
        self._token = token

    @property
    def enabled(self) -> bool:
        return bool(self._password)

    def login(self, password: object) -> str:
        """Return the bearer token for the exact password string."""
        if not self._password:
            log.warning("admin_login_disabled")
            raise AuthError("Login disabled")
        if not isinstance(password, str) or not hmac.compare_digest(
            password.encode("utf-8"), self._password.encode("utf-8")
        ):
            log.warning("admin_login_failed")
            raise AuthError("Invalid password")
        log.info("admin_login_succeeded")
        return self._token
