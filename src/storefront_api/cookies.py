"""Session cookie policy.

Adapts a FastAPI response to the SessionTransport protocol. Session
cookies are:
- HttpOnly: Not accessible to JavaScript (XSS protection)
- Secure: Only sent over HTTPS (when api_cookie_secure=True)
- SameSite: strict by default (CSRF protection)
- Path=/ and Expires mirroring the token's own expiry
"""

from datetime import datetime

from fastapi import Response

from storefront_config.settings import Settings

COOKIE_PATH = "/"


class ResponseCookieTransport:
    """Writes session cookies onto an outgoing response."""

    def __init__(self, response: Response, settings: Settings):
        self._response = response
        self._settings = settings

    def set_cookie(self, name: str, value: str, expires: datetime) -> None:
        self._response.set_cookie(
            key=name,
            value=value,
            httponly=True,
            secure=self._settings.api_cookie_secure,
            samesite=self._settings.api_cookie_samesite,
            expires=expires,
            path=COOKIE_PATH,
            domain=self._settings.api_cookie_domain,
        )

    def delete_cookie(self, name: str) -> None:
        self._response.delete_cookie(
            key=name,
            path=COOKIE_PATH,
            domain=self._settings.api_cookie_domain,
            secure=self._settings.api_cookie_secure,
            httponly=True,
            samesite=self._settings.api_cookie_samesite,
        )
