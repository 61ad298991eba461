"""Unit tests for the session cookie transport."""

from datetime import datetime, timezone

from fastapi import Response
from pydantic import SecretStr

from storefront_api.cookies import ResponseCookieTransport
from storefront_config.settings import Settings
from tests.shared.fakes import SECRETS

EXPIRES = datetime(2024, 3, 8, 12, 0, 0, tzinfo=timezone.utc)


def _settings(**overrides) -> Settings:
    return Settings(
        customer_session_secret=SecretStr(SECRETS["customer"]),
        admin_session_secret=SecretStr(SECRETS["admin"]),
        password_reset_secret=SecretStr(SECRETS["reset"]),
        **overrides,
    )


def _set_cookie_header(response: Response) -> str:
    return response.headers["set-cookie"]


class TestResponseCookieTransport:
    """Tests for the cookie attributes written to responses."""

    def test_set_cookie_attributes(self):
        """Session cookies are HttpOnly, Secure, SameSite=strict, Path=/."""
        response = Response()

        ResponseCookieTransport(response, _settings()).set_cookie(
            "session", "tok.en.value", EXPIRES
        )

        header = _set_cookie_header(response)
        assert header.startswith("session=tok.en.value;")
        assert "HttpOnly" in header
        assert "Secure" in header
        assert "SameSite=strict" in header
        assert "Path=/" in header
        assert "expires=Fri, 08 Mar 2024 12:00:00 GMT" in header

    def test_insecure_cookie_for_local_http(self):
        """The Secure attribute follows configuration."""
        response = Response()

        ResponseCookieTransport(response, _settings(api_cookie_secure=False)).set_cookie(
            "session", "value", EXPIRES
        )

        assert "Secure" not in _set_cookie_header(response)

    def test_delete_cookie_expires_it(self):
        """Deleting writes an immediately expiring cookie with the same path."""
        response = Response()

        ResponseCookieTransport(response, _settings()).delete_cookie("admin_session")

        header = _set_cookie_header(response)
        assert header.startswith('admin_session="";')
        assert "Max-Age=0" in header
        assert "Path=/" in header
