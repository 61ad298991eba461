"""Unit tests for ResetTokenManager."""

from datetime import timedelta

import pytest

from storefront_auth import (
    InvalidPurposeError,
    InvalidSignatureError,
    Realm,
    ResetTokenManager,
    SessionManager,
    TokenCodec,
    TokenExpiredError,
)
from storefront_config import ConfigurationMissingError
from tests.shared.fakes import SECRETS, FakeClock


class TestResetTokenManagerInit:
    """Tests for ResetTokenManager configuration."""

    def test_empty_secret_raises(self):
        """Test that the reset secret is required."""
        with pytest.raises(ConfigurationMissingError):
            ResetTokenManager(secret="")


class TestResetTokenLifetime:
    """Tests for the 24 hour validity window."""

    def setup_method(self):
        """Set up test fixtures."""
        self.clock = FakeClock()
        self.manager = ResetTokenManager(
            secret=SECRETS["reset"],
            codec=TokenCodec(clock=self.clock),
        )

    def test_valid_within_a_day(self):
        """Test that a link opened after 23h59m still works."""
        token = self.manager.issue_reset_token("cust_1")

        self.clock.advance(timedelta(hours=23, minutes=59))

        assert self.manager.validate_reset_token(token) == "cust_1"

    def test_expired_after_a_day(self):
        """Test that a link opened after 24h01m is rejected."""
        token = self.manager.issue_reset_token("cust_1")

        self.clock.advance(timedelta(hours=24, minutes=1))

        with pytest.raises(TokenExpiredError):
            self.manager.validate_reset_token(token)

    def test_claims_carry_purpose(self):
        """Test that reset tokens are scoped to the password-reset purpose."""
        token = self.manager.issue_reset_token("cust_1")

        claims = self.manager.decode_reset_token(token)

        assert claims.purpose == "password-reset"
        assert claims.expires_at == self.clock() + timedelta(hours=24)


class TestResetTokenIsolation:
    """Tests that reset tokens and session tokens never substitute for each other."""

    def setup_method(self):
        """Set up test fixtures."""
        self.clock = FakeClock()
        self.codec = TokenCodec(clock=self.clock)
        self.manager = ResetTokenManager(secret=SECRETS["reset"], codec=self.codec)
        self.sessions = SessionManager(
            secrets={
                Realm.CUSTOMER: SECRETS["customer"],
                Realm.ADMIN: SECRETS["admin"],
            },
            codec=self.codec,
        )

    def test_session_token_rejected_as_reset_token(self):
        """Test that a session cookie cannot be used as a reset link."""
        session = self.sessions.issue_session("cust_1", Realm.CUSTOMER)

        with pytest.raises(InvalidSignatureError):
            self.manager.validate_reset_token(session.token)

    def test_reset_token_rejected_as_session(self):
        """Test that a reset link cannot be used as a session cookie."""
        token = self.manager.issue_reset_token("cust_1")

        assert self.sessions.resolve_session(token, Realm.CUSTOMER) is None
        assert self.sessions.resolve_session(token, Realm.ADMIN) is None

    def test_token_without_purpose_rejected(self):
        """Test that a token signed with the reset secret still needs the purpose."""
        token = self.codec.encode(
            "cust_1", SECRETS["reset"], self.clock() + timedelta(hours=1)
        )

        with pytest.raises(InvalidPurposeError):
            self.manager.validate_reset_token(token)

    def test_token_with_other_purpose_rejected(self):
        """Test that tokens issued for another workflow are rejected."""
        token = self.codec.encode(
            "cust_1",
            SECRETS["reset"],
            self.clock() + timedelta(hours=1),
            purpose="email-verification",
        )

        with pytest.raises(InvalidPurposeError):
            self.manager.validate_reset_token(token)


class TestResetTokenFingerprint:
    """Tests for binding reset tokens to the current password hash."""

    def setup_method(self):
        """Set up test fixtures."""
        self.manager = ResetTokenManager(
            secret=SECRETS["reset"],
            codec=TokenCodec(clock=FakeClock()),
        )

    def test_token_is_current_for_unchanged_hash(self):
        """Test that a token matches the hash it was issued against."""
        token = self.manager.issue_reset_token(
            "cust_1", fingerprint=self.manager.fingerprint_for("$2b$04$old")
        )

        claims = self.manager.decode_reset_token(token)

        assert self.manager.is_current(claims, "$2b$04$old") is True

    def test_token_is_stale_after_hash_change(self):
        """Test that a changed password hash retires the token."""
        token = self.manager.issue_reset_token(
            "cust_1", fingerprint=self.manager.fingerprint_for("$2b$04$old")
        )

        claims = self.manager.decode_reset_token(token)

        assert self.manager.is_current(claims, "$2b$04$new") is False

    def test_token_without_fingerprint_is_never_current(self):
        """Test that an unbound token is not accepted for a reset."""
        claims = self.manager.decode_reset_token(self.manager.issue_reset_token("cust_1"))

        assert self.manager.is_current(claims, "$2b$04$old") is False

    def test_fingerprint_does_not_expose_the_hash(self):
        """Test that the fingerprint is keyed and not the hash itself."""
        fingerprint = self.manager.fingerprint_for("$2b$04$old")
        other = ResetTokenManager(secret=SECRETS["customer"]).fingerprint_for(
            "$2b$04$old"
        )

        assert "$2b$" not in fingerprint
        assert fingerprint != other
