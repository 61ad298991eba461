"""Unit tests for TokenCodec."""

import base64
import json
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from storefront_auth.exceptions import (
    InvalidSignatureError,
    InvalidTokenError,
    MalformedTokenError,
    TokenEncodingError,
    TokenExpiredError,
)
from storefront_auth.services import TokenCodec
from tests.shared.fakes import SECRETS, FakeClock

SECRET = SECRETS["customer"]
OTHER_SECRET = SECRETS["admin"]


def _b64(data: dict) -> str:
    raw = json.dumps(data, separators=(",", ":")).encode()
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


class TestTokenRoundTrip:
    """Tests for encoding and decoding valid tokens."""

    def setup_method(self):
        """Set up test fixtures."""
        self.clock = FakeClock()
        self.codec = TokenCodec(clock=self.clock)

    def test_decode_returns_encoded_claims(self):
        """Test that a fresh token decodes to its subject and expiry."""
        expires_at = self.clock() + timedelta(days=7)
        token = self.codec.encode("cust_42", SECRET, expires_at)

        claims = self.codec.decode(token, SECRET)

        assert claims.subject_id == "cust_42"
        assert claims.expires_at == expires_at
        assert claims.issued_at == self.clock()
        assert claims.purpose is None
        assert claims.fingerprint is None

    def test_timestamps_have_whole_second_resolution(self):
        """Test that sub-second precision is dropped on encoding."""
        self.clock.current = self.clock.current.replace(microsecond=750_000)
        expires_at = self.clock() + timedelta(hours=1)

        claims = self.codec.decode(self.codec.encode("cust_42", SECRET, expires_at), SECRET)

        assert claims.issued_at.microsecond == 0
        assert claims.expires_at == expires_at.replace(microsecond=0)

    def test_purpose_and_fingerprint_round_trip(self):
        """Test that optional claims survive encoding."""
        token = self.codec.encode(
            "cust_42",
            SECRET,
            self.clock() + timedelta(hours=24),
            purpose="password-reset",
            fingerprint="abc123",
        )

        claims = self.codec.decode(token, SECRET)

        assert claims.purpose == "password-reset"
        assert claims.fingerprint == "abc123"

    def test_tokens_issued_in_same_second_differ(self):
        """Test that two tokens for the same claims are distinct strings."""
        expires_at = self.clock() + timedelta(days=7)

        first = self.codec.encode("cust_42", SECRET, expires_at)
        second = self.codec.encode("cust_42", SECRET, expires_at)

        assert first != second
        assert self.codec.decode(first, SECRET).token_id != self.codec.decode(
            second, SECRET
        ).token_id

    def test_token_is_cookie_and_path_safe(self):
        """Test that tokens only use base64url characters and dots."""
        token = self.codec.encode("cust_42", SECRET, self.clock() + timedelta(days=7))

        allowed = set(
            "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_."
        )
        assert set(token) <= allowed
        assert token.count(".") == 2

    def test_token_is_standard_hs256_jwt(self):
        """Test that the token verifies with a plain JWT library call."""
        token = self.codec.encode("cust_42", SECRET, self.clock() + timedelta(days=7))

        header = jwt.get_unverified_header(token)

        assert header["alg"] == "HS256"


class TestTokenExpiry:
    """Tests for expiry handling against the injected clock."""

    def setup_method(self):
        """Set up test fixtures."""
        self.clock = FakeClock()
        self.codec = TokenCodec(clock=self.clock)
        self.token = self.codec.encode(
            "cust_42", SECRET, self.clock() + timedelta(hours=1)
        )

    def test_valid_just_before_expiry(self):
        """Test that a token verifies one second before it expires."""
        self.clock.advance(timedelta(minutes=59, seconds=59))

        assert self.codec.decode(self.token, SECRET).subject_id == "cust_42"

    def test_expired_at_exact_expiry_instant(self):
        """Test that the expiry instant itself is already expired."""
        self.clock.advance(timedelta(hours=1))

        with pytest.raises(TokenExpiredError):
            self.codec.decode(self.token, SECRET)

    def test_expired_stays_expired(self):
        """Test that once expired, later instants are expired too."""
        self.clock.advance(timedelta(hours=2))
        with pytest.raises(TokenExpiredError):
            self.codec.decode(self.token, SECRET)

        self.clock.advance(timedelta(days=365))
        with pytest.raises(TokenExpiredError):
            self.codec.decode(self.token, SECRET)

    def test_expired_token_with_bad_signature_reports_signature(self):
        """Test that the signature is checked before expiry."""
        self.clock.advance(timedelta(hours=2))

        with pytest.raises(InvalidSignatureError):
            self.codec.decode(self.token, OTHER_SECRET)


class TestTokenTampering:
    """Tests for rejection of modified or foreign tokens."""

    def setup_method(self):
        """Set up test fixtures."""
        self.clock = FakeClock()
        self.codec = TokenCodec(clock=self.clock)
        self.token = self.codec.encode(
            "cust_42", SECRET, self.clock() + timedelta(days=7)
        )

    def test_wrong_secret_rejected(self):
        """Test that a token signed with another secret is rejected."""
        with pytest.raises(InvalidSignatureError):
            self.codec.decode(self.token, OTHER_SECRET)

    def test_every_character_flip_rejected(self):
        """Test that changing any single character invalidates the token."""
        for index, char in enumerate(self.token):
            if char == ".":
                continue
            replacement = "A" if char != "A" else "B"
            tampered = self.token[:index] + replacement + self.token[index + 1 :]

            with pytest.raises(InvalidSignatureError):
                self.codec.decode(tampered, SECRET)

    def test_modified_claims_rejected(self):
        """Test that swapping the claims segment breaks the signature."""
        header, _, signature = self.token.split(".")
        forged_claims = _b64(
            {"sub": "admin_1", "iat": 1709294400, "exp": 4102444800, "jti": "x"}
        )

        with pytest.raises(InvalidSignatureError):
            self.codec.decode(f"{header}.{forged_claims}.{signature}", SECRET)

    def test_unsigned_token_rejected(self):
        """Test that an alg=none token is never accepted."""
        _, claims, _ = self.token.split(".")
        none_header = _b64({"alg": "none", "typ": "JWT"})

        with pytest.raises(InvalidTokenError):
            self.codec.decode(f"{none_header}.{claims}.", SECRET)

    def test_signed_garbage_payload_is_malformed(self):
        """Test that a correctly signed but unusable payload is malformed."""
        token = jwt.encode({"sub": "cust_42"}, SECRET, algorithm="HS256")

        with pytest.raises(MalformedTokenError):
            self.codec.decode(token, SECRET)

    def test_signed_payload_with_wrong_claim_types_is_malformed(self):
        """Test that claims with the wrong JSON types are rejected."""
        token = jwt.encode(
            {
                "sub": "cust_42",
                "iat": 1709294400,
                "exp": 4102444800,
                "jti": "x",
                "purpose": 5,
            },
            SECRET,
            algorithm="HS256",
        )

        with pytest.raises(MalformedTokenError):
            self.codec.decode(token, SECRET)


class TestMalformedInput:
    """Tests for structurally invalid tokens."""

    def setup_method(self):
        """Set up test fixtures."""
        self.codec = TokenCodec(clock=FakeClock())

    @pytest.mark.parametrize(
        "token",
        ["", "not-a-token", "a.b", "a.b.c.d", "...", "ééé.ééé.ééé"],
    )
    def test_malformed_tokens_rejected(self, token):
        """Test that structurally invalid tokens are rejected."""
        with pytest.raises(InvalidTokenError):
            self.codec.decode(token, SECRET)

    def test_empty_token_is_malformed(self):
        """Test that an empty string is reported as malformed."""
        with pytest.raises(MalformedTokenError):
            self.codec.decode("", SECRET)

    def test_wrong_segment_count_is_malformed(self):
        """Test that a token without three segments is malformed."""
        with pytest.raises(MalformedTokenError):
            self.codec.decode("a.b", SECRET)

    def test_empty_secret_raises(self):
        """Test that decoding without a secret is a programming error."""
        with pytest.raises(ValueError, match="cannot be empty"):
            self.codec.decode("a.b.c", "")


class TestEncodingErrors:
    """Tests for claim sets that cannot be encoded."""

    def setup_method(self):
        """Set up test fixtures."""
        self.clock = FakeClock()
        self.codec = TokenCodec(clock=self.clock)

    def test_empty_subject_rejected(self):
        """Test that a token needs a subject."""
        with pytest.raises(TokenEncodingError):
            self.codec.encode("", SECRET, self.clock() + timedelta(days=1))

    def test_empty_secret_rejected(self):
        """Test that a token needs a signing secret."""
        with pytest.raises(TokenEncodingError):
            self.codec.encode("cust_42", "", self.clock() + timedelta(days=1))

    def test_naive_expiry_rejected(self):
        """Test that expiry must carry a timezone."""
        with pytest.raises(TokenEncodingError):
            self.codec.encode("cust_42", SECRET, datetime(2030, 1, 1))

    def test_expiry_in_the_past_rejected(self):
        """Test that expiry must lie after the issue time."""
        with pytest.raises(TokenEncodingError):
            self.codec.encode("cust_42", SECRET, self.clock() - timedelta(seconds=1))

    def test_expiry_equal_to_issue_time_rejected(self):
        """Test that a token cannot expire the instant it is issued."""
        with pytest.raises(TokenEncodingError):
            self.codec.encode("cust_42", SECRET, self.clock())

    def test_subsecond_expiry_rejected(self):
        """Test that expiry truncating to the issue second is rejected."""
        expires_at = self.clock() + timedelta(milliseconds=500)

        with pytest.raises(TokenEncodingError):
            self.codec.encode("cust_42", SECRET, expires_at)

    def test_default_clock_is_utc(self):
        """Test that the default clock yields timezone-aware UTC times."""
        now = TokenCodec().now()

        assert now.tzinfo is not None
        assert now.utcoffset() == timezone.utc.utcoffset(now)
        assert now.microsecond == 0
