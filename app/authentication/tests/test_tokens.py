"""
Tests for bearer token issuance and verification.

Verifies:
- TokenService.issue / verify round trip
- Expired and malformed tokens raise distinct errors
- parse_bearer header parsing
"""

from datetime import timedelta

import jwt
import pytest
from rest_framework_simplejwt.tokens import AccessToken, RefreshToken

from authentication.tokens import TokenService, parse_bearer
from core.exceptions import AuthenticationError, ExpiredCredential, MalformedCredential


class TestTokenService:
    """Tests for TokenService.issue() and TokenService.verify()."""

    def test_verify_returns_user_id_of_issued_token(self, user):
        """
        A freshly issued token verifies to its user's id.

        Why it matters: Every authenticated request and websocket handshake
        depends on this round trip.
        """
        token = TokenService.issue(user)

        assert TokenService.verify(token) == str(user.id)

    def test_issued_token_expires_in_one_day(self, user):
        token = AccessToken(TokenService.issue(user))

        lifetime = token["exp"] - token["iat"]

        assert lifetime == int(timedelta(days=1).total_seconds())

    def test_expired_token_raises_expired_credential(self, user):
        """
        A correctly signed token past its expiry is reported as expired.

        Why it matters: Clients use the distinct message to send the user
        back to the login screen instead of treating it as tampering.
        """
        access = AccessToken.for_user(user)
        access.set_exp(lifetime=-timedelta(minutes=1))

        with pytest.raises(ExpiredCredential) as exc_info:
            TokenService.verify(str(access))

        assert exc_info.value.message == "Token has expired"
        assert exc_info.value.status_code == 401

    def test_garbage_token_raises_malformed_credential(self, db):
        with pytest.raises(MalformedCredential) as exc_info:
            TokenService.verify("not-a-token")

        assert exc_info.value.message == "Invalid token"

    def test_token_signed_with_other_key_is_malformed(self, user):
        """
        A token with a bad signature is malformed, even when expired.

        Why it matters: Expiry must only be reported for tokens we issued.
        """
        forged = jwt.encode(
            {"user_id": str(user.id), "token_type": "access", "exp": 1},
            "some-other-key",
            algorithm="HS256",
        )

        with pytest.raises(MalformedCredential):
            TokenService.verify(forged)

    def test_refresh_token_is_not_accepted(self, user):
        refresh = RefreshToken.for_user(user)

        with pytest.raises(MalformedCredential):
            TokenService.verify(str(refresh))

    def test_credential_errors_are_authentication_errors(self):
        assert issubclass(ExpiredCredential, AuthenticationError)
        assert issubclass(MalformedCredential, AuthenticationError)


class TestParseBearer:
    """Tests for parse_bearer()."""

    def test_extracts_token(self):
        assert parse_bearer("Bearer abc.def.ghi") == "abc.def.ghi"

    def test_accepts_bytes(self):
        assert parse_bearer(b"Bearer abc") == "abc"

    @pytest.mark.parametrize(
        "value",
        [None, "", "Bearer", "Token abc", "Bearer a b", "bearer abc"],
    )
    def test_rejects_other_values(self, value):
        assert parse_bearer(value) is None
