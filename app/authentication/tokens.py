"""
Bearer token issuance and verification.

Tokens are simplejwt access tokens: signed with settings.SIMPLE_JWT's
ALGORITHM and SIGNING_KEY, carrying the user id in the "user_id" claim and
expiring after ACCESS_TOKEN_LIFETIME (one day by default). Swapping the
signing algorithm or key is a settings change, not a code change.

The same service backs the REST bearer authentication class and the
websocket handshake middleware.

Usage:
    from authentication.tokens import TokenService

    token = TokenService.issue(user)
    user_id = TokenService.verify(token)  # raises ExpiredCredential / MalformedCredential
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import jwt
from django.utils import timezone
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken

from core.exceptions import ExpiredCredential, MalformedCredential
from core.services import BaseService

if TYPE_CHECKING:
    from authentication.models import User

BEARER_PREFIX = "Bearer"


def parse_bearer(value: str | bytes | None) -> str | None:
    """
    Extract the token from an Authorization header value.

    Args:
        value: Raw header value, e.g. "Bearer eyJhbGciOi..."

    Returns:
        The token, or None when the value is empty or not a Bearer credential
    """
    if not value:
        return None
    if isinstance(value, bytes):
        value = value.decode("latin-1")
    parts = value.split()
    if len(parts) != 2 or parts[0] != BEARER_PREFIX:
        return None
    return parts[1]


class TokenService(BaseService):
    """
    Issue and verify signed, time-limited bearer credentials.

    Methods:
        issue: Create a token for a user
        verify: Return the user id embedded in a valid token
    """

    @classmethod
    def issue(cls, user: User) -> str:
        """Return a signed access token for the user."""
        return str(AccessToken.for_user(user))

    @classmethod
    def verify(cls, token: str) -> str:
        """
        Verify a token and return the embedded user id.

        Args:
            token: Raw token string

        Returns:
            The user id claim as a string

        Raises:
            ExpiredCredential: Signature is valid but the token has expired
            MalformedCredential: Bad signature, wrong token type or undecodable
        """
        try:
            access = AccessToken(token)
        except TokenError:
            if cls._is_expired(token):
                cls.get_logger().info("Rejected expired token")
                raise ExpiredCredential("Token has expired")
            cls.get_logger().warning("Rejected malformed token")
            raise MalformedCredential("Invalid token")

        user_id = access.get(api_settings.USER_ID_CLAIM)
        if not user_id:
            raise MalformedCredential("Invalid token")
        return str(user_id)

    @classmethod
    def _is_expired(cls, token: str) -> bool:
        """True when the signature checks out and only the expiry failed."""
        try:
            payload = jwt.decode(
                token,
                api_settings.VERIFYING_KEY or api_settings.SIGNING_KEY,
                algorithms=[api_settings.ALGORITHM],
                options={"verify_exp": False, "verify_aud": False},
            )
        except jwt.InvalidTokenError:
            return False
        exp = payload.get("exp")
        return exp is not None and exp <= timezone.now().timestamp()
