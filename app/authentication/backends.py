"""
REST authentication for bearer tokens.

BearerTokenAuthentication is the DRF side of the auth gate. It is the
default authentication class, so every API view is protected unless it
sets authentication_classes = [] (signup, login, me).

Failure messages:
    - No "Authorization: Bearer <token>" header: "Not authorized, no token"
    - Token fails verification: "Token has expired" / "Invalid token"
    - Token owner deleted or deactivated: "User no longer exists"

All three are answered with 401.
"""

import logging

from rest_framework import exceptions
from rest_framework.authentication import BaseAuthentication

from authentication.models import User
from authentication.tokens import BEARER_PREFIX, TokenService, parse_bearer
from core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


def resolve_user(user_id):
    """Return the active user with this id, or None."""
    return User.objects.active().filter(id=user_id).first()


class BearerTokenAuthentication(BaseAuthentication):
    """
    Authenticate requests carrying "Authorization: Bearer <token>".

    Unlike simplejwt's JWTAuthentication, a missing header is an error
    rather than an anonymous request.
    """

    def authenticate(self, request):
        token = parse_bearer(request.META.get("HTTP_AUTHORIZATION"))
        if token is None:
            raise exceptions.NotAuthenticated("Not authorized, no token")

        try:
            user_id = TokenService.verify(token)
        except AuthenticationError as e:
            raise exceptions.AuthenticationFailed(e.message)

        user = resolve_user(user_id)
        if user is None:
            logger.info(f"Token for missing or inactive user {user_id}")
            raise exceptions.AuthenticationFailed("User no longer exists")

        return (user, token)

    def authenticate_header(self, request):
        # Makes DRF answer 401 instead of 403
        return f'{BEARER_PREFIX} realm="api"'
