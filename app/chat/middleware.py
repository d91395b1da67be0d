"""
WebSocket authentication middleware.

Provides bearer token authentication for WebSocket connections. The token
is checked once, during the handshake; the consumer then rejects the
connection when scope["user"] is anonymous.

Related files:
    - routing.py: WebSocket URL patterns
    - consumers.py: WebSocket handlers
    - config/asgi.py: ASGI configuration
    - authentication/tokens.py: TokenService (shared with REST auth)

Token Passing Methods (in order of precedence):
    1. Query string: ws://host/ws/chat/?token=<jwt_token>
    2. Subprotocol: Sec-WebSocket-Protocol: jwt, <jwt_token>
    3. Header: Authorization: Bearer <jwt_token> (non-browser clients)

Usage in config/asgi.py:
    from chat.middleware import JWTAuthMiddleware

    application = ProtocolTypeRouter({
        "websocket": JWTAuthMiddleware(
            URLRouter(websocket_urlpatterns)
        ),
    })
"""

from __future__ import annotations

import logging
from urllib.parse import parse_qs

from channels.db import database_sync_to_async
from channels.middleware import BaseMiddleware
from django.contrib.auth.models import AnonymousUser

from authentication.backends import resolve_user
from authentication.tokens import TokenService, parse_bearer
from core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

SUBPROTOCOL = "jwt"


class JWTAuthMiddleware(BaseMiddleware):
    """
    JWT authentication middleware for WebSocket connections.

    Extracts the token from the handshake, verifies it with TokenService
    and attaches the active user (or AnonymousUser) to the scope.
    scope["auth_error"] carries the reason a token was rejected.
    """

    async def __call__(self, scope, receive, send):
        scope = dict(scope)
        token = (
            self._get_token_from_query(scope)
            or self._get_token_from_subprotocol(scope)
            or self._get_token_from_header(scope)
        )

        if token:
            scope["user"], scope["auth_error"] = await self._get_user_from_token(token)
        else:
            scope["user"], scope["auth_error"] = AnonymousUser(), "No token provided"

        return await super().__call__(scope, receive, send)

    def _get_token_from_query(self, scope) -> str | None:
        query_string = scope.get("query_string", b"").decode()
        token_list = parse_qs(query_string).get("token", [])
        return token_list[0] if token_list else None

    def _get_token_from_subprotocol(self, scope) -> str | None:
        """
        Extract token from WebSocket subprotocol.

        Expects: Sec-WebSocket-Protocol: jwt, <token>
        """
        subprotocols = scope.get("subprotocols", [])
        if len(subprotocols) >= 2 and subprotocols[0] == SUBPROTOCOL:
            return subprotocols[1]
        return None

    def _get_token_from_header(self, scope) -> str | None:
        for name, value in scope.get("headers", []):
            if name == b"authorization":
                return parse_bearer(value)
        return None

    @database_sync_to_async
    def _get_user_from_token(self, token: str):
        """
        Validate the token and load its user.

        Returns:
            (user, None) when valid, (AnonymousUser, reason) otherwise
        """
        try:
            user_id = TokenService.verify(token)
        except AuthenticationError as e:
            logger.warning(f"Rejected WebSocket token: {e.message}")
            return AnonymousUser(), e.message

        user = resolve_user(user_id)
        if user is None:
            logger.warning(f"WebSocket token for missing or inactive user {user_id}")
            return AnonymousUser(), "User no longer exists"
        return user, None
