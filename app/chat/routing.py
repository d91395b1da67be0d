"""
WebSocket URL routing for the chat application.

URL Patterns:
    ws/chat/ - Realtime gateway; rooms are joined with joinRoom events

Authentication:
    The bearer token travels in the handshake (?token=, the "jwt"
    subprotocol or an Authorization header). JWTAuthMiddleware validates
    it and attaches the user to the consumer's scope.
"""

from django.urls import path

from chat import consumers

websocket_urlpatterns = [
    path("ws/chat/", consumers.ChatConsumer.as_asgi()),
]
