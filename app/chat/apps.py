"""
Chat application configuration.

This app provides the chat system with:
- Group rooms and direct-message rooms
- Messages with attachments
- The realtime gateway (WebSocket consumer)
"""

from django.apps import AppConfig


class ChatConfig(AppConfig):
    """Configuration for the chat application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "chat"
    verbose_name = "Chat"
