"""
Model mixins combined with core.models.BaseModel.

Available Mixins:
    UUIDPrimaryKeyMixin: Use UUID as primary key

Identifiers travel in URLs, bearer tokens and websocket events, so every
chat entity uses a UUID rather than a sequential integer.
"""

from __future__ import annotations

import uuid

from django.db import models


class UUIDPrimaryKeyMixin(models.Model):
    """
    Use UUID as primary key instead of auto-increment integer.

    Fields:
        id: UUIDField as primary key (auto-generated)

    Usage:
        class Message(UUIDPrimaryKeyMixin, BaseModel):
            content = models.TextField()

        message = Message.objects.create(content="hi")
        print(message.id)  # 550e8400-e29b-41d4-a716-446655440000
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for this record",
    )

    class Meta:
        abstract = True
