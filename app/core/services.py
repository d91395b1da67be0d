"""
Base service layer for business logic encapsulation.

Services encapsulate business logic separate from views and consumers.
Views and the websocket consumer handle transport concerns, models handle
data, services handle rules. Both the REST API and the realtime gateway
call the same service methods, so a business rule lives in exactly one place.

Failures are raised as core.exceptions subclasses; the REST responder and
the websocket consumer each turn them into their own error format.

Usage:
    from core.services import BaseService
    from core.exceptions import ValidationError

    class RoomService(BaseService):
        @classmethod
        def create_room(cls, creator, name):
            if not name:
                raise ValidationError("Room name is required")
            with cls.atomic():
                room = Room.objects.create(creator=creator, name=name)
                room.participants.add(creator)
            cls.get_logger().info(f"Room {room.id} created by {creator.id}")
            return room
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

from django.db import transaction

if TYPE_CHECKING:
    from collections.abc import Generator


class BaseService:
    """
    Base class for service layer classes.

    Provides:
    - Logging setup per service
    - Database transaction management

    Design Notes:
        - Use @classmethod (no instance state)
        - Services should be stateless
        - Raise core.exceptions for expected failures
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """
        Get logger for this service.

        Returns a logger named after the service class for
        easy filtering in logs.

        Example:
            class MessageService(BaseService):
                @classmethod
                def send(cls, room, sender, content):
                    cls.get_logger().info(f"Message sent to {room.id}")
        """
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    @contextmanager
    def atomic(cls) -> Generator[None, None, None]:
        """
        Execute operations in a database transaction.

        If any operation inside the block fails, all changes are rolled back.

        Example:
            with cls.atomic():
                room = Room.objects.create(creator=user, name=name)
                room.participants.add(user)
                # If the membership insert fails, the room is rolled back too
        """
        with transaction.atomic():
            yield
