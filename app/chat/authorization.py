"""
Room access control shared by the REST API and the realtime gateway.

Both entry points call these checks before touching a room or message, so
"who may do what" is decided in one place. Failures are raised as
core.exceptions; each entry point renders them in its own format.

Key Components:
    RoomAccessControl: Stateless checks returning the loaded object

Usage:
    room = RoomAccessControl.assert_member(room_id, request.user)
    message = RoomAccessControl.assert_sender(message_id, user, action="edit")
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from chat.models import Message, Room
from core.exceptions import NotFoundError, PermissionDeniedError

if TYPE_CHECKING:
    from typing import Any

    from authentication.models import User


def _as_uuid(value: Any) -> uuid.UUID | None:
    """Parse an identifier coming from a URL or websocket payload."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None


class RoomAccessControl:
    """
    Authorization checks for rooms and messages.

    Every assert_* method returns the object it loaded so callers do not
    fetch it a second time.
    """

    @classmethod
    def get_room(cls, room_id: Any) -> Room:
        """
        Raises:
            NotFoundError: No room with this id (malformed ids included)
        """
        parsed = _as_uuid(room_id)
        room = Room.objects.filter(id=parsed).first() if parsed else None
        if room is None:
            raise NotFoundError("Room not found", error_code="ROOM_NOT_FOUND")
        return room

    @classmethod
    def assert_member(cls, room_id: Any, user: User) -> Room:
        """
        Confirm the user is the room's creator or one of its participants.

        Raises:
            NotFoundError: Room does not exist (404)
            PermissionDeniedError: User is not a member (403)
        """
        room = cls.get_room(room_id)
        if not room.is_member(user):
            raise PermissionDeniedError(
                "You are not a participant in this room",
                error_code="NOT_PARTICIPANT",
            )
        return room

    @classmethod
    def assert_creator(cls, room_id: Any, user: User) -> Room:
        """
        Raises:
            NotFoundError: Room does not exist
            PermissionDeniedError: User did not create the room
        """
        room = cls.get_room(room_id)
        if room.creator_id != user.id:
            raise PermissionDeniedError(
                "You are not authorized to delete this room",
                error_code="NOT_ROOM_CREATOR",
            )
        return room

    @classmethod
    def get_message(cls, message_id: Any) -> Message:
        """
        Raises:
            NotFoundError: No message with this id
        """
        parsed = _as_uuid(message_id)
        message = (
            Message.objects.select_related("room").filter(id=parsed).first()
            if parsed
            else None
        )
        if message is None:
            raise NotFoundError("Message not found", error_code="MESSAGE_NOT_FOUND")
        return message

    @classmethod
    def assert_sender(cls, message_id: Any, user: User, action: str) -> Message:
        """
        Confirm the user wrote the message.

        Args:
            message_id: Message identifier
            user: Acting user
            action: "edit" or "delete", used in the error message

        Raises:
            NotFoundError: Message does not exist (404)
            PermissionDeniedError: User is not the sender (403)
        """
        message = cls.get_message(message_id)
        if message.sender_id != user.id:
            raise PermissionDeniedError(
                f"You can only {action} your own messages",
                error_code="NOT_MESSAGE_SENDER",
            )
        return message
