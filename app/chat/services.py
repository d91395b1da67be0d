"""
Chat service layer.

This module provides the business logic for rooms and messages. The REST
views and the websocket consumer both call these methods, so every rule
(who may join, who may delete, what a valid message is) lives here once.

Services:
    RoomService: Room lifecycle and membership (create, list, join, leave, delete)
    MessageService: Message operations (send, list, edit, delete)

Design Principles:
    - Services are stateless (use class methods)
    - Expected failures raise core.exceptions (ValidationError, NotFoundError, ...)
    - Access checks go through chat.authorization.RoomAccessControl
    - Multi-row writes run inside cls.atomic()
    - Services never broadcast; callers decide which events to emit

Usage:
    from chat.services import RoomService, MessageService

    room = RoomService.create_room(creator=user, name="General")
    message = MessageService.send_message(room.id, user, "Hello everyone!")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.db.models import Prefetch, Q

from chat.authorization import RoomAccessControl
from chat.models import Attachment, AttachmentKind, Message, Room, RoomType
from core.exceptions import ConflictError, NotFoundError, ValidationError
from core.services import BaseService

if TYPE_CHECKING:
    from typing import Any

    from django.db.models import QuerySet

    from authentication.models import User


def _room_queryset() -> QuerySet[Room]:
    """Rooms with creator and participants loaded for serialization."""
    return Room.objects.select_related("creator").prefetch_related("participants")


def _message_queryset() -> QuerySet[Message]:
    """Messages with sender and attachments loaded for serialization."""
    return Message.objects.select_related("sender").prefetch_related("attachments")


class RoomService(BaseService):
    """
    Service for room lifecycle and membership.

    Methods:
        create_room: Create a room with the caller as creator and participant
        list_rooms: Every room
        list_user_rooms: Rooms the user created or participates in
        get_room_details: Room with participants and messages, members only
        join_room: Add the caller to participants
        leave_room: Remove the caller from participants
        delete_room: Creator-only delete, cascades to messages
    """

    @classmethod
    def create_room(
        cls,
        creator: User,
        name: str | None,
        room_type: str | None = None,
    ) -> Room:
        """
        Create a room.

        Args:
            creator: User creating the room; becomes its first participant
            name: Display name (required)
            room_type: "room" (default) or "dm"

        Returns:
            The new Room

        Raises:
            ValidationError: Missing or non-string name, unknown room type
        """
        if name is not None and not isinstance(name, str):
            raise ValidationError("Room name must be a string", error_code="INVALID_ROOM_NAME")
        name = (name or "").strip()
        if not name:
            raise ValidationError("Room name is required", error_code="ROOM_NAME_REQUIRED")

        room_type = room_type or RoomType.ROOM
        if room_type not in RoomType.values:
            raise ValidationError(
                f"Room type must be one of: {', '.join(RoomType.values)}",
                error_code="INVALID_ROOM_TYPE",
            )

        with cls.atomic():
            room = Room.objects.create(name=name, room_type=room_type, creator=creator)
            room.participants.add(creator)

        cls.get_logger().info(f"Room {room.id} created by {creator.id}")
        return _room_queryset().get(id=room.id)

    @classmethod
    def list_rooms(cls) -> QuerySet[Room]:
        return _room_queryset().all()

    @classmethod
    def list_user_rooms(cls, user: User) -> QuerySet[Room]:
        return (
            _room_queryset()
            .filter(Q(participants=user) | Q(creator=user))
            .distinct()
        )

    @classmethod
    def get_room_details(cls, room_id: Any, user: User) -> Room:
        """
        Load a room with its participants and ordered messages.

        Raises:
            NotFoundError: Room does not exist
            PermissionDeniedError: User is not a member
        """
        room = RoomAccessControl.assert_member(room_id, user)
        return (
            _room_queryset()
            .prefetch_related(Prefetch("messages", queryset=_message_queryset()))
            .get(id=room.id)
        )

    @classmethod
    def join_room(cls, room_id: Any, user: User, allow_existing: bool = False) -> Room:
        """
        Add the user to the room's participants.

        participants.add() is a no-op for an existing row, so concurrent
        joins cannot duplicate a participant.

        Args:
            room_id: Room to join
            user: Joining user
            allow_existing: Return quietly when the user is already a member
                instead of raising (used by the realtime gateway, where a
                reconnecting client re-joins its rooms)

        Raises:
            NotFoundError: Room does not exist
            ConflictError: Already a member and allow_existing is False
        """
        room = RoomAccessControl.get_room(room_id)
        already_member = room.participants.filter(id=user.id).exists()
        if already_member and not allow_existing:
            raise ConflictError("You are already in this room", error_code="ALREADY_JOINED")

        if not already_member:
            room.participants.add(user)
            cls.get_logger().info(f"User {user.id} joined room {room.id}")
        return _room_queryset().get(id=room.id)

    @classmethod
    def leave_room(cls, room_id: Any, user: User) -> Room:
        """
        Remove the user from the room's participants.

        Leaving a room you are not in is a no-op.

        Raises:
            NotFoundError: Room does not exist
            ValidationError: User is the creator (the creator stays a member)
        """
        room = RoomAccessControl.get_room(room_id)
        if room.creator_id == user.id:
            raise ValidationError(
                "The room creator cannot leave the room",
                error_code="CREATOR_CANNOT_LEAVE",
            )

        room.participants.remove(user)
        cls.get_logger().info(f"User {user.id} left room {room.id}")
        return room

    @classmethod
    def delete_room(cls, room_id: Any, user: User) -> str:
        """
        Delete a room and, through the foreign key cascade, its messages.

        Returns:
            The deleted room's id as a string

        Raises:
            NotFoundError: Room does not exist
            PermissionDeniedError: User is not the creator
        """
        room = RoomAccessControl.assert_creator(room_id, user)
        deleted_id = str(room.id)
        with cls.atomic():
            room.delete()
        cls.get_logger().info(f"Room {deleted_id} deleted by {user.id}")
        return deleted_id


class MessageService(BaseService):
    """
    Service for message operations.

    Methods:
        send_message: Post a message to a room the sender belongs to
        list_messages: Ordered messages of a room, members only
        edit_message: Sender-only content change
        delete_message: Sender-only delete
    """

    CONTENT_REQUIRED = "Message content is required"

    @classmethod
    def send_message(
        cls,
        room_id: Any,
        sender: User,
        content: str | None,
        attachments: list[dict[str, Any]] | None = None,
    ) -> Message:
        """
        Create a message in a room.

        Access is checked before content, so a non-member learns nothing
        about what a valid message looks like.

        Args:
            room_id: Target room
            sender: Author, must be a member
            content: Message text, must not be blank
            attachments: Optional list of {"kind", "resource", "thread"} dicts

        Raises:
            NotFoundError: Room does not exist
            PermissionDeniedError: Sender is not a member
            ValidationError: Blank content or invalid attachment
        """
        room = RoomAccessControl.assert_member(room_id, sender)

        cls._check_content(content)

        attachment_rows = [cls._build_attachment(item) for item in attachments or []]

        with cls.atomic():
            message = Message.objects.create(room=room, sender=sender, content=content)
            for attachment in attachment_rows:
                attachment.message = message
            Attachment.objects.bulk_create(attachment_rows)
            # Bumps room.updated_at so room lists can sort by activity
            room.save(update_fields=["updated_at"])

        cls.get_logger().info(f"Message {message.id} sent to room {room.id} by {sender.id}")
        return _message_queryset().get(id=message.id)

    @classmethod
    def _check_content(cls, content: Any) -> None:
        if content is not None and not isinstance(content, str):
            raise ValidationError(
                "Message content must be a string", error_code="INVALID_CONTENT"
            )
        if not content or not content.strip():
            raise ValidationError(cls.CONTENT_REQUIRED, error_code="CONTENT_REQUIRED")

    @classmethod
    def _build_attachment(cls, item: dict[str, Any]) -> Attachment:
        kind = item.get("kind")
        if kind not in AttachmentKind.values:
            raise ValidationError(
                f"Attachment type must be one of: {', '.join(AttachmentKind.values)}",
                error_code="INVALID_ATTACHMENT",
            )
        thread = item.get("thread")
        if thread is not None and not isinstance(thread, Room):
            thread = RoomAccessControl.get_room(thread)
        return Attachment(kind=kind, resource=item.get("resource") or "", thread=thread)

    @classmethod
    def list_messages(cls, room_id: Any, user: User) -> QuerySet[Message]:
        """
        Messages of a room, oldest first.

        Raises:
            NotFoundError: Room does not exist
            PermissionDeniedError: User is not a member
        """
        room = RoomAccessControl.assert_member(room_id, user)
        return _message_queryset().filter(room=room)

    @classmethod
    def edit_message(cls, message_id: Any, user: User, content: str | None) -> Message:
        """
        Replace a message's content.

        Raises:
            NotFoundError: Message does not exist
            PermissionDeniedError: User is not the sender
            ValidationError: Blank content
        """
        message = RoomAccessControl.assert_sender(message_id, user, action="edit")

        cls._check_content(content)

        message.content = content
        message.save(update_fields=["content", "updated_at"])
        cls.get_logger().info(f"Message {message.id} edited by {user.id}")
        return message

    @classmethod
    def delete_message(
        cls,
        message_id: Any,
        user: User,
        room_id: Any = None,
    ) -> Message:
        """
        Delete a message.

        The message row carries its room reference, so removing the row
        also removes it from the room's message list.

        Args:
            message_id: Message to delete
            user: Acting user, must be the sender
            room_id: When given, the message must belong to this room

        Returns:
            The deleted message (unsaved, id and room_id still set)

        Raises:
            NotFoundError: Message does not exist, or is not in room_id
            PermissionDeniedError: User is not the sender
        """
        message = RoomAccessControl.assert_sender(message_id, user, action="delete")
        if room_id is not None and str(message.room_id) != str(room_id):
            raise NotFoundError("Message not found", error_code="MESSAGE_NOT_IN_ROOM")

        message_pk = message.pk
        message.delete()
        # delete() clears the pk; callers still need it for the event
        message.pk = message_pk
        cls.get_logger().info(f"Message {message_pk} deleted by {user.id}")
        return message
