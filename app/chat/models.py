"""
Chat models.

This module defines the room/message store:
- Room: A conversation container (group room or direct message)
- Message: A message posted to a room
- Attachment: A document, file, poll or thread reference on a message
- Friendship: A user's friend and the direct-message rooms they share

Related files:
    - authorization.py: Membership checks (RoomAccessControl)
    - services.py: RoomService and MessageService
    - consumers.py: Realtime gateway

Ownership:
    A message belongs to exactly one room through Message.room. The room's
    ordered message list is room.messages (oldest first). Deleting a message
    removes it from that list in the same write, and deleting a room deletes
    its messages, so no message can reference a missing room and no room can
    list a missing message.
"""

from django.conf import settings
from django.db import models

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel


class RoomType(models.TextChoices):
    DM = "dm", "Direct message"
    ROOM = "room", "Room"


class AttachmentKind(models.TextChoices):
    DOCUMENT = "document", "Document"
    FILE = "file", "File"
    POLL = "poll", "Poll"
    THREAD = "thread", "Thread"


class Room(UUIDPrimaryKeyMixin, BaseModel):
    """
    A conversation container.

    Fields:
        room_type: "room" for named group rooms, "dm" for direct messages
        name: Display name, required for group rooms on creation
        creator: User who created the room; always also a participant
        participants: Members allowed to read and post

    Invariants:
        - creator is in participants (enforced by RoomService: creation adds
          the creator, and the creator cannot leave)

    Usage:
        room = RoomService.create_room(creator=user, name="General")
        room.messages.all()  # oldest first
    """

    room_type = models.CharField(
        max_length=10,
        choices=RoomType.choices,
        default=RoomType.ROOM,
        help_text="Room kind (dm or room)",
    )
    name = models.CharField(
        max_length=100,
        blank=True,
        default="",
        help_text="Display name of the room",
    )
    creator = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="created_rooms",
        help_text="User who created the room",
    )
    participants = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        related_name="rooms",
        blank=True,
        help_text="Users who are members of the room",
    )

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "room"
        verbose_name_plural = "rooms"

    def __str__(self):
        return self.name or f"{self.get_room_type_display()} {self.id}"

    def is_member(self, user) -> bool:
        """Creator or participant."""
        if self.creator_id is not None and self.creator_id == user.id:
            return True
        return self.participants.filter(id=user.id).exists()


class Message(UUIDPrimaryKeyMixin, BaseModel):
    """
    A message posted to a room.

    Fields:
        room: Room the message belongs to (its position in room.messages)
        sender: Author; the only user allowed to edit or delete it
        content: Message text, never empty
    """

    room = models.ForeignKey(
        Room,
        on_delete=models.CASCADE,
        related_name="messages",
        help_text="Room this message was posted to",
    )
    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="messages",
        help_text="Author of the message",
    )
    content = models.TextField(help_text="Message text")

    class Meta:
        # Insertion order within a room; id breaks ties on equal timestamps
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["room", "created_at"], name="chat_message_room_created_idx"),
        ]
        verbose_name = "message"
        verbose_name_plural = "messages"

    def __str__(self):
        preview = self.content[:40]
        return f"{self.sender_id}: {preview}"


class Attachment(UUIDPrimaryKeyMixin, BaseModel):
    """
    Something attached to a message.

    Fields:
        kind: document, file, poll or thread
        resource: Locator of the attached resource (URL or storage path)
        thread: For kind=thread, the room holding the thread
    """

    message = models.ForeignKey(
        Message,
        on_delete=models.CASCADE,
        related_name="attachments",
    )
    kind = models.CharField(max_length=10, choices=AttachmentKind.choices)
    resource = models.CharField(max_length=500, blank=True, default="")
    thread = models.ForeignKey(
        Room,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="thread_attachments",
    )

    class Meta:
        ordering = ["created_at", "id"]

    def __str__(self):
        return f"{self.kind}: {self.resource or self.thread_id}"


class Friendship(UUIDPrimaryKeyMixin, BaseModel):
    """
    One direction of a friendship, with the direct-message rooms it uses.

    Exposed as user.friendships and serialized as the user's "friends".
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="friendships",
    )
    friend = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="+",
    )
    dm_rooms = models.ManyToManyField(
        Room,
        blank=True,
        related_name="friendships",
    )

    class Meta:
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "friend"],
                name="unique_friendship",
            ),
        ]

    def __str__(self):
        return f"{self.user_id} -> {self.friend_id}"
