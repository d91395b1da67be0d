"""
Tests for chat service layer business logic.

This module tests:
- RoomService: Room lifecycle and membership
- MessageService: Message send, list, edit, delete

Test Organization:
    - Each service method has its own test class
    - Tests use descriptive names following: test_<scenario>_<expected_outcome>

Testing Philosophy:
    Tests focus on observable behavior:
    - Returned objects
    - Database state changes
    - Raised core.exceptions and their messages
"""

import uuid

import pytest

from chat.models import Attachment, AttachmentKind, Message, Room, RoomType
from chat.services import MessageService, RoomService
from chat.tests.factories import MessageFactory, RoomFactory
from core.exceptions import ConflictError, NotFoundError, PermissionDeniedError, ValidationError


# =============================================================================
# RoomService
# =============================================================================


class TestRoomServiceCreate:
    """Tests for RoomService.create_room()."""

    def test_creator_is_first_participant(self, creator):
        """
        A new room lists its creator as participant.

        Why it matters: The creator must be able to post immediately.
        """
        room = RoomService.create_room(creator, "General")

        assert room.name == "General"
        assert room.room_type == RoomType.ROOM
        assert room.creator == creator
        assert list(room.participants.all()) == [creator]

    def test_creates_direct_message_room(self, creator):
        room = RoomService.create_room(creator, "Alice & Bob", room_type="dm")

        assert room.room_type == RoomType.DM

    @pytest.mark.parametrize("name", [None, "", "   "])
    def test_missing_name_raises_validation_error(self, creator, name):
        with pytest.raises(ValidationError) as exc_info:
            RoomService.create_room(creator, name)

        assert exc_info.value.message == "Room name is required"
        assert not Room.objects.exists()

    @pytest.mark.parametrize("name", [123, ["General"], {"name": "General"}])
    def test_non_string_name_raises_validation_error(self, creator, name):
        with pytest.raises(ValidationError) as exc_info:
            RoomService.create_room(creator, name)

        assert exc_info.value.message == "Room name must be a string"
        assert not Room.objects.exists()

    def test_unknown_room_type_raises_validation_error(self, creator):
        with pytest.raises(ValidationError):
            RoomService.create_room(creator, "General", room_type="channel")


class TestRoomServiceList:
    """Tests for RoomService.list_rooms() and list_user_rooms()."""

    def test_list_rooms_returns_every_room(self, room, outsider):
        other = RoomFactory(creator=outsider)

        assert set(RoomService.list_rooms()) == {room, other}

    def test_list_user_rooms_returns_membership_without_duplicates(self, room, member, outsider):
        RoomFactory(creator=outsider)
        owned = RoomFactory(creator=member)

        rooms = list(RoomService.list_user_rooms(member))

        assert sorted(r.id for r in rooms) == sorted([room.id, owned.id])

    def test_list_user_rooms_includes_created_rooms(self, creator):
        room = RoomFactory(creator=creator)
        room.participants.clear()

        assert list(RoomService.list_user_rooms(creator)) == [room]


class TestRoomServiceDetails:
    """Tests for RoomService.get_room_details()."""

    def test_returns_messages_oldest_first(self, room, member, creator):
        first = MessageFactory(room=room, sender=member)
        second = MessageFactory(room=room, sender=creator)

        details = RoomService.get_room_details(room.id, member)

        assert list(details.messages.all()) == [first, second]

    def test_outsider_is_denied(self, room, outsider):
        with pytest.raises(PermissionDeniedError):
            RoomService.get_room_details(room.id, outsider)


class TestRoomServiceJoin:
    """Tests for RoomService.join_room()."""

    def test_adds_user_to_participants(self, room, outsider):
        joined = RoomService.join_room(room.id, outsider)

        assert outsider in joined.participants.all()

    def test_existing_member_raises_conflict(self, room, member):
        with pytest.raises(ConflictError) as exc_info:
            RoomService.join_room(room.id, member)

        assert exc_info.value.message == "You are already in this room"

    def test_allow_existing_is_idempotent(self, room, member):
        """
        Re-joining with allow_existing never duplicates a participant.

        Why it matters: Reconnecting websocket clients re-join their rooms.
        """
        RoomService.join_room(room.id, member, allow_existing=True)
        RoomService.join_room(room.id, member, allow_existing=True)

        assert room.participants.filter(id=member.id).count() == 1

    def test_unknown_room_raises_not_found(self, outsider):
        with pytest.raises(NotFoundError):
            RoomService.join_room(uuid.uuid4(), outsider)


class TestRoomServiceLeave:
    """Tests for RoomService.leave_room()."""

    def test_removes_user_from_participants(self, room, member):
        RoomService.leave_room(room.id, member)

        assert member not in room.participants.all()

    def test_creator_cannot_leave(self, room, creator):
        with pytest.raises(ValidationError) as exc_info:
            RoomService.leave_room(room.id, creator)

        assert exc_info.value.message == "The room creator cannot leave the room"
        assert creator in room.participants.all()

    def test_leaving_room_not_joined_is_a_noop(self, room, outsider):
        RoomService.leave_room(room.id, outsider)

        assert room.participants.count() == 2


class TestRoomServiceDelete:
    """Tests for RoomService.delete_room()."""

    def test_creator_deletes_room_and_its_messages(self, room, creator, message):
        """
        Deleting a room removes its messages too.

        Why it matters: No message may reference a missing room.
        """
        deleted_id = RoomService.delete_room(room.id, creator)

        assert deleted_id == str(room.id)
        assert not Room.objects.filter(id=room.id).exists()
        assert not Message.objects.filter(id=message.id).exists()

    def test_member_cannot_delete(self, room, member):
        with pytest.raises(PermissionDeniedError):
            RoomService.delete_room(room.id, member)

        assert Room.objects.filter(id=room.id).exists()


# =============================================================================
# MessageService
# =============================================================================


class TestMessageServiceSend:
    """Tests for MessageService.send_message()."""

    def test_member_sends_message(self, room, member):
        message = MessageService.send_message(room.id, member, "Hi!")

        assert message.room == room
        assert message.sender == member
        assert list(room.messages.all()) == [message]

    def test_outsider_is_denied_before_content_check(self, room, outsider):
        """
        Access is checked first, even for an empty message.

        Why it matters: Outsiders learn nothing about the room.
        """
        with pytest.raises(PermissionDeniedError):
            MessageService.send_message(room.id, outsider, "")

        assert not Message.objects.exists()

    @pytest.mark.parametrize("content", [None, "", "   "])
    def test_blank_content_raises_validation_error(self, room, member, content):
        with pytest.raises(ValidationError) as exc_info:
            MessageService.send_message(room.id, member, content)

        assert exc_info.value.message == "Message content is required"

    @pytest.mark.parametrize("content", [42, {"text": "Hi"}, ["Hi"]])
    def test_non_string_content_is_not_stored(self, room, member, content):
        """
        Only text is accepted as message content.

        Why it matters: Websocket clients send raw JSON values, which must not
        be persisted as their Python repr.
        """
        with pytest.raises(ValidationError) as exc_info:
            MessageService.send_message(room.id, member, content)

        assert exc_info.value.message == "Message content must be a string"
        assert not Message.objects.exists()

    def test_unknown_room_raises_not_found(self, member):
        with pytest.raises(NotFoundError):
            MessageService.send_message(uuid.uuid4(), member, "Hi!")

    def test_saves_attachments(self, room, member, outsider):
        thread = RoomFactory(creator=outsider)

        message = MessageService.send_message(
            room.id,
            member,
            "See attached",
            attachments=[
                {"kind": "file", "resource": "https://files.example.com/a.pdf"},
                {"kind": "thread", "thread": str(thread.id)},
            ],
        )

        kinds = {a.kind for a in message.attachments.all()}
        assert kinds == {AttachmentKind.FILE, AttachmentKind.THREAD}
        assert Attachment.objects.get(kind=AttachmentKind.THREAD).thread == thread

    def test_invalid_attachment_kind_creates_nothing(self, room, member):
        with pytest.raises(ValidationError):
            MessageService.send_message(
                room.id, member, "Hi", attachments=[{"kind": "video", "resource": "x"}]
            )

        assert not Message.objects.exists()


class TestMessageServiceList:
    """Tests for MessageService.list_messages()."""

    def test_returns_room_messages_in_order(self, room, member, creator):
        first = MessageService.send_message(room.id, member, "one")
        second = MessageService.send_message(room.id, creator, "two")
        MessageFactory()  # another room

        assert list(MessageService.list_messages(room.id, member)) == [first, second]

    def test_outsider_is_denied(self, room, outsider):
        with pytest.raises(PermissionDeniedError):
            MessageService.list_messages(room.id, outsider)


class TestMessageServiceEdit:
    """Tests for MessageService.edit_message()."""

    def test_sender_edits_content(self, message, member):
        edited = MessageService.edit_message(message.id, member, "Updated")

        message.refresh_from_db()
        assert edited.content == message.content == "Updated"

    def test_other_user_cannot_edit(self, message, creator):
        with pytest.raises(PermissionDeniedError) as exc_info:
            MessageService.edit_message(message.id, creator, "Hacked")

        assert exc_info.value.message == "You can only edit your own messages"

    def test_blank_content_is_rejected(self, message, member):
        with pytest.raises(ValidationError):
            MessageService.edit_message(message.id, member, " ")

    def test_non_string_content_is_rejected(self, message, member):
        with pytest.raises(ValidationError):
            MessageService.edit_message(message.id, member, {"text": "Updated"})

        message.refresh_from_db()
        assert message.content == "Hello everyone!"


class TestMessageServiceDelete:
    """Tests for MessageService.delete_message()."""

    def test_sender_deletes_message(self, room, message, member):
        deleted = MessageService.delete_message(message.id, member)

        assert deleted.id == message.id
        assert deleted.room_id == room.id
        assert not room.messages.exists()

    def test_other_user_cannot_delete(self, message, creator):
        with pytest.raises(PermissionDeniedError):
            MessageService.delete_message(message.id, creator)

        assert Message.objects.filter(id=message.id).exists()

    def test_room_mismatch_raises_not_found(self, message, member):
        other_room = RoomFactory(creator=member)

        with pytest.raises(NotFoundError):
            MessageService.delete_message(message.id, member, room_id=other_room.id)

        assert Message.objects.filter(id=message.id).exists()
