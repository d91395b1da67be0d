"""
Tests for RoomAccessControl.

Verifies:
- Room and message lookup with 404 on unknown or malformed ids
- Membership (creator or participant) with 403 for outsiders
- Creator-only and sender-only checks
"""

import uuid

import pytest

from chat.authorization import RoomAccessControl
from chat.tests.factories import RoomFactory
from core.exceptions import NotFoundError, PermissionDeniedError


class TestGetRoom:
    def test_returns_room(self, room):
        assert RoomAccessControl.get_room(str(room.id)) == room

    @pytest.mark.parametrize("room_id", [None, "", "nope", str(uuid.uuid4())])
    def test_unknown_room_raises_not_found(self, db, room_id):
        with pytest.raises(NotFoundError) as exc_info:
            RoomAccessControl.get_room(room_id)

        assert exc_info.value.message == "Room not found"
        assert exc_info.value.status_code == 404


class TestAssertMember:
    def test_creator_and_participant_pass(self, room, creator, member):
        assert RoomAccessControl.assert_member(room.id, creator) == room
        assert RoomAccessControl.assert_member(room.id, member) == room

    def test_creator_passes_even_when_not_in_participants(self, creator):
        """
        The creator is always a member.

        Why it matters: Access must not depend on the participants list
        staying in sync for the creator.
        """
        room = RoomFactory(creator=creator)
        room.participants.remove(creator)

        assert RoomAccessControl.assert_member(room.id, creator) == room

    def test_outsider_raises_permission_denied(self, room, outsider):
        with pytest.raises(PermissionDeniedError) as exc_info:
            RoomAccessControl.assert_member(room.id, outsider)

        assert exc_info.value.message == "You are not a participant in this room"
        assert exc_info.value.status_code == 403


class TestAssertCreator:
    def test_member_cannot_act_as_creator(self, room, member):
        with pytest.raises(PermissionDeniedError) as exc_info:
            RoomAccessControl.assert_creator(room.id, member)

        assert exc_info.value.message == "You are not authorized to delete this room"


class TestAssertSender:
    def test_sender_passes(self, message, member):
        assert RoomAccessControl.assert_sender(message.id, member, action="edit") == message

    def test_other_user_raises_with_action_in_message(self, message, creator):
        with pytest.raises(PermissionDeniedError) as exc_info:
            RoomAccessControl.assert_sender(message.id, creator, action="delete")

        assert exc_info.value.message == "You can only delete your own messages"

    def test_unknown_message_raises_not_found(self, db, member):
        with pytest.raises(NotFoundError) as exc_info:
            RoomAccessControl.assert_sender(uuid.uuid4(), member, action="edit")

        assert exc_info.value.message == "Message not found"
