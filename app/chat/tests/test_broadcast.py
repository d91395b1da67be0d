"""Tests for the channel-layer event helpers."""

import uuid

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

from chat.broadcast import (
    EVENT_MESSAGE_TYPE,
    SUBSCRIBE_MESSAGE_TYPE,
    UNSUBSCRIBE_MESSAGE_TYPE,
    broadcast_to_room,
    build_event,
    close_room,
    lobby_group,
    room_group,
    subscribe_user,
    user_group,
)


class TestBuildEvent:
    def test_wraps_payload_in_chat_event(self):
        room_id = uuid.uuid4()

        event = build_event("userLeft", {"roomId": room_id}, exclude_channel="abc")

        assert event == {
            "type": EVENT_MESSAGE_TYPE,
            "event": "userLeft",
            "payload": {"roomId": str(room_id)},
            "exclude": "abc",
        }

    def test_group_names(self, settings):
        room_id = uuid.uuid4()

        assert room_group(room_id) == f"room_{room_id}"
        assert user_group(room_id) == f"user_{room_id}"
        assert lobby_group() == settings.CHAT_LOBBY_GROUP


class TestBroadcastToRoom:
    def test_delivers_to_group_members(self):
        """
        A REST-side broadcast lands on every channel in the room group.

        Why it matters: REST mutations must reach websocket clients.
        """
        layer = get_channel_layer()
        room_id = uuid.uuid4()
        channel = async_to_sync(layer.new_channel)()
        async_to_sync(layer.group_add)(room_group(room_id), channel)

        broadcast_to_room(room_id, "messageDeleted", roomId=room_id, messageId="m1")

        received = async_to_sync(layer.receive)(channel)
        assert received["event"] == "messageDeleted"
        assert received["payload"] == {"roomId": str(room_id), "messageId": "m1"}


class TestMembershipMessages:
    def test_subscribe_user_targets_the_user_group(self):
        layer = get_channel_layer()
        user_id = uuid.uuid4()
        room_id = uuid.uuid4()
        channel = async_to_sync(layer.new_channel)()
        async_to_sync(layer.group_add)(user_group(user_id), channel)

        subscribe_user(user_id, room_id)

        received = async_to_sync(layer.receive)(channel)
        assert received == {"type": SUBSCRIBE_MESSAGE_TYPE, "roomId": str(room_id)}

    def test_close_room_targets_the_room_group(self):
        layer = get_channel_layer()
        room_id = uuid.uuid4()
        channel = async_to_sync(layer.new_channel)()
        async_to_sync(layer.group_add)(room_group(room_id), channel)

        close_room(room_id)

        received = async_to_sync(layer.receive)(channel)
        assert received == {"type": UNSUBSCRIBE_MESSAGE_TYPE, "roomId": str(room_id)}
