"""
Realtime event fan-out over the Channels layer.

Every websocket connection joins the lobby group on connect and one
room_<id> group per room it has joined. Events are delivered to a group
as a single channel-layer message type, "chat.event", which ChatConsumer
turns into {"type": <event>, ...payload} on the wire.

Broadcast policy:
    Lobby (every connected client): roomCreated, roomDeleted
    Room group (current members only): userJoined, userLeft, newMessage,
        messageEdited, messageDeleted, typing, stopTyping

Membership changes made outside a connection (REST join/leave, room
delete) reach the consumers as "chat.subscribe" / "chat.unsubscribe"
messages, sent to the user_<id> group every connection of a user joins,
or to the room group itself when the room goes away.

Usage:
    # From sync code (REST views)
    broadcast_to_room(room.id, "newMessage", **new_message_payload(message))

    # From the consumer
    await self.channel_layer.group_send(room_group(room_id), build_event(...))
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder

if TYPE_CHECKING:
    from typing import Any

    from chat.models import Message

logger = logging.getLogger(__name__)

EVENT_MESSAGE_TYPE = "chat.event"
SUBSCRIBE_MESSAGE_TYPE = "chat.subscribe"
UNSUBSCRIBE_MESSAGE_TYPE = "chat.unsubscribe"


def lobby_group() -> str:
    return settings.CHAT_LOBBY_GROUP


def room_group(room_id: Any) -> str:
    """Channel-layer group name of a room."""
    return f"room_{room_id}"


def user_group(user_id: Any) -> str:
    """Channel-layer group holding every connection of one user."""
    return f"user_{user_id}"


def json_safe(payload: dict[str, Any]) -> dict[str, Any]:
    """
    Convert UUIDs, datetimes and other rich values to JSON primitives.

    Channel layers serialize with msgpack, which does not know these types.
    """
    return json.loads(json.dumps(payload, cls=DjangoJSONEncoder))


def build_event(
    event: str,
    payload: dict[str, Any],
    exclude_channel: str | None = None,
) -> dict[str, Any]:
    """
    Build the channel-layer message for one client event.

    Args:
        event: Client-facing event name (e.g. "newMessage")
        payload: Event body, merged into the client message
        exclude_channel: Channel name that should not receive the event
            (the sender of a typing indicator)
    """
    return {
        "type": EVENT_MESSAGE_TYPE,
        "event": event,
        "payload": json_safe(payload),
        "exclude": exclude_channel,
    }


def new_message_payload(message: Message) -> dict[str, Any]:
    """
    Body of a newMessage event.

    Carries the flat fields clients render directly plus the full
    serialized message.
    """
    from chat.serializers import MessageSerializer

    return {
        "roomId": message.room_id,
        "messageId": message.id,
        "senderId": message.sender_id,
        "content": message.content,
        "createdAt": message.created_at,
        "message": MessageSerializer(message).data,
    }


def _send(group: str, event: str, payload: dict[str, Any]) -> None:
    channel_layer = get_channel_layer()
    if channel_layer is None:
        logger.warning(f"No channel layer configured, dropped {event} for {group}")
        return
    async_to_sync(channel_layer.group_send)(group, build_event(event, payload))
    logger.debug(f"Broadcast {event} to {group}")


def broadcast_to_all(event: str, **payload: Any) -> None:
    """Send an event to every connected client."""
    _send(lobby_group(), event, payload)


def broadcast_to_room(room_id: Any, event: str, **payload: Any) -> None:
    """Send an event to the connections that joined a room."""
    _send(room_group(room_id), event, payload)


def membership_event(message_type: str, room_id: Any) -> dict[str, Any]:
    return {"type": message_type, "roomId": str(room_id)}


def _send_membership(group: str, message_type: str, room_id: Any) -> None:
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return
    async_to_sync(channel_layer.group_send)(group, membership_event(message_type, room_id))


def subscribe_user(user_id: Any, room_id: Any) -> None:
    """Add every open connection of a user to a room group."""
    _send_membership(user_group(user_id), SUBSCRIBE_MESSAGE_TYPE, room_id)


def unsubscribe_user(user_id: Any, room_id: Any) -> None:
    """Remove every open connection of a user from a room group."""
    _send_membership(user_group(user_id), UNSUBSCRIBE_MESSAGE_TYPE, room_id)


def close_room(room_id: Any) -> None:
    """Remove every connection from the group of a deleted room."""
    _send_membership(room_group(room_id), UNSUBSCRIBE_MESSAGE_TYPE, room_id)
