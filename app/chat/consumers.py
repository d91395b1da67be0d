"""
WebSocket consumers for the chat application.

This module implements the realtime gateway: one persistent connection
per client, authenticated once at handshake time, that joins and leaves
room broadcast groups and fans out room events.

Consumers:
    ChatConsumer: Handles the /ws/chat/ connection of one client

Authentication:
    JWTAuthMiddleware attaches the user to self.scope["user"]. Anonymous
    connections are closed with code 4001 before any event is handled.

Channel Groups:
    - Lobby (settings.CHAT_LOBBY_GROUP): every connection, for roomCreated
      and roomDeleted
    - "room_{room_id}": connections that joined the room, for every other
      event about that room
    - "user_{user_id}": every connection of one user, for membership
      changes made elsewhere (REST join/leave, another tab leaving)

Message Types (from client):
    createRoom, getRoomsByUser, getAllRooms, getRoomDetails, joinRoom,
    leaveRoom, deleteRoom, sendMessage, getMessages, editMessage,
    deleteMessage, typing, stopTyping

Message Types (to client):
    roomCreated, userRooms, allRooms, roomDetails, userJoined, userLeft,
    roomDeleted, newMessage, roomMessages, messageEdited, messageDeleted,
    typing, stopTyping, error

Every client message is a JSON object whose "type" names the event;
other keys (roomId, messageId, content, name, roomType, attachments) are
the event arguments. Failures are reported to the sending connection
only, as {"type": "error", "message": "..."}.
"""

from __future__ import annotations

import json
import logging

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncJsonWebsocketConsumer
from django.core.serializers.json import DjangoJSONEncoder

from chat.authorization import RoomAccessControl
from chat.broadcast import (
    UNSUBSCRIBE_MESSAGE_TYPE,
    build_event,
    lobby_group,
    membership_event,
    new_message_payload,
    room_group,
    user_group,
)
from chat.middleware import SUBPROTOCOL
from chat.serializers import MessageSerializer, RoomDetailSerializer, RoomSerializer
from chat.services import MessageService, RoomService
from core.exceptions import BaseApplicationError, ValidationError

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR_MESSAGE = "Something went very wrong!"


class ChatConsumer(AsyncJsonWebsocketConsumer):
    """
    WebSocket consumer for real-time chat functionality.

    Handles:
        - Connection authentication (close code 4001 when anonymous)
        - Joining/leaving room channel groups
        - Room and message operations through the service layer
        - Typing indicators

    Attributes:
        user: Authenticated user of the connection
        joined_rooms: Ids of the room groups this connection is in
    """

    # client event type -> handler method name
    handlers = {
        "createRoom": "handle_create_room",
        "getRoomsByUser": "handle_get_rooms_by_user",
        "getAllRooms": "handle_get_all_rooms",
        "getRoomDetails": "handle_get_room_details",
        "joinRoom": "handle_join_room",
        "leaveRoom": "handle_leave_room",
        "deleteRoom": "handle_delete_room",
        "sendMessage": "handle_send_message",
        "getMessages": "handle_get_messages",
        "editMessage": "handle_edit_message",
        "deleteMessage": "handle_delete_message",
        "typing": "handle_typing",
        "stopTyping": "handle_stop_typing",
    }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.user = None
        self.joined_rooms: set[str] = set()

    async def connect(self):
        """
        Handle WebSocket connection.

        Rejects anonymous connections; otherwise joins the lobby group and
        accepts, echoing the "jwt" subprotocol when the client offered it.
        """
        user = self.scope.get("user")
        if not user or not user.is_authenticated:
            reason = self.scope.get("auth_error") or "Authentication failed"
            logger.warning(f"Rejected WebSocket connection: {reason}")
            await self.close(code=4001)
            return

        self.user = user
        await self.channel_layer.group_add(lobby_group(), self.channel_name)
        await self.channel_layer.group_add(user_group(user.id), self.channel_name)

        subprotocol = SUBPROTOCOL if SUBPROTOCOL in self.scope.get("subprotocols", []) else None
        await self.accept(subprotocol=subprotocol)
        logger.info(f"User {user.id} connected")

    async def disconnect(self, close_code):
        """Leave the lobby and every joined room group."""
        if self.user is None:
            return

        await self.channel_layer.group_discard(lobby_group(), self.channel_name)
        await self.channel_layer.group_discard(user_group(self.user.id), self.channel_name)
        for room_id in list(self.joined_rooms):
            await self.channel_layer.group_discard(room_group(room_id), self.channel_name)
        self.joined_rooms.clear()
        logger.info(f"User {self.user.id} disconnected (code {close_code})")

    async def receive(self, text_data=None, bytes_data=None, **kwargs):
        """Decode a text frame, reporting undecodable frames as error events."""
        if text_data is None:
            await self.send_error("Event must be a JSON text frame")
            return
        try:
            content = await self.decode_json(text_data)
        except ValueError:
            await self.send_error("Event must be valid JSON")
            return
        await self.receive_json(content, **kwargs)

    async def receive_json(self, content, **kwargs):
        """
        Dispatch a client event to its handler.

        Expected message format:
            {"type": "sendMessage", "roomId": "<uuid>", "content": "Hello!"}
            {"type": "typing", "roomId": "<uuid>"}
        """
        if not isinstance(content, dict):
            await self.send_error("Event must be a JSON object")
            return

        event_type = content.get("type")
        handler_name = self.handlers.get(event_type)
        if handler_name is None:
            await self.send_error(f"Unknown event type: {event_type}")
            return

        try:
            await getattr(self, handler_name)(content)
        except BaseApplicationError as e:
            logger.warning(f"{event_type} failed for user {self.user.id}: {e.message}")
            await self.send_error(e.message)
        except Exception:
            logger.exception(f"Unexpected error handling {event_type} for user {self.user.id}")
            await self.send_error(UNEXPECTED_ERROR_MESSAGE)

    @classmethod
    async def encode_json(cls, content):
        return json.dumps(content, cls=DjangoJSONEncoder)

    async def send_event(self, event: str, **payload):
        await self.send_json({"type": event, **payload})

    async def send_error(self, message: str):
        await self.send_event("error", message=message)

    async def broadcast(self, group: str, event: str, payload: dict, exclude_self=False):
        await self.channel_layer.group_send(
            group,
            build_event(event, payload, self.channel_name if exclude_self else None),
        )

    async def subscribe(self, room_id):
        room_id = str(room_id)
        await self.channel_layer.group_add(room_group(room_id), self.channel_name)
        self.joined_rooms.add(room_id)

    async def unsubscribe(self, room_id):
        room_id = str(room_id)
        await self.channel_layer.group_discard(room_group(room_id), self.channel_name)
        self.joined_rooms.discard(room_id)

    # Room events

    async def handle_create_room(self, content):
        room = await self._create_room(content.get("name"), content.get("roomType"))
        await self.subscribe(room["id"])
        await self.broadcast(lobby_group(), "roomCreated", {"room": room})

    async def handle_get_rooms_by_user(self, content):
        rooms = await self._list_user_rooms()
        await self.send_event("userRooms", rooms=rooms)

    async def handle_get_all_rooms(self, content):
        rooms = await self._list_rooms()
        await self.send_event("allRooms", rooms=rooms)

    async def handle_get_room_details(self, content):
        room = await self._get_room_details(content.get("roomId"))
        await self.send_event("roomDetails", room=room)

    async def handle_join_room(self, content):
        """Add the user to the room (if needed) and subscribe to its events."""
        room_id = await self._join_room(content.get("roomId"))
        await self.subscribe(room_id)
        await self.broadcast(
            room_group(room_id),
            "userJoined",
            {"roomId": room_id, "userId": self.user.id},
        )

    async def handle_leave_room(self, content):
        room_id = await self._leave_room(content.get("roomId"))
        await self.unsubscribe(room_id)
        await self.broadcast(
            room_group(room_id),
            "userLeft",
            {"roomId": room_id, "userId": self.user.id},
        )
        # The user's other connections leave too
        await self.channel_layer.group_send(
            user_group(self.user.id),
            membership_event(UNSUBSCRIBE_MESSAGE_TYPE, room_id),
        )

    async def handle_delete_room(self, content):
        room_id = await database_sync_to_async(RoomService.delete_room)(
            content.get("roomId"), self.user
        )
        await self.unsubscribe(room_id)
        await self.broadcast(lobby_group(), "roomDeleted", {"roomId": room_id})
        await self.channel_layer.group_send(
            room_group(room_id),
            membership_event(UNSUBSCRIBE_MESSAGE_TYPE, room_id),
        )

    # Message events

    async def handle_send_message(self, content):
        payload = await self._send_message(
            content.get("roomId"),
            content.get("content"),
            content.get("attachments"),
        )
        await self.broadcast(room_group(payload["roomId"]), "newMessage", payload)

    async def handle_get_messages(self, content):
        room_id = content.get("roomId")
        messages = await self._list_messages(room_id)
        await self.send_event("roomMessages", roomId=room_id, messages=messages)

    async def handle_edit_message(self, content):
        message = await database_sync_to_async(MessageService.edit_message)(
            content.get("messageId"), self.user, content.get("content")
        )
        await self.broadcast(
            room_group(message.room_id),
            "messageEdited",
            {
                "roomId": message.room_id,
                "messageId": message.id,
                "content": message.content,
            },
        )

    async def handle_delete_message(self, content):
        message = await database_sync_to_async(MessageService.delete_message)(
            content.get("messageId"), self.user, content.get("roomId")
        )
        await self.broadcast(
            room_group(message.room_id),
            "messageDeleted",
            {"roomId": message.room_id, "messageId": message.id},
        )

    # Typing indicators, not persisted and never echoed to the sender

    async def handle_typing(self, content):
        room = await self._assert_member(content.get("roomId"))
        await self.broadcast(
            room_group(room.id),
            "typing",
            {"roomId": room.id, "userId": self.user.id, "name": self.user.name},
            exclude_self=True,
        )

    async def handle_stop_typing(self, content):
        room = await self._assert_member(content.get("roomId"))
        await self.broadcast(
            room_group(room.id),
            "stopTyping",
            {"roomId": room.id, "userId": self.user.id},
            exclude_self=True,
        )

    async def chat_event(self, event):
        """
        Handle chat.event messages from the channel layer.

        Forwards the event to the WebSocket client unless this connection
        is the excluded sender.
        """
        if event.get("exclude") == self.channel_name:
            return
        await self.send_event(event["event"], **event["payload"])

    async def chat_subscribe(self, event):
        """Handle chat.subscribe: the user joined a room elsewhere."""
        await self.subscribe(event["roomId"])

    async def chat_unsubscribe(self, event):
        """Handle chat.unsubscribe: the user left, or the room was deleted."""
        await self.unsubscribe(event["roomId"])

    # Database access

    @database_sync_to_async
    def _create_room(self, name, room_type) -> dict:
        if room_type is not None and not isinstance(room_type, str):
            raise ValidationError("Room type must be a string")
        room = RoomService.create_room(self.user, name, room_type)
        return RoomSerializer(room).data

    @database_sync_to_async
    def _list_user_rooms(self) -> list:
        return RoomSerializer(RoomService.list_user_rooms(self.user), many=True).data

    @database_sync_to_async
    def _list_rooms(self) -> list:
        return RoomSerializer(RoomService.list_rooms(), many=True).data

    @database_sync_to_async
    def _get_room_details(self, room_id) -> dict:
        return RoomDetailSerializer(RoomService.get_room_details(room_id, self.user)).data

    @database_sync_to_async
    def _join_room(self, room_id) -> str:
        return str(RoomService.join_room(room_id, self.user, allow_existing=True).id)

    @database_sync_to_async
    def _leave_room(self, room_id) -> str:
        return str(RoomService.leave_room(room_id, self.user).id)

    @database_sync_to_async
    def _send_message(self, room_id, content, attachments) -> dict:
        if attachments is not None:
            attachments = self._parse_attachments(attachments)
        message = MessageService.send_message(room_id, self.user, content, attachments)
        return new_message_payload(message)

    @staticmethod
    def _parse_attachments(attachments) -> list[dict]:
        """Accept the wire attachment shape ({"type", "resource", "thread"})."""
        if not isinstance(attachments, list) or not all(
            isinstance(item, dict) for item in attachments
        ):
            raise ValidationError("Attachments must be a list of objects")
        return [
            {
                "kind": item.get("type"),
                "resource": item.get("resource"),
                "thread": item.get("thread"),
            }
            for item in attachments
        ]

    @database_sync_to_async
    def _list_messages(self, room_id) -> list:
        return MessageSerializer(
            MessageService.list_messages(room_id, self.user), many=True
        ).data

    @database_sync_to_async
    def _assert_member(self, room_id):
        return RoomAccessControl.assert_member(room_id, self.user)
