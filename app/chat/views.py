"""
ViewSets for the chat API.

This module provides REST API endpoints for rooms and messages:
- RoomViewSet: Room CRUD, membership actions and room messages
- MessageViewSet: Edit/delete a message by id

URL Structure:
    /api/v1/rooms/                                  GET, POST
    /api/v1/rooms/me/                               GET
    /api/v1/rooms/{id}/                             GET, DELETE
    /api/v1/rooms/{id}/join/                        POST
    /api/v1/rooms/{id}/leave/                       POST
    /api/v1/rooms/{id}/messages/                    GET, POST
    /api/v1/rooms/{id}/messages/{message_id}/       DELETE
    /api/v1/messages/{id}/                          PATCH, DELETE

Design Decisions:
    - All business rules live in chat.services; views translate HTTP
    - Every mutation also emits the matching realtime event (chat.broadcast)
      so websocket clients see REST changes live
    - Join and leave move the caller's open connections in or out of the
      room group; deleting a room empties its group
    - Errors are raised as core.exceptions and rendered by
      core.handlers.api_exception_handler
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from chat.broadcast import (
    broadcast_to_all,
    broadcast_to_room,
    close_room,
    new_message_payload,
    subscribe_user,
    unsubscribe_user,
)
from chat.serializers import (
    MessageCreateSerializer,
    MessageSerializer,
    MessageUpdateSerializer,
    RoomCreateSerializer,
    RoomDetailSerializer,
    RoomSerializer,
)
from chat.services import MessageService, RoomService


def success(data, status_code=status.HTTP_200_OK):
    return Response({"status": "success", "data": data}, status=status_code)


@extend_schema_view(
    list=extend_schema(
        summary="List all rooms",
        tags=["Rooms"],
        responses={200: RoomSerializer(many=True)},
    ),
    create=extend_schema(
        summary="Create a room",
        description="The caller becomes creator and first participant.",
        tags=["Rooms"],
        request=RoomCreateSerializer,
        responses={201: RoomSerializer, 400: OpenApiResponse(description="Room name is required")},
    ),
    retrieve=extend_schema(
        summary="Room details",
        description="Participants and messages, oldest first. Members only.",
        tags=["Rooms"],
        responses={200: RoomDetailSerializer},
    ),
    destroy=extend_schema(
        summary="Delete a room",
        description="Creator only. Deletes the room's messages too.",
        tags=["Rooms"],
        responses={204: None},
    ),
)
class RoomViewSet(viewsets.ViewSet):
    """
    ViewSet for rooms.

    Endpoints:
        GET    /rooms/                  - All rooms
        POST   /rooms/                  - Create room
        GET    /rooms/me/               - Rooms the caller belongs to
        GET    /rooms/{id}/             - Room details (members only)
        DELETE /rooms/{id}/             - Delete room (creator only)
        POST   /rooms/{id}/join/        - Join room
        POST   /rooms/{id}/leave/       - Leave room
        GET    /rooms/{id}/messages/    - Room messages (members only)
        POST   /rooms/{id}/messages/    - Send message (members only)
    """

    def list(self, request):
        rooms = RoomService.list_rooms()
        return success(RoomSerializer(rooms, many=True).data)

    def create(self, request):
        serializer = RoomCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        room = RoomService.create_room(
            creator=request.user,
            name=serializer.validated_data.get("name"),
            room_type=serializer.validated_data.get("type"),
        )
        data = RoomSerializer(room).data
        broadcast_to_all("roomCreated", room=data)
        return success(data, status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        room = RoomService.get_room_details(pk, request.user)
        return success(RoomDetailSerializer(room).data)

    def destroy(self, request, pk=None):
        room_id = RoomService.delete_room(pk, request.user)
        broadcast_to_all("roomDeleted", roomId=room_id)
        close_room(room_id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        summary="My rooms",
        tags=["Rooms"],
        responses={200: RoomSerializer(many=True)},
    )
    @action(detail=False, methods=["get"])
    def me(self, request):
        rooms = RoomService.list_user_rooms(request.user)
        return success(RoomSerializer(rooms, many=True).data)

    @extend_schema(
        summary="Join a room",
        tags=["Rooms"],
        request=None,
        responses={
            200: RoomSerializer,
            400: OpenApiResponse(description="You are already in this room"),
        },
    )
    @action(detail=True, methods=["post"])
    def join(self, request, pk=None):
        room = RoomService.join_room(pk, request.user)
        broadcast_to_room(room.id, "userJoined", roomId=room.id, userId=request.user.id)
        subscribe_user(request.user.id, room.id)
        return success(RoomSerializer(room).data)

    @extend_schema(summary="Leave a room", tags=["Rooms"], request=None)
    @action(detail=True, methods=["post"])
    def leave(self, request, pk=None):
        room = RoomService.leave_room(pk, request.user)
        broadcast_to_room(room.id, "userLeft", roomId=room.id, userId=request.user.id)
        unsubscribe_user(request.user.id, room.id)
        return Response({"status": "success", "message": "You left the room"})

    @extend_schema(
        methods=["GET"],
        summary="List room messages",
        tags=["Messages"],
        responses={200: MessageSerializer(many=True)},
    )
    @extend_schema(
        methods=["POST"],
        summary="Send a message",
        tags=["Messages"],
        request=MessageCreateSerializer,
        responses={201: MessageSerializer},
    )
    @action(detail=True, methods=["get", "post"])
    def messages(self, request, pk=None):
        if request.method == "GET":
            messages = MessageService.list_messages(pk, request.user)
            return success(MessageSerializer(messages, many=True).data)

        serializer = MessageCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        message = MessageService.send_message(
            pk,
            request.user,
            serializer.validated_data.get("content"),
            serializer.validated_data.get("attachments"),
        )
        broadcast_to_room(message.room_id, "newMessage", **new_message_payload(message))
        return success(MessageSerializer(message).data, status.HTTP_201_CREATED)

    @extend_schema(
        summary="Delete a message in a room",
        description="Sender only. The message must belong to the room.",
        tags=["Messages"],
        responses={204: None},
    )
    def destroy_message(self, request, pk=None, message_pk=None):
        message = MessageService.delete_message(message_pk, request.user, room_id=pk)
        broadcast_to_room(
            message.room_id,
            "messageDeleted",
            roomId=message.room_id,
            messageId=message.id,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema_view(
    partial_update=extend_schema(
        summary="Edit a message",
        description="Sender only.",
        tags=["Messages"],
        request=MessageUpdateSerializer,
        responses={200: MessageSerializer},
    ),
    destroy=extend_schema(
        summary="Delete a message",
        description="Sender only.",
        tags=["Messages"],
        responses={204: None},
    ),
)
class MessageViewSet(viewsets.ViewSet):
    """
    ViewSet for messages addressed by id.

    Endpoints:
        PATCH  /messages/{id}/   - Edit content (sender only)
        DELETE /messages/{id}/   - Delete (sender only)
    """

    def partial_update(self, request, pk=None):
        serializer = MessageUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        message = MessageService.edit_message(
            pk, request.user, serializer.validated_data.get("content")
        )
        broadcast_to_room(
            message.room_id,
            "messageEdited",
            roomId=message.room_id,
            messageId=message.id,
            content=message.content,
        )
        return success(MessageSerializer(message).data)

    def destroy(self, request, pk=None):
        message = MessageService.delete_message(pk, request.user)
        broadcast_to_room(
            message.room_id,
            "messageDeleted",
            roomId=message.room_id,
            messageId=message.id,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)
