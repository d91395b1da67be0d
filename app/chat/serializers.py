"""
Serializers for the chat system.

The same representations are used for REST responses and realtime event
payloads, so a room or message looks identical on both channels.

Serializers:
    ParticipantSerializer: Minimal user representation (id, name)
    AttachmentSerializer: Attachment representation and input
    MessageSerializer: Message with sender and attachments
    RoomSerializer: Room with creator and participants
    RoomDetailSerializer: RoomSerializer plus ordered messages
    RoomCreateSerializer: Input for creating a room
    MessageCreateSerializer: Input for sending a message
    MessageUpdateSerializer: Input for editing a message
"""

from rest_framework import serializers

from authentication.models import User
from chat.models import Attachment, AttachmentKind, Message, Room, RoomType


class ParticipantSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "name"]
        read_only_fields = fields


class AttachmentSerializer(serializers.ModelSerializer):
    """
    Attachment on a message.

    "type" on the wire maps to the kind column.
    """

    type = serializers.ChoiceField(source="kind", choices=AttachmentKind.choices)
    thread = serializers.PrimaryKeyRelatedField(
        queryset=Room.objects.all(),
        required=False,
        allow_null=True,
        pk_field=serializers.UUIDField(format="hex_verbose"),
    )

    class Meta:
        model = Attachment
        fields = ["type", "resource", "thread"]


class MessageSerializer(serializers.ModelSerializer):
    """
    Message representation.

    Fields:
        id, room, sender {id, name}, content, attachments, created_at, updated_at
    """

    room = serializers.UUIDField(source="room_id", read_only=True)
    sender = ParticipantSerializer(read_only=True)
    attachments = AttachmentSerializer(many=True, read_only=True)

    class Meta:
        model = Message
        fields = [
            "id",
            "room",
            "sender",
            "content",
            "attachments",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class RoomSerializer(serializers.ModelSerializer):
    """Room representation used in room lists."""

    type = serializers.CharField(source="room_type", read_only=True)
    creator = ParticipantSerializer(read_only=True)
    participants = ParticipantSerializer(many=True, read_only=True)

    class Meta:
        model = Room
        fields = [
            "id",
            "name",
            "type",
            "creator",
            "participants",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class RoomDetailSerializer(RoomSerializer):
    """Room with its messages, oldest first."""

    messages = MessageSerializer(many=True, read_only=True)

    class Meta(RoomSerializer.Meta):
        fields = RoomSerializer.Meta.fields + ["messages"]
        read_only_fields = fields


class RoomCreateSerializer(serializers.Serializer):
    """
    Input for room creation.

    name is optional here so RoomService reports the missing name with
    its own message, identical over REST and websocket.
    """

    name = serializers.CharField(required=False, allow_blank=True, max_length=100)
    type = serializers.ChoiceField(
        choices=RoomType.choices,
        required=False,
        default=RoomType.ROOM,
    )


class MessageCreateSerializer(serializers.Serializer):
    content = serializers.CharField(
        required=False,
        allow_blank=True,
        trim_whitespace=False,
    )
    attachments = AttachmentSerializer(many=True, required=False)


class MessageUpdateSerializer(serializers.Serializer):
    content = serializers.CharField(
        required=False,
        allow_blank=True,
        trim_whitespace=False,
    )
