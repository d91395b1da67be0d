"""
Django admin configuration for chat models.

Provides admin interfaces for:
- Room management
- Message moderation
- Friendships
"""

from django.contrib import admin

from chat.models import Attachment, Friendship, Message, Room


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    """Admin interface for Room model."""

    list_display = ["id", "name", "room_type", "creator", "created_at", "updated_at"]
    list_filter = ["room_type", "created_at"]
    search_fields = ["name", "id"]
    readonly_fields = ["created_at", "updated_at"]
    raw_id_fields = ["creator"]
    filter_horizontal = ["participants"]
    ordering = ["-created_at"]


class AttachmentInline(admin.TabularInline):
    model = Attachment
    extra = 0
    raw_id_fields = ["thread"]


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    """Admin interface for Message model."""

    list_display = ["id", "room", "sender", "content_preview", "created_at"]
    list_filter = ["created_at"]
    search_fields = ["content", "sender__email", "room__name"]
    readonly_fields = ["created_at", "updated_at"]
    raw_id_fields = ["room", "sender"]
    inlines = [AttachmentInline]
    ordering = ["-created_at"]

    @admin.display(description="Content")
    def content_preview(self, obj):
        return obj.content[:50] + "..." if len(obj.content) > 50 else obj.content


@admin.register(Friendship)
class FriendshipAdmin(admin.ModelAdmin):
    list_display = ["user", "friend", "created_at"]
    raw_id_fields = ["user", "friend"]
    filter_horizontal = ["dm_rooms"]
