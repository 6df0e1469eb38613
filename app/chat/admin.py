"""
Django admin configuration for chat models.

Provides admin interfaces for:
- Support room oversight
- Transcript moderation
"""

from django.contrib import admin

from chat.models import ChatMessage, ChatRoom


class ChatMessageInline(admin.TabularInline):
    """Read-only transcript inside the room admin."""

    model = ChatMessage
    extra = 0
    can_delete = False
    fields = ["sent_at", "sender", "message_type", "content", "read_by_recipient"]
    readonly_fields = fields
    raw_id_fields = ["sender"]
    ordering = ["sent_at", "id"]


@admin.register(ChatRoom)
class ChatRoomAdmin(admin.ModelAdmin):
    """Admin interface for ChatRoom model."""

    list_display = [
        "id",
        "customer",
        "admin",
        "status",
        "created_at",
        "closed_at",
    ]
    list_filter = ["status", "created_at"]
    search_fields = ["id", "customer__email", "admin__email"]
    readonly_fields = ["created_at", "updated_at", "closed_at"]
    raw_id_fields = ["customer", "admin"]
    inlines = [ChatMessageInline]
    ordering = ["-created_at"]


@admin.register(ChatMessage)
class ChatMessageAdmin(admin.ModelAdmin):
    """Admin interface for ChatMessage model."""

    list_display = [
        "id",
        "room",
        "sender",
        "message_type",
        "content_preview",
        "read_by_recipient",
        "sent_at",
    ]
    list_filter = ["message_type", "read_by_recipient", "sent_at"]
    search_fields = ["content", "sender__email"]
    readonly_fields = ["sent_at"]
    raw_id_fields = ["room", "sender"]
    ordering = ["-sent_at"]

    @admin.display(description="Content Preview")
    def content_preview(self, obj: ChatMessage) -> str:
        """Return truncated content for list display."""
        max_length = 50
        if len(obj.content) > max_length:
            return obj.content[:max_length] + "..."
        return obj.content
