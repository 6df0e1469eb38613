"""
Serializers for chat API.

This module provides serializers for the support chat:
- Room serializers (read, assign request)
- Message serializers (read, create)
- Small response bodies (counts, paged envelopes)

Serializer Hierarchy:
    ChatRoomSerializer: ChatRoomView projection
    AssignAdminSerializer: Optional target admin for assignment

    ChatMessageSerializer: ChatMessageView projection with display text
    MessageCreateSerializer: Send new message

    UnreadCountSerializer / MarkReadResponseSerializer: Count bodies
    ChatRoomPageSerializer / ChatMessagePageSerializer: Paged envelopes

Design Decisions:
    - Read serializers wrap service projections, not model instances
    - Read and write serializers are separate for clarity
    - System messages show formatted event description
"""

from __future__ import annotations

from rest_framework import serializers

from chat.models import ChatRoomStatus, MessageType, SystemMessageEvent
from chat.services import CLIENT_MESSAGE_TYPES


# =============================================================================
# Helper Functions
# =============================================================================


def format_system_event(event: dict | None) -> str:
    """
    Format a parsed system message event for display.

    Args:
        event: {"event": ..., "data": {...}} as stored in SYSTEM messages

    Returns:
        Human-readable message string
    """
    if not event:
        return "System message"

    data = event.get("data") or {}
    formatters = {
        SystemMessageEvent.ADMIN_ASSIGNED: lambda d: (
            f"{d.get('admin_name') or 'A support agent'} joined the chat"
        ),
        SystemMessageEvent.ADMIN_REASSIGNED: lambda d: (
            f"The chat was transferred to {d.get('admin_name') or 'another agent'}"
        ),
        SystemMessageEvent.ROOM_CLOSED: lambda d: "The chat was closed",
    }

    formatter = formatters.get(event.get("event"))
    if formatter:
        return formatter(data)
    return "System message"


# =============================================================================
# Room Serializers
# =============================================================================


class ChatRoomSerializer(serializers.Serializer):
    """Read serializer for ChatRoomView."""

    id = serializers.IntegerField(read_only=True)
    customer_id = serializers.IntegerField(read_only=True)
    customer_name = serializers.CharField(read_only=True)
    admin_id = serializers.IntegerField(read_only=True, allow_null=True)
    admin_name = serializers.CharField(read_only=True)
    status = serializers.ChoiceField(choices=ChatRoomStatus.choices, read_only=True)
    created_at = serializers.DateTimeField(read_only=True)
    closed_at = serializers.DateTimeField(read_only=True, allow_null=True)


class AssignAdminSerializer(serializers.Serializer):
    """
    Request body for assigning a room.

    Fields:
        admin_id: Admin to assign; defaults to the calling admin
    """

    admin_id = serializers.IntegerField(required=False, min_value=1)


# =============================================================================
# Message Serializers
# =============================================================================


class ChatMessageSerializer(serializers.Serializer):
    """
    Read serializer for ChatMessageView.

    display_text is the content for participant messages and a
    human-readable description for SYSTEM messages.
    """

    id = serializers.IntegerField(read_only=True)
    room_id = serializers.IntegerField(read_only=True)
    sender_id = serializers.IntegerField(read_only=True, allow_null=True)
    sender_role = serializers.CharField(read_only=True)
    message_type = serializers.ChoiceField(choices=MessageType.choices, read_only=True)
    content = serializers.CharField(read_only=True)
    display_text = serializers.SerializerMethodField()
    sent_at = serializers.DateTimeField(read_only=True)
    read_by_recipient = serializers.BooleanField(read_only=True)

    def get_display_text(self, obj) -> str:
        if obj.sender_role == "system":
            return format_system_event(obj.event)
        return obj.content


class MessageCreateSerializer(serializers.Serializer):
    """
    Serializer for sending a message.

    Content is trimmed; blank and oversized content is rejected by
    ChatCoordinator so HTTP and WebSocket clients get the same errors.
    """

    content = serializers.CharField(allow_blank=True, trim_whitespace=False)
    message_type = serializers.ChoiceField(
        choices=[(t.value, t.label) for t in CLIENT_MESSAGE_TYPES],
        default=MessageType.TEXT,
    )


# =============================================================================
# Response Bodies
# =============================================================================


class UnreadCountSerializer(serializers.Serializer):
    unread_count = serializers.IntegerField()


class MarkReadResponseSerializer(serializers.Serializer):
    marked_count = serializers.IntegerField()


class _PageSerializer(serializers.Serializer):
    page = serializers.IntegerField()
    size = serializers.IntegerField()
    total = serializers.IntegerField()
    total_pages = serializers.IntegerField()
    has_next = serializers.BooleanField()
    has_previous = serializers.BooleanField()


class ChatRoomPageSerializer(_PageSerializer):
    results = ChatRoomSerializer(many=True)


class ChatMessagePageSerializer(_PageSerializer):
    results = ChatMessageSerializer(many=True)
