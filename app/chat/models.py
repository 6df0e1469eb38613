"""
Support chat models.

This module defines the data models for live customer-support chat:
- One customer talks to at most one assigned support admin per room
- A customer has at most one open (WAITING or ACTIVE) room at a time

Models:
    ChatRoom: A single support conversation and its lifecycle state
    ChatMessage: Individual message within a room, with per-recipient read flag

State Machine (ChatRoom.status):
    WAITING --assign admin--> ACTIVE --close--> CLOSED
    WAITING --close--> CLOSED
    No transition leaves CLOSED.

Design Decisions:
    - Rooms and messages are mutated only through chat.registry and
      chat.message_log; views and consumers never save them directly
    - Messages reference their room by foreign key only; rooms hold no
      cached message state
    - The one-open-room rule is backed by a partial unique constraint so a
      race between two create requests cannot produce two open rooms
    - SYSTEM messages have no sender and store JSON event content
"""

from __future__ import annotations

import json

from django.conf import settings
from django.db import models
from django.db.models import Q

from core.models import BaseModel


class ChatRoomStatus(models.TextChoices):
    """
    Lifecycle state of a chat room.

    WAITING: Created by a customer, no admin yet
    ACTIVE: Admin assigned, messaging allowed
    CLOSED: Terminal, no further messaging
    """

    WAITING = "waiting", "Waiting"
    ACTIVE = "active", "Active"
    CLOSED = "closed", "Closed"


OPEN_STATUSES = (ChatRoomStatus.WAITING, ChatRoomStatus.ACTIVE)


class MessageType(models.TextChoices):
    """
    Type of message content.

    TEXT: User-authored text message
    IMAGE: Reference (URL or storage key) to an image
    FILE: Reference (URL or storage key) to a file
    SYSTEM: Auto-generated event message (sender is NULL)
    """

    TEXT = "text", "Text"
    IMAGE = "image", "Image"
    FILE = "file", "File"
    SYSTEM = "system", "System"


class SystemMessageEvent:
    """
    System message event types.

    System messages store structured event data as JSON in the content field.
    Format: {"event": "<event_type>", "data": {...event-specific data...}}

    Events:
        ADMIN_ASSIGNED: First admin picked the room up
            data: {"admin_id": int, "admin_name": str}

        ADMIN_REASSIGNED: Room handed to a different admin
            data: {"admin_id": int, "admin_name": str, "previous_admin_id": int}

        ROOM_CLOSED: Room was closed
            data: {"closed_by_id": int}
    """

    ADMIN_ASSIGNED = "admin_assigned"
    ADMIN_REASSIGNED = "admin_reassigned"
    ROOM_CLOSED = "room_closed"


class ChatRoom(BaseModel):
    """
    A customer-support conversation.

    Fields:
        customer: Customer who opened the room (immutable)
        admin: Currently assigned support admin (NULL while WAITING)
        status: Lifecycle state
        closed_at: When the room was closed (NULL unless CLOSED)

    Inherits from BaseModel:
        created_at: Timestamp (auto, indexed)
        updated_at: Timestamp (auto)

    Invariants (enforced by constraints below):
        - closed_at is set iff status is CLOSED
        - admin is set whenever status is ACTIVE and NULL while WAITING
        - at most one WAITING/ACTIVE room per customer
    """

    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="customer_chat_rooms",
        help_text="Customer who opened this room",
    )

    admin = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="assigned_chat_rooms",
        help_text="Support admin currently assigned (null until assigned)",
    )

    status = models.CharField(
        max_length=10,
        choices=ChatRoomStatus.choices,
        default=ChatRoomStatus.WAITING,
        db_index=True,
        help_text="Lifecycle state of the room",
    )

    closed_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the room was closed",
    )

    class Meta:
        db_table = "chat_room"
        ordering = ["-created_at", "-id"]
        indexes = [
            # Customer's rooms, newest first
            models.Index(
                fields=["customer", "-created_at"],
                name="chat_room_customer_idx",
            ),
            # Waiting queue, oldest first
            models.Index(
                fields=["status", "created_at"],
                name="chat_room_status_queue_idx",
            ),
            # Admin's rooms by status
            models.Index(
                fields=["admin", "status"],
                name="chat_room_admin_status_idx",
                condition=Q(admin__isnull=False),
            ),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["customer"],
                condition=Q(status__in=["waiting", "active"]),
                name="chat_room_one_open_per_customer",
            ),
            models.CheckConstraint(
                condition=(
                    Q(status="closed", closed_at__isnull=False)
                    | (~Q(status="closed") & Q(closed_at__isnull=True))
                ),
                name="chat_room_closed_at_iff_closed",
            ),
            models.CheckConstraint(
                condition=(
                    Q(status="waiting", admin__isnull=True)
                    | Q(status="active", admin__isnull=False)
                    | Q(status="closed")
                ),
                name="chat_room_admin_matches_status",
            ),
        ]

    def __str__(self) -> str:
        return f"ChatRoom({self.pk}) customer={self.customer_id} [{self.status}]"

    @property
    def is_waiting(self) -> bool:
        return self.status == ChatRoomStatus.WAITING

    @property
    def is_active(self) -> bool:
        return self.status == ChatRoomStatus.ACTIVE

    @property
    def is_closed(self) -> bool:
        return self.status == ChatRoomStatus.CLOSED

    def is_participant(self, user_id: int | None) -> bool:
        """True iff user_id is the room's customer or its assigned admin."""
        if user_id is None:
            return False
        return user_id == self.customer_id or (
            self.admin_id is not None and user_id == self.admin_id
        )

    def counterpart_of(self, user_id: int) -> int | None:
        """
        The other participant for a given participant.

        Returns None when the counterpart is the not-yet-assigned admin.
        """
        if user_id == self.customer_id:
            return self.admin_id
        return self.customer_id


class ChatMessage(models.Model):
    """
    A message within a chat room.

    Ordering:
        Messages are ordered by (sent_at, id). sent_at is assigned by
        chat.message_log under the room row lock and never decreases within
        a room, so this order equals commit order.

    Read State:
        read_by_recipient flips False -> True when the participant who did
        not send the message marks the room read. SYSTEM messages have no
        sender and take no part in unread accounting.

    Fields:
        room: Room this message belongs to
        sender: Customer or admin who sent it (NULL for SYSTEM)
        message_type: TEXT, IMAGE, FILE or SYSTEM
        content: Text, a reference for IMAGE/FILE, or JSON for SYSTEM
        sent_at: Monotonic per-room send time
        read_by_recipient: Whether the recipient has read it
    """

    room = models.ForeignKey(
        ChatRoom,
        on_delete=models.CASCADE,
        related_name="messages",
        help_text="Room this message belongs to",
    )

    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="sent_chat_messages",
        help_text="User who sent this message (null for system messages)",
    )

    message_type = models.CharField(
        max_length=10,
        choices=MessageType.choices,
        default=MessageType.TEXT,
        help_text="Type of message content",
    )

    content = models.TextField(
        help_text="Message text, attachment reference, or system event JSON",
    )

    sent_at = models.DateTimeField(
        help_text="Send time; non-decreasing within a room",
    )

    read_by_recipient = models.BooleanField(
        default=False,
        help_text="Whether the recipient has read this message",
    )

    class Meta:
        db_table = "chat_message"
        ordering = ["sent_at", "id"]
        indexes = [
            # Room transcript in order
            models.Index(
                fields=["room", "sent_at", "id"],
                name="chat_msg_room_order_idx",
            ),
            # Unread accounting
            models.Index(
                fields=["room", "read_by_recipient"],
                name="chat_msg_room_unread_idx",
                condition=Q(read_by_recipient=False),
            ),
        ]

    def __str__(self) -> str:
        sender_str = f"User {self.sender_id}" if self.sender_id else "System"
        preview = self.content[:50] + "..." if len(self.content) > 50 else self.content
        return f"{sender_str}: {preview}"

    @property
    def is_system(self) -> bool:
        return self.message_type == MessageType.SYSTEM

    @property
    def is_from_customer(self) -> bool:
        return self.sender_id is not None and self.sender_id == self.room.customer_id

    @property
    def is_from_admin(self) -> bool:
        return self.sender_id is not None and self.sender_id == self.room.admin_id

    def mark_as_read(self) -> None:
        """Flip the read flag; never reverts a read message to unread."""
        if not self.read_by_recipient:
            self.read_by_recipient = True
            self.save(update_fields=["read_by_recipient"])

    def get_system_event_data(self) -> dict | None:
        """
        Parse system message content as JSON.

        Returns:
            Dict with 'event' and 'data' keys if system message, None otherwise
        """
        if not self.is_system:
            return None
        try:
            return json.loads(self.content)
        except (json.JSONDecodeError, TypeError):
            return None
