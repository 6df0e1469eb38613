"""
Message log: ordered, per-room ChatMessage storage and read accounting.

MessageLog is the only code that writes ChatMessage rows.

Ordering:
    sent_at is assigned as max(now, latest sent_at in the room) while the
    caller holds the room row lock (RoomRegistry.lock_room). Appends to one
    room are therefore serialized, and (sent_at, id) order equals commit
    order even if the wall clock steps backwards.

Unread Accounting:
    A message is unread for user U when it was sent by U's counterpart in
    the room and read_by_recipient is False. SYSTEM messages have no sender
    and are not counted.

Usage:
    from chat.message_log import MessageLog

    with transaction.atomic():
        room = RoomRegistry.lock_room(room_id)
        message = MessageLog.append(room, sender_id, "Hi!", MessageType.TEXT)

    transcript = MessageLog.history(room_id)
    page = MessageLog.page(room_id, PageSpec(page=0, size=20))
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from django.utils import timezone

from core.exceptions import InvalidStateError
from core.helpers import Page, PageSpec, paginate

from chat.models import ChatMessage, MessageType

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from chat.models import ChatRoom


class MessageLog:
    """
    Append-only per-room message store.

    Methods:
        append: Persist a message (room must be ACTIVE unless SYSTEM)
        append_system: Persist a SYSTEM event message
        history: Full transcript, oldest first
        page: One page, newest first
        unread_count / mark_all_read: Per-user read state
        last_message / count: Room summary helpers
    """

    @staticmethod
    def append(
        room: ChatRoom,
        sender_id: int | None,
        content: str,
        message_type: str = MessageType.TEXT,
    ) -> ChatMessage:
        """
        Append a message to a locked room.

        Args:
            room: Room returned by RoomRegistry.lock_room() in this transaction
            sender_id: Sending participant (None for SYSTEM)
            content: Text, attachment reference, or SYSTEM JSON
            message_type: One of MessageType

        Raises:
            InvalidStateError: Room is not ACTIVE and message is not SYSTEM
        """
        if message_type != MessageType.SYSTEM and not room.is_active:
            raise InvalidStateError(
                f"Chat room {room.id} is {room.status}; messages require an active room",
                error_code="ROOM_NOT_ACTIVE",
                details={"room_id": room.id, "status": room.status},
            )

        now = timezone.now()
        latest = (
            ChatMessage.objects.filter(room_id=room.id)
            .order_by("-sent_at", "-id")
            .values_list("sent_at", flat=True)
            .first()
        )
        sent_at = max(now, latest) if latest is not None else now

        return ChatMessage.objects.create(
            room_id=room.id,
            sender_id=sender_id if message_type != MessageType.SYSTEM else None,
            content=content,
            message_type=message_type,
            sent_at=sent_at,
            read_by_recipient=False,
        )

    @classmethod
    def append_system(cls, room: ChatRoom, event: str, data: dict) -> ChatMessage:
        """Append a SYSTEM message carrying {"event": ..., "data": ...}."""
        return cls.append(
            room,
            None,
            json.dumps({"event": event, "data": data}),
            MessageType.SYSTEM,
        )

    # =========================================================================
    # Reads
    # =========================================================================

    @staticmethod
    def _for_room(room_id: int) -> QuerySet:
        return ChatMessage.objects.filter(room_id=room_id)

    @classmethod
    def history(cls, room_id: int) -> list[ChatMessage]:
        """All messages of a room in ascending (sent_at, id) order."""
        return list(cls._for_room(room_id).order_by("sent_at", "id"))

    @classmethod
    def page(cls, room_id: int, spec: PageSpec, mapper=None) -> Page:
        """
        One page of a room's messages, most recent first.

        Args:
            room_id: Room to read
            spec: Zero-based page request
            mapper: Optional projection applied to each message
        """
        queryset = cls._for_room(room_id).order_by("-sent_at", "-id")
        return paginate(queryset, spec, mapper or (lambda message: message))

    @classmethod
    def last_message(cls, room_id: int) -> ChatMessage | None:
        return cls._for_room(room_id).order_by("-sent_at", "-id").first()

    @classmethod
    def count(cls, room_id: int) -> int:
        return cls._for_room(room_id).count()

    # =========================================================================
    # Read state
    # =========================================================================

    @classmethod
    def _unread_for(cls, room_id: int, user_id: int) -> QuerySet:
        return (
            cls._for_room(room_id)
            .filter(read_by_recipient=False, sender__isnull=False)
            .exclude(sender_id=user_id)
        )

    @classmethod
    def unread_count(cls, room_id: int, for_user_id: int) -> int:
        """Messages sent by the user's counterpart that are still unread."""
        return cls._unread_for(room_id, for_user_id).count()

    @classmethod
    def mark_all_read(cls, room_id: int, for_user_id: int) -> int:
        """
        Mark every counterpart message in the room as read. Idempotent.

        Returns:
            Number of messages flipped by this call
        """
        return cls._unread_for(room_id, for_user_id).update(read_by_recipient=True)
