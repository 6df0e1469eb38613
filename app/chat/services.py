"""
Support chat service layer.

This module provides the business logic for live customer-support chat,
coordinating the room registry, the message log, and real-time delivery.

Services:
    ChatCoordinator: Every chat use case (create, assign, send, close, read)

Projections:
    ChatRoomView: Immutable snapshot of a room returned to callers
    ChatMessageView: Immutable snapshot of a message returned to callers

Design Principles:
    - Services are stateless (use class methods)
    - Expected failures raise core.exceptions subclasses
    - Each operation is one transaction; the room row lock serializes
      mutations of the same room
    - Live pushes are registered with after_commit and never fail an
      operation
    - Callers receive projections, never model instances

Usage:
    from chat.services import ChatCoordinator

    room = ChatCoordinator.create_chat_room(customer.id)
    room = ChatCoordinator.assign_admin_to_chat_room(room.id, agent.id)
    message = ChatCoordinator.send_message(room.id, customer.id, "Hello!")
    history = ChatCoordinator.get_chat_history(room.id, agent.id)
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any

from django.conf import settings

from authentication.services import IdentityService
from core.delivery import publish
from core.exceptions import AccessDeniedError, ValidationError
from core.helpers import Page, PageSpec, paginate
from core.services import BaseService

from chat.constants import DELIVERY, MESSAGE_CONFIG
from chat.message_log import MessageLog
from chat.models import MessageType, SystemMessageEvent
from chat.registry import RoomRegistry
from chat.signals import chat_message_sent

if TYPE_CHECKING:
    from datetime import datetime

    from chat.models import ChatMessage, ChatRoom


CLIENT_MESSAGE_TYPES = (MessageType.TEXT, MessageType.IMAGE, MessageType.FILE)


# =============================================================================
# Projections
# =============================================================================


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


@dataclass(frozen=True)
class ChatRoomView:
    """
    Snapshot of a chat room.

    Attributes:
        id: Room id
        customer_id / customer_name: Room owner
        admin_id / admin_name: Assigned admin (None / "" while WAITING)
        status: waiting, active or closed
        created_at: When the customer opened the room
        closed_at: When the room was closed, if it was
    """

    id: int
    customer_id: int
    customer_name: str
    admin_id: int | None
    admin_name: str
    status: str
    created_at: datetime
    closed_at: datetime | None

    @classmethod
    def from_room(cls, room: ChatRoom) -> ChatRoomView:
        return cls(
            id=room.id,
            customer_id=room.customer_id,
            customer_name=room.customer.get_short_name(),
            admin_id=room.admin_id,
            admin_name=room.admin.get_short_name() if room.admin_id else "",
            status=str(room.status),
            created_at=room.created_at,
            closed_at=room.closed_at,
        )

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe representation used in delivery payloads."""
        data = asdict(self)
        data["created_at"] = _iso(self.created_at)
        data["closed_at"] = _iso(self.closed_at)
        return data


@dataclass(frozen=True)
class ChatMessageView:
    """
    Snapshot of a chat message.

    Attributes:
        sender_role: "customer", "admin" or "system"
        event: Parsed {"event", "data"} for SYSTEM messages, else None
    """

    id: int
    room_id: int
    sender_id: int | None
    sender_role: str
    message_type: str
    content: str
    sent_at: datetime
    read_by_recipient: bool
    event: dict | None = None

    @classmethod
    def from_message(cls, message: ChatMessage, room: ChatRoom) -> ChatMessageView:
        if message.is_system:
            role = "system"
        elif message.sender_id == room.customer_id:
            role = "customer"
        else:
            role = "admin"
        return cls(
            id=message.id,
            room_id=message.room_id,
            sender_id=message.sender_id,
            sender_role=role,
            message_type=str(message.message_type),
            content=message.content,
            sent_at=message.sent_at,
            read_by_recipient=message.read_by_recipient,
            event=message.get_system_event_data(),
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["sent_at"] = _iso(self.sent_at)
        return data


# =============================================================================
# ChatCoordinator
# =============================================================================


class ChatCoordinator(BaseService):
    """
    Orchestrates support chat use cases.

    Methods:
        create_chat_room: Customer opens a WAITING room
        assign_admin_to_chat_room: Admin picks up (or takes over) a room
        send_message: Participant posts to an ACTIVE room
        close_chat_room: Either participant closes the room
        get_chat_room: Room snapshot for a participant
        get_chat_history: Full transcript, oldest first
        get_chat_messages: Paged transcript, newest first
        get_unread_message_count / mark_read: Per-user read state
        list_waiting_rooms / list_customer_rooms / list_admin_rooms: Queries
        has_access: Participant check that never raises

    Error precedence for room-scoped operations:
        NotFoundError (unknown room), then AccessDeniedError, then
        InvalidStateError.
    """

    # =========================================================================
    # Lifecycle
    # =========================================================================

    @classmethod
    def create_chat_room(cls, customer_id: int) -> ChatRoomView:
        """
        Open a WAITING room for a customer.

        Admins subscribed to the admin-new-chat topic are told about the new
        room once it is committed.

        Raises:
            NotFoundError: Unknown user
            AccessDeniedError: User is not an active customer
            ConflictError: Customer already has a WAITING or ACTIVE room
        """
        customer = IdentityService.require_customer(customer_id)

        with cls.atomic():
            room = RoomRegistry.create_room(customer.id)
            view = ChatRoomView.from_room(room)
            cls.after_commit(
                publish,
                "broadcast",
                {"event": DELIVERY.EVENT_NEW_CHAT_ROOM, "room": view.to_dict()},
                topic=DELIVERY.ADMIN_NEW_CHAT_TOPIC,
            )

        cls.get_logger().info(f"Customer {customer.id} opened chat room {view.id}")
        return view

    @classmethod
    def assign_admin_to_chat_room(cls, room_id: int, admin_id: int) -> ChatRoomView:
        """
        Assign an admin to a room, activating it.

        A WAITING room becomes ACTIVE with an admin_assigned SYSTEM message.
        Assigning a different admin to an ACTIVE room replaces the previous
        admin under the same row lock and records admin_reassigned.
        Assigning the current admin again changes and publishes nothing.

        Raises:
            NotFoundError: Unknown room or user
            AccessDeniedError: User is not an active admin
            InvalidStateError: Room is CLOSED
        """
        RoomRegistry.get_room(room_id)
        admin = IdentityService.require_admin(admin_id)

        with cls.atomic():
            room, previous_admin_id = RoomRegistry.assign_admin(room_id, admin.id)
            view = ChatRoomView.from_room(room)
            if previous_admin_id == admin.id:
                return view

            data = {"admin_id": admin.id, "admin_name": admin.display_name}
            if previous_admin_id is None:
                event = SystemMessageEvent.ADMIN_ASSIGNED
            else:
                event = SystemMessageEvent.ADMIN_REASSIGNED
                data["previous_admin_id"] = previous_admin_id

            message = MessageLog.append_system(room, event, data)
            message_view = ChatMessageView.from_message(message, room)

            cls.after_commit(
                publish,
                "publish_to_room",
                room.id,
                {"event": event, "room": view.to_dict(), "message": message_view.to_dict()},
            )
            cls.after_commit(
                publish,
                "publish_to_user",
                room.customer_id,
                {
                    "event": DELIVERY.EVENT_CHAT_ASSIGNED,
                    "room": view.to_dict(),
                    "admin_name": admin.display_name,
                },
                queue=DELIVERY.CHAT_QUEUE,
            )
            if previous_admin_id is not None:
                cls.after_commit(
                    publish,
                    "publish_to_user",
                    previous_admin_id,
                    {"event": SystemMessageEvent.ADMIN_REASSIGNED, "room": view.to_dict()},
                    queue=DELIVERY.CHAT_QUEUE,
                )

        cls.get_logger().info(f"Admin {admin.id} took chat room {room_id} ({event})")
        return view

    @classmethod
    def close_chat_room(cls, room_id: int, requester_id: int) -> ChatRoomView:
        """
        Close a room on behalf of one of its participants.

        Closing an already CLOSED room returns its current state and
        publishes nothing.

        Raises:
            NotFoundError: Unknown room
            AccessDeniedError: Requester is not a participant
        """
        with cls.atomic():
            room, changed = RoomRegistry.close_room(room_id, requester_id)
            view = ChatRoomView.from_room(room)
            if not changed:
                return view

            message = MessageLog.append_system(
                room,
                SystemMessageEvent.ROOM_CLOSED,
                {"closed_by_id": requester_id},
            )
            cls.after_commit(
                publish,
                "publish_to_room",
                room.id,
                {
                    "event": DELIVERY.EVENT_ROOM_CLOSED,
                    "room": view.to_dict(),
                    "message": ChatMessageView.from_message(message, room).to_dict(),
                },
            )

        return view

    # =========================================================================
    # Messaging
    # =========================================================================

    @classmethod
    def send_message(
        cls,
        room_id: int,
        sender_id: int,
        content: str,
        message_type: str = MessageType.TEXT,
    ) -> ChatMessageView:
        """
        Append a participant message to an ACTIVE room.

        The message is pushed to the room topic and the counterpart's chat
        queue after commit. chat_message_sent fires inside the transaction
        so receivers persist their records atomically with the message.

        Args:
            room_id: Target room
            sender_id: Customer or assigned admin of the room
            content: Text, or an attachment reference for IMAGE/FILE
            message_type: text, image or file

        Raises:
            ValidationError: Non-string, blank or oversized content, or SYSTEM type
            NotFoundError: Unknown room
            AccessDeniedError: Sender is not a participant
            InvalidStateError: Room is not ACTIVE
        """
        if content is not None and not isinstance(content, str):
            raise ValidationError(
                "Message content must be a string",
                error_code="INVALID_CONTENT",
            )
        content = content.strip() if content else ""
        cls._validate_message(content, message_type)

        with cls.atomic():
            room = RoomRegistry.lock_room(room_id)
            cls._require_participant(room, sender_id)

            message = MessageLog.append(room, sender_id, content, message_type)
            view = ChatMessageView.from_message(message, room)
            recipient_id = room.counterpart_of(sender_id)
            sender_name = IdentityService.display_name_for(sender_id)

            chat_message_sent.send(
                sender=cls,
                message=message,
                room=room,
                recipient_id=recipient_id,
                sender_name=sender_name,
            )

            cls.after_commit(
                publish,
                "publish_to_room",
                room.id,
                {"event": DELIVERY.EVENT_CHAT_MESSAGE, "message": view.to_dict()},
            )
            if recipient_id is not None:
                cls.after_commit(
                    publish,
                    "publish_to_user",
                    recipient_id,
                    {
                        "event": DELIVERY.EVENT_CHAT_MESSAGE,
                        "room_id": room.id,
                        "sender_name": sender_name,
                        "message": view.to_dict(),
                    },
                    queue=DELIVERY.CHAT_QUEUE,
                )

        cls.get_logger().debug(
            f"User {sender_id} sent message {view.id} to chat room {room_id}"
        )
        return view

    @classmethod
    def mark_read(cls, room_id: int, user_id: int) -> int:
        """
        Mark every counterpart message in the room read for this user.

        Returns:
            Number of messages that changed state (0 on repeat calls)
        """
        room = cls._room_for_participant(room_id, user_id)

        with cls.atomic():
            count = MessageLog.mark_all_read(room.id, user_id)
            if count:
                cls.after_commit(
                    publish,
                    "publish_to_room",
                    room.id,
                    {
                        "event": DELIVERY.EVENT_MESSAGES_READ,
                        "room_id": room.id,
                        "reader_id": user_id,
                        "count": count,
                    },
                )
        return count

    # =========================================================================
    # Reads
    # =========================================================================

    @classmethod
    def get_chat_room(cls, room_id: int, requester_id: int) -> ChatRoomView:
        return ChatRoomView.from_room(cls._room_for_participant(room_id, requester_id))

    @classmethod
    def get_chat_history(cls, room_id: int, requester_id: int) -> list[ChatMessageView]:
        """Full transcript in ascending (sent_at, id) order."""
        room = cls._room_for_participant(room_id, requester_id)
        return [ChatMessageView.from_message(m, room) for m in MessageLog.history(room.id)]

    @classmethod
    def get_chat_messages(
        cls,
        room_id: int,
        requester_id: int,
        page_spec: PageSpec | None = None,
    ) -> Page[ChatMessageView]:
        """One page of the transcript, most recent first."""
        room = cls._room_for_participant(room_id, requester_id)
        spec = page_spec or PageSpec(size=MESSAGE_CONFIG.DEFAULT_PAGE_SIZE)
        return MessageLog.page(
            room.id,
            spec,
            lambda message: ChatMessageView.from_message(message, room),
        )

    @classmethod
    def get_unread_message_count(cls, room_id: int, user_id: int) -> int:
        room = cls._room_for_participant(room_id, user_id)
        return MessageLog.unread_count(room.id, user_id)

    @classmethod
    def list_waiting_rooms(cls) -> list[ChatRoomView]:
        """WAITING rooms, oldest first. Callers restrict this to admins."""
        rooms = RoomRegistry.list_waiting().select_related("customer")
        return [ChatRoomView.from_room(room) for room in rooms]

    @classmethod
    def list_customer_rooms(
        cls,
        customer_id: int,
        page_spec: PageSpec | None = None,
    ) -> Page[ChatRoomView]:
        """A customer's rooms, newest first."""
        queryset = RoomRegistry.list_for_customer(customer_id).select_related(
            "customer", "admin"
        )
        return paginate(queryset, page_spec or PageSpec(), ChatRoomView.from_room)

    @classmethod
    def list_admin_rooms(
        cls,
        admin_id: int,
        status: str | None = None,
        page_spec: PageSpec | None = None,
    ) -> Page[ChatRoomView]:
        """Rooms currently assigned to an admin, optionally by status."""
        queryset = RoomRegistry.list_for_admin(admin_id, status).select_related(
            "customer", "admin"
        )
        return paginate(queryset, page_spec or PageSpec(), ChatRoomView.from_room)

    @classmethod
    def has_access(cls, room_id: int, user_id: int | None) -> bool:
        return RoomRegistry.has_access(room_id, user_id)

    # =========================================================================
    # Helpers
    # =========================================================================

    @classmethod
    def _room_for_participant(cls, room_id: int, user_id: int) -> ChatRoom:
        room = RoomRegistry.get_room(room_id)
        cls._require_participant(room, user_id)
        return room

    @classmethod
    def _require_participant(cls, room: ChatRoom, user_id: int) -> None:
        if not room.is_participant(user_id):
            cls.get_logger().warning(
                f"User {user_id} denied access to chat room {room.id}"
            )
            raise AccessDeniedError(
                "You are not a participant in this chat room",
                error_code="NOT_PARTICIPANT",
                details={"room_id": room.id},
            )

    @staticmethod
    def _validate_message(content: str, message_type: str) -> None:
        if message_type not in CLIENT_MESSAGE_TYPES:
            raise ValidationError(
                f"Message type '{message_type}' cannot be sent by users",
                error_code="INVALID_MESSAGE_TYPE",
                details={"allowed": [str(t) for t in CLIENT_MESSAGE_TYPES]},
            )
        if len(content) < MESSAGE_CONFIG.MIN_CONTENT_LENGTH:
            raise ValidationError(
                "Message content cannot be empty",
                error_code="EMPTY_CONTENT",
            )
        max_length = getattr(
            settings, "CHAT_MESSAGE_MAX_LENGTH", MESSAGE_CONFIG.MAX_CONTENT_LENGTH
        )
        if len(content) > max_length:
            raise ValidationError(
                f"Message content exceeds {max_length} characters",
                error_code="CONTENT_TOO_LONG",
                details={"max_length": max_length},
            )
