"""
Room registry: ChatRoom ownership and state machine.

RoomRegistry is the only code that writes ChatRoom rows. It enforces:
- One open (WAITING/ACTIVE) room per customer
- The WAITING -> ACTIVE -> CLOSED state machine (plus WAITING -> CLOSED)
- Participant-based access checks

Locking:
    Every mutator locks the room row with select_for_update() and must be
    called inside the caller's transaction (ChatCoordinator opens one per
    operation). Concurrent assign/close/send calls on the same room
    therefore serialize on that row; rooms do not block each other.

Usage:
    from chat.registry import RoomRegistry

    with transaction.atomic():
        room = RoomRegistry.create_room(customer.id)
        room, previous_admin_id = RoomRegistry.assign_admin(room.id, agent.id)
"""

from __future__ import annotations

import logging

from django.db import IntegrityError, transaction
from django.utils import timezone

from core.exceptions import AccessDeniedError, ConflictError, InvalidStateError, NotFoundError

from chat.models import OPEN_STATUSES, ChatRoom, ChatRoomStatus

logger = logging.getLogger(__name__)


class RoomRegistry:
    """
    Owns ChatRoom entities and their transitions.

    Methods:
        create_room: Open a WAITING room for a customer
        assign_admin: Assign (or reassign) an admin, moving the room to ACTIVE
        close_room: Close a room; closing twice is a no-op
        has_access: Participant check that never raises
        get_room / lock_room: Lookups raising NotFoundError
        list_waiting / list_for_customer / list_for_admin: Queries
    """

    # =========================================================================
    # Lookups
    # =========================================================================

    @staticmethod
    def get_room(room_id: int) -> ChatRoom:
        """
        Fetch a room without locking.

        Raises:
            NotFoundError: Room does not exist
        """
        try:
            return ChatRoom.objects.get(id=room_id)
        except ChatRoom.DoesNotExist:
            raise NotFoundError(
                f"Chat room {room_id} not found",
                error_code="ROOM_NOT_FOUND",
                details={"room_id": room_id},
            )

    @staticmethod
    def lock_room(room_id: int) -> ChatRoom:
        """
        Fetch a room and hold its row lock until the transaction ends.

        Raises:
            NotFoundError: Room does not exist
        """
        try:
            return ChatRoom.objects.select_for_update().get(id=room_id)
        except ChatRoom.DoesNotExist:
            raise NotFoundError(
                f"Chat room {room_id} not found",
                error_code="ROOM_NOT_FOUND",
                details={"room_id": room_id},
            )

    @staticmethod
    def has_access(room_id: int, user_id: int | None) -> bool:
        """
        True iff the user is the room's customer or its assigned admin.

        Unknown rooms and anonymous users yield False.
        """
        if user_id is None:
            return False
        room = ChatRoom.objects.filter(id=room_id).only("customer_id", "admin_id").first()
        return room is not None and room.is_participant(user_id)

    @staticmethod
    def exists_open_room_for_customer(customer_id: int) -> bool:
        return ChatRoom.objects.filter(
            customer_id=customer_id,
            status__in=OPEN_STATUSES,
        ).exists()

    @staticmethod
    def find_open_room_for_customer(customer_id: int) -> ChatRoom | None:
        return (
            ChatRoom.objects.filter(customer_id=customer_id, status__in=OPEN_STATUSES)
            .order_by("-created_at")
            .first()
        )

    # =========================================================================
    # Transitions
    # =========================================================================

    @classmethod
    def create_room(cls, customer_id: int) -> ChatRoom:
        """
        Open a new WAITING room for a customer.

        Raises:
            ConflictError: Customer already has a WAITING or ACTIVE room
        """
        existing = cls.find_open_room_for_customer(customer_id)
        if existing is not None:
            raise cls._open_room_conflict(customer_id, existing)

        try:
            # Savepoint so a lost race leaves the outer transaction usable
            with transaction.atomic():
                room = ChatRoom.objects.create(
                    customer_id=customer_id,
                    status=ChatRoomStatus.WAITING,
                )
        except IntegrityError:
            existing = cls.find_open_room_for_customer(customer_id)
            logger.warning(f"Concurrent room creation for customer {customer_id}")
            raise cls._open_room_conflict(customer_id, existing)

        logger.info(f"Created chat room {room.id} for customer {customer_id}")
        return room

    @classmethod
    def assign_admin(cls, room_id: int, admin_id: int) -> tuple[ChatRoom, int | None]:
        """
        Assign an admin, moving the room to ACTIVE.

        Same admin on an ACTIVE room is a no-op. A different admin replaces
        the current one in the same locked update, so only one admin is ever
        authorized at any committed point.

        Returns:
            (room, previous_admin_id); previous_admin_id equals admin_id for
            the idempotent case and is None for a first assignment

        Raises:
            NotFoundError: Room does not exist
            InvalidStateError: Room is CLOSED
        """
        room = cls.lock_room(room_id)

        if room.is_closed:
            raise InvalidStateError(
                f"Chat room {room_id} is closed",
                error_code="ROOM_CLOSED",
                details={"room_id": room_id, "status": room.status},
            )

        previous_admin_id = room.admin_id
        if room.is_active and previous_admin_id == admin_id:
            return room, previous_admin_id

        room.admin_id = admin_id
        room.status = ChatRoomStatus.ACTIVE
        room.save(update_fields=["admin", "status", "updated_at"])

        if previous_admin_id is None:
            logger.info(f"Assigned admin {admin_id} to chat room {room_id}")
        else:
            logger.info(
                f"Reassigned chat room {room_id} from admin {previous_admin_id} "
                f"to admin {admin_id}"
            )
        return room, previous_admin_id

    @classmethod
    def close_room(cls, room_id: int, requester_id: int) -> tuple[ChatRoom, bool]:
        """
        Close a room. Closing an already CLOSED room changes nothing.

        Returns:
            (room, changed) where changed is False for a repeated close

        Raises:
            NotFoundError: Room does not exist
            AccessDeniedError: Requester is neither customer nor admin
        """
        room = cls.lock_room(room_id)

        if not room.is_participant(requester_id):
            logger.warning(f"User {requester_id} attempted to close chat room {room_id}")
            raise AccessDeniedError(
                "You are not a participant in this chat room",
                error_code="NOT_PARTICIPANT",
                details={"room_id": room_id},
            )

        if room.is_closed:
            return room, False

        room.status = ChatRoomStatus.CLOSED
        room.closed_at = timezone.now()
        room.save(update_fields=["status", "closed_at", "updated_at"])

        logger.info(f"Closed chat room {room_id} (requested by user {requester_id})")
        return room, True

    # =========================================================================
    # Queries
    # =========================================================================

    @staticmethod
    def list_waiting():
        """WAITING rooms, oldest first."""
        return ChatRoom.objects.filter(status=ChatRoomStatus.WAITING).order_by(
            "created_at", "id"
        )

    @staticmethod
    def list_for_customer(customer_id: int):
        """All of a customer's rooms, newest first."""
        return ChatRoom.objects.filter(customer_id=customer_id).order_by(
            "-created_at", "-id"
        )

    @staticmethod
    def list_for_admin(admin_id: int, status: str | None = None):
        """Rooms currently assigned to an admin, newest first."""
        queryset = ChatRoom.objects.filter(admin_id=admin_id)
        if status:
            queryset = queryset.filter(status=status)
        return queryset.order_by("-created_at", "-id")

    @staticmethod
    def count_for_admin(admin_id: int, status: str) -> int:
        return ChatRoom.objects.filter(admin_id=admin_id, status=status).count()

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _open_room_conflict(customer_id: int, existing: ChatRoom | None) -> ConflictError:
        details = {"customer_id": customer_id}
        if existing is not None:
            details.update({"room_id": existing.id, "status": existing.status})
        return ConflictError(
            "Customer already has an open chat room",
            error_code="OPEN_ROOM_EXISTS",
            details=details,
        )
