"""
Tests for chat models.

Test Classes:
    TestChatRoomConstraints: Database-level lifecycle invariants
    TestChatRoomHelpers: Participant predicates
    TestChatMessage: Read flag and system payload helpers
"""

import json

import pytest
from django.db import IntegrityError, transaction
from django.utils import timezone

from chat.models import ChatRoom, ChatRoomStatus
from chat.tests.factories import (
    ActiveChatRoomFactory,
    ChatMessageFactory,
    ChatRoomFactory,
    ClosedChatRoomFactory,
    SystemMessageFactory,
)


@pytest.mark.django_db
class TestChatRoomConstraints:
    """
    Verifies:
    - At most one WAITING/ACTIVE room per customer
    - closed_at is set iff the room is CLOSED
    - WAITING rooms have no admin and ACTIVE rooms have one
    """

    def test_second_open_room_violates_constraint(self, customer):
        ChatRoomFactory(customer=customer)

        with pytest.raises(IntegrityError), transaction.atomic():
            ChatRoom.objects.create(customer=customer, status=ChatRoomStatus.WAITING)

    def test_closed_rooms_do_not_count_as_open(self, customer, admin):
        ClosedChatRoomFactory(customer=customer, admin=admin)
        ClosedChatRoomFactory(customer=customer, admin=admin)

        room = ChatRoomFactory(customer=customer)

        assert room.is_waiting

    def test_closed_without_timestamp_rejected(self, customer):
        with pytest.raises(IntegrityError), transaction.atomic():
            ChatRoom.objects.create(customer=customer, status=ChatRoomStatus.CLOSED)

    def test_open_with_timestamp_rejected(self, customer):
        with pytest.raises(IntegrityError), transaction.atomic():
            ChatRoom.objects.create(customer=customer, closed_at=timezone.now())

    def test_active_without_admin_rejected(self, customer):
        with pytest.raises(IntegrityError), transaction.atomic():
            ChatRoom.objects.create(customer=customer, status=ChatRoomStatus.ACTIVE)

    def test_waiting_with_admin_rejected(self, customer, admin):
        with pytest.raises(IntegrityError), transaction.atomic():
            ChatRoom.objects.create(customer=customer, admin=admin)


@pytest.mark.django_db
class TestChatRoomHelpers:
    """
    Verifies:
    - is_participant covers the customer and the assigned admin only
    - counterpart_of maps each participant to the other
    """

    def test_is_participant(self, active_room, customer, admin, outsider):
        assert active_room.is_participant(customer.id)
        assert active_room.is_participant(admin.id)
        assert not active_room.is_participant(outsider.id)
        assert not active_room.is_participant(None)

    def test_waiting_room_has_only_customer(self, waiting_room, admin):
        assert not waiting_room.is_participant(admin.id)
        assert waiting_room.counterpart_of(waiting_room.customer_id) is None

    def test_counterpart_of(self, active_room, customer, admin):
        assert active_room.counterpart_of(customer.id) == admin.id
        assert active_room.counterpart_of(admin.id) == customer.id

    def test_status_predicates(self):
        assert ChatRoomFactory().is_waiting
        assert ActiveChatRoomFactory().is_active
        assert ClosedChatRoomFactory().is_closed


@pytest.mark.django_db
class TestChatMessage:
    """
    Verifies:
    - Sender role predicates
    - mark_as_read only moves forward
    - System payloads parse; other messages have none
    """

    def test_sender_predicates(self, active_room):
        from_customer = ChatMessageFactory(room=active_room)
        from_admin = ChatMessageFactory(room=active_room, sender=active_room.admin)

        assert from_customer.is_from_customer and not from_customer.is_from_admin
        assert from_admin.is_from_admin and not from_admin.is_from_customer

    def test_mark_as_read(self, active_room):
        message = ChatMessageFactory(room=active_room)

        message.mark_as_read()
        message.refresh_from_db()

        assert message.read_by_recipient is True

    def test_system_event_data(self, active_room):
        message = SystemMessageFactory(
            room=active_room,
            content=json.dumps({"event": "admin_assigned", "data": {"admin_id": 1}}),
        )

        assert message.is_system
        assert message.get_system_event_data()["event"] == "admin_assigned"

    def test_text_message_has_no_event_data(self, active_room):
        assert ChatMessageFactory(room=active_room).get_system_event_data() is None

    def test_str_truncates_preview(self, active_room):
        message = ChatMessageFactory(room=active_room, content="x" * 80)

        assert str(message).endswith("...")
