"""
Tests for MessageLog.

Test Classes:
    TestAppend: State checks and monotonic sent_at
    TestHistoryAndPaging: Ordering of reads
    TestReadState: Unread accounting and mark_all_read
"""

import json
from datetime import timedelta

import pytest
from django.utils import timezone

from chat.message_log import MessageLog
from chat.models import MessageType, SystemMessageEvent
from chat.tests.factories import ChatMessageFactory
from core.exceptions import InvalidStateError
from core.helpers import PageSpec


@pytest.mark.django_db
class TestAppend:
    """
    Verifies:
    - Only ACTIVE rooms accept participant messages
    - SYSTEM messages bypass the state check and carry no sender
    - sent_at never goes backwards within a room
    """

    def test_append_to_active_room(self, active_room, customer):
        message = MessageLog.append(active_room, customer.id, "hello")

        assert message.message_type == MessageType.TEXT
        assert message.sender_id == customer.id
        assert message.read_by_recipient is False

    @pytest.mark.parametrize("room_fixture", ["waiting_room", "closed_room"])
    def test_append_requires_active_room(self, request, room_fixture, customer):
        room = request.getfixturevalue(room_fixture)

        with pytest.raises(InvalidStateError) as exc_info:
            MessageLog.append(room, customer.id, "hello")

        assert exc_info.value.error_code == "ROOM_NOT_ACTIVE"

    def test_system_message_on_closed_room(self, closed_room):
        message = MessageLog.append_system(
            closed_room, SystemMessageEvent.ROOM_CLOSED, {"closed_by_id": 1}
        )

        assert message.sender_id is None
        assert json.loads(message.content) == {
            "event": "room_closed",
            "data": {"closed_by_id": 1},
        }

    def test_sent_at_is_monotonic(self, active_room, customer):
        """
        A message whose clock reads ahead of now does not reorder history.

        Why it matters: history order must equal commit order even when
        wall clocks step backwards between appends.
        """
        ahead = timezone.now() + timedelta(minutes=10)
        earlier = ChatMessageFactory(room=active_room, sent_at=ahead)

        later = MessageLog.append(active_room, customer.id, "after")

        assert later.sent_at >= earlier.sent_at
        assert MessageLog.history(active_room.id)[-1] == later


@pytest.mark.django_db
class TestHistoryAndPaging:
    """
    Verifies:
    - history() is ascending and stable across calls
    - page() is descending with correct totals
    """

    def test_history_in_append_order(self, active_room, customer, admin):
        sent = [
            MessageLog.append(active_room, customer.id, "one"),
            MessageLog.append(active_room, admin.id, "two"),
            MessageLog.append(active_room, customer.id, "three"),
        ]

        first = MessageLog.history(active_room.id)

        assert first == sent
        assert MessageLog.history(active_room.id) == first
        assert all(a.sent_at <= b.sent_at for a, b in zip(first, first[1:]))

    def test_page_newest_first(self, active_room, customer):
        for n in range(5):
            MessageLog.append(active_room, customer.id, f"m{n}")

        page = MessageLog.page(active_room.id, PageSpec(page=0, size=2))

        assert [m.content for m in page.items] == ["m4", "m3"]
        assert page.total == 5
        assert page.has_next

        last = MessageLog.page(active_room.id, PageSpec(page=2, size=2))
        assert [m.content for m in last.items] == ["m0"]
        assert not last.has_next

    def test_page_mapper(self, active_room, customer):
        MessageLog.append(active_room, customer.id, "mapped")

        page = MessageLog.page(active_room.id, PageSpec(), lambda m: m.content)

        assert page.items == ["mapped"]

    def test_summary_helpers(self, active_room, customer):
        assert MessageLog.last_message(active_room.id) is None

        MessageLog.append(active_room, customer.id, "a")
        last = MessageLog.append(active_room, customer.id, "b")

        assert MessageLog.last_message(active_room.id) == last
        assert MessageLog.count(active_room.id) == 2


@pytest.mark.django_db
class TestReadState:
    """
    Verifies:
    - Unread counts only the counterpart's messages
    - SYSTEM messages are never unread
    - mark_all_read is idempotent and unread re-accrues afterwards
    """

    def test_unread_counts_counterpart_messages(self, active_room, customer, admin):
        MessageLog.append(active_room, customer.id, "hi")
        MessageLog.append(active_room, customer.id, "anyone?")
        MessageLog.append(active_room, admin.id, "hello")

        assert MessageLog.unread_count(active_room.id, admin.id) == 2
        assert MessageLog.unread_count(active_room.id, customer.id) == 1

    def test_system_messages_not_counted(self, active_room, customer, admin):
        MessageLog.append_system(active_room, SystemMessageEvent.ADMIN_ASSIGNED, {})

        assert MessageLog.unread_count(active_room.id, admin.id) == 0
        assert MessageLog.unread_count(active_room.id, customer.id) == 0

    def test_mark_all_read_is_idempotent(self, active_room, customer, admin):
        MessageLog.append(active_room, customer.id, "hi")
        MessageLog.append(active_room, admin.id, "hello")

        assert MessageLog.mark_all_read(active_room.id, admin.id) == 1
        assert MessageLog.mark_all_read(active_room.id, admin.id) == 0
        assert MessageLog.unread_count(active_room.id, admin.id) == 0
        # The admin's own message is still unread for the customer
        assert MessageLog.unread_count(active_room.id, customer.id) == 1

    def test_unread_reaccrues(self, active_room, customer, admin):
        MessageLog.append(active_room, customer.id, "first")
        MessageLog.mark_all_read(active_room.id, admin.id)

        MessageLog.append(active_room, customer.id, "second")

        assert MessageLog.unread_count(active_room.id, admin.id) == 1
