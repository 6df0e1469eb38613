"""
Concurrency tests for per-room serialization.

Room transitions and appends take the ChatRoom row lock, so racing
operations on one room must behave as if they ran one after the other.
These tests drive the coordinator from real threads with real
transactions and need a backend with row locks (PostgreSQL);
SQLite has no SELECT ... FOR UPDATE and skips them.
"""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from django.db import connection

from chat.message_log import MessageLog
from chat.models import ChatRoom, ChatRoomStatus, MessageType, SystemMessageEvent
from chat.services import ChatCoordinator
from chat.tests.factories import ActiveChatRoomFactory, ChatRoomFactory
from core.exceptions import InvalidStateError

pytestmark = pytest.mark.skipif(
    not connection.features.has_select_for_update,
    reason="requires a database with row-level locking",
)


def run_together(*calls):
    """
    Run each callable in its own thread, released at the same moment.

    Returns (result, exception) pairs in call order.
    """
    barrier = threading.Barrier(len(calls))

    def worker(call):
        connection.close()  # Force new connection for thread
        try:
            barrier.wait(timeout=5)
            return call(), None
        except Exception as e:
            return None, e
        finally:
            connection.close()

    with ThreadPoolExecutor(max_workers=len(calls)) as executor:
        futures = [executor.submit(worker, call) for call in calls]
        return [future.result() for future in futures]


def system_trail(room_id):
    return [
        message.get_system_event_data()
        for message in MessageLog.history(room_id)
        if message.message_type == MessageType.SYSTEM
    ]


@pytest.mark.django_db(transaction=True)
class TestConcurrentAssignment:
    """
    Verifies:
    - Two admins racing for one waiting room leave exactly one admin
    - The SYSTEM trail records one assignment then one hand-over, in order
    """

    def test_racing_assignments_serialize(self, recording_delivery, admin, other_admin):
        """
        Concurrent assigns end in a state reachable by running them in sequence.

        Why it matters: exactly one admin may own a room, and the transcript
        must explain who holds it.
        """
        room = ChatRoomFactory()

        outcomes = run_together(
            lambda: ChatCoordinator.assign_admin_to_chat_room(room.id, admin.id),
            lambda: ChatCoordinator.assign_admin_to_chat_room(room.id, other_admin.id),
        )

        assert [error for _, error in outcomes] == [None, None]

        room.refresh_from_db()
        assert room.status == ChatRoomStatus.ACTIVE
        assert room.admin_id in (admin.id, other_admin.id)

        first, second = system_trail(room.id)
        assert first["event"] == SystemMessageEvent.ADMIN_ASSIGNED
        assert second["event"] == SystemMessageEvent.ADMIN_REASSIGNED
        assert second["data"]["previous_admin_id"] == first["data"]["admin_id"]
        assert second["data"]["admin_id"] == room.admin_id
        assert first["data"]["admin_id"] != room.admin_id


@pytest.mark.django_db(transaction=True)
class TestSendRacingClose:
    """
    Verifies:
    - A send racing a close either lands before the room_closed message
      or fails with InvalidStateError and leaves no trace
    """

    @pytest.mark.parametrize("attempt", range(5))
    def test_send_commits_before_close_or_fails(self, recording_delivery, attempt):
        room = ActiveChatRoomFactory()

        (sent, send_error), (_, close_error) = run_together(
            lambda: ChatCoordinator.send_message(room.id, room.customer_id, "still there?"),
            lambda: ChatCoordinator.close_chat_room(room.id, room.admin_id),
        )

        assert close_error is None
        assert ChatRoom.objects.get(id=room.id).status == ChatRoomStatus.CLOSED

        history = MessageLog.history(room.id)
        texts = [m for m in history if m.message_type == MessageType.TEXT]

        if send_error is not None:
            assert isinstance(send_error, InvalidStateError)
            assert texts == []
        else:
            assert [m.id for m in texts] == [sent.id]
            assert history[-1].get_system_event_data()["event"] == (
                SystemMessageEvent.ROOM_CLOSED
            )
            assert history.index(texts[0]) < len(history) - 1
