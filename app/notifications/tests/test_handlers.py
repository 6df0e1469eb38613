"""
Tests for cross-app notification handlers.
"""

import pytest

from chat.signals import chat_message_sent
from chat.tests.factories import ChatMessageFactory
from notifications.models import Notification, NotificationType


@pytest.mark.django_db
class TestChatMessageSentHandler:
    """
    Verifies:
    - The counterpart receives a CHAT_MESSAGE notification for the room
    - Messages with no counterpart create nothing
    """

    def test_notifies_recipient(self, active_room, customer, admin):
        message = ChatMessageFactory(room=active_room, sender=customer)

        chat_message_sent.send(
            sender=None,
            message=message,
            room=active_room,
            recipient_id=admin.id,
            sender_name="Casey",
        )

        notification = Notification.objects.get(recipient=admin)
        assert notification.notification_type == NotificationType.CHAT_MESSAGE
        assert notification.related_entity_id == str(active_room.id)
        assert notification.actor_name == "Casey"

    def test_no_recipient(self, active_room, customer):
        message = ChatMessageFactory(room=active_room, sender=customer)

        chat_message_sent.send(
            sender=None,
            message=message,
            room=active_room,
            recipient_id=None,
            sender_name="Casey",
        )

        assert not Notification.objects.exists()
