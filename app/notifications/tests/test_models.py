"""
Tests for the Notification model.
"""

import pytest

from notifications.models import Notification
from notifications.tests.factories import NotificationFactory


@pytest.mark.django_db
class TestNotification:
    """
    Verifies:
    - New notifications are unread
    - Default ordering is newest first
    """

    def test_defaults(self, customer):
        notification = NotificationFactory(recipient=customer)

        assert notification.is_read is False
        assert notification.related_entity_id is None

    def test_newest_first(self, customer, backdate):
        old = NotificationFactory(recipient=customer)
        backdate(old, 3)
        new = NotificationFactory(recipient=customer)

        assert list(Notification.objects.filter(recipient=customer)) == [new, old]

    def test_str_mentions_state(self, customer):
        assert "unread" in str(NotificationFactory(recipient=customer))
