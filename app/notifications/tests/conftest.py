"""
Test configuration and fixtures for notification tests.

This module provides:
- Notifications in read and unread states for the shared customer
- A helper to backdate notifications for retention tests

Usage:
    def test_example(unread_notification, customer_client):
        response = customer_client.get("/api/v1/notifications/")
        assert response.status_code == 200
"""

from datetime import timedelta

import pytest
from django.utils import timezone

from chat.tests.conftest import active_room  # noqa: F401
from notifications.models import Notification
from notifications.tests.factories import NotificationFactory


@pytest.fixture
def unread_notification(customer):
    return NotificationFactory(recipient=customer, title="Unread")


@pytest.fixture
def read_notification(customer):
    return NotificationFactory(recipient=customer, title="Read", is_read=True)


@pytest.fixture
def backdate():
    """backdate(notification, days): move created_at into the past."""

    def _backdate(notification, days):
        Notification.objects.filter(id=notification.id).update(
            created_at=timezone.now() - timedelta(days=days)
        )

    return _backdate
