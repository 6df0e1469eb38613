"""
Tests for NotificationService.

Test Classes:
    TestNotify: Persist then push
    TestTypedProducers: Titles and related entity ids per type
    TestBroadcastSystemNotice: Delivery-only vs persisted broadcasts
    TestReads: Listing, filtering, counting
    TestReadState: mark_read / mark_all_read ownership and idempotence
    TestRemoval: delete, cleanup and purge
"""

import pytest

from chat.constants import DELIVERY
from core.exceptions import AccessDeniedError, NotFoundError
from core.helpers import days_ago
from notifications.models import Notification, NotificationType
from notifications.services import NotificationService
from notifications.tests.factories import NotificationFactory


@pytest.mark.django_db
class TestNotify:
    """
    Verifies:
    - The record is persisted unread with a string related_entity_id
    - The recipient's notifications queue receives it after commit
    - Unknown recipients raise NotFoundError
    """

    def test_persists_and_pushes(
        self, customer, recording_delivery, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=True):
            notification = NotificationService.notify(
                recipient_id=customer.id,
                title="Account updated",
                body="Your email address was changed.",
                notification_type=NotificationType.ACCOUNT_UPDATE,
                related_entity_id=42,
            )

        assert notification.is_read is False
        assert notification.related_entity_id == "42"

        [payload] = recording_delivery.to_user(customer.id, queue="notifications")
        assert payload["id"] == notification.id
        assert payload["title"] == "Account updated"
        assert payload["notification_type"] == "account_update"

    def test_unknown_recipient(self):
        with pytest.raises(NotFoundError) as exc_info:
            NotificationService.notify(
                recipient_id=987654,
                title="x",
                body="",
                notification_type=NotificationType.ACCOUNT_UPDATE,
            )

        assert exc_info.value.error_code == "USER_NOT_FOUND"
        assert not Notification.objects.exists()


@pytest.mark.django_db
class TestTypedProducers:
    """
    Verifies:
    - Each helper sets its type, title, actor and related entity
    """

    def test_comment_on_post(self, customer):
        notification = NotificationService.notify_comment_on_post(customer.id, 7, "Robin")

        assert notification.notification_type == NotificationType.COMMENT_ON_POST
        assert notification.title == "New comment"
        assert notification.body == "Robin commented on your post"
        assert notification.related_entity_id == "7"

    def test_reply_to_comment(self, customer):
        notification = NotificationService.notify_reply_to_comment(customer.id, 9, "Robin")

        assert notification.notification_type == NotificationType.REPLY_TO_COMMENT
        assert notification.title == "New reply"
        assert notification.actor_name == "Robin"

    def test_chat_message(self, customer):
        notification = NotificationService.notify_chat_message(customer.id, 3, "Dana")

        assert notification.notification_type == NotificationType.CHAT_MESSAGE
        assert notification.title == "New chat message"
        assert notification.body == "Dana sent you a message"


@pytest.mark.django_db
class TestBroadcastSystemNotice:
    """
    Verifies:
    - Default broadcasts are delivery-only
    - NOTIFICATIONS_PERSIST_BROADCASTS stores one record per active user
    """

    def test_delivery_only(
        self, customer, recording_delivery, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=True):
            persisted = NotificationService.broadcast_system_notice(
                "Maintenance", "Back at 02:00 UTC"
            )

        assert persisted == 0
        assert not Notification.objects.exists()
        [payload] = recording_delivery.broadcasts(topic="system-notifications")
        assert payload == {
            "notification_type": "system_notice",
            "title": "Maintenance",
            "body": "Back at 02:00 UTC",
        }

    def test_persisted_for_active_users(self, settings, customer, admin):
        """
        Persisted broadcasts skip deactivated accounts.

        Why it matters: offline users read persisted notices later, but
        deactivated accounts never will.
        """
        from authentication.tests.factories import CustomerFactory

        CustomerFactory(is_active=False)
        settings.NOTIFICATIONS_PERSIST_BROADCASTS = True

        persisted = NotificationService.broadcast_system_notice("Maintenance", "Tonight")

        assert persisted == 2
        assert set(
            Notification.objects.values_list("recipient_id", flat=True)
        ) == {customer.id, admin.id}
        assert set(Notification.objects.values_list("notification_type", flat=True)) == {
            NotificationType.SYSTEM_NOTICE
        }


@pytest.mark.django_db
class TestReads:
    """
    Verifies:
    - Lists are scoped to the user, newest first
    - Type, related entity and read filters
    """

    def test_list_scoped_and_ordered(self, customer, other_customer, backdate):
        older = NotificationFactory(recipient=customer)
        backdate(older, 1)
        newer = NotificationFactory(recipient=customer)
        NotificationFactory(recipient=other_customer)

        assert list(NotificationService.list_for_user(customer.id)) == [newer, older]

    def test_filters(self, customer):
        chat = NotificationService.notify_chat_message(customer.id, 5, "Dana")
        NotificationService.notify_comment_on_post(customer.id, 5, "Robin")

        by_type = NotificationService.list_for_user(
            customer.id, notification_type=NotificationType.CHAT_MESSAGE
        )
        by_entity = NotificationService.list_for_user(customer.id, related_entity_id=5)

        assert list(by_type) == [chat]
        assert by_entity.count() == 2

    def test_unread(self, customer, unread_notification, read_notification):
        assert list(NotificationService.unread_for_user(customer.id)) == [unread_notification]
        assert NotificationService.unread_count(customer.id) == 1


@pytest.mark.django_db
class TestReadState:
    """
    Verifies:
    - mark_read is idempotent and acknowledged on notification-updates
    - Other users' notifications raise AccessDeniedError
    - mark_all_read only touches the caller's unread notifications
    """

    def test_mark_read(
        self,
        customer,
        unread_notification,
        recording_delivery,
        django_capture_on_commit_callbacks,
    ):
        with django_capture_on_commit_callbacks(execute=True):
            first = NotificationService.mark_read(unread_notification.id, customer.id)
            second = NotificationService.mark_read(unread_notification.id, customer.id)

        assert first.is_read and second.is_read
        acks = recording_delivery.to_user(customer.id, queue="notification-updates")
        assert acks[0] == {
            "event": "notification_read",
            "notification_id": unread_notification.id,
        }

    def test_mark_read_not_owner(self, other_customer, unread_notification):
        with pytest.raises(AccessDeniedError) as exc_info:
            NotificationService.mark_read(unread_notification.id, other_customer.id)

        assert exc_info.value.error_code == "NOT_OWNER"
        unread_notification.refresh_from_db()
        assert unread_notification.is_read is False

    def test_mark_read_missing(self, customer):
        with pytest.raises(NotFoundError):
            NotificationService.mark_read(987654, customer.id)

    def test_mark_all_read(
        self,
        customer,
        other_customer,
        recording_delivery,
        django_capture_on_commit_callbacks,
    ):
        NotificationFactory.create_batch(3, recipient=customer)
        theirs = NotificationFactory(recipient=other_customer)

        with django_capture_on_commit_callbacks(execute=True):
            count = NotificationService.mark_all_read(customer.id)

        assert count == 3
        assert NotificationService.mark_all_read(customer.id) == 0
        theirs.refresh_from_db()
        assert theirs.is_read is False
        assert recording_delivery.to_user(customer.id, queue="notification-updates") == [
            {"event": "all_notifications_read", "count": 3}
        ]


@pytest.mark.django_db
class TestRemoval:
    """
    Verifies:
    - delete enforces ownership
    - cleanup removes only read notifications older than the cutoff
    - purge_older_than removes everything older than the cutoff
    """

    def test_delete(self, customer, unread_notification):
        NotificationService.delete(unread_notification.id, customer.id)

        assert not Notification.objects.filter(id=unread_notification.id).exists()

    def test_delete_not_owner(self, other_customer, unread_notification):
        with pytest.raises(AccessDeniedError):
            NotificationService.delete(unread_notification.id, other_customer.id)

    def test_cleanup_only_old_read(self, customer, backdate):
        old_read = NotificationFactory(recipient=customer, is_read=True)
        old_unread = NotificationFactory(recipient=customer)
        recent_read = NotificationFactory(recipient=customer, is_read=True)
        backdate(old_read, 40)
        backdate(old_unread, 40)

        deleted = NotificationService.cleanup(days_ago(30))

        assert deleted == 1
        remaining = set(Notification.objects.values_list("id", flat=True))
        assert remaining == {old_unread.id, recent_read.id}

    def test_purge_older_than(self, customer, backdate):
        old_unread = NotificationFactory(recipient=customer)
        recent = NotificationFactory(recipient=customer)
        backdate(old_unread, 100)

        assert NotificationService.purge_older_than(days_ago(90)) == 1
        assert list(Notification.objects.all()) == [recent]


@pytest.mark.django_db
class TestDeliveryAddresses:
    """
    Verifies:
    - Pushes use the queue and topic names shared with the chat side
    """

    def test_addresses_come_from_delivery_constants(
        self, customer, recording_delivery, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=True):
            notification = NotificationService.notify(
                customer.id, "Hi", "", NotificationType.ACCOUNT_UPDATE
            )
            NotificationService.mark_read(notification.id, customer.id)
            NotificationService.broadcast_system_notice("Maintenance", "")

        assert [p.address for p in recording_delivery.published] == [
            DELIVERY.NOTIFICATIONS_QUEUE,
            DELIVERY.NOTIFICATION_UPDATES_QUEUE,
            DELIVERY.SYSTEM_TOPIC,
        ]
