"""
Notification service layer.

This module provides the business logic for in-app notifications: persisting
a notice, pushing it live to its recipient, and managing read state and
retention.

Services:
    NotificationService: Creation, broadcast, read status and cleanup

Design Principles:
    - Services are stateless (use class methods)
    - Expected failures raise core.exceptions subclasses
    - A notice is persisted first; the live push is registered with
      after_commit and never fails the operation
    - Recipients reconnecting later read persisted notices over REST

Usage:
    from notifications.services import NotificationService

    # Create a notification and push it to the recipient
    notification = NotificationService.notify(
        recipient_id=user.id,
        title="Account updated",
        body="Your email address was changed.",
        notification_type=NotificationType.ACCOUNT_UPDATE,
    )

    # Typed helpers
    NotificationService.notify_chat_message(user.id, room.id, "Sam")

    # Mark as read
    NotificationService.mark_read(notification.id, user.id)

    # Mark all as read
    count = NotificationService.mark_all_read(user.id)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from django.conf import settings

from authentication.models import User
from chat.constants import DELIVERY
from core.delivery import publish
from core.exceptions import AccessDeniedError, NotFoundError
from core.services import BaseService

from notifications.models import Notification, NotificationType

if TYPE_CHECKING:
    from datetime import datetime

    from django.db.models import QuerySet


def notification_payload(notification: Notification) -> dict[str, Any]:
    """JSON-safe representation pushed to a recipient's notifications queue."""
    return {
        "id": notification.id,
        "notification_type": str(notification.notification_type),
        "title": notification.title,
        "body": notification.body,
        "related_entity_id": notification.related_entity_id,
        "actor_name": notification.actor_name,
        "is_read": notification.is_read,
        "created_at": notification.created_at.isoformat(),
    }


class NotificationService(BaseService):
    """
    Service for notification operations.

    Methods:
        notify: Persist a notification and push it to the recipient
        notify_comment_on_post / notify_reply_to_comment /
        notify_chat_message: Typed producers
        broadcast_system_notice: Push a notice to every connected user
        list_for_user / unread_for_user / unread_count: Reads
        mark_read / mark_all_read: Read state
        delete / cleanup / purge_older_than: Removal
    """

    # =========================================================================
    # Creation
    # =========================================================================

    @classmethod
    def notify(
        cls,
        recipient_id: int,
        title: str,
        body: str,
        notification_type: str,
        related_entity_id: str | int | None = None,
        actor_name: str = "",
    ) -> Notification:
        """
        Persist a notification and push it to the recipient.

        The push goes to the recipient's "notifications" queue once the
        surrounding transaction commits. If the recipient is offline the
        push is dropped; the record remains readable over REST.

        Args:
            recipient_id: User receiving the notification
            title: Short title
            body: Body text
            notification_type: One of NotificationType
            related_entity_id: Id of the triggering entity, stored as text
            actor_name: Display name of whoever triggered it

        Returns:
            The created Notification

        Raises:
            NotFoundError: Unknown recipient
        """
        if not User.objects.filter(id=recipient_id).exists():
            raise NotFoundError(
                f"User {recipient_id} not found",
                error_code="USER_NOT_FOUND",
                details={"user_id": recipient_id},
            )

        with cls.atomic():
            notification = Notification.objects.create(
                recipient_id=recipient_id,
                notification_type=notification_type,
                title=title,
                body=body,
                related_entity_id=(
                    str(related_entity_id) if related_entity_id is not None else None
                ),
                actor_name=actor_name or "",
            )
            cls.after_commit(
                publish,
                "publish_to_user",
                recipient_id,
                notification_payload(notification),
                queue=DELIVERY.NOTIFICATIONS_QUEUE,
            )

        cls.get_logger().info(
            f"Created notification {notification.id} of type {notification_type} "
            f"for user {recipient_id}"
        )
        return notification

    @classmethod
    def notify_comment_on_post(
        cls, user_id: int, post_id: int | str, commenter_name: str
    ) -> Notification:
        return cls.notify(
            recipient_id=user_id,
            title="New comment",
            body=f"{commenter_name} commented on your post",
            notification_type=NotificationType.COMMENT_ON_POST,
            related_entity_id=post_id,
            actor_name=commenter_name,
        )

    @classmethod
    def notify_reply_to_comment(
        cls, user_id: int, comment_id: int | str, replier_name: str
    ) -> Notification:
        return cls.notify(
            recipient_id=user_id,
            title="New reply",
            body=f"{replier_name} replied to your comment",
            notification_type=NotificationType.REPLY_TO_COMMENT,
            related_entity_id=comment_id,
            actor_name=replier_name,
        )

    @classmethod
    def notify_chat_message(
        cls, user_id: int, room_id: int | str, sender_name: str
    ) -> Notification:
        return cls.notify(
            recipient_id=user_id,
            title="New chat message",
            body=f"{sender_name} sent you a message",
            notification_type=NotificationType.CHAT_MESSAGE,
            related_entity_id=room_id,
            actor_name=sender_name,
        )

    @classmethod
    def broadcast_system_notice(cls, title: str, body: str) -> int:
        """
        Push a system notice to the system-notifications topic.

        Delivery-only unless NOTIFICATIONS_PERSIST_BROADCASTS is set, in
        which case one SYSTEM_NOTICE record is stored per active user so
        offline users see it later.

        Returns:
            Number of notification records persisted (0 when delivery-only)
        """
        persisted = 0
        with cls.atomic():
            if getattr(settings, "NOTIFICATIONS_PERSIST_BROADCASTS", False):
                recipients = User.objects.filter(is_active=True).values_list(
                    "id", flat=True
                )
                created = Notification.objects.bulk_create(
                    [
                        Notification(
                            recipient_id=user_id,
                            notification_type=NotificationType.SYSTEM_NOTICE,
                            title=title,
                            body=body,
                        )
                        for user_id in recipients
                    ]
                )
                persisted = len(created)

            cls.after_commit(
                publish,
                "broadcast",
                {
                    "notification_type": str(NotificationType.SYSTEM_NOTICE),
                    "title": title,
                    "body": body,
                },
                topic=DELIVERY.SYSTEM_TOPIC,
            )

        cls.get_logger().info(
            f"Broadcast system notice '{title}' ({persisted} records persisted)"
        )
        return persisted

    # =========================================================================
    # Reads
    # =========================================================================

    @staticmethod
    def list_for_user(
        user_id: int,
        notification_type: str | None = None,
        related_entity_id: str | int | None = None,
        is_read: bool | None = None,
    ) -> QuerySet[Notification]:
        """A user's notifications, newest first, optionally filtered."""
        queryset = Notification.objects.filter(recipient_id=user_id)
        if notification_type:
            queryset = queryset.filter(notification_type=notification_type)
        if related_entity_id is not None:
            queryset = queryset.filter(related_entity_id=str(related_entity_id))
        if is_read is not None:
            queryset = queryset.filter(is_read=is_read)
        return queryset.order_by("-created_at", "-id")

    @classmethod
    def unread_for_user(cls, user_id: int) -> QuerySet[Notification]:
        return cls.list_for_user(user_id, is_read=False)

    @staticmethod
    def unread_count(user_id: int) -> int:
        return Notification.objects.filter(recipient_id=user_id, is_read=False).count()

    # =========================================================================
    # Read state
    # =========================================================================

    @classmethod
    def mark_read(cls, notification_id: int, requester_id: int) -> Notification:
        """
        Mark a single notification as read.

        Operation is idempotent. The requester's other sessions receive an
        acknowledgement on the "notification-updates" queue.

        Raises:
            NotFoundError: Notification does not exist
            AccessDeniedError: Requester does not own it
        """
        with cls.atomic():
            notification = cls._get_owned(notification_id, requester_id, lock=True)
            if not notification.is_read:
                notification.is_read = True
                notification.save(update_fields=["is_read", "updated_at"])
                cls.get_logger().debug(f"Marked notification {notification.id} as read")

            cls.after_commit(
                publish,
                "publish_to_user",
                requester_id,
                {"event": "notification_read", "notification_id": notification.id},
                queue=DELIVERY.NOTIFICATION_UPDATES_QUEUE,
            )

        return notification

    @classmethod
    def mark_all_read(cls, user_id: int) -> int:
        """
        Mark all of a user's unread notifications as read.

        Returns:
            Count of notifications marked as read
        """
        with cls.atomic():
            count = Notification.objects.filter(
                recipient_id=user_id,
                is_read=False,
            ).update(is_read=True)

            cls.after_commit(
                publish,
                "publish_to_user",
                user_id,
                {"event": "all_notifications_read", "count": count},
                queue=DELIVERY.NOTIFICATION_UPDATES_QUEUE,
            )

        cls.get_logger().info(f"Marked {count} notifications as read for user {user_id}")
        return count

    # =========================================================================
    # Removal
    # =========================================================================

    @classmethod
    def delete(cls, notification_id: int, requester_id: int) -> None:
        """
        Delete one of the requester's notifications.

        Raises:
            NotFoundError: Notification does not exist
            AccessDeniedError: Requester does not own it
        """
        notification = cls._get_owned(notification_id, requester_id)
        notification.delete()
        cls.get_logger().debug(f"Deleted notification {notification_id}")

    @classmethod
    def cleanup(cls, retention_cutoff: datetime) -> int:
        """
        Delete read notifications created before the cutoff.

        Unread notifications are kept regardless of age.

        Returns:
            Number of notifications deleted
        """
        deleted, _ = Notification.objects.filter(
            is_read=True,
            created_at__lt=retention_cutoff,
        ).delete()
        cls.get_logger().info(
            f"Cleaned up {deleted} read notifications older than {retention_cutoff}"
        )
        return deleted

    @classmethod
    def purge_older_than(cls, cutoff: datetime) -> int:
        """Delete every notification, read or not, created before the cutoff."""
        deleted, _ = Notification.objects.filter(created_at__lt=cutoff).delete()
        cls.get_logger().info(f"Purged {deleted} notifications older than {cutoff}")
        return deleted

    # =========================================================================
    # Helpers
    # =========================================================================

    @classmethod
    def _get_owned(
        cls, notification_id: int, requester_id: int, lock: bool = False
    ) -> Notification:
        queryset = Notification.objects.all()
        if lock:
            queryset = queryset.select_for_update()
        try:
            notification = queryset.get(id=notification_id)
        except Notification.DoesNotExist:
            raise NotFoundError(
                f"Notification {notification_id} not found",
                error_code="NOTIFICATION_NOT_FOUND",
                details={"notification_id": notification_id},
            )

        if notification.recipient_id != requester_id:
            cls.get_logger().warning(
                f"User {requester_id} attempted to access notification "
                f"{notification_id} owned by user {notification.recipient_id}"
            )
            raise AccessDeniedError(
                "Cannot modify a notification you don't own",
                error_code="NOT_OWNER",
                details={"notification_id": notification_id},
            )
        return notification
