"""
Notification system models.

This module defines the persisted in-app notification record:
- NotificationType: Kinds of notice a user can receive
- Notification: One notice addressed to one user

Design Decisions:
    - Notification inherits from BaseModel (timestamps, ordering)
    - Notifications are immutable records; only is_read changes
    - The triggering entity is referenced by an opaque string id, never a
      foreign key, so deleting a post or room leaves the notice intact
    - The actor's display name is denormalized for the same reason

Usage:
    from notifications.models import Notification, NotificationType

    Notification.objects.create(
        recipient=user,
        notification_type=NotificationType.CHAT_MESSAGE,
        title="New chat message",
        body="Sam sent you a message",
        related_entity_id=str(room.id),
        actor_name="Sam",
    )
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from core.models import BaseModel


# =============================================================================
# Enums
# =============================================================================


class NotificationType(models.TextChoices):
    """Kinds of notification."""

    COMMENT_ON_POST = "comment_on_post", "Comment on post"
    REPLY_TO_COMMENT = "reply_to_comment", "Reply to comment"
    CHAT_MESSAGE = "chat_message", "Chat message"
    SYSTEM_NOTICE = "system_notice", "System notice"
    ACCOUNT_UPDATE = "account_update", "Account update"


# =============================================================================
# Notification
# =============================================================================


class Notification(BaseModel):
    """
    Individual notification record for a user.

    Fields:
        recipient: User receiving the notification (scopes all queries)
        notification_type: Kind of notice
        title: Short rendered title
        body: Rendered body text
        related_entity_id: Opaque id of the triggering entity (post, room...)
        actor_name: Display name of whoever triggered it, if anyone
        is_read: Whether recipient has read this notification

    Inherits from BaseModel:
        created_at: Timestamp (auto, indexed)
        updated_at: Timestamp (auto)

    Note:
        - recipient CASCADE: Notifications deleted when user deleted
        - is_read only ever flips False -> True
    """

    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
        db_index=True,
        help_text="User receiving this notification",
    )

    notification_type = models.CharField(
        max_length=30,
        choices=NotificationType.choices,
        db_index=True,
        help_text="Kind of notification",
    )

    title = models.CharField(
        max_length=255,
        help_text="Rendered notification title",
    )

    body = models.TextField(
        blank=True,
        default="",
        help_text="Rendered notification body",
    )

    related_entity_id = models.CharField(
        max_length=64,
        null=True,
        blank=True,
        help_text="Id of the entity that triggered this notification",
    )

    actor_name = models.CharField(
        max_length=150,
        blank=True,
        default="",
        help_text="Display name of the user who triggered this notification",
    )

    is_read = models.BooleanField(
        default=False,
        db_index=True,
        help_text="Whether recipient has read this notification",
    )

    class Meta:
        db_table = "notifications_notification"
        ordering = ["-created_at", "-id"]  # Newest first
        indexes = [
            # Primary query: user's unread notifications
            models.Index(
                fields=["recipient", "is_read", "-created_at"],
                name="notif_recipient_unread_idx",
            ),
            # User's notifications by type
            models.Index(
                fields=["recipient", "notification_type"],
                name="notif_recipient_type_idx",
            ),
            # Retention sweeps
            models.Index(
                fields=["is_read", "created_at"],
                name="notif_read_created_idx",
            ),
        ]

    def __str__(self) -> str:
        read_status = "read" if self.is_read else "unread"
        return (
            f"Notification({self.notification_type}) -> "
            f"User {self.recipient_id} [{read_status}]"
        )
