"""
Django admin configuration for notification models.

Registers the Notification model with the admin site for support staff.
"""

from django.contrib import admin

from notifications.models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    """
    Admin configuration for Notification.

    Provides read-only view of notifications for debugging and support.
    """

    list_display = [
        "id",
        "notification_type",
        "recipient",
        "title",
        "is_read",
        "created_at",
    ]
    list_filter = ["is_read", "notification_type", "created_at"]
    search_fields = ["title", "recipient__email", "related_entity_id"]
    ordering = ["-created_at"]
    readonly_fields = [
        "notification_type",
        "recipient",
        "title",
        "body",
        "related_entity_id",
        "actor_name",
        "created_at",
        "updated_at",
    ]
    raw_id_fields = ["recipient"]
