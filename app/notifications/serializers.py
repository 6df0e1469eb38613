"""
Serializers for notification API.

This module provides DRF serializers for the notification endpoints.

Serializers:
    NotificationSerializer: Read-only serializer for notification details
    UnreadCountSerializer: Response for unread count endpoint
    MarkAllReadResponseSerializer: Response for mark all read endpoint
    SystemNoticeSerializer: Request body for the admin system-notice endpoint

Usage:
    from notifications.serializers import NotificationSerializer

    serializer = NotificationSerializer(notification)
    data = serializer.data
"""

from __future__ import annotations

from rest_framework import serializers

from notifications.models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    """
    Serializer for Notification model.

    Usage:
        serializer = NotificationSerializer(notification)
        serializer = NotificationSerializer(notifications, many=True)
    """

    class Meta:
        model = Notification
        fields = [
            "id",
            "notification_type",
            "title",
            "body",
            "related_entity_id",
            "actor_name",
            "is_read",
            "created_at",
        ]
        read_only_fields = fields


class UnreadCountSerializer(serializers.Serializer):
    """
    Response serializer for unread count endpoint.

    Fields:
        unread_count: Integer count of unread notifications
    """

    unread_count = serializers.IntegerField()


class MarkAllReadResponseSerializer(serializers.Serializer):
    """
    Response serializer for mark all read endpoint.

    Fields:
        marked_count: Integer count of notifications marked as read
    """

    marked_count = serializers.IntegerField()


class SystemNoticeSerializer(serializers.Serializer):
    """
    Request serializer for broadcasting a system notice.

    Fields:
        title: Notice title
        body: Notice body
    """

    title = serializers.CharField(max_length=255)
    body = serializers.CharField(allow_blank=True, default="")


class SystemNoticeResponseSerializer(serializers.Serializer):
    queued = serializers.BooleanField()
