"""
Views for notification API.

This module provides the ViewSet for notification endpoints.

ViewSets:
    NotificationViewSet: List, delete and read-status actions

Endpoints:
    GET /api/v1/notifications/ - List user's notifications (paginated, filtered)
    GET /api/v1/notifications/unread/ - List unread notifications
    GET /api/v1/notifications/unread-count/ - Get unread count
    POST /api/v1/notifications/{id}/read/ - Mark single notification as read
    POST /api/v1/notifications/read-all/ - Mark all notifications as read
    DELETE /api/v1/notifications/{id}/ - Delete a notification
    POST /api/v1/notifications/system-notice/ - Broadcast a system notice (admins)

Usage:
    # In urls.py
    from rest_framework.routers import DefaultRouter
    from notifications.views import NotificationViewSet

    router = DefaultRouter()
    router.register(r"", NotificationViewSet, basename="notification")
"""

from __future__ import annotations

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from drf_spectacular.utils import (
    extend_schema,
    extend_schema_view,
    OpenApiParameter,
    OpenApiResponse,
)

from authentication.permissions import IsSupportAdmin
from notifications.serializers import (
    MarkAllReadResponseSerializer,
    NotificationSerializer,
    SystemNoticeResponseSerializer,
    SystemNoticeSerializer,
    UnreadCountSerializer,
)
from notifications.services import NotificationService
from notifications.tasks import broadcast_system_notice


@extend_schema_view(
    list=extend_schema(
        operation_id="list_notifications",
        summary="List notifications",
        description=(
            "Get paginated list of notifications for the authenticated user, "
            "newest first. Supports filtering by read status and notification type."
        ),
        parameters=[
            OpenApiParameter(
                name="is_read",
                type=bool,
                location=OpenApiParameter.QUERY,
                description="Filter by read status (true/false)",
                required=False,
            ),
            OpenApiParameter(
                name="type",
                type=str,
                location=OpenApiParameter.QUERY,
                description="Filter by notification type",
                required=False,
            ),
        ],
        tags=["Notifications"],
    ),
    destroy=extend_schema(
        operation_id="delete_notification",
        summary="Delete notification",
        description="Delete one of the authenticated user's notifications.",
        responses={
            204: None,
            403: OpenApiResponse(description="Notification belongs to another user"),
            404: OpenApiResponse(description="Notification not found"),
        },
        tags=["Notifications"],
    ),
)
class NotificationViewSet(
    mixins.ListModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """
    ViewSet for notification operations.

    Provides:
    - list: GET / - List user's notifications with filtering
    - destroy: DELETE /{id}/ - Delete a notification
    - unread: GET /unread/ - List unread notifications
    - unread_count: GET /unread-count/ - Get badge count
    - read: POST /{id}/read/ - Mark single as read
    - read_all: POST /read-all/ - Mark all as read
    - system_notice: POST /system-notice/ - Broadcast (admins only)

    Permissions:
    - All endpoints require authentication
    - Users can only touch their own notifications; ownership is enforced
      by NotificationService
    """

    permission_classes = [IsAuthenticated]
    serializer_class = NotificationSerializer
    lookup_value_regex = r"\d+"

    def get_queryset(self):
        """
        Get queryset filtered to user's notifications.

        Supports query parameters:
        - is_read: "true" or "false" to filter by read status
        - type: notification type to filter by

        Returns:
            QuerySet of Notification objects for current user
        """
        is_read = self.request.query_params.get("is_read")
        return NotificationService.list_for_user(
            self.request.user.id,
            notification_type=self.request.query_params.get("type") or None,
            is_read=None if is_read is None else is_read.lower() == "true",
        )

    def destroy(self, request, *args, **kwargs):
        NotificationService.delete(int(kwargs["pk"]), request.user.id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        operation_id="list_unread_notifications",
        summary="List unread notifications",
        responses={200: NotificationSerializer(many=True)},
        tags=["Notifications"],
    )
    @action(detail=False, methods=["get"])
    def unread(self, request):
        """Unread notifications, newest first, unpaginated."""
        notifications = NotificationService.unread_for_user(request.user.id)
        serializer = self.get_serializer(notifications, many=True)
        return Response(serializer.data)

    @extend_schema(
        operation_id="get_unread_notification_count",
        summary="Get unread notification count",
        description="Get the count of unread notifications for badge display.",
        responses={200: UnreadCountSerializer},
        tags=["Notifications"],
    )
    @action(detail=False, methods=["get"], url_path="unread-count")
    def unread_count(self, request):
        """
        Get count of unread notifications.

        Returns:
            {"unread_count": <int>}
        """
        count = NotificationService.unread_count(request.user.id)
        serializer = UnreadCountSerializer({"unread_count": count})
        return Response(serializer.data)

    @extend_schema(
        operation_id="mark_notification_read",
        summary="Mark notification as read",
        description=(
            "Mark a single notification as read. "
            "This operation is idempotent - already-read notifications return success."
        ),
        request=None,
        responses={
            200: NotificationSerializer,
            403: OpenApiResponse(description="Notification belongs to another user"),
            404: OpenApiResponse(description="Notification not found"),
        },
        tags=["Notifications"],
    )
    @action(detail=True, methods=["post"])
    def read(self, request, pk=None):
        """
        Mark single notification as read.

        Returns:
            Serialized notification data
        """
        notification = NotificationService.mark_read(int(pk), request.user.id)
        serializer = self.get_serializer(notification)
        return Response(serializer.data)

    @extend_schema(
        operation_id="mark_all_notifications_read",
        summary="Mark all notifications as read",
        description="Mark all unread notifications for the authenticated user as read.",
        request=None,
        responses={200: MarkAllReadResponseSerializer},
        tags=["Notifications"],
    )
    @action(detail=False, methods=["post"], url_path="read-all")
    def read_all(self, request):
        """
        Mark all user's notifications as read.

        Returns:
            {"marked_count": <int>}
        """
        count = NotificationService.mark_all_read(request.user.id)
        serializer = MarkAllReadResponseSerializer({"marked_count": count})
        return Response(serializer.data)

    @extend_schema(
        operation_id="broadcast_system_notice",
        summary="Broadcast a system notice",
        description=(
            "Queue a system notice for every connected user. "
            "Only support admins may call this endpoint."
        ),
        request=SystemNoticeSerializer,
        responses={
            202: SystemNoticeResponseSerializer,
            403: OpenApiResponse(description="Caller is not a support admin"),
        },
        tags=["Notifications"],
    )
    @action(
        detail=False,
        methods=["post"],
        url_path="system-notice",
        permission_classes=[IsAuthenticated, IsSupportAdmin],
    )
    def system_notice(self, request):
        serializer = SystemNoticeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        broadcast_system_notice.delay(
            serializer.validated_data["title"],
            serializer.validated_data["body"],
        )
        return Response(
            SystemNoticeResponseSerializer({"queued": True}).data,
            status=status.HTTP_202_ACCEPTED,
        )
