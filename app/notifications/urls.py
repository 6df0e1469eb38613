"""
URL configuration for notifications API.

Routes:
    /                     - List notifications (GET)
    /{id}/                - Delete notification (DELETE)
    /unread/              - List unread notifications (GET)
    /unread-count/        - Get unread count (GET)
    /{id}/read/           - Mark single as read (POST)
    /read-all/            - Mark all as read (POST)
    /system-notice/       - Broadcast a system notice (POST, admins)
"""

from rest_framework.routers import DefaultRouter

from notifications.views import NotificationViewSet

router = DefaultRouter()
router.register(r"", NotificationViewSet, basename="notification")

app_name = "notifications"
urlpatterns = router.urls
