"""
Notifications app for persisted, live-pushed user notices.

This app provides:
- Notification model for storing user notifications
- NotificationService for creation, broadcast, read state and retention
- Signal handlers that turn chat activity into notifications
- Celery tasks for retention sweeps and async broadcasts
- REST API for listing and managing notifications

Usage:
    from notifications.services import NotificationService

    notification = NotificationService.notify_comment_on_post(
        user_id=author.id,
        post_id=post.id,
        commenter_name="Sam",
    )
"""
