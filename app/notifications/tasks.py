"""
Celery tasks for notifications.

This module contains periodic retention sweeps and the asynchronous
system-notice broadcast.

Tasks:
    cleanup_read_notifications: Delete read notifications past retention
    purge_stale_notifications: Delete every notification past the max age
    broadcast_system_notice: Fan a system notice out off the request path

Schedule:
    Both sweeps run daily through celery-beat (see CELERY_BEAT_SCHEDULE in
    config/settings.py).

Usage:
    from notifications.tasks import broadcast_system_notice

    broadcast_system_notice.delay("Maintenance", "Back at 02:00 UTC")
"""

from __future__ import annotations

import logging

from celery import shared_task
from django.conf import settings

from core.helpers import days_ago

logger = logging.getLogger(__name__)


DEFAULT_READ_RETENTION_DAYS = 30
DEFAULT_MAX_AGE_DAYS = 90


# =============================================================================
# Retention Tasks
# =============================================================================


@shared_task
def cleanup_read_notifications(days: int | None = None) -> dict:
    """
    Periodic task to delete read notifications older than the retention window.

    Unread notifications are never touched by this sweep.

    Args:
        days: Retention window override; defaults to
            NOTIFICATIONS_READ_RETENTION_DAYS

    Returns:
        Dict with count of notifications deleted.
    """
    from notifications.services import NotificationService

    if days is None:
        days = getattr(
            settings, "NOTIFICATIONS_READ_RETENTION_DAYS", DEFAULT_READ_RETENTION_DAYS
        )

    deleted = NotificationService.cleanup(days_ago(days))

    logger.info(
        f"Deleted {deleted} read notifications older than {days} days",
        extra={"deleted_count": deleted, "retention_days": days},
    )
    return {"deleted_count": deleted}


@shared_task
def purge_stale_notifications(days: int | None = None) -> dict:
    """
    Periodic task to delete all notifications older than the maximum age.

    Args:
        days: Maximum age override; defaults to NOTIFICATIONS_MAX_AGE_DAYS

    Returns:
        Dict with count of notifications deleted.
    """
    from notifications.services import NotificationService

    if days is None:
        days = getattr(settings, "NOTIFICATIONS_MAX_AGE_DAYS", DEFAULT_MAX_AGE_DAYS)

    deleted = NotificationService.purge_older_than(days_ago(days))

    if deleted > 0:
        logger.info(
            f"Purged {deleted} notifications older than {days} days",
            extra={"deleted_count": deleted, "max_age_days": days},
        )
    return {"deleted_count": deleted}


# =============================================================================
# Broadcast Tasks
# =============================================================================


@shared_task(
    bind=True,
    autoretry_for=(Exception,),
    retry_backoff=True,
    retry_kwargs={"max_retries": 3},
)
def broadcast_system_notice(self, title: str, body: str) -> int:
    """
    Broadcast a system notice from a worker.

    Persisting one record per active user can be slow when
    NOTIFICATIONS_PERSIST_BROADCASTS is enabled, so the admin endpoint
    hands the work to this task.

    Args:
        title: Notice title
        body: Notice body

    Returns:
        Number of notification records persisted
    """
    from notifications.services import NotificationService

    logger.info(f"Broadcasting system notice '{title}' (attempt {self.request.retries + 1})")
    return NotificationService.broadcast_system_notice(title, body)
