"""
Celery configuration for the helpdesk chat service.

Background work in this service:
- Notification retention sweeps (notifications.tasks.cleanup_read_notifications,
  notifications.tasks.purge_stale_notifications), scheduled nightly through
  CELERY_BEAT_SCHEDULE and django_celery_beat's DatabaseScheduler
- System notice fan-out (notifications.tasks.broadcast_system_notice),
  queued by the system-notice API endpoint

Redis is both the message broker and result backend. Tasks are
auto-discovered from the tasks.py module of each installed app.
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("config")

# All Celery settings are prefixed with CELERY_ in settings.py
app.config_from_object("django.conf:settings", namespace="CELERY")

app.autodiscover_tasks()
