"""
Chat application configuration.

This app provides live customer-support chat with:
- Per-customer room lifecycle (WAITING -> ACTIVE -> CLOSED)
- Ordered message log with per-recipient read tracking
- Real-time delivery over Django Channels
"""

from django.apps import AppConfig


class ChatConfig(AppConfig):
    """Configuration for the chat application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "chat"
    verbose_name = "Chat"
