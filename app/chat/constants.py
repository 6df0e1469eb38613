"""
Constants and configuration for the support chat.

This module centralizes configuration values for:
- Message content limits
- Delivery topics and user queues
- Page sizes for transcript and room listings

Import example:
    from chat.constants import DELIVERY, MESSAGE_CONFIG
"""

from typing import Final


# =============================================================================
# Message Configuration
# =============================================================================


class MESSAGE_CONFIG:
    """Configuration for message operations."""

    # Content limits (overridable via CHAT_MESSAGE_MAX_LENGTH)
    MAX_CONTENT_LENGTH: Final[int] = 5000
    MIN_CONTENT_LENGTH: Final[int] = 1

    # Paging
    DEFAULT_PAGE_SIZE: Final[int] = 20


# =============================================================================
# Delivery Configuration
# =============================================================================


class DELIVERY:
    """Topic and queue names used when publishing chat events."""

    # Broadcast topics
    ADMIN_NEW_CHAT_TOPIC: Final[str] = "admin-new-chat"
    SYSTEM_TOPIC: Final[str] = "system-notifications"

    # Per-user queues
    CHAT_QUEUE: Final[str] = "chat"
    NOTIFICATIONS_QUEUE: Final[str] = "notifications"
    NOTIFICATION_UPDATES_QUEUE: Final[str] = "notification-updates"

    # Event names carried in payloads
    EVENT_NEW_CHAT_ROOM: Final[str] = "new_chat_room"
    EVENT_CHAT_ASSIGNED: Final[str] = "chat_assigned"
    EVENT_CHAT_MESSAGE: Final[str] = "chat_message"
    EVENT_ROOM_CLOSED: Final[str] = "room_closed"
    EVENT_MESSAGES_READ: Final[str] = "messages_read"
