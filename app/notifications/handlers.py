"""
Signal handlers for cross-app notification events.

This module defines handlers that listen for events
from other apps and trigger appropriate notifications.

Related files:
    - services.py: NotificationService for persisting and pushing
    - apps.py: Handler registration

Event Sources:
    - chat: New participant messages (chat.signals.chat_message_sent)

Usage:
    Handlers are connected in apps.py when the app is ready.
"""

from __future__ import annotations

import logging

from django.dispatch import receiver

from chat.signals import chat_message_sent

logger = logging.getLogger(__name__)


@receiver(chat_message_sent, dispatch_uid="notifications.on_chat_message_sent")
def on_chat_message_sent(sender, message, room, recipient_id, sender_name="", **kwargs):
    """
    Notify the counterpart of a new chat message.

    Runs inside the sending transaction, so the notification commits or
    rolls back together with the message.

    Args:
        sender: Class that sent the signal
        message: The persisted ChatMessage
        room: The ChatRoom it belongs to
        recipient_id: Counterpart user id, or None if no admin is assigned
        sender_name: Display name of the message author
    """
    if recipient_id is None:
        logger.debug(f"Chat message {message.id} in room {room.id} has no recipient to notify")
        return

    from .services import NotificationService

    NotificationService.notify_chat_message(
        user_id=recipient_id,
        room_id=room.id,
        sender_name=sender_name or "Someone",
    )
