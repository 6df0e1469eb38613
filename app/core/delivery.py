"""
Delivery Channel adapters built on the Django Channels layer.

ChannelLayerDelivery maps the three DeliveryChannel addressing modes onto
channel-layer groups:

    Room topic      -> "chat_room_<room_id>"
    User queue      -> "user_<user_id>"       (queue name carried in the event)
    Broadcast topic -> "broadcast_<topic>"

Every event is sent with type "delivery.push", which Channels dispatches to
the consumers' ``delivery_push`` handler.

The adapter is best-effort. With the Redis layer a group with no members
costs nothing, and a send that fails is logged and dropped by the caller
through ``publish``. Persisted chat history and notification records
remain the source of truth.

Usage:
    from core.delivery import publish

    publish("publish_to_user", user.id, payload, queue="notifications")

Configuration:
    DELIVERY_CHANNEL_BACKEND: dotted path of the adapter class
        (default "core.delivery.ChannelLayerDelivery")
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.conf import settings
from django.core.signals import setting_changed
from django.dispatch import receiver
from django.utils.module_loading import import_string

if TYPE_CHECKING:
    from typing import Any

    from core.protocols import DeliveryChannel

logger = logging.getLogger(__name__)

DEFAULT_BACKEND = "core.delivery.ChannelLayerDelivery"
EVENT_TYPE = "delivery.push"


# =============================================================================
# Group naming
# =============================================================================


def room_group(room_id: int) -> str:
    """Channel-layer group for a chat room topic."""
    return f"chat_room_{room_id}"


def user_group(user_id: int) -> str:
    """Channel-layer group for a user's private queues."""
    return f"user_{user_id}"


def broadcast_group(topic: str) -> str:
    """Channel-layer group for a global broadcast topic."""
    # Group names only allow ASCII alphanumerics, hyphens, underscores and periods
    return f"broadcast_{topic}"


# =============================================================================
# Channels adapter
# =============================================================================


class ChannelLayerDelivery:
    """
    DeliveryChannel implementation backed by the configured channel layer.

    Attributes:
        alias: CHANNEL_LAYERS alias to publish through
    """

    def __init__(self, alias: str = "default"):
        self.alias = alias

    def _send(self, group: str, event: dict[str, Any]) -> None:
        layer = get_channel_layer(self.alias)
        if layer is None:
            logger.debug(f"No channel layer configured, dropping event for {group}")
            return
        async_to_sync(layer.group_send)(group, {"type": EVENT_TYPE, **event})

    def publish_to_room(self, room_id: int, payload: dict[str, Any]) -> None:
        self._send(
            room_group(room_id),
            {"destination": f"/topic/chat-room/{room_id}", "payload": payload},
        )

    def publish_to_user(
        self,
        user_id: int,
        payload: dict[str, Any],
        queue: str = "notifications",
    ) -> None:
        self._send(
            user_group(user_id),
            {"destination": f"/user/queue/{queue}", "queue": queue, "payload": payload},
        )

    def broadcast(
        self,
        payload: dict[str, Any],
        topic: str = "system-notifications",
    ) -> None:
        self._send(
            broadcast_group(topic),
            {"destination": f"/topic/{topic}", "payload": payload},
        )


# =============================================================================
# Factory
# =============================================================================


@lru_cache(maxsize=1)
def get_delivery_channel() -> DeliveryChannel:
    """
    Return the process-wide DeliveryChannel adapter.

    The class is resolved from settings.DELIVERY_CHANNEL_BACKEND once and
    cached; the cache is cleared whenever that setting changes.
    """
    backend_path = getattr(settings, "DELIVERY_CHANNEL_BACKEND", DEFAULT_BACKEND)
    backend_class = import_string(backend_path)
    return backend_class()


@receiver(setting_changed)
def _reset_delivery_channel(*, setting: str, **kwargs: Any) -> None:
    if setting in {"DELIVERY_CHANNEL_BACKEND", "CHANNEL_LAYERS"}:
        get_delivery_channel.cache_clear()


def publish(method: str, *args: Any, **kwargs: Any) -> bool:
    """
    Call a DeliveryChannel method on the configured adapter, never raising.

    Publishing happens after the business state is committed, so a
    transport problem must never surface as an operation failure. Any
    exception (including a misconfigured backend) is logged and dropped.

    Args:
        method: "publish_to_room", "publish_to_user" or "broadcast"
        *args: Arguments for that method

    Returns:
        True if the publish call returned normally, False otherwise

    Example:
        publish("publish_to_user", user_id, payload, queue="notifications")
    """
    try:
        getattr(get_delivery_channel(), method)(*args, **kwargs)
    except Exception:
        logger.warning(
            f"Delivery {method} failed; subscribers will catch up from persisted state",
            exc_info=True,
        )
        return False
    return True
