"""
Protocol definitions for generic infrastructure services.

Protocols define contracts that adapters must fulfill, enabling:
- Duck typing with static type checking
- Dependency inversion (services depend on the protocol, not the transport)
- Easy substitution in tests

Available Protocols:
    DeliveryChannel: Best-effort real-time publish/subscribe fabric

Usage:
    from core.delivery import get_delivery_channel
    from core.protocols import DeliveryChannel

    channel: DeliveryChannel = get_delivery_channel()
    channel.publish_to_room(room.id, {"event": "room_closed", ...})

Note:
    - @runtime_checkable allows isinstance() checks against adapters
    - core.delivery.ChannelLayerDelivery is the Channels-backed adapter
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from typing import Any


@runtime_checkable
class DeliveryChannel(Protocol):
    """
    Protocol for the real-time delivery fabric.

    Three addressing modes:
        - Room topic: every connected participant of a chat room
        - User queue: one user's private queue (several named queues per user)
        - Broadcast topic: every client subscribed to the topic

    Contract:
        Delivery is at-most-once to currently connected subscribers.
        A subscriber that is not connected is simply not reached; there is
        no durable queue and no retry. Callers invoke these methods only
        after their state change is committed, and implementations must
        not block on subscriber processing.

    Example:
        class PrintDelivery:
            def publish_to_room(self, room_id, payload): print(room_id, payload)
            def publish_to_user(self, user_id, payload, queue="notifications"): ...
            def broadcast(self, payload, topic="system-notifications"): ...

        channel: DeliveryChannel = PrintDelivery()
    """

    def publish_to_room(self, room_id: int, payload: dict[str, Any]) -> None:
        """
        Publish a payload to every subscriber of a room topic.

        Args:
            room_id: Chat room identifier
            payload: JSON-serializable event body
        """
        ...

    def publish_to_user(
        self,
        user_id: int,
        payload: dict[str, Any],
        queue: str = "notifications",
    ) -> None:
        """
        Publish a payload to one user's private queue.

        Args:
            user_id: Recipient user identifier
            payload: JSON-serializable event body
            queue: Named queue inside the user's private address
                ("notifications", "notification-updates", "chat")
        """
        ...

    def broadcast(
        self,
        payload: dict[str, Any],
        topic: str = "system-notifications",
    ) -> None:
        """
        Publish a payload to every subscriber of a global topic.

        Args:
            payload: JSON-serializable event body
            topic: Broadcast topic ("system-notifications", "admin-new-chat")
        """
        ...
