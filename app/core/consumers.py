"""
Base WebSocket consumer for Delivery Channel subscribers.

ChannelLayerDelivery publishes every event with type "delivery.push"
(see core.delivery). Consumers that subscribe to delivery groups extend
DeliveryConsumer, which forwards those events to the client and gives
subclasses a uniform error frame.

Frames (to client):
    {"type": "delivery", "destination": "...", "payload": {...}}
    {"type": "error", "error_code": "...", "message": "..."}

Close Codes:
    4001: Unauthenticated
    4003: Forbidden
    4004: Not found
"""

from __future__ import annotations

import logging

from channels.generic.websocket import AsyncJsonWebsocketConsumer

logger = logging.getLogger(__name__)

JWT_SUBPROTOCOL = "jwt"
CLOSE_UNAUTHENTICATED = 4001
CLOSE_FORBIDDEN = 4003
CLOSE_NOT_FOUND = 4004


class DeliveryConsumer(AsyncJsonWebsocketConsumer):
    """
    Consumer that joins delivery groups and relays "delivery.push" events.

    Attributes:
        groups_joined: Channel-layer groups this connection subscribed to
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.groups_joined: list[str] = []

    @property
    def user(self):
        return self.scope.get("user")

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user and self.user.is_authenticated)

    async def join(self, *group_names: str) -> None:
        for group in group_names:
            await self.channel_layer.group_add(group, self.channel_name)
            self.groups_joined.append(group)

    async def accept_connection(self) -> None:
        """Accept, echoing the jwt subprotocol when the client offered it."""
        subprotocol = (
            JWT_SUBPROTOCOL if JWT_SUBPROTOCOL in self.scope.get("subprotocols", []) else None
        )
        await self.accept(subprotocol=subprotocol)

    async def disconnect(self, close_code):
        """Leave every group joined in connect()."""
        for group in self.groups_joined:
            await self.channel_layer.group_discard(group, self.channel_name)
        if self.groups_joined:
            logger.debug(f"{self.channel_name} left {len(self.groups_joined)} groups ({close_code})")
        self.groups_joined = []

    async def delivery_push(self, event):
        """
        Handle delivery.push events from the channel layer.

        Sends the published payload to the WebSocket client.
        """
        await self.send_json(
            {
                "type": "delivery",
                "destination": event.get("destination"),
                "payload": event.get("payload"),
            }
        )

    async def send_error(self, error_code: str, message: str) -> None:
        await self.send_json({"type": "error", "error_code": error_code, "message": message})
