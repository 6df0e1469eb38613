"""
WebSocket consumers for the chat application.

This module implements the WebSocket consumer for a live support chat room,
handling connection authorization and the client's message and read frames.
Outbound traffic is not produced here: ChatCoordinator publishes to the room
topic after each commit and DeliveryConsumer relays it.

Consumers:
    ChatConsumer: Handles WebSocket connections for one chat room

Authentication:
    Users are authenticated via JWT token (query parameter or subprotocol).
    JWTAuthMiddleware attaches the user to self.scope["user"].

Channel Groups:
    Each room has a channel group named "chat_room_{room_id}".

Message Types (from client):
    - message: {"type": "message", "content": "...", "message_type": "text"}
    - read: {"type": "read"}

Message Types (to client):
    - delivery: Event published to the room topic
    - read: Acknowledgement with the number of messages marked
    - error: Error response
"""

from __future__ import annotations

import logging

from channels.db import database_sync_to_async

from core.consumers import (
    CLOSE_FORBIDDEN,
    CLOSE_NOT_FOUND,
    CLOSE_UNAUTHENTICATED,
    DeliveryConsumer,
)
from core.delivery import room_group
from core.exceptions import AccessDeniedError, BaseApplicationError, NotFoundError

from chat.models import MessageType, SystemMessageEvent
from chat.services import ChatCoordinator

logger = logging.getLogger(__name__)


class ChatConsumer(DeliveryConsumer):
    """
    WebSocket consumer for a support chat room.

    Handles:
        - Connection authentication and authorization
        - Joining/leaving the room's channel group
        - Sending messages and marking the room read
        - Dropping an admin's connection when the room is reassigned

    Attributes:
        room_id: Id of the connected room
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.room_id: int | None = None

    async def connect(self):
        """
        Handle WebSocket connection.

        Validates:
            1. User is authenticated (else 4001)
            2. Room exists (else 4004)
            3. User is the room's customer or assigned admin (else 4003)

        On success, joins the room group and accepts the connection.
        """
        self.room_id = int(self.scope["url_route"]["kwargs"]["room_id"])

        if not self.is_authenticated:
            logger.warning(f"Rejected unauthenticated connection to chat room {self.room_id}")
            await self.close(code=CLOSE_UNAUTHENTICATED)
            return

        try:
            await self._get_room()
        except NotFoundError:
            logger.warning(
                f"User {self.user.id} tried to connect to non-existent chat room {self.room_id}"
            )
            await self.close(code=CLOSE_NOT_FOUND)
            return
        except AccessDeniedError:
            await self.close(code=CLOSE_FORBIDDEN)
            return

        await self.join(room_group(self.room_id))
        await self.accept_connection()
        logger.info(f"User {self.user.id} connected to chat room {self.room_id}")

    async def receive_json(self, content):
        """
        Handle incoming WebSocket frames.

        Expected frame format:
            {"type": "message", "content": "Hello!"}
            {"type": "message", "content": "https://...", "message_type": "image"}
            {"type": "read"}

        Args:
            content: Parsed JSON frame from client
        """
        if not isinstance(content, dict):
            await self.send_error("VALIDATION_ERROR", "Frame must be a JSON object")
            return

        frame_type = content.get("type")

        try:
            if frame_type == "message":
                await self._send_message(
                    content.get("content") or "",
                    content.get("message_type") or MessageType.TEXT,
                )
            elif frame_type == "read":
                count = await self._mark_read()
                await self.send_json({"type": "read", "marked_count": count})
            else:
                await self.send_error("UNKNOWN_FRAME", f"Unknown message type: {frame_type}")
        except BaseApplicationError as e:
            await self.send_error(e.error_code, e.message)

    async def delivery_push(self, event):
        """
        Relay room events; close an admin's socket when they lose the room.
        """
        await super().delivery_push(event)

        payload = event.get("payload") or {}
        if payload.get("event") == SystemMessageEvent.ADMIN_REASSIGNED:
            room = payload.get("room") or {}
            if self.user.id not in (room.get("customer_id"), room.get("admin_id")):
                logger.info(
                    f"Closing chat room {self.room_id} socket for reassigned admin "
                    f"{self.user.id}"
                )
                await self.close(code=CLOSE_FORBIDDEN)

    @database_sync_to_async
    def _get_room(self):
        return ChatCoordinator.get_chat_room(self.room_id, self.user.id)

    @database_sync_to_async
    def _send_message(self, content: str, message_type: str):
        return ChatCoordinator.send_message(self.room_id, self.user.id, content, message_type)

    @database_sync_to_async
    def _mark_read(self) -> int:
        return ChatCoordinator.mark_read(self.room_id, self.user.id)
