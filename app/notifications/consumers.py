"""
WebSocket consumer for live notifications.

NotificationConsumer subscribes a user to their private queues and to the
broadcast topics they are entitled to. Every push arrives as a
"delivery.push" event and is relayed by DeliveryConsumer; the queue name
is part of the destination ("/user/queue/notifications",
"/user/queue/notification-updates", "/user/queue/chat").

Groups joined:
    user_<id>                          - Every user
    broadcast_system-notifications     - Every user
    broadcast_admin-new-chat           - Support admins only

Message Types (from client):
    - mark_read: {"type": "mark_read", "notification_id": 12}
    - mark_all_read: {"type": "mark_all_read"}
"""

from __future__ import annotations

import logging

from channels.db import database_sync_to_async

from chat.constants import DELIVERY
from core.consumers import CLOSE_UNAUTHENTICATED, DeliveryConsumer
from core.delivery import broadcast_group, user_group
from core.exceptions import BaseApplicationError

from notifications.services import NotificationService

logger = logging.getLogger(__name__)


class NotificationConsumer(DeliveryConsumer):
    """WebSocket consumer for a user's notification stream."""

    async def connect(self):
        if not self.is_authenticated:
            logger.warning("Rejected unauthenticated notification connection")
            await self.close(code=CLOSE_UNAUTHENTICATED)
            return

        groups = [user_group(self.user.id), broadcast_group(DELIVERY.SYSTEM_TOPIC)]
        if self.user.is_support_admin:
            groups.append(broadcast_group(DELIVERY.ADMIN_NEW_CHAT_TOPIC))

        await self.join(*groups)
        await self.accept_connection()
        logger.info(f"User {self.user.id} subscribed to notifications")

    async def receive_json(self, content):
        if not isinstance(content, dict):
            await self.send_error("VALIDATION_ERROR", "Frame must be a JSON object")
            return

        frame_type = content.get("type")

        try:
            if frame_type == "mark_read":
                notification_id = content.get("notification_id")
                if not isinstance(notification_id, int):
                    await self.send_error(
                        "VALIDATION_ERROR", "notification_id must be an integer"
                    )
                    return
                await self._mark_read(notification_id)
            elif frame_type == "mark_all_read":
                await self._mark_all_read()
            else:
                await self.send_error("UNKNOWN_FRAME", f"Unknown message type: {frame_type}")
        except BaseApplicationError as e:
            await self.send_error(e.error_code, e.message)

    # Acknowledgements arrive on the notification-updates queue after commit

    @database_sync_to_async
    def _mark_read(self, notification_id: int):
        return NotificationService.mark_read(notification_id, self.user.id)

    @database_sync_to_async
    def _mark_all_read(self) -> int:
        return NotificationService.mark_all_read(self.user.id)
