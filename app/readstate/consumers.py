"""
WebSocket consumer for unread badges.

Consumers:
    UnreadCountConsumer: One connection per open client session

Authentication:
    Users are authenticated via JWT by authentication.middleware.JWTAuthMiddleware,
    which attaches the user to self.scope["user"].

Channel Groups:
    Each user has a group named "unread_user_{user_id}". Every session of the
    user joins it, so a read in one tab clears the badge in the others.

Message Types (from client):
    - read: Mark a conversation read  {"type": "read", "conversation_id": 12}
    - refresh: Ask for a fresh snapshot  {"type": "refresh"}

Message Types (to client):
    - unread.snapshot: All counts, sent on connect and on refresh
    - unread: One conversation's new count
    - error: Error response
"""

from __future__ import annotations

import logging

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncJsonWebsocketConsumer
from django.contrib.auth.models import AnonymousUser

from core.exceptions import StorageUnavailableError
from readstate.constants import NOTIFY_REASON, WS_CLOSE_CODE
from readstate.notifiers import user_group_name
from readstate.services import get_read_state_service

logger = logging.getLogger(__name__)


class UnreadCountConsumer(AsyncJsonWebsocketConsumer):
    """
    WebSocket consumer pushing unread counts to one user.

    Attributes:
        user_group: Channel layer group for the connected user
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_group: str | None = None

    async def connect(self):
        """
        Handle WebSocket connection.

        Rejects anonymous users with close code 4001. On success joins the
        user's group, accepts, and sends the current snapshot, or an error
        frame if storage is unavailable.
        """
        user = self.scope.get("user")

        if not user or isinstance(user, AnonymousUser):
            logger.warning("Rejected unauthenticated unread WebSocket connection")
            await self.close(code=WS_CLOSE_CODE.UNAUTHENTICATED)
            return

        self.user_group = user_group_name(user.id)
        await self.channel_layer.group_add(self.user_group, self.channel_name)
        await self.accept()
        logger.info(f"User {user.id} connected to unread updates")

        # Keep the socket open; the client can ask again with refresh
        try:
            await self._send_snapshot()
        except StorageUnavailableError as e:
            logger.warning(f"Snapshot unavailable for user {user.id}: {e}")
            await self._send_error(e.message, e.error_code)

    async def disconnect(self, close_code):
        """Leave the user's group if one was joined."""
        if self.user_group:
            await self.channel_layer.group_discard(self.user_group, self.channel_name)
            logger.info(f"Unread WebSocket closed for group {self.user_group}")

    async def receive_json(self, content):
        """
        Handle incoming WebSocket messages.

        Expected message format:
            {"type": "read", "conversation_id": 12}
            {"type": "refresh"}
        """
        message_type = content.get("type")

        try:
            if message_type == "read":
                await self._handle_read(content)
            elif message_type == "refresh":
                await self._send_snapshot()
            else:
                await self._send_error(
                    f"Unknown message type: {message_type}", "UNKNOWN_TYPE"
                )
        except StorageUnavailableError as e:
            await self._send_error(e.message, e.error_code)

    async def _handle_read(self, content):
        conversation_id = content.get("conversation_id")
        if not isinstance(conversation_id, int) or isinstance(conversation_id, bool):
            await self._send_error("conversation_id must be an integer", "INVALID_REQUEST")
            return

        result = await self._mark_read(conversation_id)
        if not result.success:
            await self._send_error(result.error, result.error_code)
            return

        # The notifier only fires when the marker moved; reply to this
        # session otherwise.
        if not result.data.advanced:
            await self.send_json(
                {
                    "type": "unread",
                    "conversation_id": conversation_id,
                    "unread_count": result.data.unread_count,
                    "reason": NOTIFY_REASON.READ,
                }
            )

    async def unread_changed(self, event):
        """
        Handle unread.changed events from the channel layer.

        Sends the new count to the WebSocket client.
        """
        await self.send_json(
            {
                "type": "unread",
                "conversation_id": event["conversation_id"],
                "unread_count": event["unread_count"],
                "reason": event.get("reason"),
            }
        )

    async def _send_snapshot(self):
        counts = await self._get_counts()
        await self.send_json(
            {
                "type": "unread.snapshot",
                "counts": {str(key): value for key, value in counts.items()},
                "total": sum(counts.values()),
            }
        )

    async def _send_error(self, message: str, error_code: str | None):
        await self.send_json(
            {"type": "error", "message": message, "error_code": error_code}
        )

    @database_sync_to_async
    def _get_counts(self) -> dict[int, int]:
        service = get_read_state_service()
        return service.get_unread_counts_for_user(self.scope["user"].id).data

    @database_sync_to_async
    def _mark_read(self, conversation_id: int):
        service = get_read_state_service()
        return service.mark_read(conversation_id, self.scope["user"].id)
