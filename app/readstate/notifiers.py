"""
Change notifiers for unread counts.

ChannelLayerNotifier pushes an event to the user's group on the Django
Channels layer; every open UnreadCountConsumer for that user receives it.

Event format (channel layer):
    {
        "type": "unread.changed",
        "conversation_id": 12,
        "unread_count": 0,
        "reason": "read",
    }

Delivery is fire-and-forget. A failed push is logged as
NotificationDeliveryFailedError and swallowed; clients resync on their
next fetch or reconnect.
"""

from __future__ import annotations

import asyncio
import logging

from asgiref.sync import async_to_sync
from channels.exceptions import ChannelFull
from channels.layers import get_channel_layer
from redis.exceptions import RedisError

from core.exceptions import NotificationDeliveryFailedError
from readstate import settings as read_state_settings
from readstate.constants import READ_STATE_CONFIG

logger = logging.getLogger(__name__)

# Channel layer transport failures; anything else is a bug and propagates
TRANSPORT_ERRORS = (OSError, RuntimeError, asyncio.TimeoutError, ChannelFull, RedisError)


def user_group_name(user_id: int) -> str:
    """Channel layer group that all of a user's sessions join."""
    return f"{READ_STATE_CONFIG.USER_GROUP_PREFIX}_{user_id}"


def build_unread_event(
    conversation_id: int,
    unread_count: int,
    reason: str,
) -> dict:
    return {
        "type": READ_STATE_CONFIG.UNREAD_CHANGED_EVENT,
        "conversation_id": conversation_id,
        "unread_count": unread_count,
        "reason": reason,
    }


class ChannelLayerNotifier:
    """
    ChangeNotifier that publishes to a Channels layer.

    Args:
        channel_layer: Layer to publish to, defaults to the configured one
    """

    def __init__(self, channel_layer=None):
        self._channel_layer = channel_layer

    @property
    def channel_layer(self):
        if self._channel_layer is None:
            self._channel_layer = get_channel_layer()
        return self._channel_layer

    def notify_read_state_changed(
        self,
        conversation_id: int,
        user_id: int,
        unread_count: int,
        reason: str,
    ) -> bool:
        group = user_group_name(user_id)
        event = build_unread_event(conversation_id, unread_count, reason)

        try:
            layer = self.channel_layer
            if layer is None:
                raise RuntimeError("No channel layer configured")
            async_to_sync(layer.group_send)(group, event)
        except TRANSPORT_ERRORS as exc:
            # Transport failures are non-fatal for the caller
            error = NotificationDeliveryFailedError(
                "Failed to deliver unread count update",
                details={
                    "conversation_id": conversation_id,
                    "user_id": user_id,
                    "reason": reason,
                    "cause": str(exc),
                },
            )
            logger.warning(f"{error}: {error.details}")
            return False

        logger.debug(
            f"Sent unread update to {group}: conversation {conversation_id} "
            f"count={unread_count} reason={reason}"
        )
        return True


class NoopNotifier:
    """ChangeNotifier that drops every event."""

    def notify_read_state_changed(
        self,
        conversation_id: int,
        user_id: int,
        unread_count: int,
        reason: str,
    ) -> bool:
        return False


def get_default_notifier():
    """Notifier selected by READ_STATE_NOTIFICATIONS_ENABLED."""
    if read_state_settings.notifications_enabled():
        return ChannelLayerNotifier()
    return NoopNotifier()
