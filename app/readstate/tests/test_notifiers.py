"""
Tests for read-state change notifiers.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from asgiref.sync import async_to_sync
from channels.exceptions import ChannelFull
from channels.layers import get_channel_layer
from redis.exceptions import ConnectionError as RedisConnectionError

from readstate.constants import NOTIFY_REASON, READ_STATE_CONFIG
from readstate.notifiers import (
    ChannelLayerNotifier,
    NoopNotifier,
    build_unread_event,
    get_default_notifier,
    user_group_name,
)


class TestUserGroupName:
    def test_uses_prefix_and_user_id(self):
        assert user_group_name(42) == f"{READ_STATE_CONFIG.USER_GROUP_PREFIX}_42"


class TestChannelLayerNotifier:
    """
    Tests for ChannelLayerNotifier.notify_read_state_changed().

    Verifies:
    - Event shape and target group
    - Transport failures are swallowed and logged
    """

    def test_sends_event_to_user_group(self):
        layer = MagicMock()
        layer.group_send = AsyncMock()
        notifier = ChannelLayerNotifier(channel_layer=layer)

        delivered = notifier.notify_read_state_changed(7, 3, 5, NOTIFY_REASON.NEW_MESSAGE)

        assert delivered is True
        layer.group_send.assert_awaited_once_with(
            "unread_user_3",
            {
                "type": "unread.changed",
                "conversation_id": 7,
                "unread_count": 5,
                "reason": "new_message",
            },
        )

    def test_delivery_failure_is_logged_not_raised(self):
        """
        A broken transport returns False and logs a warning.

        Why it matters: Marking read must succeed even when Redis is down;
        the badge resyncs on the next fetch.
        """
        layer = MagicMock()
        layer.group_send = AsyncMock(side_effect=ConnectionError("redis down"))
        notifier = ChannelLayerNotifier(channel_layer=layer)

        with patch("readstate.notifiers.logger") as logger:
            delivered = notifier.notify_read_state_changed(7, 3, 0, NOTIFY_REASON.READ)

        assert delivered is False
        logger.warning.assert_called_once()
        message = logger.warning.call_args.args[0]
        assert "NOTIFICATION_DELIVERY_FAILED" in message
        assert "redis down" in message

    @pytest.mark.parametrize(
        "error",
        [RedisConnectionError("refused"), ChannelFull(), TimeoutError("slow")],
    )
    def test_transport_errors_are_swallowed(self, error):
        layer = MagicMock()
        layer.group_send = AsyncMock(side_effect=error)
        notifier = ChannelLayerNotifier(channel_layer=layer)

        assert notifier.notify_read_state_changed(7, 3, 0, NOTIFY_REASON.READ) is False

    def test_programming_errors_propagate(self):
        """
        Only transport failures are absorbed.

        Why it matters: A malformed event is a bug that should fail loudly
        rather than silently stop all badge updates.
        """
        layer = MagicMock()
        layer.group_send = AsyncMock(side_effect=TypeError("bad event"))
        notifier = ChannelLayerNotifier(channel_layer=layer)

        with pytest.raises(TypeError):
            notifier.notify_read_state_changed(7, 3, 0, NOTIFY_REASON.READ)

    def test_missing_channel_layer_is_a_delivery_failure(self, settings):
        settings.CHANNEL_LAYERS = {}
        notifier = ChannelLayerNotifier()

        assert notifier.notify_read_state_changed(7, 3, 0, NOTIFY_REASON.READ) is False

    def test_event_reaches_in_memory_layer(self):
        layer = get_channel_layer()
        channel_name = async_to_sync(layer.new_channel)()
        async_to_sync(layer.group_add)(user_group_name(11), channel_name)

        ChannelLayerNotifier(channel_layer=layer).notify_read_state_changed(
            4, 11, 2, NOTIFY_REASON.NEW_MESSAGE
        )
        received = async_to_sync(layer.receive)(channel_name)

        assert received == build_unread_event(4, 2, NOTIFY_REASON.NEW_MESSAGE)
        async_to_sync(layer.group_discard)(user_group_name(11), channel_name)


class TestNoopNotifier:
    def test_reports_nothing_delivered(self):
        assert NoopNotifier().notify_read_state_changed(1, 2, 3, "read") is False


class TestGetDefaultNotifier:
    def test_enabled_returns_channel_layer_notifier(self, settings):
        settings.READ_STATE_NOTIFICATIONS_ENABLED = True

        assert isinstance(get_default_notifier(), ChannelLayerNotifier)

    def test_disabled_returns_noop(self, settings):
        settings.READ_STATE_NOTIFICATIONS_ENABLED = False

        assert isinstance(get_default_notifier(), NoopNotifier)
