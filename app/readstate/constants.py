"""
Constants for the read-state module.

Tunable values (query timeout, feature switches) are Django settings;
see READ_STATE_* in config/settings.py. Names here are part of the
wire contract with clients and must not change between releases.

Import example:
    from readstate.constants import READ_STATE_CONFIG, NOTIFY_REASON
"""

from typing import Final


# =============================================================================
# Channel Layer Configuration
# =============================================================================


class READ_STATE_CONFIG:
    """Configuration for read-state notifications and storage."""

    # Per-user group on the channel layer: "unread_user_<user_id>"
    USER_GROUP_PREFIX: Final[str] = "unread_user"

    # Channel layer event type, dispatched to UnreadCountConsumer.unread_changed
    UNREAD_CHANGED_EVENT: Final[str] = "unread.changed"

    # Used when READ_STATE_QUERY_TIMEOUT_MS is not configured
    DEFAULT_QUERY_TIMEOUT_MS: Final[int] = 2000


# =============================================================================
# Notification Reasons
# =============================================================================


class NOTIFY_REASON:
    """Why an unread count changed, sent with every push."""

    READ: Final[str] = "read"
    NEW_MESSAGE: Final[str] = "new_message"


# =============================================================================
# WebSocket Close Codes
# =============================================================================


class WS_CLOSE_CODE:
    """Application close codes for the unread WebSocket."""

    UNAUTHENTICATED: Final[int] = 4001
