"""
Accessors for READ_STATE_* Django settings.

Read at call time so tests can override them with the settings fixture.
"""

from django.conf import settings

from readstate.constants import READ_STATE_CONFIG


def query_timeout_ms() -> int:
    return int(
        getattr(
            settings,
            "READ_STATE_QUERY_TIMEOUT_MS",
            READ_STATE_CONFIG.DEFAULT_QUERY_TIMEOUT_MS,
        )
    )


def notifications_enabled() -> bool:
    return bool(getattr(settings, "READ_STATE_NOTIFICATIONS_ENABLED", True))


def broadcast_on_message() -> bool:
    return bool(getattr(settings, "READ_STATE_BROADCAST_ON_MESSAGE", True))
