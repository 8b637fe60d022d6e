"""
Protocol definitions for read-state collaborators.

ReadStateService depends on these interfaces rather than on the ORM
classes, so tests can pass fakes and other transports can be plugged in.

Available Protocols:
    ReadStateStore: Persistent read markers
    UnreadCounter: Unread count queries
    MembershipProvider: Who participates in which conversation
    MessageLedger: Message positions within a conversation
    ChangeNotifier: Fire-and-forget push of new counts

Django-backed implementations:
    readstate.stores.DjangoReadStateStore
    readstate.counters.DjangoUnreadCounter
    readstate.providers.ParticipantMembershipProvider
    readstate.providers.DjangoMessageLedger
    readstate.notifiers.ChannelLayerNotifier / NoopNotifier
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable

    from readstate.types import ReadMarkerState, ReadPoint


@runtime_checkable
class ReadStateStore(Protocol):
    """
    Protocol for read marker storage.

    Implementations must make upsert_read_marker monotonic: the stored
    point never moves backwards, whatever order concurrent calls land in.
    """

    def get_read_marker(self, conversation_id: int, user_id: int) -> ReadMarkerState:
        """
        Return the marker for a pair, or ReadMarkerState.never_read().

        Raises:
            NotFoundError: If the user is not an active participant
            StorageUnavailableError: On storage failure or timeout
        """
        ...

    def upsert_read_marker(
        self,
        conversation_id: int,
        user_id: int,
        read_through: ReadPoint | None,
    ) -> bool:
        """
        Create the marker or move it forward to read_through.

        Returns:
            True if the marker was created or advanced, False if the
            stored point was already at or past read_through

        Raises:
            NotFoundError: If the user is not an active participant
            StorageUnavailableError: On storage failure or timeout
        """
        ...


@runtime_checkable
class UnreadCounter(Protocol):
    """Protocol for unread count queries."""

    def get_unread_count(self, conversation_id: int, user_id: int) -> int:
        """
        Count messages by others after the user's marker.

        Raises:
            NotFoundError: If the user is not an active participant
            StorageUnavailableError: On storage failure or timeout
        """
        ...

    def get_unread_counts_for_user(self, user_id: int) -> dict[int, int]:
        """Map every active conversation of the user to its unread count."""
        ...


@runtime_checkable
class MembershipProvider(Protocol):
    """Protocol for conversation membership lookups."""

    def is_participant(self, conversation_id: int, user_id: int) -> bool:
        """Return True if the user is an active participant."""
        ...

    def active_participant_ids(self, conversation_id: int) -> Iterable[int]:
        """Return ids of all active participants of a conversation."""
        ...


@runtime_checkable
class MessageLedger(Protocol):
    """Protocol for reading message positions."""

    def latest_point(self, conversation_id: int) -> ReadPoint | None:
        """Return the position of the newest message, None if empty."""
        ...

    def messages_after(
        self,
        conversation_id: int,
        point: ReadPoint | None,
        exclude_sender_id: int | None = None,
    ) -> list:
        """Return messages strictly after point, oldest first."""
        ...


@runtime_checkable
class ChangeNotifier(Protocol):
    """
    Protocol for pushing unread count changes.

    Implementations must never raise: delivery is best effort and the
    client recovers by fetching counts again.
    """

    def notify_read_state_changed(
        self,
        conversation_id: int,
        user_id: int,
        unread_count: int,
        reason: str,
    ) -> bool:
        """
        Push the new count to the user's sessions.

        Returns:
            True if the event was handed to the transport
        """
        ...
