"""
Value types for read state.

These are plain immutable dataclasses so that services, notifiers and
tests can pass read state around without touching the ORM.

Types:
    ReadPoint: Position in a conversation's message order
    ReadMarkerState: Snapshot of a stored read marker
    ReadStatus: READ or UNREAD
    ReadStateSnapshot: Count plus status for one conversation
    MarkReadResult: Outcome of a mark-read call
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


@dataclass(frozen=True, order=True)
class ReadPoint:
    """
    Position in a conversation's message order.

    Messages are ordered by (created_at, id); comparing two points
    compares those pairs, so messages sharing a timestamp are still
    strictly ordered.
    """

    created_at: datetime
    message_id: int

    @classmethod
    def from_message(cls, message) -> ReadPoint:
        return cls(created_at=message.created_at, message_id=message.id)

    def to_dict(self) -> dict:
        return {
            "created_at": self.created_at.isoformat(),
            "message_id": self.message_id,
        }


@dataclass(frozen=True)
class ReadMarkerState:
    """
    Snapshot of the read marker for one (conversation, user) pair.

    Attributes:
        conversation_id: Conversation the marker belongs to
        user_id: User the marker belongs to
        read_through: Last message the user has read, None if nothing read
        updated_at: When the marker last advanced, None if never stored
        exists: False for the "never read" sentinel
    """

    conversation_id: int
    user_id: int
    read_through: ReadPoint | None
    updated_at: datetime | None
    exists: bool = True

    @classmethod
    def never_read(cls, conversation_id: int, user_id: int) -> ReadMarkerState:
        """Sentinel for a pair that has never been marked read."""
        return cls(
            conversation_id=conversation_id,
            user_id=user_id,
            read_through=None,
            updated_at=None,
            exists=False,
        )


class ReadStatus(str, Enum):
    """Read state of a conversation for one user."""

    UNREAD = "unread"
    READ = "read"

    @classmethod
    def for_count(cls, unread_count: int) -> ReadStatus:
        return cls.UNREAD if unread_count > 0 else cls.READ


@dataclass(frozen=True)
class ReadStateSnapshot:
    """Unread count and status for one conversation, as seen by one user."""

    conversation_id: int
    user_id: int
    unread_count: int
    read_through: ReadPoint | None

    @property
    def status(self) -> ReadStatus:
        return ReadStatus.for_count(self.unread_count)


@dataclass(frozen=True)
class MarkReadResult:
    """
    Outcome of marking a conversation read.

    Attributes:
        advanced: True if the stored marker moved (or was created)
        read_through: Marker position after the call
        unread_count: Count after the call, normally 0
    """

    conversation_id: int
    user_id: int
    read_through: ReadPoint | None
    advanced: bool
    unread_count: int

    @property
    def status(self) -> ReadStatus:
        return ReadStatus.for_count(self.unread_count)
