"""
Read-state models.

Models:
    ReadMarker: How far one user has read in one conversation

Design Decisions:
    - One row per (conversation, user), enforced by a unique constraint
    - The marker is a (read_through_at, read_through_message_id) pair that
      mirrors Message ordering; both columns are NULL when nothing was read
    - read_through_message_id is a plain integer, so deleting a message
      never moves or clears a marker
    - Rows are only deleted by cascade from the conversation or user
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.db.models import Q

from core.models import BaseModel
from readstate.types import ReadMarkerState, ReadPoint


class ReadMarkerQuerySet(models.QuerySet):
    """QuerySet helpers for read markers."""

    def for_pair(self, conversation_id: int, user_id: int):
        return self.filter(conversation_id=conversation_id, user_id=user_id)

    def behind(self, point: ReadPoint):
        """
        Markers strictly before point.

        A marker with no read-through sorts before every point.
        """
        return self.filter(
            Q(read_through_at__isnull=True)
            | Q(read_through_at__lt=point.created_at)
            | Q(
                read_through_at=point.created_at,
                read_through_message_id__lt=point.message_id,
            )
        )


class ReadMarker(BaseModel):
    """
    Last-read position of a user in a conversation.

    Fields:
        conversation: Conversation being read
        user: Reader
        read_through_at: created_at of the last read message
        read_through_message_id: id of the last read message
        updated_at: Moves only when the marker advances

    Constraints:
        - UniqueConstraint(conversation, user)
    """

    conversation = models.ForeignKey(
        "chat.Conversation",
        on_delete=models.CASCADE,
        related_name="read_markers",
        help_text="Conversation this marker belongs to",
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="read_markers",
        help_text="User whose read position this is",
    )

    read_through_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="Timestamp of the last message read (null if none)",
    )

    read_through_message_id = models.BigIntegerField(
        null=True,
        blank=True,
        help_text="ID of the last message read (null if none)",
    )

    objects = ReadMarkerQuerySet.as_manager()

    class Meta:
        db_table = "readstate_read_marker"
        ordering = ["-updated_at"]
        indexes = [
            models.Index(
                fields=["user", "conversation"],
                name="readstate_marker_user_idx",
            ),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["conversation", "user"],
                name="unique_read_marker_per_user",
            ),
        ]

    def __str__(self) -> str:
        """Return human-readable representation."""
        return (
            f"ReadMarker: user {self.user_id} in {self.conversation_id} "
            f"through {self.read_through_message_id}"
        )

    @property
    def read_through(self) -> ReadPoint | None:
        if self.read_through_at is None or self.read_through_message_id is None:
            return None
        return ReadPoint(
            created_at=self.read_through_at,
            message_id=self.read_through_message_id,
        )

    def to_state(self) -> ReadMarkerState:
        return ReadMarkerState(
            conversation_id=self.conversation_id,
            user_id=self.user_id,
            read_through=self.read_through,
            updated_at=self.updated_at,
        )
