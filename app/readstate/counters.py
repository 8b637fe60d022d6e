"""
Unread count queries.

Counts are derived on read from chat messages and read markers; nothing
is incremented on message insert. Every count, per conversation or for
all of a user's conversations, comes from one SQL statement:

    conversations the user actively participates in
      LEFT JOIN the user's read marker (FilteredRelation)
      LEFT JOIN messages
    COUNT(DISTINCT message) FILTER (
        sender is not the user
        AND (no marker OR (created_at, id) > marker point)
    )
    GROUP BY conversation

Messages with no sender (system messages) count as written by someone else.
"""

from __future__ import annotations

import logging

from django.db.models import Count, F, FilteredRelation, Q

from chat.models import Conversation
from core.db import bounded_transaction
from readstate import settings as read_state_settings
from readstate.stores import not_participant_error

logger = logging.getLogger(__name__)


def unread_counts_queryset(user_id: int):
    """
    Conversations of user_id annotated with their unread count.

    Returns a queryset of (conversation_id, unread) tuples. Filter it
    further by id to count a single conversation.
    """
    unread_filter = ~Q(messages__sender_id=user_id) & (
        Q(viewer_marker__read_through_at__isnull=True)
        | Q(messages__created_at__gt=F("viewer_marker__read_through_at"))
        | Q(
            messages__created_at=F("viewer_marker__read_through_at"),
            messages__id__gt=F("viewer_marker__read_through_message_id"),
        )
    )

    return (
        Conversation.objects.filter(
            participants__user_id=user_id,
            participants__left_at__isnull=True,
        )
        .annotate(
            viewer_marker=FilteredRelation(
                "read_markers",
                condition=Q(read_markers__user_id=user_id),
            )
        )
        .annotate(unread=Count("messages", filter=unread_filter, distinct=True))
        .order_by()
        .values_list("id", "unread")
    )


class DjangoUnreadCounter:
    """
    UnreadCounter backed by a single aggregate query.

    Args:
        timeout_ms: Per-statement bound, defaults to READ_STATE_QUERY_TIMEOUT_MS
    """

    def __init__(self, timeout_ms: int | None = None):
        self.timeout_ms = timeout_ms

    def _timeout(self) -> int:
        if self.timeout_ms is not None:
            return self.timeout_ms
        return read_state_settings.query_timeout_ms()

    def get_unread_count(self, conversation_id: int, user_id: int) -> int:
        """
        Unread count for one conversation.

        Raises:
            NotFoundError: If the user is not an active participant
            StorageUnavailableError: On storage failure or timeout
        """
        with bounded_transaction(self._timeout()):
            row = unread_counts_queryset(user_id).filter(id=conversation_id).first()

        if row is None:
            raise not_participant_error(conversation_id, user_id)
        return row[1]

    def get_unread_counts_for_user(self, user_id: int) -> dict[int, int]:
        """
        Unread counts for every active conversation of the user.

        Conversations with nothing unread are included with 0.
        """
        with bounded_transaction(self._timeout()):
            counts = dict(unread_counts_queryset(user_id))

        logger.debug(f"Computed unread counts for user {user_id}: {len(counts)} conversations")
        return counts

    def get_total_unread_count(self, user_id: int) -> int:
        return sum(self.get_unread_counts_for_user(user_id).values())
