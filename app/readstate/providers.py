"""
Django-backed membership and message lookups.

These wrap the chat tables so the read-state core never imports chat
models directly outside this module and the counter. Every lookup runs
inside bounded_transaction like the store and the counter.
"""

from __future__ import annotations

from django.db.models import Q

from chat.models import Message, Participant
from core.db import bounded_transaction
from readstate import settings as read_state_settings
from readstate.types import ReadPoint


class BoundedQueries:
    """Mixin resolving the per-statement timeout for a provider."""

    def __init__(self, timeout_ms: int | None = None):
        self.timeout_ms = timeout_ms

    def _timeout(self) -> int:
        if self.timeout_ms is not None:
            return self.timeout_ms
        return read_state_settings.query_timeout_ms()


class ParticipantMembershipProvider(BoundedQueries):
    """Membership backed by active chat.Participant rows (left_at IS NULL)."""

    def is_participant(self, conversation_id: int, user_id: int) -> bool:
        with bounded_transaction(self._timeout()):
            return Participant.objects.filter(
                conversation_id=conversation_id,
                user_id=user_id,
                left_at__isnull=True,
            ).exists()

    def active_participant_ids(self, conversation_id: int) -> list[int]:
        with bounded_transaction(self._timeout()):
            return list(
                Participant.objects.filter(
                    conversation_id=conversation_id,
                    left_at__isnull=True,
                ).values_list("user_id", flat=True)
            )


class DjangoMessageLedger(BoundedQueries):
    """Message positions backed by chat.Message."""

    def latest_point(self, conversation_id: int) -> ReadPoint | None:
        """
        Position of the newest message in the conversation.

        Returns:
            ReadPoint of the last message by (created_at, id), or None
            if the conversation has no messages

        Raises:
            StorageUnavailableError: On storage failure or timeout
        """
        with bounded_transaction(self._timeout()):
            row = (
                Message.objects.filter(conversation_id=conversation_id)
                .order_by("-created_at", "-id")
                .values_list("created_at", "id")
                .first()
            )
        if row is None:
            return None
        return ReadPoint(created_at=row[0], message_id=row[1])

    def messages_after(
        self,
        conversation_id: int,
        point: ReadPoint | None,
        exclude_sender_id: int | None = None,
    ) -> list[Message]:
        """
        Messages strictly after point, oldest first.

        With point=None every message in the conversation is returned.
        exclude_sender_id drops that user's own messages; messages with
        no sender are always kept.
        """
        queryset = Message.objects.filter(conversation_id=conversation_id)
        if point is not None:
            queryset = queryset.filter(
                Q(created_at__gt=point.created_at)
                | Q(created_at=point.created_at, id__gt=point.message_id)
            )
        if exclude_sender_id is not None:
            queryset = queryset.exclude(sender_id=exclude_sender_id)

        with bounded_transaction(self._timeout()):
            return list(queryset.order_by("created_at", "id"))
