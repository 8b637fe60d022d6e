"""
Read marker storage.

DjangoReadStateStore keeps one ReadMarker row per (conversation, user)
and only ever moves it forward.

Write path (upsert_read_marker):
    1. get_or_create on the unique (conversation, user) key
    2. UPDATE ... WHERE stored point < new point

Step 2 is a single conditional UPDATE, so concurrent callers cannot move
the marker backwards: whichever write lands last only applies if it is
still ahead of what is stored. No row lock or external lock is taken.

Usage:
    store = DjangoReadStateStore()
    advanced = store.upsert_read_marker(conversation_id, user_id, point)
    state = store.get_read_marker(conversation_id, user_id)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.utils import timezone

from core.db import bounded_transaction
from core.exceptions import NotFoundError
from readstate import settings as read_state_settings
from readstate.models import ReadMarker
from readstate.providers import ParticipantMembershipProvider
from readstate.types import ReadMarkerState

if TYPE_CHECKING:
    from readstate.protocols import MembershipProvider
    from readstate.types import ReadPoint

logger = logging.getLogger(__name__)


def not_participant_error(conversation_id: int, user_id: int) -> NotFoundError:
    return NotFoundError(
        "You are not a participant in this conversation",
        error_code="NOT_PARTICIPANT",
        details={"conversation_id": conversation_id, "user_id": user_id},
    )


class DjangoReadStateStore:
    """
    ReadStateStore backed by the readstate_read_marker table.

    Args:
        membership: Used to reject pairs that are not active participants
        timeout_ms: Per-statement bound, defaults to READ_STATE_QUERY_TIMEOUT_MS
    """

    def __init__(
        self,
        membership: MembershipProvider | None = None,
        timeout_ms: int | None = None,
    ):
        self.membership = membership or ParticipantMembershipProvider()
        self.timeout_ms = timeout_ms

    def _timeout(self) -> int:
        if self.timeout_ms is not None:
            return self.timeout_ms
        return read_state_settings.query_timeout_ms()

    def _require_participant(self, conversation_id: int, user_id: int) -> None:
        if not self.membership.is_participant(conversation_id, user_id):
            raise not_participant_error(conversation_id, user_id)

    def get_read_marker(self, conversation_id: int, user_id: int) -> ReadMarkerState:
        with bounded_transaction(self._timeout()):
            self._require_participant(conversation_id, user_id)
            marker = ReadMarker.objects.for_pair(conversation_id, user_id).first()

        if marker is None:
            return ReadMarkerState.never_read(conversation_id, user_id)
        return marker.to_state()

    def upsert_read_marker(
        self,
        conversation_id: int,
        user_id: int,
        read_through: ReadPoint | None,
    ) -> bool:
        with bounded_transaction(self._timeout()):
            self._require_participant(conversation_id, user_id)

            marker, created = ReadMarker.objects.get_or_create(
                conversation_id=conversation_id,
                user_id=user_id,
                defaults={
                    "read_through_at": read_through.created_at if read_through else None,
                    "read_through_message_id": (
                        read_through.message_id if read_through else None
                    ),
                },
            )
            if created:
                logger.debug(
                    f"Created read marker for user {user_id} "
                    f"in conversation {conversation_id}"
                )
                return True

            if read_through is None:
                return False

            # queryset.update() skips auto_now, so updated_at is set here
            updated = (
                ReadMarker.objects.filter(pk=marker.pk)
                .behind(read_through)
                .update(
                    read_through_at=read_through.created_at,
                    read_through_message_id=read_through.message_id,
                    updated_at=timezone.now(),
                )
            )

        return updated == 1
