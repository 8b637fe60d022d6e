"""
Read-state service layer.

ReadStateService is the single entry point for views, consumers, tasks
and management commands. It is an ordinary object built from its
collaborators, so tests construct it with fakes:

    service = ReadStateService(
        store=FakeStore(),
        counter=FakeCounter(),
        ledger=FakeLedger(),
        membership=FakeMembership(),
        notifier=RecordingNotifier(),
    )

Production code uses get_read_state_service(), which wires the Django
implementations.

State per (conversation, user):
    Unread(n), n > 0  --mark_read-->  Read
    Read  --message from someone else-->  Unread(1)
    Unread(n)  --message from someone else-->  Unread(n + 1)

Only mark_read writes. Message arrival changes nothing here; counts are
recomputed on the next query and pushed by notify_new_message().

Error Handling:
    - Not a participant: ServiceResult.failure(error_code="NOT_PARTICIPANT")
    - StorageUnavailableError: raised to the caller (HTTP 503, task retry)
    - Notification failures: logged by the notifier, never raised
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import NotFoundError
from core.services import BaseService, ServiceResult
from readstate.constants import NOTIFY_REASON
from readstate.counters import DjangoUnreadCounter
from readstate.notifiers import get_default_notifier
from readstate.providers import DjangoMessageLedger, ParticipantMembershipProvider
from readstate.stores import DjangoReadStateStore
from readstate.types import MarkReadResult, ReadStateSnapshot

if TYPE_CHECKING:
    from readstate.protocols import (
        ChangeNotifier,
        MembershipProvider,
        MessageLedger,
        ReadStateStore,
        UnreadCounter,
    )


class ReadStateService(BaseService):
    """
    Read markers and unread counts for one user at a time.

    Methods:
        mark_read: Move the marker to the newest message and notify
        get_unread_count: Count for one conversation
        get_read_state: Count, status and marker for one conversation
        get_unread_messages: The unread messages themselves
        get_unread_counts_for_user: Counts for all conversations
        get_total_unread_count: Sum of all counts
        notify_new_message: Push fresh counts to a message's recipients
    """

    def __init__(
        self,
        store: ReadStateStore,
        counter: UnreadCounter,
        ledger: MessageLedger,
        membership: MembershipProvider,
        notifier: ChangeNotifier,
    ):
        self.store = store
        self.counter = counter
        self.ledger = ledger
        self.membership = membership
        self.notifier = notifier

    @classmethod
    def default(cls) -> ReadStateService:
        """Build a service wired to the Django-backed collaborators."""
        membership = ParticipantMembershipProvider()
        return cls(
            store=DjangoReadStateStore(membership=membership),
            counter=DjangoUnreadCounter(),
            ledger=DjangoMessageLedger(),
            membership=membership,
            notifier=get_default_notifier(),
        )

    # =========================================================================
    # Read marking
    # =========================================================================

    def mark_read(
        self,
        conversation_id: int,
        user_id: int,
    ) -> ServiceResult[MarkReadResult]:
        """
        Mark everything currently in the conversation as read.

        Idempotent: a second call with no new messages leaves the marker
        and its updated_at untouched and sends no notification.

        Returns:
            ServiceResult with MarkReadResult, or failure NOT_PARTICIPANT
        """
        logger = self.get_logger()
        latest = self.ledger.latest_point(conversation_id)

        try:
            advanced = self.store.upsert_read_marker(conversation_id, user_id, latest)
            unread_count = self.counter.get_unread_count(conversation_id, user_id)
        except NotFoundError as e:
            logger.info(
                f"User {user_id} cannot mark conversation {conversation_id} read: "
                f"{e.error_code}"
            )
            return ServiceResult.failure(e.message, error_code=e.error_code)

        if advanced:
            self.notifier.notify_read_state_changed(
                conversation_id,
                user_id,
                unread_count,
                reason=NOTIFY_REASON.READ,
            )
            logger.info(
                f"User {user_id} read conversation {conversation_id} "
                f"through message {latest.message_id if latest else None}"
            )

        return ServiceResult.success(
            MarkReadResult(
                conversation_id=conversation_id,
                user_id=user_id,
                read_through=latest,
                advanced=advanced,
                unread_count=unread_count,
            )
        )

    # =========================================================================
    # Unread counts
    # =========================================================================

    def get_unread_count(self, conversation_id: int, user_id: int) -> ServiceResult[int]:
        """Unread count for one conversation, or failure NOT_PARTICIPANT."""
        try:
            count = self.counter.get_unread_count(conversation_id, user_id)
        except NotFoundError as e:
            return ServiceResult.failure(e.message, error_code=e.error_code)
        return ServiceResult.success(count)

    def get_read_state(
        self,
        conversation_id: int,
        user_id: int,
    ) -> ServiceResult[ReadStateSnapshot]:
        """Unread count, status and marker position for one conversation."""
        try:
            marker = self.store.get_read_marker(conversation_id, user_id)
            count = self.counter.get_unread_count(conversation_id, user_id)
        except NotFoundError as e:
            return ServiceResult.failure(e.message, error_code=e.error_code)

        return ServiceResult.success(
            ReadStateSnapshot(
                conversation_id=conversation_id,
                user_id=user_id,
                unread_count=count,
                read_through=marker.read_through,
            )
        )

    def get_unread_messages(self, conversation_id: int, user_id: int) -> ServiceResult[list]:
        """
        Messages the user has not read yet, oldest first.

        Same rule as the count: after the marker and not written by the
        user. The list length equals get_unread_count for the pair.
        """
        try:
            marker = self.store.get_read_marker(conversation_id, user_id)
        except NotFoundError as e:
            return ServiceResult.failure(e.message, error_code=e.error_code)

        messages = self.ledger.messages_after(
            conversation_id,
            marker.read_through,
            exclude_sender_id=user_id,
        )
        return ServiceResult.success(messages)

    def get_unread_counts_for_user(self, user_id: int) -> ServiceResult[dict[int, int]]:
        """Counts for every conversation the user actively participates in."""
        return ServiceResult.success(self.counter.get_unread_counts_for_user(user_id))

    def get_total_unread_count(self, user_id: int) -> ServiceResult[int]:
        counts = self.counter.get_unread_counts_for_user(user_id)
        return ServiceResult.success(sum(counts.values()))

    # =========================================================================
    # Fan-out
    # =========================================================================

    def notify_new_message(self, conversation_id: int, sender_id: int | None) -> int:
        """
        Push recomputed counts to every active participant except the sender.

        Participants who leave between the lookup and their count are
        skipped.

        Returns:
            Number of notifications handed to the transport
        """
        delivered = 0
        for user_id in self.membership.active_participant_ids(conversation_id):
            if user_id == sender_id:
                continue
            try:
                count = self.counter.get_unread_count(conversation_id, user_id)
            except NotFoundError:
                continue
            if self.notifier.notify_read_state_changed(
                conversation_id,
                user_id,
                count,
                reason=NOTIFY_REASON.NEW_MESSAGE,
            ):
                delivered += 1

        self.get_logger().debug(
            f"Notified {delivered} participants of new message in {conversation_id}"
        )
        return delivered


def get_read_state_service() -> ReadStateService:
    """Service instance for the current request or task."""
    return ReadStateService.default()
