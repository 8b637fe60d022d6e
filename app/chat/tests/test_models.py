"""
Tests for chat models.

Focus on the invariants read-state relies on: message ordering and
active participation uniqueness.
"""

from datetime import timedelta

import pytest
from django.db import IntegrityError, transaction
from django.utils import timezone

from chat.models import Message
from chat.tests.factories import (
    ConversationFactory,
    MessageFactory,
    ParticipantFactory,
    SystemMessageFactory,
)


class TestMessageOrdering:
    """Tests for Message default ordering."""

    def test_orders_by_created_at_then_id(self, db):
        """
        Messages with equal timestamps are ordered by id.

        Why it matters: Read markers compare (created_at, id) pairs; the
        default ordering must agree with that comparison.
        """
        conversation = ConversationFactory()
        t0 = timezone.now()
        later = MessageFactory(conversation=conversation, created_at=t0 + timedelta(seconds=1))
        first = MessageFactory(conversation=conversation, created_at=t0)
        second = MessageFactory(conversation=conversation, created_at=t0)

        ordered = list(Message.objects.filter(conversation=conversation))

        assert ordered == [first, second, later]

    def test_created_at_can_be_assigned(self, db):
        t0 = timezone.now() - timedelta(days=3)

        message = MessageFactory(created_at=t0)
        message.refresh_from_db()

        assert message.created_at == t0

    def test_system_message_has_no_sender(self, db):
        message = SystemMessageFactory()

        assert message.sender_id is None
        assert message.is_system_message is True
        assert str(message).startswith("System:")


class TestParticipantConstraints:
    """Tests for the unique active participation constraint."""

    def test_second_active_participation_is_rejected(self, db):
        participant = ParticipantFactory()

        with pytest.raises(IntegrityError), transaction.atomic():
            ParticipantFactory(
                conversation=participant.conversation, user=participant.user
            )

    def test_rejoin_after_leaving_is_allowed(self, db):
        """
        A user who left can join again as a new record.

        Why it matters: Membership history is preserved per join.
        """
        participant = ParticipantFactory(left_at=timezone.now())

        rejoined = ParticipantFactory(
            conversation=participant.conversation, user=participant.user
        )

        assert rejoined.is_active is True
        assert participant.is_active is False
        assert participant.conversation.get_active_participants().count() == 1
