"""
Test configuration and fixtures for read-state tests.

This module provides:
- Users: a reader, a sender and an outsider
- A conversation where reader and sender are active participants
- message_factory for building histories with chosen timestamps
- RecordingNotifier and a service wired to it
- API client helpers for authenticated requests

Usage:
    def test_example(conversation, reader_user, message_factory, service):
        message_factory(sender=sender_user)
        assert service.get_unread_count(conversation.id, reader_user.id).data == 1
"""

from datetime import timedelta

import pytest
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import UserFactory
from chat.tests.factories import ConversationFactory, MessageFactory, ParticipantFactory
from readstate.counters import DjangoUnreadCounter
from readstate.providers import DjangoMessageLedger, ParticipantMembershipProvider
from readstate.services import ReadStateService
from readstate.stores import DjangoReadStateStore


# =============================================================================
# Test Doubles
# =============================================================================


class RecordingNotifier:
    """ChangeNotifier that records every call instead of sending it."""

    def __init__(self, delivered: bool = True):
        self.calls = []
        self.delivered = delivered

    def notify_read_state_changed(self, conversation_id, user_id, unread_count, reason):
        self.calls.append(
            {
                "conversation_id": conversation_id,
                "user_id": user_id,
                "unread_count": unread_count,
                "reason": reason,
            }
        )
        return self.delivered


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def reader_user(db):
    """User whose unread counts the tests inspect."""
    return UserFactory()


@pytest.fixture
def sender_user(db):
    """Other participant who writes messages."""
    return UserFactory()


@pytest.fixture
def outsider_user(db):
    """User who is not a participant in any test conversation."""
    return UserFactory()


# =============================================================================
# Conversation Fixtures
# =============================================================================


@pytest.fixture
def conversation(db, reader_user, sender_user):
    """Group conversation with reader and sender as active participants."""
    conversation = ConversationFactory(created_by=sender_user)
    ParticipantFactory(conversation=conversation, user=reader_user)
    ParticipantFactory(conversation=conversation, user=sender_user)
    return conversation


@pytest.fixture
def second_conversation(db, reader_user, sender_user):
    """Another conversation with the same two participants."""
    conversation = ConversationFactory(created_by=sender_user)
    ParticipantFactory(conversation=conversation, user=reader_user)
    ParticipantFactory(conversation=conversation, user=sender_user)
    return conversation


@pytest.fixture
def message_factory(conversation, sender_user):
    """
    Create messages in the test conversation.

    Defaults to the sender user and strictly increasing timestamps so
    creation order matches message order.

    Usage:
        message_factory()                      # from sender_user
        message_factory(sender=reader_user)    # own message
        message_factory(created_at=t0)         # explicit timestamp
    """
    base = timezone.now() - timedelta(hours=1)
    counter = {"n": 0}

    def _make(**kwargs):
        counter["n"] += 1
        kwargs.setdefault("conversation", conversation)
        kwargs.setdefault("sender", sender_user)
        kwargs.setdefault("created_at", base + timedelta(seconds=counter["n"]))
        return MessageFactory(**kwargs)

    return _make


# =============================================================================
# Service Fixtures
# =============================================================================


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def service(db, notifier):
    """ReadStateService on the Django collaborators with a recording notifier."""
    membership = ParticipantMembershipProvider()
    return ReadStateService(
        store=DjangoReadStateStore(membership=membership),
        counter=DjangoUnreadCounter(),
        ledger=DjangoMessageLedger(),
        membership=membership,
        notifier=notifier,
    )


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def api_client():
    """Unauthenticated API client."""
    return APIClient()


@pytest.fixture
def authenticated_client_factory(db):
    """
    Factory to create authenticated clients for any user.

    Usage:
        def test_example(authenticated_client_factory, some_user):
            client = authenticated_client_factory(some_user)
            response = client.get('/api/v1/read-state/unread/')
    """

    def _make_client(user):
        client = APIClient()
        refresh = RefreshToken.for_user(user)
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
        return client

    return _make_client


@pytest.fixture
def reader_client(authenticated_client_factory, reader_user):
    """API client authenticated as the reader user."""
    return authenticated_client_factory(reader_user)


@pytest.fixture
def outsider_client(authenticated_client_factory, outsider_user):
    """API client authenticated as the outsider user."""
    return authenticated_client_factory(outsider_user)
