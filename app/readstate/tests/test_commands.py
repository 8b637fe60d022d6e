"""
Tests for the unread_counts management command.
"""

from io import StringIO
from unittest.mock import MagicMock, patch

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from core.exceptions import StorageUnavailableError


def run_command(*args, **options):
    out = StringIO()
    call_command(
        "unread_counts", *[str(arg) for arg in args], stdout=out, **options
    )
    return out.getvalue()


class TestUnreadCountsCommand:
    """Tests for manage.py unread_counts."""

    def test_lists_all_conversations(
        self, reader_user, conversation, second_conversation, message_factory
    ):
        message_factory()

        output = run_command(reader_user.id)

        assert f"conversation {conversation.id}: 1" in output
        assert f"conversation {second_conversation.id}: 0" in output
        assert "total: 1" in output

    def test_user_without_conversations(self, outsider_user):
        output = run_command(outsider_user.id)

        assert "has no active conversations" in output

    def test_single_conversation(self, reader_user, conversation, message_factory):
        message_factory()
        message_factory()

        output = run_command(reader_user.id, "--conversation", conversation.id)

        assert f"conversation {conversation.id}: 2 (unread)" in output

    def test_verbose_lists_unread_messages(
        self, reader_user, conversation, message_factory
    ):
        first = message_factory()
        message_factory(sender=reader_user)
        second = message_factory()

        output = run_command(
            reader_user.id, "--conversation", conversation.id, verbosity=2
        )

        listed = [line for line in output.splitlines() if line.startswith("  #")]
        assert len(listed) == 2
        assert listed[0].startswith(f"  #{first.id} ")
        assert listed[1].startswith(f"  #{second.id} ")

    def test_mark_read_clears_count(self, reader_user, conversation, message_factory):
        """
        --mark-read reconciles a stuck badge and verifies the result.

        Why it matters: Support uses this to fix a user's badge without
        touching the database by hand.
        """
        message_factory()

        output = run_command(
            reader_user.id, "--conversation", conversation.id, "--mark-read"
        )

        assert "Marked conversation" in output
        assert "advanced=True" in output

    def test_mark_read_requires_conversation(self, reader_user):
        with pytest.raises(CommandError, match="requires --conversation"):
            run_command(reader_user.id, "--mark-read")

    def test_non_participant_fails(self, outsider_user, conversation):
        with pytest.raises(CommandError, match="NOT_PARTICIPANT"):
            run_command(outsider_user.id, "--conversation", conversation.id)

    def test_storage_failure_becomes_command_error(self, reader_user):
        service = MagicMock()
        service.get_unread_counts_for_user.side_effect = StorageUnavailableError(
            "Read state storage is temporarily unavailable"
        )

        with patch(
            "readstate.management.commands.unread_counts.get_read_state_service",
            return_value=service,
        ):
            with pytest.raises(CommandError, match="STORAGE_UNAVAILABLE"):
                run_command(reader_user.id)
