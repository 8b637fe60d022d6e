"""
Tests for read-state signal handlers.
"""

from unittest.mock import patch

from chat.tests.factories import MessageFactory


class TestScheduleUnreadBroadcast:
    """Tests for the Message post_save handler."""

    def test_new_message_schedules_broadcast_on_commit(
        self, conversation, sender_user, django_capture_on_commit_callbacks
    ):
        """
        The broadcast is queued only after the insert commits.

        Why it matters: A task that runs before commit would count
        without the new message, or not find it at all.
        """
        with patch("readstate.tasks.broadcast_message_unread_counts.delay") as delay:
            with django_capture_on_commit_callbacks(execute=False) as callbacks:
                message = MessageFactory(conversation=conversation, sender=sender_user)

            delay.assert_not_called()
            for callback in callbacks:
                callback()

        delay.assert_called_once_with(message.id)

    def test_editing_message_does_not_schedule(
        self, conversation, sender_user, django_capture_on_commit_callbacks
    ):
        message = MessageFactory(conversation=conversation, sender=sender_user)

        with django_capture_on_commit_callbacks() as callbacks:
            message.content = "edited"
            message.save()

        assert callbacks == []

    def test_disabled_setting_skips_broadcast(
        self, settings, conversation, sender_user, django_capture_on_commit_callbacks
    ):
        settings.READ_STATE_BROADCAST_ON_MESSAGE = False

        with django_capture_on_commit_callbacks() as callbacks:
            MessageFactory(conversation=conversation, sender=sender_user)

        assert callbacks == []
