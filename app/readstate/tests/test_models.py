"""
Tests for the ReadMarker model.
"""

from datetime import timedelta

import pytest
from django.db import IntegrityError, transaction
from django.utils import timezone

from readstate.models import ReadMarker
from readstate.types import ReadPoint


class TestReadMarkerConstraints:
    """Tests for ReadMarker uniqueness."""

    def test_one_marker_per_conversation_and_user(self, conversation, reader_user):
        """
        A second marker for the same pair is rejected by the database.

        Why it matters: get_or_create in the store relies on this
        constraint to resolve concurrent first reads to one row.
        """
        ReadMarker.objects.create(conversation=conversation, user=reader_user)

        with pytest.raises(IntegrityError), transaction.atomic():
            ReadMarker.objects.create(conversation=conversation, user=reader_user)

    def test_same_user_may_have_markers_in_many_conversations(
        self, conversation, second_conversation, reader_user
    ):
        ReadMarker.objects.create(conversation=conversation, user=reader_user)
        ReadMarker.objects.create(conversation=second_conversation, user=reader_user)

        assert ReadMarker.objects.filter(user=reader_user).count() == 2

    def test_deleting_conversation_removes_markers(self, conversation, reader_user):
        ReadMarker.objects.create(conversation=conversation, user=reader_user)

        conversation.delete()

        assert not ReadMarker.objects.exists()


class TestReadMarkerReadThrough:
    """Tests for the read_through property and to_state()."""

    def test_empty_marker_has_no_read_through(self, conversation, reader_user):
        marker = ReadMarker.objects.create(conversation=conversation, user=reader_user)

        assert marker.read_through is None
        assert marker.to_state().exists is True
        assert marker.to_state().read_through is None

    def test_read_through_builds_point(self, conversation, reader_user):
        t0 = timezone.now()
        marker = ReadMarker.objects.create(
            conversation=conversation,
            user=reader_user,
            read_through_at=t0,
            read_through_message_id=42,
        )

        assert marker.read_through == ReadPoint(t0, 42)


class TestReadMarkerQuerySetBehind:
    """Tests for ReadMarkerQuerySet.behind()."""

    def _marker(self, conversation, user, point):
        return ReadMarker.objects.create(
            conversation=conversation,
            user=user,
            read_through_at=point.created_at if point else None,
            read_through_message_id=point.message_id if point else None,
        )

    def test_empty_marker_is_behind_any_point(self, conversation, reader_user):
        self._marker(conversation, reader_user, None)

        assert ReadMarker.objects.behind(ReadPoint(timezone.now(), 1)).exists()

    def test_equal_point_is_not_behind(self, conversation, reader_user):
        point = ReadPoint(timezone.now(), 5)
        self._marker(conversation, reader_user, point)

        assert not ReadMarker.objects.behind(point).exists()

    def test_same_timestamp_lower_id_is_behind(self, conversation, reader_user):
        t0 = timezone.now()
        self._marker(conversation, reader_user, ReadPoint(t0, 5))

        assert ReadMarker.objects.behind(ReadPoint(t0, 6)).exists()
        assert not ReadMarker.objects.behind(ReadPoint(t0, 4)).exists()

    def test_later_timestamp_is_not_behind_earlier_point(self, conversation, reader_user):
        t0 = timezone.now()
        self._marker(conversation, reader_user, ReadPoint(t0, 1))

        assert not ReadMarker.objects.behind(
            ReadPoint(t0 - timedelta(seconds=1), 100)
        ).exists()
