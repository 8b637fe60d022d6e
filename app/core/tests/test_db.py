"""
Tests for bounded_transaction.
"""

from unittest.mock import MagicMock, patch

import pytest
from django.db import InterfaceError, OperationalError

from authentication.models import User
from core.db import bounded_transaction
from core.exceptions import StorageUnavailableError


@pytest.mark.django_db
class TestBoundedTransaction:
    """Tests for the timeout-bounded atomic block."""

    def test_commits_work_done_inside(self):
        with bounded_transaction(timeout_ms=500):
            User.objects.create_user(email="bounded@example.com")

        assert User.objects.filter(email="bounded@example.com").exists()

    @pytest.mark.parametrize("error_class", [OperationalError, InterfaceError])
    def test_driver_errors_become_storage_unavailable(self, error_class):
        """
        Timeouts and dropped connections surface as StorageUnavailableError.

        Why it matters: Views and tasks only know the application
        exceptions; a raw driver error would be a 500 instead of a 503.
        """
        with pytest.raises(StorageUnavailableError) as exc_info:
            with bounded_transaction(timeout_ms=500):
                raise error_class("canceling statement due to statement timeout")

        assert exc_info.value.details == {"timeout_ms": 500}
        assert isinstance(exc_info.value.__cause__, error_class)

    def test_other_errors_propagate_unchanged(self):
        with pytest.raises(ValueError):
            with bounded_transaction(timeout_ms=500):
                raise ValueError("not a storage problem")

    def test_rolls_back_on_failure(self):
        with pytest.raises(StorageUnavailableError):
            with bounded_transaction(timeout_ms=500):
                User.objects.create_user(email="rolled-back@example.com")
                raise OperationalError("connection lost")

        assert not User.objects.filter(email="rolled-back@example.com").exists()

    def test_sets_statement_timeout_on_postgresql(self):
        connection = MagicMock(vendor="postgresql")
        cursor = connection.cursor.return_value.__enter__.return_value

        with patch("core.db.connections", {"default": connection}):
            with bounded_transaction(timeout_ms=1500):
                pass

        cursor.execute.assert_called_once_with(
            "SELECT set_config('statement_timeout', %s, true)",
            ["1500"],
        )
