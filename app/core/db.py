"""
Bounded database access.

Every read-state query runs inside bounded_transaction() so that no call can
hang on a slow or unreachable database. On PostgreSQL the bound is enforced
by the server through a transaction-local statement_timeout; other backends
rely on their connection timeout (see DATABASES OPTIONS in settings).

Driver errors that mean "try again later" are re-raised as
StorageUnavailableError so callers only deal with the application
exception hierarchy.

Usage:
    from core.db import bounded_transaction

    with bounded_transaction(timeout_ms=2000):
        marker = ReadMarker.objects.get(...)
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

from django.db import InterfaceError, OperationalError, connections, transaction

from core.exceptions import StorageUnavailableError

if TYPE_CHECKING:
    from collections.abc import Generator

logger = logging.getLogger(__name__)


@contextmanager
def bounded_transaction(
    timeout_ms: int,
    using: str = "default",
) -> Generator[None, None, None]:
    """
    Open an atomic block whose statements may run at most timeout_ms each.

    Args:
        timeout_ms: Per-statement limit in milliseconds
        using: Database alias

    Raises:
        StorageUnavailableError: On timeout or connection failure
    """
    try:
        with transaction.atomic(using=using):
            connection = connections[using]
            if connection.vendor == "postgresql":
                with connection.cursor() as cursor:
                    # set_config(..., true) scopes the value to this transaction
                    cursor.execute(
                        "SELECT set_config('statement_timeout', %s, true)",
                        [str(int(timeout_ms))],
                    )
            yield
    except (OperationalError, InterfaceError) as exc:
        logger.warning(f"Database unavailable (timeout={timeout_ms}ms): {exc}")
        raise StorageUnavailableError(
            "Read state storage is temporarily unavailable",
            details={"timeout_ms": timeout_ms},
        ) from exc
