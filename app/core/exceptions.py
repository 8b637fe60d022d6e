"""
Base exception classes for application-wide error handling.

Exception Hierarchy:
    BaseApplicationError (base)
    ├── NotFoundError - Referenced resource or relationship absent
    ├── StorageUnavailableError - Transient persistence failure or timeout
    └── ExternalServiceError - Third-party / transport failures
        └── NotificationDeliveryFailedError - Real-time push not delivered

Retry Policy:
    NotFoundError: never retried, surfaced to the caller as an empty result
    StorageUnavailableError: safe to retry with backoff (operations are idempotent)
    NotificationDeliveryFailedError: logged only, never surfaced to end users

Usage:
    from core.exceptions import NotFoundError, StorageUnavailableError

    raise NotFoundError(
        "User is not a participant in this conversation",
        error_code="NOT_PARTICIPANT",
        details={"conversation_id": 12, "user_id": 3},
    )

    try:
        ...
    except StorageUnavailableError as e:
        return Response(e.to_dict(), status=503)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (ids, metadata, etc.)
    """

    default_error_code: str = "APPLICATION_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Example:
            {
                "error": "User is not a participant in this conversation",
                "error_code": "NOT_PARTICIPANT",
                "details": {"conversation_id": 12}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class NotFoundError(BaseApplicationError):
    """
    Raised when a requested resource or relationship does not exist.

    For read state this means the (conversation, user) pair is not an
    active participant relationship.
    """

    default_error_code: str = "NOT_FOUND"


class StorageUnavailableError(BaseApplicationError):
    """
    Raised when the database cannot serve a request in time.

    Covers statement timeouts, lost connections and locked databases.
    Callers may retry; HTTP 503 Service Unavailable is appropriate.
    """

    default_error_code: str = "STORAGE_UNAVAILABLE"


class ExternalServiceError(BaseApplicationError):
    """
    Raised when an external service call fails.

    Note:
        Log the original error for debugging but don't expose
        internal details to clients in production.
    """

    default_error_code: str = "EXTERNAL_SERVICE_ERROR"


class NotificationDeliveryFailedError(ExternalServiceError):
    """
    Raised when a real-time notification could not be handed to the bus.

    Never propagated to end users: the badge self-corrects on the next fetch.
    """

    default_error_code: str = "NOTIFICATION_DELIVERY_FAILED"
