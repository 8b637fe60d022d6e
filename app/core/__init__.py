"""
Core Application - Infrastructure & Base Classes

Generic building blocks shared by the domain apps. Business logic does not
live here.

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Services (import from core.services):
    - BaseService: Base class for service layer
    - ServiceResult: Standard result wrapper for success/failure handling

Database (import from core.db):
    - bounded_transaction: Atomic block with a per-statement timeout

Exceptions (import from core.exceptions):
    - BaseApplicationError: Base exception with error codes
    - NotFoundError: Resource or relationship not found
    - StorageUnavailableError: Transient persistence failure
    - ExternalServiceError: Third-party service failures
    - NotificationDeliveryFailedError: Real-time push not delivered

Note:
    Models and the db helpers are NOT imported here to avoid AppRegistryNotReady
    errors. Import them directly from their modules.
"""

# Services (no Django model dependencies)
from .services import BaseService, ServiceResult

# Exceptions (no Django dependencies)
from .exceptions import (
    BaseApplicationError,
    ExternalServiceError,
    NotFoundError,
    NotificationDeliveryFailedError,
    StorageUnavailableError,
)

__all__ = [
    # Services
    "BaseService",
    "ServiceResult",
    # Exceptions
    "BaseApplicationError",
    "NotFoundError",
    "StorageUnavailableError",
    "ExternalServiceError",
    "NotificationDeliveryFailedError",
]
