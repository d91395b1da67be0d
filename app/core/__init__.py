"""
Core Application - Infrastructure & Base Classes

Generic building blocks shared by the authentication and chat apps.

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Model Mixins (import from core.model_mixins):
    - UUIDPrimaryKeyMixin: UUID as primary key

Services (import from core.services):
    - BaseService: Base class for service layer (logger, atomic)

Exceptions (import from core.exceptions):
    - BaseApplicationError: Base exception carrying an HTTP status
    - ValidationError, ConflictError: 400
    - AuthenticationError, ExpiredCredential, MalformedCredential: 401
    - PermissionDeniedError: 403
    - NotFoundError: 404

Handlers (import from core.handlers):
    - api_exception_handler: DRF EXCEPTION_HANDLER producing the error body

Note:
    Django models and model mixins are NOT imported here to avoid
    AppRegistryNotReady errors. Import them directly from their modules.
"""

from .exceptions import (
    AuthenticationError,
    BaseApplicationError,
    ConflictError,
    ExpiredCredential,
    MalformedCredential,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from .services import BaseService

__all__ = [
    # Services
    "BaseService",
    # Exceptions
    "BaseApplicationError",
    "ValidationError",
    "ConflictError",
    "AuthenticationError",
    "ExpiredCredential",
    "MalformedCredential",
    "PermissionDeniedError",
    "NotFoundError",
]
