"""
Base exception classes for application-wide error handling.

Every exception here is an *operational* failure: an expected condition the
client can act on. Each class carries the HTTP status it maps to, so the
centralized responder in core.handlers can answer it without a lookup table.
Anything that is not a BaseApplicationError (or a DRF APIException) is treated
as an unexpected fault.

Exception Hierarchy:
    BaseApplicationError (500)
    ├── ValidationError (400) - Input validation failures
    ├── ConflictError (400) - Duplicates, already-joined rooms
    ├── AuthenticationError (401) - Missing/invalid credentials, identity gone
    │   ├── ExpiredCredential - Bearer token past its expiry
    │   └── MalformedCredential - Bad signature or structure
    ├── PermissionDeniedError (403) - Authorization failures
    └── NotFoundError (404) - Resource not found

Usage:
    from core.exceptions import NotFoundError, PermissionDeniedError

    room = Room.objects.filter(id=room_id).first()
    if room is None:
        raise NotFoundError("Room not found", error_code="ROOM_NOT_FOUND")

    # Realtime handlers turn the same exceptions into an error event
    except BaseApplicationError as e:
        await self.send_json({"type": "error", "message": e.message})
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description, returned to clients verbatim
        error_code: Machine-readable code, used in logs
        details: Additional error context (field errors, identifiers)
        status_code: HTTP status the REST responder uses
    """

    default_error_code: str = "APPLICATION_ERROR"
    status_code: int = 500

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
        Convert exception to the REST error body.

        Returns:
            Dict with status and message keys, plus errors when details
            carry field-level messages

        Example:
            {"status": "fail", "message": "Room not found"}
        """
        result: dict[str, Any] = {
            "status": "fail" if 400 <= self.status_code < 500 else "error",
            "message": self.message,
        }
        if self.details.get("errors"):
            result["errors"] = self.details["errors"]
        return result

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when input validation fails.

    Use for missing required fields and business rule violations that the
    client can correct by changing the request.

    Example:
        raise ValidationError("Message content is required", error_code="CONTENT_REQUIRED")
    """

    default_error_code: str = "VALIDATION_ERROR"
    status_code: int = 400


class ConflictError(BaseApplicationError):
    """
    Raised when an operation conflicts with current state.

    Mapped to 400 rather than 409 because clients treat duplicate email and
    already-joined room as ordinary bad requests.

    Example:
        if User.objects.filter(email=email).exists():
            raise ConflictError("User with this email already exists")
    """

    default_error_code: str = "CONFLICT"
    status_code: int = 400


class AuthenticationError(BaseApplicationError):
    """
    Raised when the caller cannot be identified.

    Covers a missing bearer token, a token that fails verification, and a
    token whose user no longer exists or was deactivated.
    """

    default_error_code: str = "AUTHENTICATION_FAILED"
    status_code: int = 401


class ExpiredCredential(AuthenticationError):
    """Bearer token was valid once but is past its expiry."""

    default_error_code: str = "TOKEN_EXPIRED"


class MalformedCredential(AuthenticationError):
    """Bearer token has a bad signature or cannot be decoded."""

    default_error_code: str = "TOKEN_INVALID"


class PermissionDeniedError(BaseApplicationError):
    """
    Raised when the user is identified but not allowed to act.

    Example:
        if room.creator_id != user.id:
            raise PermissionDeniedError("You are not authorized to delete this room")
    """

    default_error_code: str = "PERMISSION_DENIED"
    status_code: int = 403


class NotFoundError(BaseApplicationError):
    """
    Raised when a requested resource is not found.

    Use for single-resource lookups where existence is expected; list
    queries return empty results instead.
    """

    default_error_code: str = "NOT_FOUND"
    status_code: int = 404
