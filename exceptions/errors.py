"""
Custom exception classes for the saved mappings service.

Every error carries a code, a user-facing message and an HTTP status so the
same object can be shown as a notification or returned from the API.
"""

from typing import Optional, Any
from datetime import datetime, timezone


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "MAPPING_NOT_FOUND")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(
        self,
        resource: str,
        identifier: str,
        code: Optional[str] = None
    ):
        super().__init__(
            code=code or f"{resource.upper()}_NOT_FOUND",
            message=f"{resource} not found",
            status_code=404,
            details={"id": identifier}
        )


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


class ConflictError(AppError):
    """Conflict with current state (409)."""

    def __init__(
        self,
        message: str,
        code: str = "CONFLICT",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=409,
            details=details
        )


class DatabaseError(AppError):
    """Database operation failed (500)."""

    def __init__(
        self,
        operation: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code="DATABASE_ERROR",
            message=f"Database {operation} failed: {message}",
            status_code=500,
            details={"operation": operation, **(details or {})}
        )


# ===================
# MAPPING ERRORS
# ===================

class PersistenceError(DatabaseError):
    """Mapping storage unreachable or returned an error (503)."""

    def __init__(
        self,
        operation: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(operation, message, details)
        self.code = "PERSISTENCE_ERROR"
        self.status_code = 503


class MalformedMappingError(PersistenceError):
    """Storage returned a row that is not a valid mapping."""

    def __init__(
        self,
        operation: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(operation, message, details)
        self.code = "MALFORMED_MAPPING"


class MappingNotFoundError(NotFoundError):
    """Mapping not found (or already soft-deleted)."""

    def __init__(self, mapping_id: str):
        super().__init__(
            resource="Mapping",
            identifier=mapping_id,
            code="MAPPING_NOT_FOUND"
        )


class MissingContentError(ValidationError):
    """Mapping has no CSV content to reuse."""

    def __init__(self, mapping_id: str):
        super().__init__(
            code="MISSING_CONTENT",
            message="No CSV content found for this mapping",
            details={"id": mapping_id}
        )


class InvalidStateError(ConflictError):
    """Controller action requested from a state that does not allow it."""

    def __init__(self, action: str, current_state: str, allowed: list[str]):
        super().__init__(
            code="INVALID_CONTROLLER_STATE",
            message=f"Cannot {action} while {current_state}",
            details={
                "action": action,
                "current_state": current_state,
                "allowed": allowed
            }
        )
