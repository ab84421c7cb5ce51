"""
Base exception classes for the Identa backend.

Each module should define its own exceptions that inherit from these bases.
The API layer maps each base class to one HTTP status code, so picking the
right base is what decides how a failure reaches the caller.
"""

from typing import Optional, Any


class IdentaError(Exception):
    """
    Base exception for all Identa errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(IdentaError):
    """Resource not found."""

    pass


class ValidationError(IdentaError):
    """Input validation failed."""

    pass


class UnknownVariantError(ValidationError):
    """A string did not match any member of an enumeration."""

    def __init__(self, enum_name: str, value: Any):
        super().__init__(
            f"Unknown {enum_name}: {value}",
            code="UNKNOWN_VARIANT",
            details={"enum": enum_name, "value": str(value)},
        )


class ConflictError(IdentaError):
    """The request conflicts with existing state."""

    pass


class AuthenticationError(IdentaError):
    """Authentication failed (invalid or missing credentials)."""

    pass


class AuthorizationError(IdentaError):
    """Authorization failed (insufficient permissions)."""

    pass


class StorageError(IdentaError):
    """The database or cache failed to complete an operation."""

    def __init__(self, message: str, store: str, code: Optional[str] = None):
        super().__init__(message, code or "STORAGE_ERROR", {"store": store})
        self.store = store


class ExternalServiceError(IdentaError):
    """Error communicating with an external service."""

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service


class ConfigurationError(IdentaError):
    """Required configuration is missing or malformed."""

    def __init__(
        self,
        missing: Optional[list[str]] = None,
        invalid: Optional[list[str]] = None,
    ):
        missing = missing or []
        invalid = invalid or []
        parts = []
        if missing:
            parts.append(f"missing: {', '.join(missing)}")
        if invalid:
            parts.append(f"invalid: {', '.join(invalid)}")
        super().__init__(
            f"Configuration error ({'; '.join(parts)})",
            code="CONFIGURATION_ERROR",
            details={"missing": missing, "invalid": invalid},
        )
        self.missing = missing
        self.invalid = invalid
