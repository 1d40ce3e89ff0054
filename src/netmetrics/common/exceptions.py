"""Custom exceptions for NetMetrics.

Provides a hierarchy of exceptions with HTTP status codes
and structured error responses.
"""

from typing import Any


class NetMetricsError(Exception):
    """Base exception for all NetMetrics errors."""

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"
    message: str = "An internal error occurred"

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize exception with optional details.

        Args:
            message: Human-readable error message.
            details: Additional error details for debugging.
            cause: Original exception that caused this error.
        """
        self.message = message or self.message
        self.details = details or {}
        self.cause = cause
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API response."""
        result = {
            "error": self.error_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


# 400 Bad Request errors
class ValidationError(NetMetricsError):
    """Input validation failed."""

    status_code = 400
    error_code = "VALIDATION_ERROR"
    message = "Input validation failed"


class InvalidRangeError(ValidationError):
    """Requested time range is inverted or negative."""

    error_code = "INVALID_RANGE"
    message = "Invalid time range"


class InvalidStepError(ValidationError):
    """No usable sampling interval could be derived."""

    error_code = "INVALID_STEP"
    message = "Unable to derive a sampling step"


class MalformedRowError(ValidationError):
    """Metric row lacks the structure or identity required by its scope."""

    error_code = "MALFORMED_ROW"
    message = "Malformed metric row"


class InvalidNodeError(ValidationError):
    """Topology node description cannot be interpreted."""

    error_code = "INVALID_NODE"
    message = "Invalid topology node"


# 500 Internal errors
class InternalError(NetMetricsError):
    """Internal error."""

    status_code = 500
    error_code = "INTERNAL_ERROR"
    message = "An internal error occurred"


class ConfigurationError(InternalError):
    """Configuration error."""

    error_code = "CONFIGURATION_ERROR"
    message = "Service configuration error"
