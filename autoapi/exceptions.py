"""Exception hierarchy for autoapi.

API-facing exceptions carry an HTTP status code and a machine-readable
error code so the API error handler can render them uniformly.
"""

from typing import Any, Dict, Optional


class AutoAPIException(Exception):
    """Base exception for all autoapi errors.

    Attributes:
        message: Human-readable error message
        status_code: HTTP status code used when rendered as a response
        error_code: Machine-readable error identifier
        details: Optional structured context
    """

    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code
        if error_code is not None:
            self.error_code = error_code

    async def to_dict(self) -> Dict[str, Any]:
        """Serialize the exception into a response payload."""
        data: Dict[str, Any] = {
            "error_code": self.error_code,
            "message": self.message,
        }
        if self.details:
            data["details"] = self.details
        return data


class InvalidConfigurationError(AutoAPIException):
    """Raised when a configuration value is invalid or unsupported."""

    error_code = "invalid_configuration"

    def __init__(
        self,
        field: str,
        value: Any,
        reason: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.field = field
        self.value = value
        merged = {"field": field, "value": str(value)}
        merged.update(details or {})
        super().__init__(f"Invalid {field} '{value}': {reason}", details=merged)


class HostError(AutoAPIException):
    """Raised when the host environment fails to answer a query."""

    status_code = 503
    error_code = "host_error"


class HostUnavailableError(HostError):
    """Raised when the host environment or its store cannot be reached."""

    error_code = "host_unavailable"


class DiscoveryError(AutoAPIException):
    """Raised when source enumeration cannot reach the host environment.

    Contained by the registry rebuild; never rendered to an HTTP client.
    """

    status_code = 503
    error_code = "discovery_error"


class DispatchError(AutoAPIException):
    """Raised when a generated endpoint fails to query or serialize its source."""

    status_code = 500
    error_code = "dispatch_error"


class DispatchTimeoutError(DispatchError):
    """Raised when a generated endpoint query exceeds the configured timeout."""

    status_code = 504
    error_code = "query_timeout"


class AuthenticationError(AutoAPIException):
    """Raised when a request lacks a valid API key."""

    status_code = 401
    error_code = "authentication_required"


class NamingCollisionWarning(UserWarning):
    """Two sources resolved to the same endpoint name; the later one won."""


__all__ = [
    "AutoAPIException",
    "InvalidConfigurationError",
    "HostError",
    "HostUnavailableError",
    "DiscoveryError",
    "DispatchError",
    "DispatchTimeoutError",
    "AuthenticationError",
    "NamingCollisionWarning",
]
