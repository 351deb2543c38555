"""MovieFetch Error Handling Module

This module defines the error handling system for MovieFetch, providing
structured error classes with context information and user-friendly messages.

The error hierarchy follows these principles:
- One Source of Truth: All error codes are defined in ErrorCode enum
- Structured Context: ErrorContext provides additional information
- User-friendly Messages: Network errors map to optional user messages
- Proper Exception Chaining: Original exceptions are preserved
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Union

from moviefetch.shared.constants import UserMessages

# Type alias for primitive context values (str, int, float, bool only)
PrimitiveContextValue = Union[str, int, float, bool]

# Default keys to mask in safe_dict
SAFE_DICT_MASK_KEYS: tuple[str, ...] = ("api_key",)


class ErrorCode(str, Enum):
    """Error codes for the MovieFetch application.

    This enum serves as the single source of truth for all error codes
    used throughout the application.
    """

    # Request construction errors
    INVALID_PARAMETER = "INVALID_PARAMETER"
    BAD_RESOURCE_PATH = "BAD_RESOURCE_PATH"

    # Network and API errors
    NETWORK_FAILURE = "NETWORK_FAILURE"
    REMOTE_FAILURE = "REMOTE_FAILURE"
    MISSING_DATA = "MISSING_DATA"
    DECODING_FAILURE = "DECODING_FAILURE"

    # Cache errors
    CACHE_SERIALIZATION_ERROR = "CACHE_SERIALIZATION_ERROR"

    # Configuration errors
    CONFIG_MISSING = "CONFIG_MISSING"
    CONFIG_INVALID = "CONFIG_INVALID"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Concurrency errors
    CONCURRENCY_ERROR = "CONCURRENCY_ERROR"


class NetworkErrorKind(str, Enum):
    """Failure kinds produced by request building and network operations."""

    INVALID_PARAMETER = ErrorCode.INVALID_PARAMETER.value
    NETWORK_FAILURE = ErrorCode.NETWORK_FAILURE.value
    REMOTE_FAILURE = ErrorCode.REMOTE_FAILURE.value
    MISSING_DATA = ErrorCode.MISSING_DATA.value
    DECODING_FAILURE = ErrorCode.DECODING_FAILURE.value
    BAD_RESOURCE_PATH = ErrorCode.BAD_RESOURCE_PATH.value

    @property
    def code(self) -> ErrorCode:
        """Project error code for this kind."""
        return ErrorCode(self.value)

    @property
    def user_message(self) -> str | None:
        """Message suitable for display, or None if it should not be shown."""
        return _USER_MESSAGES.get(self)


_USER_MESSAGES: dict[NetworkErrorKind, str] = {
    NetworkErrorKind.INVALID_PARAMETER: UserMessages.CHECK_TITLE,
    NetworkErrorKind.NETWORK_FAILURE: UserMessages.CHECK_NETWORK,
    NetworkErrorKind.REMOTE_FAILURE: UserMessages.TRY_AGAIN_LATER,
    NetworkErrorKind.MISSING_DATA: UserMessages.TRY_AGAIN_LATER,
    NetworkErrorKind.DECODING_FAILURE: UserMessages.TRY_AGAIN_LATER,
}


def _coerce_primitives(value: Any | None) -> dict[str, PrimitiveContextValue] | None:
    """Coerce additional_data values to primitives.

    Converts Path, Enum, Decimal to primitive types.

    Args:
        value: Input dictionary or None

    Returns:
        Dictionary with primitive values only, or None

    Raises:
        TypeError: If value is not a dict or contains unconvertible types
    """
    if value is None:
        return None

    if not isinstance(value, dict):
        error_msg = f"additional_data must be dict, got {type(value).__name__}"
        raise TypeError(error_msg)

    coerced: dict[str, PrimitiveContextValue] = {}
    for key, val in value.items():
        if isinstance(val, (str, int, float, bool)):
            coerced[key] = val
        elif isinstance(val, Path):
            coerced[key] = str(val)
        elif isinstance(val, Enum):
            coerced[key] = val.value
        elif isinstance(val, Decimal):
            coerced[key] = float(val)
        else:
            error_msg = (
                f"Cannot coerce {type(val).__name__} to primitive type. "
                f"Only str, int, float, bool, Path, Enum, Decimal are allowed."
            )
            raise TypeError(error_msg)

    return coerced


@dataclass(frozen=True)
class ErrorContext:
    """Context information for errors.

    Only primitive types (str, int, float, bool) are allowed in
    additional_data to ensure safe serialization.

    Attributes:
        operation: Optional operation name that caused the error
        url: Optional request URL associated with the error
        additional_data: Optional dict with primitive values only
    """

    operation: str | None = None
    url: str | None = None
    additional_data: dict[str, PrimitiveContextValue] | None = None

    def __post_init__(self) -> None:
        """Post-initialization validation and coercion."""
        if self.additional_data is not None:
            coerced = _coerce_primitives(self.additional_data)
            object.__setattr__(self, "additional_data", coerced)

    def safe_dict(self, *, mask_keys: tuple[str, ...] | None = None) -> dict[str, Any]:
        """Export context as dict with sensitive keys masked.

        Args:
            mask_keys: Keys of additional_data to mask. Defaults to SAFE_DICT_MASK_KEYS.

        Returns:
            Dictionary with a guaranteed additional_data key.

        Example:
            >>> context = ErrorContext(operation="search", additional_data={"api_key": "x"})
            >>> context.safe_dict()
            {'operation': 'search', 'additional_data': {'api_key': '****'}}
        """
        if mask_keys is None:
            mask_keys = SAFE_DICT_MASK_KEYS

        data: dict[str, Any] = {}
        if self.operation is not None:
            data["operation"] = self.operation
        if self.url is not None:
            data["url"] = self.url

        additional = dict(self.additional_data or {})
        for key in mask_keys:
            if key in additional:
                additional[key] = "****"
        data["additional_data"] = additional

        return data


class MovieFetchError(Exception):
    """Base exception class for all MovieFetch errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize MovieFetchError.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            context: Additional context information
            original_error: Original exception that caused this error
        """
        self.code = code
        self.message = message
        self.context = context or ErrorContext()
        self.original_error = original_error

        super().__init__(f"{code.value}: {message}")

    def __str__(self) -> str:
        """Return string representation of the error."""
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging.

        Returns:
            Dictionary representation with code, message, masked context
            and original_error (if present)
        """
        return {
            "code": self.code.value,
            "message": self.message,
            "context": self.context.safe_dict(),
            "original_error": str(self.original_error) if self.original_error else None,
        }


class DomainError(MovieFetchError):
    """Domain-specific errors.

    Examples:
    - Cache items that cannot be serialized
    - Invalid domain values
    """


class InfrastructureError(MovieFetchError):
    """Infrastructure-related errors.

    Examples:
    - Network connection failures
    - Remote status errors
    - Undecodable responses
    """


class ApplicationError(MovieFetchError):
    """Application-level errors.

    Examples:
    - Configuration errors
    - Invalid component parameters
    """


class NetworkError(InfrastructureError):
    """A failed request, tagged with its NetworkErrorKind.

    Build-time kinds (INVALID_PARAMETER, BAD_RESOURCE_PATH) are raised before
    any network traffic happens; the others are produced by a finished
    NetworkOperation.
    """

    def __init__(
        self,
        kind: NetworkErrorKind,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(kind.code, message, context, original_error)
        self.kind = kind
        self.status_code = status_code

    @property
    def user_message(self) -> str | None:
        """Message suitable for display, or None if it should not be shown."""
        return self.kind.user_message

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["status_code"] = self.status_code
        return data


def create_invalid_parameter_error(
    message: str,
    field: str | None = None,
    operation: str | None = None,
    original_error: Exception | None = None,
) -> NetworkError:
    """Create an INVALID_PARAMETER network error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"field": field} if field else None
    )
    context = ErrorContext(operation=operation, additional_data=additional_data)
    return NetworkError(
        NetworkErrorKind.INVALID_PARAMETER,
        message,
        context,
        original_error,
    )


def create_bad_resource_path_error(
    path: str,
    operation: str | None = None,
) -> NetworkError:
    """Create a BAD_RESOURCE_PATH network error with context."""
    context = ErrorContext(
        operation=operation,
        additional_data={"path": path},
    )
    return NetworkError(
        NetworkErrorKind.BAD_RESOURCE_PATH,
        f"Poster path is not a valid URL: {path!r}",
        context,
    )


def create_cache_serialization_error(
    message: str,
    key: str | None = None,
    operation: str | None = None,
    original_error: Exception | None = None,
) -> DomainError:
    """Create a cache serialization error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"key": key} if key is not None else None
    )
    context = ErrorContext(operation=operation, additional_data=additional_data)
    return DomainError(
        ErrorCode.CACHE_SERIALIZATION_ERROR,
        message,
        context,
        original_error,
    )


def create_config_error(
    message: str,
    config_key: str | None = None,
    operation: str | None = None,
    original_error: Exception | None = None,
    code: ErrorCode = ErrorCode.CONFIG_INVALID,
) -> ApplicationError:
    """Create a configuration error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"config_key": config_key} if config_key else None
    )
    context = ErrorContext(operation=operation, additional_data=additional_data)
    return ApplicationError(code, message, context, original_error)
