"""Exception hierarchy and error context helpers for followback."""

from typing import Any, Dict, Optional, Type
from contextlib import contextmanager


class FollowbackError(Exception):
    """Base exception for all followback errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}


class MalformedInputError(FollowbackError):
    """A document could not be parsed by the extractor for its declared kind."""

    def __init__(
        self,
        message: str,
        side: Optional[str] = None,
        source_kind: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, error_code="malformed_input", context=context)
        self.side = side
        self.source_kind = source_kind


class UnsupportedSourceKindError(FollowbackError):
    """No extractor is registered for the requested source kind."""

    def __init__(self, source_kind: Any, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            f"Unsupported source kind: {source_kind!r} (expected json, html or text)",
            error_code="unsupported_source_kind",
            context=context,
        )
        self.source_kind = source_kind


class InputTooLargeError(FollowbackError):
    """A document exceeds the configured size limit."""

    def __init__(
        self,
        message: str,
        size_bytes: int,
        limit_bytes: int,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, error_code="input_too_large", context=context)
        self.size_bytes = size_bytes
        self.limit_bytes = limit_bytes


class ConfigurationError(FollowbackError):
    """Configuration could not be loaded or validated."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, error_code="configuration_error", context=context)
        self.config_key = config_key


@contextmanager
def ErrorContext(
    operation: str,
    convert_to: Type[FollowbackError] = FollowbackError,
    **context
):
    """Context manager to automatically enhance errors with context.

    Args:
        operation: Name of the operation being performed
        convert_to: Type to convert non-FollowbackError exceptions to
        **context: Additional context key-value pairs

    Raises:
        FollowbackError: Enhanced with context information
    """
    full_context = {
        "operation": operation,
        **context
    }

    try:
        yield
    except FollowbackError as e:
        e.context.update(full_context)
        raise
    except Exception as e:
        followback_error = convert_to(
            f"Error during {operation}: {str(e)}",
            context={
                **full_context,
                "original_error": type(e).__name__
            }
        )
        raise followback_error from e
