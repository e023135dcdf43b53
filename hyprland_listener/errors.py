"""
Error types for the Hyprland event listener.

Every failure that ends a listener run is raised as a ListenerError subclass
carrying a structured code, except handler failures, which propagate as the
handler's own exception.
"""

from enum import Enum
from typing import Any, Dict, Iterable, Optional


class ErrorCode(Enum):
    """
    Error codes for the Hyprland event listener.

    Ranges:
    - 1000-1099: Decode errors (grammar / field conversion)
    - 1100-1199: Encoding errors
    - 1200-1299: Configuration errors
    - 1400-1499: Transport errors
    - 1500-1599: Listener state errors
    """

    # Decode errors (1000-1099)
    AMBIGUOUS_EVENT = 1000
    FIELD_CONVERSION = 1001
    LINE_TOO_LONG = 1002

    # Encoding errors (1100-1199)
    INVALID_UTF8 = 1100
    TRUNCATED_UTF8 = 1101

    # Configuration errors (1200-1299)
    MISSING_INSTANCE_SIGNATURE = 1200
    INVALID_CONFIG = 1201

    # Transport errors (1400-1499)
    SOCKET_NOT_FOUND = 1400
    CONNECT_FAILED = 1401
    CONNECT_TIMEOUT = 1402
    READ_FAILED = 1403

    # Listener state errors (1500-1599)
    ALREADY_STARTED = 1500


class ListenerError(Exception):
    """Base exception for event listener errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize listener error.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            suggestion: Suggested recovery action
            context: Additional context for debugging
        """
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.context = context or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error to a JSON-serialisable dictionary.

        Returns:
            Error dictionary with code, message, suggestion, and context
        """
        result = {
            "code": self.code.value,
            "message": self.message
        }

        if self.suggestion:
            result["suggestion"] = self.suggestion

        if self.context:
            result["context"] = self.context

        return result


class TransportError(ListenerError):
    """Event socket connect or read failure."""

    def __init__(
        self,
        operation: str,
        reason: str,
        code: ErrorCode = ErrorCode.READ_FAILED,
        suggestion: Optional[str] = None
    ):
        super().__init__(
            code=code,
            message=f"Event socket {operation} failed: {reason}",
            suggestion=suggestion or "Ensure Hyprland is running and its event socket is accessible",
            context={"operation": operation, "reason": reason}
        )


class EncodingError(ListenerError):
    """Bytes received from the event socket are not valid UTF-8."""

    def __init__(self, reason: str, code: ErrorCode = ErrorCode.INVALID_UTF8):
        super().__init__(
            code=code,
            message=f"Event stream is not valid UTF-8: {reason}",
            context={"reason": reason}
        )


class DecodeError(ListenerError):
    """A line could not be turned into exactly one event."""

    def __init__(self, code: ErrorCode, message: str, line: str, context: Optional[Dict[str, Any]] = None):
        self.line = line
        merged = {"line": line}
        merged.update(context or {})
        super().__init__(code=code, message=message, context=merged)


class AmbiguousEventError(DecodeError):
    """A line matched zero or several grammar patterns."""

    def __init__(self, line: str, candidates: Iterable[Any] = ()):
        self.candidates = tuple(candidates)
        names = [getattr(kind, "value", str(kind)) for kind in self.candidates]
        if names:
            message = f"Line matches {len(names)} event patterns ({', '.join(names)}): {line!r}"
        else:
            message = f"Line matches no event pattern: {line!r}"
        super().__init__(
            code=ErrorCode.AMBIGUOUS_EVENT,
            message=message,
            line=line,
            context={"candidates": names}
        )


class FieldConversionError(DecodeError):
    """A captured field could not be converted to its declared type."""

    def __init__(self, line: str, field: str, value: str, reason: str):
        self.field = field
        self.value = value
        super().__init__(
            code=ErrorCode.FIELD_CONVERSION,
            message=f"Field '{field}' has invalid value {value!r}: {reason}",
            line=line,
            context={"field": field, "value": value}
        )


class LineTooLongError(DecodeError):
    """An unterminated line grew past the reassembly limit."""

    def __init__(self, prefix: str, limit: int):
        self.limit = limit
        super().__init__(
            code=ErrorCode.LINE_TOO_LONG,
            message=f"Unterminated line exceeds {limit} characters: {prefix!r}...",
            line=prefix,
            context={"limit": limit}
        )


class ConfigurationError(ListenerError):
    """Listener configuration is incomplete or invalid."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INVALID_CONFIG,
        suggestion: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(code=code, message=message, suggestion=suggestion, context=context)


class ListenerStateError(ListenerError):
    """Operation not allowed in the listener's current state."""

    def __init__(self, state: str):
        super().__init__(
            code=ErrorCode.ALREADY_STARTED,
            message=f"Listener cannot be started from state '{state}'",
            suggestion="Create a new EventListener for each run",
            context={"state": state}
        )
