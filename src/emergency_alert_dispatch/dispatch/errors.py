"""Error taxonomy for alert dispatch."""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Machine-readable error codes reported to callers."""

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    ALL_DELIVERIES_FAILED = "ALL_DELIVERIES_FAILED"
    NOT_IMPLEMENTED = "NOT_IMPLEMENTED"
    INVALID_ARGUMENTS = "INVALID_ARGUMENTS"


class DispatchError(Exception):
    """Base exception for errors that abort a dispatch call."""

    code: ErrorCode = ErrorCode.CONFIGURATION_ERROR


class ConfigurationError(DispatchError):
    """Raised when the dispatch plan configuration is unusable."""

    code = ErrorCode.CONFIGURATION_ERROR


class UnknownCategoryError(ConfigurationError):
    """Raised when no plan exists for the requested alert category."""

    def __init__(self, category: object) -> None:
        super().__init__(f"No dispatch plan configured for category {category!r}")
        self.category = category


class PermissionDeniedError(DispatchError):
    """Raised when a dispatch is requested without transport authorization."""

    code = ErrorCode.PERMISSION_DENIED


class TransportError(Exception):
    """Raised by transports that signal a failed send with an exception."""
