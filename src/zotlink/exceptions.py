"""Custom exceptions for zotlink.

Provides a structured exception hierarchy with error codes and
machine-readable error information. Configuration errors abort a run
before scanning; the other errors are caught per note and reported.
"""
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(Enum):
    """Error codes for machine-readable error identification."""

    # Storage errors (4xxx)
    STORAGE_READ_FAILED = 4001
    STORAGE_WRITE_FAILED = 4002

    # Configuration errors (6xxx)
    CONFIG_INVALID = 6001
    SOURCE_UNREADABLE = 6003
    DESTINATION_UNWRITABLE = 6004

    # Validation errors (7xxx)
    VALIDATION_FAILED = 7001
    PATH_TRAVERSAL_DETECTED = 7005


class ZotlinkError(Exception):
    """Base exception for all zotlink errors.

    Attributes:
        message: Human-readable error message
        code: Machine-readable error code
        details: Additional context about the error
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.VALIDATION_FAILED,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a dictionary for serialization."""
        return {
            "error": self.__class__.__name__,
            "code": self.code.value,
            "code_name": self.code.name,
            "message": self.message,
            "details": self.details
        }

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"[{self.code.name}] {self.message} ({detail_str})"
        return f"[{self.code.name}] {self.message}"


class ConfigurationError(ZotlinkError):
    """Raised for invalid invocation or inaccessible root directories."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        code: ErrorCode = ErrorCode.CONFIG_INVALID
    ):
        details = {}
        if config_key:
            details["config_key"] = config_key

        super().__init__(message, code=code, details=details)
        self.config_key = config_key


class PathSafetyError(ZotlinkError):
    """Raised when a note path resolves outside the notes root."""

    def __init__(self, path: str, root: str, message: Optional[str] = None):
        super().__init__(
            message or f"Attempting to modify file outside of notes directory: {path}",
            code=ErrorCode.PATH_TRAVERSAL_DETECTED,
            details={"path": path, "root": root}
        )
        self.path = path
        self.root = root


class StorageError(ZotlinkError):
    """Raised when a note cannot be read or rewritten."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        path: Optional[str] = None,
        code: ErrorCode = ErrorCode.STORAGE_READ_FAILED,
        original_error: Optional[Exception] = None
    ):
        details = {}
        if operation:
            details["operation"] = operation
        if path:
            details["path_hint"] = path.split("/")[-1] if "/" in path else path
        if original_error:
            details["original_error"] = str(original_error)[:200]

        super().__init__(message, code=code, details=details)
        self.operation = operation
        self.path = path
        self.original_error = original_error
