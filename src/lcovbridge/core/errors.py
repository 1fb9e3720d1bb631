"""lcov-bridge error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 7xxx: Coverage
- 9xxx: Internal

Only parser-level and configuration failures are raised to the host. Missing
source files, missing detail, and ambiguous path matches are expected
conditions and are reported as empty results instead.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Coverage (7xxx)
    COVERAGE_FILE_NOT_FOUND = 7001
    COVERAGE_PARSE_ERROR = 7002
    COVERAGE_FILES_MISSING = 7003
    SESSION_BUSY = 7010

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class LcovBridgeError(Exception):
    """Base error with structured context for host display."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'COVERAGE_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(LcovBridgeError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class CoverageParseError(LcovBridgeError):
    """The LCOV report could not be read or is not LCOV."""

    @classmethod
    def not_found(cls, path: str) -> "CoverageParseError":
        return cls(
            code=ErrorCode.COVERAGE_FILE_NOT_FOUND,
            message=f"LCOV file not found: {path}",
            details={"path": path},
        )

    @classmethod
    def malformed(cls, path: str, reason: str) -> "CoverageParseError":
        return cls(
            code=ErrorCode.COVERAGE_PARSE_ERROR,
            message=f"Error parsing LCOV file {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class NoCoverageFilesError(LcovBridgeError):
    """No LCOV report matched the search pattern."""

    @classmethod
    def for_pattern(cls, pattern: str, root: str) -> "NoCoverageFilesError":
        return cls(
            code=ErrorCode.COVERAGE_FILES_MISSING,
            message=f"No LCOV files found matching pattern: {pattern}",
            details={"pattern": pattern, "root": root},
        )


class SessionBusyError(LcovBridgeError):
    """A load was started while another one is still resolving."""

    @classmethod
    def load_in_progress(cls) -> "SessionBusyError":
        return cls(
            code=ErrorCode.SESSION_BUSY,
            message="A coverage load is already in progress",
            retryable=True,
        )


class InternalError(LcovBridgeError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
