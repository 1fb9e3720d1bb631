"""Core module exports."""

from lcovbridge.core.errors import (
    ConfigError,
    CoverageParseError,
    ErrorCode,
    InternalError,
    LcovBridgeError,
    NoCoverageFilesError,
    SessionBusyError,
)
from lcovbridge.core.logging import (
    clear_load_id,
    configure_logging,
    get_load_id,
    get_logger,
    set_load_id,
)
from lcovbridge.core.progress import pluralize, progress, spinner, status

__all__ = [
    # Errors
    "ConfigError",
    "CoverageParseError",
    "ErrorCode",
    "InternalError",
    "LcovBridgeError",
    "NoCoverageFilesError",
    "SessionBusyError",
    # Logging
    "clear_load_id",
    "configure_logging",
    "get_load_id",
    "get_logger",
    "set_load_id",
    # Progress
    "pluralize",
    "progress",
    "spinner",
    "status",
]
