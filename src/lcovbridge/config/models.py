"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (LCOV_BRIDGE__SECTION__KEY)
3. Workspace YAML (.lcov-bridge/config.yaml)
4. Global YAML (~/.config/lcov-bridge/config.yaml)
5. Built-in defaults (this file)

Examples:
    LCOV_BRIDGE__LOGGING__LEVEL=DEBUG
    LCOV_BRIDGE__COVERAGE__LCOV_FILE_PATH=build/coverage/lcov.info
    LCOV_BRIDGE__COVERAGE__WATCH_LCOV_FILE=false
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from lcovbridge.config.constants import (
    DEFAULT_EXCLUDE_GLOBS,
    DEFAULT_LCOV_PATTERN,
    DEFAULT_SOURCE_DIRS,
)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        LCOV_BRIDGE__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every path resolution attempt.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class CoverageConfig(BaseModel):
    """Coverage loading configuration.

    Env vars:
        LCOV_BRIDGE__COVERAGE__AUTO_LOAD: Load coverage on startup
        LCOV_BRIDGE__COVERAGE__LCOV_FILE_PATH: Report path or glob
        LCOV_BRIDGE__COVERAGE__WATCH_LCOV_FILE: Reload when the report changes
    """

    auto_load: bool = Field(
        default=False,
        description="Find and load a coverage report as soon as the host starts.",
    )
    lcov_file_path: str = Field(
        default=DEFAULT_LCOV_PATTERN,
        description="LCOV report to load, relative to the workspace root or absolute. "
        "Glob patterns are accepted; the first match is used.",
    )
    watch_lcov_file: bool = Field(
        default=True,
        description="Reload coverage whenever the loaded report changes on disk.",
    )
    source_dirs: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SOURCE_DIRS),
        description="Directories probed, in order, when a reported path only matches "
        "by filename. RISK: same-named files in two of them resolve to the first.",
    )
    exclude_globs: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDE_GLOBS),
        description="Globs excluded from report discovery.",
    )

    @field_validator("source_dirs")
    @classmethod
    def validate_source_dirs(cls, v: list[str]) -> list[str]:
        for entry in v:
            if Path(entry).is_absolute():
                raise ValueError(f"Source directory must be workspace-relative: {entry}")
        return v


class LcovBridgeConfig(BaseModel):
    """Root configuration for lcov-bridge."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    coverage: CoverageConfig = Field(default_factory=CoverageConfig)
