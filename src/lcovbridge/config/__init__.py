"""Config module exports."""

from lcovbridge.config.loader import load_config
from lcovbridge.config.models import (
    CoverageConfig,
    LcovBridgeConfig,
    LoggingConfig,
    LogOutputConfig,
)

__all__ = [
    "load_config",
    "CoverageConfig",
    "LcovBridgeConfig",
    "LoggingConfig",
    "LogOutputConfig",
]
