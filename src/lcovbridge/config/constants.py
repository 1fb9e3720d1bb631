"""Configuration constants.

Values here are not user-configurable. Configurable defaults live in
models.py (CoverageConfig, LoggingConfig).
"""

CONFIG_DIR_NAME = ".lcov-bridge"
"""Per-workspace configuration directory."""

ENV_PREFIX = "LCOV_BRIDGE__"
"""Prefix for environment overrides (LCOV_BRIDGE__SECTION__KEY)."""

DEFAULT_SOURCE_DIRS: tuple[str, ...] = ("src", "lib", "app", "components")
"""Conventional source directories probed, in order, for a bare filename."""

DEFAULT_LCOV_PATTERN = "**/lcov.info"
"""Glob used to discover LCOV reports below the workspace root."""

DEFAULT_EXCLUDE_GLOBS: tuple[str, ...] = ("**/node_modules/**",)
"""Discovered reports under these globs are skipped."""

LCOV_EXTENSIONS: frozenset[str] = frozenset({".info", ".lcov", ".dat"})
"""File extensions accepted as LCOV without content sniffing."""
