"""Logging for lcov-bridge: structlog events rendered through stdlib handlers.

Each ``logging.outputs`` entry in the config becomes one root handler with
its own renderer (console or JSON) and level. Events emitted while a
reconciliation pass runs carry that pass's ``load_id``, so a log file can be
filtered down to a single load.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from lcovbridge.config.models import LoggingConfig, LogOutputConfig

_load_id: ContextVar[str | None] = ContextVar("load_id", default=None)

_CONSOLE_DESTINATIONS = frozenset({"stderr", "stdout"})


def get_load_id() -> str | None:
    return _load_id.get()


def set_load_id(load_id: str | None = None) -> str:
    """Tag subsequent events with ``load_id`` (a fresh 12-char hex id if omitted)."""
    lid = load_id or uuid4().hex[:12]
    _load_id.set(lid)
    return lid


def clear_load_id() -> None:
    _load_id.set(None)


def _add_load_id(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    if lid := get_load_id():
        event_dict["load_id"] = lid
    return event_dict


def _level(name: str | None, fallback: int = logging.INFO) -> int:
    if name is None:
        return fallback
    value = logging.getLevelNamesMapping().get(name.upper())
    return value if value is not None else fallback


class ConsoleSuppressingFilter(logging.Filter):
    """Drops records while a progress bar or spinner owns the terminal.

    Attached to stderr/stdout handlers only; file outputs are unaffected.
    """

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: ARG002
        # progress imports this module's logger lazily; keep the cycle one-way
        from lcovbridge.core.progress import is_console_suppressed

        return not is_console_suppressed()


def _formatter(
    fmt: str, *, colors: bool, pre_chain: list[structlog.types.Processor]
) -> logging.Formatter:
    renderer: structlog.types.Processor
    if fmt == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=colors, pad_event_to=0, pad_level=False)
    return structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain)


def _handler(output: LogOutputConfig) -> logging.Handler:
    handler: logging.Handler
    if output.destination in _CONSOLE_DESTINATIONS:
        # Look the stream up now so redirected sys.stderr/sys.stdout are honored
        stream = getattr(sys, output.destination)
        handler = logging.StreamHandler(stream)
        handler.addFilter(ConsoleSuppressingFilter())
    else:
        path = Path(output.destination)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, mode="a")
    return handler


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "INFO",
) -> None:
    """Install handlers for every configured output, replacing any existing ones.

    Without ``config``, a single stderr output is built from ``json_format``
    and ``level``. Safe to call again; the CLI does so once the workspace
    config has been read.
    """
    from lcovbridge.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level,
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )
    root_level = _level(config.level)

    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
        _add_load_id,  # type: ignore[list-item]
    ]
    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Reconfiguration must reach module-level loggers created at import
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    for stale in root.handlers[:]:
        root.removeHandler(stale)
        stale.close()
    root.setLevel(root_level)
    # watchfiles reports every filtered change at debug level
    logging.getLogger("watchfiles.main").setLevel(logging.WARNING)

    for output in config.outputs:
        is_console = output.destination in _CONSOLE_DESTINATIONS
        handler = _handler(output)
        handler.setLevel(_level(output.level or config.level, root_level))
        handler.setFormatter(
            _formatter(
                output.format,
                colors=is_console and getattr(sys, output.destination).isatty(),
                pre_chain=pre_chain,
            )
        )
        root.addHandler(handler)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger=name)
    return logger  # type: ignore[no-any-return]
