"""Terminal feedback for the lcov-bridge CLI.

All output goes to stderr through one rich console, so ``--json`` output on
stdout stays machine-readable. Live displays (the resolve bar, the search
spinner) only appear on a TTY and pause console log handlers while drawn.
Elsewhere, ``progress`` logs start and end at debug level and ``spinner``
prints its message once.
"""

from __future__ import annotations

import sys
import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from rich.console import Console
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn

if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger

# Reports with this many records or fewer resolve too fast to need a bar
_PROGRESS_THRESHOLD = 10

_console = Console(stderr=True)

_STYLES = {
    "success": "[green]✓[/green] ",
    "error": "[red]✗[/red] ",
    "warning": "[yellow]![/yellow] ",
    "info": "  ",
    "none": "",
}

_live = threading.local()


def is_console_suppressed() -> bool:
    return getattr(_live, "active", False)


@contextmanager
def suppress_console_logs() -> Iterator[None]:
    """Mark a live display as active for the duration of the block."""
    _live.active = True
    try:
        yield
    finally:
        _live.active = False


def _log() -> BoundLogger:
    # Resolved per call so configure_logging() after import still applies
    from lcovbridge.core.logging import get_logger

    return get_logger("progress")


def _is_tty() -> bool:
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


def get_console() -> Console:
    return _console


def status(message: str, *, style: str = "info", indent: int = 0) -> None:
    """Print one prefixed line, e.g. ``✓ Coverage loaded: 82.50% (33/40 lines)``."""
    _console.print(f"{' ' * indent}{_STYLES.get(style, '')}{message}", highlight=False)
    _log().debug("status", message=message, style=style)


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Count with the noun inflected: ``pluralize(3, "record")`` -> ``"3 records"``."""
    return f"{count} {singular if count == 1 else (plural or singular + 's')}"


def progress[T](
    iterable: Iterable[T],
    *,
    desc: str | None = None,
    total: int | None = None,
    unit: str = "records",
    force: bool = False,
) -> Iterator[T]:
    """Yield from ``iterable``, drawing a bar when the pass is long enough to watch.

    ``total`` defaults to ``len(iterable)`` when it has one. Resolution steps
    come from a generator, so callers pass the record count explicitly.
    """
    if total is None and hasattr(iterable, "__len__"):
        total = len(iterable)  # type: ignore[arg-type]

    if not (_is_tty() and total is not None and (force or total > _PROGRESS_THRESHOLD)):
        if desc and total:
            _log().debug("progress_start", desc=desc, total=total)
        yield from iterable
        if desc and total:
            _log().debug("progress_done", desc=desc, total=total)
        return

    bar = Progress(
        TextColumn("    {task.description}:"),
        BarColumn(bar_width=25, style="cyan", complete_style="cyan"),
        TaskProgressColumn(),
        TextColumn("{task.completed}/{task.total} {task.fields[unit]}"),
        console=_console,
        transient=True,
    )
    with suppress_console_logs(), bar:
        task_id = bar.add_task(desc or "Resolving", total=total, unit=unit)
        for item in iterable:
            yield item
            bar.advance(task_id)


@contextmanager
def spinner(message: str, *, indent: int = 0) -> Iterator[None]:
    """Spin while the block runs (``find`` uses this around report discovery)."""
    text = f"{' ' * indent}{message}"
    if not _is_tty():
        _console.print(f"{text}...")
        yield
        return
    with suppress_console_logs(), _console.status(f"[cyan]{text}[/cyan]", spinner="dots"):
        yield
