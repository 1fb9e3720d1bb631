"""CLI utilities."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import click
from rich.table import Table

from lcovbridge.config.loader import load_config
from lcovbridge.core.errors import ConfigError
from lcovbridge.core.logging import configure_logging
from lcovbridge.core.progress import get_console, progress
from lcovbridge.reconcile.details import LINE_END, Declaration, DetailItem, LineRange
from lcovbridge.reconcile.session import LoadResult, ResolutionStep
from lcovbridge.reconcile.store import Ratio
from lcovbridge.service import CoverageService


def build_service(root: Path) -> CoverageService:
    """Create a service for ``root`` and apply its logging configuration.

    ``-v`` on the group raises the level to DEBUG; per-output levels still apply.
    """
    try:
        config = load_config(root)
    except ConfigError as e:
        raise click.ClickException(e.message) from e
    ctx = click.get_current_context(silent=True)
    logging_config = config.logging
    if ctx is not None and (ctx.find_object(dict) or {}).get("verbose"):
        logging_config = logging_config.model_copy(update={"level": "DEBUG"})
    configure_logging(config=logging_config)
    return CoverageService(root, config)


def track_steps(steps: Iterator[ResolutionStep], total: int) -> Iterator[ResolutionStep]:
    """Progress bar tracker for ``CoverageService.load_coverage(track=...)``."""
    return progress(steps, desc="Resolving", total=total, unit="records")


def _percent(ratio: Ratio | None) -> str:
    if ratio is None:
        return "-"
    return f"{ratio.rate * 100:.1f}%"


def _relative(path: str, root: Path) -> str:
    try:
        return Path(path).relative_to(root).as_posix()
    except ValueError:
        return path


def result_to_dict(result: LoadResult, root: Path) -> dict[str, Any]:
    return {
        "state": str(result.state),
        "total_lines": result.totals.total_lines,
        "covered_lines": result.totals.covered_lines,
        "line_coverage_percent": result.totals.percentage,
        "unresolved": result.unresolved,
        "files": [
            {
                "path": _relative(h.identity.path, root),
                "lines": [h.statements.covered, h.statements.total],
                "branches": [h.branches.covered, h.branches.total] if h.branches else None,
                "functions": (
                    [h.declarations.covered, h.declarations.total] if h.declarations else None
                ),
            }
            for h in result.handles
        ],
    }


def print_result(result: LoadResult, root: Path) -> None:
    table = Table(show_edge=False, pad_edge=False)
    table.add_column("File")
    table.add_column("Lines", justify="right")
    table.add_column("Branches", justify="right")
    table.add_column("Functions", justify="right")
    for handle in sorted(result.handles, key=lambda h: h.statements.rate):
        table.add_row(
            _relative(handle.identity.path, root),
            _percent(handle.statements),
            _percent(handle.branches),
            _percent(handle.declarations),
        )
    get_console().print(table)


def _range_to_dict(line_range: LineRange) -> dict[str, Any]:
    end_character = line_range.end.character
    return {
        "start": [line_range.start.line, line_range.start.character],
        "end": [line_range.end.line, None if end_character == LINE_END else end_character],
    }


def detail_to_dict(item: DetailItem) -> dict[str, Any]:
    if isinstance(item, Declaration):
        return {
            "kind": "declaration",
            "name": item.name,
            "range": _range_to_dict(item.range),
            "executed": item.executed,
        }
    return {
        "kind": "statement",
        "range": _range_to_dict(item.range),
        "executed_count": item.executed_count,
        "branches": [
            {"executed": b.executed, "line": b.position.line, "label": b.label}
            for b in item.branches
        ],
    }


def format_detail(item: DetailItem) -> str:
    line = item.range.start.line + 1
    if isinstance(item, Declaration):
        mark = "[green]✓[/green]" if item.executed else "[red]✗[/red]"
        return f"{line:>5}  {mark} fn {item.name}"
    if item.executed_count is False:
        text = f"{line:>5}  [red]✗[/red] not executed"
    else:
        text = f"{line:>5}  [green]✓[/green] {item.executed_count}x"
    for branch in item.branches:
        color = "green" if branch.executed else "yellow"
        text += f"\n         [{color}]{branch.label}[/{color}]"
    return text
