"""Coverage service: the host-facing surface over a reconciliation session.

Finds LCOV reports in the workspace, loads them, keeps the status line text
current, answers detail requests for summary handles, and optionally reloads
whenever the loaded report changes on disk.
"""

from __future__ import annotations

import asyncio
import fnmatch
import os
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

import structlog
from watchfiles import Change, awatch

from lcovbridge.config.models import LcovBridgeConfig
from lcovbridge.core.errors import CoverageParseError, InternalError, NoCoverageFilesError
from lcovbridge.coverage.lcov import parse_lcov
from lcovbridge.coverage.models import LcovRecord
from lcovbridge.reconcile.details import DetailItem
from lcovbridge.reconcile.resolver import FileIdentity
from lcovbridge.reconcile.session import (
    CancelSignal,
    LoadResult,
    ReconciliationSession,
    ResolutionStep,
    SessionState,
)
from lcovbridge.reconcile.store import SummaryHandle

logger = structlog.get_logger()

IDLE_STATUS_TEXT = "LCOV Coverage"
IDLE_STATUS_TOOLTIP = "Select LCOV file to show coverage"

StepTracker = Callable[[Iterator[ResolutionStep], int], Iterable[ResolutionStep]]


@dataclass(frozen=True, slots=True)
class CoverageInspection:
    """Everything known about one workspace file's coverage."""

    identity: FileIdentity
    record: LcovRecord
    handle: SummaryHandle
    details: list[DetailItem] = field(default_factory=list)


def _has_glob(pattern: str) -> bool:
    return any(ch in pattern for ch in "*?[")


def _excluded(relative: str, exclude_globs: Iterable[str]) -> bool:
    # "**/x/**" must also match "x/..." at the top of the workspace
    candidates = (relative, f"/{relative}")
    return any(fnmatch.fnmatch(c, glob) for glob in exclude_globs for c in candidates)


class CoverageService:
    """Loads LCOV reports for one workspace and serves coverage to a host."""

    def __init__(self, workspace_root: Path, config: LcovBridgeConfig | None = None) -> None:
        self.workspace_root = workspace_root.resolve()
        self.config = config or LcovBridgeConfig()
        self.session = ReconciliationSession(
            self.workspace_root,
            source_dirs=self.config.coverage.source_dirs,
        )
        self.lcov_path: Path | None = None
        self.last_result: LoadResult | None = None
        self.last_error: str | None = None
        self.status_text = IDLE_STATUS_TEXT
        self.status_tooltip = IDLE_STATUS_TOOLTIP

    # -- discovery -----------------------------------------------------------

    def find_lcov_files(self, pattern: str | None = None) -> list[Path]:
        """Reports matching ``pattern`` (default: configured path or glob), sorted."""
        pattern = pattern or self.config.coverage.lcov_file_path

        if not _has_glob(pattern):
            path = Path(pattern)
            if not path.is_absolute():
                path = self.workspace_root / path
            return [path] if path.is_file() else []

        if Path(pattern).is_absolute():
            base = Path(pattern).anchor
            matches = Path(base).glob(os.path.relpath(pattern, base))
        else:
            matches = self.workspace_root.glob(pattern)

        found: list[Path] = []
        for match in matches:
            if not match.is_file():
                continue
            try:
                relative = match.relative_to(self.workspace_root).as_posix()
            except ValueError:
                relative = match.as_posix()
            if _excluded(relative, self.config.coverage.exclude_globs):
                continue
            found.append(match)
        return sorted(found)

    # -- loading -------------------------------------------------------------

    def load_coverage(
        self,
        lcov_path: Path,
        cancel: CancelSignal | None = None,
        *,
        track: StepTracker | None = None,
    ) -> LoadResult:
        """Parse ``lcov_path`` and reconcile it with the workspace.

        A report that cannot be parsed loads as zero records; the message is
        kept in ``last_error`` for display.
        """
        self.lcov_path = lcov_path
        self.last_error = None
        try:
            records = parse_lcov(lcov_path)
        except CoverageParseError as e:
            logger.warning("lcov_parse_failed", path=str(lcov_path), error=e.message)
            self.last_error = e.message
            records = []

        if not records and self.last_error is None:
            logger.warning("lcov_empty", path=str(lcov_path))

        total = len(records)
        wrap = (lambda steps: track(steps, total)) if track is not None else None

        result = self.session.load(records, cancel, track=wrap)
        self.last_result = result
        self._update_status(result)
        return result

    def find_and_load(
        self,
        pattern: str | None = None,
        cancel: CancelSignal | None = None,
        *,
        track: StepTracker | None = None,
    ) -> LoadResult:
        """Load the first report matching ``pattern``.

        Raises:
            NoCoverageFilesError: If no report matches.
        """
        pattern = pattern or self.config.coverage.lcov_file_path
        files = self.find_lcov_files(pattern)
        if not files:
            raise NoCoverageFilesError.for_pattern(pattern, str(self.workspace_root))
        if len(files) > 1:
            logger.info("lcov_multiple_found", count=len(files), using=str(files[0]))
        return self.load_coverage(files[0], cancel, track=track)

    def auto_load(self) -> LoadResult | None:
        """Load on startup when ``coverage.auto_load`` is enabled."""
        if not self.config.coverage.auto_load:
            return None
        try:
            return self.find_and_load()
        except NoCoverageFilesError as e:
            logger.info("auto_load_skipped", reason=e.message)
            self.last_error = e.message
            return None

    def _update_status(self, result: LoadResult) -> None:
        if result.totals.total_lines == 0 and not result.handles:
            self.status_text = IDLE_STATUS_TEXT
            self.status_tooltip = self.last_error or IDLE_STATUS_TOOLTIP
            return
        self.status_text = result.totals.label
        self.status_tooltip = result.totals.tooltip

    # -- detail --------------------------------------------------------------

    def load_detailed_coverage(self, handle: SummaryHandle) -> list[DetailItem]:
        """Detail items for a handle; never raises."""
        try:
            return self.session.load_detailed_coverage(handle)
        except Exception as e:
            error = InternalError.unexpected(str(e), identity=handle.identity.path)
            logger.exception(
                "detail_load_failed", code=error.error_name, reason=error.message, **error.details
            )
            return []

    def inspect(self, path: Path) -> CoverageInspection | None:
        """Coverage record and detail for one workspace file, if loaded."""
        if not path.is_absolute():
            path = self.workspace_root / path
        if self.session.state is SessionState.IDLE:
            return None
        store = self.session.store
        identity = store.match_identity(FileIdentity.from_path(path))
        if identity is None:
            return None
        record = store.lookup_by_identity(identity)
        handle = store.handle_for(identity)
        if record is None or handle is None:
            return None
        return CoverageInspection(
            identity=identity,
            record=record,
            handle=handle,
            details=self.session.load_detailed_coverage(handle),
        )

    # -- lifecycle -----------------------------------------------------------

    def clear_coverage(self) -> None:
        self.session.abort()
        self.session.reset()
        self.last_result = None
        self.last_error = None
        self.status_text = IDLE_STATUS_TEXT
        self.status_tooltip = IDLE_STATUS_TOOLTIP
        logger.info("coverage_cleared")

    async def watch(
        self,
        lcov_path: Path,
        stop_event: asyncio.Event | None = None,
        *,
        on_reload: Callable[[LoadResult], None] | None = None,
    ) -> int:
        """Reload coverage each time ``lcov_path`` changes; returns reload count.

        Returns immediately when ``coverage.watch_lcov_file`` is disabled.
        """
        if not self.config.coverage.watch_lcov_file:
            return 0

        target = lcov_path.resolve()

        def _only_report(change: Change, path: str) -> bool:
            return change != Change.deleted and Path(path).resolve() == target

        reloads = 0
        logger.info("watch_started", path=str(target))
        async for _changes in awatch(
            target.parent, watch_filter=_only_report, stop_event=stop_event
        ):
            result = self.load_coverage(target)
            reloads += 1
            if on_reload is not None:
                on_reload(result)
        logger.info("watch_stopped", path=str(target), reloads=reloads)
        return reloads
