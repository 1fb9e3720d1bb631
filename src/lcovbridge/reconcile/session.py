"""Reconciliation session: one load of LCOV records into a workspace.

State machine::

    IDLE -> RESOLVING -> POPULATED -> (next load) RESOLVING -> ...
              |              |
              +--> ABORTED <-+

Every load starts by clearing the record store and creating a fresh
existence cache. Records are resolved one per step so a caller can observe
cancellation between records; cancellation stops the pass but keeps the
records already stored.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Protocol

import structlog

from lcovbridge.config.constants import DEFAULT_SOURCE_DIRS
from lcovbridge.core.errors import SessionBusyError
from lcovbridge.core.logging import clear_load_id, set_load_id
from lcovbridge.coverage.models import LcovRecord
from lcovbridge.reconcile.aggregate import EMPTY_TOTALS, CoverageTotals, aggregate
from lcovbridge.reconcile.details import DetailItem, synthesize
from lcovbridge.reconcile.existence import ExistenceCache, ExistsProbe
from lcovbridge.reconcile.resolver import FileIdentity, PathResolver
from lcovbridge.reconcile.store import RecordStore, SummaryHandle

logger = structlog.get_logger()


class CancelSignal(Protocol):
    """Anything with ``is_set()``: threading.Event, asyncio.Event."""

    def is_set(self) -> bool: ...


class SessionState(StrEnum):
    IDLE = "idle"
    RESOLVING = "resolving"
    POPULATED = "populated"
    ABORTED = "aborted"


@dataclass(frozen=True, slots=True)
class ResolutionStep:
    """Outcome of resolving one record; ``handle`` is None when unresolved."""

    index: int
    record: LcovRecord
    handle: SummaryHandle | None


@dataclass(frozen=True, slots=True)
class LoadResult:
    state: SessionState
    handles: list[SummaryHandle] = field(default_factory=list)
    totals: CoverageTotals = EMPTY_TOTALS
    unresolved: int = 0

    @property
    def cancelled(self) -> bool:
        return self.state is SessionState.ABORTED


class ReconciliationSession:
    """Resolves records, owns their handles, and answers detail requests."""

    def __init__(
        self,
        workspace_root: str | os.PathLike[str],
        *,
        store: RecordStore | None = None,
        source_dirs: Sequence[str] = DEFAULT_SOURCE_DIRS,
        probe: ExistsProbe = os.path.exists,
    ) -> None:
        self.workspace_root = os.path.abspath(os.fspath(workspace_root))
        self.store = store if store is not None else RecordStore()
        self.source_dirs = tuple(source_dirs)
        self._probe = probe
        self.state = SessionState.IDLE
        self.cache: ExistenceCache | None = None
        self._pass = 0

    def _begin(self) -> PathResolver:
        if self.state is SessionState.RESOLVING:
            raise SessionBusyError.load_in_progress()
        self.store.begin_session()
        self.cache = ExistenceCache(self._probe)
        self.state = SessionState.RESOLVING
        self._pass += 1
        return PathResolver(self.workspace_root, self.cache, source_dirs=self.source_dirs)

    def _is_live(self, pass_id: int) -> bool:
        return self._pass == pass_id and self.state is SessionState.RESOLVING

    def steps(
        self,
        records: Iterable[LcovRecord],
        cancel: CancelSignal | None = None,
    ) -> Iterator[ResolutionStep]:
        """Resolve and store records, one per yielded step.

        The pass stops early when ``cancel`` is set, when ``abort()`` or
        ``reset()`` is called, or when the consumer closes the iterator.

        Raises:
            SessionBusyError: If a previous pass is still resolving.
        """
        resolver = self._begin()
        pass_id = self._pass
        try:
            for index, record in enumerate(records):
                if not self._is_live(pass_id):
                    return
                if cancel is not None and cancel.is_set():
                    self.state = SessionState.ABORTED
                    logger.info("load_cancelled", resolved=len(self.store), at=index)
                    return
                identity = resolver.resolve(record.reported_path)
                handle = self.store.put(identity, record) if identity is not None else None
                yield ResolutionStep(index=index, record=record, handle=handle)
        except BaseException:
            # Closed early or failed mid-pass; later loads must not see RESOLVING.
            if self._is_live(pass_id):
                self.state = SessionState.ABORTED
            raise
        if self._is_live(pass_id):
            self.state = SessionState.POPULATED

    def load(
        self,
        records: Iterable[LcovRecord],
        cancel: CancelSignal | None = None,
        *,
        track: Callable[[Iterator[ResolutionStep]], Iterable[ResolutionStep]] | None = None,
    ) -> LoadResult:
        """Run a complete pass and return handles and totals.

        Args:
            records: Parsed records, in report order.
            cancel: Checked before each record.
            track: Optional wrapper around the step iterator (progress display).
        """
        set_load_id()
        try:
            unresolved = 0
            seen = 0
            pending = self.steps(records, cancel)
            steps = track(pending) if track is not None else pending
            for step in steps:
                seen += 1
                if step.handle is None:
                    unresolved += 1

            totals = aggregate(self.store.records())
            result = LoadResult(
                state=self.state,
                handles=self.store.handles(),
                totals=totals,
                unresolved=unresolved,
            )
            logger.info(
                "load_done",
                state=str(self.state),
                records=seen,
                resolved=len(result.handles),
                unresolved=unresolved,
                percentage=totals.percentage,
                existence_probes=self.cache.probes if self.cache else 0,
            )
            return result
        finally:
            clear_load_id()

    def abort(self) -> None:
        """Stop treating the current pass as live; stored records stay readable."""
        if self.state in (SessionState.RESOLVING, SessionState.POPULATED):
            self.state = SessionState.ABORTED

    def reset(self) -> None:
        """Drop all stored records and return to IDLE."""
        if self.state is SessionState.RESOLVING:
            raise SessionBusyError.load_in_progress()
        self.store.begin_session()
        self.cache = None
        self.state = SessionState.IDLE

    def record_for(self, identity: FileIdentity) -> LcovRecord | None:
        if self.state is SessionState.IDLE:
            return None
        return self.store.lookup_by_identity(identity)

    def details_for_identity(self, identity: FileIdentity) -> list[DetailItem]:
        record = self.record_for(identity)
        return synthesize(record) if record is not None else []

    def load_detailed_coverage(self, handle: SummaryHandle) -> list[DetailItem]:
        """Detail items for a handle previously issued by this session.

        Falls back to the handle's identity when its key is unknown. Returns
        an empty list for stale handles and before any load.
        """
        if self.state is SessionState.IDLE:
            return []
        record = self.store.lookup_by_handle(handle)
        if record is None:
            record = self.store.lookup_by_identity(handle.identity)
        if record is None:
            logger.debug("detail_unavailable", identity=handle.identity.path, key=handle.key)
            return []
        return synthesize(record)
