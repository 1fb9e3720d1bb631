"""Record store: the single owner of record, identity and handle associations.

Hosts hand back the summary handle they were given, often with no path
attached, when they ask for detail. Every handle therefore carries an
engine-generated key, and the store keeps an explicit ``key -> record`` map
beside the ``identity -> record`` map. Keys come from a counter that is
never reset, so a handle from an earlier session can never alias a record
of the current one.
"""

from __future__ import annotations

import itertools
import os
from dataclasses import dataclass

import structlog

from lcovbridge.coverage.models import LcovRecord
from lcovbridge.reconcile.resolver import FileIdentity

logger = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class Ratio:
    """Covered/total pair as shown in a coverage summary."""

    covered: int
    total: int

    @property
    def rate(self) -> float:
        """Fraction covered (0.0 to 1.0); 0.0 when nothing is instrumented."""
        if self.total <= 0:
            return 0.0
        return self.covered / self.total


@dataclass(frozen=True, slots=True)
class SummaryHandle:
    """Opaque per-file coverage summary handed to the host.

    ``branches`` and ``declarations`` are None when the report has no
    branch or function data for the file.
    """

    key: int
    identity: FileIdentity
    statements: Ratio
    branches: Ratio | None = None
    declarations: Ratio | None = None


def _summarize(key: int, identity: FileIdentity, record: LcovRecord) -> SummaryHandle:
    branches = (
        Ratio(record.branches.hit, record.branches.found) if record.branches.found > 0 else None
    )
    declarations = (
        Ratio(record.functions.hit, record.functions.found)
        if record.functions.found > 0
        else None
    )
    return SummaryHandle(
        key=key,
        identity=identity,
        statements=Ratio(record.lines.hit, record.lines.found),
        branches=branches,
        declarations=declarations,
    )


def _normalize(path: str) -> str:
    return path.replace("\\", "/").lower()


def _is_suffix(longer: str, shorter: str, sep: str) -> bool:
    """True if ``shorter`` ends ``longer`` on a path-component boundary."""
    if not shorter or not longer.endswith(shorter):
        return False
    if len(longer) == len(shorter):
        return True
    return longer[-len(shorter) - 1] == sep or shorter.startswith(sep)


def _suffix_match(a: str, b: str, sep: str) -> bool:
    return _is_suffix(a, b, sep) or _is_suffix(b, a, sep)


class RecordStore:
    """Bidirectional identity/handle to record map for one session at a time."""

    def __init__(self) -> None:
        self._keys = itertools.count(1)
        self._by_identity: dict[FileIdentity, LcovRecord] = {}
        self._handles: dict[FileIdentity, SummaryHandle] = {}
        self._by_key: dict[int, LcovRecord] = {}
        # Fallback lookups memoized under the identity the caller asked for
        self._aliases: dict[FileIdentity, FileIdentity] = {}

    def begin_session(self) -> None:
        """Forget everything from the previous load."""
        self._by_identity.clear()
        self._handles.clear()
        self._by_key.clear()
        self._aliases.clear()

    def put(self, identity: FileIdentity, record: LcovRecord) -> SummaryHandle:
        """Store a resolved record and issue its summary handle.

        A second record for the same identity replaces the first; the
        earlier handle stops resolving.
        """
        previous = self._handles.get(identity)
        if previous is not None:
            del self._by_key[previous.key]
            logger.debug(
                "record_overwritten",
                identity=identity.path,
                reported_path=record.reported_path,
            )

        handle = _summarize(next(self._keys), identity, record)
        self._by_identity[identity] = record
        self._handles[identity] = handle
        self._by_key[handle.key] = record
        return handle

    def lookup_by_handle(self, handle: SummaryHandle) -> LcovRecord | None:
        return self._by_key.get(handle.key)

    def lookup_by_identity(self, identity: FileIdentity) -> LcovRecord | None:
        """Find the record for ``identity``, tolerating path spelling drift.

        Tries, in order: exact identity, raw suffix match, separator and
        case normalized suffix match, filename-only match.
        """
        stored = self.match_identity(identity)
        return self._by_identity.get(stored) if stored is not None else None

    def match_identity(self, identity: FileIdentity) -> FileIdentity | None:
        """The stored identity ``identity`` refers to, if any."""
        if identity in self._by_identity:
            return identity

        alias = self._aliases.get(identity)
        if alias is not None:
            return alias

        match = self._fallback_match(identity)
        if match is None:
            return None
        self._aliases[identity] = match
        logger.debug("identity_alias", requested=identity.path, stored=match.path)
        return match

    def _fallback_match(self, identity: FileIdentity) -> FileIdentity | None:
        requested = identity.path
        for stored in self._by_identity:
            if _suffix_match(stored.path, requested, os.sep):
                return stored

        normalized = _normalize(requested)
        for stored in self._by_identity:
            if _suffix_match(_normalize(stored.path), normalized, "/"):
                return stored

        name = _normalize(requested).rsplit("/", 1)[-1]
        for stored in self._by_identity:
            if _normalize(stored.path).rsplit("/", 1)[-1] == name:
                return stored
        return None

    def handle_for(self, identity: FileIdentity) -> SummaryHandle | None:
        return self._handles.get(identity)

    def handles(self) -> list[SummaryHandle]:
        """Current handles, one per identity, in first-put order."""
        return list(self._handles.values())

    def records(self) -> list[LcovRecord]:
        return list(self._by_identity.values())

    def __len__(self) -> int:
        return len(self._by_identity)
