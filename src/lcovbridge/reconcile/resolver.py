"""Reported-path to workspace-file resolution.

LCOV producers disagree on how they write ``SF:`` paths: some emit absolute
paths, some paths relative to the workspace, some paths relative to the
directory the tool ran in. Resolution tries a fixed ladder of strategies
and stops at the first candidate that exists:

1. absolute     - the reported path itself, when absolute
2. workspace    - the reported path joined onto the workspace root
3. source_dir   - the bare filename under src/, lib/, app/, components/

A record that matches none of them is dropped. The ladder prefers missing a
file over attributing coverage to the wrong one, except for the filename
probe, where the first conventional directory containing the name wins.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path

import structlog

from lcovbridge.config.constants import DEFAULT_SOURCE_DIRS
from lcovbridge.reconcile.existence import ExistenceCache, ExistsProbe

logger = structlog.get_logger()


@dataclass(frozen=True, slots=True, order=True)
class FileIdentity:
    """Canonical handle to an existing workspace file (absolute, normalized)."""

    path: str

    @classmethod
    def from_path(cls, path: str | os.PathLike[str]) -> FileIdentity:
        return cls(os.path.normpath(os.path.abspath(os.fspath(path))))

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    @property
    def uri(self) -> str:
        return Path(self.path).as_uri()

    def __str__(self) -> str:
        return self.path


def _basename(reported_path: str) -> str:
    # Reports written on Windows keep backslashes even when read elsewhere
    return reported_path.replace("\\", "/").rstrip("/").rsplit("/", 1)[-1]


def _absolute(reported_path: str, _root: str, _dirs: Sequence[str]) -> Iterator[str]:
    if os.path.isabs(reported_path):
        yield os.path.normpath(reported_path)


def _workspace_relative(reported_path: str, root: str, _dirs: Sequence[str]) -> Iterator[str]:
    yield os.path.normpath(os.path.join(root, reported_path.lstrip("/\\")))


def _source_dir_basename(reported_path: str, root: str, dirs: Sequence[str]) -> Iterator[str]:
    name = _basename(reported_path)
    if not name:
        return
    for directory in dirs:
        yield os.path.normpath(os.path.join(root, directory, name))


Strategy = Callable[[str, str, Sequence[str]], Iterator[str]]

STRATEGIES: tuple[tuple[str, Strategy], ...] = (
    ("absolute", _absolute),
    ("workspace", _workspace_relative),
    ("source_dir", _source_dir_basename),
)


def resolve_path(
    reported_path: str,
    workspace_root: str | os.PathLike[str],
    exists: ExistsProbe,
    *,
    source_dirs: Sequence[str] = DEFAULT_SOURCE_DIRS,
) -> tuple[FileIdentity, str] | None:
    """Match a reported path to an existing file.

    Pure apart from ``exists``; pass a stub predicate to test without a
    filesystem.

    Returns:
        ``(identity, strategy_name)`` for the first existing candidate, or
        None when no strategy finds the file.
    """
    if not reported_path.strip():
        return None
    root = os.fspath(workspace_root)
    for strategy_name, strategy in STRATEGIES:
        for candidate in strategy(reported_path, root, source_dirs):
            if exists(candidate):
                return FileIdentity.from_path(candidate), strategy_name
    return None


class PathResolver:
    """Resolves reported paths against one workspace using a session's cache."""

    def __init__(
        self,
        workspace_root: str | os.PathLike[str],
        cache: ExistenceCache,
        *,
        source_dirs: Sequence[str] = DEFAULT_SOURCE_DIRS,
    ) -> None:
        self.workspace_root = os.path.abspath(os.fspath(workspace_root))
        self.cache = cache
        self.source_dirs = tuple(source_dirs)

    def resolve(self, reported_path: str) -> FileIdentity | None:
        match = resolve_path(
            reported_path,
            self.workspace_root,
            self.cache.exists,
            source_dirs=self.source_dirs,
        )
        if match is None:
            logger.debug("record_unresolved", reported_path=reported_path)
            return None
        identity, strategy = match
        logger.debug(
            "path_resolved",
            reported_path=reported_path,
            resolved=identity.path,
            strategy=strategy,
        )
        return identity
