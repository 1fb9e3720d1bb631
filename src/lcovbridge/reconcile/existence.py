"""Memoized filesystem existence checks for one reconciliation pass."""

from __future__ import annotations

import os
from collections.abc import Callable

ExistsProbe = Callable[[str], bool]


class ExistenceCache:
    """Remembers whether candidate paths exist.

    One instance belongs to one load. It is never reused for the next load,
    so files created or deleted between loads are always seen.
    """

    __slots__ = ("_probe", "_known", "probes")

    def __init__(self, probe: ExistsProbe = os.path.exists) -> None:
        self._probe = probe
        self._known: dict[str, bool] = {}
        self.probes = 0

    def exists(self, path: str) -> bool:
        known = self._known.get(path)
        if known is not None:
            return known
        self.probes += 1
        found = bool(self._probe(path))
        self._known[path] = found
        return found

    __call__ = exists
