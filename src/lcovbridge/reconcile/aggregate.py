"""Overall line coverage across the resolved records of a load."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from lcovbridge.coverage.models import LcovRecord


@dataclass(frozen=True, slots=True)
class CoverageTotals:
    total_lines: int
    covered_lines: int
    percentage: float

    @property
    def label(self) -> str:
        """Status text, e.g. ``"82.50% Coverage"``."""
        return f"{self.percentage:.2f}% Coverage"

    @property
    def tooltip(self) -> str:
        return f"{self.covered_lines}/{self.total_lines} lines covered"


EMPTY_TOTALS = CoverageTotals(total_lines=0, covered_lines=0, percentage=0.0)


def aggregate(records: Iterable[LcovRecord]) -> CoverageTotals:
    """Sum ``LF``/``LH`` over records; files with no instrumented lines add nothing."""
    total = 0
    covered = 0
    for record in records:
        if record.lines.found <= 0:
            continue
        total += record.lines.found
        covered += record.lines.hit

    if total == 0:
        return EMPTY_TOTALS
    return CoverageTotals(
        total_lines=total,
        covered_lines=covered,
        percentage=round(covered / total * 100.0, 2),
    )
