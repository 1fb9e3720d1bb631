"""LCOV input record model.

One ``LcovRecord`` per ``SF:`` block of a report, exactly as the report
states it. Counters are taken from the report's ``LF/LH``, ``FNF/FNH`` and
``BRF/BRH`` lines; ``hit <= found`` is expected but not enforced.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class LineDetail:
    """Execution count of one instrumented line (``DA``)."""

    line_number: int
    hit_count: int


@dataclass(frozen=True, slots=True)
class FunctionDetail:
    """Function declaration with its call count (``FN`` + ``FNDA``)."""

    name: str
    line_number: int
    hit_count: int


@dataclass(frozen=True, slots=True)
class BranchDetail:
    """One branch outcome at a line (``BRDA``)."""

    line_number: int
    block_id: int
    branch_id: int
    taken_count: int


@dataclass(frozen=True, slots=True)
class LineCounts:
    found: int = 0
    hit: int = 0
    details: tuple[LineDetail, ...] | None = None


@dataclass(frozen=True, slots=True)
class FunctionCounts:
    found: int = 0
    hit: int = 0
    details: tuple[FunctionDetail, ...] | None = None


@dataclass(frozen=True, slots=True)
class BranchCounts:
    found: int = 0
    hit: int = 0
    details: tuple[BranchDetail, ...] | None = None


@dataclass(frozen=True, slots=True)
class LcovRecord:
    """Coverage of one source file as reported by an LCOV producer.

    ``reported_path`` is the ``SF:`` value verbatim: absolute, workspace
    relative, or relative to whatever directory the producer ran in.
    """

    reported_path: str
    lines: LineCounts = LineCounts()
    functions: FunctionCounts = FunctionCounts()
    branches: BranchCounts = BranchCounts()

    @property
    def has_line_details(self) -> bool:
        return bool(self.lines.details)
