"""Per-line, per-branch and per-declaration detail synthesis.

Details are rebuilt from the stored record on every request and never
cached. Declarations come first so a host that layers items by draw order
paints function markers above plain statement coverage. A line that carries
a declaration never also yields a statement.
"""

from __future__ import annotations

import sys
from collections import defaultdict
from dataclasses import dataclass
from typing import Literal

from lcovbridge.coverage.models import BranchDetail, LcovRecord

# End column of a whole-line range; LCOV has no column information
LINE_END = sys.maxsize


@dataclass(frozen=True, slots=True, order=True)
class Position:
    """Zero-based line and character offset."""

    line: int
    character: int


@dataclass(frozen=True, slots=True)
class LineRange:
    start: Position
    end: Position

    @classmethod
    def whole_line(cls, line_number: int) -> LineRange:
        """Range covering 1-based ``line_number`` from column 0 to end of line."""
        line = line_number - 1
        return cls(Position(line, 0), Position(line, LINE_END))


@dataclass(frozen=True, slots=True)
class BranchMark:
    executed: bool
    position: Position
    label: str


@dataclass(frozen=True, slots=True)
class Declaration:
    name: str
    range: LineRange
    executed: bool


@dataclass(frozen=True, slots=True)
class Statement:
    """Line coverage; ``executed_count`` is False for lines never run."""

    range: LineRange
    executed_count: int | Literal[False]
    branches: tuple[BranchMark, ...] = ()

    @property
    def executed(self) -> bool:
        return self.executed_count is not False


DetailItem = Declaration | Statement


def branch_label(branch: BranchDetail) -> str:
    state = "taken" if branch.taken_count > 0 else "not taken"
    return f"Branch {branch.block_id}:{branch.branch_id} {state}"


def _branches_by_line(record: LcovRecord) -> dict[int, list[BranchMark]]:
    grouped: dict[int, list[BranchMark]] = defaultdict(list)
    for branch in record.branches.details or ():
        if branch.line_number < 1:
            continue
        grouped[branch.line_number].append(
            BranchMark(
                executed=branch.taken_count > 0,
                position=Position(branch.line_number - 1, 0),
                label=branch_label(branch),
            )
        )
    return grouped


def synthesize(record: LcovRecord) -> list[DetailItem]:
    """Build the ordered detail items for one record.

    Records without line-level data produce no detail at all, even when
    they carry function or branch data.
    """
    if not record.lines.details:
        return []

    branches = _branches_by_line(record)
    items: list[DetailItem] = []
    claimed: set[int] = set()

    for fn in record.functions.details or ():
        if fn.line_number <= 0:
            continue
        items.append(
            Declaration(
                name=fn.name,
                range=LineRange.whole_line(fn.line_number),
                executed=fn.hit_count > 0,
            )
        )
        claimed.add(fn.line_number)

    for line in record.lines.details:
        if line.line_number < 1 or line.line_number in claimed:
            continue
        claimed.add(line.line_number)
        items.append(
            Statement(
                range=LineRange.whole_line(line.line_number),
                executed_count=line.hit_count if line.hit_count > 0 else False,
                branches=tuple(branches.get(line.line_number, ())),
            )
        )

    return items
