"""LCOV format parser.

LCOV format is a plain text format with records like:
- TN:<test name>
- SF:<source file path>
- FN:<line>,<name>
- FNDA:<hit count>,<name>
- FNF:<functions found>
- FNH:<functions hit>
- DA:<line>,<hit count>[,<checksum>]
- LF:<lines found>
- LH:<lines hit>
- BRDA:<line>,<block>,<branch>,<taken>
- BRF:<branches found>
- BRH:<branches hit>
- end_of_record

Used by: c8/nyc/istanbul, pytest-cov, cargo-llvm-cov, gcov/lcov, dart test
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import structlog

from lcovbridge.config.constants import LCOV_EXTENSIONS
from lcovbridge.core.errors import CoverageParseError
from lcovbridge.coverage.models import (
    BranchCounts,
    BranchDetail,
    FunctionCounts,
    FunctionDetail,
    LcovRecord,
    LineCounts,
    LineDetail,
)

logger = structlog.get_logger()


@dataclass(slots=True)
class _RecordBuilder:
    """Mutable accumulator for one SF block."""

    path: str
    lines: list[LineDetail] = field(default_factory=list)
    branches: list[BranchDetail] = field(default_factory=list)
    fn_lines: dict[str, int] = field(default_factory=dict)  # name -> line, FN order
    fn_hits: dict[str, int] = field(default_factory=dict)  # name -> hits
    counters: dict[str, int] = field(default_factory=dict)  # "LF" -> value, ...

    def build(self) -> LcovRecord:
        line_details = tuple(self.lines) or None
        lines = LineCounts(
            found=self.counters.get("LF", len(self.lines)),
            hit=self.counters.get("LH", sum(1 for d in self.lines if d.hit_count > 0)),
            details=line_details,
        )

        names = list(self.fn_lines)
        names.extend(name for name in self.fn_hits if name not in self.fn_lines)
        fn_details = tuple(
            FunctionDetail(
                name=name,
                line_number=self.fn_lines.get(name, 0),
                hit_count=self.fn_hits.get(name, 0),
            )
            for name in names
        )
        functions = FunctionCounts(
            found=self.counters.get("FNF", len(fn_details)),
            hit=self.counters.get("FNH", sum(1 for f in fn_details if f.hit_count > 0)),
            details=fn_details or None,
        )

        branches = BranchCounts(
            found=self.counters.get("BRF", len(self.branches)),
            hit=self.counters.get("BRH", sum(1 for b in self.branches if b.taken_count > 0)),
            details=tuple(self.branches) or None,
        )

        return LcovRecord(
            reported_path=self.path,
            lines=lines,
            functions=functions,
            branches=branches,
        )


_COUNTER_TAGS = frozenset({"LF", "LH", "FNF", "FNH", "BRF", "BRH"})


def _count(value: str) -> int:
    """Parse a hit/taken count; '-' means never executed."""
    value = value.strip()
    return 0 if value == "-" else int(value)


def is_lcov_file(path: Path) -> bool:
    """Check if file looks like LCOV format."""
    if not path.is_file():
        return False
    if path.suffix in LCOV_EXTENSIONS:
        return True
    # Content sniff: first meaningful line is TN: or SF:
    try:
        with path.open() as f:
            for line in f:
                stripped = line.strip()
                if stripped.startswith(("SF:", "TN:")):
                    return True
                if stripped and not stripped.startswith("#"):
                    break
    except (OSError, UnicodeDecodeError):
        pass
    return False


def parse_lcov_text(content: str, *, source: str = "<string>") -> list[LcovRecord]:
    """Parse LCOV text into records, in report order.

    Raises:
        CoverageParseError: If the text has content but no SF record.
    """
    records: list[LcovRecord] = []
    current: _RecordBuilder | None = None
    saw_content = False

    for raw in content.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        saw_content = True

        if line == "end_of_record":
            if current is not None:
                records.append(current.build())
            current = None
            continue

        tag, sep, value = line.partition(":")
        if not sep:
            continue

        if tag == "SF":
            if current is not None:
                # SF without end_of_record for the previous file
                records.append(current.build())
            current = _RecordBuilder(path=value)
            continue

        if current is None:
            continue

        try:
            if tag == "DA":
                parts = value.split(",")
                if len(parts) >= 2:
                    current.lines.append(
                        LineDetail(line_number=int(parts[0]), hit_count=_count(parts[1]))
                    )
            elif tag == "BRDA":
                parts = value.split(",")
                if len(parts) >= 4:
                    current.branches.append(
                        BranchDetail(
                            line_number=int(parts[0]),
                            block_id=int(parts[1]),
                            branch_id=int(parts[2]),
                            taken_count=_count(parts[3]),
                        )
                    )
            elif tag == "FN":
                # FN:<line>,<name> or FN:<line>,<end line>,<name> (lcov 2.x)
                # Names may contain commas: "foo(int, int)".
                parts = value.split(",", 2)
                if len(parts) == 3 and parts[1].isdigit():
                    name = parts[2]
                else:
                    name = value.split(",", 1)[1] if len(parts) >= 2 else ""
                if name:
                    current.fn_lines.setdefault(name, int(parts[0]))
            elif tag == "FNDA":
                hits, _, name = value.partition(",")
                if name:
                    current.fn_hits[name] = _count(hits)
            elif tag in _COUNTER_TAGS:
                current.counters[tag] = int(value)
        except ValueError:
            logger.debug("lcov_line_skipped", source=source, line=line)

    # Handle file without end_of_record
    if current is not None:
        records.append(current.build())

    if saw_content and not records:
        raise CoverageParseError.malformed(source, "no SF records found")

    return records


def parse_lcov(path: Path) -> list[LcovRecord]:
    """Parse an LCOV file into records, in report order.

    Raises:
        CoverageParseError: If the file is missing, unreadable, or not LCOV.
    """
    if not path.exists():
        raise CoverageParseError.not_found(str(path))

    try:
        content = path.read_text()
    except (OSError, UnicodeDecodeError) as e:
        raise CoverageParseError.malformed(str(path), str(e)) from e

    records = parse_lcov_text(content, source=str(path))
    logger.debug("lcov_parsed", path=str(path), records=len(records))
    return records
