"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages,
and provides record builders shared by the reconcile and service tests.
"""

import sys
from collections.abc import Callable
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of lcovbridge modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("lcovbridge"):
        del sys.modules[module_name]

from lcovbridge.coverage.models import (  # noqa: E402
    BranchCounts,
    BranchDetail,
    FunctionCounts,
    FunctionDetail,
    LcovRecord,
    LineCounts,
    LineDetail,
)


def _make_record(
    reported_path: str,
    *,
    lines: dict[int, int] | None = None,
    functions: list[tuple[str, int, int]] | None = None,
    branches: list[tuple[int, int, int, int]] | None = None,
    lines_found: int | None = None,
    lines_hit: int | None = None,
) -> LcovRecord:
    """Build a record from compact literals.

    ``lines`` maps line -> hits, ``functions`` is (name, line, hits),
    ``branches`` is (line, block, branch, taken).
    """
    line_details = tuple(LineDetail(n, h) for n, h in (lines or {}).items()) or None
    fn_details = tuple(FunctionDetail(name, n, h) for name, n, h in functions or ()) or None
    br_details = tuple(BranchDetail(*b) for b in branches or ()) or None
    return LcovRecord(
        reported_path=reported_path,
        lines=LineCounts(
            found=lines_found if lines_found is not None else len(lines or {}),
            hit=(
                lines_hit
                if lines_hit is not None
                else sum(1 for h in (lines or {}).values() if h > 0)
            ),
            details=line_details,
        ),
        functions=FunctionCounts(
            found=len(fn_details or ()),
            hit=sum(1 for f in fn_details or () if f.hit_count > 0),
            details=fn_details,
        ),
        branches=BranchCounts(
            found=len(br_details or ()),
            hit=sum(1 for b in br_details or () if b.taken_count > 0),
            details=br_details,
        ),
    )


@pytest.fixture
def make_record() -> Callable[..., LcovRecord]:
    """Record builder; see ``_make_record``."""
    return _make_record


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Workspace with a few source files in conventional places."""
    root = tmp_path / "ws"
    (root / "src").mkdir(parents=True)
    (root / "lib").mkdir()
    (root / "src" / "util.ts").write_text("export const x = 1;\n")
    (root / "src" / "shared.ts").write_text("export const a = 1;\n")
    (root / "lib" / "shared.ts").write_text("export const b = 2;\n")
    (root / "lib" / "helpers.ts").write_text("export const c = 3;\n")
    return root
