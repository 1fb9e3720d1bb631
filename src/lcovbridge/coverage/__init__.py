"""LCOV input records and the parser that produces them.

Usage:
    from lcovbridge.coverage import parse_lcov

    records = parse_lcov(Path("coverage/lcov.info"))
"""

from lcovbridge.core.errors import CoverageParseError
from lcovbridge.coverage.lcov import is_lcov_file, parse_lcov, parse_lcov_text
from lcovbridge.coverage.models import (
    BranchCounts,
    BranchDetail,
    FunctionCounts,
    FunctionDetail,
    LcovRecord,
    LineCounts,
    LineDetail,
)

__all__ = [
    # Models
    "BranchCounts",
    "BranchDetail",
    "FunctionCounts",
    "FunctionDetail",
    "LcovRecord",
    "LineCounts",
    "LineDetail",
    # Parser
    "CoverageParseError",
    "is_lcov_file",
    "parse_lcov",
    "parse_lcov_text",
]
