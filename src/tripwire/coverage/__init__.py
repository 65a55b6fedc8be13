"""
Coverage profiles and the uncovered-range algebra.

- profile.py: reader for ``go test -coverprofile`` output
- ranges.py: positions, ranges, classification and the range-set builder
"""

from .profile import CoverageBlock, Profile, parse_profiles, parse_profiles_from_lines
from .ranges import (
    Classification,
    CodeRange,
    SourcePosition,
    UncoveredRangeSet,
    build_uncovered_ranges,
    classify,
)

__all__ = [
    "CoverageBlock",
    "Profile",
    "parse_profiles",
    "parse_profiles_from_lines",
    "Classification",
    "CodeRange",
    "SourcePosition",
    "UncoveredRangeSet",
    "build_uncovered_ranges",
    "classify",
]
