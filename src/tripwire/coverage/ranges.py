"""
Source positions, code ranges and the uncovered-range set.

Positions use the coordinates of Go coverage profiles: 1-based lines and
1-based byte columns, with a range's end pointing just past its last byte.
The builder widens each zero-hit block one column to the left, so a range
start may sit at column 0.

An UncoveredRangeSet answers one question for the rewrite pass: is a syntax
node's span wholly uncovered, partly uncovered, or wholly covered? The set is
sorted and its members neither overlap nor touch, so range ends increase
monotonically and a binary search on the end finds the only candidate that
could contain the query.
"""

import bisect
import enum
from dataclasses import dataclass

__all__ = [
    "SourcePosition",
    "CodeRange",
    "Classification",
    "UncoveredRangeSet",
    "less",
    "less_eq",
    "classify",
    "build_uncovered_ranges",
]


@dataclass(frozen=True, order=True)
class SourcePosition:
    """A (line, column) source coordinate, ordered line first."""

    line: int
    column: int

    def __str__(self):
        return "%d:%d" % (self.line, self.column)


def less(a, b):
    return a.line < b.line or (a.line == b.line and a.column < b.column)


def less_eq(a, b):
    return a.line < b.line or (a.line == b.line and a.column <= b.column)


@dataclass(frozen=True)
class CodeRange:
    """A contiguous span of source text; ``end`` is exclusive."""

    start: SourcePosition
    end: SourcePosition

    @classmethod
    def from_block(cls, block):
        """Build the range of a coverage block.

        The start column moves one to the left so that an empty body such as
        ``{}`` is fully covered up to its opening delimiter instead of leaving
        a zero-width gap.
        """
        return cls(
            SourcePosition(block.start_line, block.start_col - 1),
            SourcePosition(block.end_line, block.end_col),
        )

    def __str__(self):
        return "%s--%s" % (self.start, self.end)


class Classification(enum.Enum):
    """Relationship between a query span and the uncovered ranges."""

    CONTAINED = "contained"
    OVERLAPPING = "overlapping"
    NON_OVERLAPPING = "non-overlapping"


def classify(ranges, query):
    """Classify ``query`` against a sorted, disjoint sequence of ranges.

    Args:
        ranges: Sequence of CodeRange, sorted and pairwise non-adjacent.
        query: CodeRange of the node being examined.

    Returns:
        Classification.CONTAINED when ``query`` lies inside one range,
        Classification.NON_OVERLAPPING when it touches no range, and
        Classification.OVERLAPPING otherwise.
    """
    idx = bisect.bisect_left(ranges, query.end, key=lambda r: r.end)

    #  previous  found
    #    [---)   [--)
    #             [)    contained        (query.start >= found.start)
    #           [--)    overlapping      (query.end > found.start)
    #          [)       non-overlapping  (query.start >= previous.end)
    #      [----)       overlapping
    if idx < len(ranges):
        found_start = ranges[idx].start
        if less_eq(found_start, query.start):
            return Classification.CONTAINED
        if less(found_start, query.end):
            return Classification.OVERLAPPING

    if idx == 0 or less_eq(ranges[idx - 1].end, query.start):
        return Classification.NON_OVERLAPPING
    return Classification.OVERLAPPING


class UncoveredRangeSet(object):
    """Immutable, merged set of the uncovered ranges of one source file.

    An empty set means the file is fully covered.
    """

    def __init__(self, ranges=()):
        self._ranges = tuple(ranges)

    def classify(self, query):
        return classify(self._ranges, query)

    def __len__(self):
        return len(self._ranges)

    def __iter__(self):
        return iter(self._ranges)

    def __getitem__(self, index):
        return self._ranges[index]

    def __bool__(self):
        return bool(self._ranges)

    def __eq__(self, other):
        if not isinstance(other, UncoveredRangeSet):
            return NotImplemented
        return self._ranges == other._ranges

    def __hash__(self):
        return hash(self._ranges)

    def __repr__(self):
        return "UncoveredRangeSet([%s])" % ", ".join(str(r) for r in self._ranges)


def build_uncovered_ranges(blocks):
    """Merge the zero-hit blocks of one file into an UncoveredRangeSet.

    Blocks must arrive sorted by start position, as the profile reader
    delivers them; the result is undefined otherwise. Blocks that touch or
    overlap the previous uncovered range are folded into it.

    Args:
        blocks: Iterable of CoverageBlock for a single file.

    Returns:
        UncoveredRangeSet, empty when every block was executed.
    """
    ranges = []
    for block in blocks:
        if block.count > 0:
            continue
        new_range = CodeRange.from_block(block)
        if ranges and less_eq(new_range.start, ranges[-1].end):
            last = ranges[-1]
            ranges[-1] = CodeRange(last.start, max(last.end, new_range.end))
        else:
            ranges.append(new_range)
    return UncoveredRangeSet(ranges)
