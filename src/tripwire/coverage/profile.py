"""
Reader for Go coverage profiles.

``go test -coverprofile=cover.out`` writes a text file of the form::

    mode: set
    example.com/mod/pkg/file.go:10.13,12.2 1 1
    example.com/mod/pkg/file.go:12.2,14.3 2 0

Each record names a file, a block (start line.column, end line.column), the
number of statements in the block and how often it ran. This module turns
such a file into one Profile per source file, with blocks sorted by start
position and duplicate blocks (from concatenated profiles) merged, which is
the ordering the uncovered-range builder relies on.
"""

import logging
import re
from dataclasses import dataclass, field

from tripwire.application.errors import ProfileError

LOG = logging.getLogger(__name__)

MODE_PREFIX = "mode: "
MODES = ("set", "count", "atomic")

_LINE_RE = re.compile(r"^(.+):([0-9]+)\.([0-9]+),([0-9]+)\.([0-9]+) ([0-9]+) ([0-9]+)$")


@dataclass(frozen=True)
class CoverageBlock:
    """One coverage record: a source block and its execution count."""

    start_line: int
    start_col: int
    end_line: int
    end_col: int
    num_stmt: int
    count: int

    @property
    def start(self):
        return (self.start_line, self.start_col)

    @property
    def location(self):
        return (self.start_line, self.start_col, self.end_line, self.end_col)


@dataclass
class Profile:
    """All coverage blocks recorded for one file."""

    file_name: str
    mode: str
    blocks: list = field(default_factory=list)


def parse_line(line):
    """Split a record line into its file name and CoverageBlock.

    Returns:
        ``(file_name, block)`` or ``None`` if the line is not a record.
    """
    m = _LINE_RE.match(line)
    if m is None:
        return None
    file_name = m.group(1)
    numbers = [int(g) for g in m.groups()[1:]]
    return file_name, CoverageBlock(*numbers)


def parse_profiles_from_lines(lines, source="<profile>"):
    """Parse the lines of a coverage profile.

    Args:
        lines: Iterable of text lines, with or without trailing newlines.
        source: Name used in error messages.

    Returns:
        List of Profile, sorted by file name, each with start-sorted blocks.

    Raises:
        ProfileError: If the mode line is missing or a record is malformed.
    """
    files = {}
    mode = None

    for lineno, line in enumerate(lines, 1):
        line = line.rstrip("\r\n")
        if not line.strip():
            continue

        if mode is None:
            if not line.startswith(MODE_PREFIX) or line == MODE_PREFIX:
                raise ProfileError("%s:%d: bad mode line: %r" % (source, lineno, line))
            mode = line[len(MODE_PREFIX):]
            if mode not in MODES:
                LOG.warning("%s: unknown coverage mode %r", source, mode)
            continue

        if line.startswith(MODE_PREFIX):
            # Profiles of several packages concatenated together.
            if line[len(MODE_PREFIX):] != mode:
                raise ProfileError(
                    "%s:%d: mode changed from %r to %r" % (source, lineno, mode, line[len(MODE_PREFIX):])
                )
            continue

        parsed = parse_line(line)
        if parsed is None:
            raise ProfileError("%s:%d: line %r doesn't match expected format" % (source, lineno, line))
        file_name, block = parsed

        profile = files.get(file_name)
        if profile is None:
            profile = files[file_name] = Profile(file_name, mode)
        profile.blocks.append(block)

    if mode is None:
        raise ProfileError("%s: empty coverage profile" % (source,))

    for profile in files.values():
        profile.blocks = _merge_blocks(profile, source)

    return sorted(files.values(), key=lambda p: p.file_name)


def _merge_blocks(profile, source):
    blocks = sorted(profile.blocks, key=lambda b: b.location)

    merged = []
    for block in blocks:
        if merged and merged[-1].location == block.location:
            last = merged[-1]
            if last.num_stmt != block.num_stmt:
                raise ProfileError(
                    "%s: %s: inconsistent NumStmt: changed from %d to %d"
                    % (source, profile.file_name, last.num_stmt, block.num_stmt)
                )
            if profile.mode == "set":
                count = last.count | block.count
            else:
                count = last.count + block.count
            merged[-1] = CoverageBlock(
                last.start_line, last.start_col, last.end_line, last.end_col, last.num_stmt, count
            )
        else:
            merged.append(block)
    return merged


def parse_profiles(path):
    """Read and parse the coverage profile at ``path``.

    Raises:
        ProfileError: If the file cannot be read or is malformed.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            return parse_profiles_from_lines(f, source=str(path))
    except (OSError, UnicodeDecodeError) as e:
        raise ProfileError("failed to read coverage profile `%s`: %s" % (path, e)) from e
