from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Sequence

import pytest

from tripwire.backend.printer import render
from tripwire.coverage.profile import CoverageBlock, parse_line
from tripwire.coverage.ranges import CodeRange, SourcePosition, UncoveredRangeSet, build_uncovered_ranges
from tripwire.frontend.parser import get_parser
from tripwire.transform.rewriter import RewrittenFile, rewrite


def block(spec: str) -> CoverageBlock:
    """Build a block from the profile notation ``"4.12,6.3 1 0"``."""
    parsed = parse_line("f.go:" + spec)
    assert parsed is not None, spec
    return parsed[1]


def blocks(*specs: str) -> list[CoverageBlock]:
    return [block(s) for s in specs]


def span(start: tuple[int, int], end: tuple[int, int]) -> CodeRange:
    return CodeRange(SourcePosition(*start), SourcePosition(*end))


def range_set(*spans: tuple[tuple[int, int], tuple[int, int]]) -> UncoveredRangeSet:
    return UncoveredRangeSet([span(s, e) for s, e in spans])


def parse_go(code: str):
    source = code.encode("utf-8")
    return source, get_parser().parse(source, "demo.go")


def find_nodes(node, type_name: str) -> list:
    """Every node of ``type_name`` under ``node``, in pre-order."""
    found = []
    if node.type == type_name:
        found.append(node)
    for child in node.children:
        found.extend(find_nodes(child, type_name))
    return found


def find_node(node, type_name: str):
    found = find_nodes(node, type_name)
    assert found, "no %s node" % type_name
    return found[0]


@dataclass(frozen=True)
class Instrumented:
    original: str
    text: str
    rewritten: RewrittenFile

    @property
    def wrapped(self) -> list[str]:
        return [w.node.type for w in self.rewritten.wraps]

    def sentinel_count(self, sentinel: str = "panic") -> int:
        return self.text.count(sentinel + '("<[[TRIPWIRE]]>')


def instrument(
    code: str,
    coverage: Iterable[CoverageBlock] | UncoveredRangeSet,
    *,
    sentinel: str = "panic",
    filename: Optional[str] = "demo.go",
) -> Instrumented:
    ranges = coverage if isinstance(coverage, UncoveredRangeSet) else build_uncovered_ranges(coverage)
    source, tree = parse_go(code)
    rewritten = rewrite(source, tree, ranges, sentinel, filename)
    return Instrumented(code, render(rewritten), rewritten)


def write_tree(root: Path, files: dict[str, str]) -> list[Path]:
    paths = []
    for rel_name, content in files.items():
        p = root / rel_name
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(content, encoding="utf-8")
        paths.append(p)
    return paths


@pytest.fixture()
def go_tree(tmp_path: Path):
    """Write a module source tree and a coverage profile under ``tmp_path``."""

    def _write(sources: dict[str, str], profile_lines: Sequence[str], mode: str = "set"):
        src = tmp_path / "src"
        write_tree(src, sources)
        profile = tmp_path / "cover.out"
        profile.write_text("mode: %s\n%s\n" % (mode, "\n".join(profile_lines)), encoding="utf-8")
        return src, profile, tmp_path / "out"

    return _write
