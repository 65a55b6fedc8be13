from __future__ import annotations

import shutil

import pytest

from tripwire.application.config import InstrumentConfig
from tripwire.application.driver import FileJob, map_source_path, plan, run
from tripwire.application.errors import FormatError, ModulePathError, ProfileError, SourceParseError
from tripwire.backend import printer
from tripwire.coverage.profile import parse_profiles_from_lines

MODULE = "example.com/demo"

CHECK = """package demo

func Check(x int) int {
\tif x > 10 {
\t\tx = 10
\t}
\treturn x
}
"""

FULL = """package demo

func Full() int {
\treturn 1
}
"""

CHECK_BLOCKS = [
    MODULE + "/pkg/check.go:3.23,4.12 1 1",
    MODULE + "/pkg/check.go:4.12,6.3 1 0",
    MODULE + "/pkg/check.go:6.3,7.10 1 1",
]
FULL_BLOCKS = [MODULE + "/pkg/full.go:3.17,5.2 1 3"]


def config_for(src, profile, out, **kwargs):
    return InstrumentConfig(
        profile_path=str(profile), module=MODULE, source_dir=str(src), output_dir=str(out), **kwargs
    )


@pytest.mark.parametrize(
    "module, file_name, stem",
    [
        ("example.com/demo", "example.com/demo/pkg/a.go", "pkg/a.go"),
        ("example.com/demo/", "example.com/demo/a.go", "a.go"),
        ("", "pkg/a.go", "pkg/a.go"),
    ],
)
def test_map_source_path(module, file_name, stem):
    assert map_source_path(module, file_name) == stem


@pytest.mark.parametrize(
    "file_name",
    ["other.com/demo/a.go", "example.com/demox/a.go", "example.com/demo", "example.com/demo/../x.go"],
)
def test_map_source_path_outside_module(file_name):
    with pytest.raises(ModulePathError, match="outside of module"):
        map_source_path("example.com/demo", file_name)


def test_plan_skips_fully_covered_files(tmp_path):
    profiles = parse_profiles_from_lines(["mode: set"] + CHECK_BLOCKS + FULL_BLOCKS)
    config = InstrumentConfig(profile_path="unused", module=MODULE, source_dir="src", output_dir="out")

    (job,) = plan(config, profiles)
    assert isinstance(job, FileJob)
    assert job.stem == "pkg/check.go"
    assert job.source_path.replace("\\", "/") == "src/pkg/check.go"
    assert job.output_path.replace("\\", "/") == "out/pkg/check.go"
    assert len(job.ranges) == 1
    assert job.sentinel == "panic"


def test_run_writes_only_partially_covered_files(go_tree):
    src, profile, out = go_tree({"pkg/check.go": CHECK, "pkg/full.go": FULL}, CHECK_BLOCKS + FULL_BLOCKS)

    results = run(config_for(src, profile, out))

    assert [r.job.stem for r in results] == ["pkg/check.go"]
    assert results[0].wrapped == 1
    text = (out / "pkg" / "check.go").read_text(encoding="utf-8")
    assert 'panic("<[[TRIPWIRE]]> hit uncovered statement at pkg/check.go:4:12")' in text
    assert not (out / "pkg" / "full.go").exists()


def test_run_with_custom_sentinel(go_tree):
    src, profile, out = go_tree({"pkg/check.go": CHECK}, CHECK_BLOCKS)
    run(config_for(src, profile, out, sentinel="abort"))
    assert 'abort("<[[TRIPWIRE]]>' in (out / "pkg" / "check.go").read_text(encoding="utf-8")


def test_files_missing_from_profile_are_not_visited(go_tree):
    src, profile, out = go_tree({"pkg/check.go": CHECK, "pkg/other.go": "not go at all"}, CHECK_BLOCKS)
    results = run(config_for(src, profile, out))
    assert len(results) == 1
    assert not (out / "pkg" / "other.go").exists()


def test_file_outside_module_is_fatal(go_tree):
    src, profile, out = go_tree({"pkg/check.go": CHECK}, CHECK_BLOCKS + ["other.com/x.go:1.1,2.2 1 0"])
    with pytest.raises(ModulePathError):
        run(config_for(src, profile, out))
    assert not out.exists()


def test_parse_error_leaves_no_partial_output(go_tree):
    broken = "package demo\n\nfunc Zed( {\n"
    src, profile, out = go_tree(
        {"pkg/check.go": CHECK, "pkg/zed.go": broken},
        CHECK_BLOCKS + [MODULE + "/pkg/zed.go:3.12,4.1 1 0"],
    )
    with pytest.raises(SourceParseError, match="zed.go"):
        run(config_for(src, profile, out))
    assert not out.exists()


def test_malformed_profile_is_fatal(tmp_path):
    profile = tmp_path / "cover.out"
    profile.write_text("this is not a profile\n", encoding="utf-8")
    with pytest.raises(ProfileError):
        run(config_for(tmp_path, profile, tmp_path / "out"))
    assert not (tmp_path / "out").exists()


def test_parallel_run_matches_sequential(go_tree, tmp_path):
    sources = {"pkg/check.go": CHECK, "pkg/again.go": CHECK.replace("Check", "Again")}
    lines = CHECK_BLOCKS + [b.replace("check.go", "again.go") for b in CHECK_BLOCKS]
    src, profile, out = go_tree(sources, lines)

    parallel = run(config_for(src, profile, out, jobs=2))
    sequential = run(config_for(src, profile, tmp_path / "seq"))
    assert [(r.job.stem, r.text) for r in parallel] == [(r.job.stem, r.text) for r in sequential]


def test_gofmt_missing_is_a_format_error(monkeypatch):
    monkeypatch.setattr(printer.shutil, "which", lambda name: None)
    with pytest.raises(FormatError, match="not found"):
        printer.gofmt("package demo\n")


@pytest.mark.skipif(shutil.which("gofmt") is None, reason="gofmt not installed")
def test_run_with_gofmt(go_tree):
    src, profile, out = go_tree({"pkg/check.go": CHECK}, CHECK_BLOCKS)
    run(config_for(src, profile, out, gofmt=True))
    text = (out / "pkg" / "check.go").read_text(encoding="utf-8")
    assert "\t\tpanic(\"<[[TRIPWIRE]]> hit uncovered statement at pkg/check.go:4:12\")\n" in text
