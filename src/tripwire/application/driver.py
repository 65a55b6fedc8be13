"""
Instrumentation driver.

Ties the pieces together for a whole profile:

1. parse the coverage profile;
2. build each file's uncovered ranges, dropping fully covered files;
3. map every remaining profile file name to a path under the source root;
4. parse, rewrite and render each file (optionally in worker processes);
5. write the instrumented files under the output directory.

Steps 1-4 finish for every file before anything is written, so a fatal error
in any of them leaves the output directory untouched.
"""

import logging
import os
import posixpath
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass

from tripwire.application.errors import ModulePathError
from tripwire.backend import printer
from tripwire.coverage.profile import parse_profiles
from tripwire.coverage.ranges import build_uncovered_ranges
from tripwire.frontend.parser import get_parser
from tripwire.transform.rewriter import rewrite

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileJob:
    """One file to instrument."""
    stem: str
    source_path: str
    output_path: str
    ranges: object
    sentinel: str
    gofmt: bool = False


@dataclass(frozen=True)
class FileResult:
    """The instrumented text of one file."""
    job: FileJob
    text: str
    wrapped: int


def map_source_path(module, file_name):
    """Strip the module prefix from a profile file name.

    Returns:
        The file's path relative to the source root, using ``/`` separators.

    Raises:
        ModulePathError: If ``file_name`` is outside ``module``.
    """
    rest = file_name[len(module):]
    if not file_name.startswith(module) or (module and not module.endswith("/") and not rest.startswith("/")):
        raise ModulePathError("unknown file `%s` outside of module `%s`" % (file_name, module))
    stem = posixpath.normpath(rest.lstrip("/"))
    if stem == "." or stem.startswith("../") or stem.startswith("/"):
        raise ModulePathError("unknown file `%s` outside of module `%s`" % (file_name, module))
    return stem


def plan(config, profiles):
    """Build the jobs for every file with at least one uncovered range."""
    jobs = []
    for prof in profiles:
        ranges = build_uncovered_ranges(prof.blocks)
        if not ranges:
            LOG.debug("skipping fully covered `%s`", prof.file_name)
            continue

        stem = map_source_path(config.module, prof.file_name)
        jobs.append(FileJob(
            stem=stem,
            source_path=os.path.join(config.source_dir, *stem.split("/")),
            output_path=os.path.join(config.output_dir, *stem.split("/")),
            ranges=ranges,
            sentinel=config.sentinel,
            gofmt=config.gofmt,
        ))
    return jobs


def instrument_file(job):
    """Parse, rewrite and render one file. Runs in worker processes."""
    LOG.info("processing `%s` with %d uncovered ranges...", job.stem, len(job.ranges))

    source, tree = get_parser().parse_file(job.source_path)
    rewritten = rewrite(source, tree, job.ranges, job.sentinel, job.stem)
    text = printer.render(rewritten, format_source=job.gofmt, path=job.source_path)
    return FileResult(job, text, len(rewritten))


def write_output(result):
    path = result.job.output_path
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(result.text)
    LOG.debug("wrote %s", path)


def instrument(config, jobs):
    if config.jobs > 1 and len(jobs) > 1:
        with ProcessPoolExecutor(max_workers=config.jobs) as pool:
            return list(pool.map(instrument_file, jobs))
    return [instrument_file(job) for job in jobs]


def run(config):
    """Instrument every partially covered file named by the profile.

    Returns:
        List of FileResult, one per written file.

    Raises:
        ProfileError, ModulePathError, SourceParseError, FormatError
    """
    profiles = parse_profiles(config.profile_path)
    jobs = plan(config, profiles)
    results = instrument(config, jobs)
    for result in results:
        write_output(result)

    LOG.info(
        "instrumented %d of %d files (%d statements)",
        len(results), len(profiles), sum(r.wrapped for r in results),
    )
    return results
