"""
Configuration of an instrumentation run.
"""

from dataclasses import dataclass

from tripwire.transform.sentinel import DEFAULT_SENTINEL


@dataclass
class InstrumentConfig:
    """
    Settings for one instrumentation run.

    Attributes:
        profile_path: Coverage profile written by ``go test -coverprofile``
        module: Import path prefix of the profile's file names
            (e.g. ``github.com/user/repo``)
        source_dir: Directory holding the covered Go source
        output_dir: Directory receiving the instrumented files
        sentinel: Function called before each uncovered statement
        gofmt: Run gofmt over every instrumented file
        jobs: Number of worker processes; 1 processes files in-line
    """
    profile_path: str
    module: str = ""
    source_dir: str = "."
    output_dir: str = "."
    sentinel: str = DEFAULT_SENTINEL
    gofmt: bool = False
    jobs: int = 1
