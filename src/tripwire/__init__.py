"""tripwire - guard untested Go statements for coverage-guided fuzzing.

Given the coverage profile of a test run, tripwire rewrites a Go source tree
so that every statement the tests never executed first calls a sentinel
function (``panic`` by default). A fuzzer running the instrumented build sees
a crash whenever an input reaches untested code.
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
