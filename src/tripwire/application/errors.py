"""
Error types for tripwire.

Every condition that stops an instrumentation run derives from TripwireError,
which the CLI reports and turns into a non-zero exit status. None of them are
retried: a run either produces all of its output files or none.
"""


class TripwireError(Exception):
    """Base class for fatal, user-facing errors."""
    pass


class ProfileError(TripwireError):
    """
    The coverage profile is unreadable or malformed.

    Raised by the profile reader before any source file is touched.
    """
    pass


class ModulePathError(TripwireError):
    """
    A profile file name lies outside the declared module prefix.

    Without the prefix the profile path cannot be mapped back to a file
    under the source root.
    """
    pass


class SourceParseError(TripwireError):
    """A mapped source file could not be parsed as Go."""

    def __init__(self, path, line, column, detail="syntax error"):
        self.path = path
        self.line = line
        self.column = column
        self.detail = detail
        super().__init__("cannot parse `%s`: %s at %d:%d" % (path, detail, line, column))


class FormatError(TripwireError):
    """gofmt rejected (or could not run on) an instrumented file."""
    pass


class InternalError(Exception):
    """
    A bug in tripwire itself rather than in its inputs.

    Raised when a clause scheduled to be skipped by the rewrite pass is never
    reached by the traversal.
    """
    pass
