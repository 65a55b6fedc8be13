"""
Printer for rewritten Go files.

The printer copies the original source byte for byte and splices in the
synthetic block of every wrapped statement, so the output differs from the
input only where a sentinel call was inserted. Passing ``gofmt=True`` pipes
the result through ``gofmt`` to normalise the layout of the inserted blocks.
"""

import logging
import shutil
import subprocess

from tripwire.application.errors import FormatError

LOG = logging.getLogger(__name__)

GOFMT = "gofmt"


def render_bytes(rewritten):
    source = rewritten.source
    out = bytearray()
    cursor = 0
    for wrap in rewritten.wraps:
        out += source[cursor:wrap.start_byte]
        out += wrap.render(source)
        cursor = wrap.end_byte
    out += source[cursor:]
    return bytes(out)


def gofmt(text, path="<source>"):
    """Format Go source with gofmt.

    Raises:
        FormatError: If gofmt is not installed or rejects the source.
    """
    exe = shutil.which(GOFMT)
    if exe is None:
        raise FormatError("cannot format `%s`: %s not found on PATH" % (path, GOFMT))

    proc = subprocess.run([exe], input=text, capture_output=True, text=True, check=False)
    if proc.returncode != 0:
        raise FormatError("%s failed on `%s`: %s" % (GOFMT, path, proc.stderr.strip()))
    return proc.stdout


def render(rewritten, format_source=False, path="<source>"):
    """Render a RewrittenFile back to Go source text.

    Args:
        rewritten: RewrittenFile from the rewrite pass
        format_source: Run the result through gofmt
        path: File name used in error messages

    Returns:
        str: The instrumented source
    """
    text = render_bytes(rewritten).decode("utf-8")
    if format_source:
        LOG.debug("formatting %s with %s", path, GOFMT)
        text = gofmt(text, path)
    return text
