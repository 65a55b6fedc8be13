"""
Go parser built on Tree-sitter.

Wraps a tree-sitter parser for the Go grammar and rejects sources that do not
parse cleanly: instrumenting a file with syntax errors would produce
garbage, so any ERROR or MISSING node is fatal.
"""

import logging

try:
    from tree_sitter import Parser
    from tree_sitter_language_pack import get_language
except ImportError as e:
    raise ImportError(
        "tree-sitter-language-pack is required. " "Install with: pip install tree-sitter tree-sitter-language-pack"
    ) from e

from tripwire.application.errors import SourceParseError

LOG = logging.getLogger(__name__)

LANGUAGE = "go"


class GoParser:
    """Parser for Go source files."""

    def __init__(self):
        self._parser = Parser(get_language(LANGUAGE))
        LOG.debug("Loaded %s parser", LANGUAGE)

    def parse(self, source: bytes, path: str = "<source>"):
        """
        Parse Go source.

        Args:
            source: Raw source bytes (UTF-8)
            path: File name used in error messages

        Returns:
            Tree-sitter tree of the source

        Raises:
            SourceParseError: If the source is not UTF-8 or contains syntax errors
        """
        try:
            source.decode("utf-8")
        except UnicodeDecodeError as e:
            line = source.count(b"\n", 0, e.start) + 1
            column = e.start - (source.rfind(b"\n", 0, e.start) + 1) + 1
            raise SourceParseError(path, line, column, "invalid UTF-8") from e

        tree = self._parser.parse(source)
        if tree is None:
            raise SourceParseError(path, 1, 1, "parser returned no tree")

        error = find_error(tree.root_node)
        if error is not None:
            row, column = error.start_point
            detail = "missing %s" % error.type if error.is_missing else "syntax error"
            raise SourceParseError(path, row + 1, column + 1, detail)
        return tree

    def parse_file(self, path):
        """Read and parse a Go file, returning ``(source_bytes, tree)``."""
        try:
            with open(path, "rb") as f:
                source = f.read()
        except OSError as e:
            raise SourceParseError(str(path), 1, 1, "cannot read file: %s" % e) from e
        return source, self.parse(source, str(path))


def find_error(node):
    """Return the first ERROR or MISSING node under ``node``, or None."""
    if not node.has_error:
        return None
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        error = find_error(child)
        if error is not None:
            return error
    return node


# One parser per process.
_parser: GoParser | None = None


def get_parser() -> GoParser:
    """Get the process-wide Go parser."""
    global _parser
    if _parser is None:
        _parser = GoParser()
    return _parser
