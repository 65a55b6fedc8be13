"""
The synthetic fragments inserted in front of uncovered statements.

A SentinelCall is a Go call statement such as::

    panic("<[[TRIPWIRE]]> hit uncovered statement at pkg/file.go:12:3")

and a WrappedStatement is the block ``{ <sentinel call>; <statement> }`` that
replaces an uncovered statement. The call identifier is configurable, so any
function taking a single string works (``panic`` by default).
"""

SENTINEL_TAG = "<[[TRIPWIRE]]>"
DEFAULT_SENTINEL = "panic"

_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
}


def go_quote(text):
    """Render ``text`` as a double-quoted Go string literal."""
    out = ['"']
    for ch in text:
        escaped = _ESCAPES.get(ch)
        if escaped is not None:
            out.append(escaped)
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append("\\x%02x" % ord(ch))
        else:
            out.append(ch)
    out.append('"')
    return "".join(out)


class SentinelCall(object):
    """A call to the sentinel identifier carrying a source position.

    Attributes:
        identifier: Name of the function to call (e.g. ``panic``)
        position: SourcePosition of the statement being guarded
        filename: Optional file name prefixed to the position
    """
    __slots__ = "identifier", "position", "filename"

    def __init__(self, identifier, position, filename=None):
        self.identifier = identifier
        self.position = position
        self.filename = filename

    def location(self):
        if self.filename:
            return "%s:%s" % (self.filename, self.position)
        return str(self.position)

    def message(self):
        return "%s hit uncovered statement at %s" % (SENTINEL_TAG, self.location())

    def render(self):
        return "%s(%s)" % (self.identifier, go_quote(self.message()))

    def __repr__(self):
        return "SentinelCall(%r, %s)" % (self.identifier, self.location())


class WrappedStatement(object):
    """Synthetic block replacing ``node``: the sentinel call, then the node."""
    __slots__ = "call", "node"

    def __init__(self, call, node):
        self.call = call
        self.node = node

    @property
    def start_byte(self):
        return self.node.start_byte

    @property
    def end_byte(self):
        return self.node.end_byte

    def render(self, source: bytes) -> bytes:
        original = source[self.node.start_byte:self.node.end_byte]
        return b"{ " + self.call.render().encode("utf-8") + b"; " + original + b" }"

    def __repr__(self):
        return "WrappedStatement(%s, %s)" % (self.node.type, self.call.location())


def make_sentinel(identifier, position, filename=None):
    """Build the SentinelCall guarding ``position``; an empty identifier means ``panic``."""
    return SentinelCall(identifier or DEFAULT_SENTINEL, position, filename)
