"""
Rewrite pass that guards uncovered Go statements with a sentinel call.

The rewriter walks a file's syntax tree depth-first, pre-order, and
classifies every node against the file's uncovered ranges:

- a node with no uncovered code is left alone and its subtree skipped;
- a statement lying wholly inside an uncovered range is replaced by a block
  holding a sentinel call followed by the statement, and its subtree skipped;
- anything else (partially uncovered nodes, and uncovered statements that
  cannot be wrapped, such as declarations) is descended into.

Some statements have grammar slots that accept exactly one simple statement:
the init and post clauses of a for loop, the init clause of if and switch,
and the subject assignment of a type switch. Before descending into such a
statement the rewriter records those clauses in a SkipSet, and the walk
passes them through untouched when it reaches them.

Tree-sitter trees are immutable, so the rewritten file is represented as the
original source plus the list of substituted statements; the printer splices
them back into text.
"""

import logging

from tripwire.application.errors import InternalError
from tripwire.coverage.ranges import Classification
from tripwire.frontend import nodes
from tripwire.frontend.nodes import ForLoop, If, Other, Switch, TypeSwitch
from tripwire.transform.sentinel import DEFAULT_SENTINEL, WrappedStatement, make_sentinel
from tripwire.util.typedispatch import TypeDispatcher, dispatch

LOG = logging.getLogger(__name__)


class SkipSet(object):
    """Clauses of one file that must be visited but never rewritten.

    Every node added is expected to be removed when the walk reaches it.
    """

    def __init__(self):
        self._nodes = {}

    def add(self, node):
        if node is not None:
            self._nodes[nodes.node_key(node)] = node

    def discard(self, node):
        """Remove ``node``; returns True if it was scheduled to be skipped."""
        return self._nodes.pop(nodes.node_key(node), None) is not None

    def __contains__(self, node):
        return nodes.node_key(node) in self._nodes

    def __len__(self):
        return len(self._nodes)

    def check_drained(self):
        if self._nodes:
            pending = ", ".join(
                "%s at %s" % (n.type, nodes.node_range(n).start) for n in self._nodes.values()
            )
            raise InternalError("clauses scheduled to be skipped were never visited: %s" % pending)


class ConstrainedClauses(TypeDispatcher):
    """Select the clauses of a statement kind that must never be wrapped."""

    @dispatch(ForLoop)
    def visitForLoop(self, kind):
        return (_declaration_only(kind.init), kind.post)

    @dispatch(TypeSwitch)
    def visitTypeSwitch(self, kind):
        return (_declaration_only(kind.init), kind.assign)

    @dispatch(Switch, If)
    def visitBranch(self, kind):
        return (_declaration_only(kind.init),)

    @dispatch(Other)
    def visitOther(self, kind):
        return ()


def _declaration_only(clause):
    return clause if nodes.is_binding_declaration(clause) else None


class RewrittenFile(object):
    """The source of one file and the statements substituted in it.

    Attributes:
        source: Original source bytes
        wraps: WrappedStatement list, in source order, never nested
    """
    __slots__ = "source", "wraps"

    def __init__(self, source, wraps):
        self.source = source
        self.wraps = wraps

    def __len__(self):
        return len(self.wraps)


class Rewriter(object):
    """Rewrites the statements of one file according to its uncovered ranges.

    Args:
        ranges: UncoveredRangeSet of the file
        sentinel: Identifier of the function the inserted calls invoke
        filename: Name reported in the sentinel messages
    """

    def __init__(self, ranges, sentinel=DEFAULT_SENTINEL, filename=None):
        self.ranges = ranges
        self.sentinel = sentinel
        self.filename = filename
        self.clauses = ConstrainedClauses()

    def rewriteNode(self, node, skipped):
        """Rewrite a single node.

        Returns:
            ``(replacement, descend)``: the node itself or the WrappedStatement
            replacing it, and whether the walk continues into its children.
        """
        if skipped.discard(node):
            return node, True

        cr = nodes.node_range(node)
        result = self.ranges.classify(cr)

        if result is Classification.NON_OVERLAPPING:
            return node, False

        if result is Classification.CONTAINED and nodes.is_wrappable(node):
            call = make_sentinel(self.sentinel, cr.start, self.filename)
            return WrappedStatement(call, node), False

        for clause in self.clauses(nodes.kind_of(node)):
            skipped.add(clause)
        return node, True

    def walk(self, node, skipped, wraps):
        replacement, descend = self.rewriteNode(node, skipped)
        if replacement is not node:
            wraps.append(replacement)
        if descend:
            for child in nodes.children(node):
                self.walk(child, skipped, wraps)

    def process(self, source, tree):
        """Rewrite a parsed file.

        Args:
            source: Source bytes the tree was parsed from
            tree: Tree-sitter tree (or its root node)

        Returns:
            RewrittenFile holding the substitutions.
        """
        root = getattr(tree, "root_node", tree)
        skipped = SkipSet()
        wraps = []
        self.walk(root, skipped, wraps)
        skipped.check_drained()

        LOG.debug("%s: wrapped %d statements", self.filename or "<source>", len(wraps))
        return RewrittenFile(source, wraps)


def rewrite(source, tree, ranges, sentinel=DEFAULT_SENTINEL, filename=None):
    """Rewrite one parsed file; see Rewriter.process."""
    return Rewriter(ranges, sentinel, filename).process(source, tree)
