"""
The view of Go syntax nodes used by the rewrite pass.

The pass only needs a node's source range, whether it is a statement, whether
it binds a name, and, for the handful of statements whose grammar has slots
that accept a single simple statement, where those slots are. Everything else
about the Go grammar stays opaque.

Statement kinds are modelled as a small closed set of variants (ForLoop, If,
Switch, TypeSwitch and Other) that carry the clause nodes and nothing else.
"""

from dataclasses import dataclass
from typing import Optional

from tripwire.coverage.ranges import CodeRange, SourcePosition

STATEMENT_TYPES = frozenset([
    "expression_statement",
    "send_statement",
    "inc_statement",
    "dec_statement",
    "assignment_statement",
    "short_var_declaration",
    "const_declaration",
    "type_declaration",
    "var_declaration",
    "return_statement",
    "go_statement",
    "defer_statement",
    "if_statement",
    "for_statement",
    "expression_switch_statement",
    "type_switch_statement",
    "select_statement",
    "labeled_statement",
    "fallthrough_statement",
    "break_statement",
    "continue_statement",
    "goto_statement",
    "block",
    "empty_statement",
])

# Statements that introduce a name into the enclosing scope. Wrapping one in
# a block would hide the name from the statements after it.
BINDING_DECLARATION_TYPES = frozenset([
    "short_var_declaration",
    "var_declaration",
    "const_declaration",
    "type_declaration",
])

# Parents whose statement slot cannot hold a block: a select case's
# communication.
CONSTRAINED_PARENT_TYPES = frozenset([
    "communication_case",
])

# Labelled statements that `break L` or `continue L` may name. The label
# must stay on the statement itself.
BREAK_TARGET_TYPES = frozenset([
    "for_statement",
    "expression_switch_statement",
    "type_switch_statement",
    "select_statement",
])

# Grouping nodes with no statement of their own; their parts are walked as
# children of the enclosing statement.
TRANSPARENT_TYPES = frozenset([
    "for_clause",
])


def position(point):
    """Convert a tree-sitter (row, column) point to a 1-based SourcePosition."""
    row, column = point
    return SourcePosition(row + 1, column + 1)


def node_range(node):
    return CodeRange(position(node.start_point), position(node.end_point))


def is_statement(node):
    return node is not None and node.type in STATEMENT_TYPES


def is_binding_declaration(node):
    return node is not None and node.type in BINDING_DECLARATION_TYPES


def is_wrappable(node):
    """Whether ``node`` may be replaced by a block holding it.

    ``fallthrough`` must remain the last statement of its case clause, so it
    is never wrapped, and neither is a labelled loop, switch or select.
    """
    if not is_statement(node) or is_binding_declaration(node):
        return False
    if node.type == "fallthrough_statement":
        return False
    parent = node.parent
    if parent is None:
        return True
    if parent.type == "labeled_statement":
        return node.type not in BREAK_TARGET_TYPES
    return parent.type not in CONSTRAINED_PARENT_TYPES


@dataclass(frozen=True)
class ForLoop:
    init: Optional[object] = None
    post: Optional[object] = None


@dataclass(frozen=True)
class TypeSwitch:
    init: Optional[object] = None
    assign: Optional[object] = None


@dataclass(frozen=True)
class Switch:
    init: Optional[object] = None


@dataclass(frozen=True)
class If:
    init: Optional[object] = None


@dataclass(frozen=True)
class Other:
    pass


OTHER = Other()


def _child_of_type(node, type_name):
    for child in node.named_children:
        if child.type == type_name:
            return child
    return None


def kind_of(node):
    """Classify ``node`` into one of the statement-kind variants."""
    t = node.type

    if t == "for_statement":
        clause = _child_of_type(node, "for_clause")
        if clause is None:
            # `for {}`, `for cond {}` and range loops have no clauses.
            return ForLoop()
        return ForLoop(
            init=clause.child_by_field_name("initializer"),
            post=clause.child_by_field_name("update"),
        )

    if t == "type_switch_statement":
        assign = node.child_by_field_name("alias")
        if assign is None:
            assign = node.child_by_field_name("value")
        return TypeSwitch(init=node.child_by_field_name("initializer"), assign=assign)

    if t == "expression_switch_statement":
        return Switch(init=node.child_by_field_name("initializer"))

    if t == "if_statement":
        return If(init=node.child_by_field_name("initializer"))

    return OTHER


def node_key(node):
    """Identity of a node within its tree.

    Tree-sitter hands out a fresh wrapper object on every access, so identity
    is the underlying node id rather than the Python object.
    """
    return node.id


def children(node):
    """Children of ``node`` as the rewrite pass walks them.

    A for loop's init, condition and post are direct children of the loop
    here, not of its ``for_clause``.
    """
    for child in node.children:
        if child.type in TRANSPARENT_TYPES:
            yield from child.children
        else:
            yield child
