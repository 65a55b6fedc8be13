import unittest

from tripwire.frontend.nodes import OTHER, ForLoop, If, Switch, TypeSwitch
from tripwire.transform.rewriter import ConstrainedClauses
from tripwire.util.typedispatch import *


class Clause(object):
    """Stand-in for a syntax node; only ``type`` is inspected."""

    def __init__(self, type):
        self.type = type


class TestTypeDispatch(unittest.TestCase):
    def testTD(self):
        def visitNumber(self, node):
            return "number"

        def visitDefault(self, node):
            return "default"

        class FooBar(TypeDispatcher):
            num = dispatch(int)(visitNumber)
            default = defaultdispatch(visitDefault)

        self.assertEqual(FooBar.__dict__["num"], visitNumber)
        self.assertEqual(FooBar.__dict__["default"], visitDefault)

        foo = FooBar()

        self.assertEqual(foo(1), "number")
        self.assertEqual(foo(2**70), "number")
        self.assertEqual(foo(True), "number")
        self.assertEqual(foo(1.0), "default")

    def testNoHandler(self):
        class Strict(TypeDispatcher):
            @dispatch(str)
            def visitStr(self, node):
                return node

        self.assertEqual(Strict()("x"), "x")
        self.assertRaises(TypeDispatchError, Strict(), 1)

    def testDuplicateHandler(self):
        with self.assertRaises(TypeDispatchDeclarationError):
            class Twice(TypeDispatcher):
                @dispatch(int)
                def a(self, node):
                    pass

                @dispatch(int)
                def b(self, node):
                    pass

    def testInheritedHandlers(self):
        class Base(TypeDispatcher):
            @dispatch(int)
            def visitInt(self, node):
                return "base"

        class Derived(Base):
            @dispatch(bool)
            def visitBool(self, node):
                return "derived"

            @defaultdispatch
            def visitOther(self, node):
                return "other"

        self.assertEqual(Derived()(1), "base")
        self.assertEqual(Derived()(True), "derived")
        self.assertEqual(Derived()("x"), "other")
        self.assertRaises(TypeDispatchError, Base(), "x")

    def testBadDeclaration(self):
        self.assertRaises(TypeDispatchDeclarationError, dispatch(3), lambda self, node: node)


class TestConstrainedClauses(unittest.TestCase):
    def setUp(self):
        self.clauses = ConstrainedClauses()
        self.decl = Clause("short_var_declaration")
        self.assign = Clause("assignment_statement")
        self.post = Clause("inc_statement")

    def testForLoop(self):
        self.assertEqual(self.clauses(ForLoop(self.decl, self.post)), (self.decl, self.post))
        # Only declaring initializers are reserved.
        self.assertEqual(self.clauses(ForLoop(self.assign, self.post)), (None, self.post))
        self.assertEqual(self.clauses(ForLoop()), (None, None))

    def testTypeSwitch(self):
        subject = Clause("expression_list")
        self.assertEqual(self.clauses(TypeSwitch(self.decl, subject)), (self.decl, subject))
        self.assertEqual(self.clauses(TypeSwitch(None, subject)), (None, subject))

    def testBranches(self):
        self.assertEqual(self.clauses(If(self.decl)), (self.decl,))
        self.assertEqual(self.clauses(Switch(self.assign)), (None,))
        self.assertEqual(self.clauses(OTHER), ())
