# =============================================================================
# test_ast.py - AST Node and Printer Tests
# =============================================================================

from builders import assign, binop, comment, goto, ident, if_, keyword, line, num, post, program, text
from yolol_vm import ASTPrinter, BinaryGroup, Identifier
from yolol_vm.ast import ASTVisitor
from yolol_vm.variables import Namespace


class TestNodes:
    """Node construction details."""

    def test_identifier_resolves_namespace(self):
        assert Identifier("x").ref.namespace is Namespace.LOCAL
        assert Identifier(":x").ref.namespace is Namespace.FIELD

    def test_identifier_hashable(self):
        assert len({Identifier("x"), Identifier("x")}) == 1

    def test_group_operators(self):
        assert BinaryGroup.MUL.operators == {"*", "/", "%"}
        assert "<" in BinaryGroup.NEQ.operators
        assert "^" not in BinaryGroup.ADD.operators


class TestVisitor:
    """Generic traversal reaches nested nodes."""

    def test_collect_identifiers(self):
        class NameCollector(ASTVisitor):
            def __init__(self):
                self.names = []

            def visit_Identifier(self, node):
                self.names.append(node.name)

        prog = program(
            line(assign("x", binop("+", ident("a"), ident(":b")))),
            line(if_(ident("c"), [post("++", ident("d"))])),
        )
        collector = NameCollector()
        collector.visit(prog)
        assert collector.names == ["x", "a", ":b", "c", "d"]


class TestASTPrinter:
    """Pretty printer output."""

    def test_program(self):
        prog = program(
            line(assign("x", num(1)), comment("init")),
            line(if_(binop("==", ident("x"), num(0)), [goto(num(1))], [assign("s", text("a"), "+=")])),
            line(assign("r", keyword("sqrt", post("--", ident(":v")))), errors=["bad"]),
        )
        expected = "\n".join([
            "Program",
            "  Line 1",
            "    Assign: x = 1",
            "    Comment: init",
            "  Line 2",
            "    If ((x == 0))",
            "      Then:",
            "        Goto 1",
            "      Else:",
            '        Assign: s += "a"',
            "  Line 3",
            "    SyntaxError: bad",
            "    Assign: r = sqrt :v--",
        ])
        assert ASTPrinter().print(prog) == expected
