"""
YOLOL Abstract Syntax Tree (AST) Definitions
============================================

This module defines the node types the VM executes. The tree is produced by
an external parser (see yolol_vm.loader for the tagged-dict form it is
delivered in); the VM never parses source text itself.

Node Hierarchy
--------------
Program - fixed sequence of lines, 1-based
└── Line - syntax errors + statements
    ├── Statements
    │   ├── Assignment - x = e, x += e, ...
    │   ├── Goto - goto e
    │   ├── If - if c then ... else ... end
    │   ├── Comment - // text
    │   └── IncrementStatement - bare x++ / --x
    └── Expressions
        ├── NumberLiteral - 42, 1.5
        ├── StringLiteral - "text"
        ├── Identifier - x, :door
        ├── BinaryExpression - ^ * / % + - == != > >= < <=
        ├── KeywordExpression - not, abs, sqrt, sin, ...
        └── IncrementExpression - ++x, x--, usable inside expressions

Design Notes
------------
- Expression and Statement are closed hierarchies; the interpreter matches
  on the concrete classes and treats anything else as an internal error
- Binary expressions keep the precedence group the parser put them in;
  the group only constrains which operators are legal, never the semantics
- Identifiers resolve their namespace (local or device field) once, at
  construction
- Nodes are immutable (frozen=True) and use tuples for child sequences
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from yolol_vm.variables import VariableRef


# =============================================================================
# AST Node Base Classes
# =============================================================================

@dataclass(frozen=True)
class Expression:
    """Base class for all expression nodes."""
    pass


@dataclass(frozen=True)
class Statement:
    """Base class for all statement nodes."""
    pass


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass(frozen=True)
class NumberLiteral(Expression):
    """
    Number literal, kept as the text the parser saw.

    Attributes:
        text: Literal text, e.g. "42" or "0.5"
    """
    text: str


@dataclass(frozen=True)
class StringLiteral(Expression):
    """
    String literal.

    Attributes:
        text: The string contents, without quotes
    """
    text: str


@dataclass(frozen=True)
class Identifier(Expression):
    """
    Reference to a local variable or, with the ':' sigil, a device field.

    Attributes:
        name: The name as written, sigil included
        ref: Resolved namespace and lookup key
    """
    name: str
    ref: VariableRef = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "ref", VariableRef.parse(self.name))


class BinaryGroup(Enum):
    """
    Precedence group a binary expression was parsed in.

    Each group admits a fixed set of operators; an operator outside its
    group means the parser and the VM disagree about the tree.
    """
    EXP = "exp"
    MUL = "mul"
    ADD = "add"
    EQ = "eq"
    NEQ = "neq"

    @property
    def operators(self) -> frozenset[str]:
        return _GROUP_OPERATORS[self]


_COMPARISONS = frozenset({"==", "!=", ">", ">=", "<", "<="})

_GROUP_OPERATORS = {
    BinaryGroup.EXP: frozenset({"^"}),
    BinaryGroup.MUL: frozenset({"*", "/", "%"}),
    BinaryGroup.ADD: frozenset({"+", "-"}),
    BinaryGroup.EQ: _COMPARISONS,
    BinaryGroup.NEQ: _COMPARISONS,
}


@dataclass(frozen=True)
class BinaryExpression(Expression):
    """
    Binary operator application.

    Attributes:
        group: Precedence group from the parser
        operator: Operator symbol
        left: Left operand (evaluated first)
        right: Right operand
    """
    group: BinaryGroup
    operator: str
    left: Expression
    right: Expression


@dataclass(frozen=True)
class KeywordExpression(Expression):
    """
    Unary keyword operator: not, abs, cos, sin, tan, acos, asin, atan, sqrt.

    Attributes:
        keyword: Keyword name, lower case
        operand: The operand expression
    """
    keyword: str
    operand: Expression


@dataclass(frozen=True)
class IncrementExpression(Expression):
    """
    Increment or decrement, prefix or postfix.

    The new value is written back only when the operand is an Identifier.
    The prefix form yields the new value, the postfix form the original.

    Attributes:
        operator: "++" or "--"
        operand: The operand expression
        prefix: True for ++x / --x, False for x++ / x--
    """
    operator: str
    operand: Expression
    prefix: bool


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass(frozen=True)
class Assignment(Statement):
    """
    Assignment, plain or compound.

    Attributes:
        target: Variable or field being assigned
        operator: "=", "+=", "-=", "*=", "/=" or "%="
        value: Value expression
    """
    target: Identifier
    operator: str
    value: Expression


@dataclass(frozen=True)
class Goto(Statement):
    """
    Unconditional jump.

    Attributes:
        target: Expression yielding the destination line number
    """
    target: Expression


@dataclass(frozen=True)
class If(Statement):
    """
    Conditional with optional else branch.

    Attributes:
        condition: 0 selects the else branch, anything else the body
        body: Statements executed when the condition holds
        else_body: Statements executed otherwise (None when absent)
    """
    condition: Expression
    body: tuple[Statement, ...] = ()
    else_body: Optional[tuple[Statement, ...]] = None


@dataclass(frozen=True)
class Comment(Statement):
    """Comment; executing it does nothing."""
    text: str = ""


@dataclass(frozen=True)
class IncrementStatement(Statement):
    """
    Bare increment used as a statement, evaluated for its side effect.

    Attributes:
        expression: The increment expression
    """
    expression: IncrementExpression


# =============================================================================
# Program Structure
# =============================================================================

@dataclass(frozen=True)
class SyntaxErrorRecord:
    """
    Syntax error reported by the parser for one line.

    Attributes:
        message: Parser message
        position: Column of the error, when known
    """
    message: str
    position: Optional[int] = None


@dataclass(frozen=True)
class Line:
    """
    One addressable program line.

    A line with syntax errors is never executed, only skipped.

    Attributes:
        statements: Statements in execution order
        syntax_errors: Errors the parser reported for this line
    """
    statements: tuple[Statement, ...] = ()
    syntax_errors: tuple[SyntaxErrorRecord, ...] = ()

    @property
    def has_syntax_errors(self) -> bool:
        return len(self.syntax_errors) > 0


@dataclass(frozen=True)
class Program:
    """
    A complete program: an ordered, fixed sequence of lines.

    Lines are numbered from 1, matching goto targets and the error log.
    """
    lines: tuple[Line, ...] = ()

    def line(self, number: int) -> Line:
        """Return line `number` (1-based)."""
        if not 1 <= number <= len(self.lines):
            raise IndexError(f"line {number} out of range 1..{len(self.lines)}")
        return self.lines[number - 1]

    def __len__(self) -> int:
        return len(self.lines)


# =============================================================================
# Visitor Pattern Support
# =============================================================================

class ASTVisitor:
    """
    Base class for AST visitors.

    Subclasses override visit_* methods for the node classes they care
    about; everything else falls through to generic_visit.

    Usage:
        class NameCollector(ASTVisitor):
            def __init__(self):
                self.names = set()

            def visit_Identifier(self, node):
                self.names.add(node.name)
    """

    def visit(self, node):
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node) -> None:
        """Visit every child node and node sequence of `node`."""
        for value in node.__dict__.values():
            if isinstance(value, (Expression, Statement, Line, Program)):
                self.visit(value)
            elif isinstance(value, tuple):
                for item in value:
                    if isinstance(item, (Expression, Statement, Line)):
                        self.visit(item)


class ASTPrinter(ASTVisitor):
    """
    Pretty printer for AST debugging.

    Usage:
        printer = ASTPrinter()
        print(printer.print(program))

    Example output:
        Program
          Line 1
            Assign: x = 1
          Line 2
            If (x == 0)
              Then:
                Goto 1
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0
        self._line_number = 0

    def print(self, node) -> str:
        """Print the tree and return it as a string."""
        self.output = []
        self.indent_level = 0
        self._line_number = 0
        self.visit(node)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")

    def _indent(self) -> None:
        self.indent_level += 1

    def _dedent(self) -> None:
        self.indent_level = max(0, self.indent_level - 1)

    def visit_Program(self, node: Program):
        self._emit("Program")
        self._indent()
        for line in node.lines:
            self.visit(line)
        self._dedent()

    def visit_Line(self, node: Line):
        self._line_number += 1
        self._emit(f"Line {self._line_number}")
        self._indent()
        for error in node.syntax_errors:
            self._emit(f"SyntaxError: {error.message}")
        for stmt in node.statements:
            self.visit(stmt)
        self._dedent()

    def visit_Assignment(self, node: Assignment):
        self._emit(f"Assign: {node.target.name} {node.operator} {self._expr_str(node.value)}")

    def visit_Goto(self, node: Goto):
        self._emit(f"Goto {self._expr_str(node.target)}")

    def visit_If(self, node: If):
        self._emit(f"If ({self._expr_str(node.condition)})")
        self._indent()
        self._emit("Then:")
        self._indent()
        for stmt in node.body:
            self.visit(stmt)
        self._dedent()
        if node.else_body is not None:
            self._emit("Else:")
            self._indent()
            for stmt in node.else_body:
                self.visit(stmt)
            self._dedent()
        self._dedent()

    def visit_Comment(self, node: Comment):
        self._emit(f"Comment: {node.text}")

    def visit_IncrementStatement(self, node: IncrementStatement):
        self._emit(f"Expr: {self._expr_str(node.expression)}")

    def _expr_str(self, expr: Expression) -> str:
        """Convert an expression to its source-like text."""
        if isinstance(expr, NumberLiteral):
            return expr.text
        if isinstance(expr, StringLiteral):
            return f'"{expr.text}"'
        if isinstance(expr, Identifier):
            return expr.name
        if isinstance(expr, BinaryExpression):
            return f"({self._expr_str(expr.left)} {expr.operator} {self._expr_str(expr.right)})"
        if isinstance(expr, KeywordExpression):
            return f"{expr.keyword} {self._expr_str(expr.operand)}"
        if isinstance(expr, IncrementExpression):
            operand = self._expr_str(expr.operand)
            return f"{expr.operator}{operand}" if expr.prefix else f"{operand}{expr.operator}"
        return f"<{expr.__class__.__name__}>"
