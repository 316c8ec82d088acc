"""
Program Loader
==============

The external parser delivers programs as a tree of tagged dicts, one entry
per line. The loader converts that tree into the closed AST hierarchy once,
so the interpreter never dispatches on string tags.

Input Format
------------
A program is a list of lines:

    [
        {"errors": [], "code": [<statement>, ...]},
        ...
    ]

Statements (tag in "type"):
    assign    {"identifier": <identifier>, "operator": "=", "value": <expr>}
    goto      {"expression": <expr>}
    if        {"condition": <expr>, "body": [...], "else_body": [...] | null}
    comment   {"value": "text"}
    pre_add   {"operator": "++", "operand": <expr>}   (also post_add)

Expressions (tag in "type"):
    number    {"num": "42"}
    string    {"str": "text"}
    identifier {"name": ":door"}
    exp, mul, add, eq, neq  {"operator": "+", "lhs": <expr>, "rhs": <expr>}
    keyword   {"operator": "sqrt", "operand": <expr>}
    pre_add, post_add       {"operator": "--", "operand": <expr>}

Syntax errors may be plain strings or {"msg": ..., "pos": ...} dicts.
Entries of "code" that are not dicts (fragments of blank lines) are skipped.

Example:
    >>> program = load_program_json('[{"errors": [], "code": []}]')
    >>> len(program)
    1

Copyright (c) 2026 yolol-vm Contributors
"""

import json
import logging
from pathlib import Path
from typing import Any, Union

from yolol_vm.ast import (
    Assignment,
    BinaryExpression,
    BinaryGroup,
    Comment,
    Expression,
    Goto,
    Identifier,
    If,
    IncrementExpression,
    IncrementStatement,
    KeywordExpression,
    Line,
    NumberLiteral,
    Program,
    Statement,
    StringLiteral,
    SyntaxErrorRecord,
)
from yolol_vm.errors import ProgramFormatError


logger = logging.getLogger(__name__)

BINARY_TAGS = {group.value: group for group in BinaryGroup}
INCREMENT_TAGS = {"pre_add": True, "post_add": False}


# =============================================================================
# Public Interface
# =============================================================================

def load_program(data: list[Any]) -> Program:
    """
    Build a Program from the parser's tagged tree.

    Args:
        data: List of line dicts

    Returns:
        The loaded Program

    Raises:
        ProgramFormatError: If any node is malformed
    """
    if not isinstance(data, list):
        raise ProgramFormatError(f"program must be a list of lines, got {type(data).__name__}")
    program = Program(tuple(_ProgramBuilder(number).line(raw) for number, raw in enumerate(data, 1)))
    logger.debug(f"Loaded program with {len(program)} lines")
    return program


def load_program_json(text: str) -> Program:
    """Build a Program from JSON text."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ProgramFormatError(f"invalid JSON: {e}") from e
    return load_program(data)


def load_program_file(path: Union[str, Path]) -> Program:
    """Build a Program from a JSON file."""
    path = Path(path)
    logger.debug(f"Loading program from {path}")
    return load_program_json(path.read_text(encoding="utf-8"))


# =============================================================================
# Tree Conversion
# =============================================================================

class _ProgramBuilder:
    """Converts the dicts of one line, tracking the path for error messages."""

    def __init__(self, line_number: int):
        self.line_number = line_number

    def _error(self, message: str, path: str) -> ProgramFormatError:
        return ProgramFormatError(message, line=self.line_number, path=path or None)

    def _require(self, node: dict, key: str, path: str) -> Any:
        if key not in node:
            raise self._error(f"missing key '{key}' for '{node.get('type')}' node", path)
        return node[key]

    def _tag(self, node: Any, path: str) -> str:
        if not isinstance(node, dict):
            raise self._error(f"expected a node, got {type(node).__name__}", path)
        tag = node.get("type")
        if not isinstance(tag, str):
            raise self._error("node has no 'type' tag", path)
        return tag

    # =========================================================================
    # Lines
    # =========================================================================

    def line(self, raw: Any) -> Line:
        if not isinstance(raw, dict):
            raise self._error(f"line must be an object, got {type(raw).__name__}", "")

        return Line(
            statements=self.statements(raw.get("code") or [], "code"),
            syntax_errors=self.syntax_errors(raw.get("errors") or [], "errors"),
        )

    def syntax_errors(self, raw: Any, path: str) -> tuple[SyntaxErrorRecord, ...]:
        if not isinstance(raw, list):
            raise self._error(f"expected a list of syntax errors, got {type(raw).__name__}", path)
        return tuple(self.syntax_error(entry, f"{path}[{i}]") for i, entry in enumerate(raw))

    def syntax_error(self, entry: Any, path: str) -> SyntaxErrorRecord:
        if isinstance(entry, str):
            return SyntaxErrorRecord(entry)
        if isinstance(entry, dict):
            return SyntaxErrorRecord(str(entry.get("msg", "syntax error")), entry.get("pos"))
        raise self._error(f"invalid syntax error entry {entry!r}", path)

    def statements(self, raw: Any, path: str) -> tuple[Statement, ...]:
        if not isinstance(raw, list):
            raise self._error(f"expected a list of statements, got {type(raw).__name__}", path)
        result = []
        for i, node in enumerate(raw):
            if not isinstance(node, dict):
                logger.debug(f"Line {self.line_number}: skipping non-statement entry {node!r}")
                continue
            result.append(self.statement(node, f"{path}[{i}]"))
        return tuple(result)

    # =========================================================================
    # Statements
    # =========================================================================

    def statement(self, node: dict, path: str) -> Statement:
        tag = self._tag(node, path)

        if tag == "assign":
            target = self.expression(self._require(node, "identifier", path), f"{path}.identifier")
            if not isinstance(target, Identifier):
                raise self._error("assignment target must be an identifier", f"{path}.identifier")
            return Assignment(
                target=target,
                operator=str(node.get("operator", "=")),
                value=self.expression(self._require(node, "value", path), f"{path}.value"),
            )
        if tag == "goto":
            return Goto(self.expression(self._require(node, "expression", path), f"{path}.expression"))
        if tag == "if":
            else_body = node.get("else_body")
            return If(
                condition=self.expression(self._require(node, "condition", path), f"{path}.condition"),
                body=self.statements(node.get("body") or [], f"{path}.body"),
                else_body=None if else_body is None else self.statements(else_body, f"{path}.else_body"),
            )
        if tag == "comment":
            return Comment(str(node.get("value", node.get("comment", ""))))
        if tag in INCREMENT_TAGS:
            return IncrementStatement(self.increment(node, tag, path))

        raise self._error(f"unknown statement type '{tag}'", path)

    # =========================================================================
    # Expressions
    # =========================================================================

    def expression(self, node: Any, path: str) -> Expression:
        tag = self._tag(node, path)

        if tag == "number":
            return NumberLiteral(str(self._require(node, "num", path)))
        if tag == "string":
            return StringLiteral(str(self._require(node, "str", path)))
        if tag == "identifier":
            return Identifier(str(self._require(node, "name", path)))
        if tag in BINARY_TAGS:
            return BinaryExpression(
                group=BINARY_TAGS[tag],
                operator=str(self._require(node, "operator", path)),
                left=self.expression(self._require(node, "lhs", path), f"{path}.lhs"),
                right=self.expression(self._require(node, "rhs", path), f"{path}.rhs"),
            )
        if tag == "keyword":
            return KeywordExpression(
                keyword=str(self._require(node, "operator", path)).lower(),
                operand=self.expression(self._require(node, "operand", path), f"{path}.operand"),
            )
        if tag in INCREMENT_TAGS:
            return self.increment(node, tag, path)

        raise self._error(f"unknown expression type '{tag}'", path)

    def increment(self, node: dict, tag: str, path: str) -> IncrementExpression:
        return IncrementExpression(
            operator=str(self._require(node, "operator", path)),
            operand=self.expression(self._require(node, "operand", path), f"{path}.operand"),
            prefix=INCREMENT_TAGS[tag],
        )
