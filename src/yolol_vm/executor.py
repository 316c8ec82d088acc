"""
YOLOL Statement Executor
========================

Dispatches statement nodes to their handlers. Every handler returns None
when the statement completed, or a Halt when the rest of the line has to be
abandoned. Statement sequences (a whole line, or the body of an if) run
through execute_block, which stops at the first Halt and passes it up.

Statements
----------
- Assignment: plain and compound (+= -= *= /= %=)
- Goto: evaluates the target, clamps it to the line grid and moves the
  program counter so the end-of-line advance lands on the target
- If: 0 is false, anything else true; branches are statement sequences
- Comment: nothing
- IncrementStatement: evaluated for its side effect only

Copyright (c) 2026 yolol-vm Contributors
"""

import logging
import math
from typing import Iterable, Optional

from yolol_vm.ast import (
    Assignment,
    Comment,
    Goto,
    If,
    IncrementStatement,
    Statement,
)
from yolol_vm.config import DEFAULT_LINE_LIMIT
from yolol_vm.errors import VMInternalError
from yolol_vm.evaluator import ExpressionEvaluator
from yolol_vm.outcome import Halt
from yolol_vm.values import is_number, values_equal


logger = logging.getLogger(__name__)

INVALID_GOTO = "attempt to goto a invalid line, it was not a number."

# Compound assignment operator -> binary operator it applies
COMPOUND_OPERATORS = {
    "+=": "+",
    "-=": "-",
    "*=": "*",
    "/=": "/",
    "%=": "%",
}


class ProgramCounter:
    """
    Current line number, 1-based.

    A jump stores target - 1 so that the advance at the end of the line
    lands exactly on the target. The advance wraps past the last line.
    """

    def __init__(self, line: int = 1):
        self.line = line

    def jump(self, target: int) -> None:
        self.line = target - 1

    def advance(self, line_count: int) -> None:
        self.line = (self.line % line_count) + 1

    def __repr__(self) -> str:
        return f"ProgramCounter(line={self.line})"


class StatementExecutor:
    """
    Executes statements for one VM.

    Attributes:
        evaluator: Expression evaluator (also owns the variable store)
        counter: Program counter that goto statements move
        line_limit: Upper bound goto targets are clamped to
    """

    def __init__(
        self,
        evaluator: ExpressionEvaluator,
        counter: ProgramCounter,
        line_limit: int = DEFAULT_LINE_LIMIT,
    ):
        self.evaluator = evaluator
        self.counter = counter
        self.line_limit = line_limit

    def execute_block(self, statements: Iterable[Statement]) -> Optional[Halt]:
        """Execute statements in order, stopping at the first Halt."""
        for stmt in statements:
            result = self.execute(stmt)
            if isinstance(result, Halt):
                return result
        return None

    def execute(self, stmt: Statement) -> Optional[Halt]:
        """
        Execute a single statement.

        Raises:
            VMInternalError: For statement kinds the VM does not know
        """
        match stmt:
            case Assignment():
                return self._assign(stmt)
            case Goto():
                return self._goto(stmt)
            case If():
                return self._if(stmt)
            case Comment():
                return None
            case IncrementStatement(expression=expression):
                result = self.evaluator.evaluate(expression)
                return result if isinstance(result, Halt) else None
            case _:
                raise VMInternalError(f"unknown ast type for statement {type(stmt).__name__}")

    # =========================================================================
    # Statement Handlers
    # =========================================================================

    def _assign(self, stmt: Assignment) -> Optional[Halt]:
        if stmt.operator != "=" and stmt.operator not in COMPOUND_OPERATORS:
            raise VMInternalError(f"assign operator {stmt.operator} is not supported yet.")

        value = self.evaluator.evaluate(stmt.value)
        if isinstance(value, Halt):
            return value

        if stmt.operator != "=":
            old_value = self.evaluator.evaluate(stmt.target)
            if isinstance(old_value, Halt):
                return old_value
            value = self.evaluator.apply_operator(COMPOUND_OPERATORS[stmt.operator], old_value, value)
            if isinstance(value, Halt):
                return value

        self.evaluator.variables.write(stmt.target.ref, value)
        return None

    def _goto(self, stmt: Goto) -> Optional[Halt]:
        target = self.evaluator.evaluate(stmt.target)
        if isinstance(target, Halt):
            return target
        if not is_number(target) or math.isnan(target):
            return self.evaluator.halt(INVALID_GOTO)

        if target <= 0:
            target = 1
        elif target > self.line_limit:
            target = self.line_limit
        line = max(1, math.floor(target))

        logger.debug(f"goto {line}")
        self.counter.jump(line)
        return None

    def _if(self, stmt: If) -> Optional[Halt]:
        condition = self.evaluator.evaluate(stmt.condition)
        if isinstance(condition, Halt):
            return condition

        if values_equal(condition, 0):
            if stmt.else_body is not None:
                return self.execute_block(stmt.else_body)
            return None
        return self.execute_block(stmt.body)
