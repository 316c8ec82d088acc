"""
YOLOL Expression Evaluator
==========================

Evaluates expression nodes into values. Children are evaluated first, left
before right, and every evaluation returns either a value or a Halt.

Supported Operations
--------------------
**Arithmetic** (numeric strings coerce to numbers):
- Exponent (^), computed in floats
- Multiplication, division, modulo (* / %)
- Addition, subtraction (+ -); + concatenates when either side is a string

**Comparison** (1 for true, 0 for false):
- == != > >= < <=

**Keywords:**
- not: 0 becomes 1, anything else becomes 0
- abs, cos, sin, tan, acos, asin, atan, sqrt

**Increment/decrement:**
- ++x, --x yield the new value; x++, x-- yield the original value
- the new value is written back only when the operand is an identifier

Script Errors
-------------
Division or modulo by zero, arithmetic on a non-numeric string, ordering a
number against a string and reading an ambiguous device field each record
an error for the current line and return HALT. Anything the evaluator does
not recognise raises VMInternalError.

Copyright (c) 2026 yolol-vm Contributors
"""

import logging
from typing import Callable, Union

from yolol_vm.ast import (
    BinaryExpression,
    BinaryGroup,
    Expression,
    Identifier,
    IncrementExpression,
    KeywordExpression,
    NumberLiteral,
    StringLiteral,
)
from yolol_vm.errors import VMInternalError
from yolol_vm.outcome import HALT, Halt
from yolol_vm.values import (
    MATH_KEYWORDS,
    Value,
    is_string,
    normalize,
    parse_number,
    power,
    to_number,
    to_text,
    values_equal,
)
from yolol_vm.variables import VariableStore


logger = logging.getLogger(__name__)

Result = Union[Value, Halt]

# Script error messages, shared with the statement executor
DIVISION_BY_ZERO = "Attempted division by zero."
MODULO_BY_ZERO = "Attempted modulo by zero."
STRING_ARITHMETIC = "Attempted arithmetic on a string value."
MIXED_COMPARISON = "Attempted to compare a number with a string."


class ExpressionEvaluator:
    """
    Evaluates expressions against a VariableStore.

    Script errors are handed to `report`, a callable that appends an error
    message to the current line's log; the evaluator then returns HALT.

    Attributes:
        variables: Store used for identifier reads and increment write-back
    """

    def __init__(self, variables: VariableStore, report: Callable[[str], None]):
        self.variables = variables
        self._report = report

    def halt(self, message: str) -> Halt:
        """Report a script error and return the halt marker."""
        logger.debug(f"Halting line: {message}")
        self._report(message)
        return HALT

    # =========================================================================
    # Main Evaluation Interface
    # =========================================================================

    def evaluate(self, expr: Expression) -> Result:
        """
        Evaluate an expression.

        Returns:
            The value, or HALT when a script error stopped the line

        Raises:
            VMInternalError: For nodes or operators the VM does not know
        """
        match expr:
            case NumberLiteral(text=text):
                return parse_number(text)
            case StringLiteral(text=text):
                return text
            case Identifier():
                return self._eval_identifier(expr)
            case BinaryExpression():
                return self._eval_binary(expr)
            case KeywordExpression():
                return self._eval_keyword(expr)
            case IncrementExpression():
                return self._eval_increment(expr)
            case _:
                raise VMInternalError(
                    f"invalid expression type {type(expr).__name__}, expected a valid expression"
                )

    # =========================================================================
    # Node Handlers
    # =========================================================================

    def _eval_identifier(self, expr: Identifier) -> Result:
        result = self.variables.read(expr.ref)
        if result.ambiguous:
            return self.halt(
                f"Found multiple different values for the name data field '{expr.ref.key}'"
            )
        return result.value

    def _eval_binary(self, expr: BinaryExpression) -> Result:
        if not isinstance(expr.group, BinaryGroup) or expr.operator not in expr.group.operators:
            raise VMInternalError(
                f"invalid operator {expr.operator} from {getattr(expr.group, 'value', expr.group)} "
                f"type for binary math handling in eval"
            )

        left = self.evaluate(expr.left)
        if isinstance(left, Halt):
            return left
        right = self.evaluate(expr.right)
        if isinstance(right, Halt):
            return right

        return self.apply_operator(expr.operator, left, right)

    def apply_operator(self, operator: str, left: Value, right: Value) -> Result:
        """
        Apply a binary operator to two evaluated operands.

        Also used by compound assignment, so that "x /= 0" fails exactly
        like "x = x / 0".
        """
        if operator == "+" and (is_string(left) or is_string(right)):
            return to_text(left) + to_text(right)

        match operator:
            case "==":
                return 1 if values_equal(left, right) else 0
            case "!=":
                return 0 if values_equal(left, right) else 1
            case ">" | ">=" | "<" | "<=":
                return self._compare(operator, left, right)

        lhs = to_number(left)
        rhs = to_number(right)
        if lhs is None or rhs is None:
            return self.halt(STRING_ARITHMETIC)

        match operator:
            case "^":
                return power(lhs, rhs)
            case "*":
                return normalize(lhs * rhs)
            case "/":
                if rhs == 0:
                    return self.halt(DIVISION_BY_ZERO)
                return lhs / rhs
            case "%":
                if rhs == 0:
                    return self.halt(MODULO_BY_ZERO)
                return lhs % rhs
            case "+":
                return normalize(lhs + rhs)
            case "-":
                return normalize(lhs - rhs)
            case _:
                raise VMInternalError(f"invalid operator {operator} for binary math handling in eval")

    def _compare(self, operator: str, left: Value, right: Value) -> Result:
        if is_string(left) != is_string(right):
            return self.halt(MIXED_COMPARISON)
        match operator:
            case ">":
                holds = left > right
            case ">=":
                holds = left >= right
            case "<":
                holds = left < right
            case _:
                holds = left <= right
        return 1 if holds else 0

    def _eval_keyword(self, expr: KeywordExpression) -> Result:
        keyword = expr.keyword.lower()
        if keyword != "not" and keyword not in MATH_KEYWORDS:
            raise VMInternalError(
                f"invalid keyword {expr.keyword} for keyword handling in eval, expected a valid keyword"
            )

        value = self.evaluate(expr.operand)
        if isinstance(value, Halt):
            return value

        if keyword == "not":
            return 1 if values_equal(value, 0) else 0

        number = to_number(value)
        if number is None:
            return self.halt(STRING_ARITHMETIC)
        return MATH_KEYWORDS[keyword](number)

    def _eval_increment(self, expr: IncrementExpression) -> Result:
        if expr.operator not in ("++", "--"):
            raise VMInternalError(
                f"invalid operator {expr.operator} for unary_add handling in eval, expected a valid operator"
            )

        value = self.evaluate(expr.operand)
        if isinstance(value, Halt):
            return value

        number = to_number(value)
        if number is None:
            return self.halt(STRING_ARITHMETIC)
        new_value = normalize(number + 1 if expr.operator == "++" else number - 1)

        if isinstance(expr.operand, Identifier):
            self.variables.write(expr.operand.ref, new_value)

        return new_value if expr.prefix else value
