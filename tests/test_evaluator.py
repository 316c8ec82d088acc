# =============================================================================
# test_evaluator.py - Expression Evaluator Unit Tests
# =============================================================================
# Tests for the YOLOL expression evaluator.
#
# Test coverage includes:
#   - Literals and identifier reads (local and device field)
#   - Arithmetic, concatenation and comparison operators
#   - Keywords (not and the math functions)
#   - Pre/post increment and decrement
#   - Script errors that halt the line
#   - Internal-consistency failures
# =============================================================================

import math

import pytest

from builders import binop, expr, ident, keyword, num, post, pre, text
from yolol_vm import BinaryExpression, BinaryGroup, Halt, NumberLiteral
from yolol_vm.errors import VMInternalError
from yolol_vm.evaluator import (
    DIVISION_BY_ZERO,
    MIXED_COMPARISON,
    MODULO_BY_ZERO,
    STRING_ARITHMETIC,
)


# =============================================================================
# Literal and Identifier Tests
# =============================================================================

class TestLiterals:
    """Test evaluation of literals."""

    def test_integer(self, evaluator):
        assert evaluator.evaluate(expr(num(42))) == 42

    def test_decimal(self, evaluator):
        assert evaluator.evaluate(expr(num("1.5"))) == 1.5

    def test_string_verbatim(self, evaluator):
        assert evaluator.evaluate(expr(text("hello world"))) == "hello world"

    def test_invalid_number_literal(self, evaluator):
        """A malformed literal is a parser contract violation."""
        with pytest.raises(VMInternalError):
            evaluator.evaluate(NumberLiteral("12abc"))


class TestIdentifiers:
    """Test identifier reads."""

    def test_unset_local_is_zero(self, evaluator):
        assert evaluator.evaluate(expr(ident("never_set"))) == 0

    def test_local_value(self, evaluator, variables):
        variables.set_variable("x", 7)
        assert evaluator.evaluate(expr(ident("x"))) == 7

    def test_field_value(self, evaluator, field_store):
        field_store.add_device("door", {"DoorOpen": 1})
        assert evaluator.evaluate(expr(ident(":dooropen"))) == 1

    def test_missing_field_is_zero(self, evaluator):
        assert evaluator.evaluate(expr(ident(":nothing"))) == 0

    def test_ambiguous_field_halts(self, evaluator, field_store, reports):
        """Conflicting field values halt the line with an error."""
        field_store.add_device("left", {"door": 0})
        field_store.add_device("right", {"door": 1})

        result = evaluator.evaluate(expr(ident(":door")))

        assert isinstance(result, Halt)
        assert len(reports) == 1
        assert "door" in reports[0]
        assert "multiple different values" in reports[0]


# =============================================================================
# Arithmetic Tests
# =============================================================================

class TestArithmetic:
    """Test arithmetic operators."""

    @pytest.mark.parametrize("operator,lhs,rhs,expected", [
        ("^", 2, 3, 8),
        ("*", 7, 6, 42),
        ("/", 7, 2, 3.5),
        ("%", 7, 3, 1),
        ("+", 1, 2, 3),
        ("-", 5, 8, -3),
    ])
    def test_operator(self, evaluator, operator, lhs, rhs, expected):
        assert evaluator.evaluate(expr(binop(operator, num(lhs), num(rhs)))) == expected

    def test_addition_uses_right_operand(self, evaluator):
        """1 + 10 is 11, not 1 + 1."""
        assert evaluator.evaluate(expr(binop("+", num(1), num(10)))) == 11

    def test_numeric_string_coerces(self, evaluator):
        assert evaluator.evaluate(expr(binop("-", text("10"), num(1)))) == 9

    def test_non_numeric_string_halts(self, evaluator, reports):
        result = evaluator.evaluate(expr(binop("*", text("abc"), num(2))))
        assert isinstance(result, Halt)
        assert reports == [STRING_ARITHMETIC]

    def test_nested(self, evaluator):
        """(2 + 3) * 4"""
        node = binop("*", binop("+", num(2), num(3)), num(4))
        assert evaluator.evaluate(expr(node)) == 20

    def test_zero_to_negative_power(self, evaluator):
        assert evaluator.evaluate(expr(binop("^", num(0), num(-1)))) == math.inf

    def test_huge_power_is_infinite(self, evaluator):
        assert evaluator.evaluate(expr(binop("^", num(9), num(99999999)))) == math.inf

    def test_repeated_squaring_becomes_float(self, evaluator, variables):
        variables.set_variable("x", 10)
        for _ in range(9):
            variables.set_variable("x", evaluator.evaluate(expr(binop("*", ident("x"), ident("x")))))
        assert variables.get_variable("x") == math.inf


class TestConcatenation:
    """Test + on strings."""

    def test_two_strings(self, evaluator):
        assert evaluator.evaluate(expr(binop("+", text("ab"), text("cd")))) == "abcd"

    def test_string_and_number(self, evaluator):
        assert evaluator.evaluate(expr(binop("+", text("n="), num(5)))) == "n=5"

    def test_number_and_string(self, evaluator):
        assert evaluator.evaluate(expr(binop("+", num(5), text("!")))) == "5!"

    def test_float_rendering(self, evaluator):
        node = binop("+", text(""), binop("/", num(1), num(4)))
        assert evaluator.evaluate(expr(node)) == "0.25"


class TestDivisionByZero:
    """Test zero divisors."""

    def test_division(self, evaluator, reports):
        result = evaluator.evaluate(expr(binop("/", num(1), num(0))))
        assert isinstance(result, Halt)
        assert reports == [DIVISION_BY_ZERO]

    def test_modulo(self, evaluator, reports):
        result = evaluator.evaluate(expr(binop("%", num(1), num(0))))
        assert isinstance(result, Halt)
        assert reports == [MODULO_BY_ZERO]

    def test_halt_stops_right_operand(self, evaluator, variables):
        """Once the left operand halts, the right one is never evaluated."""
        node = binop("+", binop("/", num(1), num(0)), post("++", ident("x")))
        assert isinstance(evaluator.evaluate(expr(node)), Halt)
        assert "x" not in variables


# =============================================================================
# Comparison Tests
# =============================================================================

class TestComparison:
    """Comparisons yield 1 or 0."""

    @pytest.mark.parametrize("operator,lhs,rhs,expected", [
        ("==", 1, 1, 1),
        ("==", 1, 2, 0),
        ("!=", 1, 2, 1),
        ("!=", 2, 2, 0),
        (">", 2, 1, 1),
        (">", 1, 2, 0),
        (">=", 2, 2, 1),
        ("<", 1, 2, 1),
        ("<", 2, 1, 0),
        ("<=", 3, 2, 0),
    ])
    def test_numbers(self, evaluator, operator, lhs, rhs, expected):
        assert evaluator.evaluate(expr(binop(operator, num(lhs), num(rhs)))) == expected

    def test_string_equality(self, evaluator):
        assert evaluator.evaluate(expr(binop("==", text("on"), text("on")))) == 1

    def test_string_ordering(self, evaluator):
        assert evaluator.evaluate(expr(binop("<", text("abc"), text("abd")))) == 1

    def test_mixed_equality_is_false(self, evaluator):
        assert evaluator.evaluate(expr(binop("==", num(1), text("1")))) == 0

    def test_mixed_ordering_halts(self, evaluator, reports):
        result = evaluator.evaluate(expr(binop("<", num(1), text("1"))))
        assert isinstance(result, Halt)
        assert reports == [MIXED_COMPARISON]


# =============================================================================
# Keyword Tests
# =============================================================================

class TestKeywords:
    """Test unary keywords."""

    def test_not_zero(self, evaluator):
        assert evaluator.evaluate(expr(keyword("not", num(0)))) == 1

    def test_not_nonzero(self, evaluator):
        assert evaluator.evaluate(expr(keyword("not", num(5)))) == 0

    def test_not_string(self, evaluator):
        assert evaluator.evaluate(expr(keyword("not", text("")))) == 0

    def test_keyword_case_insensitive(self, evaluator):
        assert evaluator.evaluate(expr(keyword("ABS", num(-3)))) == 3

    @pytest.mark.parametrize("name,operand,expected", [
        ("abs", -4, 4),
        ("sqrt", 16, 4.0),
        ("cos", 0, 1.0),
        ("sin", 0, 0.0),
        ("tan", 0, 0.0),
        ("acos", 1, 0.0),
        ("asin", 0, 0.0),
        ("atan", 0, 0.0),
    ])
    def test_math(self, evaluator, name, operand, expected):
        assert evaluator.evaluate(expr(keyword(name, num(operand)))) == pytest.approx(expected)

    def test_domain_error_is_nan(self, evaluator):
        assert math.isnan(evaluator.evaluate(expr(keyword("sqrt", num(-1)))))

    def test_unknown_keyword(self, evaluator):
        with pytest.raises(VMInternalError):
            evaluator.evaluate(expr(keyword("frobnicate", num(1))))


# =============================================================================
# Increment Tests
# =============================================================================

class TestIncrement:
    """Test pre/post increment and decrement expressions."""

    def test_pre_increment_returns_new_value(self, evaluator, variables):
        variables.set_variable("x", 5)
        assert evaluator.evaluate(expr(pre("++", ident("x")))) == 6
        assert variables.get_variable("x") == 6

    def test_post_increment_returns_old_value(self, evaluator, variables):
        variables.set_variable("x", 5)
        assert evaluator.evaluate(expr(post("++", ident("x")))) == 5
        assert variables.get_variable("x") == 6

    def test_pre_decrement(self, evaluator, variables):
        assert evaluator.evaluate(expr(pre("--", ident("x")))) == -1
        assert variables.get_variable("x") == -1

    def test_post_decrement(self, evaluator, variables):
        variables.set_variable("x", 1)
        assert evaluator.evaluate(expr(post("--", ident("x")))) == 1
        assert variables.get_variable("x") == 0

    def test_inside_larger_expression(self, evaluator, variables):
        """x++ + 10 uses the old value of x."""
        variables.set_variable("x", 1)
        assert evaluator.evaluate(expr(binop("+", post("++", ident("x")), num(10)))) == 11
        assert variables.get_variable("x") == 2

    def test_field_write_back(self, evaluator, field_store):
        field_store.add_device("lamp", {"level": 3})
        assert evaluator.evaluate(expr(pre("++", ident(":level")))) == 4
        assert field_store.device("lamp").fields["level"] == 4

    def test_non_identifier_operand(self, evaluator, variables):
        """Arithmetic happens, nothing is written."""
        assert evaluator.evaluate(expr(pre("++", num(4)))) == 5
        assert len(variables) == 0

    def test_invalid_operator(self, evaluator):
        with pytest.raises(VMInternalError):
            evaluator.evaluate(expr(pre("**", ident("x"))))


# =============================================================================
# Internal Consistency Tests
# =============================================================================

class TestInternalErrors:
    """Nodes the evaluator does not know raise VMInternalError."""

    def test_operator_outside_group(self, evaluator):
        node = BinaryExpression(BinaryGroup.ADD, "*", NumberLiteral("1"), NumberLiteral("2"))
        with pytest.raises(VMInternalError):
            evaluator.evaluate(node)

    def test_unknown_node(self, evaluator):
        with pytest.raises(VMInternalError):
            evaluator.evaluate(object())
