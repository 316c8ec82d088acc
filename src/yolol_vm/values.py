"""
YOLOL Values
============

A YOLOL value is either a number or a string. There is a single numeric
kind at the language level; Python ints and floats are both used to carry
it, ints for integral literals and floats once division, exponentiation or
a math keyword produces one. Ints that leave the exactly representable
range (+/-2**53) are converted to floats, so repeated multiplication
ends at infinity instead of growing without bound.

This module holds the coercion rules shared by the evaluator and the
statement executor:

- Numeric strings coerce to numbers for arithmetic ("10" - 1 is 9)
- Numbers render to text for concatenation (1 + "a" is "1a")
- Math keywords never raise; domain errors produce NaN

Copyright (c) 2026 yolol-vm Contributors
"""

import math
from typing import Callable, Optional, Union

from yolol_vm.errors import VMInternalError


Number = Union[int, float]
Value = Union[int, float, str]

# Largest magnitude an int keeps before it is carried as a float
MAX_EXACT_INT = 2 ** 53


# =============================================================================
# Type Tests
# =============================================================================

def is_number(value: object) -> bool:
    """Return True for ints and floats (bools are not YOLOL values)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_string(value: object) -> bool:
    """Return True for string values."""
    return isinstance(value, str)


# =============================================================================
# Conversions
# =============================================================================

def parse_number(text: str) -> Number:
    """
    Parse the text of a number literal.

    Args:
        text: Literal text as produced by the parser (e.g. "42", "1.5")

    Returns:
        An int for integral literals, otherwise a float

    Raises:
        VMInternalError: If the text is not a number (broken parser contract)
    """
    if is_number(text):
        return normalize(text)
    try:
        return normalize(int(text))
    except (TypeError, ValueError):
        pass
    try:
        return float(text)
    except (TypeError, ValueError):
        raise VMInternalError(f"invalid number literal {text!r}") from None


def normalize(number: Number) -> Number:
    """
    Carry an int outside +/-MAX_EXACT_INT as a float.

    Results of +, - and * pass through here so an int never grows without
    bound. Ints too large for a float become signed infinity.
    """
    if isinstance(number, int) and not -MAX_EXACT_INT <= number <= MAX_EXACT_INT:
        try:
            return float(number)
        except OverflowError:
            return math.inf if number > 0 else -math.inf
    return number


def to_number(value: Value) -> Optional[Number]:
    """
    Coerce a value for arithmetic.

    Numbers pass through. Strings holding a number literal are converted;
    any other string returns None so the caller can report it.
    """
    if is_number(value):
        return normalize(value)
    if isinstance(value, str):
        text = value.strip()
        try:
            return normalize(int(text))
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return None
        # "inf" and "nan" are words, not number literals
        return number if math.isfinite(number) else None
    return None


def to_text(value: Value) -> str:
    """
    Render a value for string concatenation.

    Integers print plainly, integral floats keep a trailing ".0" and other
    floats are limited to 14 significant digits.
    """
    if isinstance(value, str):
        return value
    value = normalize(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "nan"
        if math.isinf(value):
            return "inf" if value > 0 else "-inf"
        if value.is_integer():
            return f"{value:.1f}"
        return format(value, ".14g")
    return str(value)


def values_equal(left: Value, right: Value) -> bool:
    """Equality without coercion; a number never equals a string."""
    if is_string(left) != is_string(right):
        return False
    return left == right


# =============================================================================
# Arithmetic Helpers
# =============================================================================

def power(base: Number, exponent: Number) -> float:
    """
    Exponentiation in floats.

    Always returns a float, as ^ does in the game. Overflow and zero raised
    to a negative power give infinity; a negative base with a fractional
    exponent gives NaN.
    """
    base = float(base)
    exponent = float(exponent)
    if base == 0 and exponent < 0:
        return math.inf
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and exponent % 2 == 1:
            return -math.inf
        return math.inf
    except ValueError:
        return math.nan


def _safe(func: Callable[[float], float]) -> Callable[[Number], Number]:
    def wrapper(value: Number) -> Number:
        try:
            return func(value)
        except ValueError:
            return math.nan
        except OverflowError:
            return math.inf
    wrapper.__name__ = func.__name__
    return wrapper


# Unary math keywords. "not" is handled by the evaluator since it accepts
# strings as well as numbers.
MATH_KEYWORDS: dict[str, Callable[[Number], Number]] = {
    "abs": abs,
    "cos": _safe(math.cos),
    "sin": _safe(math.sin),
    "tan": _safe(math.tan),
    "acos": _safe(math.acos),
    "asin": _safe(math.asin),
    "atan": _safe(math.atan),
    "sqrt": _safe(math.sqrt),
}
