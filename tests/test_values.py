# =============================================================================
# test_values.py - Value Coercion Tests
# =============================================================================

import math

import pytest

from yolol_vm.errors import VMInternalError
from yolol_vm.values import (
    MATH_KEYWORDS,
    MAX_EXACT_INT,
    is_number,
    normalize,
    parse_number,
    power,
    to_number,
    to_text,
    values_equal,
)


class TestParseNumber:
    """Number literal parsing."""

    def test_integer(self):
        value = parse_number("42")
        assert value == 42
        assert isinstance(value, int)

    def test_decimal(self):
        assert parse_number("0.125") == 0.125

    def test_invalid(self):
        with pytest.raises(VMInternalError):
            parse_number("four")

    def test_huge_integer_becomes_float(self):
        value = parse_number("9" * 30)
        assert isinstance(value, float)
        assert value == pytest.approx(1e30)


class TestNormalize:
    """Ints leave the exact range as floats."""

    def test_small_int_kept(self):
        assert normalize(MAX_EXACT_INT) == MAX_EXACT_INT
        assert isinstance(normalize(-MAX_EXACT_INT), int)

    def test_large_int_becomes_float(self):
        value = normalize(MAX_EXACT_INT + 1)
        assert isinstance(value, float)

    def test_int_beyond_float_range(self):
        assert normalize(10 ** 400) == math.inf
        assert normalize(-(10 ** 400)) == -math.inf

    def test_floats_untouched(self):
        assert normalize(1.5) == 1.5


class TestToNumber:
    """Coercion for arithmetic."""

    def test_numbers_pass_through(self):
        assert to_number(3) == 3
        assert to_number(2.5) == 2.5

    def test_numeric_string(self):
        assert to_number(" 12 ") == 12
        assert to_number("1.5") == 1.5

    def test_non_numeric_string(self):
        assert to_number("door") is None

    def test_words_for_infinity_rejected(self):
        assert to_number("inf") is None
        assert to_number("nan") is None


class TestToText:
    """Rendering for concatenation."""

    @pytest.mark.parametrize("value,expected", [
        (5, "5"),
        (-3, "-3"),
        (2.0, "2.0"),
        (0.1, "0.1"),
        (1 / 3, "0.33333333333333"),
        (math.inf, "inf"),
        ("text", "text"),
    ])
    def test_render(self, value, expected):
        assert to_text(value) == expected

    def test_huge_int_set_by_host(self):
        """Ints past the str() digit limit render as infinity."""
        assert to_text(10 ** 5000) == "inf"


class TestHelpers:
    """Type tests, equality and math helpers."""

    def test_bool_is_not_number(self):
        assert not is_number(True)

    def test_values_equal(self):
        assert values_equal(1, 1.0)
        assert not values_equal(1, "1")
        assert values_equal("a", "a")

    def test_power_overflow(self):
        assert power(10.0, 1000) == math.inf

    def test_power_large_integer_exponent(self):
        """Integer operands are not raised exactly."""
        assert power(9, 99999999) == math.inf

    def test_power_negative_overflow(self):
        assert power(-10, 1001) == -math.inf

    def test_power_is_float(self):
        assert isinstance(power(2, 3), float)
        assert power(2, 3) == 8

    def test_power_negative_base_fraction(self):
        assert math.isnan(power(-8, 0.5))

    def test_acos_domain(self):
        assert math.isnan(MATH_KEYWORDS["acos"](2))
