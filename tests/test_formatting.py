"""Test function format_number."""
import pytest

from pocket_calculator.common.formatting import format_number


@pytest.mark.parametrize("value,expected", [
    (14.0, "14"),
    (2.5, "2.5"),
    (0.1 + 0.2, "0.3"),
    (1 / 3, "0.3333333333"),
    (2 / 3, "0.6666666667"),
    (-7.25, "-7.25"),
    (0.0, "0"),
    (-0.0, "0"),
    (1e20, "100000000000000000000"),
    (1e-11, "0"),
    (123456789.125, "123456789.125"),
])
def test_format_number(value, expected):
    """Numbers are shown with at most ten fraction digits and no trailing zeros."""
    assert format_number(value) == expected


@pytest.mark.parametrize("value,digits,expected", [
    (2 / 3, 2, "0.67"),
    (2.5, 0, "2"),   # half-even
    (3.5, 0, "4"),
    (0.125, 2, "0.12"),
])
def test_format_number_precision(value, digits, expected):
    assert format_number(value, digits) == expected


@pytest.mark.parametrize("value,expected", [
    (float("inf"), "Infinity"),
    (float("-inf"), "-Infinity"),
    (float("nan"), "NaN"),
])
def test_format_number_non_finite(value, expected):
    assert format_number(value) == expected
