"""Tests for printed number formatting."""

import pytest

from quotation_toolkit.builder.output.formatting import (
    format_money,
    format_quantity,
    group_digits,
)


@pytest.mark.parametrize("digits, expected", [
    ("0", "0"),
    ("999", "999"),
    ("1000", "1,000"),
    ("100000", "1,00,000"),
    ("1234567", "12,34,567"),
    ("123456789", "12,34,56,789"),
])
def test_group_digits_indian_grouping(digits, expected):
    assert group_digits(digits) == expected


class TestFormatMoney:

    @pytest.mark.parametrize("value, expected", [
        (0, "0.00"),
        (5, "5.00"),
        (500.0, "500.00"),
        (1234567.5, "12,34,567.50"),
        (100000, "1,00,000.00"),
    ])
    def test_format_money_always_two_decimals(self, value, expected):
        assert format_money(value) == expected

    def test_format_money_rounds_half_up(self):
        assert format_money(2.675) == "2.68"
        assert format_money(0.125) == "0.13"

    def test_format_money_when_negative_then_sign_kept(self):
        assert format_money(-1500) == "-1,500.00"

    def test_format_money_when_rounds_to_zero_then_no_negative_zero(self):
        assert format_money(-0.001) == "0.00"

    def test_format_money_when_huge_amount_then_exact_digits(self):
        assert format_money(1e26).replace(",", "") == "1" + "0" * 26 + ".00"
        assert format_money(-1e27).replace(",", "") == "-1" + "0" * 27 + ".00"

    @pytest.mark.parametrize("value", [None, "abc", float("nan"), float("inf"), True])
    def test_format_money_when_unusable_then_zero(self, value):
        assert format_money(value) == "0.00"


class TestFormatQuantity:

    @pytest.mark.parametrize("value, expected", [
        (5, "5"),
        (5.0, "5"),
        (2.5, "2.5"),
        (1.25, "1.25"),
        (1500, "1,500"),
        (0.3333, "0.333"),
    ])
    def test_format_quantity_no_forced_decimals(self, value, expected):
        assert format_quantity(value) == expected

    @pytest.mark.parametrize("value", [None, ""])
    def test_format_quantity_when_missing_then_blank(self, value):
        assert format_quantity(value) == ""

    def test_format_quantity_when_huge_then_grouped_without_decimals(self):
        assert format_quantity(1e30) == group_digits("1" + "0" * 30)
