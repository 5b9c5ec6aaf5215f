"""
Unit tests for line-item pricing.

Covers per-item amounts, the document total, and the document-wide
column-set decision.
"""

import math

import pytest

from quotation_toolkit.builder.pricing import (
    ColumnSet,
    ItemMode,
    amount,
    choose_column_set,
    price_items,
    total,
)
from quotation_toolkit.core.models import LineItem


def computed(quantity=None, rate=None, **flags) -> LineItem:
    return LineItem("Computed item", quantity=quantity, rate=rate, unit="pcs", **flags)


def manual(value=None) -> LineItem:
    return LineItem(
        "Manual item",
        amount=value,
        show_quantity=False,
        show_unit=False,
        show_rate=False,
    )


class TestAmount:
    """Tests for amount()."""

    def test_amount_when_computed_then_quantity_times_rate(self):
        assert amount(computed(quantity=5, rate=100)) == 500.0

    def test_amount_when_manual_then_entered_amount(self):
        assert amount(manual(750)) == 750.0

    def test_amount_when_manual_ignores_quantity_and_rate(self):
        item = LineItem(
            "Flat", quantity=3, rate=10, amount=25,
            show_quantity=False, show_unit=False, show_rate=False,
        )

        assert amount(item) == 25.0

    @pytest.mark.parametrize("quantity, rate", [(None, 100), (5, None), (None, None)])
    def test_amount_when_operand_missing_then_zero(self, quantity, rate):
        assert amount(computed(quantity=quantity, rate=rate)) == 0.0

    def test_amount_when_manual_amount_missing_then_zero(self):
        assert amount(manual(None)) == 0.0

    @pytest.mark.parametrize("bad", [float("nan"), float("inf"), -5, "abc", True])
    def test_amount_when_operand_unusable_then_never_nan(self, bad):
        result = amount(computed(quantity=bad, rate=10))

        assert result == 0.0
        assert not math.isnan(result)

    def test_amount_when_mode_given_then_used(self):
        item = computed(quantity=2, rate=3)

        assert amount(item, ItemMode.MANUAL) == 0.0


class TestTotal:
    """Tests for total()."""

    def test_total_when_mixed_items_then_sum(self):
        assert total([computed(quantity=2, rate=50), manual(25)]) == 125.0

    def test_total_equals_sum_of_amounts(self):
        items = [computed(quantity=1.5, rate=33.3), manual(10.1), computed(quantity=7, rate=0.7)]

        running = 0.0
        for item in items:
            running += amount(item)

        assert total(items) == running

    def test_total_when_no_items_then_zero(self):
        assert total([]) == 0.0


class TestChooseColumnSet:
    """Tests for the document-wide column decision."""

    def test_choose_when_all_manual_then_manual(self):
        assert choose_column_set([manual(1), manual(2)]) is ColumnSet.MANUAL

    def test_choose_when_any_flag_set_then_full(self):
        items = [manual(1), computed(quantity=1, rate=1, show_quantity=False, show_rate=False)]

        assert choose_column_set(items) is ColumnSet.FULL

    def test_choose_when_computed_item_added_then_never_reverts_to_manual(self):
        items = [manual(1)]
        assert choose_column_set(items) is ColumnSet.MANUAL

        items = items + [computed(quantity=1, rate=1)]
        assert choose_column_set(items) is ColumnSet.FULL

        items = items + [manual(3)]
        assert choose_column_set(items) is ColumnSet.FULL

    def test_headers_match_column_set(self):
        assert ColumnSet.FULL.headers == ("Sr. No.", "Description", "Qty", "Unit", "Rate", "Amount")
        assert ColumnSet.MANUAL.headers == ("Sr. No.", "Description", "Amount")


class TestPriceItems:
    """Scenarios for the full pricing pass."""

    def test_price_when_single_computed_item_then_full_columns(self):
        # Arrange
        items = [computed(quantity=5, rate=100)]

        # Act
        result = price_items(items)

        # Assert
        assert result.rows[0].amount == 500.0
        assert result.total == 500.0
        assert result.column_set is ColumnSet.FULL

    def test_price_when_single_manual_item_then_manual_columns(self):
        result = price_items([manual(750)])

        assert result.total == 750.0
        assert result.column_set is ColumnSet.MANUAL
        assert not result.has_mixed_modes

    def test_price_when_mixed_items_then_full_columns_with_manual_row(self):
        result = price_items([computed(quantity=2, rate=50), manual(25)])

        assert [row.amount for row in result.rows] == [100.0, 25.0]
        assert [row.mode for row in result.rows] == [ItemMode.COMPUTED, ItemMode.MANUAL]
        assert result.total == 125.0
        assert result.column_set is ColumnSet.FULL
        assert result.has_mixed_modes

    def test_price_serial_numbers_follow_order(self):
        result = price_items([manual(1), manual(2), manual(3)])

        assert [row.serial_number for row in result.rows] == [1, 2, 3]
