"""
Module: builder.pricing.calculator

Purpose:
    Derive per-item amounts, the document total, and the document-wide
    column set from a quotation's line items.

Key Functions:
    - amount(): Amount of a single item
    - total(): Sum of item amounts in print order
    - choose_column_set(): FULL vs MANUAL table columns
    - price_items(): All of the above, with item mode derived once

Key Classes:
    - ColumnSet: The two table-header configurations
    - PricedItem: An item paired with its mode and amount
    - PricingResult: Priced rows, total, and column set

Dependencies:
    - math, enum, dataclasses (std)
    - core.models.line_items: LineItem, ItemMode

Used By:
    - builder.layout.table: Item table rows and totals row
    - builder.controller: Build pipeline
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Sequence

from quotation_toolkit.core.models.line_items import ItemMode, LineItem

logger = logging.getLogger(__name__)


class ColumnSet(Enum):
    """
    Item table header configuration (document-wide).

    Attributes:
        FULL: Sr. No., Description, Qty, Unit, Rate, Amount
        MANUAL: Sr. No., Description, Amount (every item is manual)
    """

    FULL = "full"
    MANUAL = "manual"

    @property
    def headers(self) -> tuple[str, ...]:
        if self is ColumnSet.FULL:
            return ("Sr. No.", "Description", "Qty", "Unit", "Rate", "Amount")
        return ("Sr. No.", "Description", "Amount")


@dataclass(frozen=True)
class PricedItem:
    """
    A line item with its mode and amount resolved.

    Attributes:
        index: 0-based position in the quotation (printed as index + 1)
        item: The source LineItem
        mode: ItemMode derived once from the display flags
        amount: Resolved amount, never NaN and never negative
    """

    index: int
    item: LineItem
    mode: ItemMode
    amount: float

    @property
    def serial_number(self) -> int:
        return self.index + 1


@dataclass(frozen=True)
class PricingResult:
    """
    Pricing output for a whole quotation.

    Attributes:
        rows: PricedItems in print order
        total: Sum of row amounts
        column_set: Document-wide column configuration
    """

    rows: tuple[PricedItem, ...]
    total: float
    column_set: ColumnSet

    @property
    def has_mixed_modes(self) -> bool:
        """True when manual rows share a FULL table with computed rows."""
        return self.column_set is ColumnSet.FULL and any(
            row.mode is ItemMode.MANUAL for row in self.rows
        )


def item_mode(item: LineItem) -> ItemMode:
    """Manual when no display flag is set, computed otherwise."""
    return item.mode


def amount(item: LineItem, mode: Optional[ItemMode] = None) -> float:
    """
    Amount for one line item.

    Manual items use their entered amount; computed items multiply
    quantity by rate. Missing, non-numeric, non-finite or negative
    operands count as 0, so the result is always a finite number >= 0.

    Args:
        item: Line item to price
        mode: Pre-derived mode (derived from item flags when omitted)

    Returns:
        Item amount

    Example:
        >>> amount(LineItem("Blasting", quantity=5, rate=100))
        500.0
    """
    if mode is None:
        mode = item_mode(item)
    if mode is ItemMode.MANUAL:
        return _operand(item.amount)
    return _operand(item.quantity) * _operand(item.rate)


def total(items: Sequence[LineItem]) -> float:
    """
    Sum of item amounts, accumulated left to right in print order.

    Example:
        >>> total([LineItem("A", quantity=2, rate=50), manual_25])
        125.0
    """
    running = 0.0
    for item in items:
        running += amount(item)
    return running


def choose_column_set(items: Sequence[LineItem]) -> ColumnSet:
    """
    FULL if any item shows quantity, unit or rate; MANUAL otherwise.

    This is a document-wide decision: one computed item is enough to
    switch the whole table to the full column set.
    """
    if any(item.show_quantity or item.show_unit or item.show_rate for item in items):
        return ColumnSet.FULL
    return ColumnSet.MANUAL


def price_items(items: Sequence[LineItem]) -> PricingResult:
    """
    Price every item, deriving each item's mode exactly once.

    Args:
        items: Line items in print order

    Returns:
        PricingResult with rows, total and column set
    """
    rows: list[PricedItem] = []
    running = 0.0
    for index, item in enumerate(items):
        mode = item_mode(item)
        item_amount = amount(item, mode)
        rows.append(PricedItem(index=index, item=item, mode=mode, amount=item_amount))
        running += item_amount

    column_set = choose_column_set(items)
    logger.debug(
        f"Priced {len(rows)} items: total={running:.2f}, columns={column_set.value}"
    )
    return PricingResult(rows=tuple(rows), total=running, column_set=column_set)


def _operand(value: Any) -> float:
    """Coerce a pricing operand to a finite, non-negative float (else 0)."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number
