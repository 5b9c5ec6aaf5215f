"""
Module: builder.pricing

Purpose:
    Line-item arithmetic for quotations: per-item amount, document total,
    and the FULL/MANUAL column-set decision.

Key Functions:
    - amount(), total(), choose_column_set(), price_items()

Key Classes:
    - ItemMode: Manual / Computed (re-exported from core.models)
    - ColumnSet, PricedItem, PricingResult
"""

from quotation_toolkit.core.models.line_items import ItemMode

from .calculator import (
    ColumnSet,
    PricedItem,
    PricingResult,
    amount,
    choose_column_set,
    item_mode,
    price_items,
    total,
)

__all__ = [
    "ItemMode",
    "ColumnSet",
    "PricedItem",
    "PricingResult",
    "amount",
    "choose_column_set",
    "item_mode",
    "price_items",
    "total",
]
