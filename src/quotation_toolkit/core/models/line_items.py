"""
Module: line_items

Purpose:
    Provides the LineItem dataclass - one priced row of a quotation - and
    the ItemMode enum that classifies how its amount is obtained.

Key Functions:
    - LineItem.mode: Derived Manual/Computed classification
    - LineItem.to_dict() / LineItem.from_dict(): Record serialization
    - new_line_item(): Default row appended by the editing surface

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - core.models.quotation.Quotation
    - core.schemas.validator
    - builder.pricing.calculator
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ItemMode(Enum):
    """
    How a line item's amount is obtained.

    Attributes:
        MANUAL: Quantity, unit and rate are all hidden; the row carries a
            flat, directly entered amount.
        COMPUTED: At least one of quantity/unit/rate is shown; the amount
            is quantity x rate.

    Example:
        >>> LineItem("Painting", amount=750.0, show_quantity=False,
        ...          show_unit=False, show_rate=False).mode
        <ItemMode.MANUAL: 'manual'>
    """

    MANUAL = "manual"
    COMPUTED = "computed"


@dataclass(frozen=True)
class LineItem:
    """
    One row of the priced item table (immutable).

    Attributes:
        description: What is being quoted (required, non-empty)
        quantity: Number of units, gated by show_quantity
        unit: Unit label such as "pcs" or "sq.ft", gated by show_unit
        rate: Price per unit, gated by show_rate
        amount: Flat amount, only meaningful in manual mode
        show_quantity: Whether the Qty cell is printed
        show_unit: Whether the Unit cell is printed
        show_rate: Whether the Rate cell is printed

    Invariants (checked by the validator, not here):
        - show_quantity implies quantity > 0
        - show_rate implies rate >= 0 and present
        - manual mode implies amount >= 0 and present
    """

    description: str = ""
    quantity: Optional[float] = None
    unit: str = ""
    rate: Optional[float] = None
    amount: Optional[float] = None
    show_quantity: bool = True
    show_unit: bool = True
    show_rate: bool = True

    @property
    def mode(self) -> ItemMode:
        """Manual when every display flag is off, computed otherwise."""
        if not (self.show_quantity or self.show_unit or self.show_rate):
            return ItemMode.MANUAL
        return ItemMode.COMPUTED

    @property
    def is_manual(self) -> bool:
        return self.mode is ItemMode.MANUAL

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize to the camelCase record format used by the editing surface.

        Returns:
            Dict representation (absent numbers are None)
        """
        return {
            "description": self.description,
            "quantity": self.quantity,
            "unit": self.unit,
            "rate": self.rate,
            "amount": self.amount,
            "showQuantity": self.show_quantity,
            "showUnit": self.show_unit,
            "showRate": self.show_rate,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LineItem:
        """
        Deserialize from an already-normalized record.

        Raw user input should go through core.schemas.validate_quotation,
        which coerces and checks values before building a LineItem.

        Args:
            data: Dict with camelCase keys

        Returns:
            LineItem instance
        """
        return cls(
            description=data.get("description") or "",
            quantity=_optional_float(data.get("quantity")),
            unit=data.get("unit") or "",
            rate=_optional_float(data.get("rate")),
            amount=_optional_float(data.get("amount")),
            show_quantity=bool(data.get("showQuantity", True)),
            show_unit=bool(data.get("showUnit", True)),
            show_rate=bool(data.get("showRate", True)),
        )


def new_line_item() -> LineItem:
    """
    Default row appended when the user adds an item.

    All columns shown, empty description, no quantity or rate yet.
    """
    return LineItem(description="", quantity=None, unit="pcs", rate=None)


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)
