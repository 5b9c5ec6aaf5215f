"""
Core Package

Quotation data models and record validation. Everything in this package
is pure: no I/O, no rendering.
"""

from .models import ItemMode, LineItem, Quotation, new_line_item
from .schemas import (
    QuotationValidationError,
    ValidationFailure,
    ValidationResult,
    ensure_valid,
    validate_quotation,
)

__all__ = [
    "ItemMode",
    "LineItem",
    "Quotation",
    "new_line_item",
    "QuotationValidationError",
    "ValidationFailure",
    "ValidationResult",
    "ensure_valid",
    "validate_quotation",
]
