"""
Core Models Package

Immutable data models for quotations.

**DESIGN RATIONALE:**

All models in this package are frozen dataclasses. The surrounding
application edits its own mutable form state and hands the pipeline a
snapshot per render call, so nothing downstream can observe (or cause)
a mutation mid-build.

| Model | Role |
|-------|------|
| `Quotation` | The whole document: parties, subject, terms, items |
| `LineItem` | One priced row of the item table |
| `ItemMode` | Manual (flat amount) or Computed (quantity x rate) |
"""

from .line_items import ItemMode, LineItem, new_line_item
from .quotation import Quotation
from .defaults import DEFAULT_TERMS, blank_quotation_record

__all__ = [
    "ItemMode",
    "LineItem",
    "new_line_item",
    "Quotation",
    "DEFAULT_TERMS",
    "blank_quotation_record",
]
