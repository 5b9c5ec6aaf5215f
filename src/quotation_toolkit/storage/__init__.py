"""
Storage Package

Owner-scoped persistence for quotations. See store.py.
"""

from .store import QuotationStore, RecordNotFoundError, StoredQuotation, StoreError

__all__ = [
    "QuotationStore",
    "RecordNotFoundError",
    "StoredQuotation",
    "StoreError",
]
