"""
Schema Validation Package

Validation of raw quotation records. See validator.py.
"""

from .validator import (
    QuotationValidationError,
    ValidationError,
    ValidationFailure,
    ValidationResult,
    ensure_valid,
    validate_quotation,
)

__all__ = [
    "QuotationValidationError",
    "ValidationError",
    "ValidationFailure",
    "ValidationResult",
    "ensure_valid",
    "validate_quotation",
]
