"""
Quotation Record Validation

Validates a raw quotation record (as submitted by the editing form or read
from storage) and turns it into an immutable Quotation.

Two passes:
- Structural: JSON Schema (quotation.schema.json) checks value types,
  reported with jsonschema's own messages.
- Business: required fields and per-item mode rules, reported with the
  messages the form shows next to each field.

Expected bad input never raises from validate_quotation(); every problem
becomes a ValidationFailure scoped to a field path such as
("lineItems", 2, "rate"). Only the first failure per path is kept.
"""

from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import jsonschema

from ..models.line_items import ItemMode, LineItem
from ..models.quotation import Quotation


PathPart = Union[str, int]

# Load schemas lazily
_SCHEMAS: dict[str, dict] = {}

_REQUIRED_TEXT_FIELDS: tuple[tuple[str, str], ...] = (
    ("companyName", "Your company name is required."),
    ("companyAddress", "Your company address is required."),
    ("customerName", "Customer name is required."),
    ("customerAddress", "Customer address is required."),
    ("quoteName", "Quotation name is required."),
    ("subject", "Subject is required."),
    ("terms", "Terms and conditions are required."),
    ("authorisedSignatory", "Signatory name is required."),
)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(Exception):
    """Raised when data fails validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


class QuotationValidationError(ValidationError):
    """Raised by ensure_valid() when a record has one or more failures."""

    def __init__(self, failures: tuple[ValidationFailure, ...]):
        self.failures = tuple(failures)
        first_path = self.failures[0].field_path if self.failures else ""
        super().__init__(
            f"Quotation is invalid: {len(self.failures)} problem(s)",
            path=first_path,
            errors=[str(f) for f in self.failures],
        )


@dataclass(frozen=True)
class ValidationFailure:
    """
    One field-scoped validation problem.

    Attributes:
        path: Field path, e.g. ("lineItems", 0, "quantity"); () for the record
        message: Human-readable message for the field
    """

    path: tuple[PathPart, ...]
    message: str

    @property
    def field_path(self) -> str:
        """Dotted form of path, e.g. "lineItems.0.quantity"."""
        return ".".join(str(p) for p in self.path)

    def __str__(self) -> str:
        if not self.path:
            return self.message
        return f"{self.field_path}: {self.message}"


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of validate_quotation().

    Exactly one of quotation / failures is meaningful: quotation is None
    whenever failures is non-empty.
    """

    quotation: Optional[Quotation]
    failures: tuple[ValidationFailure, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.failures

    def messages_for(self, *path: PathPart) -> list[str]:
        """Messages recorded for an exact field path."""
        return [f.message for f in self.failures if f.path == tuple(path)]


class _FailureCollector:
    """Ordered failures, first message per path wins."""

    def __init__(self) -> None:
        self.failures: list[ValidationFailure] = []
        self._paths: set[tuple[PathPart, ...]] = set()

    def add(self, path: tuple[PathPart, ...], message: str) -> None:
        if path in self._paths:
            return
        self._paths.add(path)
        self.failures.append(ValidationFailure(path=path, message=message))

    def __bool__(self) -> bool:
        return bool(self.failures)


def validate_quotation(record: Union[Mapping[str, Any], Quotation]) -> ValidationResult:
    """
    Validate a raw quotation record.

    Args:
        record: camelCase record dict, or an existing Quotation to re-check

    Returns:
        ValidationResult with the normalized Quotation, or the failures

    Example:
        >>> result = validate_quotation(form_data)
        >>> if not result.is_valid:
        ...     for failure in result.failures:
        ...         print(failure)
    """
    if isinstance(record, Quotation):
        record = record.to_dict()

    failures = _FailureCollector()

    validator = jsonschema.Draft7Validator(_load_schema("quotation"))
    errors = sorted(
        validator.iter_errors(record),
        key=lambda e: [str(p) for p in e.absolute_path],
    )
    for error in errors:
        failures.add(tuple(error.absolute_path), error.message)

    if not isinstance(record, Mapping):
        return ValidationResult(quotation=None, failures=tuple(failures.failures))

    for key, message in _REQUIRED_TEXT_FIELDS:
        if not _text(record.get(key)).strip():
            failures.add((key,), message)

    email = _text(record.get("companyEmail")).strip()
    if email and not _EMAIL_RE.match(email):
        failures.add(("companyEmail",), "Invalid email address.")

    quote_date = _validate_date(record.get("quoteDate"), failures)

    raw_items = record.get("lineItems")
    items: list[Optional[LineItem]] = []
    if not isinstance(raw_items, list) or not raw_items:
        failures.add(("lineItems",), "At least one line item is required.")
    else:
        for index, raw_item in enumerate(raw_items):
            items.append(_validate_line_item(raw_item, index, failures))

    if failures:
        return ValidationResult(quotation=None, failures=tuple(failures.failures))

    quotation = Quotation(
        company_name=_text(record.get("companyName")),
        company_address=_text(record.get("companyAddress")),
        customer_name=_text(record.get("customerName")),
        customer_address=_text(record.get("customerAddress")),
        quote_name=_text(record.get("quoteName")),
        quote_date=quote_date,
        subject=_text(record.get("subject")),
        terms=_text(record.get("terms")),
        authorised_signatory=_text(record.get("authorisedSignatory")),
        line_items=tuple(items),
        company_email=email,
        company_phone=_text(record.get("companyPhone")),
        header_image=_text(record.get("headerImage")) or None,
        kind_attention=_text(record.get("kindAttention")),
        owner_id=_text(record.get("userId")) or None,
    )
    return ValidationResult(quotation=quotation)


def ensure_valid(record: Union[Mapping[str, Any], Quotation]) -> Quotation:
    """
    Validate a record and return the Quotation, raising on failure.

    Raises:
        QuotationValidationError: If the record has any failures
    """
    result = validate_quotation(record)
    if not result.is_valid:
        raise QuotationValidationError(result.failures)
    return result.quotation


def _validate_line_item(
    raw: Any,
    index: int,
    failures: _FailureCollector,
) -> Optional[LineItem]:
    """Apply the per-item rules; returns None when the item is not a mapping."""
    base: tuple[PathPart, ...] = ("lineItems", index)
    if not isinstance(raw, Mapping):
        failures.add(base, "Line item must be an object.")
        return None

    description = _text(raw.get("description"))
    if not description.strip():
        failures.add(base + ("description",), "Description is required.")

    numbers: dict[str, Optional[float]] = {}
    for key in ("quantity", "rate", "amount"):
        try:
            numbers[key] = _coerce_number(raw.get(key))
        except (TypeError, ValueError):
            failures.add(base + (key,), "Expected a number.")
            numbers[key] = None

    item = LineItem(
        description=description,
        quantity=numbers["quantity"],
        unit=_text(raw.get("unit")),
        rate=numbers["rate"],
        amount=numbers["amount"],
        show_quantity=_flag(raw.get("showQuantity")),
        show_unit=_flag(raw.get("showUnit")),
        show_rate=_flag(raw.get("showRate")),
    )

    if item.show_quantity and (item.quantity is None or item.quantity <= 0):
        failures.add(base + ("quantity",), "Must be > 0.")

    if item.rate is not None and item.rate < 0:
        failures.add(base + ("rate",), "Must be >= 0.")
    elif item.show_rate and item.rate is None:
        failures.add(base + ("rate",), "Rate is required.")

    if item.amount is not None and item.amount < 0:
        failures.add(base + ("amount",), "Must be >= 0.")
    elif item.mode is ItemMode.MANUAL and item.amount is None:
        failures.add(base + ("amount",), "Amount is required.")

    return item


def _validate_date(value: Any, failures: _FailureCollector) -> Optional[date]:
    if value is None or value == "":
        failures.add(("quoteDate",), "A quotation date is required.")
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip().replace("Z", "+00:00")).date()
        except ValueError:
            pass
    failures.add(("quoteDate",), "Invalid date.")
    return None


def _coerce_number(value: Any) -> Optional[float]:
    """
    Form-style number coercion.

    None and blank strings mean "not entered"; numeric strings are parsed;
    booleans, NaN and infinities are rejected.

    Raises:
        ValueError / TypeError: If the value is not a usable number
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise TypeError("booleans are not numbers")
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"Not a finite number: {value!r}")
    return number


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _flag(value: Any) -> bool:
    # Absent flags default to shown, matching a freshly appended row
    return value if isinstance(value, bool) else True
