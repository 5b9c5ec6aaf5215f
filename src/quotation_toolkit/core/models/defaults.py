"""
Module: defaults

Purpose:
    Starting values for a new quotation record, as presented to the user
    before they fill in the form.

Key Functions:
    - blank_quotation_record(): Raw record with one default line item
"""

from __future__ import annotations

from datetime import date
from typing import Any, Optional

from .line_items import new_line_item


DEFAULT_TERMS = (
    "1. Subject to local jurisdiction.\n"
    "2. Payment 50% advance and 50% after work completed.\n"
    "3. Work starts within 4 days of receiving the work order.\n"
    "4. GST extra at 18%.\n"
    "5. Work does not start without the advance payment."
)


def blank_quotation_record(today: Optional[date] = None) -> dict[str, Any]:
    """
    Create the raw record for a new, unsaved quotation.

    Args:
        today: Quote date to pre-fill (defaults to date.today())

    Returns:
        Record dict in the camelCase format accepted by validate_quotation
    """
    return {
        "companyName": "",
        "companyAddress": "",
        "companyEmail": "",
        "companyPhone": "",
        "customerName": "",
        "customerAddress": "",
        "kindAttention": "",
        "quoteName": "",
        "quoteDate": (today or date.today()).isoformat(),
        "subject": "",
        "lineItems": [new_line_item().to_dict()],
        "terms": DEFAULT_TERMS,
        "authorisedSignatory": "",
    }
