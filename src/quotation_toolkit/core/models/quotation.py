"""
Module: quotation

Purpose:
    Provides the Quotation dataclass - the immutable document snapshot the
    build pipeline consumes. The editing surface owns the mutable form
    state; each render receives a fresh Quotation.

Key Functions:
    - Quotation.to_dict() / Quotation.from_dict(): Record serialization
    - Quotation.has_embedded_header: Whether header_image is a data URL

Dependencies:
    - dataclasses (std)
    - datetime (std)
    - .line_items.LineItem

Used By:
    - core.schemas.validator: Produces Quotations from raw records
    - builder.controller: Pipeline input
    - storage.store: Persisted payload
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

from .line_items import LineItem


@dataclass(frozen=True)
class Quotation:
    """
    Complete quotation document (immutable).

    Attributes:
        company_name: Issuing company, printed in the text header and signer line
        company_address: Printed in the footer band
        customer_name: Recipient name, printed bold in the address block
        customer_address: Recipient postal address
        quote_name: Document name; the output file is "<quote_name>.pdf"
        quote_date: Date printed top-right as dd-mm-yyyy
        subject: "Sub:-" line
        terms: Free-text terms & conditions
        authorised_signatory: Name printed under the signature
        line_items: Priced rows in print order
        company_email: Footer contact email (optional)
        company_phone: Footer contact phone (optional)
        header_image: data: URL or location reference for the header banner
        kind_attention: Optional "Kind Attention:-" line
        owner_id: Owning principal when loaded from a store (ignored by layout)

    Example:
        >>> q = Quotation.from_dict(record)
        >>> q.line_items[0].mode
        <ItemMode.COMPUTED: 'computed'>
    """

    company_name: str
    company_address: str
    customer_name: str
    customer_address: str
    quote_name: str
    quote_date: date
    subject: str
    terms: str
    authorised_signatory: str
    line_items: tuple[LineItem, ...]
    company_email: str = ""
    company_phone: str = ""
    header_image: Optional[str] = None
    kind_attention: str = ""
    owner_id: Optional[str] = None

    @property
    def has_embedded_header(self) -> bool:
        """True when header_image carries its own image data."""
        return bool(self.header_image) and self.header_image.startswith("data:image")

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize to the camelCase record format.

        Note: quoteDate is written as an ISO date string.

        Returns:
            Dict representation
        """
        d: dict[str, Any] = {
            "companyName": self.company_name,
            "companyAddress": self.company_address,
            "companyEmail": self.company_email,
            "companyPhone": self.company_phone,
            "customerName": self.customer_name,
            "customerAddress": self.customer_address,
            "kindAttention": self.kind_attention,
            "quoteName": self.quote_name,
            "quoteDate": self.quote_date.isoformat(),
            "subject": self.subject,
            "lineItems": [item.to_dict() for item in self.line_items],
            "terms": self.terms,
            "authorisedSignatory": self.authorised_signatory,
        }
        if self.header_image:
            d["headerImage"] = self.header_image
        if self.owner_id:
            d["userId"] = self.owner_id
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Quotation:
        """
        Deserialize from an already-normalized record.

        Args:
            data: Dict with camelCase keys (quoteDate as date or ISO string)

        Returns:
            Quotation instance
        """
        quote_date = data["quoteDate"]
        if isinstance(quote_date, datetime):
            quote_date = quote_date.date()
        elif isinstance(quote_date, str):
            quote_date = date.fromisoformat(quote_date[:10])

        return cls(
            company_name=data["companyName"],
            company_address=data["companyAddress"],
            customer_name=data["customerName"],
            customer_address=data["customerAddress"],
            quote_name=data["quoteName"],
            quote_date=quote_date,
            subject=data["subject"],
            terms=data["terms"],
            authorised_signatory=data["authorisedSignatory"],
            line_items=tuple(LineItem.from_dict(item) for item in data["lineItems"]),
            company_email=data.get("companyEmail") or "",
            company_phone=data.get("companyPhone") or "",
            header_image=data.get("headerImage") or None,
            kind_attention=data.get("kindAttention") or "",
            owner_id=data.get("userId") or None,
        )
