"""
Unit tests for quotation data models.
"""

from dataclasses import FrozenInstanceError
from datetime import date

import pytest

from quotation_toolkit.core.models import (
    DEFAULT_TERMS,
    ItemMode,
    LineItem,
    Quotation,
    blank_quotation_record,
    new_line_item,
)


class TestLineItem:
    """Tests for LineItem."""

    def test_mode_when_all_flags_off_then_manual(self):
        item = LineItem("Painting", amount=750, show_quantity=False, show_unit=False, show_rate=False)

        assert item.mode is ItemMode.MANUAL
        assert item.is_manual

    def test_mode_when_only_unit_shown_then_computed(self):
        item = LineItem("Painting", show_quantity=False, show_unit=True, show_rate=False)

        assert item.mode is ItemMode.COMPUTED

    def test_line_item_when_modified_then_raises(self):
        item = LineItem("Painting")

        with pytest.raises(FrozenInstanceError):
            item.description = "Blasting"

    def test_to_dict_uses_record_keys(self):
        data = LineItem("Painting", quantity=2, rate=50, unit="pcs").to_dict()

        assert data["showQuantity"] is True
        assert data["quantity"] == 2
        assert LineItem.from_dict(data) == LineItem("Painting", quantity=2.0, rate=50.0, unit="pcs")

    def test_new_line_item_defaults(self):
        item = new_line_item()

        assert item.description == ""
        assert item.unit == "pcs"
        assert item.quantity is None
        assert item.show_quantity and item.show_unit and item.show_rate


class TestQuotation:
    """Tests for Quotation."""

    def test_has_embedded_header_when_data_url_then_true(self, quotation):
        from dataclasses import replace

        embedded = replace(quotation, header_image="data:image/png;base64,AAAA")
        referenced = replace(quotation, header_image="/images/header.png")

        assert embedded.has_embedded_header
        assert not referenced.has_embedded_header
        assert not quotation.has_embedded_header

    def test_to_dict_when_round_tripped_then_equal(self, quotation):
        data = quotation.to_dict()

        assert data["quoteDate"] == "2024-03-15"
        assert "headerImage" not in data
        assert Quotation.from_dict(data) == quotation

    def test_from_dict_when_datetime_string_then_date(self, quotation):
        data = quotation.to_dict()
        data["quoteDate"] = "2024-03-15T10:30:00Z"

        assert Quotation.from_dict(data).quote_date == date(2024, 3, 15)


class TestDefaults:
    """Tests for new-record defaults."""

    def test_blank_record_has_one_default_item_and_terms(self):
        record = blank_quotation_record(today=date(2024, 5, 1))

        assert record["quoteDate"] == "2024-05-01"
        assert record["terms"] == DEFAULT_TERMS
        assert record["lineItems"] == [new_line_item().to_dict()]

    def test_blank_record_is_not_yet_valid(self):
        from quotation_toolkit.core.schemas import validate_quotation

        result = validate_quotation(blank_quotation_record())

        assert not result.is_valid
        assert result.messages_for("lineItems", 0, "description") == ["Description is required."]
