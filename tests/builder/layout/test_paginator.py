"""
Unit tests for pagination.

Tests cover:
- Single-page layout
- Page breaks: header on every page, forced_break on the first block
- Flowed content never crossing the content limit
- Terms moving whole to a fresh page when they fit there
- Keep-together groups and oversize warnings
- Item tables split across pages
"""

import pytest

from quotation_toolkit.builder.controller import layout_quotation
from quotation_toolkit.builder.layout import HeaderKind, LayoutConfig
from quotation_toolkit.core.schemas import ensure_valid

EPS = 1e-6


def numbered_terms(n: int) -> str:
    return "\n".join(f"{i + 1}. Condition {i + 1}." for i in range(n))


def many_items(n: int) -> list:
    return [
        {
            "description": f"Item {i + 1}",
            "quantity": 1,
            "unit": "nos",
            "rate": 10,
            "showQuantity": True,
            "showUnit": True,
            "showRate": True,
        }
        for i in range(n)
    ]


@pytest.fixture
def layout_for(record_factory):
    def _layout(header_image=None, signature_image=None, **overrides):
        quotation = ensure_valid(record_factory(**overrides))
        return layout_quotation(
            quotation,
            LayoutConfig(),
            header_image=header_image,
            signature_image=signature_image,
        )
    return _layout


def assert_within_limit(result):
    for page in result.pages:
        for placement in page.flow_placements:
            assert placement.bottom <= result.content_limit + EPS, (
                f"{placement.role} on page {page.index} ends at {placement.bottom:.2f}"
            )


class TestSinglePage:

    def test_paginate_when_short_quotation_then_one_page(self, layout_for):
        result = layout_for()

        assert result.page_count == 1
        assert result.pages[0].roles() == [
            "header",
            "recipient",
            "subject",
            "salutation",
            "item_table",
            "terms",
            "signer",
            "signature",
            "signatory",
            "footer",
        ]
        assert result.warnings == []

    def test_paginate_content_limit_is_page_height_minus_reserve(self, layout_for):
        result = layout_for()

        assert result.content_limit == pytest.approx(297.0 - 40.0)
        assert_within_limit(result)

    def test_paginate_first_block_starts_at_content_start(self, layout_for):
        result = layout_for()

        recipient = result.pages[0].flow_placements[0]
        assert recipient.top == pytest.approx(35.0)
        assert not recipient.forced_break

    def test_paginate_footer_pinned_above_page_bottom(self, layout_for):
        result = layout_for()

        footer = result.pages[-1].placements[-1]
        assert footer.pinned
        assert footer.bottom == pytest.approx(297.0 - 5.0)

    def test_paginate_spacing_applied_between_blocks(self, layout_for):
        result = layout_for()
        placements = {p.role: p for p in result.pages[0].placements}

        assert placements["subject"].top == pytest.approx(placements["recipient"].bottom + 5.0)
        assert placements["terms"].top == pytest.approx(placements["item_table"].bottom + 10.0)


class TestHeaderOffset:

    def test_paginate_when_image_header_then_content_starts_higher(self, layout_for, png_bytes):
        text_result = layout_for()
        image_result = layout_for(header_image=png_bytes)

        assert image_result.header_kind is HeaderKind.IMAGE
        text_top = text_result.pages[0].flow_placements[0].top
        image_top = image_result.pages[0].flow_placements[0].top
        assert text_top - image_top == pytest.approx(3.375)

    def test_paginate_when_image_header_then_all_content_shifts_equally(self, layout_for, png_bytes):
        text_result = layout_for()
        image_result = layout_for(header_image=png_bytes)

        for text_p, image_p in zip(text_result.pages[0].flow_placements, image_result.pages[0].flow_placements):
            assert text_p.top - image_p.top == pytest.approx(3.375)


class TestPageBreaks:

    def test_paginate_when_long_terms_then_multiple_pages(self, layout_for):
        result = layout_for(terms=numbered_terms(120))

        assert result.page_count >= 3
        assert_within_limit(result)

    def test_paginate_header_on_every_page_footer_on_last(self, layout_for):
        result = layout_for(terms=numbered_terms(120))

        for page in result.pages:
            assert page.placements[0].role == "header"
            assert page.placements[0].top == 0.0
        footers = result.placements_for("footer")
        assert [page_index for page_index, _ in footers] == [result.page_count - 1]

    def test_paginate_first_block_after_break_is_forced(self, layout_for):
        result = layout_for(terms=numbered_terms(120))

        for page in result.pages[1:]:
            first = page.flow_placements[0]
            assert first.forced_break
            assert first.top == pytest.approx(35.0)
        for page in result.pages:
            assert not any(p.forced_break for p in page.flow_placements[1:])

    def test_paginate_when_terms_split_then_every_line_kept_once(self, layout_for):
        result = layout_for(terms=numbered_terms(120))

        lines = []
        for _, placement in result.placements_for("terms"):
            lines.extend(placement.block.lines)
        assert lines == [f"{i + 1}. Condition {i + 1}." for i in range(120)]

    def test_paginate_when_terms_fit_fresh_page_then_moved_whole(self, layout_for):
        # 45 lines: too tall for the rest of page 1, short enough for page 2
        result = layout_for(terms=numbered_terms(45))

        terms = result.placements_for("terms")
        assert len(terms) == 1
        page_index, placement = terms[0]
        assert page_index == 1
        assert placement.forced_break
        assert placement.top == pytest.approx(35.0)
        assert result.pages[0].roles()[-1] == "item_table"
        assert_within_limit(result)

    def test_paginate_when_terms_fit_remaining_space_then_same_page(self, layout_for):
        result = layout_for(terms=numbered_terms(10))

        assert [page_index for page_index, _ in result.placements_for("terms")] == [0]


class TestKeepTogether:

    @pytest.mark.parametrize("term_lines", range(20, 45))
    def test_paginate_signature_group_never_split(self, layout_for, term_lines):
        result = layout_for(terms=numbered_terms(term_lines), signature_image=b"sig")

        pages = {
            role: [page_index for page_index, _ in result.placements_for(role)]
            for role in ("signer", "signature", "signatory")
        }
        assert pages["signer"] == pages["signature"] == pages["signatory"]
        assert_within_limit(result)

    @pytest.mark.parametrize("address_lines", range(30, 41))
    def test_paginate_subject_and_salutation_stay_together(self, layout_for, address_lines):
        address = "\n".join(f"Street {i}" for i in range(address_lines))

        result = layout_for(customerAddress=address)

        subject_page = result.placements_for("subject")[0][0]
        salutation_page = result.placements_for("salutation")[0][0]
        assert subject_page == salutation_page


class TestItemTable:

    def test_paginate_when_many_items_then_table_continues_with_header(self, layout_for):
        result = layout_for(lineItems=many_items(120))

        pieces = result.placements_for("item_table")
        assert len(pieces) >= 2
        assert [page_index for page_index, _ in pieces] == list(range(len(pieces)))
        for _, placement in pieces:
            assert placement.block.table._cellvalues[0][0] == "Sr. No."
        assert_within_limit(result)

    def test_paginate_when_many_items_then_total_on_last_piece(self, layout_for):
        result = layout_for(lineItems=many_items(120))

        last_table = result.placements_for("item_table")[-1][1].block.table
        assert last_table._cellvalues[-1][0] == "Total"
        assert last_table._cellvalues[-1][-1] == "1,200.00"
        assert result.total == 1200.0

    def test_paginate_when_single_row_taller_than_page_then_row_continues(self, layout_for):
        # Arrange
        item = many_items(1)[0]
        item["description"] = "\n".join(f"Step {i + 1}" for i in range(400))

        # Act
        result = layout_for(lineItems=[item])

        # Assert
        pieces = result.placements_for("item_table")
        assert len(pieces) >= 2
        assert not any("item_table" in w for w in result.warnings)
        for _, placement in pieces:
            assert placement.block.table._cellvalues[0][0] == "Sr. No."
        assert_within_limit(result)


class TestOversize:

    def test_paginate_when_block_taller_than_page_then_warning(self, layout_for):
        address = "\n".join(f"Street {i}" for i in range(60))

        result = layout_for(customerAddress=address)

        assert any("recipient" in w for w in result.warnings)
        _, recipient = result.placements_for("recipient")[0]
        assert recipient.top == pytest.approx(35.0)

    def test_paginate_when_block_oversize_then_following_blocks_still_placed(self, layout_for):
        address = "\n".join(f"Street {i}" for i in range(60))

        result = layout_for(customerAddress=address)

        assert result.placements_for("signatory")
        assert result.page_count >= 2
