"""
Tests for PDF rendering.

Rendered documents are read back with pypdf to check page count, size,
metadata and text.
"""

import io
import logging

import pytest
from pypdf import PdfReader

from quotation_toolkit.builder.controller import layout_quotation
from quotation_toolkit.builder.images import default_signature_png
from quotation_toolkit.builder.output import (
    RenderMode,
    pdf_filename,
    render,
    render_to_pdf,
)


@pytest.fixture
def layout(quotation):
    return layout_quotation(quotation, signature_image=default_signature_png())


def read_pdf(data: bytes) -> PdfReader:
    return PdfReader(io.BytesIO(data))


class TestPdfFilename:

    def test_filename_appends_extension(self):
        assert pdf_filename("Q-1001") == "Q-1001.pdf"

    def test_filename_when_separators_then_replaced(self):
        assert pdf_filename("Q-12/2024\\A") == "Q-12_2024_A.pdf"

    def test_filename_when_control_chars_then_replaced(self):
        assert pdf_filename("Q\t1\n") == "Q_1_.pdf"

    def test_filename_keeps_spaces_and_unicode(self):
        assert pdf_filename("Quote für Acme") == "Quote für Acme.pdf"

    def test_filename_when_not_sanitized_then_verbatim(self):
        assert pdf_filename("a/b", sanitize=False) == "a/b.pdf"


class TestRender:

    def test_render_when_buffer_then_pdf_bytes(self, layout):
        output = render(layout, RenderMode.BUFFER)

        assert output.mode is RenderMode.BUFFER
        assert output.path is None
        assert output.data.startswith(b"%PDF-")

    def test_render_when_download_then_file_named_after_quote(self, layout, tmp_path):
        output = render(layout, RenderMode.DOWNLOAD, output_dir=tmp_path)

        assert output.path == tmp_path / "Q-1001.pdf"
        assert output.path.read_bytes().startswith(b"%PDF-")
        assert output.data is None

    def test_render_when_output_dir_missing_then_created(self, layout, tmp_path):
        output = render(layout, output_dir=tmp_path / "nested" / "out")

        assert output.path.exists()

    def test_render_when_filename_given_then_used(self, layout, tmp_path):
        output = render(layout, output_dir=tmp_path, filename="custom.pdf")

        assert output.path.name == "custom.pdf"

    def test_render_is_byte_identical_across_runs(self, layout):
        first = render(layout, RenderMode.BUFFER).data
        second = render(layout, RenderMode.BUFFER).data

        assert first == second


class TestRenderedDocument:

    def test_rendered_page_count_matches_layout(self, record_factory):
        from quotation_toolkit.core.schemas import ensure_valid

        terms = "\n".join(f"{i}. Condition." for i in range(150))
        layout = layout_quotation(ensure_valid(record_factory(terms=terms)))

        reader = read_pdf(render(layout, RenderMode.BUFFER).data)

        assert layout.page_count > 1
        assert len(reader.pages) == layout.page_count

    def test_rendered_page_is_a4(self, layout):
        reader = read_pdf(render(layout, RenderMode.BUFFER).data)

        box = reader.pages[0].mediabox
        assert float(box.width) == pytest.approx(595.27, abs=0.1)
        assert float(box.height) == pytest.approx(841.89, abs=0.1)

    def test_rendered_document_title_is_quote_name(self, layout):
        reader = read_pdf(render(layout, RenderMode.BUFFER).data)

        assert reader.metadata.title == "Q-1001"

    def test_rendered_text_contains_document_fields(self, layout):
        reader = read_pdf(render(layout, RenderMode.BUFFER).data)

        text = reader.pages[0].extract_text()
        assert "Shree Coatings" in text
        assert "Acme Fabricators Pvt. Ltd." in text
        assert "Date: 15-03-2024" in text
        assert "500.00" in text
        assert "K. Mehta" in text

    def test_render_when_image_undecodable_then_logged_and_skipped(self, quotation, caplog):
        layout = layout_quotation(quotation, signature_image=b"not an image")
        buffer = io.BytesIO()

        with caplog.at_level(logging.ERROR):
            render_to_pdf(layout, buffer)

        assert buffer.getvalue().startswith(b"%PDF-")
        assert "Skipping signature image" in caplog.text

    def test_render_when_image_header_then_still_renders(self, quotation, png_bytes):
        layout = layout_quotation(quotation, header_image=png_bytes)

        reader = read_pdf(render(layout, RenderMode.BUFFER).data)

        assert len(reader.pages) == 1
