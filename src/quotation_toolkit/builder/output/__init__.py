"""
Module: builder.output

Purpose:
    PDF rendering and number formatting for quotations.
    Converts a LayoutResult to a PDF file or in-memory bytes.

Key Functions:
    - render(): Download or buffer mode
    - render_to_pdf(): Draw a layout to a path or stream
    - pdf_filename(): Output filename for a quote name
    - format_money(), format_quantity(): Indian digit grouping

Dependencies:
    - reportlab: PDF generation
    - builder.layout.models: LayoutResult

Used By:
    - builder.controller: Pipeline orchestration
"""

from .formatting import format_money, format_quantity, group_digits
from .renderer import RenderMode, RenderOutput, pdf_filename, render, render_to_pdf

__all__ = [
    "format_money",
    "format_quantity",
    "group_digits",
    "RenderMode",
    "RenderOutput",
    "pdf_filename",
    "render",
    "render_to_pdf",
]
