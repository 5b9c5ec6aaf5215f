"""
Module: builder.layout

Purpose:
    Layout engine for quotation documents.
    Composes height-estimated blocks and arranges them onto pages.

Key Functions:
    - compose_document(): Create blocks from a quotation
    - paginate(): Arrange blocks onto pages
    - build_item_table(): ReportLab item table
    - wrap_text(): Font-metric line wrapping

Key Classes:
    - LayoutConfig: Page and block geometry
    - LayoutBlock, LineBlock, TableBlock: Placeable blocks
    - BlockPlacement, PagePlan, LayoutResult: Pagination output
"""

from .config import LayoutConfig
from .models import (
    Align,
    BlockPlacement,
    ComposedDocument,
    DrawOp,
    HeaderKind,
    ImageOp,
    LayoutBlock,
    LayoutResult,
    LineBlock,
    PagePlan,
    RectOp,
    TableBlock,
    TableOp,
    TextOp,
)
from .composer import compose_document, compose_footer, compose_header
from .paginator import paginate
from .table import build_item_table, column_widths
from .text import wrap_text

__all__ = [
    "LayoutConfig",
    "Align",
    "BlockPlacement",
    "ComposedDocument",
    "DrawOp",
    "HeaderKind",
    "ImageOp",
    "LayoutBlock",
    "LayoutResult",
    "LineBlock",
    "PagePlan",
    "RectOp",
    "TableBlock",
    "TableOp",
    "TextOp",
    "compose_document",
    "compose_footer",
    "compose_header",
    "paginate",
    "build_item_table",
    "column_widths",
    "wrap_text",
]
