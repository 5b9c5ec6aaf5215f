"""
Module: builder.layout.table

Purpose:
    Build the item table as a ReportLab Table from priced rows.
    The totals row is embedded as the last row so it travels with the
    table when it splits; the header row repeats on continuation pages.

Key Functions:
    - build_item_table(): PricingResult -> Table
    - column_widths(): Column widths in mm for a column set

Dependencies:
    - reportlab.platypus: Table, TableStyle, Paragraph
    - builder.pricing: PricingResult, ColumnSet
    - builder.output.formatting: Money and quantity formatting

Used By:
    - builder.layout.composer: Item table block
"""

from __future__ import annotations

import logging
from typing import List
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_LEFT
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, Table, TableStyle

from quotation_toolkit.builder.output.formatting import format_money, format_quantity
from quotation_toolkit.builder.pricing import ColumnSet, ItemMode, PricedItem, PricingResult

from .config import LayoutConfig

logger = logging.getLogger(__name__)

# Fixed column widths (mm); None marks the description column, which
# takes whatever the table width leaves over
_FIXED_WIDTHS = {
    ColumnSet.FULL: (15.0, None, 20.0, 20.0, 30.0, 30.0),
    ColumnSet.MANUAL: (15.0, None, 35.0),
}


def column_widths(column_set: ColumnSet, table_width: float) -> List[float]:
    """
    Resolve column widths for a table `table_width` mm wide.

    Example:
        >>> column_widths(ColumnSet.MANUAL, 180)
        [15.0, 130.0, 35.0]
    """
    fixed = _FIXED_WIDTHS[column_set]
    remaining = table_width - sum(w for w in fixed if w is not None)
    if remaining <= 0:
        raise ValueError(f"Table width {table_width}mm too narrow for {column_set.value} columns")
    return [remaining if w is None else w for w in fixed]


def build_item_table(pricing: PricingResult, config: LayoutConfig) -> Table:
    """
    Create the item table for a priced quotation.

    FULL tables show hidden per-item columns as empty cells; a manual
    row inside a FULL table spans its description over Qty/Unit/Rate.

    Args:
        pricing: Priced rows, total and column set
        config: Layout configuration (fonts, sizes, width)

    Returns:
        ReportLab Table with repeatRows=1 that can split inside a row
    """
    column_set = pricing.column_set
    cell_style = ParagraphStyle(
        "item-cell",
        fontName=config.font_regular,
        fontSize=config.table_font_size,
        leading=config.table_font_size * 1.2,
        alignment=TA_LEFT,
    )

    data: List[list] = [list(column_set.headers)]
    spans: List[tuple] = []
    for row in pricing.rows:
        row_index = len(data)
        data.append(_row_cells(row, column_set, cell_style))
        if column_set is ColumnSet.FULL and row.mode is ItemMode.MANUAL:
            spans.append(("SPAN", (1, row_index), (4, row_index)))

    last_col = len(column_set.headers) - 1
    totals_index = len(data)
    totals_row = ["Total"] + [""] * (last_col - 1) + [format_money(pricing.total)]
    data.append(totals_row)

    widths = column_widths(column_set, config.available_width)
    # Rows taller than a page split between lines
    table = Table(data, colWidths=[w * mm for w in widths], repeatRows=1, splitInRow=1)
    table.setStyle(TableStyle(_style_commands(config, last_col, totals_index) + spans))

    logger.debug(
        f"Built item table: {len(pricing.rows)} rows, columns={column_set.value}, "
        f"spans={len(spans)}"
    )
    return table


def _row_cells(row: PricedItem, column_set: ColumnSet, cell_style: ParagraphStyle) -> list:
    item = row.item
    description = Paragraph(_paragraph_markup(item.description), cell_style)
    amount = format_money(row.amount)

    if column_set is ColumnSet.MANUAL:
        return [str(row.serial_number), description, amount]
    if row.mode is ItemMode.MANUAL:
        return [str(row.serial_number), description, "", "", "", amount]
    return [
        str(row.serial_number),
        description,
        format_quantity(item.quantity) if item.show_quantity else "",
        item.unit if item.show_unit else "",
        format_money(item.rate) if item.show_rate and item.rate is not None else "",
        amount,
    ]


def _paragraph_markup(text: str) -> str:
    """Escape user text for Paragraph markup, keeping explicit newlines."""
    normalized = (text or "").replace("\r\n", "\n").replace("\r", "\n")
    return "<br/>".join(escape(line) for line in normalized.split("\n"))


def _style_commands(config: LayoutConfig, last_col: int, totals_index: int) -> list:
    padding = config.table_cell_padding * mm
    return [
        ("GRID", (0, 0), (-1, -1), config.table_line_width * mm, colors.black),
        ("FONT", (0, 0), (-1, -1), config.font_regular, config.table_font_size),
        ("FONT", (0, 0), (-1, 0), config.font_bold, config.table_font_size),
        ("ALIGN", (0, 0), (-1, -1), "CENTER"),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("LEFTPADDING", (0, 0), (-1, -1), padding),
        ("RIGHTPADDING", (0, 0), (-1, -1), padding),
        ("TOPPADDING", (0, 0), (-1, -1), padding),
        ("BOTTOMPADDING", (0, 0), (-1, -1), padding),
        # Totals row
        ("SPAN", (0, totals_index), (last_col - 1, totals_index)),
        ("ALIGN", (0, totals_index), (last_col - 1, totals_index), "RIGHT"),
        ("FONT", (0, totals_index), (-1, totals_index), config.font_bold, config.table_font_size),
    ]
