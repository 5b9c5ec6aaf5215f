"""
Module: builder.output.renderer

Purpose:
    Render a LayoutResult to PDF using ReportLab.
    Each PagePlan becomes one PDF page; every draw operation is placed at
    its block's position plus its own offset. No layout decision is made
    here.

Key Functions:
    - render_to_pdf(): Draw a layout onto a file path or binary stream
    - render(): Download (write <name>.pdf) or buffer (return bytes)
    - pdf_filename(): Output filename for a quote name

Key Classes:
    - RenderMode: DOWNLOAD or BUFFER
    - RenderOutput: Where the document went

Dependencies:
    - reportlab: PDF generation
    - builder.layout.models: LayoutResult, PagePlan, draw operations

Used By:
    - builder.controller: Pipeline orchestration
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Optional, Union

from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from quotation_toolkit.builder.layout.models import (
    Align,
    BlockPlacement,
    ImageOp,
    LayoutResult,
    PagePlan,
    RectOp,
    TableOp,
    TextOp,
)

logger = logging.getLogger(__name__)

PDF_EXTENSION = ".pdf"


class RenderMode(Enum):
    """How the finished document is delivered."""

    DOWNLOAD = "download"
    BUFFER = "buffer"


@dataclass(frozen=True)
class RenderOutput:
    """
    Result of render().

    Attributes:
        mode: Delivery mode used
        path: Written file (DOWNLOAD), else None
        data: PDF bytes (BUFFER), else None
    """

    mode: RenderMode
    path: Optional[Path] = None
    data: Optional[bytes] = None


def pdf_filename(quote_name: str, sanitize: bool = True) -> str:
    """
    Filename for a quotation: "<quote_name>.pdf".

    With `sanitize`, path separators and control characters are replaced
    by "_" so the name cannot leave the output directory. Everything else
    is kept verbatim.

    Example:
        >>> pdf_filename("Q-12/2024")
        'Q-12_2024.pdf'
    """
    name = quote_name
    if sanitize:
        name = "".join(
            "_" if ch in "/\\" or ord(ch) < 32 or ord(ch) == 127 else ch
            for ch in quote_name
        )
    return f"{name}{PDF_EXTENSION}"


def render(
    layout: LayoutResult,
    mode: RenderMode = RenderMode.DOWNLOAD,
    *,
    output_dir: Optional[Path] = None,
    filename: Optional[str] = None,
    sanitize: bool = True,
) -> RenderOutput:
    """
    Render a layout in the requested mode.

    Args:
        layout: Paginated layout
        mode: DOWNLOAD writes a file; BUFFER returns the bytes
        output_dir: Directory for DOWNLOAD (default: current directory)
        filename: Override the filename derived from the layout title
        sanitize: Sanitize the derived filename

    Returns:
        RenderOutput with path or data set

    Raises:
        OSError: If the file cannot be written

    Example:
        >>> render(layout, RenderMode.BUFFER).data[:5]
        b'%PDF-'
    """
    if mode is RenderMode.BUFFER:
        buffer = io.BytesIO()
        render_to_pdf(layout, buffer)
        data = buffer.getvalue()
        logger.info(f"Rendered {layout.page_count} pages to buffer ({len(data)} bytes)")
        return RenderOutput(mode=mode, data=data)

    directory = Path(output_dir) if output_dir is not None else Path.cwd()
    path = directory / (filename or pdf_filename(layout.title, sanitize=sanitize))
    render_to_pdf(layout, path)
    return RenderOutput(mode=mode, path=path)


def render_to_pdf(layout: LayoutResult, target: Union[Path, BinaryIO]) -> None:
    """
    Draw every page of a layout.

    The canvas is created in invariant mode, so rendering the same layout
    twice produces identical bytes.

    Args:
        layout: Layout result from the paginator
        target: Output path (parent directories are created) or a
            writable binary stream

    Raises:
        OSError: If the PDF cannot be written
    """
    if layout.page_count == 0:
        logger.warning("Empty layout, creating empty PDF")

    if isinstance(target, (str, Path)):
        target = Path(target)
        target.parent.mkdir(parents=True, exist_ok=True)
        destination: Union[str, BinaryIO] = str(target)
    else:
        destination = target

    page_width, page_height = layout.page_size
    c = canvas.Canvas(destination, pagesize=(page_width * mm, page_height * mm), invariant=1)
    if layout.title:
        c.setTitle(layout.title)

    for page in layout.pages:
        _render_page(c, page, page_height * mm)
        c.showPage()

    c.save()

    if isinstance(target, Path):
        logger.info(f"Rendered {layout.page_count} pages to {target}")


def _render_page(c: canvas.Canvas, page: PagePlan, page_height_pt: float) -> None:
    for placement in page.placements:
        for op in placement.block.ops:
            _draw_op(c, placement, op, page_height_pt)


def _draw_op(c: canvas.Canvas, placement: BlockPlacement, op, page_height_pt: float) -> None:
    if isinstance(op, TextOp):
        _draw_text(c, op, placement.top, page_height_pt)
    elif isinstance(op, ImageOp):
        _draw_image(c, op, placement.top, page_height_pt)
    elif isinstance(op, RectOp):
        c.saveState()
        c.setLineWidth(op.line_width * mm)
        c.setStrokeColorRGB(0, 0, 0)
        c.rect(
            _mm_to_pt(op.x),
            _transform_y(page_height_pt, placement.top + op.y, op.height),
            _mm_to_pt(op.width),
            _mm_to_pt(op.height),
            stroke=1,
            fill=0,
        )
        c.restoreState()
    elif isinstance(op, TableOp):
        op.table.wrapOn(c, _mm_to_pt(op.width), _mm_to_pt(op.height))
        op.table.drawOn(
            c,
            _mm_to_pt(op.x),
            _transform_y(page_height_pt, placement.top + op.y, op.height),
        )
    else:
        raise TypeError(f"Unknown draw operation: {type(op).__name__}")


def _draw_text(c: canvas.Canvas, op: TextOp, block_top: float, page_height_pt: float) -> None:
    if not op.text:
        return
    x_pt = _mm_to_pt(op.x)
    # Baseline: a zero-height box at the baseline offset
    y_pt = _transform_y(page_height_pt, block_top + op.y, 0.0)

    c.setFont(op.font, op.size)
    c.setFillColorRGB(0, 0, 0)
    if op.align is Align.CENTER:
        c.drawCentredString(x_pt, y_pt, op.text)
    elif op.align is Align.RIGHT:
        c.drawRightString(x_pt, y_pt, op.text)
    else:
        c.drawString(x_pt, y_pt, op.text)


def _draw_image(c: canvas.Canvas, op: ImageOp, block_top: float, page_height_pt: float) -> None:
    """Draw an image; undecodable data is logged and the area left blank."""
    try:
        reader = ImageReader(io.BytesIO(op.data))
        c.drawImage(
            reader,
            _mm_to_pt(op.x),
            _transform_y(page_height_pt, block_top + op.y, op.height),
            width=_mm_to_pt(op.width),
            height=_mm_to_pt(op.height),
            mask="auto",
        )
    except (OSError, ValueError, TypeError) as e:
        logger.error(f"Skipping {op.label} image: {e}")


def _mm_to_pt(value_mm: float) -> float:
    """Convert millimetres to PDF points (1/72 inch)."""
    return value_mm * mm


def _transform_y(page_height_pt: float, top_mm: float, height_mm: float) -> float:
    """
    Convert a top-down box position to ReportLab's bottom-up origin.

    Args:
        page_height_pt: Page height in points
        top_mm: Box top, measured down from the page top
        height_mm: Box height

    Returns:
        Y of the box's bottom edge in points, measured up from the page bottom
    """
    return page_height_pt - _mm_to_pt(top_mm + height_mm)
