"""
Module: builder.layout.models

Purpose:
    Data models for quotation layout.
    Draw operations are positioned relative to the block that owns them;
    blocks are positioned on a page by a BlockPlacement. The renderer only
    adds the placement offset, it never re-derives a layout decision.

Key Classes:
    - TextOp, ImageOp, RectOp, TableOp: Draw operations (mm, top-down)
    - LayoutBlock: Named, height-estimated, atomic block
    - LineBlock: Text block that splits on line boundaries
    - TableBlock: Item table block split by ReportLab's Table.split
    - BlockPlacement: Block positioned on a page
    - PagePlan: Complete page layout
    - ComposedDocument: Composer output handed to the paginator
    - LayoutResult: Final layout output

Dependencies:
    - reportlab: Table flowable measurement and splitting
    - dataclasses (std)

Used By:
    - builder.layout.composer: Creates blocks
    - builder.layout.paginator: Creates PagePlans
    - builder.output.renderer: Draws operations
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from reportlab.lib.units import mm
from reportlab.platypus import Table

from quotation_toolkit.builder.pricing import ColumnSet

# Small tolerance for float comparisons against the page limit
EPSILON = 1e-6

# Height passed to Table.wrap when measuring the unsplit table (points)
_UNBOUNDED_PT = 1e6


class Align(Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class HeaderKind(Enum):
    """Which page header the layout uses on every page."""

    IMAGE = "image"
    TEXT = "text"


@dataclass(frozen=True)
class TextOp:
    """
    A single line of text.

    Attributes:
        text: Line content (already wrapped)
        x: Anchor X in mm (left edge, centre or right edge per align)
        y: Baseline offset from the block top in mm
        font: ReportLab font name
        size: Font size in points
        align: Horizontal anchoring
    """

    text: str
    x: float
    y: float
    font: str
    size: float
    align: Align = Align.LEFT


@dataclass(frozen=True)
class ImageOp:
    """
    Embedded raster image.

    Attributes:
        data: Encoded image bytes (PNG/JPEG)
        x: Left edge in mm
        y: Top offset from the block top in mm
        width: Drawn width in mm
        height: Drawn height in mm
        label: What the image is, for logs ("header", "signature")
    """

    data: bytes
    x: float
    y: float
    width: float
    height: float
    label: str = "image"


@dataclass(frozen=True)
class RectOp:
    """Stroked rectangle; y is the top offset from the block top (mm)."""

    x: float
    y: float
    width: float
    height: float
    line_width: float = 0.2


@dataclass(frozen=True)
class TableOp:
    """ReportLab table (or table piece) with its measured size in mm."""

    table: Table
    x: float
    y: float
    width: float
    height: float


DrawOp = Union[TextOp, ImageOp, RectOp, TableOp]


@dataclass(frozen=True)
class LayoutBlock:
    """
    Named, height-estimated chunk of content (immutable).

    Atomic: it is placed whole or moved to the next page whole.

    Attributes:
        role: Block name, e.g. "recipient", "item_table", "terms"
        height: Vertical extent in mm
        ops: Draw operations relative to the block top
        space_before: Gap above the block (dropped at the top of a page)
        keep_with_next: Keep on the same page as the following block
    """

    role: str
    height: float
    ops: tuple[DrawOp, ...] = ()
    space_before: float = 0.0
    keep_with_next: bool = False

    @property
    def splittable(self) -> bool:
        return False

    def split(self, available: float) -> tuple[Optional[LayoutBlock], Optional[LayoutBlock]]:
        """
        Split into a head that fits `available` mm and a remainder.

        Returns:
            (head, rest); head is None when nothing fits
        """
        return None, self


@dataclass(frozen=True)
class LineBlock(LayoutBlock):
    """
    Text block that can continue on the next page between lines.

    An optional lead (e.g. a heading) is carried only by the first piece.
    With keep_together set, the block moves whole to a fresh page when it
    fits there, and is split only when it is taller than a fresh page.

    Example:
        >>> block = LineBlock.build("terms", lines, x=15, font="Helvetica",
        ...                         size=9, line_height=4)
        >>> head, rest = block.split(20.0)  # 5 lines fit
    """

    lines: tuple[str, ...] = ()
    x: float = 0.0
    font: str = "Helvetica"
    size: float = 9.0
    line_height: float = 4.0
    lead_ops: tuple[DrawOp, ...] = ()
    lead_height: float = 0.0
    keep_together: bool = False

    @classmethod
    def build(
        cls,
        role: str,
        lines: tuple[str, ...] | list[str],
        *,
        x: float,
        font: str,
        size: float,
        line_height: float,
        lead_ops: tuple[DrawOp, ...] = (),
        lead_height: float = 0.0,
        space_before: float = 0.0,
        keep_with_next: bool = False,
        keep_together: bool = False,
    ) -> LineBlock:
        lines = tuple(lines)
        ops = tuple(lead_ops) + tuple(
            TextOp(text=line, x=x, y=lead_height + i * line_height, font=font, size=size)
            for i, line in enumerate(lines)
        )
        return cls(
            role=role,
            height=lead_height + len(lines) * line_height,
            ops=ops,
            space_before=space_before,
            keep_with_next=keep_with_next,
            lines=lines,
            x=x,
            font=font,
            size=size,
            line_height=line_height,
            lead_ops=tuple(lead_ops),
            lead_height=lead_height,
            keep_together=keep_together,
        )

    @property
    def splittable(self) -> bool:
        return len(self.lines) > 1

    def split(self, available: float) -> tuple[Optional[LayoutBlock], Optional[LayoutBlock]]:
        fit = int((available - self.lead_height + EPSILON) // self.line_height)
        if fit <= 0:
            return None, self
        if fit >= len(self.lines):
            return self, None

        head = LineBlock.build(
            self.role,
            self.lines[:fit],
            x=self.x,
            font=self.font,
            size=self.size,
            line_height=self.line_height,
            lead_ops=self.lead_ops,
            lead_height=self.lead_height,
            space_before=self.space_before,
            keep_together=self.keep_together,
        )
        rest = LineBlock.build(
            self.role,
            self.lines[fit:],
            x=self.x,
            font=self.font,
            size=self.size,
            line_height=self.line_height,
            keep_with_next=self.keep_with_next,
            keep_together=self.keep_together,
        )
        return head, rest


@dataclass(frozen=True)
class TableBlock(LayoutBlock):
    """
    Item table (or a continuation piece of it).

    Measurement and row splitting are delegated to ReportLab's Table; the
    engine only supplies the width and the remaining height.
    """

    table: Optional[Table] = None
    x: float = 0.0
    width: float = 0.0

    @classmethod
    def from_table(
        cls,
        role: str,
        table: Table,
        *,
        x: float,
        width: float,
        space_before: float = 0.0,
    ) -> TableBlock:
        _, height_pt = table.wrap(width * mm, _UNBOUNDED_PT)
        height = height_pt / mm
        return cls(
            role=role,
            height=height,
            ops=(TableOp(table=table, x=x, y=0.0, width=width, height=height),),
            space_before=space_before,
            table=table,
            x=x,
            width=width,
        )

    @property
    def splittable(self) -> bool:
        return self.table is not None

    def split(self, available: float) -> tuple[Optional[LayoutBlock], Optional[LayoutBlock]]:
        if available <= 0 or self.table is None:
            return None, self
        pieces = self.table.split(self.width * mm, available * mm)
        if len(pieces) < 2:
            return None, self

        head = TableBlock.from_table(
            self.role, pieces[0], x=self.x, width=self.width, space_before=self.space_before
        )
        rest = TableBlock.from_table(self.role, pieces[1], x=self.x, width=self.width)
        return head, rest


@dataclass(frozen=True)
class BlockPlacement:
    """
    A block positioned on a page.

    Attributes:
        block: The LayoutBlock to place
        top: Y offset from page top (mm)
        forced_break: First flowed block on a page opened by a page break
        pinned: Placed at a fixed position (footer), not flowed

    Example:
        >>> placement = BlockPlacement(block, top=100)
        >>> placement.bottom
        112.5  # top + block.height
    """

    block: LayoutBlock
    top: float
    forced_break: bool = False
    pinned: bool = False

    @property
    def bottom(self) -> float:
        """Bottom Y coordinate (top + height)."""
        return self.top + self.block.height

    @property
    def role(self) -> str:
        return self.block.role


@dataclass(frozen=True)
class PagePlan:
    """
    Complete layout plan for a single page.

    Attributes:
        index: Page number (0-indexed)
        placements: Header, flowed blocks, and (last page only) footer
        height_used: Cursor position when the page was closed (mm)
    """

    index: int
    placements: tuple[BlockPlacement, ...]
    height_used: float

    @property
    def flow_placements(self) -> tuple[BlockPlacement, ...]:
        """Placements subject to the overflow rule (not header, not pinned)."""
        return tuple(
            p for p in self.placements
            if not p.pinned and p.role != "header"
        )

    def roles(self) -> list[str]:
        return [p.role for p in self.placements]


@dataclass(frozen=True)
class ComposedDocument:
    """
    Composer output: every block the paginator needs, in order.

    Attributes:
        header: Page header block, re-placed at the top of every page
        header_kind: IMAGE or TEXT
        blocks: Flowed blocks in fixed order
        footer: Footer band, pinned to the last page
        bottom_reserve: M, the band above the page bottom kept for the footer
        warnings: Degraded-output notes (e.g. header fallback)
    """

    header: LayoutBlock
    header_kind: HeaderKind
    blocks: tuple[LayoutBlock, ...]
    footer: LayoutBlock
    bottom_reserve: float
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class LayoutResult:
    """
    Final layout output with diagnostics.

    Attributes:
        pages: Tuple of PagePlans
        page_size: (width, height) in mm
        content_limit: H - M, the lowest Y any flowed block may reach
        header_kind: Header used on every page
        column_set: Item table column configuration
        total: Document total
        title: Document title (the quote name)
        warnings: Degraded-output and overflow notes
    """

    pages: tuple[PagePlan, ...]
    page_size: tuple[float, float]
    content_limit: float
    header_kind: HeaderKind
    column_set: ColumnSet
    total: float
    title: str = ""
    warnings: list[str] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def content_start(self) -> float:
        """Y where flowed content starts below the header."""
        return self.pages[0].placements[0].bottom if self.pages else 0.0

    def placements_for(self, role: str) -> list[tuple[int, BlockPlacement]]:
        """(page index, placement) pairs for every block with this role."""
        return [
            (page.index, placement)
            for page in self.pages
            for placement in page.placements
            if placement.role == role
        ]
