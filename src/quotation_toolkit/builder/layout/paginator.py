"""
Module: builder.layout.paginator

Purpose:
    Arrange composed blocks onto pages.
    Each page starts with the page header; flowed blocks never extend
    below H - M (page height minus the bottom reserve); the footer band
    is pinned to the last page.

Key Functions:
    - paginate(): Main pagination function

Algorithm:
    1. Take the next atomic group: blocks chained by keep_with_next
       (e.g. signer line + signature + signatory name)
    2. If the group does not fit below the cursor, break the page first
    3. Splittable blocks (item table, terms) fill the remaining space and
       continue on new pages; terms move whole to a fresh page when they
       fit there
    4. Anything too tall even for a fresh page is placed at the top of
       one and reported as a warning
    5. Pin the footer to the last page

Dependencies:
    - builder.layout.models: ComposedDocument, PagePlan, LayoutResult
    - builder.layout.config: LayoutConfig

Used By:
    - builder.controller: layout_quotation()
"""

from __future__ import annotations

import logging
from typing import List, Optional

from quotation_toolkit.builder.pricing import PricingResult

from .config import LayoutConfig
from .models import (
    EPSILON,
    BlockPlacement,
    ComposedDocument,
    LayoutBlock,
    LayoutResult,
    LineBlock,
    PagePlan,
)

logger = logging.getLogger(__name__)


class _PageCursor:
    """Mutable pagination state: current page, its placements, and the cursor."""

    def __init__(self, header: LayoutBlock, limit: float):
        self.header = header
        self.limit = limit
        self.pages: List[PagePlan] = []
        self.page_index = 0
        self.placements: List[BlockPlacement] = []
        self.cursor = 0.0
        self.forced = False
        self._open_page()

    @property
    def content_start(self) -> float:
        return self.header.height

    @property
    def at_page_start(self) -> bool:
        """Only the header is on this page so far."""
        return len(self.placements) == 1

    @property
    def fresh_capacity(self) -> float:
        """Flow height available on an empty page."""
        return self.limit - self.content_start

    def gap_for(self, block: LayoutBlock) -> float:
        # Spacing is dropped at the top of a page
        return 0.0 if self.at_page_start else block.space_before

    def remaining(self) -> float:
        return self.limit - self.cursor

    def place(self, block: LayoutBlock) -> BlockPlacement:
        top = self.cursor + self.gap_for(block)
        placement = BlockPlacement(block=block, top=top, forced_break=self.forced)
        self.placements.append(placement)
        self.cursor = placement.bottom
        self.forced = False
        logger.debug(
            f"Page {self.page_index}: placed {block.role} at {top:.2f}mm "
            f"(height {block.height:.2f}mm)"
        )
        return placement

    def break_page(self) -> None:
        self._close_page()
        self.page_index += 1
        self._open_page()
        self.forced = True

    def finish(self, footer: LayoutBlock, footer_top: float) -> List[PagePlan]:
        self.placements.append(BlockPlacement(block=footer, top=footer_top, pinned=True))
        self._close_page()
        return self.pages

    def _open_page(self) -> None:
        self.placements = [BlockPlacement(block=self.header, top=0.0)]
        self.cursor = self.content_start

    def _close_page(self) -> None:
        self.pages.append(PagePlan(
            index=self.page_index,
            placements=tuple(self.placements),
            height_used=self.cursor,
        ))


def paginate(
    document: ComposedDocument,
    config: LayoutConfig,
    pricing: PricingResult,
    title: str = "",
) -> LayoutResult:
    """
    Place composed blocks onto pages.

    Overflow rule: before a block is placed, if cursor + height would pass
    H - M, the page is broken first. A page break closes the page, opens a
    new one with the header re-placed, and resumes at the header's content
    start; the first block placed there is marked forced_break.

    Args:
        document: Composed blocks, header, footer and bottom reserve
        config: Layout configuration
        pricing: Pricing result (column set and total for diagnostics)
        title: Document title

    Returns:
        LayoutResult with page plans and warnings

    Example:
        >>> result = paginate(compose_document(q, pricing, config), config, pricing)
        >>> result.page_count
        1
    """
    limit = config.page_height - document.bottom_reserve
    state = _PageCursor(document.header, limit)
    warnings: List[str] = list(document.warnings)

    blocks = list(document.blocks)
    i = 0
    while i < len(blocks):
        block = blocks[i]
        if block.splittable:
            _place_splittable(block, state, warnings)
            i += 1
            continue

        group = _get_atomic_group(i, blocks)
        _place_group(group, state, warnings)
        i += len(group)

    footer_top = config.page_height - config.footer_bottom_offset - document.footer.height
    pages = state.finish(document.footer, footer_top)

    logger.info(
        f"Paginated {len(blocks)} blocks onto {len(pages)} pages "
        f"(content limit {limit:.1f}mm)"
    )
    return LayoutResult(
        pages=tuple(pages),
        page_size=(config.page_width, config.page_height),
        content_limit=limit,
        header_kind=document.header_kind,
        column_set=pricing.column_set,
        total=pricing.total,
        title=title,
        warnings=warnings,
    )


def _group_height(group: List[LayoutBlock], at_page_start: bool) -> float:
    """Height of a group placed together, including its internal spacing."""
    height = 0.0
    for j, block in enumerate(group):
        if j > 0 or not at_page_start:
            height += block.space_before
        height += block.height
    return height


def _place_group(group: List[LayoutBlock], state: _PageCursor, warnings: List[str]) -> None:
    needed = _group_height(group, state.at_page_start)

    if state.cursor + needed > state.limit + EPSILON and not state.at_page_start:
        state.break_page()
        needed = _group_height(group, True)

    if state.cursor + needed > state.limit + EPSILON:
        roles = "+".join(b.role for b in group)
        _warn(
            warnings,
            f"Block {roles} overflows page {state.page_index}: "
            f"{needed:.1f}mm needed, {state.remaining():.1f}mm available",
        )

    for block in group:
        state.place(block)


def _place_splittable(block: LayoutBlock, state: _PageCursor, warnings: List[str]) -> None:
    remaining: Optional[LayoutBlock] = block
    while remaining is not None:
        available = state.remaining() - state.gap_for(remaining)

        if remaining.height <= available + EPSILON:
            state.place(remaining)
            return

        keep_together = isinstance(remaining, LineBlock) and remaining.keep_together
        if (
            keep_together
            and not state.at_page_start
            and remaining.height <= state.fresh_capacity + EPSILON
        ):
            state.break_page()
            continue

        head, rest = remaining.split(available)
        if head is None:
            if state.at_page_start:
                _warn(
                    warnings,
                    f"Block {remaining.role} cannot be split to fit page {state.page_index}: "
                    f"{remaining.height:.1f}mm needed, {available:.1f}mm available",
                )
                state.place(remaining)
                return
            state.break_page()
            continue

        state.place(head)
        remaining = rest
        if remaining is not None:
            state.break_page()


def _get_atomic_group(start_idx: int, blocks: List[LayoutBlock]) -> List[LayoutBlock]:
    """
    Get the next run of blocks that must share a page.

    A block with keep_with_next pulls in the block after it; the chain
    stops at a splittable block.
    """
    group = [blocks[start_idx]]
    current_idx = start_idx
    while current_idx + 1 < len(blocks):
        current = blocks[current_idx]
        next_block = blocks[current_idx + 1]
        if not current.keep_with_next or next_block.splittable:
            break
        group.append(next_block)
        current_idx += 1
    return group


def _warn(warnings: List[str], message: str) -> None:
    logger.warning(message)
    warnings.append(message)
