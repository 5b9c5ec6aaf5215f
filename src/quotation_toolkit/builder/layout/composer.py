"""
Module: builder.layout.composer

Purpose:
    Compose the quotation's layout blocks in their fixed order:
    header, recipient, subject, salutation, item table, terms,
    signer line, signature, signatory, and the footer band.

    Every block carries its own height estimate; the paginator only
    decides where each block goes.

Key Functions:
    - compose_document(): Quotation + pricing -> ComposedDocument
    - compose_header(): Image header or text-header fallback
    - compose_footer(): Footer band and bottom reserve

Dependencies:
    - builder.layout.text: Line wrapping
    - builder.layout.table: Item table
    - builder.images: Header image verification

Used By:
    - builder.controller: layout_quotation()
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from quotation_toolkit.builder.images import (
    AssetResolutionError,
    decode_data_url,
    load_embedded_image,
)
from quotation_toolkit.builder.pricing import PricingResult
from quotation_toolkit.core.models import Quotation

from .config import LayoutConfig
from .models import (
    Align,
    ComposedDocument,
    DrawOp,
    HeaderKind,
    ImageOp,
    LayoutBlock,
    LineBlock,
    RectOp,
    TableBlock,
    TextOp,
)
from .table import build_item_table
from .text import text_height, wrap_text

logger = logging.getLogger(__name__)


def compose_document(
    quotation: Quotation,
    pricing: PricingResult,
    config: LayoutConfig,
    header_image: Optional[bytes] = None,
    signature_image: Optional[bytes] = None,
) -> ComposedDocument:
    """
    Create every layout block for a quotation.

    Args:
        quotation: Validated quotation snapshot
        pricing: Priced line items (total and column set)
        config: Layout configuration
        header_image: Pre-resolved header bytes (overrides header_image on
            the quotation)
        signature_image: Signature bytes; None reserves blank space

    Returns:
        ComposedDocument with header, flowed blocks, footer and reserve

    Example:
        >>> doc = compose_document(quotation, price_items(quotation.line_items), LayoutConfig())
        >>> [b.role for b in doc.blocks]
        ['recipient', 'subject', 'salutation', 'item_table', 'terms',
         'signer', 'signature', 'signatory']
    """
    warnings: List[str] = []

    header, header_kind = compose_header(quotation, config, header_image, warnings)
    footer, bottom_reserve = compose_footer(quotation, config)

    blocks: List[LayoutBlock] = [
        _recipient_block(quotation, config),
        _subject_block(quotation, config),
        _salutation_block(config),
        TableBlock.from_table(
            "item_table",
            build_item_table(pricing, config),
            x=config.margin_left,
            width=config.available_width,
        ),
        _terms_block(quotation, config),
        *_signature_blocks(quotation, config, signature_image),
    ]

    logger.info(
        f"Composed {len(blocks)} blocks: header={header_kind.value}, "
        f"bottom reserve={bottom_reserve:.1f}mm"
    )
    return ComposedDocument(
        header=header,
        header_kind=header_kind,
        blocks=tuple(blocks),
        footer=footer,
        bottom_reserve=bottom_reserve,
        warnings=tuple(warnings),
    )


# ─────────────────────────────────────────────────────────────────────────────
# Header
# ─────────────────────────────────────────────────────────────────────────────


def compose_header(
    quotation: Quotation,
    config: LayoutConfig,
    header_image: Optional[bytes] = None,
    warnings: Optional[List[str]] = None,
) -> Tuple[LayoutBlock, HeaderKind]:
    """
    Build the page header block.

    The image header is used when explicit bytes, or an embedded data URL
    on the quotation, decode as an image. Anything else (no image, a bare
    location reference, undecodable bytes) gives the text header. Never
    raises; degraded choices are appended to `warnings`.

    Returns:
        (header block, header kind); block height is the content start
    """
    if warnings is None:
        warnings = []

    data = _embedded_header_bytes(quotation, header_image, warnings)
    if data is not None:
        op = ImageOp(
            data=data,
            x=config.header_image_x,
            y=config.header_image_y,
            width=config.header_image_width,
            height=config.header_image_height,
            label="header",
        )
        block = LayoutBlock(role="header", height=config.image_header_content_start, ops=(op,))
        return block, HeaderKind.IMAGE

    centre = config.page_width / 2
    ops = (
        TextOp(
            text=quotation.company_name,
            x=centre,
            y=config.text_header_title_y,
            font=config.font_bold,
            size=config.text_header_title_size,
            align=Align.CENTER,
        ),
        TextOp(
            text=config.tagline,
            x=centre,
            y=config.text_header_tagline_y,
            font=config.font_regular,
            size=config.text_header_tagline_size,
            align=Align.CENTER,
        ),
    )
    block = LayoutBlock(role="header", height=config.text_header_content_start, ops=ops)
    return block, HeaderKind.TEXT


def _embedded_header_bytes(
    quotation: Quotation,
    header_image: Optional[bytes],
    warnings: List[str],
) -> Optional[bytes]:
    try:
        if header_image is not None:
            return load_embedded_image(header_image)
        if quotation.has_embedded_header:
            return load_embedded_image(decode_data_url(quotation.header_image))
    except AssetResolutionError as e:
        _warn(warnings, f"Header image could not be used, using text header: {e}")
        return None

    if quotation.header_image:
        _warn(warnings, "Header image is a location reference, not embedded data; using text header")
    return None


# ─────────────────────────────────────────────────────────────────────────────
# Body blocks
# ─────────────────────────────────────────────────────────────────────────────


def _recipient_block(quotation: Quotation, config: LayoutConfig) -> LayoutBlock:
    """Date, "To,", customer name/address, and the optional attention line."""
    left = config.margin_left
    ops: List[DrawOp] = [
        TextOp(
            text=f"Date: {quotation.quote_date.strftime('%d-%m-%Y')}",
            x=config.right_edge,
            y=0.0,
            font=config.font_regular,
            size=config.body_font_size,
            align=Align.RIGHT,
        ),
        TextOp(text="To,", x=left, y=0.0, font=config.font_regular, size=config.body_font_size),
    ]
    cursor = config.to_line_advance

    name_lines = wrap_text(
        quotation.customer_name, config.font_bold, config.recipient_font_size, config.recipient_width
    )
    for i, line in enumerate(name_lines):
        ops.append(TextOp(
            text=line,
            x=left,
            y=cursor + i * config.recipient_line_height,
            font=config.font_bold,
            size=config.recipient_font_size,
        ))
    cursor += text_height(max(1, len(name_lines)), config.recipient_line_height)

    address_lines = wrap_text(
        quotation.customer_address,
        config.font_regular,
        config.recipient_font_size,
        config.recipient_width,
    )
    for i, line in enumerate(address_lines):
        ops.append(TextOp(
            text=line,
            x=left,
            y=cursor + i * config.recipient_line_height,
            font=config.font_regular,
            size=config.recipient_font_size,
        ))
    cursor += text_height(len(address_lines), config.recipient_line_height)

    if quotation.kind_attention:
        cursor += 2
        ops.append(TextOp(
            text="Kind Attention:-",
            x=left,
            y=cursor,
            font=config.font_bold,
            size=config.body_font_size,
        ))
        value_width = config.right_edge - config.kind_attention_value_x
        value_lines = wrap_text(
            quotation.kind_attention, config.font_regular, config.body_font_size, value_width
        )
        for i, line in enumerate(value_lines):
            ops.append(TextOp(
                text=line,
                x=config.kind_attention_value_x,
                y=cursor + i * config.recipient_line_height,
                font=config.font_regular,
                size=config.body_font_size,
            ))
        cursor += text_height(max(1, len(value_lines)), config.recipient_line_height)

    return LayoutBlock(role="recipient", height=cursor, ops=tuple(ops))


def _subject_block(quotation: Quotation, config: LayoutConfig) -> LayoutBlock:
    lines = wrap_text(quotation.subject, config.font_regular, config.body_font_size, config.subject_width)
    ops: List[DrawOp] = [
        TextOp(text="Sub:-", x=config.margin_left, y=0.0, font=config.font_bold, size=config.body_font_size),
    ]
    ops.extend(
        TextOp(
            text=line,
            x=config.subject_text_x,
            y=i * config.subject_line_height,
            font=config.font_regular,
            size=config.body_font_size,
        )
        for i, line in enumerate(lines)
    )
    height = text_height(max(1, len(lines)), config.subject_line_height) + config.subject_line_height
    # Subject stays with the salutation
    return LayoutBlock(
        role="subject",
        height=height,
        ops=tuple(ops),
        space_before=config.subject_space_before,
        keep_with_next=True,
    )


def _salutation_block(config: LayoutConfig) -> LayoutBlock:
    op = TextOp(
        text=config.salutation,
        x=config.margin_left,
        y=0.0,
        font=config.font_regular,
        size=config.body_font_size,
    )
    return LayoutBlock(role="salutation", height=config.salutation_advance, ops=(op,))


def _terms_block(quotation: Quotation, config: LayoutConfig) -> LineBlock:
    heading = TextOp(
        text=config.terms_heading,
        x=config.margin_left,
        y=0.0,
        font=config.font_bold,
        size=config.terms_heading_size,
    )
    lines = wrap_text(quotation.terms, config.font_regular, config.terms_font_size, config.terms_width)
    return LineBlock.build(
        "terms",
        lines,
        x=config.margin_left,
        font=config.font_regular,
        size=config.terms_font_size,
        line_height=config.terms_line_height,
        lead_ops=(heading,),
        lead_height=config.terms_heading_advance,
        space_before=config.terms_space_before,
        keep_together=True,
    )


def _signature_blocks(
    quotation: Quotation,
    config: LayoutConfig,
    signature_image: Optional[bytes],
) -> List[LayoutBlock]:
    """Signer line, signature image, and signatory name (kept together)."""
    signer = LayoutBlock(
        role="signer",
        height=config.signer_advance,
        ops=(TextOp(
            text=f"For, {quotation.company_name}",
            x=config.margin_left,
            y=0.0,
            font=config.font_bold,
            size=config.signer_font_size,
        ),),
        space_before=config.signer_space_before,
        keep_with_next=True,
    )

    if signature_image:
        signature = LayoutBlock(
            role="signature",
            height=config.signature_height,
            ops=(ImageOp(
                data=signature_image,
                x=config.margin_left,
                y=0.0,
                width=config.signature_width,
                height=config.signature_height,
                label="signature",
            ),),
            keep_with_next=True,
        )
    else:
        logger.debug("No signature image; reserving blank space")
        signature = LayoutBlock(
            role="signature",
            height=config.signature_fallback_height,
            keep_with_next=True,
        )

    signatory = LayoutBlock(
        role="signatory",
        height=config.signatory_baseline,
        ops=(TextOp(
            text=quotation.authorised_signatory,
            x=config.margin_left,
            y=config.signatory_baseline,
            font=config.font_bold,
            size=config.signer_font_size,
        ),),
    )
    return [signer, signature, signatory]


# ─────────────────────────────────────────────────────────────────────────────
# Footer
# ─────────────────────────────────────────────────────────────────────────────


def compose_footer(quotation: Quotation, config: LayoutConfig) -> Tuple[LayoutBlock, float]:
    """
    Build the footer band and the bottom reserve it implies.

    The band is a bordered box holding the wrapped company address and a
    contact line. The reserve M is never less than min_bottom_margin and
    always covers the band plus its offset and gap, so flowed content
    cannot reach the footer however long the address wraps.

    Returns:
        (footer block, bottom reserve M in mm)
    """
    centre = config.page_width / 2
    address_lines = wrap_text(
        f"Add: {quotation.company_address}",
        config.font_regular,
        config.footer_font_size,
        config.footer_wrap_width,
    )
    contact = f"Email- {quotation.company_email or ''} (M) {quotation.company_phone or ''}"

    text_block_height = text_height(len(address_lines), config.footer_line_height) + config.footer_line_height
    band_height = text_block_height + config.footer_border_padding

    ops: List[DrawOp] = [
        RectOp(x=config.footer_x, y=0.0, width=config.footer_width, height=band_height),
    ]
    baseline = config.footer_text_inset
    for line in address_lines:
        ops.append(TextOp(
            text=line,
            x=centre,
            y=baseline,
            font=config.font_regular,
            size=config.footer_font_size,
            align=Align.CENTER,
        ))
        baseline += config.footer_line_height
    ops.append(TextOp(
        text=contact,
        x=centre,
        y=baseline,
        font=config.font_regular,
        size=config.footer_font_size,
        align=Align.CENTER,
    ))

    footer = LayoutBlock(role="footer", height=band_height, ops=tuple(ops))
    bottom_reserve = max(
        config.min_bottom_margin,
        band_height + config.footer_bottom_offset + config.footer_gap,
    )
    return footer, bottom_reserve


def _warn(warnings: List[str], message: str) -> None:
    logger.warning(message)
    warnings.append(message)
