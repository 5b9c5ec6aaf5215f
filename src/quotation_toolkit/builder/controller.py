"""
Module: builder.controller

Purpose:
    Orchestrate the complete quotation pipeline.
    Validate → Price → Compose → Paginate → Render

Key Functions:
    - build_quotation(): Main entry point, raw record or Quotation -> PDF
    - layout_quotation(): Pricing, composition and pagination only

Key Classes:
    - BuildResult: Complete build result
    - BuildError: Exception for environment failures (unwritable output)

Dependencies:
    - core.schemas: Validation
    - builder.pricing: Line-item arithmetic
    - builder.layout: Composition and pagination
    - builder.output: PDF rendering
    - builder.images: Header and signature assets

Used By:
    - cli: render command
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from quotation_toolkit.core.models import Quotation
from quotation_toolkit.core.schemas import ValidationFailure, validate_quotation

from .config import BuilderConfig
from .images import AssetResolutionError, default_signature_png, load_image_file
from .layout import LayoutConfig, LayoutResult, compose_document, paginate
from .output import render
from .pricing import price_items

logger = logging.getLogger(__name__)


class BuildError(Exception):
    """Error during build pipeline."""
    pass


@dataclass(frozen=True)
class BuildResult:
    """
    Complete build result (immutable).

    When validation fails, `failures` is set and nothing else ran: layout,
    pdf_path and pdf_bytes are None.

    Attributes:
        quotation: Normalized quotation (None if invalid)
        failures: Field-scoped validation failures
        layout: Paginated layout
        pdf_path: Written file (DOWNLOAD mode)
        pdf_bytes: PDF bytes (BUFFER mode)
        total: Document total
        page_count: Number of pages generated
        warnings: Degraded-output notes (header fallback, overflow)

    Example:
        >>> result = build_quotation(record, BuilderConfig(output_dir=Path("out")))
        >>> if result.ok:
        ...     print(f"Wrote {result.page_count} pages to {result.pdf_path}")
    """

    quotation: Optional[Quotation]
    failures: tuple[ValidationFailure, ...] = ()
    layout: Optional[LayoutResult] = None
    pdf_path: Optional[Path] = None
    pdf_bytes: Optional[bytes] = None
    total: float = 0.0
    page_count: int = 0
    warnings: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.failures and self.layout is not None


def build_quotation(
    record: Union[Mapping[str, Any], Quotation],
    config: Optional[BuilderConfig] = None,
    *,
    header_image: Optional[bytes] = None,
) -> BuildResult:
    """
    Build a quotation PDF from start to finish.

    Pipeline:
    1. Validate the record (failures are returned, not raised)
    2. Load the signature asset
    3. Price line items
    4. Compose layout blocks
    5. Paginate onto pages
    6. Render (write <quote_name>.pdf, or return bytes)

    Args:
        record: Raw camelCase record or a Quotation
        config: Build configuration (defaults to BuilderConfig())
        header_image: Pre-resolved header bytes; see resolve_header_image()

    Returns:
        BuildResult with failures, or with the rendered output

    Raises:
        BuildError: If the PDF cannot be written

    Example:
        >>> header = resolve_header_image("letterhead.png")
        >>> result = build_quotation(record, config, header_image=header)
    """
    config = config or BuilderConfig()
    start_time = time.perf_counter()

    # 1. Validate
    validation = validate_quotation(record)
    if not validation.is_valid:
        logger.info(f"Quotation invalid: {len(validation.failures)} failure(s)")
        return BuildResult(quotation=None, failures=validation.failures)
    quotation = validation.quotation

    logger.info(f"Starting build for quotation {quotation.quote_name!r}")

    # 2. Signature asset
    signature = _load_signature(config)

    # 3-5. Layout
    layout = layout_quotation(
        quotation,
        config.layout,
        header_image=header_image,
        signature_image=signature,
    )

    # 6. Render
    try:
        output = render(
            layout,
            config.mode,
            output_dir=config.output_dir,
            sanitize=config.sanitize_filename,
        )
    except OSError as e:
        raise BuildError(f"Failed to write PDF: {e}") from e

    elapsed = time.perf_counter() - start_time
    logger.info(f"Quotation generation completed in {elapsed:.2f}s")

    return BuildResult(
        quotation=quotation,
        layout=layout,
        pdf_path=output.path,
        pdf_bytes=output.data,
        total=layout.total,
        page_count=layout.page_count,
        warnings=tuple(layout.warnings),
    )


def layout_quotation(
    quotation: Quotation,
    layout_config: Optional[LayoutConfig] = None,
    *,
    header_image: Optional[bytes] = None,
    signature_image: Optional[bytes] = None,
) -> LayoutResult:
    """
    Price, compose and paginate a validated quotation.

    Pure: no I/O, and the quotation is not retained.

    Args:
        quotation: Validated quotation
        layout_config: Layout configuration (defaults to LayoutConfig())
        header_image: Pre-resolved header bytes
        signature_image: Signature bytes (None leaves the space blank)

    Returns:
        LayoutResult ready for rendering
    """
    layout_config = layout_config or LayoutConfig()

    pricing = price_items(quotation.line_items)
    logger.info(
        f"Priced {len(pricing.rows)} items, total {pricing.total:.2f} "
        f"({pricing.column_set.value} columns)"
    )

    document = compose_document(
        quotation,
        pricing,
        layout_config,
        header_image=header_image,
        signature_image=signature_image,
    )
    layout = paginate(document, layout_config, pricing, title=quotation.quote_name)
    logger.info(f"Paginated onto {layout.page_count} pages")
    return layout


def _load_signature(config: BuilderConfig) -> bytes:
    """Configured signature file, or the built-in signature if it cannot be read."""
    if config.signature_path is None:
        return default_signature_png()
    try:
        return load_image_file(config.signature_path)
    except AssetResolutionError as e:
        logger.warning(f"Signature image unavailable, using built-in signature: {e}")
        return default_signature_png()
