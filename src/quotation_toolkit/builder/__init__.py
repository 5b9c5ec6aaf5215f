"""
Module: builder

Purpose:
    Quotation build pipeline: pricing, layout, and PDF output.

Key Functions:
    - build_quotation(): Validate, lay out and render a quotation
    - layout_quotation(): Layout only (no rendering)

Key Classes:
    - BuilderConfig: Build configuration
    - BuildResult, BuildError: Pipeline outcome and failure
"""

from .config import BuilderConfig
from .controller import BuildError, BuildResult, build_quotation, layout_quotation

__all__ = [
    "BuilderConfig",
    "BuildError",
    "BuildResult",
    "build_quotation",
    "layout_quotation",
]
