"""
Module: builder.config

Purpose:
    Configuration dataclass for the quotation build pipeline. Immutable
    configuration with validation on construction.

Key Classes:
    - BuilderConfig: Output, delivery mode, layout and signature options

Dependencies:
    - dataclasses (std)
    - pathlib (std)

Used By:
    - builder.controller: build_quotation()
    - cli: render command
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from quotation_toolkit.builder.layout.config import LayoutConfig
from quotation_toolkit.builder.output.renderer import RenderMode


@dataclass(frozen=True)
class BuilderConfig:
    """
    Configuration for building quotations (immutable).

    Attributes:
        output_dir: Directory for DOWNLOAD mode (default: current directory)
        mode: DOWNLOAD writes <quote_name>.pdf; BUFFER returns the bytes
        layout: Page geometry and typography
        signature_path: Image file used instead of the built-in signature
        sanitize_filename: Replace path separators and control characters
            in the quote name when deriving the filename

    Example:
        >>> config = BuilderConfig(output_dir=Path("quotes"))
        >>> config.mode
        <RenderMode.DOWNLOAD: 'download'>
    """

    output_dir: Optional[Path] = None
    mode: RenderMode = RenderMode.DOWNLOAD
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    signature_path: Optional[Path] = None
    sanitize_filename: bool = True

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not isinstance(self.mode, RenderMode):
            raise ValueError(f"mode must be a RenderMode: {self.mode!r}")
        if self.output_dir is not None and Path(self.output_dir).is_file():
            raise ValueError(f"output_dir is a file: {self.output_dir}")
