"""
Module: builder.layout.config

Purpose:
    Configuration for the quotation layout engine.
    Defines page dimensions, fonts, wrap widths, header geometry and the
    bottom reserve kept free for the footer band.

Key Classes:
    - LayoutConfig: Immutable layout configuration

Dependencies:
    - dataclasses (std)

Used By:
    - builder.layout.composer: Block composition
    - builder.layout.paginator: Page arrangement
    - builder.output.renderer: Page size
"""

from __future__ import annotations

from dataclasses import dataclass


# A4 in millimetres; every layout coordinate is in mm, top-down
DEFAULT_PAGE_WIDTH_MM = 210.0
DEFAULT_PAGE_HEIGHT_MM = 297.0

DEFAULT_TAGLINE = (
    "All Kinds of Industrial & Decorative Painting, Sand & Shot Blasting "
    "& All Types of Labour Job Works."
)


@dataclass(frozen=True)
class LayoutConfig:
    """
    Configuration for quotation layout (immutable).

    Text positions are baselines, matching how a text line is anchored on
    the page: a block whose first line sits at the block top extends
    line_height below it per line.

    Attributes:
        page_width: Page width in mm
        page_height: Page height in mm
        margin_left: Left text edge in mm
        margin_right: Right text edge inset in mm
        header_image_width: Banner width in mm (height follows the aspect)
        header_image_aspect: Banner (width, height) ratio
        text_header_content_start: Content start below the text header
        min_bottom_margin: Smallest bottom reserve, even for a short footer
        footer_gap: Clearance between flowed content and the footer band

    Example:
        >>> config = LayoutConfig()
        >>> config.header_image_height
        16.625
        >>> config.image_header_content_start
        31.625
    """

    # Page dimensions
    page_width: float = DEFAULT_PAGE_WIDTH_MM
    page_height: float = DEFAULT_PAGE_HEIGHT_MM
    margin_left: float = 15.0
    margin_right: float = 15.0

    # Fonts
    font_regular: str = "Helvetica"
    font_bold: str = "Helvetica-Bold"

    # Header: embedded banner image
    header_image_x: float = 10.0
    header_image_y: float = 5.0
    header_image_width: float = 190.0
    header_image_aspect: tuple[int, int] = (800, 70)
    header_image_padding: float = 10.0

    # Header: synthesized text fallback
    text_header_title_y: float = 15.0
    text_header_title_size: float = 18.0
    text_header_tagline_y: float = 22.0
    text_header_tagline_size: float = 10.0
    text_header_content_start: float = 35.0
    tagline: str = DEFAULT_TAGLINE

    # Recipient / subject / salutation
    body_font_size: float = 11.0
    recipient_font_size: float = 12.0
    recipient_line_height: float = 5.0
    to_line_advance: float = 6.0
    kind_attention_value_x: float = 45.0
    subject_space_before: float = 5.0
    subject_text_x: float = 27.0
    subject_width: float = 160.0
    subject_line_height: float = 5.0
    salutation: str = "Dear Sir,"
    salutation_advance: float = 7.0

    # Item table
    table_font_size: float = 10.0
    table_line_width: float = 0.1
    table_cell_padding: float = 1.5

    # Terms
    terms_space_before: float = 10.0
    terms_heading: str = "Term's & Condition :-"
    terms_heading_size: float = 10.0
    terms_heading_advance: float = 5.0
    terms_font_size: float = 9.0
    terms_width: float = 180.0
    terms_line_height: float = 4.0

    # Signature block
    signer_space_before: float = 10.0
    signer_font_size: float = 11.0
    signer_advance: float = 2.0
    signature_width: float = 45.0
    signature_aspect: tuple[int, int] = (289, 68)
    signature_fallback_height: float = 15.0
    signatory_baseline: float = 5.0

    # Footer band
    footer_font_size: float = 9.0
    footer_line_height: float = 4.0
    footer_x: float = 10.0
    footer_text_inset: float = 5.0
    footer_border_padding: float = 6.0
    footer_bottom_offset: float = 5.0
    footer_wrap_inset: float = 25.0
    footer_gap: float = 5.0
    min_bottom_margin: float = 40.0

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.page_width <= 0:
            raise ValueError(f"page_width must be positive: {self.page_width}")
        if self.page_height <= 0:
            raise ValueError(f"page_height must be positive: {self.page_height}")
        if self.available_width <= 0:
            raise ValueError("Margins exceed page width")
        if self.min_bottom_margin < 0:
            raise ValueError(f"min_bottom_margin must be non-negative: {self.min_bottom_margin}")
        if self.min_bottom_margin >= self.page_height - self.text_header_content_start:
            raise ValueError("Bottom margin leaves no room for content")
        if min(self.header_image_aspect) <= 0 or min(self.signature_aspect) <= 0:
            raise ValueError("Image aspect ratios must be positive")

    @property
    def available_width(self) -> float:
        """Width between the left and right text edges."""
        return self.page_width - self.margin_left - self.margin_right

    @property
    def right_edge(self) -> float:
        """X of right-aligned text (e.g. the date)."""
        return self.page_width - self.margin_right

    @property
    def recipient_width(self) -> float:
        """Wrap width of the customer name/address column (left half)."""
        return self.page_width / 2 - 20

    @property
    def header_image_height(self) -> float:
        aspect_w, aspect_h = self.header_image_aspect
        return self.header_image_width * aspect_h / aspect_w

    @property
    def image_header_content_start(self) -> float:
        """Content start below the banner image."""
        return self.header_image_y + self.header_image_height + self.header_image_padding

    @property
    def signature_height(self) -> float:
        aspect_w, aspect_h = self.signature_aspect
        return self.signature_width * aspect_h / aspect_w

    @property
    def footer_width(self) -> float:
        return self.page_width - 2 * self.footer_x

    @property
    def footer_wrap_width(self) -> float:
        return self.page_width - self.footer_wrap_inset
