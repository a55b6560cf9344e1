# --- mdpage_lib/dimensions.py ---
"""
mdpage_lib/dimensions.py: Page geometry in pixels for a named page format.
"""
import logging

from .constants import (
    DEFAULT_DPI,
    DEFAULT_PADDING_PERCENT,
    DEFAULT_PAGE_FORMAT,
    MM_PER_INCH,
    PAGE_FORMATS,
    PAGE_GAP,
)
from .models import PageDimensions

log = logging.getLogger("mdpage.dimensions")


def to_inches(value: float, unit: str) -> float:
    """Converts a page measure in 'mm' or 'inch' to inches."""
    return value / MM_PER_INCH if unit == "mm" else value


def resolve_page_format(page_format) -> dict:
    """Looks up a named page format, falling back to letter for unknown names."""
    key = page_format.strip().lower() if isinstance(page_format, str) else None
    if key not in PAGE_FORMATS:
        log.debug("Unknown page format %r, using '%s'.", page_format, DEFAULT_PAGE_FORMAT)
        key = DEFAULT_PAGE_FORMAT
    return PAGE_FORMATS[key]


def get_page_dimensions(
    dpi: float = DEFAULT_DPI,
    page_format: str = DEFAULT_PAGE_FORMAT,
    padding: float = DEFAULT_PADDING_PERCENT,
) -> PageDimensions:
    """Computes page geometry in pixels from DPI, format name and padding percent.

    Padding is a percentage of the smaller page side.
    """
    fmt = resolve_page_format(page_format)
    page_width = to_inches(fmt["width"], fmt["unit"]) * dpi
    page_height = to_inches(fmt["height"], fmt["unit"]) * dpi
    pad = (padding / 100) * min(page_width, page_height)
    return PageDimensions(
        PAGE_WIDTH=page_width,
        PAGE_HEIGHT=page_height,
        PADDING=pad,
        CONTENT_WIDTH=page_width - 2 * pad,
        PAGE_GAP=PAGE_GAP,
    )
