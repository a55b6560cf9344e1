# --- mdpage_lib/api.py ---
"""
mdpage_lib/api.py: The build message boundary.

A build message carries Markdown source plus optional page settings. The
handler decides between updating the selected text run in place and creating
fresh pages, runs the pipeline, and answers with a single notification dict.
This is the only place where faults from the canvas or the engine are caught.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from .config import number_setting
from .constants import (
    COLOR_HEX,
    DEFAULT_DPI,
    DEFAULT_FONT_FAMILY,
    DEFAULT_PADDING_PERCENT,
    DEFAULT_PAGE_FORMAT,
    FONT_FAMILIES,
)
from .dimensions import get_page_dimensions
from .fonts import load_fonts
from .layout import RenderOptions, create_pages, update_text_container
from .models import BlockType
from .parser import parse_markdown_to_blocks

log = logging.getLogger("mdpage.api")

BUILD_COMMANDS = ("build", "create-page")
MODE_PAGES = "pages"
MODE_UPDATE = "update"


@dataclass
class BuildRequest:
    markdown: str
    dpi: float = DEFAULT_DPI
    page_format: str = DEFAULT_PAGE_FORMAT
    padding: float = DEFAULT_PADDING_PERCENT
    highlight_color: str = COLOR_HEX["HIGHLIGHT"]
    link_color: str = COLOR_HEX["LINK"]
    page_background: str = COLOR_HEX["PAGE_BACKGROUND"]
    family: str = DEFAULT_FONT_FAMILY


def is_build_message(message) -> bool:
    if not isinstance(message, dict):
        return False
    return message.get("command", message.get("type")) in BUILD_COMMANDS


def _first(message: dict, *keys):
    for key in keys:
        if message.get(key) is not None:
            return message[key]
    return None


def _positive_number(value, default: float, name: str, allow_zero: bool = False) -> float:
    if value is None:
        return default
    if isinstance(value, bool):
        log.debug("Ignoring boolean %s=%r, using %s.", name, value, default)
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        log.debug("Ignoring non-numeric %s=%r, using %s.", name, value, default)
        return default
    if number < 0 or (number == 0 and not allow_zero):
        log.debug("Ignoring out-of-range %s=%r, using %s.", name, value, default)
        return default
    return number


def _color(value, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def normalize_request(message: dict, settings: Optional[dict] = None) -> BuildRequest:
    """Builds a BuildRequest from a message, filling gaps from settings.

    Message fields win over settings, settings win over built-in defaults.
    Raises:
        ValueError: If the Markdown source is not a string.
    """
    settings = settings or {}
    page = settings.get("Page", {})
    colors = settings.get("Colors", {})
    fonts = settings.get("Fonts", {})

    markdown = _first(message, "markdownSource", "markdown")
    if markdown is None:
        markdown = ""
    if not isinstance(markdown, str):
        raise ValueError("markdownSource must be a string")

    default_dpi = number_setting(settings, "Page", "dpi", DEFAULT_DPI)
    default_padding = number_setting(
        settings, "Page", "padding", DEFAULT_PADDING_PERCENT, allow_zero=True
    )
    page_format = _first(message, "pageFormat", "format") or page.get(
        "page_format", DEFAULT_PAGE_FORMAT
    )

    return BuildRequest(
        markdown=markdown,
        dpi=_positive_number(message.get("dpi"), default_dpi, "dpi"),
        page_format=page_format,
        padding=_positive_number(
            _first(message, "paddingPercent", "padding"),
            default_padding,
            "padding",
            allow_zero=True,
        ),
        highlight_color=_color(
            message.get("highlightColor"), colors.get("highlight", COLOR_HEX["HIGHLIGHT"])
        ),
        link_color=_color(message.get("linkColor"), colors.get("link", COLOR_HEX["LINK"])),
        page_background=colors.get("page_background", COLOR_HEX["PAGE_BACKGROUND"]),
        family=fonts.get("family") or DEFAULT_FONT_FAMILY,
    )


def build(request: BuildRequest, canvas, font_provider) -> dict:
    """Runs the full pipeline for one request against a canvas surface."""
    weights = FONT_FAMILIES[0]["weights"]
    report = load_fonts(font_provider, [{"name": request.family, "weights": weights}])

    blocks = parse_markdown_to_blocks(request.markdown)
    options = RenderOptions(
        family=request.family,
        highlight_color=request.highlight_color,
        link_color=request.link_color,
        page_background=request.page_background,
    )

    target = canvas.selected_text_run()
    if target is not None:
        log.info("Updating the selected text run in place.")
        update_text_container(target, blocks, options)
        mode, pages, runs = MODE_UPDATE, 0, 1
    else:
        dims = get_page_dimensions(request.dpi, request.page_format, request.padding)
        log.info(
            "Creating pages (%s, %.0f dpi, %.1fx%.1f px).",
            request.page_format,
            request.dpi,
            dims.PAGE_WIDTH,
            dims.PAGE_HEIGHT,
        )
        state = create_pages(blocks, canvas, dims, options)
        mode, pages = MODE_PAGES, len(state.all_pages)
        runs = sum(1 for b in blocks if b.type != BlockType.EMPTY)

    return {
        "type": "done",
        "mode": mode,
        "pages": pages,
        "runs": runs,
        "fontFailures": [f"{family} {weight}" for family, weight, _ in report.failures],
    }


def handle_message(message, canvas, font_provider, settings: Optional[dict] = None) -> dict:
    """Answers one build message with a 'done', 'error' or 'ignored' notification."""
    if not is_build_message(message):
        log.debug("Ignoring message: %r", message)
        return {"type": "ignored"}

    try:
        request = normalize_request(message, settings)
        return build(request, canvas, font_provider)
    except Exception as e:
        log.error("Build failed: %s", e, exc_info=True)
        return {"type": "error", "message": str(e)}
