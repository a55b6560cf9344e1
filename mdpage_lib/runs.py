# --- mdpage_lib/runs.py ---
"""
mdpage_lib/runs.py: Turns resolved inline parts into styled parts and merges
them into the minimal set of per-attribute style ranges for a text run.

Each attribute is coalesced on its own pass: a font-size boundary need not be
a decoration boundary.
"""
import logging
import re
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

from .constants import LIST_BULLET, SCRIPT_SCALE
from .inline import parse_inline_tokens
from .models import Block, BlockType, ElementConfig, InlinePart, StyledPart, StyleRange

log = logging.getLogger("mdpage.runs")

FONT_STYLE_NAMES = {
    (False, False): "Regular",
    (True, False): "Bold",
    (False, True): "Italic",
    (True, True): "Bold Italic",
}
STRIKETHROUGH = "STRIKETHROUGH"
UNDERLINE = "UNDERLINE"

_ABSOLUTE_URL_RE = re.compile(r"^[a-zA-Z][a-zA-Z\d+\-.]*:")
_UNSET = object()


# --- STYLE RESOLUTION ---
def font_style_name(bold: bool, italic: bool) -> str:
    return FONT_STYLE_NAMES[(bool(bold), bool(italic))]


def decoration_for(part: InlinePart) -> Optional[str]:
    """Single text decoration for a part; strikethrough wins over underline."""
    if part.strikethrough:
        return STRIKETHROUGH
    if part.underline:
        return UNDERLINE
    return None


def scaled_font_size(font_size: float, part: InlinePart) -> float:
    """Sub/superscript text is drawn at 70% of the block size, rounded half up."""
    if part.subscript or part.superscript:
        return int(font_size * SCRIPT_SCALE + 0.5)
    return font_size


def is_absolute_url(url: Optional[str]) -> bool:
    return bool(url) and bool(_ABSOLUTE_URL_RE.match(url))


def style_parts(
    inline_parts: Iterable[InlinePart], config: ElementConfig, indent: float = 0
) -> List[StyledPart]:
    """Resolves InlineParts against the block config into StyledParts."""
    return [
        StyledPart(
            text=p.text,
            font_size=scaled_font_size(config.font_size, p),
            font_style=font_style_name(p.bold or config.is_bold, p.italic or config.is_italic),
            decoration=decoration_for(p),
            highlight=p.highlight,
            link=p.link,
            indent=indent,
        )
        for p in inline_parts
        if p.text
    ]


def plain_part(text: str, config: ElementConfig, indent: float = 0) -> StyledPart:
    """A part carrying only the block's own styling (markers, separators)."""
    return StyledPart(
        text=text,
        font_size=config.font_size,
        font_style=font_style_name(config.is_bold, config.is_italic),
        indent=indent,
    )


# --- BLOCK COMPOSITION ---
def list_marker(block: Block, index: int, counters: Dict[int, int]) -> str:
    """Marker for block.items[index], taken from the item's own (sub-)list.

    Each ordered sub-list keeps its own counter, keyed by list_id, starting
    at that sub-list's start number.
    """
    item = block.items[index]
    if item.continuation:
        return ""
    if not item.ordered:
        return (block.config.prefix if block.config else None) or LIST_BULLET
    number = counters.get(item.list_id, item.start)
    counters[item.list_id] = number + 1
    return f"{number}. "


def list_parts(block: Block) -> List[StyledPart]:
    """All items of a list as one newline-joined part sequence."""
    config = block.config or ElementConfig.for_element("list")
    parts: List[StyledPart] = []
    counters: Dict[int, int] = {}
    last = len(block.items) - 1
    for index, item in enumerate(block.items):
        indent = item.level * config.subitem_indent if item.level > 0 else 0
        marker = list_marker(block, index, counters)
        if marker:
            parts.append(plain_part(marker, config, indent))
        parts.extend(style_parts(parse_inline_tokens(item.inline_tokens), config, indent))
        if index < last:
            parts.append(plain_part("\n", config, indent))
    return parts


def block_parts(block: Block) -> List[StyledPart]:
    """Styled parts making up the text run of a single block."""
    if block.type == BlockType.EMPTY:
        return []
    if block.type == BlockType.LIST:
        return list_parts(block)
    config = block.config or ElementConfig.for_element("paragraph")
    if block.inline_tokens:
        inline_parts = parse_inline_tokens(block.inline_tokens)
    else:
        inline_parts = [InlinePart(text=block.content)]
    return style_parts(inline_parts, config)


def compose_text(parts: Iterable[StyledPart]) -> str:
    return "".join(p.text for p in parts)


# --- RUN MERGER ---
def merge_ranges(units: Iterable[Tuple[str, Any]]) -> List[StyleRange]:
    """Merges (text, value) units into maximal ranges over cumulative offsets.

    A new range starts only where a unit's value differs from the value of
    the preceding non-empty unit.
    """
    ranges: List[StyleRange] = []
    offset = 0
    current, start = _UNSET, 0
    for text, value in units:
        if not text:
            continue
        if current is _UNSET:
            current, start = value, offset
        elif value != current:
            ranges.append(StyleRange(start, offset, current))
            current, start = value, offset
        offset += len(text)
    if current is not _UNSET:
        ranges.append(StyleRange(start, offset, current))
    return ranges


def coalesce_ranges(ranges: Iterable[StyleRange]) -> List[StyleRange]:
    """Joins touching ranges with equal values; a maximal list is returned as is."""
    merged: List[StyleRange] = []
    for r in ranges:
        if merged and merged[-1].end == r.start and merged[-1].value == r.value:
            merged[-1] = StyleRange(merged[-1].start, r.end, r.value)
        else:
            merged.append(r)
    return merged


def style_ranges(
    parts: Iterable[StyledPart],
    attribute: Union[str, Callable[[StyledPart], Any]],
    keep_noop: bool = False,
) -> List[StyleRange]:
    """Maximal ranges of one attribute over a part sequence.

    Ranges whose value is a no-op (None, False, 0) are dropped unless
    keep_noop is set.
    """
    getter = attribute if callable(attribute) else (lambda p: getattr(p, attribute))
    ranges = merge_ranges((p.text, getter(p)) for p in parts)
    if keep_noop:
        return ranges
    return [r for r in ranges if r.value not in (None, False, 0)]


def apply_style_ranges(
    run, parts: List[StyledPart], family: str, highlight_color: str, link_color: str
) -> Dict[str, int]:
    """Issues the merged style ranges of `parts` against a run's characters.

    The run's characters must already equal compose_text(parts). Link fills
    are applied after highlight fills so a highlighted link keeps the link
    color. Returns the number of styling calls per attribute.
    """
    counts: Dict[str, int] = {}

    def issue(attribute: str, ranges: List[StyleRange], value_of=lambda v: v):
        for r in ranges:
            run.set_style_range(attribute, r.start, r.end, value_of(r.value))
        counts[attribute] = counts.get(attribute, 0) + len(ranges)

    issue("font_size", style_ranges(parts, "font_size", keep_noop=True))
    issue(
        "font_name",
        style_ranges(parts, "font_style", keep_noop=True),
        lambda style: (family, style),
    )
    issue("indent", style_ranges(parts, "indent"))
    issue("decoration", style_ranges(parts, "decoration"))
    issue("fill", style_ranges(parts, "highlight"), lambda _: highlight_color)

    links = style_ranges(parts, lambda p: p.link if is_absolute_url(p.link) else None)
    issue("hyperlink", links)
    issue("fill", links, lambda _: link_color)

    log.debug("Applied style ranges: %s", counts)
    return counts
