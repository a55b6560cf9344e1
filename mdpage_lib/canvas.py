# --- mdpage_lib/canvas.py ---
"""
mdpage_lib/canvas.py: The canvas surface the layout engine draws onto.

CanvasSurface and TextRunHandle describe what the engine needs from a host
document (pages, text runs, range styling, measurement). SVGCanvas is an
in-memory implementation that measures text with Pillow fonts and renders all
pages side by side into a single SVG document.
"""
import html
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Any, List, Optional, Tuple

from .constants import COLOR_HEX, DEFAULT_FONT_FAMILY, LINE_HEIGHT_FACTOR

log = logging.getLogger("mdpage.canvas")

AUTO_RESIZE_WIDTH_AND_HEIGHT = "WIDTH_AND_HEIGHT"
AUTO_RESIZE_HEIGHT = "HEIGHT"
AUTO_RESIZE_NONE = "NONE"

STYLE_ATTRIBUTES = ("font_name", "font_size", "decoration", "indent", "fill", "hyperlink")
DECORATIONS = (None, "STRIKETHROUGH", "UNDERLINE")
BASELINE_RATIO = 0.8  # Baseline position within a line box
_WORD_RE = re.compile(r"\S+\s*|\s+")


# --- CANVAS SURFACE CONTRACT ---
class TextRunHandle(ABC):
    """A single styled text object; offsets are character positions."""

    x: float
    y: float
    auto_resize: str

    @property
    @abstractmethod
    def characters(self) -> str:
        pass

    @characters.setter
    @abstractmethod
    def characters(self, text: str) -> None:
        pass

    @abstractmethod
    def insert_text(self, index: int, text: str) -> None:
        pass

    @abstractmethod
    def set_style_range(self, attribute: str, start: int, end: int, value: Any) -> None:
        pass

    @abstractmethod
    def measure(self) -> Tuple[float, float]:
        """Returns the rendered (width, height) of the run."""
        pass

    @abstractmethod
    def resize(self, width: float, height: float) -> None:
        pass


class CanvasSurface(ABC):
    """The host document that owns pages and text runs."""

    @abstractmethod
    def create_page(self, width: float, height: float, x: float, y: float, background: str):
        pass

    @abstractmethod
    def create_text_run(self, font_size: float, x: float, y: float) -> TextRunHandle:
        pass

    @abstractmethod
    def append_child(self, page, run: TextRunHandle) -> None:
        pass

    @abstractmethod
    def scroll_into_view(self, pages) -> None:
        pass

    @abstractmethod
    def selected_text_run(self) -> Optional[TextRunHandle]:
        """The single selected text run, if exactly one is selected."""
        pass


# --- SVG IMPLEMENTATION ---
@dataclass(frozen=True)
class _CharStyle:
    family: str
    style: str
    size: float
    decoration: Optional[str] = None
    fill: str = COLOR_HEX["TEXT"]
    hyperlink: Optional[str] = None


@dataclass
class _VisualLine:
    indent: float
    segments: List[Tuple[str, _CharStyle]]
    width: float
    height: float


class SVGPage:
    """A fixed-size page frame holding text runs."""

    def __init__(self, name, width, height, x, y, background):
        self.name = name
        self.width, self.height = width, height
        self.x, self.y = x, y
        self.background = background
        self.children: List["SVGTextRun"] = []


class SVGTextRun(TextRunHandle):
    """A text run with per-character styling and Pillow-based measurement."""

    def __init__(self, font_provider, font_size, x, y, family=DEFAULT_FONT_FAMILY):
        if font_size <= 0:
            raise ValueError(f"Invalid font size: {font_size}")
        self.font_provider = font_provider
        self.x, self.y = x, y
        self.auto_resize = AUTO_RESIZE_WIDTH_AND_HEIGHT
        self.parent: Optional[SVGPage] = None
        self._default = _CharStyle(family=family, style="Regular", size=font_size)
        self._chars: List[str] = []
        self._styles: List[_CharStyle] = []
        self._indents: List[float] = []
        self._fixed_width: Optional[float] = None
        self._fixed_height: Optional[float] = None
        self._layout_cache: Optional[List[_VisualLine]] = None

    # --- Content ---
    @property
    def characters(self) -> str:
        return "".join(self._chars)

    @characters.setter
    def characters(self, text: str) -> None:
        """Replaces the whole content; styling resets to the run defaults."""
        self._chars = list(text)
        self._styles = [self._default] * len(self._chars)
        self._indents = [0.0] * len(self._chars)
        self._layout_cache = None

    def insert_text(self, index: int, text: str) -> None:
        """Inserts text; new characters take the style of the preceding one."""
        if not 0 <= index <= len(self._chars):
            raise ValueError(f"Insert index {index} outside run of length {len(self._chars)}")
        style = self._styles[index - 1] if index > 0 else self._default
        indent = self._indents[index - 1] if index > 0 else 0.0
        self._chars[index:index] = list(text)
        self._styles[index:index] = [style] * len(text)
        self._indents[index:index] = [indent] * len(text)
        self._layout_cache = None

    def set_style_range(self, attribute: str, start: int, end: int, value: Any) -> None:
        if attribute not in STYLE_ATTRIBUTES:
            raise ValueError(f"Unknown style attribute: {attribute}")
        if not 0 <= start < end <= len(self._chars):
            raise ValueError(
                f"Invalid range {start}-{end} for run of length {len(self._chars)}"
            )

        if attribute == "indent":
            self._set_indent(start, end, float(value or 0))
        else:
            changes = self._style_changes(attribute, value)
            for i in range(start, end):
                self._styles[i] = replace(self._styles[i], **changes)
        self._layout_cache = None

    def _style_changes(self, attribute: str, value: Any) -> dict:
        if attribute == "font_name":
            family, style = value
            return {"family": family, "style": style}
        if attribute == "font_size":
            if not value or value <= 0:
                raise ValueError(f"Invalid font size: {value}")
            return {"size": value}
        if attribute == "decoration":
            if value not in DECORATIONS:
                raise ValueError(f"Unknown text decoration: {value}")
            return {"decoration": value}
        if attribute == "fill":
            return {"fill": value}
        return {"hyperlink": value}

    def _set_indent(self, start: int, end: int, amount: float) -> None:
        """Paragraph indent applies to every whole line touched by the range."""
        text = self.characters
        line_start = text.rfind("\n", 0, start) + 1
        line_end = text.find("\n", end - 1)
        line_end = len(text) if line_end == -1 else line_end + 1
        for i in range(line_start, line_end):
            self._indents[i] = amount

    # --- Geometry ---
    def resize(self, width: float, height: float) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Cannot resize text run to {width}x{height}")
        self._fixed_width = width
        self._fixed_height = height
        if self.auto_resize == AUTO_RESIZE_WIDTH_AND_HEIGHT:
            self.auto_resize = AUTO_RESIZE_NONE
        self._layout_cache = None

    @property
    def width(self) -> float:
        return self.measure()[0]

    @property
    def height(self) -> float:
        return self.measure()[1]

    def measure(self) -> Tuple[float, float]:
        lines = self._layout()
        if self.auto_resize == AUTO_RESIZE_WIDTH_AND_HEIGHT or self._fixed_width is None:
            width = max((line.indent + line.width for line in lines), default=0.0)
        else:
            width = self._fixed_width
        if self.auto_resize == AUTO_RESIZE_NONE and self._fixed_height is not None:
            height = self._fixed_height
        else:
            height = sum(line.height for line in lines)
        return width, height

    def _text_width(self, text: str, style: _CharStyle) -> float:
        return self.font_provider.measure(text, style.family, style.style, style.size)

    def _logical_lines(self) -> List[Tuple[float, List[Tuple[str, _CharStyle]], _CharStyle]]:
        """Splits content at newlines into (indent, segments, line style)."""
        lines = []
        segments: List[Tuple[str, _CharStyle]] = []
        line_start = 0
        line_style = self._default
        for i, char in enumerate(self._chars):
            style = self._styles[i]
            if char == "\n":
                indent = self._indents[line_start] if line_start < i else self._indents[i]
                lines.append((indent, segments, style))
                segments, line_start, line_style = [], i + 1, style
                continue
            if segments and segments[-1][1] == style:
                segments[-1] = (segments[-1][0] + char, style)
            else:
                segments.append((char, style))
        indent = self._indents[line_start] if line_start < len(self._chars) else 0.0
        lines.append((indent, segments, line_style))
        return lines

    def _layout(self) -> List[_VisualLine]:
        if self._layout_cache is not None:
            return self._layout_cache

        wrap_width = None
        if self.auto_resize != AUTO_RESIZE_WIDTH_AND_HEIGHT and self._fixed_width:
            wrap_width = self._fixed_width

        visual: List[_VisualLine] = []
        for indent, segments, line_style in self._logical_lines():
            if wrap_width is None:
                visual.append(self._visual_line(indent, segments, line_style))
            else:
                visual.extend(self._wrap(indent, segments, line_style, wrap_width - indent))
        self._layout_cache = visual
        return visual

    def _visual_line(self, indent, segments, line_style) -> _VisualLine:
        width = sum(self._text_width(text, style) for text, style in segments)
        size = max((style.size for _, style in segments), default=line_style.size)
        return _VisualLine(indent, segments, width, size * LINE_HEIGHT_FACTOR)

    def _wrap(self, indent, segments, line_style, available) -> List[_VisualLine]:
        """Greedy word wrap; a word wider than the line gets a line of its own."""
        available = max(available, 1.0)
        lines: List[_VisualLine] = []
        current: List[Tuple[str, _CharStyle]] = []
        current_width = 0.0
        for text, style in segments:
            for word in _WORD_RE.findall(text):
                word_width = self._text_width(word, style)
                if current and current_width + self._text_width(word.rstrip(), style) > available:
                    lines.append(self._visual_line(indent, current, line_style))
                    current, current_width = [], 0.0
                    if not word.strip():
                        continue
                if current and current[-1][1] == style:
                    current[-1] = (current[-1][0] + word, style)
                else:
                    current.append((word, style))
                current_width += word_width
        lines.append(self._visual_line(indent, current, line_style))
        return lines

    # --- Rendering ---
    def to_svg(self, offset_x: float = 0.0, offset_y: float = 0.0) -> str:
        x0, top = self.x + offset_x, self.y + offset_y
        out = [f'<text font-family="{html.escape(self._default.family)}">']
        for line in self._layout():
            baseline = top + line.height * BASELINE_RATIO
            out.append(f'<tspan x="{x0 + line.indent:.2f}" y="{baseline:.2f}">')
            out.extend(_segment_svg(text, style) for text, style in line.segments)
            out.append("</tspan>")
            top += line.height
        out.append("</text>")
        return "".join(out)


def _segment_svg(text: str, style: _CharStyle) -> str:
    attrs = [f'font-size="{style.size:g}"', f'fill="{html.escape(style.fill)}"']
    if style.family != DEFAULT_FONT_FAMILY:
        attrs.append(f'font-family="{html.escape(style.family)}"')
    if "Bold" in style.style:
        attrs.append('font-weight="bold"')
    if "Italic" in style.style:
        attrs.append('font-style="italic"')
    if style.decoration == "STRIKETHROUGH":
        attrs.append('text-decoration="line-through"')
    elif style.decoration == "UNDERLINE":
        attrs.append('text-decoration="underline"')
    span = f'<tspan {" ".join(attrs)} xml:space="preserve">{html.escape(text)}</tspan>'
    if style.hyperlink:
        return f'<a href="{html.escape(style.hyperlink)}">{span}</a>'
    return span


class SVGCanvas(CanvasSurface):
    """An in-memory canvas rendering pages side by side into one SVG."""

    def __init__(self, font_provider, family: str = DEFAULT_FONT_FAMILY):
        self.font_provider = font_provider
        self.family = family
        self.pages: List[SVGPage] = []
        self.loose_runs: List[SVGTextRun] = []
        self.selection: List[Any] = []
        self.viewport: Optional[Tuple[float, float, float, float]] = None

    def create_page(self, width, height, x, y, background=COLOR_HEX["PAGE_BACKGROUND"]):
        if width <= 0 or height <= 0:
            raise ValueError(f"Invalid page size {width}x{height}")
        page = SVGPage(f"Page {len(self.pages) + 1}", width, height, x, y, background)
        self.pages.append(page)
        log.debug("Created %s at x=%.1f (%.1fx%.1f)", page.name, x, width, height)
        return page

    def create_text_run(self, font_size, x, y) -> SVGTextRun:
        run = SVGTextRun(self.font_provider, font_size, x, y, self.family)
        self.loose_runs.append(run)
        return run

    def append_child(self, page: SVGPage, run: SVGTextRun) -> None:
        if run.parent is not None:
            run.parent.children.remove(run)
        elif run in self.loose_runs:
            self.loose_runs.remove(run)
        page.children.append(run)
        run.parent = page

    def scroll_into_view(self, pages) -> None:
        pages = list(pages)
        if not pages:
            return
        self.viewport = (
            min(p.x for p in pages),
            min(p.y for p in pages),
            max(p.x + p.width for p in pages),
            max(p.y + p.height for p in pages),
        )
        log.debug("Viewport set to %s", self.viewport)

    def select(self, nodes) -> None:
        self.selection = list(nodes)

    def create_selected_run(self, font_size, x=0.0, y=0.0) -> SVGTextRun:
        """A free-standing run that is also the sole selection (update target)."""
        run = self.create_text_run(font_size, x, y)
        self.select([run])
        return run

    def selected_text_run(self) -> Optional[SVGTextRun]:
        if len(self.selection) == 1 and isinstance(self.selection[0], SVGTextRun):
            return self.selection[0]
        return None

    @property
    def run_count(self) -> int:
        return len(self.loose_runs) + sum(len(p.children) for p in self.pages)

    def _bounds(self) -> Tuple[float, float, float, float]:
        if self.viewport:
            return self.viewport
        boxes = [(p.x, p.y, p.x + p.width, p.y + p.height) for p in self.pages]
        for run in self.loose_runs:
            width, height = run.measure()
            boxes.append((run.x, run.y, run.x + width, run.y + height))
        if not boxes:
            return 0.0, 0.0, 0.0, 0.0
        return (
            min(b[0] for b in boxes),
            min(b[1] for b in boxes),
            max(b[2] for b in boxes),
            max(b[3] for b in boxes),
        )

    def render(self) -> str:
        """Generates the SVG document for every page and free-standing run."""
        min_x, min_y, max_x, max_y = self._bounds()
        width, height = max_x - min_x, max_y - min_y
        svg = [
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{width:.0f}" '
            f'height="{height:.0f}" viewBox="{min_x:.2f} {min_y:.2f} {width:.2f} {height:.2f}">'
        ]
        for page in self.pages:
            svg.append(f'<g id="{html.escape(page.name.replace(" ", "-").lower())}">')
            svg.append(
                f'<rect x="{page.x:.2f}" y="{page.y:.2f}" width="{page.width:.2f}" '
                f'height="{page.height:.2f}" fill="{html.escape(page.background)}" />'
            )
            svg.extend(run.to_svg(page.x, page.y) for run in page.children)
            svg.append("</g>")
        svg.extend(run.to_svg() for run in self.loose_runs)
        svg.append("</svg>")
        log.info("SVG rendering complete (%d pages).", len(self.pages))
        return "\n".join(svg)
