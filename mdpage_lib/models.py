# --- mdpage_lib/models.py ---
"""
mdpage_lib/models.py: Data models shared by the parsing, styling and layout stages.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Tuple

from .constants import MARKDOWN_ELEMENTS, SUBITEM_INDENT


class BlockType(str, Enum):
    """The closed set of structural block kinds produced by the parser."""

    HEADING1 = "heading1"
    HEADING2 = "heading2"
    HEADING3 = "heading3"
    HEADING4 = "heading4"
    HEADING5 = "heading5"
    HEADING6 = "heading6"
    PARAGRAPH = "paragraph"
    LIST = "list"
    EMPTY = "empty"

    @property
    def is_heading(self) -> bool:
        return self.value.startswith("heading")

    @property
    def element_key(self) -> str:
        """The MARKDOWN_ELEMENTS key for this block type ('h1', 'list', ...)."""
        if self.is_heading:
            return f"h{self.value[-1]}"
        return self.value

    @classmethod
    def heading(cls, level: int) -> "BlockType":
        return cls(f"heading{level}")


@dataclass(frozen=True)
class ElementConfig:
    """Resolved style configuration for one block type."""

    font_size: float
    style: str  # "regular" | "bold" | "italic" | "bold-italic"
    margin_top: float
    margin_bottom: float
    prefix: Optional[str] = None
    subitem_indent: float = SUBITEM_INDENT

    @property
    def is_bold(self) -> bool:
        return self.style in ("bold", "bold-italic")

    @property
    def is_italic(self) -> bool:
        return self.style in ("italic", "bold-italic")

    @classmethod
    def for_element(cls, key: str) -> "ElementConfig":
        return cls(**MARKDOWN_ELEMENTS.get(key, MARKDOWN_ELEMENTS["paragraph"]))


@dataclass
class ListItem:
    """One line of a list block."""

    content: str
    inline_tokens: List[Any]
    level: int
    continuation: bool = False  # Extra paragraph of the previous item, no marker
    ordered: bool = False  # Kind of the (sub-)list the item belongs to
    start: int = 1
    list_id: int = 0  # Items of the same (sub-)list share one numbering


@dataclass
class Block:
    """One structural unit of the document."""

    type: BlockType
    content: str = ""
    config: Optional[ElementConfig] = None
    inline_tokens: Optional[List[Any]] = None
    items: List[ListItem] = field(default_factory=list)
    ordered: bool = False
    start: int = 1


@dataclass(frozen=True)
class InlinePart:
    """One atomically-styled span of inline text."""

    text: str
    bold: bool = False
    italic: bool = False
    strikethrough: bool = False
    underline: bool = False
    highlight: bool = False
    subscript: bool = False
    superscript: bool = False
    link: Optional[str] = None


@dataclass(frozen=True)
class StyledPart:
    """An InlinePart resolved against its block's element configuration."""

    text: str
    font_size: float
    font_style: str = "Regular"
    decoration: Optional[str] = None  # "STRIKETHROUGH" | "UNDERLINE"
    highlight: bool = False
    link: Optional[str] = None
    indent: float = 0


@dataclass(frozen=True)
class StyleRange:
    """A maximal [start, end) character range sharing one attribute value."""

    start: int
    end: int
    value: Any


@dataclass(frozen=True)
class PageDimensions:
    """Page geometry in device pixels for one layout pass."""

    PAGE_WIDTH: float
    PAGE_HEIGHT: float
    PADDING: float
    CONTENT_WIDTH: float
    PAGE_GAP: float

    @property
    def usable_height(self) -> float:
        return self.PAGE_HEIGHT - 2 * self.PADDING


@dataclass(frozen=True)
class LayoutState:
    """Cursor state of one pagination pass; replaced, never mutated."""

    y_offset: float
    page_number: int
    x_position: float
    current_page: Any
    all_pages: Tuple[Any, ...] = ()
