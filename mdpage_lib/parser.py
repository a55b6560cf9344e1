# --- mdpage_lib/parser.py ---
"""
mdpage_lib/parser.py: Maps markdown-it token streams onto the Block model.

The tokenizer itself is markdown-it-py; this module only decides which tokens
become headings, paragraphs, lists and spacer blocks.
"""
import logging
from typing import List, Optional, Tuple

from markdown_it import MarkdownIt

from .highlight import mark_plugin
from .models import Block, BlockType, ElementConfig, ListItem

log = logging.getLogger("mdpage.parse")

LIST_OPEN_TYPES = ("bullet_list_open", "ordered_list_open")
LIST_CLOSE_TYPES = ("bullet_list_close", "ordered_list_close")
# markdown-it nests list -> list_item -> content, so each list level adds 2.
TOKEN_LEVELS_PER_NESTING = 2

_md = (
    MarkdownIt(
        "default",
        {"html": True, "linkify": True, "breaks": False, "typographer": False},
    )
    .enable("strikethrough")
    .use(mark_plugin)
)


def tokenize(markdown: str):
    """Returns the raw markdown-it block token stream for a source string."""
    return _md.parse(markdown or "")


def parse_markdown_to_blocks(markdown: str) -> List[Block]:
    """Parses a Markdown string into an ordered list of Blocks.

    Blank source lines between two blocks become one EMPTY block each, and
    thematic breaks become EMPTY blocks as well. Token types without a handler
    are skipped.
    """
    tokens = tokenize(markdown)
    log.debug("Tokenizer produced %d block tokens.", len(tokens))
    source_lines = (markdown or "").split("\n")

    blocks: List[Block] = []
    last_line = None
    i = 0
    while i < len(tokens):
        token = tokens[i]
        handler = _BLOCK_HANDLERS.get(token.type)
        if handler is None:
            i += 1
            continue

        block, i = handler(tokens, i)
        if token.map and last_line is not None:
            blocks.extend(_spacer_blocks(source_lines, last_line, token.map[0]))
        blocks.append(block)
        if token.map:
            last_line = _content_end(source_lines, token.map)

    log.debug(
        "Parsed %d blocks: %s", len(blocks), ", ".join(b.type.value for b in blocks)
    )
    return blocks


def _content_end(source_lines: List[str], line_map) -> int:
    """End of a block's map without trailing blank lines (lists absorb them)."""
    start, end = line_map
    while end > start + 1 and not source_lines[end - 1].strip():
        end -= 1
    return end


def _spacer_blocks(source_lines: List[str], start: int, end: int) -> List[Block]:
    """One EMPTY block for every blank source line in [start, end)."""
    blank = sum(1 for line in source_lines[start:end] if not line.strip())
    return [Block(type=BlockType.EMPTY) for _ in range(blank)]


def _inline_after(tokens, i) -> Optional[object]:
    if i + 1 < len(tokens) and tokens[i + 1].type == "inline":
        return tokens[i + 1]
    return None


def _parse_heading(tokens, i) -> Tuple[Block, int]:
    token = tokens[i]
    try:
        level = min(max(int(token.tag[1:]), 1), 6)
    except ValueError:
        level = 1
    block_type = BlockType.heading(level)
    inline = _inline_after(tokens, i)
    block = Block(
        type=block_type,
        content=inline.content if inline else "",
        config=ElementConfig.for_element(block_type.element_key),
        inline_tokens=(inline.children or None) if inline else None,
    )
    return block, i + 1


def _parse_paragraph(tokens, i) -> Tuple[Block, int]:
    inline = _inline_after(tokens, i)
    block = Block(
        type=BlockType.PARAGRAPH,
        content=inline.content if inline else "",
        config=ElementConfig.for_element("paragraph"),
        inline_tokens=(inline.children or None) if inline else None,
    )
    return block, i + 1


def _parse_rule(tokens, i) -> Tuple[Block, int]:
    return Block(type=BlockType.EMPTY), i + 1


def _find_list_close(tokens, i) -> int:
    """Index of the token closing the list opened at i (or len(tokens))."""
    depth = 0
    for j in range(i, len(tokens)):
        if tokens[j].type in LIST_OPEN_TYPES:
            depth += 1
        elif tokens[j].type in LIST_CLOSE_TYPES:
            depth -= 1
            if depth == 0:
                return j
    return len(tokens)


def _list_kind(token) -> Tuple[bool, int]:
    """(ordered, start) of a list-open token."""
    if token.type != "ordered_list_open":
        return False, 1
    try:
        return True, int(token.attrGet("start") or 1)
    except (TypeError, ValueError):
        return True, 1


def _parse_list(tokens, i) -> Tuple[Block, int]:
    """Collects a whole (possibly nested) list group into a single LIST block."""
    ordered, start = _list_kind(tokens[i])
    close = _find_list_close(tokens, i)
    items: List[ListItem] = []
    open_items = []  # stack of [item, has_content]
    open_lists = [(ordered, start, i)]  # enclosing (ordered, start, list_id)

    for index in range(i + 1, close):
        tok = tokens[index]
        if tok.type in LIST_OPEN_TYPES:
            open_lists.append(_list_kind(tok) + (index,))
        elif tok.type in LIST_CLOSE_TYPES:
            open_lists.pop()
        elif tok.type == "list_item_open":
            list_ordered, list_start, list_id = open_lists[-1]
            item = ListItem(
                content="",
                inline_tokens=[],
                level=tok.level,
                ordered=list_ordered,
                start=list_start,
                list_id=list_id,
            )
            items.append(item)
            open_items.append([item, False])
        elif tok.type == "list_item_close":
            if open_items:
                open_items.pop()
        elif tok.type == "inline" and open_items:
            entry = open_items[-1]
            if not entry[1]:
                entry[0].content = tok.content
                entry[0].inline_tokens = tok.children or []
                entry[1] = True
            else:
                items.append(
                    ListItem(
                        content=tok.content,
                        inline_tokens=tok.children or [],
                        level=entry[0].level,
                        continuation=True,
                        ordered=entry[0].ordered,
                        start=entry[0].start,
                        list_id=entry[0].list_id,
                    )
                )

    if items:
        min_level = min(item.level for item in items)
        for item in items:
            item.level = (item.level - min_level) // TOKEN_LEVELS_PER_NESTING

    log.debug(
        "List block (%s) with %d items, levels %s",
        "ordered" if ordered else "bullet",
        len(items),
        [item.level for item in items],
    )
    block = Block(
        type=BlockType.LIST,
        config=ElementConfig.for_element("list"),
        items=items,
        ordered=ordered,
        start=start,
    )
    return block, close + 1


_BLOCK_HANDLERS = {
    "heading_open": _parse_heading,
    "paragraph_open": _parse_paragraph,
    "bullet_list_open": _parse_list,
    "ordered_list_open": _parse_list,
    "hr": _parse_rule,
}
