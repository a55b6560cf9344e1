# --- mdpage_lib/inline.py ---
"""
mdpage_lib/inline.py: Flattens a markdown-it inline token tree into InlineParts.

The walk is a recursive descent over the flat open/close token sequence: every
span opener is matched with its closer by depth counting, and the enclosed
tokens are walked again with the span's style OR-ed into the context. Context
values are immutable, so sibling spans never see each other's styles.
"""
import logging
import re
from dataclasses import replace
from typing import Callable, List, Optional, Tuple

from .models import InlinePart

log = logging.getLogger("mdpage.inline")

# The context of the walk is an InlinePart template whose text is filled in
# for each emitted span.
DEFAULT_CONTEXT = InlinePart(text="")

# Markdown span tokens: opener -> (closer, flags turned on inside the span)
SPAN_TOKENS = {
    "strong_open": ("strong_close", {"bold": True}),
    "em_open": ("em_close", {"italic": True}),
    "s_open": ("s_close", {"strikethrough": True}),
    "mark_open": ("mark_close", {"highlight": True}),
}

# Raw inline HTML tags understood as style spans.
HTML_TAG_FLAGS = {
    "u": {"underline": True},
    "ins": {"underline": True},
    "sub": {"subscript": True},
    "sup": {"superscript": True},
    "mark": {"highlight": True},
    "s": {"strikethrough": True},
    "del": {"strikethrough": True},
    "strike": {"strikethrough": True},
    "b": {"bold": True},
    "strong": {"bold": True},
    "i": {"italic": True},
    "em": {"italic": True},
}

_HTML_TAG_RE = re.compile(r"^<\s*(/?)\s*([a-zA-Z][a-zA-Z0-9]*)\b[^>]*?(/?)\s*>$")


def parse_inline_tokens(inline_tokens) -> List[InlinePart]:
    """Resolves inline tokens into an ordered list of non-empty InlineParts.

    Always returns at least one part: an empty, unstyled placeholder when the
    block has no visible text.
    """
    if not inline_tokens:
        return [DEFAULT_CONTEXT]
    parts = [p for p in _walk(list(inline_tokens), DEFAULT_CONTEXT) if p.text]
    return parts or [DEFAULT_CONTEXT]


def plain_text(parts: List[InlinePart]) -> str:
    """The visible text of a resolved part list."""
    return "".join(p.text for p in parts)


def _parse_html_tag(content: str) -> Tuple[Optional[str], bool, bool]:
    """Returns (tag name, is closing tag, is self-closing) for an inline tag."""
    match = _HTML_TAG_RE.match((content or "").strip())
    if not match:
        return None, False, False
    closing, name, self_closing = match.groups()
    return name.lower(), bool(closing), bool(self_closing)


def _find_close(
    tokens, i: int, is_open: Callable[[object], bool], is_close: Callable[[object], bool]
) -> int:
    """Index of the token closing the span opened at i.

    Returns len(tokens) when the span is never closed, so an unbalanced
    opener simply extends to the end of the stream.
    """
    depth = 1
    for j in range(i + 1, len(tokens)):
        if is_open(tokens[j]):
            depth += 1
        elif is_close(tokens[j]):
            depth -= 1
            if depth == 0:
                return j
    log.debug("Unclosed inline span '%s'; consuming to end of block.", tokens[i].type)
    return len(tokens)


def _html_matcher(tag: str, closing: bool) -> Callable[[object], bool]:
    def matches(token) -> bool:
        if token.type != "html_inline":
            return False
        name, is_closing, self_closing = _parse_html_tag(token.content)
        return name == tag and is_closing == closing and not self_closing

    return matches


def _walk(tokens, context: InlinePart) -> List[InlinePart]:
    parts: List[InlinePart] = []
    i = 0
    while i < len(tokens):
        token = tokens[i]
        kind = token.type

        if kind in ("text", "code_inline"):
            parts.append(replace(context, text=token.content))
        elif kind == "softbreak":
            parts.append(replace(context, text=" "))
        elif kind == "hardbreak":
            parts.append(replace(context, text="\n"))
        elif kind in SPAN_TOKENS:
            close_type, flags = SPAN_TOKENS[kind]
            end = _find_close(
                tokens, i, lambda t, k=kind: t.type == k, lambda t: t.type == close_type
            )
            parts.extend(_walk(tokens[i + 1 : end], replace(context, **flags)))
            i = end + 1
            continue
        elif kind == "link_open":
            href = token.attrGet("href")
            end = _find_close(
                tokens, i, lambda t: t.type == "link_open", lambda t: t.type == "link_close"
            )
            inner = replace(context, link=href or context.link, underline=True)
            parts.extend(_walk(tokens[i + 1 : end], inner))
            i = end + 1
            continue
        elif kind == "html_inline":
            tag, closing, self_closing = _parse_html_tag(token.content)
            if tag == "br":
                parts.append(replace(context, text="\n"))
            elif tag in HTML_TAG_FLAGS and not closing and not self_closing:
                end = _find_close(
                    tokens, i, _html_matcher(tag, False), _html_matcher(tag, True)
                )
                parts.extend(_walk(tokens[i + 1 : end], replace(context, **HTML_TAG_FLAGS[tag])))
                i = end + 1
                continue
            else:
                log.debug("Dropping inline HTML %r", token.content)
        else:
            log.debug("Ignoring inline token type '%s'", kind)
        i += 1
    return parts
