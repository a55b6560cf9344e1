# --- mdpage_lib/highlight.py ---
"""
mdpage_lib/highlight.py: `==marked==` text for markdown-it-py.

Works like the built-in `~~strikethrough~~` rule: every `==` pair becomes a
text token on the delimiter list, and the balanced pairs are turned into
mark_open/mark_close tokens once the inline pass is done.
"""
from typing import List

from markdown_it import MarkdownIt
from markdown_it.rules_inline.state_inline import Delimiter, StateInline

MARKER = "="


def mark_plugin(md: MarkdownIt) -> None:
    """Registers the `==` rule ahead of emphasis so `==**a**==` nests."""
    md.inline.ruler.before("emphasis", "mark", _tokenize)
    md.inline.ruler2.before("emphasis", "mark", _post_process)


def _tokenize(state: StateInline, silent: bool) -> bool:
    start = state.pos
    if silent or state.src[start] != MARKER:
        return False

    scanned = state.scanDelims(start, True)
    length = scanned.length
    if length < 2:
        return False

    # An odd run leaves one literal '=' in front of the pairs.
    if length % 2:
        token = state.push("text", "", 0)
        token.content = MARKER
        length -= 1

    for _ in range(0, length, 2):
        token = state.push("text", "", 0)
        token.content = MARKER * 2
        state.delimiters.append(
            Delimiter(
                marker=ord(MARKER),
                length=0,
                token=len(state.tokens) - 1,
                end=-1,
                open=scanned.can_open,
                close=scanned.can_close,
            )
        )

    state.pos += scanned.length
    return True


def _balance(state: StateInline, delimiters: List[Delimiter]) -> None:
    lone_markers = []
    for start_delim in delimiters:
        if start_delim.marker != ord(MARKER) or start_delim.end == -1:
            continue
        end_delim = delimiters[start_delim.end]

        for index, kind, nesting in (
            (start_delim.token, "mark_open", 1),
            (end_delim.token, "mark_close", -1),
        ):
            token = state.tokens[index]
            token.type = kind
            token.tag = "mark"
            token.nesting = nesting
            token.markup = MARKER * 2
            token.content = ""

        before = state.tokens[end_delim.token - 1]
        if before.type == "text" and before.content == MARKER:
            lone_markers.append(end_delim.token - 1)

    # `===a===` splits as '=' + '==' on both sides; move each lone '=' that
    # precedes a closer past the closing tags.
    while lone_markers:
        i = lone_markers.pop()
        j = i + 1
        while j < len(state.tokens) and state.tokens[j].type == "mark_close":
            j += 1
        j -= 1
        if i != j:
            state.tokens[i], state.tokens[j] = state.tokens[j], state.tokens[i]


def _post_process(state: StateInline) -> None:
    _balance(state, state.delimiters)
    for meta in state.tokens_meta:
        if meta and "delimiters" in meta:
            _balance(state, meta["delimiters"])
