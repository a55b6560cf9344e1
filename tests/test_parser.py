import pytest

from mdpage_lib.inline import parse_inline_tokens
from mdpage_lib.models import BlockType, InlinePart
from mdpage_lib.parser import parse_markdown_to_blocks

SAMPLE = "# Title\n\nSome **bold** and *italic* text.\n\n- item one\n- item two"


def test_sample_document_blocks():
    blocks = parse_markdown_to_blocks(SAMPLE)
    assert [b.type for b in blocks] == [
        BlockType.HEADING1,
        BlockType.EMPTY,
        BlockType.PARAGRAPH,
        BlockType.EMPTY,
        BlockType.LIST,
    ]
    assert blocks[0].content == "Title"
    assert blocks[0].config.font_size == 24
    assert parse_inline_tokens(blocks[2].inline_tokens) == [
        InlinePart("Some "),
        InlinePart("bold", bold=True),
        InlinePart(" and "),
        InlinePart("italic", italic=True),
        InlinePart(" text."),
    ]
    lst = blocks[4]
    assert not lst.ordered
    assert [(i.content, i.level) for i in lst.items] == [("item one", 0), ("item two", 0)]


@pytest.mark.parametrize(
    "markdown",
    [
        "- parent\n  - child",
        "- parent\n    - child",
        "   - parent\n     - child",
        "> - parent\n>   - child",
    ],
)
def test_sub_item_is_level_one_regardless_of_column(markdown):
    blocks = parse_markdown_to_blocks(markdown)
    assert len(blocks) == 1
    assert [(i.content, i.level) for i in blocks[0].items] == [("parent", 0), ("child", 1)]


def test_deep_nesting_levels():
    blocks = parse_markdown_to_blocks("- a\n  - b\n    - c\n- d")
    assert [i.level for i in blocks[0].items] == [0, 1, 2, 0]


def test_ordered_list_start():
    lst = parse_markdown_to_blocks("3. a\n4. b")[0]
    assert lst.type == BlockType.LIST
    assert lst.ordered
    assert lst.start == 3


def test_second_paragraph_of_item_is_a_continuation():
    lst = parse_markdown_to_blocks("- a\n\n  more\n- b")[0]
    assert [i.content for i in lst.items] == ["a", "more", "b"]
    assert [i.continuation for i in lst.items] == [False, True, False]


def test_headings_of_every_level():
    blocks = parse_markdown_to_blocks("\n".join(f"{'#' * n} h{n}" for n in range(1, 7)))
    assert [b.type for b in blocks] == [BlockType.heading(n) for n in range(1, 7)]
    assert blocks[5].config.font_size == 10


def test_rule_becomes_empty_block():
    blocks = parse_markdown_to_blocks("para\n\n---\n\nnext")
    assert [b.type for b in blocks] == [
        BlockType.PARAGRAPH,
        BlockType.EMPTY,
        BlockType.EMPTY,
        BlockType.EMPTY,
        BlockType.PARAGRAPH,
    ]


def test_one_empty_block_per_blank_line():
    blocks = parse_markdown_to_blocks("A\n\n\nB")
    assert [b.type for b in blocks] == [
        BlockType.PARAGRAPH,
        BlockType.EMPTY,
        BlockType.EMPTY,
        BlockType.PARAGRAPH,
    ]


def test_leading_and_trailing_blank_lines_are_dropped():
    blocks = parse_markdown_to_blocks("\n\nHello\n\n")
    assert [b.type for b in blocks] == [BlockType.PARAGRAPH]


@pytest.mark.parametrize("markdown", ["", None, "```\ncode\n```", "<div>\nhtml\n</div>"])
def test_unhandled_or_empty_input_yields_no_blocks(markdown):
    assert parse_markdown_to_blocks(markdown) == []


def test_bare_link_line_is_a_paragraph():
    block = parse_markdown_to_blocks("[site](https://example.com)")[0]
    assert block.type == BlockType.PARAGRAPH
    assert parse_inline_tokens(block.inline_tokens) == [
        InlinePart("site", underline=True, link="https://example.com")
    ]


def test_paragraph_inside_blockquote_is_kept():
    blocks = parse_markdown_to_blocks("> quoted")
    assert [(b.type, b.content) for b in blocks] == [(BlockType.PARAGRAPH, "quoted")]


@pytest.mark.parametrize(
    "markdown",
    ["- a\n\npara", "1. a\n2. b\n\npara", "- a\n  - b\n\npara", "> q\n\npara"],
)
def test_blank_line_after_a_block_is_a_spacer(markdown):
    blocks = parse_markdown_to_blocks(markdown)
    assert [b.type for b in blocks][1:] == [BlockType.EMPTY, BlockType.PARAGRAPH]


def test_blank_lines_around_a_list_are_symmetric():
    blocks = parse_markdown_to_blocks("para\n\n- a\n\n\nnext")
    assert [b.type for b in blocks] == [
        BlockType.PARAGRAPH,
        BlockType.EMPTY,
        BlockType.LIST,
        BlockType.EMPTY,
        BlockType.EMPTY,
        BlockType.PARAGRAPH,
    ]


def test_sub_list_items_keep_their_own_kind():
    lst = parse_markdown_to_blocks("1. a\n   - b\n   - c\n2. d")[0]
    assert [(i.content, i.ordered) for i in lst.items] == [
        ("a", True),
        ("b", False),
        ("c", False),
        ("d", True),
    ]
    assert lst.items[0].list_id == lst.items[3].list_id
    assert lst.items[1].list_id == lst.items[2].list_id != lst.items[0].list_id


def test_nested_ordered_list_has_its_own_start():
    lst = parse_markdown_to_blocks("- a\n\n  4. b\n  5. c")[0]
    assert [(i.ordered, i.start) for i in lst.items] == [(False, 1), (True, 4), (True, 4)]
