from markdown_it.token import Token

from mdpage_lib.inline import DEFAULT_CONTEXT, parse_inline_tokens, plain_text
from mdpage_lib.models import InlinePart
from mdpage_lib.parser import tokenize


def inline_children(markdown):
    return next(t for t in tokenize(markdown) if t.type == "inline").children


def parts_of(markdown):
    return parse_inline_tokens(inline_children(markdown))


def test_nested_flags_are_supersets():
    assert parts_of("**bold _italic_**") == [
        InlinePart("bold ", bold=True),
        InlinePart("italic", bold=True, italic=True),
    ]


def test_siblings_do_not_share_styles():
    assert parts_of("*a* b **c**") == [
        InlinePart("a", italic=True),
        InlinePart(" b "),
        InlinePart("c", bold=True),
    ]


def test_strikethrough_and_highlight():
    assert parts_of("~~gone~~ ==hot==") == [
        InlinePart("gone", strikethrough=True),
        InlinePart(" "),
        InlinePart("hot", highlight=True),
    ]


def test_highlight_wraps_other_emphasis():
    assert parts_of("==**hot** tea==") == [
        InlinePart("hot", bold=True, highlight=True),
        InlinePart(" tea", highlight=True),
    ]


def test_unpaired_equals_signs_stay_literal():
    parts = parts_of("a = b == c")
    assert plain_text(parts) == "a = b == c"
    assert not any(p.highlight for p in parts)


def test_odd_equals_run_keeps_one_literal_sign():
    assert parts_of("===x===") == [
        InlinePart("="),
        InlinePart("x", highlight=True),
        InlinePart("="),
    ]


def test_link_sets_url_and_underline():
    assert parts_of("go [**here**](https://a.b/c)") == [
        InlinePart("go "),
        InlinePart("here", bold=True, underline=True, link="https://a.b/c"),
    ]


def test_linkified_bare_url():
    parts = parts_of("see https://example.com now")
    assert InlinePart("https://example.com", underline=True, link="https://example.com") in parts
    assert plain_text(parts) == "see https://example.com now"


def test_inline_html_tags():
    assert parts_of("<u>u</u> <sub>2</sub><sup>3</sup> <del>x</del>") == [
        InlinePart("u", underline=True),
        InlinePart(" "),
        InlinePart("2", subscript=True),
        InlinePart("3", superscript=True),
        InlinePart(" "),
        InlinePart("x", strikethrough=True),
    ]


def test_nested_same_html_tag():
    assert parts_of("<b>a <b>b</b> c</b>") == [
        InlinePart("a ", bold=True),
        InlinePart("b", bold=True),
        InlinePart(" c", bold=True),
    ]


def test_unknown_html_is_dropped():
    assert parts_of("<span>x</span>") == [InlinePart("x")]


def test_unclosed_html_tag_extends_to_the_end():
    assert parts_of("<u>open ended") == [InlinePart("open ended", underline=True)]


def test_unbalanced_span_token_does_not_raise():
    tokens = [Token("strong_open", "strong", 1), Token("text", "", 0, content="x")]
    assert parse_inline_tokens(tokens) == [InlinePart("x", bold=True)]


def test_breaks_keep_visible_text():
    assert plain_text(parts_of("a\nb")) == "a b"
    assert plain_text(parts_of("a  \nb")) == "a\nb"
    assert plain_text(parts_of("a<br>b")) == "a\nb"


def test_code_span_is_plain_text():
    assert parts_of("run `ls -l` now") == [InlinePart("run "), InlinePart("ls -l"), InlinePart(" now")]


def test_concatenation_reconstructs_visible_text():
    assert plain_text(parts_of("Some **bold** and *italic* text.")) == "Some bold and italic text."


def test_empty_input_gives_placeholder():
    assert parse_inline_tokens(None) == [DEFAULT_CONTEXT]
    assert parse_inline_tokens([]) == [InlinePart(text="")]
    assert parse_inline_tokens([Token("html_inline", "", 0, content="<span>")]) == [
        DEFAULT_CONTEXT
    ]
