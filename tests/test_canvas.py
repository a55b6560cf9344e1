import pytest

from mdpage_lib.canvas import (
    AUTO_RESIZE_HEIGHT,
    AUTO_RESIZE_NONE,
    SVGCanvas,
    SVGTextRun,
)


@pytest.fixture
def run(font_provider):
    return SVGTextRun(font_provider, 10, 0, 0)


def test_insert_text_and_characters(run):
    run.insert_text(0, "held")
    run.insert_text(2, "LLO wor")
    assert run.characters == "heLLO world"


def test_inserted_text_inherits_preceding_style(run):
    run.insert_text(0, "ab")
    run.set_style_range("font_size", 0, 2, 20)
    run.insert_text(2, "c")
    assert run.measure() == (30, 24)


def test_characters_setter_resets_styles(run):
    run.insert_text(0, "ab")
    run.set_style_range("font_size", 0, 2, 20)
    run.characters = "abc"
    assert run.measure() == (15, 12)


@pytest.mark.parametrize(
    "attribute, start, end, value",
    [
        ("colour", 0, 1, "#000"),
        ("fill", 0, 9, "#000"),
        ("fill", 2, 2, "#000"),
        ("fill", -1, 1, "#000"),
        ("font_size", 0, 1, 0),
        ("decoration", 0, 1, "OVERLINE"),
    ],
)
def test_invalid_style_calls_raise(run, attribute, start, end, value):
    run.insert_text(0, "abc")
    with pytest.raises(ValueError):
        run.set_style_range(attribute, start, end, value)


def test_measure_mixed_sizes(run):
    run.insert_text(0, "abcd")
    assert run.measure() == (20, 12)
    run.set_style_range("font_size", 0, 2, 20)
    assert run.measure() == (30, 24)


def test_measure_multiple_lines(run):
    run.characters = "ab\ncdef"
    assert run.measure() == (20, 24)


def test_empty_run_has_one_line(run):
    assert run.measure() == (0, 12)


def test_height_driven_resize_wraps_words(run):
    run.characters = "aaaa bbbb cccc"
    assert run.width == 70
    run.auto_resize = AUTO_RESIZE_HEIGHT
    run.resize(50, 12)
    assert run.measure() == (50, 24)


def test_fixed_resize_stops_auto_sizing(run):
    run.characters = "abc"
    run.resize(30, 40)
    assert run.auto_resize == AUTO_RESIZE_NONE
    assert run.measure() == (30, 40)


@pytest.mark.parametrize("width, height", [(0, 10), (10, 0), (-5, 5)])
def test_non_positive_resize_raises(run, width, height):
    with pytest.raises(ValueError):
        run.resize(width, height)


def test_indent_applies_to_whole_lines(run):
    run.characters = "a\nbc\nd"
    run.set_style_range("indent", 3, 4, 16)
    svg = run.to_svg()
    assert svg.count('x="16.00"') == 1
    assert svg.count('x="0.00"') == 2


def test_segment_attributes(run):
    run.characters = "ab<c"
    run.set_style_range("font_name", 0, 1, ("Inter", "Bold Italic"))
    run.set_style_range("decoration", 1, 2, "STRIKETHROUGH")
    run.set_style_range("hyperlink", 2, 4, "https://x.y/?a=1&b=2")
    run.set_style_range("fill", 2, 4, "#1A73E8")
    svg = run.to_svg()
    assert 'font-weight="bold" font-style="italic"' in svg
    assert 'text-decoration="line-through"' in svg
    assert '<a href="https://x.y/?a=1&amp;b=2">' in svg
    assert "&lt;c" in svg
    assert 'fill="#1A73E8"' in svg


def test_canvas_pages_and_children(canvas):
    page = canvas.create_page(100, 200, 0, 0, "#FFFFFF")
    run = canvas.create_text_run(10, 5, 5)
    assert canvas.loose_runs == [run]
    canvas.append_child(page, run)
    assert canvas.loose_runs == []
    assert page.children == [run]
    assert canvas.run_count == 1


def test_invalid_page_size_raises(canvas):
    with pytest.raises(ValueError):
        canvas.create_page(0, 100, 0, 0, "#FFFFFF")


def test_selected_text_run_requires_a_single_run(canvas):
    assert canvas.selected_text_run() is None
    first = canvas.create_text_run(10, 0, 0)
    second = canvas.create_text_run(10, 0, 0)
    canvas.select([first, second])
    assert canvas.selected_text_run() is None
    page = canvas.create_page(10, 10, 0, 0, "#FFFFFF")
    canvas.select([page])
    assert canvas.selected_text_run() is None
    canvas.select([first])
    assert canvas.selected_text_run() is first
    assert canvas.create_selected_run(12) is canvas.selected_text_run()


def test_render_groups_pages_side_by_side(canvas):
    first = canvas.create_page(100, 200, 0, 0, "#FFFFFF")
    second = canvas.create_page(100, 200, 124, 0, "#EEEEEE")
    run = canvas.create_text_run(10, 5, 5)
    run.characters = "hello"
    canvas.append_child(second, run)
    canvas.scroll_into_view([first, second])
    assert canvas.viewport == (0, 0, 224, 200)

    svg = canvas.render()
    assert svg.startswith('<svg xmlns="http://www.w3.org/2000/svg" width="224" height="200"')
    assert '<g id="page-1">' in svg
    assert '<g id="page-2">' in svg
    assert 'fill="#EEEEEE"' in svg
    assert 'x="129.00"' in svg
    assert svg.rstrip().endswith("</svg>")
