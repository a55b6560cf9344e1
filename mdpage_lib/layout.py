# --- mdpage_lib/layout.py ---
"""
mdpage_lib/layout.py: Places blocks onto fixed-size pages.

Pagination is a fold over the block list: each block takes the current
LayoutState and returns the next one. The state transitions (advance, page
break) are plain functions so they can be exercised without a canvas walk.
Pages are laid out side by side along x, each PAGE_WIDTH + PAGE_GAP apart.
"""
import logging
from dataclasses import dataclass, replace
from typing import Dict, List, Optional

from .canvas import AUTO_RESIZE_HEIGHT, AUTO_RESIZE_WIDTH_AND_HEIGHT
from .constants import COLOR_HEX, DEFAULT_FONT_FAMILY, EMPTY_BLOCK_SPACING
from .models import (
    Block,
    BlockType,
    ElementConfig,
    LayoutState,
    PageDimensions,
    StyledPart,
)
from .runs import apply_style_ranges, block_parts, compose_text, plain_part

log = logging.getLogger("mdpage.layout")


@dataclass(frozen=True)
class RenderOptions:
    """Per-build styling choices that are not part of the block model."""

    family: str = DEFAULT_FONT_FAMILY
    highlight_color: str = COLOR_HEX["HIGHLIGHT"]
    link_color: str = COLOR_HEX["LINK"]
    page_background: str = COLOR_HEX["PAGE_BACKGROUND"]


# --- STATE TRANSITIONS ---
def initial_state(canvas, dims: PageDimensions, background: str) -> LayoutState:
    """Creates the first page and puts the cursor at its top padding."""
    page = canvas.create_page(dims.PAGE_WIDTH, dims.PAGE_HEIGHT, 0, 0, background)
    return LayoutState(
        y_offset=dims.PADDING,
        page_number=1,
        x_position=0,
        current_page=page,
        all_pages=(page,),
    )


def advance(state: LayoutState, amount: float) -> LayoutState:
    return replace(state, y_offset=state.y_offset + amount)


def needs_page_break(state: LayoutState, height: float, dims: PageDimensions) -> bool:
    return state.y_offset + height + dims.PADDING > dims.PAGE_HEIGHT


def break_page(canvas, state: LayoutState, dims: PageDimensions, background: str) -> LayoutState:
    """Opens the next page to the right of the current one."""
    x_position = state.x_position + dims.PAGE_WIDTH + dims.PAGE_GAP
    page = canvas.create_page(dims.PAGE_WIDTH, dims.PAGE_HEIGHT, x_position, 0, background)
    log.debug("Page break: starting page %d at x=%.1f", state.page_number + 1, x_position)
    return LayoutState(
        y_offset=dims.PADDING,
        page_number=state.page_number + 1,
        x_position=x_position,
        current_page=page,
        all_pages=state.all_pages + (page,),
    )


# --- PAGE BUILDER ---
class PageBuilder:
    """
    Lays out a block sequence onto fresh pages of a canvas surface.
    Args:
        canvas: The CanvasSurface to draw on.
        dimensions (PageDimensions): Page geometry for this pass.
        options (RenderOptions): Font family and colors.
    """

    def __init__(self, canvas, dimensions: PageDimensions, options: Optional[RenderOptions] = None):
        self.canvas = canvas
        self.dimensions = dimensions
        self.options = options or RenderOptions()

    def start(self) -> LayoutState:
        return initial_state(self.canvas, self.dimensions, self.options.page_background)

    def build(self, blocks: List[Block]) -> LayoutState:
        """Runs the pagination fold over all blocks."""
        state = self.start()
        for block in blocks:
            state = self.place_block(state, block)
        log.info(
            "Laid out %d blocks on %d page(s).", len(blocks), len(state.all_pages)
        )
        return state

    def finish(self, state: LayoutState) -> None:
        self.canvas.scroll_into_view(list(state.all_pages))

    def place_block(self, state: LayoutState, block: Block) -> LayoutState:
        if block.type == BlockType.EMPTY:
            return advance(state, EMPTY_BLOCK_SPACING)
        if block.type == BlockType.LIST or block.type == BlockType.PARAGRAPH or block.type.is_heading:
            return self._place_text_block(state, block)
        log.debug("Skipping block of unhandled type '%s'", block.type)
        return state

    def _place_text_block(self, state: LayoutState, block: Block) -> LayoutState:
        default_key = "list" if block.type == BlockType.LIST else "paragraph"
        config = block.config or ElementConfig.for_element(default_key)
        state = advance(state, config.margin_top)

        run = self.build_run(block_parts(block), config.font_size, state.y_offset)
        height = run.measure()[1]

        if needs_page_break(state, height, self.dimensions):
            state = break_page(
                self.canvas, state, self.dimensions, self.options.page_background
            )
            run.x = self.dimensions.PADDING
            run.y = state.y_offset

        self.canvas.append_child(state.current_page, run)
        log.debug(
            "Placed %s (h=%.1f) on page %d at y=%.1f",
            block.type.value,
            height,
            state.page_number,
            run.y,
        )
        return advance(state, height + config.margin_bottom)

    def build_run(self, parts: List[StyledPart], font_size: float, y: float):
        """Creates a text run for `parts` at the left padding and cursor y."""
        run = self.canvas.create_text_run(font_size, self.dimensions.PADDING, y)
        run.auto_resize = AUTO_RESIZE_WIDTH_AND_HEIGHT
        text = compose_text(parts)
        if text:
            run.insert_text(0, text)
            apply_style_ranges(
                run,
                parts,
                self.options.family,
                self.options.highlight_color,
                self.options.link_color,
            )

        width, height = run.measure()
        if width > self.dimensions.CONTENT_WIDTH:
            run.auto_resize = AUTO_RESIZE_HEIGHT
            run.resize(self.dimensions.CONTENT_WIDTH, height)
        return run


def create_pages(
    blocks: List[Block], canvas, dimensions: PageDimensions, options: Optional[RenderOptions] = None
) -> LayoutState:
    """Fresh-pages mode: paginates blocks and shows every created page."""
    builder = PageBuilder(canvas, dimensions, options)
    state = builder.build(blocks)
    builder.finish(state)
    return state


# --- UPDATE-IN-PLACE MODE ---
def document_parts(blocks: List[Block]) -> List[StyledPart]:
    """All blocks as one continuous part stream for a single text container.

    Every block ends with a newline and two consecutive non-empty blocks get
    an extra blank line between them; an EMPTY block contributes its own
    newline instead. The final trailing newline is dropped.
    """
    default_config = ElementConfig.for_element("paragraph")
    parts: List[StyledPart] = []
    for index, block in enumerate(blocks):
        config = block.config or default_config
        if block.type == BlockType.EMPTY:
            parts.append(StyledPart(text="\n", font_size=config.font_size))
        else:
            own = block_parts(block)
            parts.extend(own)
            parts.append(plain_part("\n", config, own[-1].indent if own else 0))

        following = blocks[index + 1] if index + 1 < len(blocks) else None
        if (
            following is not None
            and block.type != BlockType.EMPTY
            and following.type != BlockType.EMPTY
        ):
            parts.append(StyledPart(text="\n", font_size=config.font_size))

    if parts and parts[-1].text == "\n":
        parts.pop()
    return parts


def update_text_container(
    run, blocks: List[Block], options: Optional[RenderOptions] = None
) -> Dict[str, int]:
    """Update-in-place mode: rewrites one existing text run with all blocks.

    No pages are created; every merged style range is applied at absolute
    offsets of the container's new text.
    """
    options = options or RenderOptions()
    parts = document_parts(blocks)
    run.characters = compose_text(parts)
    counts = apply_style_ranges(
        run, parts, options.family, options.highlight_color, options.link_color
    )
    log.info(
        "Updated text container with %d blocks (%d characters, %d style calls).",
        len(blocks),
        len(run.characters),
        sum(counts.values()),
    )
    return counts
