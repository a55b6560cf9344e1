import threading

import pytest

from mdpage_lib.canvas import SVGCanvas
from mdpage_lib.dimensions import get_page_dimensions
from mdpage_lib.models import PageDimensions


class FakeFontProvider:
    """Monospaced stand-in: every character is half the font size wide."""

    def __init__(self, missing=()):
        self.missing = set(missing)
        self.requested = []
        self._lock = threading.Lock()

    def ensure_font_available(self, family, weight):
        with self._lock:
            self.requested.append((family, weight))
        if weight in self.missing:
            raise OSError(f"Font '{family} {weight}' not found")
        return f"{family}-{weight}.ttf"

    def measure(self, text, family, weight, size):
        return len(text) * size * 0.5


@pytest.fixture
def font_provider():
    return FakeFontProvider()


@pytest.fixture
def canvas(font_provider):
    return SVGCanvas(font_provider)


@pytest.fixture
def letter_dims():
    return get_page_dimensions(96, "letter", 5)


@pytest.fixture
def small_dims():
    """A tiny page so that a handful of paragraphs overflow it."""
    return PageDimensions(
        PAGE_WIDTH=200, PAGE_HEIGHT=100, PADDING=10, CONTENT_WIDTH=180, PAGE_GAP=24
    )
