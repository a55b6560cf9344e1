# --- mdpage_lib/constants.py ---
"""
mdpage_lib/constants.py: Page formats, element styles and rendering defaults.
"""

# --- PAGE GEOMETRY ---
PAGE_FORMATS = {
    "a4": {"width": 210, "height": 297, "unit": "mm"},
    "a3": {"width": 297, "height": 420, "unit": "mm"},
    "letter": {"width": 8.5, "height": 11, "unit": "inch"},
    "legal": {"width": 8.5, "height": 14, "unit": "inch"},
    "tabloid": {"width": 11, "height": 17, "unit": "inch"},
}

DEFAULT_DPI = 96
DEFAULT_PAGE_FORMAT = "letter"
DEFAULT_PADDING_PERCENT = 5
PAGE_GAP = 24  # Horizontal gap between side-by-side pages, in pixels
MM_PER_INCH = 25.4

# --- BLOCK SPACING & TEXT ---
EMPTY_BLOCK_SPACING = 8
SUBITEM_INDENT = 16
SCRIPT_SCALE = 0.7  # Font size factor for subscript/superscript
LINE_HEIGHT_FACTOR = 1.2
LIST_BULLET = "• "

# --- FONTS ---
FONT_FAMILIES = [
    {"name": "Inter", "weights": ["Regular", "Italic", "Bold", "Bold Italic"]},
]
DEFAULT_FONT_FAMILY = FONT_FAMILIES[0]["name"]
FONT_LOAD_WORKERS = 4

# --- COLORS ---
COLOR_HEX = {
    "PAGE_BACKGROUND": "#FFFFFF",
    "TEXT": "#000000",
    "HIGHLIGHT": "#F5A623",
    "LINK": "#1A73E8",
}

# --- ELEMENT STYLES ---
# Keys are markdown element names; margins are in pixels.
MARKDOWN_ELEMENTS = {
    "h1": {"font_size": 24, "style": "bold", "margin_top": 10, "margin_bottom": 4},
    "h2": {"font_size": 18, "style": "bold", "margin_top": 9, "margin_bottom": 4},
    "h3": {"font_size": 16, "style": "bold", "margin_top": 8, "margin_bottom": 4},
    "h4": {"font_size": 14, "style": "bold", "margin_top": 7, "margin_bottom": 4},
    "h5": {"font_size": 12, "style": "bold", "margin_top": 6, "margin_bottom": 4},
    "h6": {"font_size": 10, "style": "bold", "margin_top": 5, "margin_bottom": 4},
    "list": {
        "font_size": 10,
        "style": "regular",
        "margin_top": 4,
        "margin_bottom": 4,
        "prefix": LIST_BULLET,
        "subitem_indent": SUBITEM_INDENT,
    },
    "paragraph": {"font_size": 10, "style": "regular", "margin_top": 2, "margin_bottom": 4},
}
