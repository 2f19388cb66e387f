from .beadtool import clean_beadtool_page, extract_beadtool_shorthand
from .pages import Page, TextItem, join_text_items, page_text
from .word_chart import convert_bead_sequence, extract_word_chart_shorthand

__all__ = [
    "TextItem",
    "Page",
    "join_text_items",
    "page_text",
    "extract_beadtool_shorthand",
    "clean_beadtool_page",
    "extract_word_chart_shorthand",
    "convert_bead_sequence",
]
