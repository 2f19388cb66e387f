"""
BeadTool PDF text to peyote shorthand.

BeadTool 4 exports a "Word Chart" style listing:

    Row 1&2 (L) (3)A, (2)B,
    (1)C
    Row 3 (R) (1)A, (2)B, (3)C

with a ``Created with BeadTool 4`` footer and page numbers on every page,
and sometimes ``***comment***`` spans.  extract_beadtool_shorthand strips
the page furniture, re-joins wrapped rows and returns the first contiguous
block of rows, ready for parse_shorthand.
"""

from __future__ import annotations

import re
import warnings
from typing import Sequence

from rowguide.extract.pages import Page, page_text

_FOOTER = re.compile(r".*\n?\n?Created with BeadTool 4 - www\.beadtool\.net\n?\n?", re.DOTALL)
_PAGE_NUMBER = re.compile(r".* ?Page [0-9]+(?: of [0-9]+)?\n")
_COMMENT = re.compile(r"\*\*\*.*\*\*\*")
_WRAPPED_ROW = re.compile(r",\n+")
_BLANK_LINES = re.compile(r"\n\s*\n")

_ROW_STEPS = r"\([LR]\) (?:\(\d+\)\w+(?:,\s+)?)+\n?"
_COMBINED_BLOCK = re.compile(rf"((?:Row 1&2 {_ROW_STEPS})(?:Row \d+ {_ROW_STEPS})+)", re.DOTALL)
_SINGLE_BLOCK = re.compile(rf"((?:Row 1 {_ROW_STEPS})(?:Row \d+ {_ROW_STEPS})+)", re.DOTALL)


def clean_beadtool_page(text: str) -> str:
    """Remove the BeadTool footer (and anything above it) and page-number lines."""
    return _PAGE_NUMBER.sub("", _FOOTER.sub("", text))


def extract_beadtool_shorthand(pages: Sequence[Page]) -> str:
    """
    Return the shorthand row block found in ``pages``, or "".

    A block starting at ``Row 1&2`` is preferred over one starting at
    ``Row 1``.  A block needs at least two rows.
    """
    try:
        text = "\n".join(clean_beadtool_page(page_text(page)) for page in pages)
    except Exception as exc:  # noqa: BLE001 — unrecognized page content yields no pattern
        warnings.warn(f"Unable to read BeadTool page text: {exc}", stacklevel=2)
        return ""

    text = _WRAPPED_ROW.sub(", ", _COMMENT.sub("", text))
    # Page breaks leave blank lines between rows of one block.
    text = _BLANK_LINES.sub("\n", text)
    for block in (_COMBINED_BLOCK, _SINGLE_BLOCK):
        match = block.search(text)
        if match:
            return match.group(1).strip()
    return ""
