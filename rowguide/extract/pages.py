"""
Page text as delivered by a PDF text-extraction collaborator.

A page is either a plain string or a sequence of TextItem fragments.  A
fragment with ``has_eol`` set ends its line.  page_text normalizes either
form to a string.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class TextItem:
    text: str
    has_eol: bool = False


Page = str | Sequence[TextItem]


def join_text_items(items: Sequence[TextItem]) -> str:
    """
    Concatenate fragments, starting a new line after each ``has_eol`` item.

    Text after the last end-of-line fragment is kept as a final line.
    """
    lines: list[str] = []
    current = ""
    for item in items:
        current += item.text
        if item.has_eol:
            lines.append(current)
            current = ""
    if current:
        lines.append(current)
    return "\n".join(lines)


def page_text(page: Page) -> str:
    if isinstance(page, str):
        return page
    return join_text_items(page)
