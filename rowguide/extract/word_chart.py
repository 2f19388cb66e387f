"""
Spreadsheet-exported "Word Chart" PDF text to peyote shorthand.

The chart is a table introduced by a "Word Chart" heading (also spelled
"Word Cart" in some exports, or a "Row Direction Word Chart" header row):

    1 & 2 R 3(G) 1(Y) 2(G)
    1(H)
    3 L 1(G) 3(Y) 1(G)
    Grid

Rows are ``N R|L seq`` or ``N&M R|L seq``; a following line holding only
bead notation continues the previous row.  The chart ends at a "Grid"
heading.  Each row is rewritten as a shorthand line
(``Row 1&2 (R) (3)G, (1)Y, (2)G, (1)H``) for parse_shorthand.
"""

from __future__ import annotations

import re
import warnings
from typing import Sequence

from rowguide.extract.pages import Page, page_text
from rowguide.parsers.sanitize import strip_control_characters

_PAGE_NUMBER = re.compile(r"Page [0-9]+(?: of [0-9]+)?\n")
_FOOTER = re.compile(r"^[^\n]*Created with[^\n]*\n?", re.MULTILINE)

_HEADER_ROW = re.compile(r"row\s+direction\s+word\s+chart")
_MULTI_ROW = re.compile(r"^(\d+)\s*&\s*(\d+)\s+([RL])\s+(.+)$")
_SINGLE_ROW = re.compile(r"^(\d+)\s+([RL])\s+(.+)$")
_ROW_START = re.compile(r"^\d+\s+[RL]\s+|^\d+\s*&\s*\d+\s+[RL]\s+")
_BEAD_NOTATION = re.compile(r"\d+\([A-Z]+\)")

_CHART_BEAD = re.compile(r"^(\d+)\(([A-Z]+)\)$")
_SHORTHAND_BEAD = re.compile(r"^\((\d+)\)([A-Z]+)$")
_BARE_COLOUR = re.compile(r"^[A-Z]+$")


def extract_word_chart_shorthand(pages: Sequence[Page]) -> str:
    """Return shorthand lines for the word chart in ``pages``, or ""."""
    try:
        text = "\n".join(_clean_page(page_text(page)) for page in pages)
    except Exception as exc:  # noqa: BLE001 — unrecognized page content yields no pattern
        warnings.warn(f"Unable to read word chart page text: {exc}", stacklevel=2)
        return ""

    lines = [line.strip() for line in strip_control_characters(text).split("\n")]
    return "\n".join(_chart_rows([line for line in lines if line])).strip()


def convert_bead_sequence(sequence: str) -> str:
    """
    Rewrite ``3(G) 1(Y) B`` as ``(3)G, (1)Y, (1)B``.

    Parts already in ``(3)G`` form are kept; anything unrecognized is dropped.
    """
    converted = (_convert_bead(part) for part in sequence.split())
    return ", ".join(part for part in converted if part)


# ── Helpers ───────────────────────────────────────────────────────────────────


def _clean_page(text: str) -> str:
    return _FOOTER.sub("", _PAGE_NUMBER.sub("", text))


def _is_chart_heading(lowered: str) -> bool:
    return bool(_HEADER_ROW.search(lowered)) or "word chart" in lowered or "word cart" in lowered


def _chart_rows(lines: list[str]) -> list[str]:
    rows: list[str] = []
    in_chart = False
    index = 0
    while index < len(lines):
        line = lines[index]
        lowered = line.lower()
        index += 1

        if _is_chart_heading(lowered):
            in_chart = True
            continue
        if not in_chart:
            continue
        if "grid" in lowered:
            break

        multi = _MULTI_ROW.match(line)
        single = None if multi else _SINGLE_ROW.match(line)
        if multi:
            label = f"{multi.group(1)}&{multi.group(2)}"
            direction, sequence = multi.group(3), multi.group(4)
        elif single:
            label, direction, sequence = single.group(1), single.group(2), single.group(3)
        else:
            continue

        continuation, index = _continuation(lines, index)
        full_sequence = f"{sequence}{continuation}".strip()
        rows.append(f"Row {label} ({direction}) {convert_bead_sequence(full_sequence)}")
    return rows


def _continuation(lines: list[str], index: int) -> tuple[str, int]:
    """Collect bead-only lines starting at ``index``; return them and the next index."""
    parts: list[str] = []
    while index < len(lines):
        line = lines[index]
        lowered = line.lower()
        if _ROW_START.match(line) or "grid" in lowered or "word chart" in lowered:
            break
        if not _BEAD_NOTATION.search(line):
            break
        parts.append(" " + line)
        index += 1
    return "".join(parts), index


def _convert_bead(part: str) -> str | None:
    chart = _CHART_BEAD.match(part)
    if chart:
        return f"({chart.group(1)}){chart.group(2)}"
    if _SHORTHAND_BEAD.match(part):
        return part
    if _BARE_COLOUR.match(part):
        return f"(1){part}"
    return None
