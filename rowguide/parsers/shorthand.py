"""
Shorthand Grammar Parser: peyote-style ``(count)label`` rows.

Input format, one row per line:

    Row 1 (L) (3)A, (2)B, (1)C
    Row 2 (R) 1(A), 4(B)

A line starting with ``Row 1&2`` is a combined first/second row.  Its steps
are parsed as one row, then expanded and dealt out by parity (even units to
the first row, odd units to the second) and each half is compressed again.

Tolerance rules:
  - a token matching neither ``(count)label`` nor ``count(label)`` is dropped
    with a warning; the rest of the row survives
  - a row with no valid tokens is dropped and does not consume a row id
  - rows whose unit totals look inconsistent get one advisory warning

Zero rows is a valid result here: parse_shorthand returns an empty Document
rather than raising.  This differs from parse_c2c on purpose.
"""

from __future__ import annotations

import re
import warnings
from typing import Any, Sequence

from rowguide.engine.steps import split_by_parity
from rowguide.parsers.result import ParseResult
from rowguide.parsers.sanitize import sanitize_pattern_text
from rowguide.schemas.diagnostics import Diagnostic, error, warning
from rowguide.schemas.document import Document, Row, Step
from rowguide.vocabulary.registry import get_registry
from rowguide.vocabulary.types import SafetyLimits

DEFAULT_DELIMITER = ", "

_OPERATION = "parse_shorthand"
_COMBINED_ROW = re.compile(r"^Row 1&2")
_ROW_TAG = re.compile(r"^Row [0-9&]+ \([LR]\)\s+")
_ROW_MARKER = re.compile(r"Row\s+\d+")
_STEP_PATTERNS = (
    re.compile(r"^\((\d+)\)([A-Za-z0-9]+)"),  # (3)A
    re.compile(r"^(\d+)\(([A-Za-z0-9]+)\)"),  # 3(A)
)

INCONSISTENT_COUNTS_MESSAGE = (
    "Imported file has inconsistent step counts. This may be a sign of a failed "
    "import. Please send the file to the developer for review if the import was "
    "not successful."
)


def parse_shorthand(
    text: Any,
    delimiter: Any = DEFAULT_DELIMITER,
    *,
    limits: SafetyLimits | None = None,
) -> ParseResult:
    """
    Parse peyote shorthand ``text`` into a Document.

    Never raises.  Rejected input (non-string, oversized, script markers)
    yields an empty Document with an error diagnostic.
    """
    limits = limits or get_registry().limits
    sanitized = sanitize_pattern_text(
        text,
        _OPERATION,
        delimiter=delimiter,
        default_delimiter=DEFAULT_DELIMITER,
        row_marker=_ROW_MARKER,
        limits=limits,
    )
    if sanitized.rejected:
        return ParseResult(Document(), sanitized.diagnostics)

    diagnostics: list[Diagnostic] = list(sanitized.diagnostics)
    try:
        rows = _parse_rows(sanitized.text, sanitized.delimiter, limits, diagnostics)
    except Exception as exc:  # noqa: BLE001 — public boundary never raises
        warnings.warn(f"parse_shorthand failed, returning an empty document: {exc}", stacklevel=2)
        diagnostics.append(error(_OPERATION, f"Unable to parse pattern: {exc}"))
        return ParseResult(Document(), tuple(diagnostics))

    diagnostics.extend(check_step_counts([row.total_count for row in rows]))
    return ParseResult(Document(rows=tuple(rows)), tuple(diagnostics))


def check_step_counts(row_totals: Sequence[int]) -> list[Diagnostic]:
    """
    Advisory consistency check over per-row unit totals.

    Every total is compared with the first row's.  The import looks sound if
    all rows agree, or if every even-indexed row agrees, or if every
    odd-indexed row agrees (two interleaved row shapes).  Otherwise one
    warning is returned.
    """
    if not row_totals:
        return []
    first = row_totals[0]
    all_match = all(total == first for total in row_totals)
    even_match = all(total == first for total in row_totals[0::2])
    odd_match = all(total == first for total in row_totals[1::2])
    if all_match or even_match or odd_match:
        return []
    return [warning(_OPERATION, INCONSISTENT_COUNTS_MESSAGE, row_totals=tuple(row_totals))]


# ── Helpers ───────────────────────────────────────────────────────────────────


def _parse_rows(
    text: str,
    delimiter: str,
    limits: SafetyLimits,
    diagnostics: list[Diagnostic],
) -> list[Row]:
    rows: list[Row] = []
    for line_number, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        steps = _parse_steps(line, delimiter, line_number, diagnostics)
        if _COMBINED_ROW.match(line):
            split = split_by_parity(steps, limits)
            diagnostics.extend(split.diagnostics)
            halves: tuple[tuple[Step, ...], ...] = (split.even, split.odd)
        else:
            halves = (steps,)
        for half in halves:
            if half:
                rows.append(Row(id=len(rows) + 1, steps=half))
    return rows


def _parse_steps(
    line: str,
    delimiter: str,
    line_number: int,
    diagnostics: list[Diagnostic],
) -> tuple[Step, ...]:
    steps: list[Step] = []
    for token in _ROW_TAG.sub("", line, count=1).split(delimiter):
        match = _match_step(token)
        if match is None:
            diagnostics.append(
                warning(_OPERATION, f"Invalid step: {token!r}", line=line_number, token=token)
            )
            continue
        count = int(match.group(1))
        if count < 1:
            diagnostics.append(
                warning(
                    _OPERATION,
                    f"Step count must be at least 1: {token!r}",
                    line=line_number,
                    token=token,
                )
            )
            continue
        steps.append(Step(id=len(steps) + 1, count=count, description=match.group(2)))
    return tuple(steps)


def _match_step(token: str) -> re.Match[str] | None:
    for pattern in _STEP_PATTERNS:
        match = pattern.match(token)
        if match:
            return match
    return None
