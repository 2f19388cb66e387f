"""
Corner-to-corner (C2C) crochet notation parser.

Input format, rows found anywhere in the text:

    ROW 1: ↗ 1 squares
    1xA
    ROW 2: ↙ 2 squares
    1xA, 1xB

Each header names the declared row number, a direction glyph (listed in
c2c_directions.yaml) and the declared square count.  The next line is a
comma-separated list of ``<count>x<colour>`` stitches.

Rows are isolated from each other: a bad stitch token skips that row only,
with a warning that carries the declared row number, direction and square
count.  Surviving rows are numbered from 1.

Contract difference from the other parsers: when the text was accepted but
no row parsed, parse_c2c raises NoPatternFoundError.  Rejected input
(non-string, empty, oversized, script markers) still returns an empty
Document with an error diagnostic.
"""

from __future__ import annotations

import re
import warnings
from typing import Any

from rowguide.errors import NoPatternFoundError
from rowguide.parsers.result import ParseResult
from rowguide.parsers.sanitize import sanitize_pattern_text
from rowguide.schemas.diagnostics import Diagnostic, error, info, warning
from rowguide.schemas.document import Document, Row, Step
from rowguide.vocabulary.registry import VocabularyRegistry, get_registry
from rowguide.vocabulary.types import SafetyLimits

DEFAULT_DELIMITER = " "

_OPERATION = "parse_c2c"
_ROW_MARKER = re.compile(r"ROW\s+\d+:")
_STITCH = re.compile(r"(\d+)x([A-Za-z]+)")


class _RowError(ValueError):
    pass


def parse_c2c(
    text: Any,
    delimiter: Any = DEFAULT_DELIMITER,
    *,
    limits: SafetyLimits | None = None,
) -> ParseResult:
    """
    Parse C2C notation into a Document.

    ``delimiter`` is validated like the other parsers' but stitches are
    always comma-separated in this notation.

    Raises
    ------
    NoPatternFoundError
        The text was accepted but no row parsed.  The exception carries the
        diagnostics collected so far.
    """
    registry = get_registry()
    limits = limits or registry.limits
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
    if not sanitized.text:
        diagnostics.append(error(_OPERATION, "Pattern text is empty"))
        return ParseResult(Document(), tuple(diagnostics))

    try:
        rows = _parse_rows(sanitized.text, registry, diagnostics)
    except Exception as exc:  # noqa: BLE001 — public boundary never raises unexpected errors
        warnings.warn(f"parse_c2c failed, returning an empty document: {exc}", stacklevel=2)
        diagnostics.append(error(_OPERATION, f"Unable to parse pattern: {exc}"))
        return ParseResult(Document(), tuple(diagnostics))

    if not rows:
        raise NoPatternFoundError("No valid rows found in the pattern", tuple(diagnostics))
    return ParseResult(Document(rows=tuple(rows)), tuple(diagnostics))


def _row_pattern(registry: VocabularyRegistry) -> re.Pattern[str]:
    glyphs = "|".join(re.escape(glyph) for glyph in registry.direction_glyphs)
    return re.compile(rf"ROW (\d+): ({glyphs}) (\d+) squares\r?\n([^\r\n]*)")


def _parse_rows(
    text: str, registry: VocabularyRegistry, diagnostics: list[Diagnostic]
) -> list[Row]:
    rows: list[Row] = []
    for match in _row_pattern(registry).finditer(text):
        row_number, glyph, squares, stitch_line = match.groups()
        context = {
            "row_number": int(row_number),
            "direction": registry.get_direction(glyph).value,
            "squares": int(squares),
        }
        try:
            steps = _parse_stitches(stitch_line)
        except _RowError as exc:
            diagnostics.append(
                warning(
                    _OPERATION,
                    f"Failed to parse row {row_number}: {exc}. Some rows may be missing.",
                    **context,
                )
            )
            continue

        row = Row(id=len(rows) + 1, steps=steps)
        if row.total_count != context["squares"]:
            diagnostics.append(
                info(
                    _OPERATION,
                    f"Row {row_number} declares {squares} squares but has {row.total_count}",
                    parsed_squares=row.total_count,
                    **context,
                )
            )
        rows.append(row)
    return rows


def _parse_stitches(stitch_line: str) -> tuple[Step, ...]:
    if not stitch_line.strip():
        raise _RowError("no stitches listed")
    steps: list[Step] = []
    for token in stitch_line.split(","):
        token = token.strip()
        match = _STITCH.fullmatch(token)
        if match is None:
            raise _RowError(f"invalid stitch data {token!r}")
        count = int(match.group(1))
        if count <= 0:
            raise _RowError(f"invalid stitch count {token!r}")
        steps.append(Step(id=len(steps) + 1, count=count, description=match.group(2)))
    return tuple(steps)
