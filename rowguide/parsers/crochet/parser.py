"""
Free-text crochet instruction parser.

Each line of the form ``Row <n> <instructions>`` (optionally ``Row <n> -``
or ``Row <n> –``) becomes one Row.  Other lines are treated as incidental
prose and skipped without a diagnostic.  Rows are numbered from 1 in the
order they are found; the declared number is not used as the id.

A row body is cleaned of row-type labels ("Increase Row", "Foundation Row",
...), split into top-level segments (splitter.py) and each segment is
decomposed by the rule tables in rules.py.

Zero rows is a valid result: parse_crochet returns an empty Document rather
than raising.
"""

from __future__ import annotations

import re
import warnings
from dataclasses import dataclass
from enum import Enum
from typing import Any

from rowguide.parsers.crochet.rules import CLOSE_GROUP, OPEN_GROUP, Instruction, parse_segment
from rowguide.parsers.crochet.splitter import split_preserving_groups
from rowguide.parsers.result import ParseResult
from rowguide.parsers.sanitize import sanitize_pattern_text
from rowguide.schemas.diagnostics import Diagnostic, error, warning
from rowguide.schemas.document import Document, Row, Step
from rowguide.vocabulary.registry import get_registry
from rowguide.vocabulary.types import SafetyLimits

_OPERATION = "parse_crochet"
_ROW_LINE = re.compile(r"^Row\s+(\d+)(?:\s*[–-])?\s*(.+)$", re.IGNORECASE)
_ROW_MARKER = re.compile(r"Row\s+\d+", re.IGNORECASE)
_LINE_BREAK = re.compile(r"\r?\n")

_REPEAT_MARKERS = (OPEN_GROUP, CLOSE_GROUP, "*", "until")


class Complexity(str, Enum):
    SIMPLE = "simple"
    MODERATE = "moderate"
    COMPLEX = "complex"


@dataclass(frozen=True)
class PatternSummary:
    """
    Coarse description of a parsed pattern.

    Attributes:
        total_steps: Number of Steps across all rows (not the sum of counts).
        has_repetitions: True when any step is a repeat marker or mentions
            ``*`` or ``until``.
        complexity: SIMPLE below 5 steps, MODERATE below 15, else COMPLEX.
    """

    total_steps: int
    has_repetitions: bool
    complexity: Complexity


def parse_crochet(text: Any, *, limits: SafetyLimits | None = None) -> ParseResult:
    """Parse free-text crochet instructions into a Document.  Never raises."""
    limits = limits or get_registry().limits
    sanitized = sanitize_pattern_text(
        text,
        _OPERATION,
        delimiter=",",
        default_delimiter=",",
        row_marker=_ROW_MARKER,
        limits=limits,
    )
    if sanitized.rejected:
        return ParseResult(Document(), sanitized.diagnostics)

    diagnostics: list[Diagnostic] = list(sanitized.diagnostics)
    try:
        rows = _parse_rows(sanitized.text, diagnostics)
    except Exception as exc:  # noqa: BLE001 — public boundary never raises
        warnings.warn(f"parse_crochet failed, returning an empty document: {exc}", stacklevel=2)
        diagnostics.append(error(_OPERATION, f"Unable to parse pattern: {exc}"))
        return ParseResult(Document(), tuple(diagnostics))
    return ParseResult(Document(rows=tuple(rows)), tuple(diagnostics))


def parse_single_row(row_text: Any) -> tuple[Step, ...]:
    """
    Parse one ``Row <n> ...`` line and return its steps.

    Returns an empty tuple when ``row_text`` holds no row line.
    """
    result = parse_crochet(row_text)
    if not result.document.rows:
        return ()
    return result.document.rows[0].steps


def describe_pattern(document: Document) -> PatternSummary:
    """
    Summarize ``document`` by its step count across all rows.

    A pattern has repetitions when any step description contains ``{``,
    ``}``, ``*`` or "until".  Fewer than 5 steps is simple and fewer than
    15 is moderate; anything larger is complex.
    """
    steps = [step for row in document.rows for step in row.steps]
    total = len(steps)
    has_repetitions = any(
        marker in step.description for step in steps for marker in _REPEAT_MARKERS
    )
    if total < 5:
        complexity = Complexity.SIMPLE
    elif total < 15:
        complexity = Complexity.MODERATE
    else:
        complexity = Complexity.COMPLEX
    return PatternSummary(total_steps=total, has_repetitions=has_repetitions, complexity=complexity)


# ── Helpers ───────────────────────────────────────────────────────────────────


def _parse_rows(text: str, diagnostics: list[Diagnostic]) -> list[Row]:
    rows: list[Row] = []
    for line in _LINE_BREAK.split(text):
        line = line.strip()
        if not line:
            continue
        match = _ROW_LINE.match(line)
        if match is None:
            continue
        instructions = _parse_body(match.group(2))
        rows.append(
            Row(
                id=len(rows) + 1,
                steps=_number_steps(instructions, int(match.group(1)), diagnostics),
            )
        )
    return rows


def _parse_body(body: str) -> list[Instruction]:
    body = get_registry().strip_row_prefixes(body)
    instructions: list[Instruction] = []
    for segment in split_preserving_groups(body, ","):
        instructions.extend(parse_segment(segment))
    return instructions


def _number_steps(
    instructions: list[Instruction],
    declared_row: int,
    diagnostics: list[Diagnostic],
) -> tuple[Step, ...]:
    steps: list[Step] = []
    for instruction in instructions:
        if instruction.count < 1:
            diagnostics.append(
                warning(
                    _OPERATION,
                    f"Dropped {instruction.description!r} with a count of {instruction.count}",
                    row_number=declared_row,
                )
            )
            continue
        steps.append(
            Step(id=len(steps) + 1, count=instruction.count, description=instruction.description)
        )
    return tuple(steps)
