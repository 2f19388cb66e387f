"""
Row-split migration: undo a combined first row in stored documents.

Older imports kept a ``Row 1&2`` line as a single first row whose expanded
length is twice the second row's.  split_first_row deals that row's units
out by parity into two rows (even units first) and shifts every following
row id up by one:

    [R1(2k units), R2(k), R3, ...]  ->  [A(id=1), B(id=2), R2(id=3), R3(id=4), ...]

Documents that do not match the shape are returned as the same object.
"""

from __future__ import annotations

from dataclasses import dataclass

from rowguide.engine.steps import expand_steps, split_by_parity
from rowguide.schemas.diagnostics import Diagnostic, has_errors, info
from rowguide.schemas.document import Document, Row
from rowguide.vocabulary.types import SafetyLimits

_OPERATION = "split_first_row"


@dataclass(frozen=True)
class MigrationResult:
    """
    Outcome of migrating one Document.

    Attributes:
        document: The migrated Document, or the input object when not applied.
        applied: True when the rows were rewritten.
        diagnostics: Why the migration did or did not apply.
    """

    document: Document
    applied: bool
    diagnostics: tuple[Diagnostic, ...] = ()


def split_first_row(document: Document, limits: SafetyLimits | None = None) -> MigrationResult:
    if len(document.rows) < 2:
        return MigrationResult(
            document,
            applied=False,
            diagnostics=(info(_OPERATION, "Fewer than two rows; nothing to split"),),
        )

    first, second = document.rows[0], document.rows[1]
    expanded_first = expand_steps(first.steps, limits)
    expanded_second = expand_steps(second.steps, limits)
    problems = expanded_first.diagnostics + expanded_second.diagnostics
    if has_errors(problems):
        return MigrationResult(document, applied=False, diagnostics=problems)

    first_length, second_length = len(expanded_first.steps), len(expanded_second.steps)
    if second_length == 0 or first_length != 2 * second_length:
        return MigrationResult(
            document,
            applied=False,
            diagnostics=problems
            + (
                info(
                    _OPERATION,
                    "First row is not twice the length of the second row",
                    first_row_length=first_length,
                    second_row_length=second_length,
                ),
            ),
        )

    split = split_by_parity(first.steps, limits)
    rows = (
        Row(id=1, steps=split.even),
        Row(id=2, steps=split.odd),
        *(Row(id=row.id + 1, steps=row.steps) for row in document.rows[1:]),
    )
    return MigrationResult(
        Document(rows=rows),
        applied=True,
        diagnostics=problems,
    )
