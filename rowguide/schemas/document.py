"""
Normalized pattern document: Step, Row, Document.

A Step is a run-length-encoded unit: ``count`` consecutive repetitions of
the same labeled unit (a bead colour, a crochet instruction, a repeat
bracket marker).  Rows hold steps in left-to-right pattern order; a Document
holds rows with 1-based sequential ids.

Everything here is a frozen dataclass.  Parsers build new Documents and
transforms return new ones; nothing is mutated in place.  ``to_dict`` and
``from_dict`` convert to and from the plain tree that storage and rendering
collaborators exchange.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Step:
    """
    ``count`` repetitions of one labeled unit.

    Attributes:
        id: Position-derived identifier; parsers number steps from 1 within a row.
        count: Number of repetitions.  Streams retained in a Document only hold
            counts >= 1; the engine drops anything else during expansion.
        description: The unit label (colour code, instruction text, ``{``/``}``).
    """

    id: int
    count: int
    description: str

    @property
    def label(self) -> str:
        return self.description

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "count": self.count, "description": self.description}


@dataclass(frozen=True)
class Row:
    """
    One pattern row.

    Attributes:
        id: 1-based row number within the owning Document.
        steps: Steps in pattern order.  Never reordered.
    """

    id: int
    steps: tuple[Step, ...]

    def __post_init__(self) -> None:
        # Accept lists at construction sites and promote to tuple.
        if isinstance(self.steps, list):
            object.__setattr__(self, "steps", tuple(self.steps))

    @property
    def total_count(self) -> int:
        """Expanded length of the row (sum of step counts)."""
        return sum(step.count for step in self.steps)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "steps": [step.to_dict() for step in self.steps]}


@dataclass(frozen=True)
class Document:
    """
    A parsed pattern body.

    Attributes:
        rows: Rows in pattern order, ids ``1..n``.
    """

    rows: tuple[Row, ...] = ()

    def __post_init__(self) -> None:
        if isinstance(self.rows, list):
            object.__setattr__(self, "rows", tuple(self.rows))

    @property
    def total_count(self) -> int:
        """Total number of atomic units across all rows."""
        return sum(row.total_count for row in self.rows)

    def to_dict(self) -> dict[str, Any]:
        return {"rows": [row.to_dict() for row in self.rows]}

    @classmethod
    def from_dict(cls, raw: Any) -> Document:
        """Build a Document from its plain-tree form.

        Raises ValueError when the tree does not have the expected shape:
        ``raw`` must be a mapping with a ``rows`` list, each row a mapping with
        an int ``id`` and a ``steps`` list, each step a mapping with int ``id``
        and ``count`` and a str ``description``.
        """
        if not isinstance(raw, dict):
            raise ValueError(f"document must be a mapping, got {type(raw).__name__}")
        raw_rows = raw.get("rows")
        if not isinstance(raw_rows, list):
            raise ValueError(f"document rows must be a list, got {type(raw_rows).__name__}")

        rows: list[Row] = []
        for row_index, raw_row in enumerate(raw_rows):
            if not isinstance(raw_row, dict):
                raise ValueError(f"row at index {row_index} is not a mapping")
            raw_steps = raw_row.get("steps")
            if not isinstance(raw_steps, list):
                raise ValueError(f"row at index {row_index} has no steps list")
            row_id = raw_row.get("id")
            if not _is_int(row_id):
                raise ValueError(f"row at index {row_index} has invalid id: {row_id!r}")
            rows.append(
                Row(
                    id=row_id,
                    steps=tuple(
                        _step_from_dict(raw_step, row_index, step_index)
                        for step_index, raw_step in enumerate(raw_steps)
                    ),
                )
            )
        return cls(rows=tuple(rows))


# ── Helpers ───────────────────────────────────────────────────────────────────


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _step_from_dict(raw: Any, row_index: int, step_index: int) -> Step:
    where = f"step {step_index} of row at index {row_index}"
    if not isinstance(raw, dict):
        raise ValueError(f"{where} is not a mapping")
    step_id, count, description = raw.get("id"), raw.get("count"), raw.get("description")
    if not _is_int(step_id):
        raise ValueError(f"{where} has invalid id: {step_id!r}")
    if not _is_int(count):
        raise ValueError(f"{where} has invalid count: {count!r}")
    if not isinstance(description, str):
        raise ValueError(f"{where} has invalid description: {description!r}")
    return Step(id=step_id, count=count, description=description)
