"""
Core type definitions for the pattern vocabulary layer.

Enums are the canonical vocabulary; dataclasses are the runtime objects.
Registry entry types are loaded from the YAML lookup tables and are frozen
after startup and never written to at runtime.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

# ── Enums ──────────────────────────────────────────────────────────────────────


class LimitName(str, Enum):
    """Safety ceilings checked before doing work proportional to input size."""

    MAX_STREAM_STEPS = "MAX_STREAM_STEPS"
    MAX_EXPANDED_UNITS = "MAX_EXPANDED_UNITS"
    MAX_INPUT_CHARS = "MAX_INPUT_CHARS"


class Direction(str, Enum):
    """Working direction of a corner-to-corner row."""

    UP_RIGHT = "UP_RIGHT"
    DOWN_LEFT = "DOWN_LEFT"


# ── Registry entry types (frozen, loaded from YAML) ───────────────────────────


@dataclass(frozen=True)
class LimitEntry:
    id: LimitName
    value: int
    description: str
    notes: str = ""


@dataclass(frozen=True)
class RowPrefixEntry:
    """A non-instructional row-type label stripped before segmentation."""

    id: str
    pattern: re.Pattern[str]
    notes: str = ""


@dataclass(frozen=True)
class ProtectedInstructionEntry:
    """An instruction whose name embeds digits (e.g. sc3tog) and must not be split."""

    id: str
    pattern: re.Pattern[str]
    example: str
    notes: str = ""


@dataclass(frozen=True)
class DirectionEntry:
    glyph: str
    direction: Direction
    notes: str = ""


# ── Runtime objects ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class SafetyLimits:
    """
    Size ceilings applied by the engine and the parsers.

    Attributes:
        max_stream_steps: Longest step stream the engine will accept.
        max_expanded_units: Largest total expanded count the engine will build.
        max_input_chars: Longest pattern text a parser will accept.
    """

    max_stream_steps: int
    max_expanded_units: int
    max_input_chars: int

    def __post_init__(self) -> None:
        for name in ("max_stream_steps", "max_expanded_units", "max_input_chars"):
            value = getattr(self, name)
            if value < 1:
                raise ValueError(f"{name} must be >= 1, got {value}")
