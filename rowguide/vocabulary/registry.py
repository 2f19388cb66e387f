"""
Vocabulary registry: loads the parser lookup tables from YAML at startup,
validates them, and exposes a read-only query API.

The registry is a module-level singleton; call get_registry() to obtain it.
All tables are loaded and validated once at import time. Nothing writes to
the registry after startup.

Tables
------
limits.yaml                 safety ceilings (SafetyLimits)
row_prefixes.yaml           row-type labels stripped from free-text rows
protected_instructions.yaml instruction names with embedded digits
c2c_directions.yaml         corner-to-corner direction glyphs

Patterns are compiled at load time, so a malformed regular expression is
reported here rather than during a parse.
"""

from __future__ import annotations

import re
from pathlib import Path
from types import MappingProxyType
from typing import Any, cast

import yaml

from .types import (
    Direction,
    DirectionEntry,
    LimitEntry,
    LimitName,
    ProtectedInstructionEntry,
    RowPrefixEntry,
    SafetyLimits,
)

_DATA_DIR = Path(__file__).parent / "data"


class VocabularyRegistry:
    """
    Read-only registry of all vocabulary lookup tables.

    Public mapping attributes are wrapped in MappingProxyType after loading
    and are immutable for the lifetime of the registry instance; sequences are
    tuples.

    Instantiate directly to use a custom data directory (e.g. in tests);
    otherwise use get_registry() for the module singleton.
    """

    def __init__(self, data_dir: Path = _DATA_DIR) -> None:
        self._data_dir = data_dir

        # Type annotations only; actual assignment happens in _load_*
        self.limit_entries: MappingProxyType[LimitName, LimitEntry]
        self.row_prefixes: tuple[RowPrefixEntry, ...]
        self.protected_instructions: tuple[ProtectedInstructionEntry, ...]
        self.directions: MappingProxyType[str, DirectionEntry]

        self._load_all()
        self._validate()
        self.limits = SafetyLimits(
            max_stream_steps=self.limit_entries[LimitName.MAX_STREAM_STEPS].value,
            max_expanded_units=self.limit_entries[LimitName.MAX_EXPANDED_UNITS].value,
            max_input_chars=self.limit_entries[LimitName.MAX_INPUT_CHARS].value,
        )

    # ── Loading ────────────────────────────────────────────────────────────────

    def _load_yaml(self, filename: str) -> dict[str, Any]:
        path = self._data_dir / filename
        try:
            with open(path, encoding="utf-8") as f:
                return cast(dict[str, Any], yaml.safe_load(f))
        except FileNotFoundError:
            raise FileNotFoundError(f"Vocabulary data file not found: {path}") from None
        except yaml.YAMLError as exc:
            raise ValueError(f"Failed to parse vocabulary data file {path}: {exc}") from exc

    def _load_all(self) -> None:
        self._load_limits()
        self._load_row_prefixes()
        self._load_protected_instructions()
        self._load_directions()

    def _load_limits(self) -> None:
        data = self._load_yaml("limits.yaml")
        result: dict[LimitName, LimitEntry] = {}
        for entry in data["entries"]:
            name = LimitName(entry["id"])
            result[name] = LimitEntry(
                id=name,
                value=entry["value"],
                description=entry["description"].strip(),
                notes=entry.get("notes", "").strip(),
            )
        self.limit_entries = MappingProxyType(result)

    def _load_row_prefixes(self) -> None:
        data = self._load_yaml("row_prefixes.yaml")
        self.row_prefixes = tuple(
            RowPrefixEntry(
                id=entry["id"],
                pattern=_compile(f"^(?:{entry['pattern']})", "row_prefixes.yaml", entry["id"]),
                notes=entry.get("notes", "").strip(),
            )
            for entry in data["entries"]
        )

    def _load_protected_instructions(self) -> None:
        data = self._load_yaml("protected_instructions.yaml")
        self.protected_instructions = tuple(
            ProtectedInstructionEntry(
                id=entry["id"],
                pattern=_compile(
                    f"^(?P<name>{entry['pattern']})(?=\\s|$)",
                    "protected_instructions.yaml",
                    entry["id"],
                ),
                example=entry["example"],
                notes=entry.get("notes", "").strip(),
            )
            for entry in data["entries"]
        )

    def _load_directions(self) -> None:
        data = self._load_yaml("c2c_directions.yaml")
        result: dict[str, DirectionEntry] = {}
        for entry in data["entries"]:
            glyph = entry["glyph"]
            if glyph in result:
                raise ValueError(f"c2c_directions.yaml: duplicate glyph {glyph!r}")
            result[glyph] = DirectionEntry(
                glyph=glyph,
                direction=Direction(entry["direction"]),
                notes=entry.get("notes", "").strip(),
            )
        self.directions = MappingProxyType(result)

    # ── Validation ─────────────────────────────────────────────────────────────

    def _validate(self) -> None:
        """
        Run at startup. Raises ValueError listing all problems found if a table
        is incomplete or violates a structural invariant.
        """
        errors: list[str] = []
        self._check_limits(errors)
        self._check_protected_examples(errors)
        self._check_unique_ids(errors)
        if not self.directions:
            errors.append("c2c_directions: at least one direction glyph is required")
        if errors:
            raise ValueError(
                "Vocabulary registry validation failed:\n"
                + "\n".join(f"  • {e}" for e in errors)
            )

    def _check_limits(self, errors: list[str]) -> None:
        """Every LimitName needs exactly one positive integer entry."""
        for name in LimitName:
            entry = self.limit_entries.get(name)
            if entry is None:
                errors.append(f"limits: no entry for {name.value}")
            elif not isinstance(entry.value, int) or isinstance(entry.value, bool):
                errors.append(f"limits entry {name.value}: value must be an integer")
            elif entry.value < 1:
                errors.append(f"limits entry {name.value}: value must be >= 1, got {entry.value}")

    def _check_protected_examples(self, errors: list[str]) -> None:
        """Each protected instruction must match its own documented example."""
        for entry in self.protected_instructions:
            if not entry.pattern.match(entry.example):
                errors.append(
                    f"protected_instructions entry {entry.id!r}: "
                    f"pattern does not match example {entry.example!r}"
                )

    def _check_unique_ids(self, errors: list[str]) -> None:
        for table, entries in (
            ("row_prefixes", self.row_prefixes),
            ("protected_instructions", self.protected_instructions),
        ):
            seen: set[str] = set()
            for entry in entries:
                if entry.id in seen:
                    errors.append(f"{table}: duplicate id {entry.id!r}")
                seen.add(entry.id)

    # ── Query API ──────────────────────────────────────────────────────────────

    def strip_row_prefixes(self, text: str) -> str:
        """Remove every known row-type prefix from the start of ``text``, in table order."""
        for entry in self.row_prefixes:
            text = entry.pattern.sub("", text, count=1)
        return text

    def match_protected(self, text: str) -> str | None:
        """Return the protected instruction name that ``text`` starts with, or None."""
        for entry in self.protected_instructions:
            match = entry.pattern.match(text)
            if match:
                return match.group("name")
        return None

    def get_direction(self, glyph: str) -> Direction | None:
        entry = self.directions.get(glyph)
        return entry.direction if entry else None

    @property
    def direction_glyphs(self) -> tuple[str, ...]:
        return tuple(self.directions)


def _compile(pattern: str, table: str, entry_id: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as exc:
        raise ValueError(f"{table} entry {entry_id!r}: invalid pattern: {exc}") from exc


# ── Module-level singleton ─────────────────────────────────────────────────────
#
# Initialized eagerly at import time so there is no lazy-init race condition
# in concurrent contexts. The registry is read-only after construction, so
# sharing it across threads is safe.

_registry: VocabularyRegistry = VocabularyRegistry()


def get_registry() -> VocabularyRegistry:
    """Return the module-level registry singleton."""
    return _registry
