"""
Input sanitization shared by the text parsers.

sanitize_pattern_text runs before any parsing work.  It never raises; every
problem becomes a Diagnostic on the returned SanitizedInput, and
``rejected`` tells the parser to return an empty Document without looking
at the text.

Rejections (error diagnostics):
  - text is not a string
  - text is longer than ``limits.max_input_chars`` after cleaning
  - text carries a script-injection marker (``<script``, ``javascript:``)

Repairs:
  - ASCII control characters other than tab, LF and CR are removed
  - surrounding whitespace is trimmed
  - a non-string or empty delimiter is replaced by the parser's default
    (warning diagnostic)

A non-empty text with no row marker gets an info diagnostic only; some
patterns are usable without row numbers.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from rowguide.schemas.diagnostics import Diagnostic, error, has_errors, info, warning
from rowguide.vocabulary.types import SafetyLimits

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
_SCRIPT_MARKERS = re.compile(r"<script|javascript:", re.IGNORECASE)


@dataclass(frozen=True)
class SanitizedInput:
    """
    Cleaned parser input.

    Attributes:
        text: The cleaned pattern text ("" when rejected).
        delimiter: The delimiter the parser should split on.
        rejected: True when the parser must not parse ``text`` at all.
        diagnostics: Problems found and repairs made, in discovery order.
    """

    text: str
    delimiter: str
    rejected: bool = False
    diagnostics: tuple[Diagnostic, ...] = ()


def strip_control_characters(value: str) -> str:
    return _CONTROL_CHARS.sub("", value)


def sanitize_pattern_text(
    text: Any,
    operation: str,
    *,
    delimiter: Any,
    default_delimiter: str,
    row_marker: re.Pattern[str],
    limits: SafetyLimits,
) -> SanitizedInput:
    """
    Validate and clean raw pattern text and its delimiter for ``operation``.

    ``row_marker`` is searched (not matched) to decide whether the structure
    hint is emitted; it never causes a rejection.
    """
    diagnostics: list[Diagnostic] = []
    clean_delimiter = _sanitize_delimiter(delimiter, default_delimiter, operation, diagnostics)

    if not isinstance(text, str):
        diagnostics.append(
            error(
                operation,
                "Pattern text must be a string",
                actual_type=type(text).__name__,
            )
        )
        return SanitizedInput("", clean_delimiter, rejected=True, diagnostics=tuple(diagnostics))

    cleaned = strip_control_characters(text).strip()

    if len(cleaned) > limits.max_input_chars:
        diagnostics.append(
            error(
                operation,
                f"Pattern data too large (max {limits.max_input_chars:,} characters)",
                input_length=len(cleaned),
            )
        )
    if _SCRIPT_MARKERS.search(cleaned):
        diagnostics.append(error(operation, "Pattern data contains potentially dangerous content"))

    if has_errors(diagnostics):
        return SanitizedInput("", clean_delimiter, rejected=True, diagnostics=tuple(diagnostics))

    if cleaned and not row_marker.search(cleaned):
        diagnostics.append(
            info(operation, "Pattern data does not contain the expected row markers")
        )

    return SanitizedInput(cleaned, clean_delimiter, diagnostics=tuple(diagnostics))


def _sanitize_delimiter(
    delimiter: Any,
    default: str,
    operation: str,
    diagnostics: list[Diagnostic],
) -> str:
    if not isinstance(delimiter, str):
        diagnostics.append(
            warning(
                operation,
                "Delimiter must be a string, using default",
                default_delimiter=default,
            )
        )
        return default
    cleaned = strip_control_characters(delimiter)
    if not cleaned:
        diagnostics.append(
            warning(
                operation,
                "Delimiter became empty after sanitization, using default",
                default_delimiter=default,
            )
        )
        return default
    return cleaned
