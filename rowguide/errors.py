"""Exceptions raised across the rowguide public boundary."""

from __future__ import annotations

from rowguide.schemas.diagnostics import Diagnostic


class PatternError(Exception):
    """Base class for pattern import failures a caller must handle explicitly."""


class NoPatternFoundError(PatternError):
    """Raised by parsers whose contract distinguishes "nothing parseable" from
    "empty document".

    Carries the diagnostics collected before giving up so the caller can
    explain which rows were rejected.
    """

    def __init__(self, message: str, diagnostics: tuple[Diagnostic, ...] = ()) -> None:
        super().__init__(message)
        self.diagnostics = diagnostics
