"""Result type shared by the text parsers."""

from __future__ import annotations

from dataclasses import dataclass

from rowguide.schemas.diagnostics import Diagnostic, has_errors
from rowguide.schemas.document import Document


@dataclass(frozen=True)
class ParseResult:
    """
    Outcome of parsing one pattern text.

    Attributes:
        document: The parsed Document; empty when the input was rejected.
        diagnostics: Skipped tokens, rejected rows, repairs, advisory checks.
    """

    document: Document
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def rejected(self) -> bool:
        """True when at least one error diagnostic was produced."""
        return has_errors(self.diagnostics)
