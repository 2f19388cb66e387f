"""
Advisory diagnostics returned alongside every parser and engine result.

The core never logs or notifies on its own.  Each public operation collects
Diagnostic values and hands them back to the caller, who decides whether to
show them to a user, log them, or drop them.  ``log_diagnostics`` forwards a
batch to a caller-supplied ``logging.Logger`` at a level matching severity.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


_LOG_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}


@dataclass(frozen=True)
class Diagnostic:
    """
    A single advisory message.

    Attributes:
        operation: Name of the public operation that produced it (e.g. "zipper_steps").
        message: Human-readable description.
        severity: INFO, WARNING or ERROR.  ERROR means the operation fell back to
            an empty or unchanged result; WARNING means part of the input was skipped.
        context: Structured detail (row number, lengths, offending token, ...).
    """

    operation: str
    message: str
    severity: Severity = Severity.WARNING
    context: MappingProxyType[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        if isinstance(self.context, dict):
            object.__setattr__(self, "context", MappingProxyType(self.context))
        if not isinstance(self.severity, Severity):
            object.__setattr__(self, "severity", Severity(self.severity))


def info(operation: str, message: str, **context: Any) -> Diagnostic:
    return Diagnostic(operation, message, Severity.INFO, context)


def warning(operation: str, message: str, **context: Any) -> Diagnostic:
    return Diagnostic(operation, message, Severity.WARNING, context)


def error(operation: str, message: str, **context: Any) -> Diagnostic:
    return Diagnostic(operation, message, Severity.ERROR, context)


def has_errors(diagnostics: Iterable[Diagnostic]) -> bool:
    return any(d.severity == Severity.ERROR for d in diagnostics)


def log_diagnostics(diagnostics: Iterable[Diagnostic], logger: logging.Logger) -> None:
    """Forward diagnostics to ``logger``, one record per diagnostic."""
    for diagnostic in diagnostics:
        logger.log(
            _LOG_LEVELS[diagnostic.severity],
            "%s: %s",
            diagnostic.operation,
            diagnostic.message,
            extra={"rowguide_context": dict(diagnostic.context)},
        )
