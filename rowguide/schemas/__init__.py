"""
Shared data contracts for rowguide.

Provides the normalized pattern document (Step, Row, Document) and the
Diagnostic values every public operation returns next to its result.
"""

from .diagnostics import Diagnostic, Severity, has_errors, log_diagnostics
from .document import Document, Row, Step

__all__ = [
    # document
    "Step",
    "Row",
    "Document",
    # diagnostics
    "Severity",
    "Diagnostic",
    "has_errors",
    "log_diagnostics",
]
