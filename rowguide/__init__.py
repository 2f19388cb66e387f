from .engine import compress_steps, expand_steps, split_by_parity, zipper_steps
from .errors import NoPatternFoundError, PatternError
from .extract import extract_beadtool_shorthand, extract_word_chart_shorthand
from .migrations import migrate_documents, run_migrations, split_first_row
from .parsers import ParseResult, describe_pattern, parse_c2c, parse_crochet, parse_shorthand
from .schemas import Diagnostic, Document, Row, Severity, Step, log_diagnostics

__all__ = [
    # Data model
    "Step",
    "Row",
    "Document",
    "Diagnostic",
    "Severity",
    "log_diagnostics",
    # Errors
    "PatternError",
    "NoPatternFoundError",
    # Engine
    "expand_steps",
    "compress_steps",
    "zipper_steps",
    "split_by_parity",
    # Parsers
    "ParseResult",
    "parse_shorthand",
    "parse_c2c",
    "parse_crochet",
    "describe_pattern",
    # Page-text extractors
    "extract_beadtool_shorthand",
    "extract_word_chart_shorthand",
    # Migrations
    "split_first_row",
    "migrate_documents",
    "run_migrations",
]
