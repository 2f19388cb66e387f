from .c2c import parse_c2c
from .crochet import PatternSummary, describe_pattern, parse_crochet, parse_single_row
from .result import ParseResult
from .sanitize import SanitizedInput, sanitize_pattern_text
from .shorthand import check_step_counts, parse_shorthand

__all__ = [
    "ParseResult",
    "parse_shorthand",
    "check_step_counts",
    "parse_c2c",
    "parse_crochet",
    "parse_single_row",
    "describe_pattern",
    "PatternSummary",
    "SanitizedInput",
    "sanitize_pattern_text",
]
