from .parser import Complexity, PatternSummary, describe_pattern, parse_crochet, parse_single_row
from .rules import SEGMENT_RULES, SIMPLE_RULES, Instruction, SegmentRule, parse_segment
from .splitter import split_preserving_groups

__all__ = [
    "parse_crochet",
    "parse_single_row",
    "describe_pattern",
    "PatternSummary",
    "Complexity",
    # Segment decomposition
    "split_preserving_groups",
    "parse_segment",
    "Instruction",
    "SegmentRule",
    "SEGMENT_RULES",
    "SIMPLE_RULES",
]
