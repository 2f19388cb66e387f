from .steps import (
    ParitySplit,
    StepsResult,
    compress_steps,
    expand_steps,
    split_by_parity,
    zipper_steps,
)
from .validation import validate_stream

__all__ = [
    "StepsResult",
    "ParitySplit",
    "expand_steps",
    "compress_steps",
    "zipper_steps",
    "split_by_parity",
    "validate_stream",
]
