from .registry import VocabularyRegistry, get_registry
from .types import (
    Direction,
    DirectionEntry,
    LimitEntry,
    LimitName,
    ProtectedInstructionEntry,
    RowPrefixEntry,
    SafetyLimits,
)

__all__ = [
    # Enums
    "LimitName",
    "Direction",
    # Runtime objects
    "SafetyLimits",
    # Registry entry types (frozen, loaded from YAML)
    "LimitEntry",
    "RowPrefixEntry",
    "ProtectedInstructionEntry",
    "DirectionEntry",
    # Registry
    "VocabularyRegistry",
    "get_registry",
]
