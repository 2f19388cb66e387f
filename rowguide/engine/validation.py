"""
Step-stream validation for the Step-Stream Engine.

validate_stream checks a candidate stream before any transformation runs.
It returns a list of Diagnostics rather than raising, so the caller can fall
back to an empty result and report every problem at once.

Checks (all collected, not short-circuited, except for the container check):
  - the stream is a list or tuple
  - it holds at most ``limits.max_stream_steps`` steps
  - every element is a Step with an int id >= 0, an int count and a
    non-empty string description
  - the sum of positive counts is at most ``limits.max_expanded_units``

Steps with count <= 0 are legal here; the transformations drop them.
"""

from __future__ import annotations

from typing import Any

from rowguide.schemas.diagnostics import Diagnostic, error
from rowguide.schemas.document import Step
from rowguide.vocabulary.types import SafetyLimits


def validate_stream(steps: Any, operation: str, limits: SafetyLimits) -> list[Diagnostic]:
    """
    Validate ``steps`` for ``operation``.

    Returns
    -------
    A list of error Diagnostics; empty when the stream may be transformed.
    """
    if steps is None:
        return [error(operation, "Steps stream is missing")]
    if not isinstance(steps, (list, tuple)):
        return [
            error(
                operation,
                "Steps must be a list or tuple",
                actual_type=type(steps).__name__,
            )
        ]

    problems: list[Diagnostic] = []

    if len(steps) > limits.max_stream_steps:
        problems.append(
            error(
                operation,
                f"Steps stream too large (max {limits.max_stream_steps:,} steps)",
                steps_count=len(steps),
            )
        )

    total = 0
    for index, step in enumerate(steps):
        if not isinstance(step, Step):
            problems.append(
                error(
                    operation,
                    f"Step at index {index} is not a Step",
                    index=index,
                    actual_type=type(step).__name__,
                )
            )
            continue
        if not _is_int(step.id) or step.id < 0:
            problems.append(
                error(operation, f"Step at index {index} has invalid id: {step.id!r}", index=index)
            )
        if not _is_int(step.count):
            problems.append(
                error(
                    operation,
                    f"Step at index {index} has invalid count: {step.count!r}",
                    index=index,
                )
            )
        elif step.count > 0:
            total += step.count
        if not isinstance(step.description, str) or not step.description:
            problems.append(
                error(
                    operation,
                    f"Step at index {index} has invalid description: {step.description!r}",
                    index=index,
                )
            )

    if total > limits.max_expanded_units:
        problems.append(
            error(
                operation,
                f"Total step count too large for transformation "
                f"(max {limits.max_expanded_units:,})",
                total_count=total,
            )
        )

    return problems


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
