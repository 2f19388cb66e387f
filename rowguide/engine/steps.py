"""
Step-Stream Engine: expand, compress, and zipper-merge run-length streams.

A stream is an ordered sequence of Steps.  The *expanded* form has one Step
per atomic unit (every count is 1); the *compressed* form merges each maximal
run of adjacent equal descriptions into one Step.  The two are inverse up to
run grouping:

    compress(expand(x)) == compress(x)
    expand(compress(expand(x))) == expand(x)

Compression is a run-length merge only.  It never sorts and never joins equal
descriptions that are not adjacent.

Every public function validates its input first (see validation.py) and
returns a StepsResult.  Invalid input, safety-limit violations and structural
mismatches produce an empty stream plus diagnostics; nothing raises.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from itertools import groupby
from operator import attrgetter
from typing import Sequence

from rowguide.engine.validation import validate_stream
from rowguide.schemas.diagnostics import Diagnostic, error, info, warning
from rowguide.schemas.document import Step
from rowguide.vocabulary.registry import get_registry
from rowguide.vocabulary.types import SafetyLimits


@dataclass(frozen=True)
class StepsResult:
    """Outcome of one engine operation.

    Attributes:
        steps: The produced stream (empty on any failure).
        diagnostics: Everything worth telling the caller, in emission order.
    """

    steps: tuple[Step, ...]
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def total_count(self) -> int:
        return sum(step.count for step in self.steps)


@dataclass(frozen=True)
class ParitySplit:
    """A stream dealt into two by expanded index parity.

    Attributes:
        even: Compressed units from even expanded indices (0, 2, 4, ...).
        odd: Compressed units from odd expanded indices (1, 3, 5, ...).
        diagnostics: Diagnostics from the underlying expand/compress calls.
    """

    even: tuple[Step, ...]
    odd: tuple[Step, ...]
    diagnostics: tuple[Diagnostic, ...] = ()


# ── Public operations ─────────────────────────────────────────────────────────


def expand_steps(steps: Sequence[Step], limits: SafetyLimits | None = None) -> StepsResult:
    """
    Expand ``steps`` to one Step per unit.

    Steps with count <= 0 are skipped.  Output ids are reassigned densely in
    emission order starting from 0.
    """
    limits = limits or get_registry().limits
    problems = validate_stream(steps, "expand_steps", limits)
    if problems:
        return StepsResult(steps=(), diagnostics=tuple(problems))
    try:
        expanded = _expand(steps)
    except Exception as exc:  # noqa: BLE001 — public boundary never raises
        return _fallback("expand_steps", exc)
    return StepsResult(steps=expanded, diagnostics=_skipped_counts("expand_steps", steps))


def compress_steps(steps: Sequence[Step], limits: SafetyLimits | None = None) -> StepsResult:
    """
    Merge adjacent equal descriptions into run-length Steps.

    Output ids run from 1.  Steps with count <= 0 are dropped before merging.
    """
    limits = limits or get_registry().limits
    problems = validate_stream(steps, "compress_steps", limits)
    if problems:
        return StepsResult(steps=(), diagnostics=tuple(problems))
    try:
        compressed = _compress(steps)
    except Exception as exc:  # noqa: BLE001 — public boundary never raises
        return _fallback("compress_steps", exc)
    return StepsResult(steps=compressed, diagnostics=_skipped_counts("compress_steps", steps))


def zipper_steps(
    steps_a: Sequence[Step],
    steps_b: Sequence[Step],
    limits: SafetyLimits | None = None,
) -> StepsResult:
    """
    Interleave two streams unit by unit and compress the result.

    The expanded lengths may differ by at most one (one row may carry an
    extra turning unit).  A larger difference is a structural mismatch: the
    result is empty and a warning diagnostic is returned, since truncating or
    padding would change the pattern.

    For ``i`` in ``range(max(nA, nB))`` the interleaved stream takes ``A[i]``
    then ``B[i]``, skipping whichever side has run out.
    """
    limits = limits or get_registry().limits
    problems = validate_stream(steps_a, "zipper_steps", limits) + validate_stream(
        steps_b, "zipper_steps", limits
    )
    if problems:
        return StepsResult(steps=(), diagnostics=tuple(problems))

    try:
        expanded_a = _expand(steps_a)
        expanded_b = _expand(steps_b)

        if abs(len(expanded_a) - len(expanded_b)) > 1:
            return StepsResult(
                steps=(),
                diagnostics=(
                    warning(
                        "zipper_steps",
                        f"Step length mismatch: {len(expanded_a)} vs {len(expanded_b)}. "
                        "Cannot combine rows with mismatched step counts.",
                        expanded_a_length=len(expanded_a),
                        expanded_b_length=len(expanded_b),
                    ),
                ),
            )

        interleaved: list[Step] = []
        for index in range(max(len(expanded_a), len(expanded_b))):
            if index < len(expanded_a):
                interleaved.append(expanded_a[index])
            if index < len(expanded_b):
                interleaved.append(expanded_b[index])
        return StepsResult(steps=_compress(interleaved))
    except Exception as exc:  # noqa: BLE001 — public boundary never raises
        return _fallback("zipper_steps", exc)


def split_by_parity(steps: Sequence[Step], limits: SafetyLimits | None = None) -> ParitySplit:
    """
    Expand ``steps`` and deal the units into two compressed streams.

    Even expanded indices go to ``even``, odd ones to ``odd``.  This is how a
    combined "Row 1&2" line is turned back into its two rows.
    """
    result = expand_steps(steps, limits)
    if not result.steps:
        return ParitySplit(even=(), odd=(), diagnostics=result.diagnostics)
    return ParitySplit(
        even=_compress(result.steps[0::2]),
        odd=_compress(result.steps[1::2]),
        diagnostics=result.diagnostics,
    )


# ── Helpers ───────────────────────────────────────────────────────────────────


def _expand(steps: Sequence[Step]) -> tuple[Step, ...]:
    units = (step.description for step in steps if step.count > 0 for _ in range(step.count))
    return tuple(Step(id=index, count=1, description=desc) for index, desc in enumerate(units))


def _compress(steps: Sequence[Step]) -> tuple[Step, ...]:
    runs = groupby((step for step in steps if step.count > 0), key=attrgetter("description"))
    return tuple(
        Step(id=index, count=sum(step.count for step in run), description=desc)
        for index, (desc, run) in enumerate(runs, start=1)
    )


def _skipped_counts(operation: str, steps: Sequence[Step]) -> tuple[Diagnostic, ...]:
    skipped = [index for index, step in enumerate(steps) if step.count <= 0]
    if not skipped:
        return ()
    return (
        info(
            operation,
            f"Skipped {len(skipped)} step(s) with a count of zero or less",
            indices=tuple(skipped),
        ),
    )


def _fallback(operation: str, exc: Exception) -> StepsResult:
    warnings.warn(f"{operation} failed, returning an empty stream: {exc}", stacklevel=3)
    return StepsResult(
        steps=(),
        diagnostics=(error(operation, f"Unable to process step data: {exc}"),),
    )
