"""
Tests for the Step-Stream Engine.

Covers:
  - expand: one unit per count, dense ids from 0, non-positive counts skipped
  - compress: run-length merge of adjacent labels only, ids from 1
  - round trip: compress(expand(x)) == compress(x), expand is stable
  - zipper: interleave on equal and off-by-one lengths, fail closed beyond
  - split_by_parity: even/odd deal conserves units
  - limits and invalid input yield empty results with diagnostics, never raise
"""

import warnings

import pytest

from rowguide.engine import compress_steps, expand_steps, split_by_parity, zipper_steps
from rowguide.schemas import Severity, Step
from rowguide.vocabulary import SafetyLimits

_STREAM = (Step(1, 3, "A"), Step(2, 2, "B"), Step(3, 1, "A"))

_TINY = SafetyLimits(max_stream_steps=3, max_expanded_units=10, max_input_chars=100)


def _labels(steps):
    return [step.description for step in steps]


def _pairs(steps):
    return [(step.count, step.description) for step in steps]


# ── expand ────────────────────────────────────────────────────────────────────


class TestExpand:
    def test_one_unit_per_count(self):
        result = expand_steps(_STREAM)
        assert _labels(result.steps) == ["A", "A", "A", "B", "B", "A"]
        assert all(step.count == 1 for step in result.steps)

    def test_ids_dense_from_zero(self):
        result = expand_steps(_STREAM)
        assert [step.id for step in result.steps] == list(range(6))

    def test_empty(self):
        result = expand_steps([])
        assert result.steps == ()
        assert result.diagnostics == ()

    def test_non_positive_counts_skipped(self):
        result = expand_steps([Step(1, 0, "A"), Step(2, 2, "B"), Step(3, -1, "C")])
        assert _labels(result.steps) == ["B", "B"]
        assert len(result.diagnostics) == 1
        assert result.diagnostics[0].severity == Severity.INFO
        assert result.diagnostics[0].context["indices"] == (0, 2)

    def test_accepts_list(self):
        assert expand_steps(list(_STREAM)).total_count == 6


# ── compress ──────────────────────────────────────────────────────────────────


class TestCompress:
    def test_merges_adjacent_runs(self):
        stream = [Step(0, 1, "A"), Step(1, 1, "A"), Step(2, 2, "B"), Step(3, 1, "B")]
        result = compress_steps(stream)
        assert _pairs(result.steps) == [(2, "A"), (3, "B")]

    def test_does_not_merge_non_adjacent(self):
        result = compress_steps(expand_steps(_STREAM).steps)
        assert _pairs(result.steps) == [(3, "A"), (2, "B"), (1, "A")]

    def test_ids_from_one(self):
        result = compress_steps(expand_steps(_STREAM).steps)
        assert [step.id for step in result.steps] == [1, 2, 3]

    def test_empty(self):
        assert compress_steps(()).steps == ()

    def test_single_step(self):
        assert _pairs(compress_steps([Step(9, 4, "dc")]).steps) == [(4, "dc")]

    def test_non_positive_counts_dropped_before_merge(self):
        stream = [Step(1, 2, "A"), Step(2, 0, "B"), Step(3, 1, "A")]
        assert _pairs(compress_steps(stream).steps) == [(3, "A")]


# ── round trip ────────────────────────────────────────────────────────────────


class TestRoundTrip:
    @pytest.mark.parametrize(
        "stream",
        [
            _STREAM,
            (Step(1, 1, "A"),),
            (Step(1, 2, "A"), Step(2, 3, "A"), Step(3, 1, "B")),
            (Step(1, 5, "{"), Step(2, 2, "dc"), Step(3, 1, "}")),
        ],
    )
    def test_compress_of_expand_equals_compress(self, stream):
        assert compress_steps(expand_steps(stream).steps).steps == compress_steps(stream).steps

    def test_expand_is_stable_through_compress(self):
        expanded = expand_steps(_STREAM).steps
        again = expand_steps(compress_steps(expanded).steps).steps
        assert again == expanded

    def test_compress_is_idempotent(self):
        once = compress_steps(_STREAM).steps
        assert compress_steps(once).steps == once

    def test_total_preserved(self):
        assert compress_steps(expand_steps(_STREAM).steps).total_count == 6


# ── zipper ────────────────────────────────────────────────────────────────────


class TestZipper:
    def test_equal_lengths_interleave(self):
        a = [Step(1, 2, "A"), Step(2, 1, "B")]
        b = [Step(1, 1, "C"), Step(2, 2, "D")]
        result = zipper_steps(a, b)
        assert _labels(expand_steps(result.steps).steps) == ["A", "C", "A", "D", "B", "D"]
        assert result.diagnostics == ()

    def test_interleave_then_compress(self):
        result = zipper_steps([Step(1, 2, "A")], [Step(1, 2, "A")])
        assert _pairs(result.steps) == [(4, "A")]

    def test_a_one_longer(self):
        result = zipper_steps([Step(1, 3, "A")], [Step(1, 2, "B")])
        assert _labels(expand_steps(result.steps).steps) == ["A", "B", "A", "B", "A"]

    def test_b_one_longer(self):
        result = zipper_steps([Step(1, 1, "A")], [Step(1, 2, "B")])
        assert _labels(expand_steps(result.steps).steps) == ["A", "B", "B"]

    def test_mismatch_fails_closed(self):
        result = zipper_steps([Step(1, 4, "A")], [Step(1, 2, "B")])
        assert result.steps == ()
        assert len(result.diagnostics) == 1
        diagnostic = result.diagnostics[0]
        assert diagnostic.severity == Severity.WARNING
        assert diagnostic.context["expanded_a_length"] == 4
        assert diagnostic.context["expanded_b_length"] == 2

    def test_both_empty(self):
        assert zipper_steps([], []).steps == ()

    def test_invalid_side_rejected(self):
        result = zipper_steps([Step(1, 1, "A")], "not a stream")
        assert result.steps == ()
        assert result.diagnostics[0].severity == Severity.ERROR


# ── split_by_parity ───────────────────────────────────────────────────────────


class TestSplitByParity:
    def test_even_and_odd_units(self):
        split = split_by_parity([Step(1, 3, "A"), Step(2, 1, "B")])
        assert _pairs(split.even) == [(2, "A")]
        assert _pairs(split.odd) == [(1, "A"), (1, "B")]

    def test_units_conserved(self):
        stream = [Step(1, 5, "A"), Step(2, 3, "B"), Step(3, 2, "C")]
        split = split_by_parity(stream)
        assert sum(s.count for s in split.even) + sum(s.count for s in split.odd) == 10
        assert sum(s.count for s in split.even) == 5

    def test_empty(self):
        split = split_by_parity([])
        assert split.even == ()
        assert split.odd == ()


# ── Validation and limits ─────────────────────────────────────────────────────


class TestInvalidInput:
    @pytest.mark.parametrize("operation", [expand_steps, compress_steps])
    @pytest.mark.parametrize("bad", [None, "AAB", 42, {"steps": []}])
    def test_non_sequence_rejected(self, operation, bad):
        result = operation(bad)
        assert result.steps == ()
        assert result.diagnostics[0].severity == Severity.ERROR

    def test_non_step_elements_rejected(self):
        result = expand_steps([Step(1, 1, "A"), {"id": 2, "count": 1, "description": "B"}])
        assert result.steps == ()
        assert result.diagnostics[0].context["index"] == 1

    def test_too_many_steps(self):
        stream = [Step(i, 1, "A") for i in range(4)]
        result = compress_steps(stream, _TINY)
        assert result.steps == ()
        assert "too large" in result.diagnostics[0].message

    def test_too_many_units(self):
        result = expand_steps([Step(1, 11, "A")], _TINY)
        assert result.steps == ()
        assert result.diagnostics[0].context["total_count"] == 11

    def test_default_limit_on_units(self):
        result = expand_steps([Step(1, 100_001, "A")])
        assert result.steps == ()
        assert result.diagnostics[0].severity == Severity.ERROR

    def test_never_raises_or_warns_on_bad_input(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            zipper_steps(None, [Step(1, "3", "A")])
