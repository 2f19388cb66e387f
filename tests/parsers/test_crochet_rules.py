"""
Tests for the crochet segment rule tables.

Covers:
  - Each top-level rule in table order
  - Repeat spans emit { xN ... } markers
  - Bracket groups use the simple rule table
  - The side-cluster idiom decomposition
  - Unclosed asterisks parse in linear time
"""

import time

import pytest

from rowguide.parsers.crochet import SEGMENT_RULES, SIMPLE_RULES, parse_segment
from rowguide.parsers.crochet.rules import SIDE_CLUSTER_IDIOM, parse_simple_instruction


def _pairs(instructions):
    return [(i.description, i.count) for i in instructions]


class TestRuleTables:
    def test_segment_rule_order(self):
        assert [rule.name for rule in SEGMENT_RULES] == [
            "embedded_repeat",
            "leading_repeat",
            "side_cluster_idiom",
            "bracket_group",
            "parenthetical_note",
            "protected",
            "count_first",
            "count_attached",
            "instruction_first",
            "instruction_count",
            "bare",
        ]

    def test_simple_rules_have_no_grouping(self):
        names = {rule.name for rule in SIMPLE_RULES}
        assert not names & {"embedded_repeat", "leading_repeat", "bracket_group"}


class TestSimpleSegments:
    @pytest.mark.parametrize(
        "segment, expected",
        [
            ("Ch 3", [("Ch", 3)]),
            ("12 Dc in ring", [("Dc in ring", 12)]),
            ("11dc", [("dc", 11)]),
            ("3dc in next st", [("dc in next st", 3)]),
            ("ch2", [("ch", 2)]),
            ("Ch3 in ring", [("Ch in ring", 3)]),
            ("Sl st to join", [("Sl st to join", 1)]),
            ("sc3tog", [("sc3tog", 1)]),
            ("dc5tog", [("dc5tog", 1)]),
            ("ch2sp", [("ch2sp", 1)]),
            ("  6 Tr in Ch 6 space  ", [("Tr in Ch 6 space", 6)]),
        ],
    )
    def test_segment(self, segment, expected):
        assert _pairs(parse_segment(segment)) == expected

    @pytest.mark.parametrize("segment", ["", "   "])
    def test_empty_segment(self, segment):
        assert parse_segment(segment) == []


class TestParentheticalNotes:
    def test_attached_count(self):
        assert _pairs(parse_segment("Ch4 (Counts as first Tr)")) == [
            ("Ch (Counts as first Tr)", 4)
        ]

    def test_count_first(self):
        assert _pairs(parse_segment("3 dc (in same st)")) == [("dc (in same st)", 3)]

    def test_count_last(self):
        assert _pairs(parse_segment("Ch 6 (turning)")) == [("Ch (turning)", 6)]

    def test_no_count(self):
        assert _pairs(parse_segment("join (see note)")) == [("join (see note)", 1)]

    def test_trailing_text_parsed(self):
        assert _pairs(parse_segment("ch2 (turn) 3dc")) == [("ch (turn)", 2), ("dc", 3)]


class TestRepeats:
    def test_leading_repeat(self):
        assert _pairs(parse_segment("*ch1, dc*x3 to end")) == [
            ("{", 3),
            ("ch", 1),
            ("dc", 1),
            ("}", 1),
            ("to end", 1),
        ]

    def test_embedded_repeat(self):
        assert _pairs(parse_segment("sc in next st *ch1, dc*x2")) == [
            ("sc in next st", 1),
            ("{", 2),
            ("ch", 1),
            ("dc", 1),
            ("}", 1),
        ]

    def test_spaced_repeat_close(self):
        assert _pairs(parse_segment("*ch1, dc* x 2")) == [
            ("{", 2),
            ("ch", 1),
            ("dc", 1),
            ("}", 1),
        ]

    def test_nearest_close_wins(self):
        assert _pairs(parse_segment("*dc*x2 then *ch*x3")) == [
            ("{", 2),
            ("dc", 1),
            ("}", 1),
            ("then", 1),
            ("{", 3),
            ("ch", 1),
            ("}", 1),
        ]

    def test_repeat_with_group_inside(self):
        segment = "*sk to next chain space, {2dc, ch2, 2dc} in ch sp*x11"
        assert _pairs(parse_segment(segment)) == [
            ("{", 11),
            ("sk to next chain space", 1),
            ("{", 1),
            ("dc", 2),
            ("ch", 2),
            ("dc", 2),
            ("} in ch sp", 1),
            ("}", 1),
        ]


class TestBracketGroups:
    def test_brace_group_with_repeat_and_trailing_text(self):
        instructions = parse_segment("{2dc, ch2, 2dc}*x3 in chain space")
        assert _pairs(instructions) == [
            ("{", 3),
            ("dc", 2),
            ("ch", 2),
            ("dc", 2),
            ("} in chain space", 1),
        ]

    def test_square_bracket_group(self):
        assert _pairs(parse_segment("[2dc, ch1]*x2 rest")) == [
            ("{", 2),
            ("dc", 2),
            ("ch", 1),
            ("} rest", 1),
        ]

    def test_group_without_repeat(self):
        assert _pairs(parse_segment("{sc, ch 2}")) == [("{", 1), ("sc", 1), ("ch", 2), ("}", 1)]

    def test_simple_instruction_prefers_instruction_first(self):
        assert _pairs(parse_simple_instruction("ch 2")) == [("ch", 2)]
        assert _pairs(parse_simple_instruction("2 dc")) == [("dc", 2)]


class TestSideClusterIdiom:
    def test_fixed_decomposition(self):
        segment = (
            "{ { Ch 6, Sc in next Ch 6 space } * 3, 7 Tr in next Ch 6 space } * "
            + SIDE_CLUSTER_IDIOM
        )
        assert _pairs(parse_segment(segment)) == [
            ("{", 1),
            ("{", 3),
            ("Ch", 6),
            ("Sc in next Ch 6 space", 1),
            ("}", 1),
            ("Tr in next Ch 6 space", 7),
            ("} until side clusters are worked", 1),
        ]


class TestUnclosedAsterisks:
    @pytest.mark.parametrize("segment", ["*" * 100_000, "*x3" + "*" * 100_000])
    def test_parse_in_linear_time(self, segment):
        started = time.perf_counter()
        instructions = parse_segment(segment)
        assert time.perf_counter() - started < 2.0
        assert [i.count for i in instructions] == [1]

    def test_stray_asterisk_is_plain_text(self):
        assert _pairs(parse_segment("dc * 2")) == [("dc * 2", 1)]
