"""
Segment rule tables for the free-text instruction parser.

A segment is one top-level piece of a row body (see splitter.py).  Each
rule pairs a matcher with a builder; the first rule whose matcher returns a
non-None value wins and its builder turns the segment into Instructions.

SEGMENT_RULES is the full table used for top-level segments:

     1  embedded_repeat     before *inner*xN after  (first asterisk opens)
     2  leading_repeat      *inner*xN after
     3  side_cluster_idiom  one fixed decomposition (see below)
     4  bracket_group       [a, b]*xN rest  /  {a, b}*xN rest
     5  parenthetical_note  Ch4 (counts as dc) rest
     6  protected           sc3tog, dc5tog, ch2sp, ...
     7  count_first         6 Tr in Ch 6 space
     8  count_attached      11dc
     9  instruction_first   Ch 3
    10  instruction_count   Ch3 / Ch3 in ring
    11  bare                Sl st to join

SIMPLE_RULES is used inside bracket groups.  It has no repeat or group
handling, so a group can never recurse into itself, and it tries the
instruction-first forms before the count-first ones.

Repeat spans emit an opening ``{`` whose count is the repeat count, the
parsed inner segments, and a closing ``}`` with count 1.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable

from rowguide.parsers.crochet.splitter import REPEAT_CLOSE, split_preserving_groups
from rowguide.vocabulary.registry import get_registry

OPEN_GROUP = "{"
CLOSE_GROUP = "}"

SIDE_CLUSTER_IDIOM = "until side clusters are worked"


@dataclass(frozen=True)
class Instruction:
    """One parsed instruction before it is numbered into a Row."""

    description: str
    count: int


@dataclass(frozen=True)
class SegmentRule:
    """
    A matcher/builder pair.

    ``match`` returns None when the rule does not apply, otherwise a value
    (usually an ``re.Match``) handed to ``build`` together with the segment.
    """

    name: str
    match: Callable[[str], Any]
    build: Callable[[Any, str], list[Instruction]]


def apply_rules(segment: str, rules: tuple[SegmentRule, ...]) -> list[Instruction]:
    for rule in rules:
        matched = rule.match(segment)
        if matched is not None:
            return rule.build(matched, segment)
    return []


def parse_segment(segment: str) -> list[Instruction]:
    """Parse one top-level segment with the full rule table."""
    return apply_rules(segment.strip(), SEGMENT_RULES)


def parse_simple_instruction(instruction: str) -> list[Instruction]:
    """Parse one instruction from inside a bracket group."""
    return apply_rules(instruction.strip(), SIMPLE_RULES)


# ── Patterns ──────────────────────────────────────────────────────────────────

_LEADING_REPEAT = re.compile(r"^\*(.+)\*x(\d+)(.*)$")
_BRACKET_GROUP = re.compile(r"\[([^\]]+)\](.*)$")
_BRACE_GROUP = re.compile(r"\{([^}]+)\}(.*)$")
_GROUP_REPEAT = re.compile(r"^(.*)?\*x(\d+)(.*)$")
_NOTE = re.compile(r"^(.+?)\s*\(([^)]+)\)(.*)$")
_NOTE_ATTACHED_COUNT = re.compile(r"^([A-Za-z]+)(\d+)$")
_NOTE_COUNT_FIRST = re.compile(r"^(\d+)\s+(.+)$")
_NOTE_COUNT_LAST = re.compile(r"^(.+)\s+(\d+)$")
_COUNT_FIRST = re.compile(r"^(\d+)\s+(.+)$")
_COUNT_ATTACHED = re.compile(r"^(\d+)([a-zA-Z]+(?:\s+.*)?)$")
_INSTRUCTION_FIRST = re.compile(r"^([A-Za-z\s]+?)\s+(\d+)$")
_INSTRUCTION_COUNT = re.compile(r"^([A-Za-z]+)(\d+)(.*)$")


# ── Matchers ──────────────────────────────────────────────────────────────────


def _find_repeat(segment: str) -> tuple[str, str, int, str] | None:
    """
    Locate the first ``*inner*xN`` span; return (before, inner, count, after).

    Only the earliest asterisk can open the span: if no close follows it,
    none follows any later asterisk either.  The nearest close wins.
    """
    opener = segment.find("*")
    if opener < 0:
        return None
    closing = REPEAT_CLOSE.search(segment, opener + 2)
    if closing is None:
        return None
    inner = segment[opener + 1 : closing.start()]
    return segment[:opener], inner, int(closing.group(1)), segment[closing.end() :]


def _contains_pair(opener: str, closer: str) -> Callable[[str], bool | None]:
    def match(segment: str) -> bool | None:
        return True if opener in segment and closer in segment else None

    return match


def _match_side_cluster_idiom(segment: str) -> bool | None:
    if OPEN_GROUP in segment and CLOSE_GROUP in segment and SIDE_CLUSTER_IDIOM in segment:
        return True
    return None


def _match_group(segment: str) -> bool | None:
    has_brackets = "[" in segment and "]" in segment
    has_braces = OPEN_GROUP in segment and CLOSE_GROUP in segment
    return True if has_brackets or has_braces else None


def _match_protected(segment: str) -> str | None:
    return get_registry().match_protected(segment)


def _match_bare(segment: str) -> str | None:
    return segment or None


# ── Builders ──────────────────────────────────────────────────────────────────


def _repeat(count: int, inner: str) -> list[Instruction]:
    instructions = [Instruction(OPEN_GROUP, count)]
    for inner_segment in split_preserving_groups(inner, ","):
        instructions.extend(parse_segment(inner_segment))
    instructions.append(Instruction(CLOSE_GROUP, 1))
    return instructions


def _build_embedded_repeat(
    found: tuple[str, str, int, str], segment: str
) -> list[Instruction]:
    before, inner, count, after = found
    instructions: list[Instruction] = []
    if before.strip():
        instructions.extend(parse_segment(before))
    instructions.extend(_repeat(count, inner))
    if after.strip():
        instructions.extend(parse_segment(after))
    return instructions


def _build_leading_repeat(match: re.Match[str], segment: str) -> list[Instruction]:
    inner, count, after = match.groups()
    instructions = _repeat(int(count), inner)
    if after.strip():
        instructions.extend(parse_segment(after))
    return instructions


def _build_side_cluster_idiom(match: Any, segment: str) -> list[Instruction]:
    # "{ { Ch 6, Sc in next Ch 6 space } * 3, 7 Tr in next Ch 6 space } * until
    # side clusters are worked" has two levels of braces; the group rule only
    # handles one, so this idiom is decomposed by hand.
    return [
        Instruction(OPEN_GROUP, 1),
        Instruction(OPEN_GROUP, 3),
        Instruction("Ch", 6),
        Instruction("Sc in next Ch 6 space", 1),
        Instruction(CLOSE_GROUP, 1),
        Instruction("Tr in next Ch 6 space", 7),
        Instruction(f"{CLOSE_GROUP} {SIDE_CLUSTER_IDIOM}", 1),
    ]


def _build_group(match: Any, segment: str) -> list[Instruction]:
    group = _BRACKET_GROUP.search(segment) or _BRACE_GROUP.search(segment)
    if group is None:
        return [Instruction(segment, 1)]

    inner, after = group.group(1), group.group(2).strip()
    count, remaining = 1, after
    repeat = _GROUP_REPEAT.match(after)
    if repeat:
        count = int(repeat.group(2))
        remaining = f"{repeat.group(1) or ''} {repeat.group(3) or ''}".strip()

    instructions = [Instruction(OPEN_GROUP, count)]
    for part in inner.split(","):
        instructions.extend(parse_simple_instruction(part))
    closing = f"{CLOSE_GROUP} {remaining}" if remaining else CLOSE_GROUP
    instructions.append(Instruction(closing, 1))
    return instructions


def _build_note(match: Any, segment: str) -> list[Instruction]:
    note_match = _NOTE.match(segment)
    if note_match is None:
        return []
    before = note_match.group(1).strip()
    note = note_match.group(2).strip()
    after = note_match.group(3).strip()

    attached = _NOTE_ATTACHED_COUNT.match(before)
    count_first = _NOTE_COUNT_FIRST.match(before)
    count_last = _NOTE_COUNT_LAST.match(before)
    if attached:
        instructions = [Instruction(f"{attached.group(1)} ({note})", int(attached.group(2)))]
    elif count_first:
        instructions = [Instruction(f"{count_first.group(2)} ({note})", int(count_first.group(1)))]
    elif count_last:
        instructions = [Instruction(f"{count_last.group(1)} ({note})", int(count_last.group(2)))]
    else:
        instructions = [Instruction(f"{before} ({note})", 1)]

    if after:
        instructions.extend(parse_segment(after))
    return instructions


def _build_protected(name: str, segment: str) -> list[Instruction]:
    return [Instruction(name, 1)]


def _build_count_first(match: re.Match[str], segment: str) -> list[Instruction]:
    return [Instruction(match.group(2), int(match.group(1)))]


def _build_instruction_first(match: re.Match[str], segment: str) -> list[Instruction]:
    return [Instruction(match.group(1).strip(), int(match.group(2)))]


def _build_instruction_count(match: re.Match[str], segment: str) -> list[Instruction]:
    instruction, count, remainder = match.group(1), int(match.group(2)), match.group(3).strip()
    description = f"{instruction} {remainder}" if remainder else instruction
    return [Instruction(description, count)]


def _build_bare(text: str, segment: str) -> list[Instruction]:
    return [Instruction(text, 1)]


# ── Rule tables ───────────────────────────────────────────────────────────────

_PROTECTED = SegmentRule("protected", _match_protected, _build_protected)
_COUNT_FIRST_RULE = SegmentRule("count_first", _COUNT_FIRST.match, _build_count_first)
_COUNT_ATTACHED_RULE = SegmentRule("count_attached", _COUNT_ATTACHED.match, _build_count_first)
_INSTRUCTION_FIRST_RULE = SegmentRule(
    "instruction_first", _INSTRUCTION_FIRST.match, _build_instruction_first
)
_INSTRUCTION_COUNT_RULE = SegmentRule(
    "instruction_count", _INSTRUCTION_COUNT.match, _build_instruction_count
)
_BARE = SegmentRule("bare", _match_bare, _build_bare)

SEGMENT_RULES: tuple[SegmentRule, ...] = (
    SegmentRule("embedded_repeat", _find_repeat, _build_embedded_repeat),
    SegmentRule("leading_repeat", _LEADING_REPEAT.match, _build_leading_repeat),
    SegmentRule("side_cluster_idiom", _match_side_cluster_idiom, _build_side_cluster_idiom),
    SegmentRule("bracket_group", _match_group, _build_group),
    SegmentRule("parenthetical_note", _contains_pair("(", ")"), _build_note),
    _PROTECTED,
    _COUNT_FIRST_RULE,
    _COUNT_ATTACHED_RULE,
    _INSTRUCTION_FIRST_RULE,
    _INSTRUCTION_COUNT_RULE,
    _BARE,
)

SIMPLE_RULES: tuple[SegmentRule, ...] = (
    _PROTECTED,
    _INSTRUCTION_FIRST_RULE,
    _INSTRUCTION_COUNT_RULE,
    _COUNT_FIRST_RULE,
    _COUNT_ATTACHED_RULE,
    _BARE,
)
