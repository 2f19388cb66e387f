"""
Group-aware splitting of free-text instruction rows.

    split_preserving_groups("Ch 3, {2dc, ch2} in sp, *sk 1, dc*x4", ",")
    -> ["Ch 3", "{2dc, ch2} in sp", "*sk 1, dc*x4"]

The delimiter only splits at top level: outside parentheses, braces,
brackets, double quotes and ``*...*xN`` repeat spans.  An asterisk opens a
repeat span when none is open.  Inside a span, an asterisk closes it only
when followed by ``x`` and a count (spaces allowed); the whole ``*xN`` is
kept in the segment.  Any other asterisk inside a span is plain text.
"""

from __future__ import annotations

import re

REPEAT_CLOSE = re.compile(r"\*\s*x\s*(\d+)")

_OPENERS = {"(": "paren", "{": "brace", "[": "bracket"}
_CLOSERS = {")": "paren", "}": "brace", "]": "bracket"}


def split_preserving_groups(text: str, delimiter: str = ",") -> list[str]:
    """
    Split ``text`` on ``delimiter`` at group depth zero.

    Segments are trimmed.  Empty segments between delimiters are kept (the
    caller skips them); a trailing empty segment is dropped.
    """
    segments: list[str] = []
    current: list[str] = []
    depth = {"paren": 0, "brace": 0, "bracket": 0}
    in_repeat = False
    in_quotes = False

    index = 0
    while index < len(text):
        char = text[index]

        if char == '"' and (index == 0 or text[index - 1] != "\\"):
            in_quotes = not in_quotes

        if not in_quotes:
            if char in _OPENERS:
                depth[_OPENERS[char]] += 1
            elif char in _CLOSERS:
                depth[_CLOSERS[char]] -= 1
            elif char == "*":
                if not in_repeat:
                    in_repeat = True
                else:
                    closing = REPEAT_CLOSE.match(text, index)
                    if closing:
                        in_repeat = False
                        current.append(closing.group(0))
                        index = closing.end()
                        continue

        at_top_level = not in_quotes and not in_repeat and not any(depth.values())
        if char == delimiter and at_top_level:
            segments.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        index += 1

    tail = "".join(current).strip()
    if tail:
        segments.append(tail)
    return segments
