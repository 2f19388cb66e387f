"""
End-to-end tests across the rowguide pipeline.

Exercises: page text → extractor → shorthand parser → Document → engine
and migrations, plus the other two notations through the top-level API.
"""

from __future__ import annotations

import logging

import rowguide
from rowguide import (
    Document,
    Severity,
    compress_steps,
    expand_steps,
    extract_beadtool_shorthand,
    extract_word_chart_shorthand,
    log_diagnostics,
    migrate_documents,
    parse_c2c,
    parse_crochet,
    parse_shorthand,
    split_by_parity,
    zipper_steps,
)

_WORD_CHART_PAGES = [
    "Daisy Cuff\nRow Direction Word Chart\n1 & 2 R 3(G) 1(Y)\n2(G)\nPage 1 of 2\n",
    "3 L 1(G) 2(Y) 0(Q)\n4 R 3(Y)\nGrid\nCreated with Pattern Maker\n",
]


def _labels(steps):
    return [step.description for step in steps]


# ── Shorthand ─────────────────────────────────────────────────────────────────


class TestShorthandPipeline:
    def test_parse_and_expand(self):
        result = parse_shorthand("Row 1 (L) (3)A, (2)B\nRow 2 (R) (1)A, (4)B")
        assert not result.rejected
        first, second = result.document.rows
        assert _labels(expand_steps(first.steps).steps) == ["A", "A", "A", "B", "B"]
        assert compress_steps(expand_steps(second.steps).steps).steps == second.steps

    def test_zip_adjacent_rows(self):
        document = parse_shorthand("Row 1 (L) (2)A\nRow 2 (R) (2)B").document
        zipped = zipper_steps(document.rows[0].steps, document.rows[1].steps)
        assert _labels(expand_steps(zipped.steps).steps) == ["A", "B", "A", "B"]

    def test_word_chart_to_document(self):
        shorthand = extract_word_chart_shorthand(_WORD_CHART_PAGES)
        assert shorthand.splitlines()[0] == "Row 1&2 (R) (3)G, (1)Y, (2)G"

        result = parse_shorthand(shorthand)
        rows = result.document.rows
        assert [row.id for row in rows] == [1, 2, 3, 4]
        # G G G Y G G dealt by parity
        assert rows[0].total_count == rows[1].total_count == 3
        # 0(Q) converts to a zero-count step and is dropped
        assert [(s.count, s.description) for s in rows[2].steps] == [(1, "G"), (2, "Y")]

    def test_beadtool_to_document(self):
        pages = [
            "Created with BeadTool 4 - www.beadtool.net\n\nRow 1&2 (L) (2)A, (2)B,\n(2)C\n",
            "Row 3 (R) (3)A\nPage 2 of 2\n",
        ]
        result = parse_shorthand(extract_beadtool_shorthand(pages))
        assert len(result.document.rows) == 3
        assert result.document.rows[0].total_count == 3

    def test_stored_combined_row_migrated(self):
        stored = Document.from_dict(
            {
                "rows": [
                    {"id": 1, "steps": [{"id": 1, "count": 6, "description": "A"}]},
                    {"id": 2, "steps": [{"id": 1, "count": 3, "description": "B"}]},
                ]
            }
        )
        batch = migrate_documents([stored.to_dict()])
        migrated = Document.from_dict(batch.documents[0])
        split = split_by_parity(stored.rows[0].steps)
        assert migrated.rows[0].steps == split.even
        assert migrated.rows[1].steps == split.odd
        assert [row.id for row in migrated.rows] == [1, 2, 3]


# ── Other notations ───────────────────────────────────────────────────────────


class TestOtherNotations:
    def test_c2c(self):
        text = "ROW 1: ↗ 1 squares\n1xA\nROW 2: ↙ 2 squares\n1xB, 1xA"
        document = parse_c2c(text).document
        assert document.total_count == 3

    def test_crochet_summary(self):
        document = parse_crochet("Row 1 – ch4, 12dc in ring\nRow 2 – *ch1, dc*x12").document
        summary = rowguide.describe_pattern(document)
        assert summary.has_repetitions
        assert summary.total_steps == 6


# ── Diagnostics ───────────────────────────────────────────────────────────────


class TestDiagnosticsLogging:
    def test_diagnostics_forwarded_to_logger(self, caplog):
        result = parse_shorthand("Row 1 (L) (3)A, junk")
        logger = logging.getLogger("rowguide.tests")
        with caplog.at_level(logging.INFO, logger="rowguide.tests"):
            log_diagnostics(result.diagnostics, logger)
        assert any("junk" in record.getMessage() for record in caplog.records)
        assert {d.severity for d in result.diagnostics} == {Severity.WARNING}
