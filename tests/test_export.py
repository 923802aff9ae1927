"""Tests for CSV export."""

from __future__ import annotations

import csv
import io

from crindex.export import CSV_HEADERS, export_csv, export_rows, quote
from crindex.models.assessment import AssessmentContext, WeightPair
from crindex.models.catalog import DEFAULT_CATALOG, MetricGroup
from crindex.store import default_values, merge_values


def _export(**context: str) -> str:
    return export_csv(default_values(DEFAULT_CATALOG), WeightPair(), AssessmentContext(**context))


class TestExportCsv:
    def test_header_row(self):
        header = _export().split("\n")[0]
        assert header == ",".join(CSV_HEADERS)
        assert header.startswith("group,id,label,value,capacityWeight,adaptabilityWeight,")

    def test_one_row_per_metric(self):
        lines = _export().split("\n")
        assert len(lines) == 1 + len(DEFAULT_CATALOG)

    def test_default_row_formatting(self):
        first = _export().split("\n")[1]
        assert first == (
            'capacity,autonomy,"Autonomy",60,0.50,0.50,55.0,48.0,51.5,21,49,'
            '"Tier 3 (developing)","","","","",""'
        )

    def test_labels_keep_non_breaking_hyphen(self):
        rows = list(csv.reader(io.StringIO(_export())))[1:]
        labels = {row[1]: row[2] for row in rows}
        assert labels["xfn_swarm"] == "Cross\u2011Functional Swarm"

    def test_aggregates_repeat_on_every_row(self):
        rows = export_rows(default_values(DEFAULT_CATALOG), WeightPair(), AssessmentContext())
        assert len({tuple(row[4:]) for row in rows}) == 1

    def test_rows_in_catalog_order(self):
        rows = list(csv.reader(io.StringIO(_export())))[1:]
        assert [row[1] for row in rows] == DEFAULT_CATALOG.ids

    def test_context_fields(self):
        parsed = list(
            csv.DictReader(
                io.StringIO(
                    _export(team_name='Ops "Blue"', department="R&D", assessment_date="2026-05-01")
                )
            )
        )
        assert parsed[0]["teamName"] == 'Ops "Blue"'
        assert parsed[0]["department"] == "R&D"
        assert parsed[0]["assessmentDate"] == "2026-05-01"
        assert parsed[0]["label"] == "Autonomy"

    def test_raw_weights_are_exported(self):
        text = export_csv(
            default_values(DEFAULT_CATALOG),
            WeightPair(capacity_weight=1.5, adaptability_weight=0.125),
            AssessmentContext(),
        )
        row = next(csv.DictReader(io.StringIO(text)))
        assert row["capacityWeight"] == "1.50"
        assert row["adaptabilityWeight"] == "0.12"

    def test_high_tier_label(self):
        adaptability = DEFAULT_CATALOG.by_group(MetricGroup.ADAPTABILITY)
        values = merge_values(DEFAULT_CATALOG, {d.id: 90 for d in adaptability})
        text = export_csv(values, WeightPair(), AssessmentContext())
        row = next(csv.DictReader(io.StringIO(text)))
        assert row["pivotTier"] == "Tier 1 (high)"
        assert row["adaptabilityScore"] == "90.0"


class TestQuote:
    def test_wraps(self):
        assert quote("Idea Flow") == '"Idea Flow"'

    def test_doubles_embedded_quotes(self):
        assert quote('say "hi"') == '"say ""hi"""'
