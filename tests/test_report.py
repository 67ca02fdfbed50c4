"""Tests for report export."""

import json
from datetime import datetime, timedelta, timezone

import pytest
from factories import make_raw, make_result

from crossmodel.analysis.engine import ConsolidationEngine
from crossmodel.analysis.synthesizer import no_analysis_insights
from crossmodel.export.report import (
    calculate_overall_confidence,
    calculate_total_processing_time,
    export_report,
    export_report_json,
    format_timestamp,
    load_consolidated,
)

MOMENT = datetime(2024, 5, 1, 12, 0, 0, 123000, tzinfo=timezone.utc)


class TestFormatTimestamp:
    def test_utc_with_milliseconds(self):
        assert format_timestamp(MOMENT) == "2024-05-01T12:00:00.123Z"

    def test_converts_to_utc(self):
        local = MOMENT.astimezone(timezone(timedelta(hours=2)))
        assert format_timestamp(local) == "2024-05-01T12:00:00.123Z"

    def test_defaults_to_now(self):
        assert format_timestamp().endswith("Z")


class TestExportReport:
    def setup_method(self):
        self.raw = {
            "gpt-4": make_raw(
                confidence=0.9,
                insights=["Revenue grew 20%"],
                recommendations=["Expand into Europe"],
                processing_time=1200,
            ),
            "claude-3": make_raw(
                confidence=0.7,
                insights=["Revenue is up"],
                recommendations=["Reduce headcount"],
                processing_time=900,
            ),
        }
        self.insights = ConsolidationEngine().run(self.raw).insights

    def test_document_layout(self):
        report = export_report(self.insights, self.raw, content_id="upload-42", timestamp=MOMENT)

        assert report["timestamp"] == "2024-05-01T12:00:00.123Z"
        assert report["uploadId"] == "upload-42"
        assert report["analysisResults"]["ai"]["gpt-4"]["confidence"] == 0.9
        assert report["analysisResults"]["consolidated"]["confidenceScore"] == pytest.approx(0.8)
        assert report["summary"]["modelsUsed"] == ["gpt-4", "claude-3"]
        assert report["summary"]["totalProcessingTime"] == 2100
        assert report["summary"]["overallConfidence"] == pytest.approx(0.8)
        assert report["summary"]["keyInsights"] == self.insights.common_findings

    def test_json_round_trip_preserves_consolidated_insights(self):
        text = export_report_json(self.insights, self.raw, timestamp=MOMENT)

        document = json.loads(text)
        assert document["uploadId"] is None
        assert load_consolidated(document) == self.insights

    def test_accepts_normalized_results(self):
        results = {"gpt-4": make_result("gpt-4", confidence=0.6, processing_time_ms=400)}
        report = export_report(no_analysis_insights(), results, timestamp=MOMENT)

        assert report["analysisResults"]["ai"]["gpt-4"]["processingTimeMs"] == 400
        assert report["summary"]["totalProcessingTime"] == 400


class TestReportStatistics:
    def test_total_processing_time_accepts_field_spellings(self):
        raw = {
            "gpt-4": {"processingTime": 1000},
            "claude-3": {"processingTimeMs": 250.4},
            "gemini-pro": {"confidence": 0.5},
        }
        assert calculate_total_processing_time(raw) == 1250

    def test_zero_consolidated_score_is_not_averaged_in(self):
        raw = {"gpt-4": make_raw(confidence=0.6)}
        assert calculate_overall_confidence(no_analysis_insights(), raw) == pytest.approx(0.6)

    def test_no_confidences_at_all(self):
        assert calculate_overall_confidence(no_analysis_insights(), {}) == 0.0
