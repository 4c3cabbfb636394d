"""Tests for the JSON report exporter."""

import json

import pytest

from harmoniscope.io.exporter import ReportExporter
from harmoniscope.pipeline import AnalysisConfig, FrequencyPipeline
from harmoniscope.scan import OUTCOME_ANALYZED, OUTCOME_FAILED, OUTCOME_TIMEOUT, ScanOutcome


@pytest.fixture
def exporter():
    return ReportExporter()


@pytest.fixture
def outcomes(pure_sine):
    result = FrequencyPipeline().analyze(pure_sine)
    return [
        ScanOutcome(item="tone.wav", status=OUTCOME_ANALYZED, result=result),
        ScanOutcome(item="slow.wav", status=OUTCOME_TIMEOUT),
        ScanOutcome(item="bad.wav", status=OUTCOME_FAILED, error="cannot decode"),
    ]


class TestReportStructure:
    def test_metadata(self, exporter, outcomes):
        report = exporter.build_report(outcomes)
        assert report["metadata"]["n_items"] == 3
        assert report["metadata"]["n_analyzed"] == 1
        assert report["metadata"]["schema_version"] == "1.0"

    def test_analyzed_entry(self, exporter, outcomes):
        item = exporter.build_report(outcomes)["items"][0]
        assert item["item"] == "tone.wav"
        assert item["outcome"] == "analyzed"

        result = item["result"]
        assert result["status"] == "ok"
        assert result["canonical"]["hz"] == 528
        assert result["canonical"]["name"] == "Miracle"
        assert result["safety"]["tier"] == "SAFE"
        assert result["safety"]["recommended_volume"] == 1.0
        assert result["safety"]["warning"] is None
        assert set(result["scores"]) == {
            "golden_ratio_alignment",
            "pattern_111_presence",
            "dna_resonance",
            "sacred_geometry_alignment",
            "schumann_harmony",
        }

    def test_unanalyzed_entries(self, exporter, outcomes):
        items = exporter.build_report(outcomes)["items"]
        assert items[1]["result"] is None
        assert items[1]["outcome"] == "timeout"
        assert items[2]["error"] == "cannot decode"

    def test_caution_warning_included(self, exporter, sine_block):
        pipeline = FrequencyPipeline(AnalysisConfig(high_cutoff=8000.0))
        result = pipeline.analyze(sine_block((1200.0, 1.0)))
        entry = exporter.result_to_dict(result)
        assert entry["safety"]["tier"] == "CAUTION"
        assert entry["safety"]["warning"].startswith("CAUTION")


class TestRounding:
    def test_precision(self):
        assert ReportExporter(precision=2)._round(1.23456) == 1.23

    def test_non_finite_becomes_none(self, exporter):
        assert exporter._round(float("nan")) is None
        assert exporter._round(float("inf")) is None


class TestExportJson:
    def test_writes_valid_json(self, exporter, outcomes, tmp_path):
        path = exporter.export_json(outcomes, tmp_path / "report.json")
        assert path.exists()

        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        assert data == exporter.build_report(outcomes)
