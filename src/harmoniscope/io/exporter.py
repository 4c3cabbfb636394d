"""
Report serialization module.

Exports analysis results and scan outcomes to a JSON-ready report for
presentation layers and batch tooling.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Optional, Union

import numpy as np

from harmoniscope.core.safety import safety_warning
from harmoniscope.pipeline import AnalysisResult
from harmoniscope.scan import ScanOutcome


@dataclass
class ReportMetadata:
    """Metadata header for an analysis report."""

    n_items: int
    n_analyzed: int
    version: str = "1.0"
    schema_version: str = "1.0"


class ReportExporter:
    """
    Exports analysis results to a JSON report.

    Each entry carries the canonical match, raw detected frequency, pattern
    scores, fractal dimension and safety tier with its recommended volume.
    """

    def __init__(self, precision: int = 4):
        """
        Initialize the exporter.

        Args:
            precision: Decimal places for floating point values.
        """
        self.precision = precision

    def _round(self, value: float) -> Optional[float]:
        """Round to configured precision; non-finite values become None."""
        f = float(value)
        if np.isnan(f) or np.isinf(f):
            return None
        return round(f, self.precision)

    def _round_all(self, values: Iterable[float]) -> list[Optional[float]]:
        return [self._round(v) for v in values]

    def result_to_dict(self, result: AnalysisResult) -> dict[str, Any]:
        """
        Build the dictionary for a single analysis result.

        Args:
            result: Result from FrequencyPipeline.

        Returns:
            Dictionary with all result fields.
        """
        entry = result.canonical.entry
        return {
            "status": result.status,
            "detected_hz": self._round(result.detected_hz),
            "canonical": {
                "hz": entry.hz,
                "name": entry.name,
                "chakra": entry.chakra,
                "color": entry.color,
                "benefit": entry.benefit,
                "deviation_hz": self._round(result.canonical.deviation_hz),
            },
            "scores": {
                "golden_ratio_alignment": self._round(result.golden_ratio_alignment),
                "pattern_111_presence": self._round(result.pattern_111_presence),
                "dna_resonance": self._round(result.dna_resonance_score),
                "sacred_geometry_alignment": self._round(result.sacred_geometry_alignment),
                "schumann_harmony": self._round(result.schumann_harmony),
            },
            "fractal_dimension": self._round(result.fractal_dimension),
            "harmonic_series": self._round_all(result.harmonic_series),
            "infinite_order_harmonics": self._round_all(result.infinite_order_harmonics),
            "resonance_points": self._round_all(result.resonance_points),
            "safety": {
                "tier": result.safety.tier.name,
                "recommended_volume": self._round(result.safety.recommended_volume),
                "warning": safety_warning(result.detected_hz),
            },
        }

    def outcome_to_dict(self, outcome: ScanOutcome) -> dict[str, Any]:
        """Dictionary for one scan outcome; unanalysed items carry no result."""
        return {
            "item": str(outcome.item),
            "outcome": outcome.status,
            "error": outcome.error,
            "result": self.result_to_dict(outcome.result) if outcome.result is not None else None,
        }

    def build_report(self, outcomes: list[ScanOutcome]) -> dict[str, Any]:
        """
        Build the complete report dictionary.

        Args:
            outcomes: Scan outcomes, in scan order.

        Returns:
            Report dictionary ready for serialization.
        """
        metadata = ReportMetadata(
            n_items=len(outcomes),
            n_analyzed=sum(1 for o in outcomes if o.analyzed),
        )
        return {
            "metadata": {
                "n_items": metadata.n_items,
                "n_analyzed": metadata.n_analyzed,
                "version": metadata.version,
                "schema_version": metadata.schema_version,
            },
            "items": [self.outcome_to_dict(o) for o in outcomes],
        }

    def export_json(
        self,
        outcomes: list[ScanOutcome],
        output_path: Union[str, Path],
        indent: int = 2,
    ) -> Path:
        """
        Export the report to a JSON file.

        Args:
            outcomes: Scan outcomes.
            output_path: Path for output JSON file.
            indent: JSON indentation level.

        Returns:
            Path to written file.
        """
        report = self.build_report(outcomes)
        output_path = Path(output_path)

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(report, f, indent=indent)

        return output_path
