"""Dominant-frequency analysis and canonical tone classification."""

from harmoniscope.core.classifier import CanonicalMatch, classify
from harmoniscope.core.safety import SafetyAssessment, SafetyTier, assess
from harmoniscope.core.spectrum import MagnitudeSpectrum, SampleBlock, SpectralAnalyzer
from harmoniscope.io.exporter import ReportExporter
from harmoniscope.pipeline import AnalysisConfig, AnalysisResult, FrequencyPipeline
from harmoniscope.scan import LibraryScanner

__version__ = "0.1.0"
__all__ = [
    "SampleBlock",
    "MagnitudeSpectrum",
    "SpectralAnalyzer",
    "CanonicalMatch",
    "classify",
    "SafetyAssessment",
    "SafetyTier",
    "assess",
    "AnalysisConfig",
    "AnalysisResult",
    "FrequencyPipeline",
    "LibraryScanner",
    "ReportExporter",
]
