"""
End-to-end frequency analysis pipeline.

    SampleBlock
        │
        ▼
    SpectralAnalyzer ──► MagnitudeSpectrum
        │
        ├─► PeakEstimator ──► detected Hz ──► classify() ──► CanonicalMatch
        │                              └──► assess()   ──► SafetyAssessment
        ├─► pattern scores (golden ratio, 111 pattern, DNA resonance, ...)
        └─► fractal_dimension()

The pipeline never raises for bad audio: invalid or silent input and
unexpected numeric failures degrade to the default canonical entry at full
volume, flagged through ``AnalysisResult.status``.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

import librosa
import numpy as np

from harmoniscope.core.classifier import CanonicalMatch, classify
from harmoniscope.core.fractal import fractal_dimension
from harmoniscope.core.patterns import (
    dna_resonance_score,
    golden_ratio_harmonics,
    infinite_order_harmonics,
    pattern_111_presence,
    sacred_geometry_alignment,
    schumann_harmony,
)
from harmoniscope.core.peak import PERCEPTUAL_WEIGHTS, PeakEstimator
from harmoniscope.core.safety import SafetyAssessment, assess
from harmoniscope.core.spectrum import MAX_WINDOW, SampleBlock, SpectralAnalyzer

logger = logging.getLogger(__name__)

STATUS_OK = "ok"
STATUS_SILENT = "silent"
STATUS_FAILED = "failed"


@dataclass(frozen=True)
class AnalysisConfig:
    """Caller-owned analysis settings, shared read-only across calls."""

    window_length: Optional[int] = None
    max_window: int = MAX_WINDOW
    low_cutoff: float = 20.0
    high_cutoff: float = 4000.0
    window: str = "golden"
    weights: tuple[tuple[float, float], ...] = PERCEPTUAL_WEIGHTS
    # Excerpt selection for decoded files
    excerpt_duration: float = 3.0
    excerpt_max_offset: float = 30.0


@dataclass(frozen=True)
class AnalysisResult:
    """Everything one analysis call produces."""

    detected_hz: float
    canonical: CanonicalMatch
    safety: SafetyAssessment
    harmonic_series: tuple[float, ...] = field(default_factory=tuple)
    golden_ratio_alignment: float = 0.0
    pattern_111_presence: float = 0.0
    dna_resonance_score: float = 0.0
    fractal_dimension: float = 1.0
    infinite_order_harmonics: tuple[float, ...] = field(default_factory=tuple)
    sacred_geometry_alignment: float = 0.0
    schumann_harmony: float = 0.0
    resonance_points: tuple[float, ...] = field(default_factory=tuple)
    status: str = STATUS_OK

    @property
    def analyzed(self) -> bool:
        return self.status == STATUS_OK

    @classmethod
    def fallback(cls, status: str) -> "AnalysisResult":
        """Default result for input that could not be analysed."""
        return cls(
            detected_hz=0.0,
            canonical=classify(0.0),
            safety=assess(0.0),
            status=status,
        )


class FrequencyPipeline:
    """
    Runs the full analysis on sample blocks or audio files.

    The pipeline holds only its configuration; every call allocates its own
    spectrum and result, so one instance can serve concurrent callers.
    """

    def __init__(self, config: Optional[AnalysisConfig] = None):
        """
        Initialize the pipeline.

        Args:
            config: Analysis settings. Defaults to AnalysisConfig().

        Raises:
            ValueError: If the spectral settings are invalid.
        """
        self.config = config or AnalysisConfig()
        self.analyzer = SpectralAnalyzer(
            window_length=self.config.window_length,
            max_window=self.config.max_window,
            low_cutoff=self.config.low_cutoff,
            high_cutoff=self.config.high_cutoff,
            window=self.config.window,
        )
        self.estimator = PeakEstimator(self.config.weights)

    def analyze(self, block: SampleBlock) -> AnalysisResult:
        """
        Analyse one sample block.

        Args:
            block: Mono samples and sample rate.

        Returns:
            AnalysisResult; status is "silent" for empty or silent input and
            "failed" when a stage broke, both with default classification.
        """
        try:
            return self._analyze(block)
        except Exception as exc:
            logger.warning("Analysis failed, using defaults: %s", exc)
            logger.debug("Analysis failure details", exc_info=True)
            return AnalysisResult.fallback(STATUS_FAILED)

    def _analyze(self, block: SampleBlock) -> AnalysisResult:
        spectrum = self.analyzer.analyze(block)
        detected = self.estimator.estimate(spectrum)

        if detected <= 0.0:
            logger.debug("No dominant peak found (%d samples)", block.n_samples)
            return AnalysisResult.fallback(STATUS_SILENT)

        detection = golden_ratio_harmonics(spectrum, detected)
        presence, resonance_points = pattern_111_presence(spectrum)

        result = AnalysisResult(
            detected_hz=detected,
            canonical=classify(detected),
            safety=assess(detected),
            harmonic_series=detection.harmonic_series,
            golden_ratio_alignment=detection.golden_ratio_alignment,
            pattern_111_presence=presence,
            dna_resonance_score=dna_resonance_score(spectrum),
            fractal_dimension=fractal_dimension(spectrum),
            infinite_order_harmonics=infinite_order_harmonics(detected),
            sacred_geometry_alignment=sacred_geometry_alignment(spectrum),
            schumann_harmony=schumann_harmony(spectrum),
            resonance_points=resonance_points,
        )
        logger.debug(
            "Detected %.2f Hz -> %s Hz (%s)",
            detected,
            result.canonical.hz,
            result.safety.tier.name,
        )
        return result

    def load_audio(
        self,
        audio_path: Union[str, Path],
        sr: Optional[int] = None,
    ) -> tuple[np.ndarray, int]:
        """
        Decode an audio file to mono.

        Args:
            audio_path: Path to audio file (wav, mp3, flac).
            sr: Target sample rate. None preserves the original.

        Returns:
            Tuple of (audio_signal, sample_rate).
        """
        y, sr_out = librosa.load(audio_path, sr=sr, mono=True)
        return y, int(sr_out)

    def excerpt(self, y: np.ndarray, sr: int) -> SampleBlock:
        return SampleBlock.excerpt(
            y,
            sr,
            duration=self.config.excerpt_duration,
            max_offset=self.config.excerpt_max_offset,
        )

    def process_file(self, audio_path: Union[str, Path]) -> AnalysisResult:
        """
        Decode *audio_path*, pick the analysis excerpt and analyse it.

        Decoding errors propagate: a file that cannot be read is the
        caller's problem, not a 0 Hz detection.
        """
        y, sr = self.load_audio(audio_path)
        return self.analyze(self.excerpt(y, sr))
