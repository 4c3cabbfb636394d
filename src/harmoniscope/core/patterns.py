"""
Harmonic and pattern scores.

Every score is a pure function of a magnitude spectrum and lands in [0, 1].
Frequencies that fall outside the spectrum simply contribute nothing.
"""

import math
from dataclasses import dataclass, field

import numpy as np

from harmoniscope.core.spectrum import MagnitudeSpectrum
from harmoniscope.core.tables import (
    CELLULAR_ENERGY_SERIES,
    CELLULAR_ENERGY_WEIGHT,
    DNA_RESONANCE_POINTS,
    PATTERN_111_SERIES,
    PHI,
    RESONANCE_POINT_THRESHOLD,
    SACRED_RATIOS,
    SCHUMANN_HARMONICS,
)

AUDIBLE_MIN_HZ = 20.0
AUDIBLE_MAX_HZ = 20000.0

GOLDEN_SERIES_LENGTH = 12
GOLDEN_SERIES_CENTRE = 6

SIGNIFICANT_MAGNITUDE = 0.1
PARTNER_MAGNITUDE = 0.05
SCHUMANN_OCTAVE_WEIGHT = 0.5
MAX_INFINITE_HARMONICS = 50


@dataclass(frozen=True)
class DetectionResult:
    """Dominant frequency with its golden-ratio harmonic series."""

    dominant_hz: float
    harmonic_series: tuple[float, ...] = field(default_factory=tuple)
    golden_ratio_alignment: float = 0.0


def _clamp01(value: float) -> float:
    return float(min(1.0, max(0.0, value)))


def golden_ratio_harmonics(
    spectrum: MagnitudeSpectrum,
    dominant_hz: float,
) -> DetectionResult:
    """
    Golden-ratio harmonics of *dominant_hz* and how strongly they are present.

    Candidates are ``f * phi ** (n - 6)`` for ``n = 1..12``, kept inside the
    audible band.  Alignment is the mean of the candidate magnitudes relative
    to the spectral peak.
    """
    peak = spectrum.peak_magnitude
    if not math.isfinite(dominant_hz) or dominant_hz <= 0 or peak <= 0:
        return DetectionResult(dominant_hz=max(0.0, float(np.nan_to_num(dominant_hz))))

    harmonics = []
    total = 0.0
    for n in range(1, GOLDEN_SERIES_LENGTH + 1):
        harmonic = dominant_hz * PHI ** (n - GOLDEN_SERIES_CENTRE)
        if AUDIBLE_MIN_HZ < harmonic < AUDIBLE_MAX_HZ:
            harmonics.append(harmonic)
            total += spectrum.magnitude_at(harmonic) / peak

    alignment = _clamp01(total / len(harmonics)) if harmonics else 0.0
    return DetectionResult(
        dominant_hz=float(dominant_hz),
        harmonic_series=tuple(harmonics),
        golden_ratio_alignment=alignment,
    )


def pattern_111_presence(spectrum: MagnitudeSpectrum) -> tuple[float, tuple[float, ...]]:
    """
    Strength of the 111 Hz harmonic pattern.

    Returns:
        Tuple of (presence in [0, 1], 111-series frequencies above the
        resonance threshold).
    """
    total = 0.0
    resonance_points = []
    for freq in PATTERN_111_SERIES:
        magnitude = spectrum.magnitude_at(freq)
        total += magnitude
        if magnitude > RESONANCE_POINT_THRESHOLD:
            resonance_points.append(freq)

    for freq in CELLULAR_ENERGY_SERIES:
        total += spectrum.magnitude_at(freq) * CELLULAR_ENERGY_WEIGHT

    return _clamp01(total / len(PATTERN_111_SERIES)), tuple(resonance_points)


def dna_resonance_score(spectrum: MagnitudeSpectrum) -> float:
    """
    Weighted presence of the DNA resonance frequencies (528 Hz x3, 285 Hz x2).

    Only frequencies that land on a bin of the spectrum count, in the score
    and in the normalising weight alike.
    """
    score = 0.0
    total_weight = 0.0
    for freq, weight in DNA_RESONANCE_POINTS:
        index = spectrum.bin_of(freq)
        if index is None:
            continue
        score += float(spectrum.magnitudes[index]) * weight
        total_weight += weight

    if total_weight <= 0:
        return 0.0
    return _clamp01(score / total_weight)


def sacred_geometry_alignment(spectrum: MagnitudeSpectrum) -> float:
    """Co-occurrence of significant bins at the sacred ratios of each other."""
    mags = spectrum.magnitudes
    n_bins = len(mags)
    if n_bins == 0:
        return 0.0

    significant = np.flatnonzero(mags[1:] > SIGNIFICANT_MAGNITUDE) + 1
    if len(significant) == 0:
        return 0.0

    alignment = 0.0
    for ratio in SACRED_RATIOS:
        partners = np.round(significant * ratio).astype(int)
        in_range = partners < n_bins
        source = significant[in_range]
        target = partners[in_range]
        hits = mags[target] > PARTNER_MAGNITUDE
        alignment += float(np.sum(mags[source[hits]] * mags[target[hits]]))

    return _clamp01(alignment / n_bins)


def schumann_harmony(spectrum: MagnitudeSpectrum) -> float:
    """Presence of the Schumann resonances and (half-weighted) their octaves."""
    harmony = 0.0
    for freq in SCHUMANN_HARMONICS:
        harmony += spectrum.magnitude_at(freq)
        octave = freq * 2
        while octave < AUDIBLE_MAX_HZ:
            harmony += spectrum.magnitude_at(octave) * SCHUMANN_OCTAVE_WEIGHT
            octave *= 2
    return _clamp01(harmony / len(SCHUMANN_HARMONICS))


def _fibonacci(n: int) -> int:
    a, b = 0, 1
    for _ in range(n):
        a, b = b, a + b
    return a


def infinite_order_harmonics(fundamental_hz: float) -> tuple[float, ...]:
    """
    Harmonic, golden, Fibonacci, root and equal-tempered series of a fundamental.

    Values are de-duplicated, kept in the audible band, sorted, and capped
    at 50 entries.
    """
    if not math.isfinite(fundamental_hz) or fundamental_hz <= 0:
        return ()

    values = set()
    for n in range(1, 25):
        values.add(fundamental_hz * n)
        values.add(fundamental_hz * PHI ** (n / 12))
        values.add(fundamental_hz * _fibonacci(n) / 100)
        values.add(fundamental_hz * math.sqrt(n))
        values.add(fundamental_hz * 2 ** (n / 12))

    audible = sorted(v for v in values if AUDIBLE_MIN_HZ <= v <= AUDIBLE_MAX_HZ)
    return tuple(audible[:MAX_INFINITE_HARMONICS])
