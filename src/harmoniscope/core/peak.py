"""
Dominant peak estimation.

The raw spectrum is first pushed through a perceptual weighting curve so the
decision leans away from sub-bass rumble and hiss, then the argmax bin is
refined to sub-bin accuracy with parabolic interpolation.
"""

import logging
import math
from typing import Optional

import numpy as np

from harmoniscope.core.spectrum import MagnitudeSpectrum

logger = logging.getLogger(__name__)

# (exclusive upper edge Hz, weight); the last band is open-ended
PERCEPTUAL_WEIGHTS: tuple[tuple[float, float], ...] = (
    (100.0, 0.1),      # sub / kick rumble
    (250.0, 0.5),      # bass roots
    (3000.0, 1.2),     # harmonic midrange
    (math.inf, 0.6),   # hiss
)

_LOG_FLOOR = 1e-12
_MIN_CURVATURE = 1e-9


def perceptual_weighting(
    frequencies: np.ndarray,
    bands: tuple[tuple[float, float], ...] = PERCEPTUAL_WEIGHTS,
) -> np.ndarray:
    """Per-bin weight for each frequency in *frequencies*."""
    edges = np.array([upper for upper, _ in bands])
    weights = np.array([weight for _, weight in bands])
    idx = np.searchsorted(edges, frequencies, side="right")
    return weights[np.minimum(idx, len(weights) - 1)]


def parabolic_offset(left: float, centre: float, right: float) -> float:
    """
    Vertex offset of the parabola through three equally spaced points.

    Returns 0.0 when the points are flat or do not form a maximum, so the
    caller keeps the unrefined bin.
    """
    denom = left - 2.0 * centre + right
    if denom > -_MIN_CURVATURE:
        return 0.0
    delta = 0.5 * (left - right) / denom
    if not np.isfinite(delta) or abs(delta) > 0.5:
        return 0.0
    return float(delta)


class PeakEstimator:
    """Finds the dominant frequency of a magnitude spectrum."""

    def __init__(self, weights: tuple[tuple[float, float], ...] = PERCEPTUAL_WEIGHTS):
        self.weights = weights

    def weighted(self, spectrum: MagnitudeSpectrum) -> np.ndarray:
        return spectrum.magnitudes * perceptual_weighting(spectrum.frequencies, self.weights)

    def peak_bin(self, spectrum: MagnitudeSpectrum) -> Optional[int]:
        """Argmax bin of the weighted spectrum, or None if nothing is there."""
        if len(spectrum) == 0 or spectrum.is_silent or spectrum.bin_width <= 0:
            return None
        weighted = self.weighted(spectrum)
        index = int(np.argmax(weighted))
        if not weighted[index] > 0.0:
            return None
        return index

    def estimate(self, spectrum: MagnitudeSpectrum) -> float:
        """
        Dominant frequency in Hz.

        Interior peaks are refined on the log magnitudes of the peak and its
        two neighbours.  Returns 0.0 for a silent spectrum or when the
        numbers misbehave.
        """
        try:
            index = self.peak_bin(spectrum)
            if index is None:
                return 0.0

            mags = spectrum.magnitudes
            delta = 0.0
            if 0 < index < len(mags) - 1:
                left, centre, right = np.log(np.maximum(mags[index - 1:index + 2], _LOG_FLOOR))
                delta = parabolic_offset(left, centre, right)

            return max(0.0, spectrum.frequency_of(index + delta))
        except (ArithmeticError, ValueError) as exc:
            logger.debug("Peak estimation failed: %s", exc)
            return 0.0
