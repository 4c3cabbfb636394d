"""Box-counting fractal dimension of a log-magnitude spectrum."""

import math

import numpy as np

from harmoniscope.core.spectrum import MagnitudeSpectrum

DEFAULT_SCALES = (2, 4, 8, 16, 32)
LOG_FLOOR = 1e-10
MIN_DIMENSION = 1.0
MAX_DIMENSION = 3.0


def count_active_windows(values: np.ndarray, scale: int, threshold: float) -> int:
    """
    Windows of length *scale* in which any sample strays from the first one.

    Windows start at 0, scale, 2*scale, ... while the start is below
    ``len(values) - scale``.
    """
    n_windows = max(0, math.ceil((len(values) - scale) / scale))
    if n_windows == 0:
        return 0
    windows = values[: n_windows * scale].reshape(n_windows, scale)
    deviation = np.abs(windows - windows[:, :1])
    return int(np.count_nonzero(np.any(deviation > threshold, axis=1)))


def fractal_dimension(
    spectrum: MagnitudeSpectrum,
    scales: tuple[int, ...] = DEFAULT_SCALES,
    threshold: float = 0.1,
) -> float:
    """
    Coarse fractal dimension of the spectrum, clamped to [1, 3].

    Each scale contributes ``log(active) / log(1 / scale)``; a scale with no
    active windows contributes -inf, which the clamp turns into the floor.
    The value is descriptive only.
    """
    if len(spectrum) == 0 or not scales:
        return MIN_DIMENSION

    log_mags = np.log(np.maximum(spectrum.magnitudes, LOG_FLOOR))

    dimension = 0.0
    for scale in scales:
        count = count_active_windows(log_mags, scale, threshold)
        if count == 0:
            dimension = -math.inf
            break
        dimension += math.log(count) / math.log(1.0 / scale)

    return float(min(MAX_DIMENSION, max(MIN_DIMENSION, dimension / len(scales))))
