"""
Spectral analysis module.

Turns a block of mono PCM samples into an amplitude-normalised magnitude
spectrum over a bounded frequency range.

The transform is a real FFT over the centre of the block, zero-padded to
twice the analysis window so that bin ``i`` sits at
``i * sample_rate / (2 * N)``.  Every sample of the frame contributes; none
are skipped.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
from scipy import fft as scipy_fft
from scipy import signal as scipy_signal

from harmoniscope.core.tables import PHI

logger = logging.getLogger(__name__)

MIN_WINDOW = 16
MAX_WINDOW = 32768


def _readonly(arr: np.ndarray) -> np.ndarray:
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class SampleBlock:
    """
    Mono PCM samples plus their sample rate.

    Blocks compare and hash by identity, so they can key result mappings.
    """

    samples: np.ndarray
    sample_rate: int

    def __post_init__(self):
        samples = np.array(self.samples, dtype=np.float64)
        if samples.ndim > 1:
            # (channels, n) -> mono
            samples = np.mean(samples, axis=0)
        object.__setattr__(self, "samples", _readonly(samples))

    @property
    def n_samples(self) -> int:
        return len(self.samples)

    @property
    def duration(self) -> float:
        """Block length in seconds (0.0 for an invalid sample rate)."""
        if self.sample_rate <= 0:
            return 0.0
        return self.n_samples / self.sample_rate

    @classmethod
    def excerpt(
        cls,
        y: np.ndarray,
        sample_rate: int,
        duration: float = 3.0,
        max_offset: float = 30.0,
    ) -> "SampleBlock":
        """
        Select the analysis excerpt from a decoded signal.

        The excerpt starts halfway through the signal, but never later than
        ``max_offset`` seconds, and spans ``duration`` seconds.  When the
        start would leave less than ``duration`` seconds, it moves back.

        Args:
            y: Decoded audio, mono or (channels, n_samples).
            sample_rate: Sample rate in Hz.
            duration: Excerpt length in seconds.
            max_offset: Latest start time in seconds.

        Returns:
            SampleBlock holding the excerpt.
        """
        full = cls(y, sample_rate)
        if sample_rate <= 0 or full.n_samples == 0:
            return full

        n = max(1, int(round(duration * sample_rate)))
        start = int(min(full.duration / 2, max_offset) * sample_rate)
        start = max(0, min(start, full.n_samples - n))
        return cls(full.samples[start:start + n], sample_rate)


@dataclass(frozen=True)
class MagnitudeSpectrum:
    """Non-negative magnitudes, one per bin, for one analysis call."""

    magnitudes: np.ndarray
    sample_rate: int
    window_length: int

    def __post_init__(self):
        mags = np.array(self.magnitudes, dtype=np.float64)
        object.__setattr__(self, "magnitudes", _readonly(mags))

    @classmethod
    def zeros(cls, window_length: int, sample_rate: int) -> "MagnitudeSpectrum":
        return cls(np.zeros(window_length + 1), sample_rate, window_length)

    def __len__(self) -> int:
        return len(self.magnitudes)

    @property
    def bin_width(self) -> float:
        if self.sample_rate <= 0 or self.window_length <= 0:
            return 0.0
        return self.sample_rate / (2.0 * self.window_length)

    @property
    def frequencies(self) -> np.ndarray:
        return np.arange(len(self.magnitudes)) * self.bin_width

    @property
    def peak_magnitude(self) -> float:
        if len(self.magnitudes) == 0:
            return 0.0
        return float(np.max(self.magnitudes))

    @property
    def is_silent(self) -> bool:
        return not bool(np.any(self.magnitudes > 0.0))

    def frequency_of(self, index: float) -> float:
        return float(index) * self.bin_width

    def bin_of(self, frequency_hz: float) -> Optional[int]:
        """Nearest bin to *frequency_hz*, or None if it falls outside the array."""
        width = self.bin_width
        if width <= 0 or not np.isfinite(frequency_hz):
            return None
        index = int(round(frequency_hz / width))
        if index < 0 or index >= len(self.magnitudes):
            return None
        return index

    def magnitude_at(self, frequency_hz: float) -> float:
        """Magnitude of the nearest bin; 0.0 when out of range."""
        index = self.bin_of(frequency_hz)
        if index is None:
            return 0.0
        return float(self.magnitudes[index])


def golden_window(size: int) -> np.ndarray:
    """
    Golden-ratio bell window.

    ``sin(pi * t) ** (2 * phi)`` over ``t`` in [0, 1]: zero at both edges,
    unity at the centre and smoother at the shoulders than a Hann window.
    """
    if size <= 0:
        return np.zeros(0)
    t = np.linspace(0.0, 1.0, size)
    return np.sin(np.pi * t) ** (2 * PHI)


WINDOWS = {
    "golden": golden_window,
    "hann": lambda size: scipy_signal.windows.hann(size, sym=True),
}


class SpectralAnalyzer:
    """
    Windows a sample block and computes its magnitude spectrum.

    Magnitudes are scaled by ``2 / sum(window)`` so a sine of amplitude A
    peaks near A regardless of the window length.  Bins outside
    ``[low_cutoff, high_cutoff]`` (high cutoff capped at Nyquist) are zero.
    """

    def __init__(
        self,
        window_length: Optional[int] = None,
        max_window: int = MAX_WINDOW,
        low_cutoff: float = 20.0,
        high_cutoff: float = 4000.0,
        window: str = "golden",
    ):
        """
        Initialize the analyzer.

        Args:
            window_length: Fixed analysis window (power of two). None sizes the
                window to the next power of two of the block, up to max_window.
            max_window: Upper bound for the automatic window length.
            low_cutoff: Lowest analysed frequency in Hz.
            high_cutoff: Highest analysed frequency in Hz.
            window: Window name, "golden" or "hann".

        Raises:
            ValueError: On an invalid window length, cutoff pair or window name.
        """
        if window_length is not None and not _is_valid_length(window_length):
            raise ValueError(
                f"window_length must be a power of two >= {MIN_WINDOW}, got {window_length}"
            )
        if not _is_valid_length(max_window):
            raise ValueError(
                f"max_window must be a power of two >= {MIN_WINDOW}, got {max_window}"
            )
        if low_cutoff < 0 or high_cutoff <= low_cutoff:
            raise ValueError(
                f"invalid cutoff range: {low_cutoff}-{high_cutoff} Hz"
            )
        if window not in WINDOWS:
            raise ValueError(
                f"unknown window {window!r}; expected one of {sorted(WINDOWS)}"
            )

        self.window_length = window_length
        self.max_window = max_window
        self.low_cutoff = float(low_cutoff)
        self.high_cutoff = float(high_cutoff)
        self.window = window

    def resolve_window_length(self, n_samples: int) -> int:
        """Analysis window N for a block of *n_samples*."""
        if self.window_length is not None:
            return self.window_length
        n = 1 << max(0, n_samples - 1).bit_length()
        return int(min(max(n, MIN_WINDOW), self.max_window))

    def analyze(self, block: SampleBlock) -> MagnitudeSpectrum:
        """
        Compute the magnitude spectrum of *block*.

        An empty block or a non-positive sample rate yields an all-zero
        spectrum rather than an error.
        """
        n = self.resolve_window_length(block.n_samples)
        sr = block.sample_rate

        if sr <= 0 or block.n_samples == 0:
            logger.debug("Empty block or invalid sample rate (%s); zero spectrum", sr)
            return MagnitudeSpectrum.zeros(n, sr)

        frame = _centre_frame(block.samples, n)
        window = WINDOWS[self.window](len(frame))
        gain = float(np.sum(window))
        if gain <= 0.0:
            return MagnitudeSpectrum.zeros(n, sr)

        spectrum = np.abs(scipy_fft.rfft(frame * window, n=2 * n))
        magnitudes = spectrum * (2.0 / gain)

        freqs = np.arange(len(magnitudes)) * (sr / (2.0 * n))
        high = min(self.high_cutoff, sr / 2.0)
        magnitudes[(freqs < self.low_cutoff) | (freqs > high)] = 0.0

        return MagnitudeSpectrum(magnitudes, sr, n)


def _is_valid_length(n: int) -> bool:
    return isinstance(n, int) and n >= MIN_WINDOW and (n & (n - 1)) == 0


def _centre_frame(samples: np.ndarray, n: int) -> np.ndarray:
    """Up to *n* samples from the middle of the block, non-finite values zeroed."""
    if len(samples) > n:
        start = (len(samples) - n) // 2
        samples = samples[start:start + n]
    return np.nan_to_num(samples, nan=0.0, posinf=0.0, neginf=0.0)
