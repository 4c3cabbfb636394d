"""Tests for perceptual weighting and dominant peak estimation."""

import numpy as np
import pytest

from harmoniscope.core.peak import (
    PeakEstimator,
    parabolic_offset,
    perceptual_weighting,
)
from harmoniscope.core.spectrum import MagnitudeSpectrum, SpectralAnalyzer


@pytest.fixture
def estimator():
    return PeakEstimator()


class TestPerceptualWeighting:
    def test_band_weights(self):
        weights = perceptual_weighting(np.array([50.0, 99.9, 100.0, 200.0, 1000.0, 2999.0, 3000.0, 9000.0]))
        np.testing.assert_allclose(weights, [0.1, 0.1, 0.5, 0.5, 1.2, 1.2, 0.6, 0.6])

    def test_midband_is_boosted_above_everything(self):
        weights = perceptual_weighting(np.array([60.0, 180.0, 800.0, 5000.0]))
        assert weights[2] == weights.max()
        assert weights[0] == weights.min()


class TestParabolicOffset:
    def test_symmetric_peak(self):
        assert parabolic_offset(1.0, 2.0, 1.0) == 0.0

    def test_offset_towards_larger_neighbour(self):
        assert parabolic_offset(1.0, 2.0, 1.5) > 0.0
        assert parabolic_offset(1.5, 2.0, 1.0) < 0.0

    def test_known_vertex(self):
        # y = -(x - 0.25)^2 sampled at -1, 0, 1
        left, centre, right = -(1.25 ** 2), -(0.25 ** 2), -(0.75 ** 2)
        assert parabolic_offset(left, centre, right) == pytest.approx(0.25)

    def test_flat_neighbourhood_falls_back(self):
        assert parabolic_offset(1.0, 1.0, 1.0) == 0.0

    def test_not_a_maximum_falls_back(self):
        assert parabolic_offset(2.0, 1.0, 2.0) == 0.0


class TestPeakEstimator:
    @pytest.mark.parametrize("freq", [180.0, 440.0, 528.0, 1234.5, 2000.0, 3500.0])
    def test_sine_within_one_bin(self, estimator, sine_block, freq):
        spectrum = SpectralAnalyzer().analyze(sine_block((freq, 0.8)))
        detected = estimator.estimate(spectrum)
        assert abs(detected - freq) <= spectrum.bin_width

    def test_refinement_beats_bin_centre(self, estimator, sine_block):
        freq = 1000.0
        spectrum = SpectralAnalyzer().analyze(sine_block((freq, 1.0)))
        index = estimator.peak_bin(spectrum)
        unrefined_error = abs(spectrum.frequency_of(index) - freq)
        assert abs(estimator.estimate(spectrum) - freq) <= unrefined_error + 1e-9

    def test_no_peak_bin_for_silence(self, estimator, silent_block):
        assert estimator.peak_bin(SpectralAnalyzer().analyze(silent_block)) is None

    def test_528_within_two_hz(self, estimator, pure_sine):
        spectrum = SpectralAnalyzer().analyze(pure_sine)
        assert estimator.estimate(spectrum) == pytest.approx(528.0, abs=2.0)

    def test_rumble_loses_to_midrange(self, estimator, sine_block):
        block = sine_block((60.0, 1.0), (528.0, 0.3))
        detected = estimator.estimate(SpectralAnalyzer().analyze(block))
        assert detected == pytest.approx(528.0, abs=2.0)

    def test_hiss_loses_to_midrange(self, estimator, sine_block):
        block = sine_block((5000.0, 0.5), (800.0, 0.3))
        spectrum = SpectralAnalyzer(high_cutoff=8000.0).analyze(block)
        assert estimator.estimate(spectrum) == pytest.approx(800.0, abs=2.0)

    def test_silent_spectrum(self, estimator, silent_block):
        assert estimator.estimate(SpectralAnalyzer().analyze(silent_block)) == 0.0

    def test_empty_spectrum(self, estimator):
        assert estimator.estimate(MagnitudeSpectrum(np.array([]), 44100, 16)) == 0.0

    def test_edge_peak_is_not_refined(self, estimator):
        mags = np.zeros(33)
        mags[32] = 1.0
        spectrum = MagnitudeSpectrum(mags, 3200, 32)  # 50 Hz bins
        assert estimator.estimate(spectrum) == pytest.approx(1600.0)

    def test_flat_neighbourhood_uses_bin_frequency(self, estimator):
        mags = np.zeros(65)
        mags[1:] = 0.5
        spectrum = MagnitudeSpectrum(mags, 6400, 64)  # 50 Hz bins
        # First mid-band bin wins the weighted argmax; its neighbours are equal
        assert estimator.estimate(spectrum) == pytest.approx(250.0)

    def test_numeric_failure_returns_zero(self, estimator, pure_sine, monkeypatch):
        spectrum = SpectralAnalyzer().analyze(pure_sine)

        def boom(_spectrum):
            raise FloatingPointError("overflow")

        monkeypatch.setattr(estimator, "peak_bin", boom)
        assert estimator.estimate(spectrum) == 0.0

    def test_custom_weights(self, sine_block):
        block = sine_block((150.0, 1.0), (600.0, 0.5))
        spectrum = SpectralAnalyzer().analyze(block)
        flat = PeakEstimator(weights=((float("inf"), 1.0),))
        assert flat.estimate(spectrum) == pytest.approx(150.0, abs=2.0)
        assert PeakEstimator().estimate(spectrum) == pytest.approx(600.0, abs=2.0)
