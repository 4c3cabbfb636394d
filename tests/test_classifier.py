"""Tests for octave-invariant canonical classification."""

import pytest

from harmoniscope.core.classifier import (
    canonical_by_hz,
    classify,
    frequencies_for_intention,
    octave_distance,
)
from harmoniscope.core.tables import (
    CANONICAL_FREQUENCIES,
    DEFAULT_CANONICAL_HZ,
    CanonicalFrequency,
)

CANONICAL_HZ = [entry.hz for entry in CANONICAL_FREQUENCIES]


class TestClassify:
    @pytest.mark.parametrize("hz", CANONICAL_HZ)
    def test_octave_invariant(self, hz):
        matches = {classify(f).entry for f in (hz, hz * 2, hz / 2)}
        assert matches == {canonical_by_hz(hz)}

    @pytest.mark.parametrize("hz", CANONICAL_HZ)
    def test_two_octaves(self, hz):
        assert classify(hz * 4).hz == hz
        assert classify(hz / 4).hz == hz

    def test_near_miss(self):
        assert classify(530.0).hz == 528

    def test_overtone_maps_to_fundamental(self):
        assert classify(1056.0).hz == 528
        assert classify(264.0).hz == 528

    def test_deviation(self):
        match = classify(530.0)
        assert match.detected_hz == 530.0
        assert match.deviation_hz == pytest.approx(2.0)

    @pytest.mark.parametrize("freq", [0.0, -1.0, -440.0, float("nan")])
    def test_non_positive_returns_default(self, freq):
        match = classify(freq)
        assert match.hz == DEFAULT_CANONICAL_HZ
        assert match.detected_hz == 0.0

    def test_tie_goes_to_first_listed(self):
        low = CanonicalFrequency(100, "low", "", "", "")
        high = CanonicalFrequency(130, "high", "", "", "")
        assert classify(115.0, (low, high)).entry is low
        assert classify(115.0, (high, low)).entry is high

    def test_default_without_396_in_table(self):
        only = CanonicalFrequency(200, "only", "", "", "")
        assert classify(0.0, (only,)).entry is only


class TestHelpers:
    def test_octave_distance(self):
        assert octave_distance(1056.0, 528) == 0.0
        assert octave_distance(500.0, 528) == pytest.approx(28.0)

    def test_canonical_by_hz(self):
        assert canonical_by_hz(528).name == "Miracle"
        with pytest.raises(KeyError):
            canonical_by_hz(440)

    def test_intention_lookup(self):
        assert frequencies_for_intention("DNA_Repair") == (285.0, 528.0, 852.0)
        assert frequencies_for_intention("transcendence") == (2997,)

    def test_unknown_intention_defaults(self):
        assert frequencies_for_intention("nonsense") == (528, 741, 852)
