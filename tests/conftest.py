"""Shared fixtures: synthetic signals at a fixed sample rate."""

import numpy as np
import pytest

from harmoniscope.core.spectrum import SampleBlock

TEST_SR = 44100


def make_sine(freq, duration=3.0, sr=TEST_SR, amplitude=1.0):
    t = np.arange(int(sr * duration)) / sr
    return (amplitude * np.sin(2 * np.pi * freq * t)).astype(np.float32)


@pytest.fixture
def sine_block():
    """Factory for single or summed sine blocks: sine_block((freq, amp), ...)."""

    def _make(*tones, duration=3.0, sr=TEST_SR):
        y = np.zeros(int(sr * duration), dtype=np.float32)
        for freq, amplitude in tones:
            y += make_sine(freq, duration, sr, amplitude)
        return SampleBlock(y, sr)

    return _make


@pytest.fixture
def pure_sine():
    """3 seconds of 528 Hz at 44.1 kHz."""
    return SampleBlock(make_sine(528.0), TEST_SR)


@pytest.fixture
def silent_block():
    return SampleBlock(np.zeros(TEST_SR * 3, dtype=np.float32), TEST_SR)


@pytest.fixture
def white_noise():
    rng = np.random.default_rng(1234)
    return SampleBlock(rng.standard_normal(TEST_SR * 2) * 0.1, TEST_SR)
