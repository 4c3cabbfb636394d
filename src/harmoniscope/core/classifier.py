"""
Canonical frequency classification.

A detected pitch is matched to the nearest canonical tone using an
octave-folded distance: overtones and subharmonics of the true fundamental
often win the spectral peak, so each canonical value is also compared at
one and two octaves up and down.
"""

import math
from dataclasses import dataclass

from harmoniscope.core.tables import (
    CANONICAL_FREQUENCIES,
    DEFAULT_CANONICAL_HZ,
    DEFAULT_INTENTION_FREQUENCIES,
    INTENTION_FREQUENCIES,
    CanonicalFrequency,
)

OCTAVE_FACTORS = (1.0, 0.5, 2.0, 0.25, 4.0)


@dataclass(frozen=True)
class CanonicalMatch:
    """Result of classifying one detected frequency."""

    entry: CanonicalFrequency
    detected_hz: float
    deviation_hz: float  # |detected - entry.hz|, used to rank matches

    @property
    def hz(self) -> float:
        return self.entry.hz


def canonical_by_hz(
    hz: float,
    table: tuple[CanonicalFrequency, ...] = CANONICAL_FREQUENCIES,
) -> CanonicalFrequency:
    """Look up a canonical entry by its frequency."""
    for entry in table:
        if entry.hz == hz:
            return entry
    raise KeyError(f"no canonical entry at {hz} Hz")


def default_entry(
    table: tuple[CanonicalFrequency, ...] = CANONICAL_FREQUENCIES,
) -> CanonicalFrequency:
    """Entry assigned when no pitch was detected."""
    try:
        return canonical_by_hz(DEFAULT_CANONICAL_HZ, table)
    except KeyError:
        return table[0]


def octave_distance(frequency_hz: float, canonical_hz: float) -> float:
    """Smallest |f - c * k| over the octave factors k."""
    return min(abs(frequency_hz - canonical_hz * k) for k in OCTAVE_FACTORS)


def classify(
    frequency_hz: float,
    table: tuple[CanonicalFrequency, ...] = CANONICAL_FREQUENCIES,
) -> CanonicalMatch:
    """
    Map *frequency_hz* onto the nearest canonical entry.

    Ties go to the entry listed first.  Zero, negative and non-finite
    frequencies return the default entry without searching.

    Args:
        frequency_hz: Detected frequency in Hz.
        table: Canonical entries to search, in priority order.

    Returns:
        CanonicalMatch for the winning entry.
    """
    if not math.isfinite(frequency_hz) or frequency_hz <= 0:
        entry = default_entry(table)
        return CanonicalMatch(entry=entry, detected_hz=0.0, deviation_hz=float(entry.hz))

    best = table[0]
    best_distance = math.inf
    for entry in table:
        distance = octave_distance(frequency_hz, entry.hz)
        if distance < best_distance:
            best = entry
            best_distance = distance

    return CanonicalMatch(
        entry=best,
        detected_hz=float(frequency_hz),
        deviation_hz=abs(frequency_hz - best.hz),
    )


def frequencies_for_intention(intention: str) -> tuple[float, ...]:
    """Suggested frequencies for a named intention, e.g. ``"dna_repair"``."""
    return INTENTION_FREQUENCIES.get(intention.strip().lower(), DEFAULT_INTENTION_FREQUENCIES)
