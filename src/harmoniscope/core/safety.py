"""
Frequency safety tiers and recommended playback volume.

Tiers are contiguous frequency ranges in increasing order
SAFE < CAUTION < EXPERT < RESEARCH, each upper bound inclusive.  The volume
follows a piecewise-linear curve that never increases with frequency.
"""

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

import numpy as np

from harmoniscope.core.tables import (
    CAUTION_MAX_HZ,
    EXPERT_MAX_HZ,
    SAFE_MAX_HZ,
    VOLUME_CURVE,
)

FULL_VOLUME = 1.0

_CURVE_HZ = np.array([hz for hz, _ in VOLUME_CURVE])
_CURVE_VOLUME = np.array([volume for _, volume in VOLUME_CURVE])


class SafetyTier(IntEnum):
    SAFE = 0
    CAUTION = 1
    EXPERT = 2
    RESEARCH = 3


@dataclass(frozen=True)
class SafetyAssessment:
    """Tier and recommended output volume for one frequency."""

    tier: SafetyTier
    recommended_volume: float


def tier_for(frequency_hz: float) -> SafetyTier:
    """Tier containing *frequency_hz*; anything at or below SAFE_MAX_HZ is SAFE."""
    if math.isnan(frequency_hz) or frequency_hz <= SAFE_MAX_HZ:
        return SafetyTier.SAFE
    if frequency_hz <= CAUTION_MAX_HZ:
        return SafetyTier.CAUTION
    if frequency_hz <= EXPERT_MAX_HZ:
        return SafetyTier.EXPERT
    return SafetyTier.RESEARCH


def recommended_volume(frequency_hz: float) -> float:
    """
    Output volume in [0, 1] for *frequency_hz*.

    Full volume in the SAFE tier and below the first control point, linear
    between control points, and held at the last point's value beyond it.
    """
    if tier_for(frequency_hz) is SafetyTier.SAFE:
        return FULL_VOLUME
    volume = np.interp(frequency_hz, _CURVE_HZ, _CURVE_VOLUME, left=FULL_VOLUME)
    return float(volume)


def assess(frequency_hz: float) -> SafetyAssessment:
    """Tier and recommended volume for *frequency_hz*."""
    return SafetyAssessment(
        tier=tier_for(frequency_hz),
        recommended_volume=recommended_volume(frequency_hz),
    )


def safety_warning(frequency_hz: float) -> Optional[str]:
    """User-facing warning text for CAUTION and higher tiers, None when SAFE."""
    assessment = assess(frequency_hz)
    percent = round(assessment.recommended_volume * 100)

    if assessment.tier >= SafetyTier.EXPERT:
        return (
            f"EXPERT LEVEL FREQUENCY ({frequency_hz:.0f}Hz)\n\n"
            "This frequency operates beyond normal therapeutic ranges. Use only with:\n"
            "- Deep meditation experience\n"
            "- Sound healing training\n"
            "- Short exposure periods (5-15 minutes)\n"
            f"- Volume kept at {percent}% or lower\n\n"
            "Stop immediately if you experience discomfort."
        )
    if assessment.tier is SafetyTier.CAUTION:
        return (
            f"CAUTION: High Frequency ({frequency_hz:.0f}Hz)\n\n"
            "This frequency requires subtle resonance mode:\n"
            f"- Keep volume low ({percent}% recommended)\n"
            "- Focus on feeling rather than hearing\n"
            "- Limit sessions to 20-30 minutes\n"
            "- Take breaks between sessions"
        )
    return None
