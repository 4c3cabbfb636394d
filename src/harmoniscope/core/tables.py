"""
Reference tables shared by the analysis stages.

Everything here is built once at import time and never mutated: the
canonical Solfeggio set, the 111-pattern and DNA resonance lists, the
Schumann harmonics, the intention lookup and the safety volume curve.
"""

import math
from dataclasses import dataclass


PHI = (1 + math.sqrt(5)) / 2
GOLDEN_SPIRAL_RATIO = math.sqrt(PHI)


@dataclass(frozen=True)
class CanonicalFrequency:
    """One entry of the canonical frequency table."""

    hz: float
    name: str
    chakra: str
    color: str
    benefit: str


CANONICAL_FREQUENCIES: tuple[CanonicalFrequency, ...] = (
    CanonicalFrequency(174, "Pain Relief", "Earth Star", "#8B0000", "Relieves pain and stress."),
    CanonicalFrequency(285, "Tissue Repair", "Root", "#FF0000", "Heals tissues and organs."),
    CanonicalFrequency(396, "Liberation", "Root", "#FF4500", "Liberates from guilt and fear."),
    CanonicalFrequency(417, "Change", "Sacral", "#FF8C00", "Undoing situations and facilitating change."),
    CanonicalFrequency(528, "Miracle", "Solar Plexus", "#FFD700", "Transformation and miracles (DNA Repair)."),
    CanonicalFrequency(639, "Relationships", "Heart", "#008000", "Connecting/Relationships."),
    CanonicalFrequency(741, "Expression", "Throat", "#00BFFF", "Expression/Solutions."),
    CanonicalFrequency(852, "Intuition", "Third Eye", "#4B0082", "Returning to spiritual order."),
    CanonicalFrequency(963, "Oneness", "Crown", "#EE82EE", "Connection to Cosmos/Oneness."),
)

# Tone assigned to anything that could not be analysed
DEFAULT_CANONICAL_HZ = 396


# ---------------------------------------------------------------------------
# Pattern tables
# ---------------------------------------------------------------------------

PATTERN_111_BASE = 111.0
PATTERN_111_SERIES: tuple[float, ...] = tuple(
    PATTERN_111_BASE * k for k in range(1, 13)
)

# Mitochondrial "cellular energy" series, weighted above the 111 series
CELLULAR_ENERGY_SERIES: tuple[float, ...] = (58.27, 116.54, 233.08, 466.16)
CELLULAR_ENERGY_WEIGHT = 1.5

# Magnitude above which a 111-series frequency counts as a resonance point
RESONANCE_POINT_THRESHOLD = 0.1

DNA_FREQUENCY_MAP: dict[str, tuple[float, ...]] = {
    "adenine_thymine": (523.25, 659.25, 783.99),
    "guanine_cytosine": (587.33, 698.46, 830.61),
    "double_helix_rotation": (36.0,),
    "major_groove": (432.0,),
    "minor_groove": (288.0,),
    "telomere_protection": (174.0, 285.0, 396.0),
    "gene_expression": (528.0, 639.0, 741.0),
    "dna_repair": (285.0, 528.0, 852.0),
    "mitochondrial_base": (58.27,),
    "cellular_energy": CELLULAR_ENERGY_SERIES,
}

DNA_FREQUENCY_WEIGHTS: dict[float, float] = {528.0: 3.0, 285.0: 2.0}

# Flattened (frequency, weight) pairs in table order
DNA_RESONANCE_POINTS: tuple[tuple[float, float], ...] = tuple(
    (freq, DNA_FREQUENCY_WEIGHTS.get(freq, 1.0))
    for group in DNA_FREQUENCY_MAP.values()
    for freq in group
)

SACRED_RATIOS: tuple[float, ...] = (
    PHI,
    math.sqrt(2),
    math.sqrt(3),
    math.sqrt(5),
    math.pi,
    math.e,
    GOLDEN_SPIRAL_RATIO,
)

SCHUMANN_HARMONICS: tuple[float, ...] = (
    7.83, 14.3, 20.8, 27.3, 33.8, 39.3, 45.9, 59.9, 66.8,
)

EXTENDED_SOLFEGGIO: dict[str, tuple[float, ...]] = {
    "lower_octaves": (87, 142.5, 174, 285, 396, 417, 528, 639, 741, 852, 963),
    "higher_octaves": (1056, 1122, 1188, 1278, 1482, 1584, 1704, 1926),
    "ultra_high": (2112, 2244, 2376, 2556, 2964, 3168, 3408, 3852),
    "cellular_repair": (285, 570, 1140, 2280),
    "consciousness_expansion": (1074, 1641, 1995, 2319),
    "dimensional_access": (1317, 1752, 2430, 2673),
    "unity_consciousness": (2997,),
}

INTENTION_FREQUENCIES: dict[str, tuple[float, ...]] = {
    "dna_repair": DNA_FREQUENCY_MAP["dna_repair"],
    "cellular_healing": EXTENDED_SOLFEGGIO["cellular_repair"],
    "energy_boost": CELLULAR_ENERGY_SERIES,
    "meditation": (7.83, 14.3, 40, 100, 528, 741, 852),
    "focus": (40, 100, 528, 741),
    "sleep": (0.5, 1, 2, 3, 174, 285),
    "creativity": (8, 10, 40, 528, 639),
    "protection": EXTENDED_SOLFEGGIO["lower_octaves"],
    "manifestation": (111, 222, 333, 528, 639),
    "grounding": (7.83, 14.3, 174, 285, 396),
    "third_eye": (852, 963, 1074, 1752),
    "heart_opening": (341.3, 528, 639, 1278),
    "throat_chakra": (384, 417, 741, 852),
    "crown_activation": (963, 1074, 1926, 3852),
    "consciousness_expansion": EXTENDED_SOLFEGGIO["consciousness_expansion"],
    "dimensional_access": EXTENDED_SOLFEGGIO["dimensional_access"],
    "unity_consciousness": EXTENDED_SOLFEGGIO["unity_consciousness"],
    "pineal_activation": (963, 1074, 1641, 1995),
    "quantum_awareness": (1995, 2319, 2673),
    "transcendence": (2997,),
    "interdimensional": (1317, 1752, 2430),
    "cosmic_alignment": (1641, 1995, 2319, 2673),
    "source_connection": (2673, 2997),
    "galactic_resonance": (1752, 2430, 2997),
}

DEFAULT_INTENTION_FREQUENCIES: tuple[float, ...] = (528, 741, 852)


# ---------------------------------------------------------------------------
# Safety
# ---------------------------------------------------------------------------

# Inclusive upper bounds of SAFE, CAUTION and EXPERT; RESEARCH is open-ended
SAFE_MAX_HZ = 1073.0
CAUTION_MAX_HZ = 2000.0
EXPERT_MAX_HZ = 8000.0

# (frequency Hz, volume) control points, sorted by frequency
VOLUME_CURVE: tuple[tuple[float, float], ...] = (
    (1074.0, 0.30),
    (1500.0, 0.20),
    (2000.0, 0.15),
    (3000.0, 0.10),
    (5000.0, 0.05),
    (8000.0, 0.02),
)
