"""Score mapping, confidence estimation and score descriptions."""

import math
from typing import List, Tuple

from scoring.config import (
    WEIGHT_DOMINANCE, WEIGHT_CHROMA, WEIGHT_STABILITY,
    DOMINANCE_GAIN, CHROMA_GAIN, FULL_WINDOW_MIN, FULL_WINDOW_BONUS,
    DEGRADED_LIGHTING_FACTOR, FLAT_SCENE_FACTOR, CONFIDENCE_FLOOR,
    LOW_CONFIDENCE_PERCENT
)
from scoring.frame_sampler import FrameSample

NEUTRAL_DOMINANCE = 1.0 / 3.0


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def map_score(smoothed: float) -> int:
    """Map a 0-1 signal to an integer score in [1, 10] (half-up rounding)."""
    return int(math.floor(_clamp(smoothed, 0.0, 1.0) * 9 + 0.5)) + 1


def confidence_components(sample: FrameSample, dominance: float,
                          window_spread: float) -> Tuple[float, float, float]:
    """
    Compute the three confidence components, each in [0, 1].

    Args:
        sample: Current frame sample
        dominance: Green dominance of the sample
        window_spread: max - min of the score history window

    Returns:
        (dominance, chroma, stability)
    """
    dominance_c = min(1.0, abs(dominance - NEUTRAL_DOMINANCE) * DOMINANCE_GAIN)

    r, g, b = sample.r, sample.g, sample.b
    chroma = math.sqrt(((r - g) ** 2 + (g - b) ** 2 + (r - b) ** 2) / 3.0)
    chroma_c = min(1.0, chroma * CHROMA_GAIN)

    stability_c = _clamp(1.0 - window_spread, 0.0, 1.0)

    return dominance_c, chroma_c, stability_c


def estimate_confidence(sample: FrameSample, dominance: float, window_spread: float,
                        window_len: int, degraded: bool = False,
                        flat: bool = False) -> float:
    """
    Estimate confidence in [CONFIDENCE_FLOOR, 1].

    Args:
        sample: Current frame sample
        dominance: Green dominance of the sample
        window_spread: max - min of the score history window
        window_len: Number of samples in the history window
        degraded: Lighting classifier reported a non-OK state
        flat: Trimmed luminance variance is below the texture threshold
    """
    dom_c, chroma_c, stab_c = confidence_components(sample, dominance, window_spread)
    conf = WEIGHT_DOMINANCE * dom_c + WEIGHT_CHROMA * chroma_c + WEIGHT_STABILITY * stab_c

    if window_len >= FULL_WINDOW_MIN:
        conf = min(1.0, conf + FULL_WINDOW_BONUS)
    if degraded:
        conf *= DEGRADED_LIGHTING_FACTOR
    if flat:
        conf *= FLAT_SCENE_FACTOR

    return _clamp(conf, CONFIDENCE_FLOOR, 1.0)


def confidence_percent(confidence: float) -> int:
    """External 0-100 confidence."""
    return int(round(_clamp(confidence, 0.0, 1.0) * 100))


def describe_score(score: int, confidence: float) -> Tuple[List[str], List[str]]:
    """Pros and cons text for a mapped score."""
    pros: List[str] = []
    cons: List[str] = []
    if score >= 8:
        pros += ["High natural indicators", "Low visible processing"]
        cons.append("Perishable, ensure proper storage")
    elif score >= 6:
        pros += ["Generally balanced visual profile", "Some natural components evident"]
        cons.append("Possible added ingredients")
    elif score >= 4:
        pros.append("Contains mixed indicators")
        cons += ["Signs of processing or additives", "Review packaging details"]
    else:
        pros.append("Convenient option")
        cons += ["Likely processed", "Check sugar / sodium / fats"]

    if confidence_percent(confidence) < LOW_CONFIDENCE_PERCENT:
        cons.append("Low visual confidence, move closer or adjust lighting")
    return pros, cons
