"""Lighting quality classification from smoothed brightness and variance."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from scoring.config import DARK_MAX, BRIGHT_MIN, LOW_TEXTURE_VARIANCE


class LightingQuality(Enum):
    """Lighting category enum."""
    OK = "OK"
    TOO_DARK = "Too Dark"
    TOO_BRIGHT = "Too Bright"
    LOW_TEXTURE = "Low Texture"


ADVISORIES = {
    LightingQuality.TOO_DARK: "Increase lighting",
    LightingQuality.TOO_BRIGHT: "Reduce glare",
    LightingQuality.LOW_TEXTURE: "Move closer or adjust focus",
}


@dataclass
class LightingAssessment:
    """Lighting classification result."""
    quality: LightingQuality = LightingQuality.OK
    brightness: float = 0.0
    variance: float = 0.0
    advisories: List[str] = field(default_factory=list)

    @property
    def label(self) -> str:
        return self.quality.value

    @property
    def degraded(self) -> bool:
        return self.quality is not LightingQuality.OK

    @property
    def is_flat(self) -> bool:
        return self.variance < LOW_TEXTURE_VARIANCE


def classify_lighting(brightness: float, variance: float) -> LightingAssessment:
    """
    Classify lighting from trimmed-mean brightness and variance.

    Args:
        brightness: Trimmed-mean luminance (0-1)
        variance: Trimmed-mean luminance variance

    Returns:
        LightingAssessment with category and advisory text
    """
    if brightness < DARK_MAX:
        quality = LightingQuality.TOO_DARK
    elif brightness > BRIGHT_MIN:
        quality = LightingQuality.TOO_BRIGHT
    elif variance < LOW_TEXTURE_VARIANCE:
        quality = LightingQuality.LOW_TEXTURE
    else:
        quality = LightingQuality.OK

    advisories = [ADVISORIES[quality]] if quality in ADVISORIES else []

    return LightingAssessment(
        quality=quality,
        brightness=brightness,
        variance=variance,
        advisories=advisories,
    )
