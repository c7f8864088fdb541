"""Scoring engine: one frame in, one stabilized local result out."""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from scoring.frame_sampler import FrameSample, sample_frame
from scoring.lighting import LightingAssessment, classify_lighting
from scoring.score_mapper import map_score, estimate_confidence, confidence_percent
from scoring.signal_smoother import SignalSmoother, green_dominance, raw_score


@dataclass
class ScanResult:
    """Result from the scoring engine for one frame."""
    score: int
    confidence: float  # 0-1
    lighting: LightingAssessment
    smoothed: float = 0.0
    raw_score: float = 0.0
    green_dominance: float = 0.0
    frames_considered: int = 0

    @property
    def confidence_percent(self) -> int:
        return confidence_percent(self.confidence)


class ScoringEngine:
    """Runs sample -> smooth -> {map, confidence, lighting} for each frame."""

    def __init__(self, channel_order: str = "bgr"):
        """
        Initialize scoring engine.

        Args:
            channel_order: Channel order of incoming frames ("bgr" or "rgb")
        """
        self.channel_order = channel_order
        self.smoother = SignalSmoother()
        self.frames_considered = 0

    def process_frame(self, frame: np.ndarray) -> Optional[ScanResult]:
        """Sample and score a frame; None for an empty frame (no state change)."""
        sample = sample_frame(frame, channel_order=self.channel_order)
        if sample is None:
            return None
        return self.update(sample)

    def update(self, sample: FrameSample) -> ScanResult:
        """
        Feed one frame sample through the pipeline.

        Args:
            sample: FrameSample from the frame sampler

        Returns:
            ScanResult with mapped score, confidence and lighting
        """
        brightness, variance = self.smoother.update_lighting(sample.luminance, sample.variance)
        lighting = classify_lighting(brightness, variance)

        dominance = green_dominance(sample)
        raw = raw_score(sample)
        stored = self.smoother.push_score(raw, degraded=lighting.degraded)

        smoothed = self.smoother.smoothed()
        score = map_score(smoothed)
        confidence = estimate_confidence(
            sample,
            dominance,
            window_spread=self.smoother.spread(),
            window_len=len(self.smoother.history),
            degraded=lighting.degraded,
            flat=lighting.is_flat,
        )

        self.frames_considered += 1

        return ScanResult(
            score=score,
            confidence=confidence,
            lighting=lighting,
            smoothed=smoothed,
            raw_score=stored,
            green_dominance=dominance,
            frames_considered=self.frames_considered,
        )

    def reset(self):
        """Reset engine state."""
        self.smoother.reset()
        self.frames_considered = 0
