"""Local heuristic scoring pipeline for the health scanner."""

from scoring.frame_sampler import FrameSample, sample_frame
from scoring.signal_smoother import SignalSmoother
from scoring.lighting import LightingQuality, LightingAssessment, classify_lighting
from scoring.score_mapper import map_score, estimate_confidence, describe_score
from scoring.engine import ScanResult, ScoringEngine

__all__ = [
    "FrameSample",
    "sample_frame",
    "SignalSmoother",
    "LightingQuality",
    "LightingAssessment",
    "classify_lighting",
    "map_score",
    "estimate_confidence",
    "describe_score",
    "ScanResult",
    "ScoringEngine",
]
