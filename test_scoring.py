"""Unit tests for the local scoring pipeline."""

import numpy as np
import pytest

from scoring.frame_sampler import FrameSample, sample_frame
from scoring.lighting import LightingQuality, classify_lighting
from scoring.signal_smoother import SignalSmoother, median, trimmed_mean, iqr_filter, raw_score
from scoring.score_mapper import map_score, describe_score
from scoring.engine import ScoringEngine


def make_sample(r=0.1, g=0.6, b=0.15, luminance=None, variance=0.01):
    if luminance is None:
        luminance = 0.2126 * r + 0.7152 * g + 0.0722 * b
    return FrameSample(r=r, g=g, b=b, luminance=luminance, variance=variance)


def feed(engine, sample, n):
    result = None
    for _ in range(n):
        result = engine.update(sample)
    return result


def test_sample_empty_frame():
    """Empty frames produce no sample."""
    assert sample_frame(None) is None
    assert sample_frame(np.zeros((0, 0, 3), dtype=np.uint8)) is None
    assert sample_frame(np.zeros((0, 10), dtype=np.uint8)) is None
    print("✓ Empty frame test passed")


def test_sample_channel_averages_bgr():
    """OpenCV frames are BGR; averages are reported as r, g, b in [0, 1]."""
    frame = np.zeros((8, 8, 3), dtype=np.uint8)
    frame[:, :] = (30, 150, 60)  # B, G, R

    sample = sample_frame(frame)

    assert sample.r == pytest.approx(60 / 255)
    assert sample.g == pytest.approx(150 / 255)
    assert sample.b == pytest.approx(30 / 255)
    assert sample.variance < 1e-9
    assert 0.0 <= sample.luminance <= 1.0

    rgb = sample_frame(frame, channel_order="rgb")
    assert rgb.r == pytest.approx(30 / 255)
    print("✓ Channel average test passed")


def test_sample_grayscale_frame():
    """Single-channel grids are read as equal r, g, b."""
    gray = np.full((8, 8), 102, dtype=np.uint8)

    sample = sample_frame(gray)

    assert sample is not None
    assert sample.r == pytest.approx(0.4)
    assert sample.g == pytest.approx(0.4)
    assert sample.b == pytest.approx(0.4)
    assert sample.luminance == pytest.approx(0.4)
    assert sample_frame(gray[..., np.newaxis]).g == pytest.approx(0.4)
    print("✓ Grayscale frame test passed")


def test_sample_variance_textured():
    """A striped frame has non-zero luminance variance."""
    frame = np.zeros((96, 96, 3), dtype=np.uint8)
    frame[::2] = 255
    sample = sample_frame(frame, variance_stride=1)
    assert sample.variance > 0.1
    print("✓ Variance test passed")


def test_median_and_trimmed_mean():
    assert median([3, 1, 2, 4]) == 3  # Upper median
    assert median([]) == 0.0
    assert trimmed_mean([1, 2, 3, 4, 5, 6, 7, 8, 9, 100]) == pytest.approx(5.5)
    assert trimmed_mean([0.4]) == pytest.approx(0.4)
    print("✓ Median / trimmed mean test passed")


def test_iqr_filter_drops_outlier():
    values = [0.5] * 10 + [0.9]
    filtered = iqr_filter(values)
    assert 0.9 not in filtered
    assert len(filtered) == 10
    print("✓ IQR filter test passed")


def test_smoother_rejects_spike():
    smoother = SignalSmoother()
    for _ in range(10):
        smoother.push_score(0.5)
    smoother.push_score(0.95)
    assert smoother.smoothed() == pytest.approx(0.5)
    print("✓ Spike rejection test passed")


def test_degraded_damping_toward_prior_median():
    smoother = SignalSmoother()
    # Nothing to damp toward yet
    assert smoother.push_score(0.8, degraded=True) == pytest.approx(0.8)

    smoother.reset()
    for _ in range(3):
        smoother.push_score(0.5)
    stored = smoother.push_score(1.0, degraded=True)
    assert stored == pytest.approx(0.7 * 0.5 + 0.3 * 1.0)
    print("✓ Degraded damping test passed")


def test_window_caps():
    """History holds at most 25 scores, lighting windows at most 30 samples."""
    engine = ScoringEngine()
    for n in (1, 10, 25, 26, 40):
        engine.reset()
        feed(engine, make_sample(), n)
        assert len(engine.smoother.history) == min(n, 25)
        assert len(engine.smoother.brightness) == min(n, 30)
        assert len(engine.smoother.variance) == min(n, 30)
    print("✓ Window cap test passed")


def test_map_score():
    assert map_score(0.0) == 1
    assert map_score(1.0) == 10
    assert map_score(0.5) == 6  # 5.0 rounds half up
    assert map_score(-3.0) == 1
    assert map_score(2.0) == 10
    print("✓ Score mapping test passed")


def test_random_frames_stay_in_range():
    rng = np.random.default_rng(0)
    engine = ScoringEngine()
    for _ in range(50):
        frame = rng.integers(0, 256, (48, 64, 3), dtype=np.uint8)
        result = engine.process_frame(frame)
        assert 1 <= result.score <= 10
        assert 0.0 <= result.smoothed <= 1.0
        assert 0.2 <= result.confidence <= 1.0
        assert 0 <= result.confidence_percent <= 100
    print("✓ Range test passed")


def test_green_product_scores_seven():
    """Green-dominant scene under good lighting."""
    engine = ScoringEngine()
    sample = make_sample()
    assert raw_score(sample) == pytest.approx(0.6984, abs=1e-3)

    result = feed(engine, sample, 10)

    assert result.score == 7
    assert result.lighting.quality is LightingQuality.OK
    assert result.confidence > 0.6
    assert result.confidence_percent > 60
    print("✓ Green product test passed")


def test_dark_lighting_penalty():
    """Too Dark multiplies confidence by 0.7 for otherwise identical input."""
    ok = feed(ScoringEngine(), make_sample(), 10)
    dark = feed(ScoringEngine(), make_sample(luminance=0.05), 10)

    assert dark.lighting.quality is LightingQuality.TOO_DARK
    assert dark.lighting.advisories == ["Increase lighting"]
    assert dark.score == ok.score
    assert dark.confidence == pytest.approx(ok.confidence * 0.7)
    print("✓ Dark lighting test passed")


def test_confidence_floor():
    """Neutral grey, flat first frame bottoms out at the floor."""
    engine = ScoringEngine()
    result = engine.update(make_sample(r=0.5, g=0.5, b=0.5, variance=0.0))
    assert result.lighting.quality is LightingQuality.LOW_TEXTURE
    assert result.confidence == pytest.approx(0.2)
    print("✓ Confidence floor test passed")


def test_classify_lighting():
    assert classify_lighting(0.05, 0.01).quality is LightingQuality.TOO_DARK
    assert classify_lighting(0.9, 0.01).quality is LightingQuality.TOO_BRIGHT
    assert classify_lighting(0.5, 0.001).quality is LightingQuality.LOW_TEXTURE

    ok = classify_lighting(0.5, 0.01)
    assert ok.quality is LightingQuality.OK
    assert ok.label == "OK"
    assert ok.advisories == []
    assert not ok.degraded
    print("✓ Lighting classification test passed")


def test_describe_score():
    pros, cons = describe_score(9, 0.9)
    assert "High natural indicators" in pros
    assert not any("Low visual confidence" in c for c in cons)

    pros, cons = describe_score(2, 0.3)
    assert "Likely processed" in cons
    assert any("Low visual confidence" in c for c in cons)
    print("✓ Describe score test passed")


def test_reset_clears_windows():
    engine = ScoringEngine()
    feed(engine, make_sample(), 5)
    engine.reset()
    assert len(engine.smoother.history) == 0
    assert engine.frames_considered == 0
    print("✓ Reset test passed")
