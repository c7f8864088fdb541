"""Tests for the scan session tick, voice gating and remote merge."""

import numpy as np
import pytest

from realtime.frame_source import FrameSourceError, LatestFrameSource
from realtime.session import ScanSession
from remote.client import RemoteEnrichmentClient
from remote.sanitize import RemoteResult


class FakeVoice:
    def __init__(self):
        self.spoken = []

    def announce(self, score):
        self.spoken.append(score)


class FakeResponse:
    status_code = 200
    ok = True

    def __init__(self, body):
        self._body = body

    def json(self):
        return self._body


class FakeHttp:
    def __init__(self, body):
        self.body = body

    def post(self, url, json=None, timeout=None):
        return FakeResponse(self.body)


def make_frame(seed=0):
    """Green-leaning product frame with enough texture for OK lighting."""
    rng = np.random.default_rng(seed)
    base = np.array([40, 160, 60])  # B, G, R
    noise = rng.integers(-60, 61, (120, 160, 3))
    return np.clip(base + noise, 0, 255).astype(np.uint8)


def make_remote(body, runner=lambda job: job()):
    client = RemoteEnrichmentClient(
        "http://localhost:5001/api/analyze", http=FakeHttp(body),
        clock=lambda: 0.0, runner=runner,
    )
    client.set_enabled(True)
    return client


def run_ticks(session, source, frame, n):
    state = None
    for _ in range(n):
        source.publish(frame)
        state = session.tick()
    return state


def test_tick_without_frame_is_skipped():
    session = ScanSession(LatestFrameSource())
    assert session.tick() is None
    assert session.snapshot().score is None
    print("✓ No-frame tick test passed")


def test_frame_source_error_propagates():
    source = LatestFrameSource()
    source.fail("Could not open camera 0")
    session = ScanSession(source)
    with pytest.raises(FrameSourceError):
        session.tick()

    # Recovers once frames arrive again
    source.publish(make_frame())
    assert session.tick() is not None
    print("✓ Frame source error test passed")


def test_tick_produces_state():
    source = LatestFrameSource()
    session = ScanSession(source, clock=lambda: 1234.0)
    state = run_ticks(session, source, make_frame(), 3)

    assert 1 <= state.score <= 10
    assert state.lighting == "OK"
    assert state.advisories == []
    assert state.pros
    assert 20 <= state.confidence <= 100
    assert state.timestamp == 1234.0
    print("✓ Tick state test passed")


def test_voice_waits_for_user_activation():
    source = LatestFrameSource()
    voice = FakeVoice()
    session = ScanSession(source, voice_output=voice)
    frame = make_frame()

    state = run_ticks(session, source, frame, 3)
    assert voice.spoken == []

    session.set_voice_enabled(True)
    run_ticks(session, source, frame, 1)
    assert voice.spoken == [state.score]

    # Stable score is not repeated
    run_ticks(session, source, frame, 3)
    assert voice.spoken == [state.score]
    print("✓ Voice activation test passed")


def test_voice_toggle_off_is_silent():
    source = LatestFrameSource()
    voice = FakeVoice()
    session = ScanSession(source, voice_output=voice)
    assert session.toggle_voice() is False

    state = run_ticks(session, source, make_frame(), 4)
    assert voice.spoken == []
    assert state.voice_enabled is False
    assert state.score is not None
    print("✓ Voice off test passed")


def test_remote_result_merged():
    source = LatestFrameSource()
    body = {"score": 2, "pros": ["Fresh"], "cons": ["Sugary"], "confidence": 80, "model": "fallback-mock"}
    session = ScanSession(source, remote_client=make_remote(body))

    source.publish(make_frame())
    state = session.tick()

    assert state.score == 2
    assert state.pros == ["Fresh"]
    assert state.cons == ["Sugary"]
    assert state.confidence == 80
    assert state.remote_enabled
    assert state.remote_model == "fallback-mock"
    assert not state.remote_pending
    print("✓ Remote merge test passed")


def test_remote_score_needs_full_step():
    session = ScanSession(LatestFrameSource())
    session.apply_remote_result(RemoteResult(score=6))
    assert session.snapshot().score == 6

    session.apply_remote_result(RemoteResult(score=6, pros=["Whole grain"], confidence=55))
    state = session.snapshot()
    assert state.score == 6
    assert state.pros == ["Whole grain"]
    assert state.confidence == 55

    session.apply_remote_result(RemoteResult(score=9))
    assert session.snapshot().score == 9
    assert session.display_gate.displayed_score == 9
    print("✓ Remote score step test passed")


def test_closed_session_drops_late_result():
    jobs = []
    source = LatestFrameSource()
    session = ScanSession(source, remote_client=make_remote({"score": 2}, runner=jobs.append))

    source.publish(make_frame())
    state = session.tick()
    local_score = state.score

    session.close()
    jobs.pop()()  # Late completion
    assert session.drain_remote_results() == 0
    assert not session.apply_remote_result(RemoteResult(score=10))
    assert session.snapshot().score == local_score
    print("✓ Closed session test passed")


def test_analyze_image_downscales_and_applies():
    session = ScanSession(LatestFrameSource())
    image = np.tile(make_frame(), (10, 10, 1))  # 1200 x 1600

    state = session.analyze_image(image)

    assert max(session.last_frame.shape[:2]) == 800
    assert state.score == session.last_result.score
    assert session.display_gate.displayed_score == state.score
    assert session.analyze_image(np.zeros((0, 0, 3), dtype=np.uint8)) is None
    print("✓ Analyze image test passed")


def test_reset_clears_display():
    source = LatestFrameSource()
    session = ScanSession(source)
    run_ticks(session, source, make_frame(), 3)

    session.reset()
    state = session.snapshot()
    assert state.score is None
    assert state.pros == []
    assert len(session.engine.smoother.history) == 0
    print("✓ Reset test passed")


def test_remote_merge_then_local_needs_fresh_confirmation():
    jobs = []
    source = LatestFrameSource()
    voice = FakeVoice()
    session = ScanSession(source, voice_output=voice,
                          remote_client=make_remote({"score": 1}, runner=jobs.append))
    session.set_voice_enabled(True)
    frame = make_frame()

    local = run_ticks(session, source, frame, 2).score
    assert local != 1
    assert voice.spoken == [local]

    jobs.pop()()  # Remote call completes between ticks
    state = run_ticks(session, source, frame, 1)
    assert state.score == 1
    assert voice.spoken == [local]

    # The local score has to hold for two ticks before it returns
    state = run_ticks(session, source, frame, 1)
    assert state.score == 1
    assert voice.spoken == [local]

    state = run_ticks(session, source, frame, 1)
    assert state.score == local
    assert voice.spoken == [local, local]

    run_ticks(session, source, frame, 3)
    assert voice.spoken == [local, local]
    print("✓ Remote merge re-confirmation test passed")
