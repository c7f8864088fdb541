"""
ScanSession: the periodic scan tick and the merged display state.
"""
import logging
import queue
import time
from dataclasses import dataclass, field, replace
from typing import Callable, List, Optional

import cv2
import numpy as np

from realtime.announcement import AnnouncementGate
from remote.client import RemoteEnrichmentClient
from remote.sanitize import RemoteResult
from scoring.engine import ScanResult, ScoringEngine
from scoring.score_mapper import describe_score

logger = logging.getLogger(__name__)

STILL_MAX_SIDE = 800


@dataclass
class ScoreState:
    """Snapshot of everything the UI shows."""
    score: Optional[int] = None
    confidence: int = 0  # 0-100
    lighting: str = ""
    advisories: List[str] = field(default_factory=list)
    pros: List[str] = field(default_factory=list)
    cons: List[str] = field(default_factory=list)
    barcode: str = ""
    timestamp: Optional[float] = None
    voice_enabled: bool = True
    remote_enabled: bool = False
    remote_pending: bool = False
    remote_error: str = ""
    remote_model: str = ""


class LoggingVoiceOutput:
    """Voice sink that only logs the announcement."""

    def announce(self, score: int):
        logger.info("Health score %d out of 10", score)


class ScanSession:
    """
    Owns the scoring pipeline state and drives it once per tick.

    All window and gate mutation happens inside `tick()`; remote results
    arrive on a background thread and are queued until the next tick.
    """

    def __init__(self, frame_source, engine: Optional[ScoringEngine] = None,
                 voice_output=None, barcode_reader=None,
                 remote_client: Optional[RemoteEnrichmentClient] = None,
                 is_online: Callable[[], bool] = lambda: True,
                 clock: Callable[[], float] = time.time):
        """
        Args:
            frame_source: Object with read() -> frame or None (raises FrameSourceError)
            engine: Scoring engine (a new one by default)
            voice_output: Object with announce(score)
            barcode_reader: Object with decode(frame) -> str or None
            remote_client: Optional remote enrichment client
            is_online: Connectivity signal
            clock: Wall-clock time source for timestamps
        """
        self.frame_source = frame_source
        self.engine = engine or ScoringEngine()
        self.voice_output = voice_output or LoggingVoiceOutput()
        self.barcode_reader = barcode_reader
        self.remote_client = remote_client
        self.is_online = is_online
        self.clock = clock

        # Display hysteresis is always permitted; voice needs user permission
        self.display_gate = AnnouncementGate()
        self.voice_gate = AnnouncementGate()
        self.voice_enabled = True
        self.user_activated = False

        self.last_result: Optional[ScanResult] = None
        self.last_frame: Optional[np.ndarray] = None
        self._state = ScoreState()
        self._remote_results: "queue.Queue[RemoteResult]" = queue.Queue()
        self._alive = True

    @property
    def alive(self) -> bool:
        return self._alive

    def set_voice_enabled(self, enabled: bool):
        """Switch voice output; any toggle counts as the unlocking interaction."""
        self.voice_enabled = bool(enabled)
        self.user_activated = True
        self._state.voice_enabled = self.voice_enabled

    def toggle_voice(self) -> bool:
        self.set_voice_enabled(not self.voice_enabled)
        return self.voice_enabled

    def set_remote_enabled(self, enabled: bool):
        if self.remote_client is not None:
            self.remote_client.set_enabled(enabled)

    def tick(self) -> Optional[ScoreState]:
        """
        Run one scheduling tick.

        Remote results are merged after local scoring so they stay on
        display until the next local update.

        Returns:
            ScoreState snapshot, or None when nothing changed (no new frame
            and no remote result)

        Raises:
            FrameSourceError: Frame source unavailable (retry next tick)
        """
        frame = self.frame_source.read()
        result = self.engine.process_frame(frame) if frame is not None else None

        if result is not None:
            self.last_frame = frame
            self.last_result = result

            barcode = self._decode_barcode(frame)
            if barcode and barcode != self._state.barcode:
                self._state.barcode = barcode

            self.display_gate.update(result.score)
            event = self.voice_gate.update(result.score, self.voice_enabled, self.user_activated)
            if event is not None:
                self.voice_output.announce(event.score)

            self._apply_local(result)

            if self.remote_client is not None:
                self.remote_client.maybe_submit(
                    frame,
                    barcode=self._state.barcode or None,
                    online=self.is_online(),
                    on_result=self._queue_remote_result,
                )

        merged = self.drain_remote_results()
        if result is None and not merged:
            return None
        return self.snapshot()

    def _decode_barcode(self, frame: np.ndarray) -> Optional[str]:
        if self.barcode_reader is None:
            return None
        return self.barcode_reader.decode(frame)

    def _apply_local(self, result: ScanResult):
        state = self._state
        displayed = self.display_gate.displayed_score
        state.score = displayed if displayed is not None else result.score
        state.pros, state.cons = describe_score(result.score, result.confidence)
        state.confidence = result.confidence_percent
        state.lighting = result.lighting.label
        state.advisories = list(result.lighting.advisories)
        state.timestamp = self.clock()

    def _queue_remote_result(self, result: RemoteResult):
        if not self._alive:
            logger.debug("Dropping remote result for closed session")
            return
        self._remote_results.put(result)

    def drain_remote_results(self) -> int:
        """Merge queued remote results; returns how many were applied."""
        applied = 0
        while True:
            try:
                result = self._remote_results.get_nowait()
            except queue.Empty:
                return applied
            if self.apply_remote_result(result):
                applied += 1

    def apply_remote_result(self, result: RemoteResult) -> bool:
        """
        Merge a remote result into the display state.

        The score is only replaced when it differs from the current one by
        at least 1; list fields and confidence are replaced outright.
        """
        if not self._alive:
            return False

        state = self._state
        if result.score is not None:
            current = state.score
            if current is None or abs(result.score - current) >= 1:
                self.display_gate.override(result.score)
                self.voice_gate.override(result.score)
                state.score = result.score
        if result.pros is not None:
            state.pros = list(result.pros)
        if result.cons is not None:
            state.cons = list(result.cons)
        if result.confidence is not None:
            state.confidence = max(0, min(100, int(result.confidence)))
        state.timestamp = self.clock()
        return True

    def analyze_image(self, image_bgr: np.ndarray) -> Optional[ScoreState]:
        """
        Score a still image and show the result directly (no hysteresis).

        Large images are downscaled to STILL_MAX_SIDE first.
        """
        if image_bgr is None or image_bgr.size == 0:
            return None
        h, w = image_bgr.shape[:2]
        if w > STILL_MAX_SIDE or h > STILL_MAX_SIDE:
            scale = min(STILL_MAX_SIDE / w, STILL_MAX_SIDE / h)
            image_bgr = cv2.resize(image_bgr, (int(round(w * scale)), int(round(h * scale))),
                                   interpolation=cv2.INTER_AREA)

        result = self.engine.process_frame(image_bgr)
        if result is None:
            return None

        self.last_frame = image_bgr
        self.last_result = result
        self.display_gate.override(result.score)
        self.voice_gate.override(result.score)
        self._apply_local(result)

        barcode = self._decode_barcode(image_bgr)
        if barcode:
            self._state.barcode = barcode
        return self.snapshot()

    def snapshot(self) -> ScoreState:
        """Copy of the display state, including remote-call status."""
        state = replace(
            self._state,
            advisories=list(self._state.advisories),
            pros=list(self._state.pros),
            cons=list(self._state.cons),
        )
        if self.remote_client is not None:
            status = self.remote_client.status()
            state.remote_enabled = self.remote_client.enabled
            state.remote_pending = status.pending
            state.remote_error = status.last_error
            state.remote_model = status.model
        return state

    def reset(self):
        """Clear windows, gates and display state (camera restart)."""
        self.engine.reset()
        self.display_gate.reset()
        self.voice_gate.reset()
        self.last_result = None
        self.last_frame = None
        voice_enabled = self._state.voice_enabled
        self._state = ScoreState(voice_enabled=voice_enabled)

    def close(self):
        """Tear down; late remote results are dropped."""
        self._alive = False
        while True:
            try:
                self._remote_results.get_nowait()
            except queue.Empty:
                break
