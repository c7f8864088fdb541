"""
RemoteEnrichmentClient: throttled, backoff-protected calls to the analyze endpoint.
"""
import logging
import threading
import time
from dataclasses import replace
from typing import Callable, Optional

import numpy as np
import requests

from remote.backoff import RemoteCallState
from remote.config import BASE_INTERVAL, MAX_SIDE, JPEG_QUALITY
from remote.encoding import FrameEncodeError, encode_frame
from remote.sanitize import RemoteResult

logger = logging.getLogger(__name__)


class RemoteCallError(Exception):
    """Raised for a non-success HTTP status from the endpoint."""


def _spawn_thread(job: Callable[[], None]):
    threading.Thread(target=job, daemon=True).start()


class RemoteEnrichmentClient:
    """
    Submits at most one frame at a time to the remote endpoint.

    Results are handed to `on_result` from the worker thread; failures only
    update the call state (error text and backoff).
    """

    def __init__(self, endpoint: str, base_interval: float = BASE_INTERVAL,
                 max_side: int = MAX_SIDE, jpeg_quality: int = JPEG_QUALITY,
                 timeout: Optional[float] = None,
                 http: Optional[requests.Session] = None,
                 clock: Callable[[], float] = time.monotonic,
                 runner: Callable[[Callable[[], None]], None] = _spawn_thread):
        """
        Args:
            endpoint: URL of the analyze endpoint
            base_interval: Minimum seconds between attempts (before backoff)
            max_side: Longest side of the uploaded frame
            jpeg_quality: JPEG quality of the uploaded frame
            timeout: requests timeout (None = library default)
            http: Optional requests.Session
            clock: Monotonic time source
            runner: Starts the background job (a daemon thread by default)
        """
        self.endpoint = endpoint
        self.base_interval = float(base_interval)
        self.max_side = max_side
        self.jpeg_quality = jpeg_quality
        self.timeout = timeout
        self.http = http or requests.Session()
        self.clock = clock
        self.runner = runner

        self.enabled = False
        self.state = RemoteCallState()
        self._lock = threading.Lock()

    def set_enabled(self, enabled: bool):
        """Enable/disable enrichment; enabling clears throttle and backoff."""
        with self._lock:
            if enabled and not self.enabled:
                self.state.reset()
            self.enabled = bool(enabled)

    def status(self) -> RemoteCallState:
        """Copy of the current call state."""
        with self._lock:
            return replace(self.state)

    def maybe_submit(self, frame_bgr: np.ndarray, barcode: Optional[str] = None,
                     online: bool = True,
                     on_result: Optional[Callable[[RemoteResult], None]] = None) -> bool:
        """
        Start a remote call if enabled, online, idle and past the throttle window.

        Args:
            frame_bgr: Current BGR frame
            barcode: Optional decoded barcode
            online: Connectivity signal
            on_result: Receives the sanitized RemoteResult on success

        Returns:
            True if a call was started
        """
        if not self.enabled or not online or frame_bgr is None:
            return False

        with self._lock:
            now = self.clock()
            if not self.state.ready(now, self.base_interval):
                return False
            self.state.begin(now)

        frame = frame_bgr.copy()

        def job():
            try:
                result = self._call(frame, barcode)
            except (requests.RequestException, RemoteCallError, FrameEncodeError, ValueError) as e:
                self._fail(e)
                return
            except Exception as e:
                logger.exception("Unexpected remote enrichment error")
                self._fail(e)
                return
            with self._lock:
                self.state.record_success(result.model)
            logger.debug("Remote enrichment ok: score=%s model=%s", result.score, result.model)
            if on_result is not None:
                on_result(result)

        self.runner(job)
        return True

    def _fail(self, error: Exception):
        with self._lock:
            self.state.record_failure(str(error) or type(error).__name__)
            backoff = self.state.backoff
        logger.warning("Remote enrichment failed: %s (backoff %.0fs)", error, backoff)

    def _call(self, frame_bgr: np.ndarray, barcode: Optional[str]) -> RemoteResult:
        image_base64 = encode_frame(frame_bgr, self.max_side, self.jpeg_quality)

        payload = {"image_base64": image_base64, "use_model": True}
        if barcode:
            payload["barcode"] = barcode

        resp = self.http.post(self.endpoint, json=payload, timeout=self.timeout)
        if not resp.ok:
            raise RemoteCallError(f"HTTP {resp.status_code}")
        return RemoteResult.from_response(resp.json())
