"""
Latest-frame source shared between a capture thread and the scan tick.
"""
import threading


class FrameSourceError(Exception):
    """Raised when the frame source cannot deliver frames (camera unavailable)."""


class LatestFrameSource:
    """
    Single-slot frame buffer (latest frame wins).

    `read()` returns a frame only once per published frame, so ticks with
    nothing new are skipped.
    """

    def __init__(self):
        self._frame = None
        self._seq = 0
        self._read_seq = 0
        self._error = None
        self._lock = threading.Lock()

    def publish(self, frame_bgr):
        """Store the newest frame and clear any previous error."""
        with self._lock:
            self._frame = frame_bgr
            self._seq += 1
            self._error = None

    def fail(self, message):
        """Report an acquisition error to the next reader."""
        with self._lock:
            self._error = str(message)

    def read(self):
        """
        Return the newest unread frame, or None if nothing new arrived.

        Raises:
            FrameSourceError: The producer reported an error
        """
        with self._lock:
            if self._error is not None:
                raise FrameSourceError(self._error)
            if self._frame is None or self._seq == self._read_seq:
                return None
            self._read_seq = self._seq
            return self._frame

    def latest(self):
        """Newest frame regardless of whether it was read."""
        with self._lock:
            return self._frame

    def clear(self):
        with self._lock:
            self._frame = None
            self._error = None
            self._read_seq = self._seq
