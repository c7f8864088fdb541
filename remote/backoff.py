"""Throttle and backoff state for remote calls."""

from dataclasses import dataclass
from typing import Optional

from remote.config import BASE_INTERVAL, BACKOFF_FLOOR, BACKOFF_MAX


@dataclass
class RemoteCallState:
    """
    Remote call bookkeeping.

    Backoff grows only on failure (doubling from BACKOFF_FLOOR up to
    BACKOFF_MAX) and resets to 0 on success.
    """
    pending: bool = False
    last_call_at: Optional[float] = None  # Monotonic seconds; None = never
    backoff: float = 0.0
    last_error: str = ""
    model: str = ""

    def ready(self, now: float, base_interval: float = BASE_INTERVAL) -> bool:
        """Check whether a new attempt may start at `now`."""
        if self.pending:
            return False
        if self.last_call_at is None:
            return True
        return now - self.last_call_at >= base_interval + self.backoff

    def begin(self, now: float):
        self.pending = True
        self.last_call_at = now
        self.last_error = ""

    def record_success(self, model: str = ""):
        self.pending = False
        self.backoff = 0.0
        if model:
            self.model = model

    def record_failure(self, error: str):
        self.pending = False
        self.last_error = error
        self.backoff = min(max(self.backoff, BACKOFF_FLOOR) * 2, BACKOFF_MAX)

    def reset(self):
        """Clear throttle and backoff (e.g. when enrichment is switched on)."""
        self.backoff = 0.0
        self.last_call_at = None
        self.last_error = ""
