"""Rolling-window smoothing with trimmed means and IQR outlier rejection."""

from collections import deque
from typing import Iterable, List, Sequence, Tuple

from scoring.config import (
    HISTORY_SIZE, LIGHTING_WINDOW_SIZE, TRIM_FRACTION,
    DEGRADED_PRIOR_WEIGHT, IQR_MULTIPLIER, EPSILON, BALANCE_PENALTY_WEIGHT
)
from scoring.frame_sampler import FrameSample


def green_dominance(sample: FrameSample) -> float:
    """Fraction of the channel sum attributable to green."""
    return sample.g / (sample.r + sample.g + sample.b + EPSILON)


def raw_score(sample: FrameSample) -> float:
    """Green dominance minus a red/blue imbalance penalty, floored at 0."""
    penalty = abs(sample.r - sample.b) * BALANCE_PENALTY_WEIGHT
    return max(0.0, green_dominance(sample) - penalty)


def median(values: Iterable[float]) -> float:
    """Upper median of the values (0.0 when empty)."""
    s = sorted(values)
    if not s:
        return 0.0
    return s[len(s) // 2]


def trimmed_mean(values: Iterable[float], trim: float = TRIM_FRACTION) -> float:
    """Mean after dropping floor(trim * n) values from each tail."""
    s = sorted(values)
    if not s:
        return 0.0
    k = int(len(s) * trim)
    kept = s[k:len(s) - k] or s
    return sum(kept) / len(kept)


def iqr_filter(values: Sequence[float], multiplier: float = IQR_MULTIPLIER) -> List[float]:
    """
    Drop values outside median +/- multiplier * IQR.

    Quartiles are taken by index on the sorted values; a zero IQR is
    widened to EPSILON so identical values survive.
    """
    s = sorted(values)
    if not s:
        return []
    n = len(s)
    med = s[n // 2]
    iqr = (s[int(n * 0.75)] - s[int(n * 0.25)]) or EPSILON
    lo = med - multiplier * iqr
    hi = med + multiplier * iqr
    return [v for v in values if lo <= v <= hi]


class SignalSmoother:
    """Maintains bounded score and lighting windows and smooths the score signal."""

    def __init__(self, history_size: int = HISTORY_SIZE,
                 lighting_window_size: int = LIGHTING_WINDOW_SIZE):
        """
        Initialize smoother.

        Args:
            history_size: Capacity of the raw score window
            lighting_window_size: Capacity of the brightness/variance windows
        """
        self.history: deque = deque(maxlen=history_size)
        self.brightness: deque = deque(maxlen=lighting_window_size)
        self.variance: deque = deque(maxlen=lighting_window_size)

    def update_lighting(self, luminance: float, variance: float) -> Tuple[float, float]:
        """
        Push one frame's luminance and variance.

        Returns:
            (trimmed-mean brightness, trimmed-mean variance)
        """
        self.brightness.append(float(luminance))
        self.variance.append(float(variance))
        return trimmed_mean(self.brightness), trimmed_mean(self.variance)

    def push_score(self, raw_score: float, degraded: bool = False) -> float:
        """
        Push a raw score, damping it toward the prior median when lighting is degraded.

        Returns:
            The value actually stored in the history window
        """
        value = float(raw_score)
        if degraded and self.history:
            prior = median(self.history)
            value = DEGRADED_PRIOR_WEIGHT * prior + (1.0 - DEGRADED_PRIOR_WEIGHT) * value
        self.history.append(value)
        return value

    def smoothed(self) -> float:
        """Median of the history after IQR outlier rejection."""
        if not self.history:
            return 0.0
        filtered = iqr_filter(list(self.history))
        return median(filtered if filtered else self.history)

    def spread(self) -> float:
        """Range (max - min) of the history window."""
        if not self.history:
            return 0.0
        return max(self.history) - min(self.history)

    def reset(self):
        """Reset all windows."""
        self.history.clear()
        self.brightness.clear()
        self.variance.clear()
