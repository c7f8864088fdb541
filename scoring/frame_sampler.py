"""Frame sampling into color and luminance statistics."""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from scoring.config import COLOR_STRIDE, VARIANCE_STRIDE, LUMA_WEIGHTS


@dataclass(frozen=True)
class FrameSample:
    """Per-frame channel averages and luminance statistics, all in [0, 1]."""
    r: float
    g: float
    b: float
    luminance: float
    variance: float


def _flatten_rgb(frame: np.ndarray, channel_order: str) -> np.ndarray:
    pixels = frame[..., :3].reshape(-1, 3)
    if channel_order == "bgr":
        pixels = pixels[:, ::-1]
    elif channel_order != "rgb":
        raise ValueError(f"Unknown channel order: {channel_order}")

    if np.issubdtype(pixels.dtype, np.integer):
        return pixels.astype(np.float64) / 255.0
    return pixels.astype(np.float64)


def luminance_of(r, g, b):
    """Rec. 709 luminance; works on scalars and arrays."""
    wr, wg, wb = LUMA_WEIGHTS
    return wr * r + wg * g + wb * b


def sample_frame(frame: Optional[np.ndarray], channel_order: str = "bgr",
                 color_stride: int = COLOR_STRIDE,
                 variance_stride: int = VARIANCE_STRIDE) -> Optional[FrameSample]:
    """
    Sample a pixel grid into a FrameSample.

    Args:
        frame: HxWx3 (or HxWx4) color grid, or an HxW / HxWx1 grayscale grid;
            uint8 or float in [0, 1]
        channel_order: "bgr" for OpenCV frames, "rgb" otherwise
        color_stride: Sample every Nth pixel for the channel averages
        variance_stride: Sample every Nth pixel for the luminance variance

    Returns:
        FrameSample, or None for an empty frame
    """
    if frame is None or frame.ndim not in (2, 3):
        return None
    h, w = frame.shape[:2]
    if w == 0 or h == 0:
        return None
    if frame.ndim == 3 and frame.shape[2] == 0:
        return None
    if frame.ndim == 3 and frame.shape[2] < 3:
        # Gray (+ alpha): keep the intensity plane
        frame = frame[..., 0]
    if frame.ndim == 2:
        frame = np.repeat(frame[..., np.newaxis], 3, axis=2)

    pixels = _flatten_rgb(frame, channel_order)

    color = pixels[::color_stride]
    r, g, b = (float(v) for v in color.mean(axis=0))
    luminance = float(luminance_of(r, g, b))

    coarse = pixels[::variance_stride]
    lum = luminance_of(coarse[:, 0], coarse[:, 1], coarse[:, 2])
    n = max(1, lum.size)
    mean_l = float(lum.sum()) / n
    variance = max(0.0, float((lum * lum).sum()) / n - mean_l * mean_l)

    return FrameSample(r=r, g=g, b=b, luminance=luminance, variance=variance)
