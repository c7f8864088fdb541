"""Frame encoding for remote upload."""

import base64

import cv2
import numpy as np

from remote.config import MAX_SIDE, JPEG_QUALITY


class FrameEncodeError(Exception):
    """Raised when a frame cannot be encoded for upload."""


def downscale(frame: np.ndarray, max_side: int = MAX_SIDE) -> np.ndarray:
    """Resize so the longest side is at most max_side (aspect ratio kept)."""
    h, w = frame.shape[:2]
    if w <= max_side and h <= max_side:
        return frame
    scale = min(max_side / w, max_side / h)
    size = (max(1, int(round(w * scale))), max(1, int(round(h * scale))))
    return cv2.resize(frame, size, interpolation=cv2.INTER_AREA)


def encode_frame(frame_bgr: np.ndarray, max_side: int = MAX_SIDE,
                 quality: int = JPEG_QUALITY) -> str:
    """
    Encode a BGR frame as base64 JPEG (no data-URL header).

    Args:
        frame_bgr: BGR frame (numpy array)
        max_side: Longest side after downscaling
        quality: JPEG quality (0-100)

    Returns:
        Base64 string

    Raises:
        FrameEncodeError: Empty frame or encoder failure
    """
    if frame_bgr is None or frame_bgr.size == 0:
        raise FrameEncodeError("encode failed: empty frame")

    try:
        small = downscale(frame_bgr, max_side)
        ok, buf = cv2.imencode(".jpg", small, [int(cv2.IMWRITE_JPEG_QUALITY), int(quality)])
    except cv2.error as e:
        raise FrameEncodeError(f"encode failed: {e}") from e
    if not ok:
        raise FrameEncodeError("encode failed")
    return base64.b64encode(buf.tobytes()).decode("ascii")
