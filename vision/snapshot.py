"""Snapshot export of the current frame."""

import logging
import time
from pathlib import Path

import cv2

logger = logging.getLogger(__name__)


def save_snapshot(frame_bgr, directory="snapshots") -> Path:
    """
    Write the frame as snapshot-<epoch-ms>.png.

    Returns:
        Path of the written file

    Raises:
        ValueError: Empty frame
        OSError: The image could not be written
    """
    if frame_bgr is None or frame_bgr.size == 0:
        raise ValueError("No frame to save")

    out_dir = Path(directory)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / f"snapshot-{int(time.time() * 1000)}.png"

    if not cv2.imwrite(str(path), frame_bgr):
        raise OSError(f"Could not write snapshot to {path}")
    logger.info("Snapshot saved to %s", path)
    return path
