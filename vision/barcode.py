"""Barcode decoding with zxing-cpp."""

import logging
from typing import Optional

import cv2
import numpy as np
import zxingcpp

logger = logging.getLogger(__name__)


class BarcodeReader:
    """Decodes the first readable barcode in a frame."""

    def decode(self, frame_bgr: np.ndarray) -> Optional[str]:
        """
        Args:
            frame_bgr: BGR frame (numpy array)

        Returns:
            Decoded text, or None if no barcode was found
        """
        if frame_bgr is None or frame_bgr.size == 0:
            return None
        gray = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2GRAY) if frame_bgr.ndim == 3 else frame_bgr
        try:
            results = zxingcpp.read_barcodes(gray)
        except (ValueError, RuntimeError) as e:
            logger.debug("Barcode decode failed: %s", e)
            return None
        for res in results:
            if res.text:
                return res.text
        return None
