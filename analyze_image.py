"""
Score a still image from the command line.

Usage:
    python analyze_image.py photo.jpg [--barcode]
"""
import argparse
import json
import logging
import sys
from dataclasses import asdict

import cv2

from config import settings
from realtime.frame_source import LatestFrameSource
from realtime.session import ScanSession
from scoring.engine import ScoringEngine
from utils.logging import setup_logging
from vision.barcode import BarcodeReader

logger = logging.getLogger(__name__)


def analyze(path, decode_barcode=False):
    """
    Score one image file.

    Returns:
        ScoreState, or None if the image is empty
    """
    image = cv2.imread(str(path))
    if image is None:
        raise FileNotFoundError(f"Could not read image: {path}")

    barcode_reader = None
    if decode_barcode:
        barcode_reader = BarcodeReader()

    session = ScanSession(LatestFrameSource(), engine=ScoringEngine(), barcode_reader=barcode_reader)
    try:
        return session.analyze_image(image)
    finally:
        session.close()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Score a product photo (1-10) from its colors.")
    parser.add_argument("image", help="Path to the image file")
    parser.add_argument("--barcode", action="store_true", help="Also decode a barcode")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    args = parser.parse_args(argv)

    setup_logging(level=args.log_level)

    try:
        state = analyze(args.image, decode_barcode=args.barcode)
    except FileNotFoundError as e:
        logger.error("%s", e)
        return 1
    if state is None:
        logger.error("Image is empty: %s", args.image)
        return 1

    print(json.dumps(asdict(state), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
