"""
CaptureWorker: Reads frames from camera and publishes the latest frame.
"""
import logging

import cv2
from PyQt5.QtCore import QThread, pyqtSignal

from realtime.frame_source import LatestFrameSource

logger = logging.getLogger(__name__)


class CaptureWorker(QThread):
    """
    Worker thread for camera capture.
    Publishes the latest frame only (older frames are overwritten).
    """

    frameReady = pyqtSignal(object)  # frame_bgr (numpy array)
    errorOccurred = pyqtSignal(str)

    def __init__(self, frame_source: LatestFrameSource, camera_index=0):
        super().__init__()
        self.frame_source = frame_source
        self.camera_index = camera_index
        self.running = False
        self.cap = None

    def run(self):
        """Main capture loop."""
        self.running = True
        self.cap = cv2.VideoCapture(self.camera_index)

        if not self.cap.isOpened():
            message = f"Could not open camera {self.camera_index}"
            logger.error(message)
            self.frame_source.fail(message)
            self.errorOccurred.emit(message)
            return

        # Ask for a large frame; the driver picks the closest mode
        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, 1920)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, 1080)

        while self.running:
            ret, frame = self.cap.read()
            if not ret:
                message = "Camera stopped delivering frames"
                logger.warning(message)
                self.frame_source.fail(message)
                self.errorOccurred.emit(message)
                break

            self.frame_source.publish(frame)
            self.frameReady.emit(frame)

        if self.cap:
            self.cap.release()
            self.cap = None

    def stop(self):
        """Stop camera capture."""
        self.running = False
        self.wait()
        if self.cap:
            self.cap.release()
            self.cap = None
