"""
VideoWidget: Displays the live camera feed.
"""
import cv2
from PyQt5.QtWidgets import QWidget
from PyQt5.QtGui import QImage, QPainter, QPixmap
from PyQt5.QtCore import Qt, QRect


class VideoWidget(QWidget):
    """Widget for displaying video frames, scaled to fit and centered."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.latest_frame = None  # BGR numpy array
        self.placeholder = "No camera feed"

    def setFrame(self, frame_bgr):
        """
        Update frame.

        Args:
            frame_bgr: BGR numpy array or None
        """
        self.latest_frame = frame_bgr
        self.update()  # Trigger repaint

    def setPlaceholder(self, text):
        self.placeholder = text
        self.update()

    def paintEvent(self, event):
        """Paint the latest video frame."""
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)

        widget_width = self.width()
        widget_height = self.height()

        painter.fillRect(0, 0, widget_width, widget_height, Qt.black)

        if self.latest_frame is None:
            painter.setPen(Qt.white)
            font = painter.font()
            font.setPointSize(14)
            painter.setFont(font)
            painter.drawText(
                QRect(0, 0, widget_width, widget_height),
                Qt.AlignCenter,
                self.placeholder
            )
            return

        rgb_frame = cv2.cvtColor(self.latest_frame, cv2.COLOR_BGR2RGB)
        h, w, ch = rgb_frame.shape
        qt_image = QImage(rgb_frame.data, w, h, ch * w, QImage.Format_RGB888)

        scaled_pixmap = QPixmap.fromImage(qt_image).scaled(
            widget_width, widget_height,
            Qt.KeepAspectRatio,
            Qt.SmoothTransformation
        )

        pixmap_x = (widget_width - scaled_pixmap.width()) // 2
        pixmap_y = (widget_height - scaled_pixmap.height()) // 2
        painter.drawPixmap(pixmap_x, pixmap_y, scaled_pixmap)
