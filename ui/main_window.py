"""
Main window for the health scanner: live video on the left, score panel on the right.
"""
import logging
from datetime import datetime

from PyQt5.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QPushButton, QLabel,
    QFrame, QProgressBar, QFileDialog, QShortcut
)
from PyQt5.QtCore import Qt, QTimer
from PyQt5.QtGui import QKeySequence
from PyQt5.QtNetwork import QNetworkConfigurationManager
import cv2

from config import Settings
from realtime.frame_source import FrameSourceError, LatestFrameSource
from realtime.session import ScanSession, ScoreState
from remote.client import RemoteEnrichmentClient
from ui.video_widget import VideoWidget
from ui.voice import QtVoiceOutput
from vision.barcode import BarcodeReader
from vision.snapshot import save_snapshot
from workers.capture_worker import CaptureWorker

logger = logging.getLogger(__name__)

BUTTON_STYLE = """
    QPushButton {
        background-color: rgba(255, 255, 255, 0.1);
        color: white;
        padding: 8px 12px;
        border-radius: 6px;
    }
    QPushButton:checked {
        background-color: #4f46e5;
    }
"""


class MainWindow(QMainWindow):
    """Scanner window; a QTimer drives ScanSession.tick()."""

    def __init__(self, cfg: Settings):
        super().__init__()
        self.cfg = cfg

        self.frame_source = LatestFrameSource()
        self.network = QNetworkConfigurationManager()
        self.remote_client = RemoteEnrichmentClient(
            cfg.endpoint,
            base_interval=cfg.remote_interval,
            timeout=cfg.remote_timeout,
        )
        self.session = ScanSession(
            self.frame_source,
            voice_output=QtVoiceOutput(self),
            barcode_reader=BarcodeReader(),
            remote_client=self.remote_client,
            is_online=self.network.isOnline,
        )
        self.capture_worker = None

        self.setWindowTitle("Product Health Scanner")
        self.setMinimumSize(1100, 700)
        self.setup_ui()
        self.setup_shortcuts()

        self.tick_timer = QTimer(self)
        self.tick_timer.setInterval(cfg.tick_interval_ms)
        self.tick_timer.timeout.connect(self.on_tick)

        self.start_camera()

    def setup_ui(self):
        """Setup UI components."""
        central_widget = QWidget()
        central_widget.setStyleSheet("background-color: #0f172a; color: #f8fafc;")
        self.setCentralWidget(central_widget)
        main_layout = QHBoxLayout(central_widget)
        main_layout.setContentsMargins(10, 10, 10, 10)
        main_layout.setSpacing(10)

        # LEFT: video + controls
        left = QVBoxLayout()
        self.video_widget = VideoWidget()
        left.addWidget(self.video_widget, 1)

        controls = QHBoxLayout()
        self.voice_btn = QPushButton("Voice: On")
        self.voice_btn.clicked.connect(self.toggle_voice)
        self.snapshot_btn = QPushButton("Snapshot")
        self.snapshot_btn.clicked.connect(self.take_snapshot)
        self.api_btn = QPushButton("API: Off")
        self.api_btn.setCheckable(True)
        self.api_btn.clicked.connect(self.toggle_api)
        self.restart_btn = QPushButton("Restart")
        self.restart_btn.clicked.connect(self.restart_camera)
        self.upload_btn = QPushButton("Upload image")
        self.upload_btn.clicked.connect(self.upload_image)
        for btn in (self.voice_btn, self.snapshot_btn, self.api_btn, self.restart_btn, self.upload_btn):
            btn.setStyleSheet(BUTTON_STYLE)
            controls.addWidget(btn)
        left.addLayout(controls)
        main_layout.addLayout(left, 3)

        # RIGHT: score panel
        panel = QFrame()
        panel.setFixedWidth(380)
        panel.setStyleSheet("QFrame { background-color: #1e293b; border-radius: 10px; }")
        layout = QVBoxLayout(panel)
        layout.setContentsMargins(15, 15, 15, 15)
        layout.setSpacing(10)

        title = QLabel("Product Health Scanner")
        title.setStyleSheet("font-size: 22px; font-weight: bold;")
        layout.addWidget(title)

        tagline = QLabel("Point the camera at a product. A stabilized health score updates live.")
        tagline.setWordWrap(True)
        tagline.setStyleSheet("color: #94a3b8; font-size: 12px;")
        layout.addWidget(tagline)

        self.score_label = QLabel("--")
        self.score_label.setAlignment(Qt.AlignCenter)
        self.score_label.setStyleSheet("font-size: 48px; font-weight: bold;")
        self.score_label.setAccessibleName("Health score")
        layout.addWidget(self.score_label)

        self.headline_label = QLabel("Scanning...")
        self.headline_label.setStyleSheet("font-weight: bold;")
        layout.addWidget(self.headline_label)

        self.conf_bar = QProgressBar()
        self.conf_bar.setRange(0, 100)
        self.conf_bar.setFixedHeight(8)
        self.conf_bar.setTextVisible(False)
        self.conf_bar.setStyleSheet("""
            QProgressBar { background-color: #334155; border-radius: 4px; }
            QProgressBar::chunk { background-color: #10b981; border-radius: 4px; }
        """)
        layout.addWidget(self.conf_bar)

        self.conf_text = QLabel("Confidence: 0% • Updated: –")
        self.conf_text.setStyleSheet("color: #94a3b8; font-size: 11px;")
        layout.addWidget(self.conf_text)

        self.remote_label = QLabel("")
        self.remote_label.setStyleSheet("color: #a5b4fc; font-size: 11px;")
        layout.addWidget(self.remote_label)

        self.pros_label = QLabel("")
        self.pros_label.setWordWrap(True)
        layout.addWidget(self.pros_label)

        self.cons_label = QLabel("")
        self.cons_label.setWordWrap(True)
        layout.addWidget(self.cons_label)

        self.lighting_label = QLabel("")
        self.lighting_label.setWordWrap(True)
        self.lighting_label.setStyleSheet("color: #fcd34d; font-size: 12px;")
        layout.addWidget(self.lighting_label)

        self.barcode_label = QLabel("")
        self.barcode_label.setStyleSheet("color: #6ee7b7; font-size: 12px;")
        layout.addWidget(self.barcode_label)

        self.error_label = QLabel("")
        self.error_label.setWordWrap(True)
        self.error_label.setStyleSheet("color: #f87171; font-size: 12px;")
        layout.addWidget(self.error_label)

        layout.addStretch(1)
        hint = QLabel("Shortcuts: V=Voice S=Snapshot R=Restart")
        hint.setStyleSheet("color: #64748b; font-size: 10px;")
        layout.addWidget(hint)

        main_layout.addWidget(panel, 0)

    def setup_shortcuts(self):
        QShortcut(QKeySequence("V"), self, activated=self.toggle_voice)
        QShortcut(QKeySequence("S"), self, activated=self.take_snapshot)
        QShortcut(QKeySequence("R"), self, activated=self.restart_camera)

    def start_camera(self):
        """Start capture worker and the scan tick."""
        if self.capture_worker is not None:
            return
        self.error_label.setText("")
        self.frame_source.clear()
        self.capture_worker = CaptureWorker(self.frame_source, self.cfg.camera_index)
        self.capture_worker.frameReady.connect(self.video_widget.setFrame)
        self.capture_worker.errorOccurred.connect(self.on_camera_error)
        self.capture_worker.start()
        self.tick_timer.start()

    def stop_camera(self):
        """Stop capture worker and the scan tick."""
        self.tick_timer.stop()
        if self.capture_worker is not None:
            self.capture_worker.stop()
            self.capture_worker = None

    def restart_camera(self):
        self.stop_camera()
        self.session.reset()
        self.video_widget.setFrame(None)
        self.start_camera()

    def on_tick(self):
        """One scheduling tick."""
        try:
            state = self.session.tick()
        except FrameSourceError as e:
            # Retried on the next tick
            self.error_label.setText(f"Camera error: {e}")
            return
        if state is not None:
            self.render_state(state)
        else:
            self.render_remote(self.session.snapshot())

    def on_camera_error(self, message):
        logger.warning("Camera error: %s", message)
        self.error_label.setText(f"Camera error: {message}")
        self.video_widget.setPlaceholder(message)

    def render_state(self, state: ScoreState):
        """Show a ScoreState snapshot."""
        self.error_label.setText("")
        if state.score is None:
            self.score_label.setText("--")
            self.headline_label.setText("Scanning...")
        else:
            self.score_label.setText(str(state.score))
            self.headline_label.setText(f"Health score: {state.score}/10")

        updated = "–"
        if state.timestamp is not None:
            updated = datetime.fromtimestamp(state.timestamp).strftime("%H:%M:%S")
        self.conf_bar.setValue(state.confidence)
        self.conf_text.setText(f"Confidence: {state.confidence}% • Updated: {updated}")

        self.pros_label.setText("Pros\n" + "\n".join(f"✅ {p}" for p in state.pros))
        self.cons_label.setText("Cons\n" + "\n".join(f"⚠️ {c}" for c in state.cons))

        lighting = f"Lighting: {state.lighting}" if state.lighting else ""
        advisories = "\n".join(f"⚠️ {a}" for a in state.advisories)
        self.lighting_label.setText("\n".join(t for t in (lighting, advisories) if t))
        self.barcode_label.setText(f"Barcode: {state.barcode}" if state.barcode else "")
        self.render_remote(state)

    def render_remote(self, state: ScoreState):
        if not state.remote_enabled:
            self.remote_label.setText("")
            return
        parts = ["API…" if state.remote_pending else (state.remote_model or "API")]
        if state.remote_error:
            parts.append(f"Err: {state.remote_error}")
        if not self.network.isOnline():
            parts.append("Offline")
        self.remote_label.setText("  ".join(parts))

    def toggle_voice(self):
        enabled = self.session.toggle_voice()
        self.voice_btn.setText("Voice: On" if enabled else "Voice: Off")

    def toggle_api(self):
        enabled = self.api_btn.isChecked()
        self.session.set_remote_enabled(enabled)
        self.api_btn.setText("API: On" if enabled else "API: Off")
        self.render_remote(self.session.snapshot())

    def take_snapshot(self):
        frame = self.frame_source.latest()
        if frame is None:
            return
        try:
            path = save_snapshot(frame, self.cfg.snapshot_dir)
        except (ValueError, OSError) as e:
            self.error_label.setText(f"Snapshot failed: {e}")
            return
        self.statusBar().showMessage(f"Saved {path}", 3000)

    def upload_image(self):
        path, _ = QFileDialog.getOpenFileName(self, "Analyze image", "", "Images (*.png *.jpg *.jpeg *.bmp)")
        if not path:
            return
        image = cv2.imread(path)
        if image is None:
            self.error_label.setText(f"Could not read {path}")
            return
        state = self.session.analyze_image(image)
        if state is not None:
            self.render_state(state)

    def closeEvent(self, event):
        self.stop_camera()
        self.session.close()
        super().closeEvent(event)
