"""Real-time scan loop: frame source, announcement gate and session."""

from realtime.announcement import AnnouncementGate, AnnounceEvent, GateState
from realtime.frame_source import FrameSourceError, LatestFrameSource
from realtime.session import ScanSession, ScoreState

__all__ = [
    "AnnouncementGate",
    "AnnounceEvent",
    "GateState",
    "FrameSourceError",
    "LatestFrameSource",
    "ScanSession",
    "ScoreState",
]
