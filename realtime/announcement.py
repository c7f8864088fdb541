"""
Announcement gate: hysteresis state machine for score announcements.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from scoring.config import CONFIRM_TICKS


class GateState(Enum):
    """Gate state enum."""
    IDLE = "IDLE"
    HOLDING = "HOLDING"


@dataclass(frozen=True)
class AnnounceEvent:
    """Approved announcement of a new displayed score."""
    score: int


class AnnouncementGate:
    """Requires a score change to persist before it is announced and displayed."""

    def __init__(self, confirm_ticks=CONFIRM_TICKS):
        """
        Args:
            confirm_ticks: Observations of the same held value needed to announce
        """
        self.confirm_ticks = int(confirm_ticks)
        self._held_value = None
        self._stable_count = 0
        self._displayed_score = None

    @property
    def state(self):
        return GateState.IDLE if self._held_value is None else GateState.HOLDING

    @property
    def held_value(self):
        return self._held_value

    @property
    def stable_count(self):
        return self._stable_count

    @property
    def displayed_score(self):
        return self._displayed_score

    def update(self, score, voice_enabled=True, user_activated=True) -> Optional[AnnounceEvent]:
        """
        Observe a new mapped score.

        Args:
            score: Mapped score for this tick
            voice_enabled: Voice output is switched on
            user_activated: The user has interacted (audio unlocked)

        Returns:
            AnnounceEvent when the change is confirmed, else None
        """
        displayed = self._displayed_score
        if displayed is not None and abs(score - displayed) < 1:
            # Sub-threshold: keep what is displayed
            return None

        if score == self._held_value:
            self._stable_count += 1
        else:
            self._held_value = score
            self._stable_count = 1

        if (self._stable_count >= self.confirm_ticks and voice_enabled and
                user_activated and score != displayed):
            self._displayed_score = score
            return AnnounceEvent(score)
        return None

    def override(self, score):
        """
        Set the displayed score from an outside source (remote merge).

        The hold is re-armed on the new score, so a different local score
        needs a fresh confirmation before it is displayed or announced again.
        """
        self._displayed_score = score
        self._held_value = score
        self._stable_count = self.confirm_ticks

    def reset(self):
        """Reset to Idle with nothing displayed."""
        self._held_value = None
        self._stable_count = 0
        self._displayed_score = None
