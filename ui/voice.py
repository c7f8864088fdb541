"""
QtVoiceOutput: speaks approved score announcements.
"""
from PyQt5.QtTextToSpeech import QTextToSpeech


class QtVoiceOutput:
    """Voice sink backed by Qt text-to-speech."""

    def __init__(self, parent=None):
        self.engine = QTextToSpeech(parent)
        self.engine.setRate(0.0)
        self.engine.setPitch(0.0)
        self.engine.setVolume(1.0)

    def announce(self, score):
        # Interrupt anything still being spoken
        self.engine.stop()
        self.engine.say(f"Health score {score} out of 10")
