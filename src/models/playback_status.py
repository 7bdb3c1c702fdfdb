"""
Playback status data model
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional
import math

from models.track import Track

TIME_PLACEHOLDER = "--:--"
DEFAULT_VOLUME = 0.7


class PlaybackPhase(Enum):
    """Discrete playback state"""
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    PLAYING = "playing"
    PAUSED = "paused"
    ENDED = "ended"
    ERRORED = "errored"


def is_known_time(seconds: Optional[float]) -> bool:
    """Whether a time value is set, finite and non-negative"""
    if seconds is None:
        return False
    try:
        value = float(seconds)
    except (TypeError, ValueError):
        return False
    return math.isfinite(value) and value >= 0


def format_time(seconds: Optional[float]) -> str:
    """
    Format seconds as M:SS

    Unknown values (None, NaN, infinite, negative) render as a placeholder so
    "not yet known" is distinguishable from "at time zero".
    """
    if not is_known_time(seconds):
        return TIME_PLACEHOLDER
    total_seconds = int(float(seconds))
    minutes = total_seconds // 60
    secs = total_seconds % 60
    return f"{minutes}:{secs:02d}"


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


@dataclass(frozen=True)
class PlaybackStatus:
    """
    Playback status snapshot

    Immutable; the controller replaces it on every change. The progress
    fraction is derived from the two time fields and never stored.
    """
    phase: PlaybackPhase = PlaybackPhase.IDLE
    duration_seconds: float = 0.0
    current_time_seconds: float = 0.0
    error_message: Optional[str] = None
    track: Optional[Track] = None
    play_intent: bool = False
    volume: float = DEFAULT_VOLUME

    @property
    def progress_fraction(self) -> float:
        """Elapsed time over duration, clamped to [0, 1]"""
        if self.duration_seconds <= 0:
            return 0.0
        return clamp(self.current_time_seconds / self.duration_seconds, 0.0, 1.0)

    @property
    def progress_percent(self) -> float:
        return self.progress_fraction * 100.0

    @property
    def is_loading(self) -> bool:
        return self.phase == PlaybackPhase.LOADING

    @property
    def is_playing(self) -> bool:
        """Playing, or about to play (for button rendering)"""
        return self.phase == PlaybackPhase.PLAYING or self.play_intent

    @property
    def is_errored(self) -> bool:
        return self.phase == PlaybackPhase.ERRORED

    @property
    def current_time_str(self) -> str:
        if self.duration_seconds <= 0:
            return TIME_PLACEHOLDER
        return format_time(self.current_time_seconds)

    @property
    def duration_str(self) -> str:
        if self.duration_seconds <= 0:
            return TIME_PLACEHOLDER
        return format_time(self.duration_seconds)

    @property
    def time_label(self) -> str:
        """Elapsed / total label shown next to the progress bar"""
        return f"{self.current_time_str} / {self.duration_str}"
