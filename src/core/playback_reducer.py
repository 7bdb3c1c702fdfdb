"""
Playback Reducer Module

Pure state transitions for the preview player: (status, event) -> transition.

Commands adjust the snapshot optimistically and describe the requests the
media element must receive as effects. Media notifications are authoritative
and correct any divergence. Nothing in this module touches a media element.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple, Union
import math

from core.media_element import MediaEvent, MediaLoadError, MediaNotification
from models.playback_status import DEFAULT_VOLUME, PlaybackPhase, PlaybackStatus, clamp
from models.track import Track

LOAD_ERROR_MESSAGE = "Unable to load audio track"
PLAYBACK_ERROR_MESSAGE = "Playback failed"

# Phases from which play() is accepted
PLAYABLE_PHASES = frozenset({
    PlaybackPhase.IDLE,
    PlaybackPhase.LOADING,
    PlaybackPhase.READY,
    PlaybackPhase.PAUSED,
    PlaybackPhase.ENDED,
})


# ===== Events =====

@dataclass(frozen=True)
class BindTrack:
    track: Optional[Track]
    volume: float = DEFAULT_VOLUME


@dataclass(frozen=True)
class PlayCommand:
    pass


@dataclass(frozen=True)
class PauseCommand:
    pass


@dataclass(frozen=True)
class SeekCommand:
    target_seconds: float


@dataclass(frozen=True)
class VolumeCommand:
    volume: float


@dataclass(frozen=True)
class Reconcile:
    """Values read directly from the media element"""
    duration_seconds: float
    current_time_seconds: float


PlaybackEvent = Union[
    BindTrack, PlayCommand, PauseCommand, SeekCommand, VolumeCommand, Reconcile, MediaEvent
]


# ===== Effects =====

class EffectKind(Enum):
    LOAD_SOURCE = "load_source"
    UNLOAD = "unload"
    REQUEST_PLAY = "request_play"
    REQUEST_PAUSE = "request_pause"
    SET_POSITION = "set_position"
    SET_VOLUME = "set_volume"


@dataclass(frozen=True)
class Effect:
    kind: EffectKind
    value: Optional[float] = None


@dataclass(frozen=True)
class Transition:
    status: PlaybackStatus
    effects: Tuple[Effect, ...] = ()

    @property
    def is_noop(self) -> bool:
        return not self.effects


def _finite_non_negative(value: Optional[float]) -> float:
    """Unknown, infinite or negative values count as 0"""
    if value is None:
        return 0.0
    try:
        value = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(value) or value < 0:
        return 0.0
    return value


def _clamp_time(seconds: Optional[float], duration: float) -> float:
    """Current time is only meaningful once the duration is known"""
    if duration <= 0:
        return 0.0
    return clamp(_finite_non_negative(seconds), 0.0, duration)


def is_load_failure(status: PlaybackStatus, event: MediaEvent) -> bool:
    """Classify an error notification: before playback started, or during it"""
    if event.error is not None:
        return isinstance(event.error, MediaLoadError)
    return (
        status.phase in (PlaybackPhase.IDLE, PlaybackPhase.LOADING, PlaybackPhase.READY)
        and status.current_time_seconds == 0
    )


# ===== Reducer =====

def reduce(status: PlaybackStatus, event: PlaybackEvent) -> Transition:
    """
    Compute the next status and the requests to issue

    Args:
        status: Current snapshot
        event: Binding, user command, reconciliation, or media notification

    Returns:
        Transition: New snapshot (the same object when nothing changed) and effects
    """
    if isinstance(event, BindTrack):
        return _bind(status, event)
    if isinstance(event, MediaEvent):
        return Transition(_on_notification(status, event))
    if isinstance(event, PlayCommand):
        return _play(status)
    if isinstance(event, PauseCommand):
        return _pause(status)
    if isinstance(event, SeekCommand):
        return _seek(status, event.target_seconds)
    if isinstance(event, VolumeCommand):
        return _volume(status, event.volume)
    if isinstance(event, Reconcile):
        return Transition(_reconcile(status, event))
    raise TypeError(f"Unsupported playback event: {event!r}")


def _bind(status: PlaybackStatus, event: BindTrack) -> Transition:
    # Timing, errors and intent never survive a rebind
    new_status = PlaybackStatus(
        phase=PlaybackPhase.IDLE,
        track=event.track,
        volume=clamp(event.volume, 0.0, 1.0),
    )
    if event.track is None:
        return Transition(new_status, (Effect(EffectKind.UNLOAD),))
    return Transition(new_status, (Effect(EffectKind.LOAD_SOURCE),))


def _play(status: PlaybackStatus) -> Transition:
    if status.track is None or status.phase not in PLAYABLE_PHASES or status.play_intent:
        return Transition(status)

    if status.phase == PlaybackPhase.ENDED:
        # Replay after completion starts from the beginning
        return Transition(
            replace(status, current_time_seconds=0.0, play_intent=True),
            (Effect(EffectKind.SET_POSITION, 0.0), Effect(EffectKind.REQUEST_PLAY)),
        )
    return Transition(
        replace(status, play_intent=True),
        (Effect(EffectKind.REQUEST_PLAY),),
    )


def _pause(status: PlaybackStatus) -> Transition:
    if status.phase == PlaybackPhase.PLAYING:
        return Transition(
            replace(status, phase=PlaybackPhase.PAUSED, play_intent=False),
            (Effect(EffectKind.REQUEST_PAUSE),),
        )
    if status.play_intent:
        # Cancel a play that has not been confirmed yet
        return Transition(
            replace(status, play_intent=False),
            (Effect(EffectKind.REQUEST_PAUSE),),
        )
    return Transition(status)


def _seek(status: PlaybackStatus, target_seconds: float) -> Transition:
    if status.duration_seconds <= 0 or status.phase == PlaybackPhase.ERRORED:
        return Transition(status)
    try:
        target = float(target_seconds)
    except (TypeError, ValueError):
        return Transition(status)
    if math.isnan(target):
        return Transition(status)

    position = clamp(target, 0.0, status.duration_seconds)
    phase = status.phase
    if phase == PlaybackPhase.ENDED and position < status.duration_seconds:
        # Leaving the end position makes the source resumable again
        phase = PlaybackPhase.PAUSED
    return Transition(
        replace(status, phase=phase, current_time_seconds=position),
        (Effect(EffectKind.SET_POSITION, position),),
    )


def _volume(status: PlaybackStatus, volume: float) -> Transition:
    volume = clamp(_finite_non_negative(volume), 0.0, 1.0)
    return Transition(
        replace(status, volume=volume),
        (Effect(EffectKind.SET_VOLUME, volume),),
    )


def _reconcile(status: PlaybackStatus, event: Reconcile) -> PlaybackStatus:
    if status.track is None or status.phase == PlaybackPhase.ERRORED:
        return status
    duration = _finite_non_negative(event.duration_seconds) or status.duration_seconds
    current_time = _clamp_time(event.current_time_seconds, duration)
    if duration == status.duration_seconds and current_time == status.current_time_seconds:
        return status
    return replace(status, duration_seconds=duration, current_time_seconds=current_time)


def _on_notification(status: PlaybackStatus, event: MediaEvent) -> PlaybackStatus:
    # Failures are terminal for the binding
    if status.track is None or status.phase == PlaybackPhase.ERRORED:
        return status

    kind = event.kind

    if kind == MediaNotification.LOAD_START:
        if status.phase == PlaybackPhase.LOADING:
            return status
        return replace(status, phase=PlaybackPhase.LOADING)

    if kind == MediaNotification.CAN_PLAY:
        if status.phase != PlaybackPhase.LOADING:
            return status
        return replace(status, phase=PlaybackPhase.READY)

    if kind == MediaNotification.METADATA_READY:
        duration = _finite_non_negative(event.value)
        phase = PlaybackPhase.READY if status.phase == PlaybackPhase.LOADING else status.phase
        return replace(
            status,
            phase=phase,
            duration_seconds=duration,
            current_time_seconds=_clamp_time(status.current_time_seconds, duration),
        )

    if kind == MediaNotification.TIME_UPDATE:
        current_time = _clamp_time(event.value, status.duration_seconds)
        if status.play_intent:
            return replace(
                status,
                phase=PlaybackPhase.PLAYING,
                current_time_seconds=current_time,
                play_intent=False,
            )
        if current_time == status.current_time_seconds:
            return status
        return replace(status, current_time_seconds=current_time)

    if kind == MediaNotification.ENDED:
        return replace(
            status,
            phase=PlaybackPhase.ENDED,
            current_time_seconds=status.duration_seconds,
            play_intent=False,
        )

    if kind == MediaNotification.ERROR:
        message = LOAD_ERROR_MESSAGE if is_load_failure(status, event) else PLAYBACK_ERROR_MESSAGE
        return replace(
            status,
            phase=PlaybackPhase.ERRORED,
            error_message=message,
            play_intent=False,
        )

    return status
