"""
Playback Controller Module

Drives one media element for the track-preview player: binding a track,
play/pause/seek commands, and folding the element's notifications into a
PlaybackStatus snapshot.
"""

from typing import Callable, List, Optional
import logging
import math

from core.event_bus import EventBus, EventType
from core.media_element import (
    MediaError,
    MediaEvent,
    MediaLoadError,
    MediaNotification,
    MediaPlaybackError,
)
from core.playback_reducer import (
    BindTrack,
    Effect,
    EffectKind,
    PauseCommand,
    PlayCommand,
    PlaybackEvent,
    Reconcile,
    SeekCommand,
    Transition,
    VolumeCommand,
    is_load_failure,
    reduce,
)
from core.ports.media import IMediaElement
from models.playback_status import DEFAULT_VOLUME, PlaybackPhase, PlaybackStatus, clamp
from models.track import Track

logger = logging.getLogger(__name__)


class _Binding:
    """Media element subscriptions held on behalf of one bound track"""

    def __init__(self, track: Track):
        self.track = track
        self.subscription_ids: List[str] = []
        self.active = True


class PlaybackController:
    """
    Playback Controller

    Owns one media element exclusively. User commands update the status
    optimistically; media notifications are authoritative and reconcile it.
    No error raised by the media element crosses this interface: failures end
    up in the status as the ERRORED phase.

    Example:
        controller = PlaybackController(MediaElementFactory.create("pygame"))
        controller.subscribe(lambda status: print(status.time_label))

        controller.bind(track)
        controller.play()

        # From the host event loop
        controller.poll()
    """

    def __init__(
        self,
        media_element: IMediaElement,
        event_bus: Optional[EventBus] = None,
        media_root: Optional[str] = None,
        default_volume: float = DEFAULT_VOLUME,
        autoplay: bool = False,
    ):
        self._element = media_element
        self._event_bus = event_bus if event_bus is not None else EventBus()
        self._media_root = media_root or None
        self._autoplay = autoplay
        self._status = PlaybackStatus(volume=clamp(float(default_volume), 0.0, 1.0))
        self._binding: Optional[_Binding] = None
        self._closed = False

        self._execute(Effect(EffectKind.SET_VOLUME, self._status.volume))

    # ===== Read-only State =====

    @property
    def status(self) -> PlaybackStatus:
        """Current playback status snapshot"""
        return self._status

    @property
    def current_track(self) -> Optional[Track]:
        return self._status.track

    @property
    def media_element(self) -> IMediaElement:
        return self._element

    @property
    def is_closed(self) -> bool:
        return self._closed

    def subscribe(self, callback: Callable[[PlaybackStatus], None]) -> str:
        """
        Observe status changes

        The callback receives the new snapshot once per change.

        Returns:
            str: Subscription ID
        """
        return self._event_bus.subscribe(EventType.STATUS_CHANGED, callback)

    def unsubscribe(self, subscription_id: str) -> bool:
        return self._event_bus.unsubscribe(subscription_id)

    @property
    def event_bus(self) -> EventBus:
        return self._event_bus

    # ===== Binding =====

    def bind(self, track: Optional[Track], autoplay: Optional[bool] = None) -> None:
        """
        Bind a track, replacing whatever was bound

        Releases the previous subscriptions first, so notifications still in
        flight for the previous track never reach the new status. Passing None
        unbinds.

        Args:
            track: Track to preview, or None
            autoplay: Start playback right away; defaults to the controller setting
        """
        if self._closed:
            logger.warning("bind() called on a closed playback controller")
            return

        self._release_binding()

        if track is None:
            logger.info("Unbinding preview track")
            self._dispatch(BindTrack(None, self._status.volume))
            return

        binding = _Binding(track)
        for kind in MediaNotification:
            binding.subscription_ids.append(
                self._element.subscribe(
                    kind, lambda event, owner=binding: self._on_media_event(owner, event)
                )
            )
        self._binding = binding

        logger.info("Binding preview track %s (%s)", track.id, track.display_name)
        self._dispatch(BindTrack(track, self._status.volume))
        # Backends that load synchronously already know the duration
        self.reconcile()
        self._event_bus.publish_sync(EventType.TRACK_BOUND, track)

        if self._autoplay if autoplay is None else autoplay:
            self.play()

    def retry(self) -> None:
        """Rebind the current track, e.g. after a load failure"""
        track = self._status.track
        if track is None:
            return
        logger.info("Retrying preview track %s", track.id)
        self.bind(track, autoplay=False)

    def _release_binding(self) -> None:
        binding = self._binding
        if binding is None:
            return
        binding.active = False
        for subscription_id in binding.subscription_ids:
            self._element.unsubscribe(subscription_id)
        binding.subscription_ids.clear()
        self._binding = None

    # ===== Commands =====

    def play(self) -> None:
        """Request playback; the phase turns PLAYING on the element's confirmation"""
        self._command(PlayCommand())

    def pause(self) -> None:
        self._command(PauseCommand())

    def toggle_play(self) -> None:
        """Play/pause button behaviour"""
        if self._status.is_playing:
            self.pause()
        else:
            self.play()

    def seek(self, seconds: float) -> None:
        """
        Seek to a position

        Args:
            seconds: Target position; clamped to [0, duration]
        """
        self._command(SeekCommand(seconds))

    def seek_by_fraction(self, fraction: float) -> None:
        """
        Seek to a fraction of the duration (progress bar clicks)

        Args:
            fraction: Pointer position relative to the bar, in [0, 1]
        """
        duration = self._status.duration_seconds
        try:
            fraction = float(fraction)
        except (TypeError, ValueError):
            logger.debug("Ignoring seek to non-numeric fraction: %r", fraction)
            return
        if duration <= 0 or math.isnan(fraction):
            logger.debug("Ignoring seek by fraction, duration unknown")
            return
        self.seek(clamp(fraction, 0.0, 1.0) * duration)

    def set_volume(self, volume: float) -> None:
        self._command(VolumeCommand(volume))

    def reconcile(self) -> None:
        """Fold the element's readable duration and position into the status"""
        if self._closed or self._binding is None:
            return
        try:
            duration = self._element.duration
            current_time = self._element.current_time
        except Exception as e:
            logger.warning("Reading media element state failed: %s", e)
            return
        self._dispatch(Reconcile(duration, current_time))

    def poll(self) -> int:
        """Deliver pending media notifications; called from the host event loop"""
        if self._closed:
            return 0
        try:
            return self._element.poll()
        except Exception as e:
            logger.error("Polling media element failed: %s", e)
            self._fail(MediaPlaybackError(f"Media element poll failed: {e}"))
            return 0

    def _command(self, event: PlaybackEvent) -> None:
        if self._closed:
            logger.debug("Ignoring %s on a closed controller", type(event).__name__)
            return
        transition = self._dispatch(event)
        if transition.is_noop:
            logger.debug(
                "%s ignored in phase %s", type(event).__name__, self._status.phase.value
            )

    # ===== Notifications =====

    def _on_media_event(self, binding: _Binding, event: MediaEvent) -> None:
        if binding is not self._binding or not binding.active:
            logger.debug("Ignoring %s for a released binding", event.kind.value)
            return

        if event.kind == MediaNotification.ERROR:
            kind = "LoadError" if is_load_failure(self._status, event) else "PlaybackError"
            logger.warning(
                "%s on track %s: %s", kind, binding.track.id, event.message or "unknown error"
            )

        self._dispatch(event)

    def _fail(self, error: MediaError) -> None:
        """Route an exception raised by the element through the error notification path"""
        if self._binding is None:
            return
        self._on_media_event(self._binding, MediaEvent(MediaNotification.ERROR, error=error))

    # ===== Reduction =====

    def _dispatch(self, event: PlaybackEvent) -> Transition:
        previous = self._status
        transition = reduce(previous, event)
        self._status = transition.status

        if transition.status != previous:
            self._event_bus.publish_sync(EventType.STATUS_CHANGED, transition.status)
            if (
                transition.status.phase == PlaybackPhase.ERRORED
                and previous.phase != PlaybackPhase.ERRORED
            ):
                self._event_bus.publish_sync(EventType.PLAYBACK_ERROR, transition.status)

        for effect in transition.effects:
            if not self._execute(effect):
                break
        return transition

    def _execute(self, effect: Effect) -> bool:
        """Issue one request to the media element; failures become an ERROR notification"""
        try:
            if effect.kind == EffectKind.LOAD_SOURCE:
                track = self._status.track
                self._element.load(track.resolve_path(self._media_root))
            elif effect.kind == EffectKind.UNLOAD:
                self._element.unload()
            elif effect.kind == EffectKind.REQUEST_PLAY:
                self._element.request_play()
            elif effect.kind == EffectKind.REQUEST_PAUSE:
                self._element.request_pause()
            elif effect.kind == EffectKind.SET_POSITION:
                self._element.set_position(effect.value)
            elif effect.kind == EffectKind.SET_VOLUME:
                self._element.set_volume(effect.value)
        except Exception as e:
            logger.error("Media element %s failed: %s", effect.kind.value, e)
            if effect.kind == EffectKind.LOAD_SOURCE:
                self._fail(MediaLoadError(f"Failed to load source: {e}"))
            else:
                self._fail(MediaPlaybackError(f"{effect.kind.value} failed: {e}"))
            return False
        return True

    # ===== Teardown =====

    def close(self) -> None:
        """Release the binding and the media element; safe to call twice"""
        if self._closed:
            return
        self._closed = True
        self._release_binding()
        try:
            self._element.unload()
        except Exception as e:
            logger.warning("Unloading media element failed: %s", e)
        try:
            self._element.cleanup()
        except Exception as e:
            logger.warning("Media element cleanup failed: %s", e)
        self._event_bus.clear()

    def __enter__(self) -> "PlaybackController":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
