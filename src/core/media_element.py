"""
Media Element Module - Core for Audio Decoding and Playback

Provides the decoding/playback primitive the playback controller drives:
loading a source, playing, pausing, seeking, and lifecycle notifications.
Supports multiple backend implementations (pygame, miniaudio).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple
import logging
import math
import os
import queue
import threading
import uuid

logger = logging.getLogger(__name__)


class MediaNotification(Enum):
    """Lifecycle notifications emitted by a media element"""
    LOAD_START = "loadstart"
    CAN_PLAY = "canplay"
    METADATA_READY = "loadedmetadata"
    TIME_UPDATE = "timeupdate"
    ENDED = "ended"
    ERROR = "error"


class MediaError(Exception):
    """Base class for media element failures"""

    def __init__(self, message: str, source: Optional[str] = None):
        self.source = source
        super().__init__(message)


class MediaLoadError(MediaError):
    """Network or decode failure before playback started"""


class MediaPlaybackError(MediaError):
    """Failure while the source was playing"""


class UnsupportedSourceError(MediaLoadError):
    """
    Unsupported source exception

    Raised when a source does not exist or no decoder accepts it.
    """

    def __init__(self, source: str, reason: str = ""):
        self.reason = reason
        super().__init__(
            f"Unsupported source: {source}" + (f" ({reason})" if reason else ""),
            source=source,
        )


@dataclass(frozen=True)
class MediaEvent:
    """A single notification and its payload"""
    kind: MediaNotification
    value: Optional[float] = None
    error: Optional[MediaError] = None

    @property
    def message(self) -> str:
        return str(self.error) if self.error is not None else ""


MediaCallback = Callable[[MediaEvent], None]


class MediaElementBase(ABC):
    """
    Abstract Base Class for Media Elements

    Notifications may be produced on any thread (decoder workers, audio
    callbacks). They are queued and delivered in order, on the thread that
    calls poll(). Notifications queued for a source that has since been
    replaced are dropped at delivery.
    """

    def __init__(self):
        self._volume: float = 1.0
        self._source: Optional[str] = None
        self._generation: int = 0
        self._play_pending: bool = False
        self._pending: "queue.SimpleQueue[Tuple[int, MediaEvent]]" = queue.SimpleQueue()
        self._subscribers: Dict[str, Tuple[MediaNotification, MediaCallback]] = {}
        self._sub_lock = threading.Lock()

    @staticmethod
    def probe() -> bool:
        """
        Check if backend dependencies are available (without opening a device)

        Returns:
            bool: True if dependencies are available
        """
        return False

    @property
    def volume(self) -> float:
        """Get the current volume"""
        return self._volume

    @property
    def source(self) -> Optional[str]:
        """Get the currently loaded source"""
        return self._source

    # ===== Notification Subscription =====

    def subscribe(self, kind: MediaNotification, callback: MediaCallback) -> str:
        """
        Subscribe to one notification kind

        Returns:
            str: Subscription ID, used for unsubscription
        """
        subscription_id = str(uuid.uuid4())
        with self._sub_lock:
            self._subscribers[subscription_id] = (kind, callback)
        return subscription_id

    def unsubscribe(self, subscription_id: str) -> bool:
        with self._sub_lock:
            return self._subscribers.pop(subscription_id, None) is not None

    def subscriber_count(self) -> int:
        with self._sub_lock:
            return len(self._subscribers)

    def _post(
        self,
        kind: MediaNotification,
        value: Optional[float] = None,
        error: Optional[MediaError] = None,
        generation: Optional[int] = None,
    ) -> None:
        """Queue a notification (thread-safe)"""
        if generation is None:
            generation = self._generation
        self._pending.put((generation, MediaEvent(kind, value, error)))

    def poll(self) -> int:
        """
        Deliver queued notifications on the calling thread

        Called periodically by the host's event loop.

        Returns:
            int: Number of notifications delivered
        """
        self._tick()
        delivered = 0
        while True:
            try:
                generation, event = self._pending.get_nowait()
            except queue.Empty:
                break
            if generation != self._generation:
                logger.debug("Dropping stale %s notification", event.kind.value)
                continue
            self._dispatch(event)
            delivered += 1
        return delivered

    def _dispatch(self, event: MediaEvent) -> None:
        with self._sub_lock:
            callbacks = [cb for kind, cb in self._subscribers.values() if kind == event.kind]
        for callback in callbacks:
            try:
                callback(event)
            except Exception as e:
                logger.error("Media notification callback error: %s", e)

    # ===== Source Lifecycle =====

    def load(self, source: str) -> None:
        """
        Start resolving a new source

        Returns immediately; progress is reported through notifications.
        """
        self._generation += 1
        self._source = source
        self._play_pending = False
        self._post(MediaNotification.LOAD_START)
        self._begin_load(source, self._generation)

    def unload(self) -> None:
        """Drop the current source and anything still queued for it"""
        self._generation += 1
        self._source = None
        self._play_pending = False
        self._release_source()

    def _tick(self) -> None:
        """Periodic work done on the polling thread (time updates, end detection)"""

    @abstractmethod
    def _begin_load(self, source: str, generation: int) -> None:
        """Backend-specific loading of a source"""
        pass

    @abstractmethod
    def _release_source(self) -> None:
        """Backend-specific release of the current source"""
        pass

    # ===== Playback Control =====

    @abstractmethod
    def request_play(self) -> None:
        """Request playback; honored once the source is ready"""
        pass

    @abstractmethod
    def request_pause(self) -> None:
        """Pause playback"""
        pass

    @abstractmethod
    def set_position(self, seconds: float) -> None:
        """
        Move the playback position

        Args:
            seconds: Target position in seconds
        """
        pass

    @abstractmethod
    def set_volume(self, volume: float) -> None:
        """
        Set the volume

        Args:
            volume: Volume value (0.0 - 1.0)
        """
        pass

    @property
    @abstractmethod
    def duration(self) -> float:
        """Total duration in seconds, NaN while unknown"""
        pass

    @property
    @abstractmethod
    def current_time(self) -> float:
        """Current position in seconds"""
        pass

    @abstractmethod
    def cleanup(self) -> None:
        """Release devices and worker threads"""
        pass

    def get_engine_name(self) -> str:
        """
        Get the backend name

        Returns:
            str: Backend identifier name
        """
        return "base"


def probe_duration(file_path: str) -> float:
    """Read the duration from file headers, NaN when unreadable"""
    try:
        from mutagen import File
        audio = File(file_path)
        if audio is not None and audio.info is not None:
            return float(audio.info.length)
    except Exception as e:
        logger.debug("Duration probe failed for %s: %s", file_path, e)
    return math.nan


class PygameMediaElement(MediaElementBase):
    """
    Media element based on Pygame

    Uses pygame.mixer.music for streaming playback, supporting most common
    audio formats. Durations come from mutagen.
    """

    _initialized = False
    _mixer_refcount = 0
    _lock = threading.Lock()

    @staticmethod
    def probe() -> bool:
        """Check if pygame dependency is available (without initializing mixer)"""
        try:
            import pygame
            return hasattr(pygame, 'mixer')
        except ImportError:
            return False

    def __init__(self, pygame_module: Any = None):
        super().__init__()
        if pygame_module is None:
            import pygame as pygame_module
        self._pygame = pygame_module
        self._duration: float = math.nan
        self._loaded = False
        self._playing = False
        self._paused = False
        self._ended = False
        # Seconds at which the running music.play() started
        self._offset: float = 0.0
        # Position while not playing
        self._position: float = 0.0
        self._seek_while_paused = False
        self._cleaned_up = False

        self._acquire_mixer()

    def _acquire_mixer(self) -> None:
        """Initialize global pygame mixer and use reference counting to avoid accidental shutdown."""
        with PygameMediaElement._lock:
            if not PygameMediaElement._initialized:
                self._pygame.mixer.init(frequency=44100, size=-16, channels=2, buffer=2048)
                PygameMediaElement._initialized = True
            PygameMediaElement._mixer_refcount += 1

    @property
    def _music(self) -> Any:
        return self._pygame.mixer.music

    def _reset_position(self) -> None:
        self._loaded = False
        self._playing = False
        self._paused = False
        self._ended = False
        self._offset = 0.0
        self._position = 0.0
        self._seek_while_paused = False
        self._duration = math.nan

    def _begin_load(self, source: str, generation: int) -> None:
        try:
            self._music.stop()
        except Exception as e:
            logger.debug("Stopping previous source failed: %s", e)
        self._reset_position()

        try:
            if not os.path.isfile(source):
                raise UnsupportedSourceError(source, "file not found")
            self._music.load(source)
        except MediaError as e:
            self._post(MediaNotification.ERROR, error=e, generation=generation)
            return
        except Exception as e:
            self._post(
                MediaNotification.ERROR,
                error=MediaLoadError(f"Failed to load file: {e}", source=source),
                generation=generation,
            )
            return

        self._loaded = True
        self._duration = probe_duration(source)
        self._post(MediaNotification.METADATA_READY, self._duration, generation=generation)
        self._post(MediaNotification.CAN_PLAY, generation=generation)

    def _release_source(self) -> None:
        try:
            self._music.stop()
            self._music.unload()
        except Exception as e:
            logger.debug("Releasing pygame source failed: %s", e)
        self._reset_position()

    def _start(self, start_at: float) -> None:
        try:
            self._music.play(start=start_at)
            self._offset = start_at
        except self._pygame.error:
            # Some formats (WAV) cannot start at an offset
            self._music.play()
            self._offset = 0.0

    def request_play(self) -> None:
        if self._source is None:
            return
        if not self._loaded:
            self._play_pending = True
            return
        if self._playing:
            return

        try:
            if self._paused and not self._seek_while_paused:
                self._music.unpause()
                self._offset = self._position - self._music.get_pos() / 1000.0
            else:
                start_at = 0.0 if self._ended else self._position
                self._start(start_at)
        except Exception as e:
            self._post(
                MediaNotification.ERROR,
                error=MediaPlaybackError(f"Playback failed: {e}", source=self._source),
            )
            return

        self._play_pending = False
        self._playing = True
        self._paused = False
        self._ended = False
        self._seek_while_paused = False
        self._post(MediaNotification.TIME_UPDATE, self.current_time)

    def request_pause(self) -> None:
        self._play_pending = False
        if not self._playing:
            return
        self._position = self.current_time
        self._music.pause()
        self._playing = False
        self._paused = True

    def set_position(self, seconds: float) -> None:
        if not self._loaded:
            return
        seconds = max(0.0, float(seconds))
        if not math.isnan(self._duration):
            seconds = min(seconds, self._duration)

        self._ended = False
        if self._playing:
            try:
                self._start(seconds)
            except Exception as e:
                logger.warning("Seek failed: %s", e)
        else:
            self._position = seconds
            self._seek_while_paused = self._paused

    def set_volume(self, volume: float) -> None:
        self._volume = max(0.0, min(1.0, volume))
        self._music.set_volume(self._volume)

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def current_time(self) -> float:
        if not self._playing:
            return self._position
        position = self._offset + max(0, self._music.get_pos()) / 1000.0
        if not math.isnan(self._duration):
            position = min(position, self._duration)
        return position

    def _tick(self) -> None:
        """Emit time updates and detect the end of the stream"""
        if not self._playing:
            return
        try:
            busy = self._music.get_busy()
        except Exception as e:
            logger.warning("Pygame mixer not initialized, cannot check playback status: %s", e)
            self._playing = False
            self._post(
                MediaNotification.ERROR,
                error=MediaPlaybackError(f"Mixer unavailable: {e}", source=self._source),
            )
            return

        if busy:
            self._post(MediaNotification.TIME_UPDATE, self.current_time)
            return

        self._position = self._duration if not math.isnan(self._duration) else self.current_time
        self._playing = False
        self._ended = True
        self._post(MediaNotification.ENDED)

    def cleanup(self) -> None:
        """Clean up resources"""
        with PygameMediaElement._lock:
            if self._cleaned_up:
                return
            self._cleaned_up = True

            if PygameMediaElement._mixer_refcount > 0:
                PygameMediaElement._mixer_refcount -= 1

            should_quit = PygameMediaElement._initialized and PygameMediaElement._mixer_refcount == 0

        try:
            self._music.stop()
        except Exception:
            pass

        if should_quit:
            try:
                self._pygame.mixer.quit()
            except Exception as e:
                logger.warning("Pygame cleanup failed: %s", e)
            finally:
                with PygameMediaElement._lock:
                    PygameMediaElement._initialized = False

    def get_engine_name(self) -> str:
        return "pygame"
