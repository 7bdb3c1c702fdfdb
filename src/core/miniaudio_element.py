"""
miniaudio Media Element Implementation

Decodes the whole source on a worker thread with miniaudio and streams the
decoded samples to a playback device through a generator.
"""

import array
import logging
import math
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Generator, Optional

from core.media_element import (
    MediaElementBase,
    MediaError,
    MediaLoadError,
    MediaNotification,
    MediaPlaybackError,
    UnsupportedSourceError,
)

logger = logging.getLogger(__name__)

# Try importing miniaudio (for probe method)
try:
    import miniaudio
    MINIAUDIO_AVAILABLE = True
except ImportError:
    miniaudio = None  # type: ignore
    MINIAUDIO_AVAILABLE = False
    logger.warning("miniaudio library not installed, MiniaudioMediaElement unavailable")


class MiniaudioMediaElement(MediaElementBase):
    """
    Media element based on miniaudio

    Position is tracked in frames by the stream generator, which runs on the
    device's audio thread. End of stream is reported from the polling thread.
    """

    SAMPLE_RATE = 44100
    CHANNELS = 2
    DEFAULT_CHUNK_FRAMES = 1024

    @staticmethod
    def probe() -> bool:
        """Detect if miniaudio dependency is available"""
        return MINIAUDIO_AVAILABLE

    def __init__(self, miniaudio_module: Any = None):
        module = miniaudio_module if miniaudio_module is not None else miniaudio
        if module is None:
            raise ImportError("miniaudio library not installed")

        super().__init__()
        self._ma = module
        self._lock = threading.Lock()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="MediaDecode")
        self._device: Optional[Any] = None

        self._decoded: Optional[Any] = None
        self._total_frames: int = 0
        self._position_frames: int = 0
        self._playing = False
        self._finished = False

    def _begin_load(self, source: str, generation: int) -> None:
        self._stop_device()
        with self._lock:
            self._decoded = None
            self._total_frames = 0
            self._position_frames = 0
            self._finished = False
        self._executor.submit(self._decode_worker, source, generation)

    def _decode_worker(self, source: str, generation: int) -> None:
        """Decode on the worker thread; results are handed over under the lock"""
        try:
            if not os.path.isfile(source):
                raise UnsupportedSourceError(source, "file not found")
            decoded = self._ma.decode_file(
                source,
                output_format=self._ma.SampleFormat.FLOAT32,
                nchannels=self.CHANNELS,
                sample_rate=self.SAMPLE_RATE,
            )
        except MediaError as e:
            self._post(MediaNotification.ERROR, error=e, generation=generation)
            return
        except Exception as e:
            self._post(
                MediaNotification.ERROR,
                error=MediaLoadError(f"Failed to decode file: {e}", source=source),
                generation=generation,
            )
            return

        with self._lock:
            if generation != self._generation:
                logger.debug("Discarding decoded audio for superseded source: %s", source)
                return
            self._decoded = decoded
            self._total_frames = len(decoded.samples) // self.CHANNELS
            duration = self._total_frames / self.SAMPLE_RATE

        logger.debug("Decoded %s (%.2fs)", source, duration)
        self._post(MediaNotification.METADATA_READY, duration, generation=generation)
        self._post(MediaNotification.CAN_PLAY, generation=generation)

    def _release_source(self) -> None:
        self._stop_device()
        with self._lock:
            self._decoded = None
            self._total_frames = 0
            self._position_frames = 0
            self._finished = False

    # ===== Streaming =====

    def _create_stream(self) -> Generator[array.array, int, None]:
        """Create the sample generator fed to the playback device"""
        samples = self._decoded.samples
        channels = self.CHANNELS
        total_samples = len(samples)

        def stream_generator():
            framecount = yield
            while True:
                with self._lock:
                    position = self._position_frames
                start = position * channels
                if start >= total_samples:
                    break
                requested_frames = framecount or self.DEFAULT_CHUNK_FRAMES
                end = min(start + requested_frames * channels, total_samples)

                chunk = array.array('f', samples[start:end])
                gain = self._volume
                if gain != 1.0:
                    for i in range(len(chunk)):
                        chunk[i] *= gain

                with self._lock:
                    # A seek may have moved the position while the chunk was prepared
                    if self._position_frames == position:
                        self._position_frames = position + len(chunk) // channels

                framecount = yield chunk

            self._finished = True

        generator = stream_generator()
        next(generator)
        return generator

    def _ensure_device(self) -> Any:
        if self._device is None:
            self._device = self._ma.PlaybackDevice(
                output_format=self._ma.SampleFormat.FLOAT32,
                nchannels=self.CHANNELS,
                sample_rate=self.SAMPLE_RATE,
            )
        return self._device

    def _start_stream(self) -> None:
        device = self._ensure_device()
        self._finished = False
        device.start(self._create_stream())

    def _stop_device(self) -> None:
        self._playing = False
        if self._device is not None:
            try:
                self._device.stop()
            except Exception as e:
                logger.debug("Stopping miniaudio device failed: %s", e)

    # ===== Playback Control =====

    def request_play(self) -> None:
        if self._source is None:
            return
        if self._decoded is None:
            self._play_pending = True
            return
        if self._playing:
            return

        with self._lock:
            if self._position_frames >= self._total_frames:
                self._position_frames = 0

        try:
            self._start_stream()
        except Exception as e:
            self._post(
                MediaNotification.ERROR,
                error=MediaPlaybackError(f"Playback failed: {e}", source=self._source),
            )
            return

        self._play_pending = False
        self._playing = True
        self._post(MediaNotification.TIME_UPDATE, self.current_time)

    def request_pause(self) -> None:
        self._play_pending = False
        if self._playing:
            self._stop_device()

    def set_position(self, seconds: float) -> None:
        if self._decoded is None:
            return
        frames = int(max(0.0, float(seconds)) * self.SAMPLE_RATE)
        with self._lock:
            self._position_frames = min(frames, self._total_frames)

        if self._playing:
            try:
                self._device.stop()
                self._start_stream()
            except Exception as e:
                logger.warning("Seek failed: %s", e)

    def set_volume(self, volume: float) -> None:
        self._volume = max(0.0, min(1.0, volume))

    @property
    def duration(self) -> float:
        if self._decoded is None:
            return math.nan
        return self._total_frames / self.SAMPLE_RATE

    @property
    def current_time(self) -> float:
        with self._lock:
            return self._position_frames / self.SAMPLE_RATE

    def _tick(self) -> None:
        if self._play_pending and self._decoded is not None:
            self.request_play()
            return
        if not self._playing:
            return
        if self._finished:
            self._stop_device()
            self._post(MediaNotification.ENDED)
            return
        self._post(MediaNotification.TIME_UPDATE, self.current_time)

    def cleanup(self) -> None:
        """Clean up resources"""
        self._release_source()
        if self._device is not None:
            try:
                self._device.close()
            except Exception as e:
                logger.warning("miniaudio cleanup failed: %s", e)
            self._device = None
        self._executor.shutdown(wait=False)

    def get_engine_name(self) -> str:
        return "miniaudio"
