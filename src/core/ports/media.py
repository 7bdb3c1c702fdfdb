# -*- coding: utf-8 -*-
"""
Media Element Port Interface

Defines the interface of the decoding/playback primitive, so the playback
controller does not depend on a specific audio backend.
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol, runtime_checkable

from core.media_element import MediaEvent, MediaNotification


@runtime_checkable
class IMediaElement(Protocol):
    """Media Element Interface

    Current implementations: PygameMediaElement, MiniaudioMediaElement
    """

    @property
    def source(self) -> Optional[str]:
        """Currently loaded source"""
        ...

    @property
    def duration(self) -> float:
        """Duration in seconds, NaN while unknown"""
        ...

    @property
    def current_time(self) -> float:
        """Current position in seconds"""
        ...

    def load(self, source: str) -> None:
        """Start resolving a source; emits load-start first"""
        ...

    def unload(self) -> None:
        """Drop the current source"""
        ...

    def request_play(self) -> None:
        """Request playback"""
        ...

    def request_pause(self) -> None:
        """Request pause"""
        ...

    def set_position(self, seconds: float) -> None:
        """Move the playback position"""
        ...

    def set_volume(self, volume: float) -> None:
        """Set volume (0.0 - 1.0)"""
        ...

    def subscribe(
        self, kind: MediaNotification, callback: Callable[[MediaEvent], None]
    ) -> str:
        """Subscribe to one notification kind

        Returns:
            Subscription ID
        """
        ...

    def unsubscribe(self, subscription_id: str) -> bool:
        """Remove a subscription"""
        ...

    def poll(self) -> int:
        """Deliver queued notifications on the calling thread"""
        ...

    def get_engine_name(self) -> str:
        """Get the backend name"""
        ...

    def cleanup(self) -> None:
        """Clean up resources"""
        ...
