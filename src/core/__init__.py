"""
Track Preview Player Core Module
"""

from .event_bus import EventBus, EventType
from .media_element import (
    MediaElementBase,
    MediaError,
    MediaEvent,
    MediaLoadError,
    MediaNotification,
    MediaPlaybackError,
    PygameMediaElement,
    UnsupportedSourceError,
)
from .element_factory import MediaElementFactory
from .playback_reducer import reduce

__all__ = [
    'EventBus',
    'EventType',
    'MediaElementBase',
    'MediaError',
    'MediaEvent',
    'MediaLoadError',
    'MediaNotification',
    'MediaPlaybackError',
    'PygameMediaElement',
    'UnsupportedSourceError',
    'MediaElementFactory',
    'reduce',
]
