"""
Service Layer Module
"""

from .config_service import ConfigService
from .playback_controller import PlaybackController
from .track_catalog import TrackCatalog

__all__ = [
    'ConfigService',
    'PlaybackController',
    'TrackCatalog',
]
