"""
Data Models Module
"""

from .track import Track
from .playback_status import PlaybackPhase, PlaybackStatus, format_time

__all__ = ['Track', 'PlaybackPhase', 'PlaybackStatus', 'format_time']
