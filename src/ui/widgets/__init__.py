"""
UI Widgets Module
"""

from .track_preview_widget import SeekBar, TrackPreviewWidget, fraction_from_position

__all__ = ['SeekBar', 'TrackPreviewWidget', 'fraction_from_position']
