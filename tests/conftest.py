"""
Test Configuration File

Unified setup for Python path, avoiding sys.path.insert in each test file.
Provides the QApplication fixture required for PyQt6 tests and a scriptable
media element for controller tests.
"""

import math
import os
import sys
from pathlib import Path

import pytest

# Add the src directory to the Python path
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

# Widgets are created without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from core.media_element import MediaElementBase, MediaNotification


class FakeMediaElement(MediaElementBase):
    """
    Media element that records requests and emits only what the test scripts

    Loading posts LOAD_START (done by the base class) and nothing else; tests
    call the emit_* helpers to simulate the element's progress, then poll().
    """

    def __init__(self):
        super().__init__()
        self.calls = []
        self.fail_on = set()
        self._duration = math.nan
        self._current_time = 0.0
        self.cleaned_up = False

    @staticmethod
    def probe() -> bool:
        return True

    def _record(self, name, *args):
        self.calls.append((name,) + args)
        if name in self.fail_on:
            raise RuntimeError(f"{name} failed")

    def call_names(self):
        return [call[0] for call in self.calls]

    def _begin_load(self, source, generation):
        self._duration = math.nan
        self._current_time = 0.0
        self._record("load", source)

    def _release_source(self):
        self._record("unload")

    def request_play(self):
        self._record("play")

    def request_pause(self):
        self._record("pause")

    def set_position(self, seconds):
        self._current_time = seconds
        self._record("set_position", seconds)

    def set_volume(self, volume):
        self._volume = volume
        self._record("set_volume", volume)

    @property
    def duration(self):
        return self._duration

    @property
    def current_time(self):
        return self._current_time

    def cleanup(self):
        self.cleaned_up = True
        self._record("cleanup")

    def get_engine_name(self):
        return "fake"

    # ===== Scripted notifications =====

    def emit_loaded(self, duration=120.0):
        self._duration = duration
        self._post(MediaNotification.METADATA_READY, duration)
        self._post(MediaNotification.CAN_PLAY)
        self.poll()

    def emit_time(self, seconds):
        self._current_time = seconds
        self._post(MediaNotification.TIME_UPDATE, seconds)
        self.poll()

    def emit_ended(self):
        self._post(MediaNotification.ENDED)
        self.poll()

    def emit_error(self, error=None):
        self._post(MediaNotification.ERROR, error=error)
        self.poll()


@pytest.fixture
def fake_element():
    return FakeMediaElement()


@pytest.fixture(scope="session")
def qapp():
    """
    Create QApplication for all tests.

    Uses session scope to avoid creating multiple QApplication instances.
    """
    from PyQt6.QtWidgets import QApplication

    # Check if a QApplication instance already exists
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app
