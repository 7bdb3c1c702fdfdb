"""
Main Window

Track list on top, preview widget for the selected track below.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional

from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QListWidget, QListWidgetItem,
    QLabel, QFileDialog
)
from PyQt6.QtGui import QAction
from PyQt6.QtCore import Qt

from ui.widgets.track_preview_widget import TrackPreviewWidget

if TYPE_CHECKING:
    from app.container import AppContainer
    from models.track import Track

logger = logging.getLogger(__name__)

TRACK_ROLE = Qt.ItemDataRole.UserRole


class MainWindow(QMainWindow):
    """
    Main Window

    Design principles:
    - MainWindow holds the AppContainer, sub-components only receive the controller.
    - Selecting a track binds it; activating the bound track toggles playback,
      or reloads it after a failure.
    """

    def __init__(self, container: "AppContainer"):
        """Initialize main window

        Args:
            container: Application dependency container
        """
        super().__init__()

        self._container = container
        self.config = container.config
        self.controller = container.controller
        self.catalog = container.catalog
        self._tracks: List["Track"] = []

        self.setWindowTitle(self.config.get("app.name", "Track Preview Player"))
        self.setMinimumSize(480, 320)

        self._setup_ui()
        self._setup_menu()
        self._restore_state()

    def _setup_ui(self):
        """Set up UI"""
        central = QWidget()
        layout = QVBoxLayout(central)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        self.track_list = QListWidget()
        self.track_list.currentItemChanged.connect(self._on_current_item_changed)
        self.track_list.itemActivated.connect(self._on_item_activated)
        layout.addWidget(self.track_list, 1)

        self.empty_label = QLabel("No tracks. Use File > Open Folder to add some.")
        self.empty_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.empty_label)

        self.preview = TrackPreviewWidget(self.controller)
        layout.addWidget(self.preview)

        self.setCentralWidget(central)

    def _setup_menu(self):
        file_menu = self.menuBar().addMenu("File")

        open_action = QAction("Open Folder...", self)
        open_action.setShortcut("Ctrl+O")
        open_action.triggered.connect(self._on_open_folder)
        file_menu.addAction(open_action)

        file_menu.addSeparator()

        exit_action = QAction("Exit", self)
        exit_action.setShortcut("Ctrl+Q")
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

    def _restore_state(self):
        """Restore window state"""
        width = self.config.get("ui.window_width", 720)
        height = self.config.get("ui.window_height", 480)
        self.resize(width, height)

    # ===== Track List =====

    def load_directory(self, directory: str) -> int:
        """Scan a directory and show its tracks

        Returns:
            int: Number of tracks found
        """
        recursive = bool(self.config.get("library.recursive", True))
        self.set_tracks(self.catalog.scan(directory, recursive=recursive))
        return len(self._tracks)

    def set_tracks(self, tracks: List["Track"]) -> None:
        self._tracks = list(tracks)
        self.track_list.blockSignals(True)
        self.track_list.clear()
        for track in self._tracks:
            item = QListWidgetItem(track.display_name)
            item.setData(TRACK_ROLE, track)
            item.setToolTip(track.url)
            self.track_list.addItem(item)

        current = self.controller.current_track
        if current in self._tracks:
            # Keep the bound track selected after a rescan
            self.track_list.setCurrentRow(self._tracks.index(current))
        self.track_list.blockSignals(False)
        self.empty_label.setVisible(not self._tracks)

        if current is not None and current not in self._tracks:
            self.controller.bind(None)

    @property
    def tracks(self) -> List["Track"]:
        return list(self._tracks)

    def _track_for(self, item: Optional[QListWidgetItem]) -> Optional["Track"]:
        if item is None:
            return None
        return item.data(TRACK_ROLE)

    def _on_current_item_changed(self, current, previous):
        track = self._track_for(current)
        if track is None or track == self.controller.current_track:
            return
        logger.debug("Binding track: %s", track.display_name)
        self.controller.bind(track)

    def _on_item_activated(self, item):
        track = self._track_for(item)
        if track is None:
            return
        if track != self.controller.current_track:
            self.controller.bind(track)
        elif self.controller.status.is_errored:
            self.controller.retry()
            self.controller.play()
            return
        self.controller.toggle_play()

    def _on_open_folder(self):
        directory = QFileDialog.getExistingDirectory(
            self, "Select Music Folder", self.config.get("library.directory", "") or ""
        )
        if directory:
            self.open_folder(directory)

    def open_folder(self, directory: str) -> int:
        """Remember the folder in the user config, then list its tracks"""
        self.config.set("library.directory", directory)
        self.config.save()
        return self.load_directory(directory)

    def closeEvent(self, event):
        """Detach widgets from the controller before the window goes away"""
        self.preview.cleanup()
        super().closeEvent(event)
