"""
Track Preview Component

Play/pause button, track title, clickable progress bar, elapsed/total time and
volume for the track currently bound to the playback controller.
"""

from PyQt6.QtWidgets import (
    QWidget, QHBoxLayout, QVBoxLayout, QLabel,
    QPushButton, QSlider, QProgressBar, QStyle
)
from PyQt6.QtCore import Qt, pyqtSignal

from models.playback_status import PlaybackPhase, PlaybackStatus
from services.playback_controller import PlaybackController

PROGRESS_STEPS = 1000


def fraction_from_position(x: float, width: float) -> float:
    """Pointer x relative to the bar, as a fraction clamped to [0, 1]"""
    if width <= 0:
        return 0.0
    return max(0.0, min(1.0, x / width))


class SeekBar(QProgressBar):
    """Progress bar that reports clicks as a [0, 1] fraction"""

    seek_requested = pyqtSignal(float)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setRange(0, PROGRESS_STEPS)
        self.setValue(0)
        self.setTextVisible(False)
        self.setFixedHeight(8)
        self.setCursor(Qt.CursorShape.PointingHandCursor)

    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            self.seek_requested.emit(fraction_from_position(event.position().x(), self.width()))
            event.accept()
            return
        super().mousePressEvent(event)


class TrackPreviewWidget(QWidget):
    """
    Track Preview Component

    Renders PlaybackStatus snapshots and forwards user input to the controller.
    """

    def __init__(self, controller: PlaybackController, parent=None):
        super().__init__(parent)
        self.controller = controller
        self._subscription_id = None

        self.setObjectName("trackPreview")
        self._setup_ui()
        self._subscription_id = controller.subscribe(self.render)
        self.render(controller.status)

    def _setup_ui(self):
        """Set up UI"""
        layout = QHBoxLayout(self)
        layout.setContentsMargins(12, 8, 12, 8)
        layout.setSpacing(12)

        self.play_btn = QPushButton()
        self.play_btn.setObjectName("PlayPauseButton")
        self.play_btn.setFixedSize(40, 40)
        self.play_btn.clicked.connect(self._on_play_clicked)
        layout.addWidget(self.play_btn)

        info_layout = QVBoxLayout()
        info_layout.setSpacing(4)

        header_layout = QHBoxLayout()
        self.title_label = QLabel()
        self.title_label.setObjectName("trackTitle")
        header_layout.addWidget(self.title_label, 1)

        self.time_label = QLabel()
        self.time_label.setAlignment(Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter)
        header_layout.addWidget(self.time_label)
        info_layout.addLayout(header_layout)

        self.progress_bar = SeekBar()
        self.progress_bar.seek_requested.connect(self.controller.seek_by_fraction)
        info_layout.addWidget(self.progress_bar)

        self.error_label = QLabel()
        self.error_label.setObjectName("errorLabel")
        self.error_label.setVisible(False)
        info_layout.addWidget(self.error_label)

        layout.addLayout(info_layout, 1)

        self.volume_slider = QSlider(Qt.Orientation.Horizontal)
        self.volume_slider.setFixedWidth(80)
        self.volume_slider.setRange(0, 100)
        self.volume_slider.setValue(round(self.controller.status.volume * 100))
        self.volume_slider.valueChanged.connect(self._on_volume_changed)
        layout.addWidget(self.volume_slider)

    def render(self, status: PlaybackStatus) -> None:
        """Update every child widget from a status snapshot"""
        track = status.track
        self.title_label.setText(track.display_name if track else "No track selected")
        self.time_label.setText(status.time_label)
        self.progress_bar.setValue(round(status.progress_fraction * PROGRESS_STEPS))

        self.play_btn.setEnabled(track is not None)
        if status.phase == PlaybackPhase.ERRORED:
            self.play_btn.setIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_DialogRetryButton))
            self.play_btn.setToolTip("Retry")
        elif status.is_loading and not status.play_intent:
            self.play_btn.setIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_BrowserReload))
            self.play_btn.setToolTip("Loading")
        elif status.is_playing:
            self.play_btn.setIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_MediaPause))
            self.play_btn.setToolTip("Pause")
        else:
            self.play_btn.setIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_MediaPlay))
            self.play_btn.setToolTip("Play")

        self.error_label.setText(status.error_message or "")
        self.error_label.setVisible(status.is_errored)

        volume_value = round(status.volume * 100)
        if self.volume_slider.value() != volume_value:
            self.volume_slider.blockSignals(True)
            self.volume_slider.setValue(volume_value)
            self.volume_slider.blockSignals(False)

    def _on_play_clicked(self):
        """Handle play/pause button click; reloads an errored track."""
        if self.controller.status.is_errored:
            self.controller.retry()
            self.controller.play()
            return
        self.controller.toggle_play()

    def _on_volume_changed(self, value: int):
        self.controller.set_volume(value / 100)

    def cleanup(self):
        """Detach from the controller (should be called before component destruction)."""
        if self._subscription_id is not None:
            self.controller.unsubscribe(self._subscription_id)
            self._subscription_id = None
