# -*- coding: utf-8 -*-
"""
Qt Playback Driver

Runs the playback controller's notification pump on the Qt main thread and
re-emits status changes as a Qt signal.

Design Principles:
- The controller stays pure Python and does not depend on Qt.
- Media notifications are only ever delivered from the QTimer callback, so
  every status mutation happens on the main thread.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

if TYPE_CHECKING:
    from models.playback_status import PlaybackStatus
    from services.playback_controller import PlaybackController

logger = logging.getLogger(__name__)


class QtPlaybackDriver(QObject):
    """Qt Playback Driver

    Usage Example:
        driver = QtPlaybackDriver(container.controller, interval_ms=250)
        driver.status_changed.connect(widget.render)
        driver.start()
    """

    status_changed = pyqtSignal(object)

    def __init__(
        self,
        controller: "PlaybackController",
        interval_ms: int = 250,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self._controller = controller
        self._subscription_id: Optional[str] = controller.subscribe(self._on_status)

        self._timer = QTimer(self)
        self._timer.setInterval(max(10, int(interval_ms)))
        self._timer.timeout.connect(self.tick)

    @property
    def interval_ms(self) -> int:
        return self._timer.interval()

    @property
    def is_running(self) -> bool:
        return self._timer.isActive()

    def start(self) -> None:
        logger.debug("Playback driver polling every %d ms", self._timer.interval())
        self._timer.start()

    def stop(self) -> None:
        """Stop polling and detach from the controller"""
        self._timer.stop()
        if self._subscription_id is not None:
            self._controller.unsubscribe(self._subscription_id)
            self._subscription_id = None

    def tick(self) -> None:
        """Deliver pending media notifications"""
        self._controller.poll()

    def _on_status(self, status: "PlaybackStatus") -> None:
        self.status_changed.emit(status)
