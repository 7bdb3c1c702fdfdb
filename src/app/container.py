# -*- coding: utf-8 -*-
"""
Application Container Module

Defines the dependency container for the application, holding all service instances centrally.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from services.config_service import ConfigService
    from services.playback_controller import PlaybackController
    from services.track_catalog import TrackCatalog


@dataclass
class AppContainer:
    """Application Dependency Container

    Holds all service instances centrally, serving as the composition root for dependency injection.

    Usage Example:
        # In main.py
        container = AppContainerFactory.create()
        window = MainWindow(container)
    """

    config: "ConfigService"
    controller: "PlaybackController"
    catalog: "TrackCatalog"

    def cleanup(self) -> None:
        """Clean up all resources

        Should be called when the application exits.
        """
        if self.controller is not None:
            self.controller.close()
