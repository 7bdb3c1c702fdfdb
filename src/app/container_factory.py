# -*- coding: utf-8 -*-
"""
Container Factory Module

Responsible for creating and assembling all application dependencies.

This is the **only** instance creation point (Composition Root) for the application.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from app.container import AppContainer
    from core.ports.media import IMediaElement

logger = logging.getLogger(__name__)


class AppContainerFactory:
    """Application Container Factory

    Usage Example:
        # In main.py
        container = AppContainerFactory.create()
        window = MainWindow(container)

        # In tests, with a fake media element
        container = AppContainerFactory.create(config_path=tmp, media_element=fake)
    """

    @staticmethod
    def create(
        config_path: str = "config/default_config.yaml",
        media_element: Optional["IMediaElement"] = None,
    ) -> "AppContainer":
        """Create Application Container

        Args:
            config_path: Configuration file path
            media_element: Media element to use instead of the configured backend

        Returns:
            A configured AppContainer instance
        """
        from app.container import AppContainer
        from core.element_factory import MediaElementFactory
        from core.event_bus import EventBus
        from services.config_service import ConfigService
        from services.playback_controller import PlaybackController
        from services.track_catalog import TrackCatalog

        logger.info("Creating application container...")

        # === 1. Infrastructure Layer ===
        config = ConfigService(config_path)

        # === 2. Media Element ===
        if media_element is None:
            backend = config.get("audio.backend", "miniaudio")
            try:
                media_element = MediaElementFactory.create(backend)
            except RuntimeError as e:
                logger.error("Failed to create media element: %s", e)
                raise

        # === 3. Service Layer ===
        controller = PlaybackController(
            media_element,
            event_bus=EventBus(),
            media_root=config.get("audio.media_root") or None,
            default_volume=float(config.get("playback.default_volume", 0.7)),
            autoplay=bool(config.get("playback.autoplay", False)),
        )
        catalog = TrackCatalog(config.get("library.supported_formats"))

        logger.info("Application container created (backend: %s)", media_element.get_engine_name())
        return AppContainer(config=config, controller=controller, catalog=catalog)
