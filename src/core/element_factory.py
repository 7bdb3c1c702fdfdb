"""
Media Element Factory

Provides for the creation of media elements, supporting switching between multiple backends.
"""

import logging
from typing import Dict, List, Optional, Type

from core.media_element import MediaElementBase, PygameMediaElement

logger = logging.getLogger(__name__)

# Backend registry
_ELEMENT_REGISTRY: Dict[str, Type[MediaElementBase]] = {}


def register_element(name: str, element_class: Type[MediaElementBase]) -> None:
    """
    Register a media element backend.

    Args:
        name: Backend name identifier
        element_class: Media element class
    """
    _ELEMENT_REGISTRY[name] = element_class


# Register built-in backends
register_element("pygame", PygameMediaElement)

try:
    from core.miniaudio_element import MiniaudioMediaElement
    register_element("miniaudio", MiniaudioMediaElement)
except Exception:
    logger.debug("miniaudio backend unavailable")


class MediaElementFactory:
    """
    Media Element Factory

    Creates media element instances based on configuration, supporting fallback strategies.

    Usage Example:
        # Create a specific backend
        element = MediaElementFactory.create("miniaudio")

        # Automatically select the best available backend
        element = MediaElementFactory.create_best_available()
    """

    # Backend priority (fallback order)
    PRIORITY_ORDER = ["miniaudio", "pygame"]

    @classmethod
    def create(cls, backend: str = "miniaudio") -> MediaElementBase:
        """
        Create a specified media element.

        If the specified backend is unavailable, it will automatically fall back to an available one.

        Args:
            backend: Backend name ("miniaudio", "pygame")

        Returns:
            MediaElementBase: Media element instance

        Raises:
            RuntimeError: If no backends are available
        """
        if backend in _ELEMENT_REGISTRY:
            try:
                element = _ELEMENT_REGISTRY[backend]()
                logger.info("Using media backend: %s", backend)
                return element
            except Exception as e:
                logger.warning("Failed to create %s backend: %s, attempting fallback", backend, e)
        else:
            logger.warning("Unknown media backend: %s, attempting fallback", backend)

        return cls.create_best_available(exclude=[backend])

    @classmethod
    def create_best_available(
        cls, exclude: Optional[List[str]] = None
    ) -> MediaElementBase:
        """
        Create the best available media element, trying each backend in priority order.

        Raises:
            RuntimeError: If no backends are available
        """
        exclude = exclude or []

        for backend in cls.PRIORITY_ORDER:
            if backend in exclude or backend not in _ELEMENT_REGISTRY:
                continue
            try:
                element = _ELEMENT_REGISTRY[backend]()
                logger.info("Using media backend: %s", backend)
                return element
            except Exception as e:
                logger.debug("Backend %s unavailable: %s", backend, e)

        raise RuntimeError("No media backends available. Please install miniaudio or pygame.")

    @classmethod
    def get_available_backends(cls) -> List[str]:
        """
        Get a list of available backends, sorted by priority.

        Uses each backend's static probe(), so no device is opened.
        """
        return [backend for backend in cls.PRIORITY_ORDER if cls.is_available(backend)]

    @classmethod
    def is_available(cls, backend: str) -> bool:
        """
        Check if a backend is available.

        Args:
            backend: Backend name

        Returns:
            bool: True if available
        """
        if backend not in _ELEMENT_REGISTRY:
            return False
        try:
            return bool(_ELEMENT_REGISTRY[backend].probe())
        except Exception:
            return False
