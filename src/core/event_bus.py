# -*- coding: utf-8 -*-
"""
Event Bus Module - Publish-Subscribe Pattern Implementation

Provides loose-coupled communication between the playback controller and
whatever renders its status.

Design Notes:
- This is a pure Python implementation, does not depend on any UI framework
- Callbacks run synchronously, in subscription order, on the publishing thread
- Each controller owns its own bus; there is no process-wide instance
"""

from typing import Dict, Callable, Any
from enum import Enum
import threading
import uuid
import logging

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Event type enumeration"""

    # Playback events
    STATUS_CHANGED = "status_changed"
    TRACK_BOUND = "track_bound"
    PLAYBACK_ERROR = "playback_error"


class EventBus:
    """
    Event Bus

    Usage example:
        event_bus = EventBus()

        # Subscribe to event
        def on_status(status):
            logger.info("Phase: %s", status.phase)

        sub_id = event_bus.subscribe(EventType.STATUS_CHANGED, on_status)

        # Publish event
        event_bus.publish_sync(EventType.STATUS_CHANGED, status)

        # Unsubscribe
        event_bus.unsubscribe(sub_id)
    """

    def __init__(self):
        self._subscribers: Dict[EventType, Dict[str, Callable]] = {}
        self._sub_lock = threading.Lock()

    def subscribe(
        self,
        event_type: EventType,
        callback: Callable[[Any], None]
    ) -> str:
        """
        Subscribe to event

        Args:
            event_type: Event type
            callback: Callback function, receiving event data as an argument

        Returns:
            str: Subscription ID, used for unsubscription
        """
        subscription_id = str(uuid.uuid4())

        with self._sub_lock:
            if event_type not in self._subscribers:
                self._subscribers[event_type] = {}
            self._subscribers[event_type][subscription_id] = callback

        return subscription_id

    def unsubscribe(self, subscription_id: str) -> bool:
        """
        Unsubscribe

        Args:
            subscription_id: The ID returned when subscribing

        Returns:
            bool: Whether the unsubscription was successful
        """
        with self._sub_lock:
            for event_type in self._subscribers:
                if subscription_id in self._subscribers[event_type]:
                    del self._subscribers[event_type][subscription_id]
                    return True
        return False

    def publish_sync(self, event_type: EventType, data: Any = None) -> None:
        """
        Publish event synchronously

        All callbacks are executed in the current thread before returning.

        Args:
            event_type: Event type
            data: Event data
        """
        with self._sub_lock:
            callbacks = list(self._subscribers.get(event_type, {}).values())

        for callback in callbacks:
            self._safe_call(callback, data)

    def subscriber_count(self, event_type: EventType) -> int:
        with self._sub_lock:
            return len(self._subscribers.get(event_type, {}))

    def _safe_call(self, callback: Callable, data: Any) -> None:
        """Safely call a callback function"""
        try:
            callback(data)
        except Exception as e:
            # Avoid loop: Do not publish error events from here
            logger.error("Event callback execution error: %s", e)

    def clear(self) -> None:
        """Clear all subscriptions"""
        with self._sub_lock:
            self._subscribers.clear()
