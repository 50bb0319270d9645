"""Connectivity monitor.

Tracks the host's online/offline signal. Changes are pushed in through
set_online(); listeners fire on edges only. Nothing here polls.
"""
import logging
from typing import Callable

from synclab.core.constants import (
    CONNECTIVITY_OFFLINE,
    CONNECTIVITY_ONLINE,
    DEFAULT_TENANT_ID,
    EVENT_BECAME_OFFLINE,
    EVENT_BECAME_ONLINE,
)
from synclab.core.receipt import StopRule, emit_receipt

logger = logging.getLogger("synclab.offline.connectivity")

EVENTS = (EVENT_BECAME_ONLINE, EVENT_BECAME_OFFLINE)


class ConnectivityMonitor:
    """Online flag plus became-online / became-offline notifications."""

    def __init__(
        self,
        online: bool = True,
        tenant_id: str = DEFAULT_TENANT_ID,
        echo: bool = True,
    ):
        self._online = online
        self.tenant_id = tenant_id
        self.echo = echo
        self._listeners: dict[str, list[Callable[[], None]]] = {e: [] for e in EVENTS}

    @property
    def online(self) -> bool:
        return self._online

    @property
    def label(self) -> str:
        """Offline indicator label."""
        return CONNECTIVITY_ONLINE if self._online else CONNECTIVITY_OFFLINE

    def subscribe(self, event: str, callback: Callable[[], None]):
        """Register callback for an edge event."""
        if event not in self._listeners:
            raise StopRule(f"Unknown connectivity event: {event}")
        self._listeners[event].append(callback)

    def unsubscribe(self, event: str, callback: Callable[[], None]):
        if callback in self._listeners.get(event, []):
            self._listeners[event].remove(callback)

    def set_online(self, online: bool) -> bool:
        """Push a host signal change.

        Args:
            online: New connectivity value

        Returns:
            True if this was an edge (value changed)
        """
        if online == self._online:
            return False

        self._online = online
        event = EVENT_BECAME_ONLINE if online else EVENT_BECAME_OFFLINE
        logger.debug("Connectivity %s", event)

        emit_receipt("connectivity_change", {
            "tenant_id": self.tenant_id,
            "event": event,
            "status": self.label,
        }, echo=self.echo)

        for callback in list(self._listeners[event]):
            callback()
        return True
