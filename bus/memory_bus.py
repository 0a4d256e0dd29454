"""
InMemoryBus — in-process EventBus for local development and unit tests.

Behavior:
    - Preserves publish order per event_type
    - Keeps every event for inspection until clear()
    - Thread-safety: not guaranteed; designed for single-threaded async use
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any

from bus.base import EventBus
from bus.events import Event

logger = logging.getLogger("banks.bus.memory")


class InMemoryBus(EventBus):
    def __init__(self) -> None:
        self._streams: dict[str, list[Event]] = defaultdict(list)

    async def publish(self, event: Event) -> None:
        self._streams[event.event_type].append(event)
        logger.debug("InMemoryBus: %s %s", event.event_type, event.payload)

    # ── Test helpers ──────────────────────────────────────────────────────────

    def get_events(self, event_type: str | None = None) -> list[Event]:
        """Return all published events, optionally filtered by type."""
        if event_type is None:
            result: list[Event] = []
            for events in self._streams.values():
                result.extend(events)
            return result
        return list(self._streams[event_type])

    def last_event(self, event_type: str) -> Event | None:
        """Return the most recently published event of this type, or None."""
        events = self._streams[event_type]
        return events[-1] if events else None

    def event_count(self, event_type: str | None = None) -> int:
        """Return total number of published events, optionally filtered by type."""
        if event_type is None:
            return sum(len(v) for v in self._streams.values())
        return len(self._streams[event_type])

    def get_payloads(self, event_type: str) -> list[dict[str, Any]]:
        """Return the payload dicts for all events of this type."""
        return [e.payload for e in self._streams[event_type]]

    def clear(self) -> None:
        self._streams.clear()
