"""
AnalyticsRecorder — fire-and-forget event tracking.

record_event() schedules the publish on the running event loop and returns
immediately. Publish failures are logged and dropped: analytics is
non-critical and must never fail the request that triggered it.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from bus.base import EventBus
from bus.events import create_event

logger = logging.getLogger("banks.services.analytics")


class AnalyticsRecorder:
    def __init__(self, bus: EventBus, source: str = "web") -> None:
        self.bus = bus
        self.source = source
        self._pending: set[asyncio.Task] = set()

    def record_event(
        self,
        name: str,
        attributes: dict[str, Any] | None = None,
        *,
        correlation_id: str | None = None,
        source: str | None = None,
    ) -> None:
        try:
            loop = asyncio.get_running_loop()
            event = create_event(
                event_type=name,
                source=source or self.source,
                payload=dict(attributes or {}),
                correlation_id=correlation_id,
            )
            task = loop.create_task(self._publish(event))
        except Exception as exc:
            logger.warning("analytics event %s dropped before publish: %s", name, exc)
            return
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _publish(self, event) -> None:
        try:
            await self.bus.publish(event)
        except Exception as exc:
            logger.warning(
                "analytics publish failed for %s event_id=%s: %s",
                event.event_type, event.event_id, exc,
            )

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def flush(self) -> None:
        """Wait for every scheduled publish to finish (shutdown, tests)."""
        while self._pending:
            await asyncio.gather(*list(self._pending))
