"""
Abstract EventBus interface for analytics events.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from bus.events import Event


class EventBus(ABC):
    """
    Write-only sink for analytics events.

    Implementations:
        RedisStreamBus — Redis Streams (production)
        InMemoryBus    — in-process, inspectable (development, tests)
        NullBus        — drops everything (analytics disabled)

    Publishing is best-effort: callers never let a publish failure reach the
    user-facing request (see services/analytics.py).
    """

    @abstractmethod
    async def publish(self, event: Event) -> None:
        """Publish an event. Raises on failure."""

    async def close(self) -> None:
        """Release resources. No-op by default."""


class NullBus(EventBus):
    async def publish(self, event: Event) -> None:
        return None
