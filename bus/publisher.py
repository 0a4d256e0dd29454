"""
RedisStreamBus — writes analytics Events to Redis Streams.

Each event type gets its own stream: banks:<event_type>
"""

from __future__ import annotations

import logging

import orjson
import redis.asyncio as aioredis

from bus.base import EventBus
from bus.events import Event

logger = logging.getLogger("banks.bus.publisher")

STREAM_PREFIX = "banks"
MAX_STREAM_LEN = 100_000  # Approx events per stream before trimming


class RedisStreamBus(EventBus):
    def __init__(self, redis_url: str, client: aioredis.Redis | None = None) -> None:
        self._redis: aioredis.Redis = client or aioredis.from_url(
            redis_url,
            encoding="utf-8",
            decode_responses=False,  # We handle serialisation ourselves
            socket_timeout=2,
            socket_connect_timeout=2,
        )

    async def publish(self, event: Event) -> None:
        stream_key = f"{STREAM_PREFIX}:{event.event_type}"
        payload_bytes = orjson.dumps(event.to_dict())

        entry_id = await self._redis.xadd(
            stream_key,
            {"data": payload_bytes},
            maxlen=MAX_STREAM_LEN,
            approximate=True,
        )
        logger.debug(
            "published event",
            extra={
                "event_type": event.event_type,
                "source": event.source,
                "correlation_id": event.correlation_id,
                "stream": stream_key,
                "entry_id": entry_id.decode() if isinstance(entry_id, bytes) else entry_id,
            },
        )

    async def close(self) -> None:
        await self._redis.aclose()
