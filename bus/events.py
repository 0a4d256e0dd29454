"""
Typed analytics event definitions.

Every tracked action is an Event. The event type doubles as the Redis Stream
key suffix: banks:<event_type>
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any


# ── Event model ───────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Event:
    event_id: str               # UUID, unique per event
    event_type: str             # e.g. "bank_status_check"
    source: str                 # emitting component, e.g. "orchestrator"
    timestamp_utc: datetime     # timezone-aware UTC datetime
    payload: dict[str, Any]     # event attributes (JSON-serializable)
    correlation_id: str         # UUID shared by all events of one request
    version: str = "1.0"

    def to_dict(self) -> dict[str, Any]:
        return {
            "event_id":       self.event_id,
            "event_type":     self.event_type,
            "source":         self.source,
            "timestamp_utc":  self.timestamp_utc.isoformat(),
            "payload":        self.payload,
            "correlation_id": self.correlation_id,
            "version":        self.version,
        }


def create_event(
    event_type: str,
    source: str,
    payload: dict[str, Any],
    correlation_id: str | None = None,
    version: str = "1.0",
) -> Event:
    """
    Factory: create a well-formed Event with auto-generated IDs and UTC timestamp.

    If `correlation_id` is None, a new UUID is generated.
    """
    return Event(
        event_id=str(uuid.uuid4()),
        event_type=event_type,
        source=source,
        timestamp_utc=datetime.now(timezone.utc),
        payload=payload,
        correlation_id=correlation_id or str(uuid.uuid4()),
        version=version,
    )


# ── Event type constants ───────────────────────────────────────────────────────

PAGE_VISIT             = "page_visit"
COUNTRY_LOOKUP_SUCCESS = "country_lookup_success"
COUNTRY_LOOKUP_FAILED  = "country_lookup_failed"
BANK_STATUS_CHECK      = "bank_status_check"

ALL_EVENT_TYPES: list[str] = [
    PAGE_VISIT,
    COUNTRY_LOOKUP_SUCCESS,
    COUNTRY_LOOKUP_FAILED,
    BANK_STATUS_CHECK,
]
