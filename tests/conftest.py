"""
Shared fixtures: in-memory analytics, recording error tracker, scripted geolocation.
"""

from __future__ import annotations

from typing import Any

import pytest

from bus.memory_bus import InMemoryBus
from services.analytics import AnalyticsRecorder
from services.error_tracking import ErrorTracker


class RecordingErrorTracker(ErrorTracker):
    def __init__(self) -> None:
        self.reported: list[tuple[BaseException, dict[str, Any]]] = []

    def report_error(self, error: BaseException, context: dict[str, Any] | None = None) -> None:
        self.reported.append((error, context or {}))


class ScriptedGeoIP:
    """Returns `country` or raises `error`; counts calls."""

    def __init__(self, country: str | None = None, error: Exception | None = None) -> None:
        self.country = country
        self.error = error
        self.calls: list[str | None] = []

    async def country_code_for_ip(self, remote_ip: str | None) -> str:
        self.calls.append(remote_ip)
        if self.error is not None:
            raise self.error
        assert self.country is not None
        return self.country


@pytest.fixture()
def bus() -> InMemoryBus:
    return InMemoryBus()


@pytest.fixture()
def analytics(bus: InMemoryBus) -> AnalyticsRecorder:
    return AnalyticsRecorder(bus)


@pytest.fixture()
def errors() -> RecordingErrorTracker:
    return RecordingErrorTracker()


@pytest.fixture()
def scripted_geoip():
    """Factory fixture: scripted_geoip(country="US") or scripted_geoip(error=exc)."""
    return ScriptedGeoIP
