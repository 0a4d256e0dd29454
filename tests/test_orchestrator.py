"""
End-to-end tests for BankCheckOrchestrator (resolver + registry + engine + analytics).

Scenarios use the real US Federal Reserve schedule and holiday data; only the
geolocation provider is scripted.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from bus.events import BANK_STATUS_CHECK, COUNTRY_LOOKUP_FAILED, COUNTRY_LOOKUP_SUCCESS
from data.geoip_client import GeoIPTimeout, GeoIPUnsupportedIp
from models.domain import BankStatus, CheckError
from orchestrator import BankCheckOrchestrator
from services.country_registry import UNITED_STATES, CountryRegistry
from services.location_resolver import LocationResolver

IP = "203.0.113.7"


@pytest.fixture(scope="module")
def registry() -> CountryRegistry:
    return CountryRegistry()


@pytest.fixture()
def build(registry, analytics, errors):
    def _build(geoip) -> BankCheckOrchestrator:
        return BankCheckOrchestrator(LocationResolver(geoip, analytics, errors), registry, analytics)
    return _build


def noon_et(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, 17, 0, tzinfo=timezone.utc)


class TestScenarios:
    @pytest.mark.asyncio
    async def test_explicit_code_open_monday(self, build, scripted_geoip, analytics, bus, errors) -> None:
        geoip = scripted_geoip(country="NL")
        result = await build(geoip).handle("us", IP, now_utc=noon_et(2015, 1, 5))
        await analytics.flush()

        assert result.country is UNITED_STATES
        assert result.status == BankStatus(closed=False, reason=None)
        assert result.error is None
        assert geoip.calls == []
        assert bus.event_count(COUNTRY_LOOKUP_SUCCESS) == 0
        assert bus.event_count(COUNTRY_LOOKUP_FAILED) == 0
        assert bus.get_payloads(BANK_STATUS_CHECK) == [{"country_code": "US", "error": None}]
        assert errors.reported == []

    @pytest.mark.asyncio
    async def test_geo_thanksgiving(self, build, scripted_geoip, analytics, bus) -> None:
        result = await build(scripted_geoip(country="US")).handle(None, IP, now_utc=noon_et(2015, 11, 26))
        await analytics.flush()

        assert result.status == BankStatus(closed=True, reason="Thanksgiving")
        assert bus.get_payloads(COUNTRY_LOOKUP_SUCCESS) == [{"country_code": "US"}]
        assert bus.get_payloads(BANK_STATUS_CHECK) == [{"country_code": "US", "error": None}]

    @pytest.mark.asyncio
    async def test_geo_independence_day_observed_friday(self, build, scripted_geoip) -> None:
        result = await build(scripted_geoip(country="US")).handle(None, IP, now_utc=noon_et(2015, 7, 3))
        assert result.status == BankStatus(closed=True, reason="Independence Day")

    @pytest.mark.asyncio
    async def test_geo_independence_day_observed_monday(self, build, scripted_geoip) -> None:
        result = await build(scripted_geoip(country="US")).handle(None, IP, now_utc=noon_et(2021, 7, 5))
        assert result.status == BankStatus(closed=True, reason="Independence Day")

    @pytest.mark.asyncio
    async def test_geo_unsupported_country(self, build, scripted_geoip, analytics, bus, errors) -> None:
        result = await build(scripted_geoip(country="NL")).handle(None, IP, now_utc=noon_et(2015, 1, 5))
        await analytics.flush()

        assert result.country is None
        assert result.status is None
        assert result.error is CheckError.UNSUPPORTED_COUNTRY
        assert result.country_code == "NL"
        assert bus.get_payloads(COUNTRY_LOOKUP_SUCCESS) == [{"country_code": "NL"}]
        assert bus.get_payloads(BANK_STATUS_CHECK) == [
            {"country_code": "NL", "error": "unsupported_country"},
        ]
        assert errors.reported == []

    @pytest.mark.asyncio
    async def test_geo_timeout(self, build, scripted_geoip, analytics, bus, errors) -> None:
        result = await build(scripted_geoip(error=GeoIPTimeout("slow"))).handle(None, IP)
        await analytics.flush()

        assert result.error is CheckError.NO_COUNTRY
        assert result.country is None
        assert result.status is None
        failed = bus.get_payloads(COUNTRY_LOOKUP_FAILED)
        assert len(failed) == 1
        assert failed[0]["error"] == "Timeout"
        assert bus.get_payloads(BANK_STATUS_CHECK) == [{"country_code": None, "error": "no_country"}]
        assert len(errors.reported) == 1


class TestEventsAndRendering:
    @pytest.mark.asyncio
    async def test_unsupported_ip_is_no_country_without_paging(
        self, build, scripted_geoip, analytics, bus, errors,
    ) -> None:
        result = await build(scripted_geoip(error=GeoIPUnsupportedIp("IP_ADDRESS_RESERVED"))).handle(None, "10.0.0.1")
        await analytics.flush()
        assert result.error is CheckError.NO_COUNTRY
        assert errors.reported == []
        assert bus.event_count(BANK_STATUS_CHECK) == 1

    @pytest.mark.asyncio
    async def test_explicit_unsupported_code(self, build, scripted_geoip, analytics, bus) -> None:
        result = await build(scripted_geoip(country="US")).handle("xx", IP)
        await analytics.flush()
        assert result.error is CheckError.UNSUPPORTED_COUNTRY
        assert bus.get_payloads(BANK_STATUS_CHECK) == [{"country_code": "XX", "error": "unsupported_country"}]

    @pytest.mark.asyncio
    async def test_events_share_correlation_id(self, build, scripted_geoip, analytics, bus) -> None:
        await build(scripted_geoip(country="US")).handle(None, IP, now_utc=noon_et(2015, 1, 5), correlation_id="abc")
        await analytics.flush()
        assert {e.correlation_id for e in bus.get_events()} == {"abc"}

    @pytest.mark.asyncio
    async def test_open_messages(self, build, scripted_geoip) -> None:
        result = await build(scripted_geoip(country="US")).handle("US", IP, now_utc=noon_et(2015, 1, 5))
        assert result.headline == "Are US banks closed today?"
        assert result.status_message == "Most US banks are open."
        assert result.schedule_note == (
            "The Federal Reserve Bank schedule is used to determine US bank statuses. "
            "Some banks may not adhere to this schedule."
        )

    @pytest.mark.asyncio
    async def test_closed_messages(self, build, scripted_geoip) -> None:
        result = await build(scripted_geoip(country="US")).handle("US", IP, now_utc=noon_et(2015, 1, 10))
        assert result.status_message == "Most US banks are closed because of the weekend."

    @pytest.mark.asyncio
    async def test_no_country_has_no_messages(self, build, scripted_geoip) -> None:
        result = await build(scripted_geoip(error=GeoIPTimeout("slow"))).handle(None, IP)
        assert result.headline is None
        assert result.status_message is None

    @pytest.mark.asyncio
    async def test_analytics_failure_does_not_fail_request(self, registry, scripted_geoip, errors) -> None:
        class Broken:
            def record_event(self, *args, **kwargs) -> None:
                raise RuntimeError("analytics down")

        resolver = LocationResolver(scripted_geoip(country="US"), Broken(), errors)
        orchestrator = BankCheckOrchestrator(resolver, registry, Broken())
        result = await orchestrator.handle(None, IP, now_utc=noon_et(2015, 1, 5))
        assert result.status == BankStatus.open()

    @pytest.mark.asyncio
    async def test_engine_defects_propagate(self, registry, scripted_geoip, analytics, errors) -> None:
        class BrokenCalendarRegistry(CountryRegistry):
            def engine_for(self, code):
                raise RuntimeError("calendar data missing")

        orchestrator = BankCheckOrchestrator(
            LocationResolver(scripted_geoip(country="US"), analytics, errors),
            BrokenCalendarRegistry(),
            analytics,
        )
        with pytest.raises(RuntimeError, match="calendar data missing"):
            await orchestrator.handle("US", IP)
