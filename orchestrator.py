#!/usr/bin/env python3
"""
Request orchestrator — "are my country's banks closed today?"

Flow (one call per request):
  1. LocationResolver: explicit country code, else geolocation of the IP.
  2. CountryRegistry: is that country supported?
  3. BankStatusEngine: open / closed for the weekend / closed for a holiday.
  4. One bank_status_check analytics event, whatever branch was taken.

Usage:
    python orchestrator.py --country us          # explicit country
    python orchestrator.py --ip 203.0.113.7      # geolocation lookup
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import uuid
from dataclasses import dataclass
from datetime import datetime

from bus.base import EventBus, NullBus
from bus.events import BANK_STATUS_CHECK
from bus.memory_bus import InMemoryBus
from config.settings import Settings
from data.geoip_client import GeoIPClient, GeoIPConfig
from models.domain import BankCheckResult, CheckError
from services.analytics import AnalyticsRecorder
from services.country_registry import CountryRegistry, NoSuchCountry
from services.error_tracking import ErrorTracker, LoggingErrorTracker, SlackErrorTracker
from services.location_resolver import LocationResolver

logger = logging.getLogger("banks.orchestrator")


class BankCheckOrchestrator:
    def __init__(
        self,
        resolver: LocationResolver,
        registry: CountryRegistry,
        analytics: AnalyticsRecorder,
    ) -> None:
        self.resolver = resolver
        self.registry = registry
        self.analytics = analytics

    async def handle(
        self,
        explicit_code: str | None,
        remote_ip: str | None,
        *,
        now_utc: datetime | None = None,
        correlation_id: str | None = None,
    ) -> BankCheckResult:
        correlation_id = correlation_id or str(uuid.uuid4())
        resolution = await self.resolver.resolve(
            explicit_code, remote_ip, correlation_id=correlation_id,
        )

        if not resolution.success:
            result = BankCheckResult(country_code=None, error=CheckError.NO_COUNTRY)
        else:
            code = resolution.country_code
            try:
                country = self.registry.country_for(code)
            except NoSuchCountry:
                result = BankCheckResult(country_code=code, error=CheckError.UNSUPPORTED_COUNTRY)
            else:
                # Engine errors are data/config defects: let them propagate
                status = self.registry.engine_for(country.code).bank_status(now_utc)
                result = BankCheckResult(country_code=code, country=country, status=status)

        logger.info(
            "bank status check country=%s error=%s closed=%s",
            result.country_code,
            result.error.value if result.error else None,
            result.status.closed if result.status else None,
        )
        try:
            self.analytics.record_event(
                BANK_STATUS_CHECK,
                result.to_event_payload(),
                correlation_id=correlation_id,
                source="orchestrator",
            )
        except Exception as exc:
            logger.warning("analytics failed for %s: %s", BANK_STATUS_CHECK, exc)
        return result


# ── Wiring ────────────────────────────────────────────────────────────────────

@dataclass
class Services:
    """Process-lifetime collaborators built from Settings."""
    orchestrator: BankCheckOrchestrator
    registry: CountryRegistry
    analytics: AnalyticsRecorder
    errors: ErrorTracker
    geoip: GeoIPClient
    bus: EventBus

    async def close(self) -> None:
        await self.analytics.flush()
        await self.bus.close()
        await self.errors.close()
        await self.geoip.aclose()


def build_bus(settings: Settings) -> EventBus:
    backend = settings.analytics_backend.lower()
    if backend == "redis":
        from bus.publisher import RedisStreamBus
        logger.info("analytics backend=redis url=%s", settings.redis_url)
        return RedisStreamBus(settings.redis_url)
    if backend == "null":
        logger.info("analytics backend=null")
        return NullBus()
    if backend != "memory":
        raise ValueError(f"Unknown analytics backend: {settings.analytics_backend!r}")
    logger.info("analytics backend=memory")
    return InMemoryBus()


def build_error_tracker(settings: Settings) -> ErrorTracker:
    if settings.error_tracker.lower() == "slack":
        if not settings.slack_webhook_url:
            raise ValueError("BANKS_SLACK_WEBHOOK_URL is required when BANKS_ERROR_TRACKER=slack")
        return SlackErrorTracker(settings.slack_webhook_url, environment=settings.environment)
    return LoggingErrorTracker()


def build_services(
    settings: Settings,
    *,
    bus: EventBus | None = None,
    errors: ErrorTracker | None = None,
    geoip: GeoIPClient | None = None,
    registry: CountryRegistry | None = None,
) -> Services:
    bus = bus or build_bus(settings)
    errors = errors or build_error_tracker(settings)
    geoip = geoip or GeoIPClient(GeoIPConfig(
        base_url=settings.geoip_base_url,
        account_id=settings.geoip_account_id,
        license_key=settings.geoip_license_key,
        timeout_sec=settings.geoip_timeout_sec,
    ))
    registry = registry or CountryRegistry()
    analytics = AnalyticsRecorder(bus)
    resolver = LocationResolver(geoip, analytics, errors)
    return Services(
        orchestrator=BankCheckOrchestrator(resolver, registry, analytics),
        registry=registry,
        analytics=analytics,
        errors=errors,
        geoip=geoip,
        bus=bus,
    )


# ── CLI ───────────────────────────────────────────────────────────────────────

async def _run(country: str | None, ip: str | None) -> int:
    from config.settings import settings

    services = build_services(settings)
    try:
        result = await services.orchestrator.handle(country, ip)
    finally:
        await services.close()

    if result.error is CheckError.NO_COUNTRY:
        print("We couldn't work out your country. Pass --country to pick one.")
        print("Supported: " + ", ".join(services.registry.supported_countries()))
        return 2
    if result.error is CheckError.UNSUPPORTED_COUNTRY:
        print(f"Sorry, {result.country_code} isn't supported yet.")
        return 2

    print(result.headline)
    print(("Yes. " if result.status.closed else "No. ") + result.status_message)
    print(result.schedule_note)
    print(result.country.bank.schedule_link)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Are banks closed today?")
    parser.add_argument("--country", help="two-letter country code, e.g. US")
    parser.add_argument("--ip", help="IP address to geolocate when --country is not given")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.WARNING, stream=sys.stderr)
    return asyncio.run(_run(args.country, args.ip))


if __name__ == "__main__":
    sys.exit(main())
