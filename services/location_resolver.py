"""
LocationResolver — which country is this request for?

    explicit code given  → use it; the geolocation provider is never called
    otherwise            → geolocation lookup of the remote IP

Every lookup failure collapses to "no country" for the caller. The error kind
decides what operators see:

    kind                   analytics   error tracker
    Timeout                yes         yes
    ConnectionFailed       yes         yes
    UnknownResponseFormat  yes         yes
    UnknownResponseError   yes         yes
    ReceivedBadCountry     yes         yes
    UnsupportedIp          yes         no   (private / unknown IPs are routine)
"""

from __future__ import annotations

import logging
from typing import Protocol

from bus.events import COUNTRY_LOOKUP_FAILED, COUNTRY_LOOKUP_SUCCESS
from data.geoip_client import (
    INVALID_COUNTRY_CODE,
    GeoIPBadCountry,
    GeoIPConnectionFailed,
    GeoIPError,
    GeoIPTimeout,
    GeoIPUnknownResponseError,
    GeoIPUnknownResponseFormat,
    GeoIPUnsupportedIp,
)
from models.domain import LocationResolution, LookupErrorKind, normalize_country_code
from services.analytics import AnalyticsRecorder
from services.error_tracking import ErrorTracker

logger = logging.getLogger("banks.services.location")

ERROR_KINDS: dict[type[GeoIPError], LookupErrorKind] = {
    GeoIPTimeout:               LookupErrorKind.TIMEOUT,
    GeoIPConnectionFailed:      LookupErrorKind.CONNECTION_FAILED,
    GeoIPUnknownResponseFormat: LookupErrorKind.UNKNOWN_RESPONSE_FORMAT,
    GeoIPUnsupportedIp:         LookupErrorKind.UNSUPPORTED_IP,
    GeoIPUnknownResponseError:  LookupErrorKind.UNKNOWN_RESPONSE_ERROR,
    GeoIPBadCountry:            LookupErrorKind.RECEIVED_BAD_COUNTRY,
}


class CountryLookup(Protocol):
    async def country_code_for_ip(self, remote_ip: str | None) -> str: ...


def classify(error: GeoIPError) -> LookupErrorKind:
    for error_type in type(error).__mro__:
        kind = ERROR_KINDS.get(error_type)
        if kind is not None:
            return kind
    return LookupErrorKind.UNKNOWN_RESPONSE_ERROR


class LocationResolver:
    def __init__(
        self,
        geoip: CountryLookup,
        analytics: AnalyticsRecorder,
        errors: ErrorTracker,
    ) -> None:
        self._geoip = geoip
        self._analytics = analytics
        self._errors = errors

    async def resolve(
        self,
        explicit_code: str | None,
        remote_ip: str | None,
        *,
        correlation_id: str | None = None,
    ) -> LocationResolution:
        if explicit_code is not None and explicit_code.strip():
            return LocationResolution.resolved(explicit_code)
        return await self._lookup(remote_ip, correlation_id)

    async def _lookup(self, remote_ip: str | None, correlation_id: str | None) -> LocationResolution:
        try:
            raw_code = await self._geoip.country_code_for_ip(remote_ip)
        except GeoIPError as exc:
            return self._failed(exc, None, remote_ip, correlation_id)

        if raw_code.strip().upper() == INVALID_COUNTRY_CODE:
            return self._failed(GeoIPBadCountry(raw_code), raw_code, remote_ip, correlation_id)
        try:
            resolution = LocationResolution.resolved(raw_code)
        except ValueError as exc:
            # Provider sent something that is not a two-letter code
            return self._failed(GeoIPUnknownResponseFormat(str(exc)), raw_code, remote_ip, correlation_id)

        logger.info("country lookup ip=%s country=%s", remote_ip, resolution.country_code)
        self._track(
            COUNTRY_LOOKUP_SUCCESS,
            {"country_code": resolution.country_code},
            correlation_id,
        )
        return resolution

    def _failed(
        self,
        error: GeoIPError,
        raw_code: str | None,
        remote_ip: str | None,
        correlation_id: str | None,
    ) -> LocationResolution:
        kind = classify(error)
        logger.info("country lookup failed ip=%s kind=%s: %s", remote_ip, kind.value, error)
        self._track(
            COUNTRY_LOOKUP_FAILED,
            {
                "country_code":  raw_code,
                "error":         kind.value,
                "error_message": str(error),
            },
            correlation_id,
        )
        if kind.needs_reporting:
            try:
                self._errors.report_error(error, {"remote_ip": remote_ip, "error_kind": kind.value})
            except Exception as exc:
                logger.warning("error tracker failed: %s", exc)
        return LocationResolution.failed(kind)

    def _track(self, name: str, attributes: dict, correlation_id: str | None) -> None:
        try:
            self._analytics.record_event(
                name, attributes, correlation_id=correlation_id, source="location_resolver",
            )
        except Exception as exc:
            logger.warning("analytics failed for %s: %s", name, exc)
