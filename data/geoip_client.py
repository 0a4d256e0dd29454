"""
HTTP client for the IP-geolocation provider (GeoIP2 Country web service).

    GET {base_url}/geoip/v2.1/country/{ip}
    Authorization: HTTP basic (account id, license key)

Success body (only the fields we read):
    {"country": {"iso_code": "US"}, "registered_country": {...}, "represented_country": {...}}
Error body:
    {"code": "IP_ADDRESS_RESERVED", "error": "The IP address '10.0.0.1' is a reserved IP address"}

The client only fetches and parses. Every failure is raised as a GeoIPError
subclass; deciding what a failure means for the request is the caller's job
(services/location_resolver.py).
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from urllib.parse import quote

import httpx

logger = logging.getLogger("banks.data.geoip")

COUNTRY_PATH = "/geoip/v2.1/country/{ip}"

# Country code the provider returns when it cannot place an IP
INVALID_COUNTRY_CODE = "XX"

# Provider error codes meaning "no location for this IP" rather than a fault
UNSUPPORTED_IP_CODES = frozenset({
    "IP_ADDRESS_INVALID",
    "IP_ADDRESS_RESERVED",
    "IP_ADDRESS_NOT_FOUND",
})

# Checked in order; the first one carrying an iso_code wins
_COUNTRY_FIELDS = ("country", "registered_country", "represented_country")


# ── Errors ────────────────────────────────────────────────────────────────────

class GeoIPError(Exception):
    """Base class for every geolocation lookup failure."""


class GeoIPTimeout(GeoIPError):
    pass


class GeoIPConnectionFailed(GeoIPError):
    pass


class GeoIPUnknownResponseFormat(GeoIPError):
    pass


class GeoIPUnsupportedIp(GeoIPError):
    pass


class GeoIPBadCountry(GeoIPError):
    def __init__(self, country_code: str) -> None:
        self.country_code = country_code
        super().__init__(f"Provider returned the invalid country code {country_code!r}")


class GeoIPUnknownResponseError(GeoIPError):
    def __init__(self, status_code: int, code: str | None, detail: str) -> None:
        self.status_code = status_code
        self.code        = code
        self.detail      = detail
        super().__init__(f"GeoIP HTTP {status_code} code={code}: {detail[:300]}")


# ── Config ────────────────────────────────────────────────────────────────────

@dataclass
class GeoIPConfig:
    base_url: str                 # No trailing slash, e.g. https://geoip.maxmind.com
    account_id: str
    license_key: str
    timeout_sec: float = 1.0      # connect + read; a slow provider must not hold the request


# ── Parsing ───────────────────────────────────────────────────────────────────

def parse_country_code(body: str) -> str:
    """Extract the ISO country code from a success body, or raise GeoIPUnknownResponseFormat."""
    try:
        data = json.loads(body)
    except ValueError as exc:
        raise GeoIPUnknownResponseFormat(f"Response body is not JSON: {body[:100]!r}") from exc

    if not isinstance(data, dict):
        raise GeoIPUnknownResponseFormat("Response body is not a JSON object")

    for field in _COUNTRY_FIELDS:
        element = data.get(field)
        if isinstance(element, dict):
            iso_code = element.get("iso_code")
            if isinstance(iso_code, str) and iso_code.strip():
                return iso_code.strip()

    raise GeoIPUnknownResponseFormat("Response has no country iso_code")


def parse_error(status_code: int, body: str) -> GeoIPError:
    """Turn a non-2xx response into the matching GeoIPError."""
    code: str | None = None
    detail = body
    try:
        data = json.loads(body)
    except ValueError:
        data = None
    if isinstance(data, dict):
        raw_code = data.get("code")
        code = raw_code if isinstance(raw_code, str) else None
        detail = str(data.get("error", body))

    if code in UNSUPPORTED_IP_CODES:
        return GeoIPUnsupportedIp(f"{code}: {detail}")
    return GeoIPUnknownResponseError(status_code, code, detail)


# ── Client ────────────────────────────────────────────────────────────────────

class GeoIPClient:
    """
    Async client, created once per process and injected into LocationResolver.

    `transport` lets tests substitute httpx.MockTransport.
    """

    def __init__(
        self,
        config: GeoIPConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._client = httpx.AsyncClient(
            base_url=config.base_url.rstrip("/"),
            auth=(config.account_id, config.license_key),
            timeout=httpx.Timeout(config.timeout_sec),
            headers={"Accept": "application/json"},
            transport=transport,
        )

    async def country_code_for_ip(self, remote_ip: str | None) -> str:
        """Return the raw provider country code for `remote_ip`."""
        if not remote_ip or not remote_ip.strip():
            raise GeoIPUnsupportedIp("No remote IP to look up")

        path = COUNTRY_PATH.format(ip=quote(remote_ip.strip(), safe=""))
        try:
            response = await self._client.get(path)
        except httpx.TimeoutException as exc:
            raise GeoIPTimeout(f"GeoIP lookup timed out after {self._config.timeout_sec}s") from exc
        except httpx.DecodingError as exc:
            raise GeoIPUnknownResponseFormat(f"GeoIP response body could not be decoded: {exc}") from exc
        except httpx.RequestError as exc:
            raise GeoIPConnectionFailed(f"GeoIP connection failed: {exc}") from exc

        logger.debug("geoip response status=%s ip=%s", response.status_code, remote_ip)

        if not response.is_success:
            raise parse_error(response.status_code, response.text)
        return parse_country_code(response.text)

    async def aclose(self) -> None:
        await self._client.aclose()
