"""
Core domain models for banks-closed.

Plain frozen dataclasses shared by the calendar, engine, resolver and
orchestrator layers. Everything here is built per request except Country /
BankDescriptor, which are static and live in services/country_registry.py.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum


# ── Country codes ─────────────────────────────────────────────────────────────

def normalize_country_code(raw: str) -> str:
    """Strip and upper-case a two-letter country code."""
    code = raw.strip().upper()
    if len(code) != 2:
        raise ValueError(f"Country code must be two letters, got {raw!r}")
    return code


# ── Enums ─────────────────────────────────────────────────────────────────────

class LookupErrorKind(str, Enum):
    TIMEOUT                 = "Timeout"
    CONNECTION_FAILED       = "ConnectionFailed"
    UNKNOWN_RESPONSE_FORMAT = "UnknownResponseFormat"
    UNSUPPORTED_IP          = "UnsupportedIp"
    UNKNOWN_RESPONSE_ERROR  = "UnknownResponseError"
    RECEIVED_BAD_COUNTRY    = "ReceivedBadCountry"

    @property
    def needs_reporting(self) -> bool:
        """UnsupportedIp is routine (private/unknown IPs); everything else pages."""
        return self is not LookupErrorKind.UNSUPPORTED_IP


class CheckError(str, Enum):
    NO_COUNTRY          = "no_country"
    UNSUPPORTED_COUNTRY = "unsupported_country"


# ── Country / bank configuration ──────────────────────────────────────────────

@dataclass(frozen=True)
class BankDescriptor:
    schedule_name: str
    schedule_link: str
    time_zone: str                          # IANA zone id, e.g. "America/New_York"
    holiday_regions: tuple[str, ...]        # ordered region tags
    observed_holiday_names: frozenset[str]


@dataclass(frozen=True)
class Country:
    code: str
    display_name: str
    bank: BankDescriptor


# ── Calendar / status values ──────────────────────────────────────────────────

@dataclass(frozen=True)
class Holiday:
    name: str
    date: date


@dataclass(frozen=True)
class BankStatus:
    closed: bool
    reason: str | None = None

    def __post_init__(self) -> None:
        if self.closed and not self.reason:
            raise ValueError("A closed BankStatus must carry a reason")
        if not self.closed and self.reason is not None:
            raise ValueError("An open BankStatus cannot carry a reason")

    @classmethod
    def open(cls) -> BankStatus:
        return cls(closed=False, reason=None)

    @classmethod
    def closed_because(cls, reason: str) -> BankStatus:
        return cls(closed=True, reason=reason)


# ── Location resolution ───────────────────────────────────────────────────────

@dataclass(frozen=True)
class LocationResolution:
    success: bool
    country_code: str | None = None
    error_kind: LookupErrorKind | None = None

    def __post_init__(self) -> None:
        if self.success != (self.country_code is not None):
            raise ValueError("country_code must be set iff the resolution succeeded")
        if self.success and self.error_kind is not None:
            raise ValueError("A successful resolution cannot carry an error kind")

    @classmethod
    def resolved(cls, country_code: str) -> LocationResolution:
        return cls(success=True, country_code=normalize_country_code(country_code))

    @classmethod
    def failed(cls, kind: LookupErrorKind) -> LocationResolution:
        return cls(success=False, country_code=None, error_kind=kind)


# ── Orchestration result ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class BankCheckResult:
    """Everything the front end needs to render one bank-status page."""
    country_code: str | None
    country: Country | None = None
    status: BankStatus | None = None
    error: CheckError | None = None

    @property
    def headline(self) -> str | None:
        if self.country is None:
            return None
        return f"Are {self.country.code} banks closed today?"

    @property
    def status_message(self) -> str | None:
        if self.country is None or self.status is None:
            return None
        if self.status.closed:
            return f"Most {self.country.code} banks are closed because of {self.status.reason}."
        return f"Most {self.country.code} banks are open."

    @property
    def schedule_note(self) -> str | None:
        if self.country is None:
            return None
        return (
            f"The {self.country.bank.schedule_name} schedule is used to determine "
            f"{self.country.code} bank statuses. Some banks may not adhere to this schedule."
        )

    def to_event_payload(self) -> dict:
        """Attributes published on the bank_status_check analytics event."""
        return {
            "country_code": self.country_code,
            "error":        self.error.value if self.error else None,
        }
