"""
BankStatusEngine — is a country's bank system open today?

Rules, in order:
    1. "today" is the current instant in the bank's own time zone.
    2. Saturday / Sunday → closed for "the weekend", regardless of holidays.
    3. Holidays on today, plus:
         Friday → holidays on the following Saturday
         Monday → holidays on the preceding Sunday
       (a weekend holiday is observed on the adjacent business day).
    4. Only names in the bank's observed-holiday allow-list count.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from models.domain import BankDescriptor, BankStatus
from services.calendar_service import HolidayCalendar

logger = logging.getLogger("banks.services.bank_status")

WEEKEND_REASON = "the weekend"

_FRIDAY   = 4
_SATURDAY = 5
_MONDAY   = 0


def to_sentence(items: list[str]) -> str:
    """
    Join words into an English list.

    ["a"] -> "a"; ["a", "b"] -> "a and b"; ["a", "b", "c"] -> "a, b, and c"
    """
    if not items:
        return ""
    if len(items) == 1:
        return items[0]
    if len(items) == 2:
        return f"{items[0]} and {items[1]}"
    return f"{', '.join(items[:-1])}, and {items[-1]}"


class BankStatusEngine:
    """Computes BankStatus for one bank schedule against a HolidayCalendar."""

    def __init__(self, bank: BankDescriptor, calendar: HolidayCalendar) -> None:
        self.bank = bank
        self._calendar = calendar
        self._tz = ZoneInfo(bank.time_zone)

    def today(self, now_utc: datetime | None = None) -> date:
        """
        Convert `now_utc` (default: the current instant) to the bank-local date.
        `now_utc` must be timezone-aware.
        """
        if now_utc is None:
            now_utc = datetime.now(timezone.utc)
        if now_utc.tzinfo is None:
            raise ValueError("now_utc must be timezone-aware")
        return now_utc.astimezone(self._tz).date()

    def candidate_holiday_names(self, day: date) -> list[str]:
        """Holiday names for `day`, including the adjacent weekend day on Fri/Mon."""
        regions = self.bank.holiday_regions
        names = self._calendar.holiday_names_on(day, regions)

        adjacent: date | None = None
        if day.weekday() == _FRIDAY:
            adjacent = day + timedelta(days=1)
        elif day.weekday() == _MONDAY:
            adjacent = day - timedelta(days=1)

        if adjacent is not None:
            for name in self._calendar.holiday_names_on(adjacent, regions):
                if name not in names:
                    names.append(name)
        return names

    def observed_holiday_names(self, day: date) -> list[str]:
        allowed = self.bank.observed_holiday_names
        return [n for n in self.candidate_holiday_names(day) if n in allowed]

    def status_on(self, day: date) -> BankStatus:
        if day.weekday() >= _SATURDAY:
            return BankStatus.closed_because(WEEKEND_REASON)

        names = self.observed_holiday_names(day)
        if names:
            return BankStatus.closed_because(to_sentence(names))
        return BankStatus.open()

    def bank_status(self, now_utc: datetime | None = None) -> BankStatus:
        day = self.today(now_utc)
        status = self.status_on(day)
        logger.debug(
            "bank status schedule=%r day=%s closed=%s reason=%r",
            self.bank.schedule_name, day, status.closed, status.reason,
        )
        return status
