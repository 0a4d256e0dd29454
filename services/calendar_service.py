"""
HolidayCalendar — read-only, in-memory holiday lookup keyed by region tags.

Region tags:
    us     — US federal calendar
    us_dc  — US federal calendar plus District of Columbia holidays
             (Inauguration Day, Emancipation Day)

Data comes from the `holidays` Python library, queried with observed=False so
every holiday is reported on its actual date. Shifting weekend holidays onto a
business day is a bank-schedule rule and lives in services/bank_status.py.

Library names are mapped to the display names used by bank schedules
(HOLIDAY_NAME_ALIASES). Per-(region, year) data is built lazily and cached.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable

import holidays as hlib

from models.domain import Holiday

logger = logging.getLogger("banks.services.calendar")

# ── Region tags ───────────────────────────────────────────────────────────────

US    = "us"
US_DC = "us_dc"

# tag -> (ISO country, subdivision)
REGION_SOURCES: dict[str, tuple[str, str | None]] = {
    US:    ("US", None),
    US_DC: ("US", "DC"),
}

ALL_REGIONS = list(REGION_SOURCES)

# ── Display names ─────────────────────────────────────────────────────────────

HOLIDAY_NAME_ALIASES: dict[str, str] = {
    "Thanksgiving Day":                     "Thanksgiving",
    "Washington's Birthday":                "Presidents' Day",
    "Martin Luther King Jr. Day":           "Martin Luther King, Jr. Day",
    "Juneteenth National Independence Day": "Juneteenth",
}


class HolidayCalendar:
    """
    Answers "which named holidays fall on this date in these regions?".

    Thread-safety: the per-year cache is filled idempotently, so concurrent
    readers at worst build the same year twice.
    """

    def __init__(
        self,
        region_sources: dict[str, tuple[str, str | None]] | None = None,
        name_aliases: dict[str, str] | None = None,
    ) -> None:
        self._sources = dict(REGION_SOURCES if region_sources is None else region_sources)
        self._aliases = dict(HOLIDAY_NAME_ALIASES if name_aliases is None else name_aliases)
        self._cache: dict[tuple[str, int], hlib.HolidayBase] = {}

    @property
    def regions(self) -> list[str]:
        return list(self._sources)

    def _check_region(self, region: str) -> None:
        if region not in self._sources:
            raise ValueError(f"Unknown holiday region: {region!r}. Valid: {self.regions}")

    def _year_data(self, region: str, year: int) -> hlib.HolidayBase:
        key = (region, year)
        data = self._cache.get(key)
        if data is None:
            country, subdiv = self._sources[region]
            data = hlib.country_holidays(country, subdiv=subdiv, years=year, observed=False)
            self._cache[key] = data
            logger.debug("built holiday data region=%s year=%d entries=%d", region, year, len(data))
        return data

    def display_name(self, name: str) -> str:
        return self._aliases.get(name, name)

    def holidays_on(self, day: date, regions: Iterable[str]) -> list[Holiday]:
        """
        Return the holidays observed on `day` in any of `regions`.

        Order: regions in the order given, names in calendar order. A name that
        appears in several regions is listed once.
        """
        regions = list(regions)
        for region in regions:
            self._check_region(region)

        seen: set[str] = set()
        result: list[Holiday] = []
        for region in regions:
            for raw_name in self._year_data(region, day.year).get_list(day):
                name = self.display_name(raw_name)
                if name in seen:
                    continue
                seen.add(name)
                result.append(Holiday(name=name, date=day))
        return result

    def holiday_names_on(self, day: date, regions: Iterable[str]) -> list[str]:
        return [h.name for h in self.holidays_on(day, regions)]
