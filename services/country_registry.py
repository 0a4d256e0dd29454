"""
CountryRegistry — the fixed table of supported countries.

Adding a country means adding one Country record to SUPPORTED_COUNTRIES.
"""

from __future__ import annotations

from models.domain import BankDescriptor, Country, normalize_country_code
from services.bank_status import BankStatusEngine
from services.calendar_service import US, US_DC, HolidayCalendar

# Select-box value for "my country is not listed"; never a supported code.
OTHER_COUNTRY_OPTION = ("Other", "XX")


class NoSuchCountry(LookupError):
    def __init__(self, code: str) -> None:
        self.code = code
        super().__init__(f"No supported country for code {code!r}")


# ── Country definitions ───────────────────────────────────────────────────────

US_FEDERAL_RESERVE = BankDescriptor(
    schedule_name="Federal Reserve Bank",
    schedule_link="https://www.federalreserve.gov/aboutthefed/k8.htm",
    time_zone="America/New_York",
    holiday_regions=(US, US_DC),
    observed_holiday_names=frozenset({
        "New Year's Day",
        "Martin Luther King, Jr. Day",
        "Presidents' Day",
        "Memorial Day",
        "Juneteenth",
        "Independence Day",
        "Labor Day",
        "Columbus Day",
        "Veterans Day",
        "Thanksgiving",
        "Christmas Day",
        "Inauguration Day",
    }),
)

UNITED_STATES = Country(code="US", display_name="United States", bank=US_FEDERAL_RESERVE)

SUPPORTED_COUNTRIES: list[Country] = [UNITED_STATES]


class CountryRegistry:
    """
    Read-only code → Country lookup, plus one BankStatusEngine per country.

    Built once at startup and shared by every request.
    """

    def __init__(
        self,
        countries: list[Country] | None = None,
        calendar: HolidayCalendar | None = None,
    ) -> None:
        countries = SUPPORTED_COUNTRIES if countries is None else countries
        self.calendar = calendar or HolidayCalendar()

        self._countries: dict[str, Country] = {}
        for country in countries:
            if country.code in self._countries:
                raise ValueError(f"Duplicate country code in registry: {country.code!r}")
            self._countries[country.code] = country

        # Fails fast on unknown time zones / regions
        self._engines: dict[str, BankStatusEngine] = {}
        for code, country in self._countries.items():
            for region in country.bank.holiday_regions:
                if region not in self.calendar.regions:
                    raise ValueError(f"Country {code} uses unknown holiday region {region!r}")
            self._engines[code] = BankStatusEngine(country.bank, self.calendar)

    def is_supported(self, code: str) -> bool:
        return code.strip().upper() in self._countries

    def country_for(self, code: str) -> Country:
        normalized = normalize_country_code(code)
        try:
            return self._countries[normalized]
        except KeyError:
            raise NoSuchCountry(normalized) from None

    def engine_for(self, code: str) -> BankStatusEngine:
        return self._engines[self.country_for(code).code]

    def supported_countries(self) -> dict[str, str]:
        """Ordered {code: display name}."""
        return {code: c.display_name for code, c in self._countries.items()}

    def select_options(self) -> list[tuple[str, str]]:
        """(label, value) pairs for a country picker: blank, supported countries, Other."""
        options = [("", "")]
        options.extend((name, code) for code, name in self.supported_countries().items())
        options.append(OTHER_COUNTRY_OPTION)
        return options
