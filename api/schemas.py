"""
Pydantic response schemas for the public API.
"""

from __future__ import annotations

from pydantic import BaseModel

from models.domain import BankCheckResult


class BankStatusOut(BaseModel):
    closed: bool
    reason: str | None = None


class ScheduleOut(BaseModel):
    name: str
    link: str


class CountryOut(BaseModel):
    code: str
    name: str
    schedule: ScheduleOut


class BankCheckResponse(BaseModel):
    country_code: str | None
    country: CountryOut | None = None
    status: BankStatusOut | None = None
    error: str | None = None
    headline: str | None = None
    message: str | None = None
    schedule_note: str | None = None

    @classmethod
    def from_result(cls, result: BankCheckResult) -> BankCheckResponse:
        country = None
        if result.country is not None:
            country = CountryOut(
                code=result.country.code,
                name=result.country.display_name,
                schedule=ScheduleOut(
                    name=result.country.bank.schedule_name,
                    link=result.country.bank.schedule_link,
                ),
            )
        status = None
        if result.status is not None:
            status = BankStatusOut(closed=result.status.closed, reason=result.status.reason)
        return cls(
            country_code=result.country_code,
            country=country,
            status=status,
            error=result.error.value if result.error else None,
            headline=result.headline,
            message=result.status_message,
            schedule_note=result.schedule_note,
        )


class SelectOption(BaseModel):
    label: str
    value: str


class CountriesResponse(BaseModel):
    supported: dict[str, str]
    options: list[SelectOption]
