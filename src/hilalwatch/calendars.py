"""Hijri calendar formatting — day, month and year of a Gregorian date in a named Islamic calendar."""

from datetime import date
from typing import Protocol

from hijridate import Gregorian

from hilalwatch.models import HijriDate

UMM_AL_QURA = "islamic-umalqura"
ISLAMIC_CIVIL = "islamic-civil"
ISLAMIC_TABULAR = "islamic-tbla"
CALENDAR_IDS = (UMM_AL_QURA, ISLAMIC_CIVIL, ISLAMIC_TABULAR)

# Fixed (R.D.) day numbers of 1 Muharram 1 AH: civil (Friday) epoch, 16 July 622 Julian,
# and astronomical (Thursday) epoch one day earlier
CIVIL_EPOCH = 227015
ASTRONOMICAL_EPOCH = 227014


class CalendarError(Exception):
    """Date cannot be rendered in the requested calendar."""


class CalendarFormatter(Protocol):
    def day_of_month(self, day: date, calendar_id: str) -> int: ...

    def month_of(self, day: date, calendar_id: str) -> int: ...

    def year_of(self, day: date, calendar_id: str) -> int: ...


def _fixed_from_tabular(year: int, month: int, day: int, epoch: int) -> int:
    return (
        day
        + 29 * (month - 1)
        + (6 * month - 1) // 11
        + (year - 1) * 354
        + (3 + 11 * year) // 30
        + epoch
        - 1
    )


def tabular_from_gregorian(day: date, epoch: int = CIVIL_EPOCH) -> HijriDate:
    """Tabular (arithmetic) Islamic calendar, 30-year cycle with 11 leap years."""
    fixed = day.toordinal()
    year = (30 * (fixed - epoch) + 10646) // 10631
    prior_days = fixed - _fixed_from_tabular(year, 1, 1, epoch)
    month = (11 * prior_days + 330) // 325
    return HijriDate(
        year=year, month=month, day=fixed - _fixed_from_tabular(year, month, 1, epoch) + 1
    )


def civil_from_gregorian(day: date) -> HijriDate:
    return tabular_from_gregorian(day, CIVIL_EPOCH)


def astronomical_from_gregorian(day: date) -> HijriDate:
    """Tabular calendar counted from the Thursday epoch, one day ahead of the civil one."""
    return tabular_from_gregorian(day, ASTRONOMICAL_EPOCH)


def umm_al_qura_from_gregorian(day: date) -> HijriDate:
    """Umm al-Qura calendar from the published tables (1343-1500 AH)."""
    try:
        hijri = Gregorian(day.year, day.month, day.day).to_hijri()
    except (OverflowError, ValueError) as exc:
        raise CalendarError(f"{day.isoformat()} outside Umm al-Qura range: {exc}") from exc
    return HijriDate(year=hijri.year, month=hijri.month, day=hijri.day)


class HijriCalendarFormatter:
    """CalendarFormatter for the Umm al-Qura and the two tabular Islamic calendars."""

    _converters = {
        UMM_AL_QURA: umm_al_qura_from_gregorian,
        ISLAMIC_CIVIL: civil_from_gregorian,
        ISLAMIC_TABULAR: astronomical_from_gregorian,
    }

    def to_hijri(self, day: date, calendar_id: str) -> HijriDate:
        converter = self._converters.get(calendar_id)
        if converter is None:
            raise CalendarError(
                f"unknown calendar: {calendar_id} (expected one of {', '.join(CALENDAR_IDS)})"
            )
        return converter(day)

    def day_of_month(self, day: date, calendar_id: str) -> int:
        return self.to_hijri(day, calendar_id).day

    def month_of(self, day: date, calendar_id: str) -> int:
        return self.to_hijri(day, calendar_id).month

    def year_of(self, day: date, calendar_id: str) -> int:
        return self.to_hijri(day, calendar_id).year
