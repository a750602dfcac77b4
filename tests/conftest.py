import math
from datetime import date, datetime, timedelta

import pytest
from pytz import utc

from hilalwatch.ephemeris import EphemerisError
from hilalwatch.models import EquatorialPosition, Observer

# Astronomical new moons of early 2025 (UTC)
NEW_MOONS = (
    datetime(2024, 12, 30, 22, 27, tzinfo=utc),
    datetime(2025, 1, 29, 12, 36, tzinfo=utc),
    datetime(2025, 2, 28, 0, 45, tzinfo=utc),
    datetime(2025, 3, 29, 10, 58, tzinfo=utc),
    datetime(2025, 4, 27, 19, 31, tzinfo=utc),
)

JAKARTA = Observer(latitude=-6.2, longitude=106.8, elevation=8.0)


class StubEphemeris:
    """Deterministic EphemerisService: fixed new moons, fixed altitude and elongation."""

    def __init__(self, altitude=5.0, elongation=7.0, new_moons=NEW_MOONS, fail=False):
        self.altitude = altitude
        self.elongation = elongation
        self.new_moons = tuple(new_moons)
        self.fail = fail
        self.calls: list[tuple] = []

    def search_phase(self, body, target_phase_deg, search_start, window_days):
        self.calls.append(("search_phase", search_start))
        if self.fail:
            raise EphemerisError("stub ephemeris unavailable")
        end = search_start + timedelta(days=window_days)
        for t in self.new_moons:
            if search_start <= t <= end:
                return t
        return None

    def equatorial_position(self, body, instant, observer):
        self.calls.append(("equatorial_position", body, instant))
        if body == "sun":
            return EquatorialPosition(22.7, -8.0, (1.0, 0.0, 0.0))
        e = math.radians(self.elongation)
        return EquatorialPosition(23.1, -5.0, (math.cos(e), math.sin(e), 0.0))

    def horizontal_altitude(self, instant, observer, right_ascension_hours, declination_deg):
        self.calls.append(("horizontal_altitude", instant))
        return self.altitude

    def angle_between(self, vector_a, vector_b):
        dot = sum(a * b for a, b in zip(vector_a, vector_b))
        norm = math.sqrt(sum(a * a for a in vector_a)) * math.sqrt(sum(b * b for b in vector_b))
        return math.degrees(math.acos(max(-1.0, min(1.0, dot / norm))))


class StubCalendar:
    """CalendarFormatter over consecutive months of given lengths starting at ``start``."""

    def __init__(self, start: date, months: list[tuple[int, int]], year: int = 1446):
        self.start = start
        self.months = months  # (month number, length)
        self.year = year

    def _lookup(self, day: date) -> tuple[int, int]:
        offset = (day - self.start).days
        if offset < 0:
            raise AssertionError(f"{day} before stub calendar start")
        for month, length in self.months:
            if offset < length:
                return month, offset + 1
            offset -= length
        raise AssertionError(f"{day} after stub calendar end")

    def day_of_month(self, day, calendar_id):
        return self._lookup(day)[1]

    def month_of(self, day, calendar_id):
        return self._lookup(day)[0]

    def year_of(self, day, calendar_id):
        return self.year


class StubPrayerTimes:
    def __init__(self, hour=11, minute=5, missing=False):
        self.hour = hour
        self.minute = minute
        self.missing = missing
        self.requested: list[date] = []

    def sunset_for(self, day):
        self.requested.append(day)
        if self.missing:
            return None
        return datetime(day.year, day.month, day.day, self.hour, self.minute, tzinfo=utc)


class Untouchable:
    """Fails the test on any attribute access."""

    def __getattr__(self, name):
        raise AssertionError(f"service used: {name}")


def shaban_calendar(shaban_length: int) -> StubCalendar:
    """Rajab (30 days) from 2025-01-01, then Shaban of the given length, then Ramadan."""
    return StubCalendar(
        start=date(2025, 1, 1),
        months=[(7, 30), (8, shaban_length), (9, 30), (10, 29)],
    )


@pytest.fixture
def observer():
    return JAKARTA


@pytest.fixture
def prayer_times():
    return StubPrayerTimes()
