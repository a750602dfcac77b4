"""Maghrib (sunset) times for the observer's local calendar day."""

import logging
from datetime import date, datetime, timedelta, tzinfo
from typing import Protocol

from pytz import utc
from skyfield import almanac

from hilalwatch.ephemeris import SkyfieldEphemeris
from hilalwatch.models import Observer

logger = logging.getLogger(__name__)

# Upper limb of the sun touching the horizon, including standard refraction
SUNSET_HORIZON_DEG = -0.8333


class PrayerTimeService(Protocol):
    def sunset_for(self, day: date) -> datetime | None: ...


def local_datetime(day: date, tz: tzinfo, hour: int = 0) -> datetime:
    """Wall-clock ``hour``:00 on ``day`` in ``tz``."""
    naive = datetime(day.year, day.month, day.day, hour)
    localize = getattr(tz, "localize", None)  # pytz zones need localize()
    return localize(naive) if localize else naive.replace(tzinfo=tz)


class SkyfieldSunsetService:
    """PrayerTimeService computing sunset with skyfield for one observer."""

    def __init__(self, ephemeris: SkyfieldEphemeris, observer: Observer, tz: tzinfo) -> None:
        self.ephemeris = ephemeris
        self.observer = observer
        self.tz = tz
        self._ground = ephemeris.earth + ephemeris.topos(observer)

    def sunset_for(self, day: date) -> datetime | None:
        """Sunset during the local calendar day, or None if the sun does not set."""
        start = local_datetime(day, self.tz)
        end = local_datetime(day + timedelta(days=1), self.tz)
        t0 = self.ephemeris.time(start.astimezone(utc))
        t1 = self.ephemeris.time(end.astimezone(utc))

        times, did_set = almanac.find_settings(
            self._ground, self.ephemeris.eph["sun"], t0, t1, horizon_degrees=SUNSET_HORIZON_DEG
        )
        for t, ok in zip(times, did_set):
            if ok:
                return t.utc_datetime().astimezone(self.tz)
        logger.debug("no sunset on %s at %s", day, self.observer)
        return None
