"""SkyfieldEphemeris and SkyfieldSunsetService against the small DE430 excerpt
shipped inside skyfield's own test data (2015-02-27 .. 2015-03-07)."""

from datetime import date, datetime, timedelta
from pathlib import Path

import pytest
import skyfield
from pytz import timezone, utc

from hilalwatch.ephemeris import EphemerisError, SkyfieldEphemeris
from hilalwatch.models import Observer
from hilalwatch.prayer_times import SkyfieldSunsetService

KERNEL_DIR = Path(skyfield.__file__).parent / "tests" / "data"
KERNEL = "de430-2015-03-02.bsp"

OBSERVERS = (
    Observer(-6.2, 106.8, 8.0),
    Observer(51.5, -0.13, 11.0),
    Observer(65.0, 25.0, 0.0),
)

ONE_ARCSECOND = 1.0 / 3600.0


@pytest.fixture(scope="module")
def ephemeris():
    return SkyfieldEphemeris(KERNEL_DIR, KERNEL)


def _samples(start, end, step=timedelta(minutes=10)):
    instant = start
    while instant < end:
        yield instant
        instant += step


@pytest.mark.parametrize("observer", OBSERVERS)
def test_low_altitude_matches_skyfield_altaz(ephemeris, observer):
    ground = ephemeris.earth + ephemeris.topos(observer)
    moon = ephemeris.eph["moon"]
    checked = 0
    for instant in _samples(datetime(2015, 3, 2, tzinfo=utc), datetime(2015, 3, 5, tzinfo=utc)):
        apparent = ground.at(ephemeris.time(instant)).observe(moon).apparent()
        expected, _, _ = apparent.altaz(temperature_C=10.0, pressure_mbar=1010.0)
        if not 1.0 < expected.degrees < 6.0:
            continue
        position = ephemeris.equatorial_position("moon", instant, observer)
        altitude = ephemeris.horizontal_altitude(
            instant, observer, position.right_ascension_hours, position.declination_deg
        )
        assert altitude == pytest.approx(expected.degrees, abs=ONE_ARCSECOND), instant
        checked += 1
    assert checked > 0


def test_full_moon_of_march_2015(ephemeris):
    found = ephemeris.search_phase("moon", 180.0, datetime(2015, 3, 4, tzinfo=utc), 2.0)
    assert found is not None
    assert abs(found - datetime(2015, 3, 5, 18, 5, tzinfo=utc)) < timedelta(seconds=60)


def test_phase_search_ignores_opposite_crossing(ephemeris):
    # The window holds the full moon but no new moon
    assert ephemeris.search_phase("moon", 0.0, datetime(2015, 3, 2, tzinfo=utc), 4.0) is None


def test_phase_search_outside_kernel_raises(ephemeris):
    with pytest.raises(EphemerisError, match=KERNEL):
        ephemeris.search_phase("moon", 0.0, datetime(2015, 3, 20, tzinfo=utc), 2.0)


def test_elongation_near_full_moon(ephemeris):
    observer = OBSERVERS[0]
    instant = datetime(2015, 3, 5, 18, 5, tzinfo=utc)
    moon = ephemeris.equatorial_position("moon", instant, observer)
    sun = ephemeris.equatorial_position("sun", instant, observer)
    assert ephemeris.angle_between(moon.vector, sun.vector) > 170.0


def test_sunset_in_jakarta(ephemeris):
    tz = timezone("Asia/Jakarta")
    sunset = SkyfieldSunsetService(ephemeris, OBSERVERS[0], tz).sunset_for(date(2015, 3, 3))
    assert sunset is not None
    assert sunset.date() == date(2015, 3, 3)
    assert 17 <= sunset.hour <= 18
