import os
from datetime import date, datetime, timedelta
from pathlib import Path

import pytest
from pytz import timezone, utc

from hilalwatch.compute import evaluate_hilal, find_last_conjunction_before
from hilalwatch.ephemeris import DEFAULT_DATA_DIR, EPHEMERIS_FILE, SkyfieldEphemeris
from hilalwatch.models import Observer, VisibilityCriteria
from hilalwatch.prayer_times import SkyfieldSunsetService

DATA_DIR = Path(os.environ.get("HILAL_EPHEMERIS_DIR") or DEFAULT_DATA_DIR)

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(
        not (DATA_DIR / EPHEMERIS_FILE).exists(), reason=f"{EPHEMERIS_FILE} not in {DATA_DIR}"
    ),
]

JAKARTA = Observer(-6.2, 106.8, 8.0)
JAKARTA_TZ = timezone("Asia/Jakarta")


@pytest.fixture(scope="module")
def ephemeris():
    return SkyfieldEphemeris(DATA_DIR)


def test_new_moon_of_february_2025(ephemeris):
    found = find_last_conjunction_before(ephemeris, datetime(2025, 3, 1, 11, tzinfo=utc))
    assert abs(found - datetime(2025, 2, 28, 0, 45, tzinfo=utc)) < timedelta(minutes=2)


def test_sunset_in_jakarta(ephemeris):
    sunset = SkyfieldSunsetService(ephemeris, JAKARTA, JAKARTA_TZ).sunset_for(date(2025, 3, 1))
    assert sunset is not None
    assert sunset.date() == date(2025, 3, 1)
    assert 17 <= sunset.hour <= 18


def test_no_sunset_during_polar_day(ephemeris):
    tromso = Observer(69.65, 18.96)
    service = SkyfieldSunsetService(ephemeris, tromso, timezone("Europe/Oslo"))
    assert service.sunset_for(date(2025, 6, 21)) is None


def test_crescent_measurement_is_physical(ephemeris):
    sunset = SkyfieldSunsetService(ephemeris, JAKARTA, JAKARTA_TZ).sunset_for(date(2025, 3, 1))
    m = evaluate_hilal(ephemeris, sunset, JAKARTA, VisibilityCriteria())
    assert m.conjunction_time <= sunset
    assert 30 < m.moon_age_hours < 48
    assert -90 <= m.moon_altitude_deg <= 90
    assert 0 <= m.elongation_deg <= 180
    assert m.elongation_deg > 6.4


def test_angle_between_orthogonal_vectors(ephemeris):
    assert ephemeris.angle_between((1.0, 0.0, 0.0), (0.0, 2.0, 0.0)) == pytest.approx(90.0)
