"""Hilal computation layer — last conjunction search and crescent evaluation at sunset."""

import logging
from datetime import datetime, timedelta

from hilalwatch.ephemeris import EphemerisError, EphemerisService
from hilalwatch.models import HilalMeasurement, Observer, VisibilityCriteria

logger = logging.getLogger(__name__)

NEW_MOON_PHASE_DEG = 0.0
LOOKBACK = timedelta(days=30)
SEARCH_WINDOW_DAYS = 35.0  # Longer than a synodic month, so every search finds a new moon
_STEP_PAST_EVENT = timedelta(seconds=1)


def find_last_conjunction_before(
    ephemeris: EphemerisService, reference: datetime
) -> datetime:
    """Return the latest new moon (ijtima') at or before ``reference``.

    Starts 30 days back and walks forward new moon by new moon, stopping once
    the next one would fall after ``reference``.

    Raises:
        EphemerisError: When the ephemeris finds no new moon in a search window,
            the first one found already lies after ``reference``, or a search
            does not move forward in time.
    """
    candidate = ephemeris.search_phase(
        "moon", NEW_MOON_PHASE_DEG, reference - LOOKBACK, SEARCH_WINDOW_DAYS
    )
    if candidate is None:
        raise EphemerisError(
            f"no new moon within {SEARCH_WINDOW_DAYS} days of {reference - LOOKBACK}"
        )
    if candidate > reference:
        raise EphemerisError(f"no new moon found before {reference.isoformat()}")

    while True:
        following = ephemeris.search_phase(
            "moon", NEW_MOON_PHASE_DEG, candidate + _STEP_PAST_EVENT, SEARCH_WINDOW_DAYS
        )
        if following is None:
            raise EphemerisError(
                f"no new moon within {SEARCH_WINDOW_DAYS} days of {candidate}"
            )
        if following <= candidate:
            raise EphemerisError(
                f"phase search went backwards: {following.isoformat()} <= {candidate.isoformat()}"
            )
        if following > reference:
            break
        logger.debug("new moon %s precedes %s, continuing", following, reference)
        candidate = following

    return candidate


def evaluate_hilal(
    ephemeris: EphemerisService,
    sunset: datetime,
    observer: Observer,
    criteria: VisibilityCriteria,
) -> HilalMeasurement:
    """Measure the crescent at ``sunset`` and test it against ``criteria``.

    Args:
        ephemeris: Position and phase provider.
        sunset: Timezone-aware sunset (maghrib) instant.
        observer: Where the crescent is looked for.
        criteria: Minimum altitude and elongation.

    Returns:
        HilalMeasurement with moon age, altitude, elongation and eligibility.
    """
    conjunction_time = find_last_conjunction_before(ephemeris, sunset)
    moon_age_hours = (sunset - conjunction_time).total_seconds() / 3600.0

    moon = ephemeris.equatorial_position("moon", sunset, observer)
    sun = ephemeris.equatorial_position("sun", sunset, observer)
    altitude = ephemeris.horizontal_altitude(
        sunset, observer, moon.right_ascension_hours, moon.declination_deg
    )
    elongation = ephemeris.angle_between(sun.vector, moon.vector)

    measurement = HilalMeasurement(
        conjunction_time=conjunction_time,
        moon_age_hours=moon_age_hours,
        moon_altitude_deg=altitude,
        elongation_deg=elongation,
        is_eligible=criteria.is_met(altitude, elongation),
    )
    logger.debug("hilal at %s: %s", sunset.isoformat(), measurement)
    return measurement
