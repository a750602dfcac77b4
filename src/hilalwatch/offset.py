"""Calendar offset inference — reconcile the tabular Hijri calendar with crescent sighting.

The previous month of the tabular calendar is located by scanning backward
for its 29th day. The crescent is evaluated at that day's sunset: if it is
visible the sighting-based month ends after 29 days, otherwise it is completed
to 30 (istikmal). The difference between the two month lengths is the number
of days to add before rendering a date in the tabular calendar.
"""

import logging
from datetime import date, datetime, timedelta, tzinfo

from pytz import utc

from hilalwatch.calendars import UMM_AL_QURA, CalendarFormatter
from hilalwatch.compute import evaluate_hilal
from hilalwatch.ephemeris import EphemerisService
from hilalwatch.models import CalendarAdjustment, Observer, VisibilityCriteria
from hilalwatch.prayer_times import PrayerTimeService, local_datetime

logger = logging.getLogger(__name__)

SCAN_LIMIT_DAYS = 40
BOUNDARY_DAY = 29
FALLBACK_SUNSET_HOUR = 18
VALID_OFFSETS = (-1, 0, 1)


class CalendarInconsistencyError(Exception):
    """Month lengths disagree by more than one day."""


def find_month_boundary(
    observation_date: date, formatter: CalendarFormatter, calendar_id: str
) -> date | None:
    """29th day of the month preceding the one ``observation_date`` falls in.

    Scans backward from ``observation_date`` itself, at most SCAN_LIMIT_DAYS
    days. Returns None when no such day is found within the limit.
    """
    current_month = formatter.month_of(observation_date, calendar_id)
    day = observation_date
    for _ in range(SCAN_LIMIT_DAYS):
        if (
            formatter.day_of_month(day, calendar_id) == BOUNDARY_DAY
            and formatter.month_of(day, calendar_id) != current_month
        ):
            return day
        day -= timedelta(days=1)
    return None


def _boundary_sunset(
    boundary: date, prayer_times: PrayerTimeService, tz: tzinfo
) -> datetime:
    sunset = prayer_times.sunset_for(boundary)
    if sunset is None:
        sunset = local_datetime(boundary, tz, hour=FALLBACK_SUNSET_HOUR)
        logger.warning("no sunset for %s, using %s", boundary, sunset.isoformat())
    return sunset


def _format_trace(
    boundary: date,
    sunset: datetime,
    criteria: VisibilityCriteria,
    altitude: float,
    elongation: float,
    is_eligible: bool,
    reference_length: int,
    calendar_id: str,
    calendar_length: int,
    day_offset: int,
) -> str:
    return "\n".join(
        [
            f"Previous month boundary: {boundary.isoformat()} (sunset {sunset.isoformat()})",
            f"Altitude: {altitude:.2f}° vs min {criteria.min_altitude_deg}°",
            f"Elongation: {elongation:.2f}° vs min {criteria.min_elongation_deg}°",
            f"Crescent visible: {'yes' if is_eligible else 'no'} -> {reference_length} days",
            f"{calendar_id} month: {calendar_length} days",
            f"Adjustment: {day_offset:+d}",
        ]
    )


def compute_offset(
    observation_date: date,
    observer: Observer,
    criteria: VisibilityCriteria,
    is_feature_enabled: bool,
    *,
    ephemeris: EphemerisService,
    prayer_times: PrayerTimeService,
    formatter: CalendarFormatter,
    calendar_id: str = UMM_AL_QURA,
    tz: tzinfo = utc,
) -> CalendarAdjustment:
    """Day offset between the tabular calendar and the sighting-based calendar.

    Never raises: any failure yields a zero offset whose trace carries the
    error message.

    Args:
        observation_date: Displayed Gregorian date.
        observer: Where the crescent is looked for.
        criteria: Visibility thresholds.
        is_feature_enabled: When False, returns a zero offset without computing.
        ephemeris: Position and phase provider.
        prayer_times: Sunset provider for the observer.
        formatter: Tabular calendar used for the backward scan.
        calendar_id: Calendar system passed to ``formatter``.
        tz: Observer's timezone, for the 18:00 fallback sunset.

    Returns:
        CalendarAdjustment whose day_offset is one of -1, 0, 1.
    """
    if not is_feature_enabled:
        return CalendarAdjustment(day_offset=0, trace="disabled")

    try:
        boundary = find_month_boundary(observation_date, formatter, calendar_id)
        if boundary is None:
            logger.warning(
                "no month boundary within %d days of %s", SCAN_LIMIT_DAYS, observation_date
            )
            return CalendarAdjustment(
                day_offset=0,
                trace=f"scan limit reached: no day {BOUNDARY_DAY} of the previous "
                f"month within {SCAN_LIMIT_DAYS} days of {observation_date.isoformat()}",
            )

        sunset = _boundary_sunset(boundary, prayer_times, tz)
        measurement = evaluate_hilal(ephemeris, sunset, observer, criteria)
        reference_length = 29 if measurement.is_eligible else 30

        day_after = boundary + timedelta(days=1)
        calendar_length = 29 if formatter.day_of_month(day_after, calendar_id) == 1 else 30

        day_offset = calendar_length - reference_length
        if day_offset not in VALID_OFFSETS:
            raise CalendarInconsistencyError(
                f"offset {day_offset} from {calendar_length}-day {calendar_id} month "
                f"and {reference_length}-day sighted month"
            )
    except Exception as exc:
        logger.exception("calendar offset failed for %s", observation_date)
        return CalendarAdjustment(day_offset=0, trace=f"error: {exc}")

    logger.info("calendar offset for %s: %+d", observation_date, day_offset)
    return CalendarAdjustment(
        day_offset=day_offset,
        trace=_format_trace(
            boundary,
            sunset,
            criteria,
            measurement.moon_altitude_deg,
            measurement.elongation_deg,
            measurement.is_eligible,
            reference_length,
            calendar_id,
            calendar_length,
            day_offset,
        ),
    )
