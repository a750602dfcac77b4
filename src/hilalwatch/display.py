"""Display models — adjusted Hijri date of a day and the live hilal dashboard state."""

import logging
from datetime import date, datetime, timedelta

from hilalwatch.calendars import UMM_AL_QURA, CalendarFormatter
from hilalwatch.compute import evaluate_hilal
from hilalwatch.ephemeris import EphemerisService
from hilalwatch.i18n import gregorian_month_name, hijri_month_name, t, weekday_name
from hilalwatch.models import (
    DashboardState,
    DayDetails,
    HijriDate,
    Observer,
    VisibilityCriteria,
)

logger = logging.getLogger(__name__)


def get_day_details(
    day: date,
    *,
    formatter: CalendarFormatter,
    calendar_id: str = UMM_AL_QURA,
    day_offset: int = 0,
    maghrib: datetime | None = None,
    now: datetime | None = None,
    lang: str = "en",
) -> DayDetails:
    """Gregorian labels for ``day`` and its Hijri date shifted by ``day_offset``.

    The Hijri day starts at maghrib, so once ``now`` has reached ``maghrib``
    the Hijri date moves one day ahead.
    """
    hijri_day = day + timedelta(days=day_offset)
    if maghrib is not None:
        now = now or datetime.now(maghrib.tzinfo)
        if now >= maghrib:
            hijri_day += timedelta(days=1)

    hijri = HijriDate(
        year=formatter.year_of(hijri_day, calendar_id),
        month=formatter.month_of(hijri_day, calendar_id),
        day=formatter.day_of_month(hijri_day, calendar_id),
    )
    return DayDetails(
        date_string=f"{day.day} {gregorian_month_name(day.month, lang)} {day.year}",
        day_name=weekday_name(day.weekday(), lang),
        hijri_date=hijri,
        hijri_label=(
            f"{hijri.day} {hijri_month_name(hijri.month, lang)} {hijri.year} "
            f"{t('hijri_suffix', lang)}"
        ),
    )


def build_dashboard(
    sunset: datetime | None,
    observer: Observer | None,
    criteria: VisibilityCriteria,
    *,
    ephemeris: EphemerisService,
    lang: str = "en",
) -> DashboardState:
    """Crescent measurement at today's maghrib for the dashboard. Never raises.

    Without an observer or sunset nothing is computed and a pending message
    is returned instead.
    """
    if observer is None or sunset is None:
        return DashboardState(measurement=None, message=t("dashboard_pending", lang))

    try:
        measurement = evaluate_hilal(ephemeris, sunset, observer, criteria)
    except Exception as exc:
        logger.exception("hilal dashboard failed for %s", sunset)
        return DashboardState(
            measurement=None, message=t("dashboard_error", lang).format(error=exc)
        )

    status = t("dashboard_status", lang).format(
        altitude=measurement.moon_altitude_deg,
        min_altitude=criteria.min_altitude_deg,
        elongation=measurement.elongation_deg,
        min_elongation=criteria.min_elongation_deg,
        eligible=measurement.is_eligible,
    )
    verdict = t("eligible" if measurement.is_eligible else "not_eligible", lang)
    return DashboardState(measurement=measurement, message=f"{status}\n{verdict}")
