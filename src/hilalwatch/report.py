"""Top-level entry point — one day at one place, from raw query to display-ready report."""

from pytz import timezone

from hilalwatch.calendars import HijriCalendarFormatter
from hilalwatch.config import Settings
from hilalwatch.display import build_dashboard, get_day_details
from hilalwatch.ephemeris import SkyfieldEphemeris
from hilalwatch.location import GeocodingError, geocode_address, timezone_name_for
from hilalwatch.models import HilalQuery, HilalReport, Observer
from hilalwatch.offset import compute_offset
from hilalwatch.prayer_times import SkyfieldSunsetService


def resolve_observer(query: HilalQuery) -> tuple[Observer, str]:
    """Observer from explicit coordinates, else by geocoding the address."""
    if query.latitude is not None and query.longitude is not None:
        observer = Observer(
            latitude=query.latitude, longitude=query.longitude, elevation=query.elevation
        )
        return observer, query.address or f"{query.latitude:.4f}, {query.longitude:.4f}"
    if not query.address:
        raise GeocodingError("Either coordinates or an address is required")
    return geocode_address(query.address, elevation=query.elevation)


def run(query: HilalQuery, settings: Settings) -> HilalReport:
    """Compute sunset, dashboard, calendar offset and Hijri date for a query.

    Args:
        query: Day and place.
        settings: Criteria, feature flag, calendar and ephemeris location.

    Returns:
        Fully computed HilalReport.

    Raises:
        GeocodingError: When the place or its timezone cannot be resolved.
    """
    observer, place_display = resolve_observer(query)
    tz_name = timezone_name_for(observer)
    tz = timezone(tz_name)

    ephemeris = SkyfieldEphemeris(settings.ephemeris_dir)
    prayer_times = SkyfieldSunsetService(ephemeris, observer, tz)
    formatter = HijriCalendarFormatter()

    sunset = prayer_times.sunset_for(query.day)
    dashboard = build_dashboard(
        sunset, observer, settings.criteria, ephemeris=ephemeris, lang=settings.lang
    )
    adjustment = compute_offset(
        query.day,
        observer,
        settings.criteria,
        settings.auto_adjust,
        ephemeris=ephemeris,
        prayer_times=prayer_times,
        formatter=formatter,
        calendar_id=settings.calendar_id,
        tz=tz,
    )
    details = get_day_details(
        query.day,
        formatter=formatter,
        calendar_id=settings.calendar_id,
        day_offset=adjustment.day_offset,
        lang=settings.lang,
    )
    return HilalReport(
        observer=observer,
        place_display=place_display,
        timezone_name=tz_name,
        sunset=sunset,
        dashboard=dashboard,
        adjustment=adjustment,
        details=details,
    )
