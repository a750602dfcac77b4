"""Observer resolution — address geocoding and timezone lookup."""

import httpx
from timezonefinder import TimezoneFinder

from hilalwatch.models import Observer

_tf = TimezoneFinder()

NOMINATIM_URL = "https://nominatim.openstreetmap.org/search"
USER_AGENT = "hilalwatch/0.1"


class GeocodingError(Exception):
    """Geocoder call or timezone lookup failure."""


def timezone_name_for(observer: Observer) -> str:
    tz_str = _tf.timezone_at(lat=observer.latitude, lng=observer.longitude)
    if tz_str is None:
        raise GeocodingError(
            f"Timezone not found: lat={observer.latitude}, lng={observer.longitude}"
        )
    return tz_str


def geocode_address(address: str, elevation: float = 0.0) -> tuple[Observer, str]:
    """Resolve an address string with Nominatim (OpenStreetMap).

    Args:
        address: Address string in any language.
        elevation: Observer elevation in meters; Nominatim does not return one.

    Returns:
        (Observer, normalized display name).

    Raises:
        GeocodingError: On HTTP failure or when the address cannot be found.
    """
    params = {"q": address, "format": "json", "limit": 1}
    headers = {"User-Agent": USER_AGENT}
    try:
        resp = httpx.get(NOMINATIM_URL, params=params, headers=headers, timeout=10)
        resp.raise_for_status()
    except httpx.HTTPError as exc:
        raise GeocodingError(f"Nominatim request failed: {exc}") from exc

    results = resp.json()
    if not results:
        raise GeocodingError(f"Address not found: {address}")
    r = results[0]
    observer = Observer(
        latitude=float(r["lat"]), longitude=float(r["lon"]), elevation=elevation
    )
    return observer, r["display_name"]
