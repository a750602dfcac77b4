"""Ephemeris layer — the celestial-mechanics capability the hilal engine consumes.

The engine only talks to the :class:`EphemerisService` protocol, so it can be
driven by the skyfield-backed :class:`SkyfieldEphemeris` in production and by a
deterministic stub in tests.
"""

import math
import os
from datetime import datetime, timedelta
from functools import lru_cache
from pathlib import Path
from typing import Protocol, Sequence

import numpy as np
from skyfield import almanac
from skyfield.api import Loader, wgs84
from skyfield.earthlib import refract
from skyfield.errors import EphemerisRangeError
from skyfield.functions import angle_between, from_spherical, mxv, to_spherical
from skyfield.searchlib import find_discrete

from hilalwatch.models import EquatorialPosition, Observer

_ROOT = Path(__file__).parent.parent.parent
DEFAULT_DATA_DIR = _ROOT / "resources"
EPHEMERIS_FILE = "de421.bsp"

# Standard atmosphere used for the refraction correction
_TEMPERATURE_C = 10.0
_PRESSURE_MBAR = 1010.0

_ONE_SECOND_DAYS = 1.0 / 86400.0


class EphemerisError(Exception):
    """Position or phase could not be computed."""


class EphemerisService(Protocol):
    def equatorial_position(
        self, body: str, instant: datetime, observer: Observer
    ) -> EquatorialPosition: ...

    def horizontal_altitude(
        self,
        instant: datetime,
        observer: Observer,
        right_ascension_hours: float,
        declination_deg: float,
    ) -> float: ...

    def angle_between(
        self, vector_a: Sequence[float], vector_b: Sequence[float]
    ) -> float: ...

    def search_phase(
        self,
        body: str,
        target_phase_deg: float,
        search_start: datetime,
        window_days: float,
    ) -> datetime | None: ...


@lru_cache(maxsize=None)
def _load(directory: str, filename: str):
    """Load (downloading on first use) the timescale and JPL ephemeris for a data directory."""
    loader = Loader(directory)
    return loader.timescale(), loader(filename)


class SkyfieldEphemeris:
    """EphemerisService backed by skyfield and a JPL ephemeris (DE421 by default)."""

    def __init__(
        self,
        directory: str | os.PathLike | None = None,
        filename: str = EPHEMERIS_FILE,
    ) -> None:
        self.directory = str(directory or DEFAULT_DATA_DIR)
        self.filename = filename
        self.ts, self.eph = _load(self.directory, filename)
        self.earth = self.eph["earth"]

    def time(self, instant: datetime):
        """Convert a timezone-aware datetime to a skyfield Time."""
        try:
            return self.ts.from_datetime(instant)
        except ValueError as exc:
            raise EphemerisError(f"invalid instant {instant!r}: {exc}") from exc

    def topos(self, observer: Observer):
        return wgs84.latlon(
            latitude_degrees=observer.latitude,
            longitude_degrees=observer.longitude,
            elevation_m=observer.elevation,
        )

    def _body(self, body: str):
        try:
            return self.eph[body.lower()]
        except KeyError as exc:
            raise EphemerisError(f"unknown body: {body}") from exc

    def equatorial_position(
        self, body: str, instant: datetime, observer: Observer
    ) -> EquatorialPosition:
        """Apparent topocentric RA/Dec (true equator of date) and position vector."""
        t = self.time(instant)
        ground = self.earth + self.topos(observer)
        try:
            apparent = ground.at(t).observe(self._body(body)).apparent()  # type: ignore[union-attr]
        except EphemerisRangeError as exc:
            raise EphemerisError(f"{instant.isoformat()} outside {self.filename}") from exc
        ra, dec, _ = apparent.radec(epoch="date")
        x, y, z = apparent.position.au
        return EquatorialPosition(
            right_ascension_hours=float(ra.hours),
            declination_deg=float(dec.degrees),
            vector=(float(x), float(y), float(z)),
        )

    def horizontal_altitude(
        self,
        instant: datetime,
        observer: Observer,
        right_ascension_hours: float,
        declination_deg: float,
    ) -> float:
        """Refracted altitude (degrees) of an equator-of-date position.

        The direction is rotated back to ICRS and then into the observer's
        horizon frame, the same path skyfield's ``altaz()`` takes, so the
        result matches ``apparent.altaz(temperature_C=10, pressure_mbar=1010)``.
        """
        t = self.time(instant)
        of_date = from_spherical(
            1.0, math.radians(declination_deg), math.radians(right_ascension_hours * 15.0)
        )
        horizon = mxv(self.topos(observer).rotation_at(t), mxv(t.MT, of_date))
        _, altitude, _ = to_spherical(horizon)
        return float(refract(math.degrees(altitude), _TEMPERATURE_C, _PRESSURE_MBAR))

    def angle_between(
        self, vector_a: Sequence[float], vector_b: Sequence[float]
    ) -> float:
        return math.degrees(
            float(angle_between(np.asarray(vector_a), np.asarray(vector_b)))
        )

    def search_phase(
        self,
        body: str,
        target_phase_deg: float,
        search_start: datetime,
        window_days: float,
    ) -> datetime | None:
        """First instant in [search_start, search_start + window_days] the lunar phase reaches the target.

        Phase is the sun-moon ecliptic longitude difference (0 = new moon).
        Returns None when the window holds no such instant.
        """
        if body.lower() != "moon":
            raise EphemerisError(f"phase search is only defined for the moon, not {body}")

        eph = self.eph

        def past_target(t):
            # Flips False exactly when the phase angle sweeps through the target
            return ((almanac.moon_phase(eph, t).degrees - target_phase_deg) % 360.0) >= 180.0

        past_target.step_days = 1.0  # type: ignore[attr-defined]

        t0 = self.time(search_start)
        t1 = self.time(search_start + timedelta(days=window_days))
        try:
            times, values = find_discrete(t0, t1, past_target, epsilon=_ONE_SECOND_DAYS)
        except EphemerisRangeError as exc:
            raise EphemerisError(
                f"phase search from {search_start.isoformat()} outside {self.filename}"
            ) from exc

        for t, value in zip(times, values):
            if not value:
                return t.utc_datetime()
        return None
