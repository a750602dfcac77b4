"""Data model definitions — explicit boundaries between input, compute, and display layers."""

import math
from dataclasses import dataclass
from datetime import date, datetime

# MABIMS crescent visibility thresholds
MABIMS_MIN_ALTITUDE_DEG = 3.0
MABIMS_MIN_ELONGATION_DEG = 6.4


@dataclass(frozen=True)
class Observer:
    """Geographic position of the person looking for the crescent."""

    latitude: float  # Decimal degrees, north positive
    longitude: float  # Decimal degrees, east positive
    elevation: float = 0.0  # Meters above sea level


@dataclass(frozen=True)
class VisibilityCriteria:
    """Minimum crescent altitude and elongation for a sighting to count."""

    min_altitude_deg: float = MABIMS_MIN_ALTITUDE_DEG
    min_elongation_deg: float = MABIMS_MIN_ELONGATION_DEG

    def __post_init__(self) -> None:
        thresholds = (self.min_altitude_deg, self.min_elongation_deg)
        if not all(math.isfinite(v) and v >= 0 for v in thresholds):
            raise ValueError(
                "visibility thresholds must be finite and non-negative: "
                f"altitude={self.min_altitude_deg}, elongation={self.min_elongation_deg}"
            )

    def is_met(self, altitude_deg: float, elongation_deg: float) -> bool:
        return (
            altitude_deg >= self.min_altitude_deg
            and elongation_deg >= self.min_elongation_deg
        )


@dataclass(frozen=True)
class EquatorialPosition:
    """Apparent topocentric position of a body, equator and equinox of date."""

    right_ascension_hours: float  # 0-24
    declination_deg: float  # -90..90
    vector: tuple[float, float, float]  # Cartesian position (AU), for separations


@dataclass(frozen=True)
class HilalMeasurement:
    """Crescent parameters at one sunset. conjunction_time never exceeds that sunset."""

    conjunction_time: datetime  # Last ijtima' (new moon) before sunset, UTC
    moon_age_hours: float  # Hours from conjunction to sunset
    moon_altitude_deg: float  # Apparent altitude of the moon at sunset
    elongation_deg: float  # Sun-moon angular separation at sunset
    is_eligible: bool  # Both thresholds met


@dataclass(frozen=True)
class CalendarAdjustment:
    """Days to add to a date before rendering it in the tabular Hijri calendar."""

    day_offset: int
    trace: str  # Diagnostic text only


@dataclass(frozen=True)
class HijriDate:
    year: int
    month: int
    day: int

    def isoformat(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"


@dataclass(frozen=True)
class DayDetails:
    """Display strings for one Gregorian day and its (adjusted) Hijri date."""

    date_string: str  # "15 January 1995"
    day_name: str  # "Sunday"
    hijri_date: HijriDate
    hijri_label: str  # "14 Shaban 1415 AH"


@dataclass(frozen=True)
class DashboardState:
    """Either a complete measurement or a pending/error message, never both missing."""

    measurement: HilalMeasurement | None
    message: str


@dataclass(frozen=True)
class HilalQuery:
    """Raw user input for a report. Coordinates take precedence over the address."""

    day: date
    address: str = ""
    latitude: float | None = None
    longitude: float | None = None
    elevation: float = 0.0


@dataclass(frozen=True)
class HilalReport:
    """Fully computed state for one day at one place."""

    observer: Observer
    place_display: str
    timezone_name: str
    sunset: datetime | None  # Local sunset; None in polar day/night
    dashboard: DashboardState
    adjustment: CalendarAdjustment
    details: DayDetails
