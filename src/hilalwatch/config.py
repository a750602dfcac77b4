"""Runtime settings read from environment variables (call load_dotenv() first to honour a .env file)."""

import logging
import math
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from hilalwatch.calendars import CALENDAR_IDS, UMM_AL_QURA
from hilalwatch.ephemeris import DEFAULT_DATA_DIR
from hilalwatch.models import (
    MABIMS_MIN_ALTITUDE_DEG,
    MABIMS_MIN_ELONGATION_DEG,
    VisibilityCriteria,
)

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    auto_adjust: bool = False  # Infer the Hijri day offset from crescent sighting
    criteria: VisibilityCriteria = field(default_factory=VisibilityCriteria)
    calendar_id: str = UMM_AL_QURA
    ephemeris_dir: Path = DEFAULT_DATA_DIR
    lang: str = "en"


def _threshold(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("%s=%r is not a number, using %s", name, raw, default)
        return default
    if not math.isfinite(value):
        logger.warning("%s=%r is not finite, using %s", name, raw, default)
        return default
    if value < 0:
        logger.warning("%s=%r is negative, using %s", name, raw, default)
        return default
    return value


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from HILAL_* environment variables.

    Args:
        environ: Variable mapping; defaults to os.environ.

    Returns:
        Settings with defaults for anything unset or invalid.
    """
    env = os.environ if environ is None else environ

    calendar_id = env.get("HILAL_CALENDAR", UMM_AL_QURA).strip() or UMM_AL_QURA
    if calendar_id not in CALENDAR_IDS:
        logger.warning("unknown HILAL_CALENDAR=%r, using %s", calendar_id, UMM_AL_QURA)
        calendar_id = UMM_AL_QURA

    return Settings(
        auto_adjust=env.get("HILAL_AUTO_ADJUST", "").strip().lower() in _TRUTHY,
        criteria=VisibilityCriteria(
            min_altitude_deg=_threshold(env, "HILAL_MIN_ALTITUDE", MABIMS_MIN_ALTITUDE_DEG),
            min_elongation_deg=_threshold(
                env, "HILAL_MIN_ELONGATION", MABIMS_MIN_ELONGATION_DEG
            ),
        ),
        calendar_id=calendar_id,
        ephemeris_dir=Path(env.get("HILAL_EPHEMERIS_DIR") or DEFAULT_DATA_DIR),
        lang=env.get("HILAL_LANG", "en").strip() or "en",
    )
