"""CLI entry point for a hilal report.

Edit the where/when variables at the top, then run:
    uv run python src/hilalwatch/hilalreport.py

Criteria, auto-adjust and calendar come from HILAL_* variables (see .env.example).
"""

import logging
from datetime import date

from dotenv import load_dotenv

load_dotenv()

from hilalwatch.config import load_settings  # noqa: E402
from hilalwatch.models import HilalQuery  # noqa: E402
from hilalwatch.report import run  # noqa: E402

where = "Masjid Istiqlal, Jakarta"
when = date(2025, 3, 1)

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

report = run(HilalQuery(day=when, address=where), load_settings())
print(f"{report.place_display} ({report.timezone_name})")
print(f"{report.details.day_name}, {report.details.date_string} / {report.details.hijri_label}")
print(f"Maghrib: {report.sunset.isoformat() if report.sunset else '-'}")
if report.dashboard.measurement is not None:
    m = report.dashboard.measurement
    print(f"Ijtima': {m.conjunction_time.isoformat()}  age {m.moon_age_hours:.1f} h")
print(report.dashboard.message)
print(report.adjustment.trace)
