"""Simple two-language (en/id) translation helper."""

_STRINGS: dict[str, dict[str, str]] = {
    "dashboard_pending": {
        "en": "Waiting for location and maghrib time",
        "id": "Menunggu lokasi dan waktu Maghrib",
    },
    "dashboard_error": {
        "en": "Hilal dashboard error: {error}",
        "id": "Error Dasbor: {error}",
    },
    "dashboard_status": {
        "en": "Alt: {altitude:.2f}° >= {min_altitude}° and Elong: {elongation:.2f}° >= {min_elongation}° ? {eligible}",
        "id": "Tinggi: {altitude:.2f}° >= {min_altitude}° dan Elongasi: {elongation:.2f}° >= {min_elongation}° ? {eligible}",
    },
    "eligible": {
        "en": "Maghrib meets the visibility criteria",
        "id": "Maghrib memenuhi syarat visibilitas",
    },
    "not_eligible": {
        "en": "Maghrib does not meet the visibility criteria",
        "id": "Maghrib belum memenuhi syarat visibilitas",
    },
    "hijri_suffix": {
        "en": "AH",
        "id": "H",
    },
}

_HIJRI_MONTHS: dict[str, tuple[str, ...]] = {
    "en": (
        "Muharram",
        "Safar",
        "Rabi al-Awwal",
        "Rabi al-Thani",
        "Jumada al-Awwal",
        "Jumada al-Thani",
        "Rajab",
        "Shaban",
        "Ramadan",
        "Shawwal",
        "Dhu al-Qadah",
        "Dhu al-Hijjah",
    ),
    "id": (
        "Muharram",
        "Safar",
        "Rabiul Awal",
        "Rabiul Akhir",
        "Jumadil Awal",
        "Jumadil Akhir",
        "Rajab",
        "Syaban",
        "Ramadan",
        "Syawal",
        "Zulkaidah",
        "Zulhijah",
    ),
}

_GREGORIAN_MONTHS: dict[str, tuple[str, ...]] = {
    "en": (
        "January",
        "February",
        "March",
        "April",
        "May",
        "June",
        "July",
        "August",
        "September",
        "October",
        "November",
        "December",
    ),
    "id": (
        "Januari",
        "Februari",
        "Maret",
        "April",
        "Mei",
        "Juni",
        "Juli",
        "Agustus",
        "September",
        "Oktober",
        "November",
        "Desember",
    ),
}

# Monday first, matching date.weekday()
_WEEKDAYS: dict[str, tuple[str, ...]] = {
    "en": ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"),
    "id": ("Senin", "Selasa", "Rabu", "Kamis", "Jumat", "Sabtu", "Minggu"),
}


def t(key: str, lang: str) -> str:
    """Return the translated string for key in lang.

    Falls back to 'en', then to the key itself if not found.
    """
    entry = _STRINGS.get(key)
    if entry is None:
        return key
    return entry.get(lang) or entry.get("en") or key


def hijri_month_name(month: int, lang: str) -> str:
    return _HIJRI_MONTHS.get(lang, _HIJRI_MONTHS["en"])[month - 1]


def gregorian_month_name(month: int, lang: str) -> str:
    return _GREGORIAN_MONTHS.get(lang, _GREGORIAN_MONTHS["en"])[month - 1]


def weekday_name(weekday: int, lang: str) -> str:
    return _WEEKDAYS.get(lang, _WEEKDAYS["en"])[weekday]
