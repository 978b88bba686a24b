"""Clock and locale helpers.

Language is resolved by prefix (`ar*` → Arabic, anything else → English).
Timestamps use the configured IANA zone (TIMEZONE, then TZ, default
Africa/Cairo). Dates on the documents are rendered DD-MM-YYYY, reservation
dates DD/MM/YYYY.
"""

from __future__ import annotations

import logging
import re
from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil import parser as date_parser

from uptown_docs.config import DEFAULT_TIMEZONE, settings

logger = logging.getLogger(__name__)

ARABIC = "ar"
ENGLISH = "en"

DAY_NAMES_EN = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")
DAY_NAMES_AR = ("الأحد", "الاثنين", "الثلاثاء", "الأربعاء", "الخميس", "الجمعة", "السبت")

_DMY_HYPHEN = re.compile(r"^\d{2}-\d{2}-\d{4}$")
_DMY_SLASH = re.compile(r"^(\d{2})/(\d{2})/(\d{4})$")


# ── Language ─────────────────────────────────────────────────────────


def resolve_language(value: object) -> str:
    """`ar` for any input starting with "ar" (case-insensitive), else `en`."""
    text = str(value or "").strip().lower()
    return ARABIC if text.startswith(ARABIC) else ENGLISH


def direction(lang: str) -> str:
    return "rtl" if lang == ARABIC else "ltr"


def is_rtl(lang: str) -> bool:
    return lang == ARABIC


# ── Clock ────────────────────────────────────────────────────────────


def local_zone() -> ZoneInfo:
    """Configured zone; unknown names fall back to Africa/Cairo."""
    name = settings.locale.timezone
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r, falling back to %s", name, DEFAULT_TIMEZONE)
        return ZoneInfo(DEFAULT_TIMEZONE)


def now_local() -> datetime:
    return datetime.now(local_zone())


def cairo_timestamp(moment: datetime | None = None) -> str:
    """Wall-clock `DD-MM-YYYY HH:mm:ss` (24h) in the configured zone."""
    moment = moment or datetime.now(UTC)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(local_zone()).strftime("%d-%m-%Y %H:%M:%S")


def today_iso() -> str:
    return now_local().date().isoformat()


# ── Dates ────────────────────────────────────────────────────────────


def parse_instant(value: object) -> datetime | None:
    """Parse a date, datetime or free-form date string into an aware datetime.

    Strings go through dateutil, so ISO, `2024/07/15`, `July 15, 2024` and
    RFC 1123 all parse. Naive values are taken as UTC. Returns None when the
    value is empty or unparseable.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            parsed = date_parser.parse(text)
        except (ValueError, OverflowError):
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def format_date_dmy(value: object) -> str:
    """Render a date as `DD-MM-YYYY`.

    Already-formatted `DD-MM-YYYY` passes through. Bare ISO dates keep their
    calendar day; instants with an offset are shown in the local zone. Any
    other three-part hyphenated string is reversed; everything else passes
    through unchanged.
    """
    if value is None:
        return ""
    if isinstance(value, datetime | date):
        text = value.isoformat()
    else:
        text = str(value).strip()
    if not text:
        return ""
    if _DMY_HYPHEN.match(text):
        return text

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        parts = text.split("-")
        if len(parts) == 3:
            return f"{parts[2]}-{parts[1]}-{parts[0]}"
        return text

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(local_zone())
    return parsed.strftime("%d-%m-%Y")


def format_utc_dmy_slash(value: object) -> str | None:
    """UTC calendar day of `value` as `DD/MM/YYYY`, or None if unparseable."""
    parsed = parse_instant(value)
    if parsed is None:
        return None
    return parsed.astimezone(UTC).strftime("%d/%m/%Y")


def match_dmy_slash(value: str) -> tuple[str, str, str] | None:
    """`(dd, mm, yyyy)` when `value` is literally `DD/MM/YYYY`."""
    m = _DMY_SLASH.match(value)
    return (m.group(1), m.group(2), m.group(3)) if m else None


def day_of_week(iso_date: str, lang: str) -> str:
    """Localized weekday of a `YYYY-MM-DD` string; "" when it is not a real date."""
    try:
        d = date.fromisoformat(iso_date)
    except ValueError:
        return ""
    names = DAY_NAMES_AR if lang == ARABIC else DAY_NAMES_EN
    # Sunday-first table; Python's weekday() is Monday-first.
    return names[(d.weekday() + 1) % 7]
