import logging
import re
from datetime import datetime, timezone
from typing import Optional

from dateutil import tz
from dateutil.parser import parse as _dateutil_parse

logger = logging.getLogger(__name__)

# Common US timezone abbreviations, avoids UnknownTimezoneWarning
_TZINFOS = {
    "CST": tz.gettz("America/Chicago"),
    "CDT": tz.gettz("America/Chicago"),
    "EST": tz.gettz("America/New_York"),
    "EDT": tz.gettz("America/New_York"),
    "MST": tz.gettz("America/Denver"),
    "MDT": tz.gettz("America/Denver"),
    "PST": tz.gettz("America/Los_Angeles"),
    "PDT": tz.gettz("America/Los_Angeles"),
}

# Accepted year range is [MIN_YEAR, current year + MAX_FUTURE_YEARS]
MIN_YEAR = -10000
MAX_FUTURE_YEARS = 20

# "Last updated on:", "Originally published at", ...
_LONG_PREFIX_RE = re.compile(
    r"^(?:last|first|posted|originally)\s*(?:published|updated|date|posted|modified)\s*(?:on|at)?[:\s]*",
    re.IGNORECASE,
)
# "Published:", "Updated on", "Date:" ...
_SHORT_PREFIX_RE = re.compile(
    r"^(?:published|updated|date|posted|modified)\s*(?:on|at)?[:\s]*",
    re.IGNORECASE,
)
# Everything from "(Updated)", "| News", "by Admin" or "- 5 min read" on is noise
_SUFFIX_CUT_RE = re.compile(r"[(|]|by\s+|[-–—]\s*\d+\s*min", re.IGNORECASE)

# ISO 8601 expanded years ("-20000-01-01"); datetime only holds years 1..9999
_SIGNED_YEAR_RE = re.compile(r"^[-+]\d{4,}-")


def clean_date_string(value: str) -> str:
    """
    Strip byline boilerplate around a date.
    Examples: 'Published on: 2024-01-20' -> '2024-01-20',
              'Jan 5, 2024 | Sports' -> 'Jan 5, 2024'
    """
    cleaned = value.strip()
    cleaned = _LONG_PREFIX_RE.sub("", cleaned, count=1)
    cleaned = _SHORT_PREFIX_RE.sub("", cleaned, count=1)
    return _SUFFIX_CUT_RE.split(cleaned, maxsplit=1)[0].strip()


def normalize_date(value: Optional[str]) -> Optional[str]:
    """
    Normalize a date-ish string into a UTC ISO 8601 timestamp.

    Handles ISO 8601, RFC 2822 and common English forms after removing
    prefixes such as "Updated on:" and trailing noise. Strings without a
    timezone are read as UTC. Years outside the plausibility window are
    rejected.

    Args:
        value: Raw date string (or None)

    Returns:
        e.g. "2024-01-20T00:00:00.000Z", or None if the value is not a usable date
    """
    if not value:
        return None

    cleaned = clean_date_string(value)
    if not cleaned or not any(ch.isdigit() for ch in cleaned):
        return None
    if _SIGNED_YEAR_RE.match(cleaned):
        return None

    now = datetime.now(timezone.utc)
    try:
        parsed = _dateutil_parse(cleaned, default=datetime(now.year, 1, 1), tzinfos=_TZINFOS)
        # A year has to come from the string itself, not from the default
        other = _dateutil_parse(cleaned, default=datetime(now.year - 1, 1, 1), tzinfos=_TZINFOS)
        if parsed.year != other.year:
            logger.debug("No year in %r", cleaned)
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        parsed = parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError) as e:
        # dateutil's ParserError is a ValueError
        logger.debug("Unparseable date %r: %s", cleaned, e)
        return None

    if not MIN_YEAR <= parsed.year <= now.year + MAX_FUTURE_YEARS:
        logger.debug("Implausible year %d in %r", parsed.year, value)
        return None

    return format_utc(parsed)


def format_utc(moment: datetime) -> str:
    """Format an aware datetime as YYYY-MM-DDTHH:MM:SS.mmmZ."""
    utc = moment.astimezone(timezone.utc).replace(tzinfo=None)
    return utc.isoformat(timespec="milliseconds") + "Z"
