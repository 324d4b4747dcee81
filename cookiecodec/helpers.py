"""Various helper functions"""

import datetime
import os
import re
import sys
from typing import Final, FrozenSet, Optional, Pattern

from . import hdrs

__all__ = ("DEBUG", "parse_cookie_date", "format_cookie_date")


DEBUG: Final[bool] = sys.flags.dev_mode or (
    not sys.flags.ignore_environment and bool(os.environ.get("COOKIECODEC_DEBUG"))
)


CTL: Final[FrozenSet[str]] = frozenset(chr(i) for i in range(0, 32)) | {chr(127)}
WHITESPACE: Final[str] = " \t"

# Characters forcing a name=value pair to be quoted.
# "/" and "=" are missing on purpose: base64 values such as load balancer
# cookies must go out unquoted.
SIMPLE_QUOTE_CHARS: Final[FrozenSet[str]] = frozenset(
    '\t "(),:;<>?@[\\]{}'
)
# Characters forcing any other attribute value to be quoted.
STRICT_QUOTE_CHARS: Final[FrozenSet[str]] = SIMPLE_QUOTE_CHARS | {"/", "="}


# Names a cookie can not take, a decoder would read them as attributes.
RESERVED_NAMES: Final[FrozenSet[str]] = frozenset(
    attr.lower()
    for attr in (
        hdrs.PATH,
        hdrs.DOMAIN,
        hdrs.SECURE,
        hdrs.HTTPONLY,
        hdrs.MAX_AGE,
        hdrs.EXPIRES,
        hdrs.VERSION,
        hdrs.COMMENT,
        hdrs.COMMENTURL,
        hdrs.DISCARD,
        hdrs.PORT,
    )
)


def is_valid_cookie_name(name: str) -> bool:
    """Check a cookie name once surrounding whitespace was trimmed.

    Attribute names and $-prefixed qualifier names are rejected.
    """
    if not name or name.startswith(hdrs.QUALIFIER_PREFIX):
        return False
    if name.lower() in RESERVED_NAMES:
        return False
    for ch in name:
        if ch in CTL or ch.isspace() or ch in "=;":
            return False
    return True


_DATE_TOKENS_RE: Final[Pattern[str]] = re.compile(
    r"[\x09\x20-\x2F\x3B-\x40\x5B-\x60\x7B-\x7E]*"
    r"(?P<token>[\x00-\x08\x0A-\x1F\d:a-zA-Z\x7F-\xFF]+)"
)
_DATE_HMS_TIME_RE: Final[Pattern[str]] = re.compile(r"(\d{1,2}):(\d{1,2}):(\d{1,2})")
_DATE_DAY_OF_MONTH_RE: Final[Pattern[str]] = re.compile(r"(\d{1,2})")
_DATE_MONTH_RE: Final[Pattern[str]] = re.compile(
    "(jan)|(feb)|(mar)|(apr)|(may)|(jun)|(jul)|(aug)|(sep)|(oct)|(nov)|(dec)",
    re.I,
)
_DATE_YEAR_RE: Final[Pattern[str]] = re.compile(r"(\d{2,4})")

_WEEKDAYS: Final = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS: Final = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)


def parse_cookie_date(date_str: Optional[str]) -> Optional[datetime.datetime]:
    """Implements the cookie-date algorithm of RFC 6265 section 5.1.1.

    Tokens are scanned once, the first time, day of month, month and
    year tokens win.  Two digit years are mapped as the RFC requires.

    Returns an aware UTC datetime, or None when the string is not a date.
    """
    if not date_str:
        return None

    found_time = False
    found_day_of_month = False
    found_month = False
    found_year = False

    hour = minute = second = 0
    day_of_month = 0
    month = 0
    year = 0

    for token_match in _DATE_TOKENS_RE.finditer(date_str):
        token = token_match.group("token")

        if not found_time:
            time_match = _DATE_HMS_TIME_RE.match(token)
            if time_match:
                found_time = True
                hour, minute, second = (int(s) for s in time_match.groups())
                continue

        if not found_day_of_month:
            day_of_month_match = _DATE_DAY_OF_MONTH_RE.match(token)
            if day_of_month_match:
                found_day_of_month = True
                day_of_month = int(day_of_month_match.group())
                continue

        if not found_month:
            month_match = _DATE_MONTH_RE.match(token)
            if month_match:
                found_month = True
                assert month_match.lastindex is not None
                month = month_match.lastindex
                continue

        if not found_year:
            year_match = _DATE_YEAR_RE.match(token)
            if year_match:
                found_year = True
                year = int(year_match.group())

    if 70 <= year <= 99:
        year += 1900
    elif 0 <= year <= 69:
        year += 2000

    if False in (found_day_of_month, found_month, found_year, found_time):
        return None

    if not 1 <= day_of_month <= 31:
        return None

    if year < 1601 or hour > 23 or minute > 59 or second > 59:
        return None

    try:
        return datetime.datetime(
            year, month, day_of_month, hour, minute, second, tzinfo=datetime.timezone.utc
        )
    except ValueError:
        # e.g. Feb 30
        return None


def format_cookie_date(when: datetime.datetime) -> str:
    """Format a datetime as an IMF-fixdate, locale independent."""
    if when.tzinfo is not None:
        when = when.astimezone(datetime.timezone.utc)
    return "{}, {:02d} {} {:04d} {:02d}:{:02d}:{:02d} GMT".format(
        _WEEKDAYS[when.weekday()],
        when.day,
        _MONTHS[when.month - 1],
        when.year,
        when.hour,
        when.minute,
        when.second,
    )
