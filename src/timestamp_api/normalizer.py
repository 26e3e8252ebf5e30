import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Dict, List, NamedTuple, Optional, Tuple

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

# Proleptic Gregorian years a rendered or parsed date may fall in.
MIN_YEAR = -262143
MAX_YEAR = 262142

SECONDS_PER_DAY = 86400

_MONTHS = [
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
]
# 1970-01-01 is a Thursday: weekday index is (days + 4) % 7
_WEEKDAYS = ["sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday"]
_DAYS_IN_MONTH = [31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31]


class InvalidDate(ValueError):
    """Input is neither an epoch-millisecond integer nor a known date layout."""

    def __init__(self, value: str = "") -> None:
        super().__init__("Invalid Date")
        self.value = value


class NormalizedDate(BaseModel):
    model_config = ConfigDict(frozen=True)

    unix: int  # epoch milliseconds
    utc: str


class CivilDate(NamedTuple):
    year: int
    month: int
    day: int


# ---- Calendar arithmetic ----
def _is_leap(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def _days_in_month(year: int, month: int) -> int:
    if month == 2 and _is_leap(year):
        return 29
    return _DAYS_IN_MONTH[month - 1]


def days_from_civil(year: int, month: int, day: int) -> int:
    """Days since 1970-01-01 for a proleptic Gregorian date."""
    y = year - 1 if month <= 2 else year
    era = y // 400
    yoe = y - era * 400
    doy = (153 * (month - 3 if month > 2 else month + 9) + 2) // 5 + day - 1
    doe = yoe * 365 + yoe // 4 - yoe // 100 + doy
    return era * 146097 + doe - 719468


def civil_from_days(days: int) -> CivilDate:
    z = days + 719468
    era = z // 146097
    doe = z - era * 146097
    yoe = (doe - doe // 1460 + doe // 36524 - doe // 146096) // 365
    doy = doe - (365 * yoe + yoe // 4 - yoe // 100)
    mp = (5 * doy + 2) // 153
    day = doy - (153 * mp + 2) // 5 + 1
    month = mp + 3 if mp < 10 else mp - 9
    year = yoe + era * 400 + (1 if month <= 2 else 0)
    return CivilDate(year, month, day)


# ---- Pattern descriptors ----
# unsigned years take up to four digits, signed ones any number
_YEAR = r"(?P<year>[+-][0-9]+|[0-9]{1,4})"
_YMD = _YEAR + r"-(?P<month>[0-9]{1,2})-(?P<day>[0-9]{1,2})"
_HMS = r"(?P<hour>[0-9]{1,2}):(?P<minute>[0-9]{1,2}):(?P<second>[0-9]{1,2})"
_FRACTION = r"(?:\.[0-9]{1,9})?"
# colon between offset hours and minutes is optional in every layout
_OFFSET = r"[+-](?P<offset_hour>[0-9]{2}):?(?P<offset_minute>[0-9]{2})"
_DOW_MON = (
    r"(?P<weekday>[A-Za-z]+) (?P<month_name>[A-Za-z]+) (?P<day>[0-9]{1,2}) " + _YEAR + " " + _HMS
)
_ZONE_IN_PARENS = r" \((?P<zone>[^)]*)\)"


class DatePattern:
    """A named textual layout that yields a calendar date or nothing."""

    def __init__(self, name: str, regex: str) -> None:
        self.name = name
        self.regex = re.compile(regex, re.ASCII)

    def parse(self, value: str) -> Optional[CivilDate]:
        match = self.regex.fullmatch(value)
        if match is None:
            return None
        fields = match.groupdict()

        if fields.get("month_name") is not None:
            month = _lookup_name(fields["month_name"], _MONTHS) + 1
        else:
            month = int(fields["month"])
        year = int(fields["year"])
        day = int(fields["day"])

        if not MIN_YEAR <= year <= MAX_YEAR or not 1 <= month <= 12:
            return None
        if not 1 <= day <= _days_in_month(year, month):
            return None
        if not _time_fields_in_range(fields):
            return None

        if fields.get("weekday") is not None:
            expected = (days_from_civil(year, month, day) + 4) % 7
            if _lookup_name(fields["weekday"], _WEEKDAYS) != expected:
                return None

        return CivilDate(year, month, day)

    def __repr__(self) -> str:
        return f"DatePattern({self.name!r})"


def _lookup_name(name: str, names: List[str]) -> int:
    """Index of a full or three-letter English name, case-insensitive; -1 if unknown."""
    lowered = name.lower()
    for i, full in enumerate(names):
        if lowered == full or lowered == full[:3]:
            return i
    return -1


def _time_fields_in_range(fields: Dict[str, Optional[str]]) -> bool:
    limits = {
        "hour": 23,
        "minute": 59,
        "second": 60,  # leap second
        "offset_hour": 23,
        "offset_minute": 59,
    }
    for key, upper in limits.items():
        raw = fields.get(key)
        if raw is not None and int(raw) > upper:
            return False
    return True


# Tried strictly in this order; the first layout that parses wins.
DATE_PATTERNS: List[DatePattern] = [
    DatePattern("YYYY-MM-DD", _YMD),
    DatePattern("YYYY-MM-DDTHH:MM:SS", _YMD + "T" + _HMS),
    DatePattern("YYYY-MM-DDTHH:MM:SS.ffffff", _YMD + "T" + _HMS + _FRACTION),
    DatePattern("YYYY-MM-DDTHH:MM:SS.ffffffZ", _YMD + "T" + _HMS + _FRACTION + "Z"),
    DatePattern("YYYY-MM-DDTHH:MM:SS.ffffff+HH:MM", _YMD + "T" + _HMS + _FRACTION + _OFFSET),
    DatePattern(
        "DD Month YYYY, TZ",
        r"(?P<day>[0-9]{1,2}) (?P<month_name>[A-Za-z]+) " + _YEAR + r", (?P<zone>\S+)",
    ),
    DatePattern("Dow Mon DD YYYY HH:MM:SS GMT+HHMM", _DOW_MON + " GMT" + _OFFSET),
    DatePattern("Dow Mon DD YYYY HH:MM:SS +HHMM", _DOW_MON + " " + _OFFSET),
    DatePattern("Dow Mon DD YYYY HH:MM:SS GMT+HH:MM (TZ)", _DOW_MON + " GMT" + _OFFSET + _ZONE_IN_PARENS),
    DatePattern("Dow Mon DD YYYY HH:MM:SS +HH:MM (TZ)", _DOW_MON + " " + _OFFSET + _ZONE_IN_PARENS),
]

_INTEGER = re.compile(r"[+-]?[0-9]+", re.ASCII)


# ---- Rendering ----
def _format_year(year: int) -> str:
    # four digits inside 0..9999, explicit sign outside
    if 0 <= year <= 9999:
        return f"{year:04d}"
    return f"{year:+05d}"


def format_epoch_seconds(seconds: int) -> str:
    """Render as 'Wed, 21 Oct 2015 07:28:00 GMT' regardless of process locale."""
    days, second_of_day = divmod(seconds, SECONDS_PER_DAY)
    civil = civil_from_days(days)
    if not MIN_YEAR <= civil.year <= MAX_YEAR:
        raise InvalidDate(str(seconds))
    hour, rest = divmod(second_of_day, 3600)
    minute, second = divmod(rest, 60)
    return "%s, %02d %s %s %02d:%02d:%02d GMT" % (
        _WEEKDAYS[(days + 4) % 7][:3].title(),
        civil.day,
        _MONTHS[civil.month - 1][:3].title(),
        _format_year(civil.year),
        hour,
        minute,
        second,
    )


def format_epoch_millis(millis: int) -> str:
    """Rendering of an epoch-millisecond value, truncated toward zero to whole seconds."""
    seconds = abs(millis) // 1000
    if millis < 0:
        seconds = -seconds
    return format_epoch_seconds(seconds)


def to_epoch_millis(moment: datetime) -> int:
    return (moment - EPOCH) // timedelta(milliseconds=1)


# ---- Public API ----
def parse_integer(value: str) -> Optional[int]:
    """Signed 64-bit integer literal, or None."""
    if not _INTEGER.fullmatch(value):
        return None
    number = int(value)
    if number < INT64_MIN or number > INT64_MAX:
        return None
    return number


def match_date(value: str) -> Optional[Tuple[DatePattern, CivilDate]]:
    """First layout in DATE_PATTERNS that parses value, with the date it yields."""
    for pattern in DATE_PATTERNS:
        parsed = pattern.parse(value)
        if parsed is not None:
            return pattern, parsed
    return None


def normalize(value: str) -> NormalizedDate:
    """
    Epoch milliseconds or a date literal -> NormalizedDate.

    Integers are taken as epoch milliseconds as-is. Anything else is tried
    against DATE_PATTERNS; only the calendar date survives, so the result
    is midnight UTC of that day even when the literal carries a time or offset.
    Raises InvalidDate when nothing matches.
    """
    millis = parse_integer(value)
    if millis is not None:
        return NormalizedDate(unix=millis, utc=format_epoch_millis(millis))

    matched = match_date(value)
    if matched is None:
        raise InvalidDate(value)
    pattern, parsed = matched
    logger.debug("matched %r with layout %s", value, pattern.name)

    midnight = days_from_civil(*parsed) * SECONDS_PER_DAY
    return NormalizedDate(unix=midnight * 1000, utc=format_epoch_seconds(midnight))


def current_time(now: Optional[datetime] = None) -> NormalizedDate:
    if now is None:
        now = datetime.now(timezone.utc)
    millis = to_epoch_millis(now)
    return NormalizedDate(unix=millis, utc=format_epoch_millis(millis))


if __name__ == "__main__":
    examples = [
        "0",
        "1445412480000",
        "253402300800000",
        "2015-10-21",
        "2015-10-21T07:28:00.123456+02:00",
        "21 October 2015, UTC",
        "Wed Oct 21 2015 07:28:00 GMT+0000 (Coordinated Universal Time)",
        "this is not a date",
    ]
    for example in examples:
        try:
            print(f"{example!r}: {normalize(example).model_dump()}")
        except InvalidDate as e:
            print(f"{example!r}: {e}")
