"""Calendar arithmetic on naive ``YYYY-MM-DD`` strings.

Dates are converted to a linear day count (days since 1970-01-01) with
Howard Hinnant's civil-calendar algorithms, which are exact for the whole
proleptic Gregorian calendar, year 0000 included. Date strings are limited
to years 0000..9999.
"""
import re
from datetime import datetime, timedelta, timezone
from typing import Iterator, Tuple

from .errors import InvalidDate, UsageError

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$", re.ASCII)
_TIMESTAMP_RE = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})[Tt ](\d{2}):(\d{2}):(\d{2})(\.\d+)?"
    r"(?:([Zz])|([+-])(\d{2}):(\d{2}))$",
    re.ASCII,
)

_DAYS_IN_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


def is_leap_year(year: int) -> bool:
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def days_in_month(year: int, month: int) -> int:
    if month == 2 and is_leap_year(year):
        return 29
    return _DAYS_IN_MONTH[month - 1]


def is_valid_date(year: int, month: int, day: int) -> bool:
    if not 1 <= month <= 12:
        return False
    return 1 <= day <= days_in_month(year, month)


def days_from_civil(year: int, month: int, day: int) -> int:
    year -= 1 if month <= 2 else 0
    era = year // 400
    yoe = year - era * 400
    mp = (month + 9) % 12
    doy = (153 * mp + 2) // 5 + day - 1
    doe = yoe * 365 + yoe // 4 - yoe // 100 + doy
    return era * 146097 + doe - 719468


def civil_from_days(days: int) -> Tuple[int, int, int]:
    z = days + 719468
    era = z // 146097
    doe = z - era * 146097
    yoe = (doe - doe // 1460 + doe // 36524 - doe // 146096) // 365
    doy = doe - (365 * yoe + yoe // 4 - yoe // 100)
    mp = (5 * doy + 2) // 153
    day = doy - (153 * mp + 2) // 5 + 1
    month = mp + 3 if mp < 10 else mp - 9
    year = yoe + era * 400 + (1 if month <= 2 else 0)
    return year, month, day


def format_date(year: int, month: int, day: int) -> str:
    # Date strings cover years 0000..9999 only.
    if not 0 <= year <= 9999:
        raise InvalidDate(f"Date out of range: year {year}")
    return f"{year:04d}-{month:02d}-{day:02d}"


def parse_date(value: str, label: str = "date") -> Tuple[int, int, int]:
    text = value.strip() if isinstance(value, str) else ""
    if not _DATE_RE.match(text):
        raise InvalidDate(f"Invalid {label}: {value}")
    year, month, day = int(text[0:4]), int(text[5:7]), int(text[8:10])
    if not is_valid_date(year, month, day):
        raise InvalidDate(f"Invalid {label}: {value}")
    return year, month, day


def validate_date(value: str, label: str = "date") -> str:
    return format_date(*parse_date(value, label))


def to_day_number(value: str, label: str = "date") -> int:
    return days_from_civil(*parse_date(value, label))


def from_day_number(days: int) -> str:
    return format_date(*civil_from_days(days))


def add_days(value: str, delta: int) -> str:
    return from_day_number(to_day_number(value) + delta)


def days_between(start: str, end: str) -> int:
    return to_day_number(end) - to_day_number(start)


def iso_weekday(value: str) -> int:
    """ISO weekday number, Monday=1 .. Sunday=7."""
    return (to_day_number(value) + 3) % 7 + 1


def iso_week_start(value: str) -> str:
    return add_days(value, -(iso_weekday(value) - 1))


def iso_week_end(value: str) -> str:
    return add_days(iso_week_start(value), 6)


def iso_week_id(week_start: str) -> str:
    # The week belongs to the year holding its Thursday; week 1 holds Jan 4.
    monday = iso_week_start(week_start)
    thursday = add_days(monday, 3)
    week_year = civil_from_days(to_day_number(thursday))[0]
    week1_monday = iso_week_start(format_date(week_year, 1, 4))
    week = 1 + days_between(week1_monday, monday) // 7
    return f"{week_year:04d}-W{week:02d}"


class DateRange:
    """Inclusive, restartable range of date strings."""

    def __init__(self, start: str, end: str, step: int = 1) -> None:
        self.start = validate_date(start, "from")
        self.end = validate_date(end, "to")
        if self.start > self.end:
            raise UsageError("Invalid range: from > to")
        self.step = step
        self._first = to_day_number(self.start)
        self._last = to_day_number(self.end)

    def __iter__(self) -> Iterator[str]:
        for days in range(self._first, self._last + 1, self.step):
            yield from_day_number(days)

    def __reversed__(self) -> Iterator[str]:
        for days in reversed(range(self._first, self._last + 1, self.step)):
            yield from_day_number(days)

    def __len__(self) -> int:
        return len(range(self._first, self._last + 1, self.step))

    def __repr__(self) -> str:
        return f"DateRange({self.start!r}, {self.end!r}, step={self.step})"


def date_range_inclusive(start: str, end: str) -> DateRange:
    return DateRange(start, end)


def week_starts_inclusive(from_week_start: str, to_week_start: str) -> DateRange:
    return DateRange(iso_week_start(from_week_start), iso_week_start(to_week_start), step=7)


def today() -> str:
    return datetime.now(timezone.utc).date().isoformat()


def validate_timestamp(value: str, label: str = "ts") -> str:
    text = value.strip() if isinstance(value, str) else ""
    if not text:
        raise UsageError(f"Invalid {label}: (empty)")
    match = _TIMESTAMP_RE.match(text)
    if not match:
        raise UsageError(f"Invalid {label}: {value}")
    year, month, day, hour, minute, second = (int(match.group(i)) for i in range(1, 7))
    try:
        offset = timedelta(0)
        if match.group(9):
            off_hours, off_minutes = int(match.group(10)), int(match.group(11))
            if off_hours > 23 or off_minutes > 59:
                raise ValueError("offset out of range")
            offset = timedelta(hours=off_hours, minutes=off_minutes)
            if match.group(9) == "-":
                offset = -offset
        datetime(year, month, day, hour, minute, second, tzinfo=timezone(offset))
    except ValueError:
        raise UsageError(f"Invalid {label}: {value}") from None
    return text
