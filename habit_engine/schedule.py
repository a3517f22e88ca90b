from typing import Any, Dict, List

from .dates import iso_weekday, validate_date
from .errors import InvalidSchedule

SCHEDULE_KIND = "days_of_week"

WEEKDAY_NAMES = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")

PRESETS = {
    "everyday": [1, 2, 3, 4, 5, 6, 7],
    "weekdays": [1, 2, 3, 4, 5],
    "weekends": [6, 7],
}


def _weekday_number(label: str) -> int:
    return WEEKDAY_NAMES.index(label) + 1


def _make_schedule(days: List[int]) -> Dict[str, Any]:
    return {"type": SCHEDULE_KIND, "days": sorted(set(days))}


def parse_schedule_pattern(pattern: str) -> Dict[str, Any]:
    raw = pattern if isinstance(pattern, str) else ""
    text = raw.strip().lower()
    if not text:
        raise InvalidSchedule("Invalid schedule pattern")
    if text in PRESETS:
        return _make_schedule(PRESETS[text])
    parts = [part.strip() for part in text.split(",") if part.strip()]
    if not parts:
        raise InvalidSchedule(f"Invalid schedule pattern: {raw}")
    days: List[int] = []
    for part in parts:
        if part not in WEEKDAY_NAMES:
            raise InvalidSchedule(f"Invalid schedule pattern: {raw}")
        days.append(_weekday_number(part))
    return _make_schedule(days)


def validate_schedule(schedule: Any) -> Dict[str, Any]:
    if not isinstance(schedule, dict) or schedule.get("type") != SCHEDULE_KIND:
        raise InvalidSchedule("Invalid schedule")
    days = schedule.get("days")
    if not isinstance(days, list) or not days:
        raise InvalidSchedule("Invalid schedule")
    for day in days:
        if not isinstance(day, int) or isinstance(day, bool) or not 1 <= day <= 7:
            raise InvalidSchedule("Invalid schedule")
    return _make_schedule(days)


def schedule_to_string(schedule: Dict[str, Any]) -> str:
    days = sorted(set(schedule.get("days", [])))
    for name, preset in PRESETS.items():
        if days == preset:
            return name
    return ",".join(WEEKDAY_NAMES[day - 1] for day in days if 1 <= day <= 7)


def is_scheduled_on(habit: Dict[str, Any], date: str) -> bool:
    date = validate_date(date)
    if date < habit["created_date"]:
        return False
    return iso_weekday(date) in habit["schedule"]["days"]
