import re
from typing import Any, Dict, List, Optional, Tuple

from .dates import validate_date
from .errors import AmbiguousError, NotFoundError, UsageError
from .schedule import parse_schedule_pattern
from .store import DEFAULT_EXCUSE_QUOTA

PERIOD_DAY = "day"
PERIOD_WEEK = "week"
PERIODS = (PERIOD_DAY, PERIOD_WEEK)

_HABIT_ID_RE = re.compile(r"^h\d{4}$", re.ASCII)


def validate_habit_name(name: str) -> str:
    text = name.strip() if isinstance(name, str) else ""
    if not text:
        raise UsageError("Habit name is required")
    return text


def _validate_period(period: str) -> str:
    if period not in PERIODS:
        raise UsageError(f"Invalid period: {period}")
    return period


def _validate_target(target: int) -> int:
    if not isinstance(target, int) or isinstance(target, bool) or target < 1:
        raise UsageError("Invalid target")
    return target


def _validate_quota(quota: int) -> int:
    if not isinstance(quota, int) or isinstance(quota, bool) or quota < 0:
        raise UsageError("Invalid excuse quota")
    return quota


def next_habit_id(store: Dict[str, Any]) -> str:
    number = store["meta"]["next_habit_number"]
    store["meta"]["next_habit_number"] = number + 1
    return f"h{number:04d}"


def habit_sort_key(habit: Dict[str, Any]) -> Tuple[str, str]:
    return habit["name"].lower(), habit["id"]


def make_habit(
    habit_id: str,
    name: str,
    schedule_pattern: str,
    period: str,
    target: int,
    notes: Optional[str],
    today: str,
    needs_declaration: bool = False,
    excuse_quota: int = DEFAULT_EXCUSE_QUOTA,
) -> Dict[str, Any]:
    return {
        "id": habit_id,
        "name": validate_habit_name(name),
        "schedule": parse_schedule_pattern(schedule_pattern),
        "target": {"period": _validate_period(period), "quantity": _validate_target(target)},
        "notes": notes,
        "archived": False,
        "archived_date": None,
        "created_date": validate_date(today, "today"),
        "needs_declaration": bool(needs_declaration),
        "excuse_quota_per_week": _validate_quota(excuse_quota),
    }


def add_habit(
    store: Dict[str, Any],
    name: str,
    schedule_pattern: str,
    period: str,
    target: int,
    notes: Optional[str],
    today: str,
    needs_declaration: bool = False,
    excuse_quota: int = DEFAULT_EXCUSE_QUOTA,
) -> Dict[str, Any]:
    number = store["meta"]["next_habit_number"]
    habit = make_habit(
        f"h{number:04d}", name, schedule_pattern, period, target, notes, today,
        needs_declaration, excuse_quota,
    )
    next_habit_id(store)
    store["habits"].append(habit)
    return habit


def get_habit(store: Dict[str, Any], habit_id: str) -> Dict[str, Any]:
    for habit in store["habits"]:
        if habit.get("id") == habit_id:
            return habit
    raise NotFoundError(f"Habit not found: {habit_id}")


def list_habits(store: Dict[str, Any], include_archived: bool = False) -> List[Dict[str, Any]]:
    habits = [h for h in store["habits"] if include_archived or not h.get("archived")]
    return sorted(habits, key=habit_sort_key)


def select_habit(
    store: Dict[str, Any], selector: str, include_archived: bool = True
) -> Dict[str, Any]:
    text = selector.strip() if isinstance(selector, str) else ""
    if not text:
        raise UsageError("Habit selector is required")

    if _HABIT_ID_RE.match(text):
        for habit in store["habits"]:
            if habit["id"] == text and (include_archived or not habit.get("archived")):
                return habit
        raise NotFoundError(f"Habit not found: {selector}")

    prefix = text.lower()
    matches = [
        h for h in list_habits(store, include_archived)
        if h["name"].lower().startswith(prefix)
    ]
    if not matches:
        raise NotFoundError(f"Habit not found: {selector}")
    if len(matches) > 1:
        candidates = ", ".join(f"{h['id']} {h['name']}" for h in matches)
        raise AmbiguousError(f"Ambiguous selector '{selector}'. Candidates: {candidates}")
    return matches[0]


def archive_habit(store: Dict[str, Any], habit_id: str, today: str) -> Dict[str, Any]:
    habit = get_habit(store, habit_id)
    today = validate_date(today, "today")
    habit["archived"] = True
    if not habit.get("archived_date"):
        habit["archived_date"] = today
    return habit


def unarchive_habit(store: Dict[str, Any], habit_id: str) -> Dict[str, Any]:
    habit = get_habit(store, habit_id)
    habit["archived"] = False
    habit["archived_date"] = None
    return habit


def edit_habit(
    store: Dict[str, Any],
    habit_id: str,
    name: Optional[str] = None,
    schedule: Optional[str] = None,
    period: Optional[str] = None,
    target: Optional[int] = None,
    notes: Optional[str] = None,
    needs_declaration: Optional[bool] = None,
    excuse_quota: Optional[int] = None,
) -> Dict[str, Any]:
    habit = get_habit(store, habit_id)
    changes: Dict[str, Any] = {}
    if name is not None:
        changes["name"] = validate_habit_name(name)
    if schedule is not None:
        changes["schedule"] = parse_schedule_pattern(schedule)
    if period is not None or target is not None:
        changes["target"] = {
            "period": _validate_period(period if period is not None else habit["target"]["period"]),
            "quantity": _validate_target(target if target is not None else habit["target"]["quantity"]),
        }
    if notes is not None:
        changes["notes"] = notes if notes.strip() else None
    if needs_declaration is not None:
        changes["needs_declaration"] = bool(needs_declaration)
    if excuse_quota is not None:
        changes["excuse_quota_per_week"] = _validate_quota(excuse_quota)
    habit.update(changes)
    return habit
