from typing import Any, Dict, List, Optional

from .checkins import list_checkins_in_range
from .dates import validate_date
from .errors import UsageError
from .habits import list_habits
from .schedule import schedule_to_string

EXPORT_VERSION = 1

HABITS_CSV_COLUMNS = (
    "id",
    "name",
    "schedule",
    "period",
    "target",
    "notes",
    "archived",
    "created_date",
    "archived_date",
)
CHECKINS_CSV_COLUMNS = ("habit_id", "date", "quantity")


def build_export(
    store: Dict[str, Any],
    start: Optional[str] = None,
    end: Optional[str] = None,
    include_archived: bool = False,
) -> Dict[str, Any]:
    if start is not None:
        start = validate_date(start, "from")
    if end is not None:
        end = validate_date(end, "to")
    if start is not None and end is not None and start > end:
        raise UsageError("Invalid range: from > to")
    habits = list_habits(store, include_archived)
    habit_ids = {h["id"] for h in habits}
    return {
        "version": EXPORT_VERSION,
        "habits": habits,
        "checkins": list_checkins_in_range(store, start, end, habit_ids),
    }


def habit_csv_row(habit: Dict[str, Any]) -> List[str]:
    return [
        habit["id"],
        habit["name"],
        schedule_to_string(habit["schedule"]),
        habit["target"]["period"],
        str(habit["target"]["quantity"]),
        habit.get("notes") or "",
        "true" if habit.get("archived") else "false",
        habit["created_date"],
        habit.get("archived_date") or "",
    ]


def checkin_csv_row(checkin: Dict[str, Any]) -> List[str]:
    return [checkin["habit_id"], checkin["date"], str(checkin["quantity"])]
