from typing import Any, Dict, List

from .completion import counted_quantity, is_done_for_date, week_sums
from .dates import iso_week_start, validate_date
from .habits import PERIOD_DAY, list_habits
from .schedule import is_scheduled_on


def build_due(store: Dict[str, Any], date: str, include_archived: bool = False) -> Dict[str, Any]:
    """Scheduled habits not yet done on ``date``, with what is left to do."""
    date = validate_date(date)
    week_start = iso_week_start(date)
    rows: List[Dict[str, Any]] = []
    for habit in list_habits(store, include_archived):
        if not is_scheduled_on(habit, date):
            continue
        target = habit["target"]["quantity"]
        if habit["target"]["period"] == PERIOD_DAY:
            counted = counted_quantity(store, habit, date)
            done = is_done_for_date(store, habit, date)
        else:
            counted = week_sums(store, habit, week_start)[1]
            done = counted >= target
        if done:
            continue
        rows.append({
            "id": habit["id"],
            "name": habit["name"],
            "period": habit["target"]["period"],
            "target": target,
            "quantity": counted,
            "remaining": max(target - counted, 0),
            "scheduled": True,
            "done": False,
        })
    return {"date": date, "due": rows, "counts": {"due": len(rows)}}
