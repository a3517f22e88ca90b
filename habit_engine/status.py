from typing import Any, Dict, List, Optional

from .completion import counted_quantity, is_declared, is_done_for_date, raw_quantity, week_sums
from .dates import date_range_inclusive, iso_week_end, iso_week_id, iso_week_start, validate_date
from .habits import PERIOD_DAY, list_habits
from .schedule import is_scheduled_on


def _today_row(store: Dict[str, Any], habit: Dict[str, Any], date: str) -> Dict[str, Any]:
    target = habit["target"]["quantity"]
    if habit["target"]["period"] == PERIOD_DAY:
        raw = raw_quantity(store, habit["id"], date)
        counted = counted_quantity(store, habit, date)
        done = is_done_for_date(store, habit, date)
    else:
        raw, counted = week_sums(store, habit, iso_week_start(date))
        done = counted >= target
    return {
        "id": habit["id"],
        "name": habit["name"],
        "period": habit["target"]["period"],
        "target": target,
        "quantity": counted,
        "raw_quantity": raw,
        "done": done,
        "needs_declaration": habit["needs_declaration"],
        "declared": is_declared(store, habit, date),
    }


def _week_row(store: Dict[str, Any], habit: Dict[str, Any], week_start: str) -> Dict[str, Any]:
    row: Dict[str, Any] = {
        "id": habit["id"],
        "name": habit["name"],
        "period": habit["target"]["period"],
        "needs_declaration": habit["needs_declaration"],
    }
    if habit["target"]["period"] == PERIOD_DAY:
        scheduled = [d for d in date_range_inclusive(week_start, iso_week_end(week_start))
                     if is_scheduled_on(habit, d)]
        row["scheduled_days"] = len(scheduled)
        row["done_scheduled_days"] = sum(1 for d in scheduled if is_done_for_date(store, habit, d))
    else:
        raw, counted = week_sums(store, habit, week_start)
        row["target"] = habit["target"]["quantity"]
        row["quantity"] = counted
        row["raw_quantity"] = raw
    return row


def build_status(
    store: Dict[str, Any],
    date: str,
    week_of: Optional[str] = None,
    include_archived: bool = False,
) -> Dict[str, Any]:
    date = validate_date(date)
    week_start = iso_week_start(validate_date(week_of, "week-of") if week_of else date)
    habits = list_habits(store, include_archived)

    today_rows: List[Dict[str, Any]] = [
        _today_row(store, h, date) for h in habits if is_scheduled_on(h, date)
    ]
    week_rows = [_week_row(store, h, week_start) for h in habits]

    return {
        "today": {"date": date, "habits": today_rows},
        "week": {
            "id": iso_week_id(week_start),
            "start_date": week_start,
            "end_date": iso_week_end(week_start),
            "habits": week_rows,
        },
    }
