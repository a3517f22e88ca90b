"""What counts toward completion.

Raw check-in quantities pass through the declaration gate to become the
*counted* quantity; every downstream view (status, due, stats, recap, the
penalty tick) reads counted quantities only.
"""
from typing import Any, Dict, List, Tuple

from .checkins import get_quantity
from .dates import date_range_inclusive, iso_week_end, week_starts_inclusive
from .declarations import has_declaration
from .habits import PERIOD_DAY
from .schedule import is_scheduled_on


def raw_quantity(store: Dict[str, Any], habit_id: str, date: str) -> int:
    return get_quantity(store, habit_id, date)


def is_declared(store: Dict[str, Any], habit: Dict[str, Any], date: str) -> bool:
    if not habit.get("needs_declaration"):
        return True
    return has_declaration(store, habit["id"], date)


def counted_quantity(store: Dict[str, Any], habit: Dict[str, Any], date: str) -> int:
    if not is_declared(store, habit, date):
        return 0
    return get_quantity(store, habit["id"], date)


def is_done_for_date(store: Dict[str, Any], habit: Dict[str, Any], date: str) -> bool:
    return (
        is_declared(store, habit, date)
        and counted_quantity(store, habit, date) >= habit["target"]["quantity"]
    )


def week_sums(store: Dict[str, Any], habit: Dict[str, Any], week_start: str) -> Tuple[int, int]:
    """Return ``(raw, counted)`` sums for the ISO week, ignoring days before creation."""
    raw_sum = 0
    counted_sum = 0
    for day in date_range_inclusive(week_start, iso_week_end(week_start)):
        if day < habit["created_date"]:
            continue
        raw_sum += get_quantity(store, habit["id"], day)
        counted_sum += counted_quantity(store, habit, day)
    return raw_sum, counted_sum


def is_done_for_week(store: Dict[str, Any], habit: Dict[str, Any], week_start: str) -> bool:
    return week_sums(store, habit, week_start)[1] >= habit["target"]["quantity"]


def period_outcomes(
    store: Dict[str, Any], habit: Dict[str, Any], start: str, end: str
) -> List[Tuple[str, bool]]:
    """Eligible periods in ``[start, end]`` in order, each with its success flag.

    Day habits yield their scheduled days. Week habits yield the ISO weeks
    overlapping the window that end on or after the habit's creation date,
    labelled by their Monday.
    """
    if habit["target"]["period"] == PERIOD_DAY:
        return [
            (day, is_done_for_date(store, habit, day))
            for day in date_range_inclusive(start, end)
            if is_scheduled_on(habit, day)
        ]
    return [
        (week_start, is_done_for_week(store, habit, week_start))
        for week_start in week_starts_inclusive(start, end)
        if iso_week_end(week_start) >= habit["created_date"]
    ]
