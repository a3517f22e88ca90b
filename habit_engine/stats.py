from typing import Any, Dict, List, Optional, Sequence, Tuple

from .completion import period_outcomes
from .dates import add_days, iso_week_start, validate_date
from .errors import UsageError
from .habits import PERIOD_WEEK, habit_sort_key

DEFAULT_DAY_WINDOW = 30
DEFAULT_WEEK_WINDOW = 12


def _current_streak(outcomes: List[Tuple[str, bool]]) -> int:
    streak = 0
    for _, ok in reversed(outcomes):
        if not ok:
            break
        streak += 1
    return streak


def _longest_streak(outcomes: List[Tuple[str, bool]]) -> int:
    longest = 0
    run = 0
    for _, ok in outcomes:
        if ok:
            run += 1
            longest = max(longest, run)
        else:
            run = 0
    return longest


def success_rate(successes: int, eligible: int) -> Optional[float]:
    if eligible == 0:
        return None
    return successes / eligible


def stats_row(store: Dict[str, Any], habit: Dict[str, Any], start: str, end: str) -> Dict[str, Any]:
    outcomes = period_outcomes(store, habit, start, end)
    successes = sum(1 for _, ok in outcomes if ok)
    eligible = len(outcomes)
    return {
        "habit_id": habit["id"],
        "name": habit["name"],
        "period": habit["target"]["period"],
        "target": habit["target"]["quantity"],
        "window": {"from": start, "to": end},
        "current_streak": _current_streak(outcomes),
        "longest_streak": _longest_streak(outcomes),
        "success_rate": {
            "successes": successes,
            "eligible": eligible,
            "rate": success_rate(successes, eligible),
        },
    }


def _check_window(start: str, end: str) -> Tuple[str, str]:
    start = validate_date(start, "from")
    end = validate_date(end, "to")
    if start > end:
        raise UsageError("Invalid range: from > to")
    return start, end


def build_stats(
    store: Dict[str, Any], habits: Sequence[Dict[str, Any]], start: str, end: str
) -> List[Dict[str, Any]]:
    start, end = _check_window(start, end)
    return [stats_row(store, h, start, end) for h in sorted(habits, key=habit_sort_key)]


def default_window(habit: Dict[str, Any], end: str) -> Tuple[str, str]:
    """Last 30 days for day habits; last 12 full ISO weeks for week habits."""
    end = validate_date(end, "to")
    if habit["target"]["period"] == PERIOD_WEEK:
        last_week = iso_week_start(end)
        return add_days(last_week, -7 * (DEFAULT_WEEK_WINDOW - 1)), add_days(last_week, 6)
    return add_days(end, -(DEFAULT_DAY_WINDOW - 1)), end


def build_default_stats(
    store: Dict[str, Any], habits: Sequence[Dict[str, Any]], end: str
) -> List[Dict[str, Any]]:
    rows = []
    for habit in sorted(habits, key=habit_sort_key):
        start, stop = default_window(habit, end)
        rows.append(stats_row(store, habit, start, stop))
    return rows
