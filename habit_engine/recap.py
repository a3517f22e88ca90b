"""Per-habit completion percentages over a named range ending today."""
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .completion import period_outcomes
from .dates import add_days, parse_date, validate_date
from .errors import UsageError
from .habits import habit_sort_key
from .stats import success_rate

RANGE_YTD = "ytd"
RANGE_MONTH = "month"
RANGE_WEEK = "week"
RANGES = (RANGE_YTD, RANGE_MONTH, RANGE_WEEK)


def compute_range_dates(range_kind: str, today: str) -> Tuple[str, str]:
    today = validate_date(today, "today")
    if range_kind == RANGE_YTD:
        return f"{parse_date(today)[0]:04d}-01-01", today
    if range_kind == RANGE_MONTH:
        return add_days(today, -29), today
    if range_kind == RANGE_WEEK:
        return add_days(today, -6), today
    raise UsageError(f"Invalid range: {range_kind}")


def _percent(rate: Optional[float]) -> Optional[int]:
    if rate is None:
        return None
    return int(rate * 100 + 0.5)


def recap_row(
    store: Dict[str, Any], habit: Dict[str, Any], range_kind: str, start: str, end: str
) -> Dict[str, Any]:
    outcomes = period_outcomes(store, habit, start, end)
    successes = sum(1 for _, ok in outcomes if ok)
    eligible = len(outcomes)
    rate = success_rate(successes, eligible)
    period = habit["target"]["period"]
    return {
        "habit_id": habit["id"],
        "name": habit["name"],
        "period": period,
        "target_label": f"{habit['target']['quantity']}/{period}",
        "target": habit["target"]["quantity"],
        "successes": successes,
        "eligible": eligible,
        "rate": rate,
        "percent": _percent(rate),
        "range": {"kind": range_kind, "from": start, "to": end},
    }


def _recap_sort_key(row: Dict[str, Any], behind_first: bool):
    percent = row["percent"]
    if percent is None:
        return (1, 0, row["name"].lower(), row["habit_id"])
    return (0, percent if behind_first else -percent, row["name"].lower(), row["habit_id"])


def build_recap(
    store: Dict[str, Any],
    habits: Sequence[Dict[str, Any]],
    range_kind: str,
    today: str,
    behind_first: bool = False,
) -> List[Dict[str, Any]]:
    start, end = compute_range_dates(range_kind, today)
    rows = [recap_row(store, h, range_kind, start, end) for h in sorted(habits, key=habit_sort_key)]
    return sorted(rows, key=lambda row: _recap_sort_key(row, behind_first))


def render_progress_bar(percent: Optional[int], width: int = 10) -> str:
    if percent is None:
        return "-" * width
    filled = min(int(percent / 100 * width + 0.5), width)
    return "█" * filled + "░" * (width - filled)
