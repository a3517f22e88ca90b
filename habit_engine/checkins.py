from typing import Any, Collection, Dict, List, Optional

from .dates import validate_date
from .errors import UsageError

MODE_ADD = "add"
MODE_SET = "set"
MODE_DELETE = "delete"


def _find_index(store: Dict[str, Any], habit_id: str, date: str) -> Optional[int]:
    for idx, checkin in enumerate(store["checkins"]):
        if checkin["habit_id"] == habit_id and checkin["date"] == date:
            return idx
    return None


def get_quantity(store: Dict[str, Any], habit_id: str, date: str) -> int:
    idx = _find_index(store, habit_id, date)
    return 0 if idx is None else store["checkins"][idx]["quantity"]


def set_quantity(store: Dict[str, Any], habit_id: str, date: str, quantity: int) -> int:
    date = validate_date(date)
    if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 0:
        raise UsageError("Invalid quantity")
    idx = _find_index(store, habit_id, date)
    if quantity == 0:
        if idx is not None:
            del store["checkins"][idx]
        return 0
    if idx is None:
        store["checkins"].append({"habit_id": habit_id, "date": date, "quantity": quantity})
    else:
        store["checkins"][idx]["quantity"] = quantity
    return quantity


def add_quantity(store: Dict[str, Any], habit_id: str, date: str, delta: int) -> int:
    date = validate_date(date)
    if not isinstance(delta, int) or isinstance(delta, bool) or delta < 1:
        raise UsageError("Invalid quantity")
    return set_quantity(store, habit_id, date, get_quantity(store, habit_id, date) + delta)


def checkin(
    store: Dict[str, Any], habit_id: str, date: str, mode: str = MODE_ADD, quantity: int = 1
) -> Dict[str, Any]:
    date = validate_date(date)
    if mode == MODE_DELETE:
        total = set_quantity(store, habit_id, date, 0)
        delta = None
    elif mode == MODE_SET:
        total = set_quantity(store, habit_id, date, quantity)
        delta = None
    elif mode == MODE_ADD:
        total = add_quantity(store, habit_id, date, quantity)
        delta = quantity
    else:
        raise UsageError(f"Invalid check-in mode: {mode}")
    return {
        "habit_id": habit_id,
        "date": date,
        "action": mode,
        "delta": delta,
        "quantity": total,
    }


def _checkin_sort_key(item: Dict[str, Any]):
    return item["date"], item["habit_id"]


def list_checkins_for_habit(store: Dict[str, Any], habit_id: str) -> List[Dict[str, Any]]:
    items = [dict(c) for c in store["checkins"] if c["habit_id"] == habit_id]
    return sorted(items, key=_checkin_sort_key)


def list_checkins_in_range(
    store: Dict[str, Any],
    start: Optional[str] = None,
    end: Optional[str] = None,
    habit_ids: Optional[Collection[str]] = None,
) -> List[Dict[str, Any]]:
    items = []
    for item in store["checkins"]:
        if habit_ids is not None and item["habit_id"] not in habit_ids:
            continue
        if start is not None and item["date"] < start:
            continue
        if end is not None and item["date"] > end:
            continue
        items.append(dict(item))
    return sorted(items, key=_checkin_sort_key)
