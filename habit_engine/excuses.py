"""Excused absences with a per-habit weekly quota.

An ``allowed`` request made after the week's quota is used up is recorded as
``denied``. The stored kind is what the penalty engine sees, so the downgrade
is decided once, at write time.
"""
import logging
from typing import Any, Dict, Tuple

from .dates import iso_week_end, iso_week_start, validate_date, validate_timestamp
from .errors import UsageError

logger = logging.getLogger(__name__)

EXCUSE_ALLOWED = "allowed"
EXCUSE_DENIED = "denied"
EXCUSE_KINDS = (EXCUSE_ALLOWED, EXCUSE_DENIED)


def next_excuse_id(store: Dict[str, Any]) -> str:
    number = store["meta"]["next_excuse_number"]
    store["meta"]["next_excuse_number"] = number + 1
    return f"e{number:06d}"


def allowed_excuses_used_in_week(store: Dict[str, Any], habit_id: str, date: str) -> int:
    week_start = iso_week_start(date)
    week_end = iso_week_end(week_start)
    return sum(
        1
        for e in store["excuses"]
        if e["habit_id"] == habit_id
        and e["kind"] == EXCUSE_ALLOWED
        and week_start <= e["date"] <= week_end
    )


def excuse(
    store: Dict[str, Any],
    habit_id: str,
    date: str,
    ts: str,
    kind: str,
    reason: str,
    quota_per_week: int,
) -> Tuple[Dict[str, Any], int, int]:
    date = validate_date(date)
    ts = validate_timestamp(ts)
    if kind not in EXCUSE_KINDS:
        raise UsageError(f"Invalid excuse kind: {kind}")
    text = reason.strip() if isinstance(reason, str) else ""
    if not text:
        raise UsageError("Excuse reason is required")

    used = allowed_excuses_used_in_week(store, habit_id, date)
    remaining = max(quota_per_week - used, 0)
    stored_kind = kind
    if kind == EXCUSE_ALLOWED and remaining == 0:
        stored_kind = EXCUSE_DENIED
        logger.info("Excuse quota exhausted for %s in week of %s; recording as denied",
                    habit_id, iso_week_start(date))

    record = {
        "id": next_excuse_id(store),
        "habit_id": habit_id,
        "date": date,
        "ts": ts,
        "kind": stored_kind,
        "reason": text,
    }
    store["excuses"].append(record)

    if stored_kind == EXCUSE_ALLOWED:
        used += 1
    return record, used, max(quota_per_week - used, 0)


def has_allowed_excuse(store: Dict[str, Any], habit_id: str, date: str) -> bool:
    return any(
        e["habit_id"] == habit_id and e["date"] == date and e["kind"] == EXCUSE_ALLOWED
        for e in store["excuses"]
    )
