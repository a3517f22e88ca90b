"""Escalating penalty debts for missed, gated habits.

Debt and action ids are derived from their content (``pd_<habit>_<YYYYMMDD>``
and ``pa_<debt>_<kind>``), so ticking a date or closing a debt again finds
the existing record instead of creating a second one.
"""
import logging
from typing import Any, Dict, List, Optional, Set

from .completion import counted_quantity, is_declared
from .dates import add_days, validate_date, validate_timestamp
from .errors import NotFoundError, UsageError
from .excuses import has_allowed_excuse
from .habits import PERIOD_DAY
from .schedule import is_scheduled_on

logger = logging.getLogger(__name__)

ACTION_RESOLVE = "resolve"
ACTION_VOID = "void"
ACTION_KINDS = (ACTION_RESOLVE, ACTION_VOID)


def _compact_date(date: str) -> str:
    return date.replace("-", "")


def next_penalty_rule_id(store: Dict[str, Any]) -> str:
    number = store["meta"]["next_penalty_rule_number"]
    store["meta"]["next_penalty_rule_number"] = number + 1
    return f"pr{number:06d}"


def debt_id_for(habit_id: str, trigger_date: str) -> str:
    return f"pd_{habit_id}_{_compact_date(trigger_date)}"


def action_id_for(debt_id: str, kind: str) -> str:
    return f"pa_{debt_id}_{kind}"


def _positive_int(value: Any, label: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or value < 1:
        raise UsageError(f"Invalid {label}")
    return value


def upsert_rule(
    store: Dict[str, Any],
    habit_id: str,
    armed_date: str,
    armed_ts: str,
    multiplier: int,
    cap: int,
    deadline_days: int = 1,
) -> Dict[str, Any]:
    armed_date = validate_date(armed_date)
    armed_ts = validate_timestamp(armed_ts)
    _positive_int(multiplier, "multiplier")
    _positive_int(cap, "cap")
    if not isinstance(deadline_days, int) or isinstance(deadline_days, bool) or deadline_days < 0:
        raise UsageError("Invalid deadline days")

    fields = {
        "multiplier": multiplier,
        "cap": cap,
        "deadline_days": deadline_days,
        "armed_date": armed_date,
        "armed_ts": armed_ts,
    }
    for rule in store["penalty_rules"]:
        if rule["habit_id"] == habit_id:
            rule.update(fields)
            logger.info("Re-armed penalty rule %s for %s", rule["id"], habit_id)
            return rule

    rule = {"id": next_penalty_rule_id(store), "habit_id": habit_id}
    rule.update(fields)
    store["penalty_rules"].append(rule)
    logger.info("Armed penalty rule %s for %s", rule["id"], habit_id)
    return rule


def closed_debt_ids(store: Dict[str, Any]) -> Set[str]:
    return {action["debt_id"] for action in store["penalty_actions"]}


def is_outstanding(store: Dict[str, Any], debt_id: str) -> bool:
    return debt_id not in closed_debt_ids(store)


def _debt_sort_key(debt: Dict[str, Any]):
    return debt["due_date"], debt["habit_id"], debt["id"]


def outstanding_debts_as_of(store: Dict[str, Any], date: str) -> List[Dict[str, Any]]:
    date = validate_date(date)
    closed = closed_debt_ids(store)
    debts = [
        dict(d) for d in store["penalty_debts"]
        if d["id"] not in closed and d["due_date"] <= date
    ]
    return sorted(debts, key=_debt_sort_key)


def penalty_status(
    store: Dict[str, Any], date: str, include_archived: bool = False
) -> List[Dict[str, Any]]:
    debts = outstanding_debts_as_of(store, date)
    if include_archived:
        return debts
    archived = {h["id"] for h in store["habits"] if h.get("archived")}
    return [d for d in debts if d["habit_id"] not in archived]


def _carry_in_debt(
    store: Dict[str, Any], habit_id: str, date: str, closed: Set[str]
) -> Optional[Dict[str, Any]]:
    candidates = [
        d for d in store["penalty_debts"]
        if d["habit_id"] == habit_id and d["due_date"] == date and d["id"] not in closed
    ]
    if not candidates:
        return None
    return max(candidates, key=lambda d: d["quantity"])


def tick(
    store: Dict[str, Any], date: str, ts: str, include_archived: bool = False
) -> List[Dict[str, Any]]:
    """Evaluate ``date`` for every armed day habit and return the debts created."""
    date = validate_date(date)
    ts = validate_timestamp(ts)
    rules = {rule["habit_id"]: rule for rule in store["penalty_rules"]}
    closed = closed_debt_ids(store)
    existing = {debt["id"] for debt in store["penalty_debts"]}
    created: List[Dict[str, Any]] = []

    for habit in store["habits"]:
        if habit.get("archived") and not include_archived:
            continue
        if habit["target"]["period"] != PERIOD_DAY:
            continue
        rule = rules.get(habit["id"])
        if rule is None or not is_scheduled_on(habit, date):
            continue
        if has_allowed_excuse(store, habit["id"], date):
            logger.debug("Tick %s: %s excused", date, habit["id"])
            continue

        target = habit["target"]["quantity"]
        habit_done = is_declared(store, habit, date) and counted_quantity(store, habit, date) >= target
        carry_in = _carry_in_debt(store, habit["id"], date, closed)
        if habit_done and carry_in is None:
            continue

        debt_id = debt_id_for(habit["id"], date)
        if debt_id in existing:
            logger.debug("Tick %s: %s already exists", date, debt_id)
            continue

        base = max(carry_in["quantity"], target) if carry_in is not None else target
        debt = {
            "id": debt_id,
            "habit_id": habit["id"],
            "trigger_date": date,
            "due_date": add_days(date, 1),
            "quantity": min(base * rule["multiplier"], rule["cap"]),
            "rule_id": rule["id"],
            "created_date": date,
            "created_ts": ts,
        }
        store["penalty_debts"].append(debt)
        existing.add(debt_id)
        created.append(debt)
        logger.info("Created penalty debt %s (qty %d, due %s)",
                    debt_id, debt["quantity"], debt["due_date"])

    return sorted(created, key=lambda d: d["id"])


def resolve_or_void(
    store: Dict[str, Any], debt_id: str, kind: str, date: str, ts: str, reason: str
) -> Dict[str, Any]:
    date = validate_date(date)
    ts = validate_timestamp(ts)
    if kind not in ACTION_KINDS:
        raise UsageError(f"Invalid penalty action: {kind}")
    text = reason.strip() if isinstance(reason, str) else ""
    if not text:
        raise UsageError("Reason is required")
    if not any(d["id"] == debt_id for d in store["penalty_debts"]):
        raise NotFoundError(f"Penalty debt not found: {debt_id}")

    # The first action recorded for a debt wins, whatever its kind.
    for action in store["penalty_actions"]:
        if action["debt_id"] == debt_id:
            return action

    action = {
        "id": action_id_for(debt_id, kind),
        "debt_id": debt_id,
        "kind": kind,
        "date": date,
        "ts": ts,
        "reason": text,
    }
    store["penalty_actions"].append(action)
    logger.info("Recorded %s for %s", kind, debt_id)
    return action


def resolve(store: Dict[str, Any], debt_id: str, date: str, ts: str, reason: str) -> Dict[str, Any]:
    return resolve_or_void(store, debt_id, ACTION_RESOLVE, date, ts, reason)


def void(store: Dict[str, Any], debt_id: str, date: str, ts: str, reason: str) -> Dict[str, Any]:
    return resolve_or_void(store, debt_id, ACTION_VOID, date, ts, reason)
