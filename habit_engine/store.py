"""JSON store with a create-only lock file and atomic rewrite."""
import json
import logging
import os
import tempfile
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, TypeVar

from .dates import validate_date
from .errors import HabitError, IsLockedError, StoreError, UsageError
from .schedule import validate_schedule

logger = logging.getLogger(__name__)

STORE_VERSION = 1
DEFAULT_EXCUSE_QUOTA = 2

COUNTERS = (
    "next_habit_number",
    "next_declaration_number",
    "next_excuse_number",
    "next_penalty_rule_number",
)
COLLECTIONS = (
    "habits",
    "checkins",
    "declarations",
    "excuses",
    "penalty_rules",
    "penalty_debts",
    "penalty_actions",
)

T = TypeVar("T")


def default_store() -> Dict[str, Any]:
    store: Dict[str, Any] = {
        "version": STORE_VERSION,
        "meta": {name: 1 for name in COUNTERS},
    }
    for name in COLLECTIONS:
        store[name] = []
    return store


def _is_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value)


def _is_int(value: Any, minimum: int) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= minimum


def _is_date(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        validate_date(value)
    except HabitError:
        return False
    return True


def _is_schedule(value: Any) -> bool:
    try:
        validate_schedule(value)
    except HabitError:
        return False
    return True


def _is_target(value: Any) -> bool:
    return (
        isinstance(value, dict)
        and value.get("period") in ("day", "week")
        and _is_int(value.get("quantity"), 1)
    )


def _is_optional_text(value: Any) -> bool:
    return value is None or isinstance(value, str)


def _is_optional_date(value: Any) -> bool:
    return value is None or _is_date(value)


# Required fields of each record kind and the check each value must pass.
RECORD_FIELDS: Dict[str, Dict[str, Callable[[Any], bool]]] = {
    "habits": {
        "id": _is_text,
        "name": _is_text,
        "schedule": _is_schedule,
        "target": _is_target,
        "created_date": _is_date,
        "notes": _is_optional_text,
        "archived": lambda v: isinstance(v, bool),
        "archived_date": _is_optional_date,
    },
    "checkins": {
        "habit_id": _is_text,
        "date": _is_date,
        "quantity": lambda v: _is_int(v, 0),
    },
    "declarations": {
        "id": _is_text,
        "habit_id": _is_text,
        "date": _is_date,
        "ts": _is_text,
        "text": _is_text,
    },
    "excuses": {
        "id": _is_text,
        "habit_id": _is_text,
        "date": _is_date,
        "ts": _is_text,
        "kind": lambda v: v in ("allowed", "denied"),
        "reason": _is_text,
    },
    "penalty_rules": {
        "id": _is_text,
        "habit_id": _is_text,
        "multiplier": lambda v: _is_int(v, 1),
        "cap": lambda v: _is_int(v, 1),
        "deadline_days": lambda v: _is_int(v, 0),
        "armed_date": _is_date,
        "armed_ts": _is_text,
    },
    "penalty_debts": {
        "id": _is_text,
        "habit_id": _is_text,
        "trigger_date": _is_date,
        "due_date": _is_date,
        "quantity": lambda v: _is_int(v, 1),
        "rule_id": _is_text,
        "created_date": _is_date,
        "created_ts": _is_text,
    },
    "penalty_actions": {
        "id": _is_text,
        "debt_id": _is_text,
        "kind": lambda v: v in ("resolve", "void"),
        "date": _is_date,
        "ts": _is_text,
        "reason": _is_text,
    },
}


def _check_records(name: str, items: List[Dict[str, Any]]) -> None:
    for item in items:
        for field, check in RECORD_FIELDS[name].items():
            if field not in item or not check(item[field]):
                logger.warning("Bad %s record: field %r is missing or invalid", name, field)
                raise StoreError("DB corrupted")


def _normalize_habit(habit: Dict[str, Any]) -> Dict[str, Any]:
    habit.setdefault("notes", None)
    habit.setdefault("archived", False)
    habit.setdefault("archived_date", None)
    if not isinstance(habit.get("needs_declaration"), bool):
        habit["needs_declaration"] = False
    quota = habit.get("excuse_quota_per_week")
    if not isinstance(quota, int) or isinstance(quota, bool) or quota < 0:
        habit["excuse_quota_per_week"] = DEFAULT_EXCUSE_QUOTA
    return habit


def normalize_store(data: Any) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise StoreError("DB corrupted")
    meta = data.get("meta")
    if not isinstance(meta, dict):
        raise StoreError("DB corrupted")
    for name in COUNTERS:
        meta.setdefault(name, 1)
    for name in COLLECTIONS:
        items = data.setdefault(name, [])
        if not isinstance(items, list) or not all(isinstance(i, dict) for i in items):
            raise StoreError("DB corrupted")
    for habit in data["habits"]:
        _normalize_habit(habit)
    for name in COLLECTIONS:
        _check_records(name, data[name])
    return data


def validate_store(store: Dict[str, Any]) -> None:
    if store.get("version") != STORE_VERSION:
        raise StoreError("DB corrupted")
    meta = store.get("meta")
    if not isinstance(meta, dict):
        raise StoreError("DB corrupted")
    for name in COUNTERS:
        value = meta.get(name)
        if not isinstance(value, int) or isinstance(value, bool) or value < 1:
            raise StoreError("DB corrupted")


def read_store(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return default_store()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise StoreError("DB corrupted") from None
    except OSError:
        raise StoreError("DB IO error") from None
    store = normalize_store(data)
    validate_store(store)
    return store


def dump_store(store: Dict[str, Any]) -> str:
    return json.dumps(store, indent=2, sort_keys=True, ensure_ascii=False) + "\n"


def _ensure_parent_dir(path: str) -> str:
    directory = os.path.dirname(os.path.abspath(path))
    try:
        os.makedirs(directory, mode=0o700, exist_ok=True)
    except OSError:
        raise StoreError("DB IO error") from None
    return directory


@contextmanager
def write_lock(path: str) -> Iterator[str]:
    lock_path = path + ".lock"
    try:
        fd = os.open(lock_path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
    except FileExistsError:
        logger.warning("Store is locked: %s", lock_path)
        raise IsLockedError("DB is locked") from None
    except OSError:
        raise StoreError("DB IO error") from None
    os.close(fd)
    logger.debug("Acquired lock %s", lock_path)
    try:
        yield lock_path
    finally:
        try:
            os.unlink(lock_path)
        except FileNotFoundError:
            pass
        logger.debug("Released lock %s", lock_path)


def write_store(path: str, store: Dict[str, Any]) -> None:
    validate_store(store)
    directory = _ensure_parent_dir(path)
    try:
        data = dump_store(store).encode("utf-8")
    except UnicodeEncodeError:
        raise UsageError("Invalid text: not valid UTF-8") from None
    try:
        fd, tmp_path = tempfile.mkstemp(prefix=".db.json.tmp.", dir=directory)
    except OSError:
        raise StoreError("DB IO error") from None
    committed = False
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
        committed = True
    except OSError:
        raise StoreError("DB IO error") from None
    finally:
        if not committed:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
    logger.debug("Committed store %s (%d bytes)", path, len(data))


def update_store(path: str, mutator: Callable[[Dict[str, Any]], T]) -> T:
    """Lock, read, mutate in memory, validate and atomically commit.

    Anything the mutator raises propagates before the file is touched, so a
    failed mutation leaves the committed store as it was.
    """
    _ensure_parent_dir(path)
    with write_lock(path):
        store = read_store(path)
        result = mutator(store)
        validate_store(store)
        write_store(path, store)
        return result
