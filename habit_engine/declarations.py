from typing import Any, Dict, List

from .dates import validate_date, validate_timestamp
from .errors import UsageError


def next_declaration_id(store: Dict[str, Any]) -> str:
    number = store["meta"]["next_declaration_number"]
    store["meta"]["next_declaration_number"] = number + 1
    return f"d{number:06d}"


def declare(
    store: Dict[str, Any], habit_id: str, date: str, ts: str, text: str
) -> Dict[str, Any]:
    date = validate_date(date)
    ts = validate_timestamp(ts)
    body = text.strip() if isinstance(text, str) else ""
    if not body:
        raise UsageError("Declaration text is required")
    declaration = {
        "id": next_declaration_id(store),
        "habit_id": habit_id,
        "date": date,
        "ts": ts,
        "text": body,
    }
    store["declarations"].append(declaration)
    return declaration


def has_declaration(store: Dict[str, Any], habit_id: str, date: str) -> bool:
    return any(d["habit_id"] == habit_id and d["date"] == date for d in store["declarations"])


def list_declarations(store: Dict[str, Any], habit_id: str) -> List[Dict[str, Any]]:
    items = [dict(d) for d in store["declarations"] if d["habit_id"] == habit_id]
    return sorted(items, key=lambda d: (d["date"], d["id"]))
