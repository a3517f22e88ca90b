#!/usr/bin/env python3
import argparse
import csv
import io
import json
import logging
import os
import sys
from typing import Any, Dict, List, Optional, Sequence

from habit_engine import HabitError, StoreError, UsageError, __version__
from habit_engine import checkins as checkins_mod
from habit_engine import declarations, excuses, habits, penalty
from habit_engine.dates import today as system_today
from habit_engine.dates import validate_date
from habit_engine.due import build_due
from habit_engine.export import (
    CHECKINS_CSV_COLUMNS,
    HABITS_CSV_COLUMNS,
    build_export,
    checkin_csv_row,
    habit_csv_row,
)
from habit_engine.recap import RANGES, build_recap, render_progress_bar
from habit_engine.schedule import schedule_to_string
from habit_engine.stats import build_default_stats, build_stats
from habit_engine.status import build_status
from habit_engine.store import read_store, update_store

logger = logging.getLogger("habit")

DB_PATH_ENV = "HABITCLI_DB_PATH"
TODAY_ENV = "HABITCLI_TODAY"
APP_DIR = "habit-cli"
DB_FILENAME = "db.json"


def _db_path(args: argparse.Namespace) -> str:
    if args.db and args.db.strip():
        return args.db.strip()
    env_path = os.environ.get(DB_PATH_ENV, "").strip()
    if env_path:
        return env_path
    base = os.environ.get("XDG_DATA_HOME", "").strip()
    if not base:
        home = os.environ.get("HOME") or os.environ.get("USERPROFILE")
        if not home:
            raise StoreError("DB IO error")
        base = os.path.join(home, ".local", "share")
    return os.path.join(base, APP_DIR, DB_FILENAME)


def _resolve_today(args: argparse.Namespace) -> str:
    if args.today is not None:
        return validate_date(args.today, "today")
    env_today = os.environ.get(TODAY_ENV, "").strip()
    if env_today:
        return validate_date(env_today, "today")
    return system_today()


def _color_enabled(args: argparse.Namespace) -> bool:
    return not args.no_color and "NO_COLOR" not in os.environ


def _paint(args: argparse.Namespace, text: str, code: str) -> str:
    if not _color_enabled(args):
        return text
    return f"\x1b[{code}m{text}\x1b[0m"


def _print_json(obj: Any) -> None:
    json.dump(obj, sys.stdout, ensure_ascii=False, indent=2, sort_keys=True)
    sys.stdout.write("\n")


def _render_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    widths = [len(h) for h in headers]
    for row in rows:
        for idx, cell in enumerate(row):
            widths[idx] = max(widths[idx], len(cell))
    lines = ["  ".join(h.ljust(widths[i]) for i, h in enumerate(headers)).rstrip()]
    lines.append("  ".join("-" * w for w in widths))
    for row in rows:
        lines.append("  ".join(cell.ljust(widths[i]) for i, cell in enumerate(row)).rstrip())
    return "\n".join(lines)


def _json_mode(args: argparse.Namespace) -> bool:
    if args.format == "csv" and args.command != "export":
        raise UsageError("--format csv is only supported by `habit export`")
    return args.format == "json"


def _target_label(habit: Dict[str, Any]) -> str:
    return f"{habit['target']['quantity']}/{habit['target']['period']}"


def cmd_add(args: argparse.Namespace) -> None:
    json_mode = _json_mode(args)
    today = _resolve_today(args)
    habit = update_store(
        _db_path(args),
        lambda store: habits.add_habit(
            store,
            args.name,
            args.schedule,
            args.period,
            args.target,
            args.notes,
            today,
            needs_declaration=args.needs_declaration,
            excuse_quota=args.excuse_quota_per_week,
        ),
    )
    if json_mode:
        _print_json({"habit": habit})
        return
    print(_render_table(
        ["id", "name", "schedule", "target"],
        [[habit["id"], habit["name"], schedule_to_string(habit["schedule"]), _target_label(habit)]],
    ))


def cmd_list(args: argparse.Namespace) -> None:
    json_mode = _json_mode(args)
    items = habits.list_habits(read_store(_db_path(args)), args.all)
    if json_mode:
        _print_json({"habits": items})
        return
    if not items:
        print("No habits yet.")
        return
    rows = [
        [h["id"], h["name"], schedule_to_string(h["schedule"]), _target_label(h),
         "yes" if h.get("archived") else "no"]
        for h in items
    ]
    print(_render_table(["id", "name", "schedule", "target", "archived"], rows))


def cmd_show(args: argparse.Namespace) -> None:
    json_mode = _json_mode(args)
    store = read_store(_db_path(args))
    habit = habits.select_habit(store, args.habit, include_archived=True)
    items = checkins_mod.list_checkins_for_habit(store, habit["id"])
    declared = declarations.list_declarations(store, habit["id"])
    if json_mode:
        _print_json({"habit": habit, "checkins": items, "declarations": declared})
        return
    print(f"{habit['name']} ({habit['id']})")
    print(f"schedule: {schedule_to_string(habit['schedule'])}")
    print(f"target: {_target_label(habit)}")
    print(f"archived: {'yes' if habit.get('archived') else 'no'}")
    print(f"created_date: {habit['created_date']}")
    if habit.get("archived_date"):
        print(f"archived_date: {habit['archived_date']}")
    if habit.get("notes"):
        print(f"notes: {habit['notes']}")
    print(f"needs_declaration: {'yes' if habit['needs_declaration'] else 'no'}")
    print(f"excuse_quota_per_week: {habit['excuse_quota_per_week']}")
    if items:
        print("checkins:")
        for item in items:
            print(f"- {item['date']} {item['quantity']}")
    if declared:
        print("declarations:")
        for item in declared:
            print(f"- {item['date']} {item['text']}")


def cmd_archive(args: argparse.Namespace) -> None:
    json_mode = _json_mode(args)
    today = _resolve_today(args)

    def mutate(store: Dict[str, Any]) -> Dict[str, Any]:
        habit = habits.select_habit(store, args.habit, include_archived=True)
        return habits.archive_habit(store, habit["id"], today)

    habit = update_store(_db_path(args), mutate)
    if json_mode:
        _print_json({"habit": habit})
        return
    print(f"Archived: {habit['name']} ({habit['id']})")


def cmd_unarchive(args: argparse.Namespace) -> None:
    json_mode = _json_mode(args)

    def mutate(store: Dict[str, Any]) -> Dict[str, Any]:
        habit = habits.select_habit(store, args.habit, include_archived=True)
        return habits.unarchive_habit(store, habit["id"])

    habit = update_store(_db_path(args), mutate)
    if json_mode:
        _print_json({"habit": habit})
        return
    print(f"Unarchived: {habit['name']} ({habit['id']})")


def cmd_edit(args: argparse.Namespace) -> None:
    json_mode = _json_mode(args)

    def mutate(store: Dict[str, Any]) -> Dict[str, Any]:
        habit = habits.select_habit(store, args.habit, include_archived=True)
        return habits.edit_habit(
            store,
            habit["id"],
            name=args.name,
            schedule=args.schedule,
            period=args.period,
            target=args.target,
            notes=args.notes,
            needs_declaration=args.needs_declaration,
            excuse_quota=args.excuse_quota_per_week,
        )

    habit = update_store(_db_path(args), mutate)
    if json_mode:
        _print_json({"habit": habit})
        return
    print(f"Updated: {habit['name']} ({habit['id']})")


def cmd_checkin(args: argparse.Namespace) -> None:
    json_mode = _json_mode(args)
    date = validate_date(args.date) if args.date else _resolve_today(args)
    if args.delete and (args.qty is not None or args.set is not None):
        raise UsageError("Invalid flags: --delete conflicts with --qty/--set")
    if args.qty is not None and args.set is not None:
        raise UsageError("Invalid flags: --qty conflicts with --set")
    if args.delete:
        mode, quantity = checkins_mod.MODE_DELETE, 0
    elif args.set is not None:
        mode, quantity = checkins_mod.MODE_SET, args.set
    else:
        mode, quantity = checkins_mod.MODE_ADD, 1 if args.qty is None else args.qty

    def mutate(store: Dict[str, Any]) -> Dict[str, Any]:
        habit = habits.select_habit(store, args.habit, include_archived=True)
        outcome = checkins_mod.checkin(store, habit["id"], date, mode, quantity)
        outcome["habit_name"] = habit["name"]
        return outcome

    outcome = update_store(_db_path(args), mutate)
    if json_mode:
        _print_json({
            "habit": {"id": outcome["habit_id"], "name": outcome["habit_name"]},
            "date": outcome["date"],
            "action": outcome["action"],
            "quantity": outcome["quantity"],
            "delta": outcome["delta"],
        })
        return
    label = f"{outcome['habit_name']} ({outcome['habit_id']}) on {outcome['date']}"
    if outcome["action"] == checkins_mod.MODE_DELETE:
        print(f"Deleted check-in: {label}")
    elif outcome["action"] == checkins_mod.MODE_SET:
        print(f"Set check-in: {label} ={outcome['quantity']}")
    else:
        print(f"Checked in: {label} +{outcome['delta']} (total {outcome['quantity']})")


def cmd_declare(args: argparse.Namespace) -> None:
    json_mode = _json_mode(args)

    def mutate(store: Dict[str, Any]) -> Dict[str, Any]:
        habit = habits.select_habit(store, args.habit, include_archived=True)
        return declarations.declare(store, habit["id"], args.date, args.ts, args.text)

    declaration = update_store(_db_path(args), mutate)
    if json_mode:
        _print_json({"declaration": declaration})
        return
    print(f"Declared: {declaration['habit_id']} on {declaration['date']} ({declaration['id']})")


def cmd_excuse(args: argparse.Namespace) -> None:
    json_mode = _json_mode(args)

    def mutate(store: Dict[str, Any]) -> Dict[str, Any]:
        habit = habits.select_habit(store, args.habit, include_archived=True)
        quota = habit["excuse_quota_per_week"]
        record, used, remaining = excuses.excuse(
            store, habit["id"], args.date, args.ts, args.kind, args.reason, quota
        )
        return {
            "excuse": record,
            "quota": {"per_week": quota, "used_this_week": used, "remaining_this_week": remaining},
        }

    out = update_store(_db_path(args), mutate)
    if json_mode:
        _print_json(out)
        return
    record = out["excuse"]
    print(
        f"Excuse recorded: {record['habit_id']} on {record['date']} ({record['kind']}, "
        f"{out['quota']['remaining_this_week']} left this week)"
    )


def cmd_penalty_arm(args: argparse.Namespace) -> None:
    json_mode = _json_mode(args)

    def mutate(store: Dict[str, Any]) -> Dict[str, Any]:
        habit = habits.select_habit(store, args.habit, include_archived=True)
        return penalty.upsert_rule(
            store, habit["id"], args.date, args.ts, args.multiplier, args.cap, args.deadline_days
        )

    rule = update_store(_db_path(args), mutate)
    if json_mode:
        _print_json({"rule": rule})
        return
    print(f"Armed penalty rule for {rule['habit_id']} ({rule['id']})")


def cmd_penalty_tick(args: argparse.Namespace) -> None:
    json_mode = _json_mode(args)
    if args.idempotency_key:
        logger.debug("Penalty tick idempotency key: %s", args.idempotency_key)
    created = update_store(
        _db_path(args),
        lambda store: penalty.tick(store, args.date, args.ts, args.include_archived),
    )
    if json_mode:
        _print_json({"date": args.date.strip(), "created": created})
        return
    print(f"Penalty tick complete. Created {len(created)} debt(s).")


def cmd_penalty_status(args: argparse.Namespace) -> None:
    json_mode = _json_mode(args)
    date = validate_date(args.date) if args.date else _resolve_today(args)
    debts = penalty.penalty_status(read_store(_db_path(args)), date, args.include_archived)
    if json_mode:
        _print_json({"date": date, "debts": debts})
        return
    if not debts:
        print("(no outstanding penalty debts)")
        return
    for debt in debts:
        print(f"- {debt['id']} {debt['habit_id']} due {debt['due_date']} qty {debt['quantity']}")


def _close_debt(args: argparse.Namespace, kind: str, verb: str) -> None:
    json_mode = _json_mode(args)
    action = update_store(
        _db_path(args),
        lambda store: penalty.resolve_or_void(
            store, args.debt_id, kind, args.date, args.ts, args.reason
        ),
    )
    if json_mode:
        _print_json({"action": action})
        return
    if action["kind"] != kind:
        print(f"Already closed ({action['kind']}): {args.debt_id}")
        return
    print(f"{verb}: {args.debt_id}")


def cmd_penalty_resolve(args: argparse.Namespace) -> None:
    _close_debt(args, penalty.ACTION_RESOLVE, "Resolved")


def cmd_penalty_void(args: argparse.Namespace) -> None:
    _close_debt(args, penalty.ACTION_VOID, "Voided")


def cmd_status(args: argparse.Namespace) -> None:
    json_mode = _json_mode(args)
    date = validate_date(args.date) if args.date else _resolve_today(args)
    data = build_status(read_store(_db_path(args)), date, args.week_of, args.include_archived)
    if json_mode:
        _print_json(data)
        return
    print(f"Today ({data['today']['date']})")
    if not data["today"]["habits"]:
        print(_paint(args, "(no scheduled habits)", "90"))
    for row in data["today"]["habits"]:
        mark = _paint(args, "[x]", "32") if row["done"] else "[ ]"
        weekly = "" if row["period"] == habits.PERIOD_DAY else " (weekly)"
        print(f"- {mark} {row['name']} {row['quantity']}/{row['target']}{weekly}")
    print("")
    print(f"This week ({data['week']['id']})")
    for row in data["week"]["habits"]:
        if row["period"] == habits.PERIOD_DAY:
            print(f"- {row['name']} {row['done_scheduled_days']}/{row['scheduled_days']} "
                  f"scheduled days done")
        else:
            print(f"- {row['name']} {row['quantity']}/{row['target']} (weekly)")


def cmd_due(args: argparse.Namespace) -> None:
    json_mode = _json_mode(args)
    date = validate_date(args.date) if args.date else _resolve_today(args)
    data = build_due(read_store(_db_path(args)), date, args.include_archived)
    if json_mode:
        _print_json(data)
        return
    if not data["due"]:
        print(_paint(args, f"Nothing due on {date}.", "90"))
        return
    print(f"Due ({date})")
    for row in data["due"]:
        weekly = "" if row["period"] == habits.PERIOD_DAY else " (weekly)"
        print(f"- {row['name']} {row['quantity']}/{row['target']}{weekly}, "
              f"{row['remaining']} to go")


def _format_rate(row: Dict[str, Any]) -> str:
    rate = row["success_rate"]
    if rate["rate"] is None:
        label = "n/a"
    else:
        label = f"{int(rate['rate'] * 100 + 0.5)}%"
    return f"{label} ({rate['successes']}/{rate['eligible']})"


def cmd_stats(args: argparse.Namespace) -> None:
    json_mode = _json_mode(args)
    store = read_store(_db_path(args))
    if args.habit:
        selected = [habits.select_habit(store, args.habit, include_archived=True)]
    else:
        selected = habits.list_habits(store, include_archived=False)
    end = validate_date(args.to, "to") if args.to else _resolve_today(args)
    if args.start:
        rows = build_stats(store, selected, args.start, end)
    else:
        rows = build_default_stats(store, selected, end)
    if json_mode:
        _print_json({"stats": rows})
        return
    table = [
        [r["habit_id"], r["name"], r["period"], str(r["current_streak"]),
         str(r["longest_streak"]), _format_rate(r)]
        for r in rows
    ]
    print(_render_table(["id", "name", "period", "current", "longest", "success"], table))


def cmd_recap(args: argparse.Namespace) -> None:
    json_mode = _json_mode(args)
    today = _resolve_today(args)
    store = read_store(_db_path(args))
    rows = build_recap(
        store,
        habits.list_habits(store, args.include_archived),
        args.range,
        today,
        behind_first=args.behind_first,
    )
    if json_mode:
        _print_json({"recap": rows})
        return
    if not rows:
        print(_paint(args, "(no habits to recap)", "90"))
        return
    first = rows[0]["range"]
    print(f"Recap ({first['kind']}) {first['from']} to {first['to']}")
    print("")
    table = [
        [r["name"], r["target_label"], "n/a" if r["percent"] is None else f"{r['percent']}%",
         render_progress_bar(r["percent"]), f"{r['successes']}/{r['eligible']}"]
        for r in rows
    ]
    print(_render_table(["name", "target", "%", "progress", "ratio"], table))


def _write_private(path: str, data: str) -> None:
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
        f.write(data)


def _csv_text(header: Sequence[str], rows: List[List[str]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(header)
    writer.writerows(rows)
    return buffer.getvalue()


def cmd_export(args: argparse.Namespace) -> None:
    if args.format == "table":
        raise UsageError("`habit export` requires --format json|csv")
    payload = build_export(read_store(_db_path(args)), args.start, args.to, args.include_archived)
    if args.format == "json":
        data = json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n"
        if args.out:
            try:
                _write_private(args.out, data)
            except OSError:
                raise StoreError("DB IO error") from None
        else:
            sys.stdout.write(data)
        return
    if not args.out:
        raise UsageError("CSV export requires --out <dir>")
    try:
        os.makedirs(args.out, mode=0o700, exist_ok=True)
        _write_private(
            os.path.join(args.out, "habits.csv"),
            _csv_text(HABITS_CSV_COLUMNS, [habit_csv_row(h) for h in payload["habits"]]),
        )
        _write_private(
            os.path.join(args.out, "checkins.csv"),
            _csv_text(CHECKINS_CSV_COLUMNS, [checkin_csv_row(c) for c in payload["checkins"]]),
        )
    except OSError:
        raise StoreError("DB IO error") from None


def _bool_arg(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("true", "yes", "1"):
        return True
    if lowered in ("false", "no", "0"):
        return False
    raise argparse.ArgumentTypeError(f"expected true or false, got {value!r}")


def _selector(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("habit", help="Habit id (h0001) or unique name prefix")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="habit", description="Local habit tracking CLI")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--db", help="Override the DB path for this invocation")
    parser.add_argument("--today", help="Override logical today (YYYY-MM-DD)")
    parser.add_argument("--format", choices=["table", "json", "csv"], default="table")
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI color output")
    parser.add_argument("--verbose", action="store_true", help="Log debug details to stderr")
    sub = parser.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add", help="Add a new habit")
    add.add_argument("name", help="Habit name")
    add.add_argument("--schedule", default="everyday",
                     help="everyday, weekdays, weekends or mon,tue,...,sun")
    add.add_argument("--period", choices=list(habits.PERIODS), default=habits.PERIOD_DAY)
    add.add_argument("--target", type=int, default=1, help="Quantity per period (>= 1)")
    add.add_argument("--notes")
    add.add_argument("--needs-declaration", type=_bool_arg, default=False, metavar="BOOL",
                     help="Only count check-ins on declared dates")
    add.add_argument("--excuse-quota-per-week", type=int, default=2,
                     help="Allowed excuses per ISO week")
    add.set_defaults(func=cmd_add)

    list_cmd = sub.add_parser("list", help="List habits")
    list_cmd.add_argument("--all", action="store_true", help="Include archived habits")
    list_cmd.set_defaults(func=cmd_list)

    show = sub.add_parser("show", help="Show a habit and its check-ins")
    _selector(show)
    show.set_defaults(func=cmd_show)

    archive = sub.add_parser("archive", help="Archive a habit")
    _selector(archive)
    archive.set_defaults(func=cmd_archive)

    unarchive = sub.add_parser("unarchive", help="Unarchive a habit")
    _selector(unarchive)
    unarchive.set_defaults(func=cmd_unarchive)

    edit = sub.add_parser("edit", help="Edit a habit in place")
    _selector(edit)
    edit.add_argument("--name")
    edit.add_argument("--schedule")
    edit.add_argument("--period", choices=list(habits.PERIODS))
    edit.add_argument("--target", type=int)
    edit.add_argument("--notes", help="New notes (empty string clears them)")
    edit.add_argument("--needs-declaration", type=_bool_arg, metavar="BOOL")
    edit.add_argument("--excuse-quota-per-week", type=int)
    edit.set_defaults(func=cmd_edit)

    checkin = sub.add_parser("checkin", help="Record a check-in for a habit")
    _selector(checkin)
    checkin.add_argument("--date", help="Override date (YYYY-MM-DD)")
    checkin.add_argument("--qty", type=int, help="Quantity to add (>= 1, default 1)")
    checkin.add_argument("--set", type=int, help="Set the day's quantity (0 deletes)")
    checkin.add_argument("--delete", action="store_true", help="Delete the day's check-in")
    checkin.set_defaults(func=cmd_checkin)

    declare = sub.add_parser("declare", help="Declare intent for a date")
    _selector(declare)
    declare.add_argument("--date", required=True)
    declare.add_argument("--ts", required=True, help="RFC 3339 timestamp with offset")
    declare.add_argument("--text", required=True)
    declare.set_defaults(func=cmd_declare)

    excuse = sub.add_parser("excuse", help="Record an excused absence")
    _selector(excuse)
    excuse.add_argument("--date", required=True)
    excuse.add_argument("--ts", required=True, help="RFC 3339 timestamp with offset")
    excuse.add_argument("--reason", required=True)
    excuse.add_argument("--kind", choices=list(excuses.EXCUSE_KINDS), default=excuses.EXCUSE_ALLOWED)
    excuse.set_defaults(func=cmd_excuse)

    pen = sub.add_parser("penalty", help="Penalty debt engine")
    pen_sub = pen.add_subparsers(dest="penalty_command", required=True)

    arm = pen_sub.add_parser("arm", help="Arm or re-arm a habit's penalty rule")
    _selector(arm)
    arm.add_argument("--multiplier", type=int, default=2)
    arm.add_argument("--cap", type=int, default=8)
    arm.add_argument("--deadline-days", type=int, default=1)
    arm.add_argument("--date", required=True)
    arm.add_argument("--ts", required=True)
    arm.set_defaults(func=cmd_penalty_arm)

    tick = pen_sub.add_parser("tick", help="Evaluate a date and create debts")
    tick.add_argument("--date", required=True)
    tick.add_argument("--ts", required=True)
    tick.add_argument("--idempotency-key", help="Informational; ticks are idempotent anyway")
    tick.add_argument("--include-archived", action="store_true")
    tick.set_defaults(func=cmd_penalty_tick)

    for name in ("status", "list"):
        status_cmd = pen_sub.add_parser(name, help="Outstanding debts as of a date")
        status_cmd.add_argument("--date")
        status_cmd.add_argument("--include-archived", action="store_true")
        status_cmd.set_defaults(func=cmd_penalty_status)

    for name, func in (("resolve", cmd_penalty_resolve), ("void", cmd_penalty_void)):
        close = pen_sub.add_parser(name, help=f"{name.capitalize()} a penalty debt")
        close.add_argument("debt_id")
        close.add_argument("--date", required=True)
        close.add_argument("--ts", required=True)
        close.add_argument("--reason", required=True)
        close.set_defaults(func=func)

    status = sub.add_parser("status", help="Today and this week at a glance")
    status.add_argument("--date", help="The day shown in the Today section")
    status.add_argument("--week-of", help="Any date in the week to show")
    status.add_argument("--include-archived", action="store_true")
    status.set_defaults(func=cmd_status)

    due = sub.add_parser("due", help="Scheduled habits still to do")
    due.add_argument("--date")
    due.add_argument("--include-archived", action="store_true")
    due.set_defaults(func=cmd_due)

    stats = sub.add_parser("stats", help="Streaks and success rates")
    stats.add_argument("habit", nargs="?", help="Optional habit selector")
    stats.add_argument("--from", dest="start")
    stats.add_argument("--to")
    stats.set_defaults(func=cmd_stats)

    recap = sub.add_parser("recap", help="Completion percentages over a range")
    recap.add_argument("--range", choices=list(RANGES), default="month")
    recap.add_argument("--behind-first", action="store_true", help="Lowest percentages first")
    recap.add_argument("--include-archived", action="store_true")
    recap.set_defaults(func=cmd_recap)

    export = sub.add_parser("export", help="Export habits and check-ins (json or csv)")
    export.add_argument("--out", help="Output file (json) or directory (csv)")
    export.add_argument("--from", dest="start")
    export.add_argument("--to")
    export.add_argument("--include-archived", action="store_true")
    export.set_defaults(func=cmd_export)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )
    try:
        args.func(args)
    except HabitError as exc:
        print(str(exc), file=sys.stderr)
        return exc.exit_code
    return 0


if __name__ == "__main__":
    sys.exit(main())
