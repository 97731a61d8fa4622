from __future__ import annotations

import argparse
import json
from pathlib import Path

from apscheduler.schedulers.blocking import BlockingScheduler
from dotenv import load_dotenv

from guilt_control.config.logging import setup_logging
from guilt_control.config.settings import Settings, load_settings
from guilt_control.core.time import parse_utc, utc_now
from guilt_control.core.validation import clamp_tap_minutes, sanitize_minutes
from guilt_control.output.formats import event_to_json, format_timestamp, snapshot_to_json
from guilt_control.refresh.scheduler import DecayRefresher
from guilt_control.scoring.model import ScoreConfig, ScoreModel, ScoreSnapshot
from guilt_control.storage.file_store import FileBlobStore
from guilt_control.store.event_store import EventStore, Ordering


def build_store(settings: Settings) -> EventStore:
    return EventStore(FileBlobStore(Path(settings.data_dir)))


def build_model(settings: Settings) -> ScoreModel:
    return ScoreModel(
        ScoreConfig(
            repair_window_seconds=settings.repair_window_seconds,
            full_scale_minutes=settings.full_scale_minutes,
            gamma=settings.gamma,
        )
    )


def _print_status(snapshot: ScoreSnapshot) -> None:
    stage = "CRITICAL" if snapshot.is_critical else "ok"
    print(f"color: {snapshot.color.to_hex()}  stage: {stage}")
    print(f"progress: {snapshot.progress:.1%}  decayed_minutes: {snapshot.decayed_total:.1f}")
    print(f"taps: {snapshot.count}  last_7d_minutes: {snapshot.last_7d_total}  all_time_minutes: {snapshot.all_time_total}")
    if snapshot.last_tap is not None:
        print(f"last: {format_timestamp(snapshot.last_tap)}")


def main(argv=None) -> int:
    load_dotenv(override=False)
    settings = load_settings()
    setup_logging(settings.log_level)

    parser = argparse.ArgumentParser(prog="guilt-control")
    sub = parser.add_subparsers(dest="cmd", required=True)

    tap = sub.add_parser("tap", help="Log a tap stamped now")
    tap.add_argument("--minutes", default=str(settings.tap_minutes), help="Minutes wasted for this tap")

    add = sub.add_parser("add", help="Log a tap at a given time")
    add.add_argument("--at", required=True, help="ISO-8601 timestamp")
    add.add_argument("--minutes", default="0")

    edit = sub.add_parser("edit", help="Change the time or minutes of an entry")
    edit.add_argument("id")
    edit.add_argument("--at", default=None, help="ISO-8601 timestamp")
    edit.add_argument("--minutes", default=None)

    delete = sub.add_parser("delete", help="Delete an entry by id")
    delete.add_argument("id")

    delpos = sub.add_parser("delete-positions", help="Delete entries by position in the history listing")
    delpos.add_argument("positions", type=int, nargs="+")
    delpos.add_argument("--oldest-first", action="store_true", help="Positions refer to oldest-first order")

    clear = sub.add_parser("clear", help="Delete all history")
    clear.add_argument("--yes", action="store_true", help="Confirm deletion")

    history = sub.add_parser("history", help="List entries newest first")
    history.add_argument("--json", action="store_true")

    status = sub.add_parser("status", help="Show the current severity")
    status.add_argument("--json", action="store_true")

    sub.add_parser("watch", help="Print the severity every refresh interval")

    args = parser.parse_args(argv)
    store = build_store(settings)
    model = build_model(settings)

    if args.cmd == "tap":
        ev = store.add_tap(clamp_tap_minutes(sanitize_minutes(args.minutes, default=settings.tap_minutes)))
        print(f"logged {ev.id} minutes={ev.minutes_wasted}")
        return 0

    if args.cmd == "add":
        ev = store.add_manual(parse_utc(args.at), sanitize_minutes(args.minutes))
        print(f"logged {ev.id} at {format_timestamp(ev.timestamp)} minutes={ev.minutes_wasted}")
        return 0

    if args.cmd == "edit":
        current = next((e for e in store.list() if e.id == args.id), None)
        if current is None:
            print(f"ERROR: no entry with id {args.id}")
            return 1
        changes = {}
        if args.at is not None:
            changes["timestamp"] = parse_utc(args.at)
        if args.minutes is not None:
            changes["minutes_wasted"] = sanitize_minutes(args.minutes, default=current.minutes_wasted)
        store.update(current.with_changes(**changes))
        print(f"updated {args.id}")
        return 0

    if args.cmd == "delete":
        removed = store.delete_by_id(args.id)
        print(f"deleted: {removed}")
        return 0

    if args.cmd == "delete-positions":
        ordering = Ordering.ASCENDING if args.oldest_first else Ordering.DESCENDING
        removed = store.delete_by_positions(args.positions, ordering)
        print(f"deleted: {removed}")
        return 0

    if args.cmd == "clear":
        if not args.yes:
            print("ERROR: pass --yes to delete all history")
            return 2
        store.clear_all()
        print("cleared")
        return 0

    if args.cmd == "history":
        entries = sorted(store.list(), key=lambda e: e.timestamp, reverse=True)
        if args.json:
            print(json.dumps([event_to_json(e) for e in entries], ensure_ascii=False, indent=2))
            return 0
        if not entries:
            print("No history")
        for pos, e in enumerate(entries):
            line = f"{pos:>3}  {format_timestamp(e.timestamp)}  {e.id}"
            if e.minutes_wasted > 0:
                line += f"  wasted={e.minutes_wasted}min"
            print(line)
        return 0

    if args.cmd == "status":
        snapshot = model.recompute(utc_now(), store.list())
        if args.json:
            print(json.dumps(snapshot_to_json(snapshot), ensure_ascii=False, indent=2))
        else:
            _print_status(snapshot)
        return 0

    if args.cmd == "watch":
        refresher = DecayRefresher(
            store,
            model,
            _print_status,
            interval_seconds=settings.refresh_seconds,
            scheduler=BlockingScheduler(timezone="UTC"),
        )
        try:
            refresher.start()
        except (KeyboardInterrupt, SystemExit):
            refresher.stop()
        return 0

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
