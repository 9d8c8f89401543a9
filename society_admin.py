#!/usr/bin/env python3
"""
Golf Society Admin CLI

Runs the admin operations against the configured store: a local data
directory (--data-dir or SOCIETY_DATA_DIR) or the GitHub repository from
GITHUB_TOKEN / GITHUB_OWNER / GITHUB_REPO / GITHUB_BRANCH.

Usage:
    python society_admin.py --data-dir . create-event "Royal Oak" 2026-05-02
    python society_admin.py --data-dir . finalize evt_1a2b3c4d scores.json
    python society_admin.py --data-dir . unfinalize evt_1a2b3c4d --yes
    python society_admin.py --data-dir . add-player "Sam Reid" league_a 12.4
    python society_admin.py --data-dir . validate
    python society_admin.py --data-dir . --log-dir logs finalize evt_1a2b3c4d scores.json
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from society import service
from society.config import build_store, clear_settings_cache, get_settings
from society.errors import SocietyError
from society.logging_config import setup_logging
from society.validators import validate_all, validate_scores


def cmd_finalize(store, args) -> int:
    with open(args.scores_file) as f:
        scores = json.load(f)

    snapshot = service.load_snapshot(store)
    for problem in validate_scores(scores, snapshot.players):
        print(f"⚠️  {problem}")

    update = service.finalize(store, args.event_id, scores)
    event = update.event
    print(f"✅ Finalized {event.get('courseName')} ({event['eventId']})")
    if event['rolloverAmount']:
        print(f"   Tie for first: £{event['rolloverAmount']:.2f} rolls over")
    return 0


def cmd_unfinalize(store, args) -> int:
    if not args.yes:
        answer = input(
            "This reverts all handicap and financial changes for this round. Continue? [y/N] "
        )
        if answer.strip().lower() != 'y':
            print("Aborted.")
            return 1

    update = service.unfinalize(store, args.event_id)
    print(f"✅ Reverted {update.event.get('courseName')} ({update.event['eventId']})")
    return 0


def cmd_add_player(store, args) -> int:
    player = service.register_player(
        store,
        name=args.name,
        league_id=args.league_id,
        handicap=args.handicap,
        email=args.email,
        phone=args.phone,
    )
    print(f"✅ Added {player['name']} ({player['id']}) on {args.handicap}")
    return 0


def cmd_create_event(store, args) -> int:
    event = service.schedule_event(store, args.course_name, args.date)
    print(f"✅ Created {event['eventId']}: {event['courseName']} on {event['date']}")
    return 0


def cmd_validate(store, args) -> int:
    data = service.get_data(store)
    results = validate_all(data['players'], data['events'], data['ledger'])

    total = 0
    for name, errors in results.items():
        for error in errors:
            print(f"❌ {name}: {error}")
        total += len(errors)

    if total:
        print(f"\n{total} problem(s) found")
        return 1
    print("✅ All data files are consistent")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Golf society admin operations")
    parser.add_argument(
        "--data-dir", "-d",
        default=None,
        help="Local checkout holding data/*.json (overrides GitHub settings)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Debug logging",
    )
    parser.add_argument(
        "--log-dir",
        type=Path,
        default=None,
        help="Also write a log file for this run to DIR",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    p = subparsers.add_parser("finalize", help="Finalize an event")
    p.add_argument("event_id")
    p.add_argument("scores_file", type=Path, help="JSON array of scores")
    p.set_defaults(func=cmd_finalize)

    p = subparsers.add_parser("unfinalize", help="Revert a finalized event")
    p.add_argument("event_id")
    p.add_argument("--yes", "-y", action="store_true", help="Skip confirmation")
    p.set_defaults(func=cmd_unfinalize)

    p = subparsers.add_parser("add-player", help="Add a player")
    p.add_argument("name")
    p.add_argument("league_id")
    p.add_argument("handicap", type=float)
    p.add_argument("--email")
    p.add_argument("--phone")
    p.set_defaults(func=cmd_add_player)

    p = subparsers.add_parser("create-event", help="Create an unfinalized event")
    p.add_argument("course_name")
    p.add_argument("date", help="YYYY-MM-DD")
    p.set_defaults(func=cmd_create_event)

    p = subparsers.add_parser("validate", help="Check the data files for consistency")
    p.set_defaults(func=cmd_validate)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO, log_dir=args.log_dir)

    clear_settings_cache()
    settings = get_settings()
    if args.data_dir:
        settings = settings.model_copy(update={'data_dir': args.data_dir})

    store = None
    try:
        store = build_store(settings)
        return args.func(store, args)
    except SocietyError as e:
        print(f"❌ {e.message}")
        return 1
    finally:
        if store is not None:
            store.close()


if __name__ == "__main__":
    sys.exit(main())
