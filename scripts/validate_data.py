#!/usr/bin/env python3
"""
Data Validation Script

Checks a local checkout's data/players.json, data/events.json and
data/ledger.json against the schemas and for cross-file consistency
(ledger entries and handicap adjustments tied to finalized events).

Usage:
    python scripts/validate_data.py
    python scripts/validate_data.py --data-dir path/to/checkout
"""

import argparse
import sys
from pathlib import Path

from society.constants import EVENTS_PATH, LEDGER_PATH, PLAYERS_PATH
from society.schemas import Event, LedgerEntry, Player
from society.utils import load_json
from society.validators import validate_all

SCHEMAS = {
    PLAYERS_PATH: Player,
    EVENTS_PATH: Event,
    LEDGER_PATH: LedgerEntry,
}


def check_schemas(root: Path) -> list[str]:
    """Validate every record in each file against its schema."""
    errors = []
    for rel_path, schema in SCHEMAS.items():
        path = root / rel_path
        if not path.exists():
            print(f"⚠️  {rel_path} not found, treated as empty")
            continue
        try:
            load_json(path, schema=schema)
        except ValueError as e:
            errors.append(str(e))
    return errors


def load_collection(root: Path, rel_path: str) -> list:
    path = root / rel_path
    return load_json(path) if path.exists() else []


def main():
    parser = argparse.ArgumentParser(description="Validate golf society data files")
    parser.add_argument(
        "--data-dir", "-d",
        default=".",
        help="Checkout root containing data/",
    )
    args = parser.parse_args()
    root = Path(args.data_dir)

    errors = check_schemas(root)

    players = load_collection(root, PLAYERS_PATH)
    events = load_collection(root, EVENTS_PATH)
    ledger = load_collection(root, LEDGER_PATH)

    for name, problems in validate_all(players, events, ledger).items():
        errors.extend(f"{name}: {p}" for p in problems)

    if errors:
        print(f"\n❌ {len(errors)} problem(s) found:")
        for error in errors:
            print(f"  - {error}")
        sys.exit(1)

    print(f"✅ {len(players)} players, {len(events)} events, {len(ledger)} ledger entries OK")


if __name__ == "__main__":
    main()
