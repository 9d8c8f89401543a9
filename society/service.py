"""Society operations against a versioned store.

Each operation reads what it needs, computes the new state, and commits every
changed file in one revision. Nothing is written if any step fails.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Optional

from .constants import DATA_FILES, EVENTS_PATH, LEDGER_PATH, PLAYERS_PATH
from .events import EventUpdate, create_event, finalize_event, unfinalize_event
from .players import add_player, create_player
from .store import FileChange, VersionedStore
from .utils import dump_json

logger = logging.getLogger('society.service')


@dataclass
class Snapshot:
    """Collections read from the store at one revision."""

    revision: Optional[str]
    players: Optional[list[dict[str, Any]]] = None
    events: Optional[list[dict[str, Any]]] = None
    ledger: Optional[list[dict[str, Any]]] = None


_SNAPSHOT_FIELDS = {
    PLAYERS_PATH: 'players',
    EVENTS_PATH: 'events',
    LEDGER_PATH: 'ledger',
}


def load_snapshot(store: VersionedStore, paths: tuple[str, ...] = DATA_FILES) -> Snapshot:
    """
    Read the given data files in parallel at the current head revision.

    Missing files read as empty lists.
    """
    revision = store.revision()
    snapshot = Snapshot(revision=revision)

    with ThreadPoolExecutor(max_workers=len(paths)) as executor:
        futures = {
            path: executor.submit(store.read_collection, path, [], revision)
            for path in paths
        }
        for path, future in futures.items():
            setattr(snapshot, _SNAPSHOT_FIELDS[path], future.result())

    return snapshot


def commit_update(
    store: VersionedStore,
    update: EventUpdate,
    message: str,
    base_revision: Optional[str] = None,
) -> str:
    """Commit players, events and ledger together."""
    files = [
        FileChange(PLAYERS_PATH, dump_json(update.players)),
        FileChange(EVENTS_PATH, dump_json(update.events)),
        FileChange(LEDGER_PATH, dump_json(update.ledger)),
    ]
    return store.commit_all(message, files, base_revision=base_revision)


def merge_unsaved_events(
    stored: list[dict[str, Any]],
    submitted: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """
    Stored events followed by submitted events not yet in the store.

    A stale copy of a stored event is ignored so its finalized state and
    scores cannot be overwritten.
    """
    known = {e.get('eventId') for e in stored}
    unsaved = [e for e in submitted if e.get('eventId') not in known]
    if unsaved:
        logger.info(f"Including {len(unsaved)} unsaved event(s) from the request")
    return stored + unsaved


def finalize(
    store: VersionedStore,
    event_id: str,
    scores: list[dict[str, Any]],
    all_events: Optional[list[dict[str, Any]]] = None,
) -> EventUpdate:
    """
    Finalize an event and commit the result.

    Args:
        store: Versioned store holding the data files
        event_id: Event to finalize
        scores: Submitted scores
        all_events: Events list from the admin UI. Only events missing from
            events.json are taken from it; stored events always win.

    Returns:
        The committed EventUpdate

    Raises:
        SocietyError subclasses from the engine, StoreError on read/commit
    """
    snapshot = load_snapshot(store)
    events = snapshot.events
    if all_events is not None:
        events = merge_unsaved_events(events, all_events)

    update = finalize_event(event_id, scores, events, snapshot.players, snapshot.ledger)
    commit_update(
        store, update,
        f"chore: Finalize event - {update.event.get('courseName', event_id)}",
        base_revision=snapshot.revision,
    )
    return update


def unfinalize(store: VersionedStore, event_id: str) -> EventUpdate:
    """Revert a finalized event and commit the result."""
    snapshot = load_snapshot(store)

    update = unfinalize_event(event_id, snapshot.events, snapshot.players, snapshot.ledger)
    commit_update(
        store, update,
        f"chore: Revert event - {update.event.get('courseName', event_id)}",
        base_revision=snapshot.revision,
    )
    return update


def register_player(
    store: VersionedStore,
    name: str,
    league_id: str,
    handicap: float,
    email: Optional[str] = None,
    phone: Optional[str] = None,
) -> dict[str, Any]:
    """Add a player to players.json and return the new record."""
    player = create_player(name, league_id, handicap, email=email, phone=phone)

    snapshot = load_snapshot(store, (PLAYERS_PATH,))
    players = add_player(snapshot.players, player)

    store.commit_all(
        f'feat: Add new player - {name}',
        [FileChange(PLAYERS_PATH, dump_json(players))],
        base_revision=snapshot.revision,
    )
    return player


def schedule_event(store: VersionedStore, course_name: str, event_date: str) -> dict[str, Any]:
    """Add an unfinalized event to events.json and return it."""
    event = create_event(course_name, event_date)

    snapshot = load_snapshot(store, (EVENTS_PATH,))
    events = snapshot.events + [event]

    store.commit_all(
        f'feat: Add event - {course_name} ({event_date})',
        [FileChange(EVENTS_PATH, dump_json(events))],
        base_revision=snapshot.revision,
    )
    logger.info(f"Created event {event['eventId']} at {course_name} on {event_date}")
    return event


def get_data(store: VersionedStore) -> dict[str, list[dict[str, Any]]]:
    """All three collections, for the admin UI."""
    snapshot = load_snapshot(store)
    return {
        'players': snapshot.players,
        'events': snapshot.events,
        'ledger': snapshot.ledger,
    }
