"""Consistency checks for the society data files."""

from collections import Counter
from typing import Any

from .constants import TRANSACTION_TYPES


def _duplicates(values: list[Any]) -> list[Any]:
    return sorted(v for v, count in Counter(values).items() if count > 1)


def validate_players(players: list[dict[str, Any]]) -> list[str]:
    """
    Validate the roster.

    Checks:
    - Player ids are present and unique
    - Every player has a handicap history

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []

    ids = [p.get('id') for p in players]
    if None in ids or '' in ids:
        errors.append('Player without an id')
    dupes = _duplicates([i for i in ids if i])
    if dupes:
        errors.append(f'Duplicate player ids: {", ".join(dupes)}')

    for player in players:
        if not player.get('handicapHistory'):
            errors.append(f"Player {player.get('id')} ({player.get('name')}) has no handicap history")

    return errors


def validate_events(events: list[dict[str, Any]]) -> list[str]:
    """
    Validate the events list.

    Checks:
    - Event ids are unique
    - Finalized events have scores and a rollover amount
    """
    errors = []

    dupes = _duplicates([e.get('eventId') for e in events if e.get('eventId')])
    if dupes:
        errors.append(f'Duplicate event ids: {", ".join(dupes)}')

    for event in events:
        if not event.get('isFinalized'):
            continue
        if not event.get('scores'):
            errors.append(f"Event {event.get('eventId')} is finalized but has no scores")
        if event.get('rolloverAmount') is None:
            errors.append(f"Event {event.get('eventId')} is finalized but has no rollover amount")

    return errors


def validate_ledger(ledger: list[dict[str, Any]], events: list[dict[str, Any]]) -> list[str]:
    """
    Validate ledger entries against the events.

    Checks:
    - Transaction ids are unique
    - Types are entry_fee, fine or payout
    - Event-tagged entries reference an existing, finalized event
    """
    errors = []

    dupes = _duplicates([t.get('id') for t in ledger if t.get('id')])
    if dupes:
        errors.append(f'Duplicate transaction ids: {", ".join(dupes)}')

    events_by_id = {e.get('eventId'): e for e in events}
    for txn in ledger:
        if txn.get('type') not in TRANSACTION_TYPES:
            errors.append(f"Transaction {txn.get('id')} has unknown type {txn.get('type')!r}")

        event_id = txn.get('eventId')
        if event_id is None:
            continue
        event = events_by_id.get(event_id)
        if event is None:
            errors.append(f"Transaction {txn.get('id')} references unknown event {event_id}")
        elif not event.get('isFinalized'):
            errors.append(f"Transaction {txn.get('id')} belongs to unfinalized event {event_id}")

    return errors


def validate_scores(scores: list[dict[str, Any]], players: list[dict[str, Any]]) -> list[str]:
    """
    Validate submitted scores before finalizing.

    Unknown players are allowed by finalization (their handicap is skipped)
    but are worth flagging to the admin.
    """
    errors = []

    player_ids = {p.get('id') for p in players}
    submitted = [s.get('playerId') for s in scores]

    dupes = _duplicates([i for i in submitted if i])
    if dupes:
        errors.append(f'Duplicate scores for players: {", ".join(dupes)}')

    for player_id in submitted:
        if player_id not in player_ids:
            errors.append(f'Score for unknown player {player_id}')

    return errors


def validate_handicap_links(players: list[dict[str, Any]], events: list[dict[str, Any]]) -> list[str]:
    """Check that event-linked handicap entries point at finalized events."""
    errors = []
    finalized = {e.get('eventId') for e in events if e.get('isFinalized')}

    for player in players:
        for entry in player.get('handicapHistory') or []:
            event_id = entry.get('eventId')
            if event_id is not None and event_id not in finalized:
                errors.append(
                    f"Player {player.get('id')} has a handicap entry for "
                    f'{event_id}, which is not finalized'
                )

    return errors


def validate_all(
    players: list[dict[str, Any]],
    events: list[dict[str, Any]],
    ledger: list[dict[str, Any]],
) -> dict[str, list[str]]:
    """Run every check and return errors keyed by file."""
    return {
        'players': validate_players(players) + validate_handicap_links(players, events),
        'events': validate_events(events),
        'ledger': validate_ledger(ledger, events),
    }
