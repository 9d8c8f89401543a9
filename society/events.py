"""Event finalization and reversal.

Finalizing an event posts entry fees, fines and the winner's payout to the
ledger, records any tie rollover on the event, and adds a handicap
adjustment for everyone who played. Un-finalizing takes those effects back
out so the scores can be edited and the event finalized again.

Both operations work on copies of the three collections and return the new
state; committing it is the caller's job (see society.service).
"""

import logging
from copy import deepcopy
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import ValidationError

from .constants import (
    ENTRY_FEE,
    ENTRY_FEE_TYPE,
    FINE_PER_CAMEL,
    FINE_PER_SNAKE,
    FINE_TYPE,
    PAYOUT_TYPE,
    PRIZE_PER_PLAYER,
)
from .errors import EventAlreadyFinalizedError, EventNotFoundError, InvalidRequestError
from .handicap import apply_adjustment
from .players import current_handicap, find_player
from .schemas import Score
from .utils import new_id, today_iso

logger = logging.getLogger('society.events')


@dataclass
class EventUpdate:
    """New state of the data files after finalizing or reverting an event."""

    players: list[dict[str, Any]]
    events: list[dict[str, Any]]
    ledger: list[dict[str, Any]]
    event: dict[str, Any]


def find_event(events: list[dict[str, Any]], event_id: str) -> Optional[dict[str, Any]]:
    """Return the event with this id, or None."""
    return next((e for e in events if e.get('eventId') == event_id), None)


def create_event(course_name: str, event_date: str) -> dict[str, Any]:
    """Build a new, unfinalized event."""
    if not course_name or not event_date:
        raise InvalidRequestError('Course name and date are required.')
    return {
        'eventId': new_id('evt'),
        'date': event_date,
        'courseName': course_name,
        'isFinalized': False,
        'scores': [],
    }


def parse_scores(scores: list[dict[str, Any]]) -> list[Score]:
    """Validate submitted scores, raising InvalidRequestError on bad input."""
    parsed = []
    for i, raw in enumerate(scores):
        try:
            parsed.append(Score.model_validate(raw))
        except ValidationError as e:
            raise InvalidRequestError(f'Invalid score at position {i}: {e}') from e
    return parsed


def _transaction(
    event_id: str,
    player_id: str,
    kind: str,
    txn_type: str,
    amount: float,
    description: str,
    today: str,
) -> dict[str, Any]:
    return {
        'id': new_id('txn', player_id, kind),
        'date': today,
        'eventId': event_id,
        'playerId': player_id,
        'type': txn_type,
        'amount': amount,
        'description': description,
    }


def build_score_transactions(
    event: dict[str, Any],
    scores: list[Score],
    today: str,
) -> list[dict[str, Any]]:
    """
    Entry fee and fines for every score, in submission order.

    Each player pays the entry fee; snakes and camels are fined per
    occurrence, and only when there is at least one.
    """
    event_id = event['eventId']
    course = event.get('courseName', '')
    transactions = []

    for score in scores:
        transactions.append(_transaction(
            event_id, score.playerId, 'entry', ENTRY_FEE_TYPE,
            -ENTRY_FEE, f'Entry for {course}', today,
        ))
        if score.snakes > 0:
            transactions.append(_transaction(
                event_id, score.playerId, 'snake', FINE_TYPE,
                -FINE_PER_SNAKE * score.snakes, f'{score.snakes} snake(s)', today,
            ))
        if score.camels > 0:
            transactions.append(_transaction(
                event_id, score.playerId, 'camel', FINE_TYPE,
                -FINE_PER_CAMEL * score.camels, f'{score.camels} camel(s)', today,
            ))

    return transactions


def determine_winners(scores: list[Score]) -> tuple[list[Score], float]:
    """
    Find the top scorers and the prize pot.

    Returns:
        Tuple of (winners, prize_money). More than one winner is a tie.
    """
    highest = max(s.stablefordScore for s in scores)
    winners = [s for s in scores if s.stablefordScore == highest]
    prize_money = len(scores) * PRIZE_PER_PLAYER
    return winners, prize_money


def finalize_event(
    event_id: str,
    scores: list[dict[str, Any]],
    events: list[dict[str, Any]],
    players: list[dict[str, Any]],
    ledger: list[dict[str, Any]],
    today: Optional[str] = None,
) -> EventUpdate:
    """
    Finalize an event: ledger postings, prize, handicaps and status.

    Args:
        event_id: Event to finalize
        scores: Submitted scores (playerId, stablefordScore, snakes, camels)
        events: Events collection containing the event
        players: Players collection
        ledger: Ledger collection
        today: Date stamped on new records (default: today)

    Returns:
        EventUpdate with the new collections; the inputs are not modified

    Raises:
        InvalidRequestError: Missing event id, scores or events
        EventNotFoundError: Event not in events
        EventAlreadyFinalizedError: Event already finalized
    """
    if not event_id or not scores or events is None:
        raise InvalidRequestError('Event ID, scores, and allEvents array are required.')

    parsed = parse_scores(scores)

    events = deepcopy(events)
    event = find_event(events, event_id)
    if event is None:
        raise EventNotFoundError(event_id, 'Event not found in the provided list.')
    if event.get('isFinalized'):
        raise EventAlreadyFinalizedError(event_id)

    players = deepcopy(players)
    ledger = deepcopy(ledger)
    today = today or today_iso()

    # 1. Entry fees and fines
    ledger.extend(build_score_transactions(event, parsed, today))

    # 2. Winner takes the pot, a tie rolls it over
    winners, prize_money = determine_winners(parsed)
    if len(winners) == 1:
        winner = winners[0]
        ledger.append(_transaction(
            event_id, winner.playerId, 'payout', PAYOUT_TYPE,
            prize_money, f"Prize money for {event.get('courseName', '')}", today,
        ))
        event['rolloverAmount'] = 0
    else:
        logger.info(f'{len(winners)}-way tie on {winners[0].stablefordScore} pts, rolling over {prize_money:.2f}')
        event['rolloverAmount'] = prize_money

    # 3. Handicaps
    for score in parsed:
        player = find_player(players, score.playerId)
        if player is None:
            logger.warning(f'Score for unknown player {score.playerId} in {event_id}, handicap not adjusted')
            continue

        current = current_handicap(player)
        if current is None:
            logger.warning(f'Player {score.playerId} has no handicap history, handicap not adjusted')
            continue

        player['handicapHistory'].append({
            'date': today,
            'handicap': apply_adjustment(current, score.stablefordScore),
            'eventId': event_id,
            'reason': f'Adjustment after scoring {score.stablefordScore} pts',
        })

    # 4. Status and scores
    event['isFinalized'] = True
    event['scores'] = deepcopy(scores)

    logger.info(
        f"Finalized {event_id} ({event.get('courseName', '')}): "
        f'{len(parsed)} scores, rollover {event["rolloverAmount"]:.2f}'
    )
    return EventUpdate(players=players, events=events, ledger=ledger, event=event)


def unfinalize_event(
    event_id: str,
    events: list[dict[str, Any]],
    players: list[dict[str, Any]],
    ledger: list[dict[str, Any]],
) -> EventUpdate:
    """
    Revert a finalized event.

    Only the last handicap entry of each player is checked: it is removed if
    it belongs to this event. Events must therefore be reverted newest first;
    a player who has played a later finalized event keeps their handicap.

    Scores stay on the event so they can be edited before finalizing again.

    Raises:
        InvalidRequestError: Missing event id
        EventNotFoundError: Event not in events
    """
    if not event_id:
        raise InvalidRequestError('Event ID is required.')

    events = deepcopy(events)
    event = find_event(events, event_id)
    if event is None:
        raise EventNotFoundError(event_id, 'Event not found.')

    players = deepcopy(players)

    # 1. Handicaps
    for player in players:
        history = player.get('handicapHistory') or []
        if history and history[-1].get('eventId') == event_id:
            history.pop()
        elif any(entry.get('eventId') == event_id for entry in history):
            logger.warning(
                f"Player {player.get('id')} has a later handicap adjustment; "
                f'their entry for {event_id} was not reverted'
            )

    # 2. Ledger
    kept = [txn for txn in ledger if txn.get('eventId') != event_id]
    removed = len(ledger) - len(kept)

    # 3. Status
    event['isFinalized'] = False

    logger.info(f"Reverted {event_id} ({event.get('courseName', '')}): removed {removed} ledger entries")
    return EventUpdate(players=players, events=events, ledger=deepcopy(kept), event=event)
