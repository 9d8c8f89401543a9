"""Player roster helpers."""

import logging
from copy import deepcopy
from typing import Any, Optional

from .constants import INITIAL_HANDICAP_REASON
from .errors import InvalidRequestError
from .utils import new_id, today_iso

logger = logging.getLogger('society.players')


def find_player(players: list[dict[str, Any]], player_id: str) -> Optional[dict[str, Any]]:
    """Return the player with this id, or None."""
    return next((p for p in players if p.get('id') == player_id), None)


def current_handicap(player: dict[str, Any]) -> Optional[float]:
    """The player's current handicap: the last entry in their history."""
    history = player.get('handicapHistory') or []
    if not history:
        return None
    return history[-1]['handicap']


def create_player(
    name: str,
    league_id: str,
    handicap: float,
    email: Optional[str] = None,
    phone: Optional[str] = None,
    today: Optional[str] = None,
) -> dict[str, Any]:
    """
    Build a new player record with its initial handicap entry.

    Args:
        name: Player's name
        league_id: League the player belongs to
        handicap: Starting handicap
        email: Optional contact email
        phone: Optional contact phone
        today: Date for the initial entry (default: today)

    Returns:
        Player dict ready to append to players.json
    """
    if not name or not league_id or handicap is None:
        raise InvalidRequestError('Missing required player fields.')

    return {
        'id': new_id('p'),
        'name': name,
        'email': email,
        'phone': phone,
        'leagueId': league_id,
        'handicapHistory': [
            {
                'date': today or today_iso(),
                'handicap': float(handicap),
                'eventId': None,
                'reason': INITIAL_HANDICAP_REASON,
            }
        ],
    }


def add_player(
    players: list[dict[str, Any]],
    player: dict[str, Any],
) -> list[dict[str, Any]]:
    """Return a copy of the roster with the player appended."""
    if find_player(players, player['id']):
        raise InvalidRequestError(f"Player id already exists: {player['id']}")

    updated = deepcopy(players)
    updated.append(player)
    logger.info(f"Added player {player['name']} ({player['id']})")
    return updated
