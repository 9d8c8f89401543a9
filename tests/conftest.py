"""Shared fixtures: a small society with three players and two events."""

import json

import pytest

from society.store import LocalStore


@pytest.fixture
def players():
    return [
        {
            'id': 'p_alice',
            'name': 'Alice Hart',
            'email': 'alice@example.com',
            'phone': '07700 900001',
            'leagueId': 'league_a',
            'handicapHistory': [
                {'date': '2026-01-01', 'handicap': 10.0, 'eventId': None, 'reason': 'Initial Handicap'},
            ],
        },
        {
            'id': 'p_bob',
            'name': 'Bob Stone',
            'email': '',
            'phone': '',
            'leagueId': 'league_a',
            'handicapHistory': [
                {'date': '2026-01-01', 'handicap': 2.0, 'eventId': None, 'reason': 'Initial Handicap'},
            ],
        },
        {
            'id': 'p_cara',
            'name': 'Cara Moss',
            'email': None,
            'phone': None,
            'leagueId': 'league_b',
            'handicapHistory': [
                {'date': '2026-01-01', 'handicap': 15.0, 'eventId': None, 'reason': 'Initial Handicap'},
            ],
        },
    ]


@pytest.fixture
def events():
    return [
        {
            'eventId': 'evt_1',
            'date': '2026-04-04',
            'courseName': 'Royal Oak',
            'isFinalized': False,
            'scores': [],
        },
        {
            'eventId': 'evt_2',
            'date': '2026-04-18',
            'courseName': 'Heath Links',
            'isFinalized': False,
            'scores': [],
        },
    ]


@pytest.fixture
def ledger():
    # Not tied to an event; event operations must leave it alone
    return [
        {
            'id': 'txn_subs_alice',
            'date': '2026-01-05',
            'eventId': None,
            'playerId': 'p_alice',
            'type': 'entry_fee',
            'amount': -20.0,
            'description': 'Annual subscription',
        },
    ]


@pytest.fixture
def scores():
    """Alice wins outright on 25; Bob and Cara pick up fines."""
    return [
        {'playerId': 'p_alice', 'stablefordScore': 25, 'snakes': 0, 'camels': 0},
        {'playerId': 'p_bob', 'stablefordScore': 18, 'snakes': 2, 'camels': 0},
        {'playerId': 'p_cara', 'stablefordScore': 15, 'snakes': 1, 'camels': 3},
    ]


@pytest.fixture
def tie_scores():
    return [
        {'playerId': 'p_alice', 'stablefordScore': 22, 'snakes': 0, 'camels': 0},
        {'playerId': 'p_bob', 'stablefordScore': 22, 'snakes': 0, 'camels': 0},
        {'playerId': 'p_cara', 'stablefordScore': 19, 'snakes': 0, 'camels': 0},
    ]


def write_data(root, players, events, ledger):
    data_dir = root / 'data'
    data_dir.mkdir(parents=True, exist_ok=True)
    for name, content in (('players', players), ('events', events), ('ledger', ledger)):
        with open(data_dir / f'{name}.json', 'w') as f:
            json.dump(content, f, indent=2)


def read_data(root, name):
    with open(root / 'data' / f'{name}.json') as f:
        return json.load(f)


@pytest.fixture
def store(tmp_path, players, events, ledger):
    """LocalStore seeded with the fixture data."""
    write_data(tmp_path, players, events, ledger)
    return LocalStore(tmp_path)
