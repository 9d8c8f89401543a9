"""Unit tests for data consistency checks."""

from society.events import finalize_event
from society.validators import (
    validate_all,
    validate_events,
    validate_handicap_links,
    validate_ledger,
    validate_players,
    validate_scores,
)


class TestPlayerValidation:
    """Tests for validate_players."""

    def test_valid_roster(self, players):
        """The fixture roster is valid."""
        assert validate_players(players) == []

    def test_duplicate_ids(self, players):
        """Duplicate player ids are reported."""
        players[1]['id'] = 'p_alice'
        errors = validate_players(players)
        assert errors == ['Duplicate player ids: p_alice']

    def test_empty_history(self, players):
        """A player needs at least one handicap entry."""
        players[2]['handicapHistory'] = []
        errors = validate_players(players)
        assert len(errors) == 1
        assert 'Cara Moss' in errors[0]

    def test_missing_id(self, players):
        """A player without an id is reported."""
        del players[0]['id']
        assert 'Player without an id' in validate_players(players)


class TestEventValidation:
    """Tests for validate_events."""

    def test_open_events_valid(self, events):
        """Open events need no scores or rollover."""
        assert validate_events(events) == []

    def test_finalized_without_scores(self, events):
        """Finalized events need scores and a rollover amount."""
        events[0]['isFinalized'] = True
        errors = validate_events(events)
        assert 'Event evt_1 is finalized but has no scores' in errors
        assert 'Event evt_1 is finalized but has no rollover amount' in errors

    def test_duplicate_ids(self, events):
        """Duplicate event ids are reported."""
        events[1]['eventId'] = 'evt_1'
        assert validate_events(events) == ['Duplicate event ids: evt_1']


class TestLedgerValidation:
    """Tests for validate_ledger."""

    def test_finalized_data_is_consistent(self, scores, events, players, ledger):
        """Freshly finalized data passes every check."""
        update = finalize_event('evt_1', scores, events, players, ledger)
        results = validate_all(update.players, update.events, update.ledger)
        assert results == {'players': [], 'events': [], 'ledger': []}

    def test_unknown_event(self, ledger, events):
        """Transactions must reference a known event."""
        ledger[0]['eventId'] = 'evt_gone'
        errors = validate_ledger(ledger, events)
        assert errors == ['Transaction txn_subs_alice references unknown event evt_gone']

    def test_entries_for_open_event(self, ledger, events):
        """Open events have no transactions."""
        ledger[0]['eventId'] = 'evt_1'
        errors = validate_ledger(ledger, events)
        assert errors == ['Transaction txn_subs_alice belongs to unfinalized event evt_1']

    def test_unknown_type(self, ledger, events):
        """Unknown transaction types are reported."""
        ledger[0]['type'] = 'refund'
        errors = validate_ledger(ledger, events)
        assert errors == ["Transaction txn_subs_alice has unknown type 'refund'"]

    def test_duplicate_ids(self, ledger, events):
        """Duplicate transaction ids are reported."""
        errors = validate_ledger(ledger + ledger, events)
        assert errors == ['Duplicate transaction ids: txn_subs_alice']


class TestScoreValidation:
    """Tests for validate_scores."""

    def test_valid_scores(self, scores, players):
        """The fixture scores are valid."""
        assert validate_scores(scores, players) == []

    def test_unknown_and_duplicate(self, scores, players):
        """Unknown players and repeated players are reported."""
        scores.append({'playerId': 'p_guest', 'stablefordScore': 20})
        scores.append({'playerId': 'p_bob', 'stablefordScore': 20})
        errors = validate_scores(scores, players)
        assert 'Duplicate scores for players: p_bob' in errors
        assert 'Score for unknown player p_guest' in errors


class TestHandicapLinks:
    """Tests for validate_handicap_links."""

    def test_entry_for_unfinalized_event(self, players, events):
        """Handicap entries must point at finalized events."""
        players[0]['handicapHistory'].append(
            {'date': '2026-04-04', 'handicap': 9.7, 'eventId': 'evt_1', 'reason': 'manual'}
        )
        errors = validate_handicap_links(players, events)
        assert errors == ['Player p_alice has a handicap entry for evt_1, which is not finalized']
