"""Unit tests for event finalization and reversal."""

from copy import deepcopy

import pytest

from society.errors import (
    EventAlreadyFinalizedError,
    EventNotFoundError,
    InvalidRequestError,
)
from society.events import (
    create_event,
    determine_winners,
    finalize_event,
    parse_scores,
    unfinalize_event,
)

TODAY = '2026-04-04'


def entries_for(ledger, event_id, txn_type=None):
    return [
        t for t in ledger
        if t['eventId'] == event_id and (txn_type is None or t['type'] == txn_type)
    ]


def player(players, player_id):
    return next(p for p in players if p['id'] == player_id)


class TestFinalizeLedger:
    """Tests for the ledger postings made on finalize."""

    def test_one_entry_fee_per_score(self, scores, events, players, ledger):
        """Every score is charged the entry fee."""
        update = finalize_event('evt_1', scores, events, players, ledger, today=TODAY)
        fees = entries_for(update.ledger, 'evt_1', 'entry_fee')
        assert [f['playerId'] for f in fees] == ['p_alice', 'p_bob', 'p_cara']
        assert all(f['amount'] == -5.0 for f in fees)
        assert all(f['description'] == 'Entry for Royal Oak' for f in fees)

    def test_fines_only_when_counted(self, scores, events, players, ledger):
        """Fines are posted only for non-zero counts."""
        update = finalize_event('evt_1', scores, events, players, ledger, today=TODAY)
        fines = entries_for(update.ledger, 'evt_1', 'fine')

        # Alice: none. Bob: 2 snakes. Cara: 1 snake, 3 camels.
        assert [(f['playerId'], f['amount'], f['description']) for f in fines] == [
            ('p_bob', -2.0, '2 snake(s)'),
            ('p_cara', -1.0, '1 snake(s)'),
            ('p_cara', -3.0, '3 camel(s)'),
        ]

    def test_posting_order(self, scores, events, players, ledger):
        """Per player: entry fee, snake fine, camel fine; payout last."""
        update = finalize_event('evt_1', scores, events, players, ledger, today=TODAY)
        posted = entries_for(update.ledger, 'evt_1')
        assert [(t['playerId'], t['type']) for t in posted] == [
            ('p_alice', 'entry_fee'),
            ('p_bob', 'entry_fee'),
            ('p_bob', 'fine'),
            ('p_cara', 'entry_fee'),
            ('p_cara', 'fine'),
            ('p_cara', 'fine'),
            ('p_alice', 'payout'),
        ]

    def test_transactions_tagged_and_dated(self, scores, events, players, ledger):
        """Postings carry today's date and unique ids."""
        update = finalize_event('evt_1', scores, events, players, ledger, today=TODAY)
        posted = entries_for(update.ledger, 'evt_1')
        assert all(t['date'] == TODAY for t in posted)
        assert len({t['id'] for t in update.ledger}) == len(update.ledger)

    def test_existing_entries_kept(self, scores, events, players, ledger):
        """Earlier ledger entries are left in place."""
        update = finalize_event('evt_1', scores, events, players, ledger, today=TODAY)
        assert update.ledger[0] == ledger[0]

    def test_missing_fine_counts_default_to_zero(self, events, players, ledger):
        """Scores without snakes or camels post no fines."""
        update = finalize_event(
            'evt_1', [{'playerId': 'p_alice', 'stablefordScore': 20}],
            events, players, ledger, today=TODAY,
        )
        assert entries_for(update.ledger, 'evt_1', 'fine') == []


class TestFinalizeWinners:
    """Tests for prize money and rollover."""

    def test_single_winner_paid(self, scores, events, players, ledger):
        """An outright winner takes the whole prize."""
        update = finalize_event('evt_1', scores, events, players, ledger, today=TODAY)
        payouts = entries_for(update.ledger, 'evt_1', 'payout')
        assert len(payouts) == 1
        assert payouts[0]['playerId'] == 'p_alice'
        assert payouts[0]['amount'] == pytest.approx(4.5)
        assert payouts[0]['description'] == 'Prize money for Royal Oak'
        assert update.event['rolloverAmount'] == 0

    def test_tie_rolls_over(self, tie_scores, events, players, ledger):
        """A tie pays nobody and rolls the prize over."""
        update = finalize_event('evt_1', tie_scores, events, players, ledger, today=TODAY)
        assert entries_for(update.ledger, 'evt_1', 'payout') == []
        assert update.event['rolloverAmount'] == pytest.approx(3 * 1.50)

    def test_lone_player_wins(self, events, players, ledger):
        """A single score wins its own prize."""
        update = finalize_event(
            'evt_1', [{'playerId': 'p_bob', 'stablefordScore': 12}],
            events, players, ledger, today=TODAY,
        )
        payouts = entries_for(update.ledger, 'evt_1', 'payout')
        assert payouts[0]['amount'] == pytest.approx(1.5)

    def test_determine_winners(self, tie_scores):
        """Tied top scores are all winners."""
        winners, prize = determine_winners(parse_scores(tie_scores))
        assert [w.playerId for w in winners] == ['p_alice', 'p_bob']
        assert prize == pytest.approx(4.5)


class TestFinalizeHandicaps:
    """Tests for handicap history updates."""

    def test_history_entries_appended(self, scores, events, players, ledger):
        """Each scored player gets a new handicap entry."""
        update = finalize_event('evt_1', scores, events, players, ledger, today=TODAY)

        alice = player(update.players, 'p_alice')
        assert alice['handicapHistory'][-1] == {
            'date': TODAY,
            'handicap': 8.5,
            'eventId': 'evt_1',
            'reason': 'Adjustment after scoring 25 pts',
        }
        # Bob on 2.0 scored 18, below his 19 buffer
        assert player(update.players, 'p_bob')['handicapHistory'][-1]['handicap'] == 2.1
        # Cara on 15.0 scored 15, below her 16 buffer
        assert player(update.players, 'p_cara')['handicapHistory'][-1]['handicap'] == 15.1

    def test_buffer_zone_still_recorded(self, events, players, ledger):
        """An unchanged handicap still gets a history entry."""
        update = finalize_event(
            'evt_1', [{'playerId': 'p_alice', 'stablefordScore': 17}],
            events, players, ledger, today=TODAY,
        )
        history = player(update.players, 'p_alice')['handicapHistory']
        assert len(history) == 2
        assert history[-1]['handicap'] == 10.0

    def test_unknown_player_skipped(self, events, players, ledger):
        """Scores for unknown players skip the handicap update."""
        scores = [
            {'playerId': 'p_alice', 'stablefordScore': 21},
            {'playerId': 'p_guest', 'stablefordScore': 30},
        ]
        update = finalize_event('evt_1', scores, events, players, ledger, today=TODAY)

        assert [len(p['handicapHistory']) for p in update.players] == [2, 1, 1]
        # Guest still pays and wins
        assert entries_for(update.ledger, 'evt_1', 'payout')[0]['playerId'] == 'p_guest'

    def test_non_players_untouched(self, events, players, ledger):
        """Players without a score are unchanged."""
        update = finalize_event(
            'evt_1', [{'playerId': 'p_alice', 'stablefordScore': 21}],
            events, players, ledger, today=TODAY,
        )
        assert player(update.players, 'p_bob') == player(players, 'p_bob')


class TestFinalizeEvent:
    """Tests for event status and preconditions."""

    def test_event_marked_finalized(self, scores, events, players, ledger):
        """The event is finalized with its scores stored."""
        update = finalize_event('evt_1', scores, events, players, ledger, today=TODAY)
        assert update.event['isFinalized'] is True
        assert update.event['scores'] == scores
        assert update.events[0] is update.event
        assert update.events[1] == events[1]

    def test_inputs_not_mutated(self, scores, events, players, ledger):
        """Finalizing works on copies."""
        before = deepcopy((scores, events, players, ledger))
        finalize_event('evt_1', scores, events, players, ledger, today=TODAY)
        assert (scores, events, players, ledger) == before

    def test_already_finalized_rejected(self, scores, events, players, ledger):
        """A finalized event cannot be finalized again."""
        events[0]['isFinalized'] = True
        before = deepcopy((events, players, ledger))

        with pytest.raises(EventAlreadyFinalizedError):
            finalize_event('evt_1', scores, events, players, ledger)

        assert (events, players, ledger) == before

    def test_unknown_event(self, scores, events, players, ledger):
        """An unknown event id is a 404."""
        with pytest.raises(EventNotFoundError) as exc_info:
            finalize_event('evt_nope', scores, events, players, ledger)
        assert exc_info.value.status_code == 404

    @pytest.mark.parametrize('event_id,score_list,event_list', [
        ('', [{'playerId': 'p_alice', 'stablefordScore': 20}], []),
        ('evt_1', [], []),
        ('evt_1', [{'playerId': 'p_alice', 'stablefordScore': 20}], None),
    ])
    def test_missing_inputs(self, event_id, score_list, event_list, players, ledger):
        """Event id, scores and events are required."""
        with pytest.raises(InvalidRequestError):
            finalize_event(event_id, score_list, event_list, players, ledger)

    def test_malformed_score(self, events, players, ledger):
        """Negative fine counts are rejected."""
        with pytest.raises(InvalidRequestError):
            finalize_event(
                'evt_1', [{'playerId': 'p_alice', 'stablefordScore': 20, 'snakes': -1}],
                events, players, ledger,
            )


class TestUnfinalize:
    """Tests for reverting a finalized event."""

    def test_reverts_everything(self, scores, events, players, ledger):
        """Unfinalize restores players and ledger."""
        finalized = finalize_event('evt_1', scores, events, players, ledger, today=TODAY)
        reverted = unfinalize_event('evt_1', finalized.events, finalized.players, finalized.ledger)

        assert reverted.players == players
        assert reverted.ledger == ledger
        assert reverted.event['isFinalized'] is False

    def test_scores_kept_for_editing(self, scores, events, players, ledger):
        """Scores stay on the reopened event."""
        finalized = finalize_event('evt_1', scores, events, players, ledger, today=TODAY)
        reverted = unfinalize_event('evt_1', finalized.events, finalized.players, finalized.ledger)
        assert reverted.event['scores'] == scores

    def test_only_tail_entry_popped(self, scores, events, players, ledger):
        """Reverting an older event leaves players with a later adjustment alone."""
        first = finalize_event('evt_1', scores, events, players, ledger, today=TODAY)
        second = finalize_event(
            'evt_2', [{'playerId': 'p_alice', 'stablefordScore': 30}],
            first.events, first.players, first.ledger, today='2026-04-18',
        )

        reverted = unfinalize_event('evt_1', second.events, second.players, second.ledger)

        alice = player(reverted.players, 'p_alice')
        assert [e['eventId'] for e in alice['handicapHistory']] == [None, 'evt_1', 'evt_2']
        assert len(player(reverted.players, 'p_bob')['handicapHistory']) == 1
        assert len(player(reverted.players, 'p_cara')['handicapHistory']) == 1

        assert entries_for(reverted.ledger, 'evt_1') == []
        assert len(entries_for(reverted.ledger, 'evt_2')) == 2

    def test_unfinalized_event_is_noop(self, events, players, ledger):
        """Reverting an open event changes nothing."""
        reverted = unfinalize_event('evt_2', events, players, ledger)
        assert reverted.players == players
        assert reverted.ledger == ledger
        assert reverted.event['isFinalized'] is False

    def test_inputs_not_mutated(self, scores, events, players, ledger):
        """Reverting works on copies."""
        finalized = finalize_event('evt_1', scores, events, players, ledger, today=TODAY)
        before = deepcopy(finalized)
        unfinalize_event('evt_1', finalized.events, finalized.players, finalized.ledger)
        assert finalized == before

    def test_unknown_event(self, events, players, ledger):
        """An unknown event id cannot be reverted."""
        with pytest.raises(EventNotFoundError):
            unfinalize_event('evt_nope', events, players, ledger)

    def test_missing_event_id(self, events, players, ledger):
        """An empty event id is a bad request."""
        with pytest.raises(InvalidRequestError):
            unfinalize_event('', events, players, ledger)


class TestRoundTrip:
    """Unfinalize then finalize again with the same scores."""

    def test_same_effects(self, scores, events, players, ledger):
        """The second finalize posts the same effects as the first."""
        first = finalize_event('evt_1', scores, events, players, ledger, today=TODAY)
        reverted = unfinalize_event('evt_1', first.events, first.players, first.ledger)
        again = finalize_event(
            'evt_1', reverted.event['scores'],
            reverted.events, reverted.players, reverted.ledger, today=TODAY,
        )

        def effects(ledger_list):
            return [
                (t['playerId'], t['type'], t['amount'], t['description'])
                for t in entries_for(ledger_list, 'evt_1')
            ]

        assert effects(again.ledger) == effects(first.ledger)
        assert again.players == first.players
        assert again.event == first.event


class TestCreateEvent:
    """Tests for creating a new event."""

    def test_new_event_is_open(self):
        """New events start unfinalized with no scores."""
        event = create_event('Royal Oak', '2026-05-02')
        assert event['eventId'].startswith('evt_')
        assert event['isFinalized'] is False
        assert event['scores'] == []

    def test_requires_course_and_date(self):
        """Course name and date are required."""
        with pytest.raises(InvalidRequestError):
            create_event('', '2026-05-02')
