"""Tests for exacta payout calculation."""

import pytest

from karera.engine.ledger import ExactaBet
from karera.engine.payouts import calculate_payouts
from karera.engine.probability import ProbabilityCalculator


def _bet(bettor, first, second, amount):
    return ExactaBet(bettor=bettor, amount=amount, first_pick=first, second_pick=second, timestamp=0)


@pytest.fixture
def calculator(roster):
    return ProbabilityCalculator(roster)


class TestCalculatePayouts:

    def test_winning_bet_paid_at_multiplier(self, calculator):
        payouts = calculate_payouts([_bet("alice", 4, 5, 3)], (4, 5), calculator)
        assert len(payouts) == 1
        p = payouts[0]
        assert p.bettor == "alice"
        assert p.bet_amount == 3
        assert p.multiplier == 1000
        assert p.payout_amount == 3000
        assert p.exacta == (4, 5)

    def test_reverse_order_loses(self, calculator):
        assert calculate_payouts([_bet("alice", 5, 4, 3)], (4, 5), calculator) == []

    def test_only_matching_bets_paid_in_ledger_order(self, calculator):
        bets = [
            _bet("alice", 0, 1, 10),
            _bet("bob", 1, 0, 10),
            _bet("carol", 0, 1, 7),
            _bet("dave", 0, 2, 10),
        ]
        payouts = calculate_payouts(bets, (0, 1), calculator)
        assert [p.bettor for p in payouts] == ["alice", "carol"]
        assert [p.payout_amount for p in payouts] == [20, 14]

    def test_no_bets(self, calculator):
        assert calculate_payouts([], (0, 1), calculator) == []

    def test_to_dict(self, calculator):
        payout = calculate_payouts([_bet("alice", 0, 1, 10)], (0, 1), calculator)[0]
        assert payout.to_dict() == {
            "bettor": "alice",
            "bet_amount": 10,
            "multiplier": 2,
            "payout_amount": 20,
            "exacta": [0, 1],
        }
