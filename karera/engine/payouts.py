"""Exacta payout calculation."""

from dataclasses import dataclass, asdict
from typing import Iterable

from karera.engine.ledger import ExactaBet
from karera.engine.probability import ProbabilityCalculator


@dataclass(frozen=True)
class Payout:
    """A winning bet's settlement."""

    bettor: str
    bet_amount: int
    multiplier: int
    payout_amount: int
    exacta: tuple[int, int]

    def to_dict(self) -> dict:
        d = asdict(self)
        d["exacta"] = list(self.exacta)
        return d


def calculate_payouts(
    bets: Iterable[ExactaBet],
    winning_exacta: tuple[int, int],
    calculator: ProbabilityCalculator,
) -> list[Payout]:
    """One Payout per bet whose picks match ``winning_exacta``, in ledger order.

    payout = amount * multiplier(first, second). Losing bets produce nothing.
    """
    first, second = winning_exacta
    multiplier = calculator.multiplier(first, second)
    payouts = []
    for bet in bets:
        if bet.exacta != (first, second):
            continue
        payouts.append(Payout(
            bettor=bet.bettor,
            bet_amount=bet.amount,
            multiplier=multiplier,
            payout_amount=bet.amount * multiplier,
            exacta=(first, second),
        ))
    return payouts
