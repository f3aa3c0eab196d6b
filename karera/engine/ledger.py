"""Bet ledger for the active race."""

import logging
from dataclasses import dataclass, asdict

from karera.engine.errors import BettingClosed, SameHorsePicked, ZeroBetAmount
from karera.engine.roster import Roster
from karera.engine.status import RaceStatus, require_status

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExactaBet:
    """An accepted exacta bet. Immutable once in the ledger."""

    bettor: str
    amount: int
    first_pick: int
    second_pick: int
    timestamp: int

    @property
    def exacta(self) -> tuple[int, int]:
        return (self.first_pick, self.second_pick)

    def to_dict(self) -> dict:
        return asdict(self)


class BetLedger:
    """Accumulates bets and the running pot. Cleared only as a whole."""

    def __init__(self, roster: Roster):
        self.roster = roster
        self._bets: list[ExactaBet] = []
        self._total_pot = 0

    def validate(self, status: RaceStatus, first_pick: int, second_pick: int, amount: int) -> None:
        """Check a bet without recording it. Raises the first failing rule."""
        require_status(status, RaceStatus.BETTING, BettingClosed)
        self.roster.validate_id(first_pick)
        self.roster.validate_id(second_pick)
        if first_pick == second_pick:
            raise SameHorsePicked()
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise ZeroBetAmount(f"Bet amount must be greater than 0, got {amount}")

    def place(
        self,
        status: RaceStatus,
        bettor: str,
        first_pick: int,
        second_pick: int,
        amount: int,
        timestamp: int,
    ) -> ExactaBet:
        self.validate(status, first_pick, second_pick, amount)
        bet = ExactaBet(
            bettor=bettor,
            amount=amount,
            first_pick=first_pick,
            second_pick=second_pick,
            timestamp=timestamp,
        )
        self._bets.append(bet)
        self._total_pot += amount
        logger.debug(f"Bet accepted: {bettor} {first_pick}->{second_pick} x{amount}")
        return bet

    @property
    def bets(self) -> tuple[ExactaBet, ...]:
        return tuple(self._bets)

    @property
    def total_pot(self) -> int:
        return self._total_pot

    def __len__(self) -> int:
        return len(self._bets)

    def clear(self) -> None:
        self._bets.clear()
        self._total_pot = 0

    def copy(self) -> "BetLedger":
        clone = BetLedger(self.roster)
        clone._bets = list(self._bets)
        clone._total_pot = self._total_pot
        return clone
