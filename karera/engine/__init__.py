"""Deterministic race engine: fixed-point RNG, simulator, probabilities, ledger and payouts."""

from karera.engine.errors import (
    RaceError,
    BettingClosed,
    InvalidHorseId,
    SameHorsePicked,
    ZeroBetAmount,
    NotOwner,
    RaceNotInBettingPhase,
    RaceNotInProgress,
    RaceNotFinished,
    InsufficientBalance,
    RosterConfigError,
)
from karera.engine.status import RaceStatus
from karera.engine.roster import Horse, Roster
from karera.engine.ledger import ExactaBet
from karera.engine.payouts import Payout
from karera.engine.probability import ExactaProbability
from karera.engine.race import RaceEngine, RaceResult

__all__ = [
    "RaceError",
    "BettingClosed",
    "InvalidHorseId",
    "SameHorsePicked",
    "ZeroBetAmount",
    "NotOwner",
    "RaceNotInBettingPhase",
    "RaceNotInProgress",
    "RaceNotFinished",
    "InsufficientBalance",
    "RosterConfigError",
    "RaceStatus",
    "Horse",
    "Roster",
    "ExactaBet",
    "Payout",
    "ExactaProbability",
    "RaceEngine",
    "RaceResult",
]
