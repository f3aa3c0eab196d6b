"""Events emitted by successful race engine mutations."""

from dataclasses import dataclass, asdict


@dataclass(frozen=True)
class RaceEvent:
    def to_dict(self) -> dict:
        d = asdict(self)
        d["event"] = type(self).__name__
        return d


@dataclass(frozen=True)
class RaceStarted(RaceEvent):
    race_id: int
    seed: int
    total_bets: int


@dataclass(frozen=True)
class RaceFinished(RaceEvent):
    race_id: int
    first_place: int
    second_place: int
    third_place: int


@dataclass(frozen=True)
class BetPlaced(RaceEvent):
    bettor: str
    first_pick: int
    second_pick: int
    amount: int


@dataclass(frozen=True)
class PayoutDistributed(RaceEvent):
    bettor: str
    amount: int
    multiplier: int


@dataclass(frozen=True)
class Deposited(RaceEvent):
    account: str
    amount: int


@dataclass(frozen=True)
class Withdrawn(RaceEvent):
    account: str
    amount: int


@dataclass(frozen=True)
class RaceReset(RaceEvent):
    race_id: int


@dataclass(frozen=True)
class OwnerChanged(RaceEvent):
    old_owner: str
    new_owner: str
