"""Race lifecycle state machine.

    Betting -> Racing -> Finished -> Closed

Reset is allowed from any state and returns to Betting.
"""

from enum import Enum

from karera.engine.errors import RaceError


class RaceStatus(str, Enum):
    BETTING = "Betting"
    RACING = "Racing"
    FINISHED = "Finished"
    CLOSED = "Closed"


TRANSITIONS: dict[RaceStatus, frozenset[RaceStatus]] = {
    RaceStatus.BETTING: frozenset({RaceStatus.RACING}),
    RaceStatus.RACING: frozenset({RaceStatus.FINISHED}),
    RaceStatus.FINISHED: frozenset({RaceStatus.CLOSED}),
    RaceStatus.CLOSED: frozenset(),
}


def can_transition(current: RaceStatus, target: RaceStatus) -> bool:
    if target is RaceStatus.BETTING:
        # reset
        return True
    return target in TRANSITIONS[current]


def require_status(current: RaceStatus, required: RaceStatus, error: type[RaceError]) -> None:
    """Raise ``error`` unless the race is in ``required``."""
    if current is not required:
        raise error(f"Race is {current.value}, expected {required.value}")


def transition(current: RaceStatus, target: RaceStatus) -> RaceStatus:
    if not can_transition(current, target):
        raise ValueError(f"Illegal race status transition {current.value} -> {target.value}")
    return target
