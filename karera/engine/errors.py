"""Caller-facing race errors.

Each error is a recoverable precondition violation local to one call. The
operation that raised it has made no state change. ``code`` is the stable
error kind reported to external callers; ``status_code`` is what the HTTP
layer answers with.
"""


class RaceError(Exception):
    """Base class for every caller-facing race error."""

    code = "RaceError"
    status_code = 400
    default_message = "Race operation failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.code, "detail": self.message}


class BettingClosed(RaceError):
    code = "BettingClosed"
    status_code = 409
    default_message = "Betting is closed for this race"


class InvalidHorseId(RaceError):
    code = "InvalidHorseId"
    default_message = "Horse id out of range"


class SameHorsePicked(RaceError):
    code = "SameHorsePicked"
    default_message = "First and second pick must be different horses"


class ZeroBetAmount(RaceError):
    code = "ZeroBetAmount"
    default_message = "Amount must be greater than zero"


class NotOwner(RaceError):
    code = "NotOwner"
    status_code = 403
    default_message = "Only the owner can perform this action"


class RaceNotInBettingPhase(RaceError):
    code = "RaceNotInBettingPhase"
    status_code = 409
    default_message = "Race already started or finished"


class RaceNotInProgress(RaceError):
    code = "RaceNotInProgress"
    status_code = 409
    default_message = "Race is not in progress"


class RaceNotFinished(RaceError):
    code = "RaceNotFinished"
    status_code = 409
    default_message = "Race is not finished"


class InsufficientBalance(RaceError):
    code = "InsufficientBalance"
    status_code = 402
    default_message = "Insufficient balance"


class RosterConfigError(Exception):
    """Roster configuration broke an invariant. Not recoverable by the caller."""
