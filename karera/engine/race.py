"""Race engine: the complete operation surface over one versioned state aggregate.

Control flow for a race:

    place_bet ... -> start_race(seed) -> run_simulation() -> distribute_payouts() -> reset()

Every mutating call is all-or-nothing. The aggregate is snapshotted before the
call and restored if anything raises, so a failed call leaves no ledger entry,
status change, balance change or event behind. The engine does no locking: the
host must serialize callers. ``transaction()`` extends the same rollback over
a caller's own follow-up work, such as persisting the result.
"""

import logging
from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass, field, asdict
from typing import Callable, Iterable, Iterator, Optional

from karera.engine.errors import (
    NotOwner,
    RaceNotFinished,
    RaceNotInBettingPhase,
    RaceNotInProgress,
)
from karera.engine.events import (
    BetPlaced,
    Deposited,
    OwnerChanged,
    PayoutDistributed,
    RaceEvent,
    RaceFinished,
    RaceReset,
    RaceStarted,
    Withdrawn,
)
from karera.engine.fixed_point import SEED_MASK
from karera.engine.ledger import BetLedger, ExactaBet
from karera.engine.payouts import Payout, calculate_payouts
from karera.engine.probability import ExactaProbability, ProbabilityCalculator
from karera.engine.roster import Horse, Roster
from karera.engine.simulator import RaceSimulator
from karera.engine.status import RaceStatus, require_status, transition
from karera.engine.wallet import Wallet

logger = logging.getLogger(__name__)

# Undrained events beyond this are dropped oldest first.
MAX_PENDING_EVENTS = 1_000


@dataclass(frozen=True)
class RaceResult:
    """Outcome of one race. Created once at simulation completion, then immutable."""

    race_id: int
    rankings: tuple[int, ...]
    finish_times: tuple[int, ...]
    winning_exacta: tuple[int, int]
    total_pot: int
    seed_used: int

    def to_dict(self) -> dict:
        d = asdict(self)
        d["rankings"] = list(self.rankings)
        d["finish_times"] = list(self.finish_times)
        d["winning_exacta"] = list(self.winning_exacta)
        return d


@dataclass
class RaceState:
    """Everything the engine mutates. ``version`` counts successful mutations."""

    owner: str
    ledger: BetLedger
    wallet: Wallet = field(default_factory=Wallet)
    race_id: int = 1
    status: RaceStatus = RaceStatus.BETTING
    current_seed: int = 0
    history: list[RaceResult] = field(default_factory=list)
    payouts: list[Payout] = field(default_factory=list)
    pending_events: deque[RaceEvent] = field(
        default_factory=lambda: deque(maxlen=MAX_PENDING_EVENTS)
    )
    version: int = 0

    def copy(self) -> "RaceState":
        return RaceState(
            owner=self.owner,
            ledger=self.ledger.copy(),
            wallet=self.wallet.copy(),
            race_id=self.race_id,
            status=self.status,
            current_seed=self.current_seed,
            history=list(self.history),
            payouts=list(self.payouts),
            pending_events=deque(self.pending_events, maxlen=self.pending_events.maxlen),
            version=self.version,
        )


class RaceEngine:
    """Owns the roster, odds table and race state for a sequence of races."""

    def __init__(
        self,
        owner: Optional[str] = None,
        roster: Optional[Roster] = None,
        clock: Optional[Callable[[], int]] = None,
        min_bets: Optional[int] = None,
        enforce_balances: Optional[bool] = None,
        max_pending_events: int = MAX_PENDING_EVENTS,
    ):
        from karera.config import settings, now_ms

        self.roster = roster or Roster()
        self.calculator = ProbabilityCalculator(self.roster)
        self.clock = clock or now_ms
        self.min_bets = settings.min_bets if min_bets is None else min_bets
        self.enforce_balances = (
            settings.enforce_balances if enforce_balances is None else enforce_balances
        )
        self._state = RaceState(
            owner=settings.owner if owner is None else owner,
            ledger=BetLedger(self.roster),
            pending_events=deque(maxlen=max_pending_events),
        )

    # ──────────────────────────────────────────────
    # Transactions
    # ──────────────────────────────────────────────

    @contextmanager
    def _mutation(self) -> Iterator[RaceState]:
        snapshot = self._state.copy()
        try:
            yield self._state
        except Exception:
            self._state = snapshot
            raise
        self._state.version += 1

    @contextmanager
    def transaction(self) -> Iterator["RaceEngine"]:
        """Group engine calls with work outside the engine, such as a database write.

        If anything inside raises, the engine is put back exactly as it was on
        entry, events included. On success the state is what the inner calls left.
        """
        snapshot = self._state.copy()
        try:
            yield self
        except Exception:
            self._state = snapshot
            logger.warning(f"Rolled back engine to version {snapshot.version}")
            raise

    def _require_owner(self, state: RaceState, caller: str) -> None:
        if caller != state.owner:
            raise NotOwner(f"{caller!r} is not the race owner")

    def _emit(self, state: RaceState, event: RaceEvent) -> None:
        state.pending_events.append(event)
        logger.info(f"Event {type(event).__name__}: {event.to_dict()}")

    # ──────────────────────────────────────────────
    # Betting
    # ──────────────────────────────────────────────

    def place_bet(
        self,
        bettor: str,
        first_pick: int,
        second_pick: int,
        amount: int,
        timestamp: Optional[int] = None,
    ) -> ExactaBet:
        """Record an exacta bet on the active race."""
        with self._mutation() as state:
            bet = state.ledger.place(
                state.status,
                bettor,
                first_pick,
                second_pick,
                amount,
                self.clock() if timestamp is None else timestamp,
            )
            if self.enforce_balances:
                state.wallet.debit(bettor, amount)
            self._emit(state, BetPlaced(bettor, first_pick, second_pick, amount))
        return bet

    # ──────────────────────────────────────────────
    # Race lifecycle
    # ──────────────────────────────────────────────

    def _start(self, state: RaceState, caller: str, seed: int) -> None:
        self._require_owner(state, caller)
        require_status(state.status, RaceStatus.BETTING, RaceNotInBettingPhase)
        state.current_seed = int(seed) & SEED_MASK
        state.status = transition(state.status, RaceStatus.RACING)
        self._emit(state, RaceStarted(state.race_id, state.current_seed, len(state.ledger)))

    def _run(self, state: RaceState) -> RaceResult:
        require_status(state.status, RaceStatus.RACING, RaceNotInProgress)
        if len(state.ledger) < self.min_bets:
            raise RaceNotInProgress(
                f"Race needs at least {self.min_bets} bets, has {len(state.ledger)}"
            )

        outcome = RaceSimulator(self.roster).run(state.current_seed)
        result = RaceResult(
            race_id=state.race_id,
            rankings=outcome.rankings,
            finish_times=outcome.finish_times,
            winning_exacta=outcome.winning_exacta,
            total_pot=state.ledger.total_pot,
            seed_used=state.current_seed,
        )
        state.history.append(result)
        state.status = transition(state.status, RaceStatus.FINISHED)
        self._emit(state, RaceFinished(
            state.race_id, result.rankings[0], result.rankings[1], result.rankings[2],
        ))
        logger.info(
            f"Race {state.race_id} finished after {outcome.ticks_run} ticks "
            f"(seed {state.current_seed}): exacta {result.winning_exacta}"
        )
        return result

    def start_race(self, caller: str, seed: int) -> None:
        """Close betting and fix the seed. Owner only."""
        with self._mutation() as state:
            self._start(state, caller, seed)

    def run_simulation(self) -> RaceResult:
        """Run the started race to completion and record its result."""
        with self._mutation() as state:
            return self._run(state)

    def simulate_complete_race(self, caller: str, seed: int) -> RaceResult:
        """start_race + run_simulation as one atomic step. Owner only."""
        with self._mutation() as state:
            self._start(state, caller, seed)
            return self._run(state)

    def distribute_payouts(self) -> list[Payout]:
        """Settle the finished race and close it. A second call is rejected."""
        with self._mutation() as state:
            require_status(state.status, RaceStatus.FINISHED, RaceNotFinished)
            result = state.history[-1]
            payouts = calculate_payouts(state.ledger.bets, result.winning_exacta, self.calculator)
            for payout in payouts:
                if payout.payout_amount:
                    state.wallet.credit(payout.bettor, payout.payout_amount)
                self._emit(state, PayoutDistributed(
                    payout.bettor, payout.payout_amount, payout.multiplier,
                ))
            state.payouts = list(payouts)
            state.status = transition(state.status, RaceStatus.CLOSED)
            total = sum(p.payout_amount for p in payouts)
            logger.info(
                f"Race {state.race_id} closed: {len(payouts)} winning bets, paid {total} "
                f"of pot {state.ledger.total_pot}"
            )
        return list(payouts)

    def reset(self, caller: str) -> None:
        """Start a fresh race: new id, empty ledger. History is kept. Owner only."""
        with self._mutation() as state:
            self._require_owner(state, caller)
            state.ledger.clear()
            state.payouts = []
            state.current_seed = 0
            state.race_id += 1
            state.status = transition(state.status, RaceStatus.BETTING)
            self._emit(state, RaceReset(state.race_id))

    def load_history(self, results: Iterable[RaceResult]) -> int:
        """Restore stored results after a restart. Returns the next race id.

        Only allowed before any bet is taken on the current race. The next race
        takes the id after the newest stored one, so ids never repeat.
        """
        with self._mutation() as state:
            require_status(state.status, RaceStatus.BETTING, RaceNotInBettingPhase)
            if len(state.ledger):
                raise RaceNotInBettingPhase("Cannot load history once bets are placed")
            loaded = sorted(results, key=lambda r: r.race_id)
            if loaded:
                state.history = loaded
                state.race_id = max(state.race_id, loaded[-1].race_id + 1)
            logger.info(f"Loaded {len(loaded)} stored races, next race id {state.race_id}")
            return state.race_id

    # ──────────────────────────────────────────────
    # Accounts & administration
    # ──────────────────────────────────────────────

    def deposit(self, caller: str, account: str, amount: int) -> int:
        """Credit an account. Owner only. Returns the new balance."""
        with self._mutation() as state:
            self._require_owner(state, caller)
            balance = state.wallet.credit(account, amount)
            self._emit(state, Deposited(account, amount))
        return balance

    def withdraw(self, caller: str, amount: int) -> int:
        """Debit the caller's own account. Returns the new balance."""
        with self._mutation() as state:
            balance = state.wallet.debit(caller, amount)
            self._emit(state, Withdrawn(caller, amount))
        return balance

    def set_owner(self, caller: str, new_owner: str) -> None:
        with self._mutation() as state:
            self._require_owner(state, caller)
            old = state.owner
            state.owner = new_owner
            self._emit(state, OwnerChanged(old, new_owner))

    def drain_events(self) -> list[RaceEvent]:
        """Return and forget events emitted since the last drain."""
        events = list(self._state.pending_events)
        self._state.pending_events.clear()
        return events

    # ──────────────────────────────────────────────
    # Queries
    # ──────────────────────────────────────────────

    def get_horses(self) -> tuple[Horse, ...]:
        return self.roster.horses

    def get_horse(self, horse_id: int) -> Optional[Horse]:
        return self.roster.find(horse_id)

    def get_bets(self) -> tuple[ExactaBet, ...]:
        return self._state.ledger.bets

    def get_total_pot(self) -> int:
        return self._state.ledger.total_pot

    def get_status(self) -> RaceStatus:
        return self._state.status

    def get_race_id(self) -> int:
        return self._state.race_id

    def get_latest_result(self) -> Optional[RaceResult]:
        return self._state.history[-1] if self._state.history else None

    def get_race_history(self) -> tuple[RaceResult, ...]:
        return tuple(self._state.history)

    def get_winners(self) -> Optional[tuple[int, int]]:
        latest = self.get_latest_result()
        return latest.winning_exacta if latest else None

    def get_payouts(self) -> tuple[Payout, ...]:
        return tuple(self._state.payouts)

    def get_exacta_probability_table(self) -> tuple[ExactaProbability, ...]:
        return self.calculator.get_table()

    def calculate_exacta_probability(self, first: int, second: int) -> int:
        return self.calculator.calculate_probability(first, second)

    def get_reward_multiplier(self, first: int, second: int) -> int:
        return self.calculator.multiplier(first, second)

    def get_normalized_strength(self, horse_id: int) -> int:
        return self.roster.normalized_strength(horse_id)

    def get_owner(self) -> str:
        return self._state.owner

    def get_balance(self, account: str) -> int:
        return self._state.wallet.balance(account)

    def get_state_version(self) -> int:
        return self._state.version
