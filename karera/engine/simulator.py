"""Tick-based race simulator.

One tick is one simulated second, at most MAX_TICKS of them. Each tick every
horse still running draws one value from the race RNG (horse id ascending),
computes its speed and moves. A horse crossing RACE_DISTANCE is marked
finished at that tick and frozen.

The race stops early once at least MIN_FINISHERS horses are home and none of
the horses still running could reach the line before the hard stop, even
drawing maximum variance on every remaining tick. Otherwise it is stopped at
MAX_TICKS regardless of how many have finished.

Same seed + same roster = identical outcome. Nothing here reads a clock or any
entropy source besides the seeded generator.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum

from karera.engine.fixed_point import LinearCongruentialGenerator, to_fixed
from karera.engine.roster import Roster
from karera.engine.speed import (
    MAX_TICKS,
    draw_epsilon,
    max_remaining_distance,
    tick_speed,
)

logger = logging.getLogger(__name__)

RACE_DISTANCE = 1000
FINISH_LINE = to_fixed(RACE_DISTANCE)
MIN_FINISHERS = 3


class SimulatorState(str, Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    DONE = "done"


@dataclass
class HorseRaceState:
    """Mutable per-race state of one horse. Discarded when the race ends."""

    horse_id: int
    position: int = 0
    speed: int = 0
    finished: bool = False
    finish_time: int | None = None

    def advance(self, speed: int, tick: int) -> None:
        if self.finished:
            return
        self.speed = speed
        self.position += speed
        if self.position >= FINISH_LINE:
            self.finished = True
            self.finish_time = tick


@dataclass(frozen=True)
class SimulationOutcome:
    """What a completed simulation produced, before it is wrapped into a RaceResult."""

    seed: int
    rankings: tuple[int, ...]
    finish_times: tuple[int, ...]
    positions: tuple[int, ...]  # final positions indexed by horse id
    ticks_run: int
    finished_count: int
    stopped_early: bool

    @property
    def winning_exacta(self) -> tuple[int, int]:
        return (self.rankings[0], self.rankings[1])


class RaceSimulator:
    """Runs one race for a seed. Create a fresh simulator per race."""

    def __init__(self, roster: Roster, max_ticks: int = MAX_TICKS):
        self.roster = roster
        self.max_ticks = max_ticks
        self.state = SimulatorState.NOT_STARTED
        self.tick = 0
        self.horses: list[HorseRaceState] = []
        self._rng: LinearCongruentialGenerator | None = None

    def run(self, seed: int) -> SimulationOutcome:
        if self.state is not SimulatorState.NOT_STARTED:
            raise RuntimeError("RaceSimulator instances run exactly one race")

        self._rng = LinearCongruentialGenerator(seed)
        self.horses = [HorseRaceState(horse_id=h.id) for h in self.roster]
        self.state = SimulatorState.RUNNING

        stopped_early = False
        ticks_run = self.max_ticks
        for tick in range(self.max_ticks):
            self.tick = tick
            self._step(tick)
            if self._should_stop(tick):
                stopped_early = tick < self.max_ticks - 1
                ticks_run = tick + 1
                break

        self.state = SimulatorState.DONE
        rankings = self._rank()
        finish_times = tuple(
            self.horses[hid].finish_time if self.horses[hid].finished else ticks_run
            for hid in rankings
        )
        finished_count = sum(1 for h in self.horses if h.finished)

        logger.debug(
            f"Seed {self._rng.seed}: {finished_count} finished in {ticks_run} ticks, "
            f"rankings={list(rankings)}, draws={self._rng.draws}"
        )

        return SimulationOutcome(
            seed=self._rng.seed,
            rankings=rankings,
            finish_times=finish_times,
            positions=tuple(h.position for h in self.horses),
            ticks_run=ticks_run,
            finished_count=finished_count,
            stopped_early=stopped_early,
        )

    def _step(self, tick: int) -> None:
        for state in self.horses:
            if state.finished:
                continue
            horse = self.roster.horses[state.horse_id]
            epsilon = draw_epsilon(self._rng, horse)
            state.advance(tick_speed(horse, tick, epsilon), tick)

    def _should_stop(self, tick: int) -> bool:
        finished = [h for h in self.horses if h.finished]
        if not finished:
            return False
        if len(finished) < MIN_FINISHERS:
            return False
        return not any(self._can_still_finish(h, tick) for h in self.horses if not h.finished)

    def _can_still_finish(self, state: HorseRaceState, tick: int) -> bool:
        """Could this horse reach the line before the hard stop at full variance?"""
        horse = self.roster.horses[state.horse_id]
        reach = state.position + max_remaining_distance(horse, tick, self.max_ticks)
        return reach >= FINISH_LINE

    def _rank(self) -> tuple[int, ...]:
        def sort_key(state: HorseRaceState):
            if state.finished:
                return (0, state.finish_time, -state.position, state.horse_id)
            return (1, 0, -state.position, state.horse_id)

        return tuple(s.horse_id for s in sorted(self.horses, key=sort_key))


def simulate(roster: Roster, seed: int) -> SimulationOutcome:
    """Run a single race for ``seed`` on ``roster``."""
    return RaceSimulator(roster).run(seed)
