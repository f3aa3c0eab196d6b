"""Tests for the tick-based race simulator."""

import pytest

from karera.engine.fixed_point import LinearCongruentialGenerator
from karera.engine.simulator import (
    FINISH_LINE,
    MIN_FINISHERS,
    HorseRaceState,
    RaceSimulator,
    SimulatorState,
    simulate,
)
from karera.engine.speed import MAX_TICKS, max_remaining_distance

SEEDS = [0, 1, 42, 12345, 99999, 2 ** 31 - 1, 2 ** 40 + 3, 7777777]


class TestDeterminism:

    @pytest.mark.parametrize("seed", SEEDS)
    def test_same_seed_identical_outcome(self, roster, seed):
        assert simulate(roster, seed) == simulate(roster, seed)

    def test_independent_rosters_agree(self):
        from karera.engine.roster import Roster
        assert simulate(Roster(), 12345) == simulate(Roster(), 12345)


class TestTermination:

    @pytest.mark.parametrize("seed", range(40))
    def test_bounded_and_well_ranked(self, roster, seed):
        outcome = simulate(roster, seed)
        assert 1 <= outcome.ticks_run <= MAX_TICKS
        assert sorted(outcome.rankings) == list(range(6))
        assert len(outcome.finish_times) == 6
        assert outcome.winning_exacta == (outcome.rankings[0], outcome.rankings[1])

    @pytest.mark.parametrize("seed", range(40))
    def test_enough_finishers(self, roster, seed):
        # The three strongest horses clear the distance even on worst-case draws.
        outcome = simulate(roster, seed)
        assert outcome.finished_count >= MIN_FINISHERS

    @pytest.mark.parametrize("seed", SEEDS)
    def test_finishers_ranked_by_finish_time(self, roster, seed):
        outcome = simulate(roster, seed)
        times = outcome.finish_times[:outcome.finished_count]
        assert list(times) == sorted(times)
        assert all(t < outcome.ticks_run for t in times)

    @pytest.mark.parametrize("seed", SEEDS)
    def test_unfinished_ranked_by_position(self, roster, seed):
        outcome = simulate(roster, seed)
        unfinished = outcome.rankings[outcome.finished_count:]
        positions = [outcome.positions[hid] for hid in unfinished]
        assert positions == sorted(positions, reverse=True)
        assert all(p < FINISH_LINE for p in positions)
        assert all(t == outcome.ticks_run for t in outcome.finish_times[outcome.finished_count:])

    @pytest.mark.parametrize("seed", SEEDS)
    def test_early_stop_only_when_nobody_can_catch_up(self, roster, seed):
        sim = RaceSimulator(roster)
        outcome = sim.run(seed)
        if not outcome.stopped_early:
            return
        last_tick = outcome.ticks_run - 1
        assert outcome.finished_count >= MIN_FINISHERS
        for state in sim.horses:
            if state.finished:
                continue
            horse = roster.get(state.horse_id)
            assert state.position + max_remaining_distance(horse, last_tick) < FINISH_LINE


class TestTicks:

    def test_first_tick_draws_in_id_order(self, roster):
        sim = RaceSimulator(roster)
        sim._rng = LinearCongruentialGenerator(0)
        sim.horses = [HorseRaceState(horse_id=h.id) for h in roster]
        sim._step(0)
        # horse 0: 12345 % 401 - 200 = 115; horse 1: 1406932606 % 481 - 240 = 151
        assert sim.horses[0].position == 171955
        assert sim.horses[1].position == 163938
        assert sim._rng.draws == 6

    def test_finished_horse_frozen(self):
        state = HorseRaceState(horse_id=0, position=FINISH_LINE - 1)
        state.advance(5, tick=40)
        assert state.finished and state.finish_time == 40
        frozen = state.position
        state.advance(200000, tick=41)
        assert state.position == frozen
        assert state.finish_time == 40

    def test_position_never_decreases(self, roster):
        sim = RaceSimulator(roster)
        sim._rng = LinearCongruentialGenerator(5)
        sim.horses = [HorseRaceState(horse_id=h.id) for h in roster]
        previous = [0] * 6
        for tick in range(MAX_TICKS):
            sim._step(tick)
            current = [h.position for h in sim.horses]
            assert all(c >= p for c, p in zip(current, previous))
            previous = current

    def test_no_draws_for_finished_horses(self, roster):
        sim = RaceSimulator(roster)
        sim._rng = LinearCongruentialGenerator(5)
        sim.horses = [HorseRaceState(horse_id=h.id) for h in roster]
        sim.horses[0].finished = True
        sim.horses[0].finish_time = 0
        sim._step(1)
        assert sim._rng.draws == 5

    def test_simulator_runs_once(self, roster):
        sim = RaceSimulator(roster)
        sim.run(1)
        assert sim.state is SimulatorState.DONE
        with pytest.raises(RuntimeError):
            sim.run(1)
