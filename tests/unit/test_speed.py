"""Tests for the per-tick speed model."""

from karera.engine.fixed_point import LinearCongruentialGenerator
from karera.engine.speed import (
    RacePhase,
    draw_epsilon,
    epsilon_max,
    max_remaining_distance,
    max_tick_speed,
    phase_constant,
    phase_for_tick,
    sprint_bonus,
    tick_speed,
)


class TestPhases:

    def test_phase_boundaries(self):
        assert phase_for_tick(0) is RacePhase.WARMUP
        assert phase_for_tick(14) is RacePhase.WARMUP
        assert phase_for_tick(15) is RacePhase.NORMAL
        assert phase_for_tick(44) is RacePhase.NORMAL
        assert phase_for_tick(45) is RacePhase.SPRINT
        assert phase_for_tick(59) is RacePhase.SPRINT

    def test_phase_constants(self, roster):
        h0 = roster.get(0)
        assert phase_constant(h0, 0) == 8500
        assert phase_constant(h0, 30) == 10000
        assert phase_constant(h0, 50) == 10000 + 238

    def test_sprint_bonus_scales_with_strength(self, roster):
        bonuses = [sprint_bonus(h) for h in roster]
        assert bonuses == [238, 198, 158, 119, 79, 39]


class TestVariance:

    def test_epsilon_max_inverse_to_strength(self, roster):
        assert [epsilon_max(h) for h in roster] == [200, 240, 300, 400, 600, 1200]

    def test_draw_epsilon_within_bounds(self, roster):
        rng = LinearCongruentialGenerator(7)
        for horse in roster:
            for _ in range(200):
                eps = draw_epsilon(rng, horse)
                assert -epsilon_max(horse) <= eps <= epsilon_max(horse)

    def test_draw_epsilon_uses_one_draw(self, roster):
        rng = LinearCongruentialGenerator(0)
        assert draw_epsilon(rng, roster.get(0)) == 115  # 12345 % 401 - 200
        assert rng.draws == 1


class TestTickSpeed:

    def test_warmup_speed(self, roster):
        assert tick_speed(roster.get(0), 0, 0) == 170000

    def test_normal_speed(self, roster):
        assert tick_speed(roster.get(0), 20, 0) == 200000

    def test_sprint_speed_with_variance(self, roster):
        assert tick_speed(roster.get(0), 50, 200) == 208855

    def test_weakest_horse_slowest_draw(self, roster):
        assert tick_speed(roster.get(5), 0, -1200) == 112200

    def test_never_negative(self, roster):
        assert tick_speed(roster.get(5), 0, -20000) == 0

    def test_max_speed_bounds_every_draw(self, roster):
        for horse in roster:
            for tick in (0, 20, 50):
                assert max_tick_speed(horse, tick) >= tick_speed(horse, tick, epsilon_max(horse) - 1)

    def test_no_distance_left_after_last_tick(self, roster):
        assert max_remaining_distance(roster.get(0), 59) == 0

    def test_remaining_distance_shrinks(self, roster):
        h = roster.get(3)
        assert max_remaining_distance(h, 10) > max_remaining_distance(h, 40) > 0
