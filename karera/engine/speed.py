"""Per-tick speed model: race phases, strength bonus and bounded variance.

All values are PRECISION-scaled integers. A horse's speed for one tick is

    speed = base_speed * phase_constant * (1 + epsilon)

where the phase constant depends on the elapsed tick and epsilon is drawn from
the race RNG within a strength-dependent bound.
"""

from enum import Enum

from karera.engine.fixed_point import (
    PRECISION,
    LinearCongruentialGenerator,
    fp_div,
    fp_mul,
    to_fixed,
)
from karera.engine.roster import Horse

MAX_TICKS = 60

WARMUP_END_TICK = 15
SPRINT_START_TICK = 45

WARMUP_CONSTANT = 8_500   # 0.85
NORMAL_CONSTANT = PRECISION  # 1.0
SPRINT_BONUS_DIVISOR = 12

# epsilon_max = 12% / strength
VARIANCE_PERCENT = 12


class RacePhase(str, Enum):
    WARMUP = "warmup"
    NORMAL = "normal"
    SPRINT = "sprint"


def phase_for_tick(tick: int) -> RacePhase:
    """Phase 1 is ticks [0, 15), phase 2 is [15, 45), phase 3 is 45 onwards."""
    if tick < WARMUP_END_TICK:
        return RacePhase.WARMUP
    if tick < SPRINT_START_TICK:
        return RacePhase.NORMAL
    return RacePhase.SPRINT


def sprint_bonus(horse: Horse) -> int:
    """Strength-proportional sprint bonus, S[i] / 12."""
    return horse.normalized_strength // SPRINT_BONUS_DIVISOR


def phase_constant(horse: Horse, tick: int) -> int:
    phase = phase_for_tick(tick)
    if phase is RacePhase.WARMUP:
        return WARMUP_CONSTANT
    if phase is RacePhase.NORMAL:
        return NORMAL_CONSTANT
    return NORMAL_CONSTANT + sprint_bonus(horse)


def epsilon_max(horse: Horse) -> int:
    """Variance bound in PRECISION units. Weaker horses swing more."""
    return fp_div(VARIANCE_PERCENT, 100 * horse.strength)


def draw_epsilon(rng: LinearCongruentialGenerator, horse: Horse) -> int:
    """Consume exactly one draw and map it into [-epsilon_max, +epsilon_max]."""
    return rng.next_symmetric(epsilon_max(horse))


def tick_speed(horse: Horse, tick: int, epsilon: int) -> int:
    """Speed for one tick in PRECISION-scaled distance units. Never negative."""
    phased = fp_mul(to_fixed(horse.base_speed), phase_constant(horse, tick))
    speed = fp_mul(phased, PRECISION + epsilon)
    return max(0, speed)


def max_tick_speed(horse: Horse, tick: int) -> int:
    """Upper bound on tick_speed(): the speed at +epsilon_max."""
    return tick_speed(horse, tick, epsilon_max(horse))


def max_remaining_distance(horse: Horse, after_tick: int, max_ticks: int = MAX_TICKS) -> int:
    """Most distance ``horse`` could still cover in ticks after ``after_tick``."""
    return sum(max_tick_speed(horse, t) for t in range(after_tick + 1, max_ticks))
