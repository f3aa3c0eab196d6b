"""Fixed-point arithmetic and the seeded race RNG.

Every strength, probability, speed and position in the engine is an integer
scaled by PRECISION (4 decimal digits). Divisions floor. No float ever enters
the simulation path, so results are bit-identical on any interpreter.

The generator is the glibc-style linear congruential generator. It is fast and
auditable, and it is NOT cryptographically secure: anyone who knows the seed
can replay the race.
"""

PRECISION = 10_000

# glibc LCG constants
LCG_MULTIPLIER = 1_103_515_245
LCG_INCREMENT = 12_345
LCG_MODULUS = 2 ** 31

SEED_MASK = 0xFFFFFFFFFFFFFFFF


def fp_mul(a: int, b: int) -> int:
    """Multiply two PRECISION-scaled values, flooring the result."""
    return (a * b) // PRECISION


def fp_div(a: int, b: int) -> int:
    """Divide two PRECISION-scaled values, flooring the result."""
    if b == 0:
        raise ZeroDivisionError("fixed-point division by zero")
    return (a * PRECISION) // b


def to_fixed(value: int) -> int:
    """Scale a whole number up to PRECISION units."""
    return value * PRECISION


def from_fixed(value: int) -> int:
    """Drop the fractional digits of a PRECISION-scaled value."""
    return value // PRECISION


class LinearCongruentialGenerator:
    """Deterministic ``state' = (state * A + C) mod M`` generator.

    Seeded once per race and then only advanced. The draw sequence is a pure
    function of the seed.
    """

    def __init__(self, seed: int):
        self._seed = int(seed) & SEED_MASK
        self._state = self._seed
        self._draws = 0

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def state(self) -> int:
        return self._state

    @property
    def draws(self) -> int:
        """Number of values drawn since seeding."""
        return self._draws

    def next(self) -> int:
        """Advance the generator and return the new state in ``[0, 2**31)``."""
        self._state = (self._state * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        self._draws += 1
        return self._state

    def next_below(self, bound: int) -> int:
        """Draw a value in ``[0, bound)``."""
        if bound <= 0:
            raise ValueError(f"bound must be positive, got {bound}")
        return self.next() % bound

    def next_symmetric(self, magnitude: int) -> int:
        """Draw a value in ``[-magnitude, +magnitude]``."""
        if magnitude < 0:
            raise ValueError(f"magnitude must be non-negative, got {magnitude}")
        return self.next_below(2 * magnitude + 1) - magnitude
