"""Exacta probability calculator and the published multiplier table.

    P(i -> j) = (S[i] / sum(S)) * (S[j] / (sum(S) - S[i]))

Every term is PRECISION-scaled and floored. The multipliers are a curated
table (roughly inverse probability less a house edge), not derived from the
formula.
"""

from dataclasses import dataclass, asdict

from karera.engine.errors import SameHorsePicked
from karera.engine.fixed_point import fp_div, fp_mul
from karera.engine.roster import Roster

# (first, second) -> payout multiplier
EXACTA_MULTIPLIERS: dict[tuple[int, int], int] = {
    # H[0] first
    (0, 1): 2, (0, 2): 3, (0, 3): 10, (0, 4): 30, (0, 5): 60,
    # H[1] first
    (1, 0): 3, (1, 2): 5, (1, 3): 20, (1, 4): 125, (1, 5): 175,
    # H[2] first
    (2, 0): 4, (2, 1): 6, (2, 3): 8, (2, 4): 80, (2, 5): 100,
    # H[3] first
    (3, 0): 8, (3, 1): 15, (3, 2): 12, (3, 4): 250, (3, 5): 500,
    # H[4] first
    (4, 0): 40, (4, 1): 150, (4, 2): 100, (4, 3): 300, (4, 5): 1000,
    # H[5] first (weakest horse winning)
    (5, 0): 80, (5, 1): 250, (5, 2): 200, (5, 3): 600, (5, 4): 1500,
}


@dataclass(frozen=True)
class ExactaProbability:
    """One row of the public odds table."""

    first: int
    second: int
    probability: int  # scaled by PRECISION
    multiplier: int

    def to_dict(self) -> dict:
        return asdict(self)


class ProbabilityCalculator:
    """Prices exacta combinations for a roster."""

    def __init__(self, roster: Roster, multipliers: dict[tuple[int, int], int] | None = None):
        self.roster = roster
        self._multipliers = dict(EXACTA_MULTIPLIERS if multipliers is None else multipliers)
        self._table: tuple[ExactaProbability, ...] | None = None

    def _validate_pair(self, first: int, second: int) -> None:
        self.roster.validate_id(first)
        self.roster.validate_id(second)
        if first == second:
            raise SameHorsePicked(f"Exacta needs two different horses, got {first} twice")

    def calculate_probability(self, first: int, second: int) -> int:
        """Probability that ``first`` wins and ``second`` runs second, PRECISION-scaled."""
        self._validate_pair(first, second)
        total = self.roster.total_strength
        s_first = self.roster.horses[first].strength
        s_second = self.roster.horses[second].strength

        p_first = fp_div(s_first, total)
        p_second_given_first = fp_div(s_second, total - s_first)
        return fp_mul(p_first, p_second_given_first)

    def multiplier(self, first: int, second: int) -> int:
        """Payout multiplier for an exacta; 0 for a same-horse or unknown pair."""
        if first == second:
            return 0
        return self._multipliers.get((first, second), 0)

    def get_table(self) -> tuple[ExactaProbability, ...]:
        """All ordered pairs, first-pick ascending then second-pick ascending."""
        if self._table is None:
            n = len(self.roster)
            self._table = tuple(
                ExactaProbability(
                    first=first,
                    second=second,
                    probability=self.calculate_probability(first, second),
                    multiplier=self.multiplier(first, second),
                )
                for first in range(n)
                for second in range(n)
                if first != second
            )
        return self._table
