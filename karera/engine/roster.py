"""The fixed six-horse roster and its derived racing attributes."""

import logging
from dataclasses import dataclass, asdict

from karera.engine.errors import InvalidHorseId, RosterConfigError
from karera.engine.fixed_point import fp_div

logger = logging.getLogger(__name__)

NUM_HORSES = 6

# Strength drives both expected speed and win probability: H[0] is the favourite.
HORSE_STRENGTHS = (6, 5, 4, 3, 2, 1)
HORSE_NAMES = (
    "Thunder Bolt",
    "Silver Arrow",
    "Golden Star",
    "Dark Knight",
    "Wild Spirit",
    "Lucky Charm",
)

TOTAL_STRENGTH = 21
BASE_SPEED_OFFSET = 14


@dataclass(frozen=True)
class Horse:
    """A competitor. Built once with the roster, never mutated."""

    id: int
    name: str
    strength: int
    normalized_strength: int  # strength * PRECISION / TOTAL_STRENGTH
    base_speed: int           # 14 + strength, units per tick

    def to_dict(self) -> dict:
        return asdict(self)


class Roster:
    """Validated, cached roster. Fails fast if the strength invariant breaks."""

    def __init__(
        self,
        strengths: tuple[int, ...] = HORSE_STRENGTHS,
        names: tuple[str, ...] = HORSE_NAMES,
    ):
        if len(strengths) != NUM_HORSES or len(names) != NUM_HORSES:
            raise RosterConfigError(
                f"Roster must have exactly {NUM_HORSES} horses, "
                f"got {len(strengths)} strengths and {len(names)} names"
            )
        if any(s < 1 or s > NUM_HORSES for s in strengths):
            raise RosterConfigError(f"Strengths must be within 1..{NUM_HORSES}: {strengths}")
        total = sum(strengths)
        if total != TOTAL_STRENGTH:
            raise RosterConfigError(
                f"Total strength must be {TOTAL_STRENGTH}, got {total}"
            )

        self._horses = tuple(
            Horse(
                id=i,
                name=names[i],
                strength=strengths[i],
                normalized_strength=fp_div(strengths[i], total),
                base_speed=BASE_SPEED_OFFSET + strengths[i],
            )
            for i in range(NUM_HORSES)
        )
        self._total_strength = total
        logger.debug("Roster built: %s", [h.name for h in self._horses])

    @property
    def horses(self) -> tuple[Horse, ...]:
        return self._horses

    @property
    def total_strength(self) -> int:
        return self._total_strength

    def __len__(self) -> int:
        return len(self._horses)

    def __iter__(self):
        return iter(self._horses)

    def is_valid_id(self, horse_id: int) -> bool:
        if isinstance(horse_id, bool) or not isinstance(horse_id, int):
            return False
        return 0 <= horse_id < len(self._horses)

    def validate_id(self, horse_id: int) -> None:
        if not self.is_valid_id(horse_id):
            raise InvalidHorseId(f"Horse id {horse_id} out of range 0..{len(self._horses) - 1}")

    def get(self, horse_id: int) -> Horse:
        self.validate_id(horse_id)
        return self._horses[horse_id]

    def find(self, horse_id: int) -> Horse | None:
        """Like get() but returns None for unknown ids."""
        if not self.is_valid_id(horse_id):
            return None
        return self._horses[horse_id]

    def normalized_strength(self, horse_id: int) -> int:
        return self.get(horse_id).normalized_strength
