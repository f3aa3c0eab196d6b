"""Tests for the horse roster."""

import pytest

from karera.engine.errors import InvalidHorseId, RosterConfigError
from karera.engine.fixed_point import PRECISION
from karera.engine.roster import NUM_HORSES, Roster


class TestRoster:

    def test_six_horses(self, roster):
        assert len(roster) == NUM_HORSES
        assert [h.id for h in roster] == list(range(6))

    def test_strengths_and_total(self, roster):
        assert [h.strength for h in roster] == [6, 5, 4, 3, 2, 1]
        assert roster.total_strength == 21

    def test_normalized_strength(self, roster):
        assert [h.normalized_strength for h in roster] == [2857, 2380, 1904, 1428, 952, 476]

    def test_normalization_sums_to_precision_within_rounding(self, roster):
        total = sum(h.normalized_strength for h in roster)
        assert PRECISION - (NUM_HORSES - 1) <= total <= PRECISION

    def test_base_speed(self, roster):
        assert [h.base_speed for h in roster] == [20, 19, 18, 17, 16, 15]

    def test_names(self, roster):
        assert roster.get(0).name == "Thunder Bolt"
        assert roster.get(5).name == "Lucky Charm"

    def test_horses_are_immutable(self, roster):
        with pytest.raises(Exception):
            roster.get(0).strength = 10

    def test_invalid_id(self, roster):
        with pytest.raises(InvalidHorseId):
            roster.get(6)
        with pytest.raises(InvalidHorseId):
            roster.normalized_strength(-1)
        assert roster.find(6) is None

    def test_bool_is_not_an_id(self, roster):
        assert not roster.is_valid_id(True)
        assert roster.find(False) is None
        with pytest.raises(InvalidHorseId):
            roster.get(True)


class TestRosterValidation:

    def test_total_strength_drift_fails_fast(self):
        with pytest.raises(RosterConfigError):
            Roster(strengths=(6, 5, 4, 3, 2, 2))

    def test_wrong_horse_count(self):
        with pytest.raises(RosterConfigError):
            Roster(strengths=(6, 5, 4, 3, 3), names=("a", "b", "c", "d", "e"))

    def test_strength_out_of_range(self):
        with pytest.raises(RosterConfigError):
            Roster(strengths=(7, 5, 4, 3, 1, 1))

    def test_roster_error_is_not_caller_error(self):
        from karera.engine.errors import RaceError
        assert not issubclass(RosterConfigError, RaceError)
