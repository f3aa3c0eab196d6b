"""Tests for the race status state machine."""

import pytest

from karera.engine.errors import RaceNotFinished
from karera.engine.status import RaceStatus, can_transition, require_status, transition


class TestTransitions:

    @pytest.mark.parametrize("current,target", [
        (RaceStatus.BETTING, RaceStatus.RACING),
        (RaceStatus.RACING, RaceStatus.FINISHED),
        (RaceStatus.FINISHED, RaceStatus.CLOSED),
    ])
    def test_forward_path(self, current, target):
        assert transition(current, target) is target

    @pytest.mark.parametrize("current", list(RaceStatus))
    def test_reset_from_anywhere(self, current):
        assert can_transition(current, RaceStatus.BETTING)

    @pytest.mark.parametrize("current,target", [
        (RaceStatus.BETTING, RaceStatus.FINISHED),
        (RaceStatus.RACING, RaceStatus.CLOSED),
        (RaceStatus.CLOSED, RaceStatus.RACING),
        (RaceStatus.FINISHED, RaceStatus.RACING),
    ])
    def test_illegal(self, current, target):
        with pytest.raises(ValueError):
            transition(current, target)


class TestRequireStatus:

    def test_matching_status_passes(self):
        require_status(RaceStatus.FINISHED, RaceStatus.FINISHED, RaceNotFinished)

    def test_raises_given_error(self):
        with pytest.raises(RaceNotFinished, match="Closed"):
            require_status(RaceStatus.CLOSED, RaceStatus.FINISHED, RaceNotFinished)

    def test_values_are_display_names(self):
        assert [s.value for s in RaceStatus] == ["Betting", "Racing", "Finished", "Closed"]
