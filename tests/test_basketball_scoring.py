"""
Tests for basketball scoring with overtime.
"""
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from brackets import generate_bracket, submit_result, InvalidScore
from brackets.scoring import get_adjudicator
from brackets.scoring.basketball import BasketballAdjudicator
from conftest import make_players


def quarters(*points):
    return [{'type': 'period', 'points': list(p)} for p in points]


REGULATION = quarters((20, 18), (25, 22), (19, 24), (22, 20))


class TestBasketballAdjudicator:
    """Tests for quarters and overtime."""

    def test_registered(self):
        assert isinstance(get_adjudicator('basketball'), BasketballAdjudicator)

    def test_regulation_win(self):
        result = BasketballAdjudicator().adjudicate(REGULATION, 'A', 'B')
        assert result.winner_id == 'A'
        assert result.loser_id == 'B'
        assert result.summary == [86, 84]
        assert result.score['display'] == "86-84"
        assert len(result.score['periods']) == 4

    def test_overtime(self):
        events = quarters((20, 20), (20, 20), (20, 20), (20, 20), (10, 10), (5, 9))
        result = BasketballAdjudicator().adjudicate(events, 'A', 'B')
        assert result.winner_id == 'B'
        assert result.summary == [95, 99]
        assert result.score['display'] == "95-99 (2OT)"

    def test_single_overtime_label(self):
        events = quarters((20, 20), (20, 20), (20, 20), (20, 20), (12, 8))
        assert BasketballAdjudicator().adjudicate(events, 'A', 'B').score['display'] == "92-88 (OT)"

    def test_cannot_end_level(self):
        with pytest.raises(InvalidScore):
            BasketballAdjudicator().adjudicate(quarters((20, 20), (20, 20), (20, 20), (20, 20)), 'A', 'B')

    def test_needs_four_quarters(self):
        with pytest.raises(InvalidScore):
            BasketballAdjudicator().adjudicate(REGULATION[:3], 'A', 'B')

    def test_no_overtime_after_a_decided_game(self):
        with pytest.raises(InvalidScore):
            BasketballAdjudicator().adjudicate(REGULATION + quarters((5, 0)), 'A', 'B')

    @pytest.mark.parametrize("points", [[20], [-2, 10], [20.5, 10], None])
    def test_invalid_points(self, points):
        events = [{'type': 'period', 'points': points}] + REGULATION[1:]
        with pytest.raises(InvalidScore):
            BasketballAdjudicator().adjudicate(events, 'A', 'B')

    def test_unknown_event(self):
        with pytest.raises(InvalidScore):
            BasketballAdjudicator().adjudicate([{'type': 'foul', 'player': 'A'}], 'A', 'B')

    def test_walkover(self):
        result = BasketballAdjudicator().adjudicate([{'type': 'walkover', 'winner': 'A'}], 'A', 'B')
        assert result.is_walkover

    def test_bracket_advancement(self):
        bracket = generate_bracket('single_elimination', make_players(4), {'sport': 'basketball'})
        bracket = submit_result(bracket, 'R1-M1', REGULATION)
        assert bracket.matches['R1-M1'].result.winner_id == 'P1'
        assert bracket.matches['R2-M1'].player1 == 'P1'
