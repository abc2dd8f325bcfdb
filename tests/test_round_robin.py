"""
Tests for round robin schedule generation.
"""
from itertools import combinations
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from brackets import generate_bracket
from brackets.models import SCHEDULED
from brackets.round_robin import generate_round_pairings
from conftest import make_players


def pairs_of(bracket):
    return [frozenset((m.player1, m.player2)) for m in bracket.matches.values()]


class TestCircleMethod:
    """Tests for generate_round_pairings."""

    def test_four_players(self):
        rounds = generate_round_pairings(['A', 'B', 'C', 'D'])
        assert rounds == [
            [('A', 'D'), ('B', 'C')],
            [('A', 'C'), ('D', 'B')],
            [('A', 'B'), ('C', 'D')],
        ]

    def test_odd_field_gets_virtual_bye(self):
        rounds = generate_round_pairings(['A', 'B', 'C'])
        assert len(rounds) == 3
        for pairings in rounds:
            assert sum(1 for pair in pairings if None in pair) == 1


class TestRoundRobin:
    """Tests for generated round robin brackets."""

    def test_four_players(self, players4):
        """4 players: 3 rounds, 6 matches, each pair once."""
        bracket = generate_bracket('round_robin', players4)
        assert len(bracket.rounds) == 3
        assert bracket.total_matches == 6
        expected = {frozenset(pair) for pair in combinations(['P1', 'P2', 'P3', 'P4'], 2)}
        assert set(pairs_of(bracket)) == expected

    @pytest.mark.parametrize("n", range(2, 17))
    def test_every_pair_meets_once(self, n):
        bracket = generate_bracket('round_robin', make_players(n))
        pairs = pairs_of(bracket)
        assert len(pairs) == n * (n - 1) // 2
        assert len(set(pairs)) == len(pairs)

    def test_nobody_plays_twice_in_a_round(self):
        bracket = generate_bracket('round_robin', make_players(8))
        for round_ in bracket.rounds:
            seen = []
            for match in bracket.round_matches(round_):
                seen.extend(match.players)
            assert len(seen) == len(set(seen))

    def test_odd_field_byes(self):
        """With 5 players each round has 2 matches and one idle player; each sits out once."""
        bracket = generate_bracket('round_robin', make_players(5))
        assert len(bracket.rounds) == 5
        byes = []
        for round_ in bracket.rounds:
            assert len(round_.match_ids) == 2
            assert len(round_.byes) == 1
            byes.extend(round_.byes)
        assert sorted(byes) == ['P1', 'P2', 'P3', 'P4', 'P5']

    def test_matches_are_scheduled_without_feeds(self, players4):
        bracket = generate_bracket('round_robin', players4)
        for match in bracket.matches.values():
            assert match.status == SCHEDULED
            assert match.feeds_to_match_id is None
            assert match.bracket is None

    def test_match_ids(self, players4):
        bracket = generate_bracket('round_robin', players4)
        assert bracket.rounds[0].match_ids == ['RR1-M1', 'RR1-M2']
        assert bracket.rounds[0].name == "Round 1"

    def test_double_round_robin(self, players4):
        """Two legs: every pair meets twice, home and away swapped."""
        bracket = generate_bracket('round_robin', players4, {'legs': 2})
        assert len(bracket.rounds) == 6
        assert bracket.total_matches == 12
        first = bracket.matches['RR1-M1']
        second = bracket.matches['RR4-M1']
        assert (second.player1, second.player2) == (first.player2, first.player1)
