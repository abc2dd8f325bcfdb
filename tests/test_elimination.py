"""
Unit tests for single elimination bracket generation.
"""
import math
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from brackets import generate_bracket, InvalidRosterSize, ByeOverflow
from brackets.config import TournamentConfig
from brackets.elimination import get_round_name, build_single_elimination
from brackets.models import BYE, COMPLETED, PENDING, SCHEDULED, WINNER
from conftest import make_players, play, play_out


class TestRoundNames:
    """Tests for get_round_name."""

    def test_final(self):
        assert get_round_name(2) == "Final"

    def test_semifinal(self):
        assert get_round_name(4) == "Semifinal"

    def test_quarterfinal(self):
        assert get_round_name(8) == "Quarterfinal"

    def test_round_of_n(self):
        assert get_round_name(16) == "Round of 16"
        assert get_round_name(64) == "Round of 64"


class TestGeneration:
    """Tests for the generated structure."""

    def test_eight_players_first_round(self, players8):
        """Standard seeding: 1v8, 4v5, 2v7, 3v6."""
        bracket = generate_bracket('single_elimination', players8)
        first = [bracket.matches[mid] for mid in bracket.rounds[0].match_ids]
        assert [(m.player1, m.player2) for m in first] == [
            ('P1', 'P8'), ('P4', 'P5'), ('P2', 'P7'), ('P3', 'P6'),
        ]
        assert all(m.status == SCHEDULED for m in first)
        assert all(m.bracket == WINNER for m in first)

    def test_round_names(self, players8):
        bracket = generate_bracket('single_elimination', players8)
        assert [r.name for r in bracket.rounds] == ["Quarterfinal", "Semifinal", "Final"]

    def test_feed_links(self, players8):
        """Match i feeds match ceil(i/2) of the next round, odd into slot 1."""
        bracket = generate_bracket('single_elimination', players8)
        assert bracket.matches['R1-M1'].feeds_to_match_id == 'R2-M1'
        assert bracket.matches['R1-M1'].feeds_to_slot == 1
        assert bracket.matches['R1-M2'].feeds_to_match_id == 'R2-M1'
        assert bracket.matches['R1-M2'].feeds_to_slot == 2
        assert bracket.matches['R1-M3'].feeds_to_match_id == 'R2-M2'
        assert bracket.matches['R3-M1'].feeds_to_match_id is None

    def test_later_rounds_pending(self, players8):
        bracket = generate_bracket('single_elimination', players8)
        assert bracket.matches['R2-M1'].status == PENDING
        assert bracket.matches['R2-M1'].players == [None, None]

    def test_three_players(self):
        """Three players: 2 rounds, one bye, 3 match objects, 2 decisive matches."""
        bracket = generate_bracket('single_elimination', make_players(3))
        assert len(bracket.rounds) == 2
        assert bracket.total_matches == 3
        assert bracket.decisive_matches == 2

        bye_match = bracket.matches['R1-M1']
        assert bye_match.players == ['P1', BYE]
        assert bye_match.status == COMPLETED
        assert bye_match.result.winner_id == 'P1'
        assert bracket.matches['R2-M1'].player1 == 'P1'

    def test_two_byes_meeting_in_round_two(self):
        """Two bye winners fill a second round match, which becomes playable."""
        bracket = generate_bracket('single_elimination', make_players(5))
        final_side = bracket.matches['R2-M2']
        assert final_side.players == ['P2', 'P3']
        assert final_side.status == SCHEDULED

    @pytest.mark.parametrize("n", range(2, 65))
    def test_round_and_match_counts(self, n):
        """ceil(log2 n) rounds and n - 1 played matches for any roster size."""
        bracket = generate_bracket('single_elimination', make_players(n))
        assert len(bracket.rounds) == math.ceil(math.log2(n))
        assert bracket.decisive_matches == n - 1
        assert bracket.total_matches == 2 ** math.ceil(math.log2(n)) - 1

    def test_larger_draw(self):
        """A 4 player roster in an 8 draw gives every player a first round bye."""
        bracket = generate_bracket('single_elimination', make_players(4), {'draw_size': 8})
        assert all(bracket.matches[mid].status == COMPLETED for mid in bracket.rounds[0].match_ids)
        assert bracket.matches['R2-M1'].players == ['P1', 'P4']
        assert bracket.matches['R2-M2'].players == ['P2', 'P3']

    def test_bye_overflow(self):
        with pytest.raises(ByeOverflow):
            generate_bracket('single_elimination', make_players(3), {'draw_size': 8})

    def test_roster_too_small(self):
        with pytest.raises(InvalidRosterSize):
            generate_bracket('single_elimination', make_players(1))

    def test_single_player_builder(self):
        """The builder itself treats one player as an immediate champion."""
        bracket = build_single_elimination(make_players(1), TournamentConfig())
        assert bracket.rounds == []
        assert bracket.champion == 'P1'
        assert bracket.is_complete


class TestPlayThrough:
    """Tests for playing a bracket to its end."""

    def test_winner_advances(self, players8):
        bracket = generate_bracket('single_elimination', players8)
        bracket = play(bracket, 'R1-M2', 'P5')
        assert bracket.matches['R2-M1'].player2 == 'P5'

    def test_favourites_win(self, players8):
        """If the higher seed always wins, seed 1 beats seed 2 in the final."""
        bracket = generate_bracket('single_elimination', players8)
        bracket = play_out(bracket, lambda m: m.player1)
        assert bracket.matches['R3-M1'].players == ['P1', 'P2']
        assert bracket.champion == 'P1'

    @pytest.mark.parametrize("n", [2, 3, 5, 6, 7, 11, 16])
    def test_champion_decided(self, n):
        bracket = generate_bracket('single_elimination', make_players(n))
        bracket = play_out(bracket, lambda m: m.player2)
        assert bracket.champion is not None
        assert all(m.status == COMPLETED for m in bracket.matches.values())
