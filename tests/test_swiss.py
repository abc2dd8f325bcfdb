"""
Tests for Swiss round generation and pairing.
"""
import random
import networkx as nx
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from brackets import (
    generate_bracket, advance_swiss_round, compute_standings,
    InvalidConfig, RoundIncomplete, TournamentComplete, PairingExhausted,
)
from brackets.round_robin import generate_round_pairings
from brackets.swiss import pair_players, select_pairings, FORCED_REMATCH
from conftest import make_players, play


@pytest.fixture
def seeded4():
    return make_players(4, seeded=True)


def play_round(bracket, choose_winner):
    round_ = bracket.rounds[bracket.current_round - 1]
    for match_id in round_.match_ids:
        match = bracket.matches[match_id]
        bracket = play(bracket, match_id, choose_winner(match))
    return bracket


def pair_history(bracket):
    return [frozenset((m.player1, m.player2)) for m in bracket.matches.values()]


def clean_pairing_size(players, played):
    """Size of the largest pairing of players that repeats no earlier match."""
    graph = nx.Graph()
    graph.add_nodes_from(players)
    graph.add_edges_from((a, b) for i, a in enumerate(players) for b in players[i + 1:]
                         if frozenset((a, b)) not in played)
    return len(nx.max_weight_matching(graph, maxcardinality=True))


class TestFirstRound:
    """Tests for Swiss round 1."""

    def test_adjacent_ranks(self, seeded4):
        """Round 1 pairs neighbours in seed order."""
        bracket = generate_bracket('swiss', seeded4, {'rounds': 3})
        round_ = bracket.rounds[0]
        assert [bracket.matches[mid].players for mid in round_.match_ids] == [['P1', 'P2'], ['P3', 'P4']]
        assert bracket.current_round == 1
        assert bracket.total_rounds == 3

    def test_odd_field_bye_to_lowest(self):
        bracket = generate_bracket('swiss', make_players(5, seeded=True), {'rounds': 3})
        assert len(bracket.rounds[0].match_ids) == 2
        assert bracket.rounds[0].byes == ['P5']

    def test_rounds_required(self, players4):
        with pytest.raises(InvalidConfig):
            generate_bracket('swiss', players4)

    def test_too_many_rounds(self, players4):
        with pytest.raises(InvalidConfig):
            generate_bracket('swiss', players4, {'rounds': 4})

    def test_match_count(self):
        bracket = generate_bracket('swiss', make_players(7), {'rounds': 4})
        assert bracket.total_matches == 12

    def test_unseeded_field_is_drawn(self):
        """Without seeds round 1 is a reproducible random draw."""
        config = {'rounds': 3, 'rng_seed': 11}
        bracket = generate_bracket('swiss', make_players(8), config)
        drawn = [p.id for p in make_players(8)]
        random.Random(11).shuffle(drawn)
        pairs = [bracket.matches[mid].players for mid in bracket.rounds[0].match_ids]
        assert pairs == [drawn[i:i + 2] for i in range(0, 8, 2)]
        assert bracket.player_ids() == drawn
        again = generate_bracket('swiss', make_players(8), config)
        assert again.to_dict() == bracket.to_dict()


class TestAdvance:
    """Tests for advancing Swiss rounds."""

    def test_round_incomplete(self, seeded4):
        bracket = generate_bracket('swiss', seeded4, {'rounds': 3})
        bracket = play(bracket, 'S1-M1', 'P1')
        with pytest.raises(RoundIncomplete):
            advance_swiss_round(bracket)

    def test_second_round_pairs_winners(self, seeded4):
        """Winners meet winners in round 2."""
        bracket = generate_bracket('swiss', seeded4, {'rounds': 3})
        bracket = play_round(bracket, lambda m: m.player1)
        bracket = advance_swiss_round(bracket)
        assert bracket.current_round == 2
        second = [bracket.matches[mid].players for mid in bracket.rounds[1].match_ids]
        assert second == [['P1', 'P3'], ['P2', 'P4']]

    def test_tournament_complete(self, players4):
        bracket = generate_bracket('swiss', players4, {'rounds': 1})
        bracket = play_round(bracket, lambda m: m.player1)
        with pytest.raises(TournamentComplete):
            advance_swiss_round(bracket)

    def test_not_swiss(self, players4):
        bracket = generate_bracket('round_robin', players4)
        with pytest.raises(InvalidConfig):
            advance_swiss_round(bracket)

    def test_input_unchanged(self, players4):
        bracket = generate_bracket('swiss', players4, {'rounds': 3})
        bracket = play_round(bracket, lambda m: m.player1)
        version = bracket.version
        advanced = advance_swiss_round(bracket)
        assert advanced.version == version + 1
        assert len(bracket.rounds) == 1

    @pytest.mark.parametrize("seed", range(25))
    def test_no_repeat_opponents(self, seed):
        """Four players over three rounds never meet the same opponent twice."""
        rng = random.Random(seed)
        bracket = generate_bracket('swiss', make_players(4), {'rounds': 3, 'seeding': 'random', 'rng_seed': seed})
        bracket = play_round(bracket, lambda m: rng.choice(m.players))
        for _ in range(2):
            bracket = advance_swiss_round(bracket)
            assert len(bracket.rounds[-1].match_ids) == 2
            bracket = play_round(bracket, lambda m: rng.choice(m.players))
        pairs = pair_history(bracket)
        assert len(pairs) == 6
        assert len(set(pairs)) == 6
        assert bracket.warnings == []

    @pytest.mark.parametrize("n", [5, 7, 9])
    def test_byes_rotate(self, n):
        """Nobody gets a second bye while another player has had none."""
        rng = random.Random(n)
        bracket = generate_bracket('swiss', make_players(n), {'rounds': n})
        bracket = play_round(bracket, lambda m: rng.choice(m.players))
        for _ in range(n - 1):
            bracket = advance_swiss_round(bracket)
            bracket = play_round(bracket, lambda m: rng.choice(m.players))
        byes = [r.byes[0] for r in bracket.rounds]
        assert sorted(byes) == sorted(p.id for p in bracket.players)

    def test_bye_counts_as_win(self):
        bracket = generate_bracket('swiss', make_players(3, seeded=True), {'rounds': 3})
        standing = {s.player_id: s for s in compute_standings(bracket)}['P3']
        assert standing.byes == 1
        assert standing.points == 1
        assert standing.played == 0

    def test_forced_rematch_is_flagged(self, players4):
        """When every pair has met, rematches are allowed but recorded."""
        bracket = generate_bracket('swiss', players4, {'rounds': 3})
        for _ in range(2):
            bracket = play_round(bracket, lambda m: m.player1)
            bracket = advance_swiss_round(bracket)
        bracket = play_round(bracket, lambda m: m.player1)
        bracket.total_rounds = 4
        bracket = advance_swiss_round(bracket)

        last = [bracket.matches[mid] for mid in bracket.rounds[-1].match_ids]
        assert all(m.notes == FORCED_REMATCH for m in last)
        assert bracket.warnings[-1]['kind'] == 'PairingExhausted'
        assert bracket.warnings[-1]['round'] == 4

    def test_auto_advance(self, seeded4):
        """With auto_advance the next round is paired by the last result."""
        bracket = generate_bracket('swiss', seeded4, {'rounds': 2, 'auto_advance': True})
        bracket = play(bracket, 'S1-M1', 'P1')
        assert bracket.current_round == 1
        bracket = play(bracket, 'S1-M2', 'P3')
        assert bracket.current_round == 2
        bracket = play_round(bracket, lambda m: m.player1)
        assert bracket.current_round == 2
        assert bracket.is_complete


class TestPairingEngine:
    """Tests for the matching behind each round."""

    def test_avoids_previous_opponents(self):
        played = {frozenset(('A', 'B'))}
        assert pair_players(['A', 'B', 'C', 'D'], played) == [('A', 'C'), ('B', 'D')]

    def test_prefers_closest_rank(self):
        assert pair_players(['A', 'B', 'C', 'D'], set()) == [('A', 'B'), ('C', 'D')]

    def test_never_strands_players(self):
        """A close first pair that leaves the rest unpairable is not taken."""
        played = {frozenset(('A', 'B')), frozenset(('C', 'D')), frozenset(('B', 'D'))}
        assert pair_players(['A', 'B', 'C', 'D'], played) == [('A', 'D'), ('B', 'C')]

    def test_exhausted(self):
        played = {frozenset(p) for p in [('A', 'B'), ('C', 'D'), ('A', 'C'), ('B', 'D'), ('A', 'D')]}
        with pytest.raises(PairingExhausted):
            pair_players(['A', 'B', 'C', 'D'], played)

    def test_minimal_rematches(self):
        played = {frozenset(p) for p in [('A', 'B'), ('C', 'D'), ('A', 'C'), ('B', 'D'), ('A', 'D')]}
        pairs, bye, repeats = select_pairings(['A', 'B', 'C', 'D'], played, set())
        assert pairs == [('A', 'D'), ('B', 'C')]
        assert bye is None
        assert repeats == {frozenset(('A', 'D'))}

    def test_bye_skips_players_who_had_one(self):
        pairs, bye, repeats = select_pairings(['A', 'B', 'C'], set(), {'C'})
        assert bye == 'B'
        assert pairs == [('A', 'C')]

    def test_large_field_avoids_rematches(self):
        """64 players with 40 rounds behind them still pair without a rematch."""
        ids = [f"P{i}" for i in range(1, 65)]
        played = {frozenset(pair) for round_ in generate_round_pairings(ids)[:40] for pair in round_}
        pairs = pair_players(ids, played)
        assert len(pairs) == 32
        assert sorted(p for pair in pairs for p in pair) == sorted(ids)
        assert not any(frozenset(pair) in played for pair in pairs)


class TestLargeField:
    """Forced rematches in full-size events only happen when unavoidable."""

    @pytest.mark.parametrize("size, rounds, seed", [(32, 20, 3), (64, 8, 5)])
    def test_rematches_only_when_unavoidable(self, size, rounds, seed):
        rng = random.Random(seed)
        bracket = generate_bracket('swiss', make_players(size, seeded=True), {'rounds': rounds})
        bracket = play_round(bracket, lambda m: rng.choice(m.players))
        players = bracket.player_ids()
        for _ in range(rounds - 1):
            before = set(pair_history(bracket))
            bracket = advance_swiss_round(bracket)
            new = [bracket.matches[mid] for mid in bracket.rounds[-1].match_ids]
            assert len(new) == size // 2
            for match in new:
                assert (frozenset(match.players) in before) == (match.notes == FORCED_REMATCH)
            forced = [m for m in new if m.notes == FORCED_REMATCH]
            assert len(forced) == size // 2 - clean_pairing_size(players, before)
            bracket = play_round(bracket, lambda m: rng.choice(m.players))
        assert len(bracket.rounds) == rounds
        assert bracket.is_complete
