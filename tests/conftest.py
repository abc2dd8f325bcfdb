"""
Shared pytest fixtures for bracket engine tests.

Running tests:
    pytest tests/
"""
import pytest
import sys
import os

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from brackets.models import Player, SCHEDULED
from brackets.store import BracketStore
from brackets.tournament import submit_result


def make_players(count, seeded=False):
    """Players P1..Pn, optionally carrying seeds 1..n."""
    return [Player(id=f"P{i}", name=f"Player {i}", seed=i if seeded else None)
            for i in range(1, count + 1)]


def score_events(match, winner_id, winner_score=1, loser_score=0):
    """Generic score events in slot order for a given winner."""
    if winner_id == match.player1:
        return [{'type': 'score', 'scores': [winner_score, loser_score]}]
    return [{'type': 'score', 'scores': [loser_score, winner_score]}]


def find_match(bracket, a, b):
    for match in bracket.matches.values():
        if {match.player1, match.player2} == {a, b}:
            return match
    raise AssertionError(f"No match between {a} and {b}")


def play(bracket, match_id, winner_id, winner_score=1, loser_score=0):
    match = bracket.matches[match_id]
    return submit_result(bracket, match_id, score_events(match, winner_id, winner_score, loser_score))


def play_out(bracket, choose_winner):
    """Play scheduled matches in order until the bracket is complete."""
    while not bracket.is_complete:
        ready = [m for m in bracket.matches.values() if m.status == SCHEDULED]
        assert ready, "Bracket stalled with no playable match"
        match = ready[0]
        bracket = play(bracket, match.id, choose_winner(match))
    return bracket


@pytest.fixture
def players4():
    return make_players(4)


@pytest.fixture
def players8():
    return make_players(8, seeded=True)


@pytest.fixture
def store(tmp_path):
    return BracketStore(str(tmp_path / "tournaments"))


@pytest.fixture
def client(tmp_path, monkeypatch):
    """Test client backed by a temporary tournament store."""
    import app as app_module
    monkeypatch.setattr(app_module, 'store', BracketStore(str(tmp_path / "data")))
    app_module.app.config['TESTING'] = True
    with app_module.app.test_client() as client:
        yield client
