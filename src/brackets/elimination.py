"""
Single elimination bracket generation.
"""
import logging
import math
from typing import List, Callable

from .advancement import settle_byes
from .config import TournamentConfig
from .models import (
    Bracket, Match, Player, Round, PENDING, SCHEDULED, WINNER, SINGLE_ELIMINATION,
)
from .seeding import place_byes

logger = logging.getLogger(__name__)


def get_round_name(players_in_round: int) -> str:
    """Get the name of a round based on number of players."""
    if players_in_round == 2:
        return "Final"
    elif players_in_round == 4:
        return "Semifinal"
    elif players_in_round == 8:
        return "Quarterfinal"
    else:
        return f"Round of {players_in_round}"


def build_elimination_rounds(bracket: Bracket, slots: List[str], prefix: str, tag: str,
                             round_name: Callable[[int], str]) -> List[Round]:
    """
    Create the knockout tree for a list of first-round slots.

    Match ids are ``{prefix}{round}-M{n}``; match n of a round feeds match
    ceil(n/2) of the next round, into slot 1 when n is odd and slot 2 when even.
    """
    size = len(slots)
    total_rounds = int(math.log2(size)) if size > 1 else 0
    rounds = []

    for r in range(1, total_rounds + 1):
        players_in_round = size // (2 ** (r - 1))
        round_ = Round(number=r, name=round_name(players_in_round), bracket=tag)
        for i in range(1, players_in_round // 2 + 1):
            match = Match(id=f"{prefix}{r}-M{i}", round=r, match_number=i, bracket=tag)
            if r == 1:
                match.player1 = slots[2 * i - 2]
                match.player2 = slots[2 * i - 1]
                match.status = SCHEDULED
            else:
                match.status = PENDING
            if r < total_rounds:
                match.feeds_to_match_id = f"{prefix}{r + 1}-M{math.ceil(i / 2)}"
                match.feeds_to_slot = 1 if i % 2 == 1 else 2
            bracket.add_match(match)
            round_.match_ids.append(match.id)
        rounds.append(round_)

    return rounds


def build_single_elimination(ranked: List[Player], config: TournamentConfig) -> Bracket:
    """
    Build a single elimination bracket from players in rank order.

    Bye matches are completed immediately and their player advanced.
    ``total_matches`` counts every match including bye matches (size - 1);
    ``Bracket.decisive_matches`` gives the played count (n - 1).
    """
    bracket = Bracket(SINGLE_ELIMINATION, ranked, config.to_dict())
    if len(ranked) == 1:
        bracket.champion = ranked[0].id
        return bracket

    slots = place_byes(ranked, config.draw_size)
    bracket.rounds = build_elimination_rounds(bracket, slots, 'R', WINNER, get_round_name)
    bracket.total_rounds = len(bracket.rounds)
    bracket.total_matches = len(bracket.matches)
    settle_byes(bracket)

    logger.info("Generated single elimination bracket: %d players, %d rounds, %d matches",
                len(ranked), bracket.total_rounds, bracket.total_matches)
    return bracket
