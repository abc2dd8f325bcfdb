"""
Round robin schedule generation using the circle method.

With an odd field a virtual BYE joins the rotation; whoever draws it sits the
round out and is listed in ``Round.byes`` instead of getting a match.
"""
import logging
from typing import List

from .config import TournamentConfig
from .models import Bracket, Match, Player, Round, SCHEDULED, ROUND_ROBIN

logger = logging.getLogger(__name__)


def generate_round_pairings(player_ids: List[str]) -> List[List[tuple]]:
    """
    Return one list of (home, away) pairs per round; None marks the bye.

    The first player stays fixed while the others rotate one position per
    round, so every pair meets exactly once over n - 1 rounds.
    """
    ids = list(player_ids)
    if len(ids) % 2:
        ids.append(None)
    n = len(ids)
    rounds = []
    for _ in range(n - 1):
        rounds.append([(ids[i], ids[n - 1 - i]) for i in range(n // 2)])
        ids = [ids[0], ids[-1]] + ids[1:-1]
    return rounds


def build_round_robin(ranked: List[Player], config: TournamentConfig) -> Bracket:
    """Build a round robin schedule; ``legs=2`` plays a second cycle with home/away swapped."""
    bracket = Bracket(ROUND_ROBIN, ranked, config.to_dict())
    cycle = generate_round_pairings([p.id for p in ranked])

    round_number = 0
    for leg in range(1, config.legs + 1):
        for pairings in cycle:
            round_number += 1
            round_ = Round(number=round_number, name=f"Round {round_number}")
            match_number = 0
            for home, away in pairings:
                if home is None or away is None:
                    round_.byes.append(home if away is None else away)
                    continue
                if leg == 2:
                    home, away = away, home
                match_number += 1
                match = bracket.add_match(Match(
                    id=f"RR{round_number}-M{match_number}", round=round_number,
                    match_number=match_number, player1=home, player2=away, status=SCHEDULED))
                round_.match_ids.append(match.id)
            bracket.rounds.append(round_)

    bracket.total_rounds = len(bracket.rounds)
    bracket.total_matches = len(bracket.matches)
    bracket.current_round = 1
    logger.info("Generated round robin: %d players, %d rounds, %d matches",
                len(ranked), bracket.total_rounds, bracket.total_matches)
    return bracket
