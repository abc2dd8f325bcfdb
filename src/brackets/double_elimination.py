"""
Double elimination bracket generation.

Structure for a draw of N slots (W = log2(N) winners rounds):
- Winners bracket: standard single elimination tree (W1-M1 .. W{W}-M1)
- Losers bracket: 2 * (W - 1) rounds alternating minor and major rounds
  - Losers Round 1 pairs the losers of Winners Round 1
  - Major rounds (even) take the losers dropping from the winners bracket
  - Minor rounds (odd, after the first) halve the surviving field
- Grand Final: GF1, plus GF2 which is only played if the losers bracket
  champion wins GF1
"""
import logging
import math
from typing import List

from .advancement import settle_byes, GRAND_FINAL_ID, GRAND_FINAL_RESET_ID
from .config import TournamentConfig
from .elimination import build_elimination_rounds
from .models import (
    Bracket, Match, Player, Round,
    PENDING, CONDITIONAL, WINNER, LOSER, GRAND_FINAL, DOUBLE_ELIMINATION,
)
from .seeding import place_byes

logger = logging.getLogger(__name__)


def get_losers_round_name(round_num: int, total_losers_rounds: int) -> str:
    """Get the name for a losers bracket round (1-indexed)."""
    rounds_from_end = total_losers_rounds - round_num
    if rounds_from_end == 0:
        return "Losers Final"
    elif rounds_from_end == 1:
        return "Losers Semifinal"
    else:
        return f"Losers Round {round_num}"


def get_winners_round_name(players_in_round: int) -> str:
    """Get the name for a winners bracket round."""
    if players_in_round == 2:
        return "Winners Final"
    elif players_in_round == 4:
        return "Winners Semifinal"
    elif players_in_round == 8:
        return "Winners Quarterfinal"
    else:
        return f"Winners Round of {players_in_round}"


def calculate_losers_bracket_rounds(bracket_size: int) -> int:
    """
    Number of rounds in the losers bracket: 2 * (log2(N) - 1).

    Losers of winners round r >= 2 drop into losers round 2r - 2, so the
    winners final loser enters the last losers round.
    """
    if bracket_size < 2:
        return 0
    winners_rounds = int(math.log2(bracket_size))
    return 2 * (winners_rounds - 1)


def _build_losers_bracket(bracket: Bracket, bracket_size: int, winners_rounds: int) -> List[Round]:
    total_losers_rounds = calculate_losers_bracket_rounds(bracket_size)
    rounds = []

    for lr in range(1, total_losers_rounds + 1):
        # Matches per losers round: N/4, N/4, N/8, N/8, ...
        num_matches = bracket_size // (2 ** ((lr + 1) // 2 + 1))
        round_ = Round(number=lr, name=get_losers_round_name(lr, total_losers_rounds), bracket=LOSER)
        for i in range(1, num_matches + 1):
            match = Match(id=f"L{lr}-M{i}", round=lr, match_number=i, bracket=LOSER, status=PENDING)
            bracket.add_match(match)
            round_.match_ids.append(match.id)
        rounds.append(round_)

    # Winners round 1 losers pair up in losers round 1
    for i in range(1, bracket_size // 2 + 1):
        match = bracket.matches[f"W1-M{i}"]
        match.feeds_to_loser_match_id = f"L1-M{math.ceil(i / 2)}"
        match.feeds_to_loser_slot = 1 if i % 2 == 1 else 2

    # Later winners rounds drop into the major losers round 2r - 2, same index
    for wr in range(2, winners_rounds + 1):
        for i in range(1, bracket_size // (2 ** wr) + 1):
            match = bracket.matches[f"W{wr}-M{i}"]
            match.feeds_to_loser_match_id = f"L{2 * wr - 2}-M{i}"
            match.feeds_to_loser_slot = 1

    for round_ in rounds:
        lr = round_.number
        for i, match_id in enumerate(round_.match_ids, start=1):
            match = bracket.matches[match_id]
            if lr == total_losers_rounds:
                match.feeds_to_match_id = GRAND_FINAL_ID
                match.feeds_to_slot = 2
            elif lr % 2 == 1:
                # Minor round winner meets a dropping player in the next major round
                match.feeds_to_match_id = f"L{lr + 1}-M{i}"
                match.feeds_to_slot = 2
            else:
                match.feeds_to_match_id = f"L{lr + 1}-M{math.ceil(i / 2)}"
                match.feeds_to_slot = 1 if i % 2 == 1 else 2

    return rounds


def build_double_elimination(ranked: List[Player], config: TournamentConfig) -> Bracket:
    """
    Build a double elimination bracket from players in rank order.

    ``total_matches`` counts every match created, the conditional grand
    final reset included.
    """
    bracket = Bracket(DOUBLE_ELIMINATION, ranked, config.to_dict())
    if len(ranked) == 1:
        bracket.champion = ranked[0].id
        return bracket

    slots = place_byes(ranked, config.draw_size)
    bracket_size = len(slots)
    bracket.winner_rounds = build_elimination_rounds(bracket, slots, 'W', WINNER, get_winners_round_name)
    winners_rounds = len(bracket.winner_rounds)
    bracket.loser_rounds = _build_losers_bracket(bracket, bracket_size, winners_rounds)

    winners_final = bracket.matches[f"W{winners_rounds}-M1"]
    winners_final.feeds_to_match_id = GRAND_FINAL_ID
    winners_final.feeds_to_slot = 1
    if not bracket.loser_rounds:
        # Two players: the winners final loser goes straight to the grand final
        winners_final.feeds_to_loser_match_id = GRAND_FINAL_ID
        winners_final.feeds_to_loser_slot = 2

    gf1 = bracket.add_match(Match(id=GRAND_FINAL_ID, round=1, match_number=1,
                                  bracket=GRAND_FINAL, status=PENDING))
    gf2 = bracket.add_match(Match(id=GRAND_FINAL_RESET_ID, round=2, match_number=1,
                                  bracket=GRAND_FINAL, status=CONDITIONAL,
                                  notes='Only played if the losers bracket champion wins GF1'))
    bracket.grand_final_rounds = [
        Round(number=1, name="Grand Final", match_ids=[gf1.id], bracket=GRAND_FINAL),
        Round(number=2, name="Grand Final Reset", match_ids=[gf2.id], bracket=GRAND_FINAL),
    ]

    bracket.total_rounds = len(bracket.all_rounds())
    bracket.total_matches = len(bracket.matches)
    settle_byes(bracket)

    logger.info("Generated double elimination bracket: %d players, %d winners rounds, "
                "%d losers rounds, %d matches", len(ranked), winners_rounds,
                len(bracket.loser_rounds), bracket.total_matches)
    return bracket
