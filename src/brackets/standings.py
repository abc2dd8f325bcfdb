"""
Standings calculation for any bracket format.

Standings are derived from completed matches only and never stored, so
computing them twice on the same bracket gives the same table.

Ordering:
1. Points (weights from the tournament config)
2. Head-to-head, when exactly two players are level and have met
3. Buchholz (sum of opponents' points) for Swiss, score differential otherwise
4. Seed order
"""
from typing import Dict, List

from .config import TournamentConfig
from .models import Bracket, Standing, BYE, COMPLETED, SWISS


def _points_weights(bracket: Bracket, config) -> Dict[str, float]:
    if config is None:
        config = TournamentConfig.from_dict(bracket.config or None)
    elif isinstance(config, dict):
        config = TournamentConfig.from_dict(config)
    return config.points


def _completed_matches(bracket: Bracket):
    for match in bracket.matches.values():
        if match.status == COMPLETED and match.result is not None:
            yield match


def _head_to_head(bracket: Bracket, a: str, b: str) -> int:
    """Positive if a won more meetings with b, negative if b did, 0 if level or unplayed."""
    balance = 0
    for match in _completed_matches(bracket):
        if {match.player1, match.player2} != {a, b} or match.result.is_draw:
            continue
        if match.result.is_bye:
            continue
        balance += 1 if match.result.winner_id == a else -1
    return balance


def compute_standings(bracket: Bracket, config=None) -> List[Standing]:
    """Compute the standings table for a bracket, ranked from first to last."""
    weights = _points_weights(bracket, config)
    table: Dict[str, Standing] = {pid: Standing(pid) for pid in bracket.player_ids()}
    opponents: Dict[str, List[str]] = {pid: [] for pid in table}

    for match in _completed_matches(bracket):
        result = match.result
        if result.is_bye:
            if result.winner_id in table:
                table[result.winner_id].byes += 1
            continue
        p1, p2 = match.player1, match.player2
        if p1 not in table or p2 not in table:
            continue
        for pid, opp, scored, conceded in ((p1, p2, result.summary[0], result.summary[1]),
                                           (p2, p1, result.summary[1], result.summary[0])):
            standing = table[pid]
            standing.played += 1
            standing.score_for += scored
            standing.score_against += conceded
            opponents[pid].append(opp)
            if result.is_draw:
                standing.drawn += 1
                standing.points += weights['draw']
            elif result.winner_id == pid:
                standing.won += 1
                standing.points += weights['win']
            else:
                standing.lost += 1
                standing.points += weights['loss']

    # Round robin and Swiss record idle players on the round itself
    for round_ in bracket.rounds:
        for pid in round_.byes:
            if pid in table and pid != BYE:
                table[pid].byes += 1
                if bracket.format == SWISS:
                    table[pid].points += weights['win']

    for pid, standing in table.items():
        standing.buchholz = sum(table[opp].points for opp in opponents[pid])

    seed_order = {pid: i for i, pid in enumerate(bracket.player_ids())}
    swiss = bracket.format == SWISS

    def sort_key(s: Standing):
        secondary = s.buchholz if swiss else s.differential
        return (-s.points, -secondary, seed_order[s.player_id])

    ordered = sorted(table.values(), key=sort_key)

    # Head-to-head overrides the secondary tiebreak for a two-way tie
    i = 0
    while i < len(ordered):
        j = i
        while j + 1 < len(ordered) and ordered[j + 1].points == ordered[i].points:
            j += 1
        if j == i + 1:
            a, b = ordered[i], ordered[j]
            if _head_to_head(bracket, a.player_id, b.player_id) < 0:
                ordered[i], ordered[j] = b, a
        i = j + 1

    for rank, standing in enumerate(ordered, start=1):
        standing.rank = rank
    return ordered
