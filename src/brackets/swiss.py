"""
Swiss system: first round generation and round-by-round pairing.

Round 1 pairs neighbours in seed order (1v2, 3v4, ...), or a random draw
when no player carries a seed. Each later round re-ranks the field by the
current standings and solves a maximum weight perfect matching over the
players, where close ranks weigh more, so players on equal points meet each
other and an odd player out of a score group floats down to the next one.
Earlier opponents are left out of the graph; only when no perfect matching
without them exists are rematches allowed, as few as possible, and recorded
as warnings on the bracket.
"""
import copy
import logging
import random
from itertools import combinations
from typing import List, Optional, Set, Tuple, FrozenSet

import networkx as nx

from .advancement import check_version
from .config import TournamentConfig
from .errors import InvalidConfig, PairingExhausted, RoundIncomplete, TournamentComplete
from .models import Bracket, Match, Player, Round, SCHEDULED, COMPLETED, SWISS
from .standings import compute_standings

logger = logging.getLogger(__name__)

FORCED_REMATCH = 'forced rematch'


def max_swiss_rounds(num_players: int) -> int:
    """Rounds possible before someone must meet a previous opponent."""
    return num_players - 1 if num_players % 2 == 0 else num_players


def build_swiss(ranked: List[Player], config: TournamentConfig) -> Bracket:
    if config.rounds is None:
        raise InvalidConfig("A Swiss tournament needs a 'rounds' count")
    limit = max_swiss_rounds(len(ranked))
    if config.rounds > limit:
        raise InvalidConfig(f"{len(ranked)} players allow at most {limit} Swiss rounds, got {config.rounds}")

    if config.seeding == 'seeded' and all(p.seed is None for p in ranked):
        ranked = list(ranked)
        random.Random(config.rng_seed).shuffle(ranked)

    bracket = Bracket(SWISS, ranked, config.to_dict())
    bracket.total_rounds = config.rounds
    bracket.total_matches = config.rounds * (len(ranked) // 2)

    ids = [p.id for p in ranked]
    bye = ids.pop() if len(ids) % 2 else None
    pairs = [(ids[i], ids[i + 1]) for i in range(0, len(ids), 2)]
    _add_round(bracket, 1, pairs, bye, set())
    bracket.current_round = 1

    logger.info("Generated Swiss tournament: %d players, %d rounds", len(ranked), config.rounds)
    return bracket


def _add_round(bracket: Bracket, number: int, pairs: List[Tuple[str, str]], bye: Optional[str],
               repeats: Set[FrozenSet[str]]):
    round_ = Round(number=number, name=f"Round {number}", byes=[bye] if bye else [])
    for i, (p1, p2) in enumerate(pairs, start=1):
        match = bracket.add_match(Match(id=f"S{number}-M{i}", round=number, match_number=i,
                                        player1=p1, player2=p2, status=SCHEDULED))
        if frozenset((p1, p2)) in repeats:
            match.notes = FORCED_REMATCH
        round_.match_ids.append(match.id)
    bracket.rounds.append(round_)


def pairing_history(bracket: Bracket) -> Set[FrozenSet[str]]:
    """Every pair of players that already has a match."""
    return {frozenset((m.player1, m.player2)) for m in bracket.matches.values()}


def pair_players(ranked: List[str], played: Set[FrozenSet[str]],
                 allow_rematches: bool = False) -> List[Tuple[str, str]]:
    """
    Pair an even list of players given in rank order.

    Players are nodes of a graph and every allowed pairing is an edge worth
    more the closer the two ranks are. A maximum weight perfect matching then
    minimises the summed squared rank distance. With ``allow_rematches`` the
    previous pairings are edges too, carrying a penalty larger than any rank
    cost, so the matching uses as few of them as possible.

    Returns pairs ordered by the higher-ranked player, who takes slot 1.
    Raises PairingExhausted if no perfect matching avoids every rematch.
    """
    size = len(ranked)
    max_cost = (size - 1) ** 2
    rematch_penalty = (size // 2) * max_cost + 1
    base = rematch_penalty + max_cost + 1

    graph = nx.Graph()
    graph.add_nodes_from(range(size))
    for i, j in combinations(range(size), 2):
        repeat = frozenset((ranked[i], ranked[j])) in played
        if repeat and not allow_rematches:
            continue
        weight = base - (j - i) ** 2 - (rematch_penalty if repeat else 0)
        graph.add_edge(i, j, weight=weight)

    matching = nx.max_weight_matching(graph, maxcardinality=True)
    if len(matching) * 2 != size:
        raise PairingExhausted(f"No pairing of {size} players without rematches")
    return [(ranked[i], ranked[j]) for i, j in sorted(tuple(sorted(edge)) for edge in matching)]


def select_pairings(ranked: List[str], played: Set[FrozenSet[str]],
                    had_bye: Set[str]) -> Tuple[List[Tuple[str, str]], Optional[str], Set[FrozenSet[str]]]:
    """
    Choose the bye (if any) and the pairings for the next round.

    The bye goes to the lowest-ranked player without one whose removal still
    leaves a rematch-free pairing. Failing that, the bye candidate whose
    pairing needs the fewest rematches wins. Returns (pairs, bye, forced
    rematches).
    """
    if len(ranked) % 2 == 0:
        candidates = [None]
    else:
        candidates = [p for p in reversed(ranked) if p not in had_bye] or list(reversed(ranked))

    for bye in candidates:
        pool = [p for p in ranked if p != bye]
        try:
            return pair_players(pool, played), bye, set()
        except PairingExhausted:
            continue

    best = None
    for bye in candidates:
        pool = [p for p in ranked if p != bye]
        pairs = pair_players(pool, played, allow_rematches=True)
        repeats = {frozenset(pair) for pair in pairs if frozenset(pair) in played}
        if best is None or len(repeats) < len(best[2]):
            best = (pairs, bye, repeats)
    return best


def pair_next_round(bracket: Bracket, expected_version: Optional[int] = None) -> Bracket:
    """Pair the next Swiss round once every match of the current one is complete."""
    if bracket.format != SWISS:
        raise InvalidConfig(f"Cannot pair a new round for a {bracket.format} bracket")
    check_version(bracket, expected_version)

    current = bracket.rounds[bracket.current_round - 1]
    if bracket.round_status(current) != COMPLETED:
        raise RoundIncomplete(f"Round {current.number} still has unfinished matches")
    if bracket.current_round >= bracket.total_rounds:
        raise TournamentComplete(f"All {bracket.total_rounds} rounds have been played")

    ranked = [s.player_id for s in compute_standings(bracket)]
    played = pairing_history(bracket)
    had_bye = {pid for r in bracket.rounds for pid in r.byes}
    pairs, bye, repeats = select_pairings(ranked, played, had_bye)

    new_bracket = copy.deepcopy(bracket)
    number = bracket.current_round + 1
    _add_round(new_bracket, number, pairs, bye, repeats)
    if repeats:
        forced = [sorted(pair) for pair in repeats]
        new_bracket.warnings.append({'kind': PairingExhausted.kind, 'round': number, 'pairs': forced})
        logger.warning("Round %d needs %d forced rematch(es): %s", number, len(forced), forced)
    new_bracket.current_round = number
    new_bracket.version += 1

    logger.info("Paired Swiss round %d: %d matches%s", number, len(pairs),
                f", bye for {bye}" if bye else "")
    return new_bracket
