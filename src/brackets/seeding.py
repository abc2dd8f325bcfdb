"""
Seed assignment and bye placement.
"""
import math
import random
from typing import List, Optional

from .errors import ByeOverflow, InvalidConfig
from .models import Player, BYE


def assign_seeds(players: List[Player], mode: str = 'seeded', rng_seed=None) -> List[Player]:
    """
    Order players by rank, strongest first.

    - 'seeded': players with a seed sorted ascending, unseeded after them in input order
    - 'random': shuffled with a generator seeded by rng_seed (reproducible)
    - 'by-rating': highest rating first, unrated last, ties keep input order
    """
    players = list(players)
    if mode == 'seeded':
        seeded = [p for p in players if p.seed is not None]
        unseeded = [p for p in players if p.seed is None]
        # sorted() is stable, so equal seeds keep their input order
        return sorted(seeded, key=lambda p: p.seed) + unseeded
    elif mode == 'random':
        rng = random.Random(rng_seed)
        rng.shuffle(players)
        return players
    elif mode == 'by-rating':
        return sorted(players, key=lambda p: (p.rating is None, -(p.rating or 0)))
    raise InvalidConfig(f"Unknown seeding mode '{mode}'")


def calculate_bracket_size(num_players: int) -> int:
    """Calculate the bracket size (next power of 2)."""
    if num_players <= 0:
        return 0
    return 2 ** math.ceil(math.log2(num_players))


def calculate_byes(num_players: int, draw_size: Optional[int] = None) -> int:
    """Calculate number of byes needed."""
    size = draw_size or calculate_bracket_size(num_players)
    return size - num_players


def generate_bracket_order(bracket_size: int) -> List[int]:
    """
    Generate the standard tournament bracket order.
    If all higher seeds win, seeds 1 and 2 only meet in the final.

    For 8 players: [1, 8, 4, 5, 2, 7, 3, 6]
    This gives matchups: 1v8, 4v5, 2v7, 3v6
    """
    if bracket_size < 2:
        return [1] if bracket_size == 1 else []
    if bracket_size == 2:
        return [1, 2]

    upper_half = generate_bracket_order(bracket_size // 2)
    result = []
    for seed in upper_half:
        result.extend([seed, bracket_size + 1 - seed])
    return result


def place_byes(ranked: List[Player], draw_size: Optional[int] = None) -> List[str]:
    """
    Lay ranked players out over the draw slots, filling empty slots with BYE.

    Seed k's first-round opponent is seed (size + 1 - k), so the missing
    bottom seeds hand their byes to the top seeds and two byes never meet
    as long as byes do not exceed half the draw.
    """
    num_players = len(ranked)
    if draw_size is not None:
        if draw_size & (draw_size - 1) or draw_size < 2:
            raise InvalidConfig(f"draw_size must be a power of two, got {draw_size}")
        if draw_size < num_players:
            raise InvalidConfig(f"draw_size {draw_size} is smaller than the roster ({num_players})")
    size = draw_size or calculate_bracket_size(num_players)
    byes = calculate_byes(num_players, size)
    if byes > size // 2:
        raise ByeOverflow(f"{byes} byes do not fit a draw of {size}")

    slots = []
    for seed in generate_bracket_order(size):
        slots.append(ranked[seed - 1].id if seed <= num_players else BYE)
    return slots
