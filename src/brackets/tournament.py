"""
Public entry points: generate a bracket, submit results, advance Swiss
rounds and read standings.

All functions take a Bracket and return a new one; nothing here does I/O.
"""
import logging
from typing import Any, Dict, List, Optional, Union

from . import advancement, swiss
from .config import TournamentConfig
from .double_elimination import build_double_elimination
from .elimination import build_single_elimination
from .errors import InvalidConfig, InvalidRosterSize
from .models import (
    Bracket, Player, Standing, COMPLETED, FORMATS, SINGLE_ELIMINATION, DOUBLE_ELIMINATION, ROUND_ROBIN, SWISS,
)
from .round_robin import build_round_robin
from .scoring import get_adjudicator
from .seeding import assign_seeds
from .standings import compute_standings as _compute_standings

logger = logging.getLogger(__name__)

BUILDERS = {
    SINGLE_ELIMINATION: build_single_elimination,
    DOUBLE_ELIMINATION: build_double_elimination,
    ROUND_ROBIN: build_round_robin,
    SWISS: swiss.build_swiss,
}


def normalize_format(format: str) -> str:
    name = str(format).strip().lower().replace('-', '_').replace(' ', '_')
    if name not in FORMATS:
        raise InvalidConfig(f"Unknown format '{format}', expected one of {', '.join(FORMATS)}")
    return name


def _load_players(players) -> List[Player]:
    loaded = []
    for item in players or []:
        if isinstance(item, Player):
            loaded.append(item)
        elif isinstance(item, dict):
            try:
                loaded.append(Player.from_dict(item))
            except ValueError as e:
                raise InvalidConfig(str(e)) from e
        elif isinstance(item, str):
            loaded.append(Player(id=item))
        else:
            raise InvalidConfig(f"Cannot read player from {item!r}")

    seen = set()
    for player in loaded:
        if player.id in seen:
            raise InvalidConfig(f"Duplicate player id '{player.id}'")
        seen.add(player.id)
    return loaded


def generate_bracket(format: str, players, config: Union[TournamentConfig, Dict[str, Any], None] = None) -> Bracket:
    """
    Build the initial bracket for a roster.

    Args:
        format: single_elimination, double_elimination, round_robin or swiss
        players: Player objects, dicts (id/name/seed/rating) or plain names
        config: TournamentConfig or a dict of its fields

    Raises InvalidRosterSize for fewer than two players, InvalidConfig for
    an unknown format or bad settings, ByeOverflow for an oversized draw.
    """
    format = normalize_format(format)
    config = TournamentConfig.from_dict(config)
    roster = _load_players(players)
    if len(roster) < 2:
        raise InvalidRosterSize(f"A {format} bracket needs at least 2 players, got {len(roster)}")

    ranked = assign_seeds(roster, config.seeding, config.rng_seed)
    return BUILDERS[format](ranked, config)


def submit_result(bracket: Bracket, match_id: str, raw_score_events: List[Dict[str, Any]],
                  sport: Optional[str] = None, expected_version: Optional[int] = None) -> Bracket:
    """
    Adjudicate the score events of one match and advance the bracket.

    The sport defaults to the one in the bracket config. For Swiss brackets
    with ``auto_advance`` the next round is paired as soon as this result
    completes the current one.
    """
    advancement.check_version(bracket, expected_version)
    match = advancement.get_match(bracket, match_id)
    advancement.check_playable(match)

    sport = sport or bracket.config.get('sport') or 'generic'
    options = bracket.config.get(sport) if isinstance(bracket.config.get(sport), dict) else None
    result = get_adjudicator(sport).adjudicate(raw_score_events, match.player1, match.player2, options)
    logger.debug("Adjudicated %s as %s: winner %s", match_id, sport, result.winner_id)
    new_bracket = advancement.apply_result(bracket, match_id, result)

    if (new_bracket.format == SWISS and new_bracket.config.get('auto_advance')
            and new_bracket.current_round < new_bracket.total_rounds
            and new_bracket.round_status(new_bracket.rounds[new_bracket.current_round - 1]) == COMPLETED):
        new_bracket = swiss.pair_next_round(new_bracket)
    return new_bracket


def start_match(bracket: Bracket, match_id: str, expected_version: Optional[int] = None) -> Bracket:
    return advancement.start_match(bracket, match_id, expected_version)


def advance_swiss_round(bracket: Bracket, expected_version: Optional[int] = None) -> Bracket:
    return swiss.pair_next_round(bracket, expected_version)


def compute_standings(bracket: Bracket, config=None) -> List[Standing]:
    return _compute_standings(bracket, config)
