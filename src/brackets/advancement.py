"""
Advancement engine: applies a match result and moves players along the
bracket's feed links.

Every public function works on a copy and returns a new Bracket with its
version bumped, so a failed call never leaves a half-updated bracket behind.
"""
import copy
import logging
from typing import Optional

from .errors import (
    ConcurrentModification, InvalidScore, MatchAlreadyComplete, MatchNotFound, MatchNotReady,
)
from .models import (
    Bracket, Match, MatchResult, BYE,
    PENDING, SCHEDULED, IN_PROGRESS, COMPLETED, CONDITIONAL,
    ROUND_ROBIN, SWISS,
)

logger = logging.getLogger(__name__)

GRAND_FINAL_ID = 'GF1'
GRAND_FINAL_RESET_ID = 'GF2'


def check_version(bracket: Bracket, expected_version: Optional[int]):
    if expected_version is not None and expected_version != bracket.version:
        raise ConcurrentModification(
            f"Bracket is at version {bracket.version}, caller expected {expected_version}")


def get_match(bracket: Bracket, match_id: str) -> Match:
    match = bracket.matches.get(match_id)
    if match is None:
        raise MatchNotFound(f"No match '{match_id}'")
    return match


def check_playable(match: Match):
    """Raise unless the match can take a result right now."""
    if match.status == COMPLETED:
        raise MatchAlreadyComplete(f"Match {match.id} is already complete")
    if match.status == CONDITIONAL:
        raise MatchNotReady(f"Match {match.id} is only played if required")
    if not match.is_ready:
        raise MatchNotReady(f"Match {match.id} is still waiting for its players")


def apply_result(bracket: Bracket, match_id: str, result: MatchResult,
                 expected_version: Optional[int] = None) -> Bracket:
    """Record a result for a match and propagate its winner (and loser)."""
    check_version(bracket, expected_version)
    check_playable(get_match(bracket, match_id))

    new_bracket = copy.deepcopy(bracket)
    match = new_bracket.matches[match_id]
    result = copy.deepcopy(result)
    _validate_result(new_bracket, match, result)

    match.result = result
    match.status = COMPLETED
    if result.is_draw:
        logger.debug("Match %s drawn", match.id)
    else:
        logger.debug("Match %s won by %s", match.id, result.winner_id)
        propagate(new_bracket, match, result.winner_id, result.loser_id)

    new_bracket.version += 1
    return new_bracket


def start_match(bracket: Bracket, match_id: str, expected_version: Optional[int] = None) -> Bracket:
    """Mark a scheduled match as in progress."""
    check_version(bracket, expected_version)
    check_playable(get_match(bracket, match_id))
    if bracket.matches[match_id].status == IN_PROGRESS:
        return bracket

    new_bracket = copy.deepcopy(bracket)
    new_bracket.matches[match_id].status = IN_PROGRESS
    new_bracket.version += 1
    return new_bracket


def _validate_result(bracket: Bracket, match: Match, result: MatchResult):
    if result.is_draw:
        if bracket.format not in (ROUND_ROBIN, SWISS):
            raise InvalidScore(f"Match {match.id} cannot end in a draw")
        result.winner_id = None
        result.loser_id = None
        return
    if result.winner_id not in match.players:
        raise InvalidScore(f"{result.winner_id} is not playing in match {match.id}")
    loser_id = match.opponent_of(result.winner_id)
    if result.loser_id is not None and result.loser_id != loser_id:
        raise InvalidScore(f"{result.loser_id} did not lose match {match.id}")
    result.loser_id = loser_id


def place_player(bracket: Bracket, match_id: str, slot: int, player_id: str):
    """Put a player into a slot and settle the receiving match."""
    match = bracket.matches[match_id]
    match.set_slot(slot, player_id)
    settle_match(bracket, match)


def settle_match(bracket: Bracket, match: Match):
    """
    Update a match's status from its slots.

    A match holding a BYE resolves as soon as the other slot is known: the
    opposing player wins without adjudication, and two BYEs advance a BYE.
    """
    if match.status in (COMPLETED, CONDITIONAL):
        return
    if match.player1 is None or match.player2 is None:
        match.status = PENDING
        return
    if match.is_bye:
        winner = match.player2 if match.player1 == BYE else match.player1
        match.result = MatchResult.bye(winner)
        match.status = COMPLETED
        logger.debug("Match %s resolved as a bye for %s", match.id, winner)
        propagate(bracket, match, winner, BYE)
        return
    if match.status == PENDING:
        match.status = SCHEDULED


def settle_byes(bracket: Bracket):
    """Resolve every match that already holds a BYE (used right after generation)."""
    for match in list(bracket.matches.values()):
        settle_match(bracket, match)


def propagate(bracket: Bracket, match: Match, winner_id: str, loser_id: Optional[str]):
    if match.id == GRAND_FINAL_ID:
        _settle_grand_final(bracket, match, winner_id)
        return
    if match.feeds_to_match_id:
        place_player(bracket, match.feeds_to_match_id, match.feeds_to_slot, winner_id)
    elif winner_id != BYE and match.bracket is not None:
        bracket.champion = winner_id
        logger.info("%s wins the %s bracket", winner_id, bracket.format)
    if match.feeds_to_loser_match_id and loser_id is not None:
        place_player(bracket, match.feeds_to_loser_match_id, match.feeds_to_loser_slot, loser_id)


def _settle_grand_final(bracket: Bracket, match: Match, winner_id: str):
    """
    The winner-bracket champion sits in slot 1 of the grand final. If they
    win it the tournament is over; otherwise both players have one loss and
    the reset match goes live.
    """
    reset = bracket.matches.get(GRAND_FINAL_RESET_ID)
    if winner_id == match.player1 or reset is None:
        bracket.champion = winner_id
        if reset is not None:
            reset.notes = 'Not required: winners bracket champion won the grand final'
        logger.info("%s wins the grand final", winner_id)
        return
    reset.player1 = match.player1
    reset.player2 = match.player2
    reset.status = SCHEDULED
    reset.notes = 'Bracket reset: both finalists have one loss'
    logger.info("Grand final reset between %s and %s", reset.player1, reset.player2)
