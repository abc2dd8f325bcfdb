"""
Score adjudication interface.

An adjudicator turns the raw score events a caller submits for one match
into a MatchResult. Events are plain dicts with a ``type`` key; every sport
understands ``{'type': 'walkover', 'winner': <player id>}``.
"""
from typing import Any, Dict, List, Optional, Protocol

from ..errors import InvalidScore
from ..models import MatchResult


class ScoreAdjudicator(Protocol):
    sport: str

    def adjudicate(self, events: List[Dict[str, Any]], player1: str, player2: str,
                   options: Optional[Dict[str, Any]] = None) -> MatchResult:
        ...


def check_events(events) -> List[Dict[str, Any]]:
    if not isinstance(events, list) or not events:
        raise InvalidScore("No score events submitted")
    for event in events:
        if not isinstance(event, dict) or 'type' not in event:
            raise InvalidScore(f"Malformed score event: {event!r}")
    return events


def walkover_result(events: List[Dict[str, Any]], player1: str, player2: str) -> Optional[MatchResult]:
    """Return a walkover result if the events are a single walkover, None otherwise."""
    walkovers = [e for e in events if e['type'] == 'walkover']
    if not walkovers:
        return None
    if len(events) != 1:
        raise InvalidScore("A walkover cannot be combined with other score events")
    winner = walkovers[0].get('winner')
    if winner not in (player1, player2):
        raise InvalidScore(f"Walkover winner {winner!r} is not in this match")
    loser = player2 if winner == player1 else player1
    return MatchResult.walkover(winner, loser)
