"""
Basketball scoring.

A game is four quarters. A game level after the last quarter goes to
overtime periods until one side leads, so a game never ends level.

Events are one ``{'type': 'period', 'points': [24, 19]}`` per quarter or
overtime period, or a lone walkover.
"""
from typing import Any, Dict, List, Optional

from ..errors import InvalidScore
from ..models import MatchResult
from .base import check_events, walkover_result

QUARTERS = 4


def _points(event) -> List[int]:
    points = event.get('points')
    if (not isinstance(points, (list, tuple)) or len(points) != 2
            or not all(isinstance(p, int) and not isinstance(p, bool) and p >= 0 for p in points)):
        raise InvalidScore(f"Period points must be two non-negative integers, got {points!r}")
    return list(points)


def format_score(periods: List[List[int]]) -> str:
    home = sum(p[0] for p in periods)
    away = sum(p[1] for p in periods)
    overtimes = len(periods) - QUARTERS
    if overtimes <= 0:
        return f"{home}-{away}"
    label = 'OT' if overtimes == 1 else f'{overtimes}OT'
    return f"{home}-{away} ({label})"


class BasketballAdjudicator:
    sport = 'basketball'

    def adjudicate(self, events: List[Dict[str, Any]], player1: str, player2: str,
                   options: Optional[Dict[str, Any]] = None) -> MatchResult:
        events = check_events(events)
        walkover = walkover_result(events, player1, player2)
        if walkover:
            return walkover

        periods = []
        home = away = 0
        for event in events:
            if event['type'] != 'period':
                raise InvalidScore(f"Unsupported basketball event type '{event['type']}'")
            if len(periods) >= QUARTERS and home != away:
                raise InvalidScore("The game was already decided before this period")
            points = _points(event)
            periods.append(points)
            home += points[0]
            away += points[1]

        if len(periods) < QUARTERS:
            raise InvalidScore(f"A game needs {QUARTERS} quarters, got {len(periods)}")
        if home == away:
            raise InvalidScore(f"A game cannot end level ({home}-{away}), play overtime")

        score = {'sport': self.sport, 'periods': periods, 'display': format_score(periods)}
        winner, loser = (player1, player2) if home > away else (player2, player1)
        return MatchResult(winner_id=winner, loser_id=loser, score=score, summary=[home, away])
