"""
Raw score comparison for sports without a dedicated adjudicator.

Events are period scores, ``{'type': 'score', 'scores': [a, b]}``, in slot
order. The side that wins more periods wins the match; with equal period
wins the match is a draw.
"""
from typing import Any, Dict, List, Optional

from ..errors import InvalidScore
from ..models import MatchResult
from .base import check_events, walkover_result


def determine_winner(periods: List[List[int]]):
    """Determine winner from period scores. Returns (winner_index or None, period_wins)."""
    wins = [0, 0]
    for a, b in periods:
        if a > b:
            wins[0] += 1
        elif b > a:
            wins[1] += 1
    if wins[0] > wins[1]:
        return 0, tuple(wins)
    elif wins[1] > wins[0]:
        return 1, tuple(wins)
    return None, tuple(wins)


class RawScoreAdjudicator:
    sport = 'generic'

    def adjudicate(self, events: List[Dict[str, Any]], player1: str, player2: str,
                   options: Optional[Dict[str, Any]] = None) -> MatchResult:
        events = check_events(events)
        walkover = walkover_result(events, player1, player2)
        if walkover:
            return walkover

        periods = []
        for event in events:
            if event['type'] != 'score':
                raise InvalidScore(f"Unsupported score event type '{event['type']}'")
            scores = event.get('scores')
            if (not isinstance(scores, (list, tuple)) or len(scores) != 2
                    or not all(isinstance(s, (int, float)) and not isinstance(s, bool) for s in scores)):
                raise InvalidScore(f"Period score must be two numbers, got {scores!r}")
            if scores[0] < 0 or scores[1] < 0:
                raise InvalidScore("Scores cannot be negative")
            periods.append([scores[0], scores[1]])

        winner_index, period_wins = determine_winner(periods)
        summary = [sum(p[0] for p in periods), sum(p[1] for p in periods)]
        score = {'sport': self.sport, 'periods': periods, 'period_wins': list(period_wins)}
        if winner_index is None:
            return MatchResult(score=score, summary=summary, is_draw=True)
        winner, loser = (player1, player2) if winner_index == 0 else (player2, player1)
        return MatchResult(winner_id=winner, loser_id=loser, score=score, summary=summary)
