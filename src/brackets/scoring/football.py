"""
Football scoring.

A match runs through two halves. When the second half ends level the match
goes to two periods of extra time and, still level after those, to a
penalty shootout. A match whose events stop at a level full time is a draw,
which only league formats accept.

Score events accepted by the adjudicator:
- ``{'type': 'goal', 'player': id}`` in the running period
- ``{'type': 'period_end'}`` closes the running period
- ``{'type': 'period', 'goals': [1, 0]}`` records and closes a whole period
- ``{'type': 'penalty', 'player': id, 'scored': true}`` during the shootout
- ``{'type': 'shootout', 'goals': [4, 3]}`` records the whole shootout
- ``{'type': 'walkover', 'winner': id}`` on its own
"""
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Tuple

from ..errors import InvalidScore
from ..models import MatchResult
from .base import check_events, walkover_result

FIRST_HALF = 'first_half'
SECOND_HALF = 'second_half'
EXTRA_TIME_FIRST = 'extra_time_first'
EXTRA_TIME_SECOND = 'extra_time_second'
PENALTIES = 'penalties'
FINISHED = 'finished'

PLAYING_PERIODS = (FIRST_HALF, SECOND_HALF, EXTRA_TIME_FIRST, EXTRA_TIME_SECOND)


@dataclass(frozen=True)
class FootballState:
    player1: str
    player2: str
    period: str = FIRST_HALF
    periods: Tuple[Tuple[int, int], ...] = ()
    goals: Tuple[int, int] = (0, 0)
    shootout: Optional[Tuple[int, int]] = None

    @property
    def totals(self) -> Tuple[int, int]:
        return (sum(p[0] for p in self.periods) + self.goals[0],
                sum(p[1] for p in self.periods) + self.goals[1])

    @property
    def is_level(self) -> bool:
        home, away = self.totals
        return home == away

    @property
    def drawn_at_full_time(self) -> bool:
        """Regulation ended level and nothing was played after it."""
        return self.period == EXTRA_TIME_FIRST and len(self.periods) == 2 and self.goals == (0, 0)

    @property
    def winner(self) -> Optional[str]:
        if self.period != FINISHED:
            return None
        home, away = self.shootout if self.shootout and self.is_level else self.totals
        if home == away:
            return None
        return self.player1 if home > away else self.player2


def new_match(player1: str, player2: str) -> FootballState:
    return FootballState(player1, player2)


def _player_index(state: FootballState, player_id: str) -> int:
    if player_id == state.player1:
        return 0
    if player_id == state.player2:
        return 1
    raise InvalidScore(f"{player_id!r} is not playing in this match")


def _goal_pair(value, what: str) -> Tuple[int, int]:
    if (not isinstance(value, (list, tuple)) or len(value) != 2
            or not all(isinstance(v, int) and not isinstance(v, bool) and v >= 0 for v in value)):
        raise InvalidScore(f"{what} must be two non-negative integers, got {value!r}")
    return value[0], value[1]


def record_goal(state: FootballState, player_id: str) -> FootballState:
    if state.period not in PLAYING_PERIODS:
        raise InvalidScore(f"No goals can be scored during {state.period.replace('_', ' ')}")
    idx = _player_index(state, player_id)
    goals = (state.goals[0] + 1, state.goals[1]) if idx == 0 else (state.goals[0], state.goals[1] + 1)
    return replace(state, goals=goals)


def end_period(state: FootballState) -> FootballState:
    """Close the running period and move on as the laws of the game say."""
    if state.period == FINISHED:
        raise InvalidScore("The match is already over")
    if state.period == PENALTIES:
        shootout = state.shootout or (0, 0)
        if shootout[0] == shootout[1]:
            raise InvalidScore(f"A shootout cannot end level ({shootout[0]}-{shootout[1]})")
        return replace(state, period=FINISHED)

    closed = replace(state, periods=state.periods + (state.goals,), goals=(0, 0))
    if state.period == FIRST_HALF:
        return replace(closed, period=SECOND_HALF)
    if state.period == SECOND_HALF:
        return replace(closed, period=EXTRA_TIME_FIRST if closed.is_level else FINISHED)
    if state.period == EXTRA_TIME_FIRST:
        return replace(closed, period=EXTRA_TIME_SECOND)
    if closed.is_level:
        return replace(closed, period=PENALTIES, shootout=(0, 0))
    return replace(closed, period=FINISHED)


def record_period(state: FootballState, goals) -> FootballState:
    """Add a whole period's goals and close it."""
    if state.period not in PLAYING_PERIODS or state.goals != (0, 0):
        raise InvalidScore("Whole periods can only be entered between periods")
    return end_period(replace(state, goals=_goal_pair(goals, "Period goals")))


def record_penalty(state: FootballState, player_id: str, scored: bool) -> FootballState:
    if state.period != PENALTIES:
        raise InvalidScore("Penalties are only taken in a shootout")
    if not isinstance(scored, bool):
        raise InvalidScore("A penalty must say whether it was scored")
    idx = _player_index(state, player_id)
    if not scored:
        return state
    home, away = state.shootout
    return replace(state, shootout=(home + 1, away) if idx == 0 else (home, away + 1))


def record_shootout(state: FootballState, goals) -> FootballState:
    if state.period != PENALTIES or state.shootout != (0, 0):
        raise InvalidScore("A shootout result needs a fresh shootout")
    return end_period(replace(state, shootout=_goal_pair(goals, "Shootout goals")))


def replay(player1: str, player2: str, events: List[Dict[str, Any]]) -> FootballState:
    state = new_match(player1, player2)
    for event in events:
        kind = event['type']
        if kind == 'goal':
            state = record_goal(state, event.get('player'))
        elif kind == 'period_end':
            state = end_period(state)
        elif kind == 'period':
            state = record_period(state, event.get('goals'))
        elif kind == 'penalty':
            state = record_penalty(state, event.get('player'), event.get('scored'))
        elif kind == 'shootout':
            state = record_shootout(state, event.get('goals'))
        else:
            raise InvalidScore(f"Unsupported football event type '{kind}'")
    return state


def format_score(state: FootballState) -> str:
    """Score line such as '2-1', '1-1 (a.e.t.)' or '1-1 (a.e.t.), 4-3 pens'."""
    home, away = state.totals
    line = f"{home}-{away}"
    if len(state.periods) > 2:
        line += " (a.e.t.)"
    if state.period == FINISHED and state.shootout:
        line += f", {state.shootout[0]}-{state.shootout[1]} pens"
    return line


class FootballAdjudicator:
    sport = 'football'

    def adjudicate(self, events: List[Dict[str, Any]], player1: str, player2: str,
                   options: Optional[Dict[str, Any]] = None) -> MatchResult:
        events = check_events(events)
        walkover = walkover_result(events, player1, player2)
        if walkover:
            return walkover

        state = replay(player1, player2, events)
        if state.period != FINISHED and not state.drawn_at_full_time:
            raise InvalidScore(f"The match is not finished ({state.period.replace('_', ' ')})")

        score = {
            'sport': self.sport,
            'periods': [list(p) for p in state.periods],
            'display': format_score(state),
        }
        if state.shootout and state.period == FINISHED:
            score['shootout'] = list(state.shootout)
        summary = list(state.totals)

        winner = state.winner
        if winner is None:
            return MatchResult(score=score, summary=summary, is_draw=True)
        loser = player2 if winner == player1 else player1
        return MatchResult(winner_id=winner, loser_id=loser, score=score, summary=summary)
