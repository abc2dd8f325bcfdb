"""
Tennis scoring state machine.

The match state is an immutable value; ``award_point`` returns the next
state, so undoing a point is replaying a shorter history.

Rules:
- Game: first to 4 points with a 2 point lead. At 3-3 (deuce) the next
  point gives advantage, and losing the following point returns to deuce.
  With ``no_ad`` the point at deuce decides the game.
- Set: first to ``games_per_set`` games with a 2 game lead. At
  ``tiebreak_at``-all a tiebreak to ``tiebreak_points`` (lead of 2) decides
  the set, which is recorded 7-6.
- Match: best of 3 (first to 2 sets) or best of 5 (first to 3 sets).
- Final set: 'tiebreak' (like any other set), 'advantage' (no tiebreak,
  played until someone leads by 2 games) or 'super_tiebreak' (the deciding
  set is a single tiebreak to ``final_set_tiebreak_points``).

Score events accepted by the adjudicator:
- ``{'type': 'point', 'player': id}``
- ``{'type': 'set', 'games': [6, 4]}`` or with ``'tiebreak': [7, 5]``
- ``{'type': 'retirement', 'player': id}`` as the last event
- ``{'type': 'walkover', 'winner': id}`` on its own
"""
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

from ..errors import InvalidConfig, InvalidScore
from ..models import MatchResult
from .base import check_events, walkover_result

POINT_NAMES = ('0', '15', '30', '40')
FINAL_SET_MODES = ('tiebreak', 'advantage', 'super_tiebreak')


@dataclass(frozen=True)
class TennisConfig:
    best_of: int = 3
    games_per_set: int = 6
    tiebreak_at: int = 6
    tiebreak_points: int = 7
    final_set: str = 'tiebreak'
    final_set_tiebreak_points: int = 10
    no_ad: bool = False

    def __post_init__(self):
        if self.best_of not in (3, 5):
            raise InvalidConfig(f"best_of must be 3 or 5, got {self.best_of}")
        if self.final_set not in FINAL_SET_MODES:
            raise InvalidConfig(f"final_set must be one of {', '.join(FINAL_SET_MODES)}")
        for name in ('games_per_set', 'tiebreak_at', 'tiebreak_points', 'final_set_tiebreak_points'):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                raise InvalidConfig(f"{name} must be a positive integer")
        if self.tiebreak_at not in (self.games_per_set - 1, self.games_per_set):
            raise InvalidConfig("tiebreak_at must be games_per_set or one game less")
        if not isinstance(self.no_ad, bool):
            raise InvalidConfig("no_ad must be true or false")

    @property
    def sets_to_win(self) -> int:
        return self.best_of // 2 + 1

    @classmethod
    def from_dict(cls, options: Optional[Dict[str, Any]]) -> 'TennisConfig':
        if not options:
            return cls()
        unknown = set(options) - set(cls.__dataclass_fields__)
        if unknown:
            raise InvalidConfig(f"Unknown tennis options: {', '.join(sorted(unknown))}")
        return cls(**options)


@dataclass(frozen=True)
class SetScore:
    games: Tuple[int, int]
    tiebreak: Optional[Tuple[int, int]] = None
    super_tiebreak: bool = False

    @property
    def winner_index(self) -> int:
        return 0 if self.games[0] > self.games[1] else 1

    def display(self) -> str:
        if self.super_tiebreak:
            return f"[{self.tiebreak[0]}-{self.tiebreak[1]}]"
        if self.tiebreak:
            return f"{self.games[0]}-{self.games[1]}({self.tiebreak[0]}-{self.tiebreak[1]})"
        return f"{self.games[0]}-{self.games[1]}"

    def to_dict(self) -> Dict[str, Any]:
        data = {'games': list(self.games)}
        if self.tiebreak:
            data['tiebreak'] = list(self.tiebreak)
        if self.super_tiebreak:
            data['super_tiebreak'] = True
        return data


@dataclass(frozen=True)
class TennisState:
    players: Tuple[str, str]
    config: TennisConfig = field(default_factory=TennisConfig)
    sets: Tuple[SetScore, ...] = ()
    games: Tuple[int, int] = (0, 0)
    points: Tuple[int, int] = (0, 0)
    in_tiebreak: bool = False
    winner: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return self.winner is not None

    @property
    def sets_won(self) -> Tuple[int, int]:
        first = sum(1 for s in self.sets if s.winner_index == 0)
        return first, len(self.sets) - first

    @property
    def set_number(self) -> int:
        return len(self.sets) + 1

    @property
    def is_final_set(self) -> bool:
        return self.set_number == self.config.best_of

    @property
    def tiebreak_allowed(self) -> bool:
        return not (self.is_final_set and self.config.final_set == 'advantage')

    @property
    def is_super_tiebreak(self) -> bool:
        return self.is_final_set and self.config.final_set == 'super_tiebreak'


def new_match(player1: str, player2: str, config: Optional[TennisConfig] = None) -> TennisState:
    return TennisState(players=(player1, player2), config=config or TennisConfig())


def _bump(pair: Tuple[int, int], index: int) -> Tuple[int, int]:
    return (pair[0] + 1, pair[1]) if index == 0 else (pair[0], pair[1] + 1)


def _player_index(state: TennisState, player_id: str) -> int:
    if player_id not in state.players:
        raise InvalidScore(f"{player_id!r} is not playing this match")
    return state.players.index(player_id)


def award_point(state: TennisState, player_id: str) -> TennisState:
    """Return the state after ``player_id`` wins a point."""
    if state.is_complete:
        raise InvalidScore("The match is already decided")
    idx = _player_index(state, player_id)
    if state.in_tiebreak:
        return _tiebreak_point(state, idx)

    points = _bump(state.points, idx)
    lead = points[idx] - points[1 - idx]
    if state.config.no_ad:
        won = points[idx] >= 4
    else:
        won = points[idx] >= 4 and lead >= 2
    if won:
        return _award_game(state, idx)
    # Advantage lost: back to deuce
    if points[0] >= 3 and points[0] == points[1]:
        points = (3, 3)
    return replace(state, points=points)


def _award_game(state: TennisState, idx: int) -> TennisState:
    cfg = state.config
    games = _bump(state.games, idx)
    if games[idx] >= cfg.games_per_set and games[idx] - games[1 - idx] >= 2:
        return _award_set(state, SetScore(games))
    if state.tiebreak_allowed and games == (cfg.tiebreak_at, cfg.tiebreak_at):
        return replace(state, games=games, points=(0, 0), in_tiebreak=True)
    return replace(state, games=games, points=(0, 0))


def _tiebreak_point(state: TennisState, idx: int) -> TennisState:
    cfg = state.config
    points = _bump(state.points, idx)
    target = cfg.final_set_tiebreak_points if state.is_super_tiebreak else cfg.tiebreak_points
    if points[idx] < target or points[idx] - points[1 - idx] < 2:
        return replace(state, points=points)
    if state.is_super_tiebreak:
        return _award_set(state, SetScore(_bump((0, 0), idx), points, super_tiebreak=True))
    return _award_set(state, SetScore(_bump(state.games, idx), points))


def _award_set(state: TennisState, set_score: SetScore) -> TennisState:
    sets = state.sets + (set_score,)
    idx = set_score.winner_index
    after = replace(state, sets=sets, games=(0, 0), points=(0, 0), in_tiebreak=False)
    if after.sets_won[idx] >= state.config.sets_to_win:
        return replace(after, winner=state.players[idx])
    if after.is_super_tiebreak:
        return replace(after, in_tiebreak=True)
    return after


def _score_pair(value, what: str) -> Tuple[int, int]:
    if (not isinstance(value, (list, tuple)) or len(value) != 2
            or not all(isinstance(v, int) and not isinstance(v, bool) and v >= 0 for v in value)):
        raise InvalidScore(f"{what} must be two non-negative integers, got {value!r}")
    return value[0], value[1]


def _check_tiebreak(score: Tuple[int, int], target: int):
    high, low = max(score), min(score)
    if high < target or high - low < 2 or (high > target and high - low != 2):
        raise InvalidScore(f"{score[0]}-{score[1]} is not a valid tiebreak to {target}")


def validate_set(state: TennisState, games, tiebreak=None) -> SetScore:
    """
    Check a set score entered directly and return it as a SetScore.

    Valid: 6-0 to 6-4, 7-5, and 7-6 with a tiebreak (for the default 6 game
    set), or any 2 game margin in an 'advantage' final set.
    """
    cfg = state.config
    if state.is_super_tiebreak:
        if tiebreak is None:
            raise InvalidScore("The deciding set is a match tiebreak, submit its 'tiebreak' score")
        tb = _score_pair(tiebreak, "Tiebreak score")
        _check_tiebreak(tb, cfg.final_set_tiebreak_points)
        return SetScore((1, 0) if tb[0] > tb[1] else (0, 1), tb, super_tiebreak=True)

    g = _score_pair(games, "Set score")
    high, low = max(g), min(g)
    if state.tiebreak_allowed and high == cfg.tiebreak_at + 1 and low == cfg.tiebreak_at:
        if tiebreak is None:
            raise InvalidScore(f"A {g[0]}-{g[1]} set needs its tiebreak score")
        tb = _score_pair(tiebreak, "Tiebreak score")
        _check_tiebreak(tb, cfg.tiebreak_points)
        if (tb[0] > tb[1]) != (g[0] > g[1]):
            raise InvalidScore("The tiebreak winner must win the set")
        return SetScore(g, tb)

    if tiebreak is not None:
        raise InvalidScore(f"A {g[0]}-{g[1]} set has no tiebreak")
    regular = high == cfg.games_per_set and low <= cfg.games_per_set - 2
    extended = (high > cfg.games_per_set and high - low == 2
                and (not state.tiebreak_allowed or low < cfg.tiebreak_at))
    if not (regular or extended):
        raise InvalidScore(f"{g[0]}-{g[1]} is not a valid set score")
    return SetScore(g)


def award_set(state: TennisState, games, tiebreak=None) -> TennisState:
    """Return the state after a whole set entered as a final score."""
    if state.is_complete:
        raise InvalidScore("The match is already decided")
    if state.games != (0, 0) or state.points != (0, 0):
        raise InvalidScore("Set scores can only be entered between sets")
    return _award_set(state, validate_set(state, games, tiebreak))


def replay(player1: str, player2: str, events: List[Dict[str, Any]],
           config: Optional[TennisConfig] = None) -> TennisState:
    """Rebuild a match state from its point and set events."""
    state = new_match(player1, player2, config)
    for event in events:
        if event['type'] == 'point':
            state = award_point(state, event.get('player'))
        elif event['type'] == 'set':
            state = award_set(state, event.get('games'), event.get('tiebreak'))
        else:
            raise InvalidScore(f"Unsupported tennis event type '{event['type']}'")
    return state


def format_score(state: TennisState) -> str:
    """Score line such as '6-4, 7-6(7-5)', with the set in progress last."""
    parts = [s.display() for s in state.sets]
    if not state.is_complete and (state.games != (0, 0) or state.points != (0, 0)):
        parts.append(f"{state.games[0]}-{state.games[1]}")
    return ", ".join(parts)


def game_score(state: TennisState) -> Tuple[str, str]:
    """Current game as called by the umpire: ('30', '15'), ('AD', '40'), ..."""
    p1, p2 = state.points
    if state.in_tiebreak:
        return str(p1), str(p2)
    if p1 >= 3 and p2 >= 3:
        if p1 == p2:
            return '40', '40'
        return ('AD', '40') if p1 > p2 else ('40', 'AD')
    return POINT_NAMES[p1], POINT_NAMES[p2]


class TennisAdjudicator:
    sport = 'tennis'

    def adjudicate(self, events: List[Dict[str, Any]], player1: str, player2: str,
                   options: Optional[Dict[str, Any]] = None) -> MatchResult:
        events = check_events(events)
        walkover = walkover_result(events, player1, player2)
        if walkover:
            return walkover

        retired = None
        if events[-1]['type'] == 'retirement':
            retired = events[-1].get('player')
            if retired not in (player1, player2):
                raise InvalidScore(f"Retiring player {retired!r} is not in this match")
            events = events[:-1]

        state = replay(player1, player2, events, TennisConfig.from_dict(options))
        if retired:
            if state.is_complete:
                raise InvalidScore("The match was decided before the retirement")
            winner = player2 if retired == player1 else player1
        elif not state.is_complete:
            raise InvalidScore(f"The match is not finished ({format_score(state) or 'no score'})")
        else:
            winner = state.winner

        summary = [sum(s.games[0] for s in state.sets) + state.games[0],
                   sum(s.games[1] for s in state.sets) + state.games[1]]
        score = {
            'sport': self.sport,
            'sets': [s.to_dict() for s in state.sets],
            'display': format_score(state),
        }
        if retired:
            score['retired'] = retired
        loser = player2 if winner == player1 else player1
        return MatchResult(winner_id=winner, loser_id=loser, score=score, summary=summary)
