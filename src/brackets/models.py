"""
Shared data model for brackets, matches and results.

Everything here converts to and from plain dicts/lists so a bracket can be
dumped to YAML or JSON; links between matches are always match id strings.
"""
from typing import List, Dict, Optional, Any

BYE = 'BYE'

# Match statuses
PENDING = 'pending'
SCHEDULED = 'scheduled'
IN_PROGRESS = 'in_progress'
COMPLETED = 'completed'
CONDITIONAL = 'conditional'

# Bracket tags
WINNER = 'winner'
LOSER = 'loser'
GRAND_FINAL = 'grand_final'

# Formats
SINGLE_ELIMINATION = 'single_elimination'
DOUBLE_ELIMINATION = 'double_elimination'
ROUND_ROBIN = 'round_robin'
SWISS = 'swiss'
FORMATS = (SINGLE_ELIMINATION, DOUBLE_ELIMINATION, ROUND_ROBIN, SWISS)


class Player:
    def __init__(self, id, name=None, seed=None, rating=None):
        self.id = str(id)
        self.name = name if name is not None else self.id
        self.seed = seed
        self.rating = rating

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'name': self.name, 'seed': self.seed, 'rating': self.rating}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Player':
        if 'id' not in data and 'name' not in data:
            raise ValueError("Player needs an 'id' or a 'name'")
        return cls(
            id=data.get('id', data.get('name')),
            name=data.get('name'),
            seed=data.get('seed'),
            rating=data.get('rating'),
        )

    def __eq__(self, other):
        return isinstance(other, Player) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"Player(id={self.id}, name={self.name}, seed={self.seed}, rating={self.rating})"


class MatchResult:
    """
    Outcome of one match.

    ``score`` is a sport-tagged payload (``score['sport']``), ``summary`` holds
    the two totals used for differentials, ordered like the match slots.
    """

    def __init__(self, winner_id=None, loser_id=None, score=None, summary=None,
                 is_walkover=False, is_draw=False):
        self.winner_id = winner_id
        self.loser_id = loser_id
        self.score = score if score else {'sport': 'generic'}
        self.summary = list(summary) if summary else [0, 0]
        self.is_walkover = is_walkover
        self.is_draw = is_draw

    @classmethod
    def bye(cls, winner_id: str, loser_id: str = BYE) -> 'MatchResult':
        return cls(winner_id=winner_id, loser_id=loser_id, score={'sport': 'bye'})

    @classmethod
    def walkover(cls, winner_id: str, loser_id: str) -> 'MatchResult':
        return cls(winner_id=winner_id, loser_id=loser_id,
                   score={'sport': 'walkover'}, is_walkover=True)

    @property
    def is_bye(self) -> bool:
        return self.score.get('sport') == 'bye'

    def to_dict(self) -> Dict[str, Any]:
        return {
            'winner_id': self.winner_id,
            'loser_id': self.loser_id,
            'score': self.score,
            'summary': list(self.summary),
            'is_walkover': self.is_walkover,
            'is_draw': self.is_draw,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MatchResult':
        return cls(
            winner_id=data.get('winner_id'),
            loser_id=data.get('loser_id'),
            score=data.get('score'),
            summary=data.get('summary'),
            is_walkover=data.get('is_walkover', False),
            is_draw=data.get('is_draw', False),
        )

    def __repr__(self):
        return f"MatchResult(winner_id={self.winner_id}, loser_id={self.loser_id}, score={self.score})"


class Match:
    def __init__(self, id, round, match_number, bracket=None, player1=None, player2=None,
                 status=PENDING, result=None, feeds_to_match_id=None, feeds_to_slot=None,
                 feeds_to_loser_match_id=None, feeds_to_loser_slot=None, notes=None):
        self.id = id
        self.round = round
        self.match_number = match_number
        self.bracket = bracket
        self.player1 = player1
        self.player2 = player2
        self.status = status
        self.result = result
        self.feeds_to_match_id = feeds_to_match_id
        self.feeds_to_slot = feeds_to_slot
        self.feeds_to_loser_match_id = feeds_to_loser_match_id
        self.feeds_to_loser_slot = feeds_to_loser_slot
        self.notes = notes

    @property
    def players(self) -> List[Optional[str]]:
        return [self.player1, self.player2]

    @property
    def is_bye(self) -> bool:
        return BYE in (self.player1, self.player2)

    @property
    def is_ready(self) -> bool:
        """Both slots hold real players."""
        return all(p is not None and p != BYE for p in self.players)

    def get_slot(self, slot: int) -> Optional[str]:
        return self.player1 if slot == 1 else self.player2

    def set_slot(self, slot: int, player_id: Optional[str]):
        if slot == 1:
            self.player1 = player_id
        else:
            self.player2 = player_id

    def opponent_of(self, player_id: str) -> Optional[str]:
        if player_id == self.player1:
            return self.player2
        if player_id == self.player2:
            return self.player1
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'round': self.round,
            'match_number': self.match_number,
            'bracket': self.bracket,
            'player1': self.player1,
            'player2': self.player2,
            'status': self.status,
            'result': self.result.to_dict() if self.result else None,
            'feeds_to_match_id': self.feeds_to_match_id,
            'feeds_to_slot': self.feeds_to_slot,
            'feeds_to_loser_match_id': self.feeds_to_loser_match_id,
            'feeds_to_loser_slot': self.feeds_to_loser_slot,
            'notes': self.notes,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Match':
        fields = dict(data)
        result = fields.pop('result', None)
        return cls(result=MatchResult.from_dict(result) if result else None, **fields)

    def __repr__(self):
        return (f"Match(id={self.id}, player1={self.player1}, player2={self.player2}, "
                f"status={self.status})")


class Round:
    def __init__(self, number, name, match_ids=None, bracket=None, byes=None):
        self.number = number
        self.name = name
        self.match_ids = list(match_ids) if match_ids else []
        self.bracket = bracket
        self.byes = list(byes) if byes else []

    def to_dict(self) -> Dict[str, Any]:
        return {
            'number': self.number,
            'name': self.name,
            'bracket': self.bracket,
            'match_ids': list(self.match_ids),
            'byes': list(self.byes),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Round':
        return cls(
            number=data['number'],
            name=data['name'],
            match_ids=data.get('match_ids'),
            bracket=data.get('bracket'),
            byes=data.get('byes'),
        )

    def __repr__(self):
        return f"Round(number={self.number}, name={self.name}, matches={len(self.match_ids)})"


class Standing:
    def __init__(self, player_id, played=0, won=0, drawn=0, lost=0, byes=0, points=0,
                 score_for=0, score_against=0, buchholz=0, rank=0):
        self.player_id = player_id
        self.played = played
        self.won = won
        self.drawn = drawn
        self.lost = lost
        self.byes = byes
        self.points = points
        self.score_for = score_for
        self.score_against = score_against
        self.buchholz = buchholz
        self.rank = rank

    @property
    def differential(self):
        return self.score_for - self.score_against

    def to_dict(self) -> Dict[str, Any]:
        return {
            'rank': self.rank,
            'player_id': self.player_id,
            'played': self.played,
            'won': self.won,
            'drawn': self.drawn,
            'lost': self.lost,
            'byes': self.byes,
            'points': self.points,
            'score_for': self.score_for,
            'score_against': self.score_against,
            'differential': self.differential,
            'buchholz': self.buchholz,
        }

    def __eq__(self, other):
        return isinstance(other, Standing) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"Standing(rank={self.rank}, player_id={self.player_id}, points={self.points})"


class Bracket:
    """
    A generated competition and all of its matches.

    ``matches`` is the arena every round refers into by id. Elimination
    formats use ``rounds`` (single) or ``winner_rounds``/``loser_rounds``/
    ``grand_final_rounds`` (double); round robin and Swiss use ``rounds``.
    """

    def __init__(self, format, players, config=None, version=0):
        self.format = format
        self.players: List[Player] = list(players)
        self.config: Dict[str, Any] = dict(config) if config else {}
        self.version = version
        self.matches: Dict[str, Match] = {}
        self.rounds: List[Round] = []
        self.winner_rounds: List[Round] = []
        self.loser_rounds: List[Round] = []
        self.grand_final_rounds: List[Round] = []
        self.total_matches = 0
        self.total_rounds = 0
        self.current_round = 0
        self.champion: Optional[str] = None
        self.warnings: List[Dict[str, Any]] = []

    def add_match(self, match: Match) -> Match:
        self.matches[match.id] = match
        return match

    def all_rounds(self) -> List[Round]:
        return self.rounds + self.winner_rounds + self.loser_rounds + self.grand_final_rounds

    def round_matches(self, round: Round) -> List[Match]:
        return [self.matches[mid] for mid in round.match_ids]

    def round_status(self, round: Round) -> str:
        statuses = [m.status for m in self.round_matches(round)]
        if statuses and all(s == COMPLETED for s in statuses):
            return COMPLETED
        if not statuses:
            return COMPLETED if round.byes else PENDING
        if any(s in (COMPLETED, IN_PROGRESS) for s in statuses):
            return IN_PROGRESS
        return PENDING

    def player_ids(self) -> List[str]:
        return [p.id for p in self.players]

    @property
    def decisive_matches(self) -> int:
        """Matches that need a played result (bye matches excluded)."""
        return sum(1 for m in self.matches.values()
                   if not (m.result and m.result.is_bye) and not m.is_bye)

    @property
    def is_complete(self) -> bool:
        if self.format in (SINGLE_ELIMINATION, DOUBLE_ELIMINATION):
            return self.champion is not None
        if self.format == SWISS and self.current_round < self.total_rounds:
            return False
        return all(m.status == COMPLETED for m in self.matches.values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            'format': self.format,
            'version': self.version,
            'players': [p.to_dict() for p in self.players],
            'config': self.config,
            'matches': [m.to_dict() for m in self.matches.values()],
            'rounds': [r.to_dict() for r in self.rounds],
            'winner_rounds': [r.to_dict() for r in self.winner_rounds],
            'loser_rounds': [r.to_dict() for r in self.loser_rounds],
            'grand_final_rounds': [r.to_dict() for r in self.grand_final_rounds],
            'total_matches': self.total_matches,
            'total_rounds': self.total_rounds,
            'current_round': self.current_round,
            'champion': self.champion,
            'warnings': list(self.warnings),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Bracket':
        bracket = cls(
            format=data['format'],
            players=[Player.from_dict(p) for p in data.get('players', [])],
            config=data.get('config'),
            version=data.get('version', 0),
        )
        for match_data in data.get('matches', []):
            bracket.add_match(Match.from_dict(match_data))
        bracket.rounds = [Round.from_dict(r) for r in data.get('rounds', [])]
        bracket.winner_rounds = [Round.from_dict(r) for r in data.get('winner_rounds', [])]
        bracket.loser_rounds = [Round.from_dict(r) for r in data.get('loser_rounds', [])]
        bracket.grand_final_rounds = [Round.from_dict(r) for r in data.get('grand_final_rounds', [])]
        bracket.total_matches = data.get('total_matches', len(bracket.matches))
        bracket.total_rounds = data.get('total_rounds', 0)
        bracket.current_round = data.get('current_round', 0)
        bracket.champion = data.get('champion')
        bracket.warnings = list(data.get('warnings') or [])
        return bracket

    def __repr__(self):
        return (f"Bracket(format={self.format}, players={len(self.players)}, "
                f"matches={len(self.matches)}, version={self.version})")
