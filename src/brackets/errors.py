"""Exceptions raised by the bracket engine.

Every error carries a stable ``kind`` string so callers (the HTTP layer, the
CLI) can report it without matching on class names.
"""


class BracketError(Exception):
    """Base exception for all bracket engine errors."""

    kind = 'BracketError'

    def __init__(self, message: str = ''):
        super().__init__(message or self.kind)
        self.message = message or self.kind

    def to_dict(self) -> dict:
        return {'error': self.kind, 'message': self.message}


# ========== Generation errors ==========


class InvalidRosterSize(BracketError):
    """Raised when a roster is too small for the requested format."""

    kind = 'InvalidRosterSize'


class InvalidConfig(BracketError):
    """Raised when the format or its configuration is unusable."""

    kind = 'InvalidConfig'


class ByeOverflow(BracketError):
    """Raised when a draw would need more byes than half its slots."""

    kind = 'ByeOverflow'


# ========== Result errors ==========


class InvalidScore(BracketError):
    """Raised when score events do not describe a legal, decided match."""

    kind = 'InvalidScore'


class MatchNotFound(BracketError):
    kind = 'MatchNotFound'


class MatchNotReady(BracketError):
    """Raised when a match still waits for a participant or is not live."""

    kind = 'MatchNotReady'


class MatchAlreadyComplete(BracketError):
    kind = 'MatchAlreadyComplete'


class ConcurrentModification(BracketError):
    """Raised when the caller's bracket version is stale."""

    kind = 'ConcurrentModification'


# ========== Round errors ==========


class RoundIncomplete(BracketError):
    """Raised when a Swiss round is advanced before all its matches finish."""

    kind = 'RoundIncomplete'


class TournamentComplete(BracketError):
    """Raised when no further Swiss round can be paired."""

    kind = 'TournamentComplete'


class PairingExhausted(BracketError):
    """Raised by the pairing search when no rematch-free pairing exists."""

    kind = 'PairingExhausted'


# ========== Storage errors ==========


class TournamentNotFound(BracketError):
    kind = 'TournamentNotFound'
