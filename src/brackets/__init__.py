from .config import TournamentConfig, load_config
from .errors import (
    BracketError, InvalidRosterSize, InvalidConfig, InvalidScore, MatchAlreadyComplete,
    ConcurrentModification, RoundIncomplete, PairingExhausted, ByeOverflow,
    MatchNotFound, MatchNotReady, TournamentComplete, TournamentNotFound,
)
from .models import Bracket, Match, MatchResult, Player, Round, Standing, BYE
from .tournament import (
    generate_bracket, submit_result, start_match, advance_swiss_round, compute_standings,
)
