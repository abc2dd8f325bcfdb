"""
Score adjudicators keyed by sport.

Sports without a registered adjudicator fall back to raw score comparison.
"""
from typing import Dict

from .base import ScoreAdjudicator
from .basketball import BasketballAdjudicator
from .football import FootballAdjudicator
from .generic import RawScoreAdjudicator
from .tennis import TennisAdjudicator

_ADJUDICATORS: Dict[str, ScoreAdjudicator] = {
    'tennis': TennisAdjudicator(),
    'football': FootballAdjudicator(),
    'basketball': BasketballAdjudicator(),
}
_FALLBACK = RawScoreAdjudicator()


def register_adjudicator(sport: str, adjudicator: ScoreAdjudicator):
    _ADJUDICATORS[sport] = adjudicator


def get_adjudicator(sport: str) -> ScoreAdjudicator:
    return _ADJUDICATORS.get(sport, _FALLBACK)


def registered_sports():
    return sorted(_ADJUDICATORS)


__all__ = [
    'ScoreAdjudicator', 'RawScoreAdjudicator', 'TennisAdjudicator',
    'FootballAdjudicator', 'BasketballAdjudicator',
    'register_adjudicator', 'get_adjudicator', 'registered_sports',
]
