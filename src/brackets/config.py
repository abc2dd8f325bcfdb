"""
Tournament configuration.

A config can come from a plain dict (the HTTP API) or a YAML file (the CLI).
Format-specific requirements, such as the Swiss round count, are checked by
the builders, everything else is checked here.
"""
import copy
import logging
from typing import Dict, Any, Optional

import yaml

from .errors import InvalidConfig
from .scoring.tennis import TennisConfig

logger = logging.getLogger(__name__)

SEEDING_MODES = ('seeded', 'random', 'by-rating')

DEFAULT_POINTS = {'win': 1, 'draw': 0.5, 'loss': 0}


class TournamentConfig:
    FIELDS = ('seeding', 'rng_seed', 'draw_size', 'rounds', 'legs', 'points',
              'sport', 'tennis', 'auto_advance')

    def __init__(self, seeding='seeded', rng_seed=None, draw_size=None, rounds=None, legs=1,
                 points=None, sport='generic', tennis=None, auto_advance=False):
        self.seeding = seeding
        self.rng_seed = rng_seed
        self.draw_size = draw_size
        self.rounds = rounds
        self.legs = legs
        self.points = dict(DEFAULT_POINTS)
        if points:
            self.points.update(points)
        self.sport = sport
        self.tennis = dict(tennis) if tennis else {}
        self.auto_advance = auto_advance
        self.validate()

    def validate(self):
        if self.seeding not in SEEDING_MODES:
            raise InvalidConfig(f"Unknown seeding mode '{self.seeding}', expected one of {', '.join(SEEDING_MODES)}")
        if self.rng_seed is not None and not isinstance(self.rng_seed, (int, str)):
            raise InvalidConfig("rng_seed must be an integer or a string")
        for name in ('draw_size', 'rounds'):
            value = getattr(self, name)
            if value is not None and (not isinstance(value, int) or isinstance(value, bool) or value < 1):
                raise InvalidConfig(f"{name} must be a positive integer")
        if self.legs not in (1, 2):
            raise InvalidConfig("legs must be 1 or 2")
        unknown = set(self.points) - set(DEFAULT_POINTS)
        if unknown:
            raise InvalidConfig(f"Unknown points keys: {', '.join(sorted(unknown))}")
        for key, value in self.points.items():
            if not isinstance(value, (int, float)) or isinstance(value, bool) or value < 0:
                raise InvalidConfig(f"points.{key} must be a non-negative number")
        if not (self.points['win'] >= self.points['draw'] >= self.points['loss']):
            raise InvalidConfig("points must satisfy win >= draw >= loss")
        if self.points['win'] == self.points['loss']:
            raise InvalidConfig("a win must be worth more than a loss")
        if not isinstance(self.sport, str) or not self.sport:
            raise InvalidConfig("sport must be a non-empty string")
        if not isinstance(self.auto_advance, bool):
            raise InvalidConfig("auto_advance must be true or false")
        TennisConfig.from_dict(self.tennis)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'TournamentConfig':
        if data is None:
            return cls()
        if isinstance(data, TournamentConfig):
            return data
        if not isinstance(data, dict):
            raise InvalidConfig("Configuration must be a mapping")
        unknown = set(data) - set(cls.FIELDS)
        if unknown:
            raise InvalidConfig(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        points = data.get('points')
        if points is not None and not isinstance(points, dict):
            raise InvalidConfig("points must be a mapping of win/draw/loss")
        tennis = data.get('tennis')
        if tennis is not None and not isinstance(tennis, dict):
            raise InvalidConfig("tennis must be a mapping")
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'seeding': self.seeding,
            'rng_seed': self.rng_seed,
            'draw_size': self.draw_size,
            'rounds': self.rounds,
            'legs': self.legs,
            'points': dict(self.points),
            'sport': self.sport,
            'tennis': copy.deepcopy(self.tennis),
            'auto_advance': self.auto_advance,
        }

    def __repr__(self):
        return f"TournamentConfig({self.to_dict()})"


def load_config(file_path: str) -> TournamentConfig:
    """Load a tournament config from a YAML file (an empty file gives the defaults)."""
    with open(file_path, 'r', encoding='utf-8') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise InvalidConfig(f"Could not parse {file_path}: {e}") from e
    logger.debug("Loaded config from %s", file_path)
    return TournamentConfig.from_dict(data or {})
