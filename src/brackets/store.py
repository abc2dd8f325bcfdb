"""
YAML file store for brackets, one file per tournament.

Updates run under a per-tournament file lock so two writers cannot both
load version N and save version N + 1.
"""
import logging
import os
import re
from typing import Callable, List

import yaml
from filelock import FileLock

from .errors import ConcurrentModification, TournamentNotFound
from .models import Bracket

logger = logging.getLogger(__name__)

LOCK_TIMEOUT = 10


def slugify(name: str) -> str:
    """Convert tournament name to filesystem-safe slug."""
    slug = name.lower().strip()
    slug = re.sub(r'[^a-z0-9\s-]', '', slug)
    slug = re.sub(r'[\s-]+', '-', slug)
    slug = slug.strip('-')
    return slug or 'tournament'


class BracketStore:
    def __init__(self, data_dir: str):
        self.data_dir = data_dir

    def _path(self, tournament_id: str) -> str:
        if slugify(tournament_id) != tournament_id:
            raise TournamentNotFound(f"No tournament '{tournament_id}'")
        return os.path.join(self.data_dir, f'{tournament_id}.yaml')

    def _lock(self, tournament_id: str) -> FileLock:
        os.makedirs(self.data_dir, exist_ok=True)
        return FileLock(self._path(tournament_id) + '.lock', timeout=LOCK_TIMEOUT)

    def _read(self, tournament_id: str) -> Bracket:
        path = self._path(tournament_id)
        if not os.path.exists(path):
            raise TournamentNotFound(f"No tournament '{tournament_id}'")
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
        return Bracket.from_dict(data)

    def _write(self, tournament_id: str, bracket: Bracket):
        with open(self._path(tournament_id), 'w', encoding='utf-8') as f:
            yaml.dump(bracket.to_dict(), f, default_flow_style=False, sort_keys=False)

    def list_ids(self) -> List[str]:
        if not os.path.isdir(self.data_dir):
            return []
        return sorted(name[:-len('.yaml')] for name in os.listdir(self.data_dir)
                      if name.endswith('.yaml'))

    def create(self, bracket: Bracket, name: str = 'tournament') -> str:
        """Save a new bracket under a fresh id derived from its name."""
        os.makedirs(self.data_dir, exist_ok=True)
        base = slugify(name)
        suffix = 1
        while True:
            tournament_id = base if suffix == 1 else f'{base}-{suffix}'
            # Existence is only decided while holding the id's lock
            with self._lock(tournament_id):
                if not os.path.exists(self._path(tournament_id)):
                    self._write(tournament_id, bracket)
                    break
            suffix += 1
        logger.info("Created tournament %s (%s)", tournament_id, bracket.format)
        return tournament_id

    def load(self, tournament_id: str) -> Bracket:
        with self._lock(tournament_id):
            return self._read(tournament_id)

    def save(self, tournament_id: str, bracket: Bracket, expected_version: int = None):
        """Overwrite a stored bracket, refusing if the stored version moved on."""
        with self._lock(tournament_id):
            if expected_version is not None:
                stored = self._read(tournament_id)
                if stored.version != expected_version:
                    raise ConcurrentModification(
                        f"Tournament {tournament_id} is at version {stored.version}, "
                        f"caller expected {expected_version}")
            self._write(tournament_id, bracket)

    def update(self, tournament_id: str, change: Callable[[Bracket], Bracket]) -> Bracket:
        """Load, change and save a bracket while holding its lock."""
        with self._lock(tournament_id):
            bracket = self._read(tournament_id)
            updated = change(bracket)
            if updated.version != bracket.version:
                self._write(tournament_id, updated)
            return updated
