"""Snapshot persistence: one JSON file per run, named after its capture timestamp.

flight_2026-01-27.json           daily run
flight_2026-01-28T14-30-45.json  intraday run (time separators are hyphens)
"""
import json
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, timezone
from pathlib import Path

import dacite
from tqdm import tqdm

from .errors import SeatWatchError, StoreReadError
from .models import Snapshot, snapshot_from_dict, snapshot_to_dict

FILE_PREFIX = 'flight_'
FILE_SUFFIX = '.json'


def snapshot_key(timestamp: date | datetime, intraday: bool = False) -> str:
    if intraday:
        if not isinstance(timestamp, datetime):
            timestamp = datetime.combine(timestamp, datetime.min.time())
        return timestamp.strftime('%Y-%m-%dT%H-%M-%S')
    if isinstance(timestamp, datetime):
        timestamp = timestamp.date()
    return timestamp.strftime('%Y-%m-%d')


class SnapshotStore:
    def __init__(self, directory: Path | str, max_workers: int = 8):
        self.directory = Path(directory)
        self.max_workers = max_workers

    def path_for(self, key: str) -> Path:
        return self.directory / f'{FILE_PREFIX}{key}{FILE_SUFFIX}'

    def put(self, snapshot: Snapshot, timestamp: date | datetime | None = None, intraday: bool = False) -> Path:
        """Write `snapshot` under the key derived from `timestamp`, replacing a record with the same key."""
        timestamp = timestamp or snapshot.captured_at or datetime.now(timezone.utc)
        path = self.path_for(snapshot_key(timestamp, intraday))
        self.directory.mkdir(parents=True, exist_ok=True)
        with open(path, 'wt', encoding='utf-8') as f:
            json.dump(snapshot_to_dict(snapshot), f, indent=2, ensure_ascii=False)
        logging.info(f"Snapshot written to {path}")
        return path

    def keys(self) -> list[str]:
        if not self.directory.exists():
            return []
        return [p.name[len(FILE_PREFIX):-len(FILE_SUFFIX)] for p in self.directory.glob(f'{FILE_PREFIX}*{FILE_SUFFIX}')]

    def load(self, key: str) -> Snapshot:
        path = self.path_for(key)
        try:
            with open(path, 'rt', encoding='utf-8') as f:
                data = json.load(f)
            return snapshot_from_dict(data)
        except (OSError, ValueError, KeyError, TypeError, dacite.DaciteError, SeatWatchError) as e:
            raise StoreReadError(f"Failed to load {path}: {e}") from e

    def _load_or_none(self, key: str) -> tuple[str, Snapshot] | None:
        try:
            return key, self.load(key)
        except StoreReadError as e:
            logging.warning(f"Skipping snapshot {key}: {e}")
            return None

    def list_all(self) -> list[tuple[str, Snapshot]]:
        """Every readable record with its key; unreadable records are skipped. Order is unspecified."""
        keys = self.keys()
        if not keys:
            return []
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            loaded = list(tqdm(executor.map(self._load_or_none, keys), total=len(keys),
                               desc='Loading snapshots', leave=False))
        return [item for item in loaded if item is not None]
