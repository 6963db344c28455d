from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path
from threading import Lock
from typing import Callable, List, Optional

from pydantic import ValidationError

from app.schemas import ReadingRecord
from models.errors import StorageUnavailableError
from models.records import SensorReading, StoredReading
from settings import get_settings

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ReadingStore:
    """Append-only reading log with optional JSON persistence.

    Writers are serialized by a single lock; readers copy a snapshot under the
    same lock and filter outside it.
    """

    def __init__(
        self,
        persistence_path: Optional[Path] = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.persistence_path = persistence_path
        self._rows: List[StoredReading] = []
        self._next_id = 1
        self._clock = clock
        self._lock = Lock()
        if persistence_path:
            persistence_path.parent.mkdir(parents=True, exist_ok=True)
            self._load_from_disk()

    def append(self, reading: SensorReading) -> StoredReading:
        with self._lock:
            reading_id = self._next_id
            # ids are never reused, even when the write below fails
            self._next_id += 1
            stored = StoredReading.from_reading(
                reading, reading_id=reading_id, received_at=self._clock()
            )
            self._rows.append(stored)
            try:
                self._persist()
            except OSError as exc:
                self._rows.pop()
                logger.exception(
                    "Failed to persist reading",
                    extra={"device_id": reading.device_id, "path": self.persistence_path},
                )
                raise StorageUnavailableError("Failed to save reading") from exc
        return stored

    def query_range(self, since: datetime, until: datetime) -> List[StoredReading]:
        """Readings with ``since <= timestamp <= until``, newest first."""
        rows = [row for row in self._snapshot() if since <= row.timestamp <= until]
        return _newest_first(rows)

    def query_device(self, device_id: str) -> List[StoredReading]:
        rows = [row for row in self._snapshot() if row.device_id == device_id]
        return _newest_first(rows)

    def query_all(self) -> List[StoredReading]:
        """All readings in insertion order."""
        return self._snapshot()

    def __len__(self) -> int:
        with self._lock:
            return len(self._rows)

    def _snapshot(self) -> List[StoredReading]:
        with self._lock:
            return list(self._rows)

    def _persist(self) -> None:
        if not self.persistence_path:
            return
        payload = [
            ReadingRecord.from_stored(row).model_dump(mode="json", by_alias=True)
            for row in self._rows
        ]
        staging = self.persistence_path.with_name(self.persistence_path.name + ".tmp")
        staging.write_text(json.dumps(payload, indent=2))
        staging.replace(self.persistence_path)

    def _load_from_disk(self) -> None:
        if not self.persistence_path or not self.persistence_path.exists():
            return

        try:
            raw = self.persistence_path.read_text() or "[]"
            data = json.loads(raw)
        except (OSError, json.JSONDecodeError):
            logger.warning(
                "Could not read reading store, starting empty",
                extra={"path": self.persistence_path},
            )
            data = []
        if not isinstance(data, list):
            data = []

        seen: set[int] = set()
        highest_id = 0
        for row_number, payload in enumerate(data, start=1):
            # skipped rows still hold their id
            row_id = payload.get("id") if isinstance(payload, dict) else None
            if isinstance(row_id, int) and not isinstance(row_id, bool):
                highest_id = max(highest_id, row_id)
            try:
                record = ReadingRecord.model_validate(payload)
            except ValidationError as exc:
                logger.warning(
                    "Skipping malformed stored reading",
                    extra={"row_number": row_number, "error_count": exc.error_count()},
                )
                continue
            if record.id in seen:
                continue
            seen.add(record.id)
            self._rows.append(record.to_stored())

        self._rows.sort(key=lambda row: row.id)
        if self._rows:
            highest_id = max(highest_id, self._rows[-1].id)
        self._next_id = highest_id + 1


def _newest_first(rows: List[StoredReading]) -> List[StoredReading]:
    return sorted(rows, key=lambda row: (row.timestamp, row.id), reverse=True)


@lru_cache
def build_default_store(path: Optional[str] = None) -> ReadingStore:
    settings = get_settings()
    store_path = settings.store_path if path is None else path
    persistence = Path(store_path) if store_path else None
    return ReadingStore(persistence_path=persistence)
