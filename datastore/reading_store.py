from __future__ import annotations
import json
import logging
from functools import lru_cache
from pathlib import Path
from threading import Lock
from typing import List, Optional, Tuple

from pydantic import ValidationError

from app.schemas import ReadingIn
from settings import get_settings

logger = logging.getLogger(__name__)


class ReadingStore:
    """Append-only collection of validated readings.

    Readers get an immutable snapshot of the whole collection, so a summary
    never observes a half-applied append.
    """

    def __init__(self, name: str, persistence_path: Optional[Path] = None) -> None:
        self.name = name
        self._readings: List[ReadingIn] = []
        self.persistence_path = persistence_path
        self._lock = Lock()
        if persistence_path:
            persistence_path.parent.mkdir(parents=True, exist_ok=True)
            self._load_from_disk()

    def append(self, reading: ReadingIn) -> None:
        with self._lock:
            self._readings.append(reading.model_copy(deep=True))
            try:
                self._persist()
            except OSError:
                self._readings.pop()
                raise

    def snapshot(self) -> Tuple[ReadingIn, ...]:
        with self._lock:
            return tuple(self._readings)

    def __len__(self) -> int:
        with self._lock:
            return len(self._readings)

    def _persist(self) -> None:
        if not self.persistence_path:
            return
        payload = [item.model_dump(mode="json", by_alias=True) for item in self._readings]
        self.persistence_path.write_text(json.dumps(payload, indent=2))

    def _load_from_disk(self) -> None:
        if not self.persistence_path or not self.persistence_path.exists():
            return

        try:
            raw = self.persistence_path.read_text() or "[]"
            data = json.loads(raw)
        except (OSError, json.JSONDecodeError):
            logger.warning(
                "Discarding unreadable reading store file",
                extra={"store": self.name, "path": str(self.persistence_path)},
            )
            data = []

        if not isinstance(data, list):
            data = []
        for payload in data:
            try:
                self._readings.append(ReadingIn.model_validate(payload))
            except ValidationError:
                logger.warning(
                    "Skipping stored reading that no longer validates",
                    extra={"store": self.name},
                )


@lru_cache
def build_default_store(
    name: Optional[str] = None,
    path: Optional[str] = None,
) -> ReadingStore:
    settings = get_settings()
    store_name = settings.store_name if name is None else name
    store_path = settings.store_persistence_path if path is None else path
    persistence = Path(store_path) if store_path else None
    return ReadingStore(name=store_name, persistence_path=persistence)
