"""Time-bounded persistence for the scoreboard session.

The adapter writes one JSON envelope under a fixed key. Expiry belongs to
the store: an entry past its deadline is gone as far as ``get`` is
concerned, so the adapter never looks at ``savedAt``.
"""

import json
import logging
import os
import time
from typing import Callable, Dict, Optional, Tuple

from scorekeeper.models import Session
from .errors import PersistenceError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_KEY = 'scoreTrackerData'
DEFAULT_TTL_HOURS = 2


class MemoryStore:
    """In-memory key/value store with per-entry expiry.

    The clock is injectable so tests can move time forward.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self.clock = clock
        self._entries: Dict[str, Tuple[str, float]] = {}

    def get(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self.clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: str, expires_at: float) -> None:
        self._entries[key] = (value, expires_at)

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)


class FileStore:
    """Key/value store kept in a single JSON file on the local device."""

    def __init__(self, path: str, clock: Callable[[], float] = time.time):
        self.path = path
        self.clock = clock

    def _read(self, discard_corrupt: bool = False) -> dict:
        """Load the whole file. With discard_corrupt, unparseable content reads as empty."""
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except OSError as exc:
            raise PersistenceError(f'cannot read {self.path}: {exc}') from exc
        except ValueError as exc:
            if discard_corrupt:
                logger.info(f"[persist-skip] discarding unparseable {self.path}")
                return {}
            raise PersistenceError(f'cannot parse {self.path}: {exc}') from exc
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict) -> None:
        tmp_path = f'{self.path}.tmp'
        try:
            os.makedirs(os.path.dirname(self.path) or '.', exist_ok=True)
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            raise PersistenceError(f'cannot write {self.path}: {exc}') from exc

    def get(self, key: str) -> Optional[str]:
        data = self._read()
        entry = data.get(key)
        if not isinstance(entry, dict):
            return None
        expires_at = entry.get('expires')
        if not isinstance(expires_at, (int, float)) or self.clock() >= expires_at:
            del data[key]
            self._write(data)
            return None
        value = entry.get('value')
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str, expires_at: float) -> None:
        data = self._read(discard_corrupt=True)
        data[key] = {'value': value, 'expires': expires_at}
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read(discard_corrupt=True)
        if key in data:
            del data[key]
            self._write(data)


class PersistenceAdapter:
    """save/load/clear of the session envelope over a key/value store.

    Store failures are logged and swallowed here; callers keep working on
    their in-memory state.
    """

    def __init__(self, store, key: str = DEFAULT_KEY, ttl_hours: float = DEFAULT_TTL_HOURS,
                 clock: Optional[Callable[[], float]] = None):
        self.store = store
        self.key = key
        self.ttl_hours = ttl_hours
        # Expiry deadlines must be on the store's own clock
        self.clock = clock or getattr(store, 'clock', time.time)

    def save(self, session: Session, ttl_hours: Optional[float] = None) -> bool:
        ttl = self.ttl_hours if ttl_hours is None else ttl_hours
        now = self.clock()
        envelope = session.to_dict(saved_at=int(now * 1000))
        try:
            self.store.set(self.key, json.dumps(envelope), now + ttl * 60 * 60)
        except PersistenceError as exc:
            logger.warning(f"[persist-fail] save key={self.key}: {exc}")
            return False
        return True

    def load(self) -> Optional[Session]:
        try:
            raw = self.store.get(self.key)
        except PersistenceError as exc:
            logger.warning(f"[persist-fail] load key={self.key}: {exc}")
            return None
        if raw is None:
            return None
        try:
            return Session.from_dict(json.loads(raw))
        except ValueError:
            logger.info(f"[persist-skip] key={self.key} is not valid JSON")
            return None
        except ValidationError as exc:
            logger.info(f"[persist-skip] key={self.key} rejected: {exc}")
            return None

    def clear(self) -> None:
        try:
            self.store.delete(self.key)
        except PersistenceError as exc:
            logger.warning(f"[persist-fail] clear key={self.key}: {exc}")
