"""Persistent day-keyed cache of daily weather records.

The cache maps calendar-day keys (``YYYY-MM-DD``) to the raw daily record
seen for that day. Only the most recent days are kept; see ``compact``.
"""

import copy
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_KEEP = 2

CacheState = dict[str, dict[str, Any]]


class PersistenceError(Exception):
    """Raised when the cache cannot be written."""


def compact(state: CacheState, keep: int = DEFAULT_KEEP) -> CacheState:
    """Return a new mapping holding only the ``keep`` greatest keys.

    Keys are compared as strings, which for ``YYYY-MM-DD`` is date order.
    """
    if keep < 1:
        raise ValueError(f"keep must be at least 1, got {keep}")
    if len(state) <= keep:
        return dict(state)
    retained = sorted(state)[-keep:]
    return {key: state[key] for key in retained}


class DailyCacheStore:
    """Interface for cache backends: ``load`` never fails, ``save`` replaces."""

    keep: int = DEFAULT_KEEP

    def load(self) -> CacheState:
        raise NotImplementedError

    def save(self, state: CacheState) -> None:
        raise NotImplementedError

    def compact(self, state: CacheState, keep: int | None = None) -> CacheState:
        return compact(state, self.keep if keep is None else keep)


class JsonFileCacheStore(DailyCacheStore):
    """Cache stored as a single pretty-printed JSON object on disk."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> CacheState:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("Cache file %s not found, starting empty", self.path)
            return {}
        except OSError as e:
            logger.debug("Cache file %s unreadable, starting empty: %s", self.path, e)
            return {}
        except UnicodeDecodeError as e:
            logger.debug("Cache file %s is not valid UTF-8, starting empty: %s", self.path, e)
            return {}

        if not raw.strip():
            logger.debug("Cache file %s is empty", self.path)
            return {}
        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.debug("Cache file %s is not valid JSON, starting empty: %s", self.path, e)
            return {}
        return _coerce_state(data, str(self.path))

    def save(self, state: CacheState) -> None:
        """Write the whole mapping atomically (temp file + rename)."""
        payload = json.dumps(state, indent=2, ensure_ascii=False)
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistenceError(f"Cannot write cache file {self.path}: {e}") from e

    def clear(self) -> None:
        self.save({})


class InMemoryCacheStore(DailyCacheStore):
    """Process-local store, used by tests and offline reshaping."""

    def __init__(self, initial: CacheState | None = None):
        self._state: CacheState = copy.deepcopy(initial) if initial else {}
        self.save_count = 0

    def load(self) -> CacheState:
        return copy.deepcopy(self._state)

    def save(self, state: CacheState) -> None:
        self._state = copy.deepcopy(state)
        self.save_count += 1

    def clear(self) -> None:
        self.save({})

    @property
    def state(self) -> CacheState:
        return copy.deepcopy(self._state)


def _coerce_state(data: Any, source: str) -> CacheState:
    if not isinstance(data, dict):
        logger.debug("Cache %s holds %s, not an object; starting empty", source, type(data).__name__)
        return {}
    state: CacheState = {}
    for key, value in data.items():
        if isinstance(value, dict):
            state[key] = value
        else:
            logger.debug("Dropping malformed cache entry %r from %s", key, source)
    return state
