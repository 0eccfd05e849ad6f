"""
Key-Value Store
===============

Storage for the printer cache. Values are strings (JSON) with a time to live.
"""

import json
import logging
import os
import re
import threading
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Dict, Optional, Tuple

from .config import ServiceConfig

logger = logging.getLogger(__name__)


class CacheStore(ABC):
    """Minimal key-value contract used by the printer cache."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the value, or None when absent or expired."""
        pass

    @abstractmethod
    def set(self, key: str, value: str, ttl: Optional[float] = None):
        """Store a value. ``ttl`` is in seconds; None keeps it forever."""
        pass

    @abstractmethod
    def delete(self, key: str):
        pass


class MemoryStore(CacheStore):
    """Process-local store."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._data: Dict[str, Tuple[str, Optional[float]]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            item = self._data.get(key)
            if item is None:
                return None
            value, expires_at = item
            if expires_at is not None and self._clock() >= expires_at:
                del self._data[key]
                return None
            return value

    def set(self, key: str, value: str, ttl: Optional[float] = None):
        expires_at = self._clock() + ttl if ttl is not None else None
        with self._lock:
            self._data[key] = (value, expires_at)

    def delete(self, key: str):
        with self._lock:
            self._data.pop(key, None)


class FileStore(CacheStore):
    """
    One JSON file per key under ``data_dir``.

    Survives restarts, so a restarted service can serve the last printer list
    while it refreshes.
    """

    def __init__(self, data_dir: str, clock: Callable[[], float] = time.time):
        self._data_dir = Path(data_dir)
        self._clock = clock
        self._lock = threading.Lock()

    def _path(self, key: str) -> Path:
        self._data_dir.mkdir(parents=True, exist_ok=True)
        safe = re.sub(r'[^A-Za-z0-9_.-]', '_', key)
        return self._data_dir / f'{safe}.json'

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        with self._lock:
            if not path.exists():
                return None
            try:
                with open(path, 'r') as f:
                    item = json.load(f)
            except (OSError, ValueError) as e:
                logger.warning("Failed to read cache file %s: %s", path, e)
                return None

            expires_at = item.get('expiresAt')
            if expires_at is not None and self._clock() >= expires_at:
                path.unlink(missing_ok=True)
                return None
            return item.get('value')

    def set(self, key: str, value: str, ttl: Optional[float] = None):
        path = self._path(key)
        item = {
            'value': value,
            'expiresAt': self._clock() + ttl if ttl is not None else None,
        }
        tmp_path = path.with_suffix('.tmp')
        with self._lock:
            with open(tmp_path, 'w') as f:
                json.dump(item, f)
            os.replace(tmp_path, path)

    def delete(self, key: str):
        with self._lock:
            self._path(key).unlink(missing_ok=True)


def build_store(config: ServiceConfig) -> CacheStore:
    if config.cache_backend == 'file':
        return FileStore(config.data_dir)
    if config.cache_backend == 'memory':
        return MemoryStore()
    raise ValueError(f'Unknown cache backend {config.cache_backend!r}. Valid: memory, file')
