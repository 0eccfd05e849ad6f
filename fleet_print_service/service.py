"""
Printer Cache & Dispatch
========================

Maps volatile printer names to stable ids and keeps the printer list in the
store. Reads never wait for a refresh once the cache is populated: stale data
is returned immediately and refreshed in the background.
"""

import hashlib
import logging
import threading
import time
import uuid
from datetime import datetime
from typing import Callable, List, Optional

from .adapters import BaseAdapter
from .config import ServiceConfig
from .errors import PrinterNotFoundError, ValidationError
from .models import CacheEntry, CachedPrinter, TransferResult, utc_now
from .models.printer import as_utc
from .singleflight import SingleFlight
from .store import CacheStore

logger = logging.getLogger(__name__)


def generate_printer_id(printer_name: str) -> str:
    """Deterministic id for a printer name, ignoring case and surrounding whitespace."""
    return hashlib.sha256(printer_name.lower().strip().encode('utf-8')).hexdigest()[:16]


class PrintersService:
    """Printer list cache with stale-while-revalidate reads."""

    def __init__(self, adapter: BaseAdapter, store: CacheStore, config: Optional[ServiceConfig] = None,
                 clock: Callable[[], datetime] = utc_now):
        self.adapter = adapter
        self.store = store
        self.config = config or ServiceConfig.from_env()
        self._clock = clock
        self._refresh = SingleFlight('printer-cache-refresh')
        self._write_lock = threading.Lock()
        self._last_written: Optional[datetime] = None

    # =========================================================================
    # Store access
    # =========================================================================

    def _read_entry(self) -> Optional[CacheEntry]:
        raw = self.store.get(self.config.cache_key)
        if raw is None:
            return None
        try:
            return CacheEntry.from_json(raw)
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("Discarding unreadable cache entry: %s", e)
            return None

    def _is_stale(self, entry: CacheEntry) -> bool:
        return entry.age_seconds(self._clock()) > self.config.stale_seconds

    def refresh_cache(self) -> CacheEntry:
        """
        Fetch the printer list from the adapter and store it.

        Raises:
            TransportError: discovery failed; the stored entry is left as is
        """
        printers = self.adapter.list_printers()
        now = as_utc(self._clock())

        with self._write_lock:
            # lastUpdated never goes backwards for writes from this process
            if self._last_written is not None and now < self._last_written:
                now = self._last_written

            entry = CacheEntry(
                printers=[
                    CachedPrinter(id=generate_printer_id(p.name), name=p.name, uri=p.uri, cached_at=now)
                    for p in printers
                ],
                last_updated=now,
            )
            self.store.set(self.config.cache_key, entry.to_json(), ttl=self.config.storage_ttl)
            self._last_written = now

        logger.info("Printer cache refreshed: %d printer(s)", len(entry.printers))
        return entry

    def trigger_refresh(self) -> bool:
        """Start a background refresh unless one is already running."""
        started = self._refresh.start(self.refresh_cache)
        if started:
            logger.debug("Background printer cache refresh started")
        return started

    def wait_for_refresh(self, timeout: Optional[float] = None) -> bool:
        return self._refresh.wait(timeout)

    def _current_entry(self) -> CacheEntry:
        """The stored entry, fetched synchronously only when the store is empty."""
        entry = self._read_entry()
        if entry is None:
            return self.refresh_cache()

        if self._is_stale(entry):
            self.trigger_refresh()
        return entry

    # =========================================================================
    # Public API
    # =========================================================================

    def list(self, force_refresh: bool = False) -> List[CachedPrinter]:
        """
        List printers.

        Args:
            force_refresh: Fetch from the adapter and wait for the result

        Returns:
            Cached printers, possibly stale
        """
        if force_refresh:
            return self.refresh_cache().printers
        return self._current_entry().printers

    def get_printer_by_id(self, printer_id: str) -> Optional[CachedPrinter]:
        """Find a printer in the current cache entry."""
        return self._current_entry().find(printer_id)

    def require_printer(self, printer_id: str) -> CachedPrinter:
        printer = self.get_printer_by_id(printer_id)
        if printer is None:
            raise PrinterNotFoundError(printer_id)
        return printer

    def print(self, printer_id: str, file_base64: str) -> TransferResult:
        """
        Send a document to a cached printer.

        A stale entry is used as is. An id missing from the entry is not
        found, even if a refresh is in flight.

        Raises:
            ValidationError: printerId or fileBase64 missing
            PrinterNotFoundError: id not in the cache
        """
        if not printer_id or not file_base64:
            raise ValidationError('printerId and fileBase64 are required')
        if not isinstance(printer_id, str) or not isinstance(file_base64, str):
            raise ValidationError('printerId and fileBase64 must be strings')

        printer = self.require_printer(printer_id)

        if self.config.simulate_print:
            time.sleep(self.config.simulate_delay)
            job_id = f'sim-{uuid.uuid4().hex[:12]}'
            logger.info("[SIMULATE] %s -> %s", job_id, printer.name)
            return TransferResult(job_id=job_id)

        return self.adapter.print_transfer(printer.name, file_base64)

    def clear_cache(self):
        """Drop the cached list; the next read fetches synchronously."""
        self.store.delete(self.config.cache_key)
        logger.info("Printer cache cleared")

    def cache_info(self) -> dict:
        entry = self._read_entry()
        if entry is None:
            return {'count': 0, 'lastUpdated': None, 'ageSeconds': None, 'stale': None,
                    'refreshing': self._refresh.in_flight}

        return {
            'count': len(entry.printers),
            'lastUpdated': entry.last_updated.isoformat(),
            'ageSeconds': round(entry.age_seconds(self._clock()), 1),
            'stale': self._is_stale(entry),
            'refreshing': self._refresh.in_flight,
        }
