"""
Single-flight background work: at most one run in progress at a time.
"""

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class SingleFlight:
    """Run a callable in a background thread unless a previous run is still going."""

    def __init__(self, name: str):
        self.name = name
        self._cond = threading.Condition(threading.Lock())
        self._running = False

    @property
    def in_flight(self) -> bool:
        with self._cond:
            return self._running

    def start(self, func: Callable[[], object]) -> bool:
        """
        Start ``func`` in the background.

        Returns:
            False if a run is already in flight (nothing is started)
        """
        with self._cond:
            if self._running:
                logger.debug("%s already in flight", self.name)
                return False
            self._running = True

        def run():
            try:
                func()
            except Exception:
                logger.exception("%s failed", self.name)
            finally:
                self._finish()

        try:
            threading.Thread(target=run, name=self.name, daemon=True).start()
        except RuntimeError:
            self._finish()
            raise
        return True

    def _finish(self):
        with self._cond:
            self._running = False
            self._cond.notify_all()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for the run in flight, if any.

        A run counts from the moment ``start()`` claims it, before its
        thread exists.

        Returns:
            True when nothing is running
        """
        with self._cond:
            return self._cond.wait_for(lambda: not self._running, timeout)
