"""
In-memory airport coordinate cache.

Airport coordinates never change during the life of the process, so
entries are populated lazily on first lookup and kept until exit.
Lookups that find nothing are not cached; a later request retries.

The cache is owned by the FlightResolver it is handed to rather than
living at module level, so tests get an isolated instance.
"""

import logging
import threading
from typing import Callable, Dict, Optional

from runway.ingestion.airport_db import AirportInfo

logger = logging.getLogger(__name__)


class AirportCache:
    """
    Thread-safe IATA code -> AirportInfo cache.

    Check-then-insert is done under the lock; the loader itself runs
    outside it so a slow lookup never blocks readers of other codes.
    """

    def __init__(self):
        self._cache: Dict[str, AirportInfo] = {}
        self._lock = threading.RLock()

        # Statistics
        self._hits = 0
        self._misses = 0

    def get(self, iata: str) -> Optional[AirportInfo]:
        """Cached airport for an IATA code, or None."""
        with self._lock:
            entry = self._cache.get(iata.upper())
            if entry is not None:
                self._hits += 1
            else:
                self._misses += 1
            return entry

    def get_or_load(
        self,
        iata: Optional[str],
        loader: Callable[[str], Optional[AirportInfo]],
    ) -> Optional[AirportInfo]:
        """
        Return the cached airport, loading and caching it on a miss.

        Concurrent misses for the same code may both call the loader;
        the first result stored wins and both callers see it.
        """
        if not iata:
            return None
        iata = iata.upper()

        cached = self.get(iata)
        if cached is not None:
            return cached

        info = loader(iata)
        if info is None:
            logger.debug(f'No airport data for {iata}')
            return None

        with self._lock:
            return self._cache.setdefault(iata, info)

    def clear(self) -> None:
        """Clear entire cache."""
        with self._lock:
            self._cache.clear()

    @property
    def stats(self) -> dict:
        """Get cache statistics."""
        with self._lock:
            return {
                'entries': len(self._cache),
                'hits': self._hits,
                'misses': self._misses,
                'hit_rate': self._hits / (self._hits + self._misses) if (self._hits + self._misses) > 0 else 0,
            }
