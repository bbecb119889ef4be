"""
In‑process TTL cache.

``TTLCache`` stores arbitrary values under string keys, each with its own
expiry time.  Expired entries are dropped in two ways:

* lazily, when ``get`` finds an entry whose expiry has passed, and
* periodically, by a daemon sweeper thread started with ``start()``
  that wakes every ``check_period`` seconds (20% of the default TTL
  unless configured otherwise).

A single lock guards the entry table, so every public operation is
atomic with respect to the others and to the sweep.  The cache knows
nothing about what it stores.
"""

import logging
import threading
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

from .errors import CacheClosed


logger = logging.getLogger(__name__)

# Fraction of the default TTL used as the sweep period.
CHECK_PERIOD_RATIO = 0.2


class TTLCache:
    """Key/value store with per‑entry expiry and a background sweep.

    Parameters
    ----------
    default_ttl : float
        Lifetime in seconds used by ``set`` when no ``ttl`` is given.
        ``0`` means entries never expire.
    check_period : Optional[float]
        Seconds between two sweeps.  Defaults to
        ``default_ttl * CHECK_PERIOD_RATIO``.
    clock : Callable[[], float]
        Monotonic time source; injectable for tests.
    """

    def __init__(
        self,
        default_ttl: float = 60,
        check_period: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if default_ttl < 0:
            raise ValueError("default_ttl must be >= 0")
        self.default_ttl = default_ttl
        if check_period is None:
            check_period = default_ttl * CHECK_PERIOD_RATIO
        self.check_period = check_period
        self._clock = clock
        # key -> (value, expires_at); expires_at is None for entries without TTL
        self._entries: Dict[str, Tuple[Any, Optional[float]]] = {}
        self._lock = threading.Lock()
        self._closed = False
        self._stop = threading.Event()
        self._sweeper: Optional[threading.Thread] = None
        self._hits = 0
        self._misses = 0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the background sweeper thread.

        Calling ``start`` twice is harmless.  A cache without a positive
        ``check_period`` relies on lazy expiry only.
        """
        if self._closed:
            raise CacheClosed()
        if self._sweeper is not None or self.check_period <= 0:
            return
        self._sweeper = threading.Thread(
            target=self._run_sweeper, name="ttl-cache-sweeper", daemon=True
        )
        self._sweeper.start()
        logger.debug("Cache sweeper started (period %.3fs)", self.check_period)

    def close(self) -> None:
        """Stop the sweeper and drop every entry.  Further ``get``/``set`` fail."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._entries.clear()
        self._stop.set()
        if self._sweeper is not None and self._sweeper is not threading.current_thread():
            self._sweeper.join(timeout=max(self.check_period, 1.0))
        self._sweeper = None
        logger.debug("Cache closed")

    @property
    def closed(self) -> bool:
        return self._closed

    def _run_sweeper(self) -> None:
        while not self._stop.wait(self.check_period):
            evicted = self.sweep()
            if evicted:
                logger.debug("Cache sweep evicted %d entries", evicted)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def _expired(self, expires_at: Optional[float], now: float) -> bool:
        return expires_at is not None and expires_at <= now

    def get(self, key: str) -> Optional[Any]:
        """Return the value stored under ``key`` or ``None``.

        ``None`` is returned both for keys that were never set and for
        expired ones; an expired entry is removed on the spot.
        """
        with self._lock:
            if self._closed:
                raise CacheClosed()
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None
            value, expires_at = entry
            if self._expired(expires_at, self._clock()):
                del self._entries[key]
                self._misses += 1
                return None
            self._hits += 1
            return value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """Store ``value`` under ``key``, replacing any previous entry.

        The expiry is reset to ``now + ttl``; ``ttl`` defaults to
        ``default_ttl`` and ``0`` stores the entry without expiry.
        """
        if ttl is None:
            ttl = self.default_ttl
        if ttl < 0:
            raise ValueError("ttl must be >= 0")
        with self._lock:
            if self._closed:
                raise CacheClosed()
            expires_at = self._clock() + ttl if ttl else None
            self._entries[key] = (value, expires_at)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def delete_prefix(self, prefix: str) -> int:
        """Remove every entry whose key starts with ``prefix``.

        Returns the number of removed entries.
        """
        with self._lock:
            doomed = [k for k in self._entries if k.startswith(prefix)]
            for k in doomed:
                del self._entries[k]
        return len(doomed)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def sweep(self) -> int:
        """Evict every expired entry and return how many were removed."""
        with self._lock:
            now = self._clock()
            expired = [k for k, (_, exp) in self._entries.items() if self._expired(exp, now)]
            for k in expired:
                del self._entries[k]
        return len(expired)

    def keys(self) -> List[str]:
        """Keys of all entries that have not expired yet."""
        with self._lock:
            now = self._clock()
            return [k for k, (_, exp) in self._entries.items() if not self._expired(exp, now)]

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {"hits": self._hits, "misses": self._misses, "keys": len(self._entries)}

    def __contains__(self, key: object) -> bool:
        with self._lock:
            entry = self._entries.get(key)  # type: ignore[arg-type]
            return entry is not None and not self._expired(entry[1], self._clock())

    def __len__(self) -> int:
        """Number of stored entries, including expired ones not yet swept."""
        with self._lock:
            return len(self._entries)
