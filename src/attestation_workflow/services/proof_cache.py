"""In-memory TTL cache for retrieved proofs.

Proofs are immutable facts about finalized rounds, so a fingerprint maps to
the same record for as long as its entry lives. Expiry is checked lazily on
read; nothing runs in the background.
"""

import threading

from attestation_workflow.entities import CacheEntry, Fingerprint, ProofRecord
from attestation_workflow.errors import ConfigurationError
from attestation_workflow.utils.clock import Clock, SystemClock


class ProofCache:
    """TTL-based Fingerprint -> ProofRecord store.

    Satisfies the ProofStore protocol. A lock guards the entry map, so
    concurrent workflows (tasks or threads) never observe a torn entry or
    lose an update. No size bound is enforced.

    Example:
        ```python
        cache = ProofCache(ttl=3600)
        cache.set(Fingerprint("0xdead", 5), record)
        cache.get(Fingerprint("0xdead", 5))  # record, until an hour passes
        ```
    """

    def __init__(self, ttl: float, clock: Clock | None = None) -> None:
        """Initialize the cache.

        Args:
            ttl: Seconds an entry stays valid after insertion.
            clock: Time source. Defaults to SystemClock.
        """
        if ttl <= 0:
            raise ConfigurationError(f"cache ttl must be positive, got {ttl}")
        self._ttl = ttl
        self._clock = clock or SystemClock()
        self._entries: dict[Fingerprint, CacheEntry] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    @property
    def ttl(self) -> float:
        return self._ttl

    def get(self, fingerprint: Fingerprint) -> ProofRecord | None:
        """Return the cached proof, evicting it if it has expired."""
        with self._lock:
            entry = self._entries.get(fingerprint)
            if entry is None:
                self._misses += 1
                return None

            if entry.is_expired(self._clock.now(), self._ttl):
                del self._entries[fingerprint]
                self._misses += 1
                return None

            self._hits += 1
            return entry.record

    def set(self, fingerprint: Fingerprint, record: ProofRecord) -> None:
        """Store ``record`` under ``fingerprint``, resetting its age."""
        entry = CacheEntry(record=record, inserted_at=self._clock.now())
        with self._lock:
            self._entries[fingerprint] = entry

    def clear(self) -> None:
        """Drop every entry."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        # Counts entries that may already be expired but not yet read.
        with self._lock:
            return len(self._entries)

    def stats(self) -> dict:
        """Get cache statistics.

        Returns:
            Dictionary with entry count, hit/miss counters and ttl
        """
        with self._lock:
            return {
                "total_entries": len(self._entries),
                "hits": self._hits,
                "misses": self._misses,
                "ttl": self._ttl,
            }
