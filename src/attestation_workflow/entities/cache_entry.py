"""Cache entry domain entity."""

from dataclasses import dataclass

from .proof_record import ProofRecord


@dataclass(frozen=True)
class CacheEntry:
    """A proof held by ProofCache.

    Attributes:
        record: The cached proof
        inserted_at: Clock reading (seconds) when the entry was stored
    """

    record: ProofRecord
    inserted_at: float

    def is_expired(self, now: float, ttl: float) -> bool:
        return now - self.inserted_at > ttl
