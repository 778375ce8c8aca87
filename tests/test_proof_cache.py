"""
Tests for ProofCache: TTL expiry, lazy eviction and concurrent access.
"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from attestation_workflow.entities import Fingerprint, ProofRecord
from attestation_workflow.errors import ConfigurationError
from attestation_workflow.protocols import ProofStore
from attestation_workflow.services import ProofCache


@pytest.fixture
def cache(clock) -> ProofCache:
    return ProofCache(ttl=60.0, clock=clock)


def test_satisfies_proof_store_protocol(cache) -> None:
    assert isinstance(cache, ProofStore)


def test_set_then_get_returns_record(cache, proof) -> None:
    fingerprint = Fingerprint("0xdead", 5)
    cache.set(fingerprint, proof)

    assert cache.get(fingerprint) == proof


def test_get_unknown_fingerprint(cache, proof) -> None:
    cache.set(Fingerprint("0xdead", 5), proof)

    assert cache.get(Fingerprint("0xdead", 6)) is None
    assert cache.get(Fingerprint("0xbeef", 5)) is None


def test_entry_alive_at_exact_ttl(cache, clock, proof) -> None:
    fingerprint = Fingerprint("0xdead", 5)
    cache.set(fingerprint, proof)

    clock.advance(60.0)

    assert cache.get(fingerprint) == proof


def test_expired_entry_is_evicted_and_not_resurrected(cache, clock, proof) -> None:
    fingerprint = Fingerprint("0xdead", 5)
    cache.set(fingerprint, proof)

    clock.advance(60.5)

    assert cache.get(fingerprint) is None
    assert len(cache) == 0
    assert cache.get(fingerprint) is None


def test_set_resets_age(cache, clock, proof) -> None:
    fingerprint = Fingerprint("0xdead", 5)
    cache.set(fingerprint, proof)
    clock.advance(50.0)
    cache.set(fingerprint, proof)
    clock.advance(50.0)

    assert cache.get(fingerprint) == proof


def test_clear(cache, proof) -> None:
    cache.set(Fingerprint("0xdead", 5), proof)
    cache.set(Fingerprint("0xdead", 6), proof)

    cache.clear()

    assert len(cache) == 0
    assert cache.get(Fingerprint("0xdead", 5)) is None


def test_stats_count_hits_and_misses(cache, proof) -> None:
    fingerprint = Fingerprint("0xdead", 5)
    cache.get(fingerprint)
    cache.set(fingerprint, proof)
    cache.get(fingerprint)
    cache.get(fingerprint)

    stats = cache.stats()
    assert stats["total_entries"] == 1
    assert stats["hits"] == 2
    assert stats["misses"] == 1
    assert stats["ttl"] == 60.0


def test_fingerprint_key() -> None:
    assert Fingerprint("0xdead", 5).key == "0xdead:5"


def test_non_positive_ttl_rejected() -> None:
    with pytest.raises(ConfigurationError):
        ProofCache(ttl=0)


def test_concurrent_threads_do_not_lose_entries() -> None:
    cache = ProofCache(ttl=3600.0)
    records = {
        Fingerprint(f"0x{i:04x}", i % 7): ProofRecord(f"0x{i:04x}", "Web2Json", (f"0x{i:02x}",))
        for i in range(400)
    }

    def worker(item: tuple[Fingerprint, ProofRecord]) -> ProofRecord | None:
        fingerprint, record = item
        cache.set(fingerprint, record)
        return cache.get(fingerprint)

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(worker, records.items()))

    assert results == list(records.values())
    assert len(cache) == len(records)
    for fingerprint, record in records.items():
        assert cache.get(fingerprint) == record
