"""
Shared fakes for the workflow engine tests.

FakeClock advances instantly on sleep, so polling and retry loops run in
microseconds while still observing the delays they asked for. The scripted
collaborators replay a list of outcomes (values or exceptions); the last
outcome repeats once the script runs out.
"""

import asyncio
from typing import Any

import pytest

from attestation_workflow.entities import (
    PreparedRequest,
    ProofRecord,
    SubmissionReceipt,
    build_request_params,
)


class FakeClock:
    """Deterministic clock; sleeping just moves time forward."""

    def __init__(self, start: float = 1_000.0) -> None:
        self._now = start
        self.sleeps: list[float] = []

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> None:
        self._now += seconds

    async def sleep(self, seconds: float, cancel=None) -> None:
        if cancel is not None:
            cancel.raise_if_cancelled()
        self.sleeps.append(seconds)
        self._now += seconds
        await asyncio.sleep(0)
        if cancel is not None:
            cancel.raise_if_cancelled()


def _replay(script: list[Any], index: int) -> Any:
    outcome = script[min(index, len(script) - 1)]
    if isinstance(outcome, BaseException):
        raise outcome
    return outcome


class ScriptedPreparer:
    def __init__(self, *outcomes: Any) -> None:
        self._script = list(outcomes) or [PreparedRequest("VALID", "0xdead")]
        self.calls: list[tuple] = []

    async def prepare(self, params, attestation_type, source_id) -> PreparedRequest:
        self.calls.append((params, attestation_type, source_id))
        return _replay(self._script, len(self.calls) - 1)


class ScriptedLedger:
    def __init__(self, *outcomes: Any) -> None:
        self._script = list(outcomes) or [
            SubmissionReceipt(round_id=5, block_number=123, block_timestamp=1_700_000_000)
        ]
        self.calls: list[str] = []

    async def submit(self, encoded_request: str) -> SubmissionReceipt:
        self.calls.append(encoded_request)
        return _replay(self._script, len(self.calls) - 1)


class ScriptedOracle:
    def __init__(self, *outcomes: Any) -> None:
        self._script = list(outcomes) or [True]
        self.calls: list[tuple[int, int]] = []

    async def is_finalized(self, protocol_id: int, round_id: int) -> bool:
        self.calls.append((protocol_id, round_id))
        return _replay(self._script, len(self.calls) - 1)


class ScriptedProofService:
    def __init__(self, *outcomes: Any) -> None:
        self._script = list(outcomes) or [None]
        self.calls: list[tuple[int, str]] = []

    async def fetch_proof(self, round_id: int, encoded_request: str) -> ProofRecord | None:
        self.calls.append((round_id, encoded_request))
        return _replay(self._script, len(self.calls) - 1)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def proof() -> ProofRecord:
    return ProofRecord(response_bytes="0xbeef", attestation_kind="X", proof_path=())


@pytest.fixture
def params():
    return build_request_params(
        url="https://swapi.info/api/people/3",
        post_process_filter="{name: .name}",
        response_signature='{"components": [], "name": "task", "type": "tuple"}',
    )


@pytest.fixture
def fakes():
    """Namespace of fake collaborator classes."""

    class Fakes:
        Preparer = ScriptedPreparer
        Ledger = ScriptedLedger
        Oracle = ScriptedOracle
        ProofService = ScriptedProofService

    return Fakes
