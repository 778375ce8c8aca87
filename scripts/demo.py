#!/usr/bin/env python3
"""
Demo script for the attestation workflow.

Runs a complete workflow offline: the verifier and DA layer are served by
httpx.MockTransport, and the ledger and finalization oracle are small
in-process stand-ins. Timings are shortened so the demo finishes in a few
seconds.
"""

import asyncio
import json
import time

import httpx

from attestation_workflow import (
    Settings,
    SubmissionReceipt,
    VotingEpoch,
    WorkflowOrchestrator,
    create_attestation_request,
)
from attestation_workflow.utils import configure_logging

VERIFIER_URL = "https://verifier.local/verifier/web2/"
DA_LAYER_URL = "https://da-layer.local/"

JQ_FILTER = (
    "{name: .name, height: .height, mass: .mass, numberOfFilms: .films | length, "
    'uid: (.url | split("/") | .[-1] | tonumber)}'
)
ABI_SIGNATURE = json.dumps(
    {
        "components": [
            {"internalType": "string", "name": "name", "type": "string"},
            {"internalType": "uint256", "name": "height", "type": "uint256"},
            {"internalType": "uint256", "name": "mass", "type": "uint256"},
            {"internalType": "uint256", "name": "numberOfFilms", "type": "uint256"},
            {"internalType": "uint256", "name": "uid", "type": "uint256"},
        ],
        "name": "task",
        "type": "tuple",
    }
)


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


class SimulatedLedger:
    """Accepts submissions and assigns rounds from the wall clock."""

    def __init__(self, epoch: VotingEpoch) -> None:
        self._epoch = epoch
        self._block = 1_000

    async def submit(self, encoded_request: str) -> SubmissionReceipt:
        self._block += 1
        timestamp = int(time.time())
        return SubmissionReceipt(
            round_id=self._epoch.round_for_timestamp(timestamp),
            block_number=self._block,
            block_timestamp=timestamp,
        )


class SimulatedRelay:
    """Reports a round as finalized after a few checks."""

    def __init__(self, checks_until_final: int = 3) -> None:
        self._remaining = checks_until_final

    async def is_finalized(self, protocol_id: int, round_id: int) -> bool:
        self._remaining -= 1
        return self._remaining <= 0


def build_mock_transport() -> httpx.MockTransport:
    """Serve canned verifier and DA layer responses."""
    proof_polls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/prepareRequest"):
            return httpx.Response(200, json={"status": "VALID", "abiEncodedRequest": "0xdead"})

        proof_polls["count"] += 1
        if proof_polls["count"] < 2:
            return httpx.Response(400, json={"error": "proof not yet available"})
        return httpx.Response(
            200,
            json={
                "response_hex": "0xbeef",
                "attestation_type": "0x576562324a736f6e",
                "proof": ["0x" + "ab" * 32, "0x" + "cd" * 32],
            },
        )

    return httpx.MockTransport(handler)


async def demo_workflow() -> None:
    """Run one attestation workflow end to end."""
    print_section("Attestation Workflow")

    settings = Settings(
        verifier_url=VERIFIER_URL,
        verifier_api_key="demo-key",
        da_layer_url=DA_LAYER_URL,
        systems_explorer_url="https://systems-explorer.local",
        retry_max_attempts=3,
        retry_initial_delay=0.1,
        poll_check_interval=0.2,
        poll_max_wait_time=5.0,
        proof_settle_delay=0.2,
        cache_enabled=True,
    )

    epoch = VotingEpoch(first_voting_round_start_ts=1_658_430_000, voting_epoch_duration_seconds=90)
    orchestrator = WorkflowOrchestrator.create(
        settings,
        submitter=SimulatedLedger(epoch),
        oracle=SimulatedRelay(),
        client=httpx.AsyncClient(transport=build_mock_transport()),
    )
    try:
        await run_workflow(orchestrator)
    finally:
        await orchestrator.close()


async def run_workflow(orchestrator: WorkflowOrchestrator) -> None:
    """Execute the workflow, then look the proof up again from the cache."""
    params, attestation_type, source_id = (
        create_attestation_request()
        .url("https://swapi.info/api/people/3")
        .jq_filter(JQ_FILTER)
        .abi_signature(ABI_SIGNATURE)
        .build()
    )

    def on_progress(phase: str, elapsed: float) -> None:
        print(f"  … waiting for {phase} ({elapsed:.1f}s elapsed)")

    def on_transition(state) -> None:
        print(f"  → {state.value}")

    print("\n📝 Running workflow...")
    start = time.time()
    result = await orchestrator.execute(
        params,
        attestation_type,
        source_id,
        on_progress=on_progress,
        on_transition=on_transition,
    )

    print(f"\n✓ Round {result.round_info.round_id} completed in {time.time() - start:.1f}s")
    print(f"  Explorer: {result.round_info.explorer_url}")
    print(f"  Response: {result.proof.response_bytes}")
    print(f"  Proof path length: {len(result.proof.proof_path)}")

    print_section("Cached Proof Lookup")
    start = time.time()
    cached = await orchestrator.retrieve_proof("0xdead", result.round_info.round_id)
    print(f"\n✓ Served from cache in {(time.time() - start) * 1000:.2f}ms")
    print(f"  Same record: {cached == result.proof}")



def main() -> None:
    """Run all demos."""
    configure_logging("WARNING")
    asyncio.run(demo_workflow())


if __name__ == "__main__":
    main()
