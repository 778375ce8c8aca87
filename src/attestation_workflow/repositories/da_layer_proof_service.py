"""DA layer proof service client.

    POST {base_url}/api/v1/fdc/proof-by-request-round-raw
    {"votingRoundId": 5, "requestBytes": "0x..."}

A 2xx response that parses into a complete proof is a proof. Anything else
(error status, empty or partial body) means the proof is not available yet
and the caller keeps polling.
"""

import logging

import httpx
import pydantic

from attestation_workflow.dto import ProofRequestPayload, ProofResponsePayload
from attestation_workflow.entities import ProofRecord
from attestation_workflow.errors import TransientServiceError

logger = logging.getLogger(__name__)

PROOF_PATH = "api/v1/fdc/proof-by-request-round-raw"


class DaLayerProofService:
    """httpx implementation of the ProofService protocol.

    Example:
        ```python
        service = DaLayerProofService.create(base_url=settings.da_layer_url)
        record = await service.fetch_proof(5, "0xdead")
        if record is None:
            print("not yet available")
        ```
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the proof service client.

        Args:
            base_url: DA layer base URL.
            timeout: Request timeout in seconds.
            client: Optional pre-built AsyncClient (custom transports).
        """
        self._url = f"{base_url.rstrip('/')}/{PROOF_PATH}"
        self._timeout = timeout
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    @property
    def url(self) -> str:
        return self._url

    @classmethod
    def create(cls, base_url: str, timeout: float = 30.0) -> "DaLayerProofService":
        """Factory method to create a DaLayerProofService."""
        return cls(base_url=base_url, timeout=timeout)

    async def fetch_proof(self, round_id: int, encoded_request: str) -> ProofRecord | None:
        """Fetch the proof for ``encoded_request`` in ``round_id``.

        Returns:
            ProofRecord, or None if the proof is not available yet

        Raises:
            TransientServiceError: On network failure
        """
        payload = ProofRequestPayload(voting_round_id=round_id, request_bytes=encoded_request)

        try:
            response = await self.client.post(
                self._url,
                json=payload.model_dump(by_alias=True),
                headers={"Content-Type": "application/json"},
            )
        except httpx.HTTPError as e:
            raise TransientServiceError(f"DA layer request failed: {e}") from e

        if not response.is_success:
            logger.debug(f"DA layer returned status {response.status_code} for round {round_id}")
            return None

        try:
            data = response.json()
        except ValueError:
            return None

        if not isinstance(data, dict) or not data.get("response_hex"):
            return None

        try:
            proof = ProofResponsePayload.model_validate(data)
        except pydantic.ValidationError as e:
            logger.debug(f"Incomplete proof payload for round {round_id}: {e}")
            return None

        return ProofRecord(
            response_bytes=proof.response_hex,
            attestation_kind=proof.attestation_type,
            proof_path=tuple(proof.proof),
        )

    async def close(self) -> None:
        """Close the async HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
