"""Verifier-backed request preparer.

Calls the verifier's ``prepareRequest`` endpoint, which checks that an
attestation request is well-formed and returns its ABI encoding:

    POST {base_url}/{attestation_type}/prepareRequest
    X-API-KEY: <api key>

    {"attestationType": "0x5765...", "sourceId": "0x5075...",
     "requestBody": {"url": ..., "httpMethod": ..., "postProcessJq": ..., ...}}

Error mapping:
- transport failure or non-2xx status -> TransientServiceError (retried)
- unparseable or incomplete 2xx body  -> ProtocolError (retried)
- status other than "VALID"           -> ValidationError (not retried)
"""

import httpx
import pydantic

from attestation_workflow.dto import (
    PrepareRequestPayload,
    PrepareResponsePayload,
    VerifierRequestBody,
)
from attestation_workflow.entities import (
    AttestationType,
    PreparedRequest,
    RequestParams,
    SourceId,
)
from attestation_workflow.errors import ProtocolError, TransientServiceError, ValidationError
from attestation_workflow.utils.encoding import to_utf8_hex_bytes32

VALID_STATUS = "VALID"


class VerifierPreparer:
    """httpx implementation of the RequestPreparer protocol.

    This class satisfies the RequestPreparer protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        preparer = VerifierPreparer.create(
            base_url="https://verifier.example/verifier/web2/",
            api_key=settings.verifier_api_key,
        )
        prepared = await preparer.prepare(params, AttestationType.WEB2_JSON, SourceId.PUBLIC_WEB2)
        print(prepared.encoded_request)
        ```
    """

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the verifier client.

        Args:
            base_url: Verifier base URL.
            api_key: Value sent as X-API-KEY.
            timeout: Request timeout in seconds.
            client: Optional pre-built AsyncClient (custom transports).
        """
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            )
        return self._client

    @classmethod
    def create(cls, base_url: str, api_key: str = "", timeout: float = 30.0) -> "VerifierPreparer":
        """Factory method to create a VerifierPreparer."""
        return cls(base_url=base_url, api_key=api_key, timeout=timeout)

    def endpoint(self, attestation_type: AttestationType) -> str:
        return f"{self._base_url}/{attestation_type.value}/prepareRequest"

    @staticmethod
    def build_payload(
        params: RequestParams,
        attestation_type: AttestationType,
        source_id: SourceId,
    ) -> PrepareRequestPayload:
        return PrepareRequestPayload(
            attestation_type=to_utf8_hex_bytes32(attestation_type.value),
            source_id=to_utf8_hex_bytes32(source_id.value),
            request_body=VerifierRequestBody(
                url=params.url,
                http_method=params.method,
                headers=params.headers,
                query_params=params.query_params,
                body=params.body,
                post_process_jq=params.post_process_filter,
                abi_signature=params.response_signature,
            ),
        )

    async def prepare(
        self,
        params: RequestParams,
        attestation_type: AttestationType,
        source_id: SourceId,
    ) -> PreparedRequest:
        """Ask the verifier to encode ``params``.

        Returns:
            PreparedRequest with status "VALID" and the encoded request

        Raises:
            TransientServiceError: On network failure or non-2xx status
            ProtocolError: If a 2xx response body is malformed
            ValidationError: If the verifier rejects the request
        """
        payload = self.build_payload(params, attestation_type, source_id)

        try:
            response = await self.client.post(
                self.endpoint(attestation_type),
                json=payload.model_dump(by_alias=True),
                headers={"X-API-KEY": self._api_key, "Content-Type": "application/json"},
            )
        except httpx.HTTPError as e:
            raise TransientServiceError(f"Verifier request failed: {e}") from e

        if not response.is_success:
            raise TransientServiceError(
                f"Verifier server returned status {response.status_code}: {response.reason_phrase}",
                status_code=response.status_code,
            )

        try:
            data = PrepareResponsePayload.model_validate(response.json())
        except (ValueError, pydantic.ValidationError) as e:
            raise ProtocolError(f"Unexpected verifier response: {e}") from e

        if data.status != VALID_STATUS:
            raise ValidationError(f"Invalid attestation request: {data.status}")
        if not data.abi_encoded_request:
            raise ProtocolError("Verifier response is missing abiEncodedRequest")

        return PreparedRequest(status=data.status, encoded_request=data.abi_encoded_request)

    async def close(self) -> None:
        """Close the async HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
