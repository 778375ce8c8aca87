"""
Tests for the httpx-backed collaborators, using pytest-httpx canned responses.

Test plan:
- VerifierPreparer: VALID response parsed, request headers/body shaped for
  the verifier, non-VALID -> ValidationError, non-2xx and connection errors
  -> TransientServiceError, malformed 2xx -> ProtocolError
- DaLayerProofService: proof parsed, error status / missing response_hex
  -> None, incomplete proof -> None, connection error ->
  TransientServiceError
- ProofRetriever over the real client keeps polling past a partial payload
"""

import json

import httpx
import pytest
from pytest_httpx import HTTPXMock

from attestation_workflow.entities import AttestationType, PollingPolicy, ProofRecord, SourceId
from attestation_workflow.errors import ProtocolError, TransientServiceError, ValidationError
from attestation_workflow.protocols import ProofService, RequestPreparer
from attestation_workflow.repositories import DaLayerProofService, VerifierPreparer
from attestation_workflow.services import ProofRetriever

VERIFIER_BASE = "https://verifier.example/verifier/web2/"
PREPARE_URL = "https://verifier.example/verifier/web2/Web2Json/prepareRequest"
DA_BASE = "https://da.example/"
PROOF_URL = "https://da.example/api/v1/fdc/proof-by-request-round-raw"

WEB2JSON_HEX = "0x576562324a736f6e" + "0" * 48
PUBLICWEB2_HEX = "0x5075626c696357656232" + "0" * 44


@pytest.fixture
def preparer() -> VerifierPreparer:
    return VerifierPreparer.create(base_url=VERIFIER_BASE, api_key="secret")


@pytest.fixture
def proof_service() -> DaLayerProofService:
    return DaLayerProofService.create(base_url=DA_BASE)


class TestVerifierPreparer:
    def test_satisfies_protocol(self, preparer) -> None:
        assert isinstance(preparer, RequestPreparer)

    @pytest.mark.asyncio
    async def test_valid_response(self, httpx_mock: HTTPXMock, preparer, params) -> None:
        httpx_mock.add_response(
            method="POST",
            url=PREPARE_URL,
            json={"status": "VALID", "abiEncodedRequest": "0xdead"},
        )

        prepared = await preparer.prepare(params, AttestationType.WEB2_JSON, SourceId.PUBLIC_WEB2)

        assert prepared.status == "VALID"
        assert prepared.encoded_request == "0xdead"

    @pytest.mark.asyncio
    async def test_request_shape(self, httpx_mock: HTTPXMock, preparer, params) -> None:
        httpx_mock.add_response(
            method="POST",
            url=PREPARE_URL,
            json={"status": "VALID", "abiEncodedRequest": "0xdead"},
        )

        await preparer.prepare(params, AttestationType.WEB2_JSON, SourceId.PUBLIC_WEB2)

        request = httpx_mock.get_request()
        assert request.headers["X-API-KEY"] == "secret"
        body = json.loads(request.content)
        assert body["attestationType"] == WEB2JSON_HEX
        assert body["sourceId"] == PUBLICWEB2_HEX
        assert body["requestBody"] == {
            "url": "https://swapi.info/api/people/3",
            "httpMethod": "GET",
            "headers": "{}",
            "queryParams": "{}",
            "body": "{}",
            "postProcessJq": "{name: .name}",
            "abiSignature": '{"components": [], "name": "task", "type": "tuple"}',
        }

    @pytest.mark.asyncio
    async def test_invalid_status_raises_validation_error(
        self, httpx_mock: HTTPXMock, preparer, params
    ) -> None:
        httpx_mock.add_response(method="POST", url=PREPARE_URL, json={"status": "INVALID"})

        with pytest.raises(ValidationError, match="INVALID"):
            await preparer.prepare(params, AttestationType.WEB2_JSON, SourceId.PUBLIC_WEB2)

    @pytest.mark.asyncio
    async def test_server_error_is_transient(self, httpx_mock: HTTPXMock, preparer, params) -> None:
        httpx_mock.add_response(method="POST", url=PREPARE_URL, status_code=503)

        with pytest.raises(TransientServiceError) as exc_info:
            await preparer.prepare(params, AttestationType.WEB2_JSON, SourceId.PUBLIC_WEB2)

        assert exc_info.value.status_code == 503
        assert exc_info.value.retryable

    @pytest.mark.asyncio
    async def test_connection_error_is_transient(
        self, httpx_mock: HTTPXMock, preparer, params
    ) -> None:
        httpx_mock.add_exception(httpx.ConnectError("Connection refused"))

        with pytest.raises(TransientServiceError):
            await preparer.prepare(params, AttestationType.WEB2_JSON, SourceId.PUBLIC_WEB2)

    @pytest.mark.asyncio
    async def test_valid_without_encoded_request_is_protocol_error(
        self, httpx_mock: HTTPXMock, preparer, params
    ) -> None:
        httpx_mock.add_response(method="POST", url=PREPARE_URL, json={"status": "VALID"})

        with pytest.raises(ProtocolError):
            await preparer.prepare(params, AttestationType.WEB2_JSON, SourceId.PUBLIC_WEB2)

    @pytest.mark.asyncio
    async def test_non_json_body_is_protocol_error(
        self, httpx_mock: HTTPXMock, preparer, params
    ) -> None:
        httpx_mock.add_response(method="POST", url=PREPARE_URL, text="<html>gateway</html>")

        with pytest.raises(ProtocolError):
            await preparer.prepare(params, AttestationType.WEB2_JSON, SourceId.PUBLIC_WEB2)


class TestDaLayerProofService:
    def test_satisfies_protocol(self, proof_service) -> None:
        assert isinstance(proof_service, ProofService)

    @pytest.mark.asyncio
    async def test_proof_parsed(self, httpx_mock: HTTPXMock, proof_service) -> None:
        httpx_mock.add_response(
            method="POST",
            url=PROOF_URL,
            json={
                "response_hex": "0xbeef",
                "attestation_type": "0x576562324a736f6e",
                "proof": ["0x01", "0x02"],
            },
        )

        record = await proof_service.fetch_proof(5, "0xdead")

        assert record == ProofRecord("0xbeef", "0x576562324a736f6e", ("0x01", "0x02"))
        body = json.loads(httpx_mock.get_request().content)
        assert body == {"votingRoundId": 5, "requestBytes": "0xdead"}

    @pytest.mark.asyncio
    async def test_error_status_means_not_available(
        self, httpx_mock: HTTPXMock, proof_service
    ) -> None:
        httpx_mock.add_response(method="POST", url=PROOF_URL, status_code=400, json={"error": "x"})

        assert await proof_service.fetch_proof(5, "0xdead") is None

    @pytest.mark.asyncio
    async def test_missing_response_hex_means_not_available(
        self, httpx_mock: HTTPXMock, proof_service
    ) -> None:
        httpx_mock.add_response(method="POST", url=PROOF_URL, json={"response_hex": ""})

        assert await proof_service.fetch_proof(5, "0xdead") is None

    @pytest.mark.asyncio
    async def test_broken_proof_means_not_available(
        self, httpx_mock: HTTPXMock, proof_service
    ) -> None:
        httpx_mock.add_response(
            method="POST",
            url=PROOF_URL,
            json={"response_hex": "0xbeef", "attestation_type": "0x01", "proof": "not-a-list"},
        )

        assert await proof_service.fetch_proof(5, "0xdead") is None

    @pytest.mark.asyncio
    async def test_partial_proof_means_not_available(
        self, httpx_mock: HTTPXMock, proof_service
    ) -> None:
        httpx_mock.add_response(method="POST", url=PROOF_URL, json={"response_hex": "0xbeef"})

        assert await proof_service.fetch_proof(5, "0xdead") is None

    @pytest.mark.asyncio
    async def test_connection_error_is_transient(
        self, httpx_mock: HTTPXMock, proof_service
    ) -> None:
        httpx_mock.add_exception(httpx.ReadTimeout("timed out"))

        with pytest.raises(TransientServiceError):
            await proof_service.fetch_proof(5, "0xdead")


@pytest.mark.asyncio
async def test_retriever_polls_past_partial_proof(
    httpx_mock: HTTPXMock, proof_service, clock, fakes
) -> None:
    httpx_mock.add_response(method="POST", url=PROOF_URL, json={"response_hex": "0xbeef"})
    httpx_mock.add_response(
        method="POST",
        url=PROOF_URL,
        json={"response_hex": "0xbeef", "attestation_type": "0x01", "proof": ["0x02"]},
    )
    retriever = ProofRetriever(
        proof_service=proof_service,
        oracle=fakes.Oracle(True),
        protocol_id=200,
        settle_delay=0,
        clock=clock,
    )

    record = await retriever.retrieve(
        "0xdead", 5, PollingPolicy(check_interval=10.0, max_wait_time=60.0)
    )

    assert record == ProofRecord("0xbeef", "0x01", ("0x02",))
    assert len(httpx_mock.get_requests()) == 2
    assert clock.sleeps == [10.0]
