"""Attestation request parameters and their validating constructor."""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, NamedTuple

from attestation_workflow.errors import ValidationError


class AttestationType(str, Enum):
    """Attestation kinds understood by the verifier."""

    WEB2_JSON = "Web2Json"
    PAYMENT_VERIFICATION = "PaymentVerification"
    BALANCE_DECREASING = "BalanceDecreasing"
    ADDRESS_VALIDITY = "AddressValidity"
    BLOCK_HEIGHT = "BlockHeight"


class SourceId(str, Enum):
    """Data sources the verifier can attest to."""

    PUBLIC_WEB2 = "PublicWeb2"


@dataclass(frozen=True)
class RequestParams:
    """Parameters describing the external data to attest.

    Validated on construction, so an instance is always well-formed.

    Attributes:
        url: Endpoint the verifier fetches
        post_process_filter: jq filter applied to the endpoint response
        response_signature: ABI signature describing the filtered result
        method: HTTP method used against ``url``
        headers: JSON object string of HTTP headers
        query_params: JSON object string of query parameters
        body: JSON string of the request body
    """

    url: str
    post_process_filter: str
    response_signature: str
    method: str = "GET"
    headers: str = "{}"
    query_params: str = "{}"
    body: str = "{}"

    def __post_init__(self) -> None:
        validate_request_params(self)


def validate_request_params(params: RequestParams) -> None:
    """Check that every required field is present.

    Raises:
        ValidationError: If a required field is empty
    """
    if not params.url or not params.url.strip():
        raise ValidationError("API URL is required")
    if not params.post_process_filter or not params.post_process_filter.strip():
        raise ValidationError("JQ filter is required")
    if not params.response_signature or not params.response_signature.strip():
        raise ValidationError("ABI signature is required")
    if not params.method or not params.method.strip():
        raise ValidationError("HTTP method is required")


def _as_json(value: str | dict[str, Any] | None) -> str:
    if value is None:
        return "{}"
    if isinstance(value, str):
        return value
    return json.dumps(value)


def build_request_params(
    url: str,
    post_process_filter: str,
    response_signature: str,
    method: str | None = None,
    headers: str | dict[str, str] | None = None,
    query_params: str | dict[str, str] | None = None,
    body: str | dict[str, Any] | None = None,
) -> RequestParams:
    """Build RequestParams, serializing dict arguments to JSON.

    Example:
        ```python
        params = build_request_params(
            url="https://swapi.info/api/people/3",
            post_process_filter="{name: .name}",
            response_signature='{"components": [...], "type": "tuple"}',
            headers={"Accept": "application/json"},
        )
        ```

    Raises:
        ValidationError: If a required field is missing
    """
    return RequestParams(
        url=url,
        post_process_filter=post_process_filter,
        response_signature=response_signature,
        method=method or "GET",
        headers=_as_json(headers),
        query_params=_as_json(query_params),
        body=_as_json(body),
    )


class BuiltRequest(NamedTuple):
    """Output of AttestationRequestBuilder.build()."""

    params: RequestParams
    attestation_type: AttestationType
    source_id: SourceId


class AttestationRequestBuilder:
    """Fluent veneer over build_request_params.

    Example:
        ```python
        params, attestation_type, source_id = (
            create_attestation_request()
            .url("https://swapi.info/api/people/3")
            .jq_filter("{name: .name}")
            .abi_signature(signature)
            .build()
        )
        ```
    """

    def __init__(self) -> None:
        self.reset()

    def url(self, url: str) -> "AttestationRequestBuilder":
        self._fields["url"] = url
        return self

    def jq_filter(self, post_process_filter: str) -> "AttestationRequestBuilder":
        self._fields["post_process_filter"] = post_process_filter
        return self

    def abi_signature(self, response_signature: str) -> "AttestationRequestBuilder":
        self._fields["response_signature"] = response_signature
        return self

    def method(self, method: str) -> "AttestationRequestBuilder":
        self._fields["method"] = method
        return self

    def headers(self, headers: str | dict[str, str]) -> "AttestationRequestBuilder":
        self._fields["headers"] = headers
        return self

    def query_params(self, query_params: str | dict[str, str]) -> "AttestationRequestBuilder":
        self._fields["query_params"] = query_params
        return self

    def body(self, body: str | dict[str, Any]) -> "AttestationRequestBuilder":
        self._fields["body"] = body
        return self

    def type(self, attestation_type: AttestationType) -> "AttestationRequestBuilder":
        self._attestation_type = attestation_type
        return self

    def source(self, source_id: SourceId) -> "AttestationRequestBuilder":
        self._source_id = source_id
        return self

    def build(self) -> BuiltRequest:
        """Validate and return the request.

        Raises:
            ValidationError: If url, jq filter or ABI signature is missing
        """
        params = build_request_params(
            url=self._fields.get("url", ""),
            post_process_filter=self._fields.get("post_process_filter", ""),
            response_signature=self._fields.get("response_signature", ""),
            method=self._fields.get("method"),
            headers=self._fields.get("headers"),
            query_params=self._fields.get("query_params"),
            body=self._fields.get("body"),
        )
        return BuiltRequest(params, self._attestation_type, self._source_id)

    def reset(self) -> "AttestationRequestBuilder":
        self._fields: dict[str, Any] = {}
        self._attestation_type = AttestationType.WEB2_JSON
        self._source_id = SourceId.PUBLIC_WEB2
        return self


def create_attestation_request() -> AttestationRequestBuilder:
    """Start a new fluent attestation request."""
    return AttestationRequestBuilder()
