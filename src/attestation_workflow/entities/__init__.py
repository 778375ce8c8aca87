"""Domain entities for internal representation.

These are pure frozen dataclasses used by services and repositories. They
are NOT wire contracts - use the models from the dto package for that.

Entities should have:
- No JSON wire logic
- No Pydantic validation
- No I/O
"""

from .cache_entry import CacheEntry
from .policies import PollingPolicy, RetryPolicy
from .proof_record import Fingerprint, ProofRecord
from .request_params import (
    AttestationRequestBuilder,
    AttestationType,
    BuiltRequest,
    RequestParams,
    SourceId,
    build_request_params,
    create_attestation_request,
    validate_request_params,
)
from .round_info import PreparedRequest, RoundInfo, SubmissionReceipt, VotingEpoch

__all__ = [
    "AttestationRequestBuilder",
    "AttestationType",
    "BuiltRequest",
    "CacheEntry",
    "Fingerprint",
    "PollingPolicy",
    "PreparedRequest",
    "ProofRecord",
    "RequestParams",
    "RetryPolicy",
    "RoundInfo",
    "SourceId",
    "SubmissionReceipt",
    "VotingEpoch",
    "build_request_params",
    "create_attestation_request",
    "validate_request_params",
]
