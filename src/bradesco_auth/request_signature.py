"""X-Brad-Signature: signed canonical form of an outgoing API request."""

from __future__ import annotations

import logging

from bradesco_auth.credential import Credential
from bradesco_auth.signer import compute_signature
from bradesco_auth.types import SignedAssertion

logger = logging.getLogger(__name__)

REQUEST_METHOD = "POST"
SIGNATURE_ALGORITHM = "SHA256"

SIGNATURE_HEADER = "X-Brad-Signature"
NONCE_HEADER = "X-Brad-Nonce"
TIMESTAMP_HEADER = "X-Brad-Timestamp"
ALGORITHM_HEADER = "X-Brad-Algorithm"
CLIENT_ID_HEADER = "access-token"


def canonical_message(
    bearer_token: str,
    timestamp: str,
    request_path: str,
    query_parameters: str | None,
    request_body: str | None,
    nonce: int,
) -> str:
    # Field order and count are fixed; absent query/body still take a line.
    fields = [
        REQUEST_METHOD,
        request_path,
        query_parameters or "",
        request_body or "",
        bearer_token,
        str(nonce),
        timestamp,
        SIGNATURE_ALGORITHM,
    ]
    return "\n".join(fields)


def to_url_safe(signature: str) -> str:
    return signature.replace("=", "").replace("+", "-").replace("/", "_").strip()


def create_request_signature(
    bearer_token: str,
    timestamp: str,
    request_path: str,
    query_parameters: str | None,
    request_body: str | None,
    nonce: int,
    credential: Credential,
) -> str:
    message = canonical_message(
        bearer_token=bearer_token,
        timestamp=timestamp,
        request_path=request_path,
        query_parameters=query_parameters,
        request_body=request_body,
        nonce=nonce,
    )
    logger.debug("Signing canonical request for %s (%d bytes)", request_path, len(message))
    return to_url_safe(compute_signature(message, credential))


def signature_headers(
    signed_assertion: SignedAssertion,
    bearer_token: str,
    signature: str,
    client_id: str,
) -> dict[str, str]:
    """Headers that accompany a signed request; nonce and timestamp come from the assertion."""
    return {
        "Authorization": f"Bearer {bearer_token}",
        "Content-Type": "application/json",
        CLIENT_ID_HEADER: client_id,
        SIGNATURE_HEADER: signature,
        NONCE_HEADER: str(signed_assertion.nonce),
        TIMESTAMP_HEADER: signed_assertion.timestamp,
        ALGORITHM_HEADER: SIGNATURE_ALGORITHM,
    }
