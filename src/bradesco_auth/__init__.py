"""Bradesco API authentication: JWT bearer assertions and X-Brad-Signature headers."""

from bradesco_auth.assertion import (
    PRODUCTION_TOKEN_URL,
    SANDBOX_TOKEN_URL,
    create_assertion,
    resolve_audience,
    token_request_form,
)
from bradesco_auth.credential import MIN_RSA_KEY_SIZE, Credential, load_credential
from bradesco_auth.errors import SigningError
from bradesco_auth.request_signature import (
    canonical_message,
    create_request_signature,
    signature_headers,
    to_url_safe,
)
from bradesco_auth.session import BradescoAuth
from bradesco_auth.signer import compute_signature, decode_token, sign_token, verify_signature
from bradesco_auth.types import SignedAssertion, SignedRequest

__all__ = [
    "MIN_RSA_KEY_SIZE",
    "PRODUCTION_TOKEN_URL",
    "SANDBOX_TOKEN_URL",
    "BradescoAuth",
    "Credential",
    "SignedAssertion",
    "SignedRequest",
    "SigningError",
    "canonical_message",
    "compute_signature",
    "create_assertion",
    "create_request_signature",
    "decode_token",
    "load_credential",
    "resolve_audience",
    "sign_token",
    "signature_headers",
    "to_url_safe",
    "token_request_form",
    "verify_signature",
]

__version__ = "0.1.0"
