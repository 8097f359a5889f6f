"""RSA-SHA256 signing primitives shared by the assertion and request-signature steps."""

from __future__ import annotations

import base64
import json
import logging
from collections.abc import Mapping
from typing import Any

import jwt
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding

from bradesco_auth.credential import Credential
from bradesco_auth.errors import SigningError

logger = logging.getLogger(__name__)

TOKEN_ALGORITHM = "RS256"


def _message_bytes(message: str | bytes) -> bytes:
    if isinstance(message, bytes):
        return message
    try:
        return message.encode("ascii")
    except UnicodeEncodeError as error:
        raise SigningError(f"Message must be ASCII: {error}") from error


def _from_b64(value: str) -> bytes:
    normalized = value.strip().replace("-", "+").replace("_", "/")
    pad = len(normalized) % 4
    padded = normalized if pad == 0 else normalized + ("=" * (4 - pad))
    return base64.b64decode(padded.encode("ascii"), validate=True)


def compute_signature(message: str | bytes, credential: Credential) -> str:
    """Sign ``message`` with RSA/SHA-256/PKCS#1 v1.5 and return standard, padded base64."""
    private_key = credential.rsa_private_key()
    data = _message_bytes(message)
    try:
        signature = private_key.sign(data, padding.PKCS1v15(), hashes.SHA256())
    except ValueError as error:
        raise SigningError(f"RSA signing failed: {error}") from error
    return base64.b64encode(signature).decode("ascii")


def sign_token(claims: Mapping[str, Any], credential: Credential) -> str:
    """Encode ``claims`` as an RS256 compact JWS (header.payload.signature)."""
    private_key = credential.rsa_private_key()
    payload = dict(claims)
    try:
        token = jwt.encode(payload, private_key, algorithm=TOKEN_ALGORITHM)
    except (TypeError, ValueError, jwt.PyJWTError) as error:
        raise SigningError(f"Failed to sign token: {error}") from error

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Token claims: %s", json.dumps(payload, indent=2, default=str))
        logger.debug("Token signed: %s", token)
    return token


def verify_signature(message: str | bytes, signature: str, credential: Credential) -> bool:
    """Check a signature from :func:`compute_signature` or its URL-safe form."""
    public_key = credential.rsa_public_key()
    try:
        raw = _from_b64(signature)
        public_key.verify(raw, _message_bytes(message), padding.PKCS1v15(), hashes.SHA256())
    except (InvalidSignature, SigningError, ValueError):
        return False
    return True


def decode_token(token: str, credential: Credential) -> dict[str, Any]:
    """Verify an RS256 token's signature and return its payload.

    Registered claims (``exp``, ``aud``...) are not validated here; the
    authorization server is the party that enforces them.
    """
    public_key = credential.rsa_public_key()
    try:
        payload = jwt.PyJWS().decode(token, public_key, algorithms=[TOKEN_ALGORITHM])
    except jwt.PyJWTError as error:
        raise SigningError(f"Token verification failed: {error}") from error
    return json.loads(payload)
