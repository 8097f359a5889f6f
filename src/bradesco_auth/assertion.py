"""JWT bearer assertion for the Bradesco authorization server (manual section 3.7)."""

from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone
from typing import Callable

from bradesco_auth.credential import Credential
from bradesco_auth.signer import sign_token
from bradesco_auth.types import Claims, SignedAssertion

SANDBOX_TOKEN_URL = "https://proxy.api.prebanco.com.br/auth/server/v1.1/token"
PRODUCTION_TOKEN_URL = "https://openapi.bradesco.com.br/auth/server/v1.1/token"

ASSERTION_VERSION = "1.1"
ASSERTION_LIFETIME = timedelta(hours=1)
JWT_BEARER_GRANT_TYPE = "urn:ietf:params:oauth:grant-type:jwt-bearer"

Clock = Callable[[], datetime]


def resolve_audience(explicit: str | None = None) -> str:
    return explicit or os.environ.get("BRADESCO_TOKEN_URL") or SANDBOX_TOKEN_URL


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _epoch_seconds(value: datetime) -> int:
    return int(value.timestamp())


def format_timestamp(value: datetime) -> str:
    # The "-00:00" suffix is a fixed literal expected by the API.
    return f"{_as_utc(value):%Y-%m-%dT%H:%M:%S}-00:00"


def nonce_from_issued_at(issued_at: int) -> int:
    return int(f"{issued_at}000")


def create_assertion(
    subject_id: str,
    credential: Credential,
    *,
    clock: Clock | None = None,
    audience: str = SANDBOX_TOKEN_URL,
) -> SignedAssertion:
    now = _as_utc((clock or _utc_now)())
    issued_at = _epoch_seconds(now)
    nonce = nonce_from_issued_at(issued_at)
    expires_at = _epoch_seconds(now + ASSERTION_LIFETIME)

    claims = Claims(
        aud=audience,
        sub=str(subject_id),
        iat=issued_at,
        jti=nonce,
        exp=expires_at,
        ver=ASSERTION_VERSION,
    )
    assertion = sign_token(claims, credential)

    return SignedAssertion(
        assertion=assertion,
        timestamp=format_timestamp(now),
        issued_at=issued_at,
        nonce=nonce,
        expires_at=expires_at,
    )


def token_request_form(signed_assertion: SignedAssertion) -> dict[str, str]:
    """Form fields for exchanging an assertion for an access token."""
    return {
        "grant_type": JWT_BEARER_GRANT_TYPE,
        "assertion": signed_assertion.assertion,
    }
