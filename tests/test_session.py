from __future__ import annotations

import pytest

from bradesco_auth import BradescoAuth
from bradesco_auth.assertion import PRODUCTION_TOKEN_URL, SANDBOX_TOKEN_URL
from bradesco_auth.request_signature import canonical_message
from bradesco_auth.signer import decode_token, verify_signature

REGISTER_PATH = "/v1/boleto-hibrido/registrar-boleto"


@pytest.fixture
def auth(credential, fixed_clock, monkeypatch) -> BradescoAuth:
    monkeypatch.delenv("BRADESCO_API_URL", raising=False)
    monkeypatch.delenv("BRADESCO_TOKEN_URL", raising=False)
    return BradescoAuth(credential, "client-123", clock=fixed_clock)


def test_session_defaults_to_sandbox(auth: BradescoAuth) -> None:
    assert auth.audience == SANDBOX_TOKEN_URL
    assert auth.api_base_url == "https://proxy.api.prebanco.com.br"


def test_session_reads_environment(credential, monkeypatch) -> None:
    monkeypatch.setenv("BRADESCO_API_URL", "https://openapi.bradesco.com.br")
    monkeypatch.setenv("BRADESCO_TOKEN_URL", PRODUCTION_TOKEN_URL)

    auth = BradescoAuth(credential, "client-123")

    assert auth.api_base_url == "https://openapi.bradesco.com.br"
    assert auth.audience == PRODUCTION_TOKEN_URL


def test_session_requires_client_id(credential) -> None:
    with pytest.raises(ValueError):
        BradescoAuth(credential, "")


def test_session_assertion_and_form(auth: BradescoAuth, credential) -> None:
    signed = auth.create_assertion()

    claims = decode_token(signed.assertion, credential)
    assert claims["sub"] == "client-123"
    assert claims["aud"] == SANDBOX_TOKEN_URL
    assert auth.token_request_form(signed)["assertion"] == signed.assertion


def test_session_sign_builds_verifiable_request(auth: BradescoAuth, credential) -> None:
    signed = auth.create_assertion()

    request = auth.sign(
        REGISTER_PATH,
        signed_assertion=signed,
        access_token="tok123",
        body={"nuCPFCNPJ": "123456789", "filialCPFCNPJ": "0001"},
    )

    assert request.url == f"https://proxy.api.prebanco.com.br{REGISTER_PATH}"
    assert request.method == "POST"
    assert request.body == '{"nuCPFCNPJ":"123456789","filialCPFCNPJ":"0001"}'
    assert request.headers["X-Brad-Nonce"] == "1704067200000"
    assert request.headers["X-Brad-Timestamp"] == "2024-01-01T00:00:00-00:00"
    assert request.headers["Authorization"] == "Bearer tok123"
    assert request.headers["access-token"] == "client-123"

    message = canonical_message("tok123", signed.timestamp, REGISTER_PATH, None, request.body, signed.nonce)
    assert verify_signature(message, request.headers["X-Brad-Signature"], credential) is True


def test_session_sign_with_query_and_absolute_url(auth: BradescoAuth, credential) -> None:
    signed = auth.create_assertion()

    request = auth.sign(
        "https://openapi.bradesco.com.br/v1/boleto/consulta",
        signed_assertion=signed,
        access_token="tok123",
        query="agencia=1234",
    )

    assert request.url == "https://openapi.bradesco.com.br/v1/boleto/consulta?agencia=1234"
    assert request.body == ""
    message = canonical_message("tok123", signed.timestamp, "/v1/boleto/consulta", "agencia=1234", "", signed.nonce)
    assert verify_signature(message, request.headers["X-Brad-Signature"], credential) is True


def test_session_sign_rejects_unsupported_body(auth: BradescoAuth) -> None:
    signed = auth.create_assertion()
    with pytest.raises(ValueError):
        auth.sign(REGISTER_PATH, signed_assertion=signed, access_token="tok", body=[1, 2, 3])


def test_session_sign_covers_query_carried_in_path(auth: BradescoAuth, credential) -> None:
    signed = auth.create_assertion()

    request = auth.sign("/v1/consulta?agencia=1", signed_assertion=signed, access_token="tok123")

    assert request.url == "https://proxy.api.prebanco.com.br/v1/consulta?agencia=1"
    message = canonical_message("tok123", signed.timestamp, "/v1/consulta", "agencia=1", "", signed.nonce)
    assert verify_signature(message, request.headers["X-Brad-Signature"], credential) is True


def test_session_sign_rejects_query_in_path_and_argument(auth: BradescoAuth) -> None:
    signed = auth.create_assertion()
    with pytest.raises(ValueError, match="query"):
        auth.sign("/v1/consulta?agencia=1", signed_assertion=signed, access_token="tok", query="conta=2")
