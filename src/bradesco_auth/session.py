"""Stateless bindings tying a credential and client id to the signing operations."""

from __future__ import annotations

import json
import os
from urllib.parse import urlsplit, urlunsplit

from bradesco_auth.assertion import Clock, create_assertion, resolve_audience, token_request_form
from bradesco_auth.credential import Credential
from bradesco_auth.request_signature import (
    REQUEST_METHOD,
    create_request_signature,
    signature_headers,
)
from bradesco_auth.types import RequestBody, SignedAssertion, SignedRequest

DEFAULT_API_URL = "https://proxy.api.prebanco.com.br"


def _resolve_api_base_url(explicit: str | None) -> str:
    return explicit or os.environ.get("BRADESCO_API_URL") or DEFAULT_API_URL


def _resolve_url(value: str, base: str) -> str:
    if value.startswith("http://") or value.startswith("https://"):
        return value
    return f"{base.rstrip('/')}/{value.lstrip('/')}"


def _normalize_body(body: RequestBody) -> str:
    if body is None:
        return ""
    if isinstance(body, str):
        return body
    if isinstance(body, bytes):
        return body.decode("utf-8")
    if isinstance(body, dict):
        return json.dumps(body, separators=(",", ":"))
    raise ValueError("Unsupported body type. Use str, bytes, dict, or None.")


class BradescoAuth:
    def __init__(
        self,
        credential: Credential,
        client_id: str,
        *,
        audience: str | None = None,
        clock: Clock | None = None,
        api_base_url: str | None = None,
    ):
        if not client_id:
            raise ValueError("BradescoAuth: client_id is required")

        self._credential = credential
        self._clock = clock

        self.client_id = client_id
        self.audience = resolve_audience(audience)
        self.api_base_url = _resolve_api_base_url(api_base_url)

    def create_assertion(self) -> SignedAssertion:
        return create_assertion(
            self.client_id,
            self._credential,
            clock=self._clock,
            audience=self.audience,
        )

    def token_request_form(self, signed_assertion: SignedAssertion) -> dict[str, str]:
        return token_request_form(signed_assertion)

    def sign(
        self,
        path: str,
        *,
        signed_assertion: SignedAssertion,
        access_token: str,
        query: str | None = None,
        body: RequestBody = None,
    ) -> SignedRequest:
        """Sign a POST to ``path`` with the nonce/timestamp of ``signed_assertion``.

        ``signed_assertion`` must be the one exchanged for ``access_token``;
        the server rejects signatures whose nonce belongs to another token.
        ``query`` must already be URL-encoded: that exact string is signed
        and sent. A query may instead be carried in ``path``, but not both.
        """
        split = urlsplit(_resolve_url(path, self.api_base_url))
        if query and split.query:
            raise ValueError("Pass the query string either in path or as query, not both")
        query = query or split.query
        body_text = _normalize_body(body)

        signature = create_request_signature(
            bearer_token=access_token,
            timestamp=signed_assertion.timestamp,
            request_path=split.path,
            query_parameters=query,
            request_body=body_text,
            nonce=signed_assertion.nonce,
            credential=self._credential,
        )
        headers = signature_headers(signed_assertion, access_token, signature, self.client_id)

        url = urlunsplit((split.scheme, split.netloc, split.path, query, ""))
        return SignedRequest(url=url, method=REQUEST_METHOD, headers=headers, body=body_text)
