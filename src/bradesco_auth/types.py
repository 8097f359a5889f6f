"""Shared datatypes for the Bradesco authentication package."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Union


@dataclass(frozen=True)
class SignedAssertion:
    assertion: str
    timestamp: str
    issued_at: int
    nonce: int
    expires_at: int


@dataclass(frozen=True)
class SignedRequest:
    url: str
    method: str
    headers: dict[str, str]
    body: str


RequestBody = Union[str, bytes, Dict[str, Any], None]


class Claims(dict[str, Any]):
    """Insertion-ordered JWT claim set; order is preserved in the signed payload."""
