"""Error types raised by the Bradesco authentication core."""

from __future__ import annotations


class SigningError(Exception):
    """Raised when a credential cannot produce an RS256 / PKCS#1 v1.5 signature."""
