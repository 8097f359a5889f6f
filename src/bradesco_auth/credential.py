"""Credential loading for the certificate ("A1") issued to a Bradesco API client."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey, RSAPublicKey
from cryptography.hazmat.primitives.asymmetric.types import PrivateKeyTypes
from cryptography.hazmat.primitives.serialization import pkcs12
from cryptography.x509.oid import NameOID

from bradesco_auth.errors import SigningError

logger = logging.getLogger(__name__)

MIN_RSA_KEY_SIZE = 2048
PKCS12_SUFFIXES = (".pfx", ".p12")


@dataclass(frozen=True)
class Credential:
    private_key: PrivateKeyTypes | None
    certificate: x509.Certificate | None = None

    @classmethod
    def from_private_key(cls, private_key: PrivateKeyTypes) -> Credential:
        return cls(private_key=private_key, certificate=None)

    @classmethod
    def from_pkcs12(cls, data: bytes, password: str | bytes | None = None) -> Credential:
        try:
            private_key, certificate, _ = pkcs12.load_key_and_certificates(data, _password_bytes(password))
        except ValueError as error:
            raise ValueError(f"Failed to load PKCS#12 bundle: {error}") from error
        return cls(private_key=private_key, certificate=certificate)

    @classmethod
    def from_pem(
        cls,
        key_pem: bytes,
        cert_pem: bytes | None = None,
        password: str | bytes | None = None,
    ) -> Credential:
        try:
            private_key = serialization.load_pem_private_key(key_pem, password=_password_bytes(password))
        except (ValueError, TypeError) as error:
            raise ValueError(f"Failed to load PEM private key: {error}") from error

        certificate = None
        if cert_pem is not None:
            try:
                certificate = x509.load_pem_x509_certificate(cert_pem)
            except ValueError as error:
                raise ValueError(f"Failed to load PEM certificate: {error}") from error
        return cls(private_key=private_key, certificate=certificate)

    @property
    def subject(self) -> str | None:
        """Common name of the certificate holder, if a certificate is attached."""
        if self.certificate is None:
            return None
        names = self.certificate.subject.get_attributes_for_oid(NameOID.COMMON_NAME)
        if not names:
            return self.certificate.subject.rfc4514_string()
        value = names[0].value
        return value.decode("utf-8") if isinstance(value, bytes) else value

    def rsa_private_key(self) -> RSAPrivateKey:
        if self.private_key is None:
            raise SigningError("Credential has no private key")
        if not isinstance(self.private_key, RSAPrivateKey):
            raise SigningError(
                f"Credential key must be RSA, got {type(self.private_key).__name__}",
            )
        if self.private_key.key_size < MIN_RSA_KEY_SIZE:
            raise SigningError(
                f"RSA key of {self.private_key.key_size} bits is below the required {MIN_RSA_KEY_SIZE}",
            )
        return self.private_key

    def rsa_public_key(self) -> RSAPublicKey:
        if self.certificate is not None:
            public_key = self.certificate.public_key()
        elif self.private_key is not None:
            public_key = self.private_key.public_key()
        else:
            raise SigningError("Credential has neither a certificate nor a private key")
        if not isinstance(public_key, RSAPublicKey):
            raise SigningError(f"Credential key must be RSA, got {type(public_key).__name__}")
        return public_key


def _password_bytes(password: str | bytes | None) -> bytes | None:
    if password is None or password in ("", b""):
        return None
    if isinstance(password, bytes):
        return password
    return password.encode("utf-8")


def _resolve_path(explicit: str | os.PathLike[str] | None) -> Path:
    value = explicit or os.environ.get("BRADESCO_CERT_PATH")
    if not value:
        raise ValueError("No credential path given. Pass a path or set BRADESCO_CERT_PATH.")
    return Path(value)


def _read_file(path: Path, label: str) -> bytes:
    if not path.exists():
        raise ValueError(f"{label} file not found at {path}")
    try:
        return path.read_bytes()
    except OSError as error:
        raise ValueError(f"Failed to read {label.lower()} file {path}: {error}") from error


def load_credential(
    path: str | os.PathLike[str] | None = None,
    password: str | None = None,
    cert_path: str | os.PathLike[str] | None = None,
) -> Credential:
    """Load a credential from a PKCS#12 bundle or a PEM private key.

    ``.pfx``/``.p12`` files carry both key and certificate. Any other
    suffix is read as a PEM private key, optionally paired with a PEM
    certificate at ``cert_path``. ``path`` and ``password`` fall back to
    ``BRADESCO_CERT_PATH`` and ``BRADESCO_CERT_PASSWORD``.
    """
    credential_path = _resolve_path(path)
    if password is None:
        password = os.environ.get("BRADESCO_CERT_PASSWORD")

    data = _read_file(credential_path, "Credential")
    if credential_path.suffix.lower() in PKCS12_SUFFIXES:
        credential = Credential.from_pkcs12(data, password)
    else:
        cert_pem = _read_file(Path(cert_path), "Certificate") if cert_path is not None else None
        credential = Credential.from_pem(data, cert_pem=cert_pem, password=password)

    logger.debug("Loaded credential from %s (subject=%s)", credential_path, credential.subject)
    return credential
