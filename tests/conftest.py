from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.hazmat.primitives.serialization import pkcs12
from cryptography.x509.oid import NameOID

from bradesco_auth.credential import Credential

PFX_PASSWORD = "secret"
FIXED_NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _self_signed(key: rsa.RSAPrivateKey, common_name: str) -> x509.Certificate:
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    now = datetime.now(timezone.utc)
    return (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(minutes=5))
        .not_valid_after(now + timedelta(days=30))
        .sign(private_key=key, algorithm=hashes.SHA256())
    )


@pytest.fixture(scope="session")
def rsa_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def certificate(rsa_key: rsa.RSAPrivateKey) -> x509.Certificate:
    return _self_signed(rsa_key, "EMPRESA TESTE LTDA:12345678000199")


@pytest.fixture(scope="session")
def credential(rsa_key: rsa.RSAPrivateKey, certificate: x509.Certificate) -> Credential:
    return Credential(private_key=rsa_key, certificate=certificate)


@pytest.fixture(scope="session")
def other_credential() -> Credential:
    return Credential.from_private_key(rsa.generate_private_key(public_exponent=65537, key_size=2048))


@pytest.fixture(scope="session")
def small_key_credential() -> Credential:
    return Credential.from_private_key(rsa.generate_private_key(public_exponent=65537, key_size=1024))


@pytest.fixture(scope="session")
def ec_credential() -> Credential:
    return Credential.from_private_key(ec.generate_private_key(ec.SECP256R1()))


@pytest.fixture(scope="session")
def certificate_only_credential(certificate: x509.Certificate) -> Credential:
    return Credential(private_key=None, certificate=certificate)


@pytest.fixture(scope="session")
def pfx_bytes(rsa_key: rsa.RSAPrivateKey, certificate: x509.Certificate) -> bytes:
    return pkcs12.serialize_key_and_certificates(
        name=b"bradesco-client",
        key=rsa_key,
        cert=certificate,
        cas=None,
        encryption_algorithm=serialization.BestAvailableEncryption(PFX_PASSWORD.encode("utf-8")),
    )


@pytest.fixture
def pfx_path(tmp_path, pfx_bytes: bytes):
    path = tmp_path / "client.pfx"
    path.write_bytes(pfx_bytes)
    return path


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW
