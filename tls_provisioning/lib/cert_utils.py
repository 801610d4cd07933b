"""Certificate utility functions for key generation, serialization, and key matching."""

import uuid

from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey


def generate_private_key(key_size: int = 2048, public_exponent: int = 65537) -> RSAPrivateKey:
    """Generate RSA private key from the OpenSSL CSPRNG."""
    return rsa.generate_private_key(
        public_exponent=public_exponent,
        key_size=key_size,
    )


def serialize_private_key(key: RSAPrivateKey, passphrase: str | bytes = "") -> bytes:
    """Serialize private key to a legacy PEM "RSA PRIVATE KEY" block.

    With a passphrase the block carries Proc-Type/DEK-Info headers and is
    encrypted with AES-256-CBC, the format OpenSSL writes for `openssl rsa -aes256`.
    """
    if isinstance(passphrase, str):
        passphrase = passphrase.encode("utf-8")

    encryption: serialization.KeySerializationEncryption
    if passphrase:
        encryption = serialization.BestAvailableEncryption(passphrase)
    else:
        encryption = serialization.NoEncryption()

    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=encryption,
    )


def serialize_certificate(cert: x509.Certificate) -> bytes:
    """Serialize certificate to PEM format."""
    return cert.public_bytes(serialization.Encoding.PEM)


def certificate_der(cert: x509.Certificate) -> bytes:
    """Return the raw DER encoding of a certificate."""
    return cert.public_bytes(serialization.Encoding.DER)


def generate_serial_number() -> int:
    """Generate certificate serial number from UUID4.

    UUID v4 carries 122 random bits, well above the 64-bit CSPRNG minimum
    for serials, so collisions within a process are not a practical concern.
    """
    return uuid.uuid4().int


def get_certificate_serial_hex(cert: x509.Certificate) -> str:
    """Return certificate serial number as hex with colons (e.g., 3A:F2:B1:...)."""
    serial_hex = f"{cert.serial_number:X}"
    if len(serial_hex) % 2 != 0:
        serial_hex = "0" + serial_hex
    return ":".join(serial_hex[i : i + 2] for i in range(0, len(serial_hex), 2))


def public_keys_match(cert: x509.Certificate, key: RSAPrivateKey) -> bool:
    """Return True when the certificate embeds the public half of key."""
    cert_public_key = cert.public_key()
    if not isinstance(cert_public_key, rsa.RSAPublicKey):
        return False
    return cert_public_key.public_numbers() == key.public_key().public_numbers()
