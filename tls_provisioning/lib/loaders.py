"""Load PEM certificates and RSA private keys from disk."""

from pathlib import Path

from cryptography import x509
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from .errors import CertificateIOError, DecryptionError, FormatError
from .pem_decoder import CERTIFICATE, KEY_BLOCK_TYPES, decode_pem, decrypt_private_key


def read_file(path: str | Path) -> bytes:
    """Read a whole file, releasing the handle before returning."""
    try:
        with open(path, "rb") as handle:
            return handle.read()
    except OSError as exc:
        raise CertificateIOError(path, exc.strerror or str(exc)) from exc


def load_certificate_from_file(path: str | Path) -> x509.Certificate:
    """Load an X.509 certificate from a PEM file.

    Args:
        path: File holding a CERTIFICATE block

    Returns:
        Parsed certificate; its DER encoding equals the block payload

    Raises:
        CertificateIOError: File missing or unreadable
        FormatError: No CERTIFICATE block, encrypted block, or malformed DER
    """
    data = read_file(path)
    try:
        block = decode_pem(data, expected_types={CERTIFICATE})
        if block.encrypted:
            raise FormatError("certificate block is encrypted")
        return x509.load_der_x509_certificate(block.der)
    except FormatError as exc:
        raise FormatError(str(exc), path=path) from exc
    except ValueError as exc:
        raise FormatError(f"malformed certificate: {exc}", path=path) from exc


def load_key_from_file(path: str | Path, passphrase: str | bytes = "") -> RSAPrivateKey:
    """Load an RSA private key from a PEM file, decrypting it when needed.

    Accepts legacy "RSA PRIVATE KEY" blocks (cleartext or Proc-Type encrypted)
    and PKCS#8 "PRIVATE KEY" / "ENCRYPTED PRIVATE KEY" blocks. The passphrase
    is ignored for cleartext blocks.

    Raises:
        CertificateIOError: File missing or unreadable
        FormatError: No key block, malformed key data, or not an RSA key
        DecryptionError: Passphrase missing or wrong
    """
    data = read_file(path)
    try:
        block = decode_pem(data, expected_types=KEY_BLOCK_TYPES)
        key = decrypt_private_key(block, passphrase)
    except (FormatError, DecryptionError) as exc:
        raise type(exc)(str(exc), path=path) from exc

    if not isinstance(key, RSAPrivateKey):
        raise FormatError(f"expected RSA private key, got {type(key).__name__}", path=path)
    return key
