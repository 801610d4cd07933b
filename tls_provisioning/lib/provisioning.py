"""Resolve a provisioning strategy into a certificate and private key."""

from .cert_utils import get_certificate_serial_hex, public_keys_match
from .certificate_builder import CertificateBuilder
from .errors import ConfigurationError, KeyMismatchError
from .loaders import load_certificate_from_file, load_key_from_file
from .logging_config import LOGGER
from .models import CertAndKeyResult, CertSetup, GenerateSelfSigned, LoadKey, LoadPair


def _load_pair(setup: LoadPair) -> CertAndKeyResult:
    certificate = load_certificate_from_file(setup.cert_path)
    private_key = load_key_from_file(setup.key_path, setup.passphrase)

    if setup.verify_pair and not public_keys_match(certificate, private_key):
        raise KeyMismatchError(
            f"private key {setup.key_path} does not match certificate {setup.cert_path}"
        )
    if not setup.verify_pair:
        LOGGER.warning("Pair from %s and %s returned without key check", setup.cert_path, setup.key_path)

    return CertAndKeyResult(certificate, private_key, source="load_pair")


def _load_key(setup: LoadKey, builder: CertificateBuilder) -> CertAndKeyResult:
    private_key = load_key_from_file(setup.key_path, setup.passphrase)
    certificate = builder.self_sign(setup.template, private_key)
    return CertAndKeyResult(certificate, private_key, source="load_key")


def _generate(setup: GenerateSelfSigned, builder: CertificateBuilder) -> CertAndKeyResult:
    certificate, private_key = builder.generate(setup.template, key_size=setup.key_size)
    return CertAndKeyResult(certificate, private_key, source="generate")


def cert_and_key(setup: CertSetup, builder: CertificateBuilder | None = None) -> CertAndKeyResult:
    """Produce the certificate and private key a TLS listener should present.

    Args:
        setup: LoadPair, LoadKey or GenerateSelfSigned strategy
        builder: Certificate builder carrying the randomness sources (default: CSPRNG-backed)

    Returns:
        CertAndKeyResult; unpacks as (certificate, private_key)

    Raises:
        CertificateIOError: A configured file is missing or unreadable
        FormatError: A file does not hold the expected PEM/DER data
        DecryptionError: Key passphrase missing or wrong
        CryptoError: Key generation or signing failed
        ConfigurationError: Unknown strategy, or KeyMismatchError for a mismatched pair
    """
    builder = builder or CertificateBuilder()

    if isinstance(setup, LoadPair):
        LOGGER.info("Loading certificate %s and key %s", setup.cert_path, setup.key_path)
        result = _load_pair(setup)
    elif isinstance(setup, LoadKey):
        LOGGER.info("Loading key %s and self-signing certificate", setup.key_path)
        result = _load_key(setup, builder)
    elif isinstance(setup, GenerateSelfSigned):
        LOGGER.info("Generating %d-bit key and self-signed certificate", setup.key_size)
        result = _generate(setup, builder)
    else:
        raise ConfigurationError(f"unsupported certificate setup {type(setup).__name__}")

    LOGGER.info(
        "Certificate ready: subject=%s serial=%s",
        result.certificate.subject.rfc4514_string(),
        get_certificate_serial_hex(result.certificate),
    )
    return result
