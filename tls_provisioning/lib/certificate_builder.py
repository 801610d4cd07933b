"""Certificate builder for self-signed X.509 listener certificates."""

from collections.abc import Callable
from dataclasses import replace

from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey
from cryptography.x509.oid import ExtendedKeyUsageOID

from .cert_utils import generate_private_key, generate_serial_number
from .config import CertTemplate
from .errors import ConfigurationError, CryptoError


class CertificateBuilder:
    """Builds self-signed X.509 certificates for TLS listeners.

    Randomness is injected: key_factory(key_size) returns a new RSA key and
    serial_factory() returns a positive serial. The defaults draw from the
    OpenSSL CSPRNG and UUID4, both safe for concurrent callers.
    """

    def __init__(
        self,
        key_factory: Callable[[int], RSAPrivateKey] = generate_private_key,
        serial_factory: Callable[[], int] = generate_serial_number,
    ) -> None:
        self.key_factory = key_factory
        self.serial_factory = serial_factory

    def generate(
        self, template: CertTemplate, key_size: int = 2048
    ) -> tuple[x509.Certificate, RSAPrivateKey]:
        """Generate a new key pair and a certificate self-signed with it.

        Every call draws a fresh serial from serial_factory, even when the
        template carries an explicit serial_number.

        Args:
            template: Subject, validity and key usage
            key_size: RSA modulus size in bits

        Returns:
            Tuple of (certificate, private_key)

        Raises:
            CryptoError: Key generation or signing failed
            ConfigurationError: Template validity window is empty
        """
        try:
            private_key = self.key_factory(key_size)
        except (ValueError, TypeError) as exc:
            raise CryptoError(f"RSA key generation failed ({key_size} bits): {exc}") from exc

        return self.self_sign(replace(template, serial_number=None), private_key), private_key

    def self_sign(self, template: CertTemplate, private_key: RSAPrivateKey) -> x509.Certificate:
        """Build a certificate for private_key's public half, signed by private_key."""
        if template.not_after <= template.not_before:
            raise ConfigurationError(
                f"certificate validity window is empty: {template.not_before} >= {template.not_after}"
            )

        subject = template.subject.to_x509_name()
        public_key = private_key.public_key()
        serial_number = (
            template.serial_number if template.serial_number is not None else self.serial_factory()
        )

        try:
            builder = (
                x509.CertificateBuilder()
                .subject_name(subject)
                .issuer_name(subject)
                .public_key(public_key)
                .serial_number(serial_number)
                .not_valid_before(template.not_before)
                .not_valid_after(template.not_after)
                .add_extension(
                    x509.BasicConstraints(ca=template.is_ca, path_length=None),
                    critical=True,
                )
                .add_extension(template.key_usage.to_x509(), critical=True)
                .add_extension(
                    x509.ExtendedKeyUsage([ExtendedKeyUsageOID.SERVER_AUTH]),
                    critical=False,
                )
                .add_extension(
                    x509.SubjectKeyIdentifier.from_public_key(public_key),
                    critical=False,
                )
            )

            alt_names = template.subject_alternative_names()
            if alt_names:
                builder = builder.add_extension(
                    x509.SubjectAlternativeName(alt_names), critical=False
                )

            return builder.sign(private_key, hashes.SHA256())
        except (ValueError, TypeError) as exc:
            raise CryptoError(f"certificate signing failed: {exc}") from exc
