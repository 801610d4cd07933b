"""Provisioning strategies and results."""

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from cryptography import x509
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from .config import CertTemplate
from .errors import ConfigurationError


@dataclass(frozen=True)
class LoadPair:
    """Load certificate and private key from two PEM files.

    verify_pair=False skips the public key comparison and returns whatever
    the files hold.
    """

    cert_path: Path
    key_path: Path
    passphrase: str = ""
    verify_pair: bool = True

    def __post_init__(self) -> None:
        if not self.cert_path or not self.key_path:
            raise ConfigurationError("LoadPair requires both a certificate and a key path")


@dataclass(frozen=True)
class LoadKey:
    """Load a private key and self-sign a certificate around it."""

    key_path: Path
    template: CertTemplate
    passphrase: str = ""

    def __post_init__(self) -> None:
        if not self.key_path:
            raise ConfigurationError("LoadKey requires a key path")
        if self.template is None:
            raise ConfigurationError(
                f"key file {self.key_path} has no certificate file and no template to build one"
            )


@dataclass(frozen=True)
class GenerateSelfSigned:
    """Generate a fresh key pair and a self-signed certificate."""

    template: CertTemplate
    key_size: int = 2048

    def __post_init__(self) -> None:
        if self.template is None:
            raise ConfigurationError("GenerateSelfSigned requires a certificate template")


CertSetup = LoadPair | LoadKey | GenerateSelfSigned


@dataclass(frozen=True)
class CertAndKeyResult:
    """Certificate and key ready for a TLS listener.

    Unpacks as (certificate, private_key); source names the strategy that
    produced them and is not part of the unpacked pair.
    """

    certificate: x509.Certificate
    private_key: RSAPrivateKey
    source: str

    def __iter__(self) -> Iterator[x509.Certificate | RSAPrivateKey]:
        return iter((self.certificate, self.private_key))


def cert_setup_from_files(
    cert_file: str | Path | None = None,
    key_file: str | Path | None = None,
    passphrase: str = "",
    template: CertTemplate | None = None,
) -> CertSetup:
    """Map flat listener settings onto a provisioning strategy.

    Args:
        cert_file: Optional certificate PEM path
        key_file: Optional private key PEM path
        passphrase: Key passphrase; empty means cleartext key
        template: Certificate metadata used when a certificate must be built

    Returns:
        LoadPair, LoadKey or GenerateSelfSigned

    Raises:
        ConfigurationError: Certificate without key, key without template,
            or nothing to load or generate
    """
    if cert_file and key_file:
        return LoadPair(cert_path=Path(cert_file), key_path=Path(key_file), passphrase=passphrase)
    if cert_file:
        raise ConfigurationError(
            f"certificate file {cert_file} was given without a key file; a TLS listener needs both"
        )
    if key_file:
        return LoadKey(key_path=Path(key_file), template=template, passphrase=passphrase)
    if template is None:
        raise ConfigurationError("no certificate/key files and no template to generate from")
    return GenerateSelfSigned(template=template)
