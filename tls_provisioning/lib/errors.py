"""Error taxonomy for certificate and key provisioning."""

from pathlib import Path


class ProvisioningError(Exception):
    """Base class for every provisioning failure."""


class CertificateIOError(ProvisioningError, OSError):
    """File missing or unreadable."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(f"cannot read {self.path}: {reason}")


class FormatError(ProvisioningError):
    """PEM or DER data is malformed, or holds an unexpected block type."""

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        self.path = str(path) if path is not None else None
        if self.path is not None:
            message = f"{self.path}: {message}"
        super().__init__(message)


class DecryptionError(ProvisioningError):
    """Wrong or missing passphrase for an encrypted private key."""

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        self.path = str(path) if path is not None else None
        if self.path is not None:
            message = f"{self.path}: {message}"
        super().__init__(message)


class CryptoError(ProvisioningError):
    """Key generation or certificate signing failed."""


class ConfigurationError(ProvisioningError):
    """Invalid combination of provisioning settings."""


class KeyMismatchError(ConfigurationError):
    """Certificate public key does not belong to the supplied private key."""
