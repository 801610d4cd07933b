"""Certificate template and provisioning defaults."""

import ipaddress
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from cryptography import x509
from cryptography.x509 import oid

from .errors import ConfigurationError


@dataclass
class ProvisioningDefaults:
    """Defaults applied when a listener asks for a self-signed certificate."""

    country: str = "US"
    state: str = "Indiana"
    locality: str = "Indianapolis"
    organization: str = "Proxy Operations"
    organizational_unit: str = ""
    email: str = ""
    validity_days: int = 1825


@dataclass(frozen=True)
class DistinguishedName:
    """X.509 Subject Distinguished Name."""

    common_name: str
    organization: str = ""
    organizational_unit: str = ""
    locality: str = ""
    state: str = ""
    country: str = ""
    email: str = ""

    def to_x509_name(self) -> x509.Name:
        """Convert to cryptography x509.Name, skipping blank attributes."""
        pairs = [
            (oid.NameOID.COMMON_NAME, self.common_name),
            (oid.NameOID.ORGANIZATION_NAME, self.organization),
            (oid.NameOID.ORGANIZATIONAL_UNIT_NAME, self.organizational_unit),
            (oid.NameOID.LOCALITY_NAME, self.locality),
            (oid.NameOID.STATE_OR_PROVINCE_NAME, self.state),
            (oid.NameOID.COUNTRY_NAME, self.country),
            (oid.NameOID.EMAIL_ADDRESS, self.email),
        ]
        return x509.Name([x509.NameAttribute(name_oid, value) for name_oid, value in pairs if value])


@dataclass(frozen=True)
class KeyUsageFlags:
    """KeyUsage bits for a generated certificate (TLS server defaults)."""

    digital_signature: bool = True
    key_encipherment: bool = True
    key_cert_sign: bool = False
    crl_sign: bool = False

    def to_x509(self) -> x509.KeyUsage:
        return x509.KeyUsage(
            digital_signature=self.digital_signature,
            content_commitment=False,
            key_encipherment=self.key_encipherment,
            data_encipherment=False,
            key_agreement=False,
            key_cert_sign=self.key_cert_sign,
            crl_sign=self.crl_sign,
            encipher_only=False,
            decipher_only=False,
        )


@dataclass(frozen=True)
class CertTemplate:
    """Metadata for a self-signed certificate.

    Validity bounds must be timezone-aware. serial_number applies when
    self-signing a loaded key; None draws a fresh serial per certificate, and
    CertificateBuilder.generate always draws a fresh one.
    """

    subject: DistinguishedName
    not_before: datetime
    not_after: datetime
    serial_number: int | None = None
    key_usage: KeyUsageFlags = field(default_factory=KeyUsageFlags)
    is_ca: bool = False
    dns_names: tuple[str, ...] = ()
    ip_addresses: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        for name in ("not_before", "not_after"):
            value = getattr(self, name)
            if value.tzinfo is None or value.utcoffset() is None:
                raise ConfigurationError(f"certificate {name} must be timezone-aware, got {value}")

    @classmethod
    def from_defaults(
        cls,
        common_name: str,
        defaults: ProvisioningDefaults | None = None,
        dns_names: tuple[str, ...] = (),
        ip_addresses: tuple[str, ...] = (),
    ) -> "CertTemplate":
        """Build a template valid from now for defaults.validity_days."""
        defaults = defaults or ProvisioningDefaults()
        not_before = datetime.now(UTC)
        return cls(
            subject=DistinguishedName(
                common_name=common_name,
                organization=defaults.organization,
                organizational_unit=defaults.organizational_unit,
                locality=defaults.locality,
                state=defaults.state,
                country=defaults.country,
                email=defaults.email,
            ),
            not_before=not_before,
            not_after=not_before + timedelta(days=defaults.validity_days),
            dns_names=tuple(dns_names),
            ip_addresses=tuple(ip_addresses),
        )

    def subject_alternative_names(self) -> list[x509.GeneralName]:
        names: list[x509.GeneralName] = [x509.DNSName(name) for name in self.dns_names]
        names.extend(x509.IPAddress(ipaddress.ip_address(ip)) for ip in self.ip_addresses)
        return names
