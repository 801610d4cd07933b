"""PEM block framing, type checks and private key decryption."""

import base64
import binascii
import re
from dataclasses import dataclass, field

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.types import PrivateKeyTypes

from .errors import DecryptionError, FormatError

CERTIFICATE = "CERTIFICATE"
RSA_PRIVATE_KEY = "RSA PRIVATE KEY"
PRIVATE_KEY = "PRIVATE KEY"
ENCRYPTED_PRIVATE_KEY = "ENCRYPTED PRIVATE KEY"

KNOWN_BLOCK_TYPES = frozenset({CERTIFICATE, RSA_PRIVATE_KEY, PRIVATE_KEY, ENCRYPTED_PRIVATE_KEY})
KEY_BLOCK_TYPES = frozenset({RSA_PRIVATE_KEY, PRIVATE_KEY, ENCRYPTED_PRIVATE_KEY})

_BEGIN_RE = re.compile(rb"-----BEGIN ([^\r\n-]+)-----")


@dataclass
class PemBlock:
    """A single PEM block located in a larger buffer.

    der is the base64-decoded payload exactly as stored, so it is ciphertext
    when encrypted is set. pem holds the block text from BEGIN to END marker,
    which is what cryptography's PEM loaders expect.
    """

    type: str
    der: bytes
    pem: bytes
    headers: dict[str, str] = field(default_factory=dict)
    encrypted: bool = False


def _split_block(data: bytes) -> tuple[str, list[str], bytes]:
    """Locate the first PEM block and return its type, inner lines and full text."""
    begin = _BEGIN_RE.search(data)
    if begin is None:
        raise FormatError("no PEM block found")

    block_type = begin.group(1).decode("ascii", errors="replace").strip()
    end_marker = f"-----END {block_type}-----".encode("ascii", errors="replace")
    end = data.find(end_marker, begin.end())
    if end == -1:
        raise FormatError(f"PEM block {block_type!r} has no matching END marker")

    try:
        inner = data[begin.end() : end].decode("ascii")
    except UnicodeDecodeError as exc:
        raise FormatError(f"PEM block {block_type!r} contains non-ASCII data") from exc

    pem = data[begin.start() : end + len(end_marker)] + b"\n"
    return block_type, inner.splitlines(), pem


def _parse_headers(lines: list[str]) -> tuple[dict[str, str], list[str]]:
    """Split RFC 1421 headers from the base64 body."""
    lines = [line.strip() for line in lines]
    while lines and not lines[0]:
        lines.pop(0)

    headers: dict[str, str] = {}
    if not lines or ":" not in lines[0]:
        return headers, lines

    index = 0
    while index < len(lines) and lines[index]:
        name, sep, value = lines[index].partition(":")
        if not sep:
            raise FormatError(f"malformed PEM header line {lines[index]!r}")
        headers[name.strip()] = value.strip()
        index += 1

    return headers, lines[index:]


def decode_pem(data: bytes, expected_types: frozenset[str] | set[str] | None = None) -> PemBlock:
    """Decode the first PEM block in data.

    Only framing is checked here; encrypted key blocks are opened with
    decrypt_private_key.

    Args:
        data: Raw PEM bytes, possibly with leading text before the block
        expected_types: Block types the caller accepts (defaults to every known type)

    Returns:
        PemBlock with the stored payload and the block text

    Raises:
        FormatError: No block, unknown or unexpected type, or malformed encoding
    """
    block_type, lines, pem = _split_block(data)
    allowed = KNOWN_BLOCK_TYPES if expected_types is None else expected_types
    if block_type not in allowed:
        raise FormatError(f"unexpected PEM block type {block_type!r}")

    headers, body_lines = _parse_headers(lines)
    try:
        body = base64.b64decode("".join(body_lines), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise FormatError(f"PEM block {block_type!r} has invalid base64 body") from exc

    encrypted = (
        block_type == ENCRYPTED_PRIVATE_KEY
        or headers.get("Proc-Type", "").replace(" ", "") == "4,ENCRYPTED"
    )
    return PemBlock(type=block_type, der=body, pem=pem, headers=headers, encrypted=encrypted)


def decrypt_private_key(block: PemBlock, passphrase: str | bytes = "") -> PrivateKeyTypes:
    """Parse a key block, decrypting it with passphrase when it is encrypted.

    The passphrase is ignored for cleartext blocks.

    Raises:
        DecryptionError: Passphrase missing or wrong for an encrypted block
        FormatError: Malformed key data or unsupported encryption
    """
    if isinstance(passphrase, str):
        passphrase = passphrase.encode("utf-8")
    if block.encrypted and not passphrase:
        raise DecryptionError(f"{block.type} block is encrypted and no passphrase was given")

    try:
        return serialization.load_pem_private_key(
            block.pem, password=passphrase if block.encrypted else None
        )
    except TypeError as exc:
        # cryptography disagrees with the block headers about encryption
        raise DecryptionError(str(exc)) from exc
    except ValueError as exc:
        if block.encrypted:
            raise DecryptionError("incorrect passphrase") from exc
        raise FormatError(f"malformed private key: {exc}") from exc
    except UnsupportedAlgorithm as exc:
        raise FormatError(f"unsupported key encryption: {exc}") from exc
