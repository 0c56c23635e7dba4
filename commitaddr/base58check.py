from __future__ import annotations

"""
base58check.py — versioned, checksummed identifiers

Format
------
identifier = base58( version(1) || content(20) || checksum(4) )
checksum   = double_sha256(version || content)[0:4]

- `version` is a closed set (see `Version`): 0x00 for hash payloads, 0x05 for
  script-hash payloads.
- Base-58 treats the 25 bytes as one big-endian integer over the Bitcoin
  alphabet; every leading zero byte maps to exactly one leading '1'. Version
  0x00 identifiers therefore always start with '1'.

Examples
--------
>>> encode_check(Version.PUBKEY_HASH, bytes(20))
'1111111111111111111114oLvT2'
>>> decode_check('1111111111111111111114oLvT2').content == bytes(20)
True

Decoding order is: length cap (MalformedIdentifier) → alphabet (InvalidEncoding)
→ size (MalformedIdentifier) → checksum (ChecksumMismatch) → version byte (MalformedIdentifier).
"""

from dataclasses import dataclass
from enum import IntEnum

import base58

from .errors import ChecksumMismatch, InvalidEncoding, MalformedIdentifier
from .utils.hash import double_sha256

ALPHABET = base58.BITCOIN_ALPHABET.decode("ascii")
_ALPHABET_SET = frozenset(ALPHABET)

CONTENT_LEN = 20
CHECKSUM_LEN = 4
ENVELOPE_LEN = 1 + CONTENT_LEN + CHECKSUM_LEN  # 25
# 58**35 > 256**25: no 25-byte envelope encodes to more characters.
MAX_IDENTIFIER_LEN = 35


class Version(IntEnum):
    PUBKEY_HASH = 0x00
    SCRIPT_HASH = 0x05


_VERSIONS = frozenset(int(v) for v in Version)


@dataclass(frozen=True)
class Envelope:
    version: int
    content: bytes  # 20 bytes
    checksum: bytes  # 4 bytes as found in the identifier

    @property
    def versioned(self) -> bytes:
        return bytes((self.version,)) + self.content

    def to_string(self) -> str:
        """Re-encode with a freshly computed checksum."""
        return encode_check(self.version, self.content)


# ---------------------------------------------------------------------------
# Base-58
# ---------------------------------------------------------------------------


def b58encode(data: bytes) -> str:
    """Base-58 encode `data`, preserving leading zero bytes as '1'."""
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError("b58encode expects bytes-like input")
    return base58.b58encode(bytes(data)).decode("ascii")


def b58decode(s: str) -> bytes:
    """
    Base-58 decode `s`. Raises InvalidEncoding for any character outside the
    alphabet, including whitespace (which the underlying library would strip).
    """
    if not isinstance(s, str):
        raise InvalidEncoding("identifier must be a string", type=type(s).__name__)
    bad = [c for c in s if c not in _ALPHABET_SET]
    if bad:
        raise InvalidEncoding(
            f"character {bad[0]!r} is not in the base-58 alphabet",
            position=s.index(bad[0]),
        )
    try:
        return base58.b58decode(s)
    except ValueError as e:
        raise InvalidEncoding(f"base-58 decode failed: {e}") from e


# ---------------------------------------------------------------------------
# Checksummed envelope
# ---------------------------------------------------------------------------


def checksum(versioned: bytes) -> bytes:
    """First four bytes of double_sha256(versioned)."""
    return double_sha256(versioned)[:CHECKSUM_LEN]


def encode_check(version: int, content: bytes) -> str:
    """
    Build `version || content || checksum` and base-58 encode it.
    """
    try:
        v = Version(version)
    except ValueError:
        raise ValueError(f"unsupported version byte 0x{int(version):02x}") from None
    if not isinstance(content, (bytes, bytearray, memoryview)):
        raise TypeError("content must be bytes-like")
    content = bytes(content)
    if len(content) != CONTENT_LEN:
        raise ValueError(f"content must be {CONTENT_LEN} bytes, got {len(content)}")
    versioned = bytes((int(v),)) + content
    return b58encode(versioned + checksum(versioned))


def decode_check(identifier: str, *, verify_checksum: bool = True) -> Envelope:
    """
    Parse an identifier back to its envelope. Raises a CommitError subclass on
    failure.

    Args:
      identifier: base-58 string, e.g. '3...' or '1...'
      verify_checksum: recompute and compare the checksum (default). Passing
        False reproduces the legacy lenient decoder that only extracts bytes.
    """
    if isinstance(identifier, str) and len(identifier) > MAX_IDENTIFIER_LEN:
        raise MalformedIdentifier(
            f"identifier is {len(identifier)} characters; at most {MAX_IDENTIFIER_LEN} allowed",
            length=len(identifier),
        )
    full = b58decode(identifier)
    if len(full) < ENVELOPE_LEN:
        raise MalformedIdentifier(
            f"decoded identifier is {len(full)} bytes; need {ENVELOPE_LEN}",
            size=len(full),
        )
    if len(full) > ENVELOPE_LEN:
        raise MalformedIdentifier(
            f"decoded identifier is {len(full)} bytes; expected exactly {ENVELOPE_LEN}",
            size=len(full),
        )

    versioned, supplied = full[: 1 + CONTENT_LEN], full[1 + CONTENT_LEN :]
    if verify_checksum:
        expected = checksum(versioned)
        if expected != supplied:
            raise ChecksumMismatch(expected=expected, got=supplied)

    version = versioned[0]
    if version not in _VERSIONS:
        raise MalformedIdentifier(f"unknown version byte 0x{version:02x}", version=version)

    return Envelope(version=version, content=versioned[1:], checksum=supplied)


def is_valid(identifier: str) -> bool:
    """True if `identifier` decodes to a well-formed envelope with a good checksum."""
    try:
        decode_check(identifier)
    except (InvalidEncoding, MalformedIdentifier, ChecksumMismatch):
        return False
    return True


# ---------------------------------------------------------------------------
# Pretty helpers
# ---------------------------------------------------------------------------


def short(identifier: str, *, keep: int = 6) -> str:
    """
    Render a short identifier like 3J98t1…WNLy (useful in logs/UI).
    """
    if len(identifier) <= 2 * keep + 3:
        return identifier
    return f"{identifier[:keep]}…{identifier[-keep:]}"


__all__ = [
    "ALPHABET",
    "CONTENT_LEN",
    "CHECKSUM_LEN",
    "ENVELOPE_LEN",
    "MAX_IDENTIFIER_LEN",
    "Version",
    "Envelope",
    "b58encode",
    "b58decode",
    "checksum",
    "encode_check",
    "decode_check",
    "is_valid",
    "short",
]
