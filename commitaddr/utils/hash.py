from __future__ import annotations

"""
commitaddr utils — hashing helpers
==================================

Thin wrappers around the digest primitives used by the commitment codec:

- SHA-256 and double SHA-256   (stdlib `hashlib`)
- RIPEMD-160                   (`pycryptodome`; OpenSSL 3 builds of hashlib
                                often ship without it)
- HASH160 = RIPEMD-160(SHA-256(x))
- Hex helpers                  (`to_hex`, `from_hex`) with 0x-prefix handling

Every function accepts any bytes-like value (including empty input) and
returns a fresh `bytes` object. Non bytes-like input raises TypeError.
"""

import binascii
import hashlib

from Crypto.Hash import RIPEMD160

SHA256_LEN = 32
RIPEMD160_LEN = 20

# ---------------------------------------------------------------------------
# Hex helpers
# ---------------------------------------------------------------------------


def to_hex(b: bytes, prefix: str = "") -> str:
    """
    Convert bytes to a lower-case hex string with an optional prefix.
    """
    if not isinstance(b, (bytes, bytearray, memoryview)):
        raise TypeError("to_hex expects bytes-like input")
    return (prefix or "") + binascii.hexlify(bytes(b)).decode("ascii")


def from_hex(s: str | bytes | bytearray | memoryview) -> bytes:
    """
    Parse hex into bytes. Accepts strings with/without 0x prefix and ignores
    leading/trailing whitespace and underscores.
    """
    if isinstance(s, (bytes, bytearray, memoryview)):
        s = bytes(s).decode("ascii")
    if not isinstance(s, str):
        raise TypeError("from_hex expects str or bytes-like input")

    s = s.strip().lower().replace("_", "")
    if s.startswith("0x"):
        s = s[2:]
    if len(s) % 2:
        s = "0" + s
    try:
        return binascii.unhexlify(s)
    except binascii.Error as e:
        raise ValueError(f"invalid hex string: {e}") from e


# ---------------------------------------------------------------------------
# Digests
# ---------------------------------------------------------------------------


def _check(data: object, name: str) -> bytes:
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(f"{name} expects bytes-like input")
    return bytes(data)


def sha256(data: bytes | bytearray | memoryview) -> bytes:
    """SHA-256 digest of `data` (32 bytes)."""
    return hashlib.sha256(_check(data, "sha256")).digest()


def double_sha256(data: bytes | bytearray | memoryview) -> bytes:
    """SHA-256 applied to its own output: sha256(sha256(data))."""
    return hashlib.sha256(sha256(_check(data, "double_sha256"))).digest()


def ripemd160(data: bytes | bytearray | memoryview) -> bytes:
    """RIPEMD-160 digest of `data` (20 bytes)."""
    return RIPEMD160.new(_check(data, "ripemd160")).digest()


def hash160(data: bytes | bytearray | memoryview) -> bytes:
    """RIPEMD-160 over SHA-256; the hash used by script-hash envelopes."""
    return ripemd160(sha256(_check(data, "hash160")))
