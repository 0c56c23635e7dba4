"""
commitaddr.script — data-carrying OP_RETURN scripts
---------------------------------------------------

A data script is the smallest provably non-executable script:

    script = OP_RETURN(0x6a) || len(data) (1 byte) || data

`OP_RETURN` terminates script evaluation with failure, so any output locked
to this script (or to its hash) can never be spent. The single length byte
bounds `data` to 255 bytes; larger data is rejected with `PayloadTooLarge`
rather than truncated.

The commitment variant embeds `marker || sha256(input)`; with the default
12-byte marker this is always 44 bytes.
"""

from __future__ import annotations

from .errors import PayloadTooLarge

OP_RETURN = 0x6A
MAX_PUSH_LEN = 0xFF
DEFAULT_MARKER = b"UNSPENDABLE:"


class MalformedScript(ValueError):
    """Raised when bytes do not form a single-push OP_RETURN script."""


def build_data_script(data: bytes) -> bytes:
    """
    Build `OP_RETURN || len || data`. Raises PayloadTooLarge if `data` does not
    fit the single length byte.
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError("data must be bytes-like")
    data = bytes(data)
    if len(data) > MAX_PUSH_LEN:
        raise PayloadTooLarge(len(data), MAX_PUSH_LEN)
    return bytes((OP_RETURN, len(data))) + data


def parse_data_script(script: bytes) -> bytes:
    """Inverse of `build_data_script`; returns the embedded data."""
    script = bytes(script)
    if len(script) < 2:
        raise MalformedScript("script too short")
    if script[0] != OP_RETURN:
        raise MalformedScript(f"script must start with OP_RETURN, got 0x{script[0]:02x}")
    n = script[1]
    if len(script) != 2 + n:
        raise MalformedScript(f"push length {n} does not match script body {len(script) - 2}")
    return script[2:]


def commitment_data(digest: bytes, marker: bytes = DEFAULT_MARKER) -> bytes:
    """The bytes embedded in a commitment script: marker followed by the digest."""
    return bytes(marker) + bytes(digest)


def commitment_script(digest: bytes, marker: bytes = DEFAULT_MARKER) -> bytes:
    return build_data_script(commitment_data(digest, marker))


def is_unspendable(script: bytes) -> bool:
    """True if `script` starts with OP_RETURN (evaluation halts immediately)."""
    return len(script) > 0 and script[0] == OP_RETURN


__all__ = [
    "OP_RETURN",
    "MAX_PUSH_LEN",
    "DEFAULT_MARKER",
    "MalformedScript",
    "build_data_script",
    "parse_data_script",
    "commitment_data",
    "commitment_script",
    "is_unspendable",
]
