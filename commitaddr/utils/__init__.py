from __future__ import annotations

"""
commitaddr.utils
================

Portable primitives shared by the codec modules: digest wrappers and hex
helpers. Consensus-style encodings (versioned payloads, checksums, scripts)
live in the sibling modules of `commitaddr`, not here.
"""

from .hash import (
    RIPEMD160_LEN,
    SHA256_LEN,
    double_sha256,
    from_hex,
    hash160,
    ripemd160,
    sha256,
    to_hex,
)

__all__ = [
    # hashing
    "sha256", "double_sha256", "ripemd160", "hash160",
    "SHA256_LEN", "RIPEMD160_LEN",
    # hex
    "to_hex", "from_hex",
]
