"""
commitaddr — provably unspendable commitment identifiers
========================================================

Turn any input (text or bytes) into a short, checksummed, base-58 identifier
that publicly commits to that input without revealing it, and that can never
authorize spending of value.

Variants
--------
- **script** (default): SHA-256 of the input is embedded in an OP_RETURN data
  script; the identifier is the script-hash envelope (version 0x05) of that
  script. Unspendability follows from the protocol rules.
- **hash-only**: the first 20 bytes of SHA-256 of the input in a
  pay-to-pubkey-hash envelope (version 0x00). Unspendability is conventional.

Quick use:

    from commitaddr import commit, verify, explain

    ident = commit("My secret information")
    assert verify(ident, "My secret information")
    assert not verify(ident, "My secret Information")

The Python distribution name is **`commitaddr`**. `__version__` is sourced from
installed metadata when available, otherwise a dev default.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version as _pkg_version

try:
    __version__ = _pkg_version("commitaddr")
except PackageNotFoundError:  # local checkouts
    __version__ = "0.1.0.dev0"

from .commitment import (
    CommitmentRecord,
    HashOnlyCommitment,
    ScriptAnalysis,
    ScriptCommitment,
    Variant,
    VerifyResult,
    commit,
    explain,
    get_codec,
    verify,
    verify_detailed,
)
from .errors import (
    ChecksumMismatch,
    CommitError,
    ConfigError,
    InvalidEncoding,
    MalformedIdentifier,
    PayloadTooLarge,
)

__all__ = [
    "__version__",
    # codec
    "Variant",
    "VerifyResult",
    "CommitmentRecord",
    "ScriptAnalysis",
    "HashOnlyCommitment",
    "ScriptCommitment",
    "get_codec",
    "commit",
    "verify",
    "verify_detailed",
    "explain",
    # errors
    "CommitError",
    "InvalidEncoding",
    "MalformedIdentifier",
    "ChecksumMismatch",
    "PayloadTooLarge",
    "ConfigError",
]
