"""
commitaddr.commitment
---------------------

Deterministic commitments from arbitrary input bytes to identifiers that can
never authorize a transfer of value, plus the inverse check.

Two variants share the same `commit` / `verify` contract:

* `ScriptCommitment` (default, `Variant.SCRIPT`)
      digest     = sha256(input)
      script     = OP_RETURN || len || "UNSPENDABLE:" || digest
      identifier = base58check(0x05, hash160(script))
  The identifier is a script-hash envelope whose script halts evaluation, so
  unspendability is enforced by the protocol itself.

* `HashOnlyCommitment` (`Variant.HASH_ONLY`)
      identifier = base58check(0x00, sha256(input)[0:20])
  The identifier has exactly the shape of a spendable pay-to-pubkey-hash
  address; unspendability is only a convention (nobody knows a key hashing to
  a truncated SHA-256). Every record produced for it says so.

`commit` and `explain` raise `CommitError` subclasses. `verify` never raises:
every failure folds into False. `verify_detailed` keeps the reason and the
underlying error for callers that want diagnostics.
"""

from __future__ import annotations

import hmac
import logging
from dataclasses import asdict, dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from .base58check import Version, decode_check, encode_check
from .errors import CommitError, ensure_commit_error
from .script import DEFAULT_MARKER, OP_RETURN, commitment_script, parse_data_script
from .utils.hash import hash160, sha256

log = logging.getLogger(__name__)

InputData = Union[bytes, bytearray, memoryview, str]

PAYLOAD_LEN = 20
IMPORT_PREVIEW_CHARS = 20
PROTOCOL_REFERENCE = (
    "https://github.com/bitcoin/bitcoin/blob/master/src/script/interpreter.cpp#L467"
)


class Variant(str, Enum):
    SCRIPT = "script"
    HASH_ONLY = "hash-only"


# ---------------------------------------------------------------------------
# Result & record types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class VerifyResult:
    """Outcome of a verification; truthy only when the identifier matches."""

    ok: bool
    reason: str
    error: Optional[CommitError] = field(default=None, compare=False)

    def __bool__(self) -> bool:
        return self.ok


@dataclass(frozen=True)
class ScriptAnalysis:
    script_type: str
    script_start: str
    input_hash_included: bool
    protocol_reference: str


@dataclass(frozen=True)
class CommitmentRecord:
    """
    Audit bundle for one commitment. Never authoritative: every field can be
    recomputed from the input bytes alone.
    """

    identifier: str
    original_digest_hex: str
    script_hex: Optional[str]
    input_byte_length: int
    variant: str
    is_unspendable: bool
    verification_method: str
    trust_model: str
    import_command: Optional[str] = None
    technical_proof: Tuple[str, ...] = ()
    script_analysis: Optional[ScriptAnalysis] = None

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["technical_proof"] = list(self.technical_proof)
        return d


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def as_bytes(data: InputData) -> bytes:
    """Inputs are opaque bytes; text is committed as its UTF-8 encoding."""
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise TypeError(f"input must be bytes or str, not {type(data).__name__}")


def _fail(reason: str, error: Optional[BaseException] = None) -> VerifyResult:
    err = ensure_commit_error(error) if error is not None else None
    log.debug("verification failed: %s", reason)
    return VerifyResult(ok=False, reason=reason, error=err)


def _import_command(script_hex: str, data: bytes) -> str:
    preview = data.decode("utf-8", errors="replace")[:IMPORT_PREVIEW_CHARS]
    preview = preview.replace('"', '\\"')
    return (
        f'bitcoin-cli importaddress {script_hex} '
        f'"Unspendable commitment: {preview}..." false'
    )


# ---------------------------------------------------------------------------
# Variant A: hash only
# ---------------------------------------------------------------------------


class HashOnlyCommitment:
    """
    Truncated-hash commitment in a pay-to-pubkey-hash envelope.

    `strict_checksum=False` reproduces the legacy verifier, which compared only
    the payload bytes and ignored the checksum entirely.
    """

    variant = Variant.HASH_ONLY
    version = Version.PUBKEY_HASH
    verification_method = (
        "First 20 bytes of the SHA-256 hash of the input used as a "
        "pay-to-pubkey-hash payload"
    )
    trust_model = (
        "conventional: the identifier has the same format as an address that can "
        "receive funds; it is unspendable only because no key is known whose hash "
        "equals a truncated SHA-256 digest"
    )

    def __init__(self, *, strict_checksum: bool = True) -> None:
        self.strict_checksum = strict_checksum

    def payload(self, data: InputData) -> bytes:
        return sha256(as_bytes(data))[:PAYLOAD_LEN]

    def commit(self, data: InputData) -> str:
        return encode_check(self.version, self.payload(data))

    def record(self, data: InputData) -> CommitmentRecord:
        raw = as_bytes(data)
        return CommitmentRecord(
            identifier=self.commit(raw),
            original_digest_hex=sha256(raw).hex(),
            script_hex=None,
            input_byte_length=len(raw),
            variant=self.variant.value,
            is_unspendable=False,
            verification_method=self.verification_method,
            trust_model=self.trust_model,
        )

    def verify_detailed(self, identifier: str, data: InputData) -> VerifyResult:
        try:
            env = decode_check(identifier, verify_checksum=self.strict_checksum)
        except CommitError as e:
            return _fail(e.message, e)
        except Exception as e:
            return _fail(f"cannot decode identifier: {e}", e)

        if env.version != self.version:
            return _fail(
                f"identifier carries version 0x{env.version:02x}, "
                f"expected 0x{int(self.version):02x}"
            )
        try:
            expected = self.payload(data)
        except Exception as e:
            return _fail(f"cannot hash claimed input: {e}", e)

        if not hmac.compare_digest(env.content, expected):
            return _fail("identifier does not commit to the supplied data")
        return VerifyResult(ok=True, reason="payload matches sha256(input)[0:20]")

    def verify(self, identifier: str, data: InputData) -> bool:
        return bool(self.verify_detailed(identifier, data))


# ---------------------------------------------------------------------------
# Variant B: OP_RETURN script wrapped in a script-hash envelope
# ---------------------------------------------------------------------------


class ScriptCommitment:
    """
    Script-embedded commitment. `marker` prefixes the digest inside the data
    script; together they must fit the script's single length byte.
    """

    variant = Variant.SCRIPT
    version = Version.SCRIPT_HASH
    verification_method = (
        "SHA-256 hash of input embedded in OP_RETURN script, then wrapped in P2SH"
    )
    trust_model = (
        "provable: the identifier is the hash of an OP_RETURN script, which the "
        "protocol refuses to execute, so no transaction can ever spend from it"
    )

    def __init__(self, *, marker: Union[bytes, str] = DEFAULT_MARKER) -> None:
        self.marker = as_bytes(marker)

    def script(self, data: InputData) -> bytes:
        return commitment_script(sha256(as_bytes(data)), self.marker)

    def commit(self, data: InputData) -> str:
        return encode_check(self.version, hash160(self.script(data)))

    def record(self, data: InputData) -> CommitmentRecord:
        raw = as_bytes(data)
        script = self.script(raw)
        script_hex = script.hex()
        return CommitmentRecord(
            identifier=encode_check(self.version, hash160(script)),
            original_digest_hex=sha256(raw).hex(),
            script_hex=script_hex,
            input_byte_length=len(raw),
            variant=self.variant.value,
            is_unspendable=True,
            verification_method=self.verification_method,
            trust_model=self.trust_model,
            import_command=_import_command(script_hex, raw),
        )

    def explain(self, data: InputData) -> CommitmentRecord:
        """`record` plus the technical argument for why the identifier is unspendable."""
        raw = as_bytes(data)
        base = self.record(raw)
        script = bytes.fromhex(base.script_hex or "")
        digest = sha256(raw)
        analysis = ScriptAnalysis(
            script_type="P2SH wrapping OP_RETURN",
            script_start=f"{OP_RETURN:02x}",
            input_hash_included=parse_data_script(script).endswith(digest),
            protocol_reference=PROTOCOL_REFERENCE,
        )
        proof = (
            "Identifier is a Pay-to-Script-Hash (P2SH) address that resolves to an OP_RETURN script.",
            "OP_RETURN scripts are provably unspendable: evaluation fails as soon as the opcode executes.",
            "The unspendable script contains the SHA-256 hash of the original input, allowing verification.",
            "Any transaction attempting to spend from this identifier would be rejected by nodes.",
        )
        return replace(base, technical_proof=proof, script_analysis=analysis)

    def verify_detailed(self, identifier: str, data: InputData) -> VerifyResult:
        try:
            expected = self.commit(data)
        except Exception as e:
            return _fail(f"cannot derive identifier from claimed input: {e}", e)

        if isinstance(identifier, str) and identifier == expected:
            return VerifyResult(ok=True, reason="identifier matches the script commitment")

        # Mismatch: decode only to give a precise reason.
        try:
            env = decode_check(identifier)
        except CommitError as e:
            return _fail(e.message, e)
        except Exception as e:
            return _fail(f"cannot decode identifier: {e}", e)
        if env.version != self.version:
            return _fail(
                f"identifier carries version 0x{env.version:02x}, "
                f"expected 0x{int(self.version):02x}"
            )
        return _fail("identifier does not commit to the supplied data")

    def verify(self, identifier: str, data: InputData) -> bool:
        return bool(self.verify_detailed(identifier, data))


Codec = Union[HashOnlyCommitment, ScriptCommitment]

# ---------------------------------------------------------------------------
# Module-level API
# ---------------------------------------------------------------------------


def get_codec(
    variant: Union[Variant, str] = Variant.SCRIPT,
    *,
    marker: Union[bytes, str] = DEFAULT_MARKER,
    strict_checksum: bool = True,
) -> Codec:
    """Build the codec for `variant`; options that do not apply are ignored."""
    v = Variant(variant)
    if v is Variant.HASH_ONLY:
        return HashOnlyCommitment(strict_checksum=strict_checksum)
    return ScriptCommitment(marker=marker)


def commit(data: InputData, variant: Union[Variant, str] = Variant.SCRIPT) -> str:
    return get_codec(variant).commit(data)


def verify(
    identifier: str, data: InputData, variant: Union[Variant, str] = Variant.SCRIPT
) -> bool:
    return bool(verify_detailed(identifier, data, variant))


def verify_detailed(
    identifier: str, data: InputData, variant: Union[Variant, str] = Variant.SCRIPT
) -> VerifyResult:
    try:
        codec = get_codec(variant)
    except ValueError as e:
        return _fail(f"unknown variant {variant!r}", e)
    return codec.verify_detailed(identifier, data)


def explain(data: InputData) -> CommitmentRecord:
    return ScriptCommitment().explain(data)


__all__ = [
    "Variant",
    "VerifyResult",
    "ScriptAnalysis",
    "CommitmentRecord",
    "HashOnlyCommitment",
    "ScriptCommitment",
    "Codec",
    "as_bytes",
    "get_codec",
    "commit",
    "verify",
    "verify_detailed",
    "explain",
]
