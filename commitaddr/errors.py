"""
commitaddr.errors
-----------------

A small, consistent error system for the commitment codec.

- One root `CommitError` with a machine-friendly `code` and optional `data`.
- Concrete subclasses for each failure the codec can report:
    InvalidEncoding      identifier contains a character outside base-58
    MalformedIdentifier  decoded envelope has the wrong size or version byte
    ChecksumMismatch     recomputed checksum disagrees with the embedded one
    PayloadTooLarge      embedded script data does not fit one length byte
    InvalidRecord        saved JSON record is missing fields or has bad types
    ConfigError          invalid configuration values
- Safe JSON representation (`to_dict`) suitable for logs and CLI output.

Constructive operations (`commit`, `explain`) raise these. `verify` never does;
`verify_detailed` carries them inside its result instead.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional

# ---------------------------------------------------------------------------
# Error codes & classes
# ---------------------------------------------------------------------------


class ErrorCode(str, Enum):
    INTERNAL = "COMMIT/INTERNAL"
    CONFIG = "COMMIT/CONFIG"

    # Codec
    INVALID_ENCODING = "CODEC/INVALID_ENCODING"
    MALFORMED_IDENTIFIER = "CODEC/MALFORMED_IDENTIFIER"
    CHECKSUM_MISMATCH = "CODEC/CHECKSUM_MISMATCH"

    # Script builder
    PAYLOAD_TOO_LARGE = "SCRIPT/PAYLOAD_TOO_LARGE"

    # Records & CLI input
    INVALID_RECORD = "RECORD/INVALID"
    INPUT_NOT_FOUND = "CLI/INPUT_NOT_FOUND"
    UNSUPPORTED_VARIANT = "CLI/UNSUPPORTED_VARIANT"


@dataclass(eq=False)
class CommitError(Exception):
    """
    Root error for commitaddr.

    Attributes
    ----------
    code: str
        Machine-stable error code (see ErrorCode).
    message: str
        Human hint suitable for logs and CLI output.
    data: dict
        Optional machine data (sizes, offending characters). JSON-serializable.
    cause: Optional[BaseException]
        Wrapped original exception; not included in equality comparison.
    """

    code: str
    message: str
    data: Dict[str, Any] = field(default_factory=dict)
    cause: Optional[BaseException] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if isinstance(self.code, Enum):
            self.code = self.code.value
        super().__init__(f"{self.code}: {self.message}")

    # ---------------- Public API ----------------

    def to_dict(self, include_cause: bool = False) -> Dict[str, Any]:
        """JSON-safe shape suitable for logs and `--json` CLI output."""
        out: Dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "data": _jsonmap(self.data),
        }
        if include_cause and self.cause is not None:
            out["cause"] = {
                "type": type(self.cause).__name__,
                "message": str(self.cause),
            }
        return out

    def __str__(self) -> str:
        parts = [f"{self.code}: {self.message}"]
        if self.data:
            preview = ", ".join(f"{k}={_preview(v)}" for k, v in self.data.items())
            parts.append(f"[{preview}]")
        return " ".join(parts)


class InvalidEncoding(CommitError):
    def __init__(self, message="identifier is not valid base-58", **data: Any) -> None:
        super().__init__(
            code=ErrorCode.INVALID_ENCODING, message=message, data=_jsonmap(data)
        )


class MalformedIdentifier(CommitError):
    def __init__(self, message="malformed identifier", **data: Any) -> None:
        super().__init__(
            code=ErrorCode.MALFORMED_IDENTIFIER, message=message, data=_jsonmap(data)
        )


class ChecksumMismatch(CommitError):
    def __init__(self, expected: bytes, got: bytes) -> None:
        super().__init__(
            code=ErrorCode.CHECKSUM_MISMATCH,
            message="checksum mismatch",
            data={"expected": expected.hex(), "got": got.hex()},
        )


class PayloadTooLarge(CommitError):
    def __init__(self, size: int, limit: int) -> None:
        super().__init__(
            code=ErrorCode.PAYLOAD_TOO_LARGE,
            message=f"embedded data is {size} bytes; a single length byte allows at most {limit}",
            data={"size": size, "limit": limit},
        )


class InvalidRecord(CommitError):
    def __init__(self, message="invalid commitment record", **data: Any) -> None:
        super().__init__(
            code=ErrorCode.INVALID_RECORD, message=message, data=_jsonmap(data)
        )


class ConfigError(CommitError):
    def __init__(self, message="invalid configuration", **data: Any) -> None:
        super().__init__(code=ErrorCode.CONFIG, message=message, data=_jsonmap(data))


class InternalError(CommitError):
    def __init__(self, message="internal error", **data: Any) -> None:
        super().__init__(code=ErrorCode.INTERNAL, message=message, data=_jsonmap(data))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def ensure_commit_error(exc: BaseException) -> CommitError:
    """Coerce unknown exceptions to InternalError with the cause attached."""
    if isinstance(exc, CommitError):
        return exc
    err = InternalError(f"{type(exc).__name__}: {exc}")
    err.cause = exc
    return err


def _jsonmap(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: _coerce_json(v) for k, v in data.items()}


def _coerce_json(v: Any) -> Any:
    # Keep JSON primitives; stringify the rest; hex-encode bytes.
    if v is None or isinstance(v, (bool, int, float, str, list, dict)):
        return v
    if isinstance(v, (bytes, bytearray)):
        return v.hex()
    try:
        return str(v)
    except Exception:
        return "<unprintable>"


def _preview(v: Any, limit: int = 96) -> str:
    s = str(_coerce_json(v))
    return s if len(s) <= limit else s[:limit] + "…"


__all__ = [
    "ErrorCode",
    "CommitError",
    "InvalidEncoding",
    "MalformedIdentifier",
    "ChecksumMismatch",
    "PayloadTooLarge",
    "InvalidRecord",
    "ConfigError",
    "InternalError",
    "ensure_commit_error",
]
