"""
commitaddr.records — JSON persistence for commitment records.

Records are written as pretty-printed JSON next to the caller's working
directory (or a configured output directory):

    unspendable-<first 8 chars of identifier>.json   from `generate`
    proof-<first 8 chars of identifier>.json         from `proof`

Records are audit aids only; `load_record` exists so a saved file can be
re-checked against its input with `recheck`.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

from .commitment import CommitmentRecord, ScriptAnalysis, Variant, VerifyResult, get_codec
from .errors import InvalidRecord, ensure_commit_error
from .script import parse_data_script
from .utils.hash import SHA256_LEN

log = logging.getLogger(__name__)

GENERATE_PREFIX = "unspendable"
PROOF_PREFIX = "proof"
NAME_CHARS = 8


def record_filename(record: CommitmentRecord, prefix: str = GENERATE_PREFIX) -> str:
    return f"{prefix}-{record.identifier[:NAME_CHARS]}.json"


def to_json(record: CommitmentRecord) -> str:
    return json.dumps(record.to_dict(), indent=2)


def save_record(
    record: CommitmentRecord,
    directory: Union[str, Path],
    *,
    prefix: str = GENERATE_PREFIX,
) -> Path:
    """Write `record` as JSON into `directory`; returns the written path."""
    out_dir = Path(directory).expanduser()
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / record_filename(record, prefix)
    path.write_text(to_json(record) + "\n", encoding="utf-8")
    log.info("record saved", extra={"path": str(path), "identifier": record.identifier})
    return path


def record_from_dict(d: Dict[str, Any]) -> CommitmentRecord:
    """Rebuild a record from its JSON form. Raises InvalidRecord on missing or mistyped fields."""
    if not isinstance(d, dict):
        raise InvalidRecord(f"record must be a JSON object, got {type(d).__name__}")
    try:
        return _record_from_dict(d)
    except KeyError as e:
        raise InvalidRecord(f"record is missing field {e.args[0]!r}", field=e.args[0]) from e
    except (TypeError, ValueError) as e:
        raise InvalidRecord(f"record has an invalid field: {e}") from e


def _record_from_dict(d: Dict[str, Any]) -> CommitmentRecord:
    analysis = d.get("script_analysis")
    return CommitmentRecord(
        identifier=d["identifier"],
        original_digest_hex=d["original_digest_hex"],
        script_hex=d.get("script_hex"),
        input_byte_length=int(d["input_byte_length"]),
        variant=Variant(d["variant"]).value,
        is_unspendable=bool(d["is_unspendable"]),
        verification_method=d["verification_method"],
        trust_model=d["trust_model"],
        import_command=d.get("import_command"),
        technical_proof=tuple(d.get("technical_proof") or ()),
        script_analysis=ScriptAnalysis(**analysis) if analysis else None,
    )


def load_record(path: Union[str, Path]) -> CommitmentRecord:
    with Path(path).open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidRecord(f"cannot parse {path}: {e}", path=str(path)) from e
    return record_from_dict(data)


def recheck(record: CommitmentRecord, data: Union[bytes, str]) -> VerifyResult:
    """
    Verify a saved record's identifier against `data` using the record's
    variant. For script records the marker is recovered from the saved script.
    """
    variant = Variant(record.variant)
    if variant is Variant.SCRIPT and record.script_hex:
        try:
            embedded = parse_data_script(bytes.fromhex(record.script_hex))
        except ValueError as e:
            return VerifyResult(
                ok=False, reason=f"saved script is unreadable: {e}", error=ensure_commit_error(e)
            )
        codec = get_codec(variant, marker=embedded[:-SHA256_LEN])
    else:
        codec = get_codec(variant)
    return codec.verify_detailed(record.identifier, data)
