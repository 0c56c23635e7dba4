"""
commitaddr.cli — command line for string commitments.

Implements:
  - commitaddr generate <text>              Commit to a string
  - commitaddr generate-file <path>         Commit to a file's bytes
  - commitaddr verify <identifier> <text>   Verify an identifier against a string
  - commitaddr verify-file <identifier> <path>
  - commitaddr proof <text>                 Technical proof of unspendability
  - commitaddr inspect <identifier>         Decode an identifier's envelope

Global options:
  --variant script|hash-only   Codec variant (default: script)
  --config PATH                TOML/JSON config file
  --output-dir PATH            Where JSON records are written
  --json                       Print records as JSON
  --log-level LEVEL            Log level for diagnostics on stderr

Exit codes: 0 success/verified, 1 not verified or missing input file,
2 configuration or codec error.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import NoReturn, Optional

import typer

from . import config as cfgmod
from . import logging as clog
from .base58check import Version, decode_check, short
from .commitment import CommitmentRecord, Variant, VerifyResult, as_bytes, get_codec
from .errors import CommitError, ErrorCode
from .records import PROOF_PREFIX, save_record

app = typer.Typer(
    name="commitaddr",
    help="Commit strings to provably unspendable identifiers and verify them.",
    no_args_is_help=True,
    add_completion=False,
)

log = clog.get_logger(__name__)


class GlobalContext:
    def __init__(self):
        self.cfg: Optional[cfgmod.Config] = None
        self.json_output: bool = False


_ctx = GlobalContext()


@app.callback()
def main_callback(
    variant: Optional[Variant] = typer.Option(
        None,
        "--variant",
        help="Codec variant: script (provably unspendable) or hash-only.",
        case_sensitive=False,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        help="Path to a TOML or JSON config file",
        envvar="COMMITADDR_CONFIG",
    ),
    output_dir: Optional[Path] = typer.Option(
        None,
        "--output-dir",
        help="Directory for saved JSON records (default: current directory)",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output JSON instead of human-readable text",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Log level (DEBUG, INFO, WARNING, ERROR)",
    ),
) -> None:
    """
    Configuration is resolved in this order (highest to lowest priority):
      1. Command-line flags
      2. Environment variables (COMMITADDR_VARIANT, COMMITADDR_OUTPUT_DIR, ...)
      3. Config file (--config or COMMITADDR_CONFIG)
      4. Built-in defaults
    """
    _ctx.json_output = json_output
    try:
        cfg = cfgmod.load(
            config,
            codec={"variant": variant.value if variant else None},
            output={"directory": str(output_dir) if output_dir else None},
            logging={"level": log_level.upper() if log_level else None},
        )
    except CommitError as e:
        _die(e)
    clog.configure_from_config(cfg)
    clog.bind(trace_id=clog.short_uuid(), variant=cfg.codec.variant)
    _ctx.cfg = cfg


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _cfg() -> cfgmod.Config:
    return _ctx.cfg or cfgmod.load()


def _codec():
    c = _cfg().codec
    return get_codec(c.variant, marker=c.marker, strict_checksum=c.strict_checksum)


def _die(err: CommitError, code: int = 2) -> NoReturn:
    if _ctx.json_output:
        typer.echo(json.dumps({"error": err.to_dict()}, indent=2))
    else:
        typer.secho(f"Error: {err.message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code)


def _read_file(path: Path) -> bytes:
    full = path.expanduser().resolve()
    if not full.is_file():
        _die(
            CommitError(ErrorCode.INPUT_NOT_FOUND, f"File not found at {full}", {"path": str(full)}),
            code=1,
        )
    if not _ctx.json_output:
        typer.echo(f"Reading file: {full}")
    return full.read_bytes()


def _char_length(raw: bytes) -> int:
    return len(raw.decode("utf-8", errors="replace"))


def _print_record(record: CommitmentRecord, raw: bytes) -> None:
    if record.is_unspendable:
        typer.echo("\nProvably Unspendable Identifier Generated")
    else:
        typer.echo("\nHash-only Commitment Identifier Generated")
    typer.echo("=========================================")
    typer.echo(f"Input length: {_char_length(raw)} characters ({record.input_byte_length} bytes)")
    typer.echo(f"Identifier: {record.identifier}")
    typer.echo(f"Original Hash: {record.original_digest_hex}")
    if record.script_hex:
        typer.echo(f"\nUnspendable Script: {record.script_hex}")
    if record.import_command:
        typer.echo(f"\nImport Command:\n{record.import_command}")
    if record.is_unspendable:
        typer.echo("\nThis identifier is PROVABLY UNSPENDABLE and can be safely published.")
        typer.echo("Run 'commitaddr proof \"your string\"' for technical proof of unspendability.")
    else:
        typer.secho(f"\nWARNING: trust model is {record.trust_model}.", fg=typer.colors.YELLOW)
        typer.echo("Use --variant script for a provably unspendable identifier.")


def _generate(raw: bytes) -> CommitmentRecord:
    cfg = _cfg()
    try:
        record = _codec().record(raw)
    except CommitError as e:
        _die(e)
    log.info("commitment generated", extra={"identifier": record.identifier})

    if _ctx.json_output:
        typer.echo(json.dumps(record.to_dict(), indent=2))
    else:
        _print_record(record, raw)

    if _char_length(raw) > cfg.output.save_threshold:
        path = save_record(record, cfg.output.directory)
        if not _ctx.json_output:
            typer.echo(f"\nDetails saved to: {path}")
    return record


def _verify(identifier: str, raw: bytes) -> VerifyResult:
    result = _codec().verify_detailed(identifier, raw)
    log.info("verification finished", extra={"ok": result.ok, "reason": result.reason})

    if _ctx.json_output:
        typer.echo(
            json.dumps(
                {
                    "identifier": identifier,
                    "verified": result.ok,
                    "reason": result.reason,
                    "error": result.error.to_dict() if result.error else None,
                },
                indent=2,
            )
        )
    else:
        typer.echo("\nIdentifier Verification")
        typer.echo("=======================")
        typer.echo(f"Identifier: {identifier}")
        typer.echo(f"Input length: {_char_length(raw)} characters")
        if result.ok:
            typer.secho("\nVERIFIED: The identifier matches the input.", fg=typer.colors.GREEN)
            record = _codec().record(raw)
            if record.script_hex:
                typer.echo("This is a PROVABLY UNSPENDABLE identifier.")
                typer.echo(f"Script: {record.script_hex}")
            else:
                typer.echo(f"Trust model: {record.trust_model}")
        else:
            typer.secho("\nNOT VERIFIED: The identifier does not match the input.", fg=typer.colors.RED)
            typer.echo(f"Reason: {result.reason}")

    if not result.ok:
        raise typer.Exit(1)
    return result


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def generate(text: str = typer.Argument(..., help="String to commit to")) -> None:
    """Generate an identifier committing to a string."""
    clog.bind(command="generate")
    _generate(as_bytes(text))


@app.command("generate-file")
def generate_file(path: Path = typer.Argument(..., help="File whose bytes are committed")) -> None:
    """Generate an identifier committing to a file's contents."""
    clog.bind(command="generate-file")
    _generate(_read_file(path))


@app.command()
def verify(
    identifier: str = typer.Argument(..., help="Identifier to check"),
    text: str = typer.Argument(..., help="String the identifier supposedly commits to"),
) -> None:
    """Verify an identifier against a string."""
    clog.bind(command="verify")
    _verify(identifier, as_bytes(text))


@app.command("verify-file")
def verify_file(
    identifier: str = typer.Argument(..., help="Identifier to check"),
    path: Path = typer.Argument(..., help="File the identifier supposedly commits to"),
) -> None:
    """Verify an identifier against a file's contents."""
    clog.bind(command="verify-file")
    _verify(identifier, _read_file(path))


@app.command()
def proof(text: str = typer.Argument(..., help="String to explain")) -> None:
    """Show the technical proof of why the identifier cannot be spent from."""
    clog.bind(command="proof")
    cfg = _cfg()
    codec = _codec()
    if not hasattr(codec, "explain"):
        _die(
            CommitError(
                ErrorCode.UNSUPPORTED_VARIANT,
                "hash-only identifiers are not provably unspendable; "
                "use --variant script for a technical proof.",
                {"variant": cfg.codec.variant},
            )
        )
    try:
        record = codec.explain(as_bytes(text))
    except CommitError as e:
        _die(e)

    if _ctx.json_output:
        typer.echo(json.dumps(record.to_dict(), indent=2))
    else:
        typer.echo("\nTechnical Proof of Unspendability")
        typer.echo("=================================")
        typer.echo(f"Identifier: {record.identifier}")
        typer.echo(f"\nVerification Method:\n{record.verification_method}")
        typer.echo("\nTechnical Reasons Why This Identifier Cannot Be Spent From:")
        for i, reason in enumerate(record.technical_proof, start=1):
            typer.echo(f"{i}. {reason}")
        sa = record.script_analysis
        if sa is not None:
            typer.echo("\nScript Analysis:")
            typer.echo(f"- Script Type: {sa.script_type}")
            typer.echo(f"- Script Starts With: OP_RETURN (0x{sa.script_start})")
            typer.echo(f"- Input Hash Included: {sa.input_hash_included}")
            typer.echo(f"- Reference: {sa.protocol_reference}")
        typer.echo(f"\nTrust model: {record.trust_model}")

    if cfg.output.save_proofs:
        path = save_record(record, cfg.output.directory, prefix=PROOF_PREFIX)
        if not _ctx.json_output:
            typer.echo(f"\nDetailed proof saved to: {path}")


@app.command()
def inspect(identifier: str = typer.Argument(..., help="Identifier to decode")) -> None:
    """Decode an identifier's version byte, payload and checksum."""
    clog.bind(command="inspect")
    try:
        env = decode_check(identifier)
    except CommitError as e:
        _die(e, code=1)
    kind = "script-hash" if env.version == Version.SCRIPT_HASH else "pubkey-hash"
    info = {
        "identifier": identifier,
        "version": env.version,
        "kind": kind,
        "content_hex": env.content.hex(),
        "checksum_hex": env.checksum.hex(),
    }
    if _ctx.json_output:
        typer.echo(json.dumps(info, indent=2))
    else:
        typer.echo(f"Identifier: {short(identifier)}")
        typer.echo(f"Version: 0x{env.version:02x} ({kind})")
        typer.echo(f"Content: {info['content_hex']}")
        typer.echo(f"Checksum: {info['checksum_hex']} (valid)")


def main() -> None:  # pragma: no cover
    try:
        app(prog_name="commitaddr")
    except KeyboardInterrupt:
        typer.echo("", err=True)
        sys.exit(130)


if __name__ == "__main__":  # pragma: no cover
    main()
