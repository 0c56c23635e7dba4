"""
commitaddr configuration loader.

Layered config with clear precedence:
    1) Explicit overrides passed to `load()` (highest)
    2) Environment variables (COMMITADDR_*)
    3) Config file (TOML or JSON)
    4) Built-in defaults (lowest)

Only CLI-side concerns live here: which codec variant to use, where JSON
records are written, and how logging is set up. The codec itself takes plain
arguments and never reads configuration.
"""

from __future__ import annotations

import json
import os
import sys
import tomllib
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import ConfigError

# ------------------------------
# Defaults & helpers
# ------------------------------

VARIANTS = ("script", "hash-only")
LOG_FORMATS = ("text", "json")
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")
SECTIONS = ("codec", "output", "logging")

DEFAULT_VARIANT = "script"
DEFAULT_MARKER = "UNSPENDABLE:"
DEFAULT_SAVE_THRESHOLD = 50  # characters; longer inputs get a JSON record on disk


def _expand(p: str | Path) -> Path:
    return Path(p).expanduser().resolve()


def _parse_bool(v: str) -> bool:
    return v.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    v = os.environ.get(name)
    if v is None or v == "":
        return default
    try:
        return int(v, 0)
    except Exception as e:
        raise ConfigError(f"{name} must be int, got {v!r}", key=name) from e


def _env_bool(name: str, default: bool) -> bool:
    v = os.environ.get(name)
    return _parse_bool(v) if v is not None else default


_BOOL_WORDS = frozenset({"1", "true", "t", "yes", "y", "on", "0", "false", "f", "no", "n", "off"})


def _as_bool(v: Any, key: str) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, int):
        return v != 0
    if isinstance(v, str) and v.strip().lower() in _BOOL_WORDS:
        return _parse_bool(v)
    raise ConfigError(f"{key} must be a boolean, got {v!r}", key=key)


# ------------------------------
# Typed configuration model
# ------------------------------


@dataclass
class CodecConfig:
    variant: str = DEFAULT_VARIANT
    strict_checksum: bool = True
    marker: str = DEFAULT_MARKER

    def validate(self) -> None:
        if self.variant not in VARIANTS:
            raise ConfigError(
                f"codec.variant must be one of {', '.join(VARIANTS)}, got {self.variant!r}",
                key="codec.variant",
            )
        if len(self.marker.encode("utf-8")) + 32 > 0xFF:
            raise ConfigError(
                "codec.marker is too long to embed next to a 32-byte digest",
                key="codec.marker",
            )


@dataclass
class OutputConfig:
    directory: Path = field(default_factory=Path.cwd)
    save_threshold: int = DEFAULT_SAVE_THRESHOLD
    save_proofs: bool = True

    def validate(self) -> None:
        if self.save_threshold < 0:
            raise ConfigError("output.save_threshold must be >= 0", key="output.save_threshold")


@dataclass
class LogConfig:
    level: str = "WARNING"
    format: str = "text"

    def validate(self) -> None:
        if self.level.upper() not in LOG_LEVELS:
            raise ConfigError(f"logging.level {self.level!r} is not a log level", key="logging.level")
        if self.format not in LOG_FORMATS:
            raise ConfigError(f"logging.format must be text or json, got {self.format!r}", key="logging.format")


@dataclass
class Config:
    codec: CodecConfig
    output: OutputConfig
    logging: LogConfig

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["output"]["directory"] = str(self.output.directory)
        return d


# ------------------------------
# File loader (TOML / JSON)
# ------------------------------


def _load_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}", path=str(path))
    suffix = path.suffix.lower()
    if suffix not in {".toml", ".tml", ".json"}:
        raise ConfigError(f"Unsupported config format: {suffix}. Use .toml or .json", path=str(path))
    try:
        with path.open("rb") as f:
            data = tomllib.load(f) if suffix != ".json" else json.load(f)
    except (tomllib.TOMLDecodeError, json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ConfigError(f"cannot parse {path}: {e}", path=str(path)) from e

    if not isinstance(data, dict):
        raise ConfigError(
            f"config file must contain a table/object, got {type(data).__name__}", path=str(path)
        )
    for section in SECTIONS:
        if section in data and not isinstance(data[section], dict):
            raise ConfigError(
                f"config section {section!r} must be a table/object", path=str(path), key=section
            )
    return data


def _merge_dict(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    """Shallow + nested dict merge: values in b override a."""
    out = dict(a)
    for k, v in b.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _merge_dict(out[k], v)
        elif v is not None:
            out[k] = v
    return out


# ------------------------------
# Main loader
# ------------------------------


def load(config_file: Optional[str | Path] = None, **overrides: Any) -> Config:
    """
    Load the configuration.

    Precedence: overrides > env > file > defaults.

    Parameters
    ----------
    config_file : str | Path | None
        Optional path to a TOML or JSON file with keys:
          codec:   { variant, strict_checksum, marker }
          output:  { directory, save_threshold, save_proofs }
          logging: { level, format }

    overrides : Any
        Keyword overrides, e.g. load(codec={"variant": "hash-only"}).
        None values are ignored so CLI flags can be passed through unset.
    """
    # 1) Defaults
    base: Dict[str, Any] = {
        "codec": asdict(CodecConfig()),
        "output": {
            "directory": str(Path.cwd()),
            "save_threshold": DEFAULT_SAVE_THRESHOLD,
            "save_proofs": True,
        },
        "logging": asdict(LogConfig()),
    }

    # 2) File
    if config_file:
        base = _merge_dict(base, _load_file(_expand(config_file)))

    # 3) Env
    if "COMMITADDR_VARIANT" in os.environ:
        base["codec"]["variant"] = os.environ["COMMITADDR_VARIANT"].strip().lower()
    if "COMMITADDR_STRICT_CHECKSUM" in os.environ:
        base["codec"]["strict_checksum"] = _env_bool("COMMITADDR_STRICT_CHECKSUM", True)
    if "COMMITADDR_MARKER" in os.environ:
        base["codec"]["marker"] = os.environ["COMMITADDR_MARKER"]
    if "COMMITADDR_OUTPUT_DIR" in os.environ:
        base["output"]["directory"] = os.environ["COMMITADDR_OUTPUT_DIR"]
    if "COMMITADDR_SAVE_THRESHOLD" in os.environ:
        base["output"]["save_threshold"] = _env_int("COMMITADDR_SAVE_THRESHOLD", DEFAULT_SAVE_THRESHOLD)
    if "COMMITADDR_SAVE_PROOFS" in os.environ:
        base["output"]["save_proofs"] = _env_bool("COMMITADDR_SAVE_PROOFS", True)
    if "COMMITADDR_LOG_LEVEL" in os.environ:
        base["logging"]["level"] = os.environ["COMMITADDR_LOG_LEVEL"].strip().upper()
    if "COMMITADDR_LOG_FORMAT" in os.environ:
        base["logging"]["format"] = os.environ["COMMITADDR_LOG_FORMAT"].strip().lower()

    # 4) Overrides (highest)
    if overrides:
        base = _merge_dict(base, overrides)

    try:
        cfg = Config(
            codec=CodecConfig(
                variant=str(base["codec"]["variant"]),
                strict_checksum=_as_bool(base["codec"]["strict_checksum"], "codec.strict_checksum"),
                marker=str(base["codec"]["marker"]),
            ),
            output=OutputConfig(
                directory=_expand(base["output"]["directory"]),
                save_threshold=int(base["output"]["save_threshold"]),
                save_proofs=_as_bool(base["output"]["save_proofs"], "output.save_proofs"),
            ),
            logging=LogConfig(
                level=str(base["logging"]["level"]).upper(),
                format=str(base["logging"]["format"]).lower(),
            ),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigError(f"invalid configuration value: {e}") from e

    _validate_config(cfg)
    return cfg


def _validate_config(cfg: Config) -> None:
    cfg.codec.validate()
    cfg.output.validate()
    cfg.logging.validate()


# ------------------------------
# CLI helper
# ------------------------------


def main(argv: List[str] | None = None) -> int:
    """
    CLI usage:

        python -m commitaddr.config                      # defaults/env; print JSON
        python -m commitaddr.config path/to/config.toml  # load file; print JSON
    """
    argv = sys.argv[1:] if argv is None else list(argv)
    path = argv[0] if argv else None
    try:
        cfg = load(path)
        print(json.dumps(cfg.to_dict(), indent=2, sort_keys=True))
        return 0
    except ConfigError as e:
        print(f"config error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
