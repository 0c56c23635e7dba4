"""
Shared pytest fixtures:
- Known commitment vectors (text → identifiers for both variants)
- Isolated environment: COMMITADDR_* variables cleared, cwd in a temp dir
- Logging context reset between tests
"""
from __future__ import annotations

import logging
import os
from pathlib import Path

import pytest

from commitaddr import logging as clog

# Computed independently (sha256 / ripemd160 / base58check) for regression.
VECTORS = {
    "My secret information": {
        "digest": "b49f62d71ce4df4646ac568286c6d231fc59c35176f697c15ac4a75ea206b9d7",
        "script": "6a2c554e5350454e4441424c453a"
        "b49f62d71ce4df4646ac568286c6d231fc59c35176f697c15ac4a75ea206b9d7",
        "script_id": "3KvaTz1yoWZU5NvDzBD4dimMCxeyUZfB3C",
        "hash_id": "1HU3ZsRyUL6RfwUMihGvDKGH52czjcMFwG",
    },
    "My secret Information": {
        "digest": "00052af5d1b302d602c02bc86825ff51312464f9a76da0a2f68ca6c7a9260d9d",
        "script_id": "36ooEka5bEowUAS6pmp9cBVSn4wz9fpDg5",
        "hash_id": "117C4pvYmB6gtP6gzn2dDRuKGtHCZEhLT",
    },
    "": {
        "digest": "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855",
        "script_id": "3Pgj8p4czouRjqD6nEry3AoEsSX2y6Xtgv",
        "hash_id": "1Mkv9WQj89eyDPvzckkqf2sSLFxU5kdUsi",
    },
    "abc": {
        "digest": "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad",
        "script_id": "3Hp8xAS34PL72YkvRwW5NioZE3CxtqWR2k",
        "hash_id": "1HzxYbqxgzcXc6QRdoCQJw8K4Bn91tW6UV",
    },
}


@pytest.fixture
def vectors() -> dict:
    return VECTORS


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop any COMMITADDR_* variables from the developer's shell."""
    for k in list(os.environ):
        if k.startswith("COMMITADDR_"):
            monkeypatch.delenv(k, raising=False)


@pytest.fixture(autouse=True)
def reset_logging():
    """Fresh context per test; drop handlers bound to streams a test closed."""
    clog.clear_context()
    yield
    clog.clear_context()
    logger = logging.getLogger("commitaddr")
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Per-test working directory; records land here by default."""
    monkeypatch.chdir(tmp_path)
    return tmp_path
