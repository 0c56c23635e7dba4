"""
Commitment codec tests for both variants.

Covers known identifiers, determinism, sensitivity to one-character edits,
tamper detection, malformed identifiers (never raising from `verify`), the
strict-vs-lenient checksum switch, and the `explain` proof bundle.
"""

from __future__ import annotations

import pytest

import commitaddr
from commitaddr import base58check as b58c
from commitaddr.commitment import (
    PROTOCOL_REFERENCE,
    HashOnlyCommitment,
    ScriptCommitment,
    Variant,
    as_bytes,
    commit,
    explain,
    get_codec,
    verify,
    verify_detailed,
)
from commitaddr.errors import ChecksumMismatch, CommitError, ErrorCode, PayloadTooLarge
from commitaddr.utils.hash import double_sha256, sha256

SECRET = "My secret information"
SECRET_EDIT = "My secret Information"


def _flip_last(s: str) -> str:
    return s[:-1] + ("2" if s[-1] != "2" else "3")


# -- Known vectors ------------------------------------------------------------


@pytest.mark.parametrize("text", ["My secret information", "My secret Information", "", "abc"])
def test_known_identifiers(vectors, text: str):
    v = vectors[text]
    assert commit(text) == v["script_id"]
    assert commit(text, Variant.HASH_ONLY) == v["hash_id"]
    assert commit(text, "hash-only") == v["hash_id"]


def test_script_bytes_match_vector(vectors):
    assert ScriptCommitment().script(SECRET).hex() == vectors[SECRET]["script"]


def test_identifier_prefixes_and_lengths():
    for text in ["", "a", SECRET, "x" * 10_000]:
        s = commit(text)
        assert s.startswith("3")
        assert len(s) in (33, 34)
        assert len(b58c.b58decode(s)) == 25
        h = commit(text, Variant.HASH_ONLY)
        assert h.startswith("1")
        assert len(b58c.b58decode(h)) == 25


def test_digest_leading_zero_keeps_extra_one(vectors):
    # sha256("My secret Information") starts with 0x00
    assert vectors[SECRET_EDIT]["digest"].startswith("00")
    h = commit(SECRET_EDIT, Variant.HASH_ONLY)
    assert h.startswith("11")
    assert b58c.decode_check(h).content == sha256(SECRET_EDIT.encode())[:20]
    assert verify(h, SECRET_EDIT, Variant.HASH_ONLY)


# -- Determinism & sensitivity --------------------------------------------------


@pytest.mark.parametrize("variant", list(Variant))
def test_deterministic(variant):
    assert commit(SECRET, variant) == commit(SECRET, variant)
    assert commit(SECRET, variant) == commit(SECRET.encode("utf-8"), variant)


@pytest.mark.parametrize("variant", list(Variant))
def test_one_character_change(variant):
    ident = commit(SECRET, variant)
    assert verify(ident, SECRET, variant)
    assert not verify(ident, SECRET_EDIT, variant)
    assert commit(SECRET_EDIT, variant) != ident


def test_variants_do_not_cross_verify():
    script_id = commit(SECRET)
    hash_id = commit(SECRET, Variant.HASH_ONLY)
    assert not verify(script_id, SECRET, Variant.HASH_ONLY)
    assert not verify(hash_id, SECRET, Variant.SCRIPT)
    r = verify_detailed(hash_id, SECRET, Variant.SCRIPT)
    assert "version 0x00" in r.reason


def test_empty_input_is_valid():
    for variant in Variant:
        ident = commit(b"", variant)
        assert verify(ident, b"", variant)
        assert verify(ident, "", variant)


def test_unicode_text_committed_as_utf8():
    text = "héllo ✓"
    assert commit(text) == commit(text.encode("utf-8"))
    rec = get_codec(Variant.SCRIPT).record(text)
    assert rec.input_byte_length == len(text.encode("utf-8"))


def test_as_bytes_rejects_other_types():
    with pytest.raises(TypeError):
        as_bytes(123)  # type: ignore[arg-type]


# -- Verification failures ----------------------------------------------------


@pytest.mark.parametrize("variant", list(Variant))
@pytest.mark.parametrize("bad", ["", "not-base58-!!!", "0OIl", "abc def", "1", "3" * 60])
def test_malformed_identifiers_never_raise(variant, bad: str):
    assert verify(bad, SECRET, variant) is False
    r = verify_detailed(bad, SECRET, variant)
    assert not r
    assert r.reason


@pytest.mark.parametrize("variant", list(Variant))
def test_overlong_identifier_fails_on_length(variant):
    r = verify_detailed("2" * 1_000_000, SECRET, variant)
    assert not r.ok
    assert r.error.code == ErrorCode.MALFORMED_IDENTIFIER.value
    assert r.error.data == {"length": 1_000_000}


@pytest.mark.parametrize("variant", list(Variant))
def test_non_string_identifier_never_raises(variant):
    assert verify(None, SECRET, variant) is False  # type: ignore[arg-type]
    assert verify(b"3abc", SECRET, variant) is False  # type: ignore[arg-type]


def test_non_bytes_claimed_input_never_raises():
    assert verify(commit(SECRET), 42) is False  # type: ignore[arg-type]
    assert verify(commit(SECRET, Variant.HASH_ONLY), 42, Variant.HASH_ONLY) is False  # type: ignore[arg-type]


@pytest.mark.parametrize("variant", list(Variant))
def test_tampered_identifier_rejected(variant):
    ident = commit(SECRET, variant)
    assert not verify(_flip_last(ident), SECRET, variant)


def test_tampered_identifier_reports_checksum():
    r = verify_detailed(_flip_last(commit(SECRET)), SECRET)
    assert not r.ok
    assert isinstance(r.error, ChecksumMismatch)
    assert r.error.code == ErrorCode.CHECKSUM_MISMATCH.value


def test_unknown_variant_folds_into_failure():
    r = verify_detailed(commit(SECRET), SECRET, "bogus")
    assert not r.ok
    assert "bogus" in r.reason


# -- Checksum strictness (hash-only) --------------------------------------------


def _with_bad_checksum(text: str) -> str:
    versioned = b"\x00" + sha256(text.encode())[:20]
    good = double_sha256(versioned)[:4]
    bad = bytes(b ^ 0xFF for b in good)
    return b58c.b58encode(versioned + bad)


def test_strict_mode_rejects_bad_checksum():
    ident = _with_bad_checksum(SECRET)
    r = HashOnlyCommitment().verify_detailed(ident, SECRET)
    assert not r.ok
    assert isinstance(r.error, ChecksumMismatch)


def test_lenient_mode_ignores_checksum():
    ident = _with_bad_checksum(SECRET)
    codec = HashOnlyCommitment(strict_checksum=False)
    assert codec.verify(ident, SECRET)
    assert not codec.verify(ident, SECRET_EDIT)
    assert get_codec("hash-only", strict_checksum=False).verify(ident, SECRET)


# -- Records & explain ---------------------------------------------------------


def test_script_record_fields(vectors):
    rec = ScriptCommitment().record(SECRET)
    assert rec.identifier == vectors[SECRET]["script_id"]
    assert rec.original_digest_hex == vectors[SECRET]["digest"]
    assert rec.script_hex == vectors[SECRET]["script"]
    assert rec.input_byte_length == len(SECRET)
    assert rec.variant == "script"
    assert rec.is_unspendable is True
    assert rec.trust_model.startswith("provable")
    assert rec.import_command.startswith(f"bitcoin-cli importaddress {rec.script_hex} ")
    assert '"Unspendable commitment: My secret informatio..."' in rec.import_command
    assert rec.technical_proof == ()


def test_hash_only_record_states_conventional_trust():
    rec = HashOnlyCommitment().record(SECRET)
    assert rec.script_hex is None
    assert rec.is_unspendable is False
    assert rec.trust_model.startswith("conventional")
    assert rec.import_command is None


def test_explain_bundle():
    rec = explain(SECRET)
    assert rec.identifier == commit(SECRET)
    assert len(rec.technical_proof) == 4
    assert "OP_RETURN" in rec.technical_proof[1]
    sa = rec.script_analysis
    assert sa is not None
    assert sa.script_type == "P2SH wrapping OP_RETURN"
    assert sa.script_start == "6a"
    assert sa.input_hash_included is True
    assert sa.protocol_reference == PROTOCOL_REFERENCE

    d = rec.to_dict()
    assert isinstance(d["technical_proof"], list)
    assert d["script_analysis"]["script_start"] == "6a"


def test_custom_marker_changes_identifier():
    default = ScriptCommitment()
    custom = ScriptCommitment(marker="NOTE:")
    assert custom.commit(SECRET) != default.commit(SECRET)
    assert custom.verify(custom.commit(SECRET), SECRET)
    assert not default.verify(custom.commit(SECRET), SECRET)


def test_oversized_marker_raises_payload_too_large():
    codec = ScriptCommitment(marker=b"m" * 224)
    with pytest.raises(PayloadTooLarge):
        codec.commit(SECRET)
    assert codec.verify("3Pgj8p4czouRjqD6nEry3AoEsSX2y6Xtgv", SECRET) is False


def test_package_reexports():
    assert commitaddr.commit is commit
    assert issubclass(commitaddr.ChecksumMismatch, CommitError)
    assert isinstance(commitaddr.__version__, str)
