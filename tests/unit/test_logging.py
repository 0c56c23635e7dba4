from __future__ import annotations

import io
import json
import logging

from commitaddr import config as cfgmod
from commitaddr import logging as clog


def _lines(buf: io.StringIO) -> list[str]:
    return [ln for ln in buf.getvalue().splitlines() if ln.strip()]


def test_json_formatter_includes_context_and_extras():
    buf = io.StringIO()
    clog.configure(json=True, level="INFO", stream=buf)
    log = clog.get_logger("commitaddr.test")
    with clog.trace_scope("t-123"):
        clog.bind(command="generate")
        log.info("committed", extra={"identifier": "3abc", "raw": b"\x01\x02"})
        log.debug("hidden")

    lines = _lines(buf)
    assert len(lines) == 1
    rec = json.loads(lines[0])
    assert rec["msg"] == "committed"
    assert rec["level"] == "INFO"
    assert rec["logger"] == "commitaddr.test"
    assert rec["trace_id"] == "t-123"
    assert rec["command"] == "generate"
    assert rec["identifier"] == "3abc"
    assert rec["raw"] == "0102"


def test_trace_scope_restores_context():
    clog.bind(command="verify")
    with clog.trace_scope():
        assert len(clog.context()["trace_id"]) == 12
    assert clog.context() == {"command": "verify"}
    clog.unbind("command")
    assert clog.context() == {}


def test_text_formatter_one_liner_without_color():
    buf = io.StringIO()
    clog.configure(json=False, level="DEBUG", stream=buf)
    clog.bind(trace_id="abc", variant="script")
    clog.get_logger("commitaddr.cli").debug("verified", extra={"ok": True})
    line = _lines(buf)[0]
    assert "\x1b[" not in line
    assert "| DEBUG | commitaddr.cli | trace_id=abc variant=script ok=True | verified" in line


def test_library_loggers_are_quiet_by_default():
    buf = io.StringIO()
    clog.configure(json=False, stream=buf)
    logging.getLogger("commitaddr.commitment").info("noise")
    assert buf.getvalue() == ""


def test_level_coercion_and_env_format(monkeypatch):
    assert clog._coerce_level("info") == logging.INFO
    assert clog._coerce_level(15) == 15
    assert clog._coerce_level("nonsense") == logging.WARNING
    monkeypatch.setenv("COMMITADDR_LOG_FORMAT", "json")
    assert clog._decide_json(None) is True
    assert clog._decide_json(False) is False


def test_configure_from_config():
    cfg = cfgmod.load(logging={"level": "ERROR", "format": "json"})
    clog.configure_from_config(cfg)
    logger = logging.getLogger("commitaddr")
    assert logger.level == logging.ERROR
    assert isinstance(logger.handlers[0].formatter, clog.JSONFormatter)
    assert logger.propagate is False
