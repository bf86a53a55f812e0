"""
Tests for capset_shared: result.py, types.py, errors.py, time.py, log.py.
"""
from __future__ import annotations

import json
import logging

import pytest

from capset_shared import errors as errors_mod
from capset_shared import log as log_mod
from capset_shared import result as result_mod
from capset_shared import time as time_mod
from capset_shared.types import RATING_BUCKETS, ErrorCode, RatingLabel, is_image_file


# ─── result.py ─────────────────────────────────────────────────────────────


def test_result_err_with_enum_code():
    r = result_mod.Result.Err(ErrorCode.NOT_A_DIRECTORY, "missing root")
    assert not r.ok
    assert r.code == "NOT_A_DIRECTORY"
    assert r.error == "missing root"


def test_result_ok_keeps_meta():
    r = result_mod.Result.Ok([1, 2], root="/data")
    assert r.ok and r.code == "OK"
    assert r.meta == {"root": "/data"}


def test_result_map_and_unwrap():
    r = result_mod.Result.Ok(5).map(lambda x: x * 2)
    assert r.unwrap() == 10
    err = result_mod.Result.Err("IO_ERROR", "boom")
    assert err.map(lambda x: x) is err
    assert err.unwrap_or(3) == 3
    with pytest.raises(ValueError, match="IO_ERROR"):
        err.unwrap()


# ─── types.py ──────────────────────────────────────────────────────────────


@pytest.mark.parametrize(
    "value, expected",
    [
        ("good", RatingLabel.GOOD),
        (" BAD ", RatingLabel.BAD),
        ("needs_edit", RatingLabel.NEEDS_EDIT),
        ("none", RatingLabel.NONE),
        ("excellent", RatingLabel.NONE),
        (None, RatingLabel.NONE),
        (RatingLabel.GOOD, RatingLabel.GOOD),
    ],
)
def test_rating_label_parse(value, expected):
    assert RatingLabel.parse(value) is expected


def test_rating_buckets_order_excludes_none():
    assert [b.value for b in RATING_BUCKETS] == ["good", "bad", "needs_edit"]


def test_is_image_file_extensions():
    for name in ("a.png", "b.JPG", "c.jpeg", "d.webp", "e.gif", "f.BMP"):
        assert is_image_file(name)
    for name in ("a.txt", "b.tiff", "noext", ".png.txt"):
        assert not is_image_file(name)


# ─── errors.py ─────────────────────────────────────────────────────────────


def test_sanitize_error_message_masks_paths():
    msg = errors_mod.sanitize_error_message(OSError("cannot open /home/user/secret/x.png"), "Export failed")
    assert msg.startswith("Export failed: ")
    assert "/home/user" not in msg
    assert "[path]" in msg


def test_sanitize_error_message_fallbacks():
    assert errors_mod.sanitize_error_message(None, "Nope") == "Nope"
    assert errors_mod.sanitize_error_message(Exception(""), "Nope") == "Nope"
    assert errors_mod.sanitize_error_message("x", "") == "An error occurred: x"


# ─── time.py ───────────────────────────────────────────────────────────────


def test_timer_with_logger(caplog):
    log = logging.getLogger("test_timer")
    with caplog.at_level(logging.DEBUG, logger="test_timer"):
        with time_mod.timer("op", log):
            pass
    assert any("op took" in r.message for r in caplog.records)


def test_timer_without_logger(capsys):
    with time_mod.timer("myop"):
        pass
    assert "myop" in capsys.readouterr().out


# ─── log.py ────────────────────────────────────────────────────────────────


def test_get_logger_strips_package_prefix():
    lg = log_mod.get_logger("capset_backend.features.export.service")
    assert lg.name == "capset.features.export.service"
    assert any(isinstance(f, log_mod.CorrelationFilter) for f in lg.filters)


def test_correlation_filter_injects_request_id():
    token = log_mod.request_id_var.set("rid-123")
    try:
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "m", None, None)
        assert log_mod.CorrelationFilter().filter(record) is True
        assert record.request_id == "rid-123"
    finally:
        log_mod.request_id_var.reset(token)


def test_log_success_and_structured():
    records: list[logging.LogRecord] = []

    class _Collect(logging.Handler):
        def emit(self, record):
            records.append(record)

    lg = logging.getLogger("capset.test.collect")
    lg.setLevel(logging.DEBUG)
    lg.addHandler(_Collect())
    lg.propagate = False

    log_mod.log_success(lg, "done")
    log_mod.log_structured(lg, logging.INFO, "export", exported=3)

    assert records[0].levelno == log_mod.SUCCESS_LEVEL
    assert records[0].levelname == "SUCCESS"
    payload = json.loads(records[1].getMessage())
    assert payload["message"] == "export"
    assert payload["context"] == {"exported": 3}
