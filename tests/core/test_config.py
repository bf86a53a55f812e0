import pytest

from capset_backend import config
from capset_backend import utils


def test_env_int_parses_and_clamps(monkeypatch):
    monkeypatch.setenv("CAPSET_TEST_INT", "5")
    assert config._env_int(1, "CAPSET_TEST_INT", min_value=10) == 10
    monkeypatch.setenv("CAPSET_TEST_INT", "50000")
    assert config._env_int(1, "CAPSET_TEST_INT", max_value=9999) == 9999
    monkeypatch.setenv("CAPSET_TEST_INT", "not-a-number")
    assert config._env_int(7, "CAPSET_TEST_INT") == 7


def test_env_raw_uses_first_non_empty(monkeypatch):
    monkeypatch.setenv("CAPSET_A", "  ")
    monkeypatch.setenv("CAPSET_B", " value ")
    assert config._env_raw("CAPSET_A", "CAPSET_B") == "value"
    assert config._env_raw("CAPSET_MISSING", default="d") == "d"


def test_env_float_and_bool(monkeypatch):
    monkeypatch.setenv("CAPSET_TEST_FLOAT", "-3")
    assert config._env_float(1.0, "CAPSET_TEST_FLOAT", min_value=0.0) == 0.0
    monkeypatch.setenv("CAPSET_TEST_BOOL", "yes")
    assert config._env_bool(False, "CAPSET_TEST_BOOL") is True
    assert config._env_bool(True, "CAPSET_TEST_BOOL_MISSING") is True


@pytest.mark.parametrize("raw, expected", [(None, ".txt"), ("caption", ".caption"), (".TXT", ".txt")])
def test_caption_ext_normalization(raw, expected):
    assert config._caption_ext(raw) == expected


def test_defaults_are_sane():
    assert config.RATINGS_FILENAME == ".capset_ratings.json"
    assert config.EXPORT_CHUNK_BYTES >= 16 * 1024
    assert 1 <= config.CROP_NAME_MAX <= 9999


@pytest.mark.parametrize(
    "value, expected",
    [(True, True), ("on", True), ("0", False), ("off", False), (1, True), ("2.5", True), ("maybe", False)],
)
def test_parse_bool(value, expected):
    assert utils.parse_bool(value) is expected


def test_env_float_helper(monkeypatch):
    monkeypatch.setenv("CAPSET_TEST_ENV_FLOAT", "bad")
    assert utils.env_float("CAPSET_TEST_ENV_FLOAT", 2.5) == 2.5
    monkeypatch.setenv("CAPSET_TEST_ENV_FLOAT", "0.25")
    assert utils.env_float("CAPSET_TEST_ENV_FLOAT", 2.5) == 0.25
