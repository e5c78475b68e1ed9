"""Unit tests for Config module."""

from pathlib import Path

import pytest

from protonportsync import paths
from protonportsync.config import DEFAULTS, Config, PortSyncSettings, as_bool, clamp_int
from tests.host_fakes import FakeHostStore


def test_config_defaults():
    """Config without a host store answers with defaults."""
    config = Config()

    assert config.get("enable") is True
    assert config.get("debug") is False
    assert config.get("debug_level") == 1
    assert config.get("check_secs") == 120
    assert config.get("vpn_log_path") == ""


def test_defaults_file_matches_builtin_keys():
    assert set(DEFAULTS) == {"enable", "debug", "debug_level", "check_secs", "vpn_log_path"}


def test_keys_are_prefixed_in_host_store():
    store = FakeHostStore()
    config = Config(store)
    config.set("check_secs", 300)
    assert store.writes == [("ProtonPort_check_secs", 300)]
    assert config.get("check_secs") == 300


def test_store_errors_fall_back_to_default():
    class BrokenStore(FakeHostStore):
        def get_int(self, key, default=0):
            raise RuntimeError("registry unavailable")

    assert Config(BrokenStore()).get("check_secs") == 120


def test_settings_snapshot(store, vpn_log):
    settings = Config(store).settings()
    assert settings == PortSyncSettings(
        enabled=True,
        debug=True,
        debug_level=1,
        check_secs=120,
        vpn_log_path=str(vpn_log),
    )


@pytest.mark.parametrize(
    "stored, expected",
    [(0, 1), (1, 1), (3, 3), (5, 5), (9, 5)],
)
def test_debug_level_clamped(stored, expected):
    store = FakeHostStore(ProtonPort_debug_level=stored)
    assert Config(store).settings().debug_level == expected


@pytest.mark.parametrize(
    "stored, expected",
    [(1, 15), (15, 15), (120, 120), (86400, 86400), (100000, 86400)],
)
def test_check_secs_clamped(stored, expected):
    store = FakeHostStore(ProtonPort_check_secs=stored)
    assert Config(store).settings().check_secs == expected


def test_empty_log_path_uses_environment_default(monkeypatch, tmp_path):
    monkeypatch.setenv("LOCALAPPDATA", str(tmp_path))
    settings = Config(FakeHostStore(ProtonPort_vpn_log_path="  ")).settings()
    assert Path(settings.vpn_log_path) == tmp_path / "Proton" / "Proton VPN" / "Logs" / "client-logs.txt"


def test_missing_localappdata_leaves_path_empty(monkeypatch, caplog):
    monkeypatch.delenv("LOCALAPPDATA", raising=False)
    assert paths.default_vpn_log_path() == ""
    assert "LOCALAPPDATA is not set" in caplog.text


def test_snapshot_path_prefers_temp(monkeypatch, tmp_path):
    monkeypatch.setenv("TEMP", str(tmp_path))
    assert paths.snapshot_path() == tmp_path / "client-logs.txt"


def test_snapshot_path_without_temp(monkeypatch):
    import tempfile

    monkeypatch.delenv("TEMP", raising=False)
    assert paths.snapshot_path() == Path(tempfile.gettempdir()) / "client-logs.txt"


@pytest.mark.parametrize(
    "value, expected",
    [(True, True), (0, False), ("yes", True), ("off", False), ("maybe", False), (None, False)],
)
def test_as_bool(value, expected):
    assert as_bool(value) is expected


def test_clamp_int_bad_value_uses_default():
    assert clamp_int("abc", 120, 15, 86400) == 120
