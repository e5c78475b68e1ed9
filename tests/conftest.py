"""
Pytest configuration and shared fixtures for protonportsync tests.

Path setup is handled by pyproject.toml [tool.pytest.ini_options] pythonpath.
"""

import logging

import pytest

from protonportsync.config import Config
from protonportsync.debug_log import DebugLogger
from protonportsync.port_settings import CORE_TCP_PORT_KEY, CORE_UDP_PORT_KEY, HostPortSettings
from protonportsync.port_sync_task import PortSyncTask
from tests.host_fakes import FakeHostStore, RecordingPortSettings


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def vpn_log(tmp_path):
    """Path of the (not yet written) VPN client log."""
    return tmp_path / "Proton VPN" / "Logs" / "client-logs.txt"


@pytest.fixture
def snapshot_file(tmp_path):
    return tmp_path / "snapshot" / "client-logs.txt"


@pytest.fixture
def store(vpn_log):
    """Host store with debug on at the most verbose level."""
    return FakeHostStore(**{
        "ProtonPort_enable": True,
        "ProtonPort_debug": True,
        "ProtonPort_debug_level": 1,
        "ProtonPort_check_secs": 120,
        "ProtonPort_vpn_log_path": str(vpn_log),
        CORE_TCP_PORT_KEY: 6881,
        CORE_UDP_PORT_KEY: 6881,
    })


@pytest.fixture
def config(store):
    return Config(store)


@pytest.fixture
def port_settings():
    return RecordingPortSettings()


@pytest.fixture
def task(config, port_settings, snapshot_file):
    snapshot_file.parent.mkdir(parents=True, exist_ok=True)
    return PortSyncTask(
        config,
        port_settings,
        tick_interval_seconds=15,
        snapshot_path_factory=lambda: snapshot_file,
    )


@pytest.fixture
def host_task(config, snapshot_file):
    """Task writing through to the fake host store's core port keys."""
    snapshot_file.parent.mkdir(parents=True, exist_ok=True)
    return PortSyncTask(
        config,
        HostPortSettings(config),
        tick_interval_seconds=15,
        snapshot_path_factory=lambda: snapshot_file,
    )


@pytest.fixture
def dlog():
    """Debug logger at the most verbose level."""
    return DebugLogger(logging.getLogger("protonportsync.tests"), True, 1)

