"""Tests for listen-port reconciliation."""

import logging

from protonportsync.port_settings import (
    CORE_TCP_PORT_KEY,
    CORE_UDP_PORT_KEY,
    HostPortSettings,
    PortChange,
    reconcile_ports,
)
from tests.host_fakes import RecordingPortSettings


def test_updates_both_ports(dlog):
    settings = RecordingPortSettings(tcp=6881, udp=6881)
    changes = reconcile_ports(51820, settings, dlog)
    assert changes == [PortChange("TCP", 6881, 51820), PortChange("UDP", 6881, 51820)]
    assert (settings.tcp, settings.udp) == (51820, 51820)


def test_reconcile_is_idempotent(dlog):
    settings = RecordingPortSettings(tcp=6881, udp=6881)
    reconcile_ports(51820, settings, dlog)
    settings.writes.clear()

    assert reconcile_ports(51820, settings, dlog) == []
    assert settings.writes == []


def test_only_differing_port_is_written(dlog):
    settings = RecordingPortSettings(tcp=51820, udp=6881)
    changes = reconcile_ports(51820, settings, dlog)
    assert settings.writes == [("UDP", 51820)]
    assert changes == [PortChange("UDP", 6881, 51820)]


def test_change_logs_report_each_old_value(dlog, caplog):
    caplog.set_level(logging.INFO)
    reconcile_ports(40000, RecordingPortSettings(tcp=1000, udp=2000), dlog)
    messages = [r.getMessage() for r in caplog.records]
    assert "TCP port changed from 1000 to 40000" in messages
    assert "UDP port changed from 2000 to 40000" in messages


def test_no_change_logged_only_at_most_verbose_level(caplog):
    from protonportsync.debug_log import DebugLogger

    caplog.set_level(logging.INFO)
    log = logging.getLogger("protonportsync.tests")
    reconcile_ports(6881, RecordingPortSettings(), DebugLogger(log, True, 2))
    assert caplog.records == []

    reconcile_ports(6881, RecordingPortSettings(), DebugLogger(log, True, 1))
    assert "already the correct port" in caplog.text


def test_failing_write_does_not_block_other_protocol(dlog, caplog):
    class FailingTcp(RecordingPortSettings):
        def set_tcp_port(self, port):
            raise OSError("read-only setting")

    settings = FailingTcp(tcp=6881, udp=6881)
    changes = reconcile_ports(51820, settings, dlog)

    assert changes == [PortChange("UDP", 6881, 51820)]
    assert settings.tcp == 6881
    assert "Failed to update TCP listen port" in caplog.text


def test_host_port_settings_use_core_keys(config, store):
    settings = HostPortSettings(config)
    assert settings.get_tcp_port() == 6881
    settings.set_tcp_port(51820)
    settings.set_udp_port(51821)
    assert store.values[CORE_TCP_PORT_KEY] == 51820
    assert store.values[CORE_UDP_PORT_KEY] == 51821
