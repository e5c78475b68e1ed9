"""Tests for the temporary log copy."""

import logging

from protonportsync.debug_log import DebugLogger
from protonportsync.snapshot import SnapshotResult, copy_snapshot, delete_snapshot
from tests.host_fakes import write_log


def test_copy_replaces_previous_snapshot(tmp_path, dlog):
    source = write_log(tmp_path / "client-logs.txt", "Port pair 1 -> 1")
    target = tmp_path / "copy.txt"
    target.write_text("stale", encoding="utf-8")

    assert copy_snapshot(source, target, dlog) is SnapshotResult.COPIED
    assert target.read_text(encoding="utf-8") == "Port pair 1 -> 1\n"


def test_absent_source_creates_nothing(tmp_path, dlog, caplog):
    caplog.set_level(logging.INFO)
    target = tmp_path / "copy.txt"

    assert copy_snapshot(tmp_path / "missing.txt", target, dlog) is SnapshotResult.SOURCE_ABSENT
    assert not target.exists()
    assert [r.levelno for r in caplog.records] == [logging.WARNING]


def test_empty_source_path_counts_as_absent(tmp_path, dlog):
    assert copy_snapshot("", tmp_path / "copy.txt", dlog) is SnapshotResult.SOURCE_ABSENT


def test_absent_source_silent_without_debug(tmp_path, caplog):
    caplog.set_level(logging.INFO)
    quiet = DebugLogger(logging.getLogger("protonportsync.tests"), False, 1)
    copy_snapshot(tmp_path / "missing.txt", tmp_path / "copy.txt", quiet)
    assert caplog.records == []


def test_copy_failure_reported(tmp_path, dlog, caplog):
    caplog.set_level(logging.INFO)
    source = write_log(tmp_path / "client-logs.txt", "x")
    # Target inside a missing directory cannot be written
    target = tmp_path / "no-such-dir" / "copy.txt"

    assert copy_snapshot(source, target, dlog) is SnapshotResult.FAILED
    assert "Error copying file" in caplog.text


def test_delete_removes_snapshot(tmp_path, dlog):
    target = write_log(tmp_path / "copy.txt", "x")
    assert delete_snapshot(target, dlog) is True
    assert not target.exists()


def test_delete_failure_is_not_raised(tmp_path, dlog, caplog):
    caplog.set_level(logging.INFO)
    assert delete_snapshot(tmp_path / "gone.txt", dlog) is False
    assert "Error deleting file" in caplog.text
