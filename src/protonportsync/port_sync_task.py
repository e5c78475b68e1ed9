"""
Periodic task that syncs the host's listen ports with the Proton VPN port.

Each scheduler firing calls ``PortSyncTask.on_tick``.  On a due tick the
task runs a check cycle: snapshot the VPN log, extract the last
announced port, delete the snapshot and reconcile the host settings.
"""

from pathlib import Path
from typing import Callable, Optional

from . import plugin_logger
from .config import Config, PortSyncSettings
from .debug_log import TIER_TRACE, DebugLogger
from .log_scan import read_port_from_log
from .paths import snapshot_path
from .port_settings import PortChange, PortSettings, reconcile_ports
from .schedule import TaskState, TickDecision, advance
from .snapshot import SnapshotResult, copy_snapshot, delete_snapshot

logger = plugin_logger(__name__)

# Scheduler firing interval.
DEFAULT_TICK_INTERVAL_SECONDS = 15.0


class PortSyncTask:
    """
    Owns the ``TaskState`` and runs check cycles on due ticks.

    Firings are expected to be serial; the task does no locking of its own.
    """

    def __init__(
        self,
        config: Config,
        port_settings: PortSettings,
        *,
        tick_interval_seconds: float = DEFAULT_TICK_INTERVAL_SECONDS,
        snapshot_path_factory: Callable[[], Path] = snapshot_path,
    ):
        self.config = config
        self.port_settings = port_settings
        self.tick_interval_seconds = tick_interval_seconds
        self._snapshot_path_factory = snapshot_path_factory
        self.state = TaskState()
        self._warned_check_secs: Optional[int] = None

    def on_tick(self) -> Optional[TickDecision]:
        """
        Handle one scheduler firing.

        Never raises; unexpected failures are logged and the firing is
        abandoned so the scheduler keeps running.
        """
        try:
            settings = self.config.settings()
            decision = advance(
                self.state,
                settings.enabled,
                settings.check_secs,
                self.tick_interval_seconds,
            )
            self.state = decision.state
            dlog = DebugLogger(logger, settings.debug, settings.debug_level)

            if decision.enable_changed:
                dlog.verbose(
                    TIER_TRACE,
                    "Proton Port Sync enabled state changed to: %s",
                    settings.enabled,
                )
            if not settings.enabled:
                return decision

            self._warn_if_interval_adjusted(settings, decision.effective_check_secs)
            if decision.due:
                self.run_check_cycle(settings, dlog)
            return decision
        except Exception as e:
            logger.error(f"Port sync tick failed: {e}", exc_info=True)
            return None

    def run_check_cycle(self, settings: PortSyncSettings, dlog: DebugLogger) -> list[PortChange]:
        """Snapshot, extract and reconcile. Returns the port writes made."""
        target = self._snapshot_path_factory()
        result = copy_snapshot(settings.vpn_log_path, target, dlog)
        if result is not SnapshotResult.COPIED:
            return []

        try:
            port = read_port_from_log(target, dlog)
        finally:
            delete_snapshot(target, dlog)

        if port is None:
            return []
        return reconcile_ports(port, self.port_settings, dlog)

    def _warn_if_interval_adjusted(self, settings: PortSyncSettings, effective: int) -> None:
        if effective == settings.check_secs:
            self._warned_check_secs = None
            return
        if self._warned_check_secs == settings.check_secs:
            return
        self._warned_check_secs = settings.check_secs
        logger.warning(
            f"Check interval {settings.check_secs}s is not a multiple of the "
            f"{self.tick_interval_seconds:g}s tick; checking every {effective}s instead"
        )
