"""
Proton Port Sync - keep the host's listen ports on the Proton VPN forwarded port.

Periodically reads the Proton VPN client log, extracts the most recent
``Port pair N -> M`` announcement and writes the port into the host's
incoming TCP and UDP listen-port settings.
"""

import logging
import sys

from .version import __version__

__author__ = "Proton Port Sync Contributors"
__license__ = "MIT"

# Central logger name for the plugin.  load.py sets this to
# "<appname>.<folder>" at host startup so every submodule logs under the
# hierarchy the host manages.  During tests (where load.py is never
# imported) the default "protonportsync" parent is used.
_PLUGIN_LOGGER_NAME: str = "protonportsync"


def set_plugin_logger_name(name: str) -> None:
    """Override the plugin logger name (called by load.py at host startup)."""
    global _PLUGIN_LOGGER_NAME
    _PLUGIN_LOGGER_NAME = name

    # Rebind module-level logger objects in already-imported submodules;
    # they created their logger globals at import time.
    _submodule_names = (
        "config", "paths",
        "port_settings", "port_sync_task", "ticker",
    )
    for suffix in _submodule_names:
        module = sys.modules.get(f"protonportsync.{suffix}")
        if module is not None and hasattr(module, "logger"):
            module.logger = plugin_logger(module.__name__)


def plugin_logger(module: str) -> logging.Logger:
    """Return a child logger under the plugin hierarchy.

    Usage in submodules::

        from protonportsync import plugin_logger
        logger = plugin_logger(__name__)

    Inside the host this yields e.g. ``<appname>.<folder>.config``.
    During tests it yields ``protonportsync.config``.
    """
    base = _PLUGIN_LOGGER_NAME
    prefix = "protonportsync."
    if module.startswith(prefix):
        return logging.getLogger(f"{base}.{module[len(prefix):]}")
    return logging.getLogger(base)


from .config import Config, PortSyncSettings
from .port_settings import HostPortSettings, PortChange, reconcile_ports
from .port_sync_task import PortSyncTask
from .schedule import TaskState
from .ticker import PeriodicTicker

__all__ = [
    "Config",
    "PortSyncSettings",
    "HostPortSettings",
    "PortChange",
    "reconcile_ports",
    "PortSyncTask",
    "TaskState",
    "PeriodicTicker",
]
