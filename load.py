"""
Plugin Entry Point for Proton Port Sync.

This module is the entry point for the host's plugin system.
The host imports it and calls the module-level functions defined here.

Plugin: Proton Port Sync
Purpose: Keep the incoming TCP/UDP listen ports on the port forwarded by Proton VPN
Author: Proton Port Sync Contributors
License: MIT
"""

import logging
import os
from typing import Any, Optional

try:
    # Support local source-tree runs where package code lives under ./src.
    plugin_src_path = os.path.join(os.path.dirname(__file__), "src")
    if os.path.isdir(plugin_src_path):
        import sys

        if plugin_src_path not in sys.path:
            sys.path.insert(0, plugin_src_path)

    from config import appname
except Exception:
    # Allow local testing outside the host by providing sensible defaults
    appname = "PluginHost"

from protonportsync.version import __version__ as VERSION
from protonportsync.debug_log import LogBuffer

# The plugin_name MUST be the plugin folder name.
plugin_name = os.path.basename(os.path.dirname(os.path.abspath(__file__)))
plugin_logger_name = f"{appname}.{plugin_name}"
logger = logging.getLogger(plugin_logger_name)

# Tell submodules to log under the same host-managed hierarchy.
from protonportsync import set_plugin_logger_name
set_plugin_logger_name(plugin_logger_name)

# Ensure lifecycle visibility even if host/root defaults are WARNING.
if logger.getEffectiveLevel() > logging.INFO:
    logger.setLevel(logging.INFO)

_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(lineno)d:%(funcName)s:%(message)s"


def _make_formatter() -> logging.Formatter:
    formatter = logging.Formatter(_LOG_FORMAT)
    formatter.default_time_format = "%Y-%m-%d %H:%M:%S"
    formatter.default_msec_format = "%s.%03d"
    return formatter


# Local-only fallback logging if the host hasn't configured any handlers.
if not logger.hasHandlers():
    logger_channel = logging.StreamHandler()
    logger_channel.setFormatter(_make_formatter())
    logger.addHandler(logger_channel)

# Log view buffer shown in the preferences panel.
_log_buffer = LogBuffer()
_log_buffer.setFormatter(_make_formatter())
logger.addHandler(_log_buffer)

PLUGIN_DISPLAY_NAME = "Proton Port Sync"
TICK_INTERVAL_SECONDS = 15.0

# Global instances
_config = None
_task = None
_ticker = None
_prefs_vars = {}


def plugin_start3(plugin_dir: str) -> Optional[str]:
    """
    Start the plugin (called by the host on startup).

    Creates the port sync task and schedules it every 15 seconds on a
    background thread.

    Args:
        plugin_dir: Directory where the plugin is installed.

    Returns:
        Plugin name as displayed in the host UI, or None on failure.
    """
    global _config, _task, _ticker

    try:
        from protonportsync import Config, HostPortSettings, PeriodicTicker, PortSyncTask

        logger.info(f"Proton Port Sync v{VERSION} starting")

        if _ticker is not None:
            logger.warning("Plugin started again without a stop; stopping the previous ticker")
            _ticker.stop()
            _ticker = None

        _config = Config()
        settings = _config.settings()
        _task = PortSyncTask(
            _config,
            HostPortSettings(_config),
            tick_interval_seconds=TICK_INTERVAL_SECONDS,
        )
        logger.info(
            "Startup self-check: "
            f"plugin_dir={plugin_dir}, "
            f"enabled={settings.enabled}, "
            f"check_secs={settings.check_secs}, "
            f"vpn_log_path={settings.vpn_log_path or 'unset'}, "
            f"logger={plugin_logger_name}"
        )

        _ticker = PeriodicTicker(_task.on_tick, TICK_INTERVAL_SECONDS)
        _ticker.start()

        return PLUGIN_DISPLAY_NAME

    except Exception as e:
        logger.error(f"Failed to start Proton Port Sync: {e}", exc_info=True)
        return None


def plugin_stop() -> None:
    """
    Stop the plugin (called by the host on shutdown).
    """
    global _ticker

    try:
        logger.info("Proton Port Sync stopping")
        if _ticker:
            _ticker.stop()
            _ticker = None
        logger.info("Proton Port Sync stopped successfully")
    except Exception as e:
        logger.error(f"Error stopping Proton Port Sync: {e}", exc_info=True)


def _persist_prefs_from_ui() -> None:
    """
    Persist UI preferences to config if UI variables are present.
    Includes validation for the bounded integer parameters.
    """
    global _config, _prefs_vars

    if not _prefs_vars or not _config:
        return

    from protonportsync.config import (
        CHECK_SECS_MAX,
        CHECK_SECS_MIN,
        DEBUG_LEVEL_MAX,
        DEBUG_LEVEL_MIN,
    )

    for key in ("enable", "debug"):
        var = _prefs_vars.get(key)
        if var is not None:
            _config.set(key, bool(var.get()))

    for key, minimum, maximum in (
        ("debug_level", DEBUG_LEVEL_MIN, DEBUG_LEVEL_MAX),
        ("check_secs", CHECK_SECS_MIN, CHECK_SECS_MAX),
    ):
        var = _prefs_vars.get(key)
        if var is None:
            continue
        try:
            value = int(str(var.get()).strip())
        except ValueError:
            logger.warning(f"Invalid {key} in preferences; must be an integer")
            continue
        if minimum <= value <= maximum:
            _config.set(key, value)
        else:
            logger.warning(f"Invalid {key} {value}; must be {minimum}-{maximum}")

    path_var = _prefs_vars.get("vpn_log_path")
    if path_var is not None:
        _config.set("vpn_log_path", str(path_var.get()).strip())


def prefs_changed(cmdr: str, is_beta: bool) -> None:
    """
    Called when preferences are changed.

    Stores the panel values; the running task reads them on its next tick.

    Args:
        cmdr: Active profile name (unused).
        is_beta: Whether running a beta host (unused).
    """
    try:
        logger.info("Preferences changed, storing Proton Port Sync settings")
        _persist_prefs_from_ui()
    except Exception as e:
        logger.error(f"Error in prefs_changed: {e}", exc_info=True)


def plugin_prefs(parent, cmdr: str, is_beta: bool):
    """
    Build the plugin preferences UI.

    Delegates panel construction to protonportsync.prefs_panel.
    """
    try:
        from protonportsync.prefs_panel import PrefsPanelDeps, build_plugin_prefs_panel
    except Exception as e:
        logger.error(f"Failed to load preferences panel module: {e}", exc_info=True)
        return None

    def _set_prefs_vars(next_vars: dict[str, Any]) -> None:
        global _prefs_vars
        _prefs_vars = next_vars

    deps = PrefsPanelDeps(
        logger=logger,
        get_config=lambda: _config,
        get_log_lines=_log_buffer.lines,
        set_prefs_vars=_set_prefs_vars,
    )

    return build_plugin_prefs_panel(parent, cmdr, is_beta, deps)
