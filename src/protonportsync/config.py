"""
Configuration management for Proton Port Sync.

Uses the host's configuration API for storing plugin preferences.
Configuration is persisted by the host; this module only namespaces the
keys, supplies defaults and enforces the parameter bounds.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from . import plugin_logger
from . import paths

try:
    from config import config
except Exception:
    # Fallback for local testing without the host
    config = None

logger = plugin_logger(__name__)

# Configuration key prefix to namespace plugin settings
CONFIG_PREFIX = "ProtonPort_"

DEFAULTS_FILE_NAME = "config_defaults.json"

DEBUG_LEVEL_MIN = 1
DEBUG_LEVEL_MAX = 5
CHECK_SECS_MIN = 15
CHECK_SECS_MAX = 86400

# Fallback defaults used if the external defaults file cannot be read.
_FALLBACK_DEFAULTS = {
    "enable": True,
    "debug": False,
    "debug_level": 1,
    "check_secs": 120,
    "vpn_log_path": "",
}

_TRUE_LITERALS = {"1", "true", "yes", "on", "y", "t"}
_FALSE_LITERALS = {"0", "false", "no", "off", "n", "f", ""}


def _load_defaults_from_file() -> dict[str, Any]:
    defaults = dict(_FALLBACK_DEFAULTS)
    defaults_path = Path(__file__).resolve().with_name(DEFAULTS_FILE_NAME)
    try:
        raw = defaults_path.read_text(encoding="utf-8")
    except OSError as e:
        logger.warning(
            "Could not read defaults file '%s': %s; using built-in defaults",
            defaults_path,
            e,
        )
        return defaults

    try:
        loaded = json.loads(raw)
    except ValueError as e:
        logger.warning(
            "Failed parsing defaults file '%s': %s; using built-in defaults",
            defaults_path,
            e,
        )
        return defaults

    if not isinstance(loaded, dict):
        logger.warning(
            "Defaults file '%s' is not a JSON object; using built-in defaults",
            defaults_path,
        )
        return defaults

    for key, value in loaded.items():
        if key in _FALLBACK_DEFAULTS and type(value) is type(_FALLBACK_DEFAULTS[key]):
            defaults[key] = value
    return defaults


# Defaults for all configuration keys. Loaded from config_defaults.json.
DEFAULTS = _load_defaults_from_file()


def as_bool(value: Any, default: bool = False) -> bool:
    """Convert store values (bool, int or string literals) to bool."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in _TRUE_LITERALS:
            return True
        if normalized in _FALSE_LITERALS:
            return False
    return default


def clamp_int(value: Any, default: int, minimum: int, maximum: int) -> int:
    """Parse *value* as int and clamp it into [minimum, maximum]."""
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        parsed = default
    return max(minimum, min(maximum, parsed))


@dataclass(frozen=True)
class PortSyncSettings:
    """Per-tick snapshot of the plugin parameters."""

    enabled: bool = True
    debug: bool = False
    debug_level: int = 1
    check_secs: int = 120
    vpn_log_path: str = ""


class Config:
    """
    Manages configuration for Proton Port Sync using the host's config API.

    Plugin keys are stored under ``CONFIG_PREFIX``; core host keys (the
    listen ports) are read and written without a prefix.

    For local testing without the host, falls back to in-memory defaults.
    """

    def __init__(self, store: Any = None):
        """
        Args:
            store: Host config object; defaults to the host's ``config.config``.
        """
        self._store = store if store is not None else config
        self._default_vpn_log_path: Optional[str] = None

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by key.

        Args:
            key: Configuration key name.
            default: Default value if key not found (uses DEFAULTS if not provided).

        Returns:
            Configuration value, or default.
        """
        if default is None:
            default = DEFAULTS.get(key)

        if self._store is None:
            # Local testing mode: return defaults
            return default

        try:
            expected_type = type(default)
            if expected_type is bool:
                return self._store.get_bool(f"{CONFIG_PREFIX}{key}", default)
            elif expected_type is int:
                return self._store.get_int(f"{CONFIG_PREFIX}{key}", default)
            elif expected_type is str:
                return self._store.get_str(f"{CONFIG_PREFIX}{key}", default)

            # Fallback for unknown types
            return default

        except Exception as e:
            logger.warning(f"Failed to retrieve config key '{key}': {e}")
            return default

    def set(self, key: str, value: Any) -> None:
        """
        Set configuration value.

        Args:
            key: Configuration key name.
            value: Value to store.
        """
        if self._store is None:
            logger.debug(f"Config.set({key}, {value}) called in test mode (no host config)")
            return

        try:
            self._store.set(f"{CONFIG_PREFIX}{key}", value)
            logger.debug(f"Configuration '{key}' set to {value}")
        except Exception as e:
            logger.error(f"Failed to set config key '{key}': {e}")

    def get_core_int(self, key: str, default: int) -> int:
        """Read an un-prefixed host integer setting.

        Unlike ``get``, store errors propagate to the caller.
        """
        if self._store is None:
            return default
        return int(self._store.get_int(key, default))

    def set_core(self, key: str, value: Any) -> None:
        """Write an un-prefixed host setting. Store errors propagate."""
        if self._store is None:
            logger.debug(f"Config.set_core({key}, {value}) called in test mode (no host config)")
            return
        self._store.set(key, value)

    def default_vpn_log_path(self) -> str:
        """Environment-derived log path, resolved once per instance."""
        if self._default_vpn_log_path is None:
            self._default_vpn_log_path = paths.default_vpn_log_path()
        return self._default_vpn_log_path

    def settings(self) -> PortSyncSettings:
        """Return the current parameters, coerced and clamped to their bounds."""
        vpn_log_path = str(self.get("vpn_log_path") or "").strip()
        if not vpn_log_path:
            vpn_log_path = self.default_vpn_log_path()
        return PortSyncSettings(
            enabled=as_bool(self.get("enable"), DEFAULTS["enable"]),
            debug=as_bool(self.get("debug"), DEFAULTS["debug"]),
            debug_level=clamp_int(
                self.get("debug_level"),
                DEFAULTS["debug_level"],
                DEBUG_LEVEL_MIN,
                DEBUG_LEVEL_MAX,
            ),
            check_secs=clamp_int(
                self.get("check_secs"),
                DEFAULTS["check_secs"],
                CHECK_SECS_MIN,
                CHECK_SECS_MAX,
            ),
            vpn_log_path=vpn_log_path,
        )
