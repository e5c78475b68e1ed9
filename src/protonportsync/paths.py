"""
Environment-derived filesystem locations.

The default VPN log path and the snapshot path both depend on per-user
environment variables.  Missing variables never raise: the log path
falls back to an empty string the user must fill in, the snapshot
directory falls back to the interpreter's temp directory.
"""

import os
import tempfile
from pathlib import Path

from . import plugin_logger

logger = plugin_logger(__name__)

# Location of the Proton VPN client log below %LOCALAPPDATA%.
VPN_LOG_RELATIVE = Path("Proton") / "Proton VPN" / "Logs" / "client-logs.txt"

# File name of the transient copy made for each check cycle.
SNAPSHOT_FILE_NAME = "client-logs.txt"


def default_vpn_log_path() -> str:
    """Return the default Proton VPN log path, or "" if LOCALAPPDATA is unset."""
    base = os.environ.get("LOCALAPPDATA", "").strip()
    if not base:
        logger.warning(
            "LOCALAPPDATA is not set; configure the VPN log path manually"
        )
        return ""
    return str(Path(base) / VPN_LOG_RELATIVE)


def snapshot_path() -> Path:
    """Return the fixed path used for the temporary log copy."""
    base = os.environ.get("TEMP", "").strip() or tempfile.gettempdir()
    return Path(base) / SNAPSHOT_FILE_NAME
