"""
Transient copy of the VPN client log.

The VPN client keeps its log open for writing, so each check cycle
copies it to a fixed temp path, reads the copy and deletes it.
"""

import shutil
from enum import Enum
from pathlib import Path
from typing import Union

from .debug_log import TIER_TRACE, DebugLogger

PathLike = Union[str, Path]


class SnapshotResult(Enum):
    COPIED = "copied"
    SOURCE_ABSENT = "source_absent"
    FAILED = "failed"


def copy_snapshot(source: PathLike, target: PathLike, dlog: DebugLogger) -> SnapshotResult:
    """
    Copy *source* to *target*, replacing any previous copy.

    Returns:
        SOURCE_ABSENT if the source does not exist (or no path is configured),
        FAILED on an I/O error, COPIED otherwise.
    """
    if not str(source).strip() or not Path(source).is_file():
        dlog.warning("File does not exist for copying: %s", source)
        return SnapshotResult.SOURCE_ABSENT

    try:
        shutil.copyfile(source, target)
    except OSError as e:
        dlog.error("Error copying file (%s): %s", source, e, exc_info=True)
        return SnapshotResult.FAILED

    dlog.verbose(TIER_TRACE, "File copied successfully from [%s] to [%s]", source, target)
    return SnapshotResult.COPIED


def delete_snapshot(target: PathLike, dlog: DebugLogger) -> bool:
    """Remove the temporary copy. Failures are logged, never raised."""
    try:
        Path(target).unlink()
    except OSError as e:
        dlog.error("Error deleting file (%s): %s", target, e, exc_info=True)
        return False
    dlog.verbose(TIER_TRACE, "Temporary log copy deleted: %s", target)
    return True
