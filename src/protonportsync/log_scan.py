"""
Extraction of the forwarded port from the Proton VPN client log.

The client logs each port mapping as ``... Port pair 51413 -> 51413 ...``.
Lines are chronological, so the last matching line is the current port.
"""

import re
from pathlib import Path
from typing import Iterable, Optional, Union

from .debug_log import TIER_DETAIL, DebugLogger

PORT_MARKER = "Port pair "
PORT_TERMINATOR = "->"

PORT_MIN = 1
PORT_MAX = 65535

_PORT_TOKEN = re.compile(r"\d+", re.ASCII)


class PortParseError(ValueError):
    """Raised when a marker line does not carry a usable port number."""
    pass


def last_marker_line(lines: Iterable[str]) -> Optional[str]:
    """Return the last line containing the port marker, or None."""
    found = None
    for line in lines:
        if PORT_MARKER in line:
            found = line
    return found


def extract_port_token(line: str) -> str:
    """
    Return the raw text between the marker and the following ``->``.

    The last marker occurrence in the line is used.  Surrounding
    whitespace is stripped.

    Raises:
        PortParseError: If the line has no marker or no ``->`` after it.
    """
    start = line.rfind(PORT_MARKER)
    if start < 0:
        raise PortParseError(f"No '{PORT_MARKER.strip()}' marker in line: {line!r}")
    rest = line[start + len(PORT_MARKER):]
    end = rest.find(PORT_TERMINATOR)
    if end < 0:
        raise PortParseError(f"No '{PORT_TERMINATOR}' after port marker in line: {line!r}")
    return rest[:end].strip()


def parse_port(token: str) -> int:
    """Convert a token of ASCII digits to int.

    Raises:
        PortParseError: If the token is not an integer in 1..65535.
    """
    if not _PORT_TOKEN.fullmatch(token):
        raise PortParseError(f"Port token is not a number: {token!r}")
    port = int(token)
    if not PORT_MIN <= port <= PORT_MAX:
        raise PortParseError(f"Port {port} outside {PORT_MIN}-{PORT_MAX}")
    return port


def read_port_from_log(path: Union[str, Path], dlog: DebugLogger) -> Optional[int]:
    """
    Return the port from the most recent port announcement in *path*.

    Read errors and malformed announcements are logged and reported as
    "no port found" (None).
    """
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            line = last_marker_line(f)
    except OSError as e:
        dlog.error("Error reading VPN log copy (%s): %s", path, e, exc_info=True)
        return None

    if line is None:
        dlog.info("Proton VPN port number wasn't found in log file.")
        return None

    try:
        port = parse_port(extract_port_token(line))
    except PortParseError as e:
        dlog.error("Proton VPN port announcement could not be parsed: %s", e)
        return None

    dlog.verbose(TIER_DETAIL, "Proton VPN port number found in log file: %s", port)
    return port
