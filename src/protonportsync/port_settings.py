"""
Host listen-port settings and their reconciliation with the VPN port.
"""

from dataclasses import dataclass
from typing import Protocol

from . import plugin_logger
from .debug_log import TIER_CHANGE, TIER_TRACE, DebugLogger

logger = plugin_logger(__name__)

# Core (un-prefixed) host keys for the incoming listen ports.
CORE_TCP_PORT_KEY = "TCP.Listen.Port"
CORE_UDP_PORT_KEY = "UDP.Listen.Port"


class PortSettings(Protocol):
    """Readable/writable incoming listen ports owned by the host."""

    def get_tcp_port(self) -> int: ...

    def set_tcp_port(self, port: int) -> None: ...

    def get_udp_port(self) -> int: ...

    def set_udp_port(self, port: int) -> None: ...


class HostPortSettings:
    """``PortSettings`` backed by the host's core configuration keys."""

    def __init__(self, config, default_port: int = 0):
        self.config = config
        self.default_port = default_port

    def get_tcp_port(self) -> int:
        return self.config.get_core_int(CORE_TCP_PORT_KEY, self.default_port)

    def set_tcp_port(self, port: int) -> None:
        self.config.set_core(CORE_TCP_PORT_KEY, int(port))

    def get_udp_port(self) -> int:
        return self.config.get_core_int(CORE_UDP_PORT_KEY, self.default_port)

    def set_udp_port(self, port: int) -> None:
        self.config.set_core(CORE_UDP_PORT_KEY, int(port))


@dataclass(frozen=True)
class PortChange:
    """One listen-port write made during reconciliation."""

    protocol: str
    old: int
    new: int


def reconcile_ports(port: int, settings: PortSettings, dlog: DebugLogger) -> list[PortChange]:
    """
    Bring the TCP and UDP listen ports in line with *port*.

    Only ports that differ are written, so repeating the call with the
    same port is a no-op.  Each protocol is updated independently: a
    failing write is logged and the other protocol is still attempted.

    Returns:
        The writes that succeeded, in TCP, UDP order.
    """
    changes: list[PortChange] = []
    failed = False
    for protocol, getter, setter in (
        ("TCP", settings.get_tcp_port, settings.set_tcp_port),
        ("UDP", settings.get_udp_port, settings.set_udp_port),
    ):
        try:
            current = getter()
            if current == port:
                continue
            setter(port)
        except Exception as e:
            failed = True
            logger.error(f"Failed to update {protocol} listen port to {port}: {e}", exc_info=True)
            continue
        changes.append(PortChange(protocol, current, port))
        dlog.verbose(TIER_CHANGE, "%s port changed from %s to %s", protocol, current, port)

    if not changes and not failed:
        dlog.verbose(TIER_TRACE, "TCP and UDP port are already the correct port number: %s", port)
    return changes
