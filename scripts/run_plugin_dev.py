"""Developer test runner for Proton Port Sync.

Usage:
  python scripts/run_plugin_dev.py --vpn-log "C:/Users/me/AppData/Local/Proton/Proton VPN/Logs/client-logs.txt"

Runs the port sync task outside the host against an in-memory settings
store, performs a number of ticks without waiting for the real timer and
prints the resulting listen ports.
"""
import argparse
import logging
import os
import sys


class _MemoryStore:
    """Just enough of the host config API for a local run."""

    def __init__(self, values):
        self.values = dict(values)

    def get_int(self, key, default=0):
        return int(self.values.get(key, default))

    def get_bool(self, key, default=False):
        return bool(self.values.get(key, default))

    def get_str(self, key, default=""):
        return str(self.values.get(key, default))

    def set(self, key, value):
        self.values[key] = value


def main():
    parser = argparse.ArgumentParser(description="Run Proton Port Sync checks locally")
    parser.add_argument("--vpn-log", help="Path to the Proton VPN client log (default: LOCALAPPDATA location)")
    parser.add_argument("--ticks", type=int, default=1, help="Number of scheduler firings to simulate")
    parser.add_argument("--check-secs", type=int, default=120, help="Check interval in seconds")
    parser.add_argument("--port", type=int, default=6881, help="Initial TCP/UDP listen port")
    parser.add_argument("--debug-level", type=int, default=1, help="Debug verbosity 1 (most) to 5 (least)")
    args = parser.parse_args()

    project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    package_root = os.path.join(project_root, "src")
    if package_root not in sys.path:
        sys.path.insert(0, package_root)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    from protonportsync import Config, HostPortSettings, PortSyncTask
    from protonportsync.port_settings import CORE_TCP_PORT_KEY, CORE_UDP_PORT_KEY

    store = _MemoryStore({
        "ProtonPort_enable": True,
        "ProtonPort_debug": True,
        "ProtonPort_debug_level": args.debug_level,
        "ProtonPort_check_secs": args.check_secs,
        "ProtonPort_vpn_log_path": args.vpn_log or "",
        CORE_TCP_PORT_KEY: args.port,
        CORE_UDP_PORT_KEY: args.port,
    })
    config = Config(store)
    task = PortSyncTask(config, HostPortSettings(config))

    for _ in range(max(1, args.ticks)):
        decision = task.on_tick()
        if decision is not None:
            print(f"tick {decision.tick_index}: due={decision.due}")

    print(f"TCP listen port: {store.values[CORE_TCP_PORT_KEY]}")
    print(f"UDP listen port: {store.values[CORE_UDP_PORT_KEY]}")


if __name__ == "__main__":
    main()
