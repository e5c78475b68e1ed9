"""
Background periodic scheduler.

Runs a callback every ``interval_seconds`` on a single daemon thread, so
firings never overlap.
"""

import threading
from typing import Callable, Optional

from . import plugin_logger

logger = plugin_logger(__name__)


class PeriodicTicker:
    """Invoke *callback* serially at a fixed interval until stopped."""

    def __init__(
        self,
        callback: Callable[[], object],
        interval_seconds: float,
        *,
        name: str = "ProtonPortSyncTicker",
        fire_immediately: bool = False,
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.callback = callback
        self.interval_seconds = interval_seconds
        self.name = name
        self.fire_immediately = fire_immediately
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        # Held for each firing; a loop left behind by a timed-out stop and
        # its replacement never run the callback at the same time.
        self._callback_lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the ticker thread (no-op if already running)."""
        if self._thread is not None:
            return
        # Each run gets its own event so restarting cannot revive a loop
        # that was told to stop.
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run, args=(self._stop_event,), daemon=True, name=self.name
        )
        self._thread.start()

    def stop(self, timeout: float = 2.0) -> None:
        """Signal the thread to exit and wait up to *timeout* seconds."""
        if self._thread is None:
            return
        self._stop_event.set()
        try:
            self._thread.join(timeout=timeout)
        except Exception as e:
            logger.debug(f"Error stopping ticker thread: {e}")
        if self._thread.is_alive():
            logger.warning(f"Ticker thread did not stop within {timeout}s; it exits after its current firing")
        self._thread = None

    def _run(self, stop_event: threading.Event) -> None:
        if not self.fire_immediately:
            stop_event.wait(self.interval_seconds)
        while not stop_event.is_set():
            with self._callback_lock:
                if stop_event.is_set():
                    break
                try:
                    self.callback()
                except Exception as e:
                    logger.error(f"Error in periodic callback: {e}", exc_info=True)
            # Wait for stop signal or the next firing
            stop_event.wait(self.interval_seconds)
