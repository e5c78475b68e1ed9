"""
Tick bookkeeping and the "is a check due" decision.

All functions here are pure: the task threads a ``TaskState`` value
through them so the cadence can be tested without real timers.
"""

from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class TaskState:
    """
    Running state of the port sync task.

    Attributes:
        enabled: Last observed enable flag; ``None`` before the first tick.
        tick_count: Number of scheduler firings handled so far.
    """

    enabled: Optional[bool] = None
    tick_count: int = 0


@dataclass(frozen=True)
class TickDecision:
    """Outcome of one scheduler firing."""

    state: TaskState
    tick_index: int
    enable_changed: bool
    due: bool
    effective_check_secs: int


def base_seconds(interval_seconds: float) -> int:
    """Scheduler interval in whole seconds (never below 1)."""
    return max(1, int(round(interval_seconds)))


def effective_check_secs(check_secs: int, base_secs: int) -> int:
    """
    Normalize the configured check interval to a multiple of the tick.

    Intervals that are not a multiple of ``base_secs`` are rounded to the
    nearest multiple, ties rounding up, and never below one tick.
    """
    if check_secs % base_secs == 0:
        return max(check_secs, base_secs)
    ticks = (check_secs + base_secs // 2) // base_secs
    return max(1, ticks) * base_secs


def is_check_due(tick_index: int, base_secs: int, check_secs: int) -> bool:
    """True when ``tick_index * base_secs`` lands on a check boundary."""
    return (tick_index * base_secs) % check_secs == 0


def advance(
    state: TaskState,
    enabled: bool,
    check_secs: int,
    interval_seconds: float,
) -> TickDecision:
    """Consume one firing and decide whether it should run a check."""
    tick_index = state.tick_count
    enable_changed = state.enabled is None or state.enabled != enabled
    new_state = replace(state, enabled=enabled, tick_count=tick_index + 1)

    base = base_seconds(interval_seconds)
    effective = effective_check_secs(check_secs, base)
    due = enabled and is_check_due(tick_index, base, effective)
    return TickDecision(
        state=new_state,
        tick_index=tick_index,
        enable_changed=enable_changed,
        due=due,
        effective_check_secs=effective,
    )
