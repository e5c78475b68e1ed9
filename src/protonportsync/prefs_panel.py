"""
Preferences panel for the Proton Port Sync plugin.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

from .config import CHECK_SECS_MAX, CHECK_SECS_MIN, DEBUG_LEVEL_MAX, DEBUG_LEVEL_MIN

LOG_VIEW_LINES = 200
LOG_VIEW_REFRESH_MS = 2000


@dataclass(frozen=True)
class PrefsPanelDeps:
    """Runtime dependencies for building the plugin preferences panel."""

    logger: Any
    get_config: Callable[[], Any]
    get_log_lines: Callable[[int], list[str]]
    set_prefs_vars: Callable[[dict[str, Any]], None]


def build_plugin_prefs_panel(parent, cmdr: str, is_beta: bool, deps: PrefsPanelDeps):
    """
    Build the plugin preferences UI.

    Uses the host's myNotebook widgets when available.
    """
    _ = (cmdr, is_beta)
    logger = deps.logger
    config = deps.get_config()

    try:
        import tkinter as tk
        from tkinter import ttk
        import myNotebook as nb
    except Exception:
        # Fallback for local testing outside the host where myNotebook may not exist.
        try:
            import tkinter as tk
            from tkinter import ttk

            class _NotebookCompat:
                Frame = ttk.Frame

            nb = _NotebookCompat()
        except Exception as inner_e:
            logger.error(f"Failed to load tkinter for preferences UI: {inner_e}")
            return None

    settings = config.settings() if config else None

    def _stored(key: str, fallback: Any) -> Any:
        value = config.get(key) if config else None
        return fallback if value is None else value

    enable_var = tk.BooleanVar(value=settings.enabled if settings else True)
    debug_var = tk.BooleanVar(value=settings.debug if settings else False)
    debug_level_var = tk.StringVar(value=str(settings.debug_level if settings else DEBUG_LEVEL_MIN))
    check_secs_var = tk.StringVar(value=str(settings.check_secs if settings else 120))
    # Show the stored override, not the computed default, so clearing it restores the default.
    log_path_var = tk.StringVar(value=str(_stored("vpn_log_path", "")))

    deps.set_prefs_vars({
        "enable": enable_var,
        "debug": debug_var,
        "debug_level": debug_level_var,
        "check_secs": check_secs_var,
        "vpn_log_path": log_path_var,
    })

    frame = nb.Frame(parent)
    frame.columnconfigure(1, weight=1)

    row = 0
    enable_check = ttk.Checkbutton(frame, text="Enable Proton VPN port sync", variable=enable_var)
    enable_check.grid(row=row, column=0, columnspan=2, sticky="w", padx=10, pady=(10, 2))

    row += 1
    debug_check = ttk.Checkbutton(frame, text="Debug logging", variable=debug_var)
    debug_check.grid(row=row, column=0, columnspan=2, sticky="w", padx=10, pady=2)

    row += 1
    ttk.Label(frame, text="Debug level (1 = most verbose):").grid(row=row, column=0, sticky="w", padx=10, pady=2)
    debug_level_spin = ttk.Spinbox(
        frame,
        from_=DEBUG_LEVEL_MIN,
        to=DEBUG_LEVEL_MAX,
        textvariable=debug_level_var,
        width=6,
    )
    debug_level_spin.grid(row=row, column=1, sticky="w", pady=2)

    row += 1
    ttk.Label(frame, text="Check interval (seconds):").grid(row=row, column=0, sticky="w", padx=10, pady=2)
    check_secs_spin = ttk.Spinbox(
        frame,
        from_=CHECK_SECS_MIN,
        to=CHECK_SECS_MAX,
        increment=15,
        textvariable=check_secs_var,
        width=8,
    )
    check_secs_spin.grid(row=row, column=1, sticky="w", pady=2)

    row += 1
    ttk.Label(frame, text="Proton VPN log file:").grid(row=row, column=0, sticky="w", padx=10, pady=2)
    log_path_entry = ttk.Entry(frame, textvariable=log_path_var)
    log_path_entry.grid(row=row, column=1, sticky="ew", padx=(0, 10), pady=2)
    row += 1
    ttk.Label(frame, text="Leave empty to use the default Proton VPN location.").grid(
        row=row, column=1, sticky="w", pady=(0, 6)
    )

    def _sync_widget_states(*_args) -> None:
        enabled = bool(enable_var.get())
        for widget in (debug_check, check_secs_spin, log_path_entry):
            widget.configure(state="normal" if enabled else "disabled")
        level_state = "normal" if enabled and bool(debug_var.get()) else "disabled"
        debug_level_spin.configure(state=level_state)

    enable_var.trace_add("write", _sync_widget_states)
    debug_var.trace_add("write", _sync_widget_states)
    _sync_widget_states()

    # Log view
    row += 1
    log_frame = ttk.LabelFrame(frame, text="Log")
    log_frame.grid(row=row, column=0, columnspan=2, sticky="nsew", padx=10, pady=(6, 10))
    frame.rowconfigure(row, weight=1)
    log_frame.columnconfigure(0, weight=1)
    log_frame.rowconfigure(0, weight=1)

    log_text = tk.Text(log_frame, height=12, wrap="none", state="disabled")
    log_scroll = ttk.Scrollbar(log_frame, orient="vertical", command=log_text.yview)
    log_text.configure(yscrollcommand=log_scroll.set)
    log_text.grid(row=0, column=0, sticky="nsew")
    log_scroll.grid(row=0, column=1, sticky="ns")

    last_rendered: list[Optional[list[str]]] = [None]

    def _refresh_log_view() -> None:
        try:
            if not log_text.winfo_exists():
                return
            lines = deps.get_log_lines(LOG_VIEW_LINES)
            if lines != last_rendered[0]:
                last_rendered[0] = lines
                log_text.configure(state="normal")
                log_text.delete("1.0", "end")
                log_text.insert("end", "\n".join(lines))
                log_text.see("end")
                log_text.configure(state="disabled")
            log_text.after(LOG_VIEW_REFRESH_MS, _refresh_log_view)
        except tk.TclError:
            # Panel was destroyed between refreshes
            return

    _refresh_log_view()
    return frame
