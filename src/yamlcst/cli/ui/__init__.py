from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console
from rich.theme import Theme

from yamlcst.cli.ui.formatters import (
    DiagnosticsRenderOptions,
    render_check_summary,
    render_diagnostics_table,
    render_errors,
    render_keys_table,
)

THEME = Theme(
    {
        "ok": "bold green",
        "warn": "bold yellow",
        "muted": "dim",
        "path": "cyan",
        "code": "magenta",
        "sev.error": "bold red",
        "sev.warning": "yellow",
    }
)


@dataclass(frozen=True)
class UI:
    console: Console
    verbose: bool = False


def get_ui(*, verbose: bool = False, stderr: bool = False) -> UI:
    return UI(console=Console(theme=THEME, stderr=stderr), verbose=verbose)


__all__ = [
    "UI",
    "DiagnosticsRenderOptions",
    "get_ui",
    "render_check_summary",
    "render_diagnostics_table",
    "render_errors",
    "render_keys_table",
]
