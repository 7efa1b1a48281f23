from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from yamlcst.core.models import CheckError, CheckResult, FileReport, Severity
from yamlcst.parsers.types import ParsedKV


# ----------------------------
# Severity helpers
# ----------------------------

_SEV_ORDER = {"error": 0, "warning": 1}


def severity_value(sev: object) -> str:
    # sev could be Enum or str
    return getattr(sev, "value", str(sev)).lower()


def severity_style(sev: object) -> str:
    s = severity_value(sev)
    if s in _SEV_ORDER:
        return f"sev.{s}"
    return "muted"


def _short(s: str, max_len: int = 140) -> str:
    s = s or ""
    if len(s) <= max_len:
        return s
    return s[:max_len] + "…"


# ----------------------------
# Diagnostics table
# ----------------------------

@dataclass(frozen=True)
class DiagnosticsRenderOptions:
    title: Optional[str] = None
    min_severity: Severity = Severity.WARNING
    max_rows: Optional[int] = None  # show only first N rows (still prints count)


def render_diagnostics_table(
    console: Console,
    reports: Sequence[FileReport],
    *,
    opts: Optional[DiagnosticsRenderOptions] = None,
) -> None:
    opts = opts or DiagnosticsRenderOptions()

    rows = [(r.file, d) for r in reports for d in r.at_least(opts.min_severity)]
    if not rows:
        console.print("[ok]✅ No problems found.[/ok]")
        return

    total = len(rows)
    show = rows if opts.max_rows is None else rows[: int(opts.max_rows)]

    table = Table(title=opts.title or f"Diagnostics ({total})", show_lines=False)
    table.add_column("Severity", style="bold", no_wrap=True)
    table.add_column("File", style="path")
    table.add_column("Line", justify="right", no_wrap=True)
    table.add_column("Col", justify="right", no_wrap=True)
    table.add_column("Code", style="code", no_wrap=True)
    table.add_column("Message")

    for file, d in show:
        table.add_row(
            Text(severity_value(d.severity), style=severity_style(d.severity)),
            file,
            str(d.line),
            str(d.column),
            d.code,
            _short(d.message, 120),
        )

    console.print(table)

    if total > len(show):
        console.print(f"[muted]… showing {len(show)} of {total} diagnostics.[/muted]")


# ----------------------------
# Errors
# ----------------------------

def render_errors(
    console: Console,
    errors: Sequence[CheckError],
    *,
    max_items: int = 25,
    verbose: bool = False,
) -> None:
    if not errors:
        return

    console.print(f"[warn]⚠️  {len(errors)} file(s) could not be checked.[/warn]")

    if not verbose:
        console.print("[muted]Run with --verbose to see error details.[/muted]")
        return

    shown = list(errors)[:max_items]
    for e in shown:
        msg = f"- {e.file}: {e.message}"
        if e.detail:
            msg += f" ({_short(e.detail, 160)})"
        console.print(msg)

    if len(errors) > len(shown):
        console.print(f"[muted]… and {len(errors) - len(shown)} more[/muted]")


# ----------------------------
# Summary
# ----------------------------

def render_check_summary(
    console: Console,
    result: CheckResult,
    *,
    header: str = "Summary",
) -> None:
    s = result.stats

    cols: List[str] = [
        "files_considered",
        "files_parsed",
        "skipped_large",
        "diagnostics",
        "errors",
        "duration_ms",
    ]
    vals: List[str] = [
        str(s.files_considered),
        str(s.files_parsed),
        str(s.files_skipped_too_large),
        str(s.diagnostics),
        str(len(result.errors)),
        str(s.duration_ms),
    ]

    table = Table(title=header, show_header=True, show_lines=False)
    for c in cols:
        table.add_column(c, style="bold", no_wrap=True)
    table.add_row(*vals)

    console.print()
    console.print(table)


# ----------------------------
# Keys
# ----------------------------

def render_keys_table(console: Console, entries: Sequence[ParsedKV], *, title: str) -> None:
    if not entries:
        console.print("[muted]No keys.[/muted]")
        return

    table = Table(title=title, show_lines=False)
    table.add_column("Line", justify="right", no_wrap=True)
    table.add_column("Key", style="path")
    table.add_column("Value")
    for kv in entries:
        table.add_row(str(kv.line or ""), kv.key or "-", _short(kv.value, 120))
    console.print(table)
