from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

import typer

from yamlcst.cli.ui import (
    DiagnosticsRenderOptions,
    get_ui,
    render_check_summary,
    render_diagnostics_table,
    render_errors,
)
from yamlcst.cli.utils.files import iter_yaml_files, read_text_candidate
from yamlcst.cli.utils.logs import setup_logging
from yamlcst.core.config import load_check_config
from yamlcst.core.engine import run_check
from yamlcst.core.errors import ConfigError, ExitCode
from yamlcst.core.models import Severity


def check_cmd(
    ctx: typer.Context,
    paths: List[Path] = typer.Argument(
        None, exists=True, help="Files or directories to check (default: current directory)."
    ),
    allow_duplicate_keys: Optional[bool] = typer.Option(
        None,
        "--allow-duplicate-keys/--no-allow-duplicate-keys",
        help="Do not report repeated mapping keys (overrides config if set).",
    ),
    max_depth: Optional[int] = typer.Option(
        None, "--max-depth", help="Nesting depth kept as structure (overrides config if set)."
    ),
    fail: bool = typer.Option(
        True, "--fail/--no-fail", help="Exit 1 if diagnostics are present (CI mode)."
    ),
    fail_on: Optional[Severity] = typer.Option(
        None, "--fail-on", help="Lowest severity that fails the run (overrides config if set)."
    ),
    ignore_errors: bool = typer.Option(
        False, "--ignore-errors", help="Exit 0/1 even if some files could not be read."
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Verbose output."),
) -> None:
    """Parse YAML files and report diagnostics."""
    if verbose:
        setup_logging(verbose=True, debug=bool((ctx.obj or {}).get("debug")))
    ui = get_ui(verbose=verbose)
    console = ui.console

    targets = list(paths or [Path(".")])
    start_dir = targets[0] if targets[0].is_dir() else targets[0].parent

    cli_overrides: Dict[str, Dict[str, Any]] = {"parser": {}, "check": {}}
    if allow_duplicate_keys is not None:
        cli_overrides["parser"]["allow_duplicate_keys"] = allow_duplicate_keys
    if max_depth is not None:
        cli_overrides["parser"]["max_depth"] = max_depth
    if fail_on is not None:
        cli_overrides["check"]["fail_on"] = fail_on.value

    try:
        loaded = load_check_config(start_dir=start_dir, cli_overrides=cli_overrides)
    except ConfigError as e:
        console.print(f"[sev.error]{e}[/sev.error]")
        raise typer.Exit(code=int(ExitCode.ERROR))

    cfg = loaded.check_config

    if ui.verbose:
        console.print("[bold]Config sources:[/bold]")
        console.print(f"  global: {loaded.global_path or '-'}")
        console.print(f"  repo:   {loaded.repo_path or '-'}")
        console.print()

    result = run_check(
        candidates=iter_yaml_files(targets, cfg),
        options=loaded.parse_options,
        config=cfg,
        read_text=read_text_candidate,
    )

    render_diagnostics_table(
        console,
        result.reports,
        opts=DiagnosticsRenderOptions(min_severity=Severity.WARNING),
    )
    render_errors(console, result.errors, verbose=ui.verbose)
    if ui.verbose:
        render_check_summary(console, result, header="Summary")

    if result.errors and not ignore_errors:
        raise typer.Exit(code=int(ExitCode.ERROR))

    if fail and result.diagnostics_at_least(cfg.fail_on):
        raise typer.Exit(code=int(ExitCode.DIAGNOSTICS))

    raise typer.Exit(code=int(ExitCode.OK))
