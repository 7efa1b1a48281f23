from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer

from yamlcst.cli.ui import get_ui, render_keys_table
from yamlcst.cli.utils.files import read_text_candidate
from yamlcst.core.config import load_check_config
from yamlcst.core.errors import ConfigError, ExitCode
from yamlcst.core.models import FileCandidate, ParseOptions
from yamlcst.parsers import ParseError, flatten, node_to_dict, parse


def _load(path: Path) -> str:
    try:
        return read_text_candidate(FileCandidate(path=str(path), rel_path=path.name))
    except (OSError, UnicodeDecodeError) as e:
        typer.echo(f"Failed reading {path}: {e}", err=True)
        raise typer.Exit(code=int(ExitCode.ERROR))


def _parse_options(file: Path, overrides: Optional[Dict[str, Any]] = None) -> ParseOptions:
    # same [parser] settings as `check` for this file's directory
    try:
        loaded = load_check_config(
            start_dir=file.resolve().parent, cli_overrides={"parser": overrides or {}}
        )
    except ConfigError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=int(ExitCode.ERROR))
    return loaded.parse_options


def tree_cmd(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="YAML file to parse."),
    allow_duplicate_keys: Optional[bool] = typer.Option(
        None,
        "--allow-duplicate-keys/--no-allow-duplicate-keys",
        help="Do not report repeated mapping keys (overrides config if set).",
    ),
    indent: int = typer.Option(2, "--indent", min=0, help="JSON indentation."),
) -> None:
    """Print the concrete syntax tree of FILE as JSON."""
    overrides: Dict[str, Any] = {}
    if allow_duplicate_keys is not None:
        overrides["allow_duplicate_keys"] = allow_duplicate_keys
    options = _parse_options(file, overrides)

    text = _load(file)
    errors: List[ParseError] = []
    node = parse(text, errors, options)

    payload = {
        "root": node_to_dict(node),
        "errors": [
            {
                "code": e.code,
                "message": e.message,
                "startOffset": e.start_offset,
                "endOffset": e.end_offset,
            }
            for e in errors
        ],
    }
    typer.echo(json.dumps(payload, indent=indent or None, ensure_ascii=False))


def keys_cmd(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="YAML file to parse."),
) -> None:
    """List the leaf key paths of FILE with their line numbers."""
    options = _parse_options(file)
    text = _load(file)
    entries = flatten(parse(text, options=options), text=text)

    ui = get_ui()
    render_keys_table(ui.console, entries, title=f"Keys ({len(entries)})")
