from __future__ import annotations

from pathlib import Path

import typer

from yamlcst.cli.utils.files import ensure_dir, write_file


DEFAULT_CONFIG_TOML = """\
[parser]
allow_duplicate_keys = false
max_depth = 100

[check]
include = ["*.yaml", "*.yml"]
max_file_bytes = 2000000
fail_on = "error"
deterministic = true
skip_dirs = [
  ".git",
  ".venv",
  "venv",
  "node_modules",
  "dist",
  "build",
  ".tox",
  ".mypy_cache",
  ".pytest_cache",
  ".ruff_cache",
]

# per-code severity overrides
[check.severity]
# "duplicate-key" = "error"
"""


def init_cmd(
    path: Path = typer.Argument(Path("."), help="Repo path to initialize."),
    force: bool = typer.Option(False, "--force", help="Overwrite existing files."),
) -> None:
    """Write a starter .yamlcst/config.toml."""
    root = path.resolve()
    cfg_dir = root / ".yamlcst"
    ensure_dir(cfg_dir)

    target = cfg_dir / "config.toml"
    if write_file(target, DEFAULT_CONFIG_TOML, force=force):
        typer.echo(f"Initialized {target}")
    else:
        typer.echo(f"{target} already exists (use --force to overwrite)")
