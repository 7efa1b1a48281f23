from __future__ import annotations

import typer
from rich.console import Console

from yamlcst import __version__
from yamlcst.cli.commands.check import check_cmd
from yamlcst.cli.commands.init import init_cmd
from yamlcst.cli.commands.tree import keys_cmd, tree_cmd
from yamlcst.cli.utils.logs import setup_logging

app = typer.Typer(
    name="yamlcst",
    help="Parse YAML into a concrete syntax tree and report problems with exact positions.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"yamlcst {__version__}")
        raise typer.Exit(0)


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", callback=_version_callback, is_eager=True
    ),
    debug: bool = typer.Option(False, "--debug", help="Log every parser diagnostic to stderr."),
) -> None:
    ctx.obj = {"debug": debug}
    setup_logging(debug=debug)


app.command("check")(check_cmd)
app.command("tree")(tree_cmd)
app.command("keys")(keys_cmd)
app.command("init")(init_cmd)
