"""assetsweep command line entry point."""

from typing import Annotated

import typer

from assetsweep import __version__
from assetsweep.cli.commands import clean, exclude, graph, history, scan
from assetsweep.utils.formatting import setup_logging

app = typer.Typer(
    name="assetsweep",
    help="Find and safely delete unused content assets.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)

for _module, _name in (
    (scan, "scan"),
    (graph, "graph"),
    (clean, "clean"),
    (exclude, "exclude"),
    (history, "history"),
):
    app.add_typer(_module.app, name=_name)


def _show_version(value: bool) -> None:
    if value:
        typer.echo(f"assetsweep version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version", "-V", callback=_show_version, is_eager=True, help="Show version and exit."
        ),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log debug details.")
    ] = False,
    quiet: Annotated[
        bool, typer.Option("--quiet", "-q", help="Only log warnings and errors.")
    ] = False,
) -> None:
    """assetsweep - find and safely delete unused content assets.

    Assets that nothing in use depends on are deleted in dependency order:
    whole reference cycles first, then assets nothing else needs, until
    no unused asset is left.
    """
    setup_logging(verbose=verbose, quiet=quiet)


if __name__ == "__main__":
    app()
