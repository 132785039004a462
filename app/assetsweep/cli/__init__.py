"""CLI package for assetsweep.

This package contains the Typer application and all subcommands.
"""

from assetsweep.cli.main import app

__all__ = ["app"]
