"""CLI commands for assetsweep.

This package contains all subcommand implementations.
"""

from assetsweep.cli.commands import clean, exclude, graph, history, scan

__all__ = ["clean", "exclude", "graph", "history", "scan"]
