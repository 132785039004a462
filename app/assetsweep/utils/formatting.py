"""Shared Rich consoles, logging setup and message helpers for the CLI."""

import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

from assetsweep.core.theme import get_theme

# Full hex colors on a terminal, Rich's own detection when piped
_COLOR_SYSTEM = "truecolor" if sys.stdout.isatty() else None

console = Console(theme=get_theme(), color_system=_COLOR_SYSTEM)
err_console = Console(theme=get_theme(), stderr=True, color_system=_COLOR_SYSTEM)


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Route log records to stderr through Rich.

    Args:
        verbose: Log at DEBUG level with source paths and rich tracebacks.
        quiet: Only log warnings and errors.
    """
    level = logging.DEBUG if verbose else logging.WARNING if quiet else logging.INFO
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [
        RichHandler(console=err_console, show_path=verbose, rich_tracebacks=verbose),
    ]


def format_size(size_bytes: int | None) -> str:
    """Human-readable byte count using binary units."""
    if not size_bytes:
        return "0 B"
    size = float(size_bytes)
    for unit in ("B", "KB", "MB", "GB"):
        if abs(size) < 1024:
            return f"{int(size)} B" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TB"


def print_info(message: str) -> None:
    console.print(f"[info]{message}[/]")


def print_success(message: str) -> None:
    console.print(f"[success]{message}[/]")


def print_warning(message: str) -> None:
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    err_console.print(f"[error]Error:[/] {message}")
