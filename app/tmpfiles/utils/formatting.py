"""Rich consoles and message helpers shared by the CLI commands.

Regular output goes to ``console`` (stdout); errors, warnings and parse
diagnostics go to ``err_console`` (stderr) so piped output stays clean.
"""

import sys

from rich.console import Console
from rich.markup import escape

from tmpfiles.core.theme import get_theme


def _make_console(stderr: bool = False) -> Console:
    """Create a themed console, forcing truecolor on an interactive stdout."""
    color_system = "truecolor" if sys.stdout.isatty() else None
    return Console(theme=get_theme(), stderr=stderr, color_system=color_system)


console = _make_console()
err_console = _make_console(stderr=True)


def show_bytes(value: bytes) -> str:
    """Render raw configuration bytes as markup-safe text.

    Invalid UTF-8 is shown with backslash escapes.
    """
    return escape(value.decode("utf-8", "backslashreplace"))


def print_info(message: str) -> None:
    console.print(f"[info]{message}[/]")


def print_success(message: str) -> None:
    console.print(f"[success]{message}[/]")


def print_warning(message: str) -> None:
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    err_console.print(f"[error]Error:[/] {message}")
