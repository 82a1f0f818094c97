"""Shared Rich display functions for parsed configuration.

Provides reusable table builders and printers for parsed lines and
per-line parse errors across CLI commands (parse, check).
"""

from rich.markup import escape
from rich.table import Table

from tmpfiles.core.config_files import ConfigParseResult, LineError
from tmpfiles.parser import Line, SpecifierString
from tmpfiles.utils.formatting import console, err_console, print_success, show_bytes

# Modifier characters shown after the action, in type-field order
_MODIFIER_FLAGS = (
    ("+", "recreate"),
    ("-", "noerror"),
    ("!", "boot"),
    ("=", "force"),
    ("~", "base64_decode"),
)


def format_type(line: Line) -> str:
    """Format the action and its modifiers with color markup."""
    line_type = line.line_type.data
    modifiers = "".join(
        char for char, attribute in _MODIFIER_FLAGS if getattr(line_type, attribute)
    )
    style = "boot" if line_type.boot else "action"
    return f"[{style}]{line_type.action.value}[/]{escape(modifiers)}"


def format_path(path: SpecifierString) -> str:
    """Format a path, highlighting unresolved specifiers."""
    if path.is_literal:
        return f"[path]{show_bytes(path.prefix)}[/]"
    parts = [f"[path]{show_bytes(path.prefix)}[/]"]
    for specifier, literal in path.segments:
        parts.append(f"[specifier]%{escape(specifier.value)}[/]")
        parts.append(f"[path]{show_bytes(literal)}[/]")
    return "".join(parts)


def _optional(value: object | None) -> str:
    if value is None:
        return "[muted]-[/]"
    return escape(str(value))


def create_lines_table(lines: list[Line], title: str = "Parsed Lines") -> Table:
    """Create a Rich table displaying parsed configuration lines.

    Args:
        lines: Parsed lines to display.
        title: Table title.

    Returns:
        Rich Table configured for line display.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Type", no_wrap=True)
    table.add_column("Path", no_wrap=True)
    table.add_column("Mode", style="muted")
    table.add_column("Owner")
    table.add_column("Group")
    table.add_column("Age")
    table.add_column("Argument", overflow="ellipsis")

    for line in lines:
        argument = line.argument.data
        table.add_row(
            format_type(line),
            format_path(line.path.data),
            _optional(line.mode.data),
            _optional(line.owner.data),
            _optional(line.group.data),
            _optional(line.age.data),
            "[muted]-[/]" if argument is None else show_bytes(argument),
        )

    return table


def print_line_errors(errors: list[LineError]) -> None:
    """Print each line error with its location and the offending line."""
    for line_error in errors:
        err_console.print(
            f"[location]{escape(line_error.location)}[/]: "
            f"[error]{escape(str(line_error.error))}[/]"
        )
        err_console.print(f"    [muted]{show_bytes(line_error.raw)}[/]")


def print_parse_summary(result: ConfigParseResult) -> None:
    """Print a summary of a parse run.

    Shows a success message when every line parsed, otherwise a count of
    parsed lines and errors.
    """
    file_count = len(result.files)
    if result.success:
        print_success(f"Parsed {len(result.lines)} line(s) from {file_count} file(s).")
    else:
        console.print(
            f"\n[success]{len(result.lines)} parsed[/success], "
            f"[error]{len(result.errors)} failed[/error] in {file_count} file(s)"
        )
