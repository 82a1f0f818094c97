"""Unit tests for shared display functions."""

from pathlib import Path

import pytest
from rich.table import Table
from tmpfiles.cli.display import (
    create_lines_table,
    format_path,
    format_type,
    print_parse_summary,
)
from tmpfiles.core.config_files import parse_config_bytes
from tmpfiles.parser import parse_line_bytes


class TestFormatType:
    """Tests for format_type function."""

    def test_action_with_modifiers(self) -> None:
        """Modifiers follow the action name."""
        line = parse_line_bytes(b"L+ /a - - - - /b")

        assert format_type(line) == "[action]create_symlink[/]+"

    def test_boot_lines_use_boot_style(self) -> None:
        """Boot-only lines are highlighted differently."""
        line = parse_line_bytes(b"R! /a")

        assert format_type(line) == "[boot]remove_recursive[/]!"


class TestFormatPath:
    """Tests for format_path function."""

    def test_literal_path(self) -> None:
        """A literal path is a single styled run."""
        path = parse_line_bytes(b"d /tmp").path.data

        assert format_path(path) == "[path]/tmp[/]"

    def test_specifiers_are_highlighted(self) -> None:
        """Specifiers get their own style."""
        path = parse_line_bytes(b"d %h/.cache").path.data

        assert format_path(path) == "[path][/][specifier]%h[/][path]/.cache[/]"


class TestCreateLinesTable:
    """Tests for create_lines_table function."""

    def test_one_row_per_line(self) -> None:
        """The table has the seven line columns and one row per line."""
        lines = [parse_line_bytes(b"d /a 0755"), parse_line_bytes(b"r /b")]

        table = create_lines_table(lines)

        assert isinstance(table, Table)
        assert [column.header for column in table.columns] == [
            "Type",
            "Path",
            "Mode",
            "Owner",
            "Group",
            "Age",
            "Argument",
        ]
        assert table.row_count == 2


class TestPrintParseSummary:
    """Tests for print_parse_summary function."""

    def test_success(self, capsys: pytest.CaptureFixture[str]) -> None:
        """A clean run reports the line and file counts."""
        result = parse_config_bytes(b"d /a\nr /b\n", Path("a.conf"))

        print_parse_summary(result)

        assert "Parsed 2 line(s) from 1 file(s)." in capsys.readouterr().out

    def test_failures(self, capsys: pytest.CaptureFixture[str]) -> None:
        """A run with errors reports both counts."""
        result = parse_config_bytes(b"d /a\ny\n", Path("a.conf"))

        print_parse_summary(result)

        output = capsys.readouterr().out
        assert "1 parsed" in output
        assert "1 failed" in output
