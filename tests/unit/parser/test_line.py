"""Unit tests for the line assembler.

Tests for parsing complete configuration lines, omitted fields, and the
locations attached to errors.
"""

from pathlib import Path

import pytest
from tmpfiles.parser.errors import (
    Base64Decode,
    EmptyPath,
    IllegalParseType,
    InvalidMode,
    InvalidUsername,
    LeadingWhitespace,
    NonabsolutePath,
    UnfinishedQuote,
)
from tmpfiles.parser.line import parse_line, parse_line_bytes
from tmpfiles.parser.models import (
    CleanupAge,
    LineAction,
    Mode,
    ModeBehavior,
    OwnerId,
    OwnerName,
    Specifier,
)
from tmpfiles.parser.span import NO_FILE, FileSpan
from tmpfiles.parser.units import DAY


class TestParseLine:
    """Tests for parsing valid lines."""

    def test_full_line(self) -> None:
        """Every column is decoded."""
        line = parse_line_bytes(b"d /run/demo 0755 root 100 ~aA:10d -")

        assert line.action == LineAction.CREATE_AND_CLEAN_UP_DIRECTORY
        assert line.path.data.render() == b"/run/demo"
        assert line.mode.data == Mode(0o755)
        assert line.owner.data == OwnerName("root")
        assert line.group.data == OwnerId(100)
        assert line.age.data == CleanupAge(
            age=10 * DAY,
            second_level=True,
            consider_atime=True,
            consider_atime_dir=True,
        )
        assert line.argument.data is None

    def test_symlink_with_recreate(self) -> None:
        """Omitted middle fields decode to None."""
        line = parse_line_bytes(b"L+ /a/b - - - - /c")

        assert line.action == LineAction.CREATE_SYMLINK
        assert line.line_type.data.recreate
        assert line.mode.data is None
        assert line.owner.data is None
        assert line.group.data is None
        assert line.age.data is None
        assert line.argument.data == b"/c"

    def test_field_spans(self) -> None:
        """Each field records where it was found."""
        line = parse_line_bytes(b"L+ /a/b - - - - /c", "links.conf")

        assert (line.line_type.start, line.line_type.end) == (0, 2)
        assert (line.path.start, line.path.end) == (3, 7)
        assert (line.mode.start, line.mode.end) == (8, 9)
        assert (line.age.start, line.age.end) == (14, 15)
        assert (line.argument.start, line.argument.end) == (16, 18)
        assert line.file == Path("links.conf")

    def test_minimal_line(self) -> None:
        """Trailing fields may be left out entirely."""
        line = parse_line_bytes(b"R! /etc/group.lock")

        assert line.action == LineAction.REMOVE_RECURSIVE
        assert line.is_boot_only
        for field in (line.mode, line.owner, line.group, line.age, line.argument):
            assert field.data is None
            assert (field.start, field.end) == (18, 18)

    def test_tabs_and_runs_of_spaces(self) -> None:
        """Fields may be separated by any mix of spaces and tabs."""
        line = parse_line_bytes(b"z\t/var/log  \t:0640\t- adm")

        assert line.mode.data == Mode(0o640, ModeBehavior.KEEP_EXISTING)
        assert line.group.data == OwnerName("adm")

    def test_trailing_whitespace(self) -> None:
        """Whitespace at the end of the line is ignored."""
        line = parse_line_bytes(b"d /tmp   ")

        assert line.path.data.render() == b"/tmp"
        assert line.argument.data is None

    def test_quoted_path(self) -> None:
        """Paths may be quoted to include spaces."""
        line = parse_line_bytes(b'd "/srv/my data" 0700')

        assert line.path.data.render() == b"/srv/my data"
        assert line.mode.data == Mode(0o700)

    def test_path_with_specifiers(self) -> None:
        """Specifiers are kept unresolved."""
        line = parse_line_bytes(b"d %t/demo-%u")

        assert line.path.data.specifiers == (Specifier.RUNTIME_DIR, Specifier.USER_NAME)

    def test_argument_keeps_spaces(self) -> None:
        """The argument is the rest of the line, taken literally."""
        line = parse_line_bytes(b"w /proc/sys/foo - - - - hello  world\\n")

        assert line.argument.data == b"hello  world\\n"

    def test_base64_argument(self) -> None:
        """The ~ modifier decodes the argument."""
        line = parse_line_bytes(b"f~ /etc/motd 0644 - - - aGVsbG8K")

        assert line.argument.data == b"hello\n"

    def test_base64_argument_with_trailing_space(self) -> None:
        """Trailing whitespace after a base64 argument is not decoded."""
        line = parse_line_bytes(b"f~ /x - - - - aGk= ")

        assert line.argument.data == b"hi"
        assert (line.argument.start, line.argument.end) == (14, 19)

    def test_omitted_age_has_effective_default(self) -> None:
        """An omitted age falls back to the default flags."""
        line = parse_line_bytes(b"d /tmp 1777 root root -")

        assert line.age.data is None
        assert line.effective_age == CleanupAge.EMPTY

    def test_effective_age_when_given(self) -> None:
        """A given age is used as-is."""
        line = parse_line_bytes(b"d /tmp 1777 root root 1d")

        assert line.effective_age.age == DAY

    def test_parse_line_consumes_span(self) -> None:
        """parse_line works on any span covering one line."""
        buffer = b"# comment\nd /tmp\n"
        span = FileSpan(buffer, Path("a.conf"), 10, 16)

        line = parse_line(span)

        assert (line.line_type.start, line.path.end) == (10, 16)


class TestParseLineErrors:
    """Tests for rejected lines and error locations."""

    def test_leading_whitespace(self) -> None:
        """Lines may not start with whitespace."""
        with pytest.raises(LeadingWhitespace) as exc_info:
            parse_line_bytes(b"  d /tmp")

        assert exc_info.value.span is not None
        assert exc_info.value.span.start == 0

    def test_bad_type_location(self) -> None:
        """Type errors point at the type field."""
        with pytest.raises(IllegalParseType) as exc_info:
            parse_line_bytes(b"y /tmp")

        span = exc_info.value.span
        assert span is not None
        assert (span.start, span.end) == (0, 1)

    def test_bad_mode_location(self) -> None:
        """Mode errors point at the mode field."""
        with pytest.raises(InvalidMode) as exc_info:
            parse_line_bytes(b"d /tmp 0999 - -")

        span = exc_info.value.span
        assert span is not None
        assert (span.start, span.end) == (7, 11)

    def test_missing_path(self) -> None:
        """A line with only a type has no path."""
        with pytest.raises(EmptyPath):
            parse_line_bytes(b"d")

    def test_relative_path(self) -> None:
        """Relative paths are rejected."""
        with pytest.raises(NonabsolutePath):
            parse_line_bytes(b"d tmp/foo")

    def test_empty_quoted_owner(self) -> None:
        """An explicitly empty owner is rejected."""
        with pytest.raises(InvalidUsername):
            parse_line_bytes(b'd /tmp 0755 ""')

    def test_unfinished_quote_location(self) -> None:
        """Tokenizer errors point inside the failing field."""
        with pytest.raises(UnfinishedQuote) as exc_info:
            parse_line_bytes(b'd "/tmp')

        span = exc_info.value.span
        assert span is not None
        assert span.start == 2

    def test_bad_base64_location(self) -> None:
        """Argument errors point at the argument."""
        with pytest.raises(Base64Decode) as exc_info:
            parse_line_bytes(b"f~ /x - - - - @@@")

        span = exc_info.value.span
        assert span is not None
        assert (span.start, span.end) == (14, 17)


class TestLineToDict:
    """Tests for Line.to_dict."""

    def test_to_dict(self) -> None:
        """Lines convert to JSON-friendly dictionaries."""
        line = parse_line_bytes(b"d /run/%u 0755 root 0 10d -", "demo.conf")

        result = line.to_dict()

        assert result["file"] == "demo.conf"
        assert result["range"] == [0, 27]
        assert result["type"]["action"] == "create_and_clean_up_directory"
        assert result["type"]["boot"] is False
        assert result["path"] == "/run/%u"
        assert result["specifiers"] == ["user_name"]
        assert result["mode"] == {"value": "0755", "behavior": "default"}
        assert result["owner"] == "root"
        assert result["group"] == "0"
        assert result["age"] == "aAbBcmM:1w3d"
        assert result["argument"] is None

    def test_to_dict_omitted_fields(self) -> None:
        """Omitted fields are None."""
        result = parse_line_bytes(b"r /tmp/x").to_dict()

        assert result["file"] == str(NO_FILE)
        assert result["mode"] is None
        assert result["owner"] is None
        assert result["age"] is None
