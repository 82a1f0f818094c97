"""Exceptions raised while parsing configuration lines.

The hierarchy has three levels:

- ParseError: line-level problems (type field, mode, owner, path, ...).
- FieldParseError: tokenizer problems (quoting and escape sequences).
- CleanupParseError: problems in the cleanup-age field.

FieldParseError and CleanupParseError are ParseError subclasses, so
``except ParseError`` catches anything the parser can raise. Every concrete
error stores the offending byte(s) as attributes, and parse_line() attaches
the location of the field that failed as ``span``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tmpfiles.parser.span import Spanned


def _show(value: bytes) -> str:
    """Render raw bytes for an error message."""
    return repr(bytes(value))[2:-1]


def _show_byte(byte: int) -> str:
    """Render a single raw byte for an error message."""
    return _show(bytes([byte]))


class ParseError(Exception):
    """Base exception for configuration line parsing errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.span: Spanned[None] | None = None

    def attach_span(self, span: Spanned[None]) -> None:
        """Record where the error occurred, keeping the innermost location."""
        if self.span is None:
            self.span = span


# =============================================================================
# Line-level errors
# =============================================================================


class EmptyParseType(ParseError):
    """Raised when the type field is empty."""

    def __init__(self) -> None:
        super().__init__("Missing line type")


class IllegalParseType(ParseError):
    """Raised when the type field starts with an unknown action letter."""

    def __init__(self, byte: int) -> None:
        self.byte = byte
        super().__init__(f"Unknown line type '{_show_byte(byte)}'")


class InvalidTypeModifier(ParseError):
    """Raised when a type modifier is not one of ``+-!=~^``."""

    def __init__(self, byte: int) -> None:
        self.byte = byte
        super().__init__(f"Invalid line type modifier '{_show_byte(byte)}'")


class DuplicateTypeModifier(ParseError):
    """Raised when the same type modifier appears twice."""

    def __init__(self, byte: int) -> None:
        self.byte = byte
        super().__init__(f"Duplicate line type modifier '{_show_byte(byte)}'")


class InvalidTypeCombination(ParseError):
    """Raised when a modifier is not allowed with the given action."""

    def __init__(self, action: int, modifier: int) -> None:
        self.action = action
        self.modifier = modifier
        super().__init__(
            f"Modifier '{_show_byte(modifier)}' cannot be used "
            f"with line type '{_show_byte(action)}'"
        )


class IDKWhatAServiceCredential(ParseError):
    """Raised for the ``^`` modifier, which reads service credentials."""

    def __init__(self) -> None:
        super().__init__("Service credential lines ('^' modifier) are not supported")


class InvalidMode(ParseError):
    """Raised when the mode field is not a 3-4 digit octal number."""

    def __init__(self, value: bytes) -> None:
        self.value = value
        super().__init__(f"Invalid mode '{_show(value)}'")


class InvalidUsername(ParseError):
    """Raised when an owner or group field is not a usable name."""

    def __init__(self, value: bytes) -> None:
        self.value = value
        super().__init__(f"Invalid user or group name '{_show(value)}'")


class NullInPath(ParseError):
    """Raised when a path contains a NUL byte."""

    def __init__(self, value: bytes) -> None:
        self.value = value
        super().__init__(f"Path contains a NUL byte: '{_show(value)}'")


class IncompleteSpecifier(ParseError):
    """Raised when a path ends with a lone ``%``."""

    def __init__(self) -> None:
        super().__init__("Path ends in an incomplete '%' specifier")


class InvalidSpecifier(ParseError):
    """Raised when ``%`` is followed by an unknown designator."""

    def __init__(self, byte: int) -> None:
        self.byte = byte
        super().__init__(f"Unknown specifier '%{_show_byte(byte)}'")


class NonabsolutePath(ParseError):
    """Raised when a path is neither absolute nor starts with an absolute specifier."""

    def __init__(self, value: bytes) -> None:
        self.value = value
        super().__init__(f"Path is not absolute: '{_show(value)}'")


class EmptyPath(ParseError):
    """Raised when the path field is missing or empty."""

    def __init__(self) -> None:
        super().__init__("Missing path")


class LeadingWhitespace(ParseError):
    """Raised when a line starts with a space or tab."""

    def __init__(self) -> None:
        super().__init__("Line starts with whitespace")


class Base64Decode(ParseError):
    """Raised when a base64 argument (``~`` modifier) cannot be decoded."""

    def __init__(self, error: Exception) -> None:
        self.error = error
        super().__init__(f"Invalid base64 argument: {error}")


# =============================================================================
# Tokenizer errors
# =============================================================================


class FieldParseError(ParseError):
    """Base exception for quoting and escaping errors inside a field."""


class UnfinishedQuote(FieldParseError):
    """Raised when a quoted field is never closed."""

    def __init__(self, quote: int) -> None:
        self.quote = quote
        super().__init__(f"Unterminated {_show_byte(quote)} quote")


class JunkAfterQuotes(FieldParseError):
    """Raised when a closing quote is followed by something other than whitespace."""

    def __init__(self, byte: int) -> None:
        self.byte = byte
        super().__init__(f"Unexpected '{_show_byte(byte)}' after closing quote")


class QuoteInUnquotedField(FieldParseError):
    """Raised when an unescaped quote appears inside an unquoted field."""

    def __init__(self, byte: int) -> None:
        self.byte = byte
        super().__init__(f"Unescaped {_show_byte(byte)} quote inside unquoted field")


class InvalidHexEscape(FieldParseError):
    """Raised when ``\\x`` is not followed by two hex digits."""

    def __init__(self, digits: bytes) -> None:
        self.digits = digits
        super().__init__(f"Invalid hex escape '\\x{_show(digits)}'")


class UnfinishedHexEscape(FieldParseError):
    """Raised when the line ends inside a ``\\x`` escape."""

    def __init__(self) -> None:
        super().__init__("Line ends inside a hex escape")


class UnsupportedOctalEscape(FieldParseError):
    """Raised for octal escapes, which are rejected rather than interpreted."""

    def __init__(self, byte: int) -> None:
        self.byte = byte
        super().__init__(f"Octal escapes are not supported: '\\{_show_byte(byte)}'")


class TrailingBackslash(FieldParseError):
    """Raised when a line ends with a backslash."""

    def __init__(self) -> None:
        super().__init__("Line ends with a backslash")


class UnrecognizedEscape(FieldParseError):
    """Raised for an escape sequence not in the escape table."""

    def __init__(self, byte: int) -> None:
        self.byte = byte
        super().__init__(f"Unrecognized escape sequence '\\{_show_byte(byte)}'")


# =============================================================================
# Cleanup-age errors
# =============================================================================


class CleanupParseError(ParseError):
    """Base exception for errors in the cleanup-age field."""


class Malformed(CleanupParseError):
    """Raised when the age field contains more than one ``:``."""

    def __init__(self, value: bytes) -> None:
        self.value = value
        super().__init__(f"Malformed age '{_show(value)}'")


class EmptyCleanupSpecifierList(CleanupParseError):
    """Raised when the age field has a ``:`` but no timestamp letters before it."""

    def __init__(self) -> None:
        super().__init__("Empty age specifier list before ':'")


class DuplicateCleanupSpecifier(CleanupParseError):
    """Raised when an age specifier letter is repeated."""

    def __init__(self, byte: int) -> None:
        self.byte = byte
        super().__init__(f"Duplicate age specifier '{_show_byte(byte)}'")


class InvalidCleanupSpecifier(CleanupParseError):
    """Raised when an age specifier letter is not one of ``aAbBcCmM``."""

    def __init__(self, byte: int) -> None:
        self.byte = byte
        super().__init__(f"Invalid age specifier '{_show_byte(byte)}'")


class InvalidDurationInt(CleanupParseError):
    """Raised when a duration part does not start with a valid integer."""

    def __init__(self, value: bytes) -> None:
        self.value = value
        super().__init__(f"Invalid duration number '{_show(value)}'")


class InvalidDurationKeyword(CleanupParseError):
    """Raised when a duration unit is not in the unit table."""

    def __init__(self, value: bytes) -> None:
        self.value = value
        super().__init__(f"Unknown duration unit '{_show(value)}'")


class OverflowedDuration(CleanupParseError):
    """Raised when a duration does not fit the representable range."""

    def __init__(self, value: bytes) -> None:
        self.value = value
        super().__init__(f"Duration overflows: '{_show(value)}'")
