"""Configuration line parser.

This package turns tmpfiles.d-style configuration lines into validated,
span-tagged Line records. It works on raw bytes and performs no I/O.
"""

from tmpfiles.parser.cleanup import parse_cleanup_age, parse_duration
from tmpfiles.parser.errors import CleanupParseError, FieldParseError, ParseError
from tmpfiles.parser.fields import parse_mode, parse_owner, parse_path, parse_type
from tmpfiles.parser.line import parse_line, parse_line_bytes
from tmpfiles.parser.models import (
    CleanupAge,
    FileOwner,
    Line,
    LineAction,
    LineType,
    Mode,
    ModeBehavior,
    OwnerId,
    OwnerName,
    Specifier,
    SpecifierString,
)
from tmpfiles.parser.span import NO_FILE, FileSpan, Spanned
from tmpfiles.parser.tokenizer import take_field, take_inline_whitespace

__all__ = [
    "NO_FILE",
    "CleanupAge",
    "CleanupParseError",
    "FieldParseError",
    "FileOwner",
    "FileSpan",
    "Line",
    "LineAction",
    "LineType",
    "Mode",
    "ModeBehavior",
    "OwnerId",
    "OwnerName",
    "ParseError",
    "Specifier",
    "SpecifierString",
    "Spanned",
    "parse_cleanup_age",
    "parse_duration",
    "parse_line",
    "parse_line_bytes",
    "parse_mode",
    "parse_owner",
    "parse_path",
    "parse_type",
    "take_field",
    "take_inline_whitespace",
]
