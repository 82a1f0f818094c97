"""Line assembler.

Drives the tokenizer and field decoders across one configuration line:

    Type Path Mode Owner Group Age [Argument]

Fields after the path may be "-" or missing entirely; missing fields decode
to None with a zero-width span at the end of the line.
"""

from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from tmpfiles.parser.cleanup import parse_cleanup_age
from tmpfiles.parser.errors import LeadingWhitespace
from tmpfiles.parser.fields import (
    parse_argument,
    parse_mode,
    parse_owner,
    parse_path,
    parse_type,
)
from tmpfiles.parser.models import Line, LineType
from tmpfiles.parser.span import NO_FILE, FileSpan, Spanned
from tmpfiles.parser.tokenizer import INLINE_WHITESPACE, take_field, take_inline_whitespace

T = TypeVar("T")

# Placeholder for an omitted field
OMITTED = b"-"


def _required(decoder: Callable[[bytes], T]) -> Callable[[bytes | None], T]:
    """Adapt a decoder so a missing field is decoded as empty bytes."""

    def decode(field: bytes | None) -> T:
        return decoder(field or b"")

    return decode


def _optional(decoder: Callable[[bytes], T]) -> Callable[[bytes | None], T | None]:
    """Adapt a decoder so a missing or "-" field decodes to None."""

    def decode(field: bytes | None) -> T | None:
        if field is None or field == OMITTED:
            return None
        return decoder(field)

    return decode


def _take_argument(span: FileSpan, line_type: LineType) -> Spanned[bytes | None]:
    """Take the rest of the line as the argument field."""
    remaining = span.take_rest()

    def decode(data: bytes) -> bytes | None:
        if data == OMITTED:
            return None
        return parse_argument(data, line_type)

    return remaining.spanned(remaining.to_bytes()).try_map(decode)


def parse_line(span: FileSpan) -> Line:
    """Parse one configuration line.

    The span is consumed. Parsing stops at the first error; nothing is
    recovered within a line.

    Args:
        span: Span covering a single line, without its newline.

    Returns:
        The parsed Line.

    Raises:
        ParseError: If any field is invalid. The error's ``span`` points at
            the offending field.
    """
    if span.peek() in INLINE_WHITESPACE:
        error = LeadingWhitespace()
        error.attach_span(span.spanned(None))
        raise error

    line_type = take_field(span).try_map(_required(parse_type))
    take_inline_whitespace(span)
    path = take_field(span).try_map(_required(parse_path))
    take_inline_whitespace(span)
    mode = take_field(span).try_map(_optional(parse_mode))
    take_inline_whitespace(span)
    owner = take_field(span).try_map(_optional(parse_owner))
    take_inline_whitespace(span)
    group = take_field(span).try_map(_optional(parse_owner))
    take_inline_whitespace(span)
    age = take_field(span).try_map(_optional(parse_cleanup_age))
    take_inline_whitespace(span)
    argument = _take_argument(span, line_type.data)

    return Line(
        line_type=line_type,
        path=path,
        mode=mode,
        owner=owner,
        group=group,
        age=age,
        argument=argument,
    )


def parse_line_bytes(data: bytes, file: Path | str = NO_FILE) -> Line:
    """Parse a single line given as bytes.

    Args:
        data: Line contents, without a trailing newline.
        file: Path recorded in the spans of the result.

    Returns:
        The parsed Line.

    Raises:
        ParseError: If the line is invalid.
    """
    return parse_line(FileSpan.from_bytes(data, file))
