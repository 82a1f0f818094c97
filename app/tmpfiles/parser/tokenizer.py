"""Field tokenizer for configuration lines.

A field is either a run of bytes up to the next unescaped space or tab,
or a single- or double-quoted string. Backslash escapes are decoded in
both forms; octal escapes are rejected rather than interpreted.
"""

from collections.abc import Mapping
from types import MappingProxyType

from tmpfiles.parser.errors import (
    FieldParseError,
    InvalidHexEscape,
    JunkAfterQuotes,
    QuoteInUnquotedField,
    TrailingBackslash,
    UnfinishedHexEscape,
    UnfinishedQuote,
    UnrecognizedEscape,
    UnsupportedOctalEscape,
)
from tmpfiles.parser.span import FileSpan, Spanned

INLINE_WHITESPACE = frozenset(b" \t")
QUOTES = frozenset(b"'\"")
BACKSLASH = ord("\\")

_HEX_DIGITS = frozenset(b"0123456789abcdefABCDEF")
_OCTAL_DIGITS = frozenset(b"01234567")

_SIMPLE_ESCAPES: Mapping[int, int] = MappingProxyType(
    {
        ord("n"): ord("\n"),
        ord("r"): ord("\r"),
        ord("t"): ord("\t"),
        ord("\\"): ord("\\"),
        ord("'"): ord("'"),
        ord('"'): ord('"'),
    }
)


def take_inline_whitespace(span: FileSpan) -> None:
    """Consume any spaces and tabs at the start of the span.

    Zero whitespace is not an error: the previous field may have ended
    the line.
    """
    while span.peek() in INLINE_WHITESPACE:
        span.advance()
    span.split()


def take_field(span: FileSpan) -> Spanned[bytes | None]:
    """Consume one field from the start of the span.

    The span is advanced past the field, including a closing quote but
    not the whitespace after it.

    Args:
        span: Line span positioned at the start of a field.

    Returns:
        The decoded field bytes, or None (with a zero-width span) when the
        span is already empty.

    Raises:
        FieldParseError: If the field's quoting or escaping is invalid.
    """
    first = span.peek()
    if first is None:
        return span.split().spanned(None)

    try:
        field = _scan_field(span, first)
    except FieldParseError as e:
        e.attach_span(span.cursor_span())
        raise
    return span.split().spanned(field)


def _scan_field(span: FileSpan, first: int) -> bytes:
    """Advance the cursor over one field and return its decoded bytes."""
    field = bytearray()
    quote: int | None = None
    if first in QUOTES:
        quote = first
        span.advance()

    while True:
        char = span.peek()
        if char is None:
            if quote is not None:
                raise UnfinishedQuote(quote)
            break

        if quote is None:
            if char in INLINE_WHITESPACE:
                break
            if char in QUOTES:
                raise QuoteInUnquotedField(char)
        elif char == quote:
            span.advance()
            after = span.peek()
            if after is not None and after not in INLINE_WHITESPACE:
                raise JunkAfterQuotes(after)
            break

        span.advance()
        if char == BACKSLASH:
            field.append(_decode_escape(span))
        else:
            field.append(char)

    return bytes(field)


def _decode_escape(span: FileSpan) -> int:
    """Decode the escape sequence following a backslash."""
    char = span.next()
    if char is None:
        raise TrailingBackslash()

    if char == ord("x"):
        digits = span.remaining()[:2]
        if len(digits) < 2:
            raise UnfinishedHexEscape()
        if not all(digit in _HEX_DIGITS for digit in digits):
            raise InvalidHexEscape(digits)
        span.advance(2)
        return int(digits, 16)

    if char in _OCTAL_DIGITS:
        raise UnsupportedOctalEscape(char)

    try:
        return _SIMPLE_ESCAPES[char]
    except KeyError:
        raise UnrecognizedEscape(char) from None
