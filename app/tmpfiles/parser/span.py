"""Source spans for configuration parsing.

This module provides the two location-tracking types the parser is built on:

- FileSpan: a consuming view over a byte buffer. Decoders look ahead with
  peek()/advance() and then commit what they consumed with split(), which
  returns the consumed prefix and truncates the span to the remainder.
- Spanned: an immutable decoded value tagged with the file and the
  half-open byte range it was decoded from.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")

# File recorded for spans over bytes that did not come from a file
NO_FILE = Path("<bytes>")


@dataclass(frozen=True, slots=True)
class Spanned(Generic[T]):
    """A decoded value together with the source range it came from.

    Attributes:
        data: The decoded payload.
        file: Identity of the originating configuration file.
        start: Byte offset of the first source byte (inclusive).
        end: Byte offset after the last source byte (exclusive).
    """

    data: T
    file: Path
    start: int
    end: int

    def __post_init__(self) -> None:
        """Validate the source range."""
        if not 0 <= self.start <= self.end:
            msg = f"Invalid span range {self.start}..{self.end}"
            raise ValueError(msg)

    def map(self, func: Callable[[T], U]) -> Spanned[U]:
        """Replace the payload, keeping the source range."""
        return Spanned(func(self.data), self.file, self.start, self.end)

    def try_map(self, func: Callable[[T], U]) -> Spanned[U]:
        """Replace the payload with a decoder that may fail.

        A ParseError raised by the decoder is tagged with this span (unless
        it already carries one) and re-raised.

        Raises:
            ParseError: If the decoder rejects the payload.
        """
        from tmpfiles.parser.errors import ParseError

        try:
            data = func(self.data)
        except ParseError as e:
            e.attach_span(self.without_data())
            raise
        return Spanned(data, self.file, self.start, self.end)

    def without_data(self) -> Spanned[None]:
        """Return the bare location of this value."""
        return Spanned(None, self.file, self.start, self.end)


class FileSpan:
    """Consuming view over a slice of a file's bytes.

    The span covers ``buffer[start:end]``. An internal cursor, relative to
    ``start``, moves forward as bytes are inspected; nothing is committed
    until split() is called.

    Example:
        >>> span = FileSpan.from_bytes(b"d /tmp")
        >>> span.advance()
        >>> span.split().to_bytes()
        b'd'
        >>> span.to_bytes()
        b' /tmp'
    """

    __slots__ = ("_buffer", "_cursor", "_end", "_start", "file")

    def __init__(
        self,
        buffer: bytes,
        file: Path,
        start: int = 0,
        end: int | None = None,
    ) -> None:
        if end is None:
            end = len(buffer)
        if not 0 <= start <= end <= len(buffer):
            msg = f"Span {start}..{end} out of bounds for buffer of {len(buffer)} bytes"
            raise ValueError(msg)
        self._buffer = buffer
        self._start = start
        self._end = end
        self._cursor = 0
        self.file = file

    @classmethod
    def from_bytes(cls, data: bytes, file: Path | str = NO_FILE) -> FileSpan:
        """Create a span covering a whole buffer.

        Args:
            data: Raw file contents.
            file: Path identifying where the bytes came from. Defaults to
                NO_FILE.

        Returns:
            FileSpan over all of ``data``.
        """
        return cls(bytes(data), Path(file))

    def __len__(self) -> int:
        return self._end - self._start

    def __repr__(self) -> str:
        return (
            f"FileSpan(file={str(self.file)!r}, range={self._start}..{self._end}, "
            f"cursor={self._cursor}, bytes={self.to_bytes()!r})"
        )

    @property
    def start(self) -> int:
        """Absolute offset of the first byte covered by the span."""
        return self._start

    @property
    def end(self) -> int:
        """Absolute offset after the last byte covered by the span."""
        return self._end

    @property
    def cursor(self) -> int:
        """Number of bytes inspected but not yet committed."""
        return self._cursor

    def is_empty(self) -> bool:
        """Check if the span covers no bytes at all."""
        return self._start == self._end

    def to_bytes(self) -> bytes:
        """Return every byte covered by the span, ignoring the cursor."""
        return self._buffer[self._start : self._end]

    def remaining(self) -> bytes:
        """Return the bytes from the cursor to the end of the span."""
        return self._buffer[self._start + self._cursor : self._end]

    def peek(self) -> int | None:
        """Return the byte under the cursor, or None at the end."""
        return self.peek_at(0)

    def peek_at(self, offset: int) -> int | None:
        """Return the byte ``offset`` positions past the cursor, or None."""
        position = self._start + self._cursor + offset
        if offset < 0 or position >= self._end:
            return None
        return self._buffer[position]

    def advance(self, count: int = 1) -> None:
        """Move the cursor forward, stopping at the end of the span."""
        self._cursor = min(self._cursor + count, len(self))

    def next(self) -> int | None:
        """Return the byte under the cursor and move past it."""
        byte = self.peek()
        if byte is not None:
            self.advance()
        return byte

    def split(self) -> FileSpan:
        """Commit the cursor position.

        Returns a new span covering everything before the cursor; this
        span is truncated to cover everything after it, with the cursor
        reset.

        Returns:
            The consumed prefix as an independent span.
        """
        middle = self._start + self._cursor
        head = FileSpan(self._buffer, self.file, self._start, middle)
        self._start = middle
        self._cursor = 0
        return head

    def take_rest(self) -> FileSpan:
        """Consume the whole remainder of the span and return it."""
        self._cursor = len(self)
        return self.split()

    def spanned(self, data: T) -> Spanned[T]:
        """Tag ``data`` with the full range covered by this span."""
        return Spanned(data, self.file, self._start, self._end)

    def cursor_span(self) -> Spanned[None]:
        """Return the location of the bytes inspected so far, uncommitted."""
        return Spanned(None, self.file, self._start, self._start + self._cursor)

    def lines(self) -> Iterator[FileSpan]:
        """Yield one span per newline-terminated line.

        The newline itself is excluded from each yielded span. Content
        after a final newline produces no extra empty line. Each call
        returns a fresh iterator; the span itself is not modified.

        Yields:
            FileSpan for every line, in order.
        """
        position = self._start
        while position < self._end:
            newline = self._buffer.find(b"\n", position, self._end)
            if newline == -1:
                yield FileSpan(self._buffer, self.file, position, self._end)
                return
            yield FileSpan(self._buffer, self.file, position, newline)
            position = newline + 1
