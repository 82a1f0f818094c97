"""Cleanup-age field decoding.

The age field is an optional list of timestamp letters followed by a
duration, e.g. ``10d``, ``~mM:1w`` or ``aA:1h30min``.
"""

import string

from tmpfiles.parser.errors import (
    DuplicateCleanupSpecifier,
    EmptyCleanupSpecifierList,
    InvalidCleanupSpecifier,
    InvalidDurationInt,
    InvalidDurationKeyword,
    Malformed,
    OverflowedDuration,
)
from tmpfiles.parser.models import CleanupAge
from tmpfiles.parser.units import DURATION_UNITS, MAX_COUNT, MAX_DURATION

_DIGIT_BYTES = frozenset(string.digits.encode())
# A unit is ASCII letters or non-ASCII bytes (the micro sign spellings)
_UNIT_BYTES = frozenset(string.ascii_letters.encode()) | frozenset(range(0x80, 0x100))

_MAX_COUNT_DIGITS = len(str(MAX_COUNT))

_AGE_BY_FLAGS: dict[int, str] = {
    ord("a"): "consider_atime",
    ord("A"): "consider_atime_dir",
    ord("b"): "consider_btime",
    ord("B"): "consider_btime_dir",
    ord("c"): "consider_ctime",
    ord("C"): "consider_ctime_dir",
    ord("m"): "consider_mtime",
    ord("M"): "consider_mtime_dir",
}


def _scan(data: bytes, position: int, accepted: frozenset[int]) -> int:
    """Return the offset of the first byte at or after position not in accepted."""
    end = position
    while end < len(data) and data[end] in accepted:
        end += 1
    return end


def parse_duration_part(data: bytes, position: int = 0) -> tuple[int, int]:
    """Parse one ``<integer><unit>`` part of a duration.

    Args:
        data: The whole duration field.
        position: Offset of the part within ``data``.

    Returns:
        Tuple of (nanoseconds, offset just past the part).

    Raises:
        InvalidDurationInt: If the part has no digits or the number is too big.
        InvalidDurationKeyword: If the unit is not in the unit table.
        OverflowedDuration: If the part does not fit in a duration.
    """
    digits_end = _scan(data, position, _DIGIT_BYTES)
    unit_end = _scan(data, digits_end, _UNIT_BYTES)
    digits, unit = data[position:digits_end], data[digits_end:unit_end]

    if not digits:
        raise InvalidDurationInt(data[position:])
    # Bound the length first; int() refuses very long digit strings
    significant = digits.lstrip(b"0") or b"0"
    if len(significant) > _MAX_COUNT_DIGITS:
        raise InvalidDurationInt(digits)
    count = int(significant)
    if count > MAX_COUNT:
        raise InvalidDurationInt(digits)

    try:
        multiplier = DURATION_UNITS[unit]
    except KeyError:
        raise InvalidDurationKeyword(unit) from None

    nanoseconds = count * multiplier
    if nanoseconds > MAX_DURATION:
        raise OverflowedDuration(data)
    return nanoseconds, unit_end


def parse_duration(data: bytes) -> int:
    """Parse a duration made of one or more concatenated parts.

    Parts are summed, so ``1m1s`` and ``1s1m`` are both 61 seconds.

    Args:
        data: Duration bytes, e.g. ``b"1h30min"``.

    Returns:
        Total duration in nanoseconds.

    Raises:
        CleanupParseError: If any part is invalid or the total overflows.
    """
    total = 0
    position = 0
    while True:
        nanoseconds, position = parse_duration_part(data, position)
        total += nanoseconds
        if total > MAX_DURATION:
            raise OverflowedDuration(data)
        if position >= len(data):
            return total


def _parse_age_by(data: bytes) -> CleanupAge:
    """Parse the timestamp letters in front of the ``:`` separator."""
    second_level = data.startswith(b"~")
    letters = data[1:] if second_level else data
    if not letters:
        raise EmptyCleanupSpecifierList()

    flags: dict[str, bool] = {}
    for letter in letters:
        name = _AGE_BY_FLAGS.get(letter)
        if name is None:
            raise InvalidCleanupSpecifier(letter)
        if name in flags:
            raise DuplicateCleanupSpecifier(letter)
        flags[name] = True

    return CleanupAge(second_level=second_level, **flags)


def parse_cleanup_age(data: bytes) -> CleanupAge:
    """Decode the cleanup-age field.

    Without a ``:`` the whole field is the duration and the timestamp
    flags are those of CleanupAge.EMPTY.

    Args:
        data: Field bytes, e.g. ``b"~aA:10d"``.

    Returns:
        The decoded CleanupAge.

    Raises:
        CleanupParseError: If the flags or the duration are invalid.
    """
    parts = data.split(b":")
    if len(parts) > 2:
        raise Malformed(data)

    if len(parts) == 2:
        age_by, duration = parts
        age = _parse_age_by(age_by)
    else:
        duration = data
        age = CleanupAge.EMPTY

    return age.with_age(parse_duration(duration))
