"""Duration units for the cleanup-age field.

Durations are plain integers counting nanoseconds. The unit spellings and
the month/year lengths follow systemd's time parsing.
"""

from collections.abc import Mapping
from types import MappingProxyType

NANOSECOND = 1
MICROSECOND = 1000 * NANOSECOND
MILLISECOND = 1000 * MICROSECOND
SECOND = 1000 * MILLISECOND
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE
DAY = 24 * HOUR
WEEK = 7 * DAY
# systemd's definitions, a bit odd but kept for compatibility
MONTH = 30 * DAY + 10 * HOUR + 30 * MINUTE
YEAR = 365 * DAY + 6 * HOUR

# Largest magnitude accepted for a single duration part
MAX_COUNT = 2**64 - 1

# A u64 count of seconds plus a sub-second nanosecond part
MAX_DURATION = MAX_COUNT * SECOND + (SECOND - 1)

DURATION_UNITS: Mapping[bytes, int] = MappingProxyType(
    {
        b"": SECOND,
        b"seconds": SECOND,
        b"second": SECOND,
        b"sec": SECOND,
        b"s": SECOND,
        b"minutes": MINUTE,
        b"minute": MINUTE,
        b"min": MINUTE,
        b"m": MINUTE,
        b"months": MONTH,
        b"month": MONTH,
        b"M": MONTH,
        b"msec": MILLISECOND,
        b"ms": MILLISECOND,
        b"hours": HOUR,
        b"hour": HOUR,
        b"hr": HOUR,
        b"h": HOUR,
        b"days": DAY,
        b"day": DAY,
        b"d": DAY,
        b"weeks": WEEK,
        b"week": WEEK,
        b"w": WEEK,
        b"years": YEAR,
        b"year": YEAR,
        b"y": YEAR,
        b"usec": MICROSECOND,
        b"us": MICROSECOND,
        "μs".encode(): MICROSECOND,  # GREEK SMALL LETTER MU
        "µs".encode(): MICROSECOND,  # MICRO SIGN
        b"nsec": NANOSECOND,
        b"ns": NANOSECOND,
    }
)


def format_duration(nanoseconds: int) -> str:
    """Format a duration using the largest exact units.

    Months and years are skipped because they are not whole days.

    Args:
        nanoseconds: Duration to format.

    Returns:
        Compact string such as "1w2d3h" or "0" for an empty duration.
    """
    if nanoseconds == 0:
        return "0"

    parts: list[str] = []
    remaining = nanoseconds
    for suffix, unit in (
        ("w", WEEK),
        ("d", DAY),
        ("h", HOUR),
        ("min", MINUTE),
        ("s", SECOND),
        ("ms", MILLISECOND),
        ("us", MICROSECOND),
        ("ns", NANOSECOND),
    ):
        count, remaining = divmod(remaining, unit)
        if count:
            parts.append(f"{count}{suffix}")
    return "".join(parts)
