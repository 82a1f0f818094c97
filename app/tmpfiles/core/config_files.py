"""Configuration file discovery and loading.

Finds tmpfiles.d-style configuration files, splits them into lines and
parses every line independently, so one malformed line never prevents the
rest of a file from being read.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO

from tmpfiles.core.paths import CONFIG_FILE_SUFFIX
from tmpfiles.parser import FileSpan, Line, ParseError, parse_line

logger = logging.getLogger(__name__)

COMMENT_PREFIX = b"#"

CAT_CONFIG_WARNING = (
    b"# WARNING: cat-config is vulnerable to a TOCTOU attack, do not use for security purposes\n"
)


class ConfigSourceError(Exception):
    """Raised when a configuration source cannot be read."""


@dataclass(frozen=True, slots=True)
class LineError:
    """A configuration line that failed to parse.

    Attributes:
        file: Configuration file containing the line.
        line_number: 1-based line number.
        line_start: Byte offset of the line within the file.
        raw: Raw line bytes, without the newline.
        error: The parse error.
    """

    file: Path
    line_number: int
    line_start: int
    raw: bytes
    error: ParseError

    @property
    def column(self) -> int:
        """1-based byte column where the failing field starts."""
        if self.error.span is None:
            return 1
        return self.error.span.start - self.line_start + 1

    @property
    def location(self) -> str:
        """Location in file:line:column form."""
        return f"{self.file}:{self.line_number}:{self.column}"


@dataclass(slots=True)
class ConfigParseResult:
    """Outcome of parsing one or more configuration files.

    Attributes:
        files: Files that were read, in application order.
        lines: Successfully parsed lines, in order.
        errors: Lines that failed to parse, in order.
    """

    files: list[Path] = field(default_factory=list)
    lines: list[Line] = field(default_factory=list)
    errors: list[LineError] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """Check if every line parsed."""
        return not self.errors

    def merge(self, other: "ConfigParseResult") -> None:
        """Append another result to this one."""
        self.files.extend(other.files)
        self.lines.extend(other.lines)
        self.errors.extend(other.errors)


def find_config_files(sources: Iterable[Path]) -> list[Path]:
    """Collect configuration files from files and directories.

    A file source is used as-is. A directory source contributes its
    immediate ``*.conf`` entries that are regular files or symlinks to
    regular files. Files are keyed by basename, so a later source replaces
    an earlier file of the same name, and are returned sorted by basename
    because configuration is applied in lexicographic order.

    Args:
        sources: Configuration files or directories.

    Returns:
        Paths of the configuration files to apply, in order.

    Raises:
        ConfigSourceError: If a source does not exist or cannot be listed.
    """
    config_files: dict[str, Path] = {}

    for source in sources:
        if source.is_file():
            config_files[source.name] = source
            continue

        try:
            entries = sorted(source.iterdir())
        except OSError as e:
            raise ConfigSourceError(f"Cannot read configuration source {source}: {e}") from e

        for entry in entries:
            if entry.suffix != CONFIG_FILE_SUFFIX:
                continue
            if not entry.is_file():
                logger.warning("Skipping non-regular configuration entry: %s", entry)
                continue
            if entry.name in config_files:
                logger.debug("%s overrides %s", entry, config_files[entry.name])
            config_files[entry.name] = entry

    ordered = [config_files[name] for name in sorted(config_files)]
    logger.debug("Found %d configuration file(s)", len(ordered))
    return ordered


def parse_config_bytes(data: bytes, file: Path) -> ConfigParseResult:
    """Parse the contents of one configuration file.

    Empty lines and lines starting with "#" are skipped. Every other line
    is parsed independently.

    Args:
        data: Raw file contents.
        file: Path recorded in spans and errors.

    Returns:
        ConfigParseResult with the parsed lines and per-line errors.
    """
    result = ConfigParseResult(files=[file])
    span = FileSpan.from_bytes(data, file)

    skipped = 0
    for line_number, line in enumerate(span.lines(), start=1):
        raw = line.to_bytes()
        if line.is_empty() or raw.startswith(COMMENT_PREFIX):
            skipped += 1
            continue

        line_start = line.start
        try:
            result.lines.append(parse_line(line))
        except ParseError as e:
            logger.debug("%s:%d: %s", file, line_number, e)
            result.errors.append(
                LineError(
                    file=file,
                    line_number=line_number,
                    line_start=line_start,
                    raw=raw,
                    error=e,
                )
            )

    logger.debug(
        "Parsed %s: %d line(s), %d error(s), %d skipped",
        file,
        len(result.lines),
        len(result.errors),
        skipped,
    )
    return result


def read_config_file(path: Path) -> bytes:
    """Read a configuration file's raw bytes.

    Raises:
        ConfigSourceError: If the file cannot be read.
    """
    try:
        return path.read_bytes()
    except OSError as e:
        raise ConfigSourceError(f"Cannot read configuration file {path}: {e}") from e


def parse_config_file(path: Path) -> ConfigParseResult:
    """Read and parse one configuration file.

    Raises:
        ConfigSourceError: If the file cannot be read.
    """
    return parse_config_bytes(read_config_file(path), path)


def load_config(sources: Iterable[Path]) -> ConfigParseResult:
    """Find and parse every configuration file from the given sources.

    Args:
        sources: Configuration files or directories.

    Returns:
        Combined ConfigParseResult, in application order.

    Raises:
        ConfigSourceError: If a source or file cannot be read.
    """
    result = ConfigParseResult()
    for path in find_config_files(sources):
        result.merge(parse_config_file(path))
    return result


def cat_config(paths: Iterable[Path], stream: BinaryIO) -> None:
    """Write the raw contents of configuration files to a binary stream.

    Each file is preceded by a "# <path>" comment line. Contents are
    copied byte for byte without re-encoding.

    Args:
        paths: Configuration files, in application order.
        stream: Binary output stream.

    Raises:
        ConfigSourceError: If a file cannot be read.
    """
    stream.write(CAT_CONFIG_WARNING)
    for path in paths:
        stream.write(b"# " + bytes(path) + b"\n")
        stream.write(read_config_file(path))
    stream.write(b"\n")
