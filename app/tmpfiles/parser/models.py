"""Data models for parsed configuration lines.

This module defines the immutable records produced by the line parser:
line types and their modifiers, modes, owners, cleanup ages, paths with
unresolved specifiers, and the Line aggregate that ties them together.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, ClassVar

from tmpfiles.parser.span import Spanned
from tmpfiles.parser.units import MAX_DURATION, format_duration


class LineAction(str, Enum):
    """Action selected by the first letter of the type field."""

    CREATE_FILE = "create_file"
    WRITE_FILE = "write_file"
    CREATE_AND_CLEAN_UP_DIRECTORY = "create_and_clean_up_directory"
    CREATE_AND_REMOVE_DIRECTORY = "create_and_remove_directory"
    CLEAN_UP_DIRECTORY = "clean_up_directory"
    CREATE_FIFO = "create_fifo"
    CREATE_SYMLINK = "create_symlink"
    CREATE_CHAR_DEVICE = "create_char_device"
    CREATE_BLOCK_DEVICE = "create_block_device"
    COPY = "copy"
    IGNORE = "ignore"
    IGNORE_NON_RECURSIVE = "ignore_non_recursive"
    REMOVE = "remove"
    REMOVE_RECURSIVE = "remove_recursive"
    SET_MODE = "set_mode"
    SET_MODE_RECURSIVE = "set_mode_recursive"
    SET_XATTR = "set_xattr"
    SET_XATTR_RECURSIVE = "set_xattr_recursive"
    SET_ATTR = "set_attr"
    SET_ATTR_RECURSIVE = "set_attr_recursive"
    SET_ACL = "set_acl"
    SET_ACL_RECURSIVE = "set_acl_recursive"


# Actions that accept the "+" (recreate) modifier
RECREATE_ACTIONS: frozenset[LineAction] = frozenset(
    {
        LineAction.CREATE_FILE,
        LineAction.WRITE_FILE,
        LineAction.CREATE_FIFO,
        LineAction.CREATE_SYMLINK,
        LineAction.CREATE_CHAR_DEVICE,
        LineAction.CREATE_BLOCK_DEVICE,
        LineAction.COPY,
        LineAction.SET_ACL,
        LineAction.SET_ACL_RECURSIVE,
    }
)


@dataclass(frozen=True, slots=True)
class LineType:
    """Decoded type field: an action plus its modifiers.

    Attributes:
        action: Basic action, selected by the first character.
        recreate: "+" modifier; replace existing objects (append for writes).
        boot: "!" modifier; only run during boot.
        noerror: "-" modifier; failure to create is not an error.
        force: "=" modifier; remove existing objects that do not match.
        base64_decode: "~" modifier; the argument field is base64 encoded.
    """

    action: LineAction
    recreate: bool = False
    boot: bool = False
    noerror: bool = False
    force: bool = False
    base64_decode: bool = False

    def __post_init__(self) -> None:
        """Validate the modifier combination."""
        if self.recreate and self.action not in RECREATE_ACTIONS:
            msg = f"Action {self.action.value} cannot be recreated"
            raise ValueError(msg)


class ModeBehavior(str, Enum):
    """How a mode is applied to an existing file.

    Attributes:
        DEFAULT: Set the mode as given.
        MASKED: "~" prefix; mask the value with the existing mode.
        KEEP_EXISTING: ":" prefix; leave the mode alone if the file exists.
    """

    DEFAULT = "default"
    MASKED = "masked"
    KEEP_EXISTING = "keep_existing"


@dataclass(frozen=True, slots=True)
class Mode:
    """Decoded octal mode field."""

    value: int
    behavior: ModeBehavior = ModeBehavior.DEFAULT

    def __post_init__(self) -> None:
        """Validate the permission bits."""
        if not 0 <= self.value <= 0o7777:
            msg = f"Mode must be between 0000 and 7777, got {self.value:o}"
            raise ValueError(msg)

    @property
    def masked(self) -> bool:
        return self.behavior == ModeBehavior.MASKED

    @property
    def keep_existing(self) -> bool:
        return self.behavior == ModeBehavior.KEEP_EXISTING

    def __str__(self) -> str:
        prefix = "~" if self.masked else ":" if self.keep_existing else ""
        return f"{prefix}{self.value:04o}"


@dataclass(frozen=True, slots=True)
class OwnerId:
    """Numeric user or group ID."""

    id: int

    def __post_init__(self) -> None:
        if not 0 <= self.id < 2**32:
            msg = f"ID must fit in 32 bits, got {self.id}"
            raise ValueError(msg)

    def __str__(self) -> str:
        return str(self.id)


@dataclass(frozen=True, slots=True)
class OwnerName:
    """Symbolic user or group name, resolved later against the system."""

    name: str

    def __str__(self) -> str:
        return self.name


FileOwner = OwnerId | OwnerName


@dataclass(frozen=True, slots=True)
class CleanupAge:
    """Decoded cleanup-age field.

    Attributes:
        age: Minimum age before cleaning up, in nanoseconds.
        second_level: Only clean up entries at least two levels below the root.
        consider_atime: Count access time as last use for files.
        consider_atime_dir: Count access time as last use for directories.
        consider_btime: Count birth time as last use for files.
        consider_btime_dir: Count birth time as last use for directories.
        consider_ctime: Count change time as last use for files.
        consider_ctime_dir: Count change time as last use for directories.
        consider_mtime: Count modification time as last use for files.
        consider_mtime_dir: Count modification time as last use for directories.
    """

    EMPTY: ClassVar[CleanupAge]

    age: int = 0
    second_level: bool = False
    consider_atime: bool = False
    consider_atime_dir: bool = False
    consider_btime: bool = False
    consider_btime_dir: bool = False
    consider_ctime: bool = False
    consider_ctime_dir: bool = False
    consider_mtime: bool = False
    consider_mtime_dir: bool = False

    def __post_init__(self) -> None:
        """Validate the duration range."""
        if not 0 <= self.age <= MAX_DURATION:
            msg = f"Age out of range: {self.age}"
            raise ValueError(msg)

    def with_age(self, age: int) -> CleanupAge:
        """Return a copy with a different age."""
        return dataclasses.replace(self, age=age)

    def __str__(self) -> str:
        letters = "".join(
            letter
            for letter, enabled in (
                ("a", self.consider_atime),
                ("A", self.consider_atime_dir),
                ("b", self.consider_btime),
                ("B", self.consider_btime_dir),
                ("c", self.consider_ctime),
                ("C", self.consider_ctime_dir),
                ("m", self.consider_mtime),
                ("M", self.consider_mtime_dir),
            )
            if enabled
        )
        flags = f"{'~' if self.second_level else ''}{letters}"
        return f"{flags}:{format_duration(self.age)}"


CleanupAge.EMPTY = CleanupAge(
    consider_atime=True,
    consider_atime_dir=True,
    consider_btime=True,
    consider_btime_dir=True,
    consider_ctime=True,
    consider_ctime_dir=False,
    consider_mtime=True,
    consider_mtime_dir=True,
)


class Specifier(str, Enum):
    """Runtime-resolved value referenced by ``%x`` in a path.

    The enum value is the designator character following ``%``.
    """

    ARCHITECTURE = "a"
    OS_IMAGE_VERSION = "A"
    BOOT_ID = "b"
    OS_BUILD_ID = "B"
    CACHE_DIR = "C"
    USER_GROUP = "g"
    USER_GID = "G"
    USER_HOME = "h"
    HOSTNAME = "H"
    SHORT_HOSTNAME = "l"
    LOG_DIR = "L"
    MACHINE_ID = "m"
    OS_IMAGE_ID = "M"
    OS_ID = "o"
    STATE_DIR = "S"
    RUNTIME_DIR = "t"
    TEMP_DIR = "T"
    USER_NAME = "u"
    USER_UID = "U"
    KERNEL_RELEASE = "v"
    PERSISTENT_TEMP_DIR = "V"
    OS_VERSION_ID = "w"
    OS_VARIANT_ID = "W"
    PERCENT = "%"

    @property
    def expands_to_absolute_path(self) -> bool:
        """Check if the specifier is documented to expand to an absolute path."""
        return self in ABSOLUTE_SPECIFIERS


ABSOLUTE_SPECIFIERS: frozenset[Specifier] = frozenset(
    {
        Specifier.CACHE_DIR,
        Specifier.USER_HOME,
        Specifier.LOG_DIR,
        Specifier.STATE_DIR,
        Specifier.RUNTIME_DIR,
        Specifier.TEMP_DIR,
        Specifier.PERSISTENT_TEMP_DIR,
    }
)


@dataclass(frozen=True, slots=True)
class SpecifierString:
    """A path whose specifiers are kept as unresolved tokens.

    Attributes:
        prefix: Literal bytes before the first specifier.
        segments: Each specifier with the literal bytes that follow it.
    """

    prefix: bytes
    segments: tuple[tuple[Specifier, bytes], ...] = ()

    def __post_init__(self) -> None:
        """Validate that no literal part contains a NUL byte."""
        if b"\0" in self.prefix or any(b"\0" in literal for _, literal in self.segments):
            msg = "Path cannot contain NUL bytes"
            raise ValueError(msg)

    @property
    def specifiers(self) -> tuple[Specifier, ...]:
        """Specifiers in order of appearance."""
        return tuple(specifier for specifier, _ in self.segments)

    @property
    def is_literal(self) -> bool:
        """Check if the path contains no specifiers."""
        return not self.segments

    def render(self) -> bytes:
        """Return the path in configuration syntax, with ``%x`` tokens."""
        parts = [self.prefix]
        for specifier, literal in self.segments:
            parts.append(b"%" + specifier.value.encode())
            parts.append(literal)
        return b"".join(parts)


def _show(value: bytes) -> str:
    return value.decode("utf-8", "backslashreplace")


@dataclass(frozen=True, slots=True)
class Line:
    """One parsed configuration line.

    Every field keeps the source range it was decoded from. Optional fields
    that were omitted (or given as "-") hold None.
    """

    line_type: Spanned[LineType]
    path: Spanned[SpecifierString]
    mode: Spanned[Mode | None]
    owner: Spanned[FileOwner | None]
    group: Spanned[FileOwner | None]
    age: Spanned[CleanupAge | None]
    argument: Spanned[bytes | None]

    @property
    def file(self) -> Path:
        """Configuration file the line came from."""
        return self.line_type.file

    @property
    def action(self) -> LineAction:
        return self.line_type.data.action

    @property
    def is_boot_only(self) -> bool:
        """Check if the line should only be applied during boot."""
        return self.line_type.data.boot

    @property
    def effective_age(self) -> CleanupAge:
        """Cleanup age, treating an omitted field as CleanupAge.EMPTY."""
        return self.age.data if self.age.data is not None else CleanupAge.EMPTY

    def to_dict(self) -> dict[str, Any]:
        """Convert the line to a JSON-serializable dictionary.

        Byte strings are decoded as UTF-8 with backslash escapes for
        anything undecodable.
        """
        line_type = self.line_type.data
        mode = self.mode.data
        age = self.age.data
        return {
            "file": str(self.file),
            "range": [self.line_type.start, self.argument.end],
            "type": {
                "action": line_type.action.value,
                "recreate": line_type.recreate,
                "boot": line_type.boot,
                "noerror": line_type.noerror,
                "force": line_type.force,
                "base64_decode": line_type.base64_decode,
            },
            "path": _show(self.path.data.render()),
            "specifiers": [s.name.lower() for s in self.path.data.specifiers],
            "mode": None
            if mode is None
            else {"value": f"{mode.value:04o}", "behavior": mode.behavior.value},
            "owner": None if self.owner.data is None else str(self.owner.data),
            "group": None if self.group.data is None else str(self.group.data),
            "age": None if age is None else str(age),
            "argument": None if self.argument.data is None else _show(self.argument.data),
        }
