"""Decoders for the individual fields of a configuration line.

Each decoder takes the bytes produced by the tokenizer for one column and
returns the typed value, raising a ParseError subclass on bad input.
The "-" placeholder for omitted fields is handled by the caller.
"""

import base64
import binascii
import re
from collections.abc import Mapping
from types import MappingProxyType

from tmpfiles.parser.errors import (
    Base64Decode,
    DuplicateTypeModifier,
    EmptyParseType,
    EmptyPath,
    IDKWhatAServiceCredential,
    IllegalParseType,
    IncompleteSpecifier,
    InvalidMode,
    InvalidSpecifier,
    InvalidTypeCombination,
    InvalidTypeModifier,
    InvalidUsername,
    NonabsolutePath,
    NullInPath,
)
from tmpfiles.parser.models import (
    RECREATE_ACTIONS,
    FileOwner,
    LineAction,
    LineType,
    Mode,
    ModeBehavior,
    OwnerId,
    OwnerName,
    Specifier,
    SpecifierString,
)

TYPE_ACTIONS: Mapping[int, LineAction] = MappingProxyType(
    {
        ord("f"): LineAction.CREATE_FILE,
        ord("w"): LineAction.WRITE_FILE,
        ord("d"): LineAction.CREATE_AND_CLEAN_UP_DIRECTORY,
        # Subvolumes are created as plain directories
        ord("v"): LineAction.CREATE_AND_CLEAN_UP_DIRECTORY,
        ord("q"): LineAction.CREATE_AND_CLEAN_UP_DIRECTORY,
        ord("Q"): LineAction.CREATE_AND_CLEAN_UP_DIRECTORY,
        ord("D"): LineAction.CREATE_AND_REMOVE_DIRECTORY,
        ord("e"): LineAction.CLEAN_UP_DIRECTORY,
        ord("p"): LineAction.CREATE_FIFO,
        ord("L"): LineAction.CREATE_SYMLINK,
        ord("c"): LineAction.CREATE_CHAR_DEVICE,
        ord("b"): LineAction.CREATE_BLOCK_DEVICE,
        ord("C"): LineAction.COPY,
        ord("x"): LineAction.IGNORE,
        ord("X"): LineAction.IGNORE_NON_RECURSIVE,
        ord("r"): LineAction.REMOVE,
        ord("R"): LineAction.REMOVE_RECURSIVE,
        ord("z"): LineAction.SET_MODE,
        ord("Z"): LineAction.SET_MODE_RECURSIVE,
        ord("t"): LineAction.SET_XATTR,
        ord("T"): LineAction.SET_XATTR_RECURSIVE,
        ord("h"): LineAction.SET_ATTR,
        ord("H"): LineAction.SET_ATTR_RECURSIVE,
        ord("a"): LineAction.SET_ACL,
        ord("A"): LineAction.SET_ACL_RECURSIVE,
    }
)

# Legacy spelling of "f+"
FORCED_RECREATE_FILE = ord("F")

PLUS = ord("+")
MINUS = ord("-")
EXCLAMATION = ord("!")
EQUALS = ord("=")
TILDE = ord("~")
CARET = ord("^")
TYPE_MODIFIERS = frozenset({PLUS, MINUS, EXCLAMATION, EQUALS, TILDE, CARET})

_OCTAL_DIGITS = frozenset(b"01234567")
_UNSIGNED_INT = re.compile(r"\+?[0-9]+")
_MAX_ID = 2**32 - 1


def parse_type(data: bytes) -> LineType:
    """Decode the type field: one action letter followed by modifiers.

    Args:
        data: Field bytes, e.g. ``b"L+"`` or ``b"d!-"``.

    Returns:
        The decoded LineType.

    Raises:
        EmptyParseType: If the field is empty.
        IllegalParseType: If the action letter is unknown.
        InvalidTypeModifier: If a modifier is not one of ``+-!=~^``.
        DuplicateTypeModifier: If a modifier is repeated.
        InvalidTypeCombination: If "+" is used with an action that cannot recreate.
        IDKWhatAServiceCredential: If the "^" modifier is present.
    """
    if not data:
        raise EmptyParseType()

    letter = data[0]
    if letter == FORCED_RECREATE_FILE:
        action = LineAction.CREATE_FILE
        recreate = True
    else:
        try:
            action = TYPE_ACTIONS[letter]
        except KeyError:
            raise IllegalParseType(letter) from None
        recreate = False

    modifiers: set[int] = set()
    for modifier in data[1:]:
        if modifier not in TYPE_MODIFIERS:
            raise InvalidTypeModifier(modifier)
        if modifier in modifiers:
            raise DuplicateTypeModifier(modifier)
        modifiers.add(modifier)

    if PLUS in modifiers:
        if action not in RECREATE_ACTIONS:
            raise InvalidTypeCombination(letter, PLUS)
        recreate = True
    if CARET in modifiers:
        raise IDKWhatAServiceCredential()

    return LineType(
        action=action,
        recreate=recreate,
        boot=EXCLAMATION in modifiers,
        noerror=MINUS in modifiers,
        force=EQUALS in modifiers,
        base64_decode=TILDE in modifiers,
    )


def _lookup_specifier(designator: int) -> Specifier:
    try:
        return Specifier(chr(designator))
    except ValueError:
        raise InvalidSpecifier(designator) from None


def split_specifiers(data: bytes) -> SpecifierString:
    """Split a path into literal text and ``%x`` specifier tokens.

    Raises:
        IncompleteSpecifier: If the path ends in a lone "%".
        InvalidSpecifier: If "%" is followed by an unknown designator.
        NullInPath: If any literal part contains a NUL byte.
    """
    position = data.find(b"%")
    if position == -1:
        if b"\0" in data:
            raise NullInPath(data)
        return SpecifierString(data)

    prefix = data[:position]
    segments: list[tuple[Specifier, bytes]] = []
    while position != -1:
        if position + 1 >= len(data):
            raise IncompleteSpecifier()
        specifier = _lookup_specifier(data[position + 1])
        following = data.find(b"%", position + 2)
        literal_end = len(data) if following == -1 else following
        segments.append((specifier, data[position + 2 : literal_end]))
        position = following

    if b"\0" in prefix or any(b"\0" in literal for _, literal in segments):
        raise NullInPath(data)
    return SpecifierString(prefix, tuple(segments))


def parse_path(data: bytes) -> SpecifierString:
    """Decode the path field.

    The path must be absolute, or start with a specifier that expands to
    an absolute path (such as ``%h`` or ``%t``).

    Args:
        data: Field bytes, e.g. ``b"/run/%u/cache"``.

    Returns:
        The path as a SpecifierString with unresolved specifiers.

    Raises:
        NullInPath: If any literal part contains a NUL byte.
        NonabsolutePath: If the path is relative.
        EmptyPath: If the path is empty.
        ParseError: For specifier errors (see split_specifiers).
    """
    path = split_specifiers(data)

    if path.prefix:
        if not path.prefix.startswith(b"/"):
            raise NonabsolutePath(data)
    elif not path.segments:
        raise EmptyPath()
    elif not path.segments[0][0].expands_to_absolute_path:
        raise NonabsolutePath(data)

    return path


def parse_mode(data: bytes) -> Mode:
    """Decode the mode field.

    An optional ":" prefix keeps the mode of existing files, an optional
    "~" prefix masks the mode with the existing one. The rest must be three
    or four octal digits.

    Raises:
        InvalidMode: If the field is not a valid mode.
    """
    behavior = ModeBehavior.DEFAULT
    digits = data
    if data.startswith(b":"):
        behavior = ModeBehavior.KEEP_EXISTING
        digits = data[1:]
    elif data.startswith(b"~"):
        behavior = ModeBehavior.MASKED
        digits = data[1:]

    if not 3 <= len(digits) <= 4 or not all(digit in _OCTAL_DIGITS for digit in digits):
        raise InvalidMode(data)

    return Mode(value=int(digits, 8), behavior=behavior)


def parse_owner(data: bytes) -> FileOwner:
    """Decode an owner or group field.

    Numeric values that fit in 32 bits become OwnerId; anything else is
    kept as an OwnerName to be resolved later.

    Raises:
        InvalidUsername: If the field is empty or not valid UTF-8.
    """
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidUsername(data) from e
    if not text:
        raise InvalidUsername(data)

    if _UNSIGNED_INT.fullmatch(text):
        digits = text.lstrip("+").lstrip("0") or "0"
        if len(digits) <= len(str(_MAX_ID)) and int(digits) <= _MAX_ID:
            return OwnerId(int(digits))
    return OwnerName(text)


def parse_argument(data: bytes, line_type: LineType) -> bytes | None:
    """Decode the trailing argument.

    The argument is the rest of the line, taken literally. With the "~"
    type modifier it is base64 decoded first, after dropping trailing
    spaces and tabs.

    Args:
        data: Remaining line bytes.
        line_type: Decoded type field of the same line.

    Returns:
        The argument bytes, or None if the argument is empty.

    Raises:
        Base64Decode: If base64 decoding was requested and failed.
    """
    if not data:
        return None
    if not line_type.base64_decode:
        return data
    try:
        return base64.b64decode(data.rstrip(b" \t"), validate=True)
    except binascii.Error as e:
        raise Base64Decode(e) from e
