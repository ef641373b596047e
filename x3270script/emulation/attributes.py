# ATTRIBUTION NOTICE
# =================================================================================
# This module contains code ported from or inspired by: x3270if scripting library
# Source: https://github.com/pmattes/x3270
# Licensed under BSD-3-Clause
#
# DESCRIPTION
# --------------------
# Field and extended attribute model for decoded ReadBuffer output
#
# COMPATIBILITY
# --------------------
# Attribute tags and values follow the s3270 ReadBuffer SF()/SA() notation
#
# MODIFICATIONS
# --------------------
# Attribute state is an immutable dataclass; undefined values fall back to
# DEFAULT instead of aborting the decode
#
# INTEGRATION POINTS
# --------------------
# - DisplayBuffer fold over SF/SA/GE tokens
# - Position.attrs
#
# ATTRIBUTION REQUIREMENTS
# ------------------------------
# This attribution must be maintained when this code is modified or
# redistributed. See THIRD_PARTY_NOTICES.md for complete license text.
# =================================================================================

"""Field attributes for 3270 display positions."""

import enum
import logging
from dataclasses import dataclass, fields, replace
from typing import Dict, Iterator, Optional, Tuple, Type, TypeVar

from ..utils.logging_utils import log_parsing_warning

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=enum.IntEnum)

# Bits of the basic 3270 attribute byte.
INTENSITY_MASK = 0x0C


class FieldIntensity(enum.IntEnum):
    NORMAL = 0x00
    NORMAL_SELECTABLE = 0x04
    HIGHLIGHTED_SELECTABLE = 0x08
    ZERO = 0x0C  # non-display


class FieldFlags(enum.IntFlag):
    NONE = 0
    MODIFIED = 0x01
    NUMERIC = 0x10
    PROTECTED = 0x20
    ALL = 0x31


class FieldColor(enum.IntEnum):
    DEFAULT = 0
    NEUTRAL_BLACK = 0xF0
    BLUE = 0xF1
    RED = 0xF2
    PINK = 0xF3
    GREEN = 0xF4
    TURQUOISE = 0xF5
    YELLOW = 0xF6
    NEUTRAL_WHITE = 0xF7
    BLACK = 0xF8
    DEEP_BLUE = 0xF9
    ORANGE = 0xFA
    PURPLE = 0xFB
    PALE_GREEN = 0xFC
    PALE_TURQUOISE = 0xFD
    GRAY = 0xFE
    WHITE = 0xFF


class ExtendedAttribute(enum.IntEnum):
    """Attribute tags used in SF() and SA() tokens."""

    EA_3270 = 0xC0
    VALIDATION = 0xC1
    OUTLINING = 0xC2
    HIGHLIGHTING = 0x41
    FOREGROUND = 0x42
    CHARACTER_SET = 0x43
    BACKGROUND = 0x45
    TRANSPARENCY = 0x46
    INPUT_CONTROL = 0xFE


class CharacterSet(enum.IntEnum):
    DEFAULT = 0
    APL = 0xF1
    LINE_DRAWING = 0xF2
    DBCS = 0xF8


class Validation(enum.IntEnum):
    DEFAULT = 0
    TRIGGER = 0x01
    ENTRY = 0x02
    FILL = 0x04


class Outlining(enum.IntEnum):
    DEFAULT = 0
    UNDERLINE = 0x01
    LEFT = 0x02
    OVERLINE = 0x04
    RIGHT = 0x08


class Highlighting(enum.IntEnum):
    DEFAULT = 0
    NORMAL = 0xF0
    BLINK = 0xF1
    REVERSE = 0xF2
    UNDERSCORE = 0xF4
    INTENSIFY = 0xF8


class Transparency(enum.IntEnum):
    DEFAULT = 0
    OR = 0xF0
    XOR = 0xF1
    OPAQUE = 0xFF


class InputControl(enum.IntEnum):
    DEFAULT = 0
    ENABLED = 0x01


@dataclass(frozen=True)
class FieldAttributes:
    """Resolved display attributes of one position."""

    intensity: FieldIntensity = FieldIntensity.NORMAL
    flags: FieldFlags = FieldFlags.NONE
    foreground: FieldColor = FieldColor.DEFAULT
    background: FieldColor = FieldColor.DEFAULT
    character_set: CharacterSet = CharacterSet.DEFAULT
    highlighting: Highlighting = Highlighting.DEFAULT
    outlining: Outlining = Outlining.DEFAULT
    transparency: Transparency = Transparency.DEFAULT
    input_control: InputControl = InputControl.DEFAULT
    validation: Validation = Validation.DEFAULT

    @property
    def protected(self) -> bool:
        return bool(self.flags & FieldFlags.PROTECTED)

    @property
    def numeric(self) -> bool:
        return bool(self.flags & FieldFlags.NUMERIC)

    @property
    def modified(self) -> bool:
        return bool(self.flags & FieldFlags.MODIFIED)

    @property
    def displayable(self) -> bool:
        return self.intensity != FieldIntensity.ZERO

    def overlay(self, overrides: "FieldAttributes") -> "FieldAttributes":
        """
        Apply SA overrides on top of field attributes.

        Each non-DEFAULT extended attribute in overrides replaces the field's
        value. Intensity and flags always come from the field.
        """
        changes = {
            f.name: getattr(overrides, f.name)
            for f in fields(self)
            if f.name not in ("intensity", "flags") and getattr(overrides, f.name)
        }
        return replace(self, **changes) if changes else self


# Extended attribute tag -> (FieldAttributes field, enum type)
EXTENDED_FIELDS: Dict[ExtendedAttribute, Tuple[str, Type[enum.IntEnum]]] = {
    ExtendedAttribute.VALIDATION: ("validation", Validation),
    ExtendedAttribute.OUTLINING: ("outlining", Outlining),
    ExtendedAttribute.HIGHLIGHTING: ("highlighting", Highlighting),
    ExtendedAttribute.FOREGROUND: ("foreground", FieldColor),
    ExtendedAttribute.CHARACTER_SET: ("character_set", CharacterSet),
    ExtendedAttribute.BACKGROUND: ("background", FieldColor),
    ExtendedAttribute.TRANSPARENCY: ("transparency", Transparency),
    ExtendedAttribute.INPUT_CONTROL: ("input_control", InputControl),
}


def _parse_byte(text: str) -> Optional[int]:
    try:
        value = int(text, 16)
    except ValueError:
        return None
    return value if 0 <= value <= 0xFF else None


def enum_or_default(enum_type: Type[E], value: int) -> E:
    """Map a raw attribute value to its enum member, or DEFAULT if undefined."""
    try:
        return enum_type(value)
    except ValueError:
        return enum_type["DEFAULT"]


def iter_assignments(body: str) -> Iterator[Tuple[int, int]]:
    """
    Yield (tag, value) pairs from the inside of an SF() or SA() token.

    Assignments whose tag or value is not a hex byte are skipped.
    """
    for assignment in body.split(","):
        tag_text, sep, value_text = assignment.partition("=")
        tag = _parse_byte(tag_text)
        value = _parse_byte(value_text) if sep else None
        if tag is None or value is None:
            log_parsing_warning(
                logger, "Attribute assignment", f"ignoring malformed '{assignment}'"
            )
            continue
        yield tag, value


def apply_assignments(
    attrs: FieldAttributes, body: str, basic: bool = True
) -> FieldAttributes:
    """
    Return attrs with the assignments from an SF()/SA() body applied.

    Args:
        attrs: Starting attributes
        body: Comma-separated ``tag=value`` text, tags and values in hex
        basic: Honor the basic 3270 attribute (tag c0)

    Returns:
        New FieldAttributes; unknown tags are ignored
    """
    changes: Dict[str, object] = {}
    for tag, value in iter_assignments(body):
        if tag == ExtendedAttribute.EA_3270:
            if basic:
                changes["flags"] = FieldFlags(value & FieldFlags.ALL)
                changes["intensity"] = FieldIntensity(value & INTENSITY_MASK)
            continue
        try:
            name, enum_type = EXTENDED_FIELDS[ExtendedAttribute(tag)]
        except (KeyError, ValueError):
            logger.debug(f"Ignoring unknown attribute tag {tag:02x}")
            continue
        changes[name] = enum_or_default(enum_type, value)
    return replace(attrs, **changes) if changes else attrs
