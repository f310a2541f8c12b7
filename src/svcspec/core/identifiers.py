"""
Identifier policy for svcspec documents.

Class identifiers name a service kind across the whole corpus and must look
random so that independently written documents do not collide. Packet
identifiers are checked against per-kind ranges to decide whether a value
should come from the base document or needs the extended range opt-in.
"""

from __future__ import annotations

import random
import re
from enum import Enum

from .ir import PacketKind

CLASS_IDENTIFIER_MIN = 0x1000_0001
CLASS_IDENTIFIER_MAX = 0x1FFF_FF00

# Camel names with a fixed class identifier, whatever the document declares
RESERVED_CLASS_IDENTIFIERS = {
    "base": 0x1FFF_FFF1,
    "sensor": 0x1FFF_FFF2,
}

_REPEATED_DIGIT = re.compile(r"([0-9a-f])\1\1")
_WORDS = re.compile(r"f00d|dead|deaf|beef")


class IdentifierRange(str, Enum):
    """Range a packet identifier falls into for its kind."""

    USER = "user"
    SYSTEM = "system"
    HIGH = "high"
    NONE = "none"


def to_hex(n: int) -> str:
    if n < 0:
        return "-" + to_hex(-n)
    return f"0x{n:x}"


def looks_random(n: int) -> bool:
    """
    Heuristic for hand-picked identifiers.

    Rejects values whose hex form has a digit repeated three times in a row
    or spells one of a few well-known words.
    """
    s = f"{n:x}"
    return not (_REPEATED_DIGIT.search(s) or _WORDS.search(s))


def suggest_class_identifier(rng: random.Random | None = None) -> int:
    """Draw a class identifier that passes ``looks_random``."""
    rng = rng or random.Random()
    while True:
        candidate = rng.getrandbits(28) | 0x1000_0000
        if looks_random(candidate):
            return candidate


def class_identifier_in_range(value: int, allow_zero: bool = False) -> bool:
    if value == 0:
        return allow_zero
    return CLASS_IDENTIFIER_MIN <= value <= CLASS_IDENTIFIER_MAX


def classify_packet_identifier(kind: PacketKind, value: int) -> IdentifierRange:
    """
    Classify a packet identifier for its kind.

    A value in the user range is always fine; system values should name a
    base-document packet; high values need the ``high`` opt-in. Non-event
    values in 0x200-0xeff count as high for every kind.
    """
    is_user = False
    is_system = False
    is_high = 0x200 <= value <= 0xEFF

    if kind in (PacketKind.CONST, PacketKind.RO):
        is_system = 0x100 <= value <= 0x17F
        is_user = 0x180 <= value <= 0x1FF
    elif kind == PacketKind.RW:
        is_system = 0x00 <= value <= 0x7F
        is_user = 0x80 <= value <= 0xFF
    elif kind in (PacketKind.COMMAND, PacketKind.REPORT):
        is_system = 0x00 <= value <= 0x7F
        is_user = 0x80 <= value <= 0xFF
        is_high = 0x100 <= value <= 0xEFF
    elif kind == PacketKind.EVENT:
        is_user = 0x0000 <= value <= 0xFFFF
        is_high = 0x1_0000 <= value <= 0xFFFF_FFFF

    if is_user:
        return IdentifierRange.USER
    if is_system:
        return IdentifierRange.SYSTEM
    if is_high:
        return IdentifierRange.HIGH
    return IdentifierRange.NONE
