"""
Semantic checks for svcspec packets.

The parser calls into these while it builds a document; they only inspect
values and return verdicts, leaving diagnostic reporting to the caller.
"""

from collections.abc import Iterable, Sequence
from typing import Protocol

from .ir import PacketKind, byte_size


class _FieldLike(Protocol):
    type: str
    storage: int


class _PacketLike(Protocol):
    kind: PacketKind
    name: str
    identifier: int


def has_natural_alignment(fields: Iterable[_FieldLike]) -> bool:
    """
    True when every fixed-width field starts at a multiple of its own width.

    Variable-length fields take no space; byte arrays are exempt from the
    offset check but still advance the offset.
    """
    offset = 0
    for field in fields:
        size = byte_size(field.storage)
        if size == 0:
            continue
        if not field.type.startswith("u8[") and offset % size != 0:
            return False
        offset += size
    return True


def is_packet_redefinition(existing: Sequence[_PacketLike], name: str, kind: PacketKind) -> bool:
    """
    True when declaring ``name`` again is an error.

    The only allowed reuse is a report answering a single earlier command of
    the same name.
    """
    previous = [p for p in existing if p.name == name]
    if not previous:
        return False
    if len(previous) == 1 and previous[0].kind == PacketKind.COMMAND and kind == PacketKind.REPORT:
        return False
    return True


def identifier_in_use(existing: Iterable[_PacketLike], kind: PacketKind, identifier: int) -> bool:
    return any(p.kind == kind and p.identifier == identifier for p in existing)
