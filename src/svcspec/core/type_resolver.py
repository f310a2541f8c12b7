"""
Type and unit resolution for svcspec.

Maps type and unit tokens to canonical storage descriptors. Everything here
is a pure function: problems are returned as messages for the caller to turn
into diagnostics, and every failure still yields a usable result so parsing
can continue.

Resolution order for types:
    1. Declared enum names
    2. Fixed point ``u<a>.<b>`` / ``i<a>.<b>`` (a + b in 8, 16, 32, 64)
    3. Primitive integers and ``bool``
    4. ``pipe`` and ``pipe_port``
    5. Variable length ``bytes``, ``string``, ``i32[]``
    6. Byte arrays ``u8[N]``
    7. Anything else: unknown, 4-byte placeholder
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass

from .ir import StorageKind, StorageType, Unit

FIXED_POINT_BITS = (8, 16, 32, 64)
PLACEHOLDER_WIDTH = 4
PIPE_WIDTH = 12
PIPE_PORT_WIDTH = 2

_FIXED_POINT = re.compile(r"^([ui])(\d+)\.(\d+)$")
_BYTE_ARRAY = re.compile(r"^u8\[(\d+)\]$")

_PRIMITIVES = {
    "u8": (False, 1),
    "u16": (False, 2),
    "u32": (False, 4),
    "u64": (False, 8),
    "i8": (True, 1),
    "i16": (True, 2),
    "i32": (True, 4),
    "i64": (True, 8),
}
_VARIABLE = frozenset({"bytes", "string", "i32[]"})
_UNITS = {unit.value: unit for unit in Unit}


@dataclass(frozen=True)
class TypeResolution:
    """
    Result of resolving a type token.

    Attributes:
        storage_type: Resolved storage variant
        type_name: Canonical type token (lowercase, ``_t`` stripped) or enum name
        error: Problem to report, if any
    """

    storage_type: StorageType
    type_name: str
    error: str | None = None

    @property
    def storage(self) -> int:
        return self.storage_type.storage

    @property
    def shift(self) -> int:
        return self.storage_type.shift

    @property
    def is_simple_type(self) -> bool:
        """The type token is already its canonical primitive spelling."""
        return self.storage_type.canonical == self.type_name


def normalize_type_token(token: str) -> str:
    """Lowercase and strip a trailing ``_t`` (``UINT8_T`` style tokens)."""
    return re.sub(r"_t$", "", token).lower()


def resolve_type(token: str | None, enums: Mapping[str, int] | None = None) -> TypeResolution:
    """
    Resolve a type token.

    Args:
        token: Type token as written, or None when missing
        enums: Declared enum names mapped to their storage descriptors

    Returns:
        TypeResolution; on error a 4-byte placeholder and a message
    """
    if token and enums and token in enums:
        storage = enums[token]
        return TypeResolution(StorageType.from_storage(storage, StorageKind.ENUM), token)

    if not token:
        return TypeResolution(_placeholder(), "", "expecting type here")

    name = normalize_type_token(token)

    m = _FIXED_POINT.match(name)
    if m:
        signed = m.group(1) == "i"
        shift = int(m.group(3))
        bits = int(m.group(2)) + shift
        if bits not in FIXED_POINT_BITS:
            storage_type = StorageType(
                kind=StorageKind.FIXED, signed=signed, width=PLACEHOLDER_WIDTH, shift=shift
            )
            return TypeResolution(storage_type, name, f"fixed point {token} can't be {bits} bits")
        storage_type = StorageType(
            kind=StorageKind.FIXED, signed=signed, width=bits >> 3, shift=shift
        )
        return TypeResolution(storage_type, name)

    if name == "bool":
        return TypeResolution(StorageType(kind=StorageKind.BOOL, width=1), name)
    if name in _PRIMITIVES:
        signed, width = _PRIMITIVES[name]
        return TypeResolution(
            StorageType(kind=StorageKind.PRIMITIVE, signed=signed, width=width), name
        )
    if name == "pipe":
        return TypeResolution(StorageType(kind=StorageKind.PIPE, width=PIPE_WIDTH), name)
    if name == "pipe_port":
        return TypeResolution(StorageType(kind=StorageKind.PIPE_PORT, width=PIPE_PORT_WIDTH), name)
    if name in _VARIABLE:
        return TypeResolution(StorageType(kind=StorageKind.VARIABLE), name)

    m = _BYTE_ARRAY.match(name)
    if m:
        return TypeResolution(StorageType(kind=StorageKind.BYTE_ARRAY, width=int(m.group(1))), name)

    return TypeResolution(_placeholder(), name, f"unknown type: {token}")


def resolve_unit(token: str | None) -> tuple[Unit, str | None]:
    """
    Resolve a unit token against the closed vocabulary.

    Returns:
        (unit, error); unknown units resolve to ``Unit.NONE`` with a message
    """
    if token is None:
        return Unit.NONE, None
    unit = _UNITS.get(token)
    if unit is None:
        return Unit.NONE, f"expecting unit, got '{token}'"
    return unit, None


def is_unit(token: str) -> bool:
    return token in _UNITS


def _placeholder() -> StorageType:
    return StorageType(kind=StorageKind.UNKNOWN, width=PLACEHOLDER_WIDTH)
