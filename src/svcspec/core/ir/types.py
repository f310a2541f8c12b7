"""
Storage and unit types for svcspec IR.

A storage descriptor is a signed integer: 0 means variable length, a positive
value is an unsigned width in bytes and a negative value a signed width.
``StorageType`` is the closed variant the type resolver produces; the IR
itself only keeps the integer descriptor and the canonical type token.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class StorageKind(str, Enum):
    """Shape of a resolved storage type."""

    PRIMITIVE = "primitive"  # u8..u64, i8..i64
    FIXED = "fixed"  # u8.8, i22.10, ...
    BOOL = "bool"
    PIPE = "pipe"
    PIPE_PORT = "pipe_port"
    VARIABLE = "variable"  # bytes, string, i32[]
    BYTE_ARRAY = "byte_array"  # u8[N]
    ENUM = "enum"
    UNKNOWN = "unknown"


class Unit(str, Enum):
    """Closed vocabulary of field units."""

    NONE = ""
    FRACTION = "frac"
    SECOND = "s"
    MILLISECOND = "ms"
    MICROSECOND = "us"
    MILLIVOLT = "mV"
    MILLIAMPERE = "mA"
    MILLIWATT_HOUR = "mWh"
    KELVIN = "K"
    CELSIUS = "C"
    GRAM = "g"
    RELATIVE_HUMIDITY = "%RH"
    BYTES = "bytes"


def canonical_type(storage: int) -> str:
    """Canonical primitive spelling of a storage descriptor."""
    if storage == 0:
        return "bytes"
    if storage < 0:
        return f"i{-storage * 8}"
    return f"u{storage * 8}"


def byte_size(storage: int) -> int:
    return abs(storage)


class StorageType(BaseModel):
    """
    Resolved storage of a type token.

    Attributes:
        kind: Variant of the type
        signed: Two's complement encoding
        width: Width in bytes (0 for variable length)
        shift: Number of fractional bits for fixed-point types
    """

    kind: StorageKind
    signed: bool = False
    width: int = 0
    shift: int = 0

    model_config = ConfigDict(frozen=True)

    @property
    def storage(self) -> int:
        """Signed integer storage descriptor."""
        return -self.width if self.signed else self.width

    @property
    def canonical(self) -> str:
        return canonical_type(self.storage)

    @property
    def is_variable(self) -> bool:
        return self.width == 0

    @property
    def carries_pipe(self) -> bool:
        """True for the types that open or address a pipe."""
        return self.kind in (StorageKind.PIPE, StorageKind.PIPE_PORT)

    @classmethod
    def from_storage(cls, storage: int, kind: StorageKind = StorageKind.PRIMITIVE) -> StorageType:
        return cls(kind=kind, signed=storage < 0, width=abs(storage))
