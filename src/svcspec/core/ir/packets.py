"""
Packet types for svcspec IR.

A packet is any wire-level element of a service: a register, a command, a
report, an event, or a pipe sub-message.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .types import Unit


class PacketKind(str, Enum):
    """Closed set of packet kinds."""

    CONST = "const"
    RO = "ro"
    RW = "rw"
    COMMAND = "command"
    REPORT = "report"
    EVENT = "event"
    PIPE_COMMAND = "pipe_command"
    PIPE_REPORT = "pipe_report"
    META_PIPE_COMMAND = "meta_pipe_command"
    META_PIPE_REPORT = "meta_pipe_report"

    @property
    def is_register(self) -> bool:
        return self in (PacketKind.CONST, PacketKind.RO, PacketKind.RW)

    @property
    def is_pipe(self) -> bool:
        """Pipe sub-packets, including the meta variants."""
        return self in (
            PacketKind.PIPE_COMMAND,
            PacketKind.PIPE_REPORT,
            PacketKind.META_PIPE_COMMAND,
            PacketKind.META_PIPE_REPORT,
        )

    @property
    def has_implicit_identifier(self) -> bool:
        return self in (PacketKind.PIPE_COMMAND, PacketKind.PIPE_REPORT)


class FieldSpec(BaseModel):
    """
    A single member of a packet.

    Attributes:
        name: Field name (``_`` for single-field inline packets)
        unit: Unit tag, empty when unitless
        shift: Fractional bits for fixed-point types, 0 otherwise
        type: Canonical type token, or the enum name
        storage: Signed storage descriptor (0 = variable length)
        is_simple_type: ``type`` equals its canonical primitive spelling
        default_value: Literal default (inline packet syntax only)
        start_repeats: This field begins the repeating tail
    """

    name: str
    unit: Unit = Unit.NONE
    shift: int = 0
    type: str
    storage: int
    is_simple_type: bool = Field(default=False, alias="isSimpleType")
    default_value: int | None = Field(default=None, alias="defaultValue")
    start_repeats: bool = Field(default=False, alias="startRepeats")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class PacketInfo(BaseModel):
    """
    A register, command, report, event or pipe packet.

    Attributes:
        kind: Packet kind
        name: Packet name
        identifier: Numeric identifier (register address, command code, ...)
        identifier_name: Symbolic base-document name the identifier came from
        description: Free text collected from the prose after the declaration
        optional: Declared with ``?``
        pipe_type: Name of the packet that opened the pipe this packet belongs to
        derived: Copied in from a base document
        packed: Fields are not naturally aligned
        fields: Ordered packet members
    """

    kind: PacketKind
    name: str
    identifier: int = 0
    identifier_name: str | None = Field(default=None, alias="identifierName")
    description: str = ""
    optional: bool = False
    pipe_type: str | None = Field(default=None, alias="pipeType")
    derived: bool = False
    packed: bool = False
    fields: list[FieldSpec] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, populate_by_name=True)
