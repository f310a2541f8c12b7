"""
Document-level IR for svcspec.

This module contains ``ServiceSpec``, the compiled form of one service
definition document.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .diagnostics import Diagnostic, DiagnosticSeverity
from .enums import EnumInfo
from .packets import PacketInfo


class NoteSection(str, Enum):
    """Sections the document prose is collected into."""

    SHORT = "short"
    LONG = "long"
    REGISTERS = "registers"
    COMMANDS = "commands"
    EVENTS = "events"
    EXAMPLES = "examples"


class ServiceSpec(BaseModel):
    """
    Compiled service definition.

    Attributes:
        name: Display name, from the first top-level heading
        short_id: Identifier derived from the source filename
        camel_name: CamelCase identifier (derived from ``name`` unless overridden)
        short_name: Short identifier (defaults to ``camel_name``)
        extends: Keys of the base documents merged into this one
        notes: Prose per section
        class_identifier: Corpus-wide service class; 0 when unset
        enums: Enum declarations by name
        packets: Packets in declaration order
        high_commands: Document opted into the extended identifier range
        errors: Diagnostics; empty when compilation succeeded
        source: Verbatim source text
    """

    name: str = ""
    short_id: str = Field(default="", alias="shortId")
    camel_name: str = Field(default="", alias="camelName")
    short_name: str = Field(default="", alias="shortName")
    extends: list[str] = Field(default_factory=list)
    notes: dict[str, str] = Field(default_factory=dict)
    class_identifier: int = Field(default=0, alias="classIdentifier")
    enums: dict[str, EnumInfo] = Field(default_factory=dict)
    packets: list[PacketInfo] = Field(default_factory=list)
    high_commands: bool = Field(default=False, alias="highCommands")
    errors: list[Diagnostic] = Field(default_factory=list)
    source: str = ""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.errors if d.severity == DiagnosticSeverity.WARNING]

    def get_packet(self, name: str, kind: str | None = None) -> PacketInfo | None:
        for packet in self.packets:
            if packet.name == name and (kind is None or packet.kind == kind):
                return packet
        return None

    def local_packets(self) -> list[PacketInfo]:
        """Packets declared in this document, skipping inherited ones."""
        return [p for p in self.packets if not p.derived]
