"""
Base parser class for the svcspec DSL.

Holds the mutable state of one document compilation and the helpers every
parser mixin relies on: diagnostics, name checks and integer literals.
IR models are frozen, so the parser builds drafts and only converts them
to ``ir`` objects once the document is complete.
"""

from __future__ import annotations

import random
import re
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import TYPE_CHECKING

from .. import ir

if TYPE_CHECKING:
    from ..linker_impl import CorpusRegistry

_NAME = re.compile(r"^[A-Za-z0-9_]+$")
_INT_LITERAL = re.compile(r"^[+-]?(0[xX][0-9a-fA-F_]+|0[bB][01_]+|0[oO][0-7_]+|[0-9][0-9_]*)$")
_DECIMAL = re.compile(r"^[+-]?[0-9][0-9_]*$")

DEFAULT_BASE_KEY = "_base"
BASE_CAMEL_NAME = "base"


def is_name(word: str | None) -> bool:
    return bool(word) and bool(_NAME.match(word))


def parse_int_literal(word: str | None) -> int | None:
    """Parse a decimal/hex/binary/octal literal, or return None."""
    if not word or not _INT_LITERAL.match(word):
        return None
    try:
        return int(word, 10 if _DECIMAL.match(word) else 0)
    except ValueError:
        return None


def pop_word(words: list[str]) -> str | None:
    return words.pop(0) if words else None


def document_key(filename: str) -> str:
    """Short id of a document: its file name without directory and ``.md``."""
    name = PurePath(filename).name if filename else ""
    return re.sub(r"\.md$", "", name)


# =============================================================================
# Drafts
# =============================================================================


@dataclass
class EnumDraft:
    """Enum under construction."""

    name: str
    storage: int
    is_flags: bool = False
    members: dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_ir(cls, enum: ir.EnumInfo) -> EnumDraft:
        return cls(
            name=enum.name,
            storage=enum.storage,
            is_flags=enum.is_flags,
            members=dict(enum.members),
        )

    def to_ir(self) -> ir.EnumInfo:
        return ir.EnumInfo(
            name=self.name, storage=self.storage, is_flags=self.is_flags, members=self.members
        )


@dataclass
class PacketDraft:
    """Packet under construction."""

    kind: ir.PacketKind
    name: str
    identifier: int = 0
    identifier_name: str | None = None
    description: str = ""
    optional: bool = False
    pipe_type: str | None = None
    derived: bool = False
    packed: bool = False
    fields: list[ir.FieldSpec] = field(default_factory=list)

    @classmethod
    def from_ir(cls, packet: ir.PacketInfo, derived: bool = False) -> PacketDraft:
        return cls(
            kind=packet.kind,
            name=packet.name,
            identifier=packet.identifier,
            identifier_name=packet.identifier_name,
            description=packet.description,
            optional=packet.optional,
            pipe_type=packet.pipe_type,
            derived=derived or packet.derived,
            packed=packet.packed,
            fields=list(packet.fields),
        )

    def to_ir(self) -> ir.PacketInfo:
        return ir.PacketInfo(
            kind=self.kind,
            name=self.name,
            identifier=self.identifier,
            identifier_name=self.identifier_name,
            description=self.description.strip(),
            optional=self.optional,
            pipe_type=self.pipe_type,
            derived=self.derived,
            packed=self.packed,
            fields=self.fields,
        )


@dataclass
class DocumentDraft:
    """Document-level values collected during the pass."""

    short_id: str
    name: str = ""
    camel_name: str = ""
    short_name: str = ""
    extends: list[str] = field(default_factory=list)
    notes: dict[str, str] = field(default_factory=dict)
    class_identifier: int = 0
    enums: dict[str, EnumDraft] = field(default_factory=dict)
    packets: list[PacketDraft] = field(default_factory=list)
    high_commands: bool = False
    errors: list[ir.Diagnostic] = field(default_factory=list)


# =============================================================================
# Parser state
# =============================================================================


@dataclass
class EnumBlock:
    enum: EnumDraft


@dataclass
class PacketBlock:
    packet: PacketDraft


OpenBlock = EnumBlock | PacketBlock | None


@dataclass
class ParserState:
    """
    Mutable state threaded through the line pass.

    Attributes:
        block: The open ``{ ... }`` block, if any
        note_section: Section prose is currently appended to
        last_command: Most recent command, for report shorthand
        pipe_packet: Most recent packet that opened a pipe
        described_packets: Packets waiting for their description prose
        next_repeats: The next field starts the repeating tail
        line_no: Current line (1-indexed)
        class_identifier_line: Line of the class identifier statement
    """

    block: OpenBlock = None
    note_section: str = ir.NoteSection.SHORT.value
    last_command: PacketDraft | None = None
    pipe_packet: PacketDraft | None = None
    described_packets: list[PacketDraft] | None = None
    next_repeats: bool = False
    line_no: int = 0
    class_identifier_line: int | None = None


class BaseParser:
    """
    Base parser class with diagnostics and literal helpers.

    Subclasses (through mixins) implement the statement handlers; this class
    owns the document draft and the parse state they mutate.
    """

    def __init__(
        self,
        text: str,
        filename: str = "",
        registry: CorpusRegistry | None = None,
        rng: random.Random | None = None,
    ):
        """
        Initialize parser.

        Args:
            text: Document source
            filename: Source file name (labels diagnostics, gives the short id)
            registry: Previously compiled documents, for ``extends`` and identifier checks
            rng: Random source for suggested class identifiers
        """
        self.text = text
        self.filename = filename
        self.registry = registry
        self.rng = rng
        self.doc = DocumentDraft(short_id=document_key(filename))
        self.state = ParserState()

    @property
    def base_key(self) -> str:
        return self.registry.base_key if self.registry else DEFAULT_BASE_KEY

    @property
    def is_base_document(self) -> bool:
        """The reserved base document, which reports no warnings."""
        return self.doc.short_id == self.base_key or self.doc.camel_name == BASE_CAMEL_NAME

    @property
    def enum_storages(self) -> dict[str, int]:
        return {name: enum.storage for name, enum in self.doc.enums.items()}

    # -------------------------------------------------------------------------
    # Diagnostics
    # -------------------------------------------------------------------------

    def error(self, message: str) -> None:
        self._report(message or "syntax error", ir.DiagnosticSeverity.ERROR)

    def warn(self, message: str) -> None:
        if self.is_base_document:
            return
        self._report(message, ir.DiagnosticSeverity.WARNING)

    def _report(self, message: str, severity: ir.DiagnosticSeverity) -> None:
        line = self.state.line_no
        for existing in self.doc.errors:
            if (
                existing.file == self.filename
                and existing.line == line
                and existing.message == message
            ):
                return
        self.doc.errors.append(
            ir.Diagnostic(file=self.filename, line=line, message=message, severity=severity)
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def normalize_name(self, word: str | None) -> str:
        if not is_name(word):
            self.error("expecting name here")
        return word or ""

    def parse_int(self, word: str | None) -> int:
        """
        Parse an integer literal or an ``Enum.Member`` reference.

        Unresolvable values are reported and read as 0.
        """
        value = parse_int_literal(word)
        if value is not None:
            return value

        parts = word.split(".") if word else []
        if len(parts) != 2:
            self.error("expecting int or enum member here")
            return 0
        enum_name, member = parts
        enum = self.doc.enums.get(enum_name)
        if enum is None:
            self.error(f"{enum_name} is not an enum type")
            return 0
        if member not in enum.members:
            self.error(f"{member} is not a member of {enum_name}")
            return 0
        return enum.members[member]
