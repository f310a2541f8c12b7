"""
Packet parser mixin for the svcspec DSL.

DSL Syntax:

    rw brightness @ 0x80 : u0.16 frac
    ro temperature? @ reading : i22.10 C
    command set_color @ 0x81 {
        r: u8
        g: u8
        b: u8
    }
    report : u8
    event tripped @ 0x01
    command list_items @ 0x82 { results: pipe }
    pipe report item {
        repeats:
        id: u32
    }
    meta pipe command reset @ 0x00 { }

A ``report`` without ``@`` answers the command right before it and may
reuse its name. Pipe sub-packets carry no identifier.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .. import ir
from ..identifiers import IdentifierRange, classify_packet_identifier, to_hex
from ..lexer import ASSIGNMENT_OPERATORS, TRAILING_SEPARATORS
from ..type_resolver import is_unit, resolve_type, resolve_unit
from ..validator import has_natural_alignment, identifier_in_use, is_packet_redefinition
from .base import PacketBlock, PacketDraft, is_name, parse_int_literal, pop_word

logger = logging.getLogger(__name__)

PACKET_KEYWORDS = ("meta", "pipe", "report", "command", "const", "ro", "rw", "event")
PIPE_DIRECTIONS = ("report", "command")
REPEATS_MARKER = "repeats"


def _is_repeats_marker(words: list[str], i: int) -> bool:
    """``repeats :`` followed by nothing, a separator or the next field's ``NAME :``."""
    n = len(words)
    if words[i] != REPEATS_MARKER or i + 1 >= n or words[i + 1] != ":":
        return False
    if i + 2 == n or words[i + 2] in TRAILING_SEPARATORS:
        return True
    return i + 3 < n and words[i + 3] in ASSIGNMENT_OPERATORS


def split_inline_fields(words: list[str]) -> list[list[str]]:
    """
    Split the body of a one-line block into field statements.

    Fields are separated by ``,``/``;`` or recognized by their shape
    ``NAME [= DEFAULT] : TYPE [UNIT]``.
    """
    members: list[list[str]] = []
    n = len(words)
    i = 0
    while i < n:
        if words[i] in TRAILING_SEPARATORS:
            i += 1
            continue
        start = i
        if _is_repeats_marker(words, i):
            members.append(words[i : i + 2])
            i += 2
            continue
        i += 1
        if i < n and words[i] == "=":
            i += 2
        if i < n and words[i] == ":":
            i += 2
            if (
                i < n
                and is_unit(words[i])
                and not (i + 1 < n and words[i + 1] in ASSIGNMENT_OPERATORS)
            ):
                i += 1
        else:
            while i < n and words[i] not in TRAILING_SEPARATORS:
                i += 1
        members.append(words[start:i])
    return members


class PacketParserMixin:
    """Parser mixin for registers, commands, reports, events and pipes."""

    if TYPE_CHECKING:
        doc: Any
        state: Any
        error: Any
        warn: Any
        registry: Any
        base_key: Any
        normalize_name: Any
        parse_int: Any
        enum_storages: Any

    # -------------------------------------------------------------------------
    # Blocks
    # -------------------------------------------------------------------------

    def check_braces(self) -> None:
        """Close whatever block is open, reporting it as an error."""
        block = self.state.block
        if block is None:
            return
        self.error("already in braces")
        if isinstance(block, PacketBlock):
            self.finish_packet(block.packet)
        self.state.block = None

    def finish_packet(self, packet: PacketDraft) -> None:
        packet.packed = not has_natural_alignment(packet.fields)
        if packet.packed:
            logger.debug("packet %s is not naturally aligned", packet.name)
        self.state.block = None

    def end_block(self) -> None:
        block = self.state.block
        if isinstance(block, PacketBlock):
            self.finish_packet(block.packet)
        elif block is not None:
            self.state.block = None
        else:
            self.error("nothing to end here")

    # -------------------------------------------------------------------------
    # Packet declarations
    # -------------------------------------------------------------------------

    def start_packet(self, words: list[str]) -> None:
        """
        Open a packet.

        Grammar:
            KIND NAME [?] [@ (INT | NAME)] ({ | [= INT] : TYPE [UNIT])
        """
        self.check_braces()
        words = list(words)
        kind = self._parse_packet_kind(words)
        name = pop_word(words)

        last_command = self.state.last_command
        is_report = kind == ir.PacketKind.REPORT
        if is_report and last_command and not is_name(name):
            if name is not None:
                words.insert(0, name)
            name = last_command.name

        packet = PacketDraft(kind=kind, name=self.normalize_name(name))
        self.state.block = PacketBlock(packet)
        if self.state.described_packets is None:
            self.state.described_packets = []
        self.state.described_packets.append(packet)

        if words and words[0] == "?":
            words.pop(0)
            packet.optional = True

        if is_packet_redefinition(self.doc.packets, packet.name, kind):
            self.error("packet redefinition")

        if kind.is_pipe:
            if self.state.pipe_packet is None:
                self.error("pipe definitions can only occur after the pipe-open packet")
            else:
                packet.pipe_type = self.state.pipe_packet.pipe_type

        self._assign_identifier(packet, words, last_command)

        if identifier_in_use(self.doc.packets, kind, packet.identifier):
            self.error("packet identifier already used")

        self.doc.packets.append(packet)
        self.state.last_command = packet if kind == ir.PacketKind.COMMAND else None

        self._packet_body(packet, words)

    def _parse_packet_kind(self, words: list[str]) -> ir.PacketKind:
        head = pop_word(words)
        if head == "meta":
            second = pop_word(words)
            direction = pop_word(words) if second == "pipe" else None
            if direction in PIPE_DIRECTIONS:
                return ir.PacketKind(f"meta_pipe_{direction}")
            self.error("invalid token after meta")
            return ir.PacketKind.COMMAND
        if head == "pipe":
            direction = pop_word(words)
            if direction in PIPE_DIRECTIONS:
                return ir.PacketKind(f"pipe_{direction}")
            self.error("invalid token after pipe")
            return ir.PacketKind.COMMAND
        return ir.PacketKind(head)

    def _packet_body(self, packet: PacketDraft, words: list[str]) -> None:
        if words and words[0] in ASSIGNMENT_OPERATORS:
            if "{" in words:
                self.error("member need to use either block or inline syntax, not both")
            self.packet_field(["_", *words], packet)
            self.finish_packet(packet)
            return

        opener = pop_word(words)
        if opener == "{":
            if words and words[0] == "...":
                words.pop(0)
            if words and words[-1] == "}":
                for member in split_inline_fields(words[:-1]):
                    self.packet_field(member, packet)
                self.finish_packet(packet)
            elif words:
                self.error(f"excessive tokens: {words[0]}...")
        elif opener is None and packet.kind == ir.PacketKind.EVENT:
            self.finish_packet(packet)
        else:
            self.error("expecting '{'")

    # -------------------------------------------------------------------------
    # Identifiers
    # -------------------------------------------------------------------------

    def _assign_identifier(
        self, packet: PacketDraft, words: list[str], last_command: PacketDraft | None
    ) -> None:
        if packet.kind.has_implicit_identifier:
            packet.identifier = 0
            return

        if "@" not in words:
            if packet.kind == ir.PacketKind.REPORT and last_command:
                packet.identifier = last_command.identifier
            else:
                self.error(f"@ not found at {packet.name}")
            return

        at = words.index("@")
        word = words[at + 1] if at + 1 < len(words) else None
        del words[at : at + 2]
        if word is None:
            self.error("expecting identifier after '@'")
            return

        value = parse_int_literal(word)
        if value is None:
            value = self._resolve_symbolic_identifier(packet, word)
        packet.identifier = value
        self._check_identifier_range(packet, value)

    def _resolve_symbolic_identifier(self, packet: PacketDraft, word: str) -> int:
        """Look ``word`` up among the base document's packets."""
        base = self.registry.base_document() if self.registry else None
        if base is None:
            self.error(f"{word} cannot be resolved, since {self.base_key} is missing")
            return 0
        base_packet = base.get_packet(word)
        if base_packet is None:
            self.error(f"{word} not found in {self.base_key}")
            return 0
        packet.identifier_name = word
        if base_packet.kind != packet.kind:
            self.error(
                f"kind mismatch on {word}: {base_packet.kind.value} vs {packet.kind.value}"
            )
        return base_packet.identifier

    def _check_identifier_range(self, packet: PacketDraft, value: int) -> None:
        identifier_range = classify_packet_identifier(packet.kind, value)
        kind = packet.kind.value
        if identifier_range == IdentifierRange.SYSTEM:
            if not packet.identifier_name:
                self.warn(
                    f"{kind} @ {to_hex(value)} should be expressed with a name from "
                    f"{self.base_key}.md"
                )
        elif identifier_range == IdentifierRange.HIGH:
            if not self.doc.high_commands:
                self.warn(
                    f"{kind} @ {to_hex(value)} is from the extended range but 'high: 1' missing"
                )

    # -------------------------------------------------------------------------
    # Fields
    # -------------------------------------------------------------------------

    def packet_field(self, words: list[str], packet: PacketDraft) -> None:
        """
        Parse one packet member.

        Grammar:
            NAME [= INT] : TYPE [UNIT]
            repeats :
        """
        if len(words) == 2 and words[0] == REPEATS_MARKER:
            self.state.next_repeats = True
            return

        words = list(words)
        name = self.normalize_name(pop_word(words))
        default_value = None
        op = pop_word(words)
        if op == "=":
            default_value = self.parse_int(pop_word(words))
            op = pop_word(words)
        if op != ":":
            self.error("expecting ':'")

        resolution = resolve_type(pop_word(words), self.enum_storages)
        if resolution.error:
            self.error(resolution.error)

        unit, unit_error = resolve_unit(pop_word(words))
        if unit_error:
            self.error(unit_error)

        if words:
            self.error(f"excessive tokens at the end of member: {words[0]}...")

        if resolution.storage_type.carries_pipe:
            packet.pipe_type = packet.name
            pipe_packet = self.state.pipe_packet
            answers_open = (
                pipe_packet is not None
                and pipe_packet.name == packet.name
                and packet.kind == ir.PacketKind.REPORT
            )
            if not answers_open:
                self.state.pipe_packet = packet

        packet.fields.append(
            ir.FieldSpec(
                name=name,
                unit=unit,
                shift=resolution.shift,
                type=resolution.type_name,
                storage=resolution.storage,
                is_simple_type=resolution.is_simple_type,
                default_value=default_value,
                start_repeats=self.state.next_repeats,
            )
        )
        self.state.next_repeats = False
