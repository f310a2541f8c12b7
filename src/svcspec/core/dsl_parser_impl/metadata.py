"""
Metadata parser mixin for the svcspec DSL.

Top-level ``KEY = VALUE`` (or ``KEY : VALUE``) statements outside any block:

    extends: _sensor
    identifier: 0x1e1589eb
    camel: lightLevel
    short: light
    high: 1
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .. import ir
from ..identifiers import (
    class_identifier_in_range,
    looks_random,
    suggest_class_identifier,
    to_hex,
)
from ..lexer import ASSIGNMENT_OPERATORS
from .base import EnumDraft, PacketDraft

logger = logging.getLogger(__name__)

# Display name of the one document allowed a zero class identifier
CONTROL_NAME = "Control"
IMPLICIT_BASE = "base"


class MetadataParserMixin:
    """Parser mixin for document metadata and inheritance."""

    if TYPE_CHECKING:
        doc: Any
        state: Any
        registry: Any
        rng: Any
        error: Any
        parse_int: Any

    def metadata_member(self, words: list[str]) -> None:
        if len(words) == 2 and words[0] == "extends":
            self.process_extends(words[1])
            return
        if len(words) != 3 or words[1] not in ASSIGNMENT_OPERATORS:
            self.error("expecting: FIELD_NAME = VALUE or FIELD_NAME : VALUE")
            return

        key, value = words[0], words[2]
        if key == "extends":
            self.process_extends(value)
        elif key in ("class", "identifier"):
            self.set_class_identifier(value)
        elif key == "camel":
            self.doc.camel_name = value
        elif key == "short":
            self.doc.short_name = value
        elif key == "high":
            self.doc.high_commands = bool(self.parse_int(value))
        else:
            self.error(f"unknown metadata field: {key}")

    def _suggestion(self) -> str:
        return f"how about {to_hex(suggest_class_identifier(self.rng))}"

    def set_class_identifier(self, value: str) -> None:
        identifier = self.parse_int(value)
        self.doc.class_identifier = identifier
        self.state.class_identifier_line = self.state.line_no

        allow_zero = self.doc.name == CONTROL_NAME
        if not class_identifier_in_range(identifier, allow_zero=allow_zero):
            self.error(f"class identifier out of range; {self._suggestion()}")
        if not looks_random(identifier):
            self.error(f"class identifier doesn't look random; {self._suggestion()}")

        if self.registry is None or identifier == 0:
            return
        claim = self.registry.lookup_class_identifier(identifier)
        if claim is not None and claim.key != self.doc.short_id:
            self.error(
                f"class identifier {to_hex(identifier)} already used in {claim.owner}; "
                f"{self._suggestion()}"
            )

    def process_extends(self, name: str) -> None:
        """
        Merge a previously compiled base document into this one.

        Enums, packets (marked derived), notes, the ``high`` flag and the
        base's own diagnostics are copied. Only allowed before any local
        enum or packet.
        """
        if name == IMPLICIT_BASE:
            return
        base: ir.ServiceSpec | None = self.registry.resolve_base(name) if self.registry else None
        if base is None:
            self.error(f"include file not found: {name}")
            return
        if self.doc.packets or self.doc.enums:
            self.error("extends: only allowed on top of the .md file")
            return

        self.doc.errors.extend(base.errors)
        self.doc.enums = {key: EnumDraft.from_ir(enum) for key, enum in base.enums.items()}
        self.doc.packets = [PacketDraft.from_ir(packet, derived=True) for packet in base.packets]
        if base.high_commands:
            self.doc.high_commands = True
        self.doc.notes = {**base.notes, **self.doc.notes}
        self.doc.extends.append(name)
        logger.debug(
            "%s extends %s: %d enums, %d packets",
            self.doc.short_id,
            name,
            len(base.enums),
            len(base.packets),
        )
