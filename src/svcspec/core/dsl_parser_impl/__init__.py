"""
svcspec DSL Parser Package.

This package provides a modular parser for service definition documents.
The parser is built using mixins to separate parsing logic by construct type,
making it easier to maintain and extend.

The main exports are:
- ServiceParser: The complete parser class
- compile_service: Convenience function to compile one document

Usage:
    from svcspec.core.dsl_parser_impl import compile_service

    spec = compile_service(text, "light.md", registry=registry)
"""

from __future__ import annotations

import logging
import random
import re
from typing import TYPE_CHECKING

from .. import ir
from ..identifiers import RESERVED_CLASS_IDENTIFIERS
from ..lexer import ASSIGNMENT_KEY, LineClassifier, LineKind, tokenize
from .base import BaseParser, EnumBlock, PacketBlock
from .enum import ENUM_KEYWORDS, EnumParserMixin
from .metadata import MetadataParserMixin
from .packet import PACKET_KEYWORDS, PacketParserMixin
from .prose import ProseParserMixin

if TYPE_CHECKING:
    from ..linker_impl import CorpusRegistry

logger = logging.getLogger(__name__)

_LINE_BREAK = re.compile(r"\r?\n")
CONTROL_SHORT_NAME = "control"


def derive_camel_name(name: str) -> str:
    """``Light level`` -> ``LightLevel``; other non-word runs become ``_``."""
    camel = re.sub(r"\s+", " ", name)
    camel = re.sub(r"[ -](.)", lambda m: m.group(1).upper(), camel)
    return re.sub(r"[^\w]+", "_", camel)


class ServiceParser(
    BaseParser,
    ProseParserMixin,
    EnumParserMixin,
    PacketParserMixin,
    MetadataParserMixin,
):
    """
    Complete svcspec parser combining all mixins.

    One instance compiles one document; call ``compile()`` once.
    """

    def __init__(
        self,
        text: str,
        filename: str = "",
        registry: CorpusRegistry | None = None,
        rng: random.Random | None = None,
    ):
        super().__init__(text, filename, registry=registry, rng=rng)
        self.classifier = LineClassifier()

    def compile(self) -> ir.ServiceSpec:
        try:
            for line_no, line in enumerate(_LINE_BREAK.split(self.text), start=1):
                self.state.line_no = line_no
                self.process_line(line)
        except Exception as e:
            logger.exception("Unexpected failure compiling %s", self.filename or "<text>")
            self.error(f"exception: {e}")
        return self.finalize()

    def process_line(self, line: str) -> None:
        kind = self.classifier.classify(line)
        if kind == LineKind.SKIP:
            return
        if kind == LineKind.PROSE:
            self.process_prose(line)
        else:
            self.process_statement(line)

    def process_statement(self, line: str) -> None:
        described = self.state.described_packets
        if described and described[0].description:
            self.state.described_packets = None

        statement = tokenize(line, self.state.line_no)
        if not statement:
            return
        words = statement.words
        key = statement.key

        if key in ENUM_KEYWORDS:
            self.start_enum(words)
        elif key in PACKET_KEYWORDS or self._is_report_shorthand(words, key):
            self.start_packet(words)
        elif key == "}":
            self.end_block()
        else:
            block = self.state.block
            if isinstance(block, PacketBlock):
                self.packet_field(words, block.packet)
            elif isinstance(block, EnumBlock):
                self.enum_member(words, block.enum)
            else:
                self.metadata_member(words)

    def _is_report_shorthand(self, words: list[str], key: str) -> bool:
        """``report : u16`` right after a command answers that command."""
        return (
            key == ASSIGNMENT_KEY
            and words[0] == ir.PacketKind.REPORT.value
            and self.state.block is None
            and self.state.last_command is not None
        )

    def finalize(self) -> ir.ServiceSpec:
        """Close what is still open, fill derived names and build the IR."""
        block = self.state.block
        if isinstance(block, PacketBlock):
            self.finish_packet(block.packet)
        self.state.block = None

        doc = self.doc
        notes = {section: text.strip() for section, text in doc.notes.items()}
        if not doc.camel_name:
            doc.camel_name = derive_camel_name(doc.name)
        if not doc.short_name:
            doc.short_name = doc.camel_name

        if doc.camel_name in RESERVED_CLASS_IDENTIFIERS:
            doc.class_identifier = RESERVED_CLASS_IDENTIFIERS[doc.camel_name]

        if (
            doc.short_name != CONTROL_SHORT_NAME
            and not doc.class_identifier
            and self.state.class_identifier_line is None
        ):
            self.error("identifier: not specified")

        spec = ir.ServiceSpec(
            name=doc.name,
            short_id=doc.short_id,
            camel_name=doc.camel_name,
            short_name=doc.short_name,
            extends=doc.extends,
            notes=notes,
            class_identifier=doc.class_identifier,
            enums={name: enum.to_ir() for name, enum in doc.enums.items()},
            packets=[packet.to_ir() for packet in doc.packets],
            high_commands=doc.high_commands,
            errors=doc.errors,
            source=self.text,
        )
        logger.debug(
            "Compiled %s: %d enums, %d packets, %d diagnostics",
            doc.short_id or "<text>",
            len(spec.enums),
            len(spec.packets),
            len(spec.errors),
        )
        return spec


def compile_service(
    text: str,
    filename: str = "",
    registry: CorpusRegistry | None = None,
    rng: random.Random | None = None,
) -> ir.ServiceSpec:
    """
    Compile one service definition document.

    Args:
        text: Document source (markdown with indented DSL statements)
        filename: Source file name; labels diagnostics and gives the short id
        registry: Previously compiled documents for ``extends`` and class identifier checks
        rng: Random source for suggested class identifiers (seed it for reproducible messages)

    Returns:
        The compiled ServiceSpec; ``errors`` lists every diagnostic
    """
    return ServiceParser(text, filename, registry=registry, rng=rng).compile()


__all__ = [
    "ServiceParser",
    "compile_service",
    "derive_camel_name",
    "BaseParser",
    "ProseParserMixin",
    "EnumParserMixin",
    "PacketParserMixin",
    "MetadataParserMixin",
]
