"""
Prose handling for svcspec documents.

Markdown outside code blocks becomes document notes. The first ``#``
heading names the service, the paragraph after it is the short description
and everything after the next heading the long description. Headings named
``Registers``, ``Commands``, ``Events`` or ``Examples`` switch to their own
note section. Prose right after a packet declaration describes that packet.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from .. import ir

_HEADING = re.compile(r"^(#+)\s*(.*)")

SECTION_HEADINGS = frozenset(
    {
        ir.NoteSection.REGISTERS.value,
        ir.NoteSection.COMMANDS.value,
        ir.NoteSection.EVENTS.value,
        ir.NoteSection.EXAMPLES.value,
    }
)


class ProseParserMixin:
    """Parser mixin for non-code lines."""

    if TYPE_CHECKING:
        doc: Any
        state: Any

    def process_prose(self, line: str) -> None:
        m = _HEADING.match(line)
        if m:
            self.state.described_packets = None
            level, title = m.group(1), m.group(2).strip()
            section = title.lower()
            if level == "#" and not self.doc.name:
                self.doc.name = title
                line = ""
            elif section in SECTION_HEADINGS:
                self.state.note_section = section
                line = ""
            elif self.state.note_section == ir.NoteSection.SHORT.value:
                self.state.note_section = ir.NoteSection.LONG.value

        if self.state.described_packets:
            for packet in self.state.described_packets:
                packet.description += line + "\n"
            return

        notes = self.doc.notes
        section_key = self.state.note_section
        text = notes.get(section_key, "")
        if text and not text.endswith("\n"):
            # inherited sections arrive stripped
            text += "\n\n" if line else "\n"
        if line or text:
            notes[section_key] = text + line + "\n"
