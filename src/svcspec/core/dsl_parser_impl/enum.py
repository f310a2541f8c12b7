"""
Enum parser mixin for the svcspec DSL.

DSL Syntax:

    enum Mode : u8 {
        Off = 0
        On = 1
    }

    flags Status : u8 { Ready = 1, Busy = 2 }
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..lexer import TRAILING_SEPARATORS
from ..type_resolver import PLACEHOLDER_WIDTH, resolve_type
from .base import EnumBlock, EnumDraft

ENUM_KEYWORDS = ("enum", "flags")


def split_enum_members(words: list[str]) -> list[list[str]]:
    """Split inline ``NAME = VALUE`` members, with or without separators."""
    members: list[list[str]] = []
    i = 0
    while i < len(words):
        if words[i] in TRAILING_SEPARATORS:
            i += 1
            continue
        if i + 1 < len(words) and words[i + 1] == "=":
            members.append(words[i : i + 3])
            i += 3
            continue
        # malformed: take everything up to the next separator
        end = i
        while end < len(words) and words[end] not in TRAILING_SEPARATORS:
            end += 1
        members.append(words[i:end])
        i = end
    return members


class EnumParserMixin:
    """Parser mixin for enum and flags blocks."""

    if TYPE_CHECKING:
        doc: Any
        state: Any
        error: Any
        normalize_name: Any
        parse_int: Any
        check_braces: Any
        enum_storages: Any

    def start_enum(self, words: list[str]) -> None:
        """
        Open an enum block.

        Grammar:
            (enum | flags) NAME : TYPE { (NAME = INT [,;])* [}]
        """
        self.check_braces()
        well_formed = len(words) >= 5 and words[2] == ":" and words[4] == "{"
        if not well_formed:
            self.error("expecting: enum NAME : TYPE {")

        name = self.normalize_name(words[1] if len(words) > 1 else None)
        storage = PLACEHOLDER_WIDTH
        if len(words) > 3 and words[2] == ":":
            resolution = resolve_type(words[3], self.enum_storages)
            if resolution.error:
                self.error(resolution.error)
            storage = resolution.storage

        enum = EnumDraft(name=name, storage=storage, is_flags=words[0] == "flags")
        if name in self.doc.enums:
            self.error("enum redefinition")
        self.doc.enums[name] = enum
        self.state.block = EnumBlock(enum)

        rest = words[5:] if well_formed else []
        closed = bool(rest) and rest[-1] == "}"
        if closed:
            rest = rest[:-1]
        for member in split_enum_members(rest):
            self.enum_member(member, enum)
        if closed:
            self.state.block = None

    def enum_member(self, words: list[str], enum: EnumDraft) -> None:
        if len(words) != 3 or words[1] != "=":
            self.error("expecting: MEMBER_NAME = INTEGER")
            return
        enum.members[self.normalize_name(words[0])] = self.parse_int(words[2])
