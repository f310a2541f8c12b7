"""
Enum types for svcspec IR.

DSL Syntax:

    enum Mode : u8 {
        Off = 0
        On = 1
    }

    flags Status : u16 {
        Ready = 0x01
        Busy = Status.Ready
    }
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class EnumInfo(BaseModel):
    """
    An enum (or flags) declaration.

    Attributes:
        name: Enum identifier, unique within a document
        storage: Underlying storage descriptor
        is_flags: Bitmask semantics instead of exclusive values
        members: Member name to integer value; values need not be unique
    """

    name: str
    storage: int
    is_flags: bool = Field(default=False, alias="isFlags")
    members: dict[str, int] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True, populate_by_name=True)
