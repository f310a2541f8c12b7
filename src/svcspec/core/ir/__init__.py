"""
svcspec Intermediate Representation (IR) types.

All types are re-exported from this package so callers can write
``from svcspec.core import ir`` and use ``ir.ServiceSpec``.
"""

from .diagnostics import (
    Diagnostic,
    DiagnosticSeverity,
)
from .enums import (
    EnumInfo,
)
from .packets import (
    FieldSpec,
    PacketInfo,
    PacketKind,
)
from .servicespec import (
    NoteSection,
    ServiceSpec,
)
from .types import (
    StorageKind,
    StorageType,
    Unit,
    byte_size,
    canonical_type,
)

__all__ = [
    # Diagnostics
    "Diagnostic",
    "DiagnosticSeverity",
    # Enums
    "EnumInfo",
    # Packets
    "FieldSpec",
    "PacketInfo",
    "PacketKind",
    # Document
    "NoteSection",
    "ServiceSpec",
    # Types
    "StorageKind",
    "StorageType",
    "Unit",
    "byte_size",
    "canonical_type",
]
