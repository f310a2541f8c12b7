"""
C header backend for svcspec.

Emits one header per service: enum members and packet identifiers as
``#define`` constants, and a ``typedef struct`` for every packet with more
than one field.
"""

import re
from typing import Any

from ..core import ir
from ..core.identifiers import to_hex
from . import Backend, BackendCapabilities

DEFAULT_PREFIX = "JD"

_PRETTY_UNITS = {
    ir.Unit.MICROSECOND: "μs",
    ir.Unit.CELSIUS: "°C",
    ir.Unit.FRACTION: "fraction",
}
_REGISTER_LABELS = {
    ir.PacketKind.RO: "Read-only",
    ir.PacketKind.CONST: "Constant",
    ir.PacketKind.RW: "Read-write",
}
_SCALAR_WIDTHS = (1, 2, 4, 8)


def to_upper(name: str) -> str:
    """``setColor`` -> ``SET_COLOR``."""
    return re.sub(r"([a-z])([A-Z])", r"\1_\2", name).upper()


def to_lower(name: str) -> str:
    return re.sub(r"([a-z])([A-Z])", r"\1_\2", name).lower()


def c_storage(storage: int) -> str:
    if storage == 0:
        return "bytes"
    if storage < 0:
        return f"int{-storage * 8}_t"
    return f"uint{storage * 8}_t"


def pretty_unit(unit: ir.Unit) -> str:
    return _PRETTY_UNITS.get(unit, unit.value)


def _unit_prefix(field: ir.FieldSpec) -> str:
    return f"{pretty_unit(field.unit)} " if field.unit != ir.Unit.NONE else ""


def _identifier_group(kind: ir.PacketKind) -> str:
    if kind.is_register:
        return "REG"
    if kind == ir.PacketKind.EVENT:
        return "EV"
    return "CMD"


def _type_info(packet: ir.PacketInfo) -> str:
    """One-line summary of a packet's payload for comments."""
    if not packet.fields:
        return "" if packet.kind == ir.PacketKind.EVENT else "No args"
    if len(packet.fields) > 1:
        return ""

    field = packet.fields[0]
    info = c_storage(field.storage)
    if not field.is_simple_type:
        info = f"{field.type} ({info})"
    info = _unit_prefix(field) + info
    if field.name != "_":
        info = f"{field.name} {info}"

    label = _REGISTER_LABELS.get(packet.kind)
    if label:
        return f"{label} {info}"
    return f"Argument: {info}"


def _doc_comment(description: str, type_info: str) -> str:
    desc = description.split("\n\n", 1)[0]
    if type_info:
        desc = f"{type_info}. {desc}"
    if "\n" in desc:
        return "\n/**\n * " + desc.replace("\n", "\n * ") + "\n */\n"
    return f"\n/** {desc} */\n"


def _struct_member(field: ir.FieldSpec) -> str:
    size = abs(field.storage)
    if field.storage == 0:
        decl = f"char {field.name}[0];"
    elif size not in _SCALAR_WIDTHS:
        decl = f"uint8_t {field.name}[{size}];"
    else:
        decl = f"{c_storage(field.storage)} {field.name};"
    if not field.is_simple_type:
        decl += f"  // {_unit_prefix(field)}{field.type}"
    elif field.unit != ir.Unit.NONE:
        decl += f" // {pretty_unit(field.unit)}"
    return decl


class CHeaderBackend(Backend):
    """Render a ServiceSpec as a C header."""

    name = "c"
    extension = "h"

    def render(self, spec: ir.ServiceSpec, prefix: str = DEFAULT_PREFIX, **options: Any) -> str:
        guard = f"_{prefix}_{to_upper(spec.camel_name)}_H"
        pref = f"{prefix}_{to_upper(spec.short_name)}_"
        out = [
            f"// Autogenerated C header file for {spec.name}\n",
            f"#ifndef {guard}\n",
            f"#define {guard} 1\n",
        ]

        for enum in spec.enums.values():
            enum_prefix = pref + to_upper(enum.name)
            out.append(f"\n// enum {enum.name} ({c_storage(enum.storage)})\n")
            for member, value in enum.members.items():
                out.append(f"#define {enum_prefix}_{to_upper(member)} {value}\n")

        for packet in spec.local_packets():
            out.append(self._render_packet(spec, packet, prefix, pref))

        out.append("\n#endif\n")
        return "".join(out)

    def _render_packet(
        self, spec: ir.ServiceSpec, packet: ir.PacketInfo, prefix: str, pref: str
    ) -> str:
        type_info = _type_info(packet)
        out: list[str] = []

        if packet.kind == ir.PacketKind.REPORT:
            out.append(f"// Report: {type_info}\n")
        else:
            if packet.description:
                out.append(_doc_comment(packet.description, type_info))
            group = _identifier_group(packet.kind)
            value = to_hex(packet.identifier)
            if packet.identifier_name:
                value = f"{prefix}_{group}_{to_upper(packet.identifier_name)}"
            out.append(f"#define {pref}{group}_{to_upper(packet.name)} {value}\n")

        if len(packet.fields) > 1:
            type_name = f"{prefix.lower()}_{to_lower(spec.camel_name)}_{to_lower(packet.name)}"
            if packet.kind == ir.PacketKind.REPORT:
                type_name += "_report"
            out.append(f"typedef struct {type_name} {{\n")
            for field in packet.fields:
                out.append(f"    {_struct_member(field)}\n")
            packed = " __attribute__((packed))" if packet.packed else ""
            out.append(f"}}{packed} {type_name}_t;\n\n")

        return "".join(out)

    def get_capabilities(self) -> BackendCapabilities:
        return BackendCapabilities(
            name=self.name,
            description="C header with identifier constants and packet structs",
            output_formats=[self.extension],
        )
