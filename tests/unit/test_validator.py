"""Tests for packet-level semantic checks."""

from svcspec.core import ir
from svcspec.core.validator import has_natural_alignment, identifier_in_use, is_packet_redefinition


def field(name: str, type_name: str, storage: int) -> ir.FieldSpec:
    return ir.FieldSpec(name=name, type=type_name, storage=storage)


def packet(kind: ir.PacketKind, name: str, identifier: int = 0) -> ir.PacketInfo:
    return ir.PacketInfo(kind=kind, name=name, identifier=identifier)


class TestNaturalAlignment:
    """Every fixed-width field must start at a multiple of its width."""

    def test_bytes_in_a_row(self) -> None:
        fields = [field("r", "u8", 1), field("g", "u8", 1), field("b", "u8", 1)]
        assert has_natural_alignment(fields)

    def test_u32_after_u8(self) -> None:
        assert not has_natural_alignment([field("a", "u8", 1), field("b", "u32", 4)])

    def test_u16_pairs(self) -> None:
        fields = [field("a", "u16", 2), field("b", "i16", -2), field("c", "u32", 4)]
        assert has_natural_alignment(fields)

    def test_byte_arrays_are_exempt(self) -> None:
        fields = [field("a", "u8", 1), field("mac", "u8[6]", 6), field("c", "u8", 1)]
        assert has_natural_alignment(fields)

    def test_byte_array_still_advances_offset(self) -> None:
        fields = [field("mac", "u8[3]", 3), field("b", "u16", 2)]
        assert not has_natural_alignment(fields)

    def test_variable_fields_take_no_space(self) -> None:
        fields = [field("name", "string", 0), field("a", "u32", 4)]
        assert has_natural_alignment(fields)

    def test_empty(self) -> None:
        assert has_natural_alignment([])


class TestRedefinition:
    """Only a report may reuse the name of a single earlier command."""

    def test_new_name(self) -> None:
        assert not is_packet_redefinition([], "x", ir.PacketKind.RW)

    def test_report_after_command(self) -> None:
        existing = [packet(ir.PacketKind.COMMAND, "calibrate", 0x80)]
        assert not is_packet_redefinition(existing, "calibrate", ir.PacketKind.REPORT)

    def test_second_report_is_redefinition(self) -> None:
        existing = [
            packet(ir.PacketKind.COMMAND, "calibrate", 0x80),
            packet(ir.PacketKind.REPORT, "calibrate", 0x80),
        ]
        assert is_packet_redefinition(existing, "calibrate", ir.PacketKind.REPORT)

    def test_register_names_clash(self) -> None:
        existing = [packet(ir.PacketKind.RW, "brightness", 0x80)]
        assert is_packet_redefinition(existing, "brightness", ir.PacketKind.RO)


def test_identifier_in_use_is_per_kind() -> None:
    existing = [packet(ir.PacketKind.COMMAND, "a", 0x80)]
    assert identifier_in_use(existing, ir.PacketKind.COMMAND, 0x80)
    assert not identifier_in_use(existing, ir.PacketKind.REPORT, 0x80)
    assert not identifier_in_use(existing, ir.PacketKind.COMMAND, 0x81)
