"""Tests for class and packet identifier policy."""

import random

import pytest

from svcspec.core.identifiers import (
    CLASS_IDENTIFIER_MAX,
    CLASS_IDENTIFIER_MIN,
    IdentifierRange,
    class_identifier_in_range,
    classify_packet_identifier,
    looks_random,
    suggest_class_identifier,
    to_hex,
)
from svcspec.core.ir import PacketKind


class TestLooksRandom:
    """The hand-picked identifier heuristic."""

    @pytest.mark.parametrize("value", [0x12345678, 0x17DC9A1C, 0x1E1589EB])
    def test_random_looking(self, value: int) -> None:
        assert looks_random(value)

    @pytest.mark.parametrize(
        "value",
        [
            0xDEADBEEF,  # words
            0x1F00D123,
            0x1234DEAF,
            0x10000001,  # repeated digits
            0x1AAA2345,
            0x1234FFF5,
        ],
    )
    def test_not_random_looking(self, value: int) -> None:
        assert not looks_random(value)


class TestSuggestion:
    """Suggested class identifiers for error messages."""

    def test_suggestion_is_random_looking(self) -> None:
        rng = random.Random(7)
        for _ in range(50):
            value = suggest_class_identifier(rng)
            assert looks_random(value)
            assert 0x1000_0000 <= value <= 0x1FFF_FFFF

    def test_seeded_suggestions_repeat(self) -> None:
        assert suggest_class_identifier(random.Random(99)) == suggest_class_identifier(
            random.Random(99)
        )

    def test_default_random_source(self) -> None:
        assert looks_random(suggest_class_identifier())


class TestClassIdentifierRange:
    def test_bounds(self) -> None:
        assert class_identifier_in_range(CLASS_IDENTIFIER_MIN)
        assert class_identifier_in_range(CLASS_IDENTIFIER_MAX)
        assert not class_identifier_in_range(CLASS_IDENTIFIER_MIN - 1)
        assert not class_identifier_in_range(CLASS_IDENTIFIER_MAX + 1)
        assert not class_identifier_in_range(0xDEADBEEF)

    def test_zero(self) -> None:
        assert not class_identifier_in_range(0)
        assert class_identifier_in_range(0, allow_zero=True)


class TestPacketIdentifierRanges:
    """Per-kind range table, including the blanket extended range."""

    @pytest.mark.parametrize(
        "kind,value,expected",
        [
            (PacketKind.CONST, 0x100, IdentifierRange.SYSTEM),
            (PacketKind.RO, 0x17F, IdentifierRange.SYSTEM),
            (PacketKind.RO, 0x180, IdentifierRange.USER),
            (PacketKind.RO, 0x1FF, IdentifierRange.USER),
            (PacketKind.RW, 0x00, IdentifierRange.SYSTEM),
            (PacketKind.RW, 0x80, IdentifierRange.USER),
            (PacketKind.COMMAND, 0x7F, IdentifierRange.SYSTEM),
            (PacketKind.COMMAND, 0x81, IdentifierRange.USER),
            (PacketKind.REPORT, 0x100, IdentifierRange.HIGH),
            (PacketKind.COMMAND, 0xEFF, IdentifierRange.HIGH),
            (PacketKind.EVENT, 0x01, IdentifierRange.USER),
            (PacketKind.EVENT, 0xFFFF, IdentifierRange.USER),
            (PacketKind.EVENT, 0x1_0000, IdentifierRange.HIGH),
        ],
    )
    def test_table(self, kind: PacketKind, value: int, expected: IdentifierRange) -> None:
        assert classify_packet_identifier(kind, value) == expected

    @pytest.mark.parametrize("kind", [PacketKind.RW, PacketKind.RO, PacketKind.CONST])
    def test_blanket_extended_range_for_registers(self, kind: PacketKind) -> None:
        assert classify_packet_identifier(kind, 0x250) == IdentifierRange.HIGH

    def test_outside_every_range(self) -> None:
        assert classify_packet_identifier(PacketKind.RW, 0x150) == IdentifierRange.NONE
        assert classify_packet_identifier(PacketKind.COMMAND, 0x1000) == IdentifierRange.NONE


def test_to_hex() -> None:
    assert to_hex(0x1FFF_FFF1) == "0x1ffffff1"
    assert to_hex(0) == "0x0"
    assert to_hex(-16) == "-0x10"
