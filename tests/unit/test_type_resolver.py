"""Tests for type and unit resolution."""

import pytest

from svcspec.core.ir import StorageKind, Unit
from svcspec.core.type_resolver import (
    PLACEHOLDER_WIDTH,
    is_unit,
    normalize_type_token,
    resolve_type,
    resolve_unit,
)


class TestPrimitiveTypes:
    """Integer primitives, bool and the normalization of their spelling."""

    @pytest.mark.parametrize(
        "token,storage",
        [
            ("u8", 1),
            ("u16", 2),
            ("u32", 4),
            ("u64", 8),
            ("i8", -1),
            ("i16", -2),
            ("i32", -4),
            ("i64", -8),
        ],
    )
    def test_primitive_storage(self, token: str, storage: int) -> None:
        result = resolve_type(token)
        assert result.error is None
        assert result.storage == storage
        assert result.storage_type.kind == StorageKind.PRIMITIVE
        assert result.is_simple_type

    def test_case_and_suffix_are_normalized(self) -> None:
        result = resolve_type("U16_t")
        assert result.type_name == "u16"
        assert result.storage == 2
        assert result.is_simple_type

    def test_normalize_type_token(self) -> None:
        assert normalize_type_token("I32_t") == "i32"
        assert normalize_type_token("u8") == "u8"

    def test_bool_is_one_unsigned_byte(self) -> None:
        result = resolve_type("bool")
        assert result.storage == 1
        assert result.storage_type.kind == StorageKind.BOOL
        assert not result.is_simple_type


class TestFixedPoint:
    """Fixed-point tokens ``u<a>.<b>`` / ``i<a>.<b>``."""

    def test_unsigned_fraction(self) -> None:
        result = resolve_type("u0.16")
        assert result.error is None
        assert result.storage == 2
        assert result.shift == 16
        assert result.storage_type.kind == StorageKind.FIXED

    def test_signed_fixed_point(self) -> None:
        result = resolve_type("i22.10")
        assert result.storage == -4
        assert result.shift == 10
        assert not result.is_simple_type

    @pytest.mark.parametrize("token", ["u3.3", "i12.8", "u1.2"])
    def test_bad_width_falls_back_to_placeholder(self, token: str) -> None:
        result = resolve_type(token)
        assert result.error is not None
        assert "can't be" in result.error
        assert abs(result.storage) == PLACEHOLDER_WIDTH

    def test_bad_width_keeps_sign_and_shift(self) -> None:
        result = resolve_type("i3.3")
        assert result.error == "fixed point i3.3 can't be 6 bits"
        assert result.storage == -PLACEHOLDER_WIDTH
        assert result.shift == 3


class TestSpecialTypes:
    """Pipes, variable length values and byte arrays."""

    def test_pipe(self) -> None:
        result = resolve_type("pipe")
        assert result.storage == 12
        assert result.storage_type.carries_pipe

    def test_pipe_port(self) -> None:
        result = resolve_type("pipe_port")
        assert result.storage == 2
        assert result.storage_type.carries_pipe

    @pytest.mark.parametrize("token", ["bytes", "string", "i32[]"])
    def test_variable_length(self, token: str) -> None:
        result = resolve_type(token)
        assert result.error is None
        assert result.storage == 0
        assert result.storage_type.is_variable

    def test_bytes_is_simple(self) -> None:
        assert resolve_type("bytes").is_simple_type
        assert not resolve_type("string").is_simple_type

    def test_byte_array(self) -> None:
        result = resolve_type("u8[6]")
        assert result.storage == 6
        assert result.storage_type.kind == StorageKind.BYTE_ARRAY


class TestEnumsAndErrors:
    """Declared enums win; unknown tokens get a placeholder."""

    def test_enum_name(self) -> None:
        result = resolve_type("Mode", {"Mode": -2})
        assert result.error is None
        assert result.type_name == "Mode"
        assert result.storage == -2
        assert not result.is_simple_type

    def test_enum_shadows_nothing_else(self) -> None:
        assert resolve_type("u8", {"Mode": 2}).storage == 1

    def test_unknown_type(self) -> None:
        result = resolve_type("float")
        assert result.error == "unknown type: float"
        assert result.storage == PLACEHOLDER_WIDTH
        assert result.storage_type.kind == StorageKind.UNKNOWN

    def test_missing_type(self) -> None:
        result = resolve_type(None)
        assert result.error == "expecting type here"
        assert result.storage == PLACEHOLDER_WIDTH


class TestUnits:
    """The closed unit vocabulary."""

    @pytest.mark.parametrize(
        "token,unit",
        [
            ("frac", Unit.FRACTION),
            ("us", Unit.MICROSECOND),
            ("mWh", Unit.MILLIWATT_HOUR),
            ("%RH", Unit.RELATIVE_HUMIDITY),
            ("C", Unit.CELSIUS),
        ],
    )
    def test_known_units(self, token: str, unit: Unit) -> None:
        assert resolve_unit(token) == (unit, None)
        assert is_unit(token)

    def test_no_unit(self) -> None:
        assert resolve_unit(None) == (Unit.NONE, None)

    def test_unknown_unit(self) -> None:
        unit, error = resolve_unit("lux")
        assert unit == Unit.NONE
        assert error == "expecting unit, got 'lux'"

    def test_units_are_case_sensitive(self) -> None:
        assert not is_unit("MV")
