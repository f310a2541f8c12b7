"""Shared pytest fixtures for svcspec tests."""

import random
from collections.abc import Callable
from pathlib import Path

import pytest

from svcspec.core import ir
from svcspec.core.dsl_parser_impl import compile_service

BASE_DOC = """# Base

    camel: base

Base class for all services.

## Registers

    rw streaming_samples @ 0x03 : u8

Number of samples to stream.

    ro reading @ 0x101 : i32

## Commands

    command announce @ 0x00 { }
    report { service_class: u32 }
"""

SENSOR_DOC = """# Sensor

    camel: sensor

Base class for sensors.

## Registers

    rw streaming_samples? @ streaming_samples : u8
"""

LIGHT_DOC = """# Light level

A sensor measuring luminosity.

    extends: _sensor
    identifier: 0x17dc9a1c

## Registers

    enum Variant : u8 {
        PhotoResistor = 1
        Ambient = 2
    }

    ro brightness @ reading : u0.16 frac

Detected light level.

    const variant? @ 0x180 : Variant

## Commands

    command calibrate @ 0x80 { }
    report : u16

## Events

    event tripped @ 0x01
"""

# Prepended by ``compile_code``: a title and a valid class identifier on line 3
CODE_HEADER = "# Test service\n\n    identifier: 0x12345678\n\n"


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source for deterministic identifier suggestions."""
    return random.Random(1234)


@pytest.fixture
def corpus_dir(tmp_path: Path) -> Path:
    """A directory holding the base, sensor and light documents."""
    (tmp_path / "_base.md").write_text(BASE_DOC)
    (tmp_path / "_sensor.md").write_text(SENSOR_DOC)
    (tmp_path / "light.md").write_text(LIGHT_DOC)
    return tmp_path


@pytest.fixture
def compile_code() -> Callable[..., ir.ServiceSpec]:
    """
    Compile DSL statements as a standalone document.

    Each positional argument is one statement; it is indented four spaces so
    it is read as code. The first statement is on line 5.
    """

    def _compile(*statements: str, **kwargs) -> ir.ServiceSpec:
        body = "\n".join(f"    {statement}" for statement in statements)
        return compile_service(CODE_HEADER + body + "\n", "test.md", **kwargs)

    return _compile


@pytest.fixture
def base_doc() -> str:
    return BASE_DOC


@pytest.fixture
def sensor_doc() -> str:
    return SENSOR_DOC


@pytest.fixture
def light_doc() -> str:
    return LIGHT_DOC
