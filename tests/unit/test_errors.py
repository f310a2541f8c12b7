"""Tests for the exception hierarchy and error context formatting."""

from pathlib import Path

from svcspec.core.errors import (
    BackendError,
    ConfigError,
    ErrorContext,
    LinkError,
    ParseError,
    SvcSpecError,
    make_parse_error,
)


class TestErrorContext:
    def test_location(self) -> None:
        context = ErrorContext(file=Path("light.md"), line=12, column=5)
        assert context.format() == "light.md:12:5"

    def test_snippet(self) -> None:
        context = ErrorContext(file=Path("light.md"), line=3, snippet="rw x @ 0x80 : u8")
        assert context.format() == "light.md:3:1\n   3 | rw x @ 0x80 : u8"


class TestErrors:
    def test_hierarchy(self) -> None:
        for cls in (ParseError, LinkError, BackendError, ConfigError):
            assert issubclass(cls, SvcSpecError)

    def test_message_without_context(self) -> None:
        error = LinkError("circular extends: a -> b -> a")
        assert str(error) == "circular extends: a -> b -> a"
        assert error.context is None

    def test_make_parse_error(self) -> None:
        error = make_parse_error("Document is not valid UTF-8", Path("bad.md"), 1)
        assert isinstance(error, ParseError)
        assert error.message == "Document is not valid UTF-8"
        assert error.context.line == 1
        assert str(error) == "bad.md:1:1\nDocument is not valid UTF-8"
