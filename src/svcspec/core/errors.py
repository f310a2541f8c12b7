"""
Error types for svcspec compilation, linking and code generation.

Problems inside a document are reported as ``ir.Diagnostic`` values on the
compiled ``ServiceSpec``; the exceptions here cover the failures that stop a
whole run (bad configuration, cyclic ``extends`` chains, generator faults).
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class SvcSpecError(Exception):
    """Base exception for all svcspec errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class ParseError(SvcSpecError):
    """
    Raised when a document cannot be read or tokenized at all.

    Recoverable syntax problems never raise; they become diagnostics.
    """

    pass


class LinkError(SvcSpecError):
    """
    Raised when documents cannot be ordered for compilation.

    Examples:
    - Circular ``extends`` chains
    - Two documents with the same key
    """

    pass


class BackendError(SvcSpecError):
    """
    Raised when a backend fails to generate output.

    Examples:
    - Unknown backend name
    - Output directory issues
    - Unsupported interchange format
    """

    pass


class ConfigError(SvcSpecError):
    """Raised for unreadable or invalid svcspec.toml manifests and bad CLI input."""

    pass


@dataclass
class ErrorContext:
    """
    Source location of an error.

    Attributes:
        file: Path to the source file where error occurred
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Optional source line
    """

    file: Path
    line: int
    column: int = 1
    snippet: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "file.md:10:5"
        """
        location = f"{self.file}:{self.line}:{self.column}"
        if self.snippet:
            return f"{location}\n{self.line:4d} | {self.snippet}"
        return location


def make_parse_error(
    message: str,
    file: Path,
    line: int,
    column: int = 1,
    snippet: str | None = None,
) -> ParseError:
    """
    Helper to create a ParseError with context.

    Args:
        message: Error description
        file: Source file path
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Optional source line

    Returns:
        ParseError with context attached
    """
    context = ErrorContext(file=file, line=line, column=column, snippet=snippet)
    return ParseError(message, context)
