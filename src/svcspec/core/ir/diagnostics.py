"""
Diagnostics attached to a compiled document.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class DiagnosticSeverity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class Diagnostic(BaseModel):
    """
    A single problem found while compiling a document.

    Warnings block output just like errors; severity only changes how the
    driver prints them.
    """

    file: str
    line: int
    message: str
    severity: DiagnosticSeverity = DiagnosticSeverity.ERROR

    model_config = ConfigDict(frozen=True)

    def format(self, path: str | None = None) -> str:
        """Format as ``file(line): message``."""
        return f"{path or self.file}({self.line}): {self.message}"
