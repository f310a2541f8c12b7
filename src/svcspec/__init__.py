"""
svcspec - compiler for markdown service definition documents.

Service documents mix prose with indented DSL statements describing
registers, commands, reports, events, enums and pipes. svcspec compiles
them into a validated IR and renders C headers and JSON/YAML interchange
files from it.
"""

from __future__ import annotations

from ._version import get_version

# Re-export commonly used types for convenience
from .core import ir
from .core.dsl_parser_impl import compile_service
from .core.errors import BackendError, ConfigError, LinkError, ParseError, SvcSpecError
from .core.linker import compile_corpus

__version__ = get_version()

__all__ = [
    "__version__",
    "ir",
    "compile_service",
    "compile_corpus",
    "SvcSpecError",
    "ParseError",
    "LinkError",
    "BackendError",
    "ConfigError",
]
