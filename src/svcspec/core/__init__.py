"""Core svcspec functionality: IR, lexer, parser, identifier policy, corpus linking."""

from . import ir
from .dsl_parser_impl import compile_service
from .errors import (
    BackendError,
    ConfigError,
    ErrorContext,
    LinkError,
    ParseError,
    SvcSpecError,
)
from .linker import CorpusRegistry, CorpusResult, SourceDocument, compile_corpus, order_documents
from .manifest import ProjectManifest, find_manifest, load_manifest
from .parser import compile_files, read_documents

__all__ = [
    "ir",
    "SvcSpecError",
    "ParseError",
    "LinkError",
    "BackendError",
    "ConfigError",
    "ErrorContext",
    "compile_service",
    "compile_corpus",
    "compile_files",
    "read_documents",
    "order_documents",
    "CorpusRegistry",
    "CorpusResult",
    "SourceDocument",
    "ProjectManifest",
    "load_manifest",
    "find_manifest",
]
