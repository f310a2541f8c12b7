"""
Corpus linker implementation for svcspec.

Handles document ordering on ``extends`` and the registry of compiled
documents that later documents resolve their base and class identifiers
against.
"""

import heapq
from dataclasses import dataclass, field

from . import ir
from .dsl_parser_impl.base import DEFAULT_BASE_KEY
from .errors import LinkError
from .lexer import ASSIGNMENT_OPERATORS, LineClassifier, LineKind, tokenize_statement


@dataclass
class SourceDocument:
    """
    One document waiting to be compiled.

    Attributes:
        key: Lookup key (file name without ``.md``)
        filename: Name used to label diagnostics
        text: Document source
    """

    key: str
    filename: str
    text: str


@dataclass
class ClassIdentifierClaim:
    """Which document holds a class identifier, and where it was declared."""

    owner: str
    key: str
    file: str = ""
    line: int = 0


@dataclass
class CorpusRegistry:
    """
    Compiled documents available to the document being compiled.

    Documents are added in compilation order, so a lookup only ever sees
    documents compiled earlier.
    """

    documents: dict[str, ir.ServiceSpec] = field(default_factory=dict)
    class_identifiers: dict[int, ClassIdentifierClaim] = field(default_factory=dict)
    base_key: str = DEFAULT_BASE_KEY

    def resolve_base(self, name: str) -> ir.ServiceSpec | None:
        return self.documents.get(name)

    def base_document(self) -> ir.ServiceSpec | None:
        """The reserved base document that symbolic ``@ name`` identifiers refer to."""
        return self.documents.get(self.base_key)

    def add_document(self, key: str, spec: ir.ServiceSpec, file: str = "", line: int = 0) -> None:
        self.documents[key] = spec
        if spec.class_identifier:
            self.record_class_identifier(
                spec.class_identifier,
                ClassIdentifierClaim(owner=spec.name or key, key=key, file=file, line=line),
            )

    def record_class_identifier(self, identifier: int, claim: ClassIdentifierClaim) -> None:
        """Record a claim; the first document to claim an identifier keeps it."""
        self.class_identifiers.setdefault(identifier, claim)

    def lookup_class_identifier(self, identifier: int) -> ClassIdentifierClaim | None:
        return self.class_identifiers.get(identifier)


def scan_extends(text: str) -> list[str]:
    """
    Find the base documents a source names in ``extends`` statements.

    Only a light pre-scan: the classifier and tokenizer are shared with the
    parser, but nothing is validated.
    """
    classifier = LineClassifier()
    bases: list[str] = []
    for line in text.splitlines():
        if classifier.classify(line) != LineKind.CODE:
            continue
        words = tokenize_statement(line)
        if not words or words[0] != "extends":
            continue
        if len(words) == 3 and words[1] in ASSIGNMENT_OPERATORS:
            bases.append(words[2])
        elif len(words) == 2:
            bases.append(words[1])
    return bases


def order_documents(
    sources: list[SourceDocument], base_key: str = DEFAULT_BASE_KEY
) -> list[SourceDocument]:
    """
    Order documents so every base is compiled before the documents extending it.

    Uses topological sort (Kahn's algorithm). Ties keep the input order, and
    every document implicitly depends on the base document when present.

    Args:
        sources: Documents, usually sorted by file name
        base_key: Key of the reserved base document

    Returns:
        Documents in compilation order

    Raises:
        LinkError: On duplicate keys or circular ``extends`` chains
    """
    index: dict[str, int] = {}
    for i, source in enumerate(sources):
        if source.key in index:
            raise LinkError(
                f"Duplicate document key '{source.key}' from "
                f"{sources[index[source.key]].filename} and {source.filename}"
            )
        index[source.key] = i

    dependencies: dict[str, set[str]] = {}
    for source in sources:
        deps = {name for name in scan_extends(source.text) if name in index}
        if base_key in index and source.key != base_key:
            deps.add(base_key)
        deps.discard(source.key)
        dependencies[source.key] = deps

    in_degree = {key: len(deps) for key, deps in dependencies.items()}
    ready = [index[key] for key, degree in in_degree.items() if degree == 0]
    heapq.heapify(ready)
    ordered: list[SourceDocument] = []

    while ready:
        source = sources[heapq.heappop(ready)]
        ordered.append(source)
        for other, deps in dependencies.items():
            if source.key in deps:
                in_degree[other] -= 1
                if in_degree[other] == 0:
                    heapq.heappush(ready, index[other])

    if len(ordered) != len(sources):
        remaining = sorted(key for key, degree in in_degree.items() if degree > 0)
        raise LinkError(f"Circular extends chain detected among: {', '.join(remaining)}")

    return ordered
