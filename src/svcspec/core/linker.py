import logging
import random
from dataclasses import dataclass, field

from . import ir
from .dsl_parser_impl import ServiceParser
from .dsl_parser_impl.base import DEFAULT_BASE_KEY
from .identifiers import suggest_class_identifier, to_hex
from .linker_impl import (
    ClassIdentifierClaim,
    CorpusRegistry,
    SourceDocument,
    order_documents,
    scan_extends,
)

logger = logging.getLogger(__name__)


@dataclass
class CorpusResult:
    """
    Outcome of compiling a set of documents.

    Attributes:
        specs: Compiled documents in compilation order
        registry: Registry the documents were compiled against
    """

    specs: list[ir.ServiceSpec] = field(default_factory=list)
    registry: CorpusRegistry = field(default_factory=CorpusRegistry)

    @property
    def diagnostics(self) -> list[ir.Diagnostic]:
        return [d for spec in self.specs for d in spec.errors]

    @property
    def ok(self) -> bool:
        """Any diagnostic, warnings included, fails the corpus."""
        return all(spec.ok for spec in self.specs)

    def get(self, key: str) -> ir.ServiceSpec | None:
        return self.registry.documents.get(key)


def compile_corpus(
    sources: list[SourceDocument],
    rng: random.Random | None = None,
    base_key: str = DEFAULT_BASE_KEY,
) -> CorpusResult:
    """
    Compile a set of documents in dependency order.

    Performs:
    1. Ordering on ``extends`` (bases first)
    2. Compilation of each document against the documents before it
    3. Class identifier collision reporting on both sides

    Args:
        sources: Documents to compile, usually sorted by file name
        rng: Random source for suggested class identifiers
        base_key: Key of the reserved base document

    Returns:
        CorpusResult with every compiled document

    Raises:
        LinkError: If the documents cannot be ordered (cycles, duplicate keys)
    """
    registry = CorpusRegistry(base_key=base_key)
    keys: list[str] = []
    specs: list[ir.ServiceSpec] = []

    for source in order_documents(sources, base_key=base_key):
        logger.debug("Compiling %s", source.filename)
        parser = ServiceParser(source.text, source.filename, registry=registry, rng=rng)
        spec = parser.compile()
        registry.add_document(
            source.key,
            spec,
            file=source.filename,
            line=parser.state.class_identifier_line or 0,
        )
        keys.append(source.key)
        specs.append(spec)

    specs = _report_shared_class_identifiers(keys, specs, registry, rng)
    registry.documents.update(zip(keys, specs))
    return CorpusResult(specs=specs, registry=registry)


def _report_shared_class_identifiers(
    keys: list[str],
    specs: list[ir.ServiceSpec],
    registry: CorpusRegistry,
    rng: random.Random | None,
) -> list[ir.ServiceSpec]:
    """Give the first holder of a class identifier a diagnostic naming each later holder."""
    extra: dict[str, list[ir.Diagnostic]] = {}
    for key, spec in zip(keys, specs):
        identifier = spec.class_identifier
        claim: ClassIdentifierClaim | None = registry.lookup_class_identifier(identifier)
        if not identifier or claim is None or claim.key == key:
            continue
        message = (
            f"class identifier {to_hex(identifier)} already used in {spec.name or key}; "
            f"how about {to_hex(suggest_class_identifier(rng))}"
        )
        extra.setdefault(claim.key, []).append(
            ir.Diagnostic(file=claim.file, line=claim.line, message=message)
        )
        logger.info("Class identifier %s shared by %s and %s", to_hex(identifier), claim.key, key)

    if not extra:
        return specs
    return [
        spec.model_copy(update={"errors": [*spec.errors, *extra[key]]}) if key in extra else spec
        for key, spec in zip(keys, specs)
    ]


__all__ = [
    "CorpusRegistry",
    "CorpusResult",
    "SourceDocument",
    "compile_corpus",
    "order_documents",
    "scan_extends",
]
