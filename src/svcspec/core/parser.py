import logging
import random
from pathlib import Path

from .dsl_parser_impl.base import DEFAULT_BASE_KEY, document_key
from .errors import make_parse_error
from .linker import CorpusResult, compile_corpus
from .linker_impl import SourceDocument

logger = logging.getLogger(__name__)


def read_documents(files: list[Path]) -> list[SourceDocument]:
    """
    Read service documents from disk.

    Args:
        files: List of .md file paths

    Returns:
        SourceDocument per file, keyed by file name without ``.md``

    Raises:
        ParseError: If a file is not valid UTF-8
    """
    documents: list[SourceDocument] = []
    for f in files:
        try:
            text = f.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise make_parse_error(f"Document is not valid UTF-8: {e.reason}", f, 1) from e
        documents.append(SourceDocument(key=document_key(f.name), filename=f.name, text=text))
    return documents


def compile_files(
    files: list[Path],
    rng: random.Random | None = None,
    base_key: str = DEFAULT_BASE_KEY,
) -> CorpusResult:
    """Read and compile a set of documents as one corpus."""
    logger.info("Compiling %d documents", len(files))
    return compile_corpus(read_documents(files), rng=rng, base_key=base_key)
