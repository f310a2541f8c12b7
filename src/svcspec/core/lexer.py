"""
Line classifier and statement tokenizer for the svcspec DSL.

Service documents are markdown. DSL statements live in indented code
blocks (four leading spaces); everything else is prose that feeds the
document notes and packet descriptions.

Fences:
    An untagged fence (```) marks an illustrative block: the fence lines and
    everything inside are dropped. A tagged fence (```c, ```typescript, ...)
    is documentation: its fence lines are prose, and inside it the usual
    four-space rule still decides between code and prose.
"""

import re
from dataclasses import dataclass
from enum import Enum

# Characters that always form a token of their own
_PUNCTUATION = re.compile(r"[?@:=,{};]")
_LINE_COMMENT = re.compile(r"//.*")
_FENCE = "```"

# Statement separators dropped when they end a line
TRAILING_SEPARATORS = (";", ",")

# Second-token operators that turn a statement into a plain assignment
ASSIGNMENT_OPERATORS = (":", "=")

# Dispatch key used for ``NAME = VALUE`` / ``NAME : VALUE`` statements
ASSIGNMENT_KEY = ":"


class LineKind(str, Enum):
    """How a raw line is handled."""

    PROSE = "prose"
    CODE = "code"
    SKIP = "skip"


class LineClassifier:
    """
    Decides, line by line, whether a line is DSL code, prose or dropped.

    Holds the fence state between calls, so one instance must see every
    line of a document in order.
    """

    DEFAULT_FENCE = "default"

    def __init__(self) -> None:
        self.fence: str | None = None

    @property
    def in_fence(self) -> bool:
        return self.fence is not None

    def classify(self, line: str) -> LineKind:
        """Classify the next line and update the fence state."""
        stripped = line.strip()
        if stripped.startswith(_FENCE):
            if self.fence is None:
                tag = stripped[len(_FENCE) :].strip() or self.DEFAULT_FENCE
                self.fence = tag
            else:
                tag, self.fence = self.fence, None
            return LineKind.SKIP if tag == self.DEFAULT_FENCE else LineKind.PROSE

        if self.fence == self.DEFAULT_FENCE:
            return LineKind.SKIP
        if line.startswith("    "):
            return LineKind.CODE
        return LineKind.PROSE


@dataclass
class Statement:
    """
    A tokenized DSL line.

    Attributes:
        words: Tokens in source order
        line: Line number (1-indexed)
    """

    words: list[str]
    line: int = 0

    @property
    def key(self) -> str:
        """
        Dispatch key: the first word, or ``:`` for assignments.

        ``command = 3`` is an assignment to a field named ``command``,
        not the start of a command packet.
        """
        if len(self.words) > 1 and self.words[1] in ASSIGNMENT_OPERATORS:
            return ASSIGNMENT_KEY
        return self.words[0] if self.words else ""

    def __bool__(self) -> bool:
        return bool(self.words)


def tokenize_statement(line: str) -> list[str]:
    """
    Split a DSL line into tokens.

    Strips ``//`` comments, gives each punctuation character its own token
    and drops a single trailing ``;`` or ``,``.
    """
    expanded = _LINE_COMMENT.sub("", line)
    expanded = _PUNCTUATION.sub(lambda m: f" {m.group(0)} ", expanded).strip()
    if not expanded:
        return []
    words = expanded.split()
    if words[-1] in TRAILING_SEPARATORS:
        words.pop()
    return words


def tokenize(line: str, line_no: int = 0) -> Statement:
    """Convenience wrapper returning a ``Statement``."""
    return Statement(words=tokenize_statement(line), line=line_no)
