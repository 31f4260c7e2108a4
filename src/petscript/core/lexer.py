"""
Line classifier for petscript.

Pet Battle Script is line oriented, so instead of a token stream the lexer
classifies whole lines. Each line is exactly one of:

    skip       blank line or ``# comment``
    separator  ``--``
    if_open    ``if [condition]``
    endif      ``endif``
    action     anything else, with an optional ``[condition]`` suffix
"""

from dataclasses import dataclass
from enum import Enum
import re

_IF_PATTERN = re.compile(r"^if\s+\[(.*)\]$")
_INLINE_CONDITION_PATTERN = re.compile(r"^(.+?)\s*\[(.*)\]$")


class LineKind(Enum):
    """Syntactic kind of a source line."""

    SKIP = "skip"
    SEPARATOR = "separator"
    IF_OPEN = "if_open"
    ENDIF = "endif"
    ACTION = "action"


@dataclass(frozen=True)
class ClassifiedLine:
    """
    A source line with its kind and extracted substrings.

    Attributes:
        kind: Kind of line
        indent: Leading whitespace width (space = 1, tab = 4)
        text: Line with surrounding whitespace removed
        action: Action text for ``action`` lines, without any inline condition
        condition_raw: Bracketed condition text, if any. For ``if_open`` lines
            this is None when the brackets are malformed.
    """

    kind: LineKind
    indent: int
    text: str
    action: str | None = None
    condition_raw: str | None = None

    @property
    def is_malformed_if(self) -> bool:
        return self.kind == LineKind.IF_OPEN and self.condition_raw is None


def indent_level(line: str) -> int:
    """Measure leading whitespace, stopping at the first other character."""
    indent = 0
    for char in line:
        if char == " ":
            indent += 1
        elif char == "\t":
            indent += 4  # Treat tab as 4 spaces
        else:
            break
    return indent


def classify_line(line: str) -> ClassifiedLine:
    """
    Classify one source line.

    Args:
        line: Raw line; trailing whitespace is ignored, leading whitespace
            only feeds the indent

    Returns:
        ClassifiedLine describing the line
    """
    line = line.rstrip()
    text = line.strip()
    indent = indent_level(line)

    if not text or text.startswith("#"):
        return ClassifiedLine(LineKind.SKIP, indent, text)

    if text == "--":
        return ClassifiedLine(LineKind.SEPARATOR, indent, text)

    if text.startswith("if "):
        match = _IF_PATTERN.match(text)
        condition = match.group(1).strip() if match else None
        return ClassifiedLine(LineKind.IF_OPEN, indent, text, condition_raw=condition)

    if text == "endif":
        return ClassifiedLine(LineKind.ENDIF, indent, text)

    match = _INLINE_CONDITION_PATTERN.match(text)
    if match:
        return ClassifiedLine(
            LineKind.ACTION,
            indent,
            text,
            action=match.group(1).strip(),
            condition_raw=match.group(2).strip(),
        )
    return ClassifiedLine(LineKind.ACTION, indent, text, action=text)
