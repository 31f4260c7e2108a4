"""
Block parser for Pet Battle Script.

Builds the syntax tree from classified lines. ``if`` blocks recurse into
``_parse_block`` with the same cursor and return to their caller at the
first ``endif``; there is no indentation-based matching.

The parser never raises for script content. Malformed and unterminated
``if`` blocks are recorded as ``ParseErrorNode`` entries and parsing carries
on with the next line.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from pathlib import Path

from . import ir
from .condition_parser import decode_condition
from .errors import ErrorContext, ScriptEncodingError
from .lexer import ClassifiedLine, LineKind, classify_line

logger = logging.getLogger(__name__)

_ARGS_PATTERN = re.compile(r"\(([^)]+)\)")


def _prefix(*prefixes: str) -> Callable[[str], bool]:
    return lambda action: action.startswith(prefixes)


def _exact(keyword: str) -> Callable[[str], bool]:
    return lambda action: action == keyword


# First match wins; anything left over is ActionKind.UNKNOWN
ACTION_RULES: list[tuple[Callable[[str], bool], ir.ActionKind]] = [
    (_prefix("ability(", "use("), ir.ActionKind.ABILITY),
    (_prefix("change("), ir.ActionKind.CHANGE),
    (_exact("quit"), ir.ActionKind.QUIT),
    (_exact("standby"), ir.ActionKind.STANDBY),
    (_exact("catch"), ir.ActionKind.CATCH),
    (_prefix("test("), ir.ActionKind.TEST),
]


def action_kind(action: str) -> ir.ActionKind:
    """Classify action text by the first matching rule in ``ACTION_RULES``."""
    for matches, kind in ACTION_RULES:
        if matches(action):
            return kind
    return ir.ActionKind.UNKNOWN


def action_args(action: str) -> str | None:
    """Text inside the first non-empty parenthesis pair, if any."""
    match = _ARGS_PATTERN.search(action)
    return match.group(1) if match else None


class ScriptParser:
    """
    Single-pass parser over script lines.

    ``pos`` is the index of the next unread line; every recursive call
    advances the same cursor.
    """

    def __init__(self, lines: Sequence[str]):
        self.lines = list(lines)
        self.pos = 0

    def parse(self) -> list[ir.SyntaxNode]:
        """Parse all lines into a list of top-level nodes."""
        nodes: list[ir.SyntaxNode] = []
        while True:
            stray_endif = self._parse_block(nodes)
            if stray_endif is None:
                return nodes
            logger.debug("Ignoring endif without matching if at line %d", stray_endif)

    def _parse_block(self, nodes: list[ir.SyntaxNode]) -> int | None:
        """
        Append nodes until an ``endif`` or the end of input.

        Returns:
            Line number of the ``endif`` that stopped the block, or None at
            end of input
        """
        while self.pos < len(self.lines):
            line_number = self.pos + 1
            line = classify_line(self.lines[self.pos])
            self.pos += 1

            if line.kind == LineKind.SKIP:
                continue
            if line.kind == LineKind.SEPARATOR:
                nodes.append(ir.SeparatorNode(indent=line.indent))
            elif line.kind == LineKind.IF_OPEN:
                nodes.extend(self._parse_if(line, line_number))
            elif line.kind == LineKind.ENDIF:
                return line_number
            else:
                nodes.append(self._parse_action(line, line_number))
        return None

    def _parse_if(self, line: ClassifiedLine, line_number: int) -> list[ir.SyntaxNode]:
        if line.condition_raw is None:
            logger.debug("Invalid if statement at line %d: %r", line_number, line.text)
            return [ir.ParseErrorNode(message="Invalid if statement", source_line=line_number)]

        condition = decode_condition(line.condition_raw)
        children: list[ir.SyntaxNode] = []
        end_line = self._parse_block(children)

        node = ir.IfNode(
            condition=condition,
            condition_raw=line.condition_raw,
            indent=line.indent,
            children=children,
            source_line=line_number,
            end_line=end_line,
        )
        if end_line is None:
            logger.debug("if block at line %d has no endif", line_number)
            return [
                node,
                ir.ParseErrorNode(
                    message=f"Unterminated if block (opened at line {line_number})",
                    source_line=line_number,
                ),
            ]
        return [node]

    def _parse_action(self, line: ClassifiedLine, line_number: int) -> ir.ActionNode:
        action = line.action or line.text
        condition = None
        if line.condition_raw is not None:
            condition = decode_condition(line.condition_raw)

        return ir.ActionNode(
            action_kind=action_kind(action),
            raw_action=action,
            args=action_args(action),
            condition=condition,
            condition_raw=line.condition_raw,
            indent=line.indent,
            source_line=line_number,
        )


def parse_lines(lines: Sequence[str]) -> list[ir.SyntaxNode]:
    """
    Parse a sequence of script lines.

    Args:
        lines: Script lines without trailing newlines

    Returns:
        Top-level syntax nodes; may contain ParseErrorNode entries
    """
    return ScriptParser(lines).parse()


def parse_script(text: str) -> list[ir.SyntaxNode]:
    """Parse script text (``\\n``-separated lines)."""
    return parse_lines(text.split("\n"))


def parse_file(path: Path) -> list[ir.SyntaxNode]:
    """
    Read and parse a script file (UTF-8).

    Raises:
        ScriptEncodingError: If the file is not valid UTF-8
    """
    data = path.read_bytes()
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        line = data.count(b"\n", 0, e.start) + 1
        column = e.start - data.rfind(b"\n", 0, e.start)
        raise ScriptEncodingError(
            f"Script is not valid UTF-8 (byte 0x{data[e.start]:02x})",
            context=ErrorContext(file=path, line=line, column=column),
        ) from e
    return parse_script(text)


def collect_errors(nodes: Sequence[ir.SyntaxNode]) -> list[ir.ParseErrorNode]:
    """Collect every ParseErrorNode in the tree, depth first."""
    errors: list[ir.ParseErrorNode] = []
    for node in nodes:
        if isinstance(node, ir.ParseErrorNode):
            errors.append(node)
        elif isinstance(node, ir.IfNode):
            errors.extend(collect_errors(node.children))
    return errors
