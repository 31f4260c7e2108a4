"""Tests for the block parser."""

from pathlib import Path

import pytest

from petscript.core import ir
from petscript.core.errors import ScriptEncodingError
from petscript.core.parser import (
    action_args,
    action_kind,
    collect_errors,
    parse_file,
    parse_lines,
    parse_script,
)


class TestActionKind:
    def test_prefixes_and_keywords(self) -> None:
        assert action_kind("ability(595)") == ir.ActionKind.ABILITY
        assert action_kind("use(595)") == ir.ActionKind.ABILITY
        assert action_kind("change(#2)") == ir.ActionKind.CHANGE
        assert action_kind("quit") == ir.ActionKind.QUIT
        assert action_kind("standby") == ir.ActionKind.STANDBY
        assert action_kind("catch") == ir.ActionKind.CATCH
        assert action_kind("test(hello)") == ir.ActionKind.TEST

    def test_keywords_must_match_exactly(self) -> None:
        assert action_kind("standby now") == ir.ActionKind.UNKNOWN
        assert action_kind("Quit") == ir.ActionKind.UNKNOWN

    def test_args(self) -> None:
        assert action_args("ability(Moonfire:595)") == "Moonfire:595"
        assert action_args("standby") is None
        assert action_args("ability()") is None


class TestSampleScript:
    def test_structure(self, sample_script: str) -> None:
        nodes = parse_script(sample_script)
        assert len(nodes) == 2

        block, tail = nodes
        assert isinstance(block, ir.IfNode)
        assert block.source_line == 1
        assert block.end_line == 5
        assert block.is_closed
        assert [c.action_kind for c in block.children] == [
            ir.ActionKind.ABILITY,
            ir.ActionKind.ABILITY,
            ir.ActionKind.STANDBY,
        ]

        (predicate,) = block.condition.predicates
        assert predicate.selector == ir.GlobalSelector(subject=ir.GlobalSubject.WEATHER)
        assert predicate.operator == ir.Operator.NOT_EQUALS
        assert predicate.value == "Moonlight"

        assert isinstance(tail, ir.ActionNode)
        assert tail.raw_action == "ability(#1)"
        assert tail.args == "#1"
        assert tail.source_line == 6

    def test_idempotent(self, sample_script: str) -> None:
        assert parse_script(sample_script) == parse_script(sample_script)

    def test_json_dump_reloads(self, sample_script: str) -> None:
        nodes = parse_script(sample_script)
        dumped = ir.SyntaxTree.dump_json(nodes)
        assert ir.SyntaxTree.validate_json(dumped) == nodes


class TestBlocks:
    def test_nested_if(self) -> None:
        nodes = parse_script("if [self.dead]\n  if [round=1]\n    standby\n  endif\n  quit\nendif")
        (outer,) = nodes
        assert isinstance(outer, ir.IfNode)
        assert outer.end_line == 6
        inner, quit_node = outer.children
        assert isinstance(inner, ir.IfNode)
        assert inner.indent == 2
        assert inner.end_line == 4
        assert quit_node.action_kind == ir.ActionKind.QUIT

    def test_endif_matching_ignores_indentation(self) -> None:
        nodes = parse_script("if [self.dead]\n    standby\nendif\n        quit")
        assert len(nodes) == 2

    def test_separator_and_comments(self) -> None:
        nodes = parse_lines(["# header", "", "--", "standby"])
        assert isinstance(nodes[0], ir.SeparatorNode)
        assert isinstance(nodes[1], ir.ActionNode)
        assert nodes[1].source_line == 4

    def test_inline_condition(self) -> None:
        (node,) = parse_script("change(#2) [self.dead]")
        assert isinstance(node, ir.ActionNode)
        assert node.condition_raw == "self.dead"
        assert node.condition is not None
        assert node.condition.predicates[0].is_boolean

    def test_stray_endif_ignored(self) -> None:
        nodes = parse_script("endif\nstandby")
        assert len(nodes) == 1
        assert nodes[0].action_kind == ir.ActionKind.STANDBY

    def test_empty_script(self) -> None:
        assert parse_script("") == []


class TestStructuralErrors:
    def test_unterminated_if(self) -> None:
        nodes = parse_script("if [round=1]\nability(#1)\nstandby")
        block, error = nodes
        assert isinstance(block, ir.IfNode)
        assert not block.is_closed
        assert len(block.children) == 2
        assert isinstance(error, ir.ParseErrorNode)
        assert error.source_line == 1
        assert "Unterminated" in error.message

    def test_malformed_if_continues(self) -> None:
        nodes = parse_script("if round=1\nstandby\nendif\nquit")
        error, standby, quit_node = nodes
        assert isinstance(error, ir.ParseErrorNode)
        assert error.message == "Invalid if statement"
        assert error.source_line == 1
        assert standby.action_kind == ir.ActionKind.STANDBY
        assert quit_node.action_kind == ir.ActionKind.QUIT

    def test_collect_errors_descends(self) -> None:
        nodes = parse_script("if [self.dead]\nif broken\nendif\nif [round=2]")
        errors = collect_errors(nodes)
        assert [e.source_line for e in errors] == [2, 4]


class TestParseFile:
    def test_reads_utf8(self, tmp_path: Path) -> None:
        script = tmp_path / "script.txt"
        script.write_text("ability(Überschall:12)\n", encoding="utf-8")
        (node,) = parse_file(script)
        assert node.args == "Überschall:12"

    def test_invalid_utf8_points_at_byte(self, tmp_path: Path) -> None:
        script = tmp_path / "script.txt"
        script.write_bytes(b"standby\n  ability(\xff)\n")
        with pytest.raises(ScriptEncodingError, match="not valid UTF-8") as exc_info:
            parse_file(script)
        context = exc_info.value.context
        assert context is not None
        assert (context.line, context.column) == (2, 11)
        assert str(exc_info.value).startswith(f"{script}:2:11\n")
