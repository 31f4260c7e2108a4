"""Tests for the line classifier."""

import pytest

from petscript.core.lexer import LineKind, classify_line, indent_level


class TestIndentLevel:
    def test_spaces_count_one(self) -> None:
        assert indent_level("   ability(#1)") == 3

    def test_tab_counts_four(self) -> None:
        assert indent_level("\t\tstandby") == 8

    def test_mixed(self) -> None:
        assert indent_level(" \t x") == 6

    def test_no_indent(self) -> None:
        assert indent_level("quit") == 0


class TestClassifyLine:
    @pytest.mark.parametrize("line", ["", "   ", "# comment", "   # indented comment"])
    def test_skip_lines(self, line: str) -> None:
        assert classify_line(line).kind == LineKind.SKIP

    def test_separator(self) -> None:
        line = classify_line("  --")
        assert line.kind == LineKind.SEPARATOR
        assert line.indent == 2

    def test_endif(self) -> None:
        assert classify_line("endif  ").kind == LineKind.ENDIF

    def test_if_open(self) -> None:
        line = classify_line("if [ enemy.hpp<50 ]")
        assert line.kind == LineKind.IF_OPEN
        assert line.condition_raw == "enemy.hpp<50"
        assert not line.is_malformed_if

    def test_malformed_if(self) -> None:
        line = classify_line("if enemy.hpp<50")
        assert line.kind == LineKind.IF_OPEN
        assert line.condition_raw is None
        assert line.is_malformed_if

    def test_if_without_space_is_action(self) -> None:
        # Only "if " opens a block
        assert classify_line("if[x]").kind == LineKind.ACTION

    def test_plain_action(self) -> None:
        line = classify_line("standby")
        assert line.kind == LineKind.ACTION
        assert line.action == "standby"
        assert line.condition_raw is None

    def test_action_with_inline_condition(self) -> None:
        line = classify_line("    change(#2) [self.dead]")
        assert line.kind == LineKind.ACTION
        assert line.indent == 4
        assert line.action == "change(#2)"
        assert line.condition_raw == "self.dead"

    def test_inline_condition_keeps_inner_brackets(self) -> None:
        line = classify_line("ability(1) [a] [b]")
        assert line.action == "ability(1)"
        assert line.condition_raw == "a] [b"

    def test_trailing_whitespace_ignored(self) -> None:
        line = classify_line("ability(#1) [round=1]   \t")
        assert line.condition_raw == "round=1"
