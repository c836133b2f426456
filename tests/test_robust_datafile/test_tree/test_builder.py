"""Tests for the recursive-descent tree builder.

Covers line dispatch, nesting, irregular input absorption, diagnostics and
metrics.
"""

import sys
from typing import List, Optional

import pytest

from robust_datafile.shared import DatafileConfig, DiagnosticSeverity
from robust_datafile.tree import DatafileTreeBuilder, Node, ParseResult


def build(
    text: str,
    root: Optional[Node] = None,
    config: Optional[DatafileConfig] = None,
) -> ParseResult:
    """Build a tree from newline-separated text."""
    lines: List[str] = text.split("\n") if text else []
    return DatafileTreeBuilder(config=config).build(lines, root=root)


class TestValueLines:
    """Test assignments."""

    def test_single_value(self) -> None:
        """Test a simple key = value line at top level."""
        root = build("name = Javid").root

        assert root["name"].values == ("Javid",)

    def test_multiple_values(self) -> None:
        """Test a list of values."""
        root = build("code = c++, vhdl, lua").root

        assert root["code"].values == ("c++", "vhdl", "lua")

    def test_quoted_value_keeps_separator(self) -> None:
        """Test that a quoted value is read without its quotes."""
        root = build('foo = "bar, baz"').root

        assert root["foo"].values == ("bar, baz",)

    def test_key_and_values_are_trimmed(self) -> None:
        """Test whitespace handling around keys and values."""
        root = build("   spaced key   =   a  ,  b   ").root

        assert root["spaced key"].values == ("a", "b")

    def test_value_containing_equals(self) -> None:
        """Test that only the first = separates key from value."""
        root = build("formula = a=b").root

        assert root["formula"].get_value() == "a=b"

    @pytest.mark.parametrize("line", ["key=", "key =", "  key =   ", "key=\"\""])
    def test_empty_assignment_is_ignored(self, line: str) -> None:
        """Test that an assignment without a value creates nothing."""
        result = build(line)

        assert not result.root.has_child("key")
        assert result.get_diagnostics_by_severity(DiagnosticSeverity.INFO)

    def test_duplicate_key_overwrites_leading_values(self) -> None:
        """Test that a repeated key rewrites indices 0..n-1 and keeps the rest."""
        root = build("k = a, b, c\nk = x").root

        assert root["k"].values == ("x", "b", "c")
        assert root.child_count() == 1

    def test_custom_separator_from_root(self) -> None:
        """Test that the root's separator is used for splitting."""
        root = build("k = a; b, c", root=Node(list_separator=";")).root

        assert root["k"].values == ("a", "b, c")

    def test_custom_separator_from_config(self) -> None:
        """Test that a new root takes its separator from the configuration."""
        config = DatafileConfig().override(format__list_separator="|")
        root = build("k = a | b", config=config).root

        assert root.list_separator == "|"
        assert root["k"].values == ("a", "b")


class TestBlocks:
    """Test headers and nested scopes."""

    def test_nested_block(self) -> None:
        """Test a header followed by a braced block."""
        text = "player\n{\n\tname = Javid\n\tage = 24\n}"
        root = build(text).root

        player = root["player"]
        assert player.child_names() == ["name", "age"]
        assert player["age"].get_integer() == 24

    def test_deep_nesting(self) -> None:
        """Test several levels of nesting."""
        text = "a\n{\nb\n{\nc\n{\nleaf = 1\n}\n}\n}"
        result = build(text)

        assert result.root.get_or_create_path("a.b.c.leaf").get_integer() == 1
        assert result.performance.max_depth == 3

    def test_siblings_after_block(self) -> None:
        """Test that parsing continues in the outer scope after a block closes."""
        text = "a\n{\nx = 1\n}\nb = 2\nc\n{\ny = 3\n}"
        root = build(text).root

        assert root.child_names() == ["a", "b", "c"]
        assert root["b"].get_integer() == 2
        assert root["c"]["y"].get_integer() == 3

    def test_value_after_nested_block_stays_in_parent(self) -> None:
        """Test that lines after an inner block belong to the outer block."""
        text = "outer\n{\ninner\n{\nx = 1\n}\nafter = 2\n}"
        root = build(text).root

        assert root["outer"].child_names() == ["inner", "after"]

    def test_duplicate_headers_merge(self) -> None:
        """Test that a repeated header descends into the existing child."""
        text = "a\n{\nx = 1\n}\na\n{\ny = 2\n}"
        root = build(text).root

        assert root.child_count() == 1
        assert root["a"].child_names() == ["x", "y"]

    def test_missing_open_brace_is_tolerated(self) -> None:
        """Test that the opening brace is optional."""
        root = build("a\nx = 1\n}\nb = 2").root

        assert root["a"]["x"].get_integer() == 1
        assert root["b"].get_integer() == 2

    def test_brace_on_same_line_is_a_header(self) -> None:
        """Test that only a line that is exactly { is an opening brace."""
        root = build("a {\nx = 1\n}").root

        assert root.has_child("a {")
        assert root["a {"]["x"].get_integer() == 1

    def test_empty_block(self) -> None:
        """Test that an empty block creates an empty child."""
        root = build("empty\n{\n}").root

        assert root.has_child("empty")
        assert root["empty"].child_count() == 0
        assert root["empty"].value_count() == 0

    def test_existing_root_content_is_kept(self) -> None:
        """Test that building into a populated root does not clear it."""
        root = Node()
        root["keep"].set_text("me")
        root["k"].set_text("old", 1)

        build("k = new", root=root)

        assert root["keep"].get_text() == "me"
        assert root["k"].values == ("new", "old")

    def test_each_scope_splits_with_its_own_separator(self) -> None:
        """Test that a block is split with the separator of the node it fills."""
        root = Node()
        section = root["section"]
        section.list_separator = ";"

        build("k = x; y\nsection\n{\nk = x; y, z\n}", root=root)

        assert root["k"].values == ("x; y",)
        assert section["k"].values == ("x", "y, z")
        assert section["k"].list_separator == ";"


class TestComments:
    """Test comment lines."""

    def test_comment_becomes_flagged_child(self) -> None:
        """Test that the whole trimmed comment line is the child name."""
        root = build("  #hello world  ").root

        name, child = next(root.children())
        assert name == "#hello world"
        assert child.is_comment
        assert not root.has_child("#hello world")

    def test_comments_keep_their_position(self) -> None:
        """Test that comments are interleaved with other children."""
        root = build("a = 1\n# between\nb = 2\n# between").root

        assert root.child_names() == ["a", "# between", "b", "# between"]

    def test_comment_containing_assignment(self) -> None:
        """Test that comment detection precedes assignment detection."""
        root = build("# a = b").root

        assert not root.has_child("a")
        assert root.child_count() == 1

    def test_comment_inside_block(self) -> None:
        """Test comments in nested scopes."""
        root = build("a\n{\n\t# note\n\tx = 1\n}").root

        assert root["a"].child_names() == ["# note", "x"]


class TestIrregularInput:
    """Test absorption of structural irregularities."""

    def test_empty_input(self) -> None:
        """Test that no lines yield an empty root with an INFO diagnostic."""
        result = build("")

        assert result.success
        assert result.root.child_count() == 0
        assert len(result.get_diagnostics_by_severity(DiagnosticSeverity.INFO)) == 1

    def test_top_level_closing_brace_ends_document(self) -> None:
        """Test that a stray top-level } stops parsing with a warning."""
        result = build("a = 1\n}\nb = 2\nc = 3")

        assert result.root.has_child("a")
        assert not result.root.has_child("b")
        warnings = result.get_diagnostics_by_severity(DiagnosticSeverity.WARNING)
        assert len(warnings) == 1
        assert warnings[0].line_number == 2
        assert warnings[0].details == {"lines_ignored": 2}
        assert result.has_warnings()

    def test_unclosed_block_at_end_of_input(self) -> None:
        """Test that a block left open is closed by the end of input."""
        result = build("a\n{\nb\n{\nx = 1")

        assert result.root["a"]["b"]["x"].get_integer() == 1
        warnings = result.get_diagnostics_by_severity(DiagnosticSeverity.WARNING)
        assert len(warnings) == 1
        assert warnings[0].details == {"open_blocks": 2}

    def test_extra_open_braces_are_ignored(self) -> None:
        """Test that repeated { lines have no effect."""
        root = build("a\n{\n{\nx = 1\n}").root

        assert root["a"]["x"].get_integer() == 1

    def test_windows_line_content_is_trimmed(self) -> None:
        """Test that a stray carriage return does not reach names or values."""
        root = build("a = 1\r\nb\r\n{\r\nc = 2\r\n}\r").root

        assert root["a"].get_value() == "1"
        assert root["b"]["c"].get_value() == "2"

    def test_excessive_nesting_raises_recursion_error(self) -> None:
        """Test the documented nesting limit."""
        depth = sys.getrecursionlimit() + 10
        lines = ["n", "{"] * depth

        with pytest.raises(RecursionError):
            DatafileTreeBuilder().build(lines)


class TestResultAndMetrics:
    """Test ParseResult contents."""

    def test_metrics(self) -> None:
        """Test line, node, value and comment counters."""
        text = "# c\na\n{\nx = 1, 2\ny = 3\n}\na\n{\nx = 4\n}"
        result = build(text)

        performance = result.performance
        assert performance.lines_processed == 10
        assert performance.nodes_created == 3
        assert performance.values_written == 4
        assert performance.comments_created == 1
        assert performance.max_depth == 1
        assert performance.processing_time_ms >= 0.0

    def test_metrics_disabled(self) -> None:
        """Test that metrics stay at defaults when disabled."""
        config = DatafileConfig().override(global___enable_metrics=False)
        result = build("a = 1", config=config)

        assert result.performance.lines_processed == 0

    def test_diagnostics_disabled(self) -> None:
        """Test that diagnostics can be switched off."""
        config = DatafileConfig().override(global___enable_diagnostics=False)
        result = build("a = 1\n}\nb = 2", config=config)

        assert result.diagnostics == []
        assert not result.root.has_child("b")

    def test_correlation_id_is_propagated(self) -> None:
        """Test that diagnostics carry the builder's correlation ID."""
        result = DatafileTreeBuilder(correlation_id="req-1").build(["k="])

        assert result.correlation_id == "req-1"
        assert result.diagnostics[0].correlation_id == "req-1"

    def test_summary(self) -> None:
        """Test the summary dictionary."""
        result = DatafileTreeBuilder().build(["a = 1", "}"], source="inline")

        summary = result.summary()
        assert summary["success"] is True
        assert summary["source"] == "inline"
        assert summary["top_level_children"] == 1
        assert summary["diagnostics_by_severity"] == {"WARNING": 1}
        assert summary["performance"]["lines_processed"] == 2

    def test_has_errors_only_for_error_severity(self) -> None:
        """Test severity helpers."""
        result = ParseResult()
        result.add_diagnostic(DiagnosticSeverity.WARNING, "w", "test")
        assert result.has_warnings()
        assert not result.has_errors()

        result.add_diagnostic(DiagnosticSeverity.ERROR, "e", "test", line_number=4)
        assert result.has_errors()
        assert result.diagnostics[-1].line_number == 4
