"""Tests for the Node tree model."""

import pytest

from robust_datafile.tree import Node


class TestNodeCreation:
    """Test node construction and formatting parameters."""

    def test_defaults(self) -> None:
        """Test default separator and indentation."""
        node = Node()

        assert node.list_separator == ","
        assert node.indentation == "\t"
        assert not node.is_comment
        assert node.value_count() == 0
        assert node.child_count() == 0
        assert not node.is_container

    @pytest.mark.parametrize("separator", ["", ";;", "=", '"', "{", "}", "#", "\n", " "])
    def test_invalid_separator_raises(self, separator: str) -> None:
        """Test that separators with structural meaning are rejected."""
        with pytest.raises(ValueError, match="list_separator"):
            Node(list_separator=separator)

    @pytest.mark.parametrize("indentation", ["x", " a ", "\n"])
    def test_invalid_indentation_raises(self, indentation: str) -> None:
        """Test that indentation must be whitespace."""
        with pytest.raises(ValueError, match="indentation"):
            Node(indentation=indentation)

    def test_empty_indentation_allowed(self) -> None:
        """Test that an empty indentation unit is allowed."""
        assert Node(indentation="").indentation == ""

    def test_nodes_compare_by_identity(self) -> None:
        """Test that two empty nodes are distinct objects."""
        assert Node() != Node()


class TestChildren:
    """Test child lookup and creation."""

    def test_lookup_creates_missing_child(self) -> None:
        """Test that looking up a missing name creates it."""
        root = Node()

        child = root.get_or_create_child("player")

        assert root.has_child("player")
        assert root.child_count() == 1
        assert isinstance(child, Node)

    def test_repeated_lookup_returns_same_instance(self) -> None:
        """Test that no duplicate entry is created for a repeated name."""
        root = Node()

        first = root.get_or_create_child("a")
        second = root.get_or_create_child("a")

        assert first is second
        assert root.child_count() == 1

    def test_subscript_and_contains(self) -> None:
        """Test the mapping-style shortcuts."""
        root = Node()

        assert "a" not in root
        child = root["a"]

        assert "a" in root
        assert root["a"] is child

    def test_has_child_does_not_create(self) -> None:
        """Test that has_child is a pure lookup."""
        root = Node()

        assert not root.has_child("missing")
        assert root.child_count() == 0

    def test_insertion_order_is_preserved(self) -> None:
        """Test that children keep creation order."""
        root = Node()
        for name in ["zeta", "alpha", "mid"]:
            root[name]
        root["alpha"]

        assert root.child_names() == ["zeta", "alpha", "mid"]
        assert list(root) == ["zeta", "alpha", "mid"]
        assert [name for name, _ in root.children()] == ["zeta", "alpha", "mid"]

    def test_children_inherit_formatting(self) -> None:
        """Test that new children copy the parent's separator and indentation."""
        root = Node(list_separator=";", indentation="  ")

        grandchild = root["a"]["b"]

        assert grandchild.list_separator == ";"
        assert grandchild.indentation == "  "

    def test_formatting_changes_do_not_propagate(self) -> None:
        """Test that existing descendants keep the formatting they were created with."""
        root = Node()
        child = root["a"]

        root.list_separator = ";"

        assert child.list_separator == ","
        assert root["b"].list_separator == ";"

    def test_is_container(self) -> None:
        """Test that a node is a container once it has a child."""
        root = Node()
        leaf = root["leaf"]
        leaf.set_text("x")

        assert root.is_container
        assert not leaf.is_container


class TestPaths:
    """Test dotted and indexed path lookup."""

    def test_dotted_path_matches_nested_lookup(self) -> None:
        """Test that a dotted path is nested child lookup."""
        root = Node()

        node = root.get_or_create_path("a.b.c")

        assert node is root["a"]["b"]["c"]

    def test_dotted_path_reuses_existing_nodes(self) -> None:
        """Test that existing segments are not duplicated."""
        root = Node()
        b = root["a"]["b"]

        assert root.get_or_create_path("a.b") is b
        assert root.child_count() == 1
        assert root["a"].child_count() == 1

    def test_single_segment_path(self) -> None:
        """Test that a path without dots is a plain child lookup."""
        root = Node()
        assert root.get_or_create_path("name") is root["name"]

    def test_indexed_path_is_literal(self) -> None:
        """Test that an indexed path only appends [i] to the name."""
        root = Node()

        node = root.get_or_create_indexed_path("item", 2)

        assert root.has_child("item[2]")
        assert not root.has_child("item")
        assert node is root["item[2]"]

    def test_indexed_path_with_dots(self) -> None:
        """Test that the name part of an indexed path may be dotted."""
        root = Node()

        node = root.get_or_create_indexed_path("list.item", 0)

        assert node is root["list"]["item[0]"]


class TestValues:
    """Test value storage and typed accessors."""

    def test_set_and_get_value(self) -> None:
        """Test raw value storage."""
        node = Node()

        node.set_value(0, "Javid")

        assert node.get_value(0) == "Javid"
        assert node.values == ("Javid",)

    def test_write_past_end_fills_with_empty_strings(self) -> None:
        """Test fill-on-write for indices beyond the current length."""
        node = Node()

        node.set_value(5, "x")

        assert node.value_count() == 6
        assert node.values[:5] == ("", "", "", "", "")
        assert node.get_value(5) == "x"

    def test_overwrite_keeps_other_values(self) -> None:
        """Test that overwriting one index leaves the rest unchanged."""
        node = Node()
        for index, value in enumerate(["a", "b", "c"]):
            node.set_value(index, value)

        node.set_value(1, "B")

        assert node.values == ("a", "B", "c")

    def test_out_of_range_read_returns_empty(self) -> None:
        """Test that reads never fail."""
        node = Node()

        assert node.get_value(0) == ""
        assert node.get_value(99) == ""
        assert node.get_value(-1) == ""
        assert node.value_count() == 0

    def test_negative_index_write_raises(self) -> None:
        """Test that writing a negative index is rejected."""
        with pytest.raises(ValueError, match="Value index must be >= 0"):
            Node().set_value(-1, "x")

    def test_non_string_value_raises(self) -> None:
        """Test that raw values must be strings."""
        with pytest.raises(TypeError, match="Value must be a string"):
            Node().set_value(0, 5)  # type: ignore[arg-type]

    def test_typed_accessors(self) -> None:
        """Test text, integer and real accessors."""
        node = Node()

        node.set_text("Javid")
        node.set_integer(24, 1)
        node.set_real(1.88, 2)

        assert node.values == ("Javid", "24", "1.88")
        assert node.get_text() == "Javid"
        assert node.get_integer(1) == 24
        assert node.get_real(2) == 1.88

    def test_typed_reads_degrade_to_defaults(self) -> None:
        """Test that malformed or missing values read as defaults."""
        node = Node()
        node.set_text("not a number")

        assert node.get_integer() == 0
        assert node.get_real() == 0.0
        assert node.get_text(3) == ""
        assert node.get_integer(3) == 0

    def test_cross_type_reads(self) -> None:
        """Test reading reals as integers and comma decimals as reals."""
        node = Node()
        node.set_text("1,5")

        assert node.get_real() == 1.5
        assert node.get_integer() == 1

    def test_integral_real_is_stored_without_fraction(self) -> None:
        """Test that 2.0 is stored as 2."""
        node = Node()
        node.set_real(2.0)
        assert node.get_value() == "2"

    def test_value_count_excludes_descendants(self) -> None:
        """Test that only the node's own values are counted."""
        node = Node()
        node.set_text("a")
        node["child"].set_text("b", 3)

        assert node.value_count() == 1

    def test_values_is_a_snapshot(self) -> None:
        """Test that the values tuple does not expose internal state."""
        node = Node()
        node.set_text("a")
        snapshot = node.values

        node.set_text("b", 1)

        assert snapshot == ("a",)


class TestComments:
    """Test comment children."""

    def test_append_comment(self) -> None:
        """Test that comments are flagged children without values."""
        root = Node()

        comment = root.append_comment("#hello")

        assert comment.is_comment
        assert comment.value_count() == 0
        assert root.child_names() == ["#hello"]

    def test_comments_are_not_deduplicated(self) -> None:
        """Test that identical comments stay separate children."""
        root = Node()

        first = root.append_comment("# same")
        second = root.append_comment("# same")

        assert first is not second
        assert root.child_count() == 2

    def test_comments_are_not_reachable_by_name(self) -> None:
        """Test that lookup by name never returns a comment node."""
        root = Node()
        comment = root.append_comment("#hello")

        assert not root.has_child("#hello")
        looked_up = root["#hello"]
        assert looked_up is not comment
        assert not looked_up.is_comment
        assert root.child_count() == 2

    def test_comment_inherits_formatting(self) -> None:
        """Test that comments are created like any other child."""
        root = Node(list_separator="|")
        assert root.append_comment("# c").list_separator == "|"


class TestTraversal:
    """Test walking and exporting trees."""

    def test_walk_is_depth_first(self) -> None:
        """Test walk order and depths."""
        root = Node()
        root["a"]["x"]
        root.append_comment("# c")
        root["b"]

        visited = [(depth, name) for depth, name, _ in root.walk()]

        assert visited == [(0, "a"), (1, "x"), (0, "# c"), (0, "b")]

    def test_walk_empty(self) -> None:
        """Test walking a node without children."""
        assert list(Node().walk()) == []

    def test_to_dict(self) -> None:
        """Test export to JSON-friendly dictionaries."""
        root = Node()
        root["player"]["name"].set_text("Javid")
        root.append_comment("# end")

        assert root.to_dict() == {
            "values": [],
            "children": [
                {
                    "name": "player",
                    "values": [],
                    "children": [{"name": "name", "values": ["Javid"]}],
                },
                {"name": "# end", "values": [], "comment": True},
            ],
        }
