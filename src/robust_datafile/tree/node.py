"""Node: the in-memory model of a datafile.

A datafile is a tree of named nodes. Each node holds an ordered list of text
values and an ordered collection of named children. Looking a child up by
name creates it when it does not exist yet, so lookups never fail::

    >>> root = Node()
    >>> root["player"]["name"].set_text("Javid")
    >>> root["player"]["age"].set_integer(24)
    >>> root.get_or_create_path("player.age").get_integer()
    24

Children are owned by their parent only; there is no parent pointer and no
way to share a node between two parents.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional, Tuple, Union

from robust_datafile.lexical import INTEGER, REAL, TEXT
from robust_datafile.shared.config import (
    DEFAULT_INDENTATION,
    DEFAULT_LIST_SEPARATOR,
    validate_indentation,
    validate_list_separator,
)

if TYPE_CHECKING:
    from pathlib import Path

    from robust_datafile.shared.config import DatafileConfig
    from robust_datafile.tree.builder import ParseResult

PATH_SEPARATOR = "."


@dataclass(eq=False)
class Node:
    """A datafile node with ordered values and ordered, named children.

    Attributes:
        list_separator: Character separating values on one line
        indentation: Whitespace emitted once per nesting level
        is_comment: True for nodes created from ``#`` lines
    """

    list_separator: str = DEFAULT_LIST_SEPARATOR
    indentation: str = DEFAULT_INDENTATION
    is_comment: bool = False

    _values: List[str] = field(default_factory=list, init=False, repr=False)
    _children: List[Tuple[str, "Node"]] = field(default_factory=list, init=False, repr=False)
    _index: Dict[str, int] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        """Validate formatting parameters."""
        validate_list_separator(self.list_separator)
        validate_indentation(self.indentation)

    # -- Children ---------------------------------------------------------

    def _spawn(self, is_comment: bool = False) -> "Node":
        return Node(
            list_separator=self.list_separator,
            indentation=self.indentation,
            is_comment=is_comment,
        )

    def get_or_create_child(self, name: str) -> "Node":
        """Return the child called ``name``, creating it if needed.

        Repeated lookups of the same name return the same instance. A new
        child inherits this node's separator and indentation.
        """
        position = self._index.get(name)
        if position is None:
            position = len(self._children)
            self._children.append((name, self._spawn()))
            self._index[name] = position
        return self._children[position][1]

    __getitem__ = get_or_create_child

    def get_or_create_path(self, dotted_name: str) -> "Node":
        """Return the node at a dot-separated path, creating missing nodes.

        ``node.get_or_create_path("a.b.c")`` is the same as
        ``node["a"]["b"]["c"]``.
        """
        node = self
        for segment in dotted_name.split(PATH_SEPARATOR):
            node = node.get_or_create_child(segment)
        return node

    def get_or_create_indexed_path(self, name: str, index: int) -> "Node":
        """Look up ``name[index]`` as a literal path.

        The index is only appended to the name (``"item[2]"``); it does not
        select a value or an element of a list.
        """
        return self.get_or_create_path(f"{name}[{index}]")

    def has_child(self, name: str) -> bool:
        """Check whether a named child exists, without creating it."""
        return name in self._index

    __contains__ = has_child

    def append_comment(self, text: str) -> "Node":
        """Append a comment child named ``text``.

        Comments are never deduplicated and are not reachable by name, so two
        identical comments stay two separate children.
        """
        comment = self._spawn(is_comment=True)
        self._children.append((text, comment))
        return comment

    def children(self) -> Iterator[Tuple[str, "Node"]]:
        """Iterate over ``(name, child)`` pairs in insertion order."""
        return iter(list(self._children))

    def child_names(self) -> List[str]:
        return [name for name, _ in self._children]

    def child_count(self) -> int:
        return len(self._children)

    @property
    def is_container(self) -> bool:
        """True when the node has children and serializes as a block."""
        return bool(self._children)

    def walk(self) -> Iterator[Tuple[int, str, "Node"]]:
        """Yield ``(depth, name, node)`` for all descendants, depth first.

        Direct children have depth 0.
        """
        stack: List[Tuple[int, str, Node]] = [
            (0, name, child) for name, child in reversed(self._children)
        ]
        while stack:
            depth, name, node = stack.pop()
            yield depth, name, node
            stack.extend(
                (depth + 1, child_name, child)
                for child_name, child in reversed(node._children)
            )

    # -- Values -----------------------------------------------------------

    @property
    def values(self) -> Tuple[str, ...]:
        """Snapshot of this node's values."""
        return tuple(self._values)

    def value_count(self) -> int:
        """Number of this node's own values; descendants are not counted."""
        return len(self._values)

    def set_value(self, index: int, text: str) -> None:
        """Store ``text`` at ``index``.

        Writing past the end pads the intermediate positions with empty
        strings.
        """
        if not isinstance(text, str):
            raise TypeError(f"Value must be a string, got {type(text).__name__}")
        if index < 0:
            raise ValueError("Value index must be >= 0")
        if index >= len(self._values):
            self._values.extend([""] * (index + 1 - len(self._values)))
        self._values[index] = text

    def get_value(self, index: int = 0) -> str:
        """Return the value at ``index``, or an empty string if there is none."""
        if 0 <= index < len(self._values):
            return self._values[index]
        return ""

    def set_text(self, value: str, index: int = 0) -> None:
        self.set_value(index, TEXT.serialize(value))

    def get_text(self, index: int = 0) -> str:
        return TEXT.deserialize(self.get_value(index))

    def set_integer(self, value: int, index: int = 0) -> None:
        self.set_value(index, INTEGER.serialize(value))

    def get_integer(self, index: int = 0) -> int:
        """Value at ``index`` as an integer; reals are truncated, junk gives 0."""
        return INTEGER.deserialize(self.get_value(index))

    def set_real(self, value: float, index: int = 0) -> None:
        self.set_value(index, REAL.serialize(value))

    def get_real(self, index: int = 0) -> float:
        """Value at ``index`` as a real; ``1,5`` reads as 1.5, junk gives 0.0."""
        return REAL.deserialize(self.get_value(index))

    # -- Persistence ------------------------------------------------------

    def read(
        self,
        source: Union[str, "Path", bytes, Any],
        config: Optional["DatafileConfig"] = None,
    ) -> "ParseResult":
        """Populate this node from a path, bytes or file-like object.

        Raises:
            SourceUnreadableError: The source could not be read; the node is
                left untouched.
        """
        from robust_datafile.api.datafile import load_into

        return load_into(self, source, config=config)

    def write(
        self,
        destination: Union[str, "Path", Any],
        config: Optional["DatafileConfig"] = None,
    ) -> None:
        """Serialize this node to a path or file-like object.

        Raises:
            SinkUnwritableError: The destination could not be written.
        """
        from robust_datafile.api.datafile import dump

        dump(self, destination, config=config)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the subtree to a JSON-friendly dictionary."""
        result: Dict[str, Any] = {"values": list(self._values)}
        if self.is_comment:
            result["comment"] = True
        if self._children:
            result["children"] = [
                dict(name=name, **child.to_dict()) for name, child in self._children
            ]
        return result

    def __iter__(self) -> Iterator[str]:
        """Iterate over child names, like a mapping."""
        return iter(self.child_names())
