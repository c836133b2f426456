"""Serialization of Node trees to canonical datafile text.

The writer walks the tree depth first in insertion order. A child without
children becomes a single ``name = v1, v2`` line; a child with children
becomes a block::

    name
    {
    <tab>child = value
    }

Blocks are preceded by a blank line, except at the very start of the output.
Formatting (separator and indentation) comes from the node being written.
"""

import time
from typing import List, Optional

from robust_datafile.shared import DatafileConfig, get_logger
from robust_datafile.tokenization import CLOSE_BRACE, OPEN_BRACE, quote_value
from robust_datafile.tree import Node

ASSIGNMENT_SEPARATOR = " = "


class DatafileWriter:
    """Serializes Node trees into text."""

    def __init__(
        self,
        correlation_id: Optional[str] = None,
        config: Optional[DatafileConfig] = None,
    ) -> None:
        """Initialize writer.

        Args:
            correlation_id: Optional correlation ID for request tracking
            config: Configuration; the writer section selects the line ending
        """
        self.correlation_id = correlation_id
        self.config = config or DatafileConfig()
        self.logger = get_logger(__name__, correlation_id, "datafile_writer")

    def serialize(self, root: Node) -> str:
        """Serialize all children of ``root``.

        The root's own values are not part of the output; only its
        descendants are written.
        """
        start_time = time.perf_counter()
        parts: List[str] = []
        self._write_children(root, 0, root.list_separator, root.indentation, parts)

        text = "".join(parts)
        if text.startswith("\n"):
            text = text[1:]
        line_ending = self.config.writer.line_ending
        if line_ending != "\n":
            text = text.replace("\n", line_ending)

        self.logger.info(
            "Serialization completed",
            extra={
                "character_count": len(text),
                "processing_time_ms": (time.perf_counter() - start_time) * 1000,
            },
        )
        return text

    def _write_children(
        self,
        node: Node,
        depth: int,
        separator: str,
        indentation: str,
        parts: List[str],
    ) -> None:
        prefix = indentation * depth
        for name, child in node.children():
            if not child.is_container:
                parts.append(prefix + name)
                if not child.is_comment:
                    parts.append(ASSIGNMENT_SEPARATOR)
                    parts.append(self._format_values(child, separator))
                parts.append("\n")
                continue

            parts.append(f"\n{prefix}{name}\n{prefix}{OPEN_BRACE}\n")
            self._write_children(child, depth + 1, separator, indentation, parts)
            parts.append(f"{prefix}{CLOSE_BRACE}\n")

    @staticmethod
    def _format_values(node: Node, separator: str) -> str:
        return (separator + " ").join(
            quote_value(value, separator) for value in node.values
        )


def serialize(root: Node, config: Optional[DatafileConfig] = None) -> str:
    """Serialize ``root`` with a one-off writer."""
    return DatafileWriter(config=config).serialize(root)
