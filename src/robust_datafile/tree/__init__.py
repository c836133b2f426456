"""Tree layer: the Node model and the recursive-descent builder.

Key Components:
    Node: Ordered values plus ordered, auto-created named children
    DatafileTreeBuilder: Builds a Node tree from lines, never failing
    ParseResult: Populated root plus diagnostics and metrics
"""

from .builder import DatafileTreeBuilder, ParseResult
from .node import PATH_SEPARATOR, Node

__all__ = [
    "DatafileTreeBuilder",
    "Node",
    "PATH_SEPARATOR",
    "ParseResult",
]
