"""Serialization of Node trees to canonical datafile text."""

from .writer import ASSIGNMENT_SEPARATOR, DatafileWriter, serialize

__all__ = [
    "ASSIGNMENT_SEPARATOR",
    "DatafileWriter",
    "serialize",
]
