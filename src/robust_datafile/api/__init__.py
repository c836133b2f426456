"""Public API for reading and writing datafiles."""

from .datafile import (
    DatafileProcessor,
    dump,
    dumps,
    load,
    load_into,
    loads,
    parse,
    parse_file,
)

__all__ = [
    "DatafileProcessor",
    "dump",
    "dumps",
    "load",
    "load_into",
    "loads",
    "parse",
    "parse_file",
]
