"""Robust Datafile.

Reader and writer for a small, human-editable hierarchical text format. A
document is a tree of named nodes; each node holds an ordered list of values
and ordered, named children. Reading never fails on malformed content:
irregular lines degrade to defaults and are reported as diagnostics.

Progressive API Disclosure:
- Level 1: Simple functions - load(), loads(), dump(), dumps()
- Level 2: Diagnostics - parse(), parse_file(), load_into()
- Level 3: Configured processor - DatafileProcessor class
"""

__version__ = "0.1.0"
__author__ = "Robust Datafile Team"

# Progressive API disclosure - Level 1 and 2: Simple functions
# Progressive API disclosure - Level 3: Configured processor
from .api import (
    DatafileProcessor,
    dump,
    dumps,
    load,
    load_into,
    loads,
    parse,
    parse_file,
)

# Configuration and errors for advanced usage
from .shared.config import DatafileConfig
from .shared.errors import DatafileError, SinkUnwritableError, SourceUnreadableError

# Core result objects for all API levels
from .tree import Node, ParseResult

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple functions
    "load",
    "loads",
    "dump",
    "dumps",

    # Level 2: Results with diagnostics
    "parse",
    "parse_file",
    "load_into",

    # Level 3: Configured processor
    "DatafileProcessor",

    # Data model and results
    "Node",
    "ParseResult",

    # Configuration and errors
    "DatafileConfig",
    "DatafileError",
    "SinkUnwritableError",
    "SourceUnreadableError",
]
