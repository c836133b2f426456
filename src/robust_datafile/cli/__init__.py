"""Command-line interface for robust-datafile.

Provides the format, get, set, dump and check commands.
"""

from .main import main

__all__ = ["main"]
