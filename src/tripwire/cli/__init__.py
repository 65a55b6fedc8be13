"""
tripwire CLI tools.

- instrument: wrap uncovered statements of a Go tree with a sentinel call
- ranges: print the uncovered ranges computed from a coverage profile
"""

from .main import main

__all__ = ["main"]
