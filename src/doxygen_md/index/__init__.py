"""Compound index construction.

Key Components:
    CompoundIndexBuilder: Converts and merges a directory of compound files
    build_compound_index: One-call build, optionally written and re-parsed
"""

from .builder import CompoundIndexBuilder, build_compound_index

__all__ = [
    "CompoundIndexBuilder",
    "build_compound_index",
]
