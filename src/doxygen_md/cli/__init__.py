"""Command-line interface for doxygen-md."""

from .main import main

__all__ = ["main"]
