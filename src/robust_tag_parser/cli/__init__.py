"""Command-line interface module for Robust Tag Parser.

Provides the ``robust-tags`` tool for extracting tag content from files,
listing tag tokens and profiling extraction runs.
"""

from .main import main

__all__ = ["main"]
