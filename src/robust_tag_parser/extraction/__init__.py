"""Extraction engine for robust tag parsing.

Key Components:
    TagExtractionEngine: Single-pass state machine producing result records
    ParserRunState: Per-call cursor, open-tag stack and result sequence
    OpenTagStack: LIFO of unmatched opening tags
    DiagnosticSink: Protocol for recording structure errors
    DisplaySink / StoreSink: Immediate and buffered diagnostic reporting
"""

from .engine import ParserRunState, TagExtractionEngine
from .sinks import (
    DiagnosticSink,
    DisplaySink,
    StoreSink,
    format_diagnostic,
)
from .stack import OpenTagEntry, OpenTagStack

__all__ = [
    "DiagnosticSink",
    "DisplaySink",
    "OpenTagEntry",
    "OpenTagStack",
    "ParserRunState",
    "StoreSink",
    "TagExtractionEngine",
    "format_diagnostic",
]
