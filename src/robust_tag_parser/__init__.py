"""Robust Tag Parser.

Extracts the content of caller-specified tags from arbitrary, possibly
malformed markup in a single linear pass, without building a DOM. Mismatched,
overlapping and missing closing tags are recovered from and reported, never
raised.

Progressive API Disclosure:
- Level 1: Simple functions - parse(), parse_file()
- Level 2: Configured parser - TagParser class with ParserConfig
- Level 3: Custom diagnostic sinks - DiagnosticSink protocol
"""

__version__ = "0.1.0"
__author__ = "Robust Tag Parser Team"

# Level 1 and Level 2
from .api import TagParser, parse, parse_file

# Level 3
from .extraction import DiagnosticSink, DisplaySink, StoreSink

# Configuration and result objects
from .shared.config import ParserConfig
from .shared.result import DiagnosticEntry, ErrorKind, ExtractedRecord, RecordStatus

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple parsing functions
    "parse",
    "parse_file",

    # Level 2: Configured parser
    "TagParser",
    "ParserConfig",

    # Level 3: Diagnostic sinks
    "DiagnosticSink",
    "DisplaySink",
    "StoreSink",

    # Result objects
    "DiagnosticEntry",
    "ErrorKind",
    "ExtractedRecord",
    "RecordStatus",
]
