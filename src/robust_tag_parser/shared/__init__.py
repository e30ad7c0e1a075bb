"""Shared utilities for robust tag extraction.

This module provides shared data structures, configuration objects, result
types and logging helpers used by every layer of the parser.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    DiagnosticsConfig,
    ExtractionConfig,
    OutputConfig,
    ParserConfig,
)
from .logging import (
    CorrelationLogger,
    configure_logging,
    get_logger,
)
from .result import (
    DiagnosticEntry,
    ErrorKind,
    ExtractedRecord,
    RecordStatus,
    records_to_dicts,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "DiagnosticsConfig",
    "ExtractionConfig",
    "OutputConfig",
    "ParserConfig",
    "CorrelationLogger",
    "configure_logging",
    "get_logger",
    "DiagnosticEntry",
    "ErrorKind",
    "ExtractedRecord",
    "RecordStatus",
    "records_to_dicts",
]
