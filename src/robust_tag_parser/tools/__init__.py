"""Developer tools for Robust Tag Parser.

Result listings, error-position inspection and performance profiling.
"""

from .debugging import (
    ContextVerdict,
    ErrorContext,
    error_context,
    format_results,
    unexpected_closing_positions,
)
from .profiling import PerformanceProfiler, PerformanceReport, ProfilingSession

__all__ = [
    "ContextVerdict",
    "ErrorContext",
    "PerformanceProfiler",
    "PerformanceReport",
    "ProfilingSession",
    "error_context",
    "format_results",
    "unexpected_closing_positions",
]
