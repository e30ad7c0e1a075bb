"""Performance profiling tools for Robust Tag Parser.

Measures wall time, resident memory and throughput of extraction runs so
that parsing large real-world pages can be tracked over time.
"""

import json
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import psutil

from robust_tag_parser.shared import ExtractedRecord, get_logger


@dataclass
class ProfilingSession:
    """Measurements for one profiled extraction run."""

    session_id: str
    start_time: float
    end_time: float
    input_size: int  # characters
    memory_start: int = 0  # bytes
    memory_end: int = 0  # bytes
    record_count: int = 0
    malformed_count: int = 0
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def total_duration_ms(self) -> float:
        """Total session duration in milliseconds."""
        return (self.end_time - self.start_time) * 1000

    @property
    def memory_delta(self) -> int:
        """Resident memory change in bytes."""
        return self.memory_end - self.memory_start

    @property
    def throughput_mb_per_s(self) -> float:
        """Processing throughput in MB/s."""
        duration_s = self.end_time - self.start_time
        if duration_s <= 0:
            return 0.0
        return (self.input_size / (1024 * 1024)) / duration_s

    def record_results(self, records: List[ExtractedRecord]) -> None:
        """Store record counts from the profiled run."""
        self.record_count = len(records)
        self.malformed_count = sum(1 for record in records if record.is_malformed)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "input_size": self.input_size,
            "total_duration_ms": self.total_duration_ms,
            "throughput_mb_s": self.throughput_mb_per_s,
            "memory_delta": self.memory_delta,
            "record_count": self.record_count,
            "malformed_count": self.malformed_count,
            "metadata": self.metadata,
        }


@dataclass
class PerformanceReport:
    """Summary over several profiling sessions."""

    sessions: List[ProfilingSession]
    generation_time: float

    @property
    def session_count(self) -> int:
        return len(self.sessions)

    @property
    def average_duration_ms(self) -> float:
        if not self.sessions:
            return 0.0
        return sum(s.total_duration_ms for s in self.sessions) / len(self.sessions)

    @property
    def average_throughput_mb_per_s(self) -> float:
        if not self.sessions:
            return 0.0
        return sum(s.throughput_mb_per_s for s in self.sessions) / len(self.sessions)


class PerformanceProfiler:
    """Profiler for tag extraction runs.

    Examples:
        >>> profiler = PerformanceProfiler()
        >>> with profiler.profile_parsing("page", input_size=len(html)) as session:
        ...     session.record_results(parser.parse(html, ["div"]))
        >>> report = profiler.generate_report()
    """

    def __init__(self, enable_memory_tracking: bool = True):
        """Initialize performance profiler.

        Args:
            enable_memory_tracking: Whether to sample resident memory
        """
        self.enable_memory_tracking = enable_memory_tracking
        self.sessions: List[ProfilingSession] = []
        self.current_session: Optional[ProfilingSession] = None
        self.logger = get_logger(__name__, None, "performance_profiler")

    def _memory_rss(self) -> int:
        if not self.enable_memory_tracking:
            return 0
        return psutil.Process().memory_info().rss

    def start_session(self, session_id: str, input_size: int = 0) -> ProfilingSession:
        """Start a new profiling session."""
        session = ProfilingSession(
            session_id=session_id,
            start_time=time.time(),
            end_time=0.0,
            input_size=input_size,
            memory_start=self._memory_rss(),
        )
        self.current_session = session
        self.logger.info(
            "Started profiling session",
            extra={"session_id": session_id, "input_size": input_size}
        )
        return session

    def end_session(self, session: ProfilingSession) -> None:
        """End a profiling session and store results."""
        session.end_time = time.time()
        session.memory_end = self._memory_rss()
        self.sessions.append(session)

        if self.current_session is session:
            self.current_session = None

        self.logger.info(
            "Ended profiling session",
            extra={
                "session_id": session.session_id,
                "duration_ms": session.total_duration_ms,
                "throughput_mb_s": session.throughput_mb_per_s,
                "memory_delta": session.memory_delta,
            }
        )

    def profile_parsing(self, session_id: str, input_size: int = 0) -> "ParsingProfiler":
        """Context manager profiling one complete extraction run."""
        return ParsingProfiler(self, session_id, input_size)

    def generate_report(self) -> PerformanceReport:
        return PerformanceReport(sessions=self.sessions.copy(), generation_time=time.time())

    def save_report(self, report: PerformanceReport, output_path: Path) -> None:
        """Save performance report to a JSON file."""
        report_data = {
            "generation_time": report.generation_time,
            "summary": {
                "session_count": report.session_count,
                "average_duration_ms": report.average_duration_ms,
                "average_throughput_mb_s": report.average_throughput_mb_per_s,
            },
            "sessions": [session.to_dict() for session in report.sessions],
        }
        output_path.write_text(json.dumps(report_data, indent=2))
        self.logger.info(
            "Saved performance report",
            extra={"output_path": str(output_path), "session_count": report.session_count}
        )

    def clear_sessions(self) -> None:
        self.sessions.clear()
        self.current_session = None


class ParsingProfiler:
    """Context manager for profiling complete extraction runs."""

    def __init__(self, profiler: PerformanceProfiler, session_id: str, input_size: int):
        self.profiler = profiler
        self.session_id = session_id
        self.input_size = input_size
        self.session: Optional[ProfilingSession] = None

    def __enter__(self) -> ProfilingSession:
        self.session = self.profiler.start_session(self.session_id, self.input_size)
        return self.session

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.session:
            self.profiler.end_session(self.session)
