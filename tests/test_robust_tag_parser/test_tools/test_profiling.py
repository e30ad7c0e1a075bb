"""Tests for performance profiling tools."""

import json
from unittest.mock import Mock, patch

from robust_tag_parser.api import TagParser
from robust_tag_parser.tools import PerformanceProfiler, PerformanceReport, ProfilingSession


class TestProfilingSession:
    """Tests for ProfilingSession."""

    def test_derived_metrics(self):
        """Test duration, throughput and memory delta."""
        session = ProfilingSession(
            session_id="s",
            start_time=0.0,
            end_time=2.0,
            input_size=2 * 1024 * 1024,
            memory_start=1000,
            memory_end=1500,
        )

        assert session.total_duration_ms == 2000
        assert session.throughput_mb_per_s == 1.0
        assert session.memory_delta == 500

    def test_zero_duration_throughput(self):
        """Test an instantaneous session reports zero throughput."""
        session = ProfilingSession("s", start_time=1.0, end_time=1.0, input_size=10)
        assert session.throughput_mb_per_s == 0.0

    def test_record_results(self):
        """Test record counting from a parse."""
        records = TagParser(display_errors=False).parse("<p>a</p></p><p>b", "p")
        session = ProfilingSession("s", 0.0, 1.0, 0)

        session.record_results(records)

        assert session.record_count == 3
        assert session.malformed_count == 2
        assert session.to_dict()["malformed_count"] == 2


class TestPerformanceProfiler:
    """Tests for PerformanceProfiler."""

    @patch("robust_tag_parser.tools.profiling.psutil.Process")
    def test_memory_tracking(self, mock_process):
        """Test resident memory is sampled at start and end."""
        mock_process.return_value.memory_info.side_effect = [
            Mock(rss=1000),
            Mock(rss=1500),
        ]
        profiler = PerformanceProfiler()

        with profiler.profile_parsing("page", input_size=10) as session:
            pass

        assert session.memory_delta == 500
        assert profiler.sessions == [session]
        assert profiler.current_session is None

    def test_memory_tracking_disabled(self):
        """Test no memory is sampled when tracking is off."""
        profiler = PerformanceProfiler(enable_memory_tracking=False)

        with profiler.profile_parsing("page") as session:
            pass

        assert session.memory_start == 0
        assert session.memory_end == 0

    def test_profile_real_parse(self):
        """Test profiling a complete extraction run."""
        profiler = PerformanceProfiler(enable_memory_tracking=False)
        text = "<li>x</li>" * 100
        parser = TagParser(display_errors=False)

        with profiler.profile_parsing("list", input_size=len(text)) as session:
            session.record_results(parser.parse(text, "li"))

        report = profiler.generate_report()
        assert report.session_count == 1
        assert report.sessions[0].record_count == 100
        assert report.sessions[0].end_time >= report.sessions[0].start_time

    def test_empty_report(self):
        """Test averages over no sessions are zero."""
        report = PerformanceReport(sessions=[], generation_time=0.0)
        assert report.average_duration_ms == 0.0
        assert report.average_throughput_mb_per_s == 0.0

    def test_report_averages(self):
        """Test averages over several sessions."""
        report = PerformanceReport(
            sessions=[
                ProfilingSession("a", 0.0, 1.0, 1024 * 1024),
                ProfilingSession("b", 0.0, 3.0, 3 * 1024 * 1024),
            ],
            generation_time=0.0,
        )
        assert report.average_duration_ms == 2000
        assert report.average_throughput_mb_per_s == 1.0

    def test_save_report(self, tmp_path):
        """Test the JSON report file."""
        profiler = PerformanceProfiler(enable_memory_tracking=False)
        with profiler.profile_parsing("page", input_size=5):
            pass
        output = tmp_path / "report.json"

        profiler.save_report(profiler.generate_report(), output)

        data = json.loads(output.read_text())
        assert data["summary"]["session_count"] == 1
        assert data["sessions"][0]["session_id"] == "page"

    def test_clear_sessions(self):
        """Test clearing removes recorded sessions."""
        profiler = PerformanceProfiler(enable_memory_tracking=False)
        with profiler.profile_parsing("page"):
            pass

        profiler.clear_sessions()

        assert profiler.sessions == []
        assert profiler.generate_report().session_count == 0
