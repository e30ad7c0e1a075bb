"""Tests for diagnostic sinks."""

import io
import sys

from robust_tag_parser.extraction import (
    DiagnosticSink,
    DisplaySink,
    StoreSink,
    format_diagnostic,
)
from robust_tag_parser.shared import DiagnosticEntry, ErrorKind


def _entry(message="Unexpected closing tag </p> at position 3", position=3):
    return DiagnosticEntry(
        kind=ErrorKind.UNEXPECTED_CLOSING_TAG,
        message=message,
        tag="p",
        position=position,
    )


class TestFormatDiagnostic:
    """Tests for diagnostic line rendering."""

    def test_default_prefix(self):
        """Test lines start with 'Error: '."""
        assert format_diagnostic(_entry()) == "Error: Unexpected closing tag </p> at position 3"

    def test_custom_prefix(self):
        """Test a configured prefix replaces the default."""
        assert format_diagnostic(_entry("boom"), prefix="[tag] ") == "[tag] boom"


class TestDisplaySink:
    """Tests for DisplaySink."""

    def test_writes_one_line_per_entry(self):
        """Test each entry is written immediately as its own line."""
        stream = io.StringIO()
        sink = DisplaySink(stream=stream)

        sink.record(_entry())
        assert stream.getvalue() == "Error: Unexpected closing tag </p> at position 3\n"

        sink.record(_entry("second"))
        assert stream.getvalue().splitlines() == [
            "Error: Unexpected closing tag </p> at position 3",
            "Error: second",
        ]

    def test_defaults_to_stderr(self, capsys):
        """Test diagnostics go to standard error when no stream is given."""
        DisplaySink().record(_entry("to stderr"))

        captured = capsys.readouterr()
        assert captured.err == "Error: to stderr\n"
        assert captured.out == ""

    def test_stream_name_stdout(self, capsys):
        """Test the standard stream can be switched to stdout."""
        DisplaySink(stream_name="stdout").record(_entry("to stdout"))

        assert capsys.readouterr().out == "Error: to stdout\n"

    def test_stream_resolved_at_write_time(self, monkeypatch):
        """Test a later redirection of sys.stderr is honoured."""
        sink = DisplaySink()
        replacement = io.StringIO()
        monkeypatch.setattr(sys, "stderr", replacement)

        sink.record(_entry("late"))

        assert replacement.getvalue() == "Error: late\n"


class TestStoreSink:
    """Tests for StoreSink."""

    def test_buffers_entries_in_order(self):
        """Test entries are kept in detection order."""
        sink = StoreSink()
        first, second = _entry("one"), _entry("two")

        sink.record(first)
        sink.record(second)

        assert sink.entries == [first, second]
        assert sink.messages == ["Error: one", "Error: two"]

    def test_clear(self):
        """Test clearing discards buffered entries."""
        sink = StoreSink()
        sink.record(_entry())
        sink.clear()

        assert sink.entries == []
        assert sink.messages == []

    def test_writes_nothing(self, capsys):
        """Test storing never touches the standard streams."""
        StoreSink().record(_entry())

        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""


class TestSinkProtocol:
    """Tests for the DiagnosticSink protocol."""

    def test_builtin_sinks_satisfy_protocol(self):
        """Test both sinks are DiagnosticSink instances."""
        assert isinstance(StoreSink(), DiagnosticSink)
        assert isinstance(DisplaySink(stream=io.StringIO()), DiagnosticSink)

    def test_any_object_with_record_satisfies_protocol(self):
        """Test structural typing accepts user-defined sinks."""
        class ListSink:
            def __init__(self):
                self.seen = []

            def record(self, entry):
                self.seen.append(entry.tag)

        assert isinstance(ListSink(), DiagnosticSink)
        assert not isinstance(object(), DiagnosticSink)
