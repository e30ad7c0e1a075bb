"""Diagnostic sinks for structure errors.

A sink has one job: record a diagnostic. Whether that means writing a line
immediately or buffering it for later is decided by which sink the parser is
given, so the extraction engine never branches on the reporting mode.
"""

import sys
from typing import List, Optional, Protocol, TextIO, runtime_checkable

from robust_tag_parser.shared import DiagnosticEntry, get_logger

DEFAULT_ERROR_PREFIX = "Error: "


@runtime_checkable
class DiagnosticSink(Protocol):
    """Anything that can record a structure diagnostic."""

    def record(self, entry: DiagnosticEntry) -> None:
        ...


def format_diagnostic(entry: DiagnosticEntry, prefix: str = DEFAULT_ERROR_PREFIX) -> str:
    """Render a diagnostic as a single ``Error: ...`` line."""
    return f"{prefix}{entry.message}"


class DisplaySink:
    """Writes each diagnostic to an output stream as soon as it is recorded."""

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        prefix: str = DEFAULT_ERROR_PREFIX,
        stream_name: str = "stderr",
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize display sink.

        Args:
            stream: Destination stream; when omitted, ``sys.<stream_name>`` is
                looked up at write time so later redirection is honoured
            prefix: Text placed before every message
            stream_name: ``"stdout"`` or ``"stderr"``
            correlation_id: Optional correlation ID for request tracking
        """
        self._stream = stream
        self.prefix = prefix
        self.stream_name = stream_name
        self.logger = get_logger(__name__, correlation_id, "display_sink")

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else getattr(sys, self.stream_name)

    def record(self, entry: DiagnosticEntry) -> None:
        self.stream.write(format_diagnostic(entry, self.prefix) + "\n")
        self.logger.debug(
            "Displayed diagnostic",
            extra={"kind": entry.kind.name, "tag": entry.tag, "position": entry.position}
        )


class StoreSink:
    """Buffers diagnostics for post-hoc retrieval."""

    def __init__(self, prefix: str = DEFAULT_ERROR_PREFIX) -> None:
        self.prefix = prefix
        self.entries: List[DiagnosticEntry] = []

    def record(self, entry: DiagnosticEntry) -> None:
        self.entries.append(entry)

    @property
    def messages(self) -> List[str]:
        """Stored diagnostics rendered as ``Error: ...`` lines."""
        return [format_diagnostic(entry, self.prefix) for entry in self.entries]

    def clear(self) -> None:
        self.entries.clear()
