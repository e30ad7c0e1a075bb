"""Stack-based tag extraction engine.

Scans the input once from left to right. Requested opening tags are pushed
onto an open-tag stack together with a pending result record; closing tags
are matched against the nearest open entry of the same name and backpatch
the records they close. Whatever is still open at the end of the input is
reported as missing its closing tag.

All mutable state of a run lives in a ``ParserRunState`` created per call,
so one engine can serve any number of independent runs.
"""

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional

from robust_tag_parser.shared import (
    DiagnosticEntry,
    ErrorKind,
    ExtractedRecord,
    ExtractionConfig,
    RecordStatus,
    get_logger,
)
from robust_tag_parser.tokenization import TagToken, find_tag_start, scan_tag

from .sinks import DiagnosticSink
from .stack import OpenTagEntry, OpenTagStack


@dataclass
class ParserRunState:
    """State of one extraction run."""

    text: str
    requested: FrozenSet[str]
    sink: DiagnosticSink
    cursor: int = 0
    stack: OpenTagStack = field(default_factory=OpenTagStack)
    results: List[ExtractedRecord] = field(default_factory=list)
    tags_seen: int = 0
    anomalies: int = 0

    @property
    def exhausted(self) -> bool:
        return self.cursor >= len(self.text)


class TagExtractionEngine:
    """Runs the extraction state machine over a complete input text."""

    def __init__(
        self,
        config: Optional[ExtractionConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize the engine.

        Args:
            config: Marker values written into result records
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or ExtractionConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "extraction_engine")

    def run(
        self,
        text: str,
        requested: FrozenSet[str],
        sink: DiagnosticSink
    ) -> List[ExtractedRecord]:
        """Extract every requested tag occurrence from ``text``.

        Args:
            text: Complete input text
            requested: Names of the tags to extract (case-sensitive)
            sink: Receives one diagnostic per structure anomaly

        Returns:
            Result records in opening-tag order, interleaved with MALFORMED
            records at their point of detection
        """
        state = ParserRunState(text=text, requested=requested, sink=sink)

        if self.logger.is_enabled_for(logging.DEBUG):
            self.logger.debug(
                "Starting tag extraction",
                extra={"content_length": len(text), "requested": sorted(requested)}
            )

        while not state.exhausted:
            start = find_tag_start(text, state.cursor)
            if start == -1:
                break

            token = scan_tag(text, start)
            if token is None:
                state.cursor = start + 1
                continue

            state.tags_seen += 1
            if token.is_closing:
                self._handle_closing_tag(state, token)
            elif token.name in requested:
                self._handle_opening_tag(state, token)
            state.cursor = token.content_start

        self._resolve_unclosed(state)

        if self.logger.is_enabled_for(logging.DEBUG):
            self.logger.debug(
                "Tag extraction completed",
                extra={
                    "tags_seen": state.tags_seen,
                    "record_count": len(state.results),
                    "anomalies": state.anomalies,
                }
            )
        return state.results

    def _handle_opening_tag(self, state: ParserRunState, token: TagToken) -> None:
        state.stack.push(OpenTagEntry(
            name=token.name,
            content_start=token.content_start,
            result_index=len(state.results),
        ))
        state.results.append(ExtractedRecord(
            tag=token.name,
            content=self.config.pending_content,
            status=RecordStatus.PENDING,
        ))

    def _handle_closing_tag(self, state: ParserRunState, token: TagToken) -> None:
        depth = state.stack.find_nearest(token.name)
        if depth == -1:
            if token.name in state.requested:
                self._report_unexpected_close(state, token)
            return

        # Every entry closed in one batch ends where this closing tag starts.
        for entry in state.stack.pop_from(depth):
            content = state.text[entry.content_start:token.start_offset]
            state.results[entry.result_index].backpatch(content)

    def _report_unexpected_close(self, state: ParserRunState, token: TagToken) -> None:
        message = f"Unexpected closing tag </{token.name}> at position {token.start_offset}"
        state.results.append(ExtractedRecord(
            tag=self.config.malformed_tag,
            content=message,
            status=RecordStatus.MALFORMED,
        ))
        self._emit(state, DiagnosticEntry(
            kind=ErrorKind.UNEXPECTED_CLOSING_TAG,
            message=message,
            tag=token.name,
            position=token.start_offset,
            correlation_id=self.correlation_id,
        ))

    def _resolve_unclosed(self, state: ParserRunState) -> None:
        """Mark every entry left on the stack as missing its closing tag."""
        while state.stack:
            entry = state.stack.pop()
            # The most recent pending record with this name is the entry's own.
            record = state.results[entry.result_index]
            record.mark_missing_close(self.config.missing_close_content)
            self._emit(state, DiagnosticEntry(
                kind=ErrorKind.MISSING_CLOSING_TAG,
                message=f"{self.config.missing_close_content} for tag '{entry.name}'",
                tag=entry.name,
                position=entry.content_start,
                correlation_id=self.correlation_id,
            ))

    def _emit(self, state: ParserRunState, entry: DiagnosticEntry) -> None:
        state.anomalies += 1
        self.logger.debug(
            entry.message,
            extra={"kind": entry.kind.name, "tag": entry.tag, "position": entry.position}
        )
        state.sink.record(entry)
