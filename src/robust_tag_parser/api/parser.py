"""Core parser API for robust tag extraction.

Progressive disclosure: module-level ``parse()`` and ``parse_file()`` for
one-off calls, and the ``TagParser`` class when the caller wants to choose
how diagnostics are reported or to reuse one configuration.
"""

import time
from pathlib import Path
from typing import Iterable, List, Optional, TextIO, Union

from robust_tag_parser.extraction import (
    DiagnosticSink,
    DisplaySink,
    StoreSink,
    TagExtractionEngine,
)
from robust_tag_parser.shared import (
    ExtractedRecord,
    ParserConfig,
    get_logger,
)

TagNames = Union[str, Iterable[str]]

MS_PER_SECOND = 1000


def normalize_tag_names(tag_names: TagNames) -> frozenset:
    """Turn a single tag name or an iterable of names into a frozenset.

    Raises:
        TypeError: If any name is not a string
    """
    if isinstance(tag_names, str):
        return frozenset([tag_names]) if tag_names else frozenset()

    names = frozenset(tag_names)
    for name in names:
        if not isinstance(name, str):
            raise TypeError(f"Tag names must be strings, got {type(name).__name__}")
    return names


class TagParser:
    """Extracts the content of requested tags from possibly malformed markup.

    Structure errors never abort a parse. They are inserted into the result
    sequence as marker records and reported through a diagnostic sink:
    written immediately in display mode, buffered for ``get_errors()`` in
    store mode.

    Examples:
        >>> parser = TagParser(display_errors=False)
        >>> [r.content for r in parser.parse("<b>x</b><b>y</b>", ["b"])]
        ['x', 'y']
        >>> parser.parse("<b>x</b></b>", "b")[1].tag
        'MALFORMED'
        >>> parser.get_errors()
        ['Error: Unexpected closing tag </b> at position 8']
    """

    def __init__(
        self,
        display_errors: Optional[bool] = None,
        config: Optional[ParserConfig] = None,
        sink: Optional[DiagnosticSink] = None,
        stream: Optional[TextIO] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize the parser.

        Args:
            display_errors: True to write diagnostics as they are detected,
                False to store them; defaults to the configuration's setting
            config: Parser configuration (defaults to ``ParserConfig()``)
            sink: Custom diagnostic sink, replacing the display/store sink
            stream: Output stream for display mode (defaults to the
                configured standard stream)
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or ParserConfig()
        if display_errors is None:
            display_errors = self.config.display_errors
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "tag_parser")

        self._display_errors = bool(display_errors)
        self._store: Optional[StoreSink] = None
        diagnostics = self.config.diagnostics
        if sink is not None:
            self.sink = sink
        elif self._display_errors:
            self.sink = DisplaySink(
                stream=stream,
                prefix=diagnostics.error_prefix,
                stream_name=diagnostics.stream,
                correlation_id=correlation_id,
            )
        else:
            self._store = StoreSink(prefix=diagnostics.error_prefix)
            self.sink = self._store

        self.engine = TagExtractionEngine(self.config.extraction, correlation_id)

    def parse(self, text: str, tag_names: TagNames) -> List[ExtractedRecord]:
        """Extract every occurrence of the requested tags.

        Args:
            text: Complete markup text
            tag_names: A tag name or an iterable of tag names, without
                angle brackets; matching is case-sensitive

        Returns:
            Records in opening-tag order, interleaved with MALFORMED records;
            empty when ``text`` or ``tag_names`` is empty. The ``at position
            N`` in unexpected-closing-tag messages is an index into ``text``
            as a Python string (code points, not encoded bytes), so
            ``text[N]`` is the ``<`` of the stray closing tag.

        Raises:
            TypeError: If ``text`` is not a string or a tag name is not a string
        """
        if not isinstance(text, str):
            raise TypeError(f"text must be a string, got {type(text).__name__}")

        requested = normalize_tag_names(tag_names)
        if not text or not requested:
            return []

        start_time = time.time()
        records = self.engine.run(text, requested, self.sink)

        self.logger.info(
            "Tag extraction finished",
            extra={
                "content_length": len(text),
                "record_count": len(records),
                "malformed_count": sum(1 for r in records if r.is_malformed),
                "processing_time_ms": (time.time() - start_time) * MS_PER_SECOND,
            }
        )
        return records

    def get_errors(self) -> List[str]:
        """Return stored diagnostics; always empty in display mode."""
        if self._store is None:
            return []
        return self._store.messages

    def get_display_errors(self) -> bool:
        """Report whether diagnostics are displayed rather than stored."""
        return self._display_errors

    def clear_errors(self) -> None:
        """Discard stored diagnostics."""
        if self._store is not None:
            self._store.clear()


def parse(
    text: str,
    tag_names: TagNames,
    display_errors: bool = False,
    correlation_id: Optional[str] = None
) -> List[ExtractedRecord]:
    """Extract requested tags from a string with a throwaway parser.

    Examples:
        >>> [r.to_dict() for r in parse("<div>Unclosed", ["div"])]
        [{'tag': 'div', 'content': 'MALFORMED - Missing closing tag'}]
    """
    parser = TagParser(display_errors=display_errors, correlation_id=correlation_id)
    return parser.parse(text, tag_names)


def parse_file(
    file_path: Union[str, Path],
    tag_names: TagNames,
    encoding: str = "utf-8",
    parser: Optional[TagParser] = None
) -> List[ExtractedRecord]:
    """Extract requested tags from a text file.

    Undecodable bytes are replaced rather than rejected.

    Args:
        file_path: Path to the markup file
        tag_names: A tag name or an iterable of tag names
        encoding: Text encoding of the file
        parser: Parser to use; a store-mode parser is created when omitted

    Raises:
        OSError: If the file cannot be read
    """
    path_obj = Path(file_path)
    logger = get_logger(__name__, None, "parse_file")
    logger.debug("Reading markup file", extra={"file_path": str(path_obj)})

    text = path_obj.read_text(encoding=encoding, errors="replace")
    if parser is None:
        parser = TagParser(display_errors=False)
    return parser.parse(text, tag_names)
