"""Tag-token scanner for robust tag extraction.

Recognises opening and closing tags starting at a ``<`` position without
interpreting attributes, comments or any other markup semantics. Anything the
scanner cannot recognise is simply "not a tag"; it is never an error.
"""

from dataclasses import dataclass
from typing import Iterator, Optional

TAG_OPEN = "<"
TAG_CLOSE = ">"
CLOSING_MARKER = "/"
# Comments, doctypes and processing instructions
NON_TAG_MARKERS = frozenset("!?")
NAME_TERMINATORS = frozenset(" \t\r\n" + TAG_CLOSE)


@dataclass(frozen=True)
class TagToken:
    """A recognised tag, as found at one ``<`` position of the input."""

    name: str
    is_closing: bool
    start_offset: int
    end_offset: int

    def __post_init__(self) -> None:
        """Validate offsets."""
        if self.start_offset < 0:
            raise ValueError("start_offset must be >= 0")
        if self.end_offset <= self.start_offset:
            raise ValueError("end_offset must be > start_offset")

    @property
    def content_start(self) -> int:
        """Offset of the first character after the tag's ``>``."""
        return self.end_offset + 1

    def raw(self, text: str) -> str:
        """Return the tag exactly as written in ``text``."""
        return text[self.start_offset:self.end_offset + 1]


def find_tag_start(text: str, cursor: int) -> int:
    """Return the offset of the next ``<`` at or after ``cursor``, or -1."""
    return text.find(TAG_OPEN, cursor)


def scan_tag(text: str, start: int) -> Optional[TagToken]:
    """Classify the ``<`` at ``start``.

    Args:
        text: Full input text
        start: Offset of a ``<`` character

    Returns:
        TagToken for an opening or closing tag, or None when the text at
        ``start`` is not a tag (comment, doctype, processing instruction,
        or a ``<`` with no terminating ``>``)
    """
    length = len(text)
    after_bracket = start + 1
    if after_bracket >= length:
        return None

    marker = text[after_bracket]
    if marker in NON_TAG_MARKERS:
        return None

    is_closing = marker == CLOSING_MARKER
    name_start = after_bracket + 1 if is_closing else after_bracket
    name_end = name_start
    while name_end < length and text[name_end] not in NAME_TERMINATORS:
        name_end += 1

    tag_end = text.find(TAG_CLOSE, name_end)
    if tag_end == -1:
        return None

    return TagToken(
        name=text[name_start:name_end],
        is_closing=is_closing,
        start_offset=start,
        end_offset=tag_end,
    )


def iter_tokens(text: str) -> Iterator[TagToken]:
    """Yield every recognised tag in ``text`` in document order.

    Uses the same cursor movement as the extraction engine: past the ``>``
    of a recognised tag, or one past the ``<`` otherwise.
    """
    cursor = 0
    while cursor < len(text):
        start = find_tag_start(text, cursor)
        if start == -1:
            return
        token = scan_tag(text, start)
        if token is None:
            cursor = start + 1
            continue
        yield token
        cursor = token.content_start
