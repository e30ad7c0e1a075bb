"""Tag tokenization for robust tag extraction.

Key Components:
    TagToken: A recognised opening or closing tag with its offsets
    scan_tag: Classify the ``<`` at a given offset
    find_tag_start: Locate the next ``<`` from a cursor
    iter_tokens: Iterate over every recognised tag in a text
"""

from .scanner import (
    TagToken,
    find_tag_start,
    iter_tokens,
    scan_tag,
)

__all__ = [
    "TagToken",
    "find_tag_start",
    "iter_tokens",
    "scan_tag",
]
