"""Debugging helpers for inspecting extraction results.

Provides a readable listing of result records and a way to look at the
markup surrounding a reported unexpected closing tag, to judge whether the
report points at a real structure problem.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from robust_tag_parser.shared import ExtractedRecord, RecordStatus

DEFAULT_PREVIEW_LENGTH = 50
DEFAULT_CONTEXT_SIZE = 30
# How far back from the reported position a tag may start
TAG_LOOKBACK = 10

_POSITION_PATTERN = re.compile(r"at position (\d+)")


class ContextVerdict(Enum):
    """Assessment of the markup around a reported position."""

    LIKELY_ERROR = "likely_error"
    POSSIBLE_FALSE_POSITIVE = "possible_false_positive"
    UNDETERMINED = "undetermined"


@dataclass
class ErrorContext:
    """Markup surrounding a reported error position."""

    position: int
    before: str
    at: str
    after: str
    verdict: ContextVerdict
    enclosing_tag: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "position": self.position,
            "before": self.before,
            "at": self.at,
            "after": self.after,
            "verdict": self.verdict.value,
            "enclosing_tag": self.enclosing_tag,
        }

    def describe(self) -> str:
        """Render the context as indented lines."""
        lines = [
            f"  Context around position {self.position}:",
            f"  Before: ...{self.before}",
            f"  At: {self.at}",
            f"  After: {self.after}...",
        ]
        if self.verdict is ContextVerdict.LIKELY_ERROR:
            lines.append(
                f"  Validation: Likely a real error - closing tag '{self.enclosing_tag}' "
                "has no matching opening tag in immediate context."
            )
        elif self.verdict is ContextVerdict.POSSIBLE_FALSE_POSITIVE:
            lines.append(
                f"  Validation: Possible false positive - found tag '{self.enclosing_tag}' "
                "which may not be malformed."
            )
        else:
            lines.append("  Validation: Unable to determine - no clear tag structure near position.")
        return "\n".join(lines)


def error_context(
    text: str,
    position: int,
    context_size: int = DEFAULT_CONTEXT_SIZE
) -> ErrorContext:
    """Capture the text around ``position`` and judge the tag found there.

    Args:
        text: The text that was parsed
        position: Offset reported by an unexpected-closing-tag record
        context_size: Characters to keep on each side of the position

    Raises:
        ValueError: If position lies outside the text
    """
    if not 0 <= position < len(text):
        raise ValueError(f"Position {position} outside text of length {len(text)}")

    start = max(0, position - context_size)
    end = min(len(text), position + context_size)

    verdict = ContextVerdict.UNDETERMINED
    enclosing_tag = None
    tag_start = text.rfind("<", max(0, position - TAG_LOOKBACK), position + 1)
    tag_end = text.find(">", position)
    if tag_start != -1 and tag_end != -1 and ">" not in text[tag_start:position]:
        enclosing_tag = text[tag_start:tag_end + 1]
        if enclosing_tag.startswith("</"):
            verdict = ContextVerdict.LIKELY_ERROR
        else:
            verdict = ContextVerdict.POSSIBLE_FALSE_POSITIVE

    return ErrorContext(
        position=position,
        before=text[start:position],
        at=text[position],
        after=text[position + 1:end],
        verdict=verdict,
        enclosing_tag=enclosing_tag,
    )


def unexpected_closing_positions(records: List[ExtractedRecord]) -> List[int]:
    """Offsets reported by the unexpected-closing-tag records of a result."""
    positions = []
    for record in records:
        if record.status is not RecordStatus.MALFORMED:
            continue
        match = _POSITION_PATTERN.search(record.content)
        if match:
            positions.append(int(match.group(1)))
    return positions


def preview(content: str, preview_length: int = DEFAULT_PREVIEW_LENGTH) -> str:
    """Truncate content for display, marking the cut with an ellipsis."""
    if len(content) > preview_length:
        return content[:preview_length] + "..."
    return content


def format_results(
    records: List[ExtractedRecord],
    preview_length: int = DEFAULT_PREVIEW_LENGTH,
    errors: Optional[List[str]] = None
) -> str:
    """Render records as an indexed listing, optionally followed by stored errors."""
    lines = ["Results:"]
    for index, record in enumerate(records):
        lines.append(
            f"  [{index}] Tag: {record.tag}, Content: {preview(record.content, preview_length)}"
        )
    if errors:
        lines.append("Stored Errors:")
        lines.extend(f"  - {error}" for error in errors)
    return "\n".join(lines)
