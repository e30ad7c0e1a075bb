"""Result objects and diagnostic types for robust tag extraction.

This module defines the records returned by an extraction run and the
diagnostic entries produced when the markup turns out to be malformed.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional


class RecordStatus(Enum):
    """Lifecycle state of an extracted record."""

    PENDING = auto()        # Opening tag seen, closing boundary not yet known
    COMPLETE = auto()       # Content backpatched from a matching closing tag
    MALFORMED = auto()      # Record describing an unexpected closing tag
    MISSING_CLOSE = auto()  # Opening tag never closed before end of input


class ErrorKind(Enum):
    """Kinds of recoverable structure anomalies."""

    UNEXPECTED_CLOSING_TAG = auto()
    MISSING_CLOSING_TAG = auto()


@dataclass
class ExtractedRecord:
    """Single tag occurrence (or anomaly) found during extraction."""

    tag: str
    content: str
    status: RecordStatus = RecordStatus.COMPLETE

    def __post_init__(self) -> None:
        """Validate record."""
        if not isinstance(self.tag, str):
            raise TypeError("Record tag must be a string")

    @property
    def is_pending(self) -> bool:
        """Check if the record still waits for its closing tag."""
        return self.status is RecordStatus.PENDING

    @property
    def is_malformed(self) -> bool:
        """Check if the record reports an anomaly rather than real content."""
        return self.status in (RecordStatus.MALFORMED, RecordStatus.MISSING_CLOSE)

    def backpatch(self, content: str) -> None:
        """Set the final content of a pending record.

        Raises:
            ValueError: If the record content was already settled
        """
        if not self.is_pending:
            raise ValueError(f"Record for <{self.tag}> is already {self.status.name}")
        self.content = content
        self.status = RecordStatus.COMPLETE

    def mark_missing_close(self, content: str) -> None:
        """Replace pending content with the missing-closing-tag marker."""
        if not self.is_pending:
            raise ValueError(f"Record for <{self.tag}> is already {self.status.name}")
        self.content = content
        self.status = RecordStatus.MISSING_CLOSE

    def to_dict(self) -> Dict[str, str]:
        """Convert record to the public ``{tag, content}`` shape."""
        return {"tag": self.tag, "content": self.content}


@dataclass
class DiagnosticEntry:
    """Single structure diagnostic with context information."""

    kind: ErrorKind
    message: str
    tag: str
    position: Optional[int] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if self.position is not None and self.position < 0:
            raise ValueError("Diagnostic position must be >= 0")

    def to_dict(self) -> Dict[str, Any]:
        """Convert diagnostic to dictionary format."""
        return {
            "kind": self.kind.name,
            "message": self.message,
            "tag": self.tag,
            "position": self.position,
        }


def records_to_dicts(records: List[ExtractedRecord]) -> List[Dict[str, str]]:
    """Convert a result sequence to plain dictionaries."""
    return [record.to_dict() for record in records]
