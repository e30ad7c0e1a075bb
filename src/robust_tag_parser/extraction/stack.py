"""Open-tag stack used by the extraction engine."""

from dataclasses import dataclass
from typing import Iterator, List, Optional


@dataclass(frozen=True)
class OpenTagEntry:
    """An opening tag that has not been matched by a closing tag yet."""

    name: str
    content_start: int
    result_index: int


class OpenTagStack:
    """LIFO stack of unmatched opening tags.

    Each entry points at the result slot it will backpatch. Slots are handed
    out in increasing order, so no two entries ever share one.
    """

    def __init__(self) -> None:
        self._entries: List[OpenTagEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __iter__(self) -> Iterator[OpenTagEntry]:
        """Iterate from bottom (oldest) to top (most recent)."""
        return iter(self._entries)

    def push(self, entry: OpenTagEntry) -> None:
        if self._entries and entry.result_index <= self._entries[-1].result_index:
            raise ValueError(
                f"Result slot {entry.result_index} is not newer than the stack top"
            )
        self._entries.append(entry)

    def pop(self) -> OpenTagEntry:
        return self._entries.pop()

    def peek(self) -> Optional[OpenTagEntry]:
        return self._entries[-1] if self._entries else None

    def find_nearest(self, name: str) -> int:
        """Return the depth of the top-most entry named ``name``, or -1."""
        for depth in range(len(self._entries) - 1, -1, -1):
            if self._entries[depth].name == name:
                return depth
        return -1

    def pop_from(self, depth: int) -> List[OpenTagEntry]:
        """Remove every entry from ``depth`` to the top.

        Returns:
            The removed entries in popping order (top first)
        """
        if not 0 <= depth < len(self._entries):
            raise IndexError(f"Stack depth {depth} out of range")
        closed = self._entries[depth:]
        del self._entries[depth:]
        closed.reverse()
        return closed
